"""Reporting progress from inside a task and streaming it to listeners."""

from __future__ import annotations

import asyncio
import inspect
import weakref
from collections import deque
from collections.abc import Awaitable, Callable, Generator
from typing import Any, TypeVar

from progressor.update import Progress, ProgressUpdate, State

T = TypeVar("T")

#: Number of updates a stream buffers before further updates are dropped.
CAPACITY = 32


class ProgressStream:
    """An async iterator over progress updates, ending when the updater is closed."""

    def __init__(self, capacity: int = CAPACITY) -> None:
        self._buffer: deque[ProgressUpdate] = deque()
        self._capacity = capacity
        self._closed = False
        self._ready = asyncio.Event()

    def _offer(self, update: ProgressUpdate) -> bool:
        if self._closed or len(self._buffer) >= self._capacity:
            return False
        self._buffer.append(update)
        self._ready.set()
        return True

    def _close(self) -> None:
        self._closed = True
        self._ready.set()

    def __aiter__(self) -> ProgressStream:
        return self

    async def __anext__(self) -> ProgressUpdate:
        while not self._buffer:
            if self._closed:
                raise StopAsyncIteration
            self._ready.clear()
            await self._ready.wait()
        return self._buffer.popleft()


class _Channel:
    """Fans updates out to every live stream without ever blocking the sender."""

    def __init__(self, capacity: int = CAPACITY) -> None:
        self._capacity = capacity
        self._streams: weakref.WeakSet[ProgressStream] = weakref.WeakSet()
        self.closed = False

    def subscribe(self) -> ProgressStream:
        stream = ProgressStream(self._capacity)
        if self.closed:
            stream._close()
        else:
            self._streams.add(stream)
        return stream

    def send(self, update: ProgressUpdate) -> None:
        for stream in list(self._streams):
            stream._offer(update)

    def close(self) -> None:
        self.closed = True
        for stream in list(self._streams):
            stream._close()
        self._streams.clear()


class ProgressUpdater:
    """Handle through which a running task reports its progress.

    Closing the updater without having called complete() reports cancellation.
    """

    def __init__(self, total: int) -> None:
        ProgressUpdate(total, 0)
        self._total = total
        self._current = 0
        self._completed = False
        self._closed = False
        self._channel = _Channel()

    @property
    def total(self) -> int:
        return self._total

    @property
    def current(self) -> int:
        return self._current

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> ProgressUpdater:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _subscribe(self) -> ProgressStream:
        return self._channel.subscribe()

    def _send(
        self,
        state: State,
        message: str | None = None,
        *,
        total: int | None = None,
        current: int | None = None,
    ) -> None:
        if self._closed:
            raise RuntimeError("progress updater is closed")
        update = ProgressUpdate(
            self._total if total is None else total,
            self._current if current is None else current,
            state,
            None if message is None else str(message),
        )
        self._total = update.total
        self._current = update.current
        self._channel.send(update)

    def update(self, current: int) -> None:
        """Set the current value and report it."""
        self._send(State.WORKING, current=current)

    def update_with_message(self, current: int, message: str) -> None:
        """Set the current value and report it with a message."""
        self._send(State.WORKING, message, current=current)

    def pause(self) -> None:
        """Report that the operation is paused."""
        self._send(State.PAUSED)

    def pause_with_message(self, message: str) -> None:
        """Report that the operation is paused, with a message."""
        self._send(State.PAUSED, message)

    def complete(self) -> None:
        """Report completion; later calls have no effect."""
        if self._closed:
            raise RuntimeError("progress updater is closed")
        if not self._completed:
            self._completed = True
            self._send(State.COMPLETED)

    def set_total(self, total: int) -> None:
        """Change the expected total and report the current progress."""
        self._send(State.WORKING, total=total)

    def cancel(self) -> None:
        """Cancel the operation; the same as close()."""
        self.close()

    def close(self) -> None:
        """Release the updater, reporting cancellation unless completed, and end all streams."""
        if self._closed:
            return
        if not self._completed:
            self._channel.send(ProgressUpdate(self._total, self._current, State.CANCELLED))
        self._closed = True
        self._channel.close()


class ProgressTask(Progress[T]):
    """An awaitable task whose progress can be streamed."""

    def __init__(self, awaitable: Awaitable[T], updater: ProgressUpdater) -> None:
        self._awaitable = awaitable
        self._updater = updater

    def progress(self) -> ProgressStream:
        """Subscribe to the updates this task reports after the call."""
        return self._updater._subscribe()

    async def _run(self) -> T:
        try:
            return await self._awaitable
        finally:
            self._updater.close()

    def __await__(self) -> Generator[Any, None, T]:
        return self._run().__await__()


def progress(total: int, func: Callable[[ProgressUpdater], Awaitable[T]]) -> ProgressTask[T]:
    """Create a progress-tracked task from a function taking a ProgressUpdater."""
    updater = ProgressUpdater(total)
    awaitable = func(updater)
    if not inspect.isawaitable(awaitable):
        updater.close()
        raise TypeError("progress function must return an awaitable")
    return ProgressTask(awaitable, updater)