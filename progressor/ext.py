"""Helpers for watching a task's progress while awaiting its result."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any, TypeVar

from progressor.update import Progress, ProgressUpdate

T = TypeVar("T")

Receiver = Callable[[ProgressUpdate], Any]


async def _await(task: Progress[T]) -> T:
    return await task


async def _next_update(stream: AsyncIterator[ProgressUpdate]) -> ProgressUpdate | None:
    try:
        return await stream.__anext__()
    except StopAsyncIteration:
        return None


async def _drive(task: Progress[T], receiver: Receiver) -> T:
    stream = task.progress()
    runner: asyncio.Future[T] = asyncio.ensure_future(_await(task))
    pending: asyncio.Future[ProgressUpdate | None] | None = None
    stream_open = True
    try:
        while True:
            if pending is None and stream_open:
                pending = asyncio.ensure_future(_next_update(stream))
            waiters: set[asyncio.Future[Any]] = {runner}
            if pending is not None:
                waiters.add(pending)
            done, _ = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
            if pending is not None and pending in done:
                update = pending.result()
                pending = None
                if update is None:
                    stream_open = False
                else:
                    receiver(update)
            if runner in done:
                return runner.result()
    finally:
        leftovers = [fut for fut in (runner, pending) if fut is not None and not fut.done()]
        for fut in leftovers:
            fut.cancel()
        if leftovers:
            await asyncio.gather(*leftovers, return_exceptions=True)


async def observe(task: Progress[T], receiver: Receiver) -> T:
    """Await the task, calling receiver with each progress update until it finishes."""
    return await _drive(task, receiver)


async def observe_local(task: Progress[T], receiver: Receiver) -> T:
    """Await the task on the current loop, calling receiver with each update."""
    return await _drive(task, receiver)