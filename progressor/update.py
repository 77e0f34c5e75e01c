"""Progress update values, their states, and the progress-reporting interface."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Generator
from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class State(enum.Enum):
    """The state of a progress-tracked operation."""

    WORKING = 1
    COMPLETED = 2
    PAUSED = 3
    CANCELLED = 4

    def is_cancelled(self) -> bool:
        """Return True if the state is CANCELLED."""
        return self is State.CANCELLED

    def is_working(self) -> bool:
        """Return True if the state is WORKING."""
        return self is State.WORKING

    def is_completed(self) -> bool:
        """Return True if the state is COMPLETED."""
        return self is State.COMPLETED

    def is_paused(self) -> bool:
        """Return True if the state is PAUSED."""
        return self is State.PAUSED


def _check_count(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, not {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")


@total_ordering
@dataclass(frozen=True)
class ProgressUpdate:
    """A single snapshot of an operation's progress."""

    total: int
    current: int
    state: State = State.WORKING
    message: str | None = None

    def __post_init__(self) -> None:
        _check_count("total", self.total)
        _check_count("current", self.current)
        if not isinstance(self.state, State):
            raise TypeError("state must be a State")

    def _sort_key(self) -> tuple[int, int, int, bool, str]:
        return (
            self.current,
            self.total,
            self.state.value,
            self.message is not None,
            self.message or "",
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ProgressUpdate):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def completed_fraction(self) -> float:
        """Return current/total, or 0.0 when the total is zero."""
        if self.total == 0:
            return 0.0
        return self.current / self.total

    def remaining(self) -> int:
        """Return total - current, never less than zero."""
        return max(self.total - self.current, 0)

    def is_cancelled(self) -> bool:
        """Return True if the state is CANCELLED."""
        return self.state.is_cancelled()

    def is_working(self) -> bool:
        """Return True if the state is WORKING."""
        return self.state.is_working()

    def is_completed(self) -> bool:
        """Return True if the state is COMPLETED."""
        return self.state.is_completed()

    def is_paused(self) -> bool:
        """Return True if the state is PAUSED."""
        return self.state.is_paused()


class Progress(ABC, Generic[T]):
    """An awaitable operation that can report a stream of progress updates."""

    @abstractmethod
    def progress(self) -> AsyncIterator[ProgressUpdate]:
        """Return an async iterator over this operation's progress updates."""

    @abstractmethod
    def __await__(self) -> Generator[Any, None, T]:
        """Run the operation and return its result."""