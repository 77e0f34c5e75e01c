"""Runnable demonstrations of progress tracking, pausing, cancelling and observing."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from progressor.ext import observe
from progressor.update import ProgressUpdate, State
from progressor.updater import ProgressStream, ProgressTask, ProgressUpdater, progress

T = TypeVar("T")

DEFAULT_DELAY = 0.05


def _show(update: ProgressUpdate) -> None:
    line = (
        f"\rProgress: {update.completed_fraction() * 100.0:.1f}% "
        f"({update.current}/{update.total})"
    )
    if update.message is not None:
        line += f" - {update.message}"
    print(line, end="", flush=True)


def _report_step(updater: ProgressUpdater, i: int) -> None:
    if i % 10 == 0:
        updater.update_with_message(i, f"Processing step {i}/100")
    else:
        updater.update(i)


async def _monitor(stream: ProgressStream, show_pause: bool) -> None:
    async for update in stream:
        _show(update)
        if update.state is State.PAUSED and show_pause:
            print(" [PAUSED]", end="", flush=True)
        elif update.state is State.COMPLETED:
            print("\n✅ Progress completed!")
            break
        elif update.state is State.CANCELLED:
            print("\n❌ Progress was cancelled!")
            break


async def _await(task: ProgressTask[T]) -> T:
    return await task


async def _race(task: ProgressTask[T], show_pause: bool) -> T | None:
    """Run the task and a monitor of its stream; stop at whichever ends first."""
    runner = asyncio.ensure_future(_await(task))
    monitor = asyncio.ensure_future(_monitor(task.progress(), show_pause))
    try:
        done, _ = await asyncio.wait({runner, monitor}, return_when=asyncio.FIRST_COMPLETED)
        if runner in done:
            result = runner.result()
            print(f"\nTask result: {result}")
            return result
        monitor.result()
        return None
    finally:
        leftovers = [fut for fut in (runner, monitor) if not fut.done()]
        for fut in leftovers:
            fut.cancel()
        if leftovers:
            await asyncio.gather(*leftovers, return_exceptions=True)


async def run_basic(delay: float = DEFAULT_DELAY) -> str | None:
    """Track a simple hundred-step task while monitoring its stream."""
    print("Starting progress tracking example...")

    async def work(updater: ProgressUpdater) -> str:
        for i in range(101):
            await asyncio.sleep(delay)
            _report_step(updater, i)
        return "Task completed successfully!"

    return await _race(progress(100, work), show_pause=False)


async def run_cancellation(delay: float = DEFAULT_DELAY) -> str | None:
    """Track a task that pauses at 30% and cancels itself at 60%."""
    print("Starting cancellation example...")

    async def work(updater: ProgressUpdater) -> str:
        for i in range(101):
            await asyncio.sleep(delay * 2)
            _report_step(updater, i)
            if i == 30:
                print("\n⏸️  Pausing task at 30%...")
                updater.pause()
                await asyncio.sleep(delay * 20)
                print("▶️  Resuming task...")
            if i >= 60:
                print("\n⚠️  Cancelling task...")
                updater.cancel()
                return "Task cancelled by user"
        return "Task completed successfully!"

    return await _race(progress(100, work), show_pause=True)


def _observer(update: ProgressUpdate) -> None:
    _show(update)
    if update.state is State.PAUSED:
        print(" [PAUSED]", end="", flush=True)
    elif update.state is State.COMPLETED:
        print("\n✅ Progress completed!")
    elif update.state is State.CANCELLED:
        print("\n❌ Progress was cancelled!")


async def run_observe(delay: float = DEFAULT_DELAY) -> str:
    """Track a task through observe(), pausing briefly halfway."""
    print("Starting observe extension example...")

    async def work(updater: ProgressUpdater) -> str:
        for i in range(101):
            await asyncio.sleep(delay)
            _report_step(updater, i)
            if i == 50:
                updater.pause()
                print("\n⏸️  Pausing for a moment...")
                await asyncio.sleep(delay * 4)
                updater.update_with_message(i, "Resuming...")
        return "Task completed successfully!"

    result = await observe(progress(100, work), _observer)
    print(f"\nTask result: {result}")
    return result


_EXAMPLES: dict[str, Callable[[float], Awaitable[str | None]]] = {
    "basic": run_basic,
    "cancellation": run_cancellation,
    "observe": run_observe,
}


def main(argv: list[str] | None = None) -> int:
    """Run one of the demonstrations from the command line."""
    parser = argparse.ArgumentParser(prog="progressor", description=__doc__)
    parser.add_argument("example", choices=sorted(_EXAMPLES), help="demonstration to run")
    parser.add_argument(
        "--delay",
        type=float,
        default=DEFAULT_DELAY,
        help="seconds of simulated work per step",
    )
    args = parser.parse_args(argv)
    if args.delay < 0:
        parser.error("--delay must not be negative")
    asyncio.run(_EXAMPLES[args.example](args.delay))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())