import asyncio

import pytest

from progressor.update import Progress, ProgressUpdate, State
from progressor.updater import (
    CAPACITY,
    ProgressStream,
    ProgressTask,
    ProgressUpdater,
    progress,
)


async def _collect(stream):
    return [u async for u in stream]


@pytest.mark.asyncio
async def test_updates_then_cancelled_when_finished_without_complete():
    async def work(updater):
        updater.update(10)
        updater.update_with_message(20, "half")
        return "done"

    task = progress(100, work)
    stream = task.progress()
    result = await task
    updates = await _collect(stream)

    assert result == "done"
    assert [(u.current, u.state, u.message) for u in updates] == [
        (10, State.WORKING, None),
        (20, State.WORKING, "half"),
        (20, State.CANCELLED, None),
    ]
    assert all(u.total == 100 for u in updates)


@pytest.mark.asyncio
async def test_complete_suppresses_cancellation_and_is_reported_once():
    async def work(updater):
        updater.update(100)
        updater.complete()
        updater.complete()
        return "ok"

    task = progress(100, work)
    stream = task.progress()
    assert await task == "ok"
    updates = await _collect(stream)
    assert [u.state for u in updates] == [State.WORKING, State.COMPLETED]
    assert updates[-1] == ProgressUpdate(100, 100, State.COMPLETED)


@pytest.mark.asyncio
async def test_pause_keeps_current_value():
    async def work(updater):
        updater.update(30)
        updater.pause()
        updater.pause_with_message("waiting")
        updater.complete()

    task = progress(100, work)
    stream = task.progress()
    await task
    updates = await _collect(stream)
    assert updates[1] == ProgressUpdate(100, 30, State.PAUSED)
    assert updates[2] == ProgressUpdate(100, 30, State.PAUSED, "waiting")


@pytest.mark.asyncio
async def test_set_total_reports_new_total():
    async def work(updater):
        updater.update(5)
        updater.set_total(200)
        updater.complete()

    task = progress(100, work)
    stream = task.progress()
    await task
    updates = await _collect(stream)
    assert updates[1] == ProgressUpdate(200, 5, State.WORKING)
    assert updates[2].total == 200


@pytest.mark.asyncio
async def test_stream_buffer_is_bounded():
    async def work(updater):
        for i in range(CAPACITY + 8):
            updater.update(i)

    task = progress(CAPACITY + 8, work)
    stream = task.progress()
    await task
    updates = await _collect(stream)
    assert [u.current for u in updates] == list(range(CAPACITY))


@pytest.mark.asyncio
async def test_concurrent_consumer_receives_everything():
    async def work(updater):
        for i in range(5):
            updater.update(i)
            await asyncio.sleep(0)
        updater.complete()
        return "ok"

    task = progress(4, work)
    stream = task.progress()
    result, updates = await asyncio.gather(task, _collect(stream))
    assert result == "ok"
    assert [u.current for u in updates[:-1]] == list(range(5))
    assert updates[-1].is_completed()


@pytest.mark.asyncio
async def test_every_stream_receives_updates():
    async def work(updater):
        updater.update(7)
        updater.complete()

    task = progress(10, work)
    first = task.progress()
    second = task.progress()
    await task
    assert await _collect(first) == await _collect(second)
    assert (await _collect(task.progress())) == []


@pytest.mark.asyncio
async def test_exception_propagates_and_reports_cancellation():
    async def work(updater):
        updater.update(3)
        raise ValueError("boom")

    task = progress(10, work)
    stream = task.progress()
    with pytest.raises(ValueError, match="boom"):
        await task
    updates = await _collect(stream)
    assert updates[-1] == ProgressUpdate(10, 3, State.CANCELLED)


@pytest.mark.asyncio
async def test_cancel_inside_task_ends_stream():
    async def work(updater):
        updater.update(60)
        updater.cancel()
        return "cancelled"

    task = progress(100, work)
    stream = task.progress()
    assert await task == "cancelled"
    updates = await _collect(stream)
    assert [u.state for u in updates] == [State.WORKING, State.CANCELLED]


@pytest.mark.asyncio
async def test_awaiting_twice_fails():
    async def work(updater):
        return 1

    task = progress(1, work)
    assert await task == 1
    with pytest.raises(RuntimeError):
        await task


def test_closed_updater_rejects_updates():
    updater = ProgressUpdater(10)
    updater.close()
    assert updater.closed
    with pytest.raises(RuntimeError):
        updater.update(1)
    with pytest.raises(RuntimeError):
        updater.pause()
    with pytest.raises(RuntimeError):
        updater.complete()


@pytest.mark.asyncio
async def test_close_is_idempotent_and_context_manager_closes():
    with ProgressUpdater(10) as updater:
        stream = updater._subscribe()
        updater.update(4)
    updater.close()
    updates = await _collect(stream)
    assert updates == [
        ProgressUpdate(10, 4, State.WORKING),
        ProgressUpdate(10, 4, State.CANCELLED),
    ]


def test_invalid_values_rejected_without_changing_state():
    updater = ProgressUpdater(10)
    updater.update(4)
    with pytest.raises(ValueError):
        updater.update(-1)
    assert updater.current == 4
    with pytest.raises(ValueError):
        ProgressUpdater(-1)


def test_non_awaitable_function_rejected():
    with pytest.raises(TypeError):
        progress(10, lambda updater: "not awaitable")


@pytest.mark.asyncio
async def test_task_is_progress():
    async def work(updater):
        return "value"

    task = progress(1, work)
    stream = task.progress()
    assert isinstance(task, ProgressTask) and isinstance(task, Progress)
    assert isinstance(stream, ProgressStream)
    assert await task == "value"
    assert await _collect(stream) == [ProgressUpdate(1, 0, State.CANCELLED)]