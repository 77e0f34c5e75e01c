# progressor

Progress tracking for `asyncio`. You wrap a coroutine function with `progress()`, and
the function receives a `ProgressUpdater` to report how far it has got. Anyone who holds
the returned task can read those reports as an async stream of `ProgressUpdate` values.
You can also pass a callback to `observe`.

The package has no dependencies outside the standard library.

## Reporting progress

```python
import asyncio
from progressor.updater import progress

async def work(updater):
    for i in range(101):
        await asyncio.sleep(0.01)
        if i % 10 == 0:
            updater.update_with_message(i, f"Processing step {i}/100")
        else:
            updater.update(i)
    updater.complete()
    return "done"

task = progress(100, work)   # a ProgressTask; `await task` runs it
```

`progress(total, func)` calls `func(updater)` straight away. The call must return an
awaitable, or `progress()` raises `TypeError`.

The `ProgressUpdater` methods are:

- `update(current)` and `update_with_message(current, message)` set the current value and report the `WORKING` state.
- `pause()` and `pause_with_message(message)` report the `PAUSED` state.
- `set_total(total)` changes the expected total and reports `WORKING`.
- `complete()` reports `COMPLETED`. Only the first call sends a report.
- `close()` finishes the updater. It reports `CANCELLED` unless `complete()` was called, and then it ends every progress stream. Calling it again does nothing.
- `cancel()` is the same as `close()`.

The updater also has the read-only properties `total`, `current` and `closed`, and it
works as a context manager that closes itself on exit. Once the updater is closed, any
further report raises `RuntimeError`.

When the awaited task finishes, it closes its updater, whether it returned normally or
raised. A task that never calls `complete()` therefore ends with a `CANCELLED` update.

## Watching progress

`task.progress()` returns a `ProgressStream`, which is an async iterator. A stream
receives only the updates reported after it was created. It holds up to 32 updates that
have not been read yet, and it drops any further updates until there is room again. The
stream ends when the updater is closed.

```python
async def main():
    task = progress(100, work)
    stream = task.progress()

    async def watch():
        async for update in stream:
            print(f"{update.completed_fraction() * 100:.1f}% {update.message or ''}")

    watcher = asyncio.ensure_future(watch())
    result = await task
    await watcher
    print(result)

asyncio.run(main())
```

You can also let `observe` run the task. It calls the receiver with each update until
the task finishes, and then returns the task's result. Any exception from the task
propagates to the caller.

```python
from progressor.ext import observe

result = await observe(progress(100, work), lambda u: print(u.current, u.total))
```

`observe_local(task, receiver)` behaves the same way.

Both functions accept any implementation of the abstract base class
`progressor.update.Progress`. An implementation needs a `progress()` method that returns
an async iterator of updates, and an `__await__` method.

## Progress updates

`ProgressUpdate` in `progressor.update` is a frozen, orderable dataclass with these
fields:

- `total`
- `current`
- `state`: one of `State.WORKING`, `State.PAUSED`, `State.COMPLETED` or `State.CANCELLED`. The default is `WORKING`.
- `message`: optional, `None` by default.

`total` and `current` must be non-negative integers. A value of the wrong type raises
`TypeError`, and a negative value raises `ValueError`.

The helper methods are:

- `completed_fraction()` returns `current / total`, or `0.0` when `total` is 0.
- `remaining()` returns `total - current`, but never less than 0.
- `is_working()`, `is_paused()`, `is_completed()` and `is_cancelled()` test the state. `State` has the same four methods.

## Demo

The package installs a `progressor-demo` command that runs one of three demonstrations:

```
progressor-demo basic
progressor-demo cancellation
progressor-demo observe
```

- `basic` runs a hundred-step task and prints each update from its stream.
- `cancellation` pauses at step 30 and cancels the task at step 60.
- `observe` prints the updates through `observe` and pauses briefly at step 50.

`--delay SECONDS` sets how long each simulated step takes. The default is 0.05, and the
value must not be negative. The same demonstrations can be called from code as the
coroutines `run_basic`, `run_cancellation` and `run_observe` in `progressor.demo`.