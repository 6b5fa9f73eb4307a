"""
Barrier Queue Module

An asyncio task queue with two submission modes:

- concurrent: may run alongside other concurrent tasks
- barrier: waits for everything submitted before it, and everything
  submitted after it waits for the barrier

This is the multiple-readers/single-writer pattern applied to submissions.
Ordering is fixed at submit() time, not when the returned task first runs,
so callers get submission-order semantics without awaiting each call.

The submitted callables are blocking functions; they run in an executor
thread so concurrent tasks really overlap and the event loop stays free.
"""

import asyncio
import functools
from concurrent.futures import Executor
from typing import Any, Callable, List, Optional, Set


class BarrierQueue:
    """
    Task queue supporting concurrent and barrier submission.

    Usage:
        queue = BarrierQueue()
        queue.submit(write_file, path, data, barrier=True)
        data = await queue.submit(read_file, path)  # sees the write

    Internal State:
        _barrier: The most recently submitted barrier task (or None)
        _readers: Concurrent tasks submitted since that barrier that are
            still running. The next barrier waits for all of them.

    Attributes:
        executor: Executor for the blocking callables (None = loop default)
    """

    def __init__(self, executor: Optional[Executor] = None):
        self.executor = executor
        self._barrier: Optional[asyncio.Task] = None
        self._readers: Set[asyncio.Task] = set()
        self._inflight: Set[asyncio.Task] = set()

    def submit(
            self,
            fn: Callable[..., Any],
            *args: Any,
            barrier: bool = False,
            callback: Optional[Callable[[Any], None]] = None,
    ) -> "asyncio.Future[Any]":
        """
        Queue fn(*args) and return a future for its result.

        Must be called from a running event loop.

        Args:
            fn: Blocking callable, run in the executor
            *args: Positional arguments for fn
            barrier: Run exclusively, ordered against everything else
            callback: Called on the loop with fn's result once fn returns

        Returns:
            Future resolving to fn's return value. Cancelling it only
            detaches the caller; the queued work still runs to completion
            and keeps its place in the order.
        """
        loop = asyncio.get_running_loop()

        if barrier:
            waits = list(self._readers)
        else:
            waits = []
        if self._barrier is not None and not self._barrier.done():
            waits.append(self._barrier)

        task = loop.create_task(self._run(loop, waits, fn, args, callback))

        if barrier:
            self._barrier = task
            self._readers = set()
        else:
            readers = self._readers
            readers.add(task)
            task.add_done_callback(readers.discard)

        # _inflight holds the only strong reference until the task is done
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return asyncio.shield(task)

    async def _run(
            self,
            loop: asyncio.AbstractEventLoop,
            waits: List[asyncio.Task],
            fn: Callable[..., Any],
            args: tuple,
            callback: Optional[Callable[[Any], None]],
    ) -> Any:
        # asyncio.wait never raises the waited tasks' exceptions and never
        # cancels them.
        if waits:
            await asyncio.wait(waits)
        result = await loop.run_in_executor(self.executor, functools.partial(fn, *args))
        if callback is not None:
            callback(result)
        return result

    @property
    def pending(self) -> int:
        """Number of submitted tasks that have not finished yet."""
        return len(self._inflight)

    async def join(self) -> None:
        """Wait until every task submitted so far has finished."""
        if self._inflight:
            await asyncio.wait(list(self._inflight))
