"""
Run pipeline coroutines from synchronous Flask views.
Each call gets its own event loop on a worker thread, so a view never nests loops.
"""
from __future__ import annotations

import asyncio
import concurrent.futures
from typing import Any, Coroutine, Optional

from jobassist.utils.exceptions import DeadlineExceeded


_thread_pool = concurrent.futures.ThreadPoolExecutor(
    max_workers=8,
    thread_name_prefix="pipeline"
)

# Extra wait on the thread future beyond the coroutine's own timeout
_THREAD_GRACE_SECONDS = 5.0


def run_async(coro: Coroutine, timeout: Optional[float] = None, step: str = "request") -> Any:
    """
    Run a coroutine to completion on a dedicated event loop.

    Args:
        coro: The coroutine to run
        timeout: Seconds before the coroutine is cancelled. None means no limit.
        step: Name reported in DeadlineExceeded when the timeout fires

    Returns:
        Whatever the coroutine returns

    Raises:
        DeadlineExceeded: If the timeout elapses
    """
    def run_in_thread():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            if timeout is not None:
                return loop.run_until_complete(asyncio.wait_for(coro, timeout=timeout))
            return loop.run_until_complete(coro)
        finally:
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()

    future = _thread_pool.submit(run_in_thread)
    try:
        return future.result(timeout=timeout + _THREAD_GRACE_SECONDS if timeout else None)
    except (asyncio.TimeoutError, concurrent.futures.TimeoutError) as exc:
        raise DeadlineExceeded(step) from exc
