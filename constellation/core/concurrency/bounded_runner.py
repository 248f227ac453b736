# File: constellation/core/concurrency/bounded_runner.py

import asyncio
from typing import Awaitable, Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class RunCancelledError(Exception):
    """
    Raised by run_bounded when the cancellation predicate was observed.
    Carries no domain meaning; callers translate it into their own outcome.
    """

    def __init__(self, message: str = "Run cancelled before all items were scheduled."):
        super().__init__(message)


async def run_bounded(
    items: Iterable[T],
    operation: Callable[[T], Awaitable[R]],
    concurrency: int,
    is_cancelled: Optional[Callable[[], bool]] = None,
) -> List[Optional[R]]:
    """
    Runs `operation` over `items` with at most `concurrency` operations in flight.

    Results are stored at each item's original index. The first failure (or an
    observed cancellation) stops new work from being launched; operations that
    already started are allowed to settle before the failure is re-raised.

    Raises:
        The first exception raised by an operation.
        RunCancelledError if `is_cancelled` returned True before an item was launched.
    """
    pending = list(items)
    results: List[Optional[R]] = [None] * len(pending)
    if not pending:
        return results

    queue = iter(enumerate(pending))
    failures: List[Exception] = []
    cancelled = False

    async def worker() -> None:
        nonlocal cancelled
        # The iterator is shared: each worker pulls the next unclaimed index.
        for index, item in queue:
            if failures or cancelled:
                return
            if is_cancelled is not None and is_cancelled():
                cancelled = True
                return
            try:
                results[index] = await operation(item)
            except Exception as e:
                failures.append(e)
                return

    workers = max(1, min(int(concurrency), len(pending)))
    await asyncio.gather(*(worker() for _ in range(workers)))

    if failures:
        raise failures[0]
    if cancelled:
        raise RunCancelledError()
    return results
