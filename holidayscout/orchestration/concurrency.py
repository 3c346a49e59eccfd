"""
Bounded-concurrency mapping over asyncio.

Used to fan out per-destination work without flooding upstream providers
with simultaneous requests.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def map_with_concurrency(
    items: Sequence[T],
    limit: int,
    task: Callable[[T], Awaitable[R]],
) -> List[R]:
    """
    Run task over items with at most `limit` tasks outstanding.

    Workers pull the next unclaimed item from a shared iterator and write
    the result into the slot with the item's index, so the output order
    always matches the input order. The call returns only after every
    worker has finished. If a task raises, the remaining workers are
    cancelled and the exception propagates.

    Args:
        items: Items to process
        limit: Maximum number of concurrently running tasks (>= 1)
        task: Coroutine function applied to each item

    Returns:
        Results in input order

    Raises:
        ValueError: If limit is less than 1

    Examples:
        >>> async def double(x):
        ...     return x * 2
        >>> await map_with_concurrency([1, 2, 3], 2, double)
        [2, 4, 6]
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")

    results: List[Optional[R]] = [None] * len(items)
    work = iter(enumerate(items))

    async def worker() -> None:
        for index, item in work:
            results[index] = await task(item)

    workers = [asyncio.ensure_future(worker()) for _ in range(min(limit, len(items)))]
    try:
        await asyncio.gather(*workers)
    except BaseException:
        for w in workers:
            w.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        raise

    return results  # type: ignore[return-value]
