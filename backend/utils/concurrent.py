"""
Concurrent Operations Utilities

Bounded fan-out helpers for fetching data for many tickers at once.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, List

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_MAX_CONCURRENT = 10


async def run_concurrent_async(
    tasks: List[Awaitable],
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
) -> List[Any]:
    """
    Await every task, at most ``max_concurrent`` at a time.

    Results line up with ``tasks``. The first exception propagates; callers
    that must not fail (the quote fan-out) catch inside each task.

        quotes = await run_concurrent_async(
            [asyncio.to_thread(service.get_quote, t) for t in tickers],
            max_concurrent=QUOTE_MAX_CONCURRENCY,
        )
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrent))

    async def bounded_task(task):
        async with semaphore:
            return await task

    return await asyncio.gather(*[bounded_task(task) for task in tasks])


async def map_in_threads(
    func: Callable[[Any], Any],
    items: Iterable[Any],
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
) -> List[Any]:
    """
    Apply a blocking function to every item on worker threads.

    Results come back in input order. Exceptions propagate.
    """
    items = list(items)
    if not items:
        return []

    logger.debug("Running %d blocking calls, max %d at a time", len(items), max_concurrent)
    return await run_concurrent_async(
        [asyncio.to_thread(func, item) for item in items],
        max_concurrent=max_concurrent
    )
