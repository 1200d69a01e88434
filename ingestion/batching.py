"""
Bounded parallelism for I/O-bound work.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def run_batched(
    items: Sequence[T],
    batch_size: int,
    process_item: Callable[[T, int], Awaitable[R]],
    after_batch: Optional[Callable[[List[R]], Awaitable[Any]]] = None
) -> None:
    """
    Process items in sequential batches, items within a batch concurrently.

    Args:
        items: Items to process
        batch_size: Maximum number of items in flight at once
        process_item: Coroutine called with the item and its index within the batch
        after_batch: Coroutine called with the batch results once the whole batch succeeded

    The first failure of a batch is raised as soon as it happens and no
    further batch is started. Siblings already in flight are not cancelled,
    their results are discarded.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    for start in range(0, len(items), batch_size):
        batch = items[start:start + batch_size]
        results = await asyncio.gather(
            *(process_item(item, index) for index, item in enumerate(batch))
        )

        if after_batch is not None:
            await after_batch(list(results))

        logger.info(f"Finished {start // batch_size + 1}. batch")
