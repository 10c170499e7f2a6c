"""Order-preserving concurrent mapping on the running event loop."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def _settle(func: Callable[[T], Awaitable[R]], batch: Sequence[T]) -> list[R]:
    """Run one batch to completion, then re-raise the first exception if any."""
    outcomes = await asyncio.gather(*(func(item) for item in batch), return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return list(outcomes)


async def map_in_batches(
    func: Callable[[T], Awaitable[R]],
    items: Sequence[T],
    batch_size: Optional[int] = None,
) -> list[R]:
    """Await ``func(item)`` for every item and return the results in input order.

    Without *batch_size* all calls run concurrently. With it, items are taken
    *batch_size* at a time and the next batch starts only once every call in
    the current one has finished, so at most *batch_size* calls are in flight.

    *func* is expected to turn its own failures into values. An exception it
    does raise is re-raised after the rest of its batch has settled.

    Raises:
        ValueError: If *batch_size* is not positive.
    """
    if batch_size is not None and batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    if batch_size is None or batch_size >= len(items):
        return await _settle(func, items)

    results: list[R] = []
    for start in range(0, len(items), batch_size):
        results.extend(await _settle(func, items[start : start + batch_size]))
    return results
