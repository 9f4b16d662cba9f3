"""Batch partitioning and concurrent per-batch processing."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from rerank.contracts import LoggerLike

I = TypeVar("I")
O = TypeVar("O")


def slice_into_fixed_batches(items: Sequence[I], size: int) -> List[List[I]]:
    """Split items into consecutive chunks of ``size``; the last may be shorter."""
    if size < 1:
        raise ValueError("size must be >= 1")
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


def merge_tiny_final_batch(batches: Sequence[List[I]], tiny_threshold: int) -> List[List[I]]:
    """Fold a non-empty trailing batch of at most ``tiny_threshold`` items into its predecessor.

    Only the last batch is inspected and at most one merge happens. The input
    list is left untouched.
    """
    merged = list(batches)
    if len(merged) < 2:
        return merged
    last = merged[-1]
    if not last or len(last) > tiny_threshold:
        return merged
    merged[-2] = [*merged[-2], *last]
    merged.pop()
    return merged


def create_batches(items: Sequence[I], size: int, tiny_fraction: float) -> List[List[I]]:
    """Slice into fixed batches, then merge a tiny trailing batch.

    ``tiny_fraction`` is a ratio of ``size`` in [0, 1]; the tail is merged when
    its length is at most ``ceil(tiny_fraction * size)``.
    """
    batches = slice_into_fixed_batches(items, size)
    tiny_threshold = math.ceil(tiny_fraction * size)
    return merge_tiny_final_batch(batches, tiny_threshold)


async def batch_process(
    items: Sequence[I],
    size: int,
    tiny_fraction: float,
    fn: Callable[[List[I]], Awaitable[List[O]]],
    *,
    logger: Optional[LoggerLike] = None,
    on_error: Optional[Callable[[List[I], Exception], List[O]]] = None,
) -> List[O]:
    """Run ``fn`` on every batch concurrently and flatten the results in batch order.

    A batch whose ``fn`` raises contributes ``on_error(batch, exc)`` (or the
    batch itself) instead; sibling batches are unaffected.
    """
    log = logger or logging.getLogger(__name__)
    batches = create_batches(items, size, tiny_fraction)

    async def _run(batch: List[I]) -> List[O]:
        try:
            return await fn(batch)
        except Exception as exc:
            log.warning(
                "intent reranker batch failed, preserving original order: %s",
                exc,
                extra={"error": str(exc), "batch_size": len(batch)},
            )
            if on_error is not None:
                return on_error(batch, exc)
            return list(batch)  # type: ignore[arg-type]

    results = await asyncio.gather(*(_run(batch) for batch in batches))
    return [item for result in results for item in result]


__all__ = [
    "batch_process",
    "create_batches",
    "merge_tiny_final_batch",
    "slice_into_fixed_batches",
]
