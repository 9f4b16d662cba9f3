from __future__ import annotations

import asyncio
import logging
import math

import pytest

from rerank.batches import (
    batch_process,
    create_batches,
    merge_tiny_final_batch,
    slice_into_fixed_batches,
)


def test_slice_into_fixed_batches_counts_and_concatenation() -> None:
    for n in range(0, 23):
        items = list(range(n))
        for size in (1, 2, 3, 5, 7, 20):
            batches = slice_into_fixed_batches(items, size)
            assert len(batches) == math.ceil(n / size)
            assert all(1 <= len(batch) <= size for batch in batches)
            assert [item for batch in batches for item in batch] == items


def test_slice_into_fixed_batches_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError, match="size must be >= 1"):
        slice_into_fixed_batches([1, 2], 0)


def test_merge_tiny_final_batch_leaves_single_batch_alone() -> None:
    assert merge_tiny_final_batch([[1]], 5) == [[1]]
    assert merge_tiny_final_batch([], 5) == []


def test_merge_tiny_final_batch_merges_small_tail_once() -> None:
    batches = [[1, 2, 3], [4, 5, 6], [7]]
    merged = merge_tiny_final_batch(batches, 1)

    assert merged == [[1, 2, 3], [4, 5, 6, 7]]
    assert batches == [[1, 2, 3], [4, 5, 6], [7]]
    assert merge_tiny_final_batch(merged, 1) == merged


def test_merge_tiny_final_batch_keeps_tail_above_threshold() -> None:
    batches = [[1, 2, 3], [4, 5]]
    assert merge_tiny_final_batch(batches, 1) == [[1, 2, 3], [4, 5]]


def test_merge_tiny_final_batch_ignores_empty_tail() -> None:
    assert merge_tiny_final_batch([[1, 2], []], 3) == [[1, 2], []]


def test_create_batches_uses_ceil_of_fraction() -> None:
    items = list(range(21))
    # ceil(0.2 * 20) == 4, a tail of one item is merged.
    assert [len(batch) for batch in create_batches(items, 20, 0.2)] == [21]
    # ceil(0.01 * 20) == 1 still merges a single straggler.
    assert [len(batch) for batch in create_batches(items, 20, 0.01)] == [21]
    # zero fraction never merges a non-empty tail.
    assert [len(batch) for batch in create_batches(items, 20, 0.0)] == [20, 1]
    assert [len(batch) for batch in create_batches(list(range(25)), 20, 0.2)] == [20, 5]


def test_create_batches_small_input_is_single_batch() -> None:
    assert create_batches([1, 2, 3], 20, 0.2) == [[1, 2, 3]]
    assert create_batches([], 20, 0.2) == []


def test_batch_process_isolates_failed_batch(caplog) -> None:
    async def _fn(batch: list[int]) -> list[int]:
        if 3 in batch:
            raise RuntimeError("model timeout")
        return list(reversed(batch))

    with caplog.at_level(logging.WARNING):
        out = asyncio.run(batch_process(list(range(6)), 2, 0.0, _fn))

    assert out == [1, 0, 2, 3, 5, 4]
    assert "batch failed, preserving original order" in caplog.text
    assert "model timeout" in caplog.text


def test_batch_process_uses_on_error_fallback() -> None:
    async def _fn(batch: list[str]) -> list[str]:
        raise ValueError("bad payload")

    seen: list[tuple[list[str], str]] = []

    def _on_error(batch: list[str], exc: Exception) -> list[str]:
        seen.append((batch, str(exc)))
        return [item.upper() for item in batch]

    out = asyncio.run(batch_process(["a", "b", "c"], 2, 0.0, _fn, on_error=_on_error))

    assert out == ["A", "B", "C"]
    assert seen == [(["a", "b"], "bad payload"), (["c"], "bad payload")]


def test_batch_process_keeps_batch_order_regardless_of_completion_order() -> None:
    completed: list[int] = []

    async def _fn(batch: list[int]) -> list[int]:
        # Earlier batches finish last.
        await asyncio.sleep(0.01 * (3 - batch[0] // 2))
        completed.append(batch[0])
        return batch

    out = asyncio.run(batch_process(list(range(6)), 2, 0.0, _fn))

    assert completed == [4, 2, 0]
    assert out == [0, 1, 2, 3, 4, 5]


def test_batch_process_runs_batches_concurrently() -> None:
    active = 0
    peak = 0

    async def _fn(batch: list[int]) -> list[int]:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return batch

    asyncio.run(batch_process(list(range(8)), 2, 0.0, _fn))

    assert peak == 4
