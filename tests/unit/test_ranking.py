from __future__ import annotations

import math

import pytest

from rerank.contracts import KeyedCandidate
from rerank.ranking import rank_and_filter, resolve_score, score_candidates


def _keyed(keys: list[str]) -> list[KeyedCandidate[str]]:
    return [KeyedCandidate(item=key, index=index, key=key) for index, key in enumerate(keys)]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, 0.0),
        ("7", 0.0),
        (True, 0.0),
        ([5], 0.0),
        (math.nan, 0.0),
        (math.inf, 10.0),
        (-math.inf, 0.0),
        (-3, 0.0),
        (11, 10.0),
        (9.6, 9.6),
        (4, 4.0),
        (10**400, 10.0),
        (-(10**400), 0.0),
    ],
)
def test_resolve_score(raw: object, expected: float) -> None:
    assert resolve_score(raw) == expected


def test_rank_and_filter_excludes_scores_at_threshold() -> None:
    ranked = rank_and_filter(_keyed(["A", "B", "C"]), {"A": 10, "B": 6, "C": 0}, 0)
    assert ranked == ["A", "B"]

    ranked = rank_and_filter(_keyed(["A", "B", "C"]), {"A": 10, "B": 6, "C": 0}, 6)
    assert ranked == ["A"]


def test_rank_and_filter_clamps_then_breaks_ties_by_index() -> None:
    scores = {"A": -3, "B": 11, "C": 9.6, "D": math.inf}
    assert rank_and_filter(_keyed(["A", "B", "C", "D"]), scores, 0) == ["B", "D", "C"]


def test_rank_and_filter_treats_missing_keys_as_zero() -> None:
    ranked = rank_and_filter(_keyed(["A", "B", "C"]), {"B": 3, "extra": 10}, 0)
    assert ranked == ["B"]


def test_rank_and_filter_ordering_is_descending_with_index_tie_break() -> None:
    keys = [f"k{index}" for index in range(12)]
    raw_scores = {key: (index * 7) % 5 for index, key in enumerate(keys)}
    candidates = _keyed(keys)

    ranked = rank_and_filter(candidates, raw_scores, 0)

    scored = {candidate.item: candidate for candidate in score_candidates(candidates, raw_scores)}
    for left, right in zip(ranked, ranked[1:]):
        assert scored[left].score >= scored[right].score
        if scored[left].score == scored[right].score:
            assert scored[left].index < scored[right].index
    assert all(scored[item].score > 0 for item in ranked)
