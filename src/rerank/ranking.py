"""Score resolution, threshold filtering and stable ordering for one batch."""

from __future__ import annotations

from numbers import Real
from typing import List, Mapping, Sequence, TypeVar

from rerank.contracts import KeyedCandidate, ScoredCandidate

T = TypeVar("T")

MIN_SCORE = 0.0
MAX_SCORE = 10.0


def resolve_score(value: object) -> float:
    """Turn an untrusted model value into a score in [0, 10].

    Missing, boolean, non-numeric and NaN values count as 0 (not relevant).
    Other numbers are clamped, so ``+inf`` becomes 10 and ``-inf`` becomes 0.
    """
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return MIN_SCORE
    if value != value:  # NaN
        return MIN_SCORE
    # Compare before converting: float() overflows on very large integers.
    if value >= MAX_SCORE:
        return MAX_SCORE
    if value <= MIN_SCORE:
        return MIN_SCORE
    return float(value)


def score_candidates(
    candidates: Sequence[KeyedCandidate[T]],
    scores: Mapping[str, object],
) -> List[ScoredCandidate[T]]:
    return [
        ScoredCandidate(
            item=candidate.item,
            index=candidate.index,
            score=resolve_score(scores.get(candidate.key)),
        )
        for candidate in candidates
    ]


def rank_and_filter(
    candidates: Sequence[KeyedCandidate[T]],
    scores: Mapping[str, object],
    threshold: float,
) -> List[T]:
    """Keep candidates scoring strictly above ``threshold``, best first.

    Equal scores are ordered by original input index.
    """
    scored = score_candidates(candidates, scores)
    kept = [candidate for candidate in scored if candidate.score > threshold]
    kept.sort(key=lambda candidate: (-candidate.score, candidate.index))
    return [candidate.item for candidate in kept]


__all__ = ["MAX_SCORE", "MIN_SCORE", "rank_and_filter", "resolve_score", "score_candidates"]
