"""Per-batch key disambiguation for schema property names."""

from __future__ import annotations

from typing import Dict, List, Sequence, Set, TypeVar

from rerank.contracts import KeyedCandidate, PreparedCandidate

T = TypeVar("T")


def ensure_unique_keys(batch: Sequence[PreparedCandidate[T]]) -> List[KeyedCandidate[T]]:
    """Suffix repeated base keys with the candidate's global index.

    The first occurrence of a base key keeps it as-is; later occurrences become
    ``"{base_key} ({index})"``. Using the input index (not the batch position)
    keeps renamed keys stable however the input was batched. A key that still
    clashes with one already emitted (a literal ``"A (2)"`` next to two ``"A"``)
    gets ``"{base_key} ({index}.{n})"`` with the smallest free ``n``.
    """
    counts: Dict[str, int] = {}
    emitted: Set[str] = set()
    keyed: List[KeyedCandidate[T]] = []
    for candidate in batch:
        base = candidate.base_key
        seen = counts.get(base, 0) + 1
        counts[base] = seen
        key = base if seen == 1 and base not in emitted else f"{base} ({candidate.index})"
        attempt = 0
        while key in emitted:
            attempt += 1
            key = f"{base} ({candidate.index}.{attempt})"
        emitted.add(key)
        keyed.append(
            KeyedCandidate(
                item=candidate.item,
                index=candidate.index,
                key=key,
                summary=candidate.summary,
            )
        )
    return keyed


__all__ = ["ensure_unique_keys"]
