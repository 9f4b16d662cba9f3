from __future__ import annotations

from rerank.contracts import PreparedCandidate
from rerank.keys import ensure_unique_keys


def _prepared(base_keys: list[str], *, start: int = 0) -> list[PreparedCandidate[str]]:
    return [
        PreparedCandidate(item=f"item{start + offset}", index=start + offset, base_key=key)
        for offset, key in enumerate(base_keys)
    ]


def test_ensure_unique_keys_keeps_first_and_renames_rest_by_global_index() -> None:
    keyed = ensure_unique_keys(_prepared(["Same", "Other", "Same", "Same"], start=40))

    assert [candidate.key for candidate in keyed] == ["Same", "Other", "Same (42)", "Same (43)"]
    assert [candidate.index for candidate in keyed] == [40, 41, 42, 43]
    assert [candidate.item for candidate in keyed] == ["item40", "item41", "item42", "item43"]


def test_ensure_unique_keys_is_batch_local() -> None:
    first = ensure_unique_keys(_prepared(["Doc", "Doc"], start=0))
    second = ensure_unique_keys(_prepared(["Doc", "Doc"], start=2))

    assert [candidate.key for candidate in first] == ["Doc", "Doc (1)"]
    assert [candidate.key for candidate in second] == ["Doc", "Doc (3)"]


def test_ensure_unique_keys_produces_unique_keys_and_preserves_summary() -> None:
    batch = [
        PreparedCandidate(item=index, index=index, base_key="k", summary=f"s{index}")
        for index in range(5)
    ]
    keyed = ensure_unique_keys(batch)

    keys = [candidate.key for candidate in keyed]
    assert len(set(keys)) == len(keys)
    assert keys.count("k") == 1
    assert [candidate.summary for candidate in keyed] == [f"s{index}" for index in range(5)]


def test_ensure_unique_keys_avoids_clash_with_literal_suffixed_key() -> None:
    keyed = ensure_unique_keys(_prepared(["A (2)", "A", "A"]))

    assert [candidate.key for candidate in keyed] == ["A (2)", "A", "A (2.1)"]


def test_ensure_unique_keys_renames_literal_key_taken_by_earlier_suffix() -> None:
    keyed = ensure_unique_keys(_prepared(["A", "A", "A (1)", "A (1)"]))

    keys = [candidate.key for candidate in keyed]
    assert keys == ["A", "A (1)", "A (1) (2)", "A (1) (3)"]
    assert len(set(keys)) == len(keys)
