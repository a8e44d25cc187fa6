"""Tests for corpus snapshots."""

from dataclasses import replace

import pytest

from workspace_search.core.store import RecordStore
from workspace_search.core.search.pipeline import facet_counts
from workspace_search.models.record import ALL, ErrorCode, Record

from tests.unit.fakes import make_record


def test_set_corpus_replaces_snapshot(corpus: list[Record]) -> None:
    store = RecordStore()
    assert store.set_corpus(corpus).ok
    assert len(store) == 6
    assert store.snapshot()[0].id == "doc-1"
    assert store.get("task-1") is not None
    assert store.get("missing") is None


def test_duplicate_ids_rejected_atomically(corpus: list[Record]) -> None:
    store = RecordStore(corpus)
    outcome = store.set_corpus([make_record("x"), make_record("y"), make_record("x")])

    assert not outcome.ok
    assert outcome.error is ErrorCode.DUPLICATE_ID
    assert "'x'" in outcome.detail
    # Previous snapshot untouched.
    assert [r.id for r in store.snapshot()] == [r.id for r in corpus]


def test_old_snapshot_survives_replacement(corpus: list[Record]) -> None:
    store = RecordStore(corpus)
    before = store.snapshot()
    store.set_corpus([make_record("new")])
    assert len(before) == 6
    assert [r.id for r in store.snapshot()] == ["new"]


def test_constructor_raises_on_duplicates() -> None:
    with pytest.raises(ValueError, match="Duplicate record ids"):
        RecordStore([make_record("a"), make_record("a")])


@pytest.mark.parametrize(
    ("bad", "message"),
    [
        ({"domain_type": "calendar", "relevance": 7.0}, "unknown type 'calendar'"),
        ({"relevance": float("nan")}, "outside"),
        ({"relevance": None}, "not a number"),
        ({"title": None}, "title None"),
    ],
)
def test_invalid_record_rejected_atomically(
    corpus: list[Record], bad: dict[str, object], message: str
) -> None:
    store = RecordStore(corpus)
    outcome = store.set_corpus([make_record("ok"), replace(make_record("bad"), **bad)])

    assert outcome.error is ErrorCode.INVALID_RECORD
    assert "'bad'" in outcome.detail
    assert message in outcome.detail
    assert [r.id for r in store.snapshot()] == [r.id for r in corpus]
    assert facet_counts(store.snapshot())[ALL] == 6


def test_constructor_raises_on_invalid_record() -> None:
    with pytest.raises(ValueError, match="Invalid records"):
        RecordStore([replace(make_record("a"), relevance=1.5)])
