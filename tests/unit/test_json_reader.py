"""Tests for the JSON reader that parses corpus files into records."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from workspace_search.config import SAMPLE_CORPUS
from workspace_search.core.importer.json_reader import (
    load_corpus_file,
    parse_corpus_data,
    parse_record,
)
from workspace_search.models.record import DomainType

MINIMAL_RECORD = {
    "id": "task-1",
    "type": "task",
    "title": "Gmail Configuration Reminder",
    "description": "Configure Himalaya",
    "content": "Set up OAuth",
    "timestamp": "2026-02-09T10:00:00+00:00",
    "category": "communication",
    "relevance": 0.92,
    "source": "calendar",
    "metadata": {"priority": "high"},
}


def test_parse_record_reads_all_fields() -> None:
    record = parse_record(MINIMAL_RECORD)
    assert record.id == "task-1"
    assert record.domain_type is DomainType.TASK
    assert record.title == "Gmail Configuration Reminder"
    assert record.timestamp == datetime(2026, 2, 9, 10, tzinfo=UTC)
    assert record.relevance == 0.92
    assert record.metadata == {"priority": "high"}


def test_parse_record_accepts_domain_type_key_and_naive_time() -> None:
    data = {**MINIMAL_RECORD, "domain_type": "memory", "timestamp": "2026-02-09T10:00:00"}
    del data["type"]
    record = parse_record(data)
    assert record.domain_type is DomainType.MEMORY
    assert record.timestamp.tzinfo is UTC


def test_parse_record_accepts_epoch_millis() -> None:
    record = parse_record({**MINIMAL_RECORD, "timestamp": 1770631200000})
    assert record.timestamp == datetime(2026, 2, 9, 10, tzinfo=UTC)


@pytest.mark.parametrize(
    ("override", "message"),
    [
        ({"type": "calendar"}, "unknown type"),
        ({"relevance": 1.5}, "outside"),
        ({"relevance": float("nan")}, "outside"),
        ({"relevance": None}, "not a number"),
        ({"relevance": "0.9"}, "not a number"),
        ({"relevance": True}, "not a number"),
        ({"title": None}, "title None is not a string"),
        ({"content": 42}, "content 42 is not a string"),
        ({"timestamp": "yesterday"}, "bad timestamp"),
    ],
)
def test_parse_record_rejects_invalid_values(override: dict[str, object], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        parse_record({**MINIMAL_RECORD, **override})


def test_parse_record_requires_id_and_timestamp() -> None:
    data = dict(MINIMAL_RECORD)
    del data["timestamp"]
    with pytest.raises(ValueError, match="missing required fields"):
        parse_record(data)


def test_parse_corpus_accepts_list_or_object() -> None:
    assert len(parse_corpus_data([MINIMAL_RECORD])) == 1
    assert len(parse_corpus_data({"records": [MINIMAL_RECORD]})) == 1
    with pytest.raises(ValueError, match="records"):
        parse_corpus_data({"items": []})


def test_load_corpus_file(tmp_path: Path) -> None:
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps([MINIMAL_RECORD]))
    records = load_corpus_file(path)
    assert [r.id for r in records] == ["task-1"]


def test_sample_corpus_loads() -> None:
    records = load_corpus_file(SAMPLE_CORPUS)
    assert len(records) == 8
    assert len({r.id for r in records}) == 8
    assert {r.domain_type for r in records} == set(DomainType)
