"""Parse corpus JSON into Record models."""

import json
import math
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from loguru import logger

from workspace_search.models.record import DomainType, Record

_TEXT_FIELDS = ("title", "description", "content", "category", "source")


def _parse_timestamp(value: Any, *, record_id: str) -> datetime:
    if isinstance(value, int | float):
        # Epoch milliseconds, as emitted by JavaScript Date.getTime().
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        msg = f"Record {record_id!r}: bad timestamp {value!r}"
        raise ValueError(msg) from e
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def parse_record(data: dict[str, Any]) -> Record:
    """Parse one record dict.

    Accepts either "type" or "domain_type" for the record kind. Raises
    ValueError on an unknown kind, a relevance that is not a number in
    [0, 1], or a text field that is not a string.
    """
    missing = [key for key in ("id", "timestamp") if key not in data]
    if missing:
        msg = f"Record missing required fields {missing!r}: {data!r:.80}"
        raise ValueError(msg)

    record_id = str(data["id"])
    raw_type = data.get("domain_type", data.get("type"))
    try:
        domain_type = DomainType(raw_type)
    except ValueError as e:
        msg = f"Record {record_id!r}: unknown type {raw_type!r}"
        raise ValueError(msg) from e

    relevance = data.get("relevance", 0.0)
    if isinstance(relevance, bool) or not isinstance(relevance, int | float):
        msg = f"Record {record_id!r}: relevance {relevance!r} is not a number"
        raise ValueError(msg)
    relevance = float(relevance)
    if not math.isfinite(relevance) or not 0.0 <= relevance <= 1.0:
        msg = f"Record {record_id!r}: relevance {relevance!r} outside [0, 1]"
        raise ValueError(msg)

    text = {key: data.get(key, "") for key in _TEXT_FIELDS}
    for key, value in text.items():
        if not isinstance(value, str):
            msg = f"Record {record_id!r}: {key} {value!r} is not a string"
            raise ValueError(msg)

    return Record(
        id=record_id,
        domain_type=domain_type,
        title=text["title"],
        description=text["description"],
        content=text["content"],
        timestamp=_parse_timestamp(data["timestamp"], record_id=record_id),
        category=text["category"],
        relevance=relevance,
        source=text["source"],
        metadata=data.get("metadata"),
    )


def parse_corpus_data(data: list[dict[str, Any]] | dict[str, Any]) -> list[Record]:
    """Parse a corpus: a list of records, or an object with a "records" list."""
    raw_records = data.get("records") if isinstance(data, dict) else data
    if not isinstance(raw_records, list):
        msg = "Corpus must be a list of records or an object with a 'records' list"
        raise ValueError(msg)
    return [parse_record(raw) for raw in raw_records]


def load_corpus_file(path: Path) -> list[Record]:
    """Read and parse a corpus JSON file."""
    records = parse_corpus_data(json.loads(path.read_text(encoding="utf-8")))
    logger.debug("Loaded {} records from {}", len(records), path)
    return records
