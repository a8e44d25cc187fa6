"""Tests for MCP tool core functions."""

import json
import os
from pathlib import Path

from workspace_search.core.session import SearchSession
from workspace_search.mcp.server import (
    ServerContext,
    _maybe_reload,
    workspace_facets,
    workspace_history,
    workspace_search,
    workspace_suggest,
)
from workspace_search.models.record import Record

from tests.unit.fakes import CORPUS_DATA


def test_workspace_search_returns_grouped_results(corpus: list[Record]) -> None:
    session = SearchSession(corpus)
    result = workspace_search(session, query="printing")
    assert result["count"] == 3
    assert result["total"] == 3
    assert list(result["groups"]) == ["document", "activity", "task"]
    first = result["groups"]["document"][0]
    assert first["id"] == "doc-1"
    assert first["match"] == "95% match"
    assert "metadata" not in first


def test_workspace_search_detailed_includes_metadata(corpus: list[Record]) -> None:
    session = SearchSession(corpus)
    result = workspace_search(
        session, query="nigeria", type="document", response_format="detailed"
    )
    entry = result["groups"]["document"][0]
    assert entry["metadata"] == {"size": "15KB", "format": "markdown"}
    assert entry["timestamp"].startswith("2026-02-07")


def test_workspace_search_errors(corpus: list[Record]) -> None:
    session = SearchSession(corpus)
    assert workspace_search(session, query="  ")["error"] == "No search query provided."
    bad = workspace_search(session, query="gmail", type="calendar")
    assert "Unknown type" in bad["error"]
    assert bad["count"] == 0


def test_workspace_history_tracks_searches(corpus: list[Record]) -> None:
    session = SearchSession(corpus)
    workspace_search(session, query="gmail")
    workspace_search(session, query="wedding")
    workspace_search(session, query="gmail")
    assert workspace_history(session) == {"history": ["wedding", "gmail"], "count": 2}


def test_workspace_suggest_and_facets(corpus: list[Record]) -> None:
    session = SearchSession(corpus)
    suggestions = workspace_suggest(session, query="wed")
    assert suggestions["suggestions"] == [
        {"id": "memory-1", "text": "Wedding Website Project", "type": "memory"}
    ]
    facets = workspace_facets(session)["facets"]
    assert facets == {"all": 6, "document": 2, "memory": 1, "task": 2, "activity": 1}


def test_maybe_reload_picks_up_changed_file(tmp_path: Path) -> None:
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps(CORPUS_DATA[:2]))
    ctx = ServerContext(session=SearchSession(), corpus_path=path)

    _maybe_reload(ctx)
    assert len(ctx.session.store) == 2

    path.write_text(json.dumps(CORPUS_DATA))
    os.utime(path, (ctx.corpus_mtime + 10, ctx.corpus_mtime + 10))
    _maybe_reload(ctx)
    assert len(ctx.session.store) == 6


def test_maybe_reload_keeps_records_on_bad_file(tmp_path: Path) -> None:
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps(CORPUS_DATA))
    ctx = ServerContext(session=SearchSession(), corpus_path=path)
    _maybe_reload(ctx)

    path.write_text(json.dumps([CORPUS_DATA[0], CORPUS_DATA[0]]))
    os.utime(path, (ctx.corpus_mtime + 10, ctx.corpus_mtime + 10))
    _maybe_reload(ctx)
    assert len(ctx.session.store) == 6

    path.write_text("{not json")
    os.utime(path, (ctx.corpus_mtime + 20, ctx.corpus_mtime + 20))
    _maybe_reload(ctx)
    assert len(ctx.session.store) == 6
