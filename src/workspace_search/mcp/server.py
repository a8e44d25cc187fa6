"""MCP server exposing workspace search tools."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from workspace_search.config import resolve_corpus_path
from workspace_search.core.importer.json_reader import load_corpus_file
from workspace_search.core.session import SearchSession
from workspace_search.formatting import format_age, format_match, summarize
from workspace_search.models.record import Record


def _serialize_record(record: Record, *, response_format: str = "concise") -> dict[str, Any]:
    entry: dict[str, Any] = {
        "id": record.id,
        "type": str(record.domain_type),
        "title": record.title,
        "description": record.description,
        "category": record.category,
        "relevance": record.relevance,
        "match": format_match(record.relevance),
        "age": format_age(record.timestamp),
        "source": record.source,
    }
    if response_format == "detailed":
        entry["content"] = record.content
        entry["timestamp"] = record.timestamp.isoformat()
        entry["metadata"] = record.metadata or {}
    else:
        entry["content"] = record.content[:120]
    return entry


# --- Core functions (testable without MCP context) ---


def workspace_search(
    session: SearchSession,
    *,
    query: str = "",
    type: str = "all",  # noqa: A002
    response_format: str = "concise",
) -> dict[str, Any]:
    """Search workspace records and return them grouped by type.

    Args:
        query: Search text, matched as a case-insensitive substring of the
            title, description or content.
        type: "all", "document", "memory", "task" or "activity".
        response_format: "concise" or "detailed".
    """
    if not query.strip():
        return {"error": "No search query provided.", "groups": {}, "count": 0, "total": 0}

    outcome = session.search_now(query, type)
    if not outcome.ok or outcome.response is None:
        return {"error": outcome.detail, "groups": {}, "count": 0, "total": 0}

    response = outcome.response
    groups = {
        str(domain_type): [_serialize_record(r, response_format=response_format) for r in records]
        for domain_type, records in session.get_grouped_results().items()
    }
    return {
        "summary": summarize(response),
        "groups": groups,
        "count": len(response.results),
        "total": response.total_matches,
    }


def workspace_suggest(session: SearchSession, *, query: str) -> dict[str, Any]:
    """Return type-ahead suggestions for a partial query."""
    suggestions = session.suggestions(query)
    return {
        "suggestions": [
            {"id": s.id, "text": s.text, "type": str(s.domain_type)} for s in suggestions
        ],
        "count": len(suggestions),
    }


def workspace_history(session: SearchSession) -> dict[str, Any]:
    """Return recent searches, most recent first."""
    history = session.get_history()
    return {"history": list(history), "count": len(history)}


def workspace_facets(session: SearchSession) -> dict[str, Any]:
    """Return how many records each type filter would cover."""
    return {"facets": {str(k): v for k, v in session.facet_counts().items()}}


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    session: SearchSession
    corpus_path: Path
    corpus_mtime: float = 0.0
    reload_lock: asyncio.Lock = field(default_factory=asyncio.Lock)


def _maybe_reload(ctx: ServerContext) -> None:
    """Replace the corpus if the file changed since it was last loaded."""
    try:
        mtime = ctx.corpus_path.stat().st_mtime
    except FileNotFoundError:
        logger.warning("Corpus file disappeared: {}", ctx.corpus_path)
        return
    if mtime <= ctx.corpus_mtime:
        return

    try:
        records = load_corpus_file(ctx.corpus_path)
    except ValueError:
        logger.warning("Corpus reload failed, keeping previous records", exc_info=True)
        return

    outcome = ctx.session.set_corpus(records)
    if outcome.ok:
        ctx.corpus_mtime = mtime
        logger.info("Reloaded {} records from {}", len(records), ctx.corpus_path)
    else:
        logger.warning("Corpus reload rejected: {}", outcome.detail)


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Load the corpus on startup, close the session on shutdown."""
    corpus_path = resolve_corpus_path()
    ctx = ServerContext(session=SearchSession(), corpus_path=corpus_path)
    _maybe_reload(ctx)
    try:
        yield ctx
    finally:
        ctx.session.close()


mcp_server = FastMCP(
    "workspace-search",
    instructions="""\
Search an AI assistant's workspace: documents, memory notes, scheduled tasks
and activity entries.

## Tips
- Queries are plain case-insensitive substrings; no boolean operators.
- Narrow with type="document" (or memory, task, activity) when you know
  what kind of record you want.
- Call workspace_facets_tool first to see how many records of each type exist.
- workspace_history_tool lists recent searches in this session.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[no-any-return]


async def _refresh(ctx: ServerContext) -> None:
    async with ctx.reload_lock:
        _maybe_reload(ctx)


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def workspace_search_tool(
    ctx: Context,
    query: str,
    type: str = "all",  # noqa: A002
    response_format: str = "concise",
) -> dict[str, Any]:
    """Search workspace records (documents, memories, tasks, activities).

    Results are ranked by relevance, capped at 20, and grouped by type.

    Args:
        query: Search text.
        type: "all", "document", "memory", "task" or "activity".
        response_format: "concise" or "detailed" (full content and metadata).
    """
    await _refresh(_ctx(ctx))
    return workspace_search(
        _ctx(ctx).session, query=query, type=type, response_format=response_format
    )


@mcp_server.tool()
async def workspace_suggest_tool(ctx: Context, query: str) -> dict[str, Any]:
    """Suggest record titles for a partial query (2+ characters)."""
    await _refresh(_ctx(ctx))
    return workspace_suggest(_ctx(ctx).session, query=query)


@mcp_server.tool()
async def workspace_history_tool(ctx: Context) -> dict[str, Any]:
    """List recent searches in this session, most recent first."""
    return workspace_history(_ctx(ctx).session)


@mcp_server.tool()
async def workspace_facets_tool(ctx: Context) -> dict[str, Any]:
    """Count records per type."""
    await _refresh(_ctx(ctx))
    return workspace_facets(_ctx(ctx).session)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from workspace_search.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
