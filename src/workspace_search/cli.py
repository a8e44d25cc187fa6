"""CLI for workspace search (search, suggest, facets, MCP server)."""

import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from workspace_search.config import resolve_corpus_path
from workspace_search.core.importer.json_reader import load_corpus_file
from workspace_search.core.session import SearchSession
from workspace_search.formatting import format_age, format_match, summarize
from workspace_search.logging_config import configure_logging

app = typer.Typer(help="Workspace search: query documents, memories, tasks and activities.")

CorpusOption = Annotated[
    Path | None,
    typer.Option("--corpus", "-c", help="Corpus JSON file (default: configured or sample)"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _open_session(corpus: Path | None) -> SearchSession:
    """Load the corpus into a fresh session, exiting on a bad file."""
    path = corpus or resolve_corpus_path()
    if not path.is_file():
        logger.error("Corpus file not found: {}", path)
        raise typer.Exit(1)
    try:
        records = load_corpus_file(path)
    except ValueError as e:
        logger.error("Cannot load corpus {}: {}", path, e)
        raise typer.Exit(1) from e

    session = SearchSession()
    outcome = session.set_corpus(records)
    if not outcome.ok:
        logger.error("Cannot load corpus {}: {}", path, outcome.detail)
        raise typer.Exit(1)
    return session


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    type_: Annotated[
        str,
        typer.Option("--type", "-t", help="all, document, memory, task or activity"),
    ] = "all",
    corpus: CorpusOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Search records and print them grouped by type."""
    session = _open_session(corpus)
    try:
        outcome = session.search_now(query, type_)
        if not outcome.ok or outcome.response is None:
            typer.echo(outcome.detail)
            raise typer.Exit(2)

        response = outcome.response
        grouped = session.get_grouped_results()

        if output_json:
            data = {
                "query": response.query,
                "type": response.selected_type,
                "groups": {
                    str(domain_type): [
                        {
                            "id": r.id,
                            "title": r.title,
                            "category": r.category,
                            "relevance": r.relevance,
                            "timestamp": r.timestamp.isoformat(),
                            "source": r.source,
                        }
                        for r in records
                    ]
                    for domain_type, records in grouped.items()
                },
                "count": len(response.results),
                "total": response.total_matches,
            }
            typer.echo(json.dumps(data, indent=2))
            return

        if not response.normalized:
            typer.echo("Empty query.")
            return
        typer.echo(summarize(response) + "\n")
        for domain_type, records in grouped.items():
            typer.echo(f"{domain_type} ({len(records)})")
            for r in records:
                typer.echo(f"  {r.title}  [{format_match(r.relevance)}]")
                typer.echo(f"    {r.category} - {format_age(r.timestamp)}  id={r.id}  {r.source}")
            typer.echo()
    finally:
        session.close()


@app.command()
def suggest(
    query: str = typer.Argument(..., help="Partial query"),
    corpus: CorpusOption = None,
) -> None:
    """Show type-ahead suggestions for a partial query."""
    session = _open_session(corpus)
    try:
        for s in session.suggestions(query):
            typer.echo(f"  {s.text}  ({s.domain_type})")
    finally:
        session.close()


@app.command()
def facets(corpus: CorpusOption = None) -> None:
    """Show how many records each type filter covers."""
    session = _open_session(corpus)
    try:
        for facet, count in session.facet_counts().items():
            typer.echo(f"  {facet}: {count}")
    finally:
        session.close()


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from workspace_search.mcp.server import run_mcp_server

    run_mcp_server()
