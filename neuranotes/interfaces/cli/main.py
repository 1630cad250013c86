"""
CLI Main - Typer-based command-line interface.

Usage:
    neuranotes search "artificial intelligence"
    neuranotes search "neural nets" --mode semantic --document <id>
    neuranotes serve
"""

from __future__ import annotations

import asyncio
from enum import Enum

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

app = typer.Typer(
    name="neuranotes",
    help="NeuraNotes - Hybrid search over your notes",
    add_completion=False,
)
console = Console()


class SearchMode(str, Enum):
    """Weight presets for the search command."""

    HYBRID = "hybrid"
    KEYWORD = "keyword"
    SEMANTIC = "semantic"


@app.callback()
def _configure(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    """Configure logging before any command runs."""
    from neuranotes.config import configure_logging

    configure_logging(log_level)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Number of results"),
    document: str | None = typer.Option(None, "--document", "-d", help="Restrict to a document ID"),
    mode: SearchMode = typer.Option(SearchMode.HYBRID, "--mode", "-m", help="Weight preset"),
) -> None:
    """Search indexed passages."""
    asyncio.run(_search_async(query, limit, document, mode))


async def _search_async(
    query: str,
    limit: int | None,
    document: str | None,
    mode: SearchMode,
) -> None:
    """Async search implementation."""
    from neuranotes.config import get_settings
    from neuranotes.domains.search import (
        SearchOptions,
        highlight_terms,
        hybrid_search,
        keyword_search,
        semantic_search,
    )
    from neuranotes.interfaces.api.deps import (
        cleanup_services,
        get_search_engine,
        init_services,
    )

    runners = {
        SearchMode.HYBRID: hybrid_search,
        SearchMode.KEYWORD: keyword_search,
        SearchMode.SEMANTIC: semantic_search,
    }

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Searching...", total=None)
        await init_services()
        try:
            outcome = await runners[mode](
                get_search_engine(),
                query,
                SearchOptions(
                    document_id=document,
                    limit=limit or get_settings().search_default_limit,
                ),
            )
        finally:
            await cleanup_services()

    if not outcome.success:
        console.print(f"[red]Error:[/red] {escape(outcome.error or '')}")
        raise typer.Exit(1)

    if not outcome.results:
        console.print(f"[yellow]No results for:[/yellow] {escape(query)}")
    else:
        table = Table(title=f"Results for '{escape(query)}'")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Document", style="cyan")
        table.add_column("Passage")
        table.add_column("Lexical", justify="right")
        table.add_column("Vector", justify="right")
        table.add_column("Hybrid", style="green", justify="right")

        for i, result in enumerate(outcome.results, 1):
            preview = highlight_terms(escape(result.text[:200]), query) or ""
            table.add_row(
                str(i),
                result.document_id,
                preview.replace("<mark>", "[bold]").replace("</mark>", "[/bold]"),
                f"{result.lexical_score:.2f}",
                f"{result.vector_score:.2f}",
                f"{result.hybrid_score:.3f}",
            )
        console.print(table)

    console.print(
        f"[dim]method={outcome.method.value} total={outcome.total} "
        f"duration={outcome.duration_ms:.0f}ms[/dim]"
    )


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    from neuranotes.config import get_settings

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting NeuraNotes API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "neuranotes.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from neuranotes import __version__

    console.print(f"NeuraNotes v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
