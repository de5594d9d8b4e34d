"""
Typer CLI for pathgen.

Commands:
    pathgen db init                 - Create database tables
    pathgen ingest FILE             - Segment, embed and store a document
    pathgen generate DOCUMENT_ID    - Generate a learning path for a document
    pathgen search QUERY            - Rank stored sections against a query

Usage:
    pathgen --help
    pathgen ingest docs/networking.md
    pathgen generate 4f1c2a9e-0b7d-4d8e-9a51-2c3b6d7e8f90
    pathgen search "subnet masks" --limit 3
"""

from __future__ import annotations

import sys
from pathlib import Path
from uuid import UUID

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import get_settings
from pathgen import __version__
from pathgen.exceptions import PathgenError

app = typer.Typer(
    help="pathgen CLI: document -> sections -> learning path",
    no_args_is_help=True,
)

console = Console()


def configure_logging() -> None:
    """Route loguru output to stderr and, when configured, a rotating log file."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB", retention=5)


@app.callback()
def main_callback() -> None:
    """Turn uploaded documents into sequenced learning paths."""
    configure_logging()


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        rprint(f"[red]Not a valid id:[/red] {value}")
        raise typer.Exit(code=1)


# ========================================
# Database Commands
# ========================================

db_app = typer.Typer(help="Database management")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """
    Create tables for documents, sections, learning paths and activities.

    Safe to run multiple times (idempotent).
    """
    from pathgen.db.database import init_db

    logger.info("Initializing database tables...")
    init_db()
    rprint("[green]✓[/green] Database initialized!")


# ========================================
# Pipeline Commands
# ========================================


@app.command("ingest")
def ingest(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Text or markdown file"),
    source: str = typer.Option("upload", "--source", "-s", help="Where the document came from"),
) -> None:
    """Segment a document by headings, embed its chunks and store them."""
    from pathgen.db.store import DocumentStore
    from pathgen.ingest import IngestService
    from pathgen.semantic import EmbeddingService

    store = DocumentStore()
    service = IngestService(store, EmbeddingService())
    try:
        document = service.ingest_document(
            file.read_text(encoding="utf-8"),
            path=str(file),
            source=source,
        )
    except PathgenError as e:
        rprint(f"[red]Ingest failed:[/red] {e}")
        raise typer.Exit(code=1)

    sections = store.list_sections(document.id)
    table = Table(title=f"Stored {len(sections)} sections", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Heading")
    table.add_column("Slug", style="dim")
    table.add_column("Tokens", justify="right")
    for section in sections:
        table.add_row(
            str(section.chunk_index), section.heading, section.slug, str(section.token_count)
        )
    console.print(table)
    rprint(f"[green]✓[/green] Document id: [bold]{document.id}[/bold]")


@app.command("generate")
def generate(
    document_id: str = typer.Argument(..., help="Id printed by `pathgen ingest`"),
) -> None:
    """Generate a learning path of activities for an ingested document."""
    from pathgen.db.store import DocumentStore
    from pathgen.generation import GeminiGenerationClient, LearningPathGenerator

    if not get_settings().has_ai_configured():
        rprint("[yellow]GEMINI_API_KEY not set; every batch will use fallback activities[/yellow]")

    generator = LearningPathGenerator(DocumentStore(), GeminiGenerationClient())
    try:
        result = generator.generate_learning_path(_parse_uuid(document_id))
    except PathgenError as e:
        rprint(f"[red]Generation failed:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title=result.learning_path.title, show_header=True)
    table.add_column("Type", style="cyan")
    table.add_column("Title")
    table.add_column("Source", style="dim")
    for activity in result.activities:
        table.add_row(
            activity.type.value,
            activity.title,
            "fallback" if activity.from_fallback else "model",
        )
    console.print(table)

    rprint(
        f"[green]✓[/green] {result.activities_created} activities stored, "
        f"{result.used_fallback_batches} fallback batches, "
        f"~{result.learning_path.duration_estimate_hours}h"
    )
    rprint(f"  Learning path id: [bold]{result.learning_path.id}[/bold]")


@app.command("search")
def search(
    query: str = typer.Argument(..., help="Free-text query"),
    document_id: str | None = typer.Option(None, "--document", "-d", help="Restrict to a document"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Maximum results"),
    threshold: float | None = typer.Option(None, "--threshold", "-t", help="Minimum similarity"),
) -> None:
    """Find stored sections semantically similar to a query."""
    from pathgen.db.store import DocumentStore
    from pathgen.semantic import EmbeddingService, SectionSearch

    searcher = SectionSearch(DocumentStore(), EmbeddingService())
    try:
        matches = searcher.search(
            query,
            document_id=_parse_uuid(document_id) if document_id else None,
            limit=limit,
            threshold=threshold,
        )
    except PathgenError as e:
        rprint(f"[red]Search failed:[/red] {e}")
        raise typer.Exit(code=1)
    if not matches:
        rprint("[yellow]No matching sections[/yellow]")
        return

    table = Table(title=f"Sections matching {query!r}", show_header=True)
    table.add_column("Score", justify="right")
    table.add_column("Heading")
    table.add_column("Excerpt", style="dim")
    for match in matches:
        table.add_row(
            f"{match.similarity:.3f}",
            match.section.heading,
            match.section.content[:80].replace("\n", " "),
        )
    console.print(table)


@app.command("version")
def version() -> None:
    """Show version information."""
    rprint(f"[bold]pathgen[/bold] v{__version__}")
    rprint("  Document -> sections -> learning path")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
