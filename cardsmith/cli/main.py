"""
Typer CLI for cardsmith.

Commands:
    cardsmith generate FILE        - Generate flashcards from a text selection
    cardsmith questions FILE       - Generate discussion questions
    cardsmith analyze FILE         - Summarize a document for use as context
    cardsmith parse RESPONSE       - Run the extraction pipeline on a saved response
    cardsmith mochi decks          - List active Mochi decks
    cardsmith mochi upload CARDS   - Upload a cards JSON file to Mochi
    cardsmith export anki CARDS    - Export cards as Anki TSV (anki-cards-<date>.txt)
    cardsmith export markdown FILE - Export cards or questions as Markdown (<kind>-<date>.md)
    cardsmith import tsv FILE      - Read an Anki TSV file back into cards
    cardsmith info                 - Show configuration
    cardsmith version              - Show version

Usage:
    cardsmith generate chapter.txt --decks "Biology, Chemistry" -o cards.json
    cardsmith parse claude_response.json --questions
    cardsmith export anki cards.json -o -
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cardsmith import __version__
from cardsmith.exceptions import CardsmithError
from cardsmith.extraction import (
    CARD_KIND,
    QUESTION_KIND,
    Card,
    ExtractionResult,
    Question,
    extract_cards,
    extract_questions,
)
from config import get_settings

app = typer.Typer(help="cardsmith CLI: selected text -> Claude -> flashcards / questions -> Mochi / Anki")
mochi_app = typer.Typer(help="Mochi Cards integration")
export_app = typer.Typer(help="Export cards to files")
import_app = typer.Typer(help="Import cards from files")
app.add_typer(mochi_app, name="mochi")
app.add_typer(export_app, name="export")
app.add_typer(import_app, name="import")

console = Console()


# ========================================
# Helpers
# ========================================


def configure_logging() -> None:
    """Route loguru output to stderr (and optionally a file) at the configured level."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", retention=5)


def _read_text(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _load_response(path: Path) -> Any:
    """A saved provider response: JSON envelope if it decodes, else raw text."""
    text = _read_text(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _load_records(path: Path, kind) -> list:
    """Records of one kind from a JSON list file; invalid entries are skipped."""
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"{path} is not valid JSON: {e}") from e

    items = data if isinstance(data, list) else []
    records = [r for r in (kind.build(item) for item in items) if r is not None]
    if not records:
        raise typer.BadParameter(f"No valid {kind.name} records found in {path}")
    return records


def _load_cards(path: Path) -> list[Card]:
    return _load_records(path, CARD_KIND)


def _load_questions(path: Path) -> list[Question]:
    return _load_records(path, QUESTION_KIND)


def _write_or_print(content: str, output: Path) -> None:
    if str(output) == "-":
        typer.echo(content)
        return
    output.write_text(content, encoding="utf-8")
    rprint(f"[green]✓[/green] Wrote {output}")


def _show_cards(cards: ExtractionResult[Card] | list[Card], title: str = "Flashcards") -> None:
    table = Table(title=title)
    table.add_column("#", style="dim")
    table.add_column("Front", style="cyan")
    table.add_column("Back", style="green")
    table.add_column("Deck", style="magenta")
    for i, card in enumerate(cards, start=1):
        table.add_row(str(i), escape(card.front), escape(card.back), escape(card.deck))
    console.print(table)


def _show_questions(questions: ExtractionResult[Question] | list[Question]) -> None:
    table = Table(title="Discussion Questions")
    table.add_column("#", style="dim")
    table.add_column("Question", style="cyan")
    table.add_column("Topic", style="magenta")
    for i, question in enumerate(questions, start=1):
        table.add_row(str(i), escape(question.question), escape(question.topic))
    console.print(table)


def _dump_records(records: ExtractionResult | list, output: Path | None) -> None:
    if output is not None:
        data = [r.to_dict() for r in records]
        output.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        rprint(f"[green]✓[/green] Saved {len(data)} records to {output}")


def _build_generator(api_key: str | None):
    from cardsmith.generation import CardGenerator, ClaudeClient, validate_anthropic_api_key

    if api_key and not validate_anthropic_api_key(api_key):
        raise typer.BadParameter("Invalid Anthropic API key format", param_hint="--api-key")
    return CardGenerator(ClaudeClient(api_key=api_key))


def _fail(error: Exception) -> None:
    rprint(f"[red]✗[/red] {error}")
    raise typer.Exit(code=1)


# ========================================
# GENERATION COMMANDS
# ========================================


@app.command("generate")
def generate(
    path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, allow_dash=True, help="Text file holding the selection ('-' for stdin)"
    ),
    decks: str = typer.Option("", "--decks", "-d", help="Comma-separated deck options"),
    context_file: Path | None = typer.Option(
        None, "--context", "-c", exists=True, dir_okay=False, help="Document to summarize as context"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Save cards as JSON"),
    api_key: str | None = typer.Option(None, "--api-key", envvar="CLAUDE_USER_API_KEY", help="Claude API key"),
) -> None:
    """Generate flashcards from a text selection."""
    try:
        with _build_generator(api_key) as generator:
            context = generator.analyze_text(_read_text(context_file)) if context_file else ""
            cards = generator.generate_cards(_read_text(path), deck_options=decks, context=context)
    except (CardsmithError, ValueError) as e:
        _fail(e)

    _show_cards(cards, title=f"Flashcards ({cards.source.value})")
    _dump_records(cards, output)


@app.command("questions")
def questions(
    path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, allow_dash=True, help="Text file holding the selection ('-' for stdin)"
    ),
    context_file: Path | None = typer.Option(
        None, "--context", "-c", exists=True, dir_okay=False, help="Document to summarize as context"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Save questions as JSON"),
    api_key: str | None = typer.Option(None, "--api-key", envvar="CLAUDE_USER_API_KEY", help="Claude API key"),
) -> None:
    """Generate discussion questions from a text selection."""
    try:
        with _build_generator(api_key) as generator:
            context = generator.analyze_text(_read_text(context_file)) if context_file else ""
            result = generator.generate_questions(_read_text(path), context=context)
    except (CardsmithError, ValueError) as e:
        _fail(e)

    _show_questions(result)
    _dump_records(result, output)


@app.command("analyze")
def analyze(
    path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, allow_dash=True, help="Document to analyze ('-' for stdin)"
    ),
    api_key: str | None = typer.Option(None, "--api-key", envvar="CLAUDE_USER_API_KEY", help="Claude API key"),
) -> None:
    """Summarize a document for use as generation context."""
    try:
        with _build_generator(api_key) as generator:
            summary = generator.analyze_text(_read_text(path))
    except (CardsmithError, ValueError) as e:
        _fail(e)

    typer.echo(summary)


@app.command("parse")
def parse(
    path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, allow_dash=True, help="Saved provider response (JSON envelope or raw text)"
    ),
    as_questions: bool = typer.Option(False, "--questions", "-q", help="Extract questions instead of cards"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Save records as JSON"),
) -> None:
    """Run the extraction pipeline on a saved response (no network)."""
    response = _load_response(path)
    if as_questions:
        result = extract_questions(response)
        _show_questions(result)
    else:
        result = extract_cards(response)
        _show_cards(result)

    rprint(f"[dim]source: {result.source.value}[/dim]")
    _dump_records(result, output)


# ========================================
# MOCHI COMMANDS
# ========================================


@mochi_app.command("decks")
def mochi_decks(
    api_key: str | None = typer.Option(None, "--api-key", envvar="MOCHI_USER_API_KEY", help="Mochi API key"),
) -> None:
    """List active Mochi decks."""
    from cardsmith.mochi import MochiClient

    try:
        with MochiClient(api_key=api_key) as client:
            decks = client.list_decks()
    except CardsmithError as e:
        _fail(e)

    table = Table(title=f"Mochi Decks ({len(decks)})")
    table.add_column("Deck", style="cyan")
    table.add_column("ID", style="dim")
    for name, deck_id in decks.items():
        table.add_row(name, deck_id)
    console.print(table)


@mochi_app.command("upload")
def mochi_upload(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, allow_dash=True, help="Cards JSON file"),
    workers: int | None = typer.Option(None, "--workers", "-w", help="Parallel uploads (default from config)"),
    api_key: str | None = typer.Option(None, "--api-key", envvar="MOCHI_USER_API_KEY", help="Mochi API key"),
) -> None:
    """Upload cards to Mochi, mapping each card's deck name to a Mochi deck."""
    from cardsmith.mochi import MochiClient, build_mochi_card

    cards = _load_cards(path)
    try:
        with MochiClient(api_key=api_key) as client:
            deck_ids = client.list_decks()
            mochi_cards = [build_mochi_card(card, deck_ids) for card in cards]
            summary = client.upload_cards(
                mochi_cards,
                max_workers=workers or get_settings().mochi_upload_workers,
            )
    except CardsmithError as e:
        _fail(e)

    for i, result in enumerate(summary.results, start=1):
        if not result.success:
            rprint(f"[yellow]⚠[/yellow] Card {i}: {result.error}")
    rprint(f"[green]✓[/green] Uploaded {summary.total_success}/{summary.total_cards} cards to Mochi")
    if summary.total_success < summary.total_cards:
        raise typer.Exit(code=1)


# ========================================
# EXPORT / IMPORT COMMANDS
# ========================================


@export_app.command("anki")
def export_anki(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, allow_dash=True, help="Cards JSON file"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="TSV output path ('-' for stdout, default anki-cards-<date>.txt)"
    ),
    header: bool = typer.Option(False, "--header", help="Include a Front/Back/Deck header row"),
) -> None:
    """Export cards as Anki-importable TSV."""
    from cardsmith.export import cards_to_tsv, export_filename

    content = cards_to_tsv(_load_cards(path), include_header=header)
    _write_or_print(content, output or Path(export_filename()))


@export_app.command("markdown")
def export_markdown(
    path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, allow_dash=True, help="Cards or questions JSON file"
    ),
    as_questions: bool = typer.Option(False, "--questions", "-q", help="Input holds questions"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Markdown output path ('-' for stdout, default <kind>-<date>.md)"
    ),
) -> None:
    """Export cards (grouped by deck) or questions (grouped by topic) as Markdown."""
    from cardsmith.export import cards_to_markdown, markdown_filename, questions_to_markdown

    if as_questions:
        content = questions_to_markdown(_load_questions(path))
        default_name = markdown_filename("questions")
    else:
        content = cards_to_markdown(_load_cards(path))
        default_name = markdown_filename("flashcards")
    _write_or_print(content, output or Path(default_name))


@import_app.command("tsv")
def import_tsv(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, allow_dash=True, help="Anki TSV/TXT file"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Save cards as JSON"),
    resave: bool = typer.Option(
        False, "--resave", help="Write the cleaned cards back as TSV (<name>-<date>.txt)"
    ),
) -> None:
    """Read an Anki TSV file back into cards."""
    from cardsmith.export import cards_to_tsv, import_filename, parse_tsv

    try:
        cards = parse_tsv(_read_text(path))
    except CardsmithError as e:
        _fail(e)

    _show_cards(cards, title=f"Imported from {path.name}")
    _dump_records(cards, output)
    if resave:
        _write_or_print(cards_to_tsv(cards, include_header=True), Path(import_filename(path.name)))


# ========================================
# INFO COMMANDS
# ========================================


@app.command("info")
def show_info() -> None:
    """Show configuration."""
    settings = get_settings()

    table = Table(title="cardsmith Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Claude Model", settings.claude_model)
    table.add_row("Anthropic API Key", "***" if settings.anthropic_api_key else "Not set")
    table.add_row("Anthropic API URL", settings.anthropic_api_url)
    table.add_row("Mochi API Key", "***" if settings.mochi_api_key else "Not set")
    table.add_row("Mochi API URL", settings.mochi_api_url)
    table.add_row("Mochi Upload Workers", str(settings.mochi_upload_workers))
    table.add_row("Log Level", settings.log_level)

    console.print(table)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint(f"[bold]cardsmith[/bold] v{__version__}")
    rprint("  Selected text -> Claude -> flashcards / questions")


def main() -> None:
    """Entry point for the CLI."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
