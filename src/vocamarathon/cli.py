"""
Terminal front end.

Commands:
    vocamarathon import-words <file>  - Load a JSON vocabulary list
    vocamarathon structure            - Units and sections
    vocamarathon marathon             - Drill until every word is mastered
    vocamarathon history              - Past results
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from sqlalchemy.orm import Session

from vocamarathon.config import ensure_directories, settings
from vocamarathon.exceptions import EmptyPoolError
from vocamarathon.models.base import SessionLocal, init_db
from vocamarathon.models.drill_models import (
    Direction,
    DrillOptions,
    Feedback,
    ItemStatus,
    PoolFilter,
)
from vocamarathon.services.history_service import HistoryService
from vocamarathon.services.marathon_service import MarathonSession
from vocamarathon.services.word_service import WordService

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="vocamarathon",
    help="Vocabulary drills that run until every word is mastered",
    no_args_is_help=True,
)

SKIP_COMMAND = "/skip"
QUIT_COMMAND = "/quit"

_DOT_STYLES = {
    ItemStatus.UNSEEN: "grey50",
    ItemStatus.CORRECT: "green",
    ItemStatus.MISTAKE: "red",
    ItemStatus.UNKNOWN: "dark_orange",
}


@contextmanager
def _database() -> Generator[Session, None, None]:
    ensure_directories()
    init_db()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _progress_line(session: MarathonSession) -> Text:
    """One dot per presented word, in first-seen order."""
    current = session.current_item
    line = Text()
    for entry in session.progress_slots():
        marker = "◉" if current is not None and entry.word_id == current.id else "●"
        line.append(marker, style=_DOT_STYLES[entry.status])
    mastered = session.tracker.count(ItemStatus.CORRECT)
    line.append(f"  {mastered}/{len(session.pool)}")
    return line


def _render_feedback(feedback: Feedback) -> None:
    if feedback.outcome is ItemStatus.CORRECT:
        message = "[green]Correct![/green]"
        if feedback.is_typo:
            message += f" [yellow](typo, expected: {escape(feedback.expected)})[/yellow]"
    elif feedback.outcome is ItemStatus.UNKNOWN:
        message = f"[dark_orange]Skipped.[/dark_orange] Answer: [bold]{escape(feedback.expected)}[/bold]"
    else:
        message = f"[red]Wrong.[/red] Answer: [bold]{escape(feedback.expected)}[/bold]"
    console.print(message)


@app.command("import-words")
def import_words(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of word records"),
    lang: str = typer.Option("en", "--lang", help="Language of the list"),
) -> None:
    """Load a JSON vocabulary list into the store."""
    with _database() as db:
        try:
            count = WordService(db).import_json(path, language=lang)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(code=1)
    console.print(f"Imported [bold]{count}[/bold] words")


@app.command("structure")
def structure(
    lang: Optional[str] = typer.Option(None, "--lang", help="Only this language"),
) -> None:
    """Show units and sections."""
    with _database() as db:
        units = WordService(db).get_structure(language=lang)

    if not units:
        console.print("[yellow]No vocabulary yet.[/yellow] Use import-words first.")
        return

    table = Table(title="Vocabulary")
    table.add_column("Unit", style="cyan")
    table.add_column("Sections")
    for unit in units:
        table.add_row(unit["unit"], ", ".join(unit["sections"]))
    console.print(table)


@app.command("marathon")
def marathon(
    unit: Optional[str] = typer.Option(None, "--unit", help="Only this unit"),
    section: Optional[str] = typer.Option(None, "--section", help="Only this section"),
    lang: Optional[str] = typer.Option(None, "--lang", help="Only this language"),
    direction: str = typer.Option(settings.drill.default_direction, "--direction", help="source-target or target-source"),
    shuffle: bool = typer.Option(settings.drill.shuffle, "--shuffle/--no-shuffle", help="Shuffle the pool"),
    prioritize_mistakes: bool = typer.Option(False, "--prioritize-mistakes", help="Start with earlier mistakes"),
    limit: int = typer.Option(settings.drill.default_pool_size, "--limit", min=1, help="Maximum number of words"),
) -> None:
    """Drill until every word has been answered correctly."""
    try:
        drill_direction = Direction(direction)
    except ValueError:
        console.print(f"[red]Error:[/red] unknown direction {direction!r}")
        raise typer.Exit(code=2)

    options = DrillOptions(
        pool_filter=PoolFilter(unit=unit, section=section, language=lang),
        direction=drill_direction,
        shuffle=shuffle,
        prioritize_mistakes=prioritize_mistakes,
        size=limit,
    )

    with _database() as db:
        history_service = HistoryService(db)
        session = MarathonSession(WordService(db, history_service), history_service, options)
        try:
            session.start()
        except EmptyPoolError:
            console.print("[yellow]No words to practise.[/yellow] Check the filters or import vocabulary.")
            return

        console.print(Panel(
            f"Type the translation. [bold]{SKIP_COMMAND}[/bold] skips, [bold]{QUIT_COMMAND}[/bold] leaves.",
            title="[bold]Marathon[/bold]",
            border_style="blue",
        ))

        while not session.is_completed:
            console.print(_progress_line(session))
            try:
                answer = console.input(f"[bold]{escape(session.prompt)}[/bold] > ").strip()
            except EOFError:
                answer = QUIT_COMMAND
            if answer == QUIT_COMMAND:
                session.abandon()
                console.print("Session abandoned.")
                return
            feedback = session.skip() if answer == SKIP_COMMAND else session.submit(answer)
            _render_feedback(feedback)
            try:
                console.input("[dim]Enter for next[/dim]")
            except EOFError:
                logger.debug("Input closed while showing feedback")
            session.advance()

        summary = session.summary
        console.print(Panel(
            f"Words: [bold]{summary.items_count}[/bold]\n"
            f"Attempts: [bold]{summary.total_attempts}[/bold]\n"
            f"Words with mistakes: [bold]{len(summary.mistake_ids)}[/bold]",
            title="[bold green]Marathon complete[/bold green]",
            border_style="green",
        ))


@app.command("history")
def history(
    limit: int = typer.Option(20, "--limit", min=1, help="Number of results"),
) -> None:
    """Show past results."""
    with _database() as db:
        entries = HistoryService(db).get_history(limit=limit)
        rows = [
            (entry.created_at.strftime("%Y-%m-%d %H:%M") if entry.created_at else "",
             entry.type, str(entry.score), str(entry.total), str(len(entry.mistakes or [])))
            for entry in entries
        ]

    if not rows:
        console.print("No results yet.")
        return

    table = Table(title="History")
    for column in ("Date", "Type", "Score", "Total", "Mistakes"):
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)
