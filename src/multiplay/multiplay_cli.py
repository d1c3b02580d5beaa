"""
Multiplay: terminal multiplication drill.

Commands:
- multiplay play    - Start a drill
- multiplay stats   - Show saved tally and response times
- multiplay reset   - Clear saved state
"""
from __future__ import annotations

import random
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from loguru import logger

from .config import DrillConfig, get_config
from .feedback import ConsoleCheer
from .mastery import MasteryMatrix
from .session import AnswerOutcome, DrillSession, create_engine
from .state_store import StateStore
from .tally import TallyLedger
from .timing import TimingLedger

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="multiplay",
    help="Multiplay: adaptive multiplication drill",
    no_args_is_help=True,
)
console = Console()

STATUS_STYLES = {
    "unknown": "dim",
    "in-progress": "yellow",
    "finished": "bold green",
}


# =============================================================================
# Display Helpers
# =============================================================================

def progress_bar(session: DrillSession) -> str:
    """One mark per answer this session."""
    return "".join("✅" if correct else "❌" for _, correct in session.history)


def display_problem(session: DrillSession) -> None:
    """Show the progress bar, the problem and numbered choices."""
    (a, b), choices = session.current_problem()
    lines = [f"[bold]{a} x {b} = ...[/bold]", ""]
    for i, value in enumerate(choices, 1):
        lines.append(f"  [cyan]{i}[/cyan]. {value}")

    console.print(progress_bar(session))
    console.print(Panel("\n".join(lines), border_style="cyan", padding=(1, 2)))


def display_outcome(outcome: AnswerOutcome) -> None:
    a, b = outcome.pair
    css_class = outcome.status.css_class
    status = f"[{STATUS_STYLES[css_class]}]{css_class}[/{STATUS_STYLES[css_class]}]"
    if outcome.correct:
        console.print(f"[green]Correct![/green] {a} x {b} = {a * b}  {status}")
    else:
        console.print(f"[red]Not quite.[/red] {a} x {b} = {a * b}  {status}")


def mastery_table(mastery: MasteryMatrix) -> Table:
    """Progress grid: rows are the first factor, columns the second."""
    size = mastery.config.dimension
    table = Table(title="Mastery", show_lines=False)
    table.add_column("x", style="bold")
    for b in range(size):
        table.add_column(str(b), justify="right")

    for a, row in enumerate(mastery.rows):
        cells = []
        for b, status in enumerate(row):
            style = STATUS_STYLES[status.css_class]
            cells.append(f"[{style}]{mastery.display_value((a, b))}[/{style}]")
        table.add_row(str(a), *cells)
    return table


def _display_session_summary(session: DrillSession) -> None:
    counts = session.mastery.counts()
    console.print("\n")
    console.print(Panel(
        f"[bold]Drill Complete![/bold]\n\n"
        f"Answered: {len(session.history)}\n"
        f"Accuracy: {session.accuracy * 100:.1f}%\n"
        f"Finished pairs: {counts['finished']}\n"
        f"In progress: {counts['in-progress']}",
        title="Summary",
        border_style="green",
    ))


# =============================================================================
# Commands
# =============================================================================

@app.command()
def play(
    rounds: int = typer.Option(
        0,
        "--rounds", "-r",
        help="Stop after this many answers (0 = until you quit)",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for reproducible problems",
    ),
    save: bool = typer.Option(
        True,
        "--save/--no-save",
        help="Save tally and timings after every answer",
    ),
) -> None:
    """
    Start a drill.

    Answer with the number of your choice. Enter m to show the
    mastery grid, q to quit.
    """
    config = get_config()
    store = StateStore(config.state_path)
    saved = store.load()

    seed = seed if seed is not None else config.seed
    session = create_engine(
        saved_tally=saved.tally,
        saved_timings=saved.timings,
        config=config,
        rng=random.Random(seed),
        feedback=ConsoleCheer(console),
    )

    console.print("\n[bold cyan]Multiplay[/bold cyan] - times tables", style="bold")
    console.print("=" * 40)

    try:
        while rounds <= 0 or len(session.history) < rounds:
            display_problem(session)
            session.mark_shown()
            key = Prompt.ask("[dim]Your answer[/dim]", default="", show_default=False)
            key = key.strip().lower()

            if key == "q":
                break
            if key == "m":
                console.print(mastery_table(session.mastery))
                continue

            outcome = session.select_choice(key)
            if outcome is None:
                console.print(f"[yellow]Pick 1-{len(session.choices)}[/yellow]")
                continue

            display_outcome(outcome)
            if save:
                store.save(session.serialize_tally(), session.serialize_timings())

    except KeyboardInterrupt:
        console.print("\n\n[yellow]Drill interrupted.[/yellow]")

    _display_session_summary(session)


@app.command()
def stats() -> None:
    """Show saved tally and median response times per pair."""
    config = get_config()
    saved = StateStore(config.state_path).load()
    tally = TallyLedger.from_matrix(config, saved.tally)
    timings = TimingLedger.from_matrix(config, saved.timings)

    size = config.dimension
    table = Table(title="Tally (median ms)")
    table.add_column("x", style="bold")
    for b in range(size):
        table.add_column(str(b), justify="right")

    for a in range(size):
        cells = []
        for b in range(size):
            m = tally[(a, b)]
            color = "green" if m > 0 else "red" if m < 0 else "dim"
            cells.append(f"[{color}]{m:+d}[/{color}] [dim]{timings.median((a, b)):.0f}[/dim]")
        table.add_row(str(a), *cells)

    console.print(table)


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Clear saved tally and timings for a fresh start."""
    config = get_config()
    if not confirm and not Confirm.ask("Reset ALL saved progress?", default=False):
        raise typer.Exit(0)

    if StateStore(config.state_path).delete():
        console.print("[green]Saved progress has been reset.[/green]")
    else:
        console.print("[dim]Nothing saved yet.[/dim]")


# =============================================================================
# Entry Point
# =============================================================================

def configure_logging(config: DrillConfig) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=config.log_level.upper(),
        format="<level>{message}</level>",
    )


def main() -> None:
    """CLI entry point."""
    configure_logging(get_config())
    app()


if __name__ == "__main__":
    main()
