"""
Learning Steps CLI.

A Rich terminal tool for checking how configured learning steps play out.

Commands:
- steps preview   - Show Again/Hard/Good delays for every step
- steps simulate  - Apply a sequence of answers and show each outcome
"""
from __future__ import annotations

import sys
from typing import NoReturn, Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import get_settings, parse_steps

from .progress import StepProgress
from .states import Rating, StepConfig, StepScheduler, StepState
from .steps import LearningSteps

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="steps",
    help="Learning step delay calculator",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Display Helpers
# =============================================================================


def format_delay(secs: int | None, missing: str = "graduate") -> str:
    """
    Format a delay for display.

    Args:
        secs: Delay in seconds, or None
        missing: Text shown for None

    Returns:
        Short string like "45s", "5m 30s", "1h 30m" or "2d 3h"
    """
    if secs is None:
        return missing
    if secs < 60:
        return f"{secs}s"

    units = (("d", 86400), ("h", 3600), ("m", 60), ("s", 1))
    parts = []
    rest = secs
    for suffix, size in units:
        count, rest = divmod(rest, size)
        if count or parts:
            parts.append((count, suffix))
        if len(parts) == 2:
            break
    return " ".join(f"{count}{suffix}" for count, suffix in parts if count)


def _build_scheduler(steps: Optional[str], relearn: bool) -> StepScheduler:
    """Build a scheduler from --steps, falling back to settings."""
    settings = get_settings()
    learning = settings.get_learning_steps()
    relearning = settings.get_relearning_steps()

    if steps is not None:
        if relearn:
            relearning = parse_steps(steps)
        else:
            learning = parse_steps(steps)

    return StepScheduler(StepConfig(learning_steps=learning, relearning_steps=relearning))


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]{escape(message)}[/bold red]")
    raise typer.Exit(code=1)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def preview(
    steps: Optional[str] = typer.Option(
        None,
        "--steps", "-s",
        help="Step lengths in minutes, e.g. '1,10' (default: from config)",
    ),
    relearn: bool = typer.Option(
        False,
        "--relearn", "-r",
        help="Preview relearning steps instead of learning steps",
    ),
) -> None:
    """Show the delay each answer gives at every step."""
    try:
        scheduler = _build_scheduler(steps, relearn)
    except ValueError as e:
        _fail(str(e))

    learning_steps: LearningSteps = scheduler.relearning if relearn else scheduler.learning
    kind = "Relearning" if relearn else "Learning"
    minutes = ", ".join(f"{m:g}" for m in learning_steps.steps) or "none"

    console.print(f"\n[bold cyan]{kind} steps[/bold cyan] ({minutes} min)")

    table = Table()
    table.add_column("Step", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Again", style="red")
    table.add_column("Hard", style="yellow")
    table.add_column("Good", style="green")

    total = len(learning_steps)
    for index in range(max(total, 1)):
        remaining = total - index
        state = StepState(
            remaining=StepProgress(remaining),
            relearning=relearn,
        )
        delays = scheduler.preview(state)
        table.add_row(
            str(index),
            str(remaining),
            format_delay(delays[Rating.AGAIN], missing="review"),
            format_delay(delays[Rating.HARD]),
            format_delay(delays[Rating.GOOD]),
        )

    console.print(table)


@app.command()
def simulate(
    answers: list[str] = typer.Argument(
        ...,
        help="Answers to apply in order: again, hard, good (or 1, 2, 3)",
    ),
    steps: Optional[str] = typer.Option(
        None,
        "--steps", "-s",
        help="Step lengths in minutes, e.g. '1,10' (default: from config)",
    ),
    relearn: bool = typer.Option(
        False,
        "--relearn", "-r",
        help="Start from a lapse instead of a new card",
    ),
) -> None:
    """Apply a sequence of answers to a fresh card."""
    try:
        scheduler = _build_scheduler(steps, relearn)
        ratings = [Rating.parse(answer) for answer in answers]
    except ValueError as e:
        _fail(str(e))

    start = scheduler.start_relearning() if relearn else scheduler.start_learning()
    state = start.state

    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Answer")
    table.add_column("Remaining", justify="right")
    table.add_column("Delay")

    table.add_row(
        "0",
        "start",
        str(state.remaining.steps_remaining),
        format_delay(start.delay_secs, missing="review"),
    )

    for number, rating in enumerate(ratings, start=1):
        if state.graduated:
            console.print(f"[dim]Card graduated, ignoring {len(ratings) - number + 1} answer(s)[/dim]")
            break
        outcome = scheduler.answer(state, rating)
        state = outcome.state
        table.add_row(
            str(number),
            rating.name.lower(),
            str(state.remaining.steps_remaining),
            format_delay(outcome.delay_secs),
        )

    console.print(table)
    status = "[green]graduated[/green]" if state.graduated else "[yellow]in learning[/yellow]"
    console.print(f"Final state: {status}")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[bold red]Invalid configuration:[/bold red] {escape(str(e))}")
        sys.exit(1)

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
