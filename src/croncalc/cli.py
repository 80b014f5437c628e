"""Command-line interface for croncalc.

Commands:
    croncalc next EXPRESSION      next occurrences after an instant
    croncalc previous EXPRESSION  previous occurrences before an instant
    croncalc match EXPRESSION     check whether an instant is an occurrence
    croncalc validate EXPRESSION  show the normalized fields of an expression
"""

from __future__ import annotations

import functools
import json
import logging
from datetime import datetime
from typing import Annotated, Any, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from croncalc.config import get_config
from croncalc.cron import Cron
from croncalc.errors import CronError
from croncalc.types import Direction

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="croncalc",
    help="Parse cron expressions and calculate when they fire",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

F = TypeVar("F", bound=Callable[..., Any])

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


# =============================================================================
# Error Handling
# =============================================================================


class CLIError(Exception):
    """Error reported to the user with a non-zero exit code."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


def error_boundary(func: F) -> F:
    """Report croncalc and CLI errors on stderr and exit with code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except CLIError as e:
            typer.echo(typer.style(f"Error: {e.message}", fg="red"), err=True)
            if e.hint:
                typer.echo(typer.style(f"Hint: {e.hint}", fg="yellow"), err=True)
            raise typer.Exit(1)
        except CronError as e:
            logger.debug("Command failed", exc_info=True)
            typer.echo(typer.style(f"Error: {e}", fg="red"), err=True)
            raise typer.Exit(1)

    return wrapper  # type: ignore


def _parse_instant(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise CLIError(
            f"Invalid instant: {value!r}",
            hint="Use ISO 8601, e.g. 2022-01-01T12:00:00",
        ) from None


# =============================================================================
# Type Aliases
# =============================================================================

ExpressionArg = Annotated[str, typer.Argument(help="Cron expression with 5 or 6 fields")]

FromOpt = Annotated[
    Optional[str],
    typer.Option("--from", "-f", help="Start instant in ISO 8601 (default: now, UTC)"),
]

CountOpt = Annotated[
    int,
    typer.Option("--count", "-n", min=1, help="Number of occurrences to show"),
]

JsonOpt = Annotated[
    bool,
    typer.Option("--json", help="Print occurrences as a JSON list"),
]


# =============================================================================
# Commands
# =============================================================================


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Parse cron expressions and calculate when they fire."""
    try:
        level = get_config().log_level_value
    except CronError as e:
        typer.echo(typer.style(f"Error: {e}", fg="red"), err=True)
        raise typer.Exit(1)
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _show_occurrences(
    expression: str,
    start: str | None,
    count: int,
    as_json: bool,
    direction: Direction,
) -> None:
    cron = Cron.parse(expression)
    occurrences = cron.stream(_parse_instant(start), direction).take(count)

    if as_json:
        typer.echo(json.dumps([occurrence.isoformat() for occurrence in occurrences], indent=2))
        return

    if not occurrences:
        typer.echo("No occurrences found.")
        return

    table = Table(title=f"{direction.value.capitalize()} occurrences of {cron.expression}")
    table.add_column("#", justify="right")
    table.add_column("Instant")
    table.add_column("Weekday")
    for index, occurrence in enumerate(occurrences, start=1):
        table.add_row(str(index), occurrence.isoformat(), WEEKDAY_NAMES[occurrence.weekday()])
    console.print(table)


@app.command(name="next")
@error_boundary
def next_cmd(
    expression: ExpressionArg,
    start: FromOpt = None,
    count: CountOpt = 1,
    as_json: JsonOpt = False,
) -> None:
    """Show the next occurrences of an expression."""
    _show_occurrences(expression, start, count, as_json, Direction.FORWARD)


@app.command(name="previous")
@error_boundary
def previous_cmd(
    expression: ExpressionArg,
    start: FromOpt = None,
    count: CountOpt = 1,
    as_json: JsonOpt = False,
) -> None:
    """Show the previous occurrences of an expression."""
    _show_occurrences(expression, start, count, as_json, Direction.BACKWARD)


@app.command(name="match")
@error_boundary
def match_cmd(
    expression: ExpressionArg,
    at: Annotated[
        Optional[str],
        typer.Option("--at", "-a", help="Instant to check in ISO 8601 (default: now, UTC)"),
    ] = None,
) -> None:
    """Check whether an instant is an occurrence (exit code 0 if it is)."""
    cron = Cron.parse(expression)
    if cron.matches(_parse_instant(at)):
        typer.echo("match")
        return
    typer.echo("no match")
    raise typer.Exit(1)


@app.command(name="validate")
@error_boundary
def validate_cmd(expression: ExpressionArg) -> None:
    """Validate an expression and show its normalized fields."""
    cron = Cron.parse(expression)

    table = Table(title=f"Schedule {cron.expression}")
    table.add_column("Field")
    table.add_column("Value")
    table.add_column("Any")
    for field_type, value in cron.schedule.fields().items():
        table.add_row(
            field_type.value,
            str(value),
            "yes" if cron.schedule.is_any(field_type) else "",
        )
    console.print(table)


if __name__ == "__main__":
    app()
