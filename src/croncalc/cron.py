"""Public cron API.

Cron wraps a parsed Schedule and takes care of everything around the
calculation: defaulting to the current time, truncating to whole seconds
and converting UTC datetimes to and from the naive instants the calculator
works on.

Example:
    >>> cron = Cron.parse("0 12 * * *")
    >>> cron.next(datetime(2021, 12, 6, 22, 11, 44))
    datetime.datetime(2021, 12, 7, 12, 0)
    >>> cron.stream(datetime(2021, 12, 6), Direction.BACKWARD).take(2)
    [datetime.datetime(2021, 12, 5, 12, 0), datetime.datetime(2021, 12, 4, 12, 0)]
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from croncalc import calc
from croncalc.errors import CronParseError, UnsupportedTimezoneError
from croncalc.parser import parse_expression
from croncalc.schedule import Schedule
from croncalc.sequence import OccurrenceSequence
from croncalc.types import Direction

Predicate = Callable[[datetime], object]


def utc_now() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive(value: datetime) -> datetime:
    """Naive, whole-second instant for a naive or UTC datetime.

    Raises:
        TypeError: If value is not a datetime.
        UnsupportedTimezoneError: If value has a non-zero UTC offset.
    """
    if not isinstance(value, datetime):
        raise TypeError(f"Expected a datetime, got {value!r}")
    if value.tzinfo is not None:
        if value.utcoffset() != timedelta(0):
            raise UnsupportedTimezoneError(
                f"Only UTC datetimes are supported, got offset {value.utcoffset()}"
            )
        value = value.replace(tzinfo=None)
    return value.replace(microsecond=0)


def _like(result: datetime, original: datetime) -> datetime:
    """Give a naive result the timezone of the instant it was computed from."""
    return result.replace(tzinfo=original.tzinfo)


def _milliseconds(delta: timedelta) -> int:
    return delta // timedelta(milliseconds=1)


class Cron:
    """Parsed cron expression with next/previous occurrence calculation.

    Cron is immutable and thread-safe.

    Example:
        >>> cron = Cron.parse("0 0 0 * * *")
        >>> cron.next(datetime(2022, 1, 1, 12))
        datetime.datetime(2022, 1, 2, 0, 0)
        >>> cron.previous(datetime(2022, 1, 1, 12))
        datetime.datetime(2022, 1, 1, 0, 0)
    """

    __slots__ = ("_schedule",)

    def __init__(self, schedule: Schedule) -> None:
        self._schedule = schedule

    @classmethod
    def parse(cls, expression: str) -> "Cron":
        """Parse a cron expression.

        Args:
            expression: Cron expression with 5 or 6 fields.

        Returns:
            Parsed Cron.

        Raises:
            CronParseError: If expression is invalid.
        """
        return cls(parse_expression(expression))

    @property
    def expression(self) -> str:
        """Get original expression string."""
        return self._schedule.expression

    @property
    def schedule(self) -> Schedule:
        return self._schedule

    # -------------------------------------------------------------------------
    # Single occurrences
    # -------------------------------------------------------------------------

    def next(self, after: datetime | None = None) -> datetime:
        """Get the next occurrence strictly after ``after``.

        Args:
            after: Naive or UTC datetime (default: now).

        Returns:
            Next occurrence, aware when ``after`` is aware.
        """
        return self._step(after, Direction.FORWARD)

    def previous(self, before: datetime | None = None) -> datetime:
        """Get the previous occurrence strictly before ``before``.

        Args:
            before: Naive or UTC datetime (default: now).

        Returns:
            Previous occurrence, aware when ``before`` is aware.
        """
        return self._step(before, Direction.BACKWARD)

    def matches(self, at: datetime | None = None) -> bool:
        """Check if a datetime (truncated to seconds) is an occurrence."""
        instant = utc_now() if at is None else to_naive(at)
        return calc.matches(instant, self._schedule)

    def until(self, after: datetime | None = None) -> int:
        """Milliseconds from ``after`` to the next occurrence."""
        after = utc_now() if after is None else after
        return _milliseconds(self.next(after) - after)

    def since(self, before: datetime | None = None) -> int:
        """Milliseconds from the previous occurrence to ``before``."""
        before = utc_now() if before is None else before
        return _milliseconds(before - self.previous(before))

    def _step(self, instant: datetime | None, direction: Direction) -> datetime:
        if instant is None:
            return calc.step(utc_now(), self._schedule, direction)
        return _like(calc.step(to_naive(instant), self._schedule, direction), instant)

    # -------------------------------------------------------------------------
    # Sequences
    # -------------------------------------------------------------------------

    def stream(
        self,
        start: datetime | None = None,
        direction: Direction | str = Direction.FORWARD,
    ) -> OccurrenceSequence:
        """Create a lazy sequence of occurrences.

        Args:
            start: Start after (forward) or before (backward) this instant
                (default: now). Results are always naive.
            direction: Direction or one of "forward", "asc", "backward", "desc".

        Returns:
            OccurrenceSequence.

        Raises:
            TypeError: If start is not a datetime.
            ValueError: If direction is invalid.
        """
        instant = utc_now() if start is None else to_naive(start)
        return OccurrenceSequence(self._schedule, instant, direction)

    def next_while(self, predicate: Predicate, after: datetime | None = None) -> datetime | None:
        """Get the next occurrence for which ``predicate`` is truthy.

        Returns:
            The occurrence (aware when ``after`` is aware), or None when the
            sequence ends without one.
        """
        return self._first(predicate, after, Direction.FORWARD)

    def previous_while(self, predicate: Predicate, before: datetime | None = None) -> datetime | None:
        """Get the previous occurrence for which ``predicate`` is truthy.

        Returns:
            The occurrence (aware when ``before`` is aware), or None when the
            sequence ends without one.
        """
        return self._first(predicate, before, Direction.BACKWARD)

    def until_while(self, predicate: Predicate, after: datetime | None = None) -> int | None:
        """Milliseconds until the next occurrence accepted by ``predicate``."""
        after = utc_now() if after is None else after
        found = self.next_while(predicate, after)
        return None if found is None else _milliseconds(found - after)

    def since_while(self, predicate: Predicate, before: datetime | None = None) -> int | None:
        """Milliseconds since the previous occurrence accepted by ``predicate``."""
        before = utc_now() if before is None else before
        found = self.previous_while(predicate, before)
        return None if found is None else _milliseconds(before - found)

    def _first(
        self,
        predicate: Predicate,
        instant: datetime | None,
        direction: Direction,
    ) -> datetime | None:
        found = self.stream(instant, direction).first(predicate)
        if found is None or instant is None:
            return found
        return _like(found, instant)

    def __repr__(self) -> str:
        return f"Cron({self.expression!r})"

    def __str__(self) -> str:
        return self.expression

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Cron):
            return self._schedule == other._schedule
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._schedule)


# =============================================================================
# Validation Functions
# =============================================================================


def validate_expression(expression: str) -> list[str]:
    """Validate a cron expression.

    Args:
        expression: Cron expression to validate.

    Returns:
        List of validation errors (empty if valid).
    """
    errors = []

    try:
        parse_expression(expression)
    except CronParseError as e:
        errors.append(str(e))

    return errors


def is_valid_expression(expression: str) -> bool:
    """Check if a cron expression is valid.

    Args:
        expression: Cron expression to check.

    Returns:
        True if valid.
    """
    try:
        parse_expression(expression)
        return True
    except CronParseError:
        return False
