"""Cron expression parser.

Turns expression text into a validated Schedule:

    1. split on single spaces into 5 or 6 tokens (5 tokens get second "0")
    2. parse the fields in order, stopping at the first invalid one
    3. check that the day field can occur in at least one allowed month
"""

from __future__ import annotations

import logging

from croncalc.errors import (
    CronParseError,
    InvalidFieldError,
    MalformedExpressionError,
    UnreachableScheduleError,
)
from croncalc.fields import FIELD_CONSTRAINTS, FieldType, FieldValue, parse_field
from croncalc.schedule import Schedule

logger = logging.getLogger(__name__)

# Longest possible length of each month; February counts its leap-year day.
MAX_DAYS_IN_MONTH: dict[int, int] = {
    1: 31, 2: 29, 3: 31, 4: 30, 5: 31, 6: 30,
    7: 31, 8: 31, 9: 30, 10: 31, 11: 30, 12: 31,
}

# Every month, February included in leap years, has at least this many days.
DAYS_IN_EVERY_MONTH = 29


class CronParser:
    """Parser for cron expressions.

    Supports:
        - Standard 5-field cron (minute hour day month day_of_week)
        - Extended 6-field cron (second minute hour day month day_of_week)
    """

    FIELD_ORDER: tuple[FieldType, ...] = (
        FieldType.SECOND,
        FieldType.MINUTE,
        FieldType.HOUR,
        FieldType.DAY,
        FieldType.MONTH,
        FieldType.DAY_OF_WEEK,
    )

    def __init__(self, expression: str) -> None:
        """Initialize parser with expression.

        Args:
            expression: Cron expression string, kept verbatim on the schedule.
        """
        if not isinstance(expression, str):
            raise TypeError(f"Cron expression must be a string, got {type(expression).__name__}")
        self._expression = expression

    def parse(self) -> Schedule:
        """Parse the cron expression.

        Returns:
            Validated Schedule.

        Raises:
            MalformedExpressionError: Wrong number of fields.
            InvalidFieldError: A field violates its grammar or domain.
            UnreachableScheduleError: The day never occurs in the allowed months.
        """
        try:
            return self._parse()
        except CronParseError as e:
            logger.debug("Rejected cron expression %r: %s", self._expression, e)
            raise

    def _parse(self) -> Schedule:
        tokens = self._split()

        values: dict[FieldType, FieldValue] = {}
        for token, field_type in zip(tokens, self.FIELD_ORDER):
            try:
                values[field_type] = parse_field(token, field_type)
            except InvalidFieldError as e:
                raise InvalidFieldError(e.field, e.token, self._expression) from None

        if not is_reachable(values[FieldType.DAY], values[FieldType.MONTH]):
            raise UnreachableScheduleError(self._expression)

        return Schedule(
            expression=self._expression,
            **{field_type.value: value for field_type, value in values.items()},
        )

    def _split(self) -> list[str]:
        tokens = self._expression.strip().split(" ")
        if len(tokens) == 5:
            return ["0", *tokens]
        if len(tokens) == 6:
            return tokens
        raise MalformedExpressionError(self._expression)


def is_reachable(day: FieldValue, month: FieldValue) -> bool:
    """Check that the smallest allowed day exists in some allowed month."""
    if day.lower <= DAYS_IN_EVERY_MONTH:
        return True
    if month == FIELD_CONSTRAINTS[FieldType.MONTH].full_span:
        return True
    return day.lower <= max(MAX_DAYS_IN_MONTH[value] for value in month.values)


def parse_expression(expression: str) -> Schedule:
    """Parse a cron expression into a Schedule.

    Args:
        expression: Cron expression string.

    Returns:
        Validated Schedule.

    Raises:
        CronParseError: If expression is invalid.
    """
    return CronParser(expression).parse()
