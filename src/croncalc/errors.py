"""Exceptions raised by croncalc.

Every error is terminal: it describes input that can never become valid,
so none of them is worth retrying.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from croncalc.fields import FieldType


class CronError(Exception):
    """Base exception for croncalc."""


class CronParseError(CronError, ValueError):
    """Raised when a cron expression cannot be turned into a schedule."""

    def __init__(self, message: str, expression: str = "") -> None:
        self.expression = expression
        super().__init__(message)


class MalformedExpressionError(CronParseError):
    """The expression does not split into five or six fields."""

    def __init__(self, expression: str) -> None:
        super().__init__(f"Malformed cron expression: {expression!r}", expression)


class InvalidFieldError(CronParseError):
    """One field violates its grammar or its legal domain.

    Attributes:
        field: The field the offending token belongs to.
        token: The offending substring. For a list this is the failing
            element, not the whole list.
    """

    def __init__(self, field: "FieldType", token: str, expression: str = "") -> None:
        self.field = field
        self.token = token
        super().__init__(f"Invalid {field.value}: {token!r}", expression)


class UnreachableScheduleError(CronParseError):
    """Every field is valid but the day/month combination never occurs."""

    def __init__(self, expression: str = "") -> None:
        super().__init__(
            f"Unreachable schedule, day never occurs in the allowed months: {expression!r}",
            expression,
        )


class UnsupportedTimezoneError(CronError, ValueError):
    """An aware datetime was given whose UTC offset is not zero."""


class ConfigError(CronError, ValueError):
    """A configuration value is malformed or out of range."""
