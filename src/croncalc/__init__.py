"""croncalc - cron expression parser and occurrence calculator.

Parses cron expressions and computes the next or previous instant at which
a schedule fires, plus lazy sequences of firing instants in either
direction. No jobs are run; croncalc only answers "when".

Features:
    - Standard 5-field cron (minute, hour, day, month, day_of_week)
    - Extended 6-field cron with seconds
    - Lists, ranges, steps and named months and weekdays
    - Next, previous and match checks on naive or UTC datetimes
    - Restartable forward and backward occurrence sequences
    - Rejection of schedules that can never fire (e.g. 30 February)

Syntax Reference:
    Field         Values            Special Characters
    ─────────────────────────────────────────────────
    second        0-59              * / , -
    minute        0-59              * / , -
    hour          0-23              * / , -
    day           1-31              * / , -
    month         1-12 or JAN-DEC   * / , -
    day_of_week   0-6 or SUN-SAT    * / , -

    When both day and day_of_week are restricted, a day matches if it
    satisfies either of them.

Usage:
    >>> from datetime import datetime
    >>> from croncalc import Cron, Direction
    >>>
    >>> cron = Cron.parse("0 */30 12-14 1 * *")
    >>> cron.next(datetime(2021, 12, 6, 11, 22, 33))
    datetime.datetime(2022, 1, 1, 12, 0)
    >>> cron.stream(datetime(2021, 12, 6), Direction.BACKWARD).take(1)
    [datetime.datetime(2021, 12, 1, 14, 30)]
"""

from croncalc.calc import matches, resolve, step
from croncalc.config import CronConfig, get_config, load_config, reset_config
from croncalc.cron import Cron, is_valid_expression, validate_expression
from croncalc.errors import (
    ConfigError,
    CronError,
    CronParseError,
    InvalidFieldError,
    MalformedExpressionError,
    UnreachableScheduleError,
    UnsupportedTimezoneError,
)
from croncalc.fields import (
    FIELD_CONSTRAINTS,
    FieldConstraints,
    FieldType,
    FieldValue,
    Members,
    Single,
    Span,
    parse_field,
)
from croncalc.parser import CronParser, parse_expression
from croncalc.schedule import Schedule
from croncalc.sequence import OccurrenceSequence
from croncalc.types import Direction

# Version: Single source of truth from pyproject.toml
try:
    from importlib.metadata import version, PackageNotFoundError

    __version__ = version("croncalc")
except PackageNotFoundError:
    # Package not installed (development mode)
    __version__ = "0.0.0.dev"

__all__ = [
    # Core
    "Cron",
    "Schedule",
    "Direction",
    "OccurrenceSequence",
    # Parser
    "CronParser",
    "parse_expression",
    "parse_field",
    # Fields
    "FieldType",
    "FieldValue",
    "FieldConstraints",
    "FIELD_CONSTRAINTS",
    "Single",
    "Span",
    "Members",
    # Calculator
    "step",
    "resolve",
    "matches",
    # Validation
    "validate_expression",
    "is_valid_expression",
    # Configuration
    "CronConfig",
    "get_config",
    "load_config",
    "reset_config",
    # Errors
    "CronError",
    "CronParseError",
    "MalformedExpressionError",
    "InvalidFieldError",
    "UnreachableScheduleError",
    "UnsupportedTimezoneError",
    "ConfigError",
]
