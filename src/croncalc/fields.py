"""Field grammar for cron expressions.

A cron field is parsed into one of three normalized shapes:

    Single   one legal value             "5"
    Span     inclusive contiguous range  "5-7", "*", "5,6,7"
    Members  sorted set of unique values "1,3,5", "*/15"

Every shape answers the same question for the calculator: which legal value
is nearest to an actual calendar value in a given search direction.

Syntax Reference:
    Field         Values            Named values
    ──────────────────────────────────────────────
    second        0-59
    minute        0-59
    hour          0-23
    day           1-31
    month         1-12              JAN-DEC
    day_of_week   0-6 (0 = Sunday)  SUN-SAT

    *             any value
    a,b,c         list (no whitespace)
    lo-hi         inclusive range, lo < hi
    base/step     every step-th value from base (base is *, a value or a range;
                  step is a positive value legal for the field)
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from croncalc.errors import InvalidFieldError
from croncalc.types import Direction


# =============================================================================
# Field Types
# =============================================================================


class FieldType(str, Enum):
    """The six fields of a schedule, in expression order."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    MONTH = "month"
    DAY_OF_WEEK = "day_of_week"


# =============================================================================
# Field Values
# =============================================================================


class FieldValue(ABC):
    """Normalized value of one schedule field."""

    __slots__ = ()

    @property
    @abstractmethod
    def values(self) -> tuple[int, ...]:
        """All legal values in ascending order."""

    @property
    def lower(self) -> int:
        return self.values[0]

    @property
    def upper(self) -> int:
        return self.values[-1]

    @abstractmethod
    def __contains__(self, value: object) -> bool:
        ...

    @abstractmethod
    def nearest(self, actual: int, direction: Direction) -> int:
        """Return the legal value nearest to ``actual`` in ``direction``.

        Forward this is the smallest legal value >= actual, backward the
        largest legal value <= actual. When no such value exists the result
        wraps around to the first (forward) or last (backward) legal value,
        which the caller detects as an overflow into the next unit.
        """


@dataclass(frozen=True)
class Single(FieldValue):
    value: int

    @property
    def values(self) -> tuple[int, ...]:
        return (self.value,)

    def __contains__(self, value: object) -> bool:
        return value == self.value

    def nearest(self, actual: int, direction: Direction) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Span(FieldValue):
    first: int
    last: int

    def __post_init__(self) -> None:
        if self.first > self.last:
            raise ValueError(f"Span first {self.first} exceeds last {self.last}")

    @property
    def values(self) -> tuple[int, ...]:
        return tuple(range(self.first, self.last + 1))

    @property
    def lower(self) -> int:
        return self.first

    @property
    def upper(self) -> int:
        return self.last

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.first <= value <= self.last

    def nearest(self, actual: int, direction: Direction) -> int:
        if self.first <= actual <= self.last:
            return actual
        return self.first if direction is Direction.FORWARD else self.last

    def __str__(self) -> str:
        return f"{self.first}-{self.last}"


@dataclass(frozen=True)
class Members(FieldValue):
    members: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.members:
            raise ValueError("Members needs at least one value")
        if list(self.members) != sorted(set(self.members)):
            raise ValueError(f"Members must be sorted and unique: {self.members}")

    @property
    def values(self) -> tuple[int, ...]:
        return self.members

    def __contains__(self, value: object) -> bool:
        return value in self.members

    def nearest(self, actual: int, direction: Direction) -> int:
        if direction is Direction.FORWARD:
            index = bisect_left(self.members, actual)
            return self.members[index] if index < len(self.members) else self.members[0]
        index = bisect_right(self.members, actual)
        return self.members[index - 1] if index > 0 else self.members[-1]

    def __str__(self) -> str:
        return ",".join(str(value) for value in self.members)


def unify(values: Iterable[int]) -> FieldValue:
    """Collapse integers into the most compact field value.

    Duplicates are dropped and the rest sorted. A single value becomes
    Single, one contiguous run becomes Span (a run covering the whole domain
    is therefore the wildcard), anything else stays Members.
    """
    ordered = sorted(set(values))
    if not ordered:
        raise ValueError("Cannot unify an empty set of values")
    if len(ordered) == 1:
        return Single(ordered[0])
    if ordered[-1] - ordered[0] == len(ordered) - 1:
        return Span(ordered[0], ordered[-1])
    return Members(tuple(ordered))


# =============================================================================
# Field Constraints
# =============================================================================


@dataclass(frozen=True)
class FieldConstraints:
    """Legal domain of a cron field."""

    min_value: int
    max_value: int
    names: dict[str, int] = field(default_factory=dict)

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.min_value <= value <= self.max_value

    @property
    def full_span(self) -> Span:
        """The wildcard value of this field."""
        return Span(self.min_value, self.max_value)


FIELD_CONSTRAINTS: dict[FieldType, FieldConstraints] = {
    FieldType.SECOND: FieldConstraints(0, 59),
    FieldType.MINUTE: FieldConstraints(0, 59),
    FieldType.HOUR: FieldConstraints(0, 23),
    FieldType.DAY: FieldConstraints(1, 31),
    FieldType.MONTH: FieldConstraints(
        1, 12,
        names={
            "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4,
            "MAY": 5, "JUN": 6, "JUL": 7, "AUG": 8,
            "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
        },
    ),
    FieldType.DAY_OF_WEEK: FieldConstraints(
        0, 6,
        names={
            "SUN": 0, "MON": 1, "TUE": 2, "WED": 3,
            "THU": 4, "FRI": 5, "SAT": 6,
        },
    ),
}


# =============================================================================
# Field Grammar
# =============================================================================


_INTEGER = re.compile(r"[0-9]+")
_LIST = re.compile(r".+,.+")
_STEP = re.compile(r".+/.+")
_RANGE = re.compile(r".+-.+")


def parse_field(token: str, field_type: FieldType) -> FieldValue:
    """Parse one field token.

    Forms are tried in order: wildcard, integer, list, step, range, name.

    Args:
        token: Raw field text, e.g. ``"*/15"`` or ``"MON-FRI"``.
        field_type: Field the token belongs to.

    Returns:
        Normalized field value.

    Raises:
        InvalidFieldError: If the token is not legal for the field. The
            error carries the innermost offending substring.
    """
    return _parse_term(token, field_type, FIELD_CONSTRAINTS[field_type])


def _parse_term(
    token: str,
    field_type: FieldType,
    constraints: FieldConstraints,
    *,
    in_list: bool = False,
) -> FieldValue:
    if token == "*":
        if in_list:
            raise InvalidFieldError(field_type, token)
        return constraints.full_span

    if _INTEGER.fullmatch(token):
        value = int(token)
        if value not in constraints:
            raise InvalidFieldError(field_type, token)
        return Single(value)

    if _LIST.fullmatch(token):
        return _parse_list(token, field_type, constraints)

    if _STEP.fullmatch(token):
        return _parse_step(token, field_type, constraints)

    if _RANGE.fullmatch(token):
        return _parse_range(token, field_type, constraints)

    value = constraints.names.get(token.upper())
    if value is None:
        raise InvalidFieldError(field_type, token)
    return Single(value)


def _parse_list(
    token: str,
    field_type: FieldType,
    constraints: FieldConstraints,
) -> FieldValue:
    merged: list[int] = []
    for element in token.split(","):
        merged.extend(_parse_term(element, field_type, constraints, in_list=True).values)
    return unify(merged)


def _parse_step(
    token: str,
    field_type: FieldType,
    constraints: FieldConstraints,
) -> FieldValue:
    base_text, step_text = token.split("/", 1)
    if (
        not _INTEGER.fullmatch(step_text)
        or int(step_text) <= 0
        or int(step_text) not in constraints
    ):
        raise InvalidFieldError(field_type, token)
    step = int(step_text)

    if base_text == "*":
        start, stop = constraints.min_value, constraints.max_value
    else:
        try:
            base = _parse_term(base_text, field_type, constraints)
        except InvalidFieldError:
            raise InvalidFieldError(field_type, token) from None
        if isinstance(base, Span):
            start, stop = base.first, base.last
        elif isinstance(base, Single):
            start, stop = base.value, constraints.max_value
        else:
            raise InvalidFieldError(field_type, token)

    return unify(range(start, stop + 1, step))


def _parse_range(
    token: str,
    field_type: FieldType,
    constraints: FieldConstraints,
) -> FieldValue:
    low = _parse_bound(token.split("-", 1)[0], constraints)
    high = _parse_bound(token.split("-", 1)[1], constraints)
    if low is None or high is None or low >= high:
        raise InvalidFieldError(field_type, token)
    return Span(low, high)


def _parse_bound(text: str, constraints: FieldConstraints) -> int | None:
    """Resolve a range bound (number or name), None when illegal."""
    if _INTEGER.fullmatch(text):
        value = int(text)
        return value if value in constraints else None
    return constraints.names.get(text.upper())
