"""Temporal calculator.

Finds the nearest instant, in a search direction, that satisfies every field
of a Schedule. Fields are resolved from most to least significant:

    month -> day -> hour -> minute -> second

Each resolver either accepts the instant or moves it to the nearest legal
value of its field, resetting all finer fields to their first (forward) or
last (backward) value. Any move restarts the pass from the month, because a
coarser change can invalidate finer fields (a new month has another length,
a new day another weekday). The pass repeats until nothing moves.

All instants are naive datetimes truncated to whole seconds. Weekdays are
numbered 0 (Sunday) to 6 (Saturday).
"""

from __future__ import annotations

import calendar
from datetime import MAXYEAR, MINYEAR, datetime, timedelta
from functools import partial
from typing import Callable

from croncalc.fields import FieldType, FieldValue
from croncalc.schedule import Schedule
from croncalc.types import Direction

ONE_SECOND = timedelta(seconds=1)
ONE_DAY = timedelta(days=1)

# Field -> (values per wrap, length of one step)
_TIME_UNITS: dict[FieldType, tuple[int, timedelta]] = {
    FieldType.HOUR: (24, timedelta(hours=1)),
    FieldType.MINUTE: (60, timedelta(minutes=1)),
    FieldType.SECOND: (60, ONE_SECOND),
}

# Field -> finer datetime attributes reset when the field moves
_FINER: dict[FieldType, tuple[str, ...]] = {
    FieldType.MONTH: ("day", "hour", "minute", "second"),
    FieldType.DAY: ("hour", "minute", "second"),
    FieldType.HOUR: ("minute", "second"),
    FieldType.MINUTE: ("second",),
    FieldType.SECOND: (),
}

_FIRST = {"hour": 0, "minute": 0, "second": 0}
_LAST = {"hour": 23, "minute": 59, "second": 59}


# =============================================================================
# Calendar Helpers
# =============================================================================


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def weekday(instant: datetime) -> int:
    """Cron weekday of an instant, 0 = Sunday."""
    return (instant.weekday() + 1) % 7


def distance(actual: int, new: int, modulus: int, direction: Direction) -> int:
    """Signed number of steps from ``actual`` to ``new``.

    When ``new`` lies behind ``actual`` in the search direction the distance
    wraps through ``modulus``, e.g. seconds 50 -> 10 forward is 60 - 50 + 10.
    """
    if direction is Direction.FORWARD:
        return new - actual if new > actual else modulus - actual + new
    return new - actual if new < actual else -(modulus - new + actual)


def _year(year: int) -> int:
    if not MINYEAR <= year <= MAXYEAR:
        raise OverflowError(f"year {year} is out of range")
    return year


def _reset(instant: datetime, field_type: FieldType, direction: Direction) -> datetime:
    """Reset every field finer than ``field_type`` to its first or last value."""
    forward = direction is Direction.FORWARD
    changes: dict[str, int] = {}
    for name in _FINER[field_type]:
        if name == "day":
            changes[name] = 1 if forward else days_in_month(instant.year, instant.month)
        else:
            changes[name] = _FIRST[name] if forward else _LAST[name]
    return instant.replace(**changes)


def _first_of_next_month(instant: datetime) -> datetime:
    last = days_in_month(instant.year, instant.month)
    return datetime(instant.year, instant.month, last) + ONE_DAY


def _last_of_previous_month(instant: datetime) -> datetime:
    return datetime(instant.year, instant.month, 1) - ONE_SECOND


# =============================================================================
# Field Resolvers
# =============================================================================


def _resolve_month(instant: datetime, schedule: Schedule, direction: Direction) -> datetime:
    if schedule.is_any(FieldType.MONTH):
        return instant

    actual = instant.month
    new = schedule.month.nearest(actual, direction)
    if new == actual:
        return instant

    if direction is Direction.FORWARD:
        year = _year(instant.year + 1) if new < actual else instant.year
        return datetime(year, new, 1)
    year = _year(instant.year - 1) if new > actual else instant.year
    return datetime(year, new, days_in_month(year, new), 23, 59, 59)


def _resolve_day(instant: datetime, schedule: Schedule, direction: Direction) -> datetime:
    day_any = schedule.is_any(FieldType.DAY)
    weekday_any = schedule.is_any(FieldType.DAY_OF_WEEK)

    if day_any and weekday_any:
        return instant
    if not day_any and not weekday_any:
        return resolve_day_union(instant, schedule, direction)
    if weekday_any:
        return _resolve_day_of_month(instant, schedule.day, direction)
    return _resolve_day_of_week(instant, schedule.day_of_week, direction)


def _resolve_day_of_month(instant: datetime, value: FieldValue, direction: Direction) -> datetime:
    actual = instant.day
    new = value.nearest(actual, direction)
    if new == actual:
        return instant

    if direction is Direction.FORWARD:
        if actual < new <= days_in_month(instant.year, instant.month):
            return datetime(instant.year, instant.month, new)
        return _first_of_next_month(instant)
    if new < actual:
        return datetime(instant.year, instant.month, new, 23, 59, 59)
    return _last_of_previous_month(instant)


def _resolve_day_of_week(instant: datetime, value: FieldValue, direction: Direction) -> datetime:
    actual = weekday(instant)
    new = value.nearest(actual, direction)
    if new == actual:
        return instant

    moved = instant + distance(actual, new, 7, direction) * ONE_DAY
    return _reset(moved, FieldType.DAY, direction)


def _resolve_time(
    instant: datetime,
    schedule: Schedule,
    direction: Direction,
    *,
    field_type: FieldType,
) -> datetime:
    if schedule.is_any(field_type):
        return instant

    actual = getattr(instant, field_type.value)
    new = schedule.get(field_type).nearest(actual, direction)
    if new == actual:
        return instant

    modulus, unit = _TIME_UNITS[field_type]
    moved = instant + distance(actual, new, modulus, direction) * unit
    return _reset(moved, field_type, direction)


Resolver = Callable[[datetime, Schedule, Direction], datetime]

_RESOLVERS: tuple[Resolver, ...] = (
    _resolve_month,
    _resolve_day,
    partial(_resolve_time, field_type=FieldType.HOUR),
    partial(_resolve_time, field_type=FieldType.MINUTE),
    partial(_resolve_time, field_type=FieldType.SECOND),
)


# =============================================================================
# Public API
# =============================================================================


def resolve(instant: datetime, schedule: Schedule, direction: Direction) -> datetime:
    """Nearest instant at or beyond ``instant`` that satisfies ``schedule``.

    Unlike step(), the instant itself is returned when it already matches.

    Raises:
        OverflowError: If the search leaves the years datetime can represent.
    """
    if instant.tzinfo is not None:
        raise ValueError("The calculator works on naive datetimes")

    current = instant.replace(microsecond=0)
    changed = True
    while changed:
        changed = False
        for resolver in _RESOLVERS:
            candidate = resolver(current, schedule, direction)
            if candidate != current:
                current = candidate
                changed = True
                break
    return current


def resolve_day_union(instant: datetime, schedule: Schedule, direction: Direction) -> datetime:
    """Resolve a schedule whose day and day_of_week fields are both restricted.

    Such a schedule fires on days matching the day of month OR the weekday.
    Both alternatives are resolved on their own, each with the other field
    widened to the wildcard, and the candidate nearer in the search
    direction wins. An alternative that runs off the representable calendar
    drops out; the search only overflows when both do.
    """
    candidates: list[datetime] = []
    overflow: OverflowError | None = None
    for masked in (schedule.without(FieldType.DAY_OF_WEEK), schedule.without(FieldType.DAY)):
        try:
            candidates.append(resolve(instant, masked, direction))
        except OverflowError as e:
            overflow = e

    if not candidates:
        assert overflow is not None
        raise overflow
    if direction is Direction.FORWARD:
        return min(candidates)
    return max(candidates)


def matches(instant: datetime, schedule: Schedule) -> bool:
    """Check whether ``instant`` itself satisfies ``schedule``."""
    if (
        instant.second not in schedule.second
        or instant.minute not in schedule.minute
        or instant.hour not in schedule.hour
        or instant.month not in schedule.month
    ):
        return False

    by_day = instant.day in schedule.day
    by_weekday = weekday(instant) in schedule.day_of_week
    if not schedule.is_any(FieldType.DAY) and not schedule.is_any(FieldType.DAY_OF_WEEK):
        return by_day or by_weekday
    return by_day and by_weekday


def step(instant: datetime, schedule: Schedule, direction: Direction) -> datetime:
    """Nearest matching instant strictly after (forward) or before (backward) ``instant``.

    Args:
        instant: Naive starting instant; sub-second precision is dropped.
        schedule: Schedule to satisfy.
        direction: Search direction.

    Returns:
        The nearest matching instant, never equal to ``instant``.

    Raises:
        OverflowError: If the search leaves the years datetime can represent.
    """
    start = instant.replace(microsecond=0)
    if matches(start, schedule):
        start = start + direction.sign * ONE_SECOND
    return resolve(start, schedule, direction)
