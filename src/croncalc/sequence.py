"""Lazy sequences of schedule occurrences."""

from __future__ import annotations

import logging
from datetime import datetime
from itertools import islice
from typing import Callable, Iterable, Iterator

from croncalc.calc import step
from croncalc.config import get_config
from croncalc.schedule import Schedule
from croncalc.types import Direction

logger = logging.getLogger(__name__)


class OccurrenceSequence(Iterable[datetime]):
    """Occurrences of a schedule, walking away from a start instant.

    Each element lies strictly beyond the previous one in the search
    direction. The sequence is restartable: every iteration starts over from
    the same start instant. It ends once an occurrence leaves the configured
    year bounds or the years datetime can represent.

    Example:
        >>> sequence = OccurrenceSequence(schedule, datetime(2022, 6, 5))
        >>> sequence.take(3)
        [datetime(2022, 7, 1, 12, 0), datetime(2022, 8, 1, 12, 0), datetime(2022, 9, 1, 12, 0)]
    """

    def __init__(
        self,
        schedule: Schedule,
        start: datetime,
        direction: Direction | str = Direction.FORWARD,
        *,
        min_year: int | None = None,
        max_year: int | None = None,
    ) -> None:
        """Initialize sequence.

        Args:
            schedule: Schedule to enumerate.
            start: Naive start instant, itself never part of the sequence.
            direction: Forward or backward.
            min_year: Lowest year an occurrence may have (default from config).
            max_year: Highest year an occurrence may have (default from config).
        """
        if not isinstance(start, datetime):
            raise TypeError(f"Invalid start instant: {start!r}")

        config = get_config()
        self._schedule = schedule
        self._start = start.replace(microsecond=0)
        self._direction = Direction.from_value(direction)
        self._min_year = config.min_year if min_year is None else min_year
        self._max_year = config.max_year if max_year is None else max_year

    @property
    def schedule(self) -> Schedule:
        return self._schedule

    @property
    def start(self) -> datetime:
        return self._start

    @property
    def direction(self) -> Direction:
        return self._direction

    def __iter__(self) -> Iterator[datetime]:
        current = self._start
        while True:
            try:
                current = step(current, self._schedule, self._direction)
            except OverflowError:
                logger.debug(
                    "Sequence for %r left the datetime range after %s",
                    self._schedule.expression,
                    current,
                )
                return
            if not self._min_year <= current.year <= self._max_year:
                logger.debug(
                    "Sequence for %r reached year bound at %s",
                    self._schedule.expression,
                    current,
                )
                return
            yield current

    def take(self, n: int) -> list[datetime]:
        """Get the first n occurrences (fewer if the sequence ends)."""
        return list(islice(self, n))

    def first(self, predicate: Callable[[datetime], object] | None = None) -> datetime | None:
        """Get the first occurrence accepted by ``predicate``, None if there is none."""
        for occurrence in self:
            if predicate is None or predicate(occurrence):
                return occurrence
        return None

    def __repr__(self) -> str:
        return (
            f"OccurrenceSequence({self._schedule.expression!r}, "
            f"{self._start.isoformat()}, {self._direction.value})"
        )
