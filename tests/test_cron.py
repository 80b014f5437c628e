"""Tests for the public Cron API."""

from datetime import datetime, timedelta, timezone

import pytest

from croncalc import (
    Cron,
    CronParseError,
    Direction,
    UnsupportedTimezoneError,
    is_valid_expression,
    validate_expression,
)
from croncalc.cron import to_naive, utc_now


def is_monday(instant):
    return instant.weekday() == 0


def is_weekday(instant):
    return instant.isoweekday() <= 5


class TestCron:
    def test_parse(self):
        cron = Cron.parse("0 12 * * *")
        assert cron.expression == "0 12 * * *"
        assert cron.schedule.expression == "0 12 * * *"
        assert repr(cron) == "Cron('0 12 * * *')"
        assert str(cron) == "0 12 * * *"

    def test_equality(self):
        assert Cron.parse("0 12 * * *") == Cron.parse("0 12 * * *")
        assert Cron.parse("0 12 * * *") != Cron.parse("0 13 * * *")
        assert len({Cron.parse("0 12 * * *"), Cron.parse("0 12 * * *")}) == 1

    def test_parse_error(self):
        with pytest.raises(CronParseError):
            Cron.parse("invalid")


class TestNextPrevious:
    def test_next(self):
        cron = Cron.parse("0 0 0 * * *")
        assert cron.next(datetime(2022, 1, 1, 12)) == datetime(2022, 1, 2)
        assert cron.next(datetime(2022, 1, 2)) == datetime(2022, 1, 3)

    def test_previous(self):
        cron = Cron.parse("0 0 0 * * *")
        assert cron.previous(datetime(2022, 1, 1, 12)) == datetime(2022, 1, 1)
        assert cron.previous(datetime(2022, 1, 1)) == datetime(2021, 12, 31)

    def test_utc_input_gives_utc_output(self):
        """Test aware UTC datetimes are accepted and returned aware."""
        cron = Cron.parse("0 0 0 * * *")
        result = cron.next(datetime(2022, 1, 1, 12, tzinfo=timezone.utc))
        assert result == datetime(2022, 1, 2, tzinfo=timezone.utc)
        assert result.tzinfo is timezone.utc

    def test_zero_offset_is_utc(self):
        zero = timezone(timedelta(0), "Z")
        result = Cron.parse("0 0 0 * * *").previous(datetime(2022, 1, 1, 12, tzinfo=zero))
        assert result == datetime(2022, 1, 1, tzinfo=zero)

    def test_non_utc_rejected(self):
        cron = Cron.parse("0 0 0 * * *")
        plus_two = timezone(timedelta(hours=2))
        with pytest.raises(UnsupportedTimezoneError):
            cron.next(datetime(2022, 1, 1, tzinfo=plus_two))
        with pytest.raises(ValueError):
            cron.matches(datetime(2022, 1, 1, tzinfo=plus_two))

    def test_defaults_to_now(self):
        """Test next and previous default to the current UTC time."""
        cron = Cron.parse("* * * * * *")
        before = utc_now().replace(microsecond=0)
        after_next = cron.next()
        assert after_next.tzinfo is None
        assert before < after_next <= utc_now() + timedelta(seconds=2)
        assert cron.previous() < utc_now()

    def test_not_a_datetime(self):
        with pytest.raises(TypeError):
            Cron.parse("* * * * *").next("2022-01-01")


class TestMatches:
    def test_matches(self):
        cron = Cron.parse("0 * * * *")
        assert not cron.matches(datetime(2022, 1, 1, 6, 41, 39))
        assert cron.matches(datetime(2022, 1, 1, 13))
        assert cron.matches(datetime(2022, 1, 1, 13, 0, 0, 999000))
        assert cron.matches(datetime(2022, 1, 1, 13, tzinfo=timezone.utc))

    def test_every_second_matches_now(self):
        assert Cron.parse("* * * * * *").matches()


class TestUntilSince:
    def test_until(self):
        cron = Cron.parse("0 0 0 * * *")
        assert cron.until(datetime(2022, 1, 1, 12)) == 43_200_000
        assert cron.until(datetime(2022, 1, 1)) == 86_400_000
        assert cron.until(datetime(2022, 1, 1, 0, 0, 0, 999000)) == 86_399_001

    def test_since(self):
        cron = Cron.parse("0 0 0 * * *")
        assert cron.since(datetime(2022, 1, 2)) == 86_400_000
        assert cron.since(datetime(2022, 1, 2, 0, 1)) == 60_000
        assert cron.since(datetime(2022, 1, 2, 0, 1, 0, 999000)) == 60_999
        assert cron.since(datetime(2022, 1, 2, 0, 0, 0, 999000)) == 86_400_999

    def test_until_aware(self):
        cron = Cron.parse("0 0 0 * * *")
        assert cron.until(datetime(2022, 1, 1, 12, tzinfo=timezone.utc)) == 43_200_000

    def test_defaults_to_now(self):
        cron = Cron.parse("* * * * * *")
        assert 0 < cron.until() <= 1000
        assert 1000 <= cron.since() < 2000


class TestWhile:
    """Tests for predicate-filtered occurrences."""

    def test_next_while(self):
        cron = Cron.parse("0 0 29 2 *")
        assert cron.next_while(is_monday, datetime(2022, 1, 1)) == datetime(2044, 2, 29)
        assert cron.next_while(is_monday, datetime(2044, 2, 29)) == datetime(2072, 2, 29)

    def test_previous_while(self):
        cron = Cron.parse("0 0 29 2 *")
        assert cron.previous_while(is_monday, datetime(2022, 1, 1)) == datetime(2016, 2, 29)
        assert cron.previous_while(is_monday, datetime(2016, 2, 29)) == datetime(1988, 2, 29)

    def test_until_while(self):
        cron = Cron.parse("0 0 29 2 *")
        assert cron.until_while(is_monday, datetime(2022, 1, 1)) == 699_321_600_000
        assert cron.until_while(is_monday, datetime(2044, 2, 28, 23, 59, 59, 100000)) == 900

    def test_since_while(self):
        cron = Cron.parse("0 0 29 2 *")
        assert cron.since_while(is_monday, datetime(2022, 1, 1)) == 184_291_200_000
        assert cron.since_while(is_monday, datetime(2016, 2, 29, 0, 0, 1, 999000)) == 1999

    def test_weekdays(self):
        cron = Cron.parse("0 30 12 * * *")
        assert cron.next_while(is_weekday, datetime(2022, 1, 1)) == datetime(2022, 1, 3, 12, 30)
        assert cron.until_while(is_weekday, datetime(2022, 1, 1)) == 217_800_000
        assert cron.previous_while(is_weekday, datetime(2022, 1, 2)) == datetime(2021, 12, 31, 12, 30)
        assert cron.since_while(is_weekday, datetime(2022, 1, 2)) == 127_800_000

    def test_aware(self):
        cron = Cron.parse("0 30 12 * * *")
        result = cron.next_while(is_weekday, datetime(2022, 1, 1, tzinfo=timezone.utc))
        assert result == datetime(2022, 1, 3, 12, 30, tzinfo=timezone.utc)

    def test_never_accepted(self):
        """Test a predicate that never holds ends with None."""
        cron = Cron.parse("1 1 1 1 1 *")
        never = lambda _: False  # noqa: E731
        assert cron.next_while(never, datetime(2022, 1, 1)) is None
        assert cron.previous_while(never, datetime(2022, 1, 1)) is None
        assert cron.until_while(never, datetime(2022, 1, 1)) is None
        assert cron.since_while(never, datetime(2022, 1, 1)) is None


class TestStream:
    def test_forward(self):
        cron = Cron.parse("0 0 12 1 * *")
        assert cron.stream(datetime(2022, 6, 5)).take(2) == [
            datetime(2022, 7, 1, 12),
            datetime(2022, 8, 1, 12),
        ]

    def test_backward_by_name(self):
        cron = Cron.parse("0 0 12 1 * *")
        assert cron.stream(datetime(2022, 6, 5), "desc").take(1) == [datetime(2022, 6, 1, 12)]
        assert cron.stream(datetime(2022, 6, 5), Direction.BACKWARD).direction is Direction.BACKWARD

    def test_aware_start_gives_naive_results(self):
        cron = Cron.parse("0 0 12 1 * *")
        first = cron.stream(datetime(2022, 6, 5, tzinfo=timezone.utc)).take(1)[0]
        assert first == datetime(2022, 7, 1, 12)
        assert first.tzinfo is None

    def test_default_start(self):
        cron = Cron.parse("* * * * * *")
        assert cron.stream().take(1)[0] > utc_now() - timedelta(seconds=2)

    def test_invalid_arguments(self):
        cron = Cron.parse("* * * * *")
        with pytest.raises(ValueError):
            cron.stream(datetime(2022, 1, 1), "sideways")
        with pytest.raises(TypeError):
            cron.stream("2022-01-01")


class TestToNaive:
    def test_truncates(self):
        assert to_naive(datetime(2022, 1, 1, 1, 2, 3, 999999)) == datetime(2022, 1, 1, 1, 2, 3)

    def test_strips_utc(self):
        result = to_naive(datetime(2022, 1, 1, tzinfo=timezone.utc))
        assert result == datetime(2022, 1, 1)
        assert result.tzinfo is None


class TestValidation:
    def test_validate_expression(self):
        assert validate_expression("0 12 * * *") == []
        errors = validate_expression("* * 31 2 *")
        assert len(errors) == 1
        assert "Unreachable" in errors[0]

    def test_is_valid_expression(self):
        assert is_valid_expression("*/5 * * * * *")
        assert not is_valid_expression("* * * *")
        assert not is_valid_expression("60 * * * *")
