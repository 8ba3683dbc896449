from datetime import UTC, datetime, timedelta, timezone

import pytest
from freezegun import freeze_time

from listings.shared.utils import MonotonicClock, ensure_utc, parse_iso_datetime

FROZEN_TIME = "2024-03-01T12:00:00Z"


class TestMonotonicClock:
    @freeze_time(FROZEN_TIME)
    def test_strictly_increasing_under_frozen_time(self):
        """
        GIVEN a wall clock that does not move
        WHEN the clock is read repeatedly
        THEN every timestamp is strictly greater than the previous one.
        """
        clock = MonotonicClock()

        stamps = [clock.now() for _ in range(5)]

        assert stamps == sorted(stamps)
        assert len(set(stamps)) == 5
        assert stamps[0] == datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
        assert stamps[-1] - stamps[0] == timedelta(microseconds=4)

    def test_wall_clock_step_back_does_not_invert_order(self):
        clock = MonotonicClock()
        with freeze_time("2024-03-01T12:00:00Z"):
            first = clock.now()
        with freeze_time("2024-03-01T11:00:00Z"):
            second = clock.now()

        assert second > first


class TestParseIsoDatetime:
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_means_absent(self, value):
        assert parse_iso_datetime(value) is None

    def test_date_only(self):
        assert parse_iso_datetime("2024-01-15") == datetime(2024, 1, 15, tzinfo=UTC)

    def test_trailing_z_and_offsets(self):
        assert parse_iso_datetime("2024-01-15T10:30:00Z") == datetime(
            2024, 1, 15, 10, 30, tzinfo=UTC
        )
        assert parse_iso_datetime("2024-01-15T12:30:00+02:00") == datetime(
            2024, 1, 15, 10, 30, tzinfo=UTC
        )

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_iso_datetime("last tuesday")


def test_ensure_utc_treats_naive_as_utc():
    naive = datetime(2024, 1, 1, 8, 0)
    aware = datetime(2024, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))

    assert ensure_utc(naive) == datetime(2024, 1, 1, 8, 0, tzinfo=UTC)
    assert ensure_utc(aware).tzinfo == UTC
    assert ensure_utc(aware).hour == 8
