from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pocketledger.domain.recurrence import UnsupportedFrequencyError, end_of_day, next_occurrence


def test_daily_and_weekly_steps_keep_time_of_day() -> None:
    start = datetime(2024, 3, 9, 8, 30)

    assert next_occurrence(start, "daily") == datetime(2024, 3, 10, 8, 30)
    assert next_occurrence(start, "weekly") == datetime(2024, 3, 16, 8, 30)


def test_monthly_step_clamps_to_month_end() -> None:
    assert next_occurrence(datetime(2024, 1, 31), "monthly") == datetime(2024, 2, 29)
    assert next_occurrence(datetime(2023, 1, 31), "monthly") == datetime(2023, 2, 28)
    assert next_occurrence(datetime(2024, 3, 15), "monthly") == datetime(2024, 4, 15)


def test_monthly_step_crosses_year_boundary() -> None:
    assert next_occurrence(datetime(2023, 12, 31), "monthly") == datetime(2024, 1, 31)


def test_monthly_anchor_restores_day_of_month() -> None:
    anchor = datetime(2023, 1, 31)

    # Without an anchor the series drifts to the 28th.
    assert next_occurrence(datetime(2023, 2, 28), "monthly") == datetime(2023, 3, 28)
    assert next_occurrence(datetime(2023, 2, 28), "monthly", anchor=anchor) == datetime(2023, 3, 31)
    assert next_occurrence(datetime(2023, 3, 31), "monthly", anchor=anchor) == datetime(2023, 4, 30)


def test_yearly_step_from_leap_day() -> None:
    leap_day = datetime(2024, 2, 29)

    assert next_occurrence(leap_day, "yearly") == datetime(2025, 2, 28)
    assert next_occurrence(datetime(2027, 2, 28), "yearly", anchor=leap_day) == datetime(2028, 2, 29)


def test_timezone_is_preserved() -> None:
    start = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)

    result = next_occurrence(start, "monthly")

    assert result == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)
    assert result.tzinfo is timezone.utc


@pytest.mark.parametrize("frequency", ["hourly", "biweekly", "", "Monthly"])
def test_unknown_frequency_raises(frequency: str) -> None:
    with pytest.raises(UnsupportedFrequencyError):
        next_occurrence(datetime(2024, 1, 1), frequency)


def test_unsupported_frequency_is_a_value_error() -> None:
    assert issubclass(UnsupportedFrequencyError, ValueError)


def test_end_of_day() -> None:
    assert end_of_day(datetime(2024, 3, 5, 9, 15)) == datetime(2024, 3, 5, 23, 59, 59, 999999)
