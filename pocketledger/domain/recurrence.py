"""Calendar stepping for recurring rules.

Month and year steps use ``dateutil.relativedelta``, which clamps to the last
valid day of a shorter target month::

    2024-01-31 + 1 month -> 2024-02-29
    2023-01-31 + 1 month -> 2023-02-28
    2024-02-29 + 1 year  -> 2025-02-28

Clamping alone makes a series drift (Jan 31 -> Feb 28 -> Mar 28). Passing the
rule's start date as ``anchor`` restores the anchor's day-of-month whenever the
target month has room for it (Jan 31 -> Feb 28 -> Mar 31).
"""

from __future__ import annotations

from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta


class UnsupportedFrequencyError(ValueError):
    """Raised for a recurrence frequency outside daily/weekly/monthly/yearly."""


def next_occurrence(from_ts: datetime, frequency: str, anchor: datetime | None = None) -> datetime:
    """
    Return the occurrence following ``from_ts``.

    Args:
        from_ts: Timestamp of the previous occurrence.
        frequency: One of ``daily``, ``weekly``, ``monthly``, ``yearly``.
        anchor: Optional first occurrence of the series; monthly and yearly
            steps keep its day-of-month (and month, for yearly).

    Raises:
        UnsupportedFrequencyError: for any other frequency.
    """
    if frequency == "daily":
        return from_ts + timedelta(days=1)
    if frequency == "weekly":
        return from_ts + timedelta(days=7)
    if frequency == "monthly":
        if anchor is None:
            return from_ts + relativedelta(months=+1)
        # relativedelta clamps an absolute day past month end to the last day.
        return from_ts + relativedelta(months=+1, day=anchor.day)
    if frequency == "yearly":
        if anchor is None:
            return from_ts + relativedelta(years=+1)
        return from_ts + relativedelta(years=+1, month=anchor.month, day=anchor.day)
    raise UnsupportedFrequencyError(f"Unsupported recurrence frequency: {frequency!r}")


def end_of_day(ts: datetime) -> datetime:
    """Last representable instant of ``ts``'s calendar day, keeping tzinfo."""
    return ts.replace(hour=23, minute=59, second=59, microsecond=999999)
