# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Calendar helpers for SMB Cashflow.

All engine computations agree on a single notion of "today": the ``now``
date passed by the caller. This module turns that date into the windows the
engine needs:

- the current calendar month (current-month income and expenses),
- the trailing burn window (``now`` minus 3 months, day clamped, up to
  ``now`` inclusive),
- the sequence of calendar months used by the monthly history,
- month offsets ("how many months ago") used by silent-killer detection.

Only ``_today()`` reads the system clock; it is used by the orchestration
layer when no date is provided, never by the individual calculators.
"""

from calendar import monthrange
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .models import Transaction

# Fixed English abbreviations so labels do not depend on the process locale.
MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


@dataclass(frozen=True)
class Period:
    """Represents an inclusive date range with a human-readable label."""

    start: date
    end: date
    label: str

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def _today() -> date:
    """Return today's date as a date object (isolated for easier testing)."""
    return datetime.today().date()


def resolve_now(now: Optional[date] = None) -> date:
    """Return ``now`` as a date, defaulting to today."""
    if now is None:
        return _today()
    if isinstance(now, datetime):
        return now.date()
    return now


def shift_months(day: date, months: int) -> date:
    """
    Move ``day`` by a number of calendar months.

    The day of month is clamped to the length of the target month, so
    2025-05-31 shifted by -3 months gives 2025-02-28.
    """
    index = day.year * 12 + (day.month - 1) + months
    year, month_index = divmod(index, 12)
    month = month_index + 1
    last_day = monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def month_key(day: date) -> str:
    """Return the 'YYYY-MM' key of the month containing ``day``."""
    return f"{day.year:04d}-{day.month:02d}"


def month_label(day: date) -> str:
    """Return the short month name of ``day`` (e.g. 'Oct')."""
    return MONTH_ABBREVIATIONS[day.month - 1]


def months_ago(day: date, now: date) -> int:
    """
    Number of calendar months between the month of ``day`` and the month of
    ``now`` (0 for the current month, negative for future months).
    """
    return (now.year - day.year) * 12 + (now.month - day.month)


def is_current_month(day: date, now: date) -> bool:
    return day.year == now.year and day.month == now.month


def current_month_period(now: date) -> Period:
    """Full calendar month containing ``now``."""
    start = now.replace(day=1)
    end = now.replace(day=monthrange(now.year, now.month)[1])
    return Period(start=start, end=end, label=f"Month {month_key(now)}")


def trailing_period(now: date, months: int) -> Period:
    """
    Rolling window of ``months`` months ending on ``now`` (inclusive).

    The window is not aligned on calendar months: for ``now`` = 2025-10-18
    and 3 months it spans 2025-07-18 → 2025-10-18.
    """
    if months < 0:
        raise ValueError("Trailing window length cannot be negative.")
    return Period(
        start=shift_months(now, -months),
        end=now,
        label=f"Trailing {months} months",
    )


def month_starts(now: date, count: int) -> list[date]:
    """
    First day of the ``count`` calendar months ending with the month of
    ``now``, oldest first.
    """
    if count < 0:
        raise ValueError("Number of months cannot be negative.")
    first = now.replace(day=1)
    return [shift_months(first, -offset) for offset in range(count - 1, -1, -1)]


def filter_transactions_by_period(
    transactions: Iterable[Transaction],
    period: Period,
) -> list[Transaction]:
    """Keep only transactions dated within [period.start, period.end]."""
    return [t for t in transactions if period.contains(t.date)]
