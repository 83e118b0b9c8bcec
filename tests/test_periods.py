from datetime import date, datetime

import pytest

import smb_cashflow.periods as periods
from smb_cashflow.models import Transaction


def test_shift_months_clamps_day_of_month() -> None:
    assert periods.shift_months(date(2025, 5, 31), -3) == date(2025, 2, 28)
    assert periods.shift_months(date(2024, 5, 31), -3) == date(2024, 2, 29)
    assert periods.shift_months(date(2025, 1, 15), -1) == date(2024, 12, 15)
    assert periods.shift_months(date(2025, 11, 30), 3) == date(2026, 2, 28)


def test_trailing_period_is_a_rolling_window() -> None:
    p = periods.trailing_period(date(2025, 10, 18), 3)

    assert p.start == date(2025, 7, 18)
    assert p.end == date(2025, 10, 18)
    assert p.contains(date(2025, 7, 18))
    assert p.contains(date(2025, 10, 18))
    assert not p.contains(date(2025, 10, 19))


def test_trailing_period_rejects_negative_length() -> None:
    with pytest.raises(ValueError):
        periods.trailing_period(date(2025, 10, 18), -1)


def test_current_month_period() -> None:
    p = periods.current_month_period(date(2024, 2, 10))

    assert p.start == date(2024, 2, 1)
    assert p.end == date(2024, 2, 29)
    assert p.label == "Month 2024-02"


def test_month_starts_oldest_first() -> None:
    assert periods.month_starts(date(2025, 2, 20), 3) == [
        date(2024, 12, 1),
        date(2025, 1, 1),
        date(2025, 2, 1),
    ]
    assert periods.month_starts(date(2025, 2, 20), 0) == []


def test_months_ago() -> None:
    now = date(2025, 10, 18)

    assert periods.months_ago(date(2025, 10, 1), now) == 0
    assert periods.months_ago(date(2025, 7, 31), now) == 3
    assert periods.months_ago(date(2024, 10, 18), now) == 12
    assert periods.months_ago(date(2025, 11, 2), now) == -1


def test_month_key_and_label() -> None:
    assert periods.month_key(date(2025, 3, 9)) == "2025-03"
    assert periods.month_label(date(2025, 3, 9)) == "Mar"
    assert periods.is_current_month(date(2025, 3, 31), date(2025, 3, 1))
    assert not periods.is_current_month(date(2024, 3, 31), date(2025, 3, 1))


def test_resolve_now(monkeypatch: pytest.MonkeyPatch) -> None:
    """resolve_now() accepts a date, a datetime, or falls back to today."""
    monkeypatch.setattr(periods, "_today", lambda: date(2030, 1, 2))

    assert periods.resolve_now() == date(2030, 1, 2)
    assert periods.resolve_now(date(2025, 10, 18)) == date(2025, 10, 18)
    assert periods.resolve_now(datetime(2025, 10, 18, 23, 59)) == date(2025, 10, 18)


def test_filter_transactions_by_period_inclusive_bounds() -> None:
    txs = [
        Transaction(id=str(d), kind="income", amount=1, date=d, category="sales")
        for d in (
            date(2025, 1, 31),
            date(2025, 2, 1),
            date(2025, 3, 15),
            date(2025, 4, 1),
            date(2025, 4, 2),
        )
    ]
    p = periods.Period(start=date(2025, 2, 1), end=date(2025, 4, 1), label="Test")

    filtered = periods.filter_transactions_by_period(txs, p)

    assert [t.date for t in filtered] == [
        date(2025, 2, 1),
        date(2025, 3, 15),
        date(2025, 4, 1),
    ]
