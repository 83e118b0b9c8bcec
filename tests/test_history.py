from datetime import date

import pytest

from smb_cashflow.history import (
    FRAME_COLUMNS,
    build_monthly_history,
    transactions_to_frame,
)
from smb_cashflow.models import Transaction

NOW = date(2025, 10, 18)


def _tx(kind: str, amount: float, day: date) -> Transaction:
    return Transaction(
        id=f"{kind}-{day.isoformat()}",
        kind=kind,  # type: ignore[arg-type]
        amount=amount,
        date=day,
        category="other",
    )


def test_transactions_to_frame_empty_is_well_formed() -> None:
    frame = transactions_to_frame([])

    assert frame.empty
    assert list(frame.columns) == list(FRAME_COLUMNS)


def test_empty_history_lists_every_month_with_zero_totals() -> None:
    history = build_monthly_history([], NOW, months=6)

    assert [m.month_key for m in history] == [
        "2025-05",
        "2025-06",
        "2025-07",
        "2025-08",
        "2025-09",
        "2025-10",
    ]
    assert [m.label for m in history] == ["May", "Jun", "Jul", "Aug", "Sep", "Oct"]
    assert all(m.income == 0 and m.expenses == 0 for m in history)


def test_history_groups_by_calendar_month_and_walks_balance_backward() -> None:
    txs = [
        _tx("income", 1000, date(2025, 10, 2)),
        _tx("income", 500, date(2025, 10, 30)),  # later this month, same bucket
        _tx("expense", 400, date(2025, 9, 30)),
        _tx("expense", 250, date(2025, 3, 1)),  # outside the window
    ]

    history = build_monthly_history(txs, NOW, months=3, closing_balance=5000.0)

    assert [m.month_key for m in history] == ["2025-08", "2025-09", "2025-10"]
    assert [m.income for m in history] == [0, 0, 1500]
    assert [m.expenses for m in history] == [0, 400, 0]
    # Oct anchor 5000; Sep = 5000 - 1500 + 0; Aug = 3500 - 0 + 400
    assert [m.balance for m in history] == pytest.approx([3900, 3500, 5000])


def test_history_never_double_counts_transactions() -> None:
    txs = [_tx("income", 100.0 * (i + 1), date(2025, 5 + i % 6, 1)) for i in range(12)]

    history = build_monthly_history(txs, NOW, months=6)

    assert sum(m.income for m in history) == pytest.approx(sum(t.amount for t in txs))


def test_history_crosses_year_boundary() -> None:
    history = build_monthly_history([], date(2026, 1, 10), months=3)

    assert [m.month_key for m in history] == ["2025-11", "2025-12", "2026-01"]


def test_zero_months_gives_empty_history() -> None:
    assert build_monthly_history([], NOW, months=0) == []


def test_negative_months_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_monthly_history([], NOW, months=-1)
