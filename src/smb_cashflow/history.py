# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Monthly history aggregation.

Every trend or volatility computation in the engine looks across calendar
months rather than at a single snapshot. This module builds that view:

1. ``transactions_to_frame()`` turns the transaction list into a long-format
   pandas DataFrame (one row per transaction).

2. ``build_monthly_history()`` groups the frame by calendar month and kind
   and returns one ``MonthlyTotals`` per month of the requested window,
   oldest first:

   - the window is the ``months`` calendar months ending with the month of
     ``now``;
   - months without transactions still appear, with zero totals;
   - a transaction belongs to exactly one month (the calendar month of its
     date), so nothing is double-counted;
   - transactions outside the window are ignored.

   Each entry also carries an end-of-month balance. The anchor balance is
   the balance *now* (end of the current month); earlier balances are
   obtained by walking backward:

       balance[m - 1] = balance[m] - income[m] + expenses[m]
"""

import logging
from collections.abc import Iterable
from datetime import date

import pandas as pd

from .models import MonthlyTotals, Transaction
from .periods import month_key, month_label, month_starts

logger = logging.getLogger(__name__)

FRAME_COLUMNS: tuple[str, ...] = (
    "id",
    "kind",
    "amount",
    "date",
    "category",
    "is_recurring",
    "burn_category",
    "is_founder_draw",
)


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """
    Build a long-format DataFrame from transactions.

    Returns:
        A DataFrame with columns:
            id, kind, amount (float), date (datetime64[ns]), category,
            is_recurring, burn_category, is_founder_draw
        An empty input yields an empty but well-formed DataFrame.
    """
    rows = [
        {
            "id": t.id,
            "kind": t.kind,
            "amount": float(t.amount),
            "date": pd.Timestamp(t.date),
            "category": t.category,
            "is_recurring": bool(t.is_recurring),
            "burn_category": t.effective_burn_category,
            "is_founder_draw": t.is_founder_draw_expense,
        }
        for t in transactions
    ]
    frame = pd.DataFrame(rows, columns=list(FRAME_COLUMNS))
    frame["amount"] = frame["amount"].astype(float)
    frame["date"] = pd.to_datetime(frame["date"])
    return frame


def build_monthly_history(
    transactions: Iterable[Transaction],
    now: date,
    months: int = 6,
    closing_balance: float = 0.0,
) -> list[MonthlyTotals]:
    """
    Aggregate transactions into calendar-month income/expense totals.

    Args:
        transactions: Transactions to aggregate (left untouched).
        now: Reference date; its month is the last month of the window.
        months: Number of calendar months in the window.
        closing_balance: Balance at the end of the current month, used as
            the anchor of the backward balance walk.

    Returns:
        A list of ``months`` MonthlyTotals, oldest first.

    Raises:
        ValueError: if ``months`` is negative.
    """
    starts = month_starts(now, months)
    if not starts:
        return []

    window = pd.period_range(start=month_key(starts[0]), periods=months, freq="M")
    frame = transactions_to_frame(transactions)

    if frame.empty:
        totals = pd.DataFrame(0.0, index=window, columns=["income", "expense"])
    else:
        frame["month"] = frame["date"].dt.to_period("M")
        in_window = frame[frame["month"].isin(window)]
        if in_window.empty:
            totals = pd.DataFrame(0.0, index=window, columns=["income", "expense"])
        else:
            totals = (
                in_window.groupby(["month", "kind"])["amount"]
                .sum()
                .unstack("kind", fill_value=0.0)
                .reindex(index=window, columns=["income", "expense"], fill_value=0.0)
            )

    incomes = [float(v) for v in totals["income"].tolist()]
    expenses = [float(v) for v in totals["expense"].tolist()]

    # Backward walk from the anchor balance (end of the current month).
    balances = [0.0] * len(starts)
    balances[-1] = float(closing_balance)
    for i in range(len(starts) - 1, 0, -1):
        balances[i - 1] = balances[i] - incomes[i] + expenses[i]

    history = [
        MonthlyTotals(
            month_key=month_key(start),
            label=month_label(start),
            income=incomes[i],
            expenses=expenses[i],
            balance=balances[i],
        )
        for i, start in enumerate(starts)
    ]

    logger.debug(
        "Monthly history built for %s → %s (%d months)",
        history[0].month_key,
        history[-1].month_key,
        len(history),
    )
    return history
