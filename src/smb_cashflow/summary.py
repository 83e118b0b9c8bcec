# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Cash-flow summary builder.

The summary is the base snapshot every other view fans out from. Two
expense figures coexist and must not be conflated:

- ``total_expenses`` covers the current calendar month only;
- ``burn_rate`` is the sum of expenses over the trailing 3-month rolling
  window (ending on ``now``, not aligned on calendar months) divided by 3.

``current_balance`` adds the all-time net flow of the supplied transactions
to the configured starting balance, regardless of dates.
"""

import logging
import math
from collections.abc import Iterable
from datetime import date

from .models import CashFlowSummary, Transaction
from .periods import (
    current_month_period,
    filter_transactions_by_period,
    trailing_period,
)
from .policy import BURN_WINDOW_MONTHS, RUNWAY_SENTINEL

logger = logging.getLogger(__name__)


def calculate_runway(current_balance: float, burn_rate: float) -> int:
    """
    Months of runway at the given burn rate.

    Returns floor(current_balance / burn_rate), or RUNWAY_SENTINEL when
    nothing is being burnt.
    """
    if burn_rate <= 0:
        return RUNWAY_SENTINEL
    return int(math.floor(current_balance / burn_rate))


def calculate_burn_rate(transactions: Iterable[Transaction], now: date) -> float:
    """Average monthly expense over the trailing burn window ending on ``now``."""
    window = trailing_period(now, BURN_WINDOW_MONTHS)
    recent = sum(
        t.amount
        for t in filter_transactions_by_period(transactions, window)
        if t.is_expense
    )
    return recent / BURN_WINDOW_MONTHS


def calculate_cash_flow_summary(
    transactions: Iterable[Transaction],
    starting_balance: float,
    now: date,
) -> CashFlowSummary:
    """
    Build the CashFlowSummary for ``now``.

    Args:
        transactions: Transactions (any order). The collection is read once
            and never modified.
        starting_balance: Configured balance anchor.
        now: Reference date shared with the rest of the computation pass.

    Returns:
        A new CashFlowSummary.
    """
    txs = tuple(transactions)

    this_month = filter_transactions_by_period(txs, current_month_period(now))
    total_income = sum(t.amount for t in this_month if t.is_income)
    total_expenses = sum(t.amount for t in this_month if t.is_expense)

    burn_rate = calculate_burn_rate(txs, now)

    all_time_income = sum(t.amount for t in txs if t.is_income)
    all_time_expenses = sum(t.amount for t in txs if t.is_expense)
    current_balance = starting_balance + all_time_income - all_time_expenses

    summary = CashFlowSummary(
        current_balance=float(current_balance),
        total_income=float(total_income),
        total_expenses=float(total_expenses),
        net_cash_flow=float(total_income - total_expenses),
        burn_rate=float(burn_rate),
        runway_months=calculate_runway(current_balance, burn_rate),
    )
    logger.debug("Cash-flow summary for %s: %s", now.isoformat(), summary)
    return summary
