# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Income stability analysis.

Outputs:
    recurring_percentage  share of all-time income flagged as recurring
    volatility_score      coefficient of variation (population std / mean,
                          in percent) of monthly income across the supplied
                          history, capped at 100; 50 with fewer than 3
                          months, 100 when the mean income is 0
    trend                 first vs last of the last 3 history entries:
                          'increasing' above +10%, 'decreasing' below -10%
    is_stable             volatility < 30 and recurring share > 50
    warning               at most one message; volatility is checked
                          before the recurring share
"""

import statistics
from collections.abc import Iterable, Sequence
from typing import Optional

from .formatting import round_half_up
from .models import IncomeStability, IncomeTrend, MonthlyTotals, Transaction
from .policy import (
    MIN_TREND_POINTS,
    MIN_VOLATILITY_POINTS,
    NEUTRAL_VOLATILITY,
    TREND_LOOKBACK,
)


def recurring_income_percentage(transactions: Iterable[Transaction]) -> float:
    incomes = [t for t in transactions if t.is_income]
    total = sum(t.amount for t in incomes)
    if total <= 0:
        return 0.0
    recurring = sum(t.amount for t in incomes if t.is_recurring)
    return (recurring / total) * 100


def income_volatility(history: Sequence[MonthlyTotals]) -> float:
    if len(history) < MIN_VOLATILITY_POINTS:
        return NEUTRAL_VOLATILITY
    incomes = [m.income for m in history]
    mean = statistics.fmean(incomes)
    if mean <= 0:
        return 100.0
    return min(100.0, statistics.pstdev(incomes) / mean * 100)


def income_trend(history: Sequence[MonthlyTotals]) -> IncomeTrend:
    if len(history) < MIN_TREND_POINTS:
        return "stable"
    recent = history[-TREND_LOOKBACK:]
    first = recent[0].income
    last = recent[-1].income
    if last > first * 1.1:
        return "increasing"
    if last < first * 0.9:
        return "decreasing"
    return "stable"


def calculate_income_stability(
    transactions: Iterable[Transaction],
    history: Sequence[MonthlyTotals],
) -> IncomeStability:
    recurring_percentage = recurring_income_percentage(transactions)
    volatility = income_volatility(history)

    warning: Optional[str] = None
    if volatility > 50:
        warning = (
            "Your income varies significantly month-to-month. "
            "This makes planning harder."
        )
    elif recurring_percentage < 30:
        warning = (
            "Most of your income is one-time. "
            "Consider building recurring revenue streams."
        )

    return IncomeStability(
        is_stable=volatility < 30 and recurring_percentage > 50,
        volatility_score=round_half_up(volatility),
        recurring_percentage=round_half_up(recurring_percentage),
        trend=income_trend(history),
        warning=warning,
    )
