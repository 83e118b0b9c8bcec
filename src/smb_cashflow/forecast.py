# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Flat cash forecast.

``project_future_cash()`` rolls the balance forward with a flat monthly
income and expense estimate:

    balance_i = balance_{i-1} + income - expenses,   i = 1..months

Each ForecastPoint keeps both values:

- ``projected_balance``: the true trajectory, possibly negative;
- ``balance``: the same value clamped at 0. This clamp is a display policy
  only (charts never show negative cash); it is not a real constraint.

Shortfall timing must be read from the unclamped trajectory, see
``find_cash_out_point()``.
"""

from collections.abc import Sequence
from datetime import date
from typing import Optional

from .models import ForecastPoint
from .periods import month_key, month_label, shift_months


def project_future_cash(
    current_balance: float,
    monthly_income: float,
    monthly_expenses: float,
    months: int,
    now: date,
) -> list[ForecastPoint]:
    """
    Project the balance over the next ``months`` calendar months.

    Raises:
        ValueError: if ``months`` is negative.
    """
    if months < 0:
        raise ValueError("Forecast horizon cannot be negative.")

    points: list[ForecastPoint] = []
    balance = float(current_balance)
    first_of_month = now.replace(day=1)

    for i in range(1, months + 1):
        month = shift_months(first_of_month, i)
        balance = balance + monthly_income - monthly_expenses
        points.append(
            ForecastPoint(
                month_key=month_key(month),
                label=month_label(month),
                income=float(monthly_income),
                expenses=float(monthly_expenses),
                balance=max(0.0, balance),
                projected_balance=balance,
            )
        )

    return points


def find_cash_out_point(points: Sequence[ForecastPoint]) -> Optional[ForecastPoint]:
    """Return the first projected month whose unclamped balance is <= 0."""
    for point in points:
        if point.projected_balance <= 0:
            return point
    return None
