# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Safe-to-spend allowance.

The allowance is the discretionary amount that can be spent this month
while protecting a minimum runway:

    reserve_needed          = burn_rate * min_runway_months
    available_after_reserve = max(0, current_balance - reserve_needed)
    excess_income           = max(0, total_income - burn_rate)
    safe_amount             = min(available_after_reserve,
                                  excess_income + available_after_reserve * 0.1)
    percentage              = safe_amount / current_balance * 100
                              (0 when current_balance <= 0)
"""

import math
from dataclasses import dataclass

from .formatting import round_half_up
from .models import CashFlowSummary, SafeToSpend
from .policy import DEFAULT_MIN_RUNWAY_MONTHS, RESERVE_SPEND_SHARE
from .rules import Rule, always, evaluate_first_match


@dataclass(frozen=True)
class _SpendContext:
    safe_amount: float
    percentage: float
    min_runway_months: float


def _months(value: float) -> str:
    return f"{value:g}"


EXPLANATION_RULES: tuple[Rule[_SpendContext, str], ...] = (
    Rule(
        name="caution",
        when=lambda ctx: ctx.safe_amount <= 0,
        then=lambda ctx: (
            "Your cash reserves are needed to maintain at least "
            f"{_months(ctx.min_runway_months)} months of runway. "
            "Avoid additional spending."
        ),
    ),
    Rule(
        name="modest",
        when=lambda ctx: ctx.percentage < 10,
        then=lambda ctx: (
            "You can safely spend a small amount while keeping "
            f"{_months(ctx.min_runway_months)} months of survival runway."
        ),
    ),
    Rule(
        name="standard",
        when=always,
        then=lambda ctx: (
            "Based on your current income and expenses, you can safely spend "
            "this amount without risking your "
            f"{_months(ctx.min_runway_months)}-month safety buffer."
        ),
    ),
)


def calculate_safe_to_spend(
    summary: CashFlowSummary,
    min_runway_months: float = DEFAULT_MIN_RUNWAY_MONTHS,
) -> SafeToSpend:
    """
    Compute how much can be spent while protecting ``min_runway_months``.

    The returned amount is rounded half-up, never negative and never above
    the current balance.

    Raises:
        ValueError: if ``min_runway_months`` is negative.
    """
    if min_runway_months < 0:
        raise ValueError("min_runway_months cannot be negative.")

    reserve_needed = summary.burn_rate * min_runway_months
    available_after_reserve = max(0.0, summary.current_balance - reserve_needed)
    excess_income = max(0.0, summary.total_income - summary.burn_rate)
    safe_amount = min(
        available_after_reserve,
        excess_income + available_after_reserve * RESERVE_SPEND_SHARE,
    )

    if summary.current_balance > 0:
        percentage = (safe_amount / summary.current_balance) * 100
    else:
        percentage = 0.0

    explanation = evaluate_first_match(
        EXPLANATION_RULES,
        _SpendContext(
            safe_amount=safe_amount,
            percentage=percentage,
            min_runway_months=min_runway_months,
        ),
    )

    amount = max(0, round_half_up(safe_amount))
    # Half-up rounding must not lift the amount above the balance itself.
    if summary.current_balance > 0:
        amount = min(amount, int(math.floor(summary.current_balance)))

    return SafeToSpend(
        amount=amount,
        percentage=round_half_up(percentage),
        explanation=explanation,
        min_runway_protected=min_runway_months,
    )
