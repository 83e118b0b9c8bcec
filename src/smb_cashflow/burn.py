# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Burn classification and expense-side views.

1. Burn breakdown
   ---------------
   ``calculate_burn_breakdown()`` splits the trailing 3-month expenses into
   survival / growth / waste monthly rates. Each expense contributes
   ``amount / 3``. Assignment, in priority order:

   - the explicit ``burn_category`` of the transaction, when present;
   - the category taxonomy of the BurnPolicy (survival categories, then
     growth categories);
   - founder draws → survival;
   - anything else → growth.

   The three totals are rounded half-up and ``total_burn`` is their sum, so
   the breakdown always adds up exactly.

2. Experiments
   ------------
   ``summarize_experiments()`` lists the expenses flagged as experiments and
   the ones whose notes do not report a success.

3. Founder draws
   --------------
   ``calculate_founder_draw_impact()`` estimates how much founder
   withdrawals weigh on the runway.
"""

import logging
from collections.abc import Iterable
from datetime import date

from .formatting import format_amount, round_half_up
from .models import (
    BurnCategory,
    BurnBreakdown,
    CashFlowSummary,
    Experiment,
    ExperimentSummary,
    FounderDrawImpact,
    Transaction,
)
from .periods import trailing_period
from .policy import (
    BURN_WINDOW_MONTHS,
    DEFAULT_BURN_POLICY,
    FOUNDER_DRAW_RUNWAY_WEIGHT,
    FOUNDER_DRAW_WARNING_SHARE,
    BurnPolicy,
)

logger = logging.getLogger(__name__)

FOUNDER_DRAW_CATEGORY = "founder_draw"


def classify_expense(
    transaction: Transaction,
    policy: BurnPolicy = DEFAULT_BURN_POLICY,
) -> BurnCategory:
    """Return the burn category of an expense transaction."""
    explicit = transaction.effective_burn_category
    if explicit is not None:
        return explicit
    if transaction.category in policy.survival_categories:
        return "survival"
    if transaction.category in policy.growth_categories:
        return "growth"
    if transaction.is_founder_draw_expense:
        return "survival"
    return "growth"


def calculate_burn_breakdown(
    transactions: Iterable[Transaction],
    now: date,
    policy: BurnPolicy = DEFAULT_BURN_POLICY,
) -> BurnBreakdown:
    """
    Split the trailing burn into survival, growth and waste.

    Args:
        transactions: All transactions; only expenses inside the trailing
            burn window are considered.
        now: Reference date of the computation pass.
        policy: Category taxonomy for expenses without an explicit category.

    Returns:
        A BurnBreakdown with rounded monthly rates and recommendations.
    """
    window = trailing_period(now, BURN_WINDOW_MONTHS)
    totals: dict[str, float] = {"survival": 0.0, "growth": 0.0, "waste": 0.0}

    for t in transactions:
        if not t.is_expense or not window.contains(t.date):
            continue
        totals[classify_expense(t, policy)] += t.amount / BURN_WINDOW_MONTHS

    survival = totals["survival"]
    growth = totals["growth"]
    waste = totals["waste"]
    total = survival + growth + waste

    recommendations: list[str] = []
    if waste > 0:
        recommendations.append(
            "Eliminating waste expenses could save you "
            f"${format_amount(round_half_up(waste))}/month"
        )
    if growth > total * 0.4:
        recommendations.append(
            "Consider scaling back growth spending if runway is a concern"
        )
    if survival > total * 0.7:
        recommendations.append("High fixed costs - look for ways to reduce overhead")

    survival_burn = round_half_up(survival)
    growth_burn = round_half_up(growth)
    waste_burn = round_half_up(waste)

    logger.debug(
        "Burn breakdown (%s → %s): survival=%s growth=%s waste=%s",
        window.start,
        window.end,
        survival_burn,
        growth_burn,
        waste_burn,
    )

    return BurnBreakdown(
        survival_burn=survival_burn,
        growth_burn=growth_burn,
        waste_burn=waste_burn,
        total_burn=survival_burn + growth_burn + waste_burn,
        recommendations=tuple(recommendations),
    )


def summarize_experiments(transactions: Iterable[Transaction]) -> ExperimentSummary:
    """
    Summarize expenses flagged as experiments.

    An experiment counts as "no return" unless its notes mention "success"
    (case-insensitive).
    """
    experiments = [t for t in transactions if t.is_experiment_expense]

    no_return = tuple(
        t.description
        for t in experiments
        if "success" not in (t.experiment_notes or "").lower()
    )

    return ExperimentSummary(
        total_spend=float(sum(t.amount for t in experiments)),
        experiment_count=len(experiments),
        experiments=tuple(
            Experiment(
                description=t.description,
                amount=t.amount,
                date=t.date,
                notes=t.experiment_notes,
            )
            for t in experiments
        ),
        no_return_experiments=no_return,
    )


def calculate_founder_draw_impact(
    transactions: Iterable[Transaction],
    summary: CashFlowSummary,
    now: date,
) -> FounderDrawImpact:
    """
    Estimate the weight of founder draws on the runway.

    Founder draws are expenses flagged ``is_founder_draw`` or filed under
    the 'founder_draw' category. The runway impact is:

        round(avg_monthly_draw / burn_rate * runway_months * 0.5)

    (0 when the burn rate is 0). A warning is returned when the average
    monthly draw over the trailing window exceeds 30% of the burn rate.
    """
    draws = [
        t
        for t in transactions
        if t.is_expense and (t.is_founder_draw or t.category == FOUNDER_DRAW_CATEGORY)
    ]

    window = trailing_period(now, BURN_WINDOW_MONTHS)
    monthly_draw_average = (
        sum(t.amount for t in draws if window.contains(t.date)) / BURN_WINDOW_MONTHS
    )

    if summary.burn_rate > 0:
        runway_impact = round_half_up(
            monthly_draw_average
            / summary.burn_rate
            * summary.runway_months
            * FOUNDER_DRAW_RUNWAY_WEIGHT
        )
    else:
        runway_impact = 0

    warning = None
    if monthly_draw_average > summary.burn_rate * FOUNDER_DRAW_WARNING_SHARE:
        warning = (
            "Founder draws are significantly reducing your runway. "
            "Consider reducing personal withdrawals."
        )

    return FounderDrawImpact(
        total_draws=float(sum(t.amount for t in draws)),
        runway_impact=runway_impact,
        warning=warning,
    )
