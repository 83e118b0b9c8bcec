# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
What-if scenario simulation.

A scenario applies hypothetical changes on top of the current month of a
CashFlowSummary. Nothing is stored or mutated; the result only exists for
the duration of the call.

    hiring_cost         = hire_count * avg_salary
    marketing_delta     = total_expenses * marketing_change_pct / 100
    other_expense_delta = total_expenses * expense_change_pct / 100
    revenue_delta       = total_income * revenue_change_pct / 100

    new_income          = total_income + revenue_delta
    new_expenses        = total_expenses + hiring_cost + marketing_delta
                          + other_expense_delta
    new_net_cash_flow   = new_income - new_expenses
    new_burn_rate       = max(0, -new_net_cash_flow)
    new_runway          = floor(current_balance / new_burn_rate), capped at
                          the runway sentinel (sentinel when not burning)
    cash_out_date       = now + max(0, new_runway) * 30 days when burning,
                          else None

The impact summary is chosen by IMPACT_RULES, evaluated top to bottom:

    1. profitable     net flow improves and crosses from <= 0 to > 0
    2. improved       net flow improves
    3. runway_reduced burn increases, baseline runway below the sentinel and
                      above the new runway
    4. burn_increased burn increases
    5. burn_decreased burn decreases
    6. unchanged
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta

from .formatting import format_amount, round_half_up
from .models import CashFlowSummary, WhatIfResult, WhatIfScenario
from .policy import DAYS_PER_MONTH, RUNWAY_SENTINEL
from .rules import Rule, always, evaluate_first_match


@dataclass(frozen=True)
class ScenarioOutcome:
    """Unrounded figures of a simulated scenario, used by the impact rules."""

    baseline: CashFlowSummary
    new_net_cash_flow: float
    new_burn_rate: float
    new_runway: int


IMPACT_RULES: tuple[Rule[ScenarioOutcome, str], ...] = (
    Rule(
        name="profitable",
        when=lambda o: (
            o.new_net_cash_flow > o.baseline.net_cash_flow
            and o.new_net_cash_flow > 0
            and o.baseline.net_cash_flow <= 0
        ),
        then=lambda o: (
            "This scenario makes you profitable with "
            f"${format_amount(o.new_net_cash_flow)} positive flow!"
        ),
    ),
    Rule(
        name="improved",
        when=lambda o: o.new_net_cash_flow > o.baseline.net_cash_flow,
        then=lambda o: (
            "This scenario improves your monthly cash flow by "
            f"${format_amount(o.new_net_cash_flow - o.baseline.net_cash_flow)}!"
        ),
    ),
    Rule(
        name="runway_reduced",
        when=lambda o: (
            o.new_burn_rate > o.baseline.burn_rate
            and o.baseline.runway_months < RUNWAY_SENTINEL
            and o.baseline.runway_months > o.new_runway
        ),
        then=lambda o: (
            "This scenario reduces your runway by "
            f"{o.baseline.runway_months - o.new_runway} months."
        ),
    ),
    Rule(
        name="burn_increased",
        when=lambda o: o.new_burn_rate > o.baseline.burn_rate,
        then=lambda o: (
            "This scenario increases your monthly burn by "
            f"${format_amount(o.new_burn_rate - o.baseline.burn_rate)}."
        ),
    ),
    Rule(
        name="burn_decreased",
        when=lambda o: o.new_burn_rate < o.baseline.burn_rate,
        then=lambda o: (
            "This scenario extends your runway or saves you "
            f"${format_amount(o.baseline.burn_rate - o.new_burn_rate)} monthly!"
        ),
    ),
    Rule(
        name="unchanged",
        when=always,
        then=lambda o: "This scenario maintains your current financial trajectory.",
    ),
)


def simulate_scenario(
    summary: CashFlowSummary,
    scenario: WhatIfScenario,
) -> ScenarioOutcome:
    """Apply ``scenario`` to ``summary`` without rounding."""
    hiring_cost = scenario.hire_count * scenario.avg_salary
    marketing_delta = summary.total_expenses * (scenario.marketing_change_pct / 100)
    other_expense_delta = summary.total_expenses * (scenario.expense_change_pct / 100)
    revenue_delta = summary.total_income * (scenario.revenue_change_pct / 100)

    new_income = summary.total_income + revenue_delta
    new_expenses = (
        summary.total_expenses + hiring_cost + marketing_delta + other_expense_delta
    )

    new_net_cash_flow = new_income - new_expenses
    new_burn_rate = max(0.0, -new_net_cash_flow)

    if new_burn_rate > 0:
        new_runway = min(
            RUNWAY_SENTINEL, int(math.floor(summary.current_balance / new_burn_rate))
        )
    else:
        new_runway = RUNWAY_SENTINEL

    return ScenarioOutcome(
        baseline=summary,
        new_net_cash_flow=new_net_cash_flow,
        new_burn_rate=new_burn_rate,
        new_runway=new_runway,
    )


def calculate_what_if(
    summary: CashFlowSummary,
    scenario: WhatIfScenario,
    now: date,
) -> WhatIfResult:
    """
    Simulate ``scenario`` and describe its impact.

    Args:
        summary: Baseline cash-flow summary.
        scenario: Hypothetical changes.
        now: Reference date used to compute the cash-out date.

    Returns:
        A WhatIfResult. ``new_burn_rate`` and ``new_net_cash_flow`` are
        rounded half-up; the impact summary uses the unrounded figures.
    """
    outcome = simulate_scenario(summary, scenario)

    cash_out_date = None
    if outcome.new_burn_rate > 0:
        # A negative runway (balance already below zero) means cash-out now.
        months_left = max(0, outcome.new_runway)
        cash_out_date = now + timedelta(days=months_left * DAYS_PER_MONTH)

    return WhatIfResult(
        new_burn_rate=round_half_up(outcome.new_burn_rate),
        new_runway=outcome.new_runway,
        cash_out_date=cash_out_date,
        impact_summary=evaluate_first_match(IMPACT_RULES, outcome),
        new_net_cash_flow=round_half_up(outcome.new_net_cash_flow),
    )
