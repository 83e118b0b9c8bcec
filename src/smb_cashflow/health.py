# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Cash health score (0-100).

The score is the sum of five independently capped sub-factors:

    factor            cap   formula
    ----------------  ----  -------------------------------------------------
    balance            25   (balance / burn_rate / 12) * 25
                            (12 months of cover when burn_rate is 0)
    burn rate          20   20 - (expenses / income - 0.5) * 20
                            (ratio 2 when income is 0)
    runway             25   (runway_months / 18) * 25
    income trend       15   7.5 + avg_growth * 15   (7.5 if < 2 history points)
    expense growth     15   7.5 - avg_growth * 15   (7.5 if < 2 history points)

Every sub-factor is clamped to [0, cap]; the total is rounded half-up and
clamped to [0, 100]. The average growth is the mean month-over-month growth
over the last 3 monthly history entries; a step whose previous value is 0
contributes no growth.

Status bands and their canned texts are an ordered rule chain (see
rules.py): >= 70 healthy, >= 50 moderate, >= 30 warning, else critical.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from .formatting import round_half_up
from .models import CashFlowSummary, CashHealthScore, HealthFactors, MonthlyTotals
from .policy import (
    BALANCE_FACTOR_CAP,
    BURN_RATE_FACTOR_CAP,
    EXPENSE_RATIO_FALLBACK,
    HEALTHY_RUNWAY_MONTHS,
    MIN_TREND_POINTS,
    MONTHS_OF_COVER_FALLBACK,
    NEUTRAL_TREND_FACTOR,
    RUNWAY_FACTOR_CAP,
    TREND_FACTOR_CAP,
    TREND_LOOKBACK,
)
from .rules import Rule, always, evaluate_first_match


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def average_growth(values: Sequence[float]) -> float:
    """
    Mean month-over-month growth rate over consecutive values.

    A step whose previous value is not positive contributes 0.
    """
    if len(values) < 2:
        return 0.0
    total = 0.0
    for prev, curr in zip(values, values[1:]):
        if prev > 0:
            total += (curr - prev) / prev
    return total / (len(values) - 1)


def balance_factor(summary: CashFlowSummary) -> float:
    if summary.burn_rate > 0:
        months_of_cover = summary.current_balance / summary.burn_rate
    else:
        months_of_cover = MONTHS_OF_COVER_FALLBACK
    return _clamp((months_of_cover / 12) * BALANCE_FACTOR_CAP, 0.0, BALANCE_FACTOR_CAP)


def burn_rate_factor(summary: CashFlowSummary) -> float:
    if summary.total_income > 0:
        ratio = summary.total_expenses / summary.total_income
    else:
        ratio = EXPENSE_RATIO_FALLBACK
    raw = BURN_RATE_FACTOR_CAP - (ratio - 0.5) * BURN_RATE_FACTOR_CAP
    return _clamp(raw, 0.0, BURN_RATE_FACTOR_CAP)


def runway_factor(summary: CashFlowSummary) -> float:
    raw = (summary.runway_months / HEALTHY_RUNWAY_MONTHS) * RUNWAY_FACTOR_CAP
    return _clamp(raw, 0.0, RUNWAY_FACTOR_CAP)


def income_trend_factor(history: Sequence[MonthlyTotals]) -> float:
    """-50% growth → 0, 0% → 7.5, +50% → 15."""
    if len(history) < MIN_TREND_POINTS:
        return NEUTRAL_TREND_FACTOR
    growth = average_growth([m.income for m in history[-TREND_LOOKBACK:]])
    return _clamp(NEUTRAL_TREND_FACTOR + growth * TREND_FACTOR_CAP, 0.0, TREND_FACTOR_CAP)


def expense_growth_factor(history: Sequence[MonthlyTotals]) -> float:
    """+50% growth → 0, 0% → 7.5, -50% growth → 15."""
    if len(history) < MIN_TREND_POINTS:
        return NEUTRAL_TREND_FACTOR
    growth = average_growth([m.expenses for m in history[-TREND_LOOKBACK:]])
    return _clamp(NEUTRAL_TREND_FACTOR - growth * TREND_FACTOR_CAP, 0.0, TREND_FACTOR_CAP)


@dataclass(frozen=True)
class _Band:
    status: str
    explanation: str
    action_hint: str


@dataclass(frozen=True)
class _ScoreContext:
    score: int
    summary: CashFlowSummary


def _moderate_hint(ctx: _ScoreContext) -> str:
    if ctx.summary.net_cash_flow < 0:
        return "Focus on increasing revenue or reducing expenses to improve your score."
    return "Build up your cash reserves to extend your runway."


HEALTH_BANDS: tuple[Rule[_ScoreContext, _Band], ...] = (
    Rule(
        name="healthy",
        when=lambda ctx: ctx.score >= 70,
        then=lambda ctx: _Band(
            status="healthy",
            explanation=(
                "Your finances are in great shape! You have healthy cash "
                "reserves and sustainable spending."
            ),
            action_hint=(
                "Consider investing in growth or building a larger safety buffer."
            ),
        ),
    ),
    Rule(
        name="moderate",
        when=lambda ctx: ctx.score >= 50,
        then=lambda ctx: _Band(
            status="moderate",
            explanation=(
                "Your finances are stable but could use improvement. "
                "Watch your spending trends."
            ),
            action_hint=_moderate_hint(ctx),
        ),
    ),
    Rule(
        name="warning",
        when=lambda ctx: ctx.score >= 30,
        then=lambda ctx: _Band(
            status="warning",
            explanation=(
                "Warning: Your financial health needs attention. "
                "Cash reserves may be running low."
            ),
            action_hint=(
                f"With {ctx.summary.runway_months} months of runway, prioritize "
                "cutting non-essential expenses and focus on revenue-generating "
                "activities."
            ),
        ),
    ),
    Rule(
        name="critical",
        when=always,
        then=lambda ctx: _Band(
            status="critical",
            explanation=(
                "Critical: Your business is at financial risk. "
                "Immediate action is required."
            ),
            action_hint=(
                f"You have {ctx.summary.runway_months} months before running out "
                "of cash. Cut all non-essential spending immediately."
            ),
        ),
    ),
)


def calculate_cash_health_score(
    summary: CashFlowSummary,
    history: Sequence[MonthlyTotals],
) -> CashHealthScore:
    """
    Compute the composite cash health score.

    Args:
        summary: Cash-flow summary of the current pass.
        history: Monthly history, oldest first (see history.py).

    Returns:
        A CashHealthScore with the score, status band, canned texts and the
        rounded sub-factors.
    """
    balance = balance_factor(summary)
    burn = burn_rate_factor(summary)
    runway = runway_factor(summary)
    income_trend = income_trend_factor(history)
    expense_growth = expense_growth_factor(history)

    total = balance + burn + runway + income_trend + expense_growth
    score = int(_clamp(round_half_up(total), 0, 100))

    band = evaluate_first_match(HEALTH_BANDS, _ScoreContext(score=score, summary=summary))

    return CashHealthScore(
        score=score,
        status=band.status,  # type: ignore[arg-type]
        explanation=band.explanation,
        action_hint=band.action_hint,
        factors=HealthFactors(
            balance_factor=round_half_up(balance),
            burn_rate_factor=round_half_up(burn),
            runway_factor=round_half_up(runway),
            income_trend_factor=round_half_up(income_trend),
            expense_growth_factor=round_half_up(expense_growth),
        ),
    )
