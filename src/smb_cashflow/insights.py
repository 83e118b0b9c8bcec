# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Rule-based advisory generators.

Three generators are provided. In each of them every rule is evaluated
independently and appends its entry when its condition holds; no rule
suppresses another.

1. ``generate_insights()``: dashboard insights
       runway <= 3 → danger, else runway <= 6 → warning
       expenses > income (income > 0) → overspend with percentage
       top expense category of the current month → share of the month
       net cash flow > 0 → positive flow

2. ``generate_cfo_insights()``: CFO-style advice
       runway < 12 → hiring risk
       expenses > income (income > 0) → overspend
       waste burn > 0 → runway months gained by cutting it
       unstable income → stability warning
       net cash flow > 0 → growing safety net
       12 <= runway < 18 → healthy runway
   The list is sorted by priority (high, medium, low); ties keep their
   rule order.

3. ``generate_weekly_actions()``: at most 5 actions, earlier rules first.
"""

from collections.abc import Iterable, Sequence
from datetime import date

from .formatting import format_amount, format_category_name, plural, round_half_up
from .models import (
    BurnBreakdown,
    CashFlowSummary,
    CFOInsight,
    IncomeStability,
    Insight,
    SilentExpenseKiller,
    Transaction,
    WeeklyAction,
)
from .periods import is_current_month
from .policy import MAX_WEEKLY_ACTIONS, WASTE_ACTION_THRESHOLD

PRIORITY_ORDER: dict[str, int] = {"high": 0, "medium": 1, "low": 2}


def _overspend_percentage(summary: CashFlowSummary) -> int:
    return round_half_up(
        (summary.total_expenses - summary.total_income) / summary.total_income * 100
    )


def _is_overspending(summary: CashFlowSummary) -> bool:
    return summary.total_income > 0 and summary.total_expenses > summary.total_income


def top_expense_category(
    transactions: Iterable[Transaction],
    now: date,
) -> tuple[str, float, float]:
    """
    Largest expense category of the current month.

    Returns:
        (category, amount, month_total). The category is '' when there are
        no expenses this month. Ties go to the category seen first.
    """
    by_category: dict[str, float] = {}
    for t in transactions:
        if t.is_expense and is_current_month(t.date, now):
            by_category[t.category] = by_category.get(t.category, 0.0) + t.amount

    if not by_category:
        return "", 0.0, 0.0

    category = max(by_category, key=by_category.__getitem__)
    return category, by_category[category], sum(by_category.values())


def generate_insights(
    summary: CashFlowSummary,
    transactions: Iterable[Transaction],
    now: date,
) -> list[Insight]:
    insights: list[Insight] = []
    runway = summary.runway_months

    if runway <= 3:
        insights.append(
            Insight(
                id="runway-critical",
                type="danger",
                title="Critical: Low Runway",
                message=(
                    f"You have only {runway} {plural(runway, 'month')} of runway "
                    "left. Consider reducing expenses or raising funds immediately."
                ),
                action_label="View Expenses",
            )
        )
    elif runway <= 6:
        insights.append(
            Insight(
                id="runway-warning",
                type="warning",
                title="Runway Alert",
                message=(
                    f"You have {runway} months of runway. Start planning for your "
                    "next funding round or revenue growth."
                ),
            )
        )

    if _is_overspending(summary):
        insights.append(
            Insight(
                id="expense-growth",
                type="warning",
                title="Spending More Than Earning",
                message=(
                    f"Your expenses exceed income by {_overspend_percentage(summary)}% "
                    "this month. Review your spending to extend runway."
                ),
                action_label="Review Spending",
            )
        )

    category, amount, month_total = top_expense_category(transactions, now)
    if category and month_total > 0:
        share = round_half_up(amount / month_total * 100)
        insights.append(
            Insight(
                id="biggest-expense",
                type="info",
                title="Top Spending Category",
                message=(
                    f"{format_category_name(category)} accounts for {share}% of "
                    "your expenses this month."
                ),
            )
        )

    if summary.net_cash_flow > 0:
        insights.append(
            Insight(
                id="positive-cashflow",
                type="success",
                title="Positive Cash Flow",
                message=(
                    "Great news! You're making more than you're spending this "
                    "month. Keep it up!"
                ),
            )
        )

    return insights


def generate_cfo_insights(
    summary: CashFlowSummary,
    burn_breakdown: BurnBreakdown,
    income_stability: IncomeStability,
) -> list[CFOInsight]:
    insights: list[CFOInsight] = []
    runway = summary.runway_months

    if runway < 12:
        insights.append(
            CFOInsight(
                id="hiring-warning",
                type="hiring",
                title="Hiring is Risky Right Now",
                message=(
                    f"With {runway} months of runway, adding a new hire would "
                    "significantly reduce your survival time. Consider waiting "
                    "until you have 12+ months of runway."
                ),
                impact="Each $5K salary reduces runway by ~1 month",
                priority="high",
            )
        )

    if _is_overspending(summary):
        insights.append(
            CFOInsight(
                id="expense-growth",
                type="expense",
                title="You're Spending More Than You Earn",
                message=(
                    f"Your expenses are {_overspend_percentage(summary)}% higher "
                    "than income. This rate will drain your savings."
                ),
                impact=(
                    f"${format_amount(abs(summary.net_cash_flow))} leaves your "
                    "account every month"
                ),
                priority="high",
            )
        )

    if burn_breakdown.waste_burn > 0:
        if summary.burn_rate > 0:
            runway_gain = round_half_up(burn_breakdown.waste_burn / summary.burn_rate)
        else:
            runway_gain = 0
        insights.append(
            CFOInsight(
                id="waste-elimination",
                type="expense",
                title="Cut Waste to Extend Runway",
                message=(
                    f"You have ${format_amount(burn_breakdown.waste_burn)}/month in "
                    "waste expenses that can be eliminated."
                ),
                impact=f"Cutting this adds ~{runway_gain} month(s) of runway",
                priority="medium",
            )
        )

    if not income_stability.is_stable:
        insights.append(
            CFOInsight(
                id="income-volatility",
                type="revenue",
                title="Unstable Income Pattern",
                message=income_stability.warning
                or "Your income fluctuates significantly, making it harder to plan.",
                priority="high" if income_stability.volatility_score > 50 else "medium",
            )
        )

    if summary.net_cash_flow > 0:
        insights.append(
            CFOInsight(
                id="positive-flow",
                type="general",
                title="Growing Your Safety Net",
                message=(
                    f"You're adding ${format_amount(summary.net_cash_flow)} to your "
                    "savings each month. Keep it up!"
                ),
                priority="low",
            )
        )

    if 12 <= runway < 18:
        insights.append(
            CFOInsight(
                id="runway-good",
                type="runway",
                title="Healthy Runway",
                message=(
                    "You have a solid runway. Now might be a good time to invest "
                    "in growth."
                ),
                priority="low",
            )
        )

    return sorted(insights, key=lambda i: PRIORITY_ORDER[i.priority])


def generate_weekly_actions(
    summary: CashFlowSummary,
    burn_breakdown: BurnBreakdown,
    silent_killers: Sequence[SilentExpenseKiller],
) -> list[WeeklyAction]:
    """
    Build this week's action list.

    The subscription review is always first; the list is truncated to
    MAX_WEEKLY_ACTIONS keeping the earliest actions.
    """
    actions: list[WeeklyAction] = [
        WeeklyAction(
            id="review-subs",
            action="Review all subscriptions and cancel unused ones",
            category="review",
            reason="Regular review prevents waste and saves money",
        )
    ]

    if summary.runway_months < 6:
        actions.append(
            WeeklyAction(
                id="cut-non-essential",
                action="Cut all non-essential expenses immediately",
                category="reduce",
                reason=(
                    f"With only {summary.runway_months} months of runway, "
                    "every dollar matters"
                ),
            )
        )
        actions.append(
            WeeklyAction(
                id="delay-hiring",
                action="Delay any new hires until runway improves",
                category="delay",
                reason="Adding salaries will accelerate cash burnout",
            )
        )

    if summary.net_cash_flow < 0:
        actions.append(
            WeeklyAction(
                id="increase-prices",
                action="Consider increasing prices by 10-20%",
                category="increase",
                reason=(
                    "Most startups underprice. A small increase can significantly "
                    "impact runway."
                ),
            )
        )

    if burn_breakdown.waste_burn > WASTE_ACTION_THRESHOLD:
        actions.append(
            WeeklyAction(
                id="eliminate-waste",
                action=(
                    "Eliminate waste expenses "
                    f"(${format_amount(burn_breakdown.waste_burn)}/month identified)"
                ),
                category="reduce",
                reason="Waste expenses offer no business value",
            )
        )

    if silent_killers:
        actions.append(
            WeeklyAction(
                id="address-killer",
                action=silent_killers[0].action_suggestion,
                category="review",
                reason="This expense is growing faster than expected",
            )
        )

    return actions[:MAX_WEEKLY_ACTIONS]
