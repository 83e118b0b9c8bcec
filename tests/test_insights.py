from datetime import date

from smb_cashflow.insights import (
    generate_cfo_insights,
    generate_insights,
    generate_weekly_actions,
    top_expense_category,
)
from smb_cashflow.models import (
    BurnBreakdown,
    CashFlowSummary,
    IncomeStability,
    SilentExpenseKiller,
    Transaction,
)

NOW = date(2025, 10, 18)

STABLE = IncomeStability(
    is_stable=True, volatility_score=10, recurring_percentage=80, trend="stable"
)


def _summary(income: float, expenses: float, burn: float, runway: int) -> CashFlowSummary:
    return CashFlowSummary(
        current_balance=burn * runway,
        total_income=income,
        total_expenses=expenses,
        net_cash_flow=income - expenses,
        burn_rate=burn,
        runway_months=runway,
    )


def _burn(waste: int = 0) -> BurnBreakdown:
    return BurnBreakdown(
        survival_burn=3000,
        growth_burn=1000,
        waste_burn=waste,
        total_burn=4000 + waste,
    )


def _expense(amount: float, day: date, category: str) -> Transaction:
    return Transaction(
        id=f"{category}-{day.isoformat()}",
        kind="expense",
        amount=amount,
        date=day,
        category=category,
    )


def _killer() -> SilentExpenseKiller:
    return SilentExpenseKiller(
        id="marketing",
        description="marketing expenses increased",
        category="marketing",
        monthly_amount=1400,
        growth_rate=40,
        action_suggestion="Review your marketing spending - it grew 40% last month",
        severity="medium",
    )


# ---------------------------------------------------------------------------
# Dashboard insights
# ---------------------------------------------------------------------------


def test_top_expense_category_is_scoped_to_current_month() -> None:
    txs = [
        _expense(3000, date(2025, 10, 1), "rent"),
        _expense(1000, date(2025, 10, 3), "software"),
        _expense(9000, date(2025, 9, 20), "marketing"),
    ]

    assert top_expense_category(txs, NOW) == ("rent", 3000, 4000)
    assert top_expense_category([], NOW) == ("", 0.0, 0.0)


def test_struggling_month_insights() -> None:
    txs = [
        _expense(3000, date(2025, 10, 1), "rent"),
        _expense(1000, date(2025, 10, 3), "software"),
    ]

    insights = generate_insights(_summary(4000, 5000, 5000, 2), txs, NOW)

    assert [i.id for i in insights] == [
        "runway-critical",
        "expense-growth",
        "biggest-expense",
    ]
    assert insights[0].type == "danger"
    assert "only 2 months" in insights[0].message
    assert "exceed income by 25%" in insights[1].message
    assert insights[2].message == "Rent accounts for 75% of your expenses this month."


def test_runway_warning_band() -> None:
    insights = generate_insights(_summary(5000, 5000, 5000, 5), [], NOW)

    assert [(i.id, i.type) for i in insights] == [("runway-warning", "warning")]


def test_profitable_month_without_expenses() -> None:
    insights = generate_insights(_summary(5000, 0, 0, 999), [], NOW)

    assert [i.id for i in insights] == ["positive-cashflow"]
    assert insights[0].type == "success"


def test_founder_draw_category_is_displayed_in_title_case() -> None:
    txs = [_expense(500, date(2025, 10, 1), "founder_draw")]

    insights = generate_insights(_summary(0, 500, 500, 999), txs, NOW)

    assert insights[-1].message == (
        "Founder Draw accounts for 100% of your expenses this month."
    )


# ---------------------------------------------------------------------------
# CFO insights
# ---------------------------------------------------------------------------


def test_cfo_insights_are_sorted_by_priority() -> None:
    unstable = IncomeStability(
        is_stable=False,
        volatility_score=60,
        recurring_percentage=10,
        trend="decreasing",
        warning="Your income varies significantly month-to-month.",
    )

    insights = generate_cfo_insights(_summary(4000, 5000, 5000, 8), _burn(1000), unstable)

    assert [i.id for i in insights] == [
        "hiring-warning",
        "expense-growth",
        "income-volatility",
        "waste-elimination",
    ]
    assert [i.priority for i in insights] == ["high", "high", "high", "medium"]
    assert insights[1].impact == "$1,000 leaves your account every month"
    assert insights[2].message == "Your income varies significantly month-to-month."
    assert insights[3].message == (
        "You have $1,000/month in waste expenses that can be eliminated."
    )
    assert insights[3].impact == "Cutting this adds ~0 month(s) of runway"


def test_mild_volatility_is_medium_priority() -> None:
    unstable = IncomeStability(
        is_stable=False, volatility_score=40, recurring_percentage=20, trend="stable"
    )

    insights = generate_cfo_insights(_summary(5000, 5000, 5000, 24), _burn(), unstable)

    assert [(i.id, i.priority) for i in insights] == [("income-volatility", "medium")]


def test_healthy_runway_and_positive_flow() -> None:
    insights = generate_cfo_insights(_summary(8000, 5000, 5000, 15), _burn(), STABLE)

    assert [i.id for i in insights] == ["positive-flow", "runway-good"]
    assert insights[0].message == (
        "You're adding $3,000 to your savings each month. Keep it up!"
    )


# ---------------------------------------------------------------------------
# Weekly actions
# ---------------------------------------------------------------------------


def test_weekly_actions_always_start_with_subscription_review() -> None:
    actions = generate_weekly_actions(_summary(8000, 5000, 5000, 24), _burn(), [])

    assert [a.id for a in actions] == ["review-subs"]


def test_weekly_actions_are_capped_keeping_earliest() -> None:
    actions = generate_weekly_actions(
        _summary(4000, 5000, 5000, 3), _burn(800), [_killer()]
    )

    assert [a.id for a in actions] == [
        "review-subs",
        "cut-non-essential",
        "delay-hiring",
        "increase-prices",
        "eliminate-waste",
    ]
    assert actions[4].action == "Eliminate waste expenses ($800/month identified)"


def test_top_silent_killer_becomes_an_action() -> None:
    actions = generate_weekly_actions(_summary(8000, 5000, 5000, 24), _burn(), [_killer()])

    assert [a.id for a in actions] == ["review-subs", "address-killer"]
    assert actions[1].action == _killer().action_suggestion
