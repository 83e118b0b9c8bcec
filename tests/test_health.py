import pytest

from smb_cashflow.health import (
    average_growth,
    balance_factor,
    burn_rate_factor,
    calculate_cash_health_score,
    expense_growth_factor,
    income_trend_factor,
    runway_factor,
)
from smb_cashflow.models import CashFlowSummary, MonthlyTotals


def _summary(
    balance: float,
    income: float,
    expenses: float,
    burn: float,
    runway: int,
) -> CashFlowSummary:
    return CashFlowSummary(
        current_balance=balance,
        total_income=income,
        total_expenses=expenses,
        net_cash_flow=income - expenses,
        burn_rate=burn,
        runway_months=runway,
    )


def _history(incomes: list[float], expenses: list[float]) -> list[MonthlyTotals]:
    return [
        MonthlyTotals(month_key=f"2025-{i + 1:02d}", label="", income=inc, expenses=exp)
        for i, (inc, exp) in enumerate(zip(incomes, expenses))
    ]


def test_healthy_business_scores_high() -> None:
    summary = _summary(120_000, 10_000, 5000, 5000, 24)
    history = _history([10_000] * 3, [5000] * 3)

    health = calculate_cash_health_score(summary, history)

    # 25 + 20 + 25 + 7.5 + 7.5
    assert health.score == 85
    assert health.status == "healthy"
    assert health.factors.balance_factor == 25
    assert health.factors.burn_rate_factor == 20
    assert health.factors.runway_factor == 25
    assert health.factors.income_trend_factor == 8
    assert health.factors.expense_growth_factor == 8


def test_critical_band_quotes_runway() -> None:
    summary = _summary(1000, 0, 5000, 5000, 0)

    health = calculate_cash_health_score(summary, [])

    # 0.42 + 0 + 0 + 7.5 + 7.5
    assert health.score == 15
    assert health.status == "critical"
    assert "You have 0 months" in health.action_hint


def test_warning_band_quotes_runway() -> None:
    summary = _summary(30_000, 5000, 5000, 5000, 6)

    health = calculate_cash_health_score(summary, [])

    # 12.5 + 10 + 8.33 + 15
    assert health.score == 46
    assert health.status == "warning"
    assert "With 6 months of runway" in health.action_hint


def test_moderate_hint_depends_on_net_cash_flow() -> None:
    break_even = calculate_cash_health_score(_summary(60_000, 5000, 5000, 5000, 12), [])
    losing = calculate_cash_health_score(_summary(60_000, 5000, 5100, 5000, 12), [])

    assert break_even.status == "moderate"
    assert break_even.score == 67
    assert "Build up your cash reserves" in break_even.action_hint
    assert losing.status == "moderate"
    assert losing.score == 66
    assert "increasing revenue or reducing expenses" in losing.action_hint


def test_zero_burn_uses_months_of_cover_fallback() -> None:
    summary = _summary(10_000, 0, 0, 0, 999)

    # 12 months of cover -> full balance factor; ratio fallback 2 -> burn factor 0
    assert balance_factor(summary) == pytest.approx(25)
    assert burn_rate_factor(summary) == 0
    assert runway_factor(summary) == 25


def test_trend_factors_are_neutral_without_enough_history() -> None:
    one_month = _history([1000], [500])

    assert income_trend_factor([]) == 7.5
    assert income_trend_factor(one_month) == 7.5
    assert expense_growth_factor([]) == 7.5
    assert expense_growth_factor(one_month) == 7.5


def test_trend_factors_map_growth_linearly() -> None:
    assert income_trend_factor(_history([100, 150], [0, 0])) == pytest.approx(15)
    assert income_trend_factor(_history([100, 50], [0, 0])) == pytest.approx(0)
    assert expense_growth_factor(_history([0, 0], [100, 150])) == pytest.approx(0)
    assert expense_growth_factor(_history([0, 0], [100, 50])) == pytest.approx(15)
    # zero previous month: no growth contribution
    assert expense_growth_factor(_history([0, 0], [0, 0])) == pytest.approx(7.5)


def test_trend_factors_only_look_at_last_three_months() -> None:
    history = _history([1, 100, 100, 100], [0, 0, 0, 0])

    assert income_trend_factor(history) == pytest.approx(7.5)


def test_average_growth_skips_zero_bases() -> None:
    assert average_growth([100, 0, 100]) == pytest.approx(-0.5)
    assert average_growth([100]) == 0


@pytest.mark.parametrize(
    "summary",
    [
        _summary(0, 0, 0, 0, 999),
        _summary(-50_000, 0, 10_000, 10_000, -5),
        _summary(1_000_000, 100, 0, 10, 999),
        _summary(5000, 100_000, 1, 1, 5000),
        _summary(20_000, 3000, 9000, 7000, 2),
    ],
)
def test_score_and_factors_stay_within_caps(summary: CashFlowSummary) -> None:
    histories = [
        [],
        _history([0, 1000, 100_000], [100_000, 10, 0]),
        _history([100_000, 10, 0], [0, 1000, 100_000]),
    ]
    for history in histories:
        health = calculate_cash_health_score(summary, history)
        assert 0 <= health.score <= 100
        assert 0 <= health.factors.balance_factor <= 25
        assert 0 <= health.factors.burn_rate_factor <= 20
        assert 0 <= health.factors.runway_factor <= 25
        assert 0 <= health.factors.income_trend_factor <= 15
        assert 0 <= health.factors.expense_growth_factor <= 15


def test_score_is_deterministic() -> None:
    summary = _summary(42_000, 6000, 7000, 6500, 6)
    history = _history([5000, 6000, 6000], [6000, 6500, 7000])

    assert calculate_cash_health_score(summary, history) == calculate_cash_health_score(
        summary, history
    )
