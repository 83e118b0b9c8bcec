from datetime import date

import pytest

import smb_cashflow.periods as periods
from smb_cashflow.dashboard import AnalysisSettings, build_dashboard
from smb_cashflow.models import BusinessConfig, Transaction, WhatIfScenario
from smb_cashflow.policy import RUNWAY_SENTINEL

NOW = date(2025, 10, 18)
BUSINESS = BusinessConfig(name="Acme", business_type="service", starting_balance=20_000)


def _tx(
    tx_id: str,
    kind: str,
    amount: float,
    day: date,
    category: str,
    **extra,
) -> Transaction:
    return Transaction(
        id=tx_id,
        kind=kind,  # type: ignore[arg-type]
        amount=amount,
        date=day,
        category=category,
        **extra,
    )


def _transactions() -> list[Transaction]:
    return [
        _tx("t1", "income", 6000, date(2025, 8, 5), "sales", is_recurring=True),
        _tx("t2", "income", 6000, date(2025, 9, 5), "sales", is_recurring=True),
        _tx("t3", "income", 4000, date(2025, 10, 5), "sales", is_recurring=True),
        _tx("t4", "expense", 3000, date(2025, 8, 1), "rent"),
        _tx("t5", "expense", 3000, date(2025, 9, 1), "rent"),
        _tx("t6", "expense", 3000, date(2025, 10, 1), "rent"),
        _tx("t7", "expense", 1000, date(2025, 9, 12), "marketing"),
        _tx("t8", "expense", 2500, date(2025, 10, 12), "marketing"),
        _tx("t9", "expense", 650, date(2025, 10, 2), "software", is_recurring=True),
    ]


def test_dashboard_views_share_one_reference_date() -> None:
    dashboard = build_dashboard(_transactions(), BUSINESS, now=NOW)

    assert dashboard.as_of == NOW
    assert dashboard.history[-1].month_key == "2025-10"
    assert dashboard.summary.total_income == 4000
    assert dashboard.summary.total_expenses == 6150
    assert dashboard.history[-1].income == dashboard.summary.total_income
    assert dashboard.history[-1].expenses == dashboard.summary.total_expenses
    assert dashboard.forecast[0].month_key == "2025-11"
    assert dashboard.what_if is None


def test_dashboard_combines_every_view() -> None:
    dashboard = build_dashboard(_transactions(), BUSINESS, now=NOW)

    # 20000 + 16000 - 13150
    assert dashboard.summary.current_balance == pytest.approx(22_850)
    assert 0 <= dashboard.health.score <= 100
    assert dashboard.burn.total_burn == (
        dashboard.burn.survival_burn
        + dashboard.burn.growth_burn
        + dashboard.burn.waste_burn
    )
    assert len(dashboard.history) == 6
    assert len(dashboard.forecast) == 6
    assert [k.category for k in dashboard.silent_killers] == ["marketing", "software"]
    assert dashboard.weekly_actions[0].id == "review-subs"
    assert dashboard.settings == AnalysisSettings()


def test_dashboard_is_deterministic_and_input_is_untouched() -> None:
    txs = _transactions()
    snapshot = list(txs)

    first = build_dashboard(txs, BUSINESS, now=NOW)
    second = build_dashboard(txs, BUSINESS, now=NOW)

    assert first == second
    assert txs == snapshot


def test_empty_dashboard() -> None:
    dashboard = build_dashboard([], BUSINESS, now=NOW)

    assert dashboard.summary.current_balance == 20_000
    assert dashboard.summary.burn_rate == 0
    assert dashboard.summary.runway_months == RUNWAY_SENTINEL
    assert dashboard.alerts == ()
    assert dashboard.silent_killers == ()
    assert dashboard.cash_out_point is None


def test_dashboard_defaults_to_today(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(periods, "_today", lambda: NOW)

    dashboard = build_dashboard(_transactions(), BUSINESS)

    assert dashboard.as_of == NOW


def test_dashboard_scenario_and_settings() -> None:
    settings = AnalysisSettings(min_runway_months=3, history_months=3, forecast_months=12)

    dashboard = build_dashboard(
        _transactions(),
        BUSINESS,
        now=NOW,
        settings=settings,
        scenario=WhatIfScenario(hire_count=1, avg_salary=4000),
    )

    assert len(dashboard.history) == 3
    assert len(dashboard.forecast) == 12
    assert dashboard.safe_to_spend.min_runway_protected == 3
    assert dashboard.what_if is not None
    assert dashboard.what_if.new_net_cash_flow == -6150


def test_dismissed_alerts_are_not_reported() -> None:
    business = BusinessConfig(name="Tight", starting_balance=-5000)

    alerts = build_dashboard(_transactions(), business, now=NOW).alerts
    remaining = build_dashboard(
        _transactions(), business, now=NOW, dismissed_alert_ids={"runway-critical"}
    ).alerts

    assert "runway-critical" in [a.id for a in alerts]
    assert "runway-critical" not in [a.id for a in remaining]
