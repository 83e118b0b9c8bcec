from datetime import date

from smb_cashflow.dashboard import build_dashboard
from smb_cashflow.models import (
    BusinessConfig,
    CashFlowSummary,
    Transaction,
    WhatIfResult,
    WhatIfScenario,
)
from smb_cashflow.views import (
    METRIC_COLUMNS,
    SCOPE_SECTIONS,
    SCOPES,
    alerts_to_dataframe,
    dashboard_sections,
    history_to_dataframe,
    insights_to_dataframe,
    killers_to_dataframe,
    summary_to_dataframe,
    what_if_to_dataframe,
)

NOW = date(2025, 10, 18)
BUSINESS = BusinessConfig(name="Acme", currency="EUR", starting_balance=15_000)


def _transactions() -> list[Transaction]:
    return [
        Transaction(
            id="i1", kind="income", amount=5000, date=date(2025, 10, 3), category="sales"
        ),
        Transaction(
            id="e1", kind="expense", amount=3000, date=date(2025, 10, 1), category="rent"
        ),
    ]


def test_summary_frame_is_one_row_per_metric() -> None:
    summary = CashFlowSummary(
        current_balance=12_345.678,
        total_income=5000,
        total_expenses=3000,
        net_cash_flow=2000,
        burn_rate=1000,
        runway_months=12,
    )

    df = summary_to_dataframe(summary, "EUR")

    assert list(df.columns) == METRIC_COLUMNS
    assert df["key"].tolist() == [
        "current_balance",
        "total_income",
        "total_expenses",
        "net_cash_flow",
        "burn_rate",
        "runway_months",
    ]
    values = dict(zip(df["key"], df["value"]))
    assert values["current_balance"] == 12_345.68
    assert values["runway_months"] == 12
    assert df.loc[df["key"] == "burn_rate", "unit"].item() == "EUR"


def test_sentinel_runway_is_displayed_as_no_burn() -> None:
    summary = CashFlowSummary(
        current_balance=1000,
        total_income=0,
        total_expenses=0,
        net_cash_flow=0,
        burn_rate=0,
        runway_months=999,
    )

    df = summary_to_dataframe(summary)

    assert df.loc[df["key"] == "runway_months", "value"].item() == "no burn"


def test_empty_list_views_keep_their_columns() -> None:
    assert list(history_to_dataframe([]).columns) == [
        "month_key",
        "label",
        "income",
        "expenses",
        "balance",
    ]
    assert list(alerts_to_dataframe([]).columns) == [
        "id",
        "severity",
        "title",
        "message",
        "created_at",
    ]
    assert killers_to_dataframe([]).empty
    assert list(insights_to_dataframe([], []).columns) == [
        "source",
        "id",
        "level",
        "title",
        "message",
    ]


def test_what_if_frame_without_cash_out() -> None:
    result = WhatIfResult(
        new_burn_rate=0,
        new_runway=999,
        cash_out_date=None,
        impact_summary="This scenario maintains your current financial trajectory.",
        new_net_cash_flow=2000,
    )

    df = what_if_to_dataframe(result)
    values = dict(zip(df["key"], df["value"]))

    assert values["cash_out_date"] == "never"
    assert values["new_runway"] == "no burn"


def test_dashboard_sections_cover_every_scope() -> None:
    dashboard = build_dashboard(
        _transactions(),
        BUSINESS,
        now=NOW,
        scenario=WhatIfScenario(hire_count=1, avg_salary=3000),
    )

    sections = dashboard_sections(dashboard)

    for scope in SCOPES:
        for name in SCOPE_SECTIONS[scope]:
            assert name in sections
    assert len(sections["history"]) == 6
    assert len(sections["forecast"]) == 6
    assert "safe_to_spend" in sections["summary"]["key"].tolist()
    assert sections["health"].loc[0, "key"] == "score"


def test_what_if_section_only_with_scenario() -> None:
    dashboard = build_dashboard(_transactions(), BUSINESS, now=NOW)

    assert "what-if" not in dashboard_sections(dashboard)
