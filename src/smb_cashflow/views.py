# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for SMB Cashflow.

This module turns engine outputs (value objects from models.py) into pandas
DataFrames ready for display or CSV export. It contains no financial logic:
every number shown here was computed by the engine.

Two shapes are used:

- metric views (summary, health, safe-to-spend, burn, income stability,
  founder draws, what-if): one row per metric with the columns
  key, label, value, unit;
- list views (history, forecast, alerts, insights, actions, silent
  killers): one row per item, with a stable column order.

``dashboard_sections()`` maps every section name used by the CLI
``--scope`` option to its DataFrame.
"""

from collections.abc import Iterable, Sequence
from dataclasses import asdict
from typing import Any, Optional

import pandas as pd

from .dashboard import Dashboard
from .models import (
    BurnBreakdown,
    CashFlowSummary,
    CashHealthScore,
    CFOInsight,
    ExperimentSummary,
    ForecastPoint,
    FounderDrawImpact,
    IncomeStability,
    Insight,
    MonthlyTotals,
    PanicAlert,
    SafeToSpend,
    SilentExpenseKiller,
    WeeklyAction,
    WhatIfResult,
)
from .policy import RUNWAY_SENTINEL

METRIC_COLUMNS: list[str] = ["key", "label", "value", "unit"]

SCOPES: tuple[str, ...] = (
    "summary",
    "health",
    "burn",
    "income",
    "forecast",
    "alerts",
    "insights",
    "actions",
    "what-if",
)


def _metrics_frame(rows: Iterable[tuple[str, str, Any, str]]) -> pd.DataFrame:
    data = [
        {"key": key, "label": label, "value": value, "unit": unit}
        for key, label, value, unit in rows
    ]
    return pd.DataFrame(data, columns=METRIC_COLUMNS)


def _records_frame(items: Sequence[Any], columns: list[str]) -> pd.DataFrame:
    """Build a DataFrame from dataclass instances, keeping ``columns`` only."""
    if not items:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([asdict(item) for item in items])[columns]


def _runway_display(months: int) -> Any:
    # The runway sentinel means "not burning"; show it as such.
    return "no burn" if months >= RUNWAY_SENTINEL else months


def summary_to_dataframe(summary: CashFlowSummary, currency: str = "") -> pd.DataFrame:
    return _metrics_frame(
        [
            ("current_balance", "Current balance", round(summary.current_balance, 2), currency),
            ("total_income", "Income this month", round(summary.total_income, 2), currency),
            ("total_expenses", "Expenses this month", round(summary.total_expenses, 2), currency),
            ("net_cash_flow", "Net cash flow", round(summary.net_cash_flow, 2), currency),
            ("burn_rate", "Burn rate (3-month average)", round(summary.burn_rate, 2), currency),
            ("runway_months", "Runway", _runway_display(summary.runway_months), "months"),
        ]
    )


def health_to_dataframe(health: CashHealthScore) -> pd.DataFrame:
    f = health.factors
    return _metrics_frame(
        [
            ("score", f"Cash health ({health.status})", health.score, "points / 100"),
            ("balance_factor", "Balance", f.balance_factor, "points / 25"),
            ("burn_rate_factor", "Burn vs income", f.burn_rate_factor, "points / 20"),
            ("runway_factor", "Runway", f.runway_factor, "points / 25"),
            ("income_trend_factor", "Income trend", f.income_trend_factor, "points / 15"),
            (
                "expense_growth_factor",
                "Expense growth",
                f.expense_growth_factor,
                "points / 15",
            ),
            ("explanation", "Explanation", health.explanation, "text"),
            ("action_hint", "Next step", health.action_hint, "text"),
        ]
    )


def safe_to_spend_to_dataframe(safe: SafeToSpend, currency: str = "") -> pd.DataFrame:
    return _metrics_frame(
        [
            ("safe_to_spend", "Safe to spend", safe.amount, currency),
            ("safe_to_spend_pct", "Share of balance", safe.percentage, "percent"),
            ("min_runway_protected", "Protected runway", safe.min_runway_protected, "months"),
            ("explanation", "Explanation", safe.explanation, "text"),
        ]
    )


def burn_to_dataframe(
    burn: BurnBreakdown,
    experiments: Optional[ExperimentSummary] = None,
    founder_draws: Optional[FounderDrawImpact] = None,
    currency: str = "",
) -> pd.DataFrame:
    rows: list[tuple[str, str, Any, str]] = [
        ("survival_burn", "Must-pay expenses", burn.survival_burn, currency),
        ("growth_burn", "Growth investments", burn.growth_burn, currency),
        ("waste_burn", "Unnecessary costs", burn.waste_burn, currency),
        ("total_burn", "Total burn", burn.total_burn, currency),
    ]
    rows.extend(
        (f"recommendation_{i}", "Recommendation", text, "text")
        for i, text in enumerate(burn.recommendations, start=1)
    )
    if experiments is not None:
        rows.append(("experiment_spend", "Experiment spend", experiments.total_spend, currency))
        rows.append(("experiment_count", "Experiments", experiments.experiment_count, "count"))
    if founder_draws is not None:
        rows.append(("founder_draws", "Founder draws", founder_draws.total_draws, currency))
        rows.append(
            ("founder_runway_impact", "Runway cost of draws", founder_draws.runway_impact, "months")
        )
        if founder_draws.warning:
            rows.append(("founder_warning", "Warning", founder_draws.warning, "text"))
    return _metrics_frame(rows)


def income_to_dataframe(stability: IncomeStability) -> pd.DataFrame:
    rows: list[tuple[str, str, Any, str]] = [
        ("is_stable", "Stable income", stability.is_stable, "flag"),
        ("volatility_score", "Volatility", stability.volatility_score, "points / 100"),
        ("recurring_percentage", "Recurring income", stability.recurring_percentage, "percent"),
        ("trend", "Trend", stability.trend, "text"),
    ]
    if stability.warning:
        rows.append(("warning", "Warning", stability.warning, "text"))
    return _metrics_frame(rows)


def what_if_to_dataframe(result: WhatIfResult, currency: str = "") -> pd.DataFrame:
    cash_out = result.cash_out_date.isoformat() if result.cash_out_date else "never"
    return _metrics_frame(
        [
            ("new_net_cash_flow", "New net cash flow", result.new_net_cash_flow, currency),
            ("new_burn_rate", "New burn rate", result.new_burn_rate, currency),
            ("new_runway", "New runway", _runway_display(result.new_runway), "months"),
            ("cash_out_date", "Cash-out date", cash_out, "date"),
            ("impact_summary", "Impact", result.impact_summary, "text"),
        ]
    )


def history_to_dataframe(history: Sequence[MonthlyTotals]) -> pd.DataFrame:
    return _records_frame(history, ["month_key", "label", "income", "expenses", "balance"])


def forecast_to_dataframe(points: Sequence[ForecastPoint]) -> pd.DataFrame:
    return _records_frame(
        points,
        ["month_key", "label", "income", "expenses", "balance", "projected_balance"],
    )


def alerts_to_dataframe(alerts: Sequence[PanicAlert]) -> pd.DataFrame:
    return _records_frame(alerts, ["id", "severity", "title", "message", "created_at"])


def insights_to_dataframe(
    insights: Sequence[Insight],
    cfo_insights: Sequence[CFOInsight] = (),
) -> pd.DataFrame:
    """Dashboard insights followed by CFO insights, in one table."""
    rows: list[dict[str, object]] = [
        {"source": "dashboard", "id": i.id, "level": i.type, "title": i.title, "message": i.message}
        for i in insights
    ]
    rows.extend(
        {"source": "cfo", "id": i.id, "level": i.priority, "title": i.title, "message": i.message}
        for i in cfo_insights
    )
    return pd.DataFrame(rows, columns=["source", "id", "level", "title", "message"])


def actions_to_dataframe(actions: Sequence[WeeklyAction]) -> pd.DataFrame:
    return _records_frame(actions, ["id", "category", "action", "reason"])


def killers_to_dataframe(killers: Sequence[SilentExpenseKiller]) -> pd.DataFrame:
    df = _records_frame(
        killers,
        ["id", "category", "severity", "monthly_amount", "growth_rate", "action_suggestion"],
    )
    if not df.empty:
        df = df.assign(growth_rate=df["growth_rate"].astype(float).round(1))
    return df


def dashboard_sections(dashboard: Dashboard) -> dict[str, pd.DataFrame]:
    """
    Build every displayable section of a dashboard.

    Keys are the CLI scope names; the 'what-if' section is present only
    when a scenario was simulated. Sections are returned in display order.
    """
    currency = dashboard.business.currency
    summary = pd.concat(
        [
            summary_to_dataframe(dashboard.summary, currency),
            safe_to_spend_to_dataframe(dashboard.safe_to_spend, currency),
        ],
        ignore_index=True,
    )

    sections: dict[str, pd.DataFrame] = {
        "summary": summary,
        "health": health_to_dataframe(dashboard.health),
        "burn": burn_to_dataframe(
            dashboard.burn,
            dashboard.experiments,
            dashboard.founder_draws,
            currency,
        ),
        "income": income_to_dataframe(dashboard.income_stability),
        "history": history_to_dataframe(dashboard.history),
        "forecast": forecast_to_dataframe(dashboard.forecast),
        "alerts": alerts_to_dataframe(dashboard.alerts),
        "silent_killers": killers_to_dataframe(dashboard.silent_killers),
        "insights": insights_to_dataframe(dashboard.insights, dashboard.cfo_insights),
        "actions": actions_to_dataframe(dashboard.weekly_actions),
    }
    if dashboard.what_if is not None:
        sections["what-if"] = what_if_to_dataframe(dashboard.what_if, currency)
    return sections


# Scope name -> sections rendered for that scope.
SCOPE_SECTIONS: dict[str, tuple[str, ...]] = {
    "summary": ("summary",),
    "health": ("health",),
    "burn": ("burn",),
    "income": ("income", "history"),
    "forecast": ("forecast",),
    "alerts": ("alerts", "silent_killers"),
    "insights": ("insights",),
    "actions": ("actions",),
    "what-if": ("what-if",),
}
