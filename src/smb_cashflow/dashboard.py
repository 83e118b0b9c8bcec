# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Single-pass orchestration of the cash-flow dashboard.

``build_dashboard()`` is the high-level entry point used by the CLI (and by
any other presentation layer). It computes every view of the engine in one
pass over the same inputs:

1. Resolves ``now`` *once*. Every calculator receives that same date, so the
   monthly history window, the current-month filters, the trailing burn
   window and the scenario cash-out date all agree.

2. Materializes the transactions into a tuple. The caller's collection is
   never modified and can be reused across passes.

3. Builds the base aggregates:
   - monthly history (history.py),
   - cash-flow summary (summary.py).

4. Fans out to the independent views:
   - cash health score, safe-to-spend, burn breakdown, income stability,
     experiments, founder-draw impact, forecast, panic alerts, silent
     expense killers, optional what-if scenario.

5. Builds the advisory outputs that consume the views above:
   - dashboard insights, CFO insights, weekly actions.

The result is a frozen ``Dashboard``. There is no caching: calling
``build_dashboard()`` again with the same inputs yields an equal result.
"""

import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .alerts import active_alerts, check_panic_alerts, detect_silent_expense_killers
from .burn import (
    calculate_burn_breakdown,
    calculate_founder_draw_impact,
    summarize_experiments,
)
from .forecast import find_cash_out_point, project_future_cash
from .health import calculate_cash_health_score
from .history import build_monthly_history
from .income import calculate_income_stability
from .insights import generate_cfo_insights, generate_insights, generate_weekly_actions
from .models import (
    BurnBreakdown,
    BusinessConfig,
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
    Transaction,
    WeeklyAction,
    WhatIfResult,
    WhatIfScenario,
)
from .periods import resolve_now
from .policy import DEFAULT_BURN_POLICY, DEFAULT_MIN_RUNWAY_MONTHS, BurnPolicy
from .safe_to_spend import calculate_safe_to_spend
from .scenarios import calculate_what_if
from .summary import calculate_cash_flow_summary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisSettings:
    """
    Tunable inputs of a dashboard pass.

    Attributes:
        min_runway_months: Runway protected by the safe-to-spend allowance.
        history_months: Number of calendar months in the monthly history.
        forecast_months: Forecast horizon.
        burn_policy: Category taxonomy of the burn classifier.
    """

    min_runway_months: float = DEFAULT_MIN_RUNWAY_MONTHS
    history_months: int = 6
    forecast_months: int = 6
    burn_policy: BurnPolicy = DEFAULT_BURN_POLICY


@dataclass(frozen=True)
class Dashboard:
    """All engine outputs computed for one ``as_of`` date."""

    as_of: date
    business: BusinessConfig
    summary: CashFlowSummary
    history: tuple[MonthlyTotals, ...]
    health: CashHealthScore
    safe_to_spend: SafeToSpend
    burn: BurnBreakdown
    income_stability: IncomeStability
    experiments: ExperimentSummary
    founder_draws: FounderDrawImpact
    forecast: tuple[ForecastPoint, ...]
    cash_out_point: Optional[ForecastPoint]
    alerts: tuple[PanicAlert, ...]
    silent_killers: tuple[SilentExpenseKiller, ...]
    insights: tuple[Insight, ...]
    cfo_insights: tuple[CFOInsight, ...]
    weekly_actions: tuple[WeeklyAction, ...]
    what_if: Optional[WhatIfResult] = None
    settings: AnalysisSettings = field(default_factory=AnalysisSettings)


def build_dashboard(
    transactions: Iterable[Transaction],
    business: BusinessConfig,
    now: Optional[date] = None,
    settings: Optional[AnalysisSettings] = None,
    scenario: Optional[WhatIfScenario] = None,
    dismissed_alert_ids: Collection[str] = (),
) -> Dashboard:
    """
    Compute every dashboard view in a single, consistent pass.

    Args:
        transactions: Transactions of the business (any order, read only).
        business: Business configuration (starting balance, currency label).
        now: Reference date. Defaults to today, resolved once for the pass.
        settings: Analysis settings; defaults to AnalysisSettings().
        scenario: Optional what-if scenario to simulate.
        dismissed_alert_ids: Alert ids already dismissed by the caller.

    Returns:
        A Dashboard instance.
    """
    as_of = resolve_now(now)
    cfg = settings or AnalysisSettings()
    txs = tuple(transactions)

    logger.debug("Building dashboard for %s (%d transactions)", as_of, len(txs))

    history = build_monthly_history(
        txs,
        as_of,
        months=cfg.history_months,
        closing_balance=business.starting_balance,
    )
    summary = calculate_cash_flow_summary(txs, business.starting_balance, as_of)

    burn = calculate_burn_breakdown(txs, as_of, cfg.burn_policy)
    stability = calculate_income_stability(txs, history)
    killers = detect_silent_expense_killers(txs, as_of)

    forecast = project_future_cash(
        summary.current_balance,
        summary.total_income,
        summary.burn_rate,
        cfg.forecast_months,
        as_of,
    )

    what_if = None
    if scenario is not None:
        what_if = calculate_what_if(summary, scenario, as_of)

    alerts = active_alerts(check_panic_alerts(summary, history, as_of), dismissed_alert_ids)

    return Dashboard(
        as_of=as_of,
        business=business,
        summary=summary,
        history=tuple(history),
        health=calculate_cash_health_score(summary, history),
        safe_to_spend=calculate_safe_to_spend(summary, cfg.min_runway_months),
        burn=burn,
        income_stability=stability,
        experiments=summarize_experiments(txs),
        founder_draws=calculate_founder_draw_impact(txs, summary, as_of),
        forecast=tuple(forecast),
        cash_out_point=find_cash_out_point(forecast),
        alerts=tuple(alerts),
        silent_killers=tuple(killers),
        insights=tuple(generate_insights(summary, txs, as_of)),
        cfo_insights=tuple(generate_cfo_insights(summary, burn, stability)),
        weekly_actions=tuple(generate_weekly_actions(summary, burn, killers)),
        what_if=what_if,
        settings=cfg,
    )
