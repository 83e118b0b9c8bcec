# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Value objects shared by the SMB Cashflow analysis engine.

Every structure in this module is an immutable dataclass. Inputs
(``Transaction``, ``BusinessConfig``) are produced by the surrounding
layers (CSV reader, configuration loader, tests); outputs (summary, health
score, breakdowns, insights, alerts...) are rebuilt from scratch by the
engine on every call and carry no reference to the transactions that
produced them.

Sequences held by value objects are tuples so that a result can be shared
between callers without any risk of in-place mutation.
"""

from dataclasses import dataclass
from datetime import date
from typing import Literal, Optional

TransactionKind = Literal["income", "expense"]
RecurringFrequency = Literal["weekly", "monthly", "yearly"]
BurnCategory = Literal["survival", "growth", "waste"]
BusinessType = Literal["service", "product", "saas", "retail", "other"]

HealthStatus = Literal["critical", "warning", "moderate", "healthy"]
IncomeTrend = Literal["increasing", "stable", "decreasing"]
InsightType = Literal["info", "warning", "danger", "success"]
CFOInsightType = Literal["hiring", "expense", "revenue", "runway", "general"]
Priority = Literal["low", "medium", "high"]
AlertType = Literal["runway_critical", "expense_spike", "consecutive_loss"]
AlertSeverity = Literal["info", "warning", "critical"]
ActionCategory = Literal["review", "reduce", "increase", "delay"]
KillerSeverity = Literal["low", "medium", "high"]

TRANSACTION_KINDS: tuple[str, ...] = ("income", "expense")
BURN_CATEGORIES: tuple[str, ...] = ("survival", "growth", "waste")
RECURRING_FREQUENCIES: tuple[str, ...] = ("weekly", "monthly", "yearly")
BUSINESS_TYPES: tuple[str, ...] = ("service", "product", "saas", "retail", "other")


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Transaction:
    """
    A single income or expense event.

    Attributes:
        id: Opaque identifier.
        kind: 'income' or 'expense'. The sign of the cash effect is derived
            from the kind; ``amount`` is always a non-negative magnitude.
        amount: Monetary magnitude (>= 0), currency-less.
        date: Calendar date of the event.
        category: Free category tag (e.g. 'rent', 'sales', 'software').
        description: Free text.
        is_recurring: Whether the transaction repeats.
        recurring_frequency: Optional frequency, meaningful only if recurring.
        burn_category: Optional explicit burn classification (expenses only).
        is_experiment: Expense flagged as an experiment.
        experiment_notes: Optional notes about the experiment outcome.
        is_founder_draw: Expense flagged as a founder withdrawal.
    """

    id: str
    kind: TransactionKind
    amount: float
    date: date
    category: str
    description: str = ""
    is_recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None
    burn_category: Optional[BurnCategory] = None
    is_experiment: bool = False
    experiment_notes: Optional[str] = None
    is_founder_draw: bool = False

    @property
    def is_income(self) -> bool:
        return self.kind == "income"

    @property
    def is_expense(self) -> bool:
        return self.kind == "expense"

    @property
    def effective_burn_category(self) -> Optional[BurnCategory]:
        """Explicit burn category, ignored for income transactions."""
        return self.burn_category if self.is_expense else None

    @property
    def is_founder_draw_expense(self) -> bool:
        return self.is_expense and self.is_founder_draw

    @property
    def is_experiment_expense(self) -> bool:
        return self.is_expense and self.is_experiment


@dataclass(frozen=True)
class BusinessConfig:
    """
    Business-level configuration supplied by the caller.

    ``starting_balance`` is the cash balance as of *now*, not at the start
    of the transaction history. ``currency`` is a display label only and is
    never converted. ``monthly_fixed_expenses`` is informational.
    """

    name: str
    business_type: BusinessType = "other"
    currency: str = "USD"
    starting_balance: float = 0.0
    monthly_fixed_expenses: float = 0.0


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CashFlowSummary:
    """
    Snapshot of the business cash position.

    Attributes:
        current_balance: Starting balance plus all-time net flow.
        total_income: Income of the current calendar month.
        total_expenses: Expenses of the current calendar month.
        net_cash_flow: total_income - total_expenses.
        burn_rate: Average monthly expense over the trailing 3 months.
        runway_months: floor(current_balance / burn_rate), or the runway
            sentinel when nothing is being burnt.
    """

    current_balance: float
    total_income: float
    total_expenses: float
    net_cash_flow: float
    burn_rate: float
    runway_months: int


@dataclass(frozen=True)
class MonthlyTotals:
    """Income, expenses and end-of-month balance for one calendar month."""

    month_key: str
    label: str
    income: float
    expenses: float
    balance: float = 0.0


@dataclass(frozen=True)
class ForecastPoint:
    """
    One projected month.

    ``balance`` is clamped at zero for display; ``projected_balance`` keeps
    the true (possibly negative) trajectory used to detect a cash-out month.
    """

    month_key: str
    label: str
    income: float
    expenses: float
    balance: float
    projected_balance: float


# ---------------------------------------------------------------------------
# Scores and breakdowns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HealthFactors:
    """Rounded sub-factors of the cash health score."""

    balance_factor: int
    burn_rate_factor: int
    runway_factor: int
    income_trend_factor: int
    expense_growth_factor: int


@dataclass(frozen=True)
class CashHealthScore:
    score: int
    status: HealthStatus
    explanation: str
    action_hint: str
    factors: HealthFactors


@dataclass(frozen=True)
class SafeToSpend:
    amount: int
    percentage: int
    explanation: str
    min_runway_protected: float


@dataclass(frozen=True)
class BurnBreakdown:
    """Monthly burn split into survival / growth / waste (rounded amounts)."""

    survival_burn: int
    growth_burn: int
    waste_burn: int
    total_burn: int
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True)
class IncomeStability:
    is_stable: bool
    volatility_score: int
    recurring_percentage: int
    trend: IncomeTrend
    warning: Optional[str] = None


@dataclass(frozen=True)
class Experiment:
    description: str
    amount: float
    date: date
    notes: Optional[str] = None


@dataclass(frozen=True)
class ExperimentSummary:
    total_spend: float
    experiment_count: int
    experiments: tuple[Experiment, ...]
    no_return_experiments: tuple[str, ...]


@dataclass(frozen=True)
class FounderDrawImpact:
    total_draws: float
    runway_impact: int
    warning: Optional[str] = None


@dataclass(frozen=True)
class SilentExpenseKiller:
    id: str
    description: str
    category: str
    monthly_amount: float
    growth_rate: float
    action_suggestion: str
    severity: KillerSeverity


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WhatIfScenario:
    """
    Hypothetical changes applied on top of the current month.

    Percentages are expressed in percent (10 means +10%).
    """

    hire_count: int = 0
    avg_salary: float = 0.0
    marketing_change_pct: float = 0.0
    revenue_change_pct: float = 0.0
    expense_change_pct: float = 0.0


@dataclass(frozen=True)
class WhatIfResult:
    new_burn_rate: int
    new_runway: int
    cash_out_date: Optional[date]
    impact_summary: str
    new_net_cash_flow: int


# ---------------------------------------------------------------------------
# Advisory outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Insight:
    id: str
    type: InsightType
    title: str
    message: str
    action_label: Optional[str] = None


@dataclass(frozen=True)
class CFOInsight:
    id: str
    type: CFOInsightType
    title: str
    message: str
    priority: Priority
    impact: Optional[str] = None


@dataclass(frozen=True)
class PanicAlert:
    """
    Alert raised by the engine.

    Whether an alert has been read or dismissed is caller-side state; see
    ``alerts.active_alerts``.
    """

    id: str
    type: AlertType
    title: str
    message: str
    severity: AlertSeverity
    created_at: date


@dataclass(frozen=True)
class WeeklyAction:
    id: str
    action: str
    category: ActionCategory
    reason: str
