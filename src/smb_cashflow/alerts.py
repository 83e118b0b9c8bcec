# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Alert detection.

Panic alerts
------------
``check_panic_alerts()`` evaluates three independent rules:

- runway <= 3 months                         → critical 'runway_critical'
- last two history months with expenses > income
                                             → warning 'consecutive_loss'
- last month's expenses > 130% of the month before
                                             → warning 'expense_spike'

Alerts are identified by a stable id. Dismissing an alert is caller-side
state: the caller keeps the set of dismissed ids and filters with
``active_alerts()``.

Silent expense killers
----------------------
``detect_silent_expense_killers()`` looks for cost categories growing
unnoticed:

- per expense category with at least two expenses dated 0 to 3 calendar
  months back, the two most recent months with spend are compared; growth
  above 10% is reported (severity low < 25% <= medium < 50% <= high);
- every recurring 'software' expense above 200/month is reported as a high
  recurring cost (severity high above 500, medium otherwise).

The result is sorted by monthly amount, largest first.
"""

from collections.abc import Collection, Iterable, Sequence
from datetime import date

from .formatting import plural, round_half_up
from .models import (
    CashFlowSummary,
    KillerSeverity,
    MonthlyTotals,
    PanicAlert,
    SilentExpenseKiller,
    Transaction,
)
from .periods import months_ago
from .policy import (
    EXPENSE_SPIKE_RATIO,
    SILENT_KILLER_LOOKBACK_MONTHS,
    SILENT_KILLER_MIN_GROWTH,
    SUBSCRIPTION_HIGH_THRESHOLD,
    SUBSCRIPTION_REVIEW_THRESHOLD,
)

SUBSCRIPTION_CATEGORY = "software"


def check_panic_alerts(
    summary: CashFlowSummary,
    history: Sequence[MonthlyTotals],
    now: date,
) -> list[PanicAlert]:
    """Return the panic alerts raised by the current position and history."""
    alerts: list[PanicAlert] = []

    if summary.runway_months <= 3:
        alerts.append(
            PanicAlert(
                id="runway-critical",
                type="runway_critical",
                title="Critical: Running Out of Money",
                message=(
                    f"You only have {summary.runway_months} "
                    f"{plural(summary.runway_months, 'month')} of cash left. "
                    "Take immediate action."
                ),
                severity="critical",
                created_at=now,
            )
        )

    if len(history) >= 2:
        previous, current = history[-2], history[-1]

        if all(m.expenses > m.income for m in (previous, current)):
            alerts.append(
                PanicAlert(
                    id="consecutive-loss",
                    type="consecutive_loss",
                    title="Two Months of Losses",
                    message=(
                        "Your expenses have exceeded income for two consecutive "
                        "months. Review spending patterns."
                    ),
                    severity="warning",
                    created_at=now,
                )
            )

        if (
            previous.expenses > 0
            and current.expenses > previous.expenses * EXPENSE_SPIKE_RATIO
        ):
            increase = round_half_up(
                (current.expenses - previous.expenses) / previous.expenses * 100
            )
            alerts.append(
                PanicAlert(
                    id="expense-spike",
                    type="expense_spike",
                    title="Spending Spike Detected",
                    message=(
                        f"Your expenses increased by {increase}% this month. "
                        "Make sure this was intentional."
                    ),
                    severity="warning",
                    created_at=now,
                )
            )

    return alerts


def active_alerts(
    alerts: Iterable[PanicAlert],
    dismissed_ids: Collection[str],
) -> list[PanicAlert]:
    """Drop the alerts the caller has dismissed."""
    return [a for a in alerts if a.id not in dismissed_ids]


def _growth_severity(growth_rate: float) -> KillerSeverity:
    if growth_rate < 25:
        return "low"
    if growth_rate < 50:
        return "medium"
    return "high"


def _category_growth_killers(
    transactions: Sequence[Transaction],
    now: date,
) -> list[SilentExpenseKiller]:
    # category -> {months ago -> total}, categories in order of first appearance
    by_category: dict[str, dict[int, float]] = {}
    counts: dict[str, int] = {}

    for t in transactions:
        if not t.is_expense:
            continue
        offset = months_ago(t.date, now)
        if not 0 <= offset <= SILENT_KILLER_LOOKBACK_MONTHS:
            continue
        per_month = by_category.setdefault(t.category, {})
        per_month[offset] = per_month.get(offset, 0.0) + t.amount
        counts[t.category] = counts.get(t.category, 0) + 1

    killers: list[SilentExpenseKiller] = []
    for category, per_month in by_category.items():
        if counts[category] < 2 or len(per_month) < 2:
            continue

        latest, before = sorted(per_month)[:2]
        current = per_month[latest]
        previous = per_month[before]
        if previous <= 0 or current <= previous:
            continue

        growth_rate = (current - previous) * 100 / previous
        if growth_rate <= SILENT_KILLER_MIN_GROWTH:
            continue

        killers.append(
            SilentExpenseKiller(
                id=category,
                description=f"{category} expenses increased",
                category=category,
                monthly_amount=current,
                growth_rate=growth_rate,
                action_suggestion=(
                    f"Review your {category} spending - it grew "
                    f"{round_half_up(growth_rate)}% last month"
                ),
                severity=_growth_severity(growth_rate),
            )
        )
    return killers


def _subscription_killers(
    transactions: Sequence[Transaction],
) -> list[SilentExpenseKiller]:
    killers: list[SilentExpenseKiller] = []
    for t in transactions:
        if not (
            t.is_expense and t.is_recurring and t.category == SUBSCRIPTION_CATEGORY
        ):
            continue
        if t.amount <= SUBSCRIPTION_REVIEW_THRESHOLD:
            continue
        killers.append(
            SilentExpenseKiller(
                id=t.id,
                description=f"High recurring cost: {t.description}",
                category=t.category,
                monthly_amount=t.amount,
                growth_rate=0.0,
                action_suggestion=(
                    "Review if this subscription is still needed or can be downgraded"
                ),
                severity="high" if t.amount > SUBSCRIPTION_HIGH_THRESHOLD else "medium",
            )
        )
    return killers


def detect_silent_expense_killers(
    transactions: Iterable[Transaction],
    now: date,
) -> list[SilentExpenseKiller]:
    """
    Detect growing cost categories and expensive recurring subscriptions.

    Args:
        transactions: All transactions (read only).
        now: Reference date; month offsets are counted from its month.

    Returns:
        SilentExpenseKiller entries sorted by monthly amount, largest first.
    """
    txs = tuple(transactions)
    killers = _category_growth_killers(txs, now) + _subscription_killers(txs)
    return sorted(killers, key=lambda k: k.monthly_amount, reverse=True)
