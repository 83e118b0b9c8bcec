# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Policy constants for the SMB Cashflow engine.

The values below are product policy, not derived quantities. They are kept
in one place so that tests can pin exact values and so that a policy change
is a single-point edit.

The burn-category taxonomy (which expense categories count as "survival"
and which as "growth" when a transaction carries no explicit burn category)
is represented by ``BurnPolicy``. The default taxonomy can be replaced by a
policy built from the ``[burn_categories]`` section of the configuration
file (see config.py).
"""

from collections.abc import Iterable
from dataclasses import dataclass

# Runway reported when nothing is being burnt ("effectively infinite").
RUNWAY_SENTINEL: int = 999

# Trailing window (in months) used for burn rate and burn breakdown.
BURN_WINDOW_MONTHS: int = 3

# Neutral values used when the monthly history is too short.
NEUTRAL_TREND_FACTOR: float = 7.5
NEUTRAL_VOLATILITY: float = 50.0
MIN_TREND_POINTS: int = 2
MIN_VOLATILITY_POINTS: int = 3
TREND_LOOKBACK: int = 3

# Health score fallbacks and caps.
MONTHS_OF_COVER_FALLBACK: float = 12.0
EXPENSE_RATIO_FALLBACK: float = 2.0
BALANCE_FACTOR_CAP: float = 25.0
BURN_RATE_FACTOR_CAP: float = 20.0
RUNWAY_FACTOR_CAP: float = 25.0
TREND_FACTOR_CAP: float = 15.0
HEALTHY_RUNWAY_MONTHS: float = 18.0

# Safe-to-spend.
DEFAULT_MIN_RUNWAY_MONTHS: float = 6
RESERVE_SPEND_SHARE: float = 0.1

# What-if scenarios: a month is approximated as 30 days for cash-out dates.
DAYS_PER_MONTH: int = 30

# Founder draws: weight applied to the runway impact estimate. Kept as is
# until product decides on a better model.
FOUNDER_DRAW_RUNWAY_WEIGHT: float = 0.5
FOUNDER_DRAW_WARNING_SHARE: float = 0.3

# Advisory thresholds.
WASTE_ACTION_THRESHOLD: float = 500.0
EXPENSE_SPIKE_RATIO: float = 1.3
MAX_WEEKLY_ACTIONS: int = 5
SILENT_KILLER_LOOKBACK_MONTHS: int = 3
SILENT_KILLER_MIN_GROWTH: float = 10.0
SUBSCRIPTION_REVIEW_THRESHOLD: float = 200.0
SUBSCRIPTION_HIGH_THRESHOLD: float = 500.0


@dataclass(frozen=True)
class BurnPolicy:
    """
    Category taxonomy used to classify expenses without an explicit burn
    category.

    Attributes:
        survival_categories: Expense categories counted as survival burn.
        growth_categories: Expense categories counted as growth burn.

    Categories found in neither set fall back to survival for founder
    draws and to growth for everything else.
    """

    survival_categories: frozenset[str]
    growth_categories: frozenset[str]

    @classmethod
    def from_lists(
        cls,
        survival: Iterable[str],
        growth: Iterable[str],
    ) -> "BurnPolicy":
        survival_set = frozenset(str(c).strip() for c in survival if str(c).strip())
        growth_set = frozenset(str(c).strip() for c in growth if str(c).strip())

        overlap = survival_set & growth_set
        if overlap:
            raise ValueError(
                "Burn categories cannot be both survival and growth: "
                + ", ".join(sorted(overlap))
            )
        return cls(survival_categories=survival_set, growth_categories=growth_set)


DEFAULT_BURN_POLICY = BurnPolicy.from_lists(
    survival=("rent", "salary", "utilities", "legal"),
    growth=("marketing", "software", "equipment"),
)
