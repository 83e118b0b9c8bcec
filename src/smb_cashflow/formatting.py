# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Small numeric and text helpers used when building advisory messages.

No currency symbol handling lives here: the currency is a label owned by
the presentation layer. Amounts embedded in canned messages are rendered
with thousands separators only.
"""

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves rounded towards positive infinity.

    Python's built-in ``round`` uses banker's rounding (``round(2.5) == 2``),
    which would make published scores drift on exact halves.
    """
    return int(math.floor(value + 0.5))


def format_amount(value: float) -> str:
    """
    Format an amount with thousands separators and at most 3 decimals.

    Examples:
        1234.0    -> '1,234'
        1234.5    -> '1,234.5'
        -3000     -> '-3,000'
        0.33333.. -> '0.333'
    """
    rounded = round(float(value), 3)
    if rounded == int(rounded):
        return f"{int(rounded):,}"
    return f"{rounded:,.3f}".rstrip("0").rstrip(".")


def format_category_name(category: str) -> str:
    """Turn a snake_case category tag into a display name ('founder_draw' -> 'Founder Draw')."""
    return " ".join(word[:1].upper() + word[1:] for word in category.split("_"))


def plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"
