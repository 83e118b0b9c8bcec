# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for SMB Cashflow.

This module reads transactions from a CSV file and normalizes them into
``Transaction`` objects suitable for the analysis engine.

Expected input format
---------------------

Column names are case-insensitive. Required columns:

    date, type, amount, category, description

- ``date``:        date of the transaction (YYYY-MM-DD)
- ``type``:        'income' or 'expense' (``kind`` is accepted as an alias)
- ``amount``:      non-negative magnitude; the sign comes from ``type``
- ``category``:    category tag (e.g. 'sales', 'rent', 'software')
- ``description``: free text (``label`` is accepted as an alias)

Optional columns:

    id, is_recurring, recurring_frequency, burn_category, is_experiment,
    experiment_notes, is_founder_draw

Boolean columns accept true/false, yes/no, 1/0 (empty means false). Rows
without an id get ``tx-<row number>`` (1-based).

Any other column is ignored. If the structure or a value is invalid, a
clear ValueError is raised.
"""

import logging
import os
from typing import Any, Optional, Union

import pandas as pd

from .models import BURN_CATEGORIES, RECURRING_FREQUENCIES, TRANSACTION_KINDS, Transaction

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: frozenset[str] = frozenset(
    {"date", "type", "amount", "category", "description"}
)

_TRUE_VALUES = {"true", "1", "yes", "y"}
_FALSE_VALUES = {"false", "0", "no", "n", ""}


def _is_missing(value: Any) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _parse_bool(value: Any, column: str) -> bool:
    if _is_missing(value):
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value {value!r} in '{column}' column.")


def _optional_text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    text = str(value).strip()
    return text or None


def _optional_choice(value: Any, column: str, choices: tuple[str, ...]) -> Optional[str]:
    text = _optional_text(value)
    if text is None:
        return None
    text = text.lower()
    if text not in choices:
        raise ValueError(
            f"Invalid value {value!r} in '{column}' column. "
            f"Expected one of: {', '.join(choices)}."
        )
    return text


def read_transactions(path: Union[str, "os.PathLike[str]"]) -> list[Transaction]:
    """
    Read transactions from a CSV file.

    Parameters
    ----------
    path:
        Path to the CSV file.

    Returns
    -------
    list[Transaction]
        Transactions in file order.

    Raises
    ------
    ValueError
        If required columns are missing, or if a date, amount, type, burn
        category, frequency or boolean value is invalid.
    """
    # Read everything as text; typed parsing happens below, column by column.
    df = pd.read_csv(path, dtype=str)

    # Normalize column names to lowercase (to make the check case-insensitive)
    df.columns = [str(c).lower().strip() for c in df.columns]
    cols = set(df.columns)

    # Aliases: 'kind' -> 'type', 'label' -> 'description'
    if "kind" in cols and "type" not in cols:
        df = df.rename(columns={"kind": "type"})
    if "label" in cols and "description" not in cols:
        df = df.rename(columns={"label": "description"})
    cols = set(df.columns)

    missing = REQUIRED_COLUMNS - cols
    if missing:
        raise ValueError(
            "Invalid transactions structure. Missing column(s): "
            + ", ".join(sorted(missing))
            + ". Expected at least: date, type, amount, category, description "
            "(column names are case-insensitive)."
        )

    d = df.copy()

    # Parse date strictly: invalid dates should fail loudly
    try:
        d["date"] = pd.to_datetime(d["date"], errors="raise")
    except Exception as exc:  # noqa: BLE001
        raise ValueError("Invalid values in 'date' column.") from exc
    if d["date"].isna().any():
        raise ValueError("Missing values in 'date' column.")

    d["amount"] = pd.to_numeric(d["amount"], errors="coerce")
    if d["amount"].isna().any():
        raise ValueError("Invalid numeric values in 'amount' column.")
    if (d["amount"] < 0).any():
        raise ValueError(
            "Negative values in 'amount' column. Amounts are magnitudes; "
            "use the 'type' column for the direction."
        )

    d["type"] = d["type"].astype(str).str.strip().str.lower()
    unknown_kinds = sorted(set(d["type"]) - set(TRANSACTION_KINDS))
    if unknown_kinds:
        raise ValueError(
            f"Invalid values in 'type' column: {', '.join(unknown_kinds)}. "
            "Expected 'income' or 'expense'."
        )

    transactions: list[Transaction] = []
    for position, row in enumerate(d.to_dict(orient="records"), start=1):
        tx_id = _optional_text(row.get("id")) or f"tx-{position}"
        transactions.append(
            Transaction(
                id=tx_id,
                kind=row["type"],
                amount=float(row["amount"]),
                date=row["date"].date(),
                category=(_optional_text(row["category"]) or "other").lower(),
                description=_optional_text(row["description"]) or "",
                is_recurring=_parse_bool(row.get("is_recurring"), "is_recurring"),
                recurring_frequency=_optional_choice(  # type: ignore[arg-type]
                    row.get("recurring_frequency"),
                    "recurring_frequency",
                    RECURRING_FREQUENCIES,
                ),
                burn_category=_optional_choice(  # type: ignore[arg-type]
                    row.get("burn_category"), "burn_category", BURN_CATEGORIES
                ),
                is_experiment=_parse_bool(row.get("is_experiment"), "is_experiment"),
                experiment_notes=_optional_text(row.get("experiment_notes")),
                is_founder_draw=_parse_bool(
                    row.get("is_founder_draw"), "is_founder_draw"
                ),
            )
        )

    logger.info("Read %d transactions from %s", len(transactions), path)
    return transactions
