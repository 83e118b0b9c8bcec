# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for SMB Cashflow.

This module is responsible for:
- loading the application configuration from a TOML file,
- validating the business section (starting balance, currency label, type),
- building the analysis settings and the burn-category taxonomy,
- exposing typed dataclasses used by the rest of the application.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import tomllib  # Python 3.11+

from .dashboard import AnalysisSettings
from .models import BUSINESS_TYPES, BusinessConfig
from .policy import DEFAULT_BURN_POLICY, DEFAULT_MIN_RUNWAY_MONTHS, BurnPolicy

DEFAULT_CONFIG_FILE = "smb_cashflow_config.toml"
DISPLAY_MODES: tuple[str, ...] = ("table", "csv", "both")


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for SMB Cashflow.

    This aggregates:
    - the business configuration (name, type, currency, starting balance),
    - the analysis settings (protected runway, history and forecast windows,
      burn-category taxonomy),
    - the display mode used by the CLI.
    """

    business: BusinessConfig
    settings: AnalysisSettings
    display_mode: str


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        return {}
    return section


def _parse_float(section: Mapping[str, Any], key: str, default: float) -> float:
    value = section.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{key}' in the configuration. Expected a number."
        ) from exc


def _parse_non_negative_int(section: Mapping[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{key}' in the configuration. Expected an integer."
        ) from exc
    if parsed < 0:
        raise ValueError(f"'{key}' cannot be negative in the configuration.")
    return parsed


def _parse_business(config_data: Mapping[str, Any]) -> BusinessConfig:
    """
    Extract and validate the [business] table.

    Raises:
        ValueError: if the table or the starting balance is missing/invalid,
            or if the business type is unknown.
    """
    business = config_data.get("business")
    if not isinstance(business, Mapping):
        raise ValueError("Config file is missing [business] table.")

    if "starting_balance" not in business:
        raise ValueError("Config file is missing [business].starting_balance.")

    business_type = str(business.get("type") or "other")
    if business_type not in BUSINESS_TYPES:
        raise ValueError(
            f"Unknown business type {business_type!r}. "
            f"Expected one of: {', '.join(BUSINESS_TYPES)}."
        )

    return BusinessConfig(
        name=str(business.get("name") or ""),
        business_type=business_type,  # type: ignore[arg-type]
        currency=str(business.get("currency") or "USD"),
        starting_balance=_parse_float(business, "starting_balance", 0.0),
        monthly_fixed_expenses=_parse_float(business, "monthly_fixed_expenses", 0.0),
    )


def _parse_burn_policy(config_data: Mapping[str, Any]) -> BurnPolicy:
    """
    Build the burn-category taxonomy from the optional [burn_categories]
    table. Each list not provided keeps its default.
    """
    section = _section(config_data, "burn_categories")
    if not section:
        return DEFAULT_BURN_POLICY

    survival = section.get("survival", sorted(DEFAULT_BURN_POLICY.survival_categories))
    growth = section.get("growth", sorted(DEFAULT_BURN_POLICY.growth_categories))

    for key, value in (("survival", survival), ("growth", growth)):
        if not isinstance(value, list):
            raise ValueError(
                f"[burn_categories].{key} must be a list of category names."
            )

    return BurnPolicy.from_lists(survival=survival, growth=growth)


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the SMB Cashflow application configuration from a TOML file.

    Expected top-level sections in the TOML file
    --------------------------------------------
    [business]
        Mandatory. name, type (service, product, saas, retail, other),
        currency (label only), starting_balance (mandatory),
        monthly_fixed_expenses.

    [analysis]
        Optional. min_runway_months (default 6), history_months (default 6),
        forecast_months (default 6).

    [burn_categories]
        Optional. survival / growth lists overriding the default taxonomy.

    [display]
        Optional. mode: "table", "csv" or "both" (default "table").

    Parameters
    ----------
    config_path : str, optional
        Path to the TOML configuration file. Defaults to
        'smb_cashflow_config.toml' in the current working directory.

    Returns
    -------
    AppConfig
        Parsed and validated application configuration.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)

    # 1) Business
    business = _parse_business(raw)

    # 2) Analysis settings
    analysis = _section(raw, "analysis")
    min_runway = _parse_float(analysis, "min_runway_months", DEFAULT_MIN_RUNWAY_MONTHS)
    if min_runway < 0:
        raise ValueError("'min_runway_months' cannot be negative in the configuration.")

    settings = AnalysisSettings(
        min_runway_months=min_runway,
        history_months=_parse_non_negative_int(analysis, "history_months", 6),
        forecast_months=_parse_non_negative_int(analysis, "forecast_months", 6),
        burn_policy=_parse_burn_policy(raw),
    )

    # 3) Display options
    display = _section(raw, "display")
    display_mode = str(display.get("mode", "table"))
    if display_mode not in DISPLAY_MODES:
        raise ValueError(
            f"Invalid display mode {display_mode!r}. "
            f"Expected one of: {', '.join(DISPLAY_MODES)}."
        )

    return AppConfig(business=business, settings=settings, display_mode=display_mode)
