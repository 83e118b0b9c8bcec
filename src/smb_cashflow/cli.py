# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for SMB Cashflow.

This module wires together the building blocks of SMB Cashflow:

- application configuration (business, analysis settings, display options),
- transactions import from CSV,
- the single-pass dashboard engine,
- view helpers (tabular rendering of each dashboard section).

The CLI is intentionally thin: it does not implement any financial logic
itself. It orchestrates the underlying modules based on command-line
arguments and the configuration file.


High-level pipeline
-------------------

1) Load the TOML configuration (smb_cashflow_config.toml by default) using
   ``load_app_config()``. When no ``--config`` is given and the default file
   does not exist, built-in defaults are used (starting balance 0).

2) Read transactions from the CSV file given by ``--transactions``.

3) Resolve the reference date (``--as-of``, today by default) and the
   optional what-if scenario.

4) Build the dashboard in a single pass (``build_dashboard()``).

5) Render the sections selected by ``--scope`` as console tables and/or
   timestamped CSV files, depending on the display mode.


Scopes: what to render
----------------------

- ``summary`` (default): balances, burn rate, runway and safe-to-spend.
- ``health``:   cash health score and its factors.
- ``burn``:     survival / growth / waste breakdown, experiments, founder draws.
- ``income``:   income stability and monthly history.
- ``forecast``: projected balances.
- ``alerts``:   panic alerts and silent expense killers.
- ``insights``: dashboard and CFO insights.
- ``actions``:  weekly action list.
- ``what-if``:  scenario simulation (requires at least one scenario option).
- ``all``:      every section above.


What-if scenario
----------------

Any of the options below enables the scenario simulation:

    --hire-count N --avg-salary X
    --marketing-change PCT --revenue-change PCT --expense-change PCT

Percentages are expressed in percent (e.g. ``--revenue-change -20``).
"""

import argparse
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import __version__
from .config import DEFAULT_CONFIG_FILE, DISPLAY_MODES, AppConfig, load_app_config
from .dashboard import AnalysisSettings, build_dashboard
from .io import read_transactions
from .models import BusinessConfig, WhatIfScenario
from .views import SCOPE_SECTIONS, SCOPES, dashboard_sections

logger = logging.getLogger(__name__)

SECTION_TITLES: dict[str, str] = {
    "summary": "Cash-flow summary",
    "health": "Cash health score",
    "burn": "Burn breakdown",
    "income": "Income stability",
    "history": "Monthly history",
    "forecast": "Cash forecast",
    "alerts": "Panic alerts",
    "silent_killers": "Silent expense killers",
    "insights": "Insights",
    "actions": "Weekly actions",
    "what-if": "What-if scenario",
}


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="smb-cashflow",
        description=(
            "SMB Cashflow - Cash-flow dashboard engine for small businesses. "
            "Reads transactions, computes balances, runway, health score, "
            "burn breakdown, forecasts and advice, and renders them as tables "
            "or CSV files."
        ),
    )

    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of smb_cashflow and exit.",
    )

    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. "
            f"If omitted, '{DEFAULT_CONFIG_FILE}' in the current directory is "
            "used when present."
        ),
    )

    ap.add_argument(
        "--transactions",
        dest="transactions_path",
        metavar="CSV_PATH",
        help="CSV file with the transactions to analyse.",
    )

    ap.add_argument(
        "--as-of",
        dest="as_of",
        metavar="YYYY-MM-DD",
        help="Reference date of the analysis (default: today).",
    )

    ap.add_argument(
        "--scope",
        choices=[*SCOPES, "all"],
        default="summary",
        help="Which sections to render (default: summary).",
    )

    ap.add_argument(
        "--dismiss",
        dest="dismissed",
        nargs="+",
        default=[],
        metavar="ALERT_ID",
        help="Alert ids already dismissed; they are not reported again.",
    )

    # What-if scenario
    scenario = ap.add_argument_group("what-if scenario")
    scenario.add_argument("--hire-count", type=int, default=0, help="New hires.")
    scenario.add_argument(
        "--avg-salary", type=float, default=0.0, help="Average monthly salary per hire."
    )
    scenario.add_argument(
        "--marketing-change",
        type=float,
        default=0.0,
        metavar="PCT",
        help="Marketing change as a percentage of this month's expenses.",
    )
    scenario.add_argument(
        "--revenue-change",
        type=float,
        default=0.0,
        metavar="PCT",
        help="Change of monthly revenue, in percent.",
    )
    scenario.add_argument(
        "--expense-change",
        type=float,
        default=0.0,
        metavar="PCT",
        help="Change of monthly expenses, in percent.",
    )

    # Output
    ap.add_argument(
        "--display-mode",
        choices=list(DISPLAY_MODES),
        help="Override the display mode from the configuration.",
    )
    ap.add_argument(
        "--output",
        dest="output_dir",
        help="Directory for CSV output (default: data/output).",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress information.",
    )

    return ap


def _parse_as_of(value: Optional[str]) -> Optional[date]:
    """
    Parse the optional --as-of argument (YYYY-MM-DD).

    Raises
    ------
    ValueError
        If the date format is invalid.
    """
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid date format: {value!r}. Expected YYYY-MM-DD.") from exc


def _scenario_from_args(args: argparse.Namespace) -> Optional[WhatIfScenario]:
    """Build the what-if scenario, or None when no scenario option is set."""
    scenario = WhatIfScenario(
        hire_count=args.hire_count,
        avg_salary=args.avg_salary,
        marketing_change_pct=args.marketing_change,
        revenue_change_pct=args.revenue_change,
        expense_change_pct=args.expense_change,
    )
    if scenario == WhatIfScenario():
        return None
    return scenario


def _load_config(config_path: Optional[str]) -> AppConfig:
    if config_path is None and not Path(DEFAULT_CONFIG_FILE).is_file():
        logger.warning(
            "No %s found; using default settings (starting balance 0).",
            DEFAULT_CONFIG_FILE,
        )
        return AppConfig(
            business=BusinessConfig(name=""),
            settings=AnalysisSettings(),
            display_mode="table",
        )
    return load_app_config(config_path)


def _render(
    sections: dict[str, pd.DataFrame],
    names: list[str],
    display_mode: str,
    output_dir: Path,
) -> None:
    if display_mode in {"table", "both"}:
        for name in names:
            print()
            print(f"=== {SECTION_TITLES[name]} ===")
            df = sections[name]
            if df.empty:
                print("(nothing to report)")
            else:
                print(df.to_string(index=False))

    if display_mode in {"csv", "both"}:
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
        for name in names:
            df = sections[name]
            path = output_dir / f"{name.replace('-', '_')}_{timestamp}.csv"
            df.to_csv(path, index=False)
            print(f"Wrote {path} ({len(df)} rows)")


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the SMB Cashflow CLI.

    Parses command-line arguments, loads the configuration, reads the
    transactions, builds the dashboard and renders the selected scope as
    console tables and/or CSV files.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"smb_cashflow version {__version__}")
        return

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.transactions_path:
        parser.error("--transactions is required.")

    # 1) Configuration
    try:
        config = _load_config(args.config_path)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    # 2) Transactions
    csv_path = Path(args.transactions_path)
    if not csv_path.is_file():
        parser.error(f"Transactions file not found: {csv_path}")
    try:
        transactions = read_transactions(csv_path)
    except ValueError as exc:
        parser.error(str(exc))

    # 3) Reference date and scenario
    try:
        as_of = _parse_as_of(args.as_of)
    except ValueError as exc:
        parser.error(str(exc))

    scenario = _scenario_from_args(args)
    if args.scope == "what-if" and scenario is None:
        parser.error(
            "The 'what-if' scope needs at least one scenario option "
            "(--hire-count, --avg-salary, --marketing-change, "
            "--revenue-change, --expense-change)."
        )

    # 4) Single-pass dashboard
    dashboard = build_dashboard(
        transactions,
        config.business,
        now=as_of,
        settings=config.settings,
        scenario=scenario,
        dismissed_alert_ids=args.dismissed,
    )

    name = config.business.name or "business"
    print(
        f"{name}: {len(transactions)} transactions, "
        f"as of {dashboard.as_of.isoformat()}"
    )

    # 5) Render
    sections = dashboard_sections(dashboard)
    scopes = list(SCOPES) if args.scope == "all" else [args.scope]
    names = [
        section
        for scope in scopes
        for section in SCOPE_SECTIONS[scope]
        if section in sections
    ]

    display_mode = args.display_mode or config.display_mode
    output_dir = Path(args.output_dir) if args.output_dir else Path("data/output")
    _render(sections, names, display_mode, output_dir)


if __name__ == "__main__":
    main()
