# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
SMB Cashflow
------------

A Python-based cash-flow analysis engine designed for small businesses,
freelancers and early-stage startups. From a list of income and expense
transactions it derives:

- current balance, monthly income/expenses, burn rate and runway,
- a 0-100 cash health score with its five factors,
- a safe-to-spend allowance that protects a minimum runway,
- a survival / growth / waste burn breakdown,
- income stability (volatility, recurring share, trend),
- what-if scenarios (hires, marketing, revenue and expense changes),
- a cash forecast, panic alerts, silent expense killers,
- plain-English insights, CFO advice and a weekly action list.

The engine is pure: every calculator takes its reference date explicitly
and never mutates its inputs. Configuration (TOML), CSV import and
presentation (views, CLI) sit on top of it.


Version: 0.1.0

Usage:
    smb-cashflow --help
"""

__all__ = ["dashboard", "views", "io", "config"]

__version__ = "0.1.0"
