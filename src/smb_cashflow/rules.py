# SMB Cashflow - Cash-flow dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Ordered, first-match rule chains.

Several engine outputs select exactly one outcome among overlapping
conditions (health status band, safe-to-spend explanation, what-if impact
summary). Each of them is modelled as a tuple of ``Rule`` objects evaluated
top to bottom: the first rule whose predicate holds wins.

Keeping the chains as data makes their ordering visible in one place and
lets tests exercise each branch in isolation.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

C = TypeVar("C")
R = TypeVar("R")


@dataclass(frozen=True)
class Rule(Generic[C, R]):
    """
    A named (predicate, outcome) pair.

    Attributes:
        name: Identifier used in tests and debug logs.
        when: Predicate evaluated against the rule context.
        then: Builds the outcome from the same context.
    """

    name: str
    when: Callable[[C], bool]
    then: Callable[[C], R]


def first_matching_rule(rules: Sequence[Rule[C, R]], context: C) -> Rule[C, R]:
    """
    Return the first rule whose predicate holds for ``context``.

    Raises:
        ValueError: if no rule matches. Chains are expected to end with a
            catch-all rule.
    """
    for rule in rules:
        if rule.when(context):
            return rule
    raise ValueError("No rule matched; the rule chain needs a catch-all rule.")


def evaluate_first_match(rules: Sequence[Rule[C, R]], context: C) -> R:
    """Evaluate the first matching rule and return its outcome."""
    return first_matching_rule(rules, context).then(context)


def always(_context: object) -> bool:
    """Catch-all predicate for the last rule of a chain."""
    return True
