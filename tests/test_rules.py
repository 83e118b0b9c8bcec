import pytest

from smb_cashflow.rules import Rule, always, evaluate_first_match, first_matching_rule

CHAIN = (
    Rule(name="big", when=lambda n: n >= 100, then=lambda n: f"big {n}"),
    Rule(name="positive", when=lambda n: n > 0, then=lambda n: f"positive {n}"),
    Rule(name="other", when=always, then=lambda n: "other"),
)


def test_first_matching_rule_wins() -> None:
    """Overlapping predicates: the earliest rule in the chain is selected."""
    assert first_matching_rule(CHAIN, 150).name == "big"
    assert first_matching_rule(CHAIN, 5).name == "positive"
    assert first_matching_rule(CHAIN, -5).name == "other"


def test_evaluate_first_match_builds_outcome_from_context() -> None:
    assert evaluate_first_match(CHAIN, 150) == "big 150"
    assert evaluate_first_match(CHAIN, 0) == "other"


def test_chain_without_catch_all_raises() -> None:
    with pytest.raises(ValueError):
        first_matching_rule(CHAIN[:2], -1)
