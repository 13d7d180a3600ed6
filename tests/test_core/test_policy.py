"""
Tests for decision coercion.
"""

from dataclasses import replace

import pytest
from pokertable.core.game import apply_action, start_hand
from pokertable.core.policy import (
    Decision, coerce_decision, parse_decision_action, safe_default,
)
from pokertable.core.rules import ActionType


def with_big_blind_stack(table, stack):
    """Table with p2 (the first big blind) short-stacked."""
    idx = table.index_of("p2")
    return table.with_seat(idx, replace(table.seats[idx], stack=stack))


@pytest.fixture
def facing_bet(three_seat_table, rng):
    """p0 to act facing the big blind."""
    return start_hand(three_seat_table, rng=rng)


@pytest.fixture
def unbet(facing_bet):
    """p2 (big blind) to act with nothing to call."""
    state = apply_action(facing_bet, "p0", ActionType.CALL)
    return apply_action(state, "p1", ActionType.CALL)


class TestCoerceDecision:
    """Policy output is forced into a legal action."""

    def test_check_facing_bet_becomes_fold(self, facing_bet):
        decision = coerce_decision(facing_bet, "p0", Decision(ActionType.CHECK, rationale="hmm"))
        assert decision.action == ActionType.FOLD
        assert decision.rationale == "hmm"

    def test_fold_when_free_becomes_check(self, unbet):
        decision = coerce_decision(unbet, "p2", Decision(ActionType.FOLD))
        assert decision.action == ActionType.CHECK

    def test_raise_becomes_call_when_betting_closed(self, three_seat_table, rng):
        state = start_hand(with_big_blind_stack(three_seat_table, 120), rng=rng)
        state = apply_action(state, "p0", ActionType.RAISE, 50)
        state = apply_action(state, "p1", ActionType.CALL)
        state = apply_action(state, "p2", ActionType.ALL_IN)

        for action in (ActionType.RAISE, ActionType.ALL_IN):
            decision = coerce_decision(state, "p0", Decision(action, 500))
            assert decision == Decision(ActionType.CALL, None, "")

    def test_legal_decisions_unchanged(self, facing_bet):
        decision = coerce_decision(facing_bet, "p0", Decision(ActionType.CALL, 999, "ok"))
        assert decision == Decision(ActionType.CALL, None, "ok")

    @pytest.mark.parametrize("amount,expected", [
        (None, 50),
        (10, 50),
        ("lots", 50),
        (120, 120),
        (120.7, 120),
        (99999, 950),
    ])
    def test_raise_clamped(self, unbet, amount, expected):
        decision = coerce_decision(unbet, "p2", Decision(ActionType.RAISE, amount))
        assert decision.action == ActionType.RAISE
        assert decision.amount == expected

    def test_raise_floor_follows_last_raise(self, facing_bet):
        state = apply_action(facing_bet, "p0", ActionType.RAISE, 200)
        decision = coerce_decision(state, "p1", Decision(ActionType.RAISE, 50))
        assert decision.amount == 200

    def test_all_in_passes_through(self, facing_bet):
        decision = coerce_decision(facing_bet, "p0", Decision(ActionType.ALL_IN))
        assert decision.action == ActionType.ALL_IN


class TestParseDecisionAction:
    """Free-form action labels."""

    @pytest.mark.parametrize("label,expected", [
        ("raise", ActionType.RAISE),
        (" Call ", ActionType.CALL),
        ("all-in", ActionType.ALL_IN),
        ("ALLIN", ActionType.ALL_IN),
        ("bet", ActionType.CHECK),
        (None, ActionType.CHECK),
    ])
    def test_labels(self, label, expected):
        assert parse_decision_action(label) == expected


class TestSafeDefault:

    def test_fold_facing_bet(self, facing_bet):
        assert safe_default(facing_bet, "p0").action == ActionType.FOLD

    def test_check_when_free(self, unbet):
        assert safe_default(unbet, "p2").action == ActionType.CHECK
