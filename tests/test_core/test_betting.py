"""
Tests for the betting engine: action validation and chip movement.
"""

import math
from dataclasses import replace

import pytest
from pokertable.core.betting import (
    apply_bet, is_street_complete, legal_actions, min_raise_increment, outstanding,
)
from pokertable.core.errors import IllegalAction, IllegalActor
from pokertable.core.game import apply_action, start_hand
from pokertable.core.rules import ActionType, GamePhase


@pytest.fixture
def preflop(three_seat_table, rng):
    """Hand 1 of the 3-seat table: dealer p0, SB p1, BB p2, p0 to act."""
    return start_hand(three_seat_table, rng=rng)


def with_stack(table, seat_id, stack):
    """Table with one seat's stack changed before the hand starts."""
    idx = table.index_of(seat_id)
    return table.with_seat(idx, replace(table.seats[idx], stack=stack))


class TestActorValidation:
    """Only the current, active seat may act."""

    def test_wrong_seat(self, preflop):
        with pytest.raises(IllegalActor):
            apply_bet(preflop, "p1", ActionType.CALL)

    def test_unknown_seat(self, preflop):
        with pytest.raises(IllegalActor):
            apply_bet(preflop, "nobody", ActionType.CALL)

    def test_no_hand_in_progress(self, three_seat_table):
        with pytest.raises(IllegalActor):
            apply_bet(three_seat_table, "p0", ActionType.CHECK)

    def test_rejected_action_leaves_state_untouched(self, preflop):
        before = preflop.to_dict()
        with pytest.raises(IllegalAction):
            apply_bet(preflop, "p0", ActionType.CHECK)
        assert preflop.to_dict() == before


class TestActions:
    """Tests for fold, check, call, raise and all-in."""

    def test_fold(self, preflop):
        state = apply_bet(preflop, "p0", ActionType.FOLD)
        seat = state.seat("p0")
        assert seat.has_folded
        assert seat.stack == 1000
        assert state.pot == preflop.pot
        assert seat.last_action == ActionType.FOLD

    def test_check_facing_bet_is_illegal(self, preflop):
        with pytest.raises(IllegalAction):
            apply_bet(preflop, "p0", ActionType.CHECK)

    def test_call(self, preflop):
        state = apply_bet(preflop, "p0", ActionType.CALL)
        seat = state.seat("p0")
        assert seat.stack == 950
        assert seat.current_bet == 50
        assert state.pot == 125
        assert seat.last_action == ActionType.CALL

    def test_action_names_accepted(self, preflop):
        state = apply_bet(preflop, "p0", "call")
        assert state.seat("p0").last_action == ActionType.CALL

        with pytest.raises(IllegalAction):
            apply_bet(preflop, "p0", "bet-big")

    def test_raise_is_increment_over_max_bet(self, preflop):
        state = apply_bet(preflop, "p0", ActionType.RAISE, 100)
        seat = state.seat("p0")
        assert seat.current_bet == 150
        assert seat.stack == 850
        assert state.pot == 225
        assert state.last_raise_size == 100
        assert outstanding(state, state.seat("p1")) == 125

    def test_raise_below_big_blind(self, preflop):
        with pytest.raises(IllegalAction):
            apply_bet(preflop, "p0", ActionType.RAISE, 10)

    def test_reraise_must_match_previous_raise(self, preflop):
        state = apply_action(preflop, "p0", ActionType.RAISE, 100)
        assert min_raise_increment(state) == 100

        with pytest.raises(IllegalAction):
            apply_bet(state, "p1", ActionType.RAISE, 50)

        state = apply_bet(state, "p1", ActionType.RAISE, 100)
        assert state.seat("p1").current_bet == 250

    @pytest.mark.parametrize("amount", [None, -5, math.nan, math.inf, 10.5, True, "100"])
    def test_invalid_raise_amounts(self, preflop, amount):
        with pytest.raises(IllegalAction):
            apply_bet(preflop, "p0", ActionType.RAISE, amount)

    def test_whole_float_amount_accepted(self, preflop):
        state = apply_bet(preflop, "p0", ActionType.RAISE, 100.0)
        assert state.seat("p0").current_bet == 150


class TestAllIn:
    """Stacks that run out convert the action to an all-in."""

    def test_raise_larger_than_stack_goes_all_in(self, three_seat_table, rng):
        state = start_hand(with_stack(three_seat_table, "p0", 120), rng=rng)
        state = apply_bet(state, "p0", ActionType.RAISE, 500)
        seat = state.seat("p0")
        assert seat.is_all_in
        assert seat.stack == 0
        assert seat.current_bet == 120
        assert seat.last_action == ActionType.ALL_IN

    def test_short_call_goes_all_in(self, three_seat_table, rng):
        state = start_hand(with_stack(three_seat_table, "p0", 30), rng=rng)
        state = apply_bet(state, "p0", ActionType.CALL)
        seat = state.seat("p0")
        assert seat.is_all_in
        assert seat.current_bet == 30
        assert state.pot == 105
        assert seat.last_action == ActionType.ALL_IN

    def test_short_all_in_keeps_minimum_raise(self, three_seat_table, rng):
        state = start_hand(with_stack(three_seat_table, "p0", 80), rng=rng)
        state = apply_bet(state, "p0", ActionType.ALL_IN)
        assert state.seat("p0").current_bet == 80
        assert state.last_raise_size == 0
        assert min_raise_increment(state) == 50

    def test_raise_short_of_minimum_allowed_when_all_in(self, three_seat_table, rng):
        state = start_hand(with_stack(three_seat_table, "p0", 70), rng=rng)
        state = apply_bet(state, "p0", ActionType.RAISE, 20)
        assert state.seat("p0").is_all_in
        assert state.seat("p0").current_bet == 70

    def test_all_in_seat_cannot_act(self, three_seat_table, rng):
        state = start_hand(with_stack(three_seat_table, "p0", 80), rng=rng)
        state = apply_bet(state, "p0", ActionType.ALL_IN)
        state = replace(state, current_player_id="p0")
        with pytest.raises(IllegalActor):
            apply_bet(state, "p0", ActionType.CHECK)


class TestReopening:
    """A short all-in does not reopen raising to seats that already acted."""

    @pytest.fixture
    def short_all_in(self, three_seat_table, rng):
        """p0 raises to 100, p1 calls, p2 (big blind, 120 chips) shoves to 120."""
        state = start_hand(with_stack(three_seat_table, "p2", 120), rng=rng)
        state = apply_action(state, "p0", ActionType.RAISE, 50)
        state = apply_action(state, "p1", ActionType.CALL)
        return apply_action(state, "p2", ActionType.ALL_IN)

    def test_raise_not_offered(self, short_all_in):
        assert short_all_in.current_player_id == "p0"
        assert short_all_in.last_raise_size == 50
        legal = [a["type"] for a in legal_actions(short_all_in)]
        assert legal == ["FOLD", "CALL"]

    def test_raise_rejected(self, short_all_in):
        with pytest.raises(IllegalAction):
            apply_bet(short_all_in, "p0", ActionType.RAISE, 100)
        with pytest.raises(IllegalAction):
            apply_bet(short_all_in, "p0", ActionType.ALL_IN)

    def test_call_closes_street(self, short_all_in):
        state = apply_action(short_all_in, "p0", ActionType.CALL)
        assert state.current_player_id == "p1"
        assert [a["type"] for a in legal_actions(state)] == ["FOLD", "CALL"]
        state = apply_action(state, "p1", ActionType.CALL)
        assert state.phase == GamePhase.FLOP

    def test_all_in_for_less_than_call_allowed(self, three_seat_table, rng):
        table = with_stack(with_stack(three_seat_table, "p2", 120), "p1", 115)
        state = start_hand(table, rng=rng)
        state = apply_action(state, "p0", ActionType.RAISE, 50)
        state = apply_action(state, "p1", ActionType.CALL)
        state = apply_action(state, "p2", ActionType.ALL_IN)
        state = apply_action(state, "p0", ActionType.CALL)

        # p1 has 15 left against 20 to call: all-in is only a call
        assert [a["type"] for a in legal_actions(state)] == ["FOLD", "CALL", "ALL_IN"]
        state = apply_bet(state, "p1", ActionType.ALL_IN)
        assert state.seat("p1").is_all_in
        assert state.seat("p1").current_bet == 115

    def test_full_raise_reopens(self, three_seat_table, rng):
        state = start_hand(three_seat_table, rng=rng)
        state = apply_action(state, "p0", ActionType.CALL)
        state = apply_action(state, "p1", ActionType.CALL)
        state = apply_action(state, "p2", ActionType.RAISE, 50)
        assert "RAISE" in [a["type"] for a in legal_actions(state, "p0")]


class TestStreetCompletion:
    """A street ends once every active seat has acted and matched."""

    def test_big_blind_gets_option(self, preflop):
        state = apply_action(preflop, "p0", ActionType.CALL)
        state = apply_action(state, "p1", ActionType.CALL)
        assert not is_street_complete(state)
        assert state.current_player_id == "p2"
        assert state.phase == GamePhase.PREFLOP

    def test_raise_reopens_action(self, preflop):
        state = apply_action(preflop, "p0", ActionType.CALL)
        state = apply_action(state, "p1", ActionType.CALL)
        state = apply_action(state, "p2", ActionType.RAISE, 50)
        assert state.current_player_id == "p0"
        assert state.phase == GamePhase.PREFLOP

    def test_call_with_nothing_to_call(self, preflop):
        state = apply_action(preflop, "p0", ActionType.CALL)
        state = apply_action(state, "p1", ActionType.CALL)
        state = apply_action(state, "p2", ActionType.CALL)
        assert state.phase == GamePhase.FLOP
        assert state.seat("p2").stack == 950


class TestLegalActions:
    """Tests for the legal action listing."""

    def test_preflop_first_actor(self, preflop):
        actions = {a["type"]: a for a in legal_actions(preflop)}
        assert set(actions) == {"FOLD", "CALL", "RAISE", "ALL_IN"}
        assert actions["CALL"]["amount"] == 50
        assert actions["RAISE"]["min"] == 50
        assert actions["RAISE"]["max"] == 950
        assert actions["ALL_IN"]["amount"] == 1000

    def test_check_available_when_unbet(self, preflop):
        state = apply_action(preflop, "p0", ActionType.CALL)
        state = apply_action(state, "p1", ActionType.CALL)
        types = [a["type"] for a in legal_actions(state, "p2")]
        assert "CHECK" in types
        assert "CALL" not in types

    def test_not_your_turn(self, preflop):
        assert legal_actions(preflop, "p1") == []
