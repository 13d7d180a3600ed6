"""
Tests for the stateful Table driver and automated seats.
"""

import asyncio
import logging
import random
import time

import pytest
from pokertable.agents import CallAgent
from pokertable.core.errors import DecisionPolicyFailure, IllegalAction
from pokertable.core.player import create_seats
from pokertable.core.policy import Decision, DecisionPolicy
from pokertable.core.rules import ActionType, GamePhase
from pokertable.core.table import Table


class FailingPolicy(DecisionPolicy):
    async def decide(self, state, seat_id):
        raise DecisionPolicyFailure("service unavailable")


class SlowPolicy(DecisionPolicy):
    async def decide(self, state, seat_id):
        await asyncio.sleep(5)
        return Decision(ActionType.FOLD)


class CrashingPolicy(DecisionPolicy):
    async def decide(self, state, seat_id):
        raise RuntimeError("connection reset by peer")


class NonePolicy(DecisionPolicy):
    async def decide(self, state, seat_id):
        return None


class ScriptedPolicy(DecisionPolicy):
    """Returns the given decisions in order."""

    def __init__(self, *decisions):
        self.decisions = list(decisions)
        self.calls = 0

    async def decide(self, state, seat_id):
        self.calls += 1
        return self.decisions.pop(0)


def make_table(policies=None, fallback=None, **kwargs):
    seats = create_seats(["You", "DeepSeek", "AlphaGo"], 1000)
    return Table(seats, 25, 50, policies=policies, fallback=fallback,
                 rng=random.Random(7), **kwargs)


class TestTakeAction:
    """Tests for seat actions through the table."""

    def test_successful_action(self):
        table = make_table()
        table.start_hand()
        result = table.take_action("p0", ActionType.CALL)

        assert result.success
        assert result.action_type == ActionType.CALL
        assert result.amount == 50
        assert table.state.seat("p0").stack == 950
        assert result.message == "Pre-Flop: DeepSeek to act."

    def test_rejected_action_keeps_state(self):
        table = make_table()
        state = table.start_hand()
        history = len(table.history)

        result = table.take_action("p1", ActionType.CALL)
        assert not result.success
        assert table.state is state
        assert len(table.history) == history

        result = table.take_action("p0", ActionType.RAISE, -10)
        assert not result.success
        assert table.state is state

    def test_start_hand_twice(self):
        table = make_table()
        table.start_hand()
        with pytest.raises(IllegalAction):
            table.start_hand()

    def test_observers(self):
        table = make_table()
        seen = []
        unsubscribe = table.subscribe(seen.append)

        table.start_hand()
        table.take_action("p0", ActionType.FOLD)
        assert [s.phase for s in seen] == [GamePhase.PREFLOP, GamePhase.PREFLOP]
        assert seen[-1] is table.state

        unsubscribe()
        table.take_action("p1", ActionType.FOLD)
        assert len(seen) == 2
        assert table.state.phase == GamePhase.COMPLETE

    def test_snapshot_hides_other_cards(self):
        table = make_table()
        table.start_hand()
        snapshot = table.get_state(for_seat_id="p0")
        players = {p["id"]: p for p in snapshot["public_info"]["players"]}
        assert "cards" in players["p0"]
        assert "cards" not in players["p1"]
        assert len(snapshot["private_info"]["hand"]) == 2
        assert snapshot["private_info"]["chips_to_call"] == 50
        assert snapshot["private_info"]["is_turn"]


class TestAutomatedSeats:
    """Automated seats are played through their policies."""

    @pytest.mark.asyncio
    async def test_plays_until_human_turn(self):
        table = make_table(policies={"p1": CallAgent(), "p2": CallAgent()})
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        state = await table.play_automated_turns()
        # p1 calls, p2 checks; flop: p1 and p2 check, then the human acts
        assert state.phase == GamePhase.FLOP
        assert state.current_player_id == "p0"
        assert state.seat("p1").rationale == "Checking"

    @pytest.mark.asyncio
    async def test_nothing_to_do_on_human_turn(self):
        table = make_table(policies={"p1": CallAgent(), "p2": CallAgent()})
        state = table.start_hand()
        assert await table.play_automated_turn() is None
        assert table.state is state

    @pytest.mark.asyncio
    async def test_failure_falls_back(self, caplog):
        table = make_table(policies={"p1": FailingPolicy(), "p2": CallAgent()}, fallback=CallAgent())
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        with caplog.at_level(logging.WARNING, logger="pokertable.core.table"):
            await table.play_automated_turn()

        assert table.state.seat("p1").last_action == ActionType.CALL
        assert "Decision policy failed for p1" in caplog.text

    @pytest.mark.asyncio
    async def test_unexpected_error_falls_back(self, caplog):
        table = make_table(policies={"p1": CrashingPolicy(), "p2": CallAgent()}, fallback=CallAgent())
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        with caplog.at_level(logging.WARNING, logger="pokertable.core.table"):
            state = await table.play_automated_turns()

        assert table.state.seat("p1").last_action is not None
        assert "Decision policy raised for p1" in caplog.text
        assert state.current_player_id in ("p0", None)

    @pytest.mark.asyncio
    async def test_unexpected_error_without_fallback(self):
        table = make_table(policies={"p1": CrashingPolicy(), "p2": CrashingPolicy()})
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        await table.play_automated_turn()
        assert table.state.seat("p1").has_folded

    @pytest.mark.parametrize("reply", [None, "CALL", Decision("CALL")])
    @pytest.mark.asyncio
    async def test_malformed_decision_falls_back(self, reply):
        table = make_table(policies={"p1": ScriptedPolicy(reply)}, fallback=CallAgent())
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        await table.play_automated_turn()
        assert table.state.seat("p1").last_action == ActionType.CALL

    @pytest.mark.asyncio
    async def test_none_without_fallback_uses_safe_default(self):
        table = make_table(policies={"p1": NonePolicy()})
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        await table.play_automated_turn()
        assert table.state.seat("p1").has_folded

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self):
        table = make_table(policies={"p1": SlowPolicy()}, fallback=CallAgent(), decision_timeout=0.05)
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        await table.play_automated_turn()
        assert table.state.seat("p1").last_action == ActionType.CALL

    @pytest.mark.asyncio
    async def test_no_fallback_uses_safe_default(self):
        table = make_table(policies={"p1": FailingPolicy()})
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        await table.play_automated_turn()
        # Facing the small blind's outstanding 25: fold
        assert table.state.seat("p1").has_folded

    @pytest.mark.asyncio
    async def test_decision_is_coerced(self):
        policy = ScriptedPolicy(Decision(ActionType.CHECK, rationale="Feeling lucky"))
        table = make_table(policies={"p1": policy})
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        await table.play_automated_turn()
        seat = table.state.seat("p1")
        assert seat.has_folded
        assert seat.rationale == "Feeling lucky"
        assert policy.calls == 1

    @pytest.mark.asyncio
    async def test_raise_is_clamped(self):
        policy = ScriptedPolicy(Decision(ActionType.RAISE, 5000))
        table = make_table(policies={"p1": policy})
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        await table.play_automated_turn()
        seat = table.state.seat("p1")
        assert seat.is_all_in
        assert seat.stack == 0
        assert table.state.total_chips == 3000

    @pytest.mark.asyncio
    async def test_minimum_delay(self):
        table = make_table(policies={"p1": CallAgent()}, min_delay=0.05)
        table.start_hand()
        table.take_action("p0", ActionType.CALL)

        started = time.monotonic()
        await table.play_automated_turn()
        assert time.monotonic() - started >= 0.04

    @pytest.mark.asyncio
    async def test_full_hand_with_automated_seats(self):
        table = make_table(policies={"p1": CallAgent(), "p2": CallAgent()})
        table.start_hand()
        while table.state.is_hand_running():
            if table.state.current_player_id == "p0":
                legal = [a["type"] for a in table.legal_actions()]
                action = ActionType.CHECK if "CHECK" in legal else ActionType.CALL
                assert table.take_action("p0", action).success
            await table.play_automated_turns()

        assert table.state.phase == GamePhase.COMPLETE
        assert sum(s.stack for s in table.state.seats) == 3000
        assert table.state.winner_ids


def test_table_built_outside_event_loop():
    """A table created before any loop runs can be driven by a later one."""
    table = make_table(policies={"p1": CallAgent(), "p2": CallAgent()})
    assert not table.is_deciding
    table.start_hand()
    table.take_action("p0", ActionType.CALL)

    asyncio.run(table.play_automated_turns())
    assert table.state.current_player_id in ("p0", None)

    # A second, independent loop drives the next decisions
    if table.state.current_player_id == "p0":
        table.take_action("p0", ActionType.CHECK)
        asyncio.run(table.play_automated_turns())
    assert table.state.total_chips == 3000
