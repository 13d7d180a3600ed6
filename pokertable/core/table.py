"""
Stateful table driver.

``Table`` wraps the pure round state machine for callers that want a single
mutable handle: it keeps the current ``TableState``, a history of every
published state, notifies observers after each transition, and plays the
automated seats through their decision policies.

Usage:
    table = Table(create_seats(["You", "Bot"], 2000), policies={"p1": CallAgent()})
    table.subscribe(lambda state: print(state.message))
    table.start_hand()

    result = table.take_action("p0", ActionType.CALL)
    await table.play_automated_turns()
"""

from __future__ import annotations
import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import (
    Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union,
)

from pokertable.core import game
from pokertable.core.betting import legal_actions
from pokertable.core.card import Deck
from pokertable.core.errors import (
    DecisionPolicyFailure, DeckExhausted, IllegalAction, IllegalActor,
)
from pokertable.core.player import Seat
from pokertable.core.policy import (
    Decision, DecisionPolicy, coerce_decision, safe_default,
)
from pokertable.core.rules import (
    ActionType, DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND,
)
from pokertable.core.state import TableState


logger = logging.getLogger(__name__)

Listener = Callable[[TableState], Any]


@dataclass
class ActionResult:
    """Result of a seat action."""
    success: bool
    message: str
    action_type: Optional[ActionType] = None
    amount: int = 0


class Table:
    """
    One independent table: current state, history, observers, policies.

    Args:
        seats: Seats in seating order
        small_blind: Small blind amount
        big_blind: Big blind (minimum bet unit)
        policies: Decision policy per automated seat id
        fallback: Local policy used when a seat's policy fails or times out
        rng: Random source for shuffles and pacing jitter
        min_delay: Minimum seconds an automated decision takes
        delay_jitter: Extra random delay, up to this many seconds
        decision_timeout: Seconds a policy may take before falling back
        history_limit: Number of states kept in ``history``
    """

    def __init__(
        self,
        seats: Sequence[Seat],
        small_blind: int = DEFAULT_SMALL_BLIND,
        big_blind: int = DEFAULT_BIG_BLIND,
        policies: Optional[Mapping[str, DecisionPolicy]] = None,
        fallback: Optional[DecisionPolicy] = None,
        rng: Optional[random.Random] = None,
        min_delay: float = 0.0,
        delay_jitter: float = 0.0,
        decision_timeout: float = 8.0,
        history_limit: int = 500,
    ):
        self._state = game.new_table(seats, small_blind, big_blind)
        self.policies: Dict[str, DecisionPolicy] = dict(policies or {})
        self.fallback = fallback
        self.rng = rng or random.Random()
        self.min_delay = min_delay
        self.delay_jitter = delay_jitter
        self.decision_timeout = decision_timeout
        self.history_limit = history_limit

        self.history: List[TableState] = [self._state]
        self._listeners: List[Listener] = []
        self._decision_lock: Optional[asyncio.Lock] = None

    # ==================== State ====================

    @property
    def state(self) -> TableState:
        return self._state

    @property
    def is_deciding(self) -> bool:
        """True while an automated seat's decision is in flight."""
        return self._decision_lock is not None and self._decision_lock.locked()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register an observer called with every new state.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: TableState):
        self._state = state
        self.history.append(state)
        if len(self.history) > self.history_limit:
            del self.history[: len(self.history) - self.history_limit]

        for listener in list(self._listeners):
            listener(state)

    def get_state(self, for_seat_id: Optional[str] = None) -> Dict[str, Any]:
        """Observer snapshot (see ``TableState.to_dict``)."""
        return self._state.to_dict(for_seat_id=for_seat_id)

    def legal_actions(self, seat_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return legal_actions(self._state, seat_id)

    # ==================== Transitions ====================

    def start_hand(self, deck: Optional[Deck] = None) -> TableState:
        """
        Deal the next hand.

        Raises:
            IllegalAction: A hand is running or fewer than 2 seats have chips
        """
        try:
            state = game.start_hand(self._state, rng=self.rng, deck=deck)
        except DeckExhausted:
            logger.error(f"Deck exhausted while dealing hand #{self._state.hand_number + 1}")
            raise

        self._publish(state)
        return state

    def take_action(
        self,
        seat_id: str,
        action: Union[ActionType, str],
        amount: Any = None,
    ) -> ActionResult:
        """
        Submit an action for a seat.

        Rejected actions leave the state untouched and return a failed
        ``ActionResult`` with the reason.
        """
        if self.is_deciding:
            return ActionResult(False, "Waiting for an automated seat to act")

        before = self._state
        try:
            state = game.apply_action(before, seat_id, action, amount)
        except (IllegalActor, IllegalAction) as e:
            logger.debug(f"Rejected {action} from {seat_id}: {e}")
            return ActionResult(False, str(e))
        except DeckExhausted:
            logger.error(f"Deck exhausted in hand #{before.hand_number}, aborting action")
            raise

        self._publish(state)

        seat = state.seat(seat_id)
        return ActionResult(
            True,
            state.message,
            action_type=seat.last_action,
            amount=seat.total_bet - before.seat(seat_id).total_bet,
        )

    # ==================== Automated seats ====================

    def _is_automated_turn(self) -> bool:
        seat = self._state.current_player
        return (
            self._state.is_hand_running()
            and seat is not None
            and seat.is_automated
        )

    async def play_automated_turns(
        self,
        on_state: Optional[Callable[[], Awaitable[Any]]] = None,
    ) -> TableState:
        """
        Play automated seats until a non-automated seat must act or the
        hand is over.

        Args:
            on_state: Awaited after every automated action (e.g. to push
                the new state to sockets)

        Returns:
            The resulting state
        """
        while self._is_automated_turn():
            await self.play_automated_turn()
            if on_state is not None:
                await on_state()
        return self._state

    async def play_automated_turn(self) -> Optional[TableState]:
        """
        Solicit and apply exactly one decision for the automated actor.

        Returns None if it is not an automated seat's turn.
        """
        if self._decision_lock is None:
            # Created on first use so it binds to the loop that drives the table
            self._decision_lock = asyncio.Lock()

        async with self._decision_lock:
            if not self._is_automated_turn():
                return None

            state = self._state
            seat_id = state.current_player_id
            started = time.monotonic()

            decision = await self._decide(state, seat_id)
            decision = coerce_decision(state, seat_id, decision)

            delay = self.min_delay + self.rng.uniform(0, self.delay_jitter)
            remaining = delay - (time.monotonic() - started)
            if remaining > 0:
                await asyncio.sleep(remaining)

            idx = state.index_of(seat_id)
            state = state.with_seat(idx, state.seats[idx].with_rationale(decision.rationale))

            try:
                new_state = game.apply_action(state, seat_id, decision.action, decision.amount)
            except (IllegalActor, IllegalAction) as e:
                logger.warning(f"Coerced decision for {seat_id} rejected ({e}), using default")
                fallback = safe_default(state, seat_id)
                new_state = game.apply_action(state, seat_id, fallback.action, fallback.amount)

            self._publish(new_state)
            return new_state

    async def _decide(self, state: TableState, seat_id: str) -> Decision:
        """Ask the seat's policy, falling back on failure or timeout."""
        policy = self.policies.get(seat_id, self.fallback)
        if policy is not None:
            decision = await self._ask(policy, state, seat_id, self.decision_timeout)
            if decision is not None:
                return decision

        if self.fallback is not None and self.fallback is not policy:
            decision = await self._ask(self.fallback, state, seat_id, None)
            if decision is not None:
                return decision

        return safe_default(state, seat_id)

    async def _ask(
        self,
        policy: DecisionPolicy,
        state: TableState,
        seat_id: str,
        timeout: Optional[float],
    ) -> Optional[Decision]:
        """One policy call; None if it failed, timed out or returned garbage."""
        try:
            decision = await asyncio.wait_for(policy.decide(state, seat_id), timeout=timeout)
        except DecisionPolicyFailure as e:
            logger.warning(f"Decision policy failed for {seat_id}: {e}")
            return None
        except asyncio.TimeoutError:
            logger.warning(f"Decision policy timed out for {seat_id} after {timeout}s")
            return None
        except Exception:
            logger.warning(f"Decision policy raised for {seat_id}", exc_info=True)
            return None

        if not isinstance(decision, Decision) or not isinstance(decision.action, ActionType):
            logger.warning(f"Decision policy returned {decision!r} for {seat_id}")
            return None
        return decision
