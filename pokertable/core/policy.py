"""
Decision policy interface for automated seats.

A policy is asked for exactly one decision when its seat is the current
actor. Its answer is untrusted: ``coerce_decision`` turns anything it returns
into an action the betting engine will accept.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pokertable.core.betting import min_raise_increment, outstanding
from pokertable.core.rules import ActionType
from pokertable.core.state import TableState


@dataclass(frozen=True)
class Decision:
    """An automated seat's chosen action."""
    action: ActionType
    amount: Optional[int] = None
    rationale: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "amount": self.amount,
            "rationale": self.rationale,
        }


class DecisionPolicy(ABC):
    """
    Abstract decision maker for a seat.

    Implementations may call remote services and may fail; they should raise
    ``DecisionPolicyFailure`` so the table can fall back to a local policy.
    """

    @abstractmethod
    async def decide(self, state: TableState, seat_id: str) -> Decision:
        """
        Choose an action for ``seat_id``, the current actor in ``state``.

        Returns:
            Decision with action, raise increment (for RAISE) and a short
            rationale shown to observers.
        """


def coerce_decision(state: TableState, seat_id: str, decision: Decision) -> Decision:
    """
    Force a policy's decision into a legal action.

    - Check facing a bet becomes Fold.
    - Fold with nothing to call becomes Check.
    - Raise or all-in by a seat the betting is closed to becomes Call.
    - Raise increments are clamped to [minimum raise, seat stack]; a stack
      below the minimum makes the raise an all-in.
    """
    seat = state.seat(seat_id)
    to_call = outstanding(state, seat)
    action = decision.action
    amount = decision.amount

    if action == ActionType.CHECK and to_call > 0:
        action = ActionType.FOLD
    elif action == ActionType.FOLD and to_call == 0:
        action = ActionType.CHECK
    elif action in (ActionType.RAISE, ActionType.ALL_IN) and not seat.can_raise:
        if action == ActionType.RAISE or seat.stack > to_call:
            action = ActionType.CALL

    if action == ActionType.RAISE:
        try:
            amount = int(amount)
        except (TypeError, ValueError, OverflowError):
            amount = 0
        amount = max(amount, min_raise_increment(state))
        amount = min(amount, seat.stack)
    else:
        amount = None

    return Decision(action, amount, decision.rationale)


def safe_default(state: TableState, seat_id: str) -> Decision:
    """Most conservative legal action: check if free, otherwise fold."""
    to_call = outstanding(state, state.seat(seat_id))
    if to_call == 0:
        return Decision(ActionType.CHECK, rationale="Checking")
    return Decision(ActionType.FOLD, rationale="Folding")


def parse_decision_action(value: Any) -> ActionType:
    """
    Map a policy's free-form action label to an ActionType.

    Unrecognised labels map to CHECK; coercion then folds it if facing a bet.
    """
    label = str(value or "").strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return ActionType(label)
    except ValueError:
        if label == "ALLIN":
            return ActionType.ALL_IN
        return ActionType.CHECK


__all__ = [
    "Decision",
    "DecisionPolicy",
    "coerce_decision",
    "parse_decision_action",
    "safe_default",
]
