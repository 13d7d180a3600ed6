"""
Base Agent for pokertable.

Agents are the decision policies that play automated seats. They receive
the full ``TableState`` and the id of the seat they play, and return a
``Decision``. The table coerces whatever they return into a legal action.

Usage:
    class MyAgent(BaseAgent):
        async def decide(self, state, seat_id):
            if self.call_cost(state, seat_id) == 0:
                return Decision(ActionType.CHECK, rationale="Free card")
            return Decision(ActionType.FOLD, rationale="Too expensive")
"""

from abc import abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from pokertable.core.betting import legal_actions, outstanding
from pokertable.core.policy import Decision, DecisionPolicy
from pokertable.core.state import TableState


class BaseAgent(DecisionPolicy):
    """
    Abstract base class for poker agents.

    Attributes:
        name: Human-readable name, used in logs
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.__class__.__name__

    @abstractmethod
    async def decide(self, state: TableState, seat_id: str) -> Decision:
        """
        Choose an action for the seat whose turn it is.

        Args:
            state: Current table state (other seats' hole cards must not be
                used; ``observation`` gives the seat's own view)
            seat_id: The seat this agent plays

        Returns:
            Decision with action, raise increment and rationale
        """

    def call_cost(self, state: TableState, seat_id: str) -> int:
        """Chips needed to match the highest bet."""
        return outstanding(state, state.seat(seat_id))

    def pot_odds(self, state: TableState, seat_id: str) -> float:
        """Share of the resulting pot the call would pay for (0 if free)."""
        cost = self.call_cost(state, seat_id)
        if cost == 0:
            return 0.0
        return cost / (state.pot + cost)

    def position(self, state: TableState, seat_id: str) -> Tuple[int, int]:
        """(1-based position among seats still in the hand, seats in hand)."""
        ids = [s.seat_id for s in state.seats_in_hand]
        return ids.index(seat_id) + 1, len(ids)

    def legal_actions(self, state: TableState, seat_id: str) -> List[Dict[str, Any]]:
        return legal_actions(state, seat_id)

    def observation(self, state: TableState, seat_id: str) -> Dict[str, Any]:
        """The seat's own view of the table (hides other hole cards)."""
        return state.to_dict(for_seat_id=seat_id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"
