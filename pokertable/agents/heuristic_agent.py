"""
Local agents that need no network access.

HeuristicAgent is the fallback used whenever a remote policy fails: it
checks or takes a stab at the pot when nobody has bet, and calls on good pot
odds (or a coin flip) when facing a bet.
"""

import random
from typing import Optional

from pokertable.agents.base import BaseAgent
from pokertable.core.policy import Decision
from pokertable.core.rules import ActionType
from pokertable.core.state import TableState


class HeuristicAgent(BaseAgent):
    """
    Pot-odds agent with a little randomness.

    Args:
        name: Optional name
        rng: Random source (seed it for reproducible play)
        raise_probability: Chance to open with a minimum raise when unbet
        call_probability: Chance to call anyway when the odds are poor
        pot_odds_threshold: Always call below these pot odds
    """

    def __init__(
        self,
        name: Optional[str] = None,
        rng: Optional[random.Random] = None,
        raise_probability: float = 0.3,
        call_probability: float = 0.5,
        pot_odds_threshold: float = 0.3,
    ):
        super().__init__(name)
        self.rng = rng or random.Random()
        self.raise_probability = raise_probability
        self.call_probability = call_probability
        self.pot_odds_threshold = pot_odds_threshold

    async def decide(self, state: TableState, seat_id: str) -> Decision:
        if self.call_cost(state, seat_id) == 0:
            if self.rng.random() < self.raise_probability:
                return Decision(ActionType.RAISE, state.min_bet, "Taking initiative")
            return Decision(ActionType.CHECK, rationale="Checking to see more cards")

        if (
            self.pot_odds(state, seat_id) < self.pot_odds_threshold
            or self.rng.random() < self.call_probability
        ):
            return Decision(ActionType.CALL, rationale="Good pot odds")

        return Decision(ActionType.FOLD, rationale="Pot odds not favorable")


class CallAgent(BaseAgent):
    """Always checks or calls. Deterministic; useful for tests and demos."""

    async def decide(self, state: TableState, seat_id: str) -> Decision:
        if self.call_cost(state, seat_id) == 0:
            return Decision(ActionType.CHECK, rationale="Checking")
        return Decision(ActionType.CALL, rationale="Calling")
