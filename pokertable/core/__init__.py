"""
pokertable core - Pure Python Texas Hold'em round engine

This module contains all game logic without any network dependencies.
"""

from pokertable.core.card import Card, Deck
from pokertable.core.errors import (
    DecisionPolicyFailure, DeckExhausted, IllegalAction, IllegalActor, PokerError,
)
from pokertable.core.game import apply_action, new_table, start_hand
from pokertable.core.hand import HandEvaluation, HandRank, evaluate, evaluate_hand
from pokertable.core.player import Seat, create_seats
from pokertable.core.policy import Decision, DecisionPolicy, coerce_decision
from pokertable.core.rules import ActionType, GamePhase
from pokertable.core.state import TableState
from pokertable.core.table import ActionResult, Table

__all__ = [
    "Card",
    "Deck",
    "Seat",
    "create_seats",
    "HandEvaluation",
    "HandRank",
    "evaluate",
    "evaluate_hand",
    "TableState",
    "new_table",
    "start_hand",
    "apply_action",
    "Decision",
    "DecisionPolicy",
    "coerce_decision",
    "Table",
    "ActionResult",
    "GamePhase",
    "ActionType",
    "PokerError",
    "IllegalActor",
    "IllegalAction",
    "DeckExhausted",
    "DecisionPolicyFailure",
]
