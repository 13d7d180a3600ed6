"""
pokertable - Texas Hold'em Round Engine

A multi-seat Texas Hold'em table with:
- Pure Python round state machine over immutable table states
- Side pots, split pots and best-of-seven hand evaluation
- Pluggable async decision policies for automated seats (local heuristic
  or a remote OpenAI-compatible chat model)
- FastAPI + WebSocket observer surface

Usage:
    from pokertable.core import Table, create_seats, ActionType
    from pokertable.agents import HeuristicAgent, LLMAgent
"""

__version__ = "0.2.0"

from pokertable.core.card import Card, Deck
from pokertable.core.player import Seat
from pokertable.core.state import TableState
from pokertable.core.table import Table
from pokertable.core.hand import HandRank, evaluate

__all__ = [
    "Card",
    "Deck",
    "Seat",
    "TableState",
    "Table",
    "HandRank",
    "evaluate",
    "__version__",
]
