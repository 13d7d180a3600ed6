"""
Error kinds raised by the table engine.

Illegal seat input is rejected without touching the table state; the caller
re-prompts. Policy failures never reach the observer: the table driver
substitutes a local fallback decision.
"""


class PokerError(Exception):
    """Base class for engine errors."""


class IllegalActor(PokerError, ValueError):
    """Action submitted by a seat that is not the current actor, or cannot act."""


class IllegalAction(PokerError, ValueError):
    """Action not permitted in the current table state."""


class DeckExhausted(PokerError):
    """The deck ran out of cards (too many seats for one deck)."""


class DecisionPolicyFailure(PokerError):
    """An automated seat's decision call errored or returned unusable output."""
