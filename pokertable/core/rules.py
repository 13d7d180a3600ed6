"""
Texas Hold'em Rules and Constants.

Key rules implemented by the engine:

1. Button: moves one seat clockwise each hand, skipping seats without chips.

2. Blinds: the small blind is the seat after the button, the big blind the
   seat after that. Heads-up (2 players): the button posts the small blind
   and acts first preflop.

3. Minimum raise: a raise increment must be at least the previous raise
   increment of the street, and never below the big blind. A raise the seat
   cannot cover is an all-in and is always allowed.

4. Side pots: when seats are all-in for different amounts, separate pots are
   built for each contribution level.
"""

from enum import Enum, IntEnum
from typing import Optional, Sequence, Tuple


class GamePhase(IntEnum):
    """Phases of a hand. Values are ordered; a hand only moves forward."""
    PREFLOP = 1
    FLOP = 2
    TURN = 3
    RIVER = 4
    SHOWDOWN = 5
    COMPLETE = 6


BETTING_PHASES = (GamePhase.PREFLOP, GamePhase.FLOP, GamePhase.TURN, GamePhase.RIVER)

PHASE_LABELS = {
    GamePhase.PREFLOP: "Pre-Flop",
    GamePhase.FLOP: "Flop",
    GamePhase.TURN: "Turn",
    GamePhase.RIVER: "River",
    GamePhase.SHOWDOWN: "Showdown",
    GamePhase.COMPLETE: "Game Over",
}


class ActionType(Enum):
    """Seat actions; also used as the recorded last action of a seat."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


ACTION_LABELS = {
    ActionType.FOLD: "Fold",
    ActionType.CHECK: "Check",
    ActionType.CALL: "Call",
    ActionType.RAISE: "Raise",
    ActionType.ALL_IN: "All-In",
}


# Default table settings
DEFAULT_SMALL_BLIND = 25
DEFAULT_BIG_BLIND = 50
DEFAULT_STARTING_STACK = 2000
MIN_PLAYERS = 2
MAX_PLAYERS = 8

# Cards per phase
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1
TOTAL_COMMUNITY_CARDS = 5

# Cards revealed when entering each street
STREET_CARDS = {
    GamePhase.FLOP: FLOP_CARDS,
    GamePhase.TURN: TURN_CARDS,
    GamePhase.RIVER: RIVER_CARDS,
}

# Hand evaluation
HAND_SIZE = 5  # Best 5-card hand


def next_phase(phase: GamePhase) -> GamePhase:
    """The phase following ``phase``."""
    if phase == GamePhase.COMPLETE:
        raise ValueError("A completed hand has no next phase")
    return GamePhase(phase + 1)


def next_index(
    count: int,
    start: int,
    eligible: Sequence[bool],
    include_start: bool = False,
) -> Optional[int]:
    """
    Scan seats clockwise for the first eligible index.

    Starts at ``start + 1`` (or ``start`` itself if ``include_start``) and
    wraps around once. Returns None if no seat is eligible.
    """
    first = 0 if include_start else 1
    for step in range(first, count + first):
        idx = (start + step) % count
        if eligible[idx]:
            return idx
    return None


def get_blind_positions(funded: Sequence[bool], dealer_index: int) -> Tuple[int, int]:
    """
    Calculate small blind and big blind seat indices.

    In heads-up play the dealer posts the small blind.

    Args:
        funded: Per seat, whether the seat has chips and is dealt in
        dealer_index: Seat index of the button

    Returns:
        Tuple of (small_blind_index, big_blind_index)
    """
    num_funded = sum(1 for f in funded if f)
    if num_funded < MIN_PLAYERS:
        raise ValueError("Need at least 2 players")

    count = len(funded)
    if num_funded == 2:
        sb_index = dealer_index
    else:
        sb_index = next_index(count, dealer_index, funded)
    bb_index = next_index(count, sb_index, funded)
    return sb_index, bb_index


def calculate_min_raise(last_raise_size: int, big_blind: int) -> int:
    """
    Minimum raise increment.

    The increment must be at least the previous raise increment of the
    street; with no raise yet it is the big blind.
    """
    return max(last_raise_size, big_blind)
