"""
Table state value.

``TableState`` is the single source of truth for one hand. It is frozen: the
betting engine and the round state machine return a new instance for every
transition, which is what observers (renderers, sockets, tests) receive.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Sequence, Tuple

from pokertable.core.card import Card, Deck
from pokertable.core.hand import evaluate
from pokertable.core.player import Seat
from pokertable.core.pot import Payout, Pot
from pokertable.core.rules import (
    BETTING_PHASES, PHASE_LABELS, TOTAL_COMMUNITY_CARDS, GamePhase,
)


@dataclass(frozen=True)
class TableState:
    """
    Immutable snapshot of a table.

    Attributes:
        seats: All seats in fixed seating order
        deck: Undealt cards
        community_cards: Revealed board (0, 3, 4 or 5 cards)
        pot: Every chip committed this hand, including current-street bets
        phase: Current phase
        current_player_id: Seat to act, None when nobody can act
        dealer_id: Seat holding the button
        small_blind: Small blind amount
        min_bet: Big blind, the minimum bet unit
        last_raise_size: Largest full raise increment this street
        message: Human-readable status line
        winner_ids: Seats that won at the end of the hand
        payouts: Chips awarded at the end of the hand
        pots: Pots settled at showdown (main pot first)
        hand_number: Hands started at this table
    """
    seats: Tuple[Seat, ...]
    small_blind: int
    min_bet: int
    deck: Deck = Deck()
    community_cards: Tuple[Card, ...] = ()
    pot: int = 0
    phase: GamePhase = GamePhase.COMPLETE
    current_player_id: Optional[str] = None
    dealer_id: Optional[str] = None
    last_raise_size: int = 0
    message: str = ""
    winner_ids: Tuple[str, ...] = ()
    payouts: Tuple[Payout, ...] = ()
    pots: Tuple[Pot, ...] = ()
    hand_number: int = 0

    def index_of(self, seat_id: Optional[str]) -> Optional[int]:
        """Seat index for an id, or None."""
        for i, seat in enumerate(self.seats):
            if seat.seat_id == seat_id:
                return i
        return None

    def seat(self, seat_id: str) -> Seat:
        """Get a seat by id."""
        idx = self.index_of(seat_id)
        if idx is None:
            raise KeyError(f"Unknown seat: {seat_id}")
        return self.seats[idx]

    @property
    def current_player(self) -> Optional[Seat]:
        """The seat whose turn it is to act."""
        idx = self.index_of(self.current_player_id)
        return None if idx is None else self.seats[idx]

    @property
    def dealer_index(self) -> Optional[int]:
        return self.index_of(self.dealer_id)

    @property
    def max_bet(self) -> int:
        """Highest current-street bet among seats still in the hand."""
        return max((s.current_bet for s in self.seats if s.is_in_hand), default=0)

    @property
    def total_chips(self) -> int:
        """Stacks plus pot; constant for the whole hand."""
        return sum(s.stack for s in self.seats) + self.pot

    @property
    def seats_in_hand(self) -> Tuple[Seat, ...]:
        return tuple(s for s in self.seats if s.is_in_hand)

    def is_hand_running(self) -> bool:
        """Check if a hand is currently accepting actions."""
        return self.phase in BETTING_PHASES

    def with_seat(self, index: int, seat: Seat, **changes: Any) -> TableState:
        """New state with one seat replaced (plus any other field changes)."""
        seats = list(self.seats)
        seats[index] = seat
        return replace(self, seats=tuple(seats), **changes)

    def with_seats(self, seats: Sequence[Seat], **changes: Any) -> TableState:
        return replace(self, seats=tuple(seats), **changes)

    def to_dict(self, for_seat_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Read-only snapshot for observers.

        Hole cards are shown for ``for_seat_id`` only, except once the hand
        is over, when every seat that reached showdown is revealed.
        """
        reveal_all = (
            self.phase == GamePhase.COMPLETE
            and len(self.community_cards) == TOTAL_COMMUNITY_CARDS
        )
        players = []
        for seat in self.seats:
            show = seat.seat_id == for_seat_id or (reveal_all and seat.is_in_hand)
            players.append(seat.to_dict(hide_cards=not show))

        public_info = {
            "hand_number": self.hand_number,
            "phase": self.phase.name,
            "phase_label": PHASE_LABELS[self.phase],
            "pot": self.pot,
            "current_bet": self.max_bet,
            "min_bet": self.min_bet,
            "small_blind": self.small_blind,
            "board": [c.to_dict() for c in self.community_cards],
            "dealer_id": self.dealer_id,
            "current_player": self.current_player_id,
            "players": players,
            "message": self.message,
            "winner_ids": list(self.winner_ids),
            "payouts": [p.to_dict() for p in self.payouts],
            "pots": [p.to_dict() for p in self.pots],
        }

        private_info: Dict[str, Any] = {}
        idx = self.index_of(for_seat_id)
        if idx is not None:
            seat = self.seats[idx]
            evaluation = evaluate(seat.hole_cards, self.community_cards)
            private_info = {
                "hand": [c.to_dict() for c in seat.hole_cards],
                "hand_name": evaluation.category_name,
                "chips_to_call": max(0, self.max_bet - seat.current_bet) if seat.is_in_hand else 0,
                "is_turn": self.current_player_id == seat.seat_id,
            }

        return {
            "public_info": public_info,
            "private_info": private_info,
        }
