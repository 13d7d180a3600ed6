"""
Seat (player) value type for Texas Hold'em.

A seat is immutable: the betting engine and street transitions produce new
seats with ``dataclasses.replace`` rather than mutating them, so every table
snapshot handed to an observer stays consistent.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from pokertable.core.card import Card
from pokertable.core.rules import ActionType


@dataclass(frozen=True)
class Seat:
    """
    A seat at the table.

    Attributes:
        seat_id: Unique identifier for the seat
        name: Display name
        is_automated: True if a decision policy plays this seat
        stack: Current chip count
        hole_cards: The seat's private cards (0 or 2)
        current_bet: Amount committed in the current street
        total_bet: Amount committed in the whole hand (for side pots)
        has_folded: Folded, or sitting the hand out with an empty stack
        is_all_in: Stack exhausted mid-hand; still eligible to win
        is_dealer: Holds the button this hand
        has_acted: Acted at least once this street
        can_raise: May still raise; closed once the seat acts, reopened only
            by a full raise from another seat
        last_action: Last action taken this street, for observers
        rationale: Explanation from the decision policy, for observers
    """
    seat_id: str
    name: str
    stack: int
    is_automated: bool = False
    hole_cards: Tuple[Card, ...] = ()
    current_bet: int = 0
    total_bet: int = 0
    has_folded: bool = False
    is_all_in: bool = False
    is_dealer: bool = False
    has_acted: bool = False
    can_raise: bool = True
    last_action: Optional[ActionType] = None
    rationale: Optional[str] = None

    def reset_for_new_hand(self, is_dealer: bool = False) -> Seat:
        """Fresh seat for a new hand; a seat without chips sits out folded."""
        return replace(
            self,
            hole_cards=(),
            current_bet=0,
            total_bet=0,
            has_folded=self.stack <= 0,
            is_all_in=False,
            is_dealer=is_dealer,
            has_acted=False,
            can_raise=True,
            last_action=None,
            rationale=None,
        )

    def reset_for_new_street(self) -> Seat:
        """Clear per-street betting fields (flop, turn, river)."""
        return replace(self, current_bet=0, has_acted=False, can_raise=True, last_action=None)

    def commit(self, amount: int) -> Tuple[Seat, int]:
        """
        Move chips from the stack into the current bet.

        Returns:
            The new seat and the amount actually committed (capped at the
            stack; an exhausted stack marks the seat all-in).
        """
        actual = max(0, min(amount, self.stack))
        stack = self.stack - actual
        seat = replace(
            self,
            stack=stack,
            current_bet=self.current_bet + actual,
            total_bet=self.total_bet + actual,
            is_all_in=self.is_all_in or (stack == 0 and actual > 0),
        )
        return seat, actual

    def with_rationale(self, rationale: Optional[str]) -> Seat:
        return replace(self, rationale=rationale or None)

    @property
    def is_in_hand(self) -> bool:
        """Still contesting the pot (not folded)."""
        return not self.has_folded

    @property
    def can_act(self) -> bool:
        """Can still take betting actions."""
        return not self.has_folded and not self.is_all_in

    def to_dict(self, hide_cards: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            hide_cards: If True, don't include hole cards
        """
        result: Dict[str, Any] = {
            "id": self.seat_id,
            "name": self.name,
            "is_automated": self.is_automated,
            "stack": self.stack,
            "bet": self.current_bet,
            "total_bet": self.total_bet,
            "has_folded": self.has_folded,
            "is_all_in": self.is_all_in,
            "is_dealer": self.is_dealer,
            "last_action": self.last_action.value if self.last_action else None,
            "rationale": self.rationale,
        }

        if not hide_cards and self.hole_cards:
            result["cards"] = [card.to_dict() for card in self.hole_cards]

        return result

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"Seat {self.name} [{cards_str}] ${self.stack}"


def create_seats(
    names: List[str],
    starting_stack: int,
    automated: Optional[List[bool]] = None,
) -> List[Seat]:
    """
    Build a fixed seating order with ids p0, p1, ...

    Args:
        names: Display names in seating order
        starting_stack: Chips for every seat
        automated: Per seat automation flags (default: every seat but the
            first is automated)
    """
    if automated is None:
        automated = [i > 0 for i in range(len(names))]
    if len(automated) != len(names):
        raise ValueError("automated flags must match the number of names")
    return [
        Seat(seat_id=f"p{i}", name=name, stack=starting_stack, is_automated=auto)
        for i, (name, auto) in enumerate(zip(names, automated))
    ]
