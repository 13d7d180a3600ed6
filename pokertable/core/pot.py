"""
Pot distribution: side pots, showdown settlement and fold-outs.

Every chip a seat commits during the hand is tracked in ``Seat.total_bet``.
At showdown the pot is cut into layers at each distinct contribution level of
the seats still in the hand, so a seat that went all-in short can only win
what it matched from each opponent.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pokertable.core.player import Seat


@dataclass(frozen=True)
class Pot:
    """A main pot or side pot."""
    amount: int
    eligible_ids: Tuple[str, ...]
    contributor_ids: Tuple[str, ...] = ()

    @property
    def is_uncalled(self) -> bool:
        """Only one seat put chips in: its own excess, returned uncontested."""
        return len(self.contributor_ids) == 1

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "eligible": list(self.eligible_ids)}


@dataclass(frozen=True)
class Payout:
    """Chips awarded to a seat from one pot."""
    seat_id: str
    amount: int
    hand_name: Optional[str] = None
    is_refund: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.seat_id,
            "won": self.amount,
            "hand_name": self.hand_name,
            "is_refund": self.is_refund,
        }


def build_pots(seats: Sequence[Seat]) -> List[Pot]:
    """
    Split the hand's contributions into a main pot and side pots.

    Levels are the distinct total contributions of seats still in the hand.
    Each pot takes every seat's slice between the previous level and its
    own (folded seats included); eligible seats are those still in the hand
    that reached the level. Chips a folded seat put in above the top level
    go to the last pot.
    """
    levels = sorted({s.total_bet for s in seats if s.is_in_hand and s.total_bet > 0})

    pots: List[Pot] = []
    prev_level = 0
    for level in levels:
        slices = {s.seat_id: min(s.total_bet, level) - min(s.total_bet, prev_level) for s in seats}
        amount = sum(slices.values())
        eligible = tuple(s.seat_id for s in seats if s.is_in_hand and s.total_bet >= level)
        contributors = tuple(pid for pid, chips in slices.items() if chips > 0)
        if amount > 0:
            pots.append(Pot(amount, eligible, contributors))
        prev_level = level

    overflow = sum(max(0, s.total_bet - prev_level) for s in seats)
    if overflow:
        extra = tuple(s.seat_id for s in seats if s.total_bet > prev_level)
        if pots:
            last = pots[-1]
            contributors = last.contributor_ids + tuple(
                pid for pid in extra if pid not in last.contributor_ids
            )
            pots[-1] = Pot(last.amount + overflow, last.eligible_ids, contributors)
        else:
            eligible = tuple(s.seat_id for s in seats if s.is_in_hand)
            pots.append(Pot(overflow, eligible, extra))

    return pots


def split_pot(
    amount: int,
    winner_ids: Sequence[str],
    seat_order: Sequence[str],
    dealer_index: int,
) -> Dict[str, int]:
    """
    Split a pot evenly among winners.

    Odd chips go one at a time to winners in clockwise order starting left
    of the button, so the whole pot is always paid out.
    """
    if not winner_ids:
        raise ValueError("Cannot split a pot with no winners")

    share, remainder = divmod(amount, len(winner_ids))
    shares = {pid: share for pid in winner_ids}

    count = len(seat_order)
    for step in range(1, count + 1):
        if remainder == 0:
            break
        pid = seat_order[(dealer_index + step) % count]
        if pid in shares:
            shares[pid] += 1
            remainder -= 1

    return shares


def settle_showdown(
    seats: Sequence[Seat],
    scores: Mapping[str, int],
    dealer_index: int,
    hand_names: Optional[Mapping[str, str]] = None,
) -> Tuple[List[Pot], List[Payout], List[str]]:
    """
    Award every pot to the best eligible hand(s).

    Args:
        seats: Seats in seating order
        scores: Showdown score per seat still in the hand
        dealer_index: Button position, for odd-chip order
        hand_names: Optional category name per seat for the payout records

    Returns:
        (pots, payouts, winner_ids). Winner ids are the seats that won a
        contested pot. A pot only its single eligible seat paid into is an
        uncalled excess and is returned as a refund; one that also holds
        folded seats' chips is a win.
    """
    hand_names = hand_names or {}
    seat_order = [s.seat_id for s in seats]
    pots = build_pots(seats)

    payouts: List[Payout] = []
    winner_ids: List[str] = []
    for pot in pots:
        best = max(scores[pid] for pid in pot.eligible_ids)
        pot_winners = [pid for pid in pot.eligible_ids if scores[pid] == best]
        is_refund = pot.is_uncalled

        for pid, amount in split_pot(pot.amount, pot_winners, seat_order, dealer_index).items():
            payouts.append(Payout(pid, amount, hand_names.get(pid), is_refund=is_refund))
            if not is_refund and pid not in winner_ids:
                winner_ids.append(pid)

    return pots, payouts, winner_ids


def award_fold_out(seats: Sequence[Seat], pot: int) -> Payout:
    """The last seat standing takes the whole pot."""
    remaining = [s for s in seats if s.is_in_hand]
    if len(remaining) != 1:
        raise ValueError(f"Fold-out needs exactly one seat in hand, found {len(remaining)}")
    return Payout(remaining[0].seat_id, pot)


def apply_payouts(seats: Sequence[Seat], payouts: Sequence[Payout]) -> List[Seat]:
    """Credit payouts to seat stacks."""
    totals: Dict[str, int] = {}
    for payout in payouts:
        totals[payout.seat_id] = totals.get(payout.seat_id, 0) + payout.amount

    return [
        replace(s, stack=s.stack + totals[s.seat_id]) if s.seat_id in totals else s
        for s in seats
    ]
