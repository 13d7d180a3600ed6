"""
Texas Hold'em Round State Machine.

Advances one hand from blinds to payout:

    (posting blinds) -> PREFLOP -> FLOP -> TURN -> RIVER -> SHOWDOWN -> COMPLETE

Every function takes a ``TableState`` and returns a new one. The state
machine owns turn order and street transitions; chip movement for actions is
delegated to the betting engine, and the showdown to the hand evaluator and
pot distribution.

Usage:
    state = new_table(create_seats(["You", "Bot"], 2000))
    state = start_hand(state)

    while state.is_hand_running():
        seat_id = state.current_player_id
        state = apply_action(state, seat_id, ActionType.CALL)

    print(state.message)
"""

from __future__ import annotations
import logging
import random
from dataclasses import replace
from typing import Any, Optional, Sequence, Union

from pokertable.core.betting import (
    apply_bet, is_street_complete, next_actor_index,
)
from pokertable.core.card import Deck
from pokertable.core.errors import IllegalAction
from pokertable.core.hand import evaluate
from pokertable.core.player import Seat
from pokertable.core.pot import (
    apply_payouts, award_fold_out, settle_showdown,
)
from pokertable.core.rules import (
    ActionType, GamePhase, HOLE_CARDS, MAX_PLAYERS, MIN_PLAYERS,
    PHASE_LABELS, STREET_CARDS, DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND,
    get_blind_positions, next_index, next_phase,
)
from pokertable.core.state import TableState


logger = logging.getLogger(__name__)


def new_table(
    seats: Sequence[Seat],
    small_blind: int = DEFAULT_SMALL_BLIND,
    big_blind: int = DEFAULT_BIG_BLIND,
    message: str = "Welcome to AI Poker",
) -> TableState:
    """
    Create a table waiting for its first hand.

    Raises:
        ValueError: Invalid seat count, duplicate seat ids or blinds
    """
    if not MIN_PLAYERS <= len(seats) <= MAX_PLAYERS:
        raise ValueError(f"Number of seats must be {MIN_PLAYERS}-{MAX_PLAYERS}")
    if len({s.seat_id for s in seats}) != len(seats):
        raise ValueError("Seat ids must be unique")
    if small_blind <= 0 or big_blind < small_blind:
        raise ValueError("Blinds must be positive and small blind <= big blind")

    return TableState(
        seats=tuple(seats),
        small_blind=small_blind,
        min_bet=big_blind,
        message=message,
    )


def start_hand(
    previous: TableState,
    rng: Optional[random.Random] = None,
    deck: Optional[Deck] = None,
) -> TableState:
    """
    Start a new hand from the previous (finished) state.

    Shuffles a fresh deck, moves the button one seat clockwise to the next
    seat with chips, posts blinds, deals hole cards and sets the first actor.

    Args:
        previous: State after the last hand, or a fresh table
        rng: Random source for the shuffle
        deck: Predetermined deck (overrides ``rng``)

    Raises:
        IllegalAction: A hand is still running, or fewer than 2 seats have chips
    """
    if previous.is_hand_running():
        raise IllegalAction("Hand already in progress")

    funded = [s.stack > 0 for s in previous.seats]
    if sum(funded) < MIN_PLAYERS:
        raise IllegalAction("Cannot start hand: not enough players with chips")

    count = len(previous.seats)
    prev_dealer = previous.dealer_index
    if prev_dealer is None:
        dealer_idx = next_index(count, 0, funded, include_start=True)
    else:
        dealer_idx = next_index(count, prev_dealer, funded)

    seats = [s.reset_for_new_hand(is_dealer=(i == dealer_idx)) for i, s in enumerate(previous.seats)]
    deck = deck if deck is not None else Deck.new_shuffled(rng)
    hand_number = previous.hand_number + 1
    logger.info(f"Starting hand #{hand_number}")

    # Post blinds
    sb_idx, bb_idx = get_blind_positions(funded, dealer_idx)
    seats[sb_idx], sb_amount = seats[sb_idx].commit(previous.small_blind)
    seats[bb_idx], bb_amount = seats[bb_idx].commit(previous.min_bet)
    logger.debug(f"Blinds posted: SB={sb_amount} BB={bb_amount}")

    # Deal hole cards clockwise from the small blind
    for step in range(count):
        idx = (sb_idx + step) % count
        if funded[idx]:
            cards, deck = deck.draw(HOLE_CARDS)
            seats[idx] = replace(seats[idx], hole_cards=tuple(cards))

    state = replace(
        previous,
        seats=tuple(seats),
        deck=deck,
        community_cards=(),
        pot=sb_amount + bb_amount,
        phase=GamePhase.PREFLOP,
        current_player_id=None,
        dealer_id=seats[dealer_idx].seat_id,
        last_raise_size=0,
        winner_ids=(),
        payouts=(),
        pots=(),
        hand_number=hand_number,
    )

    return _advance(state, bb_idx)


def apply_action(
    state: TableState,
    seat_id: str,
    action: Union[ActionType, str],
    amount: Any = None,
) -> TableState:
    """
    Apply a seat action and move the hand forward.

    This is the only seat-facing mutator. After the betting engine accepts
    the action, the hand either ends by fold-out, advances to the next
    street (or showdown), or passes the turn to the next seat.

    Raises:
        IllegalActor: Not this seat's turn, or the seat cannot act
        IllegalAction: Action not permitted in this state
    """
    state = apply_bet(state, seat_id, action, amount)
    acted_idx = state.index_of(seat_id)

    if len(state.seats_in_hand) == 1:
        return _end_hand_early(state)

    return _advance(state, acted_idx)


def _advance(state: TableState, from_index: int) -> TableState:
    """Pass the turn on, or close the street when betting is settled."""
    if is_street_complete(state):
        return _end_street(state)

    nxt = next_actor_index(state, from_index)
    if nxt is None:
        return _end_street(state)

    seat = state.seats[nxt]
    return replace(
        state,
        current_player_id=seat.seat_id,
        message=f"{PHASE_LABELS[state.phase]}: {seat.name} to act.",
    )


def _end_street(state: TableState) -> TableState:
    """Close the current street and deal the next one (or go to showdown)."""
    actors = [s for s in state.seats if s.can_act]

    # Fewer than two seats can still bet: run out the board
    if state.phase == GamePhase.RIVER or len(actors) < 2:
        while state.phase < GamePhase.RIVER:
            state = _deal_street(state, next_phase(state.phase))
        return _go_to_showdown(state)

    state = _deal_street(state, next_phase(state.phase))
    first = next_actor_index(state, state.dealer_index)
    return replace(
        state,
        current_player_id=state.seats[first].seat_id,
        message=f"{PHASE_LABELS[state.phase]} dealt.",
    )


def _deal_street(state: TableState, phase: GamePhase) -> TableState:
    """Burn one card, reveal the street's community cards, reset bets."""
    deck = state.deck.burn()
    cards, deck = deck.draw(STREET_CARDS[phase])
    community = state.community_cards + tuple(cards)
    logger.info(f"{PHASE_LABELS[phase]}: {' '.join(str(c) for c in community)}")

    return state.with_seats(
        (s.reset_for_new_street() for s in state.seats),
        deck=deck,
        community_cards=community,
        phase=phase,
        current_player_id=None,
        last_raise_size=0,
    )


def _go_to_showdown(state: TableState) -> TableState:
    """Evaluate every seat still in the hand and pay out the pots."""
    state = replace(state, phase=GamePhase.SHOWDOWN, current_player_id=None)

    scores = {}
    hand_names = {}
    for seat in state.seats_in_hand:
        evaluation = evaluate(seat.hole_cards, state.community_cards)
        scores[seat.seat_id] = evaluation.score
        hand_names[seat.seat_id] = evaluation.category_name

    pots, payouts, winner_ids = settle_showdown(
        state.seats, scores, state.dealer_index, hand_names
    )

    # The best hand always takes (a share of) the main pot
    best = max(scores.values())
    top = [pid for pid in scores if scores[pid] == best]
    hand_name = hand_names[top[0]]
    if len(top) > 1:
        message = f"Split Pot! {len(top)} players have {hand_name}."
    else:
        message = f"{state.seat(top[0]).name} wins with {hand_name}!"
    logger.info(f"Showdown: {message}")

    return state.with_seats(
        apply_payouts(state.seats, payouts),
        pot=0,
        phase=GamePhase.COMPLETE,
        message=message,
        winner_ids=tuple(winner_ids),
        payouts=tuple(payouts),
        pots=tuple(pots),
    )


def _end_hand_early(state: TableState) -> TableState:
    """The last seat standing wins the pot without a showdown."""
    payout = award_fold_out(state.seats, state.pot)
    winner = state.seat(payout.seat_id)
    logger.info(f"{winner.name} wins {payout.amount} by fold-out")

    return state.with_seats(
        apply_payouts(state.seats, [payout]),
        pot=0,
        phase=GamePhase.COMPLETE,
        current_player_id=None,
        message=f"{winner.name} wins",
        winner_ids=(payout.seat_id,),
        payouts=(payout,),
    )
