"""
Betting engine: validates and applies a single seat action.

Every function here is pure. ``apply_bet`` returns a new ``TableState`` and
raises ``IllegalActor`` / ``IllegalAction`` for rejected input, leaving the
caller's state untouched.
"""

from __future__ import annotations
import logging
import math
import numbers
from dataclasses import replace
from typing import Any, Dict, List, Optional, Union

from pokertable.core.errors import IllegalAction, IllegalActor
from pokertable.core.player import Seat
from pokertable.core.rules import ActionType, calculate_min_raise, next_index
from pokertable.core.state import TableState


logger = logging.getLogger(__name__)


def parse_action(action: Union[ActionType, str]) -> ActionType:
    """Accept an ActionType or its name ("raise", "ALL_IN", "All-In")."""
    if isinstance(action, ActionType):
        return action
    try:
        return ActionType(str(action).strip().upper().replace("-", "_"))
    except ValueError:
        raise IllegalAction(f"Unknown action: {action}") from None


def outstanding(state: TableState, seat: Seat) -> int:
    """Chips the seat must add to match the street's highest bet."""
    return max(0, state.max_bet - seat.current_bet)


def min_raise_increment(state: TableState) -> int:
    """Smallest legal raise increment above the current highest bet."""
    return calculate_min_raise(state.last_raise_size, state.min_bet)


def validate_amount(amount: Any) -> int:
    """Raise amounts must be whole, finite, non-negative chip counts."""
    if amount is None:
        raise IllegalAction("Raise requires an amount")
    if isinstance(amount, bool) or not isinstance(amount, numbers.Real):
        raise IllegalAction(f"Invalid amount: {amount!r}")
    if not math.isfinite(amount):
        raise IllegalAction(f"Invalid amount: {amount!r}")
    if amount < 0:
        raise IllegalAction(f"Amount cannot be negative: {amount}")
    if int(amount) != amount:
        raise IllegalAction(f"Amount must be whole chips: {amount}")
    return int(amount)


def _validate_actor(state: TableState, seat_id: str) -> int:
    """Index of the acting seat, or raise IllegalActor."""
    if not state.is_hand_running():
        raise IllegalActor("No hand in progress")
    if state.current_player_id is None or seat_id != state.current_player_id:
        raise IllegalActor(f"It is not {seat_id}'s turn")

    idx = state.index_of(seat_id)
    seat = state.seats[idx]
    if seat.has_folded:
        raise IllegalActor(f"{seat.name} has folded")
    if seat.is_all_in:
        raise IllegalActor(f"{seat.name} is all-in")
    return idx


def apply_bet(
    state: TableState,
    seat_id: str,
    action: Union[ActionType, str],
    amount: Any = None,
) -> TableState:
    """
    Apply one action for the current actor.

    Args:
        state: Current table state
        seat_id: Seat submitting the action
        action: FOLD, CHECK, CALL, RAISE or ALL_IN
        amount: For RAISE, the increment above the current highest bet

    Returns:
        New state with the seat, pot and raise size updated. Street
        completion and turn order are left to the round state machine.

    Raises:
        IllegalActor: Seat is not the current actor or cannot act
        IllegalAction: Action not permitted (check facing a bet, raise
            below the minimum, invalid amount)
    """
    idx = _validate_actor(state, seat_id)
    action = parse_action(action)
    seat = state.seats[idx]
    max_bet = state.max_bet
    to_call = outstanding(state, seat)
    last_raise_size = state.last_raise_size
    committed = 0
    full_raise = False

    if action in (ActionType.RAISE, ActionType.ALL_IN) and not seat.can_raise:
        # All-in for no more than the call is still a call
        if action == ActionType.RAISE or seat.stack > to_call:
            raise IllegalAction(
                f"{seat.name} cannot raise: betting was not reopened by a full raise"
            )

    if action == ActionType.FOLD:
        new_seat = replace(seat, has_folded=True)

    elif action == ActionType.CHECK:
        if to_call > 0:
            raise IllegalAction(f"Cannot check, must call ${to_call}")
        new_seat = seat

    elif action == ActionType.CALL:
        new_seat, committed = seat.commit(to_call)

    elif action == ActionType.RAISE:
        increment = validate_amount(amount)
        min_increment = min_raise_increment(state)
        needed = to_call + increment
        # A raise the seat cannot cover is an all-in, which is always allowed
        if increment < min_increment and needed < seat.stack:
            raise IllegalAction(
                f"Minimum raise is ${min_increment} above ${max_bet}"
            )
        new_seat, committed = seat.commit(needed)
        raised_by = new_seat.current_bet - max_bet
        if raised_by >= min_increment:
            last_raise_size = raised_by
            full_raise = True

    elif action == ActionType.ALL_IN:
        new_seat, committed = seat.commit(seat.stack)
        raised_by = new_seat.current_bet - max_bet
        if raised_by >= min_raise_increment(state):
            last_raise_size = raised_by
            full_raise = True

    else:
        raise IllegalAction(f"Unknown action: {action}")

    recorded = ActionType.ALL_IN if new_seat.is_all_in and committed > 0 else action
    new_seat = replace(new_seat, has_acted=True, can_raise=False, last_action=recorded)

    logger.debug(f"{seat.name} {recorded.value} (committed {committed}, stack {new_seat.stack})")

    seats = list(state.seats)
    seats[idx] = new_seat
    if full_raise:
        # A full raise reopens the betting to everyone else
        seats = [s if i == idx else replace(s, can_raise=True) for i, s in enumerate(seats)]

    return state.with_seats(
        seats,
        pot=state.pot + committed,
        last_raise_size=last_raise_size,
    )


def is_street_complete(state: TableState) -> bool:
    """
    Check if the current betting street is complete.

    Every seat that can still act must have acted this street and matched
    the highest bet. All-in seats are settled whatever they bet. With no seat
    able to act, or a single one that already matches the highest bet and
    has nobody left to bet against, the street is over.
    """
    max_bet = state.max_bet
    actors = [s for s in state.seats if s.can_act]

    if not actors:
        return True
    if len(actors) == 1 and actors[0].current_bet >= max_bet:
        return True

    return all(s.has_acted and s.current_bet == max_bet for s in actors)


def next_actor_index(state: TableState, from_index: int) -> Optional[int]:
    """
    First seat after ``from_index`` (clockwise, wrapping) that can act.

    Returns None if no seat can act.
    """
    return next_index(len(state.seats), from_index, [s.can_act for s in state.seats])


def legal_actions(state: TableState, seat_id: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Legal actions for a seat (default: the current actor).

    Returns:
        List of action dicts with type and constraints. RAISE bounds are
        increments above the current highest bet.
    """
    seat_id = seat_id or state.current_player_id
    if not state.is_hand_running() or seat_id != state.current_player_id:
        return []

    seat = state.seat(seat_id)
    if not seat.can_act:
        return []

    to_call = outstanding(state, seat)
    actions: List[Dict[str, Any]] = [{"type": ActionType.FOLD.value}]

    if to_call == 0:
        actions.append({"type": ActionType.CHECK.value})
    else:
        actions.append({
            "type": ActionType.CALL.value,
            "amount": min(to_call, seat.stack),
        })

    # Raise if the seat has chips left after calling and betting is open to it
    if seat.stack > to_call and seat.can_raise:
        max_increment = seat.stack - to_call
        actions.append({
            "type": ActionType.RAISE.value,
            "min": min(min_raise_increment(state), max_increment),
            "max": max_increment,
        })

    if seat.can_raise or seat.stack <= to_call:
        actions.append({
            "type": ActionType.ALL_IN.value,
            "amount": seat.stack,
        })

    return actions
