"""
HTTP API Routes for pokertable.

These routes drive a single table: the human seat acts through
``/take_action`` and the automated seats play out their turns before the
response is returned. Multi-room real-time play is handled via WebSocket.
"""

import random
from dataclasses import replace
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException

from pokertable.core.errors import IllegalAction
from pokertable.core.table import Table
from pokertable.server.schemas import ActionRequest, ActionResultSchema, InitGameRequest
from pokertable.server.websocket import build_table, game_manager

router = APIRouter()

# Global table instance for single-table mode
_table: Optional[Table] = None


def get_table() -> Table:
    """Get the current table instance."""
    if _table is None:
        raise HTTPException(status_code=400, detail="Game not initialized")
    return _table


@router.post("/init_game")
async def init_game(req: InitGameRequest) -> Dict[str, Any]:
    """
    Initialize a new table with the specified number of players.

    Seat 0 is the human seat; the others are automated.
    """
    global _table

    config = game_manager.config
    overrides = {
        key: value for key, value in {
            "starting_stack": req.starting_stack,
            "small_blind": req.small_blind,
            "big_blind": req.big_blind,
        }.items() if value is not None
    }
    if req.ai_delay is not None:
        overrides["ai_min_delay"] = req.ai_delay
        overrides["ai_delay_jitter"] = 0.0
    config = replace(config, **overrides)

    rng = random.Random(req.seed) if req.seed is not None else None
    try:
        _table = build_table(config, req.player_count, rng)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "success": True,
        "message": f"Game initialized with {req.player_count} players",
        "player_count": req.player_count,
        "state": _table.get_state(),
    }


@router.post("/start_hand")
async def start_hand() -> Dict[str, Any]:
    """
    Start a new hand.

    Deals cards, posts blinds, then plays automated seats until the human
    seat must act or the hand is over.
    """
    table = get_table()

    try:
        state = table.start_hand()
    except IllegalAction as e:
        raise HTTPException(status_code=400, detail=str(e))

    state = await table.play_automated_turns()

    return {
        "success": True,
        "message": f"Hand #{state.hand_number} started",
        "hand_number": state.hand_number,
        "state": table.get_state(for_seat_id=_human_seat_id(table)),
    }


@router.get("/get_game_state")
async def get_game_state(seat_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Get the current game state.

    Private information is returned for ``seat_id`` (default: the current
    player).
    """
    table = get_table()
    seat_id = seat_id or table.state.current_player_id
    return table.get_state(for_seat_id=seat_id)


@router.post("/take_action", response_model=ActionResultSchema)
async def take_action(req: ActionRequest) -> Dict[str, Any]:
    """
    Take a game action.

    Processes the action, then lets automated seats act. Illegal actions
    are rejected with 400 and leave the table unchanged.
    """
    table = get_table()
    seat_id = req.seat_id or table.state.current_player_id
    if seat_id is None:
        raise HTTPException(status_code=400, detail="No hand in progress")

    result = table.take_action(seat_id, req.action_type, req.amount)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)

    await table.play_automated_turns()

    return {
        "success": True,
        "message": table.state.message,
        "action_type": result.action_type.value if result.action_type else None,
        "amount": result.amount,
        "state": table.get_state(for_seat_id=seat_id),
    }


@router.get("/legal_actions")
async def get_legal_actions() -> Dict[str, Any]:
    """
    Get legal actions for the current player.
    """
    table = get_table()

    if not table.state.is_hand_running():
        return {"actions": [], "message": "No hand in progress"}

    return {
        "seat_id": table.state.current_player_id,
        "actions": table.legal_actions(),
    }


@router.post("/reset_game")
async def reset_game() -> Dict[str, Any]:
    """
    Reset the game (for development/testing).
    """
    global _table
    _table = None
    return {"success": True, "message": "Game reset"}


def _human_seat_id(table: Table) -> Optional[str]:
    for seat in table.state.seats:
        if not seat.is_automated:
            return seat.seat_id
    return None
