"""
Pydantic schemas for API request/response validation.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from pokertable.core.rules import MAX_PLAYERS, MIN_PLAYERS


# ============= Request Schemas =============

class InitGameRequest(BaseModel):
    """Request to initialize a table. Unset fields come from the config."""
    player_count: int = Field(ge=MIN_PLAYERS, le=MAX_PLAYERS, default=MAX_PLAYERS)
    starting_stack: Optional[int] = Field(default=None, gt=0)
    small_blind: Optional[int] = Field(default=None, gt=0)
    big_blind: Optional[int] = Field(default=None, gt=0)
    ai_delay: Optional[float] = Field(default=None, ge=0, description="Seconds per automated decision")
    seed: Optional[int] = Field(default=None, description="Seed for reproducible deals")


class ActionRequest(BaseModel):
    """Request to take a game action."""
    action_type: str = Field(..., description="Action type: FOLD, CHECK, CALL, RAISE, ALL_IN")
    # Validated by the betting engine so bad amounts are reported as illegal actions
    amount: Optional[float] = Field(default=None, description="Raise increment above the current bet")
    seat_id: Optional[str] = Field(default=None, description="Acting seat (default: current player)")


# ============= Response Schemas =============

class ActionResultSchema(BaseModel):
    """Result of an action."""
    success: bool
    message: str
    action_type: Optional[str] = None
    amount: int = 0
    state: Dict[str, Any]


# ============= WebSocket Message Schemas =============

class WSJoinMessage(BaseModel):
    """WebSocket join room message."""
    type: str = "join"
    room_id: Optional[str] = None
    player_id: str


class WSActionMessage(BaseModel):
    """WebSocket action message."""
    type: str = "action"
    action: str  # FOLD, CHECK, CALL, RAISE, ALL_IN
    amount: Optional[float] = None


class WSStateMessage(BaseModel):
    """WebSocket state update message."""
    type: str = "state"
    public_info: Dict[str, Any]
    private_info: Dict[str, Any]


class WSResultMessage(BaseModel):
    """WebSocket hand result message."""
    type: str = "result"
    message: str
    winner_ids: List[str]
    payouts: List[Dict[str, Any]]
    board: List[Dict[str, Any]]


class WSErrorMessage(BaseModel):
    """WebSocket error message."""
    type: str = "error"
    message: str
