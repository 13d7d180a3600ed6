"""
WebSocket handling for real-time game communication.

This module provides:
- build_table: Table wired with decision policies from a TableConfig
- GameManager: Manages multiple independent game rooms
- WebSocket endpoint: Handles real-time player connections and game actions
"""

from __future__ import annotations
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
import logging
import random

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from pokertable.agents import HeuristicAgent, LLMAgent
from pokertable.config import TableConfig
from pokertable.core.errors import IllegalAction
from pokertable.core.player import create_seats
from pokertable.core.state import TableState
from pokertable.core.table import Table
from pokertable.server.schemas import (
    WSActionMessage, WSErrorMessage, WSJoinMessage, WSResultMessage, WSStateMessage,
)


logger = logging.getLogger(__name__)


def build_table(
    config: TableConfig,
    player_count: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Table:
    """
    Create a table from a config.

    The first seat is the human seat; every other seat is automated. With a
    remote API key configured, automated seats ask the chat model and fall
    back to the heuristic agent; otherwise they play the heuristic agent.
    """
    player_count = player_count or len(config.seat_names)
    names = list(config.seat_names[:player_count])
    while len(names) < player_count:
        names.append(f"Bot {len(names)}")

    rng = rng or random.Random()
    seats = create_seats(names, config.starting_stack)

    policies = {}
    if config.has_remote_policy:
        policies = {
            seat.seat_id: LLMAgent.from_config(config, name=seat.name)
            for seat in seats if seat.is_automated
        }

    return Table(
        seats,
        small_blind=config.small_blind,
        big_blind=config.big_blind,
        policies=policies,
        fallback=HeuristicAgent(rng=rng),
        rng=rng,
        min_delay=config.ai_min_delay,
        delay_jitter=config.ai_delay_jitter,
        decision_timeout=config.decision_timeout,
    )


@dataclass
class GameRoom:
    """A game room with its table and connected players."""
    room_id: str
    table: Table
    connections: Dict[str, WebSocket] = field(default_factory=dict)
    pending: List[TableState] = field(default_factory=list)

    def __post_init__(self):
        self.table.subscribe(self.pending.append)

    async def broadcast(self, message: Dict[str, Any], exclude: Optional[str] = None):
        """Broadcast a message to all connected players."""
        for player_id, ws in list(self.connections.items()):
            if player_id != exclude:
                try:
                    await ws.send_json(message)
                except (WebSocketDisconnect, RuntimeError) as e:
                    logger.error(f"Error sending to {player_id}: {e}")

    async def send_state(self, player_id: str, state: TableState):
        ws = self.connections.get(player_id)
        if ws is None:
            return
        snapshot = state.to_dict(for_seat_id=player_id)
        message = WSStateMessage(**snapshot).model_dump()
        try:
            await ws.send_json(message)
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.error(f"Error sending state to {player_id}: {e}")

    async def flush(self):
        """Send every state published since the last flush, in order."""
        states = list(self.pending)
        self.pending.clear()
        for state in states:
            for player_id in list(self.connections):
                await self.send_state(player_id, state)
            if not state.is_hand_running() and state.payouts:
                await self.send_result(state)

    async def send_result(self, state: TableState):
        """Send hand result to all players."""
        message = WSResultMessage(
            message=state.message,
            winner_ids=list(state.winner_ids),
            payouts=[p.to_dict() for p in state.payouts],
            board=[c.to_dict() for c in state.community_cards],
        )
        await self.broadcast(message.model_dump())


class GameManager:
    """
    Manages multiple game rooms and player connections.

    Usage:
        manager = GameManager()
        room_id = manager.create_room(player_count=6)
        await manager.connect(room_id, player_id, websocket)
        await manager.handle_message(room_id, player_id, message)
        await manager.disconnect(room_id, player_id)
    """

    def __init__(self, config: Optional[TableConfig] = None):
        self.config = config or TableConfig.from_env()
        self.rooms: Dict[str, GameRoom] = {}
        self._room_counter = 0

    def create_room(
        self,
        player_count: Optional[int] = None,
        config: Optional[TableConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> str:
        """Create a new game room."""
        self._room_counter += 1
        room_id = f"room-{self._room_counter}"

        table = build_table(config or self.config, player_count, rng)
        self.rooms[room_id] = GameRoom(room_id=room_id, table=table)
        logger.info(f"Created room {room_id} with {len(table.state.seats)} players")

        return room_id

    def get_room(self, room_id: Optional[str]) -> Optional[GameRoom]:
        """Get a game room by ID."""
        return self.rooms.get(room_id) if room_id else None

    async def connect(self, room_id: str, player_id: str, websocket: WebSocket) -> bool:
        """
        Register an accepted connection with a room.

        Returns:
            True if connected successfully
        """
        room = self.get_room(room_id)
        if room is None:
            logger.warning(f"Room {room_id} not found")
            return False

        room.connections[player_id] = websocket
        logger.info(f"Player {player_id} connected to {room_id}")

        await room.send_state(player_id, room.table.state)
        await room.broadcast(
            {"type": "player_joined", "player_id": player_id},
            exclude=player_id,
        )
        return True

    async def disconnect(self, room_id: str, player_id: str):
        """Disconnect a player from a room."""
        room = self.get_room(room_id)
        if room and player_id in room.connections:
            del room.connections[player_id]
            logger.info(f"Player {player_id} disconnected from {room_id}")

            await room.broadcast({
                "type": "player_left",
                "player_id": player_id,
            })

    async def handle_message(
        self,
        room_id: str,
        player_id: str,
        message: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Handle a message from a player.

        Args:
            room_id: The room ID
            player_id: The player ID (a seat id to act)
            message: The message dict with 'type' and optional data

        Returns:
            Response dict
        """
        room = self.get_room(room_id)
        if room is None:
            return _error("Room not found")

        msg_type = message.get("type", "")

        if msg_type == "action":
            return await self._handle_action(room, player_id, message)
        elif msg_type == "start_hand":
            return await self._handle_start_hand(room)
        elif msg_type == "get_state":
            return {"type": "state", **room.table.get_state(for_seat_id=player_id)}
        else:
            return _error(f"Unknown message type: {msg_type}")

    async def _handle_action(
        self,
        room: GameRoom,
        player_id: str,
        message: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Handle a game action from a player."""
        try:
            msg = WSActionMessage.model_validate(message)
        except ValidationError as e:
            return _error(f"Invalid action message: {e.errors()[0]['msg']}")

        result = room.table.take_action(player_id, msg.action, msg.amount)
        if not result.success:
            return _error(result.message)

        await room.flush()
        await room.table.play_automated_turns(on_state=room.flush)

        return {
            "type": "action_result",
            "success": True,
            "action": result.action_type.value if result.action_type else msg.action,
            "amount": result.amount,
        }

    async def _handle_start_hand(self, room: GameRoom) -> Dict[str, Any]:
        """Handle starting a new hand."""
        try:
            state = room.table.start_hand()
        except IllegalAction as e:
            return _error(str(e))

        await room.flush()
        await room.table.play_automated_turns(on_state=room.flush)

        return {
            "type": "hand_started",
            "hand_number": state.hand_number,
        }


def _error(message: str) -> Dict[str, Any]:
    return WSErrorMessage(message=message).model_dump()


# Global game manager instance
game_manager = GameManager()


async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for game communication.

    Protocol:
    1. Client connects and sends: {"type": "join", "room_id": "...", "player_id": "p0"}
       (unknown or missing room_id creates a new room)
    2. Server sends game state
    3. Client sends {"type": "start_hand"} or
       {"type": "action", "action": "RAISE", "amount": 100}
    4. Server sends a state after every transition, including automated seats
    """
    room_id: Optional[str] = None
    player_id: Optional[str] = None

    try:
        await websocket.accept()
        try:
            join = WSJoinMessage.model_validate(await websocket.receive_json())
        except ValidationError:
            join = None

        if join is None or join.type != "join":
            await websocket.send_json(_error("First message must be join with a player_id"))
            await websocket.close()
            return

        room_id, player_id = join.room_id, join.player_id
        if game_manager.get_room(room_id) is None:
            room_id = game_manager.create_room()

        await game_manager.connect(room_id, player_id, websocket)
        await websocket.send_json({"type": "joined", "room_id": room_id, "player_id": player_id})

        # Message loop
        while True:
            message = await websocket.receive_json()
            response = await game_manager.handle_message(room_id, player_id, message)
            await websocket.send_json(response)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {player_id}")
    finally:
        if room_id and player_id:
            await game_manager.disconnect(room_id, player_id)
