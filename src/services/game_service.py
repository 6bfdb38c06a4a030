"""Orchestration of communication from the transport layer to the room registry and game engine (and the reverse direction)."""

import logging
from typing import Optional

from src.api.models import (
    CreateRoomRequest,
    GameStateResponse,
    GetRoomRequest,
    JoinRoomRequest,
    LeaveRoomRequest,
    MoveRequest,
    MoveResponse,
    RoomResponse,
    StartGameRequest,
)
from src.chain_reaction.game_state import GameState, Move
from src.chain_reaction.position import BoardSize, Position
from src.core.exceptions import RoomNotFoundError
from src.core.models import PlayerId, Room, RoomId
from src.services.room_registry import RoomRegistry

logger = logging.getLogger(__name__)


def default_player_name(player_id: PlayerId) -> str:
    return f"Player {player_id[:4]}"


class GameService:
    """Orchestration of layers for Chain Reaction rooms."""

    def __init__(self, registry: Optional[RoomRegistry] = None) -> None:
        self.registry = registry if registry is not None else RoomRegistry()

    # -- Transport events logic ---
    def create_room(self, request: CreateRoomRequest) -> RoomResponse:
        """A player opens a new room and is the first one to join it."""
        board_size = BoardSize(request.board_size.rows, request.board_size.cols)
        room = self.registry.create(board_size)

        name = request.player_name or default_player_name(request.player_id)
        self.registry.add_player(room.id, request.player_id, name)

        return self._create_room_response(self._fetch_room(room.id))

    def join_room(self, request: JoinRoomRequest) -> RoomResponse:
        """Another player joins an existing room (joining twice is harmless)."""
        name = request.player_name or default_player_name(request.player_id)
        self.registry.add_player(request.room_id, request.player_id, name)
        return self._create_room_response(self._fetch_room(request.room_id))

    def leave_room(self, request: LeaveRoomRequest) -> None:
        """Explicit leave and disconnect are handled the same way."""
        self.registry.remove_player(request.room_id, request.player_id)

    def start_game(self, request: StartGameRequest) -> GameStateResponse:
        game_state = self.registry.start_game(request.room_id)
        return self._create_game_state_response(request.room_id, game_state)

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Place a dot. Rejected moves raise before anything is stored."""
        move = Move(
            player_id=request.player_id,
            position=Position(request.position.row, request.position.col),
        )
        game_state, reactions = self.registry.make_move(request.room_id, move)

        if game_state.is_game_over:
            logger.info(
                "Room %s finished. winner: %s",
                request.room_id,
                game_state.winner.id if game_state.winner else None,
            )

        return MoveResponse(
            room_id=request.room_id,
            game_state=game_state.to_dict(),
            reactions=[reaction.to_dict() for reaction in reactions],
            is_game_over=game_state.is_game_over,
            winner=game_state.winner.to_dict() if game_state.winner else None,
        )

    def get_game_state(self, request: GetRoomRequest) -> GameStateResponse:
        """Retrieve the current snapshot (used after a reconnect for instance)."""
        room = self._fetch_room(request.room_id)
        return self._create_game_state_response(room.id, room.game_state)

    def sweep_expired_rooms(self) -> list[RoomId]:
        """Meant to be called periodically by whatever scheduler the deployment uses."""
        return self.registry.sweep_expired()

    # -- Internal helpers --
    def _create_room_response(self, room: Room) -> RoomResponse:
        return RoomResponse(
            room_id=room.id,
            player_ids=room.player_ids,
            created_at=room.created_at,
            game_state=room.game_state.to_dict(),
        )

    def _create_game_state_response(
        self, room_id: RoomId, game_state: GameState
    ) -> GameStateResponse:
        return GameStateResponse(
            room_id=room_id, phase=game_state.phase, game_state=game_state.to_dict()
        )

    def _fetch_room(self, room_id: RoomId) -> Room:
        room = self.registry.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room
