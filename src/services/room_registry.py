"""
Room lifecycle: which rooms exist, who is in them, and the latest snapshot of each room's game.

Every mutating call follows the same cycle:
fetch the room -> rebuild a fresh GameEngine from its snapshot -> perform ONE engine operation -> store the new snapshot.
The registry never keeps an engine around between calls.

NOTE callers must serialize mutating calls per room (e.g. one queue per room). The registry holds no locks.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import uuid4

from src.chain_reaction.engine import GameEngine, create_game_engine
from src.chain_reaction.game_state import ChainReaction, GameState, Move
from src.chain_reaction.position import BoardSize
from src.core.config import MAX_PLAYERS, get_settings
from src.core.exceptions import RoomFullError, RoomNotFoundError
from src.core.models import PlayerId, Room, RoomId, utc_now
from src.db.memory_repository import InMemoryRoomRepository
from src.db.repository import RoomRepository

logger = logging.getLogger(__name__)


def generate_room_id(length: Optional[int] = None) -> RoomId:
    """Short, uppercase alphanumeric code. Uniqueness is checked by the caller."""
    length = length or get_settings().room_id_length
    return uuid4().hex[:length].upper()


class RoomRegistry:
    """Maps room codes to independent games."""

    def __init__(
        self,
        repository: Optional[RoomRepository] = None,
        id_factory: Callable[[], RoomId] = generate_room_id,
        now: Callable[[], datetime] = utc_now,
        engine_factory: Callable[[GameState], GameEngine] = GameEngine.from_state,
    ) -> None:
        self.repo = repository if repository is not None else InMemoryRoomRepository()
        self._new_id = id_factory
        self._now = now
        self._engine_from = engine_factory

    # -- Room bookkeeping --
    def create(self, board_size: BoardSize) -> Room:
        """New room with an empty game. Keep drawing codes until one is free."""
        room_id = self._new_id()
        while self.repo.get_room(room_id) is not None:
            logger.warning("Room code collision detected, regenerating: %s", room_id)
            room_id = self._new_id()

        engine = create_game_engine(room_id, board_size)
        room = Room(
            id=room_id,
            game_state=engine.get_game_state(),
            player_ids=[],
            created_at=self._now(),
        )
        stored = self.repo.add_room(room)
        logger.info(
            "Created room %s with a %dx%d board.",
            room_id,
            board_size.rows,
            board_size.cols,
        )
        return stored

    def get(self, room_id: RoomId) -> Room | None:
        return self.repo.get_room(room_id)

    def delete(self, room_id: RoomId) -> None:
        if self.repo.delete_room(room_id) is not None:
            logger.info("Deleted room %s", room_id)

    def list_rooms(self) -> list[Room]:
        return self.repo.list_rooms()

    # -- Membership --
    def add_player(self, room_id: RoomId, player_id: PlayerId, name: str) -> GameState:
        """Join a room. Joining twice is harmless."""
        room = self._fetch_room(room_id)

        if player_id in room.player_ids:
            return room.game_state

        if len(room.player_ids) >= MAX_PLAYERS:
            raise RoomFullError(room_id, MAX_PLAYERS)

        engine = self._engine_from(room.game_state)
        engine.add_player(player_id, name)
        room.player_ids.append(player_id)
        room.game_state = engine.get_game_state()
        self.repo.update_room(room)

        logger.info("Player %s joined room %s", player_id, room_id)
        return room.game_state

    def remove_player(self, room_id: RoomId, player_id: PlayerId) -> None:
        """Leave a room. The last one out deletes the room."""
        room = self.repo.get_room(room_id)
        if room is None:
            return

        engine = self._engine_from(room.game_state)
        engine.remove_player(player_id)
        room.player_ids = [pid for pid in room.player_ids if pid != player_id]
        room.game_state = engine.get_game_state()

        logger.info("Player %s left room %s", player_id, room_id)
        if not room.player_ids:
            self.delete(room_id)
            return
        self.repo.update_room(room)

    # -- Game flow --
    def start_game(self, room_id: RoomId) -> GameState:
        room = self._fetch_room(room_id)
        engine = self._engine_from(room.game_state)
        engine.start_game()
        room.game_state = engine.get_game_state()
        self.repo.update_room(room)
        return room.game_state

    def make_move(
        self, room_id: RoomId, move: Move
    ) -> tuple[GameState, list[ChainReaction]]:
        room = self._fetch_room(room_id)
        engine = self._engine_from(room.game_state)
        reactions = engine.make_move(move)
        room.game_state = engine.get_game_state()
        self.repo.update_room(room)
        return room.game_state, reactions

    # -- Garbage collection --
    def sweep_expired(self, max_age: Optional[timedelta] = None) -> list[RoomId]:
        """Delete every room created longer than max_age ago (default from settings: 24h)."""
        if max_age is None:
            max_age = timedelta(hours=get_settings().room_max_age_hours)

        now = self._now()
        expired = [
            room.id for room in self.repo.list_rooms() if now - room.created_at > max_age
        ]
        for room_id in expired:
            self.delete(room_id)

        if expired:
            logger.info("Swept %d expired rooms.", len(expired))
        return expired

    # -- Internal helpers --
    def _fetch_room(self, room_id: RoomId) -> Room:
        """Attempt to find the room in the repository and raise error if it fails."""
        room = self.repo.get_room(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room
