"""Implementation of (Room)Repository using SQLAlchemy"""

from datetime import timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.chain_reaction.game_state import GameState
from src.core.models import Room, RoomId
from src.db.schema import DBRoom


class SQLRoomRepository:
    """Data stored using SQL / the game snapshot is kept as a JSON document."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_room(self, room_id: RoomId) -> Room | None:
        """Get room by ID, if record exists."""
        room_db = self._fetch_room(room_id)
        if room_db:
            return self._to_model(room_db)
        return None

    def add_room(self, room: Room) -> Room:
        """Store new room and return the stored data."""
        room_db = DBRoom(
            id=room.id,
            game_state=room.game_state.to_dict(),
            player_ids=list(room.player_ids),
            created_at=room.created_at,
        )
        self.db.add(room_db)
        self.db.commit()
        self.db.refresh(room_db)
        return self._to_model(room_db)

    def update_room(self, room: Room) -> Room | None:
        """Overwrite membership and game snapshot."""
        room_db = self._fetch_room(room.id)
        if not room_db:
            return None
        room_db.game_state = room.game_state.to_dict()
        room_db.player_ids = list(room.player_ids)
        self.db.commit()
        self.db.refresh(room_db)
        return self._to_model(room_db)

    def delete_room(self, room_id: RoomId) -> Room | None:
        """Remove a room's record."""
        room_db = self._fetch_room(room_id)
        if not room_db:
            return None
        room = self._to_model(room_db)
        self.db.delete(room_db)
        self.db.commit()
        return room

    def list_rooms(self) -> list[Room]:
        query = select(DBRoom).order_by(DBRoom.created_at)
        return [self._to_model(room_db) for room_db in self.db.scalars(query)]

    def _fetch_room(self, room_id: RoomId) -> DBRoom | None:
        query = select(DBRoom).where(DBRoom.id == room_id)
        return self.db.scalar(query)

    def _to_model(self, room_db: DBRoom) -> Room:
        """Convert SQLAlchemy model to data transfer model."""
        created_at = room_db.created_at
        # SQLite drops the timezone on the way back
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return Room(
            id=room_db.id,
            game_state=GameState.from_dict(room_db.game_state),
            player_ids=list(room_db.player_ids),
            created_at=created_at,
        )
