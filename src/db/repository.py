"""Protocol repository (in-memory dictionary for a single process, SQLAlchemy when several workers share rooms)"""

from typing import Protocol

from src.core.models import Room, RoomId


class RoomRepository(Protocol):
    """Persistence layer orchestration"""

    def get_room(self, room_id: RoomId) -> Room | None:
        """Get room by ID, if record exists."""
        ...

    def add_room(self, room: Room) -> Room:
        """Store a new room."""
        ...

    def update_room(self, room: Room) -> Room | None:
        """Overwrite membership and game snapshot of an existing room."""
        ...

    def delete_room(self, room_id: RoomId) -> Room | None:
        """Remove a room's record."""
        ...

    def list_rooms(self) -> list[Room]:
        """All rooms currently stored."""
        ...
