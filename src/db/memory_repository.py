"""Implementation of (Room)Repository using a dictionary. Default for a single process."""

from copy import deepcopy

from src.core.models import Room, RoomId


class InMemoryRoomRepository:
    """Rooms are stored as copies, so callers never share a reference with the stored snapshot."""

    def __init__(self) -> None:
        self._rooms: dict[RoomId, Room] = {}

    def get_room(self, room_id: RoomId) -> Room | None:
        room = self._rooms.get(room_id)
        return deepcopy(room) if room else None

    def add_room(self, room: Room) -> Room:
        self._rooms[room.id] = deepcopy(room)
        return deepcopy(room)

    def update_room(self, room: Room) -> Room | None:
        if room.id not in self._rooms:
            return None
        self._rooms[room.id] = deepcopy(room)
        return deepcopy(room)

    def delete_room(self, room_id: RoomId) -> Room | None:
        return self._rooms.pop(room_id, None)

    def list_rooms(self) -> list[Room]:
        # copy the values first: the sweep deletes while iterating
        return [deepcopy(room) for room in list(self._rooms.values())]
