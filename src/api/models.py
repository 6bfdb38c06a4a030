"""Requests and Response models"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from src.core.config import DEFAULT_BOARD_PRESET
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Phase

RoomCode = str
PlayerId = str

MAX_BOARD_SIDE = 20


def _normalize_room_id(value: str) -> str:
    room_id = value.strip().upper()
    if not (room_id and room_id.isalnum()):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a room code.")
    return room_id


# --- NESTED MODELS ---
class BoardSizeModel(BaseModel):
    rows: int = DEFAULT_BOARD_PRESET.rows
    cols: int = DEFAULT_BOARD_PRESET.cols

    @field_validator(*["rows", "cols"])
    @classmethod
    def validate_side(cls, value: int) -> int:
        if not 1 <= value <= MAX_BOARD_SIDE:
            raise InvalidRequestError(
                f"Board sides must be between 1 and {MAX_BOARD_SIDE}, got {value}."
            )
        return value


class PositionModel(BaseModel):
    row: int
    col: int

    @field_validator(*["row", "col"])
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"Coordinates cannot be negative, got {value}.")
        return value


# --- REQUEST MODELS ---
class CreateRoomRequest(BaseModel):
    player_id: PlayerId
    player_name: Optional[str] = None
    board_size: BoardSizeModel = BoardSizeModel()


class JoinRoomRequest(BaseModel):
    room_id: RoomCode
    player_id: PlayerId
    player_name: Optional[str] = None

    @field_validator("room_id")
    @classmethod
    def validate_room_id(cls, value: str) -> str:
        return _normalize_room_id(value)


class LeaveRoomRequest(BaseModel):
    room_id: RoomCode
    player_id: PlayerId

    @field_validator("room_id")
    @classmethod
    def validate_room_id(cls, value: str) -> str:
        return _normalize_room_id(value)


class StartGameRequest(BaseModel):
    room_id: RoomCode

    @field_validator("room_id")
    @classmethod
    def validate_room_id(cls, value: str) -> str:
        return _normalize_room_id(value)


class MoveRequest(BaseModel):
    room_id: RoomCode
    player_id: PlayerId
    position: PositionModel

    @field_validator("room_id")
    @classmethod
    def validate_room_id(cls, value: str) -> str:
        return _normalize_room_id(value)


class GetRoomRequest(BaseModel):
    room_id: RoomCode

    @field_validator("room_id")
    @classmethod
    def validate_room_id(cls, value: str) -> str:
        return _normalize_room_id(value)


# --- RESPONSE MODELS ---
class RoomResponse(BaseModel):
    room_id: RoomCode
    player_ids: list[PlayerId]
    created_at: datetime
    game_state: dict[str, Any]


class GameStateResponse(BaseModel):
    room_id: RoomCode
    phase: Phase
    game_state: dict[str, Any]


class MoveResponse(BaseModel):
    room_id: RoomCode
    game_state: dict[str, Any]
    reactions: list[dict[str, Any]]
    is_game_over: bool
    winner: Optional[dict[str, Any]]
