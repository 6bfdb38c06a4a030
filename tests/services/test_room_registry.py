"""Unit tests for src/services/room_registry.py"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from src.chain_reaction.game_state import Move
from src.chain_reaction.position import BoardSize, Position
from src.core.config import MAX_PLAYERS
from src.core.exceptions import (
    GameError,
    InsufficientPlayersError,
    RoomFullError,
    RoomNotFoundError,
    TurnOrderError,
)
from src.db.sql_repository import SQLRoomRepository
from src.services.room_registry import RoomRegistry, generate_room_id

BOARD = BoardSize(6, 8)


class FakeClock:
    """Controllable replacement for utc_now"""

    def __init__(self) -> None:
        self.current = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(clock: FakeClock) -> RoomRegistry:
    return RoomRegistry(now=clock)


# --- ROOM IDS ----
def test_generated_room_ids_are_short_uppercase_codes() -> None:
    for _ in range(50):
        room_id = generate_room_id()
        assert len(room_id) == 8
        assert room_id.isalnum()
        assert room_id == room_id.upper()


def test_create_retries_on_collision() -> None:
    codes = iter(["AAAA1111", "AAAA1111", "AAAA1111", "BBBB2222"])
    registry = RoomRegistry(id_factory=lambda: next(codes))

    first = registry.create(BOARD)
    second = registry.create(BOARD)
    assert first.id == "AAAA1111"
    assert second.id == "BBBB2222"


# --- CREATE / GET / DELETE ----
def test_create_room(registry: RoomRegistry, clock: FakeClock) -> None:
    room = registry.create(BOARD)

    assert room.player_ids == []
    assert room.created_at == clock.current
    assert room.game_state.id == room.id
    assert room.game_state.board_size == BOARD
    assert room.game_state.players == []
    assert registry.get(room.id) == room


def test_get_unknown_room(registry: RoomRegistry) -> None:
    assert registry.get("NOPE") is None


def test_delete_room(registry: RoomRegistry) -> None:
    room = registry.create(BOARD)
    registry.delete(room.id)
    assert registry.get(room.id) is None
    # deleting twice is fine
    registry.delete(room.id)


def test_rooms_are_isolated(registry: RoomRegistry) -> None:
    first = registry.create(BOARD)
    second = registry.create(BoardSize(10, 12))
    registry.add_player(first.id, "p1", "Alice")

    assert registry.get(second.id).game_state.players == []
    assert {room.id for room in registry.list_rooms()} == {first.id, second.id}


# --- MEMBERSHIP ----
def test_add_player(registry: RoomRegistry) -> None:
    room = registry.create(BOARD)
    game_state = registry.add_player(room.id, "p1", "Alice")

    assert [player.id for player in game_state.players] == ["p1"]
    stored = registry.get(room.id)
    assert stored.player_ids == ["p1"]
    assert stored.game_state == game_state


def test_add_player_to_unknown_room(registry: RoomRegistry) -> None:
    with pytest.raises(RoomNotFoundError):
        registry.add_player("NOPE", "p1", "Alice")


def test_add_player_twice(registry: RoomRegistry) -> None:
    room = registry.create(BOARD)
    registry.add_player(room.id, "p1", "Alice")
    game_state = registry.add_player(room.id, "p1", "Alice again")

    assert len(game_state.players) == 1
    assert registry.get(room.id).player_ids == ["p1"]


def test_room_is_full(registry: RoomRegistry) -> None:
    room = registry.create(BOARD)
    for index in range(MAX_PLAYERS):
        registry.add_player(room.id, f"p{index}", f"player {index}")

    with pytest.raises(RoomFullError):
        registry.add_player(room.id, "late", "late")
    assert len(registry.get(room.id).player_ids) == MAX_PLAYERS


def test_remove_player(registry: RoomRegistry) -> None:
    room = registry.create(BOARD)
    registry.add_player(room.id, "p1", "Alice")
    registry.add_player(room.id, "p2", "Bob")
    registry.remove_player(room.id, "p1")

    stored = registry.get(room.id)
    assert stored is not None
    assert stored.player_ids == ["p2"]
    # the engine keeps the slot, marked inactive
    assert [player.is_active for player in stored.game_state.players] == [False, True]


def test_last_player_leaving_deletes_the_room(registry: RoomRegistry) -> None:
    room = registry.create(BOARD)
    registry.add_player(room.id, "p1", "Alice")
    registry.remove_player(room.id, "p1")
    assert registry.get(room.id) is None


def test_remove_player_from_unknown_room(registry: RoomRegistry) -> None:
    registry.remove_player("NOPE", "p1")


# --- GAME FLOW ----
def test_start_and_move_are_persisted(registry: RoomRegistry) -> None:
    room = registry.create(BOARD)
    registry.add_player(room.id, "p1", "Alice")
    registry.add_player(room.id, "p2", "Bob")

    started = registry.start_game(room.id)
    assert started.is_started
    assert registry.get(room.id).game_state == started

    target = started.board.locate_player("p1")[0]
    game_state, reactions = registry.make_move(room.id, Move("p1", target))
    assert reactions == []
    assert game_state.board.cell(target).dots == 2
    assert game_state.current_player_index == 1
    assert registry.get(room.id).game_state == game_state


def test_rejected_operations_leave_snapshot_unchanged(registry: RoomRegistry) -> None:
    room = registry.create(BOARD)
    registry.add_player(room.id, "p1", "Alice")
    with pytest.raises(InsufficientPlayersError):
        registry.start_game(room.id)

    registry.add_player(room.id, "p2", "Bob")
    started = registry.start_game(room.id)
    with pytest.raises(TurnOrderError):
        registry.make_move(room.id, Move("p2", Position(0, 0)))
    assert registry.get(room.id).game_state == started


def test_game_flow_on_unknown_room(registry: RoomRegistry) -> None:
    with pytest.raises(GameError):
        registry.start_game("NOPE")
    with pytest.raises(GameError):
        registry.make_move("NOPE", Move("p1", Position(0, 0)))


# --- SWEEP ----
def test_sweep_expired_rooms(registry: RoomRegistry, clock: FakeClock) -> None:
    old = registry.create(BOARD)
    clock.advance(timedelta(hours=20))
    recent = registry.create(BOARD)
    clock.advance(timedelta(hours=5))

    swept = registry.sweep_expired()
    assert swept == [old.id]
    assert registry.get(old.id) is None
    assert registry.get(recent.id) is not None


def test_sweep_with_custom_age(registry: RoomRegistry, clock: FakeClock) -> None:
    room = registry.create(BOARD)
    clock.advance(timedelta(minutes=10))
    assert registry.sweep_expired(timedelta(hours=1)) == []
    assert registry.sweep_expired(timedelta(minutes=5)) == [room.id]


# --- WITH SQL REPOSITORY ----
def test_registry_on_sql_repository(db_session_repo: Session, clock: FakeClock) -> None:
    """Snapshots go through JSON and back: the game must continue exactly where it was."""
    registry = RoomRegistry(repository=SQLRoomRepository(db_session_repo), now=clock)
    room = registry.create(BOARD)
    registry.add_player(room.id, "p1", "Alice")
    registry.add_player(room.id, "p2", "Bob")
    started = registry.start_game(room.id)

    stored = registry.get(room.id)
    assert stored.game_state == started
    assert stored.created_at == clock.current

    clock.advance(timedelta(days=2))
    assert registry.sweep_expired() == [room.id]
    assert registry.get(room.id) is None
