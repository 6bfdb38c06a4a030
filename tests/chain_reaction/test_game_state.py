"""Unit tests for /src/chain_reaction/game_state.py"""

import json

from src.chain_reaction.game_state import ChainReaction, GameState, Player
from src.chain_reaction.position import BoardSize, Position
from src.core.shared_types import Phase


def sample_state() -> GameState:
    state = GameState.initial("ABC123", BoardSize(2, 3))
    state.players = [
        Player("p1", "Alice", "#FF6B6B", True, 2),
        Player("p2", "Bob", "#4ECDC4", False, 0),
    ]
    state.board.cell(Position(1, 2)).dots = 2
    state.board.cell(Position(1, 2)).owner_id = "p1"
    state.current_player_index = 0
    state.is_started = True
    state.is_game_over = True
    state.winner = Player("p1", "Alice", "#FF6B6B", True, 2)
    return state


def test_dict_uses_wire_keys() -> None:
    data = sample_state().to_dict()
    assert set(data) == {
        "id",
        "board",
        "players",
        "currentPlayerIndex",
        "isGameOver",
        "winner",
        "boardSize",
        "maxDotsPerCell",
        "initialDotsPerPlayer",
        "isStarted",
    }
    assert data["boardSize"] == {"rows": 2, "cols": 3}
    assert data["players"][1] == {
        "id": "p2",
        "name": "Bob",
        "color": "#4ECDC4",
        "isActive": False,
        "dotCount": 0,
    }
    assert data["winner"]["id"] == "p1"
    assert data["board"][1][2] == {
        "dots": 2,
        "playerId": "p1",
        "position": {"row": 1, "col": 2},
    }


def test_snapshot_survives_json() -> None:
    """The snapshot is stored as JSON, so it must come back identical."""
    state = sample_state()
    reloaded = GameState.from_dict(json.loads(json.dumps(state.to_dict())))
    assert reloaded == state


def test_missing_started_flag_defaults_to_forming() -> None:
    data = GameState.initial("ABC123", BoardSize(2, 2)).to_dict()
    del data["isStarted"]
    assert GameState.from_dict(data).phase == Phase.FORMING


def test_phase() -> None:
    state = GameState.initial("ABC123", BoardSize(2, 2))
    assert state.phase == Phase.FORMING
    state.is_started = True
    assert state.phase == Phase.ACTIVE
    state.is_game_over = True
    assert state.phase == Phase.OVER


def test_player_lookups() -> None:
    state = sample_state()
    assert state.find_player("p2") is state.players[1]
    assert state.find_player("unknown") is None
    assert state.active_players == [state.players[0]]
    assert state.current_player is state.players[0]

    state.current_player_index = 5
    assert state.current_player is None


def test_chain_reaction_to_dict() -> None:
    reaction = ChainReaction(Position(3, 4), "p1", 1234)
    assert reaction.to_dict() == {
        "position": {"row": 3, "col": 4},
        "playerId": "p1",
        "timestamp": 1234,
    }
