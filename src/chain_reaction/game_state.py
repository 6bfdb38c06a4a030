"""
Contract between the engine and everything above it.

GameState is the only unit that gets persisted and exchanged with callers. It converts to/from a plain,
JSON compatible dict (camelCase keys, as the frontend expects them) so snapshots can be stored anywhere.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Self

from src.chain_reaction.board import Board
from src.chain_reaction.position import BoardSize, Position
from src.core.config import INITIAL_DOTS_PER_PLAYER, MAX_DOTS_PER_CELL
from src.core.shared_types import Phase


@dataclass
class Player:
    id: str
    name: str
    color: str
    is_active: bool = True
    dot_count: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=data["id"],
            name=data["name"],
            color=data["color"],
            is_active=bool(data["isActive"]),
            dot_count=int(data["dotCount"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "isActive": self.is_active,
            "dotCount": self.dot_count,
        }


@dataclass(frozen=True)
class Move:
    """An intent to place a dot. Not validated yet."""

    player_id: str
    position: Position


@dataclass(frozen=True)
class ChainReaction:
    """A single explosion. Timestamp in epoch milliseconds."""

    position: Position
    player_id: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position.to_dict(),
            "playerId": self.player_id,
            "timestamp": self.timestamp,
        }


@dataclass
class GameState:
    id: str
    board: Board
    board_size: BoardSize
    players: list[Player] = field(default_factory=list)
    current_player_index: int = 0
    is_game_over: bool = False
    winner: Optional[Player] = None
    max_dots_per_cell: int = MAX_DOTS_PER_CELL
    initial_dots_per_player: int = INITIAL_DOTS_PER_PLAYER
    is_started: bool = False

    @classmethod
    def initial(cls, game_id: str, board_size: BoardSize) -> Self:
        """Empty board, no players yet."""
        return cls(id=game_id, board=Board.empty(board_size), board_size=board_size)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        winner = data.get("winner")
        return cls(
            id=data["id"],
            board=Board.from_list(data["board"]),
            board_size=BoardSize.from_dict(data["boardSize"]),
            players=[Player.from_dict(player) for player in data["players"]],
            current_player_index=int(data["currentPlayerIndex"]),
            is_game_over=bool(data["isGameOver"]),
            winner=Player.from_dict(winner) if winner else None,
            max_dots_per_cell=int(data["maxDotsPerCell"]),
            initial_dots_per_player=int(data["initialDotsPerPlayer"]),
            is_started=bool(data.get("isStarted", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "board": self.board.to_list(),
            "players": [player.to_dict() for player in self.players],
            "currentPlayerIndex": self.current_player_index,
            "isGameOver": self.is_game_over,
            "winner": self.winner.to_dict() if self.winner else None,
            "boardSize": self.board_size.to_dict(),
            "maxDotsPerCell": self.max_dots_per_cell,
            "initialDotsPerPlayer": self.initial_dots_per_player,
            "isStarted": self.is_started,
        }

    @property
    def phase(self) -> Phase:
        if self.is_game_over:
            return Phase.OVER
        if self.is_started:
            return Phase.ACTIVE
        return Phase.FORMING

    @property
    def active_players(self) -> list[Player]:
        return [player for player in self.players if player.is_active]

    @property
    def current_player(self) -> Optional[Player]:
        if not 0 <= self.current_player_index < len(self.players):
            return None
        return self.players[self.current_player_index]

    def find_player(self, player_id: str) -> Optional[Player]:
        return next((player for player in self.players if player.id == player_id), None)
