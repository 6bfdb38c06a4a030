"""The board implements everything that touches the grid of cells: claiming, clearing and counting dots."""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Self

from src.chain_reaction.position import BoardSize, Position


@dataclass
class Cell:
    position: Position
    dots: int = 0
    owner_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            position=Position.from_dict(data["position"]),
            dots=int(data["dots"]),
            owner_id=data.get("playerId"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "dots": self.dots,
            "playerId": self.owner_id,
            "position": self.position.to_dict(),
        }

    def is_empty(self) -> bool:
        return self.dots == 0

    def add_dot(self, player_id: str) -> None:
        """Placing a dot (or receiving one from an explosion) always hands the cell to that player."""
        self.dots += 1
        self.owner_id = player_id

    def clear(self) -> None:
        self.dots = 0
        self.owner_id = None


@dataclass
class Board:
    grid: list[list[Cell]]

    @classmethod
    def empty(cls, size: BoardSize) -> Self:
        return cls(
            [
                [Cell(Position(row, col)) for col in range(size.cols)]
                for row in range(size.rows)
            ]
        )

    @classmethod
    def from_list(cls, rows: list[list[dict[str, Any]]]) -> Self:
        return cls([[Cell.from_dict(cell) for cell in row] for row in rows])

    def to_list(self) -> list[list[dict[str, Any]]]:
        return [[cell.to_dict() for cell in row] for row in self.grid]

    @property
    def size(self) -> BoardSize:
        rows = len(self.grid)
        cols = len(self.grid[0]) if rows else 0
        return BoardSize(rows, cols)

    def cell(self, position: Position) -> Cell:
        return self.grid[position.row][position.col]

    def cells(self) -> Iterator[Cell]:
        for row in self.grid:
            yield from row

    def positions(self) -> list[Position]:
        """All positions, row by row"""
        return [cell.position for cell in self.cells()]

    def locate_player(self, player_id: str) -> list[Position]:
        return [cell.position for cell in self.cells() if cell.owner_id == player_id]

    def clear_player(self, player_id: str) -> None:
        """Territory of a departing player becomes neutral."""
        for cell in self.cells():
            if cell.owner_id == player_id:
                cell.clear()

    def count_dots(self) -> dict[str, int]:
        """Tally the dots per owner"""
        counts: dict[str, int] = {}
        for cell in self.cells():
            if cell.owner_id is not None and cell.dots > 0:
                counts[cell.owner_id] = counts.get(cell.owner_id, 0) + cell.dots
        return counts

    def total_dots(self) -> int:
        return sum(cell.dots for cell in self.cells())
