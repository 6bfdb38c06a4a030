"""
A position on the board and the size of the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class BoardSize:
    rows: int
    cols: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BoardSize:
        return cls(rows=int(data["rows"]), cols=int(data["cols"]))

    def to_dict(self) -> dict[str, int]:
        return {"rows": self.rows, "cols": self.cols}

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Position:
        return cls(row=int(data["row"]), col=int(data["col"]))

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col}

    def is_within_bounds(self, size: BoardSize) -> bool:
        return (0 <= self.row < size.rows) and (0 <= self.col < size.cols)

    def neighbors(self, size: BoardSize) -> list[Position]:
        """
        Orthogonal neighbors in the fixed order: up, down, left, right.
        Neighbors that would fall off the board are skipped (no wrap around).
        """
        candidates = [
            Position(self.row - 1, self.col),
            Position(self.row + 1, self.col),
            Position(self.row, self.col - 1),
            Position(self.row, self.col + 1),
        ]
        return [position for position in candidates if position.is_within_bounds(size)]
