"""
Boundary layer data model(s).

A Room is what the registry and the repositories exchange:
the room identity, its membership, and the latest snapshot of the game played in it.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.chain_reaction.game_state import GameState

# Type aliases to make Room easier to read
RoomId = str
PlayerId = str


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Room:
    """Registry owned: the engine never sees room membership or creation time."""

    id: RoomId
    game_state: GameState
    player_ids: list[PlayerId] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
