"""
Configuration
----

* Rules of the game are fixed constants (every room plays with the same rules).
* Deployment settings can be overridden through environment variables prefixed with CHAIN_REACTION_ (or a .env file).
"""

from dataclasses import dataclass
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# --- GAME RULES ---
MAX_DOTS_PER_CELL = 4
INITIAL_DOTS_PER_PLAYER = 3
MIN_PLAYERS = 2
MAX_PLAYERS = 10

PLAYER_COLORS: tuple[str, ...] = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#96CEB4",
    "#FFEAA7",
    "#DDA0DD",
    "#98D8C8",
    "#F7DC6F",
    "#85C1E2",
    "#F8B739",
)


@dataclass(frozen=True)
class BoardPreset:
    name: str
    rows: int
    cols: int


BOARD_PRESETS: dict[str, BoardPreset] = {
    "small": BoardPreset("Small", 6, 8),
    "medium": BoardPreset("Medium", 8, 10),
    "large": BoardPreset("Large", 10, 12),
}
DEFAULT_BOARD_PRESET = BOARD_PRESETS["medium"]


# --- DEPLOYMENT SETTINGS ---
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CHAIN_REACTION_", env_file=".env")

    # in-memory by default: rooms never outlive the process
    database_url: str = "sqlite:///:memory:"
    room_max_age_hours: float = 24.0
    room_id_length: int = 8


@lru_cache
def get_settings() -> Settings:
    return Settings()
