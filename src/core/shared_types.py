"""
Type definitions used across layers
"""

from enum import StrEnum


class Phase(StrEnum):
    FORMING = "forming"
    ACTIVE = "active"
    OVER = "over"
