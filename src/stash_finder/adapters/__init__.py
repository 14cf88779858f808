"""Game command adapters (e.g., minescript integration)."""

from .game_command import EchoGameCommandAdapter, GameCommandAdapter, MinescriptCommand
from .live_minecraft import MinescriptGameCommandAdapter, MinescriptUnavailableError

__all__ = [
    "EchoGameCommandAdapter",
    "GameCommandAdapter",
    "MinescriptCommand",
    "MinescriptGameCommandAdapter",
    "MinescriptUnavailableError",
]
