"""
Subway Deal Rules Engine

A deterministic implementation of the Subway Deal card game rules.
"""

from .actions import Action, ActionResult, ActionType
from .config import Color, GameConfig
from .engine import Engine, create_game
from .state import GamePhase, GameState, TurnPhase

__all__ = [
    "Action",
    "ActionResult",
    "ActionType",
    "Color",
    "Engine",
    "GameConfig",
    "GamePhase",
    "GameState",
    "TurnPhase",
    "create_game",
]
