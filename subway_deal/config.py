"""
Game configuration settings and fixed rule tables.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class Color(str, Enum):
    """Property colors, in canonical order."""

    BROWN = "brown"
    BLUE = "blue"
    PINK = "pink"
    ORANGE = "orange"
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    DARKBLUE = "darkblue"
    RAILROAD = "railroad"
    UTILITY = "utility"


# Serialized listings are always ordered by this list.
COLOR_ORDER: List[Color] = list(Color)

SET_SIZES: Dict[Color, int] = {
    Color.BROWN: 2,
    Color.BLUE: 3,
    Color.PINK: 3,
    Color.ORANGE: 3,
    Color.RED: 3,
    Color.YELLOW: 3,
    Color.GREEN: 3,
    Color.DARKBLUE: 2,
    Color.RAILROAD: 4,
    Color.UTILITY: 2,
}

# count of cards owned -> rent
RENT_TABLES: Dict[Color, Dict[int, int]] = {
    Color.BROWN: {1: 1, 2: 2},
    Color.BLUE: {1: 1, 2: 2, 3: 3},
    Color.PINK: {1: 1, 2: 2, 3: 4},
    Color.ORANGE: {1: 1, 2: 3, 3: 5},
    Color.RED: {1: 2, 2: 3, 3: 6},
    Color.YELLOW: {1: 2, 2: 4, 3: 6},
    Color.GREEN: {1: 2, 2: 4, 3: 7},
    Color.DARKBLUE: {1: 3, 2: 8},
    Color.RAILROAD: {1: 1, 2: 2, 3: 3, 4: 4},
    Color.UTILITY: {1: 1, 2: 2},
}

UNIMPROVABLE_COLORS = frozenset({Color.RAILROAD, Color.UTILITY})

EXPRESS_BONUS = 3
STATION_BONUS = 4


def parse_color(value: Optional[str]) -> Optional[Color]:
    """Return the Color for a wire value, or None if it is not a known color."""
    if value is None:
        return None
    try:
        return Color(value)
    except ValueError:
        return None


def required_set_size(color: Color) -> int:
    """Number of cards that completes a set of this color."""
    return SET_SIZES.get(color, 3)


@dataclass
class GameConfig:
    """Configuration for a Subway Deal game."""

    max_actions_per_turn: int = 3
    hand_limit: int = 7
    initial_hand_size: int = 5

    draw_count: int = 2
    empty_hand_draw_count: int = 5
    swipe_in_draw_count: int = 2

    win_set_count: int = 3

    debt_amount: int = 5
    birthday_amount: int = 2

    min_players: int = 2
    max_players: int = 5

    seed: Optional[int] = None
