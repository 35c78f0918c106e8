"""
Per-color property holdings of one player.
"""

from enum import Enum
from typing import List, Optional

from subway_deal.cards import Card, PropertyCard
from subway_deal.config import (
    EXPRESS_BONUS,
    RENT_TABLES,
    STATION_BONUS,
    UNIMPROVABLE_COLORS,
    Color,
    required_set_size,
)
from subway_deal.exceptions import InvalidOperationError, NotFoundError


class Improvement(str, Enum):
    """Rent improvements for complete sets."""

    EXPRESS = "express"
    STATION = "station"


class PropertySet:
    """Tracks the cards of one color owned by a player."""

    def __init__(self, color: Color):
        self.color = color
        self.cards: List[Card] = []
        self.improvements: List[Improvement] = []

    def __repr__(self) -> str:
        return (
            f"PropertySet(color={self.color.value}, cards={len(self.cards)}/{self.set_size}, "
            f"improvements={[i.value for i in self.improvements]})"
        )

    def __len__(self) -> int:
        return len(self.cards)

    @property
    def set_size(self) -> int:
        return required_set_size(self.color)

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    def remove_card(self, card_id: str) -> Card:
        """Remove and return the card with the given id."""
        for i, card in enumerate(self.cards):
            if card.id == card_id:
                return self.cards.pop(i)
        raise NotFoundError(f"card {card_id} not found in {self.color.value} set")

    def get_card(self, card_id: str) -> Optional[Card]:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def is_complete(self) -> bool:
        return len(self.cards) >= self.set_size

    def has_improvement(self, improvement: Improvement) -> bool:
        return improvement in self.improvements

    def can_add_improvement(self, improvement: Improvement) -> bool:
        """
        Check if an improvement can be added.

        Requirements:
        - Set is complete
        - Set is not railroad or utility
        - Express: not already applied
        - Station: express applied, station not already applied
        """
        if not self.is_complete():
            return False

        if self.color in UNIMPROVABLE_COLORS:
            return False

        if improvement == Improvement.EXPRESS:
            return not self.has_improvement(Improvement.EXPRESS)
        if improvement == Improvement.STATION:
            return self.has_improvement(Improvement.EXPRESS) and not self.has_improvement(
                Improvement.STATION
            )
        return False

    def add_improvement(self, improvement: Improvement) -> None:
        if not self.can_add_improvement(improvement):
            raise InvalidOperationError(
                f"cannot add {improvement.value} to {self.color.value} set"
            )
        self.improvements.append(improvement)

    def base_rent(self) -> int:
        """Rent at the current card count, before improvements."""
        count = len(self.cards)
        if count == 0:
            return 0

        for card in self.cards:
            if isinstance(card, PropertyCard):
                return card.rent_for(count)

        # Only wildcards: use the color's standard ladder
        table = RENT_TABLES.get(self.color, {})
        if not table:
            return 0
        return table.get(min(count, max(table)), 0)

    def get_rent(self) -> int:
        """Total rent: base rent plus improvement bonuses."""
        if not self.cards:
            return 0

        bonus = 0
        if self.has_improvement(Improvement.EXPRESS):
            bonus += EXPRESS_BONUS
        if self.has_improvement(Improvement.STATION):
            bonus += STATION_BONUS

        return self.base_rent() + bonus
