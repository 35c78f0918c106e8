"""
Player state and management.
"""

from typing import Dict, List, Optional, Tuple

from subway_deal.cards import Card
from subway_deal.config import COLOR_ORDER, Color
from subway_deal.exceptions import NotFoundError
from subway_deal.property_set import PropertySet


class PlayerState:
    """Represents the complete state of a player in the game."""

    def __init__(self, player_id: str, name: str):
        self.player_id = player_id
        self.name = name
        self.hand: List[Card] = []
        self.bank: List[Card] = []
        self.property_sets: Dict[Color, PropertySet] = {}

    def __repr__(self) -> str:
        return (
            f"PlayerState(id={self.player_id}, name='{self.name}', "
            f"hand={len(self.hand)}, bank=${self.bank_total()}, sets={self.complete_set_count()})"
        )

    # === HAND ===

    def add_to_hand(self, card: Card) -> None:
        self.hand.append(card)

    def remove_from_hand(self, card_id: str) -> Card:
        """Remove and return a card from the hand."""
        return self.take_from_hand(card_id)[1]

    def take_from_hand(self, card_id: Optional[str]) -> Tuple[int, Card]:
        """Remove a card from the hand and return it with its former position."""
        for i, card in enumerate(self.hand):
            if card.id == card_id:
                return i, self.hand.pop(i)
        raise NotFoundError(f"card {card_id} not in hand")

    def return_to_hand(self, card: Card, index: int) -> None:
        """Put a card back at the position it was taken from."""
        self.hand.insert(index, card)

    def get_card_from_hand(self, card_id: Optional[str]) -> Optional[Card]:
        """Look up a hand card without removing it."""
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    # === BANK ===

    def add_to_bank(self, card: Card) -> None:
        self.bank.append(card)

    def bank_total(self) -> int:
        return sum(card.value for card in self.bank)

    def pay(self, amount: int) -> Tuple[List[Card], int]:
        """
        Remove bank cards to cover an amount.

        Cards are taken in ascending order of value until the running total
        reaches the amount or the bank runs out. No change is given, so the
        total may exceed the amount; it may also fall short.

        Returns:
            The cards removed and their total value
        """
        if amount <= 0:
            return [], 0

        ordered = sorted(self.bank, key=lambda card: card.value)
        payment: List[Card] = []
        total = 0

        for card in ordered:
            if total >= amount:
                break
            payment.append(card)
            total += card.value
            self.bank.remove(card)

        return payment, total

    # === PROPERTIES ===

    def property_set(self, color: Color) -> PropertySet:
        """Get the set for a color, creating it on first use."""
        if color not in self.property_sets:
            self.property_sets[color] = PropertySet(color)
        return self.property_sets[color]

    def get_property_set(self, color: Optional[Color]) -> Optional[PropertySet]:
        """Get the set for a color without creating it."""
        if color is None:
            return None
        return self.property_sets.get(color)

    def sorted_property_sets(self) -> List[PropertySet]:
        """Non-empty sets in canonical color order."""
        return [
            self.property_sets[color]
            for color in COLOR_ORDER
            if color in self.property_sets and self.property_sets[color].cards
        ]

    def find_property(self, card_id: Optional[str]) -> Optional[Tuple[PropertySet, Card]]:
        """Locate a card among the player's property sets."""
        for prop_set in self.property_sets.values():
            card = prop_set.get_card(card_id)
            if card is not None:
                return prop_set, card
        return None

    def owned_count(self, color: Color) -> int:
        prop_set = self.property_sets.get(color)
        return len(prop_set.cards) if prop_set else 0

    def complete_set_count(self) -> int:
        return sum(1 for prop_set in self.property_sets.values() if prop_set.is_complete())

    def has_won(self, win_set_count: int = 3) -> bool:
        return self.complete_set_count() >= win_set_count

    def all_cards(self) -> List[Card]:
        """Every card this player holds, in hand, bank or sets."""
        cards = list(self.hand) + list(self.bank)
        for prop_set in self.property_sets.values():
            cards.extend(prop_set.cards)
        return cards
