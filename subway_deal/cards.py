"""
Card variants, the fixed 106-card catalog, and the draw deck.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from subway_deal.config import COLOR_ORDER, RENT_TABLES, SET_SIZES, Color


class CardType(str, Enum):
    """Card variant tags."""

    PROPERTY = "property"
    WILDCARD = "wildcard"
    ACTION = "action"
    RENT = "rent"
    MONEY = "money"


class ActionEffect(str, Enum):
    """Special behaviors of action cards."""

    SWIPE_IN = "swipe_in"
    FARE_EVASION = "fare_evasion"
    POWER_BROKER = "power_broker"
    SERVICE_CHANGE = "service_change"
    LINE_CLOSURE = "line_closure"
    MISSED_YOUR_TRAIN = "missed_your_train"
    ITS_MY_STOP = "its_my_stop"
    RUSH_HOUR = "rush_hour"
    EXPRESS_SERVICE = "express_service"
    NEW_STATION = "new_station"


class RentTarget(str, Enum):
    """Who a rent card charges."""

    ALL = "all"
    ONE = "one"


@dataclass
class PropertyCard:
    """A subway line property of a fixed color."""

    id: str
    name: str
    value: int
    color: Color
    set_size: int = 3
    rent: Dict[int, int] = field(default_factory=dict)
    card_type: CardType = field(default=CardType.PROPERTY, init=False)

    def rent_for(self, count: int) -> int:
        """
        Rent for owning `count` cards of this color.

        Counts past the top of the ladder charge the top rent.
        """
        if count <= 0 or not self.rent:
            return 0
        return self.rent.get(min(count, max(self.rent)), 0)


@dataclass
class WildcardCard:
    """A property that can stand in for any of several colors."""

    id: str
    name: str
    value: int
    colors: Tuple[Color, ...]
    current_color: Color
    description: str = ""
    card_type: CardType = field(default=CardType.WILDCARD, init=False)

    def flip_color(self) -> Color:
        """Switch to the next color in the card's list and return it."""
        if self.current_color in self.colors:
            index = self.colors.index(self.current_color)
            self.current_color = self.colors[(index + 1) % len(self.colors)]
        return self.current_color

    def can_be_color(self, color: Color) -> bool:
        return color in self.colors


@dataclass
class ActionCard:
    """A card with a special effect resolved by the executor."""

    id: str
    name: str
    value: int
    effect: ActionEffect
    description: str = ""
    theme: str = ""
    card_type: CardType = field(default=CardType.ACTION, init=False)


@dataclass
class RentCard:
    """Charges rent on one of its colors; no colors means wild."""

    id: str
    name: str
    value: int
    colors: Tuple[Color, ...] = ()
    target: RentTarget = RentTarget.ALL
    card_type: CardType = field(default=CardType.RENT, init=False)

    @property
    def is_wild(self) -> bool:
        return len(self.colors) == 0

    def covers(self, color: Color) -> bool:
        """Check if this card can charge rent on the given color."""
        return self.is_wild or color in self.colors


@dataclass
class MoneyCard:
    """Pure currency."""

    id: str
    name: str
    value: int
    theme: str = ""
    card_type: CardType = field(default=CardType.MONEY, init=False)

    @property
    def denomination(self) -> int:
        return self.value


Card = Union[PropertyCard, WildcardCard, ActionCard, RentCard, MoneyCard]


def card_color(card: Card) -> Optional[Color]:
    """The color a card is played as: intrinsic for properties, current for wildcards."""
    if isinstance(card, PropertyCard):
        return card.color
    if isinstance(card, WildcardCard):
        return card.current_color
    return None


def is_action(card: Optional[Card], effect: ActionEffect) -> bool:
    """Check if a card is an action card with the given effect."""
    return isinstance(card, ActionCard) and card.effect == effect


# (id suffix, name, value) per color, in catalog order
_PROPERTIES: Dict[Color, List[Tuple[str, str, int]]] = {
    Color.BROWN: [("j", "J", 1), ("z", "Z", 1)],
    Color.BLUE: [("a", "A", 1), ("c", "C", 1), ("e", "E", 1)],
    Color.PINK: [
        ("42nd_shuttle", "42nd St Shuttle", 2),
        ("franklin_shuttle", "Franklin Ave Shuttle", 2),
        ("rockaway_shuttle", "Rockaway Park Shuttle", 2),
    ],
    Color.ORANGE: [("b", "B", 2), ("d", "D", 2), ("f", "F", 2)],
    Color.RED: [("1", "1", 3), ("2", "2", 3), ("3", "3", 3)],
    Color.YELLOW: [("n", "N", 3), ("q", "Q", 3), ("r", "R", 3)],
    Color.GREEN: [
        ("penn", "Penn Station", 4),
        ("grand_central", "Grand Central", 4),
        ("atlantic", "Atlantic Terminal", 4),
    ],
    Color.DARKBLUE: [("citi_field", "Citi Field", 4), ("yankee_stadium", "Yankee Stadium", 4)],
    Color.RAILROAD: [
        ("lirr", "LIRR", 2),
        ("metro_north", "Metro-North", 2),
        ("nj_transit", "NJ Transit", 2),
        ("path", "PATH", 2),
    ],
    Color.UTILITY: [("g", "G", 2), ("l", "L", 2)],
}

# (id stem, name, value, colors, copies)
_WILDCARDS: List[Tuple[str, str, int, Tuple[Color, ...], int]] = [
    ("broadway", "Broadway Junction", 1, (Color.BLUE, Color.BROWN), 1),
    ("jamaica", "Jamaica Station", 4, (Color.BLUE, Color.RAILROAD), 1),
    ("service_advisory", "Service Advisory", 2, (Color.PINK, Color.ORANGE), 2),
    ("times_square", "Times Square", 3, (Color.RED, Color.YELLOW), 2),
    ("big_game", "Big Game", 4, (Color.DARKBLUE, Color.GREEN), 1),
    ("grand_central", "Grand Central", 4, (Color.GREEN, Color.RAILROAD), 1),
    ("weekend_service", "Weekend Service", 2, (Color.UTILITY, Color.RAILROAD), 1),
    ("fulton", "Fulton Center", 0, tuple(COLOR_ORDER), 2),
]

# (id stem, name, value, effect, copies, description, theme)
_ACTIONS: List[Tuple[str, str, int, ActionEffect, int, str, str]] = [
    ("swipe_in", "Swipe In", 1, ActionEffect.SWIPE_IN, 10,
     "Draw 2 extra cards", "Pass Go"),
    ("fare_evasion", "Fare Evasion", 4, ActionEffect.FARE_EVASION, 3,
     "Cancel any action card played against you", "Just Say No"),
    ("power_broker", "Power Broker", 3, ActionEffect.POWER_BROKER, 3,
     "Steal a property from any player (not from a complete set)", "Sly Deal"),
    ("service_change", "Service Change", 3, ActionEffect.SERVICE_CHANGE, 3,
     "Swap one of your properties with another player's (not from complete sets)", "Forced Deal"),
    ("line_closure", "Line Closure", 5, ActionEffect.LINE_CLOSURE, 2,
     "Steal a complete property set from any player (includes improvements)", "Deal Breaker"),
    ("missed_train", "Missed Your Train", 3, ActionEffect.MISSED_YOUR_TRAIN, 3,
     "Force any player to pay you $5", "Debt Collector"),
    ("its_my_stop", "It's My Stop!", 2, ActionEffect.ITS_MY_STOP, 3,
     "All players pay you $2", "It's My Birthday"),
    ("rush_hour", "Rush Hour", 1, ActionEffect.RUSH_HOUR, 2,
     "Play with a rent card to double the rent amount", "Double the Rent"),
    ("express_service", "Express Service", 3, ActionEffect.EXPRESS_SERVICE, 3,
     "Add to a complete set to add $3 to rent (not on Railroads/Utilities)", "House"),
    ("new_station", "New Station", 4, ActionEffect.NEW_STATION, 2,
     "Add to a complete set with Express Service to add $4 to rent", "Hotel"),
]

_RENT_PAIRS: List[Tuple[Color, Color]] = [
    (Color.BLUE, Color.BROWN),
    (Color.PINK, Color.ORANGE),
    (Color.RED, Color.YELLOW),
    (Color.DARKBLUE, Color.GREEN),
    (Color.RAILROAD, Color.UTILITY),
]

# denomination -> copies
_MONEY: Dict[int, int] = {1: 6, 2: 5, 3: 3, 4: 3, 5: 2, 10: 1}

_MONEY_THEMES: Dict[int, str] = {1: "Base Fare", 10: "Unlimited MetroCard"}


def create_property_cards() -> List[Card]:
    """Create the 28 property cards."""
    cards: List[Card] = []
    for color, entries in _PROPERTIES.items():
        for suffix, name, value in entries:
            cards.append(
                PropertyCard(
                    id=f"prop_{suffix}",
                    name=name,
                    value=value,
                    color=color,
                    set_size=SET_SIZES[color],
                    rent=dict(RENT_TABLES[color]),
                )
            )
    return cards


def create_wildcard_cards() -> List[Card]:
    """Create the 11 property wildcards."""
    cards: List[Card] = []
    for stem, name, value, colors, copies in _WILDCARDS:
        for i in range(1, copies + 1):
            card_id = f"wild_{stem}_{i}" if copies > 1 else f"wild_{stem}"
            if len(colors) > 2:
                description = "Can be used as any color (no cash value)"
            else:
                description = f"Can be used as {colors[0].value} or {colors[1].value}"
            cards.append(
                WildcardCard(
                    id=card_id,
                    name=name,
                    value=value,
                    colors=colors,
                    current_color=Color.BLUE if len(colors) > 2 else colors[0],
                    description=description,
                )
            )
    return cards


def create_action_cards() -> List[Card]:
    """Create the 34 action cards."""
    cards: List[Card] = []
    for stem, name, value, effect, copies, description, theme in _ACTIONS:
        for i in range(1, copies + 1):
            cards.append(
                ActionCard(
                    id=f"action_{stem}_{i}",
                    name=name,
                    value=value,
                    effect=effect,
                    description=description,
                    theme=theme,
                )
            )
    return cards


def create_rent_cards() -> List[Card]:
    """Create the 13 rent cards: two per color pair plus three wild."""
    cards: List[Card] = []
    for first, second in _RENT_PAIRS:
        for i in range(1, 3):
            cards.append(
                RentCard(
                    id=f"rent_{first.value}_{second.value}_{i}",
                    name="Rent",
                    value=1,
                    colors=(first, second),
                    target=RentTarget.ALL,
                )
            )
    for i in range(1, 4):
        cards.append(
            RentCard(id=f"rent_wild_{i}", name="Wild Rent", value=3, colors=(), target=RentTarget.ONE)
        )
    return cards


def create_money_cards() -> List[Card]:
    """Create the 20 money cards ($57 in total)."""
    cards: List[Card] = []
    for denomination, copies in _MONEY.items():
        for i in range(1, copies + 1):
            cards.append(
                MoneyCard(
                    id=f"money_{denomination}_{i}",
                    name=f"${denomination}",
                    value=denomination,
                    theme=_MONEY_THEMES.get(denomination, ""),
                )
            )
    return cards


def create_all_cards() -> List[Card]:
    """Return all 106 cards in catalog order. Same ids on every call."""
    return (
        create_property_cards()
        + create_wildcard_cards()
        + create_action_cards()
        + create_rent_cards()
        + create_money_cards()
    )


class Deck:
    """
    The draw pile and discard pile.

    The top of the deck is the end of `cards`. When the draw pile runs out,
    the discard pile is shuffled back in.
    """

    def __init__(self, cards: List[Card], rng: random.Random):
        self.cards: List[Card] = list(cards)
        self.rng = rng
        self.discard_pile: List[Card] = []

    def __len__(self) -> int:
        return len(self.cards)

    def shuffle(self) -> None:
        """Shuffle the draw pile in place using the injected random source."""
        self.rng.shuffle(self.cards)

    def draw(self) -> Optional[Card]:
        """
        Draw the top card.

        If the draw pile is empty, the discard pile becomes the new draw pile
        and is reshuffled. Returns None when both piles are empty.
        """
        if not self.cards and self.discard_pile:
            self.cards = self.discard_pile
            self.discard_pile = []
            self.shuffle()

        if not self.cards:
            return None
        return self.cards.pop()

    def draw_many(self, count: int) -> List[Card]:
        """Draw up to `count` cards; may return fewer."""
        drawn: List[Card] = []
        for _ in range(count):
            card = self.draw()
            if card is None:
                break
            drawn.append(card)
        return drawn

    def discard(self, card: Card) -> None:
        """Put a card on the discard pile."""
        self.discard_pile.append(card)
