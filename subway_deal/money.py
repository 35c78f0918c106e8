"""
Payment records and game event logging.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EventType(Enum):
    """Types of game events."""

    GAME_START = "game_start"
    TURN_START = "turn_start"
    DRAW = "draw"

    PLAY_PROPERTY = "play_property"
    BANK = "bank"
    WILDCARD_FLIP = "wildcard_flip"
    IMPROVEMENT = "improvement"

    RENT_DEMAND = "rent_demand"
    DEBT_DEMAND = "debt_demand"
    STEAL_ATTEMPT = "steal_attempt"
    SWAP_ATTEMPT = "swap_attempt"
    SET_STEAL_ATTEMPT = "set_steal_attempt"

    PAYMENT = "payment"
    STEAL = "steal"
    SWAP = "swap"
    SET_STEAL = "set_steal"
    CANCELLED = "cancelled"
    FIZZLED = "fizzled"

    DISCARD = "discard"
    TURN_END = "turn_end"
    GAME_END = "game_end"


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    player_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        player_str = self.player_id if self.player_id is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.details}"


class EventLog:
    """Manages the game event log."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def log(self, event_type: EventType, player_id: Optional[str] = None, **details: Any) -> None:
        """Log a game event."""
        event = GameEvent(event_type, player_id, details)
        self.events.append(event)

    def get_events(self) -> List[GameEvent]:
        """Get all logged events."""
        return self.events.copy()

    def get_recent_events(self, count: int = 10) -> List[GameEvent]:
        """Get the most recent N events."""
        return self.events[-count:]

    def clear(self) -> None:
        """Clear the event log."""
        self.events.clear()


@dataclass
class PaymentResult:
    """One responder's payment toward a monetary demand."""

    from_player: str
    amount: int
    shortfall: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"fromPlayer": self.from_player, "amount": self.amount, "shortfall": self.shortfall}
