"""
Inbound actions and outbound results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from subway_deal.cards import ActionEffect
from subway_deal.money import PaymentResult


class ActionType(Enum):
    """Types of actions a player can take."""

    # Turn structure
    DRAW_CARDS = "DRAW_CARDS"
    END_TURN = "END_TURN"

    # Playing cards
    PLAY_PROPERTY = "PLAY_PROPERTY"
    PLAY_MONEY = "PLAY_MONEY"
    PLAY_RENT = "PLAY_RENT"
    PLAY_ACTION = "PLAY_ACTION"
    FLIP_WILDCARD = "FLIP_WILDCARD"

    # Specific action card effects
    SWIPE_IN = "SWIPE_IN"
    POWER_BROKER = "POWER_BROKER"
    SERVICE_CHANGE = "SERVICE_CHANGE"
    LINE_CLOSURE = "LINE_CLOSURE"
    MISSED_YOUR_TRAIN = "MISSED_YOUR_TRAIN"
    ITS_MY_STOP = "ITS_MY_STOP"
    RUSH_HOUR = "RUSH_HOUR"
    EXPRESS_SERVICE = "EXPRESS_SERVICE"
    NEW_STATION = "NEW_STATION"

    # Responses to pending actions
    ACCEPT = "ACCEPT"
    PLAY_FARE_EVASION = "PLAY_FARE_EVASION"


RESPONSE_TYPES = frozenset({ActionType.ACCEPT, ActionType.PLAY_FARE_EVASION})

# Action types that need a specific action card in hand
EFFECT_FOR_TYPE: Dict[ActionType, ActionEffect] = {
    ActionType.SWIPE_IN: ActionEffect.SWIPE_IN,
    ActionType.POWER_BROKER: ActionEffect.POWER_BROKER,
    ActionType.SERVICE_CHANGE: ActionEffect.SERVICE_CHANGE,
    ActionType.LINE_CLOSURE: ActionEffect.LINE_CLOSURE,
    ActionType.MISSED_YOUR_TRAIN: ActionEffect.MISSED_YOUR_TRAIN,
    ActionType.ITS_MY_STOP: ActionEffect.ITS_MY_STOP,
    ActionType.RUSH_HOUR: ActionEffect.RUSH_HOUR,
    ActionType.EXPRESS_SERVICE: ActionEffect.EXPRESS_SERVICE,
    ActionType.NEW_STATION: ActionEffect.NEW_STATION,
}

TYPE_FOR_EFFECT: Dict[ActionEffect, ActionType] = {
    effect: action_type for action_type, effect in EFFECT_FOR_TYPE.items()
}


class Action:
    """A player action with flexible string data."""

    def __init__(
        self,
        action_type: ActionType,
        player_id: str,
        data: Optional[Dict[str, str]] = None,
    ):
        self.action_type = action_type
        self.player_id = player_id
        self.data: Dict[str, str] = dict(data or {})

    def __repr__(self) -> str:
        return f"Action({self.action_type.value}, {self.player_id}, {self.data})"

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Action":
        """
        Build an action from its wire shape `{type, playerId, data}`.

        Raises ValueError for an unknown action type.
        """
        action_type = ActionType(payload["type"])
        data = {str(k): str(v) for k, v in (payload.get("data") or {}).items()}
        return cls(action_type, str(payload["playerId"]), data)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.action_type.value, "playerId": self.player_id, "data": dict(self.data)}

    @property
    def card_id(self) -> Optional[str]:
        return self.data.get("cardId")

    @property
    def target_player_id(self) -> Optional[str]:
        return self.data.get("targetPlayerId")

    @property
    def color(self) -> Optional[str]:
        return self.data.get("color")

    @property
    def target_card_id(self) -> Optional[str]:
        return self.data.get("targetCardId")


@dataclass
class ActionResult:
    """Result of executing (or rejecting) an action."""

    success: bool
    message: str = ""
    error: Optional[str] = None
    payments: List[PaymentResult] = field(default_factory=list)
    pending_action: bool = False

    @classmethod
    def ok(cls, message: str, **kwargs: Any) -> "ActionResult":
        return cls(success=True, message=message, **kwargs)

    @classmethod
    def fail(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.error:
            result["error"] = self.error
        if self.payments:
            result["payments"] = [payment.to_dict() for payment in self.payments]
        if self.pending_action:
            result["pendingAction"] = True
        return result
