"""
Legality checks for player actions.

The validator only reads the game state. Every rejection carries a
human-readable reason.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from subway_deal.actions import (
    EFFECT_FOR_TYPE,
    RESPONSE_TYPES,
    TYPE_FOR_EFFECT,
    Action,
    ActionType,
)
from subway_deal.cards import (
    ActionCard,
    ActionEffect,
    PropertyCard,
    RentCard,
    RentTarget,
    WildcardCard,
    is_action,
)
from subway_deal.config import parse_color
from subway_deal.player import PlayerState
from subway_deal.state import GamePhase, GameState, TurnPhase


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating an action."""

    valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def invalid(cls, reason: str) -> "ValidationResult":
        return cls(False, reason)


def resolve_action_type(action: Action, player: Optional[PlayerState]) -> Optional[ActionType]:
    """
    The action type that will actually be applied.

    PLAY_ACTION takes its meaning from the effect of the named card. Returns
    None when PLAY_ACTION names no usable action card.
    """
    if action.action_type != ActionType.PLAY_ACTION:
        return action.action_type
    if player is None:
        return None
    card = player.get_card_from_hand(action.card_id)
    if not isinstance(card, ActionCard):
        return None
    return TYPE_FOR_EFFECT.get(card.effect)


class Validator:
    """Validates game actions against the current state."""

    def __init__(self, state: GameState):
        self.state = state
        self._handlers: Dict[ActionType, Callable[[Action, PlayerState], ValidationResult]] = {
            ActionType.DRAW_CARDS: self._validate_draw_cards,
            ActionType.END_TURN: self._validate_end_turn,
            ActionType.PLAY_PROPERTY: self._validate_play_property,
            ActionType.PLAY_MONEY: self._validate_play_money,
            ActionType.PLAY_RENT: self._validate_play_rent,
            ActionType.FLIP_WILDCARD: self._validate_flip_wildcard,
            ActionType.SWIPE_IN: self._validate_swipe_in,
            ActionType.POWER_BROKER: self._validate_power_broker,
            ActionType.SERVICE_CHANGE: self._validate_service_change,
            ActionType.LINE_CLOSURE: self._validate_line_closure,
            ActionType.MISSED_YOUR_TRAIN: self._validate_missed_train,
            ActionType.ITS_MY_STOP: self._validate_its_my_stop,
            ActionType.RUSH_HOUR: self._validate_rush_hour,
            ActionType.EXPRESS_SERVICE: self._validate_improvement,
            ActionType.NEW_STATION: self._validate_improvement,
        }

    def validate(self, action: Action) -> ValidationResult:
        """Check if an action is legal right now."""
        if self.state.phase == GamePhase.FINISHED:
            return ValidationResult.invalid("game is over")
        if self.state.phase != GamePhase.PLAYING:
            return ValidationResult.invalid("game has not started")

        player = self.state.get_player(action.player_id)
        if player is None:
            return ValidationResult.invalid(f"unknown player: {action.player_id}")

        # Responses come from targets, not the current player
        if action.action_type in RESPONSE_TYPES:
            return self._validate_response(action, player)

        if self.state.turn_phase == TurnPhase.RESPONSE:
            return ValidationResult.invalid("waiting for response to pending action")

        if action.action_type == ActionType.PLAY_ACTION:
            rejection = self._check_play(player) or self._check_play_action(action, player)
            if rejection is not None:
                return rejection

        action_type = resolve_action_type(action, player)
        handler = self._handlers.get(action_type)
        if handler is None:
            return ValidationResult.invalid(f"unknown action type: {action.action_type.value}")
        return handler(action, player)

    # === GATES ===

    def _is_current(self, player: PlayerState) -> bool:
        return self.state.get_current_player().player_id == player.player_id

    def _check_play(self, player: PlayerState) -> Optional[ValidationResult]:
        """Turn ownership, action phase and the per-turn cap."""
        if not self._is_current(player):
            return ValidationResult.invalid("not your turn")
        if self.state.turn_phase != TurnPhase.ACTIONS:
            return ValidationResult.invalid("can only play cards during action phase")
        if self.state.actions_played >= self.state.max_actions_per_turn:
            return ValidationResult.invalid("maximum actions per turn exceeded")
        return None

    def _check_target(self, action: Action, player: PlayerState) -> Optional[ValidationResult]:
        target_id = action.target_player_id
        if not target_id:
            return ValidationResult.invalid("target player required")
        if target_id == player.player_id:
            return ValidationResult.invalid("cannot target yourself")
        if self.state.get_player(target_id) is None:
            return ValidationResult.invalid(f"unknown target player: {target_id}")
        return None

    def _check_action_card(
        self, action: Action, player: PlayerState, effect: ActionEffect
    ) -> Optional[ValidationResult]:
        rejection = self._check_play(player)
        if rejection is not None:
            return rejection
        card = player.get_card_from_hand(action.card_id)
        if card is None:
            return ValidationResult.invalid("card not in hand")
        if not is_action(card, effect):
            return ValidationResult.invalid(f"card is not a {effect.value.replace('_', ' ')} card")
        return None

    def _check_play_action(self, action: Action, player: PlayerState) -> Optional[ValidationResult]:
        card = player.get_card_from_hand(action.card_id)
        if card is None:
            return ValidationResult.invalid("card not in hand")
        if not isinstance(card, ActionCard):
            return ValidationResult.invalid("not an action card")
        if card.effect == ActionEffect.FARE_EVASION:
            return ValidationResult.invalid(
                "Fare Evasion can only be played in response to an action"
            )
        return None

    # === TURN STRUCTURE ===

    def _validate_draw_cards(self, action: Action, player: PlayerState) -> ValidationResult:
        if self.state.turn_phase != TurnPhase.DRAW:
            return ValidationResult.invalid("can only draw cards at start of turn")
        if not self._is_current(player):
            return ValidationResult.invalid("not your turn")
        return ValidationResult.ok()

    def _validate_end_turn(self, action: Action, player: PlayerState) -> ValidationResult:
        if not self._is_current(player):
            return ValidationResult.invalid("not your turn")
        return ValidationResult.ok()

    # === BASIC PLAYS ===

    def _validate_play_property(self, action: Action, player: PlayerState) -> ValidationResult:
        rejection = self._check_play(player)
        if rejection is not None:
            return rejection

        card = player.get_card_from_hand(action.card_id)
        if card is None:
            return ValidationResult.invalid("card not in hand")
        if not isinstance(card, (PropertyCard, WildcardCard)):
            return ValidationResult.invalid("card is not a property")
        return ValidationResult.ok()

    def _validate_play_money(self, action: Action, player: PlayerState) -> ValidationResult:
        rejection = self._check_play(player)
        if rejection is not None:
            return rejection

        card = player.get_card_from_hand(action.card_id)
        if card is None:
            return ValidationResult.invalid("card not in hand")
        if card.value <= 0:
            return ValidationResult.invalid("card has no money value")
        return ValidationResult.ok()

    def _validate_flip_wildcard(self, action: Action, player: PlayerState) -> ValidationResult:
        if not self._is_current(player):
            return ValidationResult.invalid("not your turn")
        if self.state.turn_phase != TurnPhase.ACTIONS:
            return ValidationResult.invalid("can only flip wildcards during action phase")

        found = player.find_property(action.card_id)
        if found is None:
            return ValidationResult.invalid("wildcard not found in properties")
        prop_set, card = found
        if not isinstance(card, WildcardCard):
            return ValidationResult.invalid("card is not a wildcard")
        if prop_set.is_complete():
            return ValidationResult.invalid("cannot flip wildcard in complete set")
        return ValidationResult.ok()

    # === RENT ===

    def _validate_play_rent(self, action: Action, player: PlayerState) -> ValidationResult:
        rejection = self._check_play(player)
        if rejection is not None:
            return rejection

        card = player.get_card_from_hand(action.card_id)
        if card is None:
            return ValidationResult.invalid("card not in hand")
        if not isinstance(card, RentCard):
            return ValidationResult.invalid("not a rent card")

        color = parse_color(action.color)
        if color is None:
            return ValidationResult.invalid(f"unknown color: {action.color}")

        if not card.is_wild:
            if not card.covers(color):
                return ValidationResult.invalid(f"rent card cannot charge {color.value}")
            if player.owned_count(color) == 0:
                return ValidationResult.invalid(f"you don't own any {color.value} properties")

        if card.target == RentTarget.ONE:
            rejection = self._check_target(action, player)
            if rejection is not None:
                return rejection

        rush_hour_id = action.data.get("rushHourCardId")
        if rush_hour_id:
            if rush_hour_id == card.id:
                return ValidationResult.invalid("Rush Hour card must differ from rent card")
            rush_card = player.get_card_from_hand(rush_hour_id)
            if rush_card is None:
                return ValidationResult.invalid("Rush Hour card not in hand")
            if not is_action(rush_card, ActionEffect.RUSH_HOUR):
                return ValidationResult.invalid("not a Rush Hour card")

        return ValidationResult.ok()

    # === ACTION CARDS ===

    def _validate_swipe_in(self, action: Action, player: PlayerState) -> ValidationResult:
        rejection = self._check_action_card(action, player, ActionEffect.SWIPE_IN)
        return rejection or ValidationResult.ok()

    def _validate_rush_hour(self, action: Action, player: PlayerState) -> ValidationResult:
        rejection = self._check_action_card(action, player, ActionEffect.RUSH_HOUR)
        if rejection is not None:
            return rejection
        return ValidationResult.invalid("Rush Hour must be played together with a rent card")

    def _validate_power_broker(self, action: Action, player: PlayerState) -> ValidationResult:
        rejection = self._check_action_card(action, player, ActionEffect.POWER_BROKER)
        rejection = rejection or self._check_target(action, player)
        if rejection is not None:
            return rejection

        color = parse_color(action.color)
        if color is None:
            return ValidationResult.invalid(f"unknown color: {action.color}")

        target = self.state.get_player(action.target_player_id)
        target_set = target.get_property_set(color)
        if target_set is None or target_set.get_card(action.target_card_id) is None:
            return ValidationResult.invalid(f"target card not in {color.value} set")
        if target_set.is_complete():
            return ValidationResult.invalid("cannot steal from complete set")
        return ValidationResult.ok()

    def _validate_line_closure(self, action: Action, player: PlayerState) -> ValidationResult:
        rejection = self._check_action_card(action, player, ActionEffect.LINE_CLOSURE)
        rejection = rejection or self._check_target(action, player)
        if rejection is not None:
            return rejection

        color = parse_color(action.color)
        if color is None:
            return ValidationResult.invalid(f"unknown color: {action.color}")

        target = self.state.get_player(action.target_player_id)
        target_set = target.get_property_set(color)
        if target_set is None or not target_set.is_complete():
            return ValidationResult.invalid("can only steal complete sets")
        return ValidationResult.ok()

    def _validate_service_change(self, action: Action, player: PlayerState) -> ValidationResult:
        rejection = self._check_action_card(action, player, ActionEffect.SERVICE_CHANGE)
        rejection = rejection or self._check_target(action, player)
        if rejection is not None:
            return rejection

        target_color = parse_color(action.color)
        if target_color is None:
            return ValidationResult.invalid(f"unknown color: {action.color}")
        player_color = parse_color(action.data.get("playerColor"))
        if player_color is None:
            return ValidationResult.invalid(f"unknown color: {action.data.get('playerColor')}")

        own_set = player.get_property_set(player_color)
        if own_set is None or own_set.get_card(action.data.get("playerCardId")) is None:
            return ValidationResult.invalid(f"your card not in {player_color.value} set")
        if own_set.is_complete():
            return ValidationResult.invalid("cannot swap from your complete set")

        target = self.state.get_player(action.target_player_id)
        target_set = target.get_property_set(target_color)
        if target_set is None or target_set.get_card(action.target_card_id) is None:
            return ValidationResult.invalid(f"target card not in {target_color.value} set")
        if target_set.is_complete():
            return ValidationResult.invalid("cannot swap from opponent's complete set")
        return ValidationResult.ok()

    def _validate_missed_train(self, action: Action, player: PlayerState) -> ValidationResult:
        rejection = self._check_action_card(action, player, ActionEffect.MISSED_YOUR_TRAIN)
        rejection = rejection or self._check_target(action, player)
        return rejection or ValidationResult.ok()

    def _validate_its_my_stop(self, action: Action, player: PlayerState) -> ValidationResult:
        rejection = self._check_action_card(action, player, ActionEffect.ITS_MY_STOP)
        return rejection or ValidationResult.ok()

    def _validate_improvement(self, action: Action, player: PlayerState) -> ValidationResult:
        effect = EFFECT_FOR_TYPE[resolve_action_type(action, player)]
        rejection = self._check_action_card(action, player, effect)
        if rejection is not None:
            return rejection
        if parse_color(action.color) is None:
            return ValidationResult.invalid(f"unknown color: {action.color}")
        return ValidationResult.ok()

    # === RESPONSES ===

    def _validate_response(self, action: Action, player: PlayerState) -> ValidationResult:
        if self.state.turn_phase != TurnPhase.RESPONSE:
            return ValidationResult.invalid("no pending action to respond to")
        if not self.state.has_pending_action():
            return ValidationResult.invalid("no pending action")

        if player.player_id not in self.state.get_pending_targets():
            return ValidationResult.invalid("you are not a target of this action")

        if action.action_type == ActionType.PLAY_FARE_EVASION:
            card = player.get_card_from_hand(action.card_id)
            if card is None:
                return ValidationResult.invalid("Fare Evasion card not in hand")
            if not is_action(card, ActionEffect.FARE_EVASION):
                return ValidationResult.invalid("not a Fare Evasion card")

        return ValidationResult.ok()
