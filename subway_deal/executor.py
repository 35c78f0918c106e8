"""
Effect application for validated actions.

Immediate actions mutate the state directly. Contested actions install a
pending action and wait for every target to respond; responses resolve or
cancel it.
"""

import logging
from typing import Callable, Dict, List, Optional

from subway_deal.actions import Action, ActionResult, ActionType
from subway_deal.cards import Card, RentCard, RentTarget, WildcardCard, card_color
from subway_deal.config import EXPRESS_BONUS, STATION_BONUS, Color, parse_color
from subway_deal.exceptions import InvalidOperationError, NotFoundError
from subway_deal.money import EventType, PaymentResult
from subway_deal.player import PlayerState
from subway_deal.property_set import Improvement
from subway_deal.state import GameState, PendingAction, TurnPhase
from subway_deal.validator import resolve_action_type

logger = logging.getLogger(__name__)

MONETARY_TYPES = frozenset(
    {ActionType.PLAY_RENT, ActionType.MISSED_YOUR_TRAIN, ActionType.ITS_MY_STOP}
)


class Executor:
    """Applies the effects of validated actions to the game state."""

    def __init__(self, state: GameState):
        self.state = state
        self._handlers: Dict[ActionType, Callable[[Action], ActionResult]] = {
            # Immediate
            ActionType.DRAW_CARDS: self._execute_draw_cards,
            ActionType.PLAY_PROPERTY: self._execute_play_property,
            ActionType.PLAY_MONEY: self._execute_play_money,
            ActionType.SWIPE_IN: self._execute_swipe_in,
            ActionType.EXPRESS_SERVICE: self._execute_express_service,
            ActionType.NEW_STATION: self._execute_new_station,
            ActionType.FLIP_WILDCARD: self._execute_flip_wildcard,
            # Contested
            ActionType.PLAY_RENT: self._create_pending_rent,
            ActionType.POWER_BROKER: self._create_pending_power_broker,
            ActionType.LINE_CLOSURE: self._create_pending_line_closure,
            ActionType.SERVICE_CHANGE: self._create_pending_service_change,
            ActionType.MISSED_YOUR_TRAIN: self._create_pending_missed_train,
            ActionType.ITS_MY_STOP: self._create_pending_its_my_stop,
            # Responses
            ActionType.ACCEPT: self._execute_accept,
            ActionType.PLAY_FARE_EVASION: self._execute_fare_evasion,
        }

    def execute(self, action: Action) -> ActionResult:
        """Apply a pre-validated action."""
        player = self.state.get_player(action.player_id)
        action_type = resolve_action_type(action, player)
        handler = self._handlers.get(action_type)
        if handler is None:
            return ActionResult.fail(f"no executor for: {action.action_type.value}")

        if action_type != action.action_type:
            action = Action(action_type, action.player_id, action.data)
        return handler(action)

    def draw_for_turn(self) -> List[Card]:
        """
        Start-of-turn draw for the current player.

        Draws 2 cards, or 5 when the hand is empty, then opens the action phase.
        """
        player = self.state.get_current_player()
        config = self.state.config
        count = config.empty_hand_draw_count if not player.hand else config.draw_count

        drawn = self.state.draw_cards(count)
        for card in drawn:
            player.add_to_hand(card)

        self.state.turn_phase = TurnPhase.ACTIONS
        self.state.event_log.log(
            EventType.DRAW, player_id=player.player_id, requested=count, drawn=len(drawn)
        )
        if len(drawn) < count:
            logger.debug("Short draw for %s: %d of %d", player.player_id, len(drawn), count)
        return drawn

    # === IMMEDIATE ACTIONS ===

    def _execute_draw_cards(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        drawn = self.draw_for_turn()
        return ActionResult.ok(f"{player.name} drew {len(drawn)} cards")

    def _execute_play_property(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        try:
            index, card = player.take_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        color = card_color(card)
        if color is None:
            player.return_to_hand(card, index)
            return ActionResult.fail("card is not a property")

        player.property_set(color).add_card(card)
        self.state.actions_played += 1

        self.state.event_log.log(
            EventType.PLAY_PROPERTY, player_id=player.player_id, card_id=card.id, color=color.value
        )
        return ActionResult.ok(f"{player.name} played {card.name}")

    def _execute_play_money(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        try:
            card = player.remove_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        player.add_to_bank(card)
        self.state.actions_played += 1

        self.state.event_log.log(
            EventType.BANK, player_id=player.player_id, card_id=card.id, value=card.value
        )
        return ActionResult.ok(f"{player.name} banked {card.name} (${card.value})")

    def _execute_swipe_in(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        try:
            card = player.remove_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        self.state.discard(card)
        drawn = self.state.draw_cards(self.state.config.swipe_in_draw_count)
        for drawn_card in drawn:
            player.add_to_hand(drawn_card)

        self.state.actions_played += 1

        self.state.event_log.log(EventType.DRAW, player_id=player.player_id, drawn=len(drawn))
        return ActionResult.ok(f"{player.name} used Swipe In and drew {len(drawn)} cards")

    def _execute_express_service(self, action: Action) -> ActionResult:
        return self._add_improvement(action, Improvement.EXPRESS, "Express Service", EXPRESS_BONUS)

    def _execute_new_station(self, action: Action) -> ActionResult:
        return self._add_improvement(action, Improvement.STATION, "New Station", STATION_BONUS)

    def _add_improvement(
        self, action: Action, improvement: Improvement, label: str, bonus: int
    ) -> ActionResult:
        player = self.state.get_player(action.player_id)
        color = parse_color(action.color)
        try:
            index, card = player.take_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        prop_set = player.get_property_set(color)
        try:
            if prop_set is None:
                raise InvalidOperationError(f"no {action.color} set to improve")
            prop_set.add_improvement(improvement)
        except InvalidOperationError as exc:
            # Unconsumed: the card goes back to the hand
            player.return_to_hand(card, index)
            return ActionResult.fail(str(exc))

        self.state.discard(card)
        self.state.actions_played += 1

        self.state.event_log.log(
            EventType.IMPROVEMENT,
            player_id=player.player_id,
            color=color.value,
            improvement=improvement.value,
        )
        return ActionResult.ok(f"{player.name} added {label} to {color.value} set (+${bonus} rent)")

    def _execute_flip_wildcard(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        found = player.find_property(action.card_id)
        if found is None:
            return ActionResult.fail("wildcard not found")

        prop_set, card = found
        if not isinstance(card, WildcardCard):
            return ActionResult.fail("card is not a wildcard")

        old_color = prop_set.color
        prop_set.remove_card(card.id)
        new_color = card.flip_color()
        player.property_set(new_color).add_card(card)

        self.state.event_log.log(
            EventType.WILDCARD_FLIP,
            player_id=player.player_id,
            card_id=card.id,
            from_color=old_color.value,
            to_color=new_color.value,
        )
        return ActionResult.ok(
            f"{player.name} flipped wildcard from {old_color.value} to {new_color.value}"
        )

    # === CONTESTED ACTIONS ===

    def _install_pending(self, pending: PendingAction) -> None:
        self.state.set_pending_action(pending)
        self.state.actions_played += 1
        logger.debug(
            "Pending %s from %s against %s",
            pending.action_type.value,
            pending.source_player_id,
            pending.target_player_ids,
        )

    def _opponent_ids(self, player: PlayerState) -> List[str]:
        return [p.player_id for p in self.state.other_players(player.player_id)]

    def _create_pending_rent(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        try:
            card = player.remove_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        color = parse_color(action.color)
        prop_set = player.get_property_set(color)
        rent_amount = prop_set.get_rent() if prop_set is not None else 0

        multiplier = 1
        rush_hour_id = action.data.get("rushHourCardId")
        if rush_hour_id:
            try:
                rush_card = player.remove_from_hand(rush_hour_id)
            except NotFoundError:
                rush_card = None
            if rush_card is not None:
                self.state.discard(rush_card)
                multiplier = 2

        self.state.discard(card)

        if isinstance(card, RentCard) and card.target == RentTarget.ALL:
            target_ids = self._opponent_ids(player)
        else:
            target_ids = [action.target_player_id]

        amount = rent_amount * multiplier
        self._install_pending(
            PendingAction(
                action=action,
                source_player_id=player.player_id,
                target_player_ids=target_ids,
                rent_multiplier=multiplier,
                rent_color=color,
                amount=amount,
            )
        )

        self.state.event_log.log(
            EventType.RENT_DEMAND,
            player_id=player.player_id,
            color=color.value,
            amount=amount,
            multiplier=multiplier,
            targets=list(target_ids),
        )

        message = f"{player.name} demands ${amount} rent on {color.value}"
        if multiplier == 2:
            message += " (Rush Hour!)"
        return ActionResult.ok(message, pending_action=True)

    def _create_pending_power_broker(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        try:
            index, card = player.take_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        target = self.state.get_player(action.target_player_id)
        target_set = target.get_property_set(parse_color(action.color))
        if target_set is None or target_set.get_card(action.target_card_id) is None:
            player.return_to_hand(card, index)
            return ActionResult.fail("target card not found")
        if target_set.is_complete():
            player.return_to_hand(card, index)
            return ActionResult.fail("cannot steal from complete set")

        self.state.discard(card)
        self._install_pending(
            PendingAction(
                action=action,
                source_player_id=player.player_id,
                target_player_ids=[target.player_id],
            )
        )

        self.state.event_log.log(
            EventType.STEAL_ATTEMPT,
            player_id=player.player_id,
            target=target.player_id,
            card_id=action.target_card_id,
        )
        return ActionResult.ok(
            f"{player.name} plays Power Broker against {target.name}", pending_action=True
        )

    def _create_pending_line_closure(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        try:
            index, card = player.take_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        color = parse_color(action.color)
        target = self.state.get_player(action.target_player_id)
        target_set = target.get_property_set(color)
        if target_set is None or not target_set.is_complete():
            player.return_to_hand(card, index)
            return ActionResult.fail("can only steal complete sets")

        self.state.discard(card)
        self._install_pending(
            PendingAction(
                action=action,
                source_player_id=player.player_id,
                target_player_ids=[target.player_id],
            )
        )

        self.state.event_log.log(
            EventType.SET_STEAL_ATTEMPT,
            player_id=player.player_id,
            target=target.player_id,
            color=color.value,
        )
        return ActionResult.ok(
            f"{player.name} plays Line Closure against {target.name}'s {color.value} set!",
            pending_action=True,
        )

    def _create_pending_service_change(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        try:
            index, card = player.take_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        player_set = player.get_property_set(parse_color(action.data.get("playerColor")))
        target = self.state.get_player(action.target_player_id)
        target_set = target.get_property_set(parse_color(action.color))

        if player_set is None or target_set is None:
            player.return_to_hand(card, index)
            return ActionResult.fail("swap card not found")
        if player_set.is_complete():
            player.return_to_hand(card, index)
            return ActionResult.fail("cannot swap from your complete set")
        if target_set.is_complete():
            player.return_to_hand(card, index)
            return ActionResult.fail("cannot swap from opponent's complete set")

        self.state.discard(card)
        self._install_pending(
            PendingAction(
                action=action,
                source_player_id=player.player_id,
                target_player_ids=[target.player_id],
            )
        )

        self.state.event_log.log(
            EventType.SWAP_ATTEMPT,
            player_id=player.player_id,
            target=target.player_id,
            give=action.data.get("playerCardId"),
            take=action.target_card_id,
        )
        return ActionResult.ok(
            f"{player.name} plays Service Change against {target.name}", pending_action=True
        )

    def _create_pending_missed_train(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        try:
            card = player.remove_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        self.state.discard(card)
        target = self.state.get_player(action.target_player_id)
        amount = self.state.config.debt_amount

        self._install_pending(
            PendingAction(
                action=action,
                source_player_id=player.player_id,
                target_player_ids=[target.player_id],
                amount=amount,
            )
        )

        self.state.event_log.log(
            EventType.DEBT_DEMAND, player_id=player.player_id, amount=amount, targets=[target.player_id]
        )
        return ActionResult.ok(
            f"{player.name} demands ${amount} from {target.name} (Missed Your Train)",
            pending_action=True,
        )

    def _create_pending_its_my_stop(self, action: Action) -> ActionResult:
        player = self.state.get_player(action.player_id)
        try:
            card = player.remove_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        self.state.discard(card)
        amount = self.state.config.birthday_amount
        target_ids = self._opponent_ids(player)

        self._install_pending(
            PendingAction(
                action=action,
                source_player_id=player.player_id,
                target_player_ids=target_ids,
                amount=amount,
            )
        )

        self.state.event_log.log(
            EventType.DEBT_DEMAND, player_id=player.player_id, amount=amount, targets=list(target_ids)
        )
        return ActionResult.ok(
            f"{player.name} demands ${amount} from everyone (It's My Stop!)", pending_action=True
        )

    # === RESPONSES ===

    def _execute_accept(self, action: Action) -> ActionResult:
        if self.state.pending_action is None:
            return ActionResult.fail("no pending action")

        responder_id = action.player_id
        result = self._resolve_for_player(responder_id)
        self.state.mark_responded(responder_id)

        if self.state.all_targets_responded():
            self.state.clear_pending_action()

        return result

    def _execute_fare_evasion(self, action: Action) -> ActionResult:
        pending = self.state.pending_action
        if pending is None:
            return ActionResult.fail("no pending action")

        player = self.state.get_player(action.player_id)
        try:
            card = player.remove_from_hand(action.card_id)
        except NotFoundError as exc:
            return ActionResult.fail(str(exc))

        self.state.discard(card)
        self.state.mark_responded(player.player_id)
        self.state.event_log.log(
            EventType.CANCELLED,
            player_id=player.player_id,
            action=pending.action_type.value,
            source=pending.source_player_id,
        )

        # Single target: the whole action is cancelled
        if pending.is_single_target:
            self.state.clear_pending_action()
            return ActionResult.ok(f"{player.name} blocked the action with Fare Evasion!")

        if self.state.all_targets_responded():
            self.state.clear_pending_action()

        return ActionResult.ok(f"{player.name} blocked with Fare Evasion!")

    def _resolve_for_player(self, player_id: str) -> ActionResult:
        """Apply the pending effect against one responder who accepted."""
        pending = self.state.pending_action
        source = self.state.get_player(pending.source_player_id)
        target = self.state.get_player(player_id)

        if pending.action_type in MONETARY_TYPES:
            return self._resolve_payment(pending, source, target)
        if pending.action_type == ActionType.POWER_BROKER:
            return self._resolve_steal(pending, source, target)
        if pending.action_type == ActionType.LINE_CLOSURE:
            return self._resolve_set_steal(pending, source, target)
        if pending.action_type == ActionType.SERVICE_CHANGE:
            return self._resolve_swap(pending, source, target)

        return ActionResult.fail("unknown pending action type")

    def _resolve_payment(
        self, pending: PendingAction, source: PlayerState, target: PlayerState
    ) -> ActionResult:
        amount = pending.amount
        paid, total = target.pay(amount)
        for card in paid:
            source.add_to_bank(card)

        payment = PaymentResult(
            from_player=target.player_id, amount=total, shortfall=max(0, amount - total)
        )
        self.state.event_log.log(
            EventType.PAYMENT,
            player_id=target.player_id,
            to=source.player_id,
            owed=amount,
            paid=total,
            cards=[card.id for card in paid],
        )
        return ActionResult.ok(f"{target.name} paid ${total}", payments=[payment])

    def _fizzle(self, pending: PendingAction, target: PlayerState, reason: str) -> ActionResult:
        self.state.event_log.log(
            EventType.FIZZLED,
            player_id=target.player_id,
            action=pending.action_type.value,
            reason=reason,
        )
        logger.debug("Pending %s fizzled: %s", pending.action_type.value, reason)
        return ActionResult.fail(reason)

    def _resolve_steal(
        self, pending: PendingAction, source: PlayerState, target: PlayerState
    ) -> ActionResult:
        target_set = target.get_property_set(parse_color(pending.action.color))
        if target_set is None or target_set.get_card(pending.action.target_card_id) is None:
            return self._fizzle(pending, target, "target card not found")

        stolen = target_set.remove_card(pending.action.target_card_id)
        source.property_set(card_color(stolen)).add_card(stolen)

        self.state.event_log.log(
            EventType.STEAL, player_id=source.player_id, target=target.player_id, card_id=stolen.id
        )
        return ActionResult.ok(f"{source.name} stole {stolen.name} from {target.name}")

    def _resolve_set_steal(
        self, pending: PendingAction, source: PlayerState, target: PlayerState
    ) -> ActionResult:
        color: Optional[Color] = parse_color(pending.action.color)
        target_set = target.get_property_set(color)
        if target_set is None or not target_set.cards:
            return self._fizzle(pending, target, "target set not found")

        source_set = source.property_set(color)
        for card in target_set.cards:
            source_set.add_card(card)
        for improvement in target_set.improvements:
            if not source_set.has_improvement(improvement):
                source_set.improvements.append(improvement)
        target_set.cards = []
        target_set.improvements = []

        self.state.event_log.log(
            EventType.SET_STEAL, player_id=source.player_id, target=target.player_id, color=color.value
        )
        return ActionResult.ok(f"{source.name} stole complete {color.value} set from {target.name}")

    def _resolve_swap(
        self, pending: PendingAction, source: PlayerState, target: PlayerState
    ) -> ActionResult:
        player_card_id = pending.action.data.get("playerCardId")
        source_set = source.get_property_set(parse_color(pending.action.data.get("playerColor")))
        target_set = target.get_property_set(parse_color(pending.action.color))

        if source_set is None or source_set.get_card(player_card_id) is None:
            return self._fizzle(pending, target, "your swap card not found")
        if target_set is None or target_set.get_card(pending.action.target_card_id) is None:
            return self._fizzle(pending, target, "target card not found")

        given = source_set.remove_card(player_card_id)
        taken = target_set.remove_card(pending.action.target_card_id)

        source.property_set(card_color(taken)).add_card(taken)
        target.property_set(card_color(given)).add_card(given)

        self.state.event_log.log(
            EventType.SWAP,
            player_id=source.player_id,
            target=target.player_id,
            given=given.id,
            taken=taken.id,
        )
        return ActionResult.ok(f"Swapped {given.name} for {taken.name}")
