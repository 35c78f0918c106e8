"""
Snapshot serialization of GameState.

Produces the public view shared with every client and the private view for
one seat. Hand contents only appear in the owning player's private view and
deck order is never exposed.
"""

from typing import Any, Dict, List, Optional

from subway_deal.cards import ActionCard, Card, MoneyCard, PropertyCard, RentCard, WildcardCard
from subway_deal.player import PlayerState
from subway_deal.state import GameState, PendingAction


def serialize_card(card: Card) -> Dict[str, Any]:
    """Serialize a card with its type-specific fields."""
    data: Dict[str, Any] = {
        "id": card.id,
        "name": card.name,
        "value": card.value,
        "type": card.card_type.value,
    }
    if isinstance(card, PropertyCard):
        data["color"] = card.color.value
    elif isinstance(card, WildcardCard):
        data["colors"] = [color.value for color in card.colors]
        data["currentColor"] = card.current_color.value
    elif isinstance(card, ActionCard):
        data["effect"] = card.effect.value
    elif isinstance(card, RentCard):
        data["colors"] = [color.value for color in card.colors]
        data["isWildRent"] = card.is_wild
    elif isinstance(card, MoneyCard):
        data["denomination"] = card.denomination
    return data


def _serialize_player(player: PlayerState) -> Dict[str, Any]:
    properties: List[Dict[str, Any]] = []
    for prop_set in player.sorted_property_sets():
        properties.append(
            {
                "color": prop_set.color.value,
                "cards": [serialize_card(card) for card in prop_set.cards],
                "cardCount": len(prop_set),
                "setSize": prop_set.set_size,
                "complete": prop_set.is_complete(),
                "improvements": [imp.value for imp in prop_set.improvements],
                "rent": prop_set.get_rent(),
            }
        )

    return {
        "id": player.player_id,
        "name": player.name,
        "handCount": len(player.hand),
        "bankValue": player.bank_total(),
        "completeSets": player.complete_set_count(),
        "properties": properties,
    }


def _serialize_pending(pending: PendingAction) -> Dict[str, Any]:
    return {
        "type": pending.action_type.value,
        "sourcePlayer": pending.source_player_id,
        "targets": pending.outstanding(),
        "rentAmount": pending.amount,
        "rentColor": pending.rent_color.value if pending.rent_color else None,
        "rentMultiplier": pending.rent_multiplier,
    }


def serialize_public_state(state: GameState) -> Dict[str, Any]:
    """Serialize the state every participant may see."""
    view: Dict[str, Any] = {
        "gameId": state.game_id,
        "players": [_serialize_player(player) for player in state.players],
        "currentPlayer": state.get_current_player().player_id,
        "phase": state.phase.value,
        "turnPhase": state.turn_phase.value,
        "actionsPlayedThisTurn": state.actions_played,
        "maxActionsPerTurn": state.max_actions_per_turn,
        "deckSize": len(state.deck),
        "discardSize": len(state.discard_pile),
    }
    if state.winner is not None:
        view["winner"] = state.winner.player_id
    if state.pending_action is not None:
        view["pendingAction"] = _serialize_pending(state.pending_action)
    return view


def serialize_player_view(state: GameState, player_id: str) -> Optional[Dict[str, Any]]:
    """Public state plus one player's own hand; None for an unknown player."""
    player = state.get_player(player_id)
    if player is None:
        return None

    view = serialize_public_state(state)
    view["yourId"] = player.player_id
    view["yourHand"] = [serialize_card(card) for card in player.hand]
    return view
