"""Shared test fixtures for Subway Deal tests."""

import random

import pytest

from subway_deal import Action, ActionType, Engine, GameConfig, create_game
from subway_deal.cards import card_color


def _take_card(state, card_id):
    """Pull a card out of wherever it currently is (deck, discard, any player)."""
    for pile in (state.deck.cards, state.deck.discard_pile):
        for card in pile:
            if card.id == card_id:
                pile.remove(card)
                return card
    for player in state.players:
        for pile in (player.hand, player.bank):
            for card in pile:
                if card.id == card_id:
                    pile.remove(card)
                    return card
        for prop_set in player.property_sets.values():
            if prop_set.get_card(card_id) is not None:
                return prop_set.remove_card(card_id)
    raise LookupError(card_id)


class Rig:
    """Moves specific catalog cards into place for a scenario."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.state = engine.state

    def player(self, index):
        return self.state.players[index]

    def clear_hand(self, index):
        player = self.player(index)
        for card in list(player.hand):
            player.hand.remove(card)
            self.state.discard(card)

    def hand(self, index, *card_ids):
        player = self.player(index)
        for card_id in card_ids:
            player.add_to_hand(_take_card(self.state, card_id))

    def bank(self, index, *card_ids):
        player = self.player(index)
        for card_id in card_ids:
            player.add_to_bank(_take_card(self.state, card_id))

    def place(self, index, *card_ids):
        player = self.player(index)
        for card_id in card_ids:
            card = _take_card(self.state, card_id)
            player.property_set(card_color(card)).add_card(card)

    def act(self, action_type, index, **data):
        player_id = self.player(index).player_id
        return self.engine.execute(Action(action_type, player_id, data))


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def two_players():
    return ["Alice", "Bob"]


@pytest.fixture
def three_players():
    return ["Alice", "Bob", "Charlie"]


@pytest.fixture
def basic_game(game_config, two_players):
    """Two-player game with the first turn started."""
    return create_game("test-game", two_players, game_config, random.Random(42))


@pytest.fixture
def three_player_game(game_config, three_players):
    """Three-player game with the first turn started."""
    return create_game("test-game-3", three_players, game_config, random.Random(42))


@pytest.fixture
def rig(basic_game):
    return Rig(basic_game)


@pytest.fixture
def rig3(three_player_game):
    return Rig(three_player_game)


@pytest.fixture
def end_turn():
    def _end_turn(engine):
        current = engine.state.get_current_player().player_id
        return engine.execute(Action(ActionType.END_TURN, current))

    return _end_turn
