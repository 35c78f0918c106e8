"""
Tests for player hand, bank, payment and property holdings.
"""

import pytest

from subway_deal.cards import create_all_cards
from subway_deal.config import Color
from subway_deal.exceptions import NotFoundError
from subway_deal.player import PlayerState


def catalog():
    return {card.id: card for card in create_all_cards()}


@pytest.fixture
def player():
    return PlayerState("player_0", "Alice")


def bank(player, cards, *card_ids):
    for card_id in card_ids:
        player.add_to_bank(cards[card_id])


def test_hand_add_and_remove(player):
    cards = catalog()
    player.add_to_hand(cards["money_1_1"])

    assert player.get_card_from_hand("money_1_1") is not None
    removed = player.remove_from_hand("money_1_1")
    assert removed.id == "money_1_1"
    assert player.hand == []


def test_remove_missing_card_from_hand_raises(player):
    with pytest.raises(NotFoundError):
        player.remove_from_hand("money_1_1")


def test_bank_total(player):
    cards = catalog()
    bank(player, cards, "money_1_1", "money_5_1", "action_swipe_in_1")
    assert player.bank_total() == 7


def test_pay_takes_smallest_cards_first(player):
    cards = catalog()
    bank(player, cards, "money_5_1", "money_1_1", "money_2_1")

    paid, total = player.pay(3)

    assert [card.id for card in paid] == ["money_1_1", "money_2_1"]
    assert total == 3
    assert player.bank_total() == 5


def test_pay_overpays_without_change(player):
    cards = catalog()
    bank(player, cards, "money_5_1", "money_2_1")

    paid, total = player.pay(3)

    assert [card.id for card in paid] == ["money_2_1", "money_5_1"]
    assert total == 7
    assert player.bank == []


def test_pay_everything_when_short(player):
    cards = catalog()
    bank(player, cards, "money_1_1", "money_1_2")

    paid, total = player.pay(5)

    assert len(paid) == 2
    assert total == 2
    assert player.bank == []


@pytest.mark.parametrize("amount", [0, -3])
def test_pay_non_positive_is_noop(player, amount):
    cards = catalog()
    bank(player, cards, "money_1_1")

    assert player.pay(amount) == ([], 0)
    assert player.bank_total() == 1


def test_pay_from_empty_bank(player):
    assert player.pay(4) == ([], 0)


def test_property_sets_created_lazily(player):
    assert player.get_property_set(Color.RED) is None

    prop_set = player.property_set(Color.RED)

    assert player.get_property_set(Color.RED) is prop_set


def test_sorted_property_sets_skip_empty_and_follow_color_order(player):
    cards = catalog()
    player.property_set(Color.UTILITY).add_card(cards["prop_g"])
    player.property_set(Color.BROWN).add_card(cards["prop_j"])
    player.property_set(Color.GREEN)

    colors = [prop_set.color for prop_set in player.sorted_property_sets()]

    assert colors == [Color.BROWN, Color.UTILITY]


def test_find_property(player):
    cards = catalog()
    player.property_set(Color.BLUE).add_card(cards["prop_a"])

    prop_set, card = player.find_property("prop_a")

    assert prop_set.color == Color.BLUE
    assert card.id == "prop_a"
    assert player.find_property("prop_c") is None


def test_win_needs_three_complete_sets(player):
    cards = catalog()
    for card_id in ("prop_j", "prop_z"):
        player.property_set(Color.BROWN).add_card(cards[card_id])
    for card_id in ("prop_g", "prop_l"):
        player.property_set(Color.UTILITY).add_card(cards[card_id])
    assert player.complete_set_count() == 2
    assert not player.has_won()

    for card_id in ("prop_citi_field", "prop_yankee_stadium"):
        player.property_set(Color.DARKBLUE).add_card(cards[card_id])
    assert player.has_won()


def test_take_and_return_keep_position(player):
    cards = catalog()
    for card_id in ("money_1_1", "money_2_1", "money_3_1"):
        player.add_to_hand(cards[card_id])

    index, card = player.take_from_hand("money_2_1")
    player.return_to_hand(card, index)

    assert index == 1
    assert [c.id for c in player.hand] == ["money_1_1", "money_2_1", "money_3_1"]
