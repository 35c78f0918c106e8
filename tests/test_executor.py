"""
Tests for effect application: immediate plays, contested actions and responses.
"""

from subway_deal import Action, ActionType
from subway_deal.config import Color
from subway_deal.executor import Executor
from subway_deal.property_set import Improvement
from subway_deal.state import TurnPhase


def discard_ids(rig):
    return [card.id for card in rig.state.discard_pile]


class TestImmediate:
    def test_play_property_routes_by_color(self, rig):
        rig.hand(0, "prop_a")

        result = rig.act(ActionType.PLAY_PROPERTY, 0, cardId="prop_a")

        assert result.success
        assert rig.player(0).owned_count(Color.BLUE) == 1
        assert rig.state.actions_played == 1

    def test_play_wildcard_uses_current_color(self, rig):
        rig.hand(0, "wild_times_square_1")
        rig.act(ActionType.PLAY_PROPERTY, 0, cardId="wild_times_square_1")
        assert rig.player(0).owned_count(Color.RED) == 1

    def test_play_money_banks_card(self, rig):
        rig.hand(0, "money_10_1")

        result = rig.act(ActionType.PLAY_MONEY, 0, cardId="money_10_1")

        assert result.success
        assert rig.player(0).bank_total() == 10
        assert rig.player(0).get_card_from_hand("money_10_1") is None

    def test_action_card_can_be_banked(self, rig):
        rig.hand(0, "action_line_closure_1")
        rig.act(ActionType.PLAY_MONEY, 0, cardId="action_line_closure_1")
        assert rig.player(0).bank_total() == 5

    def test_swipe_in_draws_two(self, rig):
        rig.hand(0, "action_swipe_in_1")
        before = len(rig.player(0).hand)

        result = rig.act(ActionType.SWIPE_IN, 0, cardId="action_swipe_in_1")

        assert result.success
        assert len(rig.player(0).hand) == before + 1
        assert "action_swipe_in_1" in discard_ids(rig)

    def test_play_action_alias_resolves_effect(self, rig):
        rig.hand(0, "action_swipe_in_2")
        before = len(rig.player(0).hand)

        result = rig.act(ActionType.PLAY_ACTION, 0, cardId="action_swipe_in_2")

        assert result.success
        assert len(rig.player(0).hand) == before + 1
        assert rig.state.actions_played == 1

    def test_express_then_station(self, rig):
        rig.place(0, "prop_a", "prop_c", "prop_e")
        rig.hand(0, "action_express_service_1", "action_new_station_1")

        first = rig.act(ActionType.EXPRESS_SERVICE, 0, cardId="action_express_service_1", color="blue")
        second = rig.act(ActionType.NEW_STATION, 0, cardId="action_new_station_1", color="blue")

        blue = rig.player(0).get_property_set(Color.BLUE)
        assert first.success and second.success
        assert blue.improvements == [Improvement.EXPRESS, Improvement.STATION]
        assert blue.get_rent() == 3 + 3 + 4
        assert rig.state.actions_played == 2

    def test_failed_improvement_returns_card_to_hand(self, rig):
        rig.place(0, "prop_g", "prop_l")
        rig.hand(0, "action_express_service_1")

        result = rig.act(
            ActionType.EXPRESS_SERVICE, 0, cardId="action_express_service_1", color="utility"
        )

        assert not result.success
        assert rig.player(0).get_card_from_hand("action_express_service_1") is not None
        assert rig.state.actions_played == 0

    def test_failed_improvement_keeps_hand_order(self, rig, end_turn):
        rig.clear_hand(0)
        ids = ["action_express_service_1"] + [f"money_1_{i}" for i in range(1, 7)] + ["money_3_1"]
        rig.hand(0, *ids)

        result = rig.act(
            ActionType.EXPRESS_SERVICE, 0, cardId="action_express_service_1", color="blue"
        )

        assert not result.success
        assert [card.id for card in rig.player(0).hand] == ids

        end_turn(rig.engine)

        assert rig.player(0).get_card_from_hand("action_express_service_1") is not None
        assert rig.state.discard_pile[-1].id == "money_3_1"

    def test_failed_steal_keeps_hand_order(self, rig):
        rig.clear_hand(0)
        rig.place(1, "prop_a")
        ids = ["money_1_1", "action_power_broker_1", "money_1_2"]
        rig.hand(0, *ids)
        # Bypass the validator: the target card is named in the wrong set
        result = Executor(rig.state).execute(
            Action(
                ActionType.POWER_BROKER,
                "player_0",
                {"cardId": "action_power_broker_1", "targetPlayerId": "player_1",
                 "color": "red", "targetCardId": "prop_a"},
            )
        )

        assert not result.success
        assert [card.id for card in rig.player(0).hand] == ids
        assert rig.state.actions_played == 0

    def test_flip_wildcard_moves_sets_without_using_an_action(self, rig):
        rig.place(0, "wild_broadway")

        result = rig.act(ActionType.FLIP_WILDCARD, 0, cardId="wild_broadway")

        player = rig.player(0)
        assert result.success
        assert player.owned_count(Color.BLUE) == 0
        assert player.owned_count(Color.BROWN) == 1
        assert rig.state.actions_played == 0

    def test_end_turn_is_not_an_executor_action(self, rig):
        executor = Executor(rig.state)
        result = executor.execute(Action(ActionType.END_TURN, "player_0"))
        assert not result.success


class TestRent:
    def test_blue_rent_scenario(self, rig):
        rig.place(0, "prop_a")
        rig.bank(1, "money_1_1", "money_4_1")
        rig.hand(0, "rent_blue_brown_1")

        result = rig.act(ActionType.PLAY_RENT, 0, cardId="rent_blue_brown_1", color="blue")

        pending = rig.state.pending_action
        assert result.success and result.pending_action
        assert pending.amount == 1
        assert pending.target_player_ids == ["player_1"]
        assert rig.state.turn_phase == TurnPhase.RESPONSE

        accept = rig.act(ActionType.ACCEPT, 1)

        assert accept.success
        assert [p.to_dict() for p in accept.payments] == [
            {"fromPlayer": "player_1", "amount": 1, "shortfall": 0}
        ]
        assert rig.player(1).bank_total() == 4
        assert rig.player(0).bank_total() == 1
        assert rig.state.pending_action is None
        assert rig.state.turn_phase == TurnPhase.ACTIONS

    def test_rush_hour_doubles_rent_once(self, rig):
        rig.place(0, "prop_1", "prop_2")
        rig.hand(0, "rent_red_yellow_1", "action_rush_hour_1")

        result = rig.act(
            ActionType.PLAY_RENT,
            0,
            cardId="rent_red_yellow_1",
            color="red",
            rushHourCardId="action_rush_hour_1",
        )

        pending = rig.state.pending_action
        assert result.success
        assert pending.rent_multiplier == 2
        assert pending.amount == 2 * 3
        assert rig.state.actions_played == 1
        assert {"rent_red_yellow_1", "action_rush_hour_1"} <= set(discard_ids(rig))

    def test_wild_rent_targets_one_player(self, rig3):
        rig3.place(0, "prop_penn", "prop_atlantic")
        rig3.hand(0, "rent_wild_1")

        rig3.act(ActionType.PLAY_RENT, 0, cardId="rent_wild_1", color="green", targetPlayerId="player_2")

        pending = rig3.state.pending_action
        assert pending.target_player_ids == ["player_2"]
        assert pending.amount == 4

    def test_color_rent_charges_everyone(self, rig3):
        rig3.place(0, "prop_b")
        rig3.hand(0, "rent_pink_orange_1")

        rig3.act(ActionType.PLAY_RENT, 0, cardId="rent_pink_orange_1", color="orange")

        assert rig3.state.pending_action.target_player_ids == ["player_1", "player_2"]

    def test_shortfall_is_reported(self, rig):
        rig.bank(1, "money_2_1")
        rig.hand(0, "action_missed_train_1")
        rig.act(ActionType.MISSED_YOUR_TRAIN, 0, cardId="action_missed_train_1", targetPlayerId="player_1")

        accept = rig.act(ActionType.ACCEPT, 1)

        payment = accept.payments[0]
        assert payment.amount == 2
        assert payment.shortfall == 3
        assert rig.player(0).bank_total() == 2


class TestMultiTarget:
    def test_its_my_stop_collects_from_each(self, rig3):
        rig3.bank(1, "money_2_1", "money_5_1")
        rig3.bank(2, "money_1_1", "money_1_2", "money_3_1")
        rig3.hand(0, "action_its_my_stop_1")

        rig3.act(ActionType.ITS_MY_STOP, 0, cardId="action_its_my_stop_1")
        rig3.act(ActionType.ACCEPT, 2)

        assert rig3.state.pending_action is not None
        assert rig3.state.get_pending_targets() == ["player_1"]

        rig3.act(ActionType.ACCEPT, 1)

        assert rig3.state.pending_action is None
        assert rig3.player(0).bank_total() == 4
        assert rig3.player(1).bank_total() == 5
        assert rig3.player(2).bank_total() == 3

    def test_fare_evasion_on_multi_target_is_partial(self, rig3):
        rig3.bank(2, "money_2_1")
        rig3.hand(0, "action_its_my_stop_1")
        rig3.hand(1, "action_fare_evasion_1")

        rig3.act(ActionType.ITS_MY_STOP, 0, cardId="action_its_my_stop_1")
        blocked = rig3.act(ActionType.PLAY_FARE_EVASION, 1, cardId="action_fare_evasion_1")

        assert blocked.success
        assert rig3.state.pending_action is not None
        assert rig3.state.get_pending_targets() == ["player_2"]

        rig3.act(ActionType.ACCEPT, 2)

        assert rig3.state.pending_action is None
        assert rig3.player(0).bank_total() == 2
        assert "action_fare_evasion_1" in discard_ids(rig3)


class TestSingleTarget:
    def test_power_broker_scenario(self, rig):
        rig.place(1, "prop_c")
        rig.hand(0, "action_power_broker_1")

        result = rig.act(
            ActionType.POWER_BROKER,
            0,
            cardId="action_power_broker_1",
            targetPlayerId="player_1",
            color="blue",
            targetCardId="prop_c",
        )
        assert result.pending_action

        rig.act(ActionType.ACCEPT, 1)

        assert rig.player(0).get_property_set(Color.BLUE).get_card("prop_c") is not None
        assert rig.player(1).owned_count(Color.BLUE) == 0
        assert rig.state.pending_action is None

    def test_fare_evasion_cancels_single_target(self, rig):
        rig.place(1, "prop_c")
        rig.hand(0, "action_power_broker_1")
        rig.hand(1, "action_fare_evasion_2")
        rig.act(
            ActionType.POWER_BROKER,
            0,
            cardId="action_power_broker_1",
            targetPlayerId="player_1",
            color="blue",
            targetCardId="prop_c",
        )

        result = rig.act(ActionType.PLAY_FARE_EVASION, 1, cardId="action_fare_evasion_2")

        assert result.success
        assert rig.state.pending_action is None
        assert rig.state.turn_phase == TurnPhase.ACTIONS
        assert rig.player(1).owned_count(Color.BLUE) == 1

    def test_vanished_card_fizzles(self, rig):
        rig.place(1, "prop_c")
        rig.hand(0, "action_power_broker_1")
        rig.act(
            ActionType.POWER_BROKER,
            0,
            cardId="action_power_broker_1",
            targetPlayerId="player_1",
            color="blue",
            targetCardId="prop_c",
        )
        rig.player(1).get_property_set(Color.BLUE).remove_card("prop_c")

        result = rig.act(ActionType.ACCEPT, 1)

        assert not result.success
        assert rig.state.pending_action is None
        assert rig.state.turn_phase == TurnPhase.ACTIONS

    def test_line_closure_takes_set_and_improvements(self, rig):
        rig.place(1, "prop_a", "prop_c", "prop_e")
        rig.player(1).get_property_set(Color.BLUE).add_improvement(Improvement.EXPRESS)
        rig.hand(0, "action_line_closure_1")

        rig.act(
            ActionType.LINE_CLOSURE,
            0,
            cardId="action_line_closure_1",
            targetPlayerId="player_1",
            color="blue",
        )
        rig.act(ActionType.ACCEPT, 1)

        stolen = rig.player(0).get_property_set(Color.BLUE)
        assert stolen.is_complete()
        assert stolen.improvements == [Improvement.EXPRESS]
        assert rig.player(1).owned_count(Color.BLUE) == 0
        assert rig.player(1).complete_set_count() == 0

    def test_service_change_swaps_cards(self, rig):
        rig.place(0, "prop_a")
        rig.place(1, "prop_b")
        rig.hand(0, "action_service_change_1")

        rig.act(
            ActionType.SERVICE_CHANGE,
            0,
            cardId="action_service_change_1",
            targetPlayerId="player_1",
            color="orange",
            targetCardId="prop_b",
            playerColor="blue",
            playerCardId="prop_a",
        )
        result = rig.act(ActionType.ACCEPT, 1)

        assert result.success
        assert rig.player(0).get_property_set(Color.ORANGE).get_card("prop_b") is not None
        assert rig.player(1).get_property_set(Color.BLUE).get_card("prop_a") is not None
        assert rig.player(0).owned_count(Color.BLUE) == 0
