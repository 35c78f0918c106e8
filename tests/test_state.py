"""
Tests for session setup, turn cursor and pending-action bookkeeping.
"""

import random

import pytest

from subway_deal import Action, ActionType, Engine, GameConfig
from subway_deal.money import EventType
from subway_deal.state import GamePhase, GameState, PendingAction, TurnPhase


@pytest.mark.parametrize("num_players", [2, 3, 4, 5])
def test_initial_deal(num_players):
    names = [f"P{i}" for i in range(num_players)]
    engine = Engine("deal", names, GameConfig(seed=1), random.Random(1))
    state = engine.state

    assert len(state.deck) == 106 - 5 * num_players
    assert all(len(player.hand) == 5 for player in state.players)
    assert state.card_count() == 106
    assert state.phase == GamePhase.PLAYING
    assert state.turn_phase == TurnPhase.DRAW


@pytest.mark.parametrize("num_players", [1, 6])
def test_player_count_bounds(num_players):
    with pytest.raises(ValueError):
        Engine("bad", [f"P{i}" for i in range(num_players)])


def test_new_state_starts_in_setup():
    state = GameState("g", ["A", "B"])

    assert state.phase == GamePhase.SETUP
    assert [p.player_id for p in state.players] == ["player_0", "player_1"]
    assert len(state.deck) == 106


def test_next_player_wraps_and_resets_counter():
    state = GameState("g", ["A", "B", "C"])
    state.actions_played = 2

    state.next_player()
    assert state.get_current_player().player_id == "player_1"
    assert state.actions_played == 0
    assert state.turn_phase == TurnPhase.DRAW

    state.next_player()
    state.next_player()
    assert state.get_current_player().player_id == "player_0"
    assert state.turn_number == 3


def test_pending_action_bookkeeping():
    state = GameState("g", ["A", "B", "C"])
    action = Action(ActionType.ITS_MY_STOP, "player_0", {"cardId": "action_its_my_stop_1"})
    state.set_pending_action(
        PendingAction(action, "player_0", ["player_1", "player_2"], amount=2)
    )

    assert state.turn_phase == TurnPhase.RESPONSE
    assert state.get_pending_targets() == ["player_1", "player_2"]

    state.mark_responded("player_2")
    state.mark_responded("player_2")
    assert state.pending_action.responded_ids == ["player_2"]
    assert state.get_pending_targets() == ["player_1"]
    assert not state.all_targets_responded()

    state.mark_responded("player_1")
    assert state.all_targets_responded()

    state.clear_pending_action()
    assert not state.has_pending_action()
    assert state.turn_phase == TurnPhase.ACTIONS


def test_win_condition_fires_once(rig):
    rig.place(0, "prop_j", "prop_z", "prop_g", "prop_l", "prop_citi_field", "prop_yankee_stadium")
    state = rig.state

    assert state.check_win_condition() is True
    assert state.check_win_condition() is False
    assert state.phase == GamePhase.FINISHED
    assert state.winner.player_id == "player_0"

    game_ends = [e for e in state.event_log.get_events() if e.event_type == EventType.GAME_END]
    assert len(game_ends) == 1
