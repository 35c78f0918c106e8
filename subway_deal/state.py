"""
Game session state: players, turn cursor, phases, deck, pending action.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from subway_deal.actions import Action, ActionType
from subway_deal.cards import Card, Deck, create_all_cards
from subway_deal.config import Color, GameConfig
from subway_deal.money import EventLog, EventType
from subway_deal.player import PlayerState


class GamePhase(str, Enum):
    """Overall game phase."""

    SETUP = "setup"
    PLAYING = "playing"
    FINISHED = "finished"


class TurnPhase(str, Enum):
    """Sub-state within the current player's turn."""

    DRAW = "draw"
    ACTIONS = "actions"
    RESPONSE = "response"
    DISCARD = "discard"


@dataclass
class PendingAction:
    """A contested action waiting for its targets to respond."""

    action: Action
    source_player_id: str
    target_player_ids: List[str]
    responded_ids: List[str] = field(default_factory=list)
    rent_multiplier: int = 1
    rent_color: Optional[Color] = None
    amount: int = 0

    @property
    def action_type(self) -> ActionType:
        return self.action.action_type

    @property
    def is_single_target(self) -> bool:
        return len(self.target_player_ids) == 1

    def outstanding(self) -> List[str]:
        """Targets that have not responded yet, in target order."""
        return [pid for pid in self.target_player_ids if pid not in self.responded_ids]


class GameState:
    """
    Represents the complete state of a Subway Deal game.

    One instance per session. The validator, executor and engine all work
    on the same instance.
    """

    def __init__(
        self,
        game_id: str,
        player_names: List[str],
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.game_id = game_id
        self.config = config or GameConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.event_log = EventLog()

        self.players: List[PlayerState] = [
            PlayerState(f"player_{i}", name) for i, name in enumerate(player_names)
        ]

        self.deck = Deck(create_all_cards(), self.rng)

        self.current_player_index = 0
        self.phase = GamePhase.SETUP
        self.turn_phase = TurnPhase.DRAW
        self.actions_played = 0
        self.winner: Optional[PlayerState] = None
        self.pending_action: Optional[PendingAction] = None
        self.turn_number = 0

    @property
    def max_actions_per_turn(self) -> int:
        return self.config.max_actions_per_turn

    @property
    def discard_pile(self) -> List[Card]:
        return self.deck.discard_pile

    def get_current_player(self) -> PlayerState:
        """Get the player whose turn it is."""
        return self.players[self.current_player_index]

    def get_player(self, player_id: Optional[str]) -> Optional[PlayerState]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def other_players(self, player_id: str) -> List[PlayerState]:
        return [p for p in self.players if p.player_id != player_id]

    def next_player(self) -> None:
        """Advance the turn cursor, wrapping, and reset per-turn counters."""
        self.current_player_index = (self.current_player_index + 1) % len(self.players)
        self.actions_played = 0
        self.turn_phase = TurnPhase.DRAW
        self.turn_number += 1

    def draw_cards(self, count: int) -> List[Card]:
        return self.deck.draw_many(count)

    def discard(self, card: Card) -> None:
        self.deck.discard(card)

    def is_game_over(self) -> bool:
        return self.phase == GamePhase.FINISHED

    def check_win_condition(self) -> bool:
        """
        Record the first player with enough complete sets as winner.

        Returns True only on the check that finishes the game.
        """
        if self.is_game_over():
            return False

        for player in self.players:
            if player.has_won(self.config.win_set_count):
                self.winner = player
                self.phase = GamePhase.FINISHED
                self.event_log.log(
                    EventType.GAME_END,
                    player_id=player.player_id,
                    complete_sets=player.complete_set_count(),
                )
                return True
        return False

    # === PENDING ACTION ===

    def has_pending_action(self) -> bool:
        return self.pending_action is not None

    def set_pending_action(self, pending: PendingAction) -> None:
        self.pending_action = pending
        self.turn_phase = TurnPhase.RESPONSE

    def get_pending_targets(self) -> List[str]:
        """Player ids who still owe a response."""
        if self.pending_action is None:
            return []
        return self.pending_action.outstanding()

    def mark_responded(self, player_id: str) -> None:
        if self.pending_action is None:
            return
        if player_id not in self.pending_action.responded_ids:
            self.pending_action.responded_ids.append(player_id)

    def all_targets_responded(self) -> bool:
        return not self.get_pending_targets()

    def clear_pending_action(self) -> None:
        """Drop the pending action and return to the action phase."""
        self.pending_action = None
        self.turn_phase = TurnPhase.ACTIONS

    def card_count(self) -> int:
        """Total cards across deck, discard pile and all players."""
        total = len(self.deck.cards) + len(self.deck.discard_pile)
        for player in self.players:
            total += len(player.all_cards())
        return total
