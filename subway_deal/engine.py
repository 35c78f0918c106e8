"""
Main game engine: validate-then-execute orchestration and the turn lifecycle.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from subway_deal.actions import Action, ActionResult, ActionType
from subway_deal.config import GameConfig
from subway_deal.executor import Executor
from subway_deal.money import EventType
from subway_deal.snapshot import serialize_player_view, serialize_public_state
from subway_deal.state import GamePhase, GameState, TurnPhase
from subway_deal.validator import Validator

logger = logging.getLogger(__name__)


class Engine:
    """
    Composition root for one game session.

    The validator and executor share this engine's GameState. Rule
    violations come back as failed ActionResults, never as exceptions.
    """

    def __init__(
        self,
        game_id: str,
        player_names: List[str],
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        config = config or GameConfig()
        if not config.min_players <= len(player_names) <= config.max_players:
            raise ValueError(
                f"need {config.min_players}-{config.max_players} players, got {len(player_names)}"
            )

        self.state = GameState(game_id, player_names, config, rng)
        self.validator = Validator(self.state)
        self.executor = Executor(self.state)

        self._deal()
        self.state.phase = GamePhase.PLAYING
        self.state.event_log.log(
            EventType.GAME_START,
            players=[p.player_id for p in self.state.players],
            deck_size=len(self.state.deck),
        )
        logger.info("Game %s started with %d players", game_id, len(player_names))

    def _deal(self) -> None:
        """Shuffle the deck and deal the opening hands one player at a time."""
        self.state.deck.shuffle()
        for player in self.state.players:
            for card in self.state.draw_cards(self.state.config.initial_hand_size):
                player.add_to_hand(card)

    @property
    def game_id(self) -> str:
        return self.state.game_id

    def execute(self, action: Action) -> ActionResult:
        """Validate an action, apply it, and re-check the win condition."""
        validation = self.validator.validate(action)
        if not validation.valid:
            logger.debug("Rejected %r: %s", action, validation.error)
            return ActionResult.fail(validation.error)

        if action.action_type == ActionType.END_TURN:
            self.end_turn()
            return ActionResult.ok("turn ended")

        result = self.executor.execute(action)
        if result.success and self.state.check_win_condition():
            logger.info("Game %s won by %s", self.game_id, self.state.winner.player_id)
        return result

    def start_turn(self) -> None:
        """Begin the current player's turn with the start-of-turn draw."""
        player = self.state.get_current_player()
        self.state.turn_phase = TurnPhase.DRAW
        self.state.event_log.log(
            EventType.TURN_START, player_id=player.player_id, turn=self.state.turn_number
        )
        self.executor.draw_for_turn()
        logger.debug("Turn %d: %s", self.state.turn_number, player.player_id)

    def end_turn(self) -> None:
        """Discard down to the hand limit, then pass play to the next player."""
        player = self.state.get_current_player()
        self.state.turn_phase = TurnPhase.DISCARD

        while len(player.hand) > self.state.config.hand_limit:
            card = player.hand.pop()
            self.state.discard(card)
            self.state.event_log.log(EventType.DISCARD, player_id=player.player_id, card_id=card.id)

        self.state.event_log.log(EventType.TURN_END, player_id=player.player_id)
        self.state.next_player()
        self.start_turn()

    def public_state(self) -> Dict[str, Any]:
        return serialize_public_state(self.state)

    def player_view(self, player_id: str) -> Optional[Dict[str, Any]]:
        return serialize_player_view(self.state, player_id)


def create_game(
    game_id: str,
    player_names: List[str],
    config: Optional[GameConfig] = None,
    rng: Optional[random.Random] = None,
    start: bool = True,
) -> Engine:
    """
    Create a dealt game, optionally starting the first player's turn.

    Args:
        game_id: Session identifier
        player_names: Display names, in seating order
        config: Game configuration (defaults apply if omitted)
        rng: Shuffle source; defaults to random.Random(config.seed)
        start: Run the first player's start-of-turn draw

    Returns:
        The session's Engine
    """
    engine = Engine(game_id, player_names, config, rng)
    if start:
        engine.start_turn()
    return engine
