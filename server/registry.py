from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional

from subway_deal import Action, ActionResult, Engine, GameConfig, create_game
from subway_deal.exceptions import GameNotFoundError, SessionLimitError

logger = logging.getLogger(__name__)


class GameSession:
    """Owns a single Engine and serializes every access to it."""

    def __init__(self, game_id: str, engine: Engine):
        self.game_id = game_id
        self.engine = engine
        self._lock = asyncio.Lock()

    async def apply_action(self, action: Action) -> ActionResult:
        async with self._lock:
            return self.engine.execute(action)

    async def public_state(self) -> Dict[str, Any]:
        async with self._lock:
            return self.engine.public_state()

    async def player_view(self, player_id: str) -> Optional[Dict[str, Any]]:
        async with self._lock:
            return self.engine.player_view(player_id)


class GameRegistry:
    """In-memory registry of running games."""

    def __init__(self, max_sessions: int = 100):
        self.max_sessions = max_sessions
        self._games: Dict[str, GameSession] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._games)

    async def create_game(
        self,
        *,
        player_names: Optional[List[str]] = None,
        num_players: int = 2,
        seed: Optional[int] = None,
    ) -> str:
        names = player_names or self._default_names(num_players)
        game_id = uuid.uuid4().hex[:12]

        async with self._lock:
            if len(self._games) >= self.max_sessions:
                raise SessionLimitError(f"session limit reached ({self.max_sessions})")

            engine = create_game(game_id, names, config=GameConfig(seed=seed))
            self._games[game_id] = GameSession(game_id, engine)

        logger.info("Created game %s for %s", game_id, ", ".join(names))
        return game_id

    async def get(self, game_id: str) -> GameSession:
        session = self._games.get(game_id)
        if session is None:
            raise GameNotFoundError(f"game {game_id} not found")
        return session

    async def remove(self, game_id: str) -> None:
        async with self._lock:
            if self._games.pop(game_id, None) is None:
                raise GameNotFoundError(f"game {game_id} not found")
        logger.info("Removed game %s", game_id)

    async def clear(self) -> None:
        async with self._lock:
            self._games.clear()

    @staticmethod
    def _default_names(n: int) -> List[str]:
        base = ["Alice", "Bob", "Charlie", "Diana", "Eve"]
        if n <= len(base):
            return base[:n]
        return base + [f"P{i}" for i in range(len(base), n)]
