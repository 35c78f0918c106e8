from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, HTTPException

from subway_deal import Action
from subway_deal.exceptions import GameNotFoundError, SessionLimitError
from subway_deal.settings import get_settings

from .registry import GameRegistry, GameSession
from .schemas import (
    ActionRequest,
    ActionResponse,
    CreateGameRequest,
    CreateGameResponse,
    DeleteGameResponse,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Subway Deal server (max %d sessions)", settings.max_sessions)

    yield

    logger.info("Shutting down, dropping %d sessions", len(registry))
    await registry.clear()


app = FastAPI(
    title="Subway Deal Server",
    version="0.1.0",
    lifespan=lifespan,
)
registry = GameRegistry(max_sessions=get_settings().max_sessions)


async def _get_session(game_id: str) -> GameSession:
    try:
        return await registry.get(game_id)
    except GameNotFoundError:
        raise HTTPException(status_code=404, detail="Game not found")


@app.post("/games", response_model=CreateGameResponse)
async def create_game(req: CreateGameRequest):
    seed = req.seed if req.seed is not None else get_settings().default_seed
    try:
        gid = await registry.create_game(
            player_names=req.players,
            num_players=req.num_players,
            seed=seed,
        )
    except SessionLimitError as exc:
        raise HTTPException(status_code=429, detail=str(exc))
    return CreateGameResponse(game_id=gid)


@app.get("/games/{game_id}/state")
async def get_state(game_id: str) -> Dict[str, Any]:
    session = await _get_session(game_id)
    return await session.public_state()


@app.get("/games/{game_id}/players/{player_id}/view")
async def get_player_view(game_id: str, player_id: str) -> Dict[str, Any]:
    session = await _get_session(game_id)
    view = await session.player_view(player_id)
    if view is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return view


@app.post(
    "/games/{game_id}/actions",
    response_model=ActionResponse,
    response_model_exclude_none=True,
)
async def apply_action(game_id: str, req: ActionRequest):
    session = await _get_session(game_id)
    try:
        action = Action.from_dict(req.model_dump())
    except ValueError:
        raise HTTPException(status_code=422, detail=f"unknown action type: {req.type}")

    result = await session.apply_action(action)
    return result.to_dict()


@app.delete("/games/{game_id}", response_model=DeleteGameResponse)
async def delete_game(game_id: str):
    try:
        await registry.remove(game_id)
    except GameNotFoundError:
        raise HTTPException(status_code=404, detail="Game not found")
    return DeleteGameResponse(game_id=game_id, deleted=True)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("server.app:app", host=settings.host, port=settings.port)
