from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class CreateGameRequest(BaseModel):
    players: Optional[List[str]] = Field(default=None, min_length=2, max_length=5)
    num_players: int = Field(default=2, ge=2, le=5)
    seed: Optional[int] = None


class CreateGameResponse(BaseModel):
    game_id: str


class ActionRequest(BaseModel):
    """Inbound action in its wire shape."""

    type: str
    playerId: str
    data: Dict[str, str] = Field(default_factory=dict)


class PaymentDTO(BaseModel):
    fromPlayer: str
    amount: int
    shortfall: int = 0


class ActionResponse(BaseModel):
    success: bool
    message: str = ""
    error: Optional[str] = None
    payments: Optional[List[PaymentDTO]] = None
    pendingAction: Optional[bool] = None


class DeleteGameResponse(BaseModel):
    game_id: str
    deleted: bool
