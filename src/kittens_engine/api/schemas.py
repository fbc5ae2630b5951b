"""
HTTP request and response models.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class GameMode(str, Enum):
    SINGLE = "single"
    MULTIPLAYER = "multiplayer"


class CreateGameRequest(BaseModel):
    """Create game request."""
    player_name: str = Field(..., min_length=1, max_length=50)
    avatar: int = Field(default=0, ge=0)
    mode: GameMode = GameMode.SINGLE
    bot_count: int = Field(default=1, ge=0, le=4)


class JoinGameRequest(BaseModel):
    """Join game request."""
    code: str = Field(..., min_length=1, max_length=12)
    player_name: str = Field(..., min_length=1, max_length=50)
    avatar: int = Field(default=0, ge=0)


class StartGameRequest(BaseModel):
    player_id: str = Field(..., min_length=1)


class GameCreatedResponse(BaseModel):
    game_id: str
    player_id: str
    code: str


class ErrorResponse(BaseModel):
    error: str
    code: str
    details: Optional[List[Dict[str, Any]]] = None
