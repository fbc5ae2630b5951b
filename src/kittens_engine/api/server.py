"""
FastAPI HTTP server for the Exploding Kittens game.

Clients poll for changes; there is no push channel.
"""

import logging
from typing import Any, Dict, Optional

import orjson
from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from ..errors import (
    MALFORMED_ACTION, ConflictError, GameError, NotFoundError, PreconditionError, NOT_HOST,
)
from ..service import GameService
from ..telemetry import StatsTelemetry
from .schemas import (
    CreateGameRequest, ErrorResponse, GameCreatedResponse, GameMode, JoinGameRequest,
    StartGameRequest,
)

logger = logging.getLogger(__name__)


class ORJSONResponse(Response):
    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        return orjson.dumps(content)


def _status_for(error: GameError) -> int:
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ConflictError):
        return 409
    if isinstance(error, PreconditionError) and error.code == NOT_HOST:
        return 403
    return 400


def create_app(service: Optional[GameService] = None) -> FastAPI:
    """Build the application around a game service (in-memory store and stats by default)."""
    if service is None:
        service = GameService(telemetry=StatsTelemetry())

    app = FastAPI(title="Exploding Kittens API", version="1.0.0", default_response_class=ORJSONResponse)
    app.state.service = service

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError):
        status = _status_for(exc)
        logger.info(f"{request.method} {request.url.path} -> {status}: {exc}")
        body = ErrorResponse(error=exc.message, code=exc.code)
        return ORJSONResponse(body.model_dump(exclude_none=True), status_code=status)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]
        body = ErrorResponse(error="Invalid request", code=MALFORMED_ACTION, details=errors)
        return ORJSONResponse(body.model_dump(exclude_none=True), status_code=400)

    @app.get("/")
    async def root():
        return {"message": "Exploding Kittens API", "version": "1.0.0"}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    @app.post("/games", response_model=GameCreatedResponse)
    def create_game(request: CreateGameRequest):
        state, player_id = service.create_game(
            request.player_name,
            avatar=request.avatar,
            multiplayer=request.mode == GameMode.MULTIPLAYER,
            bot_count=request.bot_count,
        )
        return GameCreatedResponse(game_id=state.id, player_id=player_id, code=state.code)

    @app.post("/games/join", response_model=GameCreatedResponse)
    def join_game(request: JoinGameRequest):
        state, player_id = service.join_game(request.code, request.player_name, request.avatar)
        return GameCreatedResponse(game_id=state.id, player_id=player_id, code=state.code)

    @app.get("/games/lobby/{code}")
    def get_lobby(code: str):
        return service.get_lobby(code)

    @app.get("/games/{game_id}")
    def get_game(game_id: str, player_id: Optional[str] = None):
        return {"game": service.get_view(game_id, player_id)}

    @app.post("/games/{game_id}/start")
    def start_game(game_id: str, request: StartGameRequest):
        return {"game": service.start_game(game_id, request.player_id)}

    @app.post("/games/{game_id}/action")
    def submit_action(game_id: str, payload: Dict[str, Any] = Body(...)):
        return {"game": service.submit_action(game_id, payload)}

    @app.get("/games/{game_id}/poll")
    def poll(game_id: str, player_id: Optional[str] = None, last_revision: int = 0):
        return service.poll(game_id, player_id, last_revision)

    @app.get("/players/{player_id}/stats")
    def player_stats(player_id: str):
        return service.get_player_stats(player_id)

    return app


app = create_app()
