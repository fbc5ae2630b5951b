# src/kittens_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class RuleViolation(GameError):
    """An action broke a rule. The match state is left untouched."""


class NotFoundError(GameError):
    """Unknown match id or join code."""


class PreconditionError(GameError):
    """Lobby operation attempted in the wrong match status or seating."""


class ConflictError(GameError):
    """A write was based on a revision that is no longer current."""


# Rule violation codes
NOT_YOUR_TURN = "NOT_YOUR_TURN"
PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
PLAYER_ELIMINATED = "PLAYER_ELIMINATED"
CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
EFFECT_PENDING = "EFFECT_PENDING"
PENDING_MISMATCH = "PENDING_MISMATCH"
INVALID_TARGET = "INVALID_TARGET"
SET_MISMATCH = "SET_MISMATCH"
COLLECTOR_SINGLE = "COLLECTOR_SINGLE"
CARD_NOT_PLAYABLE = "CARD_NOT_PLAYABLE"
MALFORMED_ACTION = "MALFORMED_ACTION"
DECK_EMPTY = "DECK_EMPTY"
GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"

# Lookup / lobby / storage codes
MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
ALREADY_STARTED = "ALREADY_STARTED"
MATCH_FULL = "MATCH_FULL"
NOT_HOST = "NOT_HOST"
STALE_REVISION = "STALE_REVISION"

