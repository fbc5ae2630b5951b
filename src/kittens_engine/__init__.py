"""
Exploding Kittens game engine.
"""

from .actions import Action, ActionType, parse_action
from .engine import apply_action, create_match, join_match, start_match
from .errors import ConflictError, GameError, NotFoundError, PreconditionError, RuleViolation
from .models import Card, LogEntry, MatchState, PendingAction, Player
from .orchestrator import advance
from .rules import RuleConfig, create_rules, default_rules
from .serialization import project_state

__all__ = [
    "Action", "ActionType", "parse_action",
    "apply_action", "create_match", "join_match", "start_match",
    "ConflictError", "GameError", "NotFoundError", "PreconditionError", "RuleViolation",
    "Card", "LogEntry", "MatchState", "PendingAction", "Player",
    "advance",
    "RuleConfig", "create_rules", "default_rules",
    "project_state",
]
