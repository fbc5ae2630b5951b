"""
Application service: the read-modify-write cycle around the game core.

Each public method loads a match from the store, runs the engine (and the bot
orchestrator where bots may owe moves), saves the result conditionally on the
revision it loaded, and returns the caller's projection.
"""

import logging
import random
import threading
from collections import defaultdict
from typing import Any, Dict, List, Optional, Tuple, Union

from .actions import Action, ActionType, parse_action
from .constants import PENDING_DEFUSE_PLACE, STATUS_FINISHED, STATUS_PLAYING
from .engine import apply_action, create_match, join_match, start_match
from .errors import MATCH_NOT_FOUND, NOT_HOST, NotFoundError, PreconditionError, RuleViolation
from .models import MatchState
from .orchestrator import advance, bot_to_act
from .rules import RuleConfig, default_rules
from .serialization import get_public_match_info, project_state
from .store import InMemoryMatchStore, MatchStore
from . import telemetry as events
from .telemetry import NullTelemetry, TelemetrySink

logger = logging.getLogger(__name__)

CARDS_PER_PLAY = {
    ActionType.PLAY_CARD: 1,
    ActionType.NOPE: 1,
    ActionType.PLAY_PAIR: 2,
    ActionType.PLAY_TRIPLE: 3,
}


class GameService:
    def __init__(
        self,
        store: Optional[MatchStore] = None,
        rules: RuleConfig = default_rules,
        telemetry: Optional[TelemetrySink] = None,
        rng: Optional[random.Random] = None
    ):
        self.store = store if store is not None else InMemoryMatchStore()
        self.rules = rules
        self.telemetry = telemetry if telemetry is not None else NullTelemetry()
        self.rng = rng if rng is not None else random.Random()
        self.match_locks = defaultdict(threading.Lock)

    def _load(self, match_id: str) -> MatchState:
        state = self.store.load(match_id)
        if state is None:
            raise NotFoundError(MATCH_NOT_FOUND, "Game not found")
        return state

    def create_game(
        self,
        player_name: str,
        avatar: int = 0,
        multiplayer: bool = False,
        bot_count: int = 1
    ) -> Tuple[MatchState, str]:
        """Create a match; single-player matches start straight away."""
        self.purge_stale()
        state = create_match(player_name, host_avatar=avatar, multiplayer=multiplayer,
                             bot_count=bot_count, rules=self.rules)
        if not multiplayer:
            state = start_match(state, self.rng, self.rules)
            state = advance(state, self.rng, self.rules)
        self.store.save(state)
        logger.info(f"Game {state.id} created by {player_name} (multiplayer={multiplayer})")
        return state, state.host_id

    def join_game(self, code: str, player_name: str, avatar: int = 0) -> Tuple[MatchState, str]:
        found = self.store.load_by_code(code)
        if found is None:
            raise NotFoundError(MATCH_NOT_FOUND, "Game not found")

        with self.match_locks[found.id]:
            state = self._load(found.id)
            new_state, player_id = join_match(state, player_name, avatar, rules=self.rules)
            self.store.save(new_state, expected_revision=state.revision)
        logger.info(f"{player_name} joined game {new_state.id}")
        return new_state, player_id

    def start_game(self, match_id: str, player_id: str) -> Dict[str, Any]:
        with self.match_locks[match_id]:
            state = self._load(match_id)
            if state.host_id != player_id:
                raise PreconditionError(NOT_HOST, "Only the host can start the game")
            new_state = start_match(state, self.rng, self.rules)
            new_state = advance(new_state, self.rng, self.rules)
            self.store.save(new_state, expected_revision=state.revision)
        logger.info(f"Game {match_id} started by host")
        return project_state(new_state, player_id)

    def submit_action(self, match_id: str, payload: Union[Dict[str, Any], Action]) -> Dict[str, Any]:
        """
        Apply a player's action, then let the bots move.

        Args:
            match_id: Match to act on
            payload: Raw action data or a parsed action

        Returns:
            The submitting player's view of the resulting state

        Raises:
            NotFoundError: Unknown match
            RuleViolation: Illegal or malformed action
            ConflictError: The match changed while the action was processed
        """
        action = payload if not isinstance(payload, dict) else parse_action(payload)

        with self.match_locks[match_id]:
            state = self._load(match_id)
            try:
                applied = apply_action(state, action, self.rng, self.rules)
            except RuleViolation as e:
                logger.info(f"Rejected {action.type.value} from {action.player_id} in {match_id}: {e}")
                raise
            new_state = advance(applied, self.rng, self.rules)
            self.store.save(new_state, expected_revision=state.revision)

        self._emit_action_events(state, applied, action)
        self._emit_outcome_events(state, new_state)
        return project_state(new_state, action.player_id)

    def get_view(self, match_id: str, player_id: Optional[str] = None) -> Dict[str, Any]:
        """Projection for a player, or a spectator view with every hand hidden."""
        return project_state(self._load(match_id), player_id)

    def get_lobby(self, code: str) -> Dict[str, Any]:
        state = self.store.load_by_code(code)
        if state is None:
            raise NotFoundError(MATCH_NOT_FOUND, "Game not found")
        return get_public_match_info(state)

    def poll(self, match_id: str, player_id: Optional[str] = None, last_revision: int = 0) -> Dict[str, Any]:
        """
        Report whether the match moved past `last_revision`.

        Bot moves still owed (for instance once every human has exploded) are
        run here, so a watching client sees the match play out.
        """
        state = self._load(match_id)
        if state.status == STATUS_PLAYING and bot_to_act(state) is not None:
            with self.match_locks[match_id]:
                current = self._load(match_id)
                advanced = advance(current, self.rng, self.rules)
                if advanced.revision != current.revision:
                    self.store.save(advanced, expected_revision=current.revision)
                    self._emit_outcome_events(current, advanced)
                state = advanced

        if state.revision <= last_revision:
            return {"changed": False, "revision": state.revision}
        return {"changed": True, "revision": state.revision, "game": project_state(state, player_id)}

    def purge_stale(self) -> List[str]:
        purged = self.store.purge_older_than(self.rules.stale_match_seconds)
        for match_id in purged:
            self.match_locks.pop(match_id, None)
        return purged

    def get_player_stats(self, player_id: str) -> Dict[str, Any]:
        return self.telemetry.get_stats(player_id)

    def _emit_action_events(self, before: MatchState, after: MatchState, action: Action):
        actor = after.find_player(action.player_id)
        is_bot = actor.is_bot if actor else False
        self.telemetry.record(events.ACTION_APPLIED, {
            "match_id": after.id,
            "player_id": action.player_id,
            "is_bot": is_bot,
            "action": action.type.value,
            "cards_played": CARDS_PER_PLAY.get(action.type, 0),
        })

        pending = after.pending_action
        if (action.type == ActionType.DRAW and pending is not None
                and pending.type == PENDING_DEFUSE_PLACE and pending.player_id == action.player_id):
            self.telemetry.record(events.DEFUSE_USED, {
                "match_id": after.id, "player_id": action.player_id, "is_bot": is_bot,
            })

        if action.type in (ActionType.STEAL_RANDOM, ActionType.STEAL_NAMED):
            old_hand = before.find_player(action.player_id).hand
            if actor is not None and len(actor.hand) > len(old_hand):
                self.telemetry.record(events.CARD_STOLEN, {
                    "match_id": after.id, "player_id": action.player_id, "is_bot": is_bot,
                })

    def _emit_outcome_events(self, before: MatchState, after: MatchState):
        for old, new in zip(before.players, after.players):
            if old.alive and not new.alive:
                self.telemetry.record(events.PLAYER_ELIMINATED, {
                    "match_id": after.id, "player_id": new.id, "is_bot": new.is_bot,
                })

        if before.status != STATUS_FINISHED and after.status == STATUS_FINISHED:
            logger.info(f"Game {after.id} finished, winner {after.winner_id}")
            for player in after.players:
                self.telemetry.record(events.MATCH_FINISHED, {
                    "match_id": after.id,
                    "player_id": player.id,
                    "is_bot": player.is_bot,
                    "won": player.id == after.winner_id,
                })
