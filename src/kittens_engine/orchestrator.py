"""
Bot turn runner.

``advance`` keeps feeding bot decisions through the action processor until a
human has to act or the match is over.
"""

import logging
import random
from typing import Optional

from .bots.greedy import decide
from .engine import apply_action
from .errors import RuleViolation
from .models import MatchState, Player
from .rules import RuleConfig, default_rules

logger = logging.getLogger(__name__)


def bot_to_act(state: MatchState) -> Optional[Player]:
    """The bot that owes the next move, or None when it is up to a human."""
    if not state.is_playing:
        return None
    if state.pending_action is not None:
        responder = state.find_player(state.pending_action.player_id)
        if responder is not None and responder.is_bot and responder.alive:
            return responder
        return None
    current = state.current_player
    if current is not None and current.is_bot and current.alive:
        return current
    return None


def advance(
    state: MatchState,
    rng: Optional[random.Random] = None,
    rules: RuleConfig = default_rules
) -> MatchState:
    """
    Run bot moves until control returns to a human or the match ends.

    Never raises for bot mistakes: a rejected bot action, a step that makes no
    progress or hitting ``rules.bot_step_limit`` is logged and the last good
    state is returned.
    """
    rng = rng or random.Random()

    for _ in range(rules.bot_step_limit):
        bot = bot_to_act(state)
        if bot is None:
            return state

        action = decide(state, bot.id, rng)
        if action is None:
            logger.warning(f"Match {state.id}: bot {bot.name} had no move")
            return state

        logger.info(f"Match {state.id}: bot {bot.name} -> {action.type.value}")
        try:
            new_state = apply_action(state, action, rng, rules)
        except RuleViolation as e:
            logger.error(f"Match {state.id}: bot {bot.name} action rejected: {e}")
            return state

        if new_state.revision <= state.revision:
            logger.error(f"Match {state.id}: bot step made no progress, stopping")
            return state
        state = new_state

    if bot_to_act(state) is not None:
        logger.error(f"Match {state.id}: bot step limit ({rules.bot_step_limit}) reached")
    return state
