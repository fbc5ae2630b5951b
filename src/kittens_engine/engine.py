"""
Match lifecycle and the action processor.

``apply_action`` is the single transition function of the game. It never
mutates the state it is given: the action is validated and applied to a deep
copy, and the copy is returned only when every step succeeded.
"""

import copy
import logging
import random
import uuid
from typing import Optional, Tuple

from . import effects
from .actions import (
    Action, ActionType, DefusePlaceAction, FavorGiveAction, NopeAction, PlayCardAction,
    PlayPairAction, PlayTripleAction, StealNamedAction, StealRandomAction,
)
from .constants import BOT_NAMES, STATUS_PLAYING, STATUS_WAITING, CardType, is_collector
from .errors import (
    ALREADY_STARTED, CARD_NOT_PLAYABLE, COLLECTOR_SINGLE, DECK_EMPTY, INVALID_TARGET, MATCH_FULL,
    NOT_ENOUGH_PLAYERS, PreconditionError, RuleViolation,
)
from .models import MatchState, Player
from .rules import RuleConfig, default_rules
from .shuffle import build_deck
from .validate import (
    check_pending_gate, require_actor, require_card, require_collector_set, require_playing,
    require_target, require_turn, stealable_opponents,
)

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _new_code() -> str:
    return uuid.uuid4().hex[:6].upper()


def create_match(
    host_name: str,
    host_id: Optional[str] = None,
    host_avatar: int = 0,
    multiplayer: bool = False,
    bot_count: int = 0,
    rules: RuleConfig = default_rules
) -> MatchState:
    """
    Create a match in the waiting state with the host at seat 0.

    Single-player matches are seated with bots straight away; multiplayer
    matches wait for other humans to join by code.
    """
    host = Player(
        id=host_id or _new_id(),
        name=host_name[:rules.name_max_length],
        avatar=host_avatar,
    )
    state = MatchState(id=_new_id(), code=_new_code(), host_id=host.id, players=[host],
                       is_multiplayer=multiplayer)

    if not multiplayer:
        bot_count = max(1, min(bot_count, rules.max_players - 1, len(BOT_NAMES)))
        for i in range(bot_count):
            state.players.append(Player(
                id="bot_" + uuid.uuid4().hex[:6],
                name=BOT_NAMES[i],
                is_bot=True,
                avatar=i + 1,
            ))

    state.add_log(f"{host.name} created the game.", host.id)
    logger.info(f"Created match {state.id} (code {state.code}) with {len(state.players)} players")
    return state


def join_match(
    state: MatchState,
    name: str,
    avatar: int = 0,
    player_id: Optional[str] = None,
    rules: RuleConfig = default_rules
) -> Tuple[MatchState, str]:
    """Seat a new human player. Returns the new state and the player's id."""
    if state.status != STATUS_WAITING:
        raise PreconditionError(ALREADY_STARTED, "Game already started")
    if len(state.players) >= rules.max_players:
        raise PreconditionError(MATCH_FULL, "Game is full")

    new_state = copy.deepcopy(state)
    player = Player(id=player_id or _new_id(), name=name[:rules.name_max_length], avatar=avatar)
    new_state.players.append(player)
    new_state.add_log(f"{player.name} joined the game.", player.id, rules.max_log_entries)
    new_state.increment_revision()
    return new_state, player.id


def start_match(
    state: MatchState,
    rng: Optional[random.Random] = None,
    rules: RuleConfig = default_rules
) -> MatchState:
    """Deal the cards and move the match from waiting to playing."""
    if state.status != STATUS_WAITING:
        raise PreconditionError(ALREADY_STARTED, "Game already started")
    if not rules.validate_player_count(len(state.players)):
        raise PreconditionError(NOT_ENOUGH_PLAYERS, f"Need at least {rules.min_players} players")

    new_state = copy.deepcopy(state)
    dealt = build_deck(len(new_state.players), rng, rules)
    for player, hand in zip(new_state.players, dealt.hands):
        player.hand = hand
        player.alive = True
    new_state.deck = dealt.deck
    new_state.discard = []
    new_state.status = STATUS_PLAYING
    new_state.current_player_index = 0
    new_state.turns_remaining = 1
    new_state.pending_action = None
    new_state.winner_id = None
    new_state.log = []
    new_state.add_log("Game started!")
    new_state.increment_revision()
    logger.info(f"Match {new_state.id} started with {len(new_state.players)} players")
    return new_state


# Handlers receive the working copy, the validated actor and the action

def _play_card(state: MatchState, player: Player, action: PlayCardAction, rng, rules):
    card = require_card(player, action.card_id)
    if card.type == CardType.NOPE:
        effects.play_nope(state, player, card)
        return

    require_turn(state, player)
    if card.type == CardType.ATTACK:
        effects.play_attack(state, player, card)
    elif card.type == CardType.SKIP:
        effects.play_skip(state, player, card)
    elif card.type == CardType.SHUFFLE:
        effects.play_shuffle(state, player, card, rng)
    elif card.type == CardType.SEE_THE_FUTURE:
        effects.play_see_the_future(state, player, card, rules.peek_count)
    elif card.type == CardType.FAVOR:
        target = require_target(state, player, action.target_player_id)
        effects.play_favor(state, player, card, target)
    elif is_collector(card.type):
        raise RuleViolation(COLLECTOR_SINGLE, "Cat cards can only be played in pairs or triples")
    else:
        raise RuleViolation(CARD_NOT_PLAYABLE, f"{card.type.value} cannot be played")


def _nope(state: MatchState, player: Player, action: NopeAction, rng, rules):
    card = require_card(player, action.card_id)
    if card.type != CardType.NOPE:
        raise RuleViolation(CARD_NOT_PLAYABLE, "That card is not a Nope")
    effects.play_nope(state, player, card)


def _play_pair(state: MatchState, player: Player, action: PlayPairAction, rng, rules):
    require_turn(state, player)
    cards = require_collector_set(player, action.card_ids)
    if not stealable_opponents(state, player.id):
        raise RuleViolation(INVALID_TARGET, "No opponent has a card to steal")
    effects.play_pair(state, player, cards)


def _play_triple(state: MatchState, player: Player, action: PlayTripleAction, rng, rules):
    require_turn(state, player)
    cards = require_collector_set(player, action.card_ids)
    effects.play_triple(state, player, cards)


def _draw(state: MatchState, player: Player, action, rng, rules):
    require_turn(state, player)
    if not state.deck:
        raise RuleViolation(DECK_EMPTY, "Deck is empty")
    effects.draw_card(state, player)


def _defuse_place(state: MatchState, player: Player, action: DefusePlaceAction, rng, rules):
    position = action.position
    if position is None:
        position = rng.randint(0, len(state.deck))
    effects.place_defused_kitten(state, player, position)


def _favor_give(state: MatchState, player: Player, action: FavorGiveAction, rng, rules):
    card = require_card(player, action.card_id)
    effects.give_favor(state, player, card)


def _peek_ack(state: MatchState, player: Player, action, rng, rules):
    effects.acknowledge_peek(state, player)


def _steal_random(state: MatchState, player: Player, action: StealRandomAction, rng, rules):
    target = require_target(state, player, action.target_player_id)
    effects.steal_random(state, player, target, rng)


def _steal_named(state: MatchState, player: Player, action: StealNamedAction, rng, rules):
    target = require_target(state, player, action.target_player_id, needs_cards=False)
    effects.steal_named(state, player, target, action.target_card_type)


HANDLERS = {
    ActionType.PLAY_CARD: _play_card,
    ActionType.NOPE: _nope,
    ActionType.PLAY_PAIR: _play_pair,
    ActionType.PLAY_TRIPLE: _play_triple,
    ActionType.DRAW: _draw,
    ActionType.DEFUSE_PLACE: _defuse_place,
    ActionType.FAVOR_GIVE: _favor_give,
    ActionType.PEEK_ACK: _peek_ack,
    ActionType.STEAL_RANDOM: _steal_random,
    ActionType.STEAL_NAMED: _steal_named,
}


def apply_action(
    state: MatchState,
    action: Action,
    rng: Optional[random.Random] = None,
    rules: RuleConfig = default_rules
) -> MatchState:
    """
    Validate and apply one action.

    Args:
        state: Current match state (left untouched)
        action: Parsed action
        rng: Optional random source for shuffles, random steals and placements
        rules: Rule configuration

    Returns:
        A new match state with the revision advanced by one

    Raises:
        RuleViolation: If the action is not legal in this state
    """
    rng = rng or random.Random()
    require_playing(state)

    new_state = copy.deepcopy(state)
    player = require_actor(new_state, action.player_id)
    check_pending_gate(new_state, action)
    HANDLERS[action.type](new_state, player, action, rng, rules)

    if len(new_state.log) > rules.max_log_entries:
        del new_state.log[:len(new_state.log) - rules.max_log_entries]
    new_state.increment_revision()
    logger.debug(f"Match {new_state.id}: {player.name} {action.type.value} -> revision {new_state.revision}")
    return new_state
