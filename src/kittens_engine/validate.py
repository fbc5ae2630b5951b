"""
Action validation.

Every helper raises ``RuleViolation`` on failure and returns the looked-up
objects on success, so the effect functions can rely on them.
"""

from typing import List

from .actions import RESPONSES, Action, NopeAction, PlayCardAction
from .constants import PENDING_DEFUSE_PLACE, CardType, is_collector
from .errors import (
    CARD_NOT_IN_HAND, EFFECT_PENDING, GAME_NOT_ACTIVE, INVALID_TARGET, NOT_YOUR_TURN,
    PENDING_MISMATCH, PLAYER_ELIMINATED, PLAYER_NOT_FOUND, SET_MISMATCH, RuleViolation,
)
from .models import Card, MatchState, Player


def require_playing(state: MatchState):
    if not state.is_playing:
        raise RuleViolation(GAME_NOT_ACTIVE, f"Game is not in progress (status: {state.status})")


def require_actor(state: MatchState, player_id: str) -> Player:
    """Actor must be seated and alive."""
    player = state.find_player(player_id)
    if player is None:
        raise RuleViolation(PLAYER_NOT_FOUND, "Player not found")
    if not player.alive:
        raise RuleViolation(PLAYER_ELIMINATED, "Player is eliminated")
    return player


def is_nope(state: MatchState, action: Action) -> bool:
    """True for a Nope action, or a single-card play of a Nope card."""
    if isinstance(action, NopeAction):
        return True
    if isinstance(action, PlayCardAction):
        player = state.find_player(action.player_id)
        card = player.find_card(action.card_id) if player else None
        return card is not None and card.type == CardType.NOPE
    return False


def check_pending_gate(state: MatchState, action: Action):
    """
    Enforce the pending action gate.

    With a pending action open only its addressee may act, and only with the
    matching response or a Nope. Without one, responses are rejected.
    """
    pending = state.pending_action
    response_types = tuple(RESPONSES.values())

    if pending is None:
        if isinstance(action, response_types):
            raise RuleViolation(PENDING_MISMATCH, f"Nothing to respond to with {action.type.value}")
        return

    if action.player_id != pending.player_id:
        raise RuleViolation(EFFECT_PENDING, "Waiting for another player to respond")

    if is_nope(state, action):
        if pending.type == PENDING_DEFUSE_PLACE:
            raise RuleViolation(PENDING_MISMATCH, "A defused kitten must be placed back in the deck")
        return

    if not isinstance(action, RESPONSES[pending.type]):
        raise RuleViolation(PENDING_MISMATCH, f"Must resolve pending {pending.type} first")


def require_turn(state: MatchState, player: Player):
    if state.current_player is None or state.current_player.id != player.id:
        raise RuleViolation(NOT_YOUR_TURN, "Not your turn")


def require_card(player: Player, card_id: str) -> Card:
    card = player.find_card(card_id)
    if card is None:
        raise RuleViolation(CARD_NOT_IN_HAND, "Card not in hand")
    return card


def require_collector_set(player: Player, card_ids: List[str]) -> List[Card]:
    """All cards owned, all collectors, all the same type."""
    cards = [require_card(player, card_id) for card_id in card_ids]
    first = cards[0].type
    if not is_collector(first):
        raise RuleViolation(SET_MISMATCH, "Only cat cards can be played as a set")
    if any(card.type != first for card in cards):
        raise RuleViolation(SET_MISMATCH, "All cards in a set must match")
    return cards


def require_target(state: MatchState, actor: Player, target_id: str, needs_cards: bool = True) -> Player:
    """Target must be another alive player, holding a card when needs_cards."""
    if not target_id:
        raise RuleViolation(INVALID_TARGET, "Must target a player")
    target = state.find_player(target_id)
    if target is None or not target.alive:
        raise RuleViolation(INVALID_TARGET, "Invalid target")
    if target.id == actor.id:
        raise RuleViolation(INVALID_TARGET, "Cannot target yourself")
    if needs_cards and not target.hand:
        raise RuleViolation(INVALID_TARGET, f"{target.name} has no cards")
    return target


def stealable_opponents(state: MatchState, actor_id: str) -> List[Player]:
    return [p for p in state.players if p.alive and p.id != actor_id and p.hand]
