"""
Greedy bot implementation with basic heuristics.
"""

import random
from typing import List, Optional

from .base import BaseBot
from ..actions import (
    Action, DefusePlaceAction, DrawAction, FavorGiveAction, PeekAckAction, PlayCardAction,
    PlayPairAction, StealNamedAction, StealRandomAction,
)
from ..constants import (
    KEEP_PRIORITY, PENDING_DEFUSE_PLACE, PENDING_FAVOR_GIVE, PENDING_PEEK_FUTURE,
    PENDING_STEAL_NAMED, PENDING_STEAL_RANDOM, CardType,
)
from ..models import Card, MatchState, Player


class GreedyBot(BaseBot):
    """
    Greedy bot that plays a cautious survival game.

    Strategy:
    - Answer pending prompts straight away
    - Look ahead, shuffle or dodge the draw when an explosion is likely
    - Cash in cat pairs, more eagerly with a big hand
    - Ask for favors when short on cards
    - Otherwise draw
    """

    # Danger thresholds for each defensive play
    PEEK_THRESHOLD = 0.3
    SHUFFLE_THRESHOLD = 0.4
    ATTACK_THRESHOLD = 0.3
    SKIP_THRESHOLD = 0.25

    def choose_action(self, state: MatchState) -> Optional[Action]:
        """Choose the best action for the current state."""
        player = self.get_player(state)
        if not state.is_playing or player is None or not player.alive:
            return None

        # Handle pending effects first
        if state.pending_action is not None:
            if self.has_pending(state):
                return self._respond_to_pending(state)
            return None

        if self.is_my_turn(state):
            return self._choose_turn_action(state)

        return None

    def _respond_to_pending(self, state: MatchState) -> Optional[Action]:
        pending = state.pending_action

        if pending.type == PENDING_FAVOR_GIVE:
            card = self._least_valuable_card(self.get_player_hand(state))
            if card is None:
                return None
            return FavorGiveAction(player_id=self.player_id, card_id=card.id)

        if pending.type == PENDING_DEFUSE_PLACE:
            # Near the top, but not always the same slot
            position = min(len(state.deck), self.rng.randint(1, 3))
            return DefusePlaceAction(player_id=self.player_id, position=position)

        if pending.type == PENDING_PEEK_FUTURE:
            return PeekAckAction(player_id=self.player_id)

        if pending.type == PENDING_STEAL_RANDOM:
            target = self._richest_opponent(self.get_opponents(state, with_cards=True))
            if target is None:
                return None
            return StealRandomAction(player_id=self.player_id, target_player_id=target.id)

        if pending.type == PENDING_STEAL_NAMED:
            target = self._richest_opponent(self.get_opponents(state, with_cards=True)
                                            or self.get_opponents(state))
            if target is None:
                return None
            return StealNamedAction(
                player_id=self.player_id,
                target_player_id=target.id,
                target_card_type=CardType.DEFUSE,
            )

        return None

    def _choose_turn_action(self, state: MatchState) -> Action:
        hand = self.get_player_hand(state)
        danger = self.danger_level(state)
        has_defuse = any(c.type == CardType.DEFUSE for c in hand)

        if danger > self.PEEK_THRESHOLD or not has_defuse:
            defensive = [
                (CardType.SEE_THE_FUTURE, -1.0),
                (CardType.SHUFFLE, self.SHUFFLE_THRESHOLD),
                (CardType.ATTACK, self.ATTACK_THRESHOLD),
                (CardType.SKIP, self.SKIP_THRESHOLD),
            ]
            for card_type, threshold in defensive:
                card = self.find_card(state, card_type)
                if card is not None and danger > threshold:
                    return PlayCardAction(player_id=self.player_id, card_id=card.id)

        pairs = self.find_pairs(state)
        if pairs and self.get_opponents(state, with_cards=True):
            chance = 0.75 if len(hand) >= 6 else 0.4
            if self.rng.random() < chance:
                return PlayPairAction(player_id=self.player_id, card_ids=[c.id for c in pairs[0]])

        if len(hand) < 4:
            favor = self.find_card(state, CardType.FAVOR)
            targets = self.get_opponents(state, with_cards=True)
            if favor is not None and targets:
                target = self.rng.choice(targets)
                return PlayCardAction(player_id=self.player_id, card_id=favor.id,
                                      target_player_id=target.id)

        return DrawAction(player_id=self.player_id)

    def _least_valuable_card(self, hand: List[Card]) -> Optional[Card]:
        """Cheapest card to give away, a Defuse only when nothing else is left."""
        candidates = [c for c in hand if c.type != CardType.DEFUSE] or hand
        if not candidates:
            return None
        return min(candidates, key=lambda c: KEEP_PRIORITY.get(c.type, 0))

    def _richest_opponent(self, opponents: List[Player]) -> Optional[Player]:
        """Opponent holding the most cards, ties broken at random."""
        if not opponents:
            return None
        most = max(len(p.hand) for p in opponents)
        return self.rng.choice([p for p in opponents if len(p.hand) == most])


def decide(state: MatchState, player_id: str, rng: Optional[random.Random] = None) -> Optional[Action]:
    """Bot policy entry point: next action for the given bot, or None."""
    return GreedyBot(player_id, rng).choose_action(state)
