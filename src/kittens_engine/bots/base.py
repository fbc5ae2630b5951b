"""
Base bot interface and utilities.
"""

import random
from abc import ABC, abstractmethod
from typing import List, Optional

from ..actions import Action
from ..constants import CardType, is_collector
from ..models import Card, MatchState, Player


class BaseBot(ABC):
    """Abstract base class for bot players."""

    def __init__(self, player_id: str, rng: Optional[random.Random] = None):
        self.player_id = player_id
        self.rng = rng or random.Random()

    @abstractmethod
    def choose_action(self, state: MatchState) -> Optional[Action]:
        """
        Choose an action based on the current game state.

        Args:
            state: Current match state

        Returns:
            Action to take, or None if the bot has nothing to do
        """
        pass

    def get_player(self, state: MatchState) -> Optional[Player]:
        return state.find_player(self.player_id)

    def get_player_hand(self, state: MatchState) -> List[Card]:
        """Get this bot's current hand."""
        player = self.get_player(state)
        return player.hand if player else []

    def is_my_turn(self, state: MatchState) -> bool:
        """Check if it's this bot's turn."""
        current = state.current_player
        return current is not None and current.id == self.player_id

    def has_pending(self, state: MatchState) -> bool:
        """Check if a pending action is waiting on this bot."""
        return state.pending_action is not None and state.pending_action.player_id == self.player_id

    def find_card(self, state: MatchState, card_type: CardType) -> Optional[Card]:
        player = self.get_player(state)
        return player.first_of(card_type) if player else None

    def get_opponents(self, state: MatchState, with_cards: bool = False) -> List[Player]:
        """Alive players other than this bot."""
        return [
            p for p in state.players
            if p.alive and p.id != self.player_id and (p.hand or not with_cards)
        ]

    def find_pairs(self, state: MatchState) -> List[List[Card]]:
        """Matching collector pairs in hand, grouped by type."""
        by_type = {}
        for card in self.get_player_hand(state):
            if is_collector(card.type):
                by_type.setdefault(card.type, []).append(card)
        pairs = []
        for cards in by_type.values():
            for i in range(0, len(cards) - 1, 2):
                pairs.append(cards[i:i + 2])
        return pairs

    def danger_level(self, state: MatchState) -> float:
        """Chance that the top card is an Exploding Kitten, assuming a uniform deck."""
        if not state.deck:
            return 0.0
        kittens = len(state.alive_players()) - 1
        return kittens / len(state.deck)
