"""
Card creation, shuffling and dealing utilities.
"""

import random
import uuid
from dataclasses import dataclass
from typing import List, Optional

from .constants import BASE_DECK_COUNTS, CardType
from .models import Card
from .rules import RuleConfig, default_rules


@dataclass
class DealtCards:
    deck: List[Card]
    hands: List[List[Card]]


def new_card_id() -> str:
    return uuid.uuid4().hex[:8]


def create_card(card_type: CardType) -> Card:
    """Create a card with a fresh unique id."""
    return Card(id=new_card_id(), type=card_type)


def create_base_cards() -> List[Card]:
    """Action and collector cards, before defuses and kittens are added."""
    cards = []
    for card_type, count in BASE_DECK_COUNTS.items():
        for _ in range(count):
            cards.append(create_card(card_type))
    return cards


def shuffle_cards(cards: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Shuffle a list of cards uniformly.

    Args:
        cards: Cards to shuffle
        rng: Optional random source for deterministic shuffling

    Returns:
        Shuffled copy of the cards
    """
    cards_copy = list(cards)
    (rng or random.Random()).shuffle(cards_copy)
    return cards_copy


def build_deck(
    player_count: int,
    rng: Optional[random.Random] = None,
    rules: RuleConfig = default_rules
) -> DealtCards:
    """
    Build the draw pile and the starting hands.

    Every hand gets `hand_size` shuffled cards plus one defuse. The leftover
    defuses and `player_count - 1` exploding kittens are mixed into what is
    left and shuffled again to form the draw pile.

    Args:
        player_count: Number of seated players (the caller checks the range)
        rng: Optional random source
        rules: Rule configuration

    Returns:
        DealtCards with the draw pile (index 0 drawn first) and one hand per seat
    """
    rng = rng or random.Random()
    remaining = shuffle_cards(create_base_cards(), rng)

    hands = []
    for _ in range(player_count):
        hand = remaining[:rules.hand_size]
        del remaining[:rules.hand_size]
        hand.append(create_card(CardType.DEFUSE))
        hands.append(hand)

    for _ in range(rules.extra_defuses(player_count)):
        remaining.append(create_card(CardType.DEFUSE))

    for _ in range(rules.kitten_count(player_count)):
        remaining.append(create_card(CardType.EXPLODING_KITTEN))

    return DealtCards(deck=shuffle_cards(remaining, rng), hands=hands)
