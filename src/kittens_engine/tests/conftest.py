"""
Shared fixtures: hand-built match states with known hands and deck order.
"""

import random
from itertools import count

import pytest

from kittens_engine.constants import STATUS_PLAYING
from kittens_engine.models import Card, MatchState, Player

NAMES = ["Alice", "Bob", "Carol", "Dave", "Erin"]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_match():
    """
    Factory for a playing match.

    Hands and deck are given as lists of card types; card ids are
    "<type>-<n>" so tests can refer to them. Player ids are p0, p1, ...
    """
    ids = count()

    def card(card_type):
        return Card(id=f"{card_type.value}-{next(ids)}", type=card_type)

    def build(hands, deck=(), bots=(), current=0, turns=1, discard=()):
        players = [
            Player(
                id=f"p{i}",
                name=NAMES[i],
                hand=[card(t) for t in hand],
                is_bot=i in bots,
            )
            for i, hand in enumerate(hands)
        ]
        return MatchState(
            id="match-1",
            code="ABC123",
            host_id="p0",
            status=STATUS_PLAYING,
            players=players,
            deck=[card(t) for t in deck],
            discard=[card(t) for t in discard],
            current_player_index=current,
            turns_remaining=turns,
        )

    return build
