"""Game constants and utilities"""

from enum import Enum
from typing import Dict


class CardType(str, Enum):
    """Every card type in the deck."""
    EXPLODING_KITTEN = "exploding_kitten"
    DEFUSE = "defuse"
    ATTACK = "attack"
    SKIP = "skip"
    FAVOR = "favor"
    SHUFFLE = "shuffle"
    SEE_THE_FUTURE = "see_the_future"
    NOPE = "nope"
    TACO_CAT = "taco_cat"
    RAINBOW_CAT = "rainbow_cat"
    BEARD_CAT = "beard_cat"
    CATTERMELON = "cattermelon"
    POTATO_CAT = "potato_cat"


COLLECTOR_TYPES = [
    CardType.TACO_CAT,
    CardType.RAINBOW_CAT,
    CardType.BEARD_CAT,
    CardType.CATTERMELON,
    CardType.POTATO_CAT,
]

# Cards shuffled together before dealing; defuses and kittens are added afterwards
BASE_DECK_COUNTS: Dict[CardType, int] = {
    CardType.ATTACK: 4,
    CardType.SKIP: 4,
    CardType.FAVOR: 4,
    CardType.SHUFFLE: 4,
    CardType.SEE_THE_FUTURE: 5,
    CardType.NOPE: 5,
    **{cat: 4 for cat in COLLECTOR_TYPES},
}

# Match status
STATUS_WAITING = "waiting"
STATUS_PLAYING = "playing"
STATUS_FINISHED = "finished"

# Pending action kinds
PENDING_FAVOR_GIVE = "favor_give"
PENDING_DEFUSE_PLACE = "defuse_place"
PENDING_PEEK_FUTURE = "peek_future"
PENDING_STEAL_RANDOM = "steal_random"
PENDING_STEAL_NAMED = "steal_named"

# Redacted card placeholder
HIDDEN_CARD_ID = "hidden"
HIDDEN_CARD_TYPE = "hidden"

BOT_NAMES = ["Whiskers", "Mittens", "Shadow", "Patches"]

# How much a bot wants to keep a card; the lowest value is given away first
KEEP_PRIORITY: Dict[CardType, int] = {
    CardType.DEFUSE: 100,
    CardType.NOPE: 90,
    CardType.ATTACK: 80,
    CardType.SEE_THE_FUTURE: 70,
    CardType.SKIP: 60,
    CardType.SHUFFLE: 50,
    CardType.FAVOR: 40,
    **{cat: 10 for cat in COLLECTOR_TYPES},
}


def is_collector(card_type: CardType) -> bool:
    return card_type in COLLECTOR_TYPES


def card_label(card_type: CardType) -> str:
    """Human readable name used in log messages."""
    return CardType(card_type).value.replace("_", " ")
