"""Game models and data structures"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from .constants import CardType, STATUS_PLAYING, STATUS_WAITING


@dataclass(frozen=True)
class Card:
    id: str
    type: CardType


@dataclass
class Player:
    id: str
    name: str
    hand: List[Card] = field(default_factory=list)  # acquisition order
    alive: bool = True
    is_bot: bool = False
    avatar: int = 0

    def find_card(self, card_id: str) -> Optional[Card]:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def first_of(self, card_type: CardType) -> Optional[Card]:
        return next((card for card in self.hand if card.type == card_type), None)

    def remove_card(self, card_id: str) -> Card:
        card = self.find_card(card_id)
        self.hand.remove(card)
        return card


@dataclass
class LogEntry:
    message: str
    timestamp: float
    player_id: Optional[str] = None


@dataclass
class PendingAction:
    type: str  # favor_give|defuse_place|peek_future|steal_random|steal_named
    player_id: str  # player who must respond
    source_player_id: Optional[str] = None  # player who triggered it
    cards: List[Card] = field(default_factory=list)  # peek_future payload, draw order
    held_card: Optional[Card] = None  # elimination card waiting to be placed
    card_played: Optional[CardType] = None


@dataclass
class MatchState:
    id: str
    code: str
    host_id: str
    status: str = STATUS_WAITING  # waiting|playing|finished
    players: List[Player] = field(default_factory=list)  # seating order
    deck: List[Card] = field(default_factory=list)  # index 0 is drawn next
    discard: List[Card] = field(default_factory=list)  # index 0 is oldest
    current_player_index: int = 0
    turns_remaining: int = 1
    pending_action: Optional[PendingAction] = None
    winner_id: Optional[str] = None
    log: List[LogEntry] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)
    is_multiplayer: bool = False
    revision: int = 0

    def add_log(self, message: str, player_id: Optional[str] = None, max_entries: Optional[int] = None):
        self.log.append(LogEntry(message=message, timestamp=time.time(), player_id=player_id))
        if max_entries is not None and len(self.log) > max_entries:
            del self.log[:len(self.log) - max_entries]

    def increment_revision(self):
        self.revision += 1
        self.updated_at = time.time()

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    @property
    def current_player(self) -> Optional[Player]:
        if not self.players:
            return None
        return self.players[self.current_player_index]

    @property
    def is_playing(self) -> bool:
        return self.status == STATUS_PLAYING

    def alive_players(self) -> List[Player]:
        return [p for p in self.players if p.alive]

    def next_alive_index(self, from_index: int) -> int:
        """Next seat after from_index whose player is still alive."""
        count = len(self.players)
        index = (from_index + 1) % count
        while not self.players[index].alive:
            if index == from_index:
                break
            index = (index + 1) % count
        return index

    def total_cards(self) -> int:
        """Cards across every zone, including one held for defuse placement."""
        total = sum(len(p.hand) for p in self.players) + len(self.deck) + len(self.discard)
        if self.pending_action is not None and self.pending_action.held_card is not None:
            total += 1
        return total
