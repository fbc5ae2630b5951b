"""
Telemetry sinks for player statistics.

The game core never reports anything itself. ``GameService`` compares the
state before and after each committed transition and records events here.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Any, Dict

logger = logging.getLogger(__name__)

# Event names
ACTION_APPLIED = "action_applied"
PLAYER_ELIMINATED = "player_eliminated"
DEFUSE_USED = "defuse_used"
CARD_STOLEN = "card_stolen"
MATCH_FINISHED = "match_finished"

# Experience awarded per event
XP_WIN = 120
XP_STREAK_STEP = 8
XP_STREAK_CAP = 60
XP_LOSS = 35
XP_EXPLOSION = 8
XP_CARD_PLAYED = 6
XP_CARD_STOLEN = 16
XP_DEFUSE_USED = 20

BASE_LEVEL_XP = 120
LEVEL_XP_STEP = 40


class TelemetrySink(ABC):
    """Receives game events from the service layer."""

    @abstractmethod
    def record(self, event: str, payload: Dict[str, Any]):
        pass

    def get_stats(self, player_id: str) -> Dict[str, Any]:
        """Stats for a player; sinks that keep nothing report a blank record."""
        return stats_to_dict(PlayerStats())


class NullTelemetry(TelemetrySink):
    def record(self, event: str, payload: Dict[str, Any]):
        pass


@dataclass
class PlayerStats:
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    explosions: int = 0
    cards_played: int = 0
    cards_stolen: int = 0
    defuses_used: int = 0
    win_streak: int = 0
    best_win_streak: int = 0
    xp: int = 0

    @property
    def level(self) -> int:
        return level_for_xp(self.xp)


def stats_to_dict(stats: PlayerStats) -> Dict[str, Any]:
    result = asdict(stats)
    result["level"] = stats.level
    return result


def level_for_xp(xp: int) -> int:
    """Each level needs LEVEL_XP_STEP more experience than the one before."""
    level = 1
    level_start = 0
    required = BASE_LEVEL_XP
    while xp >= level_start + required:
        level_start += required
        required += LEVEL_XP_STEP
        level += 1
    return level


class StatsTelemetry(TelemetrySink):
    """Per-player counters kept in memory, bots excluded."""

    def __init__(self):
        self._stats: Dict[str, PlayerStats] = defaultdict(PlayerStats)
        self._lock = threading.Lock()

    def record(self, event: str, payload: Dict[str, Any]):
        if payload.get("is_bot"):
            return
        player_id = payload.get("player_id")
        if not player_id:
            return

        with self._lock:
            stats = self._stats[player_id]
            if event == ACTION_APPLIED:
                if payload.get("cards_played"):
                    stats.cards_played += payload["cards_played"]
                    stats.xp += XP_CARD_PLAYED * payload["cards_played"]
            elif event == CARD_STOLEN:
                stats.cards_stolen += 1
                stats.xp += XP_CARD_STOLEN
            elif event == DEFUSE_USED:
                stats.defuses_used += 1
                stats.xp += XP_DEFUSE_USED
            elif event == PLAYER_ELIMINATED:
                stats.explosions += 1
                stats.xp += XP_EXPLOSION
            elif event == MATCH_FINISHED:
                self._record_result(stats, payload.get("won", False))
            else:
                logger.debug(f"Ignoring telemetry event {event}")

    def _record_result(self, stats: PlayerStats, won: bool):
        stats.games_played += 1
        if won:
            stats.wins += 1
            stats.win_streak += 1
            stats.best_win_streak = max(stats.best_win_streak, stats.win_streak)
            stats.xp += XP_WIN + min(XP_STREAK_CAP, max(0, stats.win_streak - 1) * XP_STREAK_STEP)
        else:
            stats.losses += 1
            stats.win_streak = 0
            stats.xp += XP_LOSS

    def get_stats(self, player_id: str) -> Dict[str, Any]:
        with self._lock:
            return stats_to_dict(self._stats.get(player_id) or PlayerStats())
