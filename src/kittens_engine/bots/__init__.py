"""
Computer players.
"""

from .base import BaseBot
from .greedy import GreedyBot, decide

__all__ = ["BaseBot", "GreedyBot", "decide"]
