"""
Match persistence.

Matches are stored as one opaque blob per match id with a secondary index on
the join code. Writes can be made conditional on the revision they were based
on, so two requests racing on one match cannot silently overwrite each other.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .errors import STALE_REVISION, ConflictError
from .models import MatchState
from .serialization import dumps_match, loads_match

logger = logging.getLogger(__name__)


class MatchStore(ABC):
    """Key-value store for matches, keyed by id and join code."""

    @abstractmethod
    def load(self, match_id: str) -> Optional[MatchState]:
        pass

    @abstractmethod
    def load_by_code(self, code: str) -> Optional[MatchState]:
        pass

    @abstractmethod
    def save(self, state: MatchState, expected_revision: Optional[int] = None):
        """
        Store a match.

        Raises:
            ConflictError: If expected_revision is given and the stored match
                is at a different revision
        """
        pass

    @abstractmethod
    def purge_older_than(self, seconds: float) -> List[str]:
        """Drop matches not updated for `seconds`; returns the dropped ids."""
        pass


class InMemoryMatchStore(MatchStore):
    def __init__(self):
        self._blobs: Dict[str, bytes] = {}
        self._codes: Dict[str, str] = {}
        self._revisions: Dict[str, int] = {}
        self._updated: Dict[str, float] = {}
        self._lock = threading.Lock()

    def load(self, match_id: str) -> Optional[MatchState]:
        with self._lock:
            blob = self._blobs.get(match_id)
        return loads_match(blob) if blob is not None else None

    def load_by_code(self, code: str) -> Optional[MatchState]:
        with self._lock:
            match_id = self._codes.get(code.upper())
        return self.load(match_id) if match_id else None

    def save(self, state: MatchState, expected_revision: Optional[int] = None):
        blob = dumps_match(state)
        with self._lock:
            if expected_revision is not None:
                stored = self._revisions.get(state.id)
                if stored != expected_revision:
                    raise ConflictError(
                        STALE_REVISION,
                        f"Match {state.id} changed (revision {stored}, expected {expected_revision})"
                    )
            self._blobs[state.id] = blob
            self._codes[state.code.upper()] = state.id
            self._revisions[state.id] = state.revision
            self._updated[state.id] = state.updated_at

    def purge_older_than(self, seconds: float) -> List[str]:
        cutoff = time.time() - seconds
        with self._lock:
            stale = [match_id for match_id, updated in self._updated.items() if updated < cutoff]
            for match_id in stale:
                del self._blobs[match_id]
                del self._revisions[match_id]
                del self._updated[match_id]
            self._codes = {code: mid for code, mid in self._codes.items() if mid not in stale}
        if stale:
            logger.info(f"Purged {len(stale)} stale matches")
        return stale

    def __len__(self):
        with self._lock:
            return len(self._blobs)
