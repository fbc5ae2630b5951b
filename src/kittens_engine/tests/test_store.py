"""
Tests for the in-memory match store.
"""

import random
import time

import pytest

from kittens_engine.engine import create_match, join_match, start_match
from kittens_engine.errors import STALE_REVISION, ConflictError
from kittens_engine.store import InMemoryMatchStore


def test_save_and_load():
    store = InMemoryMatchStore()
    state = start_match(create_match("Alice", bot_count=2), random.Random(1))
    store.save(state)

    loaded = store.load(state.id)
    assert loaded == state
    assert loaded is not state
    assert store.load("missing") is None


def test_load_by_code_is_case_insensitive():
    store = InMemoryMatchStore()
    state = create_match("Alice", multiplayer=True)
    store.save(state)

    assert store.load_by_code(state.code.lower()).id == state.id
    assert store.load_by_code("ZZZZZZ") is None


def test_stale_write_rejected():
    """Two writers starting from the same revision: the second one loses."""
    store = InMemoryMatchStore()
    state = create_match("Alice", multiplayer=True)
    store.save(state)

    first, _ = join_match(state, "Bob")
    second, _ = join_match(state, "Carol")
    store.save(first, expected_revision=state.revision)

    with pytest.raises(ConflictError) as exc_info:
        store.save(second, expected_revision=state.revision)
    assert exc_info.value.code == STALE_REVISION
    assert [p.name for p in store.load(state.id).players] == ["Alice", "Bob"]


def test_purge_older_than():
    store = InMemoryMatchStore()
    old = create_match("Old", multiplayer=True)
    old.updated_at = time.time() - 100000
    fresh = create_match("Fresh", multiplayer=True)
    store.save(old)
    store.save(fresh)

    purged = store.purge_older_than(86400)
    assert purged == [old.id]
    assert store.load(old.id) is None
    assert store.load_by_code(old.code) is None
    assert store.load(fresh.id) is not None
    assert len(store) == 1
