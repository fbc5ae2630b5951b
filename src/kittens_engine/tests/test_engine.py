"""
Tests for match lifecycle and single-card rules.
"""

import copy
import random

import pytest

from kittens_engine.actions import (
    DrawAction, NopeAction, PlayCardAction, PlayPairAction, PlayTripleAction,
)
from kittens_engine.constants import (
    PENDING_FAVOR_GIVE, PENDING_PEEK_FUTURE, PENDING_STEAL_NAMED, PENDING_STEAL_RANDOM,
    STATUS_PLAYING, STATUS_WAITING, CardType,
)
from kittens_engine.engine import apply_action, create_match, join_match, start_match
from kittens_engine.errors import (
    ALREADY_STARTED, CARD_NOT_IN_HAND, CARD_NOT_PLAYABLE, COLLECTOR_SINGLE, DECK_EMPTY,
    GAME_NOT_ACTIVE, INVALID_TARGET, MATCH_FULL, NOT_ENOUGH_PLAYERS, NOT_YOUR_TURN,
    PLAYER_ELIMINATED, PLAYER_NOT_FOUND, SET_MISMATCH, PreconditionError, RuleViolation,
)

A = CardType


def play(state, player_index, card_type, rng=None, **kwargs):
    player = state.players[player_index]
    action = PlayCardAction(player_id=player.id, card_id=player.first_of(card_type).id, **kwargs)
    return apply_action(state, action, rng)


# Lifecycle

def test_create_single_player_match():
    state = create_match("Alice", bot_count=2)
    assert state.status == STATUS_WAITING
    assert state.revision == 0
    assert len(state.players) == 3
    assert state.host_id == state.players[0].id
    assert not state.players[0].is_bot
    assert all(p.is_bot and p.id.startswith("bot_") for p in state.players[1:])
    assert [p.name for p in state.players[1:]] == ["Whiskers", "Mittens"]
    assert len(state.code) == 6
    assert state.code == state.code.upper()


def test_bot_count_is_clamped():
    assert len(create_match("Alice", bot_count=0).players) == 2
    assert len(create_match("Alice", bot_count=9).players) == 5


def test_multiplayer_match_has_no_bots():
    state = create_match("Alice", multiplayer=True, bot_count=3)
    assert len(state.players) == 1
    assert state.is_multiplayer


def test_join_match():
    state = create_match("Alice", multiplayer=True)
    joined, player_id = join_match(state, "B" * 40, avatar=3)

    assert len(state.players) == 1
    assert len(joined.players) == 2
    assert joined.revision == state.revision + 1
    player = joined.find_player(player_id)
    assert player.name == "B" * 20
    assert player.avatar == 3


def test_join_full_match():
    state = create_match("Alice", multiplayer=True)
    for i in range(4):
        state, _ = join_match(state, f"P{i}")
    with pytest.raises(PreconditionError) as exc_info:
        join_match(state, "Too many")
    assert exc_info.value.code == MATCH_FULL


def test_start_match():
    state = create_match("Alice", bot_count=1)
    started = start_match(state, random.Random(5))

    assert state.status == STATUS_WAITING
    assert started.status == STATUS_PLAYING
    assert started.revision == state.revision + 1
    assert started.current_player_index == 0
    assert started.turns_remaining == 1
    assert all(len(p.hand) == 8 for p in started.players)
    assert started.log[-1].message == "Game started!"


def test_start_needs_two_players():
    state = create_match("Alice", multiplayer=True)
    with pytest.raises(PreconditionError) as exc_info:
        start_match(state)
    assert exc_info.value.code == NOT_ENOUGH_PLAYERS


def test_start_twice_fails():
    started = start_match(create_match("Alice"))
    with pytest.raises(PreconditionError) as exc_info:
        start_match(started)
    assert exc_info.value.code == ALREADY_STARTED
    with pytest.raises(PreconditionError):
        join_match(started, "Late")


def test_actions_rejected_before_start():
    state = create_match("Alice")
    with pytest.raises(RuleViolation) as exc_info:
        apply_action(state, DrawAction(player_id=state.host_id))
    assert exc_info.value.code == GAME_NOT_ACTIVE


# Drawing

def test_draw_safe_card_passes_turn(make_match):
    state = make_match([[A.DEFUSE], [A.DEFUSE]], deck=[A.TACO_CAT, A.SKIP])
    new_state = apply_action(state, DrawAction(player_id="p0"))

    assert len(new_state.players[0].hand) == 2
    assert new_state.players[0].hand[-1].type == A.TACO_CAT
    assert len(new_state.deck) == 1
    assert new_state.current_player_index == 1
    assert new_state.turns_remaining == 1


def test_draw_out_of_turn(make_match):
    state = make_match([[A.DEFUSE], [A.DEFUSE]], deck=[A.TACO_CAT])
    with pytest.raises(RuleViolation) as exc_info:
        apply_action(state, DrawAction(player_id="p1"))
    assert exc_info.value.code == NOT_YOUR_TURN


def test_draw_from_empty_deck(make_match):
    state = make_match([[A.DEFUSE], [A.DEFUSE]], deck=[])
    with pytest.raises(RuleViolation) as exc_info:
        apply_action(state, DrawAction(player_id="p0"))
    assert exc_info.value.code == DECK_EMPTY


def test_unknown_and_eliminated_actors(make_match):
    state = make_match([[A.DEFUSE], [A.DEFUSE], [A.DEFUSE]], deck=[A.SKIP])
    state.players[2].alive = False

    with pytest.raises(RuleViolation) as exc_info:
        apply_action(state, DrawAction(player_id="ghost"))
    assert exc_info.value.code == PLAYER_NOT_FOUND

    with pytest.raises(RuleViolation) as exc_info:
        apply_action(state, DrawAction(player_id="p2"))
    assert exc_info.value.code == PLAYER_ELIMINATED


# Single cards

def test_attack_passes_two_turns(make_match):
    state = make_match([[A.ATTACK], [A.DEFUSE]], deck=[A.TACO_CAT, A.SKIP, A.FAVOR])
    new_state = play(state, 0, A.ATTACK)

    assert new_state.current_player_index == 1
    assert new_state.turns_remaining == 2
    assert new_state.discard[-1].type == A.ATTACK

    after_draw = apply_action(new_state, DrawAction(player_id="p1"))
    assert after_draw.current_player_index == 1
    assert after_draw.turns_remaining == 1


def test_attacks_stack(make_match):
    """Two attacks in a row leave three turns two seats ahead."""
    state = make_match([[A.ATTACK], [A.ATTACK], [A.DEFUSE]], deck=[A.TACO_CAT])
    state = play(state, 0, A.ATTACK)
    state = play(state, 1, A.ATTACK)

    assert state.turns_remaining == 3
    assert state.current_player_index == 2


def test_attack_skips_eliminated_seat(make_match):
    state = make_match([[A.ATTACK], [], [A.DEFUSE]], deck=[A.TACO_CAT])
    state.players[1].alive = False
    new_state = play(state, 0, A.ATTACK)
    assert new_state.current_player_index == 2


def test_skip_ends_turn(make_match):
    state = make_match([[A.SKIP], [A.DEFUSE]], deck=[A.TACO_CAT])
    new_state = play(state, 0, A.SKIP)

    assert new_state.current_player_index == 1
    assert new_state.turns_remaining == 1
    assert len(new_state.deck) == 1


def test_skip_absorbs_one_attacked_turn(make_match):
    state = make_match([[A.DEFUSE], [A.SKIP]], deck=[A.TACO_CAT], current=1, turns=2)
    new_state = play(state, 1, A.SKIP)

    assert new_state.current_player_index == 1
    assert new_state.turns_remaining == 1


def test_shuffle_keeps_deck_contents(make_match):
    state = make_match([[A.SHUFFLE], [A.DEFUSE]], deck=[A.TACO_CAT, A.SKIP, A.FAVOR, A.NOPE, A.ATTACK])
    new_state = play(state, 0, A.SHUFFLE, random.Random(2))

    assert sorted(c.id for c in new_state.deck) == sorted(c.id for c in state.deck)
    assert new_state.current_player_index == 0
    assert new_state.pending_action is None


def test_see_the_future_reveals_top_three(make_match):
    state = make_match([[A.SEE_THE_FUTURE], [A.DEFUSE]],
                       deck=[A.TACO_CAT, A.EXPLODING_KITTEN, A.SKIP, A.FAVOR])
    new_state = play(state, 0, A.SEE_THE_FUTURE)

    pending = new_state.pending_action
    assert pending.type == PENDING_PEEK_FUTURE
    assert pending.player_id == "p0"
    assert [c.id for c in pending.cards] == [c.id for c in state.deck[:3]]
    assert new_state.current_player_index == 0


def test_see_the_future_short_deck(make_match):
    state = make_match([[A.SEE_THE_FUTURE], [A.DEFUSE]], deck=[A.EXPLODING_KITTEN])
    new_state = play(state, 0, A.SEE_THE_FUTURE)
    assert len(new_state.pending_action.cards) == 1


def test_favor_opens_pending_for_target(make_match):
    state = make_match([[A.FAVOR], [A.SKIP, A.NOPE]], deck=[A.TACO_CAT])
    new_state = play(state, 0, A.FAVOR, target_player_id="p1")

    pending = new_state.pending_action
    assert pending.type == PENDING_FAVOR_GIVE
    assert pending.player_id == "p1"
    assert pending.source_player_id == "p0"


@pytest.mark.parametrize("target", [None, "p0", "p1", "p2", "nobody"])
def test_favor_invalid_targets(make_match, target):
    """Missing, self, empty-handed, eliminated and unknown targets are rejected."""
    state = make_match([[A.FAVOR], [], [A.SKIP]], deck=[A.TACO_CAT])
    state.players[2].alive = False
    with pytest.raises(RuleViolation) as exc_info:
        play(state, 0, A.FAVOR, target_player_id=target)
    assert exc_info.value.code == INVALID_TARGET


def test_nope_without_pending_only_logs(make_match):
    state = make_match([[A.DEFUSE], [A.NOPE]], deck=[A.TACO_CAT])
    new_state = apply_action(state, NopeAction(player_id="p1", card_id=state.players[1].hand[0].id))

    assert new_state.current_player_index == 0
    assert new_state.players[1].hand == []
    assert new_state.discard[-1].type == A.NOPE
    assert new_state.revision == state.revision + 1


def test_nope_action_needs_a_nope_card(make_match):
    state = make_match([[A.SKIP], [A.DEFUSE]], deck=[A.TACO_CAT])
    with pytest.raises(RuleViolation) as exc_info:
        apply_action(state, NopeAction(player_id="p0", card_id=state.players[0].hand[0].id))
    assert exc_info.value.code == CARD_NOT_PLAYABLE


def test_cat_card_alone_rejected(make_match):
    state = make_match([[A.TACO_CAT], [A.DEFUSE]], deck=[A.SKIP])
    with pytest.raises(RuleViolation) as exc_info:
        play(state, 0, A.TACO_CAT)
    assert exc_info.value.code == COLLECTOR_SINGLE


@pytest.mark.parametrize("card_type", [A.DEFUSE, A.EXPLODING_KITTEN])
def test_unplayable_cards(make_match, card_type):
    state = make_match([[card_type], [A.DEFUSE]], deck=[A.SKIP])
    with pytest.raises(RuleViolation) as exc_info:
        play(state, 0, card_type)
    assert exc_info.value.code == CARD_NOT_PLAYABLE


def test_card_not_in_hand(make_match):
    state = make_match([[A.SKIP], [A.ATTACK]], deck=[A.TACO_CAT])
    foreign = state.players[1].hand[0].id
    with pytest.raises(RuleViolation) as exc_info:
        apply_action(state, PlayCardAction(player_id="p0", card_id=foreign))
    assert exc_info.value.code == CARD_NOT_IN_HAND


def test_play_out_of_turn(make_match):
    state = make_match([[A.DEFUSE], [A.SKIP]], deck=[A.TACO_CAT])
    with pytest.raises(RuleViolation) as exc_info:
        play(state, 1, A.SKIP)
    assert exc_info.value.code == NOT_YOUR_TURN


# Sets

def test_pair_opens_steal(make_match):
    state = make_match([[A.BEARD_CAT, A.BEARD_CAT], [A.SKIP]], deck=[A.TACO_CAT])
    ids = [c.id for c in state.players[0].hand]
    new_state = apply_action(state, PlayPairAction(player_id="p0", card_ids=ids))

    assert new_state.pending_action.type == PENDING_STEAL_RANDOM
    assert new_state.pending_action.player_id == "p0"
    assert new_state.players[0].hand == []
    assert len(new_state.discard) == 2


def test_pair_needs_matching_cats(make_match):
    state = make_match([[A.BEARD_CAT, A.TACO_CAT, A.SKIP, A.SKIP], [A.SKIP]], deck=[A.TACO_CAT])
    hand = state.players[0].hand

    with pytest.raises(RuleViolation) as exc_info:
        apply_action(state, PlayPairAction(player_id="p0", card_ids=[hand[0].id, hand[1].id]))
    assert exc_info.value.code == SET_MISMATCH

    with pytest.raises(RuleViolation) as exc_info:
        apply_action(state, PlayPairAction(player_id="p0", card_ids=[hand[2].id, hand[3].id]))
    assert exc_info.value.code == SET_MISMATCH


def test_pair_needs_someone_to_rob(make_match):
    state = make_match([[A.BEARD_CAT, A.BEARD_CAT], []], deck=[A.TACO_CAT])
    ids = [c.id for c in state.players[0].hand]
    with pytest.raises(RuleViolation) as exc_info:
        apply_action(state, PlayPairAction(player_id="p0", card_ids=ids))
    assert exc_info.value.code == INVALID_TARGET


def test_triple_opens_named_steal(make_match):
    state = make_match([[A.POTATO_CAT] * 3, [A.DEFUSE]], deck=[A.TACO_CAT])
    ids = [c.id for c in state.players[0].hand]
    new_state = apply_action(state, PlayTripleAction(player_id="p0", card_ids=ids))

    assert new_state.pending_action.type == PENDING_STEAL_NAMED
    assert new_state.pending_action.player_id == "p0"
    assert len(new_state.discard) == 3


# Purity

def test_rejected_action_leaves_state_untouched(make_match):
    state = make_match([[A.ATTACK, A.TACO_CAT], [A.DEFUSE]], deck=[A.SKIP])
    snapshot = copy.deepcopy(state)
    with pytest.raises(RuleViolation):
        play(state, 0, A.TACO_CAT)
    assert state == snapshot


def test_accepted_action_does_not_mutate_input(make_match):
    state = make_match([[A.ATTACK], [A.DEFUSE]], deck=[A.SKIP])
    snapshot = copy.deepcopy(state)
    new_state = play(state, 0, A.ATTACK)

    assert state == snapshot
    assert new_state is not state
    assert new_state.revision == state.revision + 1


def test_revision_increases_by_one_per_action(make_match):
    state = make_match([[A.SKIP, A.SKIP], [A.SKIP, A.SKIP]], deck=[A.TACO_CAT] * 4)
    revisions = [state.revision]
    for player_index in (0, 1, 0, 1):
        state = play(state, player_index, A.SKIP)
        revisions.append(state.revision)
    assert revisions == [0, 1, 2, 3, 4]
