"""
Card effects and turn resolution.

These functions mutate the working copy handed to them by ``engine.apply_action``
and assume their inputs were already validated.
"""

import random
from typing import List

from .constants import (
    PENDING_DEFUSE_PLACE, PENDING_FAVOR_GIVE, PENDING_PEEK_FUTURE, PENDING_STEAL_NAMED,
    PENDING_STEAL_RANDOM, STATUS_FINISHED, CardType, card_label,
)
from .models import Card, MatchState, PendingAction, Player
from .shuffle import create_card, shuffle_cards


def discard_cards(state: MatchState, player: Player, cards: List[Card]):
    for card in cards:
        player.remove_card(card.id)
        state.discard.append(card)


def finish_turn(state: MatchState):
    """One draw obligation is done; move on when the stack is used up."""
    state.turns_remaining -= 1
    if state.turns_remaining <= 0:
        state.current_player_index = state.next_alive_index(state.current_player_index)
        state.turns_remaining = 1


def play_attack(state: MatchState, player: Player, card: Card):
    discard_cards(state, player, [card])
    state.add_log(f"{player.name} played Attack!", player.id)
    state.current_player_index = state.next_alive_index(state.current_player_index)
    # Stacks: an attacked player who attacks passes on their own turns plus one
    state.turns_remaining += 1


def play_skip(state: MatchState, player: Player, card: Card):
    discard_cards(state, player, [card])
    state.add_log(f"{player.name} played Skip!", player.id)
    finish_turn(state)


def play_shuffle(state: MatchState, player: Player, card: Card, rng: random.Random):
    discard_cards(state, player, [card])
    state.deck = shuffle_cards(state.deck, rng)
    state.add_log(f"{player.name} shuffled the deck!", player.id)


def play_see_the_future(state: MatchState, player: Player, card: Card, peek_count: int):
    discard_cards(state, player, [card])
    state.pending_action = PendingAction(
        type=PENDING_PEEK_FUTURE,
        player_id=player.id,
        source_player_id=player.id,
        cards=list(state.deck[:peek_count]),
        card_played=CardType.SEE_THE_FUTURE,
    )
    state.add_log(f"{player.name} is seeing the future...", player.id)


def play_favor(state: MatchState, player: Player, card: Card, target: Player):
    discard_cards(state, player, [card])
    state.pending_action = PendingAction(
        type=PENDING_FAVOR_GIVE,
        player_id=target.id,
        source_player_id=player.id,
        card_played=CardType.FAVOR,
    )
    state.add_log(f"{player.name} asked {target.name} for a Favor!", player.id)


def play_nope(state: MatchState, player: Player, card: Card):
    discard_cards(state, player, [card])
    pending = state.pending_action
    if pending is None:
        state.add_log(f"{player.name} played Nope!", player.id)
        return
    # No chain tracking: a single Nope cancels whatever is pending
    state.pending_action = None
    state.add_log(f"{player.name} played Nope! The {pending.type.replace('_', ' ')} is cancelled.", player.id)


def play_pair(state: MatchState, player: Player, cards: List[Card]):
    discard_cards(state, player, cards)
    state.pending_action = PendingAction(
        type=PENDING_STEAL_RANDOM,
        player_id=player.id,
        source_player_id=player.id,
        card_played=cards[0].type,
    )
    state.add_log(f"{player.name} played a pair of {card_label(cards[0].type)}s!", player.id)


def play_triple(state: MatchState, player: Player, cards: List[Card]):
    discard_cards(state, player, cards)
    state.pending_action = PendingAction(
        type=PENDING_STEAL_NAMED,
        player_id=player.id,
        source_player_id=player.id,
        card_played=cards[0].type,
    )
    state.add_log(f"{player.name} played three {card_label(cards[0].type)}s!", player.id)


def draw_card(state: MatchState, player: Player):
    drawn = state.deck.pop(0)

    if drawn.type != CardType.EXPLODING_KITTEN:
        player.hand.append(drawn)
        state.add_log(f"{player.name} drew a card.", player.id)
        finish_turn(state)
        return

    defuse = player.first_of(CardType.DEFUSE)
    if defuse is not None:
        player.remove_card(defuse.id)
        # The spent defuse is interchangeable, a fresh token goes to the discard
        state.discard.append(create_card(CardType.DEFUSE))
        state.pending_action = PendingAction(
            type=PENDING_DEFUSE_PLACE,
            player_id=player.id,
            held_card=drawn,
            card_played=CardType.EXPLODING_KITTEN,
        )
        state.add_log(f"{player.name} drew an Exploding Kitten but has a Defuse!", player.id)
        return

    eliminate(state, player, drawn)


def eliminate(state: MatchState, player: Player, kitten: Card):
    player.alive = False
    state.discard.append(kitten)
    state.discard.extend(player.hand)
    player.hand = []
    state.add_log(f"{player.name} drew an Exploding Kitten and EXPLODED!", player.id)

    state.current_player_index = state.next_alive_index(state.current_player_index)
    state.turns_remaining = 1
    check_winner(state)


def check_winner(state: MatchState) -> bool:
    """Finish the match when a single player is left alive."""
    alive = state.alive_players()
    if len(alive) != 1:
        return False
    winner = alive[0]
    state.status = STATUS_FINISHED
    state.winner_id = winner.id
    state.pending_action = None
    state.add_log(f"{winner.name} wins!", winner.id)
    return True


def place_defused_kitten(state: MatchState, player: Player, position: int):
    position = max(0, min(position, len(state.deck)))
    state.deck.insert(position, create_card(CardType.EXPLODING_KITTEN))
    state.pending_action = None
    state.add_log(f"{player.name} defused the Exploding Kitten and placed it back in the deck.", player.id)
    finish_turn(state)


def give_favor(state: MatchState, player: Player, card: Card):
    requester = state.find_player(state.pending_action.source_player_id)
    player.remove_card(card.id)
    requester.hand.append(card)
    state.pending_action = None
    state.add_log(f"{player.name} gave a card to {requester.name}.", player.id)


def acknowledge_peek(state: MatchState, player: Player):
    state.pending_action = None


def steal_random(state: MatchState, player: Player, target: Player, rng: random.Random):
    stolen = target.hand.pop(rng.randrange(len(target.hand)))
    player.hand.append(stolen)
    state.pending_action = None
    state.add_log(f"{player.name} stole a card from {target.name}!", player.id)


def steal_named(state: MatchState, player: Player, target: Player, card_type: CardType):
    wanted = target.first_of(card_type)
    if wanted is not None:
        target.remove_card(wanted.id)
        player.hand.append(wanted)
        state.add_log(f"{player.name} stole a {card_label(card_type)} from {target.name}!", player.id)
    else:
        state.add_log(f"{target.name} doesn't have a {card_label(card_type)}!", player.id)
    state.pending_action = None
