"""
State serialization and redaction utilities.
"""

from typing import Any, Dict, List, Optional

import orjson

from .constants import HIDDEN_CARD_ID, HIDDEN_CARD_TYPE, CardType
from .models import Card, LogEntry, MatchState, PendingAction, Player


def _card_to_dict(card: Card) -> Dict[str, str]:
    return {"id": card.id, "type": CardType(card.type).value}


def _hidden_cards(count: int) -> List[Dict[str, str]]:
    return [{"id": HIDDEN_CARD_ID, "type": HIDDEN_CARD_TYPE} for _ in range(count)]


def _log_to_dict(entry: LogEntry) -> Dict[str, Any]:
    return {"message": entry.message, "timestamp": entry.timestamp, "player_id": entry.player_id}


def project_state(state: MatchState, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the view of a match sent to one client.

    Other players' hands and the whole deck are replaced by placeholder cards
    so only their sizes can be read. The discard pile is public. Cards revealed
    by See the Future are included only for the player who looked. Without a
    viewer every hand is hidden (spectator view).

    Args:
        state: Canonical match state (never modified)
        viewer_id: ID of the player viewing the state

    Returns:
        JSON-ready dictionary
    """
    players = []
    for player in state.players:
        if player.id == viewer_id:
            hand = [_card_to_dict(card) for card in player.hand]
        else:
            hand = _hidden_cards(len(player.hand))
        players.append({
            "id": player.id,
            "name": player.name,
            "hand": hand,
            "hand_count": len(player.hand),
            "alive": player.alive,
            "is_bot": player.is_bot,
            "avatar": player.avatar,
        })

    pending = None
    if state.pending_action is not None:
        action = state.pending_action
        pending = {
            "type": action.type,
            "player_id": action.player_id,
            "source_player_id": action.source_player_id,
            "card_played": CardType(action.card_played).value if action.card_played else None,
        }
        # The held elimination card never leaves the server
        if action.player_id == viewer_id and action.cards:
            pending["cards"] = [_card_to_dict(card) for card in action.cards]

    return {
        "id": state.id,
        "code": state.code,
        "host_id": state.host_id,
        "status": state.status,
        "players": players,
        "deck": _hidden_cards(len(state.deck)),
        "deck_count": len(state.deck),
        "discard": [_card_to_dict(card) for card in state.discard],
        "current_player_index": state.current_player_index,
        "current_player_id": state.current_player.id if state.current_player else None,
        "turns_remaining": state.turns_remaining,
        "pending_action": pending,
        "winner_id": state.winner_id,
        "log": [_log_to_dict(entry) for entry in state.log],
        "created_at": state.created_at,
        "updated_at": state.updated_at,
        "is_multiplayer": state.is_multiplayer,
        "revision": state.revision,
        "viewer_id": viewer_id,
    }


def serialize_player_for_list(player: Player) -> Dict[str, Any]:
    """Serialize player for the lobby player list."""
    return {
        "id": player.id,
        "name": player.name,
        "is_bot": player.is_bot,
        "avatar": player.avatar,
    }


def get_public_match_info(state: MatchState) -> Dict[str, Any]:
    """Public information shown to someone about to join by code."""
    return {
        "id": state.id,
        "code": state.code,
        "status": state.status,
        "player_count": len(state.players),
        "is_multiplayer": state.is_multiplayer,
        "players": [serialize_player_for_list(player) for player in state.players],
    }


# Full (unredacted) encoding used by the store

def _pending_to_dict(action: PendingAction) -> Dict[str, Any]:
    return {
        "type": action.type,
        "player_id": action.player_id,
        "source_player_id": action.source_player_id,
        "cards": [_card_to_dict(card) for card in action.cards],
        "held_card": _card_to_dict(action.held_card) if action.held_card else None,
        "card_played": CardType(action.card_played).value if action.card_played else None,
    }


def match_to_dict(state: MatchState) -> Dict[str, Any]:
    return {
        "id": state.id,
        "code": state.code,
        "host_id": state.host_id,
        "status": state.status,
        "players": [
            {
                "id": p.id,
                "name": p.name,
                "hand": [_card_to_dict(card) for card in p.hand],
                "alive": p.alive,
                "is_bot": p.is_bot,
                "avatar": p.avatar,
            }
            for p in state.players
        ],
        "deck": [_card_to_dict(card) for card in state.deck],
        "discard": [_card_to_dict(card) for card in state.discard],
        "current_player_index": state.current_player_index,
        "turns_remaining": state.turns_remaining,
        "pending_action": _pending_to_dict(state.pending_action) if state.pending_action else None,
        "winner_id": state.winner_id,
        "log": [_log_to_dict(entry) for entry in state.log],
        "created_at": state.created_at,
        "updated_at": state.updated_at,
        "is_multiplayer": state.is_multiplayer,
        "revision": state.revision,
    }


def _card_from_dict(data: Dict[str, str]) -> Card:
    return Card(id=data["id"], type=CardType(data["type"]))


def match_from_dict(data: Dict[str, Any]) -> MatchState:
    pending = None
    if data.get("pending_action"):
        p = data["pending_action"]
        pending = PendingAction(
            type=p["type"],
            player_id=p["player_id"],
            source_player_id=p.get("source_player_id"),
            cards=[_card_from_dict(c) for c in p.get("cards", [])],
            held_card=_card_from_dict(p["held_card"]) if p.get("held_card") else None,
            card_played=CardType(p["card_played"]) if p.get("card_played") else None,
        )

    return MatchState(
        id=data["id"],
        code=data["code"],
        host_id=data["host_id"],
        status=data["status"],
        players=[
            Player(
                id=p["id"],
                name=p["name"],
                hand=[_card_from_dict(c) for c in p["hand"]],
                alive=p["alive"],
                is_bot=p["is_bot"],
                avatar=p.get("avatar", 0),
            )
            for p in data["players"]
        ],
        deck=[_card_from_dict(c) for c in data["deck"]],
        discard=[_card_from_dict(c) for c in data["discard"]],
        current_player_index=data["current_player_index"],
        turns_remaining=data["turns_remaining"],
        pending_action=pending,
        winner_id=data.get("winner_id"),
        log=[LogEntry(**entry) for entry in data.get("log", [])],
        created_at=data["created_at"],
        updated_at=data["updated_at"],
        is_multiplayer=data.get("is_multiplayer", False),
        revision=data["revision"],
    )


def dumps_match(state: MatchState) -> bytes:
    return orjson.dumps(match_to_dict(state))


def loads_match(blob: bytes) -> MatchState:
    return match_from_dict(orjson.loads(blob))
