"""
Action models and parsing.

Every action a client or bot can submit is one of the models below, tagged by
its ``type`` field. ``parse_action`` turns a raw JSON payload into the right
model and rejects anything malformed before it reaches the engine.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import CardType
from .errors import MALFORMED_ACTION, RuleViolation


class ActionType(str, Enum):
    """Action kinds."""
    PLAY_CARD = "play_card"
    PLAY_PAIR = "play_pair"
    PLAY_TRIPLE = "play_triple"
    DRAW = "draw"
    NOPE = "nope"
    DEFUSE_PLACE = "defuse_place"
    FAVOR_GIVE = "favor_give"
    PEEK_ACK = "peek_ack"
    STEAL_RANDOM = "steal_random"
    STEAL_NAMED = "steal_named"


class BaseAction(BaseModel):
    """Base action model."""
    type: ActionType
    player_id: str = Field(..., min_length=1)


class PlayCardAction(BaseAction):
    """Play a single action card."""
    type: ActionType = ActionType.PLAY_CARD
    card_id: str = Field(..., min_length=1)
    target_player_id: Optional[str] = None


class _SetAction(BaseAction):
    card_ids: List[str]

    @field_validator('card_ids')
    @classmethod
    def validate_distinct(cls, v):
        if len(set(v)) != len(v):
            raise ValueError('card_ids must be distinct')
        return v


class PlayPairAction(_SetAction):
    """Play two matching collector cards to steal a random card."""
    type: ActionType = ActionType.PLAY_PAIR
    card_ids: List[str] = Field(..., min_length=2, max_length=2)


class PlayTripleAction(_SetAction):
    """Play three matching collector cards to ask for a named card."""
    type: ActionType = ActionType.PLAY_TRIPLE
    card_ids: List[str] = Field(..., min_length=3, max_length=3)


class DrawAction(BaseAction):
    """Draw the top card and end one turn."""
    type: ActionType = ActionType.DRAW


class NopeAction(BaseAction):
    """Play a Nope card, cancelling the pending action if there is one."""
    type: ActionType = ActionType.NOPE
    card_id: str = Field(..., min_length=1)


class DefusePlaceAction(BaseAction):
    """Put a defused kitten back in the deck. No position means a random slot."""
    type: ActionType = ActionType.DEFUSE_PLACE
    position: Optional[int] = None


class FavorGiveAction(BaseAction):
    """Hand a card to the player who asked for a favor."""
    type: ActionType = ActionType.FAVOR_GIVE
    card_id: str = Field(..., min_length=1)


class PeekAckAction(BaseAction):
    """Close the See the Future reveal."""
    type: ActionType = ActionType.PEEK_ACK


class StealRandomAction(BaseAction):
    """Choose the victim of a pair steal."""
    type: ActionType = ActionType.STEAL_RANDOM
    target_player_id: str = Field(..., min_length=1)


class StealNamedAction(BaseAction):
    """Choose the victim and the card type of a triple steal."""
    type: ActionType = ActionType.STEAL_NAMED
    target_player_id: str = Field(..., min_length=1)
    target_card_type: CardType


Action = Union[
    PlayCardAction,
    PlayPairAction,
    PlayTripleAction,
    DrawAction,
    NopeAction,
    DefusePlaceAction,
    FavorGiveAction,
    PeekAckAction,
    StealRandomAction,
    StealNamedAction,
]

ACTION_MODELS = {
    ActionType.PLAY_CARD: PlayCardAction,
    ActionType.PLAY_PAIR: PlayPairAction,
    ActionType.PLAY_TRIPLE: PlayTripleAction,
    ActionType.DRAW: DrawAction,
    ActionType.NOPE: NopeAction,
    ActionType.DEFUSE_PLACE: DefusePlaceAction,
    ActionType.FAVOR_GIVE: FavorGiveAction,
    ActionType.PEEK_ACK: PeekAckAction,
    ActionType.STEAL_RANDOM: StealRandomAction,
    ActionType.STEAL_NAMED: StealNamedAction,
}

# Legal responses for each pending action kind (a Nope is handled separately)
RESPONSES = {
    "favor_give": FavorGiveAction,
    "defuse_place": DefusePlaceAction,
    "peek_future": PeekAckAction,
    "steal_random": StealRandomAction,
    "steal_named": StealNamedAction,
}


def parse_action(data: Dict[str, Any]) -> Action:
    """
    Parse a raw action payload into the matching action model.

    Args:
        data: Raw action data, e.g. decoded from a request body

    Returns:
        Parsed action model

    Raises:
        RuleViolation: If the action type is unknown or a required field is
            missing or malformed
    """
    if not isinstance(data, dict):
        raise RuleViolation(MALFORMED_ACTION, "Action must be an object")

    action_type = data.get("type")
    if not action_type:
        raise RuleViolation(MALFORMED_ACTION, "Missing action type")

    try:
        action_type = ActionType(action_type)
    except ValueError:
        raise RuleViolation(MALFORMED_ACTION, f"Invalid action type: {action_type}")

    action_class = ACTION_MODELS[action_type]
    try:
        return action_class(**data)
    except ValidationError as e:
        raise RuleViolation(MALFORMED_ACTION, f"Invalid action data: {e.errors()[0]['msg']}")


def action_to_dict(action: Action) -> Dict[str, Any]:
    return action.model_dump(mode="json", exclude_none=True)
