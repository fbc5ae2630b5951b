"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    min_players: int = Field(
        default=2,
        ge=2,
        le=5,
        description="Minimum number of players required to start"
    )
    max_players: int = Field(
        default=5,
        ge=2,
        le=5,
        description="Maximum number of seats in a match"
    )
    hand_size: int = Field(
        default=7,
        ge=1,
        le=10,
        description="Cards dealt to each player before the guaranteed defuse"
    )
    total_defuses: int = Field(
        default=6,
        ge=2,
        le=10,
        description="Defuse cards in the game; one per hand, the rest go in the deck"
    )
    peek_count: int = Field(
        default=3,
        ge=1,
        le=5,
        description="Cards revealed by See the Future"
    )
    bot_step_limit: int = Field(
        default=60,
        ge=1,
        le=500,
        description="Maximum bot actions applied per orchestrator run"
    )
    max_log_entries: int = Field(
        default=200,
        ge=10,
        description="Match log entries kept, oldest dropped first"
    )
    name_max_length: int = Field(
        default=20,
        ge=1,
        le=50,
        description="Display names are truncated to this length"
    )
    stale_match_seconds: int = Field(
        default=86400,
        ge=60,
        description="Matches untouched for this long may be purged from the store"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't fall below minimum."""
        min_players = info.data.get('min_players', 2)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_players

    def extra_defuses(self, player_count: int) -> int:
        """Defuse cards shuffled into the draw pile after every hand got one."""
        return max(0, self.total_defuses - player_count)

    def kitten_count(self, player_count: int) -> int:
        return player_count - 1


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
