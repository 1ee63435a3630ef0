"""
Pydantic Schemas for session setup - what the new-game wizard hands over.

Text is cleaned on the way in: surrounding whitespace is stripped and
over-long values are cut to their maximum length. Names that are blank
after trimming are rejected.

Limits:
- Team names: 20 characters
- Player names: 24 characters
- Card text: 80 characters
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..config import settings


MAX_TEAM_NAME = 20
MAX_PLAYER_NAME = 24
MAX_CARD_TEXT = 80

# Cards the wizard needs before a game can be created.
MIN_CARDS = 10

DEFAULT_TEAM_NAMES = ("Team A", "Team B")


def trim(text: str) -> str:
    return text.strip()


def max_length(text: str, limit: int) -> str:
    return text[:limit]


def is_non_empty_after_trim(text: str) -> bool:
    return len(trim(text)) > 0


def sanitize_team_name(text: str, limit: int = MAX_TEAM_NAME) -> str:
    return max_length(trim(text), limit)


def sanitize_player_name(text: str, limit: int = MAX_PLAYER_NAME) -> str:
    return max_length(trim(text), limit)


def sanitize_card_text(text: str, limit: int = MAX_CARD_TEXT) -> str:
    return max_length(trim(text), limit)


def _require_text(value: str, what: str) -> str:
    if not value:
        raise ValueError(f"{what} must not be blank")
    return value


class WizardPlayerSeed(BaseModel):
    """A player entered in the wizard; team_index 0 is the first team."""
    id: str
    name: str
    team_index: Literal[0, 1]

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value: str) -> str:
        return _require_text(sanitize_player_name(value), "Player name")


class WizardCardSeed(BaseModel):
    """A card entered in the wizard."""
    id: str
    text: str
    created_by_player_id: Optional[str] = None

    @field_validator("text")
    @classmethod
    def _clean_text(cls, value: str) -> str:
        return _require_text(sanitize_card_text(value), "Card text")


class CreateSessionInput(BaseModel):
    """Everything needed to build a new session."""
    team_names: tuple[str, str] = DEFAULT_TEAM_NAMES
    players: list[WizardPlayerSeed] = Field(default_factory=list)
    cards: list[WizardCardSeed] = Field(default_factory=list)
    turn_seconds: int = Field(default_factory=lambda: settings.turn_seconds, ge=1)

    @field_validator("team_names")
    @classmethod
    def _clean_team_names(cls, value: tuple[str, str]) -> tuple[str, str]:
        first, second = (sanitize_team_name(name) for name in value)
        return (
            _require_text(first, "Team name"),
            _require_text(second, "Team name"),
        )
