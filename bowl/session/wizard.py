"""
New-game Wizard - Collects teams, players and cards before a game.

Steps:
    0 = teams, 1 = players, 2 = cards, 3 = review

Entries are sanitized as they are added; blank entries are ignored.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.schemas import (
    DEFAULT_TEAM_NAMES,
    MIN_CARDS,
    CreateSessionInput,
    WizardCardSeed,
    WizardPlayerSeed,
    is_non_empty_after_trim,
    sanitize_card_text,
    sanitize_player_name,
    sanitize_team_name,
)
from ..engine_core.shuffle import IdGenerator, generate_id


WIZARD_STEPS = (0, 1, 2, 3)


@dataclass
class WizardState:
    step: int = 0
    team_names: tuple[str, str] = DEFAULT_TEAM_NAMES
    players: list[WizardPlayerSeed] = field(default_factory=list)
    cards: list[WizardCardSeed] = field(default_factory=list)
    selected_player_id: str | None = None

    generate_id: IdGenerator = field(default=generate_id, repr=False, compare=False)

    @property
    def can_review(self) -> bool:
        """Enough cards to start a game."""
        return len(self.cards) >= MIN_CARDS

    def set_step(self, step: int) -> None:
        if step not in WIZARD_STEPS:
            raise ValueError(f"Unknown wizard step: {step}")
        self.step = step

    def set_team_names(self, first: str, second: str) -> None:
        self.team_names = (sanitize_team_name(first), sanitize_team_name(second))

    def add_player(self, name: str, team_index: int) -> WizardPlayerSeed | None:
        if not is_non_empty_after_trim(name):
            return None
        player = WizardPlayerSeed(
            id=self.generate_id(),
            name=sanitize_player_name(name),
            team_index=team_index,
        )
        self.players.append(player)
        return player

    def remove_player(self, player_id: str) -> None:
        self.players = [p for p in self.players if p.id != player_id]
        if self.selected_player_id == player_id:
            self.selected_player_id = None

    def add_card(self, text: str, created_by_player_id: str | None = None) -> WizardCardSeed | None:
        if not is_non_empty_after_trim(text):
            return None
        card = WizardCardSeed(
            id=self.generate_id(),
            text=sanitize_card_text(text),
            created_by_player_id=created_by_player_id,
        )
        self.cards.append(card)
        return card

    def remove_card(self, card_id: str) -> None:
        self.cards = [c for c in self.cards if c.id != card_id]

    def to_input(self, turn_seconds: int | None = None) -> CreateSessionInput:
        """Validated input for create_session_from_wizard."""
        data = {
            "team_names": self.team_names,
            "players": self.players,
            "cards": self.cards,
        }
        if turn_seconds is not None:
            data["turn_seconds"] = turn_seconds
        return CreateSessionInput(**data)
