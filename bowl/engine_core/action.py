"""
Turn Actions - History entries and command results.

A resolved card is recorded as one of exactly two actions:
1. GotIt: the active team scored the card
2. PassToOther: the card was handed straight to the other team's score

Each action remembers the card that was drawn right after it, which is
what makes a single-step undo reversible.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, ClassVar, Union, TYPE_CHECKING

from .state import RoundPhase

if TYPE_CHECKING:
    from .state import GameSession


# Oldest entries are dropped first once a turn exceeds this many actions.
TURN_HISTORY_LIMIT = 50


@dataclass(frozen=True)
class GotIt:
    """The active team guessed the card."""
    card_id: str
    team_id: str
    phase: RoundPhase
    next_card_id: str | None = None

    type: ClassVar[str] = "gotIt"

    @property
    def credited_team_id(self) -> str:
        return self.team_id

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "cardId": self.card_id,
            "teamId": self.team_id,
            "phase": self.phase.value,
        }
        if self.next_card_id is not None:
            data["nextCardId"] = self.next_card_id
        return data


@dataclass(frozen=True)
class PassToOther:
    """The active team passed; the card scores for the other team."""
    card_id: str
    from_team_id: str
    to_team_id: str
    phase: RoundPhase
    next_card_id: str | None = None

    type: ClassVar[str] = "passToOther"

    @property
    def credited_team_id(self) -> str:
        return self.to_team_id

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "cardId": self.card_id,
            "fromTeamId": self.from_team_id,
            "toTeamId": self.to_team_id,
            "phase": self.phase.value,
        }
        if self.next_card_id is not None:
            data["nextCardId"] = self.next_card_id
        return data


TurnAction = Union[GotIt, PassToOther]


def append_history(history: list[TurnAction], action: TurnAction) -> list[TurnAction]:
    """Return new history with `action` appended, capped at TURN_HISTORY_LIMIT."""
    return [*history, action][-TURN_HISTORY_LIMIT:]


@dataclass
class CommandResult:
    """
    Result of running a command.

    `changed` is False for every no-op (nothing to undo, no card in
    hand, game finished...). Callers check it instead of catching errors.

    Continuation signals tell the owner what to run next:
    - should_advance_phase: call advance_phase_if_complete_command
    - should_end_turn: the clock ran out, call end_turn_command
    """
    session: GameSession
    changed: bool
    should_advance_phase: bool = False
    should_end_turn: bool = False

    @classmethod
    def unchanged(
        cls,
        session: GameSession,
        should_advance_phase: bool = False,
        should_end_turn: bool = False,
    ) -> CommandResult:
        """Create a no-op result."""
        return cls(
            session=session,
            changed=False,
            should_advance_phase=should_advance_phase,
            should_end_turn=should_end_turn,
        )

    @classmethod
    def updated(cls, session: GameSession, should_advance_phase: bool = False) -> CommandResult:
        """Create a result carrying a new session."""
        return cls(session=session, changed=True, should_advance_phase=should_advance_phase)
