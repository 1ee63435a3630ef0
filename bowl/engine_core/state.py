"""
Session State - The data model of one game of Bowl.

Design principles:
- Immutable-friendly: commands never mutate, they return copies
- Serializable: to_dict() produces the persisted JSON shape (camelCase keys)
- Card ids only: pools hold ids, the deck holds the card definitions

Loading goes the other way through migration.migrate_session(), which
accepts every schema generation ever written.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .action import TurnAction


DEFAULT_TURN_SECONDS = 60


class RoundPhase(Enum):
    """The three rounds, played in this order."""
    DESCRIBE = "describe"
    ONE_WORD = "oneWord"
    CHARADES = "charades"


class GameStatus(Enum):
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass
class Team:
    """
    One of the two teams.

    `score` is kept for the persisted shape only; totals are
    always derived from the phase pools.
    """
    id: str
    name: str
    score: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "score": self.score}


@dataclass
class Player:
    id: str
    name: str
    team_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "teamId": self.team_id}


@dataclass
class Card:
    """A word or phrase written during setup."""
    id: str
    text: str
    created_by_player_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "text": self.text}
        if self.created_by_player_id is not None:
            data["createdByPlayerId"] = self.created_by_player_id
        return data


@dataclass
class PhaseState:
    """
    Card pools for one round.

    Every card id of the deck lives in exactly one place for the
    lifetime of a phase: the main bowl, a team's scored pile, or
    the hand of the active turn.

    `passed_to_team` is a leftover of an older rule set; it is kept
    in the persisted shape and is always empty.
    """
    main_bowl: list[str] = field(default_factory=list)
    passed_to_team: dict[str, list[str]] = field(default_factory=dict)
    scored_by_team: dict[str, list[str]] = field(default_factory=dict)

    @property
    def bowl_count(self) -> int:
        return len(self.main_bowl)

    def scored_for(self, team_id: str) -> list[str]:
        """Copy of a team's scored pile (empty if the team has none)."""
        return list(self.scored_by_team.get(team_id, []))

    def with_scored(self, team_id: str, card_ids: list[str]) -> PhaseState:
        """Return new phase state with a team's scored pile replaced."""
        new_scored = dict(self.scored_by_team)
        new_scored[team_id] = card_ids
        return self._copy_with(scored_by_team=new_scored)

    def _copy_with(self, **kwargs) -> PhaseState:
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mainBowl": list(self.main_bowl),
            "passedToTeam": {k: list(v) for k, v in self.passed_to_team.items()},
            "scoredByTeam": {k: list(v) for k, v in self.scored_by_team.items()},
        }


@dataclass
class TurnState:
    """
    One team's timed possession of the bowl.

    `started_at` is a wall-clock timestamp in milliseconds. It is moved
    forward whenever elapsed time is folded into `seconds_remaining`.
    """
    active_team_id: str
    seconds_remaining: int
    is_running: bool
    started_at: int
    active_player_id: str | None = None
    current_card_id: str | None = None
    history: list[TurnAction] = field(default_factory=list)

    def _copy_with(self, **kwargs) -> TurnState:
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "activeTeamId": self.active_team_id,
            "secondsRemaining": self.seconds_remaining,
            "isRunning": self.is_running,
            "startedAt": self.started_at,
            "history": [action.to_dict() for action in self.history],
        }
        if self.active_player_id is not None:
            data["activePlayerId"] = self.active_player_id
        if self.current_card_id is not None:
            data["currentCardId"] = self.current_card_id
        return data


@dataclass
class SessionSettings:
    turn_seconds: int = DEFAULT_TURN_SECONDS

    def to_dict(self) -> dict[str, Any]:
        return {"turnSeconds": self.turn_seconds}


# Frozen per-phase scores: team id -> cards scored. None while in progress.
PhaseResult = dict[str, int]


@dataclass
class GameSession:
    """
    Complete session at a point in time.

    This is the canonical value the commands operate on and the
    store persists after every change.
    """
    id: str
    created_at: int
    teams: list[Team]
    players: list[Player]
    deck: list[Card]
    phase_state: dict[RoundPhase, PhaseState]
    phase_results: dict[RoundPhase, PhaseResult | None]

    phase: RoundPhase = RoundPhase.DESCRIBE
    turn: TurnState | None = None
    settings: SessionSettings = field(default_factory=SessionSettings)
    game_status: GameStatus = GameStatus.PLAYING

    # Team that had the last turn (for alternating)
    last_team_id: str | None = None

    # UI modals
    phase_complete_modal: RoundPhase | None = None
    game_over_modal: bool = False

    # Deprecated top-level fields, carried through untouched
    discard: list[Card] | None = None
    legacy_scored_by_team: dict[str, Any] | None = None

    @property
    def team_ids(self) -> list[str]:
        return [team.id for team in self.teams]

    @property
    def card_ids(self) -> list[str]:
        return [card.id for card in self.deck]

    @property
    def current_phase_state(self) -> PhaseState:
        return self.phase_state[self.phase]

    def get_team(self, team_id: str) -> Team | None:
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    def with_phase_state(self, phase: RoundPhase, state: PhaseState) -> GameSession:
        """Return new session with one phase's pools replaced."""
        new_phase_state = dict(self.phase_state)
        new_phase_state[phase] = state
        return self._copy_with(phase_state=new_phase_state)

    def with_phase_result(self, phase: RoundPhase, result: PhaseResult) -> GameSession:
        new_results = dict(self.phase_results)
        new_results[phase] = result
        return self._copy_with(phase_results=new_results)

    def _copy_with(self, **kwargs) -> GameSession:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        data: dict[str, Any] = {
            "id": self.id,
            "createdAt": self.created_at,
            "teams": [team.to_dict() for team in self.teams],
            "players": [player.to_dict() for player in self.players],
            "deck": [card.to_dict() for card in self.deck],
            "phase": self.phase.value,
            "turn": self.turn.to_dict() if self.turn else None,
            "settings": self.settings.to_dict(),
            "phaseState": {
                phase.value: state.to_dict()
                for phase, state in self.phase_state.items()
            },
            "phaseResults": {
                phase.value: dict(result) if result is not None else None
                for phase, result in self.phase_results.items()
            },
            "gameStatus": self.game_status.value,
            "gameOverModal": self.game_over_modal,
        }
        if self.last_team_id is not None:
            data["lastTeamId"] = self.last_team_id
        if self.phase_complete_modal is not None:
            data["phaseCompleteModal"] = self.phase_complete_modal.value
        if self.discard is not None:
            data["discard"] = [card.to_dict() for card in self.discard]
        if self.legacy_scored_by_team is not None:
            data["scoredByTeam"] = dict(self.legacy_scored_by_team)
        return data
