"""
Pytest fixtures for Bowl tests.
"""

import itertools

import pytest

from ..engine_core.queries import create_empty_phase_results
from ..engine_core.session_commands import SessionDeps
from ..engine_core.state import (
    Card,
    GameSession,
    GameStatus,
    PhaseState,
    Player,
    RoundPhase,
    SessionSettings,
    Team,
)
from ..session.storage import GameStorage, InMemoryKeyValueStore

TEAM_A = "team-a"
TEAM_B = "team-b"


def make_phase_state(main_bowl, scored_a=(), scored_b=()) -> PhaseState:
    return PhaseState(
        main_bowl=list(main_bowl),
        passed_to_team={TEAM_A: [], TEAM_B: []},
        scored_by_team={TEAM_A: list(scored_a), TEAM_B: list(scored_b)},
    )


def build_session(card_ids=("c1", "c2"), **overrides) -> GameSession:
    """Two teams, one player each, every phase bowl in deck order."""
    fields = dict(
        id="session-1",
        created_at=1,
        teams=[Team(id=TEAM_A, name="A"), Team(id=TEAM_B, name="B")],
        players=[
            Player(id="player-a", name="Player A", team_id=TEAM_A),
            Player(id="player-b", name="Player B", team_id=TEAM_B),
        ],
        deck=[Card(id=card_id, text=card_id.upper()) for card_id in card_ids],
        phase=RoundPhase.DESCRIBE,
        turn=None,
        settings=SessionSettings(turn_seconds=60),
        phase_state={phase: make_phase_state(card_ids) for phase in RoundPhase},
        phase_results=create_empty_phase_results(),
        game_status=GameStatus.PLAYING,
    )
    fields.update(overrides)
    return GameSession(**fields)


def identity_shuffler(items):
    return list(items)


def counting_ids(prefix="id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def session() -> GameSession:
    """The two-card session: deck [c1, c2], describe bowl [c1, c2]."""
    return build_session()


@pytest.fixture
def deps() -> SessionDeps:
    """Deterministic ids, a fixed clock and no shuffling."""
    return SessionDeps(
        generate_id=counting_ids(),
        now=lambda: 5_000,
        shuffler=identity_shuffler,
    )


@pytest.fixture
def storage() -> GameStorage:
    return GameStorage(InMemoryKeyValueStore(), prefix="bowl:")
