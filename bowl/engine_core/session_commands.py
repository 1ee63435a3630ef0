"""
Session Commands - Creating a session and resuming one.

This module handles:
- Building a new session from wizard input
- Folding wall-clock time spent in the background into a running turn
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable

from .queries import PHASE_ORDER, create_empty_phase_results, init_phase_state_for_teams
from .schemas import CreateSessionInput
from .shuffle import IdGenerator, Shuffler, generate_id, shuffle
from .state import (
    Card,
    GameSession,
    GameStatus,
    Player,
    RoundPhase,
    SessionSettings,
    Team,
)
from .turn_commands import now_ms


@dataclass
class SessionDeps:
    """Collaborators used at creation time (swap them in tests)."""
    generate_id: IdGenerator = generate_id
    now: Callable[[], int] = now_ms
    shuffler: Shuffler = shuffle


def create_session_from_wizard(
    wizard: CreateSessionInput,
    deps: SessionDeps | None = None,
) -> GameSession:
    """
    Build a new session from wizard inputs.

    Two teams get fresh ids. Without any named players, one placeholder
    player is created per team. Every phase receives its own shuffle of
    the same card ids.

    Returns:
        A session in the describe phase with no turn started
    """
    deps = deps or SessionDeps()

    team_a_id = deps.generate_id()
    team_b_id = deps.generate_id()
    teams = [
        Team(id=team_a_id, name=wizard.team_names[0], score=0),
        Team(id=team_b_id, name=wizard.team_names[1], score=0),
    ]

    team_ids = [team_a_id, team_b_id]
    if wizard.players:
        players = [
            Player(id=seed.id, name=seed.name, team_id=team_ids[seed.team_index])
            for seed in wizard.players
        ]
    else:
        players = [
            Player(id=deps.generate_id(), name="Player 1", team_id=team_a_id),
            Player(id=deps.generate_id(), name="Player 2", team_id=team_b_id),
        ]

    deck = [
        Card(id=seed.id, text=seed.text, created_by_player_id=seed.created_by_player_id)
        for seed in wizard.cards
    ]
    card_ids = [card.id for card in deck]

    phase_state = {
        phase: init_phase_state_for_teams(card_ids, team_a_id, team_b_id, deps.shuffler)
        for phase in PHASE_ORDER
    }

    return GameSession(
        id=deps.generate_id(),
        created_at=deps.now(),
        teams=teams,
        players=players,
        deck=deck,
        phase=RoundPhase.DESCRIBE,
        turn=None,
        settings=SessionSettings(turn_seconds=wizard.turn_seconds),
        phase_state=phase_state,
        phase_results=create_empty_phase_results(),
        game_status=GameStatus.PLAYING,
    )


def hydrate_running_turn(session: GameSession, now: int | None = None) -> GameSession:
    """
    Reconcile a running turn with the wall clock.

    Whole seconds elapsed since `started_at` come off the clock. When it
    runs out the turn is stopped but not ended; ending it and checking
    for phase completion is left to the next interaction. Otherwise
    `started_at` moves to `now` so the same time is never counted twice.
    """
    turn = session.turn
    if turn is None or not turn.is_running:
        return session

    if now is None:
        now = now_ms()
    elapsed = (now - turn.started_at) // 1000
    if elapsed <= 0:
        return session

    remaining = max(0, turn.seconds_remaining - elapsed)
    if remaining == turn.seconds_remaining:
        return session

    if remaining == 0:
        return session._copy_with(
            turn=turn._copy_with(is_running=False, seconds_remaining=0)
        )

    return session._copy_with(
        turn=turn._copy_with(seconds_remaining=remaining, started_at=now)
    )
