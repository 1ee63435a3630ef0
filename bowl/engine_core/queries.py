"""
Engine Queries - Pure readers over a session, plus phase bookkeeping.

Nothing here mutates. Scores are never stored on teams; they are the
lengths of the scored piles, frozen into phase_results once a phase ends.
"""

from __future__ import annotations

from .shuffle import Shuffler, shuffle
from .state import Card, GameSession, PhaseResult, PhaseState, RoundPhase


PHASE_ORDER: list[RoundPhase] = [
    RoundPhase.DESCRIBE,
    RoundPhase.ONE_WORD,
    RoundPhase.CHARADES,
]

PHASE_LABELS: dict[RoundPhase, str] = {
    RoundPhase.DESCRIBE: "Describe",
    RoundPhase.ONE_WORD: "One Word",
    RoundPhase.CHARADES: "Charades",
}


def get_other_team_id(session: GameSession, team_id: str) -> str | None:
    """The sole other team; the first team if no distinct one exists."""
    ids = session.team_ids
    for other in ids:
        if other != team_id:
            return other
    return ids[0] if ids else None


def get_next_phase(phase: RoundPhase) -> RoundPhase | None:
    """Phase after `phase`, or None after the last one."""
    idx = PHASE_ORDER.index(phase)
    if idx >= len(PHASE_ORDER) - 1:
        return None
    return PHASE_ORDER[idx + 1]


def get_team_phase_score(session: GameSession, team_id: str, phase: RoundPhase) -> int:
    """Live count of cards a team scored in `phase`."""
    return len(session.phase_state[phase].scored_by_team.get(team_id, []))


def get_team_phase_result(session: GameSession, team_id: str, phase: RoundPhase) -> int:
    """Finalized phase score if available, else the in-progress count."""
    finalized = session.phase_results.get(phase)
    if finalized is not None and team_id in finalized:
        return finalized[team_id]
    return get_team_phase_score(session, team_id, phase)


def get_team_total_score(session: GameSession, team_id: str) -> int:
    """Total across all phases."""
    return sum(get_team_phase_result(session, team_id, phase) for phase in PHASE_ORDER)


def is_phase_complete(session: GameSession, phase: RoundPhase) -> bool:
    """A phase is complete when its main bowl is empty."""
    return len(session.phase_state[phase].main_bowl) == 0


def get_cards_in_bowl_count(session: GameSession, phase: RoundPhase) -> int:
    return len(session.phase_state[phase].main_bowl)


def get_card_by_id(session: GameSession, card_id: str) -> Card | None:
    for card in session.deck:
        if card.id == card_id:
            return card
    return None


def empty_team_buckets(team_ids: list[str]) -> dict[str, list[str]]:
    return {team_id: [] for team_id in team_ids}


def init_phase_state_for_teams(
    card_ids: list[str],
    team_a_id: str,
    team_b_id: str,
    shuffler: Shuffler = shuffle,
) -> PhaseState:
    """Fresh pools for one phase: every card in a newly shuffled bowl."""
    return PhaseState(
        main_bowl=list(shuffler(list(card_ids))),
        passed_to_team=empty_team_buckets([team_a_id, team_b_id]),
        scored_by_team=empty_team_buckets([team_a_id, team_b_id]),
    )


def create_empty_phase_results() -> dict[RoundPhase, PhaseResult | None]:
    return {phase: None for phase in PHASE_ORDER}


def snapshot_phase_result(session: GameSession, phase: RoundPhase) -> PhaseResult:
    """Freeze the current scored-pile sizes of `phase`, one entry per team."""
    scored = session.phase_state[phase].scored_by_team
    return {team_id: len(scored.get(team_id, [])) for team_id in session.team_ids}
