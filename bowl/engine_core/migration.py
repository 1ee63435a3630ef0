"""
Session Migration - Turns any persisted blob into a canonical GameSession.

Three generations of phase pools have been written to disk:
1. Per-team draw piles: phaseState.describe.drawPileByTeam
2. Shared bowl plus a "passed" pile per team (cards passed to a team
   waited there to be drawn again)
3. Shared bowl where a pass scores directly for the other team (current)

Generations 2 and 3 share a shape and are told apart only by non-empty
passed piles. Anything unrecognizable is rebuilt from the deck.

Migration is lenient: only a blob that is not a mapping at all raises
InvalidSessionError. Every other missing or malformed field falls back
to a default. Transformers are kept for every generation since saved
games may be arbitrarily old.
"""

from __future__ import annotations
import logging
import math
from enum import Enum
from typing import Any, Mapping, TypeVar

from .action import TURN_HISTORY_LIMIT, GotIt, PassToOther, TurnAction
from .exceptions import InvalidSessionError
from .queries import (
    PHASE_ORDER,
    create_empty_phase_results,
    empty_team_buckets,
    init_phase_state_for_teams,
)
from .shuffle import Shuffler, shuffle
from .state import (
    DEFAULT_TURN_SECONDS,
    Card,
    GameSession,
    GameStatus,
    PhaseResult,
    PhaseState,
    Player,
    RoundPhase,
    SessionSettings,
    Team,
    TurnState,
)
from .turn_commands import now_ms

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# Team ids assumed when a blob has lost its teams.
FALLBACK_TEAM_IDS = ("teamA", "teamB")


# =============================================================================
# Coercion helpers
# =============================================================================

def _is_record(value: Any) -> bool:
    return isinstance(value, Mapping)


def _finite_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return value if math.isfinite(value) else None
    except OverflowError:
        # ints beyond float range
        return None


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _enum_or(enum_cls: type[E], value: Any, default: E | None) -> E | None:
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _id_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def merge_unique_card_ids(*lists: list[str]) -> list[str]:
    """Concatenate, keeping the first occurrence of each id."""
    seen: set[str] = set()
    merged: list[str] = []
    for card_ids in lists:
        for card_id in card_ids:
            if card_id not in seen:
                seen.add(card_id)
                merged.append(card_id)
    return merged


# =============================================================================
# Entities
# =============================================================================

def _parse_teams(value: Any) -> list[Team]:
    teams = []
    for entry in value if isinstance(value, list) else []:
        if not _is_record(entry) or not _str_or_none(entry.get("id")):
            continue
        score = _finite_number(entry.get("score"))
        teams.append(Team(
            id=entry["id"],
            name=str(entry.get("name", "")),
            score=int(score) if score is not None else 0,
        ))
    return teams


def _parse_players(value: Any) -> list[Player]:
    players = []
    for entry in value if isinstance(value, list) else []:
        if not _is_record(entry) or not _str_or_none(entry.get("id")):
            continue
        players.append(Player(
            id=entry["id"],
            name=str(entry.get("name", "")),
            team_id=str(entry.get("teamId", "")),
        ))
    return players


def _parse_cards(value: Any) -> list[Card]:
    cards = []
    for entry in value if isinstance(value, list) else []:
        if not _is_record(entry) or not _str_or_none(entry.get("id")):
            continue
        cards.append(Card(
            id=entry["id"],
            text=str(entry.get("text", "")),
            created_by_player_id=_str_or_none(entry.get("createdByPlayerId")),
        ))
    return cards


def parse_turn_action(value: Any) -> TurnAction | None:
    """
    Read one history entry, or None if it is not a current-generation action.

    Entries carrying `drawnFrom` come from the draw-pile rules and cannot
    be reversed without the card drawn after them.
    """
    if not _is_record(value) or "drawnFrom" in value:
        return None

    phase = _enum_or(RoundPhase, value.get("phase"), None)
    card_id = _str_or_none(value.get("cardId"))
    if phase is None or card_id is None:
        return None
    next_card_id = _str_or_none(value.get("nextCardId"))

    action_type = value.get("type")
    if action_type == GotIt.type:
        team_id = _str_or_none(value.get("teamId"))
        if team_id is None:
            return None
        return GotIt(card_id=card_id, team_id=team_id, phase=phase, next_card_id=next_card_id)

    if action_type == PassToOther.type:
        from_team_id = _str_or_none(value.get("fromTeamId"))
        to_team_id = _str_or_none(value.get("toTeamId"))
        if from_team_id is None or to_team_id is None:
            return None
        return PassToOther(
            card_id=card_id,
            from_team_id=from_team_id,
            to_team_id=to_team_id,
            phase=phase,
            next_card_id=next_card_id,
        )

    return None


def _parse_turn(value: Any, settings: SessionSettings) -> TurnState | None:
    """A turn is only kept if it still names its active team."""
    if not _is_record(value) or not _str_or_none(value.get("activeTeamId")):
        return None

    seconds = _finite_number(value.get("secondsRemaining"))
    started_at = _finite_number(value.get("startedAt"))
    raw_history = value.get("history")
    history = []
    if isinstance(raw_history, list):
        parsed = (parse_turn_action(entry) for entry in raw_history)
        history = [action for action in parsed if action is not None][-TURN_HISTORY_LIMIT:]

    return TurnState(
        active_team_id=value["activeTeamId"],
        active_player_id=_str_or_none(value.get("activePlayerId")),
        seconds_remaining=int(seconds) if seconds is not None else settings.turn_seconds,
        is_running=bool(value.get("isRunning")),
        started_at=int(started_at) if started_at is not None else now_ms(),
        current_card_id=_str_or_none(value.get("currentCardId")),
        history=history,
    )


def _parse_settings(value: Any) -> SessionSettings:
    if _is_record(value):
        seconds = _finite_number(value.get("turnSeconds"))
        if seconds is not None and seconds > 0:
            return SessionSettings(turn_seconds=int(seconds))
    return SessionSettings(turn_seconds=DEFAULT_TURN_SECONDS)


# =============================================================================
# Phase pools: shape detectors
# =============================================================================

def is_current_phase_state(value: Any) -> bool:
    """Shared-bowl shape (generations 2 and 3)."""
    if not _is_record(value):
        return False
    describe = value.get("describe")
    return _is_record(describe) and isinstance(describe.get("mainBowl"), list)


def is_draw_pile_phase_state(value: Any) -> bool:
    """Per-team draw-pile shape (generation 1)."""
    if not _is_record(value):
        return False
    describe = value.get("describe")
    return _is_record(describe) and _is_record(describe.get("drawPileByTeam"))


# =============================================================================
# Phase pools: transformers
# =============================================================================

def normalize_phase_state(value: Mapping[str, Any], team_a_id: str, team_b_id: str) -> PhaseState:
    """
    Canonicalize a shared-bowl phase.

    Cards sitting in a legacy passed pile count as scored for that team;
    the passed piles are emptied.
    """
    passed = value.get("passedToTeam") if _is_record(value.get("passedToTeam")) else {}
    scored = value.get("scoredByTeam") if _is_record(value.get("scoredByTeam")) else {}

    return PhaseState(
        main_bowl=_id_list(value.get("mainBowl")),
        passed_to_team=empty_team_buckets([team_a_id, team_b_id]),
        scored_by_team={
            team_id: merge_unique_card_ids(
                _id_list(scored.get(team_id)), _id_list(passed.get(team_id))
            )
            for team_id in (team_a_id, team_b_id)
        },
    )


def migrate_draw_pile_phase(value: Mapping[str, Any], team_a_id: str, team_b_id: str) -> PhaseState:
    """Union both teams' draw piles (team A first) into one bowl."""
    piles = value.get("drawPileByTeam") if _is_record(value.get("drawPileByTeam")) else {}
    scored = value.get("scoredByTeam") if _is_record(value.get("scoredByTeam")) else {}

    return PhaseState(
        main_bowl=merge_unique_card_ids(
            _id_list(piles.get(team_a_id)), _id_list(piles.get(team_b_id))
        ),
        passed_to_team=empty_team_buckets([team_a_id, team_b_id]),
        scored_by_team={
            team_id: _id_list(scored.get(team_id))
            for team_id in (team_a_id, team_b_id)
        },
    )


def _migrate_phase_state(
    value: Any,
    card_ids: list[str],
    team_a_id: str,
    team_b_id: str,
    shuffler: Shuffler,
) -> dict[RoundPhase, PhaseState]:
    if is_current_phase_state(value):
        logger.debug("Phase state: shared bowl")
        transform = normalize_phase_state
    elif is_draw_pile_phase_state(value):
        logger.debug("Phase state: per-team draw piles")
        transform = migrate_draw_pile_phase
    else:
        logger.debug("Phase state: unrecognized, rebuilding from deck")
        value, transform = {}, None

    phase_state = {}
    for phase in PHASE_ORDER:
        raw_phase = value.get(phase.value)
        if transform is not None and _is_record(raw_phase):
            phase_state[phase] = transform(raw_phase, team_a_id, team_b_id)
        else:
            phase_state[phase] = init_phase_state_for_teams(
                card_ids, team_a_id, team_b_id, shuffler
            )
    return phase_state


# =============================================================================
# Phase results
# =============================================================================

def _normalize_phase_result(value: Any, team_ids: list[str]) -> PhaseResult | None:
    if not _is_record(value):
        return None
    result = {}
    for team_id in team_ids:
        score = _finite_number(value.get(team_id))
        result[team_id] = int(score) if score is not None else 0
    return result


def _migrate_phase_results(
    value: Any,
    phase_state: dict[RoundPhase, PhaseState],
    team_ids: list[str],
) -> dict[RoundPhase, PhaseResult | None]:
    results = create_empty_phase_results()
    if _is_record(value):
        for phase in PHASE_ORDER:
            results[phase] = _normalize_phase_result(value.get(phase.value), team_ids)

    # Saves taken between completing a phase and showing its modal
    # never recorded the snapshot.
    for phase in PHASE_ORDER:
        if results[phase] is None and not phase_state[phase].main_bowl:
            scored = phase_state[phase].scored_by_team
            results[phase] = {team_id: len(scored.get(team_id, [])) for team_id in team_ids}
    return results


# =============================================================================
# Entry point
# =============================================================================

def migrate_session(raw: Any, shuffler: Shuffler = shuffle) -> GameSession:
    """
    Migrate a deserialized blob of any generation to a GameSession.

    Raises:
        InvalidSessionError: if `raw` is not a mapping
    """
    if not _is_record(raw):
        raise InvalidSessionError()

    teams = _parse_teams(raw.get("teams"))
    deck = _parse_cards(raw.get("deck"))
    team_a_id = teams[0].id if len(teams) > 0 else FALLBACK_TEAM_IDS[0]
    team_b_id = teams[1].id if len(teams) > 1 else FALLBACK_TEAM_IDS[1]
    team_ids = [team_a_id, team_b_id]

    phase_state = _migrate_phase_state(
        raw.get("phaseState"), [card.id for card in deck], team_a_id, team_b_id, shuffler
    )
    settings = _parse_settings(raw.get("settings"))
    created_at = _finite_number(raw.get("createdAt"))

    session = GameSession(
        id=str(raw["id"]) if raw.get("id") is not None else "",
        created_at=int(created_at) if created_at is not None else 0,
        teams=teams,
        players=_parse_players(raw.get("players")),
        deck=deck,
        phase=_enum_or(RoundPhase, raw.get("phase"), RoundPhase.DESCRIBE),
        turn=_parse_turn(raw.get("turn"), settings),
        settings=settings,
        phase_state=phase_state,
        phase_results=_migrate_phase_results(raw.get("phaseResults"), phase_state, team_ids),
        game_status=_enum_or(GameStatus, raw.get("gameStatus"), GameStatus.PLAYING),
        last_team_id=_str_or_none(raw.get("lastTeamId")),
        phase_complete_modal=_enum_or(RoundPhase, raw.get("phaseCompleteModal"), None),
        game_over_modal=bool(raw.get("gameOverModal")),
    )

    discard = _parse_cards(raw.get("discard"))
    if discard:
        session = session._copy_with(discard=discard)
    if _is_record(raw.get("scoredByTeam")) and raw["scoredByTeam"]:
        session = session._copy_with(legacy_scored_by_team=dict(raw["scoredByTeam"]))

    return session
