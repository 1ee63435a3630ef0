"""
Engine Core - Session model, commands and migration.

The engine is the part that:
1. Defines the immutable GameSession value
2. Answers questions about it (scores, phase completion)
3. Advances it through pure commands
4. Upgrades persisted sessions from older rule generations
"""

from .state import (
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
from .action import CommandResult, GotIt, PassToOther, TurnAction, TURN_HISTORY_LIMIT
from .exceptions import InvalidSessionError
from .queries import (
    PHASE_LABELS,
    PHASE_ORDER,
    create_empty_phase_results,
    get_card_by_id,
    get_cards_in_bowl_count,
    get_next_phase,
    get_other_team_id,
    get_team_phase_result,
    get_team_phase_score,
    get_team_total_score,
    init_phase_state_for_teams,
    is_phase_complete,
    snapshot_phase_result,
)
from .turn_commands import (
    advance_phase_if_complete_command,
    dismiss_game_over_modal_command,
    dismiss_phase_complete_modal_command,
    end_turn_command,
    got_it_command,
    pass_command,
    start_turn_command,
    tick_turn_command,
    undo_command,
)
from .session_commands import SessionDeps, create_session_from_wizard, hydrate_running_turn
from .migration import migrate_session

__all__ = [
    "Card",
    "GameSession",
    "GameStatus",
    "PhaseResult",
    "PhaseState",
    "Player",
    "RoundPhase",
    "SessionSettings",
    "Team",
    "TurnState",
    "CommandResult",
    "GotIt",
    "PassToOther",
    "TurnAction",
    "TURN_HISTORY_LIMIT",
    "InvalidSessionError",
    "PHASE_LABELS",
    "PHASE_ORDER",
    "create_empty_phase_results",
    "get_card_by_id",
    "get_cards_in_bowl_count",
    "get_next_phase",
    "get_other_team_id",
    "get_team_phase_result",
    "get_team_phase_score",
    "get_team_total_score",
    "init_phase_state_for_teams",
    "is_phase_complete",
    "snapshot_phase_result",
    "advance_phase_if_complete_command",
    "dismiss_game_over_modal_command",
    "dismiss_phase_complete_modal_command",
    "end_turn_command",
    "got_it_command",
    "pass_command",
    "start_turn_command",
    "tick_turn_command",
    "undo_command",
    "SessionDeps",
    "create_session_from_wizard",
    "hydrate_running_turn",
    "migrate_session",
]
