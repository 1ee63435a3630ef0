"""
Turn Commands - Every player-visible action on a running game.

Commands are pure functions:
    (session, [now_ms]) -> CommandResult(session', changed, signals)

They never raise for an action that makes no sense in the current state;
they return the session unchanged with changed=False. Follow-up work is
signalled, never performed: the owner decides when to end a turn or to
check for phase completion, so that time-outs and manual ends go through
the same path.

Turn lifecycle:
    no turn -> start_turn -> running -> (got_it | pass)* -> end_turn -> no turn
                                   \\-> bowl empty -> advance_phase_if_complete
"""

from __future__ import annotations
import time

from .action import CommandResult, GotIt, PassToOther, TurnAction, append_history
from .queries import (
    empty_team_buckets,
    get_next_phase,
    get_other_team_id,
    init_phase_state_for_teams,
    is_phase_complete,
    snapshot_phase_result,
)
from .shuffle import Shuffler, shuffle
from .state import GameSession, GameStatus, PhaseState, TurnState


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


def _draw_from_main_bowl(phase_state: PhaseState) -> tuple[PhaseState, str | None]:
    """Take the head of the bowl. Returns (new state, card id or None)."""
    if not phase_state.main_bowl:
        return phase_state, None
    next_card_id = phase_state.main_bowl[0]
    return phase_state._copy_with(main_bowl=phase_state.main_bowl[1:]), next_card_id


def _clear_passed(session: GameSession, phase_state: PhaseState) -> PhaseState:
    # The passed pile is not used under current rules; keep it present and empty.
    return phase_state._copy_with(passed_to_team=empty_team_buckets(session.team_ids))


def start_turn_command(session: GameSession, now: int | None = None) -> CommandResult:
    """
    Give the bowl to the next team and draw its first card.

    Teams alternate: the team after `last_team_id`, or the first team
    when nobody has played yet. An empty bowl starts nothing and asks
    the caller to advance the phase instead.

    A turn already in progress, running or stopped, must be ended first.
    """
    if session.game_status != GameStatus.PLAYING or session.turn is not None:
        return CommandResult.unchanged(session)
    if len(session.teams) < 2 or not session.teams[0].id or not session.teams[1].id:
        return CommandResult.unchanged(session)

    if session.last_team_id:
        active_team_id = get_other_team_id(session, session.last_team_id)
    else:
        active_team_id = session.teams[0].id

    team_players = [p for p in session.players if p.team_id == active_team_id]
    active_player_id = team_players[0].id if team_players else None

    phase_state, card_id = _draw_from_main_bowl(session.current_phase_state)
    if card_id is None:
        return CommandResult.unchanged(session, should_advance_phase=True)

    turn = TurnState(
        active_team_id=active_team_id,
        active_player_id=active_player_id,
        seconds_remaining=session.settings.turn_seconds,
        is_running=True,
        started_at=now if now is not None else now_ms(),
        current_card_id=card_id,
        history=[],
    )

    new_session = session.with_phase_state(
        session.phase, _clear_passed(session, phase_state)
    )._copy_with(turn=turn, last_team_id=active_team_id)
    return CommandResult.updated(new_session)


def tick_turn_command(session: GameSession) -> CommandResult:
    """
    One second of the turn clock.

    Reaching zero is reported through should_end_turn and not applied
    here; the caller ends the turn with reason "time".
    """
    turn = session.turn
    if turn is None or not turn.is_running:
        return CommandResult.unchanged(session)

    remaining = max(0, turn.seconds_remaining - 1)
    if remaining == 0:
        return CommandResult.unchanged(session, should_end_turn=True)

    return CommandResult.updated(
        session._copy_with(turn=turn._copy_with(seconds_remaining=remaining))
    )


def end_turn_command(session: GameSession) -> CommandResult:
    """
    Stop the current turn.

    A card still in hand goes back on top of the bowl so the next team
    draws it first. Always asks the caller to re-check phase completion.
    """
    turn = session.turn
    if turn is None:
        return CommandResult.unchanged(session)

    phase_state = session.current_phase_state
    if turn.current_card_id:
        phase_state = _clear_passed(
            session,
            phase_state._copy_with(main_bowl=[turn.current_card_id, *phase_state.main_bowl]),
        )

    new_session = session.with_phase_state(session.phase, phase_state)._copy_with(turn=None)
    return CommandResult.updated(new_session, should_advance_phase=True)


def _resolve_current_card(session: GameSession, credited_team_id: str, make_action) -> CommandResult:
    """
    Shared body of got-it and pass: credit the card in hand, draw the next.

    `make_action(card_id, next_card_id)` builds the history entry.
    """
    turn = session.turn
    phase = session.phase
    phase_state = session.current_phase_state
    card_id = turn.current_card_id

    scored = [*phase_state.scored_for(credited_team_id), card_id]
    drawn_state, next_card_id = _draw_from_main_bowl(phase_state)

    action: TurnAction = make_action(card_id, next_card_id)
    new_state = _clear_passed(session, drawn_state.with_scored(credited_team_id, scored))

    bowl_empty = next_card_id is None
    new_turn = turn._copy_with(
        current_card_id=next_card_id,
        is_running=False if bowl_empty else turn.is_running,
        seconds_remaining=0 if bowl_empty else turn.seconds_remaining,
        history=append_history(turn.history, action),
    )

    new_session = session.with_phase_state(phase, new_state)._copy_with(turn=new_turn)
    return CommandResult.updated(new_session, should_advance_phase=bowl_empty)


def got_it_command(session: GameSession) -> CommandResult:
    """The active team guessed the card in hand."""
    turn = session.turn
    if turn is None or not turn.current_card_id:
        return CommandResult.unchanged(session)

    team_id = turn.active_team_id
    return _resolve_current_card(
        session,
        team_id,
        lambda card_id, next_card_id: GotIt(
            card_id=card_id,
            team_id=team_id,
            phase=session.phase,
            next_card_id=next_card_id,
        ),
    )


def pass_command(session: GameSession) -> CommandResult:
    """The active team gives up the card; it scores for the other team."""
    turn = session.turn
    if turn is None or not turn.current_card_id:
        return CommandResult.unchanged(session)

    from_team_id = turn.active_team_id
    to_team_id = get_other_team_id(session, from_team_id)
    return _resolve_current_card(
        session,
        to_team_id,
        lambda card_id, next_card_id: PassToOther(
            card_id=card_id,
            from_team_id=from_team_id,
            to_team_id=to_team_id,
            phase=session.phase,
            next_card_id=next_card_id,
        ),
    )


def undo_command(session: GameSession) -> CommandResult:
    """
    Reverse the most recent got-it or pass of this turn.

    The card drawn after the action goes back on top of the bowl, the
    undone card returns to hand, and its last occurrence is removed from
    the pile it was credited to. Refuses (changed=False) if the history
    no longer matches the card in hand.
    """
    turn = session.turn
    if turn is None or not turn.history:
        return CommandResult.unchanged(session)

    action = turn.history[-1]
    phase_state = session.current_phase_state

    # History and state must agree on what is in hand.
    if turn.current_card_id != action.next_card_id:
        return CommandResult.unchanged(session)

    main_bowl = list(phase_state.main_bowl)
    if action.next_card_id is not None:
        main_bowl.insert(0, action.next_card_id)

    if isinstance(action, GotIt):
        team_id = action.team_id
    elif isinstance(action, PassToOther):
        team_id = action.to_team_id
    else:
        return CommandResult.unchanged(session)

    pile = phase_state.scored_for(team_id)
    idx = _last_index(pile, action.card_id)
    if idx < 0:
        return CommandResult.unchanged(session)
    del pile[idx]

    new_state = _clear_passed(
        session,
        phase_state._copy_with(main_bowl=main_bowl).with_scored(team_id, pile),
    )
    new_turn = turn._copy_with(current_card_id=action.card_id, history=turn.history[:-1])
    new_session = session.with_phase_state(session.phase, new_state)._copy_with(turn=new_turn)
    return CommandResult.updated(new_session)


def _last_index(items: list[str], value: str) -> int:
    try:
        return len(items) - 1 - items[::-1].index(value)
    except ValueError:
        return -1


def advance_phase_if_complete_command(session: GameSession) -> CommandResult:
    """
    Close the current phase once its bowl is empty.

    Freezes the phase scores, then either opens the phase-complete modal
    or, after the last phase, finishes the game.
    """
    if session.game_status == GameStatus.FINISHED:
        return CommandResult.unchanged(session)
    if session.phase_complete_modal == session.phase:
        return CommandResult.unchanged(session)
    if not is_phase_complete(session, session.phase):
        return CommandResult.unchanged(session)

    phase = session.phase
    result = snapshot_phase_result(session, phase)
    new_session = session.with_phase_result(phase, result)

    if get_next_phase(phase) is not None:
        return CommandResult.updated(
            new_session._copy_with(phase_complete_modal=phase, turn=None)
        )

    return CommandResult.updated(
        new_session._copy_with(
            game_status=GameStatus.FINISHED,
            game_over_modal=True,
            turn=None,
        )
    )


def dismiss_phase_complete_modal_command(
    session: GameSession,
    shuffler: Shuffler = shuffle,
) -> CommandResult:
    """Move on to the next phase with a freshly shuffled bowl."""
    if session.phase_complete_modal is None:
        return CommandResult.unchanged(session)

    next_phase = get_next_phase(session.phase_complete_modal)
    if next_phase is None:
        return CommandResult.unchanged(session)

    if len(session.teams) < 2:
        return CommandResult.unchanged(session)

    next_state = init_phase_state_for_teams(
        session.card_ids, session.teams[0].id, session.teams[1].id, shuffler
    )
    new_session = session.with_phase_state(next_phase, next_state)._copy_with(
        phase=next_phase,
        phase_complete_modal=None,
        turn=None,
    )
    return CommandResult.updated(new_session)


def dismiss_game_over_modal_command(session: GameSession) -> CommandResult:
    if not session.game_over_modal:
        return CommandResult.unchanged(session)
    return CommandResult.updated(session._copy_with(game_over_modal=False))
