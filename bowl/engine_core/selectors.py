"""View selectors - what a screen needs to know about a session."""

from __future__ import annotations

from .queries import get_card_by_id, get_team_total_score
from .state import Card, GameSession, Team


def select_current_card(session: GameSession) -> Card | None:
    """The card in hand, if any."""
    if session.turn is None or not session.turn.current_card_id:
        return None
    return get_card_by_id(session, session.turn.current_card_id)


def select_is_turn_running(session: GameSession) -> bool:
    return session.turn.is_running if session.turn else False


def select_can_undo(session: GameSession) -> bool:
    return bool(session.turn and session.turn.history)


def select_teams(session: GameSession) -> tuple[Team | None, Team | None]:
    """(first team, second team), None where missing."""
    team_a = session.teams[0] if len(session.teams) > 0 else None
    team_b = session.teams[1] if len(session.teams) > 1 else None
    return team_a, team_b


def get_winning_team(session: GameSession) -> Team | None:
    """Team with the higher total; None on a tie or without two teams."""
    if len(session.teams) < 2:
        return None
    first, second = session.teams[0], session.teams[1]
    first_total = get_team_total_score(session, first.id)
    second_total = get_team_total_score(session, second.id)
    if first_total > second_total:
        return first
    if second_total > first_total:
        return second
    return None


def get_winner_text(session: GameSession) -> str:
    if len(session.teams) < 2:
        return "Game complete."
    winner = get_winning_team(session)
    if winner is None:
        return "It's a tie!"
    return f"{winner.name} wins!"
