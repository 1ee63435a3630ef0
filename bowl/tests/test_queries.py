"""
Tests for read-only queries and view selectors.
"""

from ..engine_core.queries import (
    PHASE_LABELS,
    PHASE_ORDER,
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
from ..engine_core.selectors import (
    get_winner_text,
    get_winning_team,
    select_can_undo,
    select_current_card,
    select_is_turn_running,
    select_teams,
)
from ..engine_core.shuffle import generate_id, seeded_shuffler, shuffle
from ..engine_core.state import RoundPhase
from ..engine_core.turn_commands import got_it_command, start_turn_command
from .conftest import TEAM_A, TEAM_B, build_session, make_phase_state


def scored_session(describe=((), ()), one_word=((), ()), charades=((), ()), results=None):
    """Session with every bowl empty and the given scored piles."""
    session = build_session()
    for phase, (a, b) in zip(PHASE_ORDER, (describe, one_word, charades)):
        session = session.with_phase_state(phase, make_phase_state([], a, b))
    for phase, result in (results or {}).items():
        session = session.with_phase_result(phase, result)
    return session


class TestPhaseOrder:

    def test_next_phase(self):
        assert get_next_phase(RoundPhase.DESCRIBE) == RoundPhase.ONE_WORD
        assert get_next_phase(RoundPhase.ONE_WORD) == RoundPhase.CHARADES
        assert get_next_phase(RoundPhase.CHARADES) is None

    def test_labels(self):
        assert [PHASE_LABELS[phase] for phase in PHASE_ORDER] == ["Describe", "One Word", "Charades"]


class TestTeams:

    def test_other_team(self, session):
        assert get_other_team_id(session, TEAM_A) == TEAM_B
        assert get_other_team_id(session, TEAM_B) == TEAM_A

    def test_other_team_falls_back_to_first(self, session):
        single = session._copy_with(teams=session.teams[:1])

        assert get_other_team_id(single, TEAM_A) == TEAM_A
        assert get_other_team_id(session._copy_with(teams=[]), TEAM_A) is None


class TestScores:

    def test_live_phase_score(self):
        session = scored_session(describe=(["c1", "c2"], ["c3"]))

        assert get_team_phase_score(session, TEAM_A, RoundPhase.DESCRIBE) == 2
        assert get_team_phase_score(session, TEAM_B, RoundPhase.DESCRIBE) == 1
        assert get_team_phase_score(session, "nobody", RoundPhase.DESCRIBE) == 0

    def test_finalized_result_wins_over_live_count(self):
        session = scored_session(
            describe=(["c1"], []),
            results={RoundPhase.DESCRIBE: {TEAM_A: 5, TEAM_B: 2}},
        )

        assert get_team_phase_result(session, TEAM_A, RoundPhase.DESCRIBE) == 5
        assert get_team_phase_result(session, TEAM_A, RoundPhase.ONE_WORD) == 0

    def test_total_across_phases(self):
        session = scored_session(
            describe=(["c1"], ["c2"]),
            one_word=(["c1", "c2"], []),
            charades=([], ["c1", "c2"]),
        )

        assert get_team_total_score(session, TEAM_A) == 3
        assert get_team_total_score(session, TEAM_B) == 3

    def test_snapshot(self):
        session = scored_session(describe=(["c1", "c2"], []))

        assert snapshot_phase_result(session, RoundPhase.DESCRIBE) == {TEAM_A: 2, TEAM_B: 0}


class TestBowl:

    def test_completion_and_count(self, session):
        assert not is_phase_complete(session, RoundPhase.DESCRIBE)
        assert get_cards_in_bowl_count(session, RoundPhase.DESCRIBE) == 2

        emptied = scored_session()
        assert is_phase_complete(emptied, RoundPhase.DESCRIBE)
        assert get_cards_in_bowl_count(emptied, RoundPhase.DESCRIBE) == 0

    def test_card_lookup(self, session):
        assert get_card_by_id(session, "c2").text == "C2"
        assert get_card_by_id(session, "zz") is None

    def test_init_phase_state(self):
        state = init_phase_state_for_teams(["x", "y", "z"], "a", "b", lambda ids: ids[::-1])

        assert state.main_bowl == ["z", "y", "x"]
        assert state.scored_by_team == {"a": [], "b": []}
        assert state.passed_to_team == {"a": [], "b": []}

    def test_init_phase_state_does_not_touch_input(self):
        card_ids = ["x", "y", "z"]
        init_phase_state_for_teams(card_ids, "a", "b")

        assert card_ids == ["x", "y", "z"]


class TestSelectors:

    def test_before_first_turn(self, session):
        assert select_current_card(session) is None
        assert not select_is_turn_running(session)
        assert not select_can_undo(session)

    def test_during_turn(self, session):
        started = start_turn_command(session, 0).session

        assert select_current_card(started).id == "c1"
        assert select_is_turn_running(started)
        assert not select_can_undo(started)
        assert select_can_undo(got_it_command(started).session)

    def test_select_teams(self, session):
        team_a, team_b = select_teams(session)

        assert (team_a.id, team_b.id) == (TEAM_A, TEAM_B)
        assert select_teams(session._copy_with(teams=[])) == (None, None)


class TestWinner:

    def test_winner(self):
        session = scored_session(describe=(["c1", "c2"], []))

        assert get_winning_team(session).id == TEAM_A
        assert get_winner_text(session) == "A wins!"

    def test_tie(self):
        session = scored_session(describe=(["c1"], ["c2"]))

        assert get_winning_team(session) is None
        assert get_winner_text(session) == "It's a tie!"

    def test_without_two_teams(self, session):
        lonely = session._copy_with(teams=session.teams[:1])

        assert get_winning_team(lonely) is None
        assert get_winner_text(lonely) == "Game complete."


class TestShuffle:

    def test_shuffle_is_a_permutation(self):
        items = [f"c{i}" for i in range(20)]
        shuffled = shuffle(items)

        assert sorted(shuffled) == sorted(items)
        assert items == [f"c{i}" for i in range(20)]

    def test_seeded_shuffler_is_reproducible(self):
        items = [f"c{i}" for i in range(20)]

        assert seeded_shuffler(7)(items) == seeded_shuffler(7)(items)

    def test_ids_are_unique(self):
        assert generate_id() != generate_id()
