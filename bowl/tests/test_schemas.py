"""
Tests for wizard input validation and text sanitizing.
"""

import pytest
from pydantic import ValidationError

from ..engine_core.schemas import (
    MAX_CARD_TEXT,
    MAX_PLAYER_NAME,
    MAX_TEAM_NAME,
    CreateSessionInput,
    WizardCardSeed,
    WizardPlayerSeed,
    is_non_empty_after_trim,
    sanitize_card_text,
    sanitize_player_name,
    sanitize_team_name,
)


class TestSanitizers:

    def test_trim_then_cut(self):
        assert sanitize_team_name("  Owls  ") == "Owls"
        assert sanitize_team_name("x" * 30) == "x" * MAX_TEAM_NAME
        assert sanitize_player_name(" " + "p" * 40) == "p" * MAX_PLAYER_NAME
        assert sanitize_card_text("c" * 100 + "   ") == "c" * MAX_CARD_TEXT

    def test_blank_detection(self):
        assert not is_non_empty_after_trim("   \t")
        assert is_non_empty_after_trim(" a ")


class TestSeeds:

    def test_player_name_cleaned(self):
        seed = WizardPlayerSeed(id="p1", name="  Ann ", team_index=1)

        assert seed.name == "Ann"

    def test_blank_player_rejected(self):
        with pytest.raises(ValidationError):
            WizardPlayerSeed(id="p1", name="   ", team_index=0)

    def test_team_index_is_zero_or_one(self):
        with pytest.raises(ValidationError):
            WizardPlayerSeed(id="p1", name="Ann", team_index=2)

    def test_card_text_cleaned(self):
        seed = WizardCardSeed(id="c1", text=" Giraffe " + "!" * 100)

        assert seed.text.startswith("Giraffe")
        assert len(seed.text) == MAX_CARD_TEXT
        assert seed.created_by_player_id is None

    def test_blank_card_rejected(self):
        with pytest.raises(ValidationError):
            WizardCardSeed(id="c1", text="")


class TestCreateSessionInput:

    def test_defaults(self):
        data = CreateSessionInput()

        assert data.team_names == ("Team A", "Team B")
        assert data.players == []
        assert data.cards == []
        assert data.turn_seconds == 60

    def test_team_names_cleaned(self):
        data = CreateSessionInput(team_names=(" Owls ", "Foxes" * 10))

        assert data.team_names == ("Owls", ("Foxes" * 10)[:MAX_TEAM_NAME])

    def test_blank_team_name_rejected(self):
        with pytest.raises(ValidationError):
            CreateSessionInput(team_names=("Owls", "  "))

    def test_turn_seconds_must_be_positive(self):
        with pytest.raises(ValidationError):
            CreateSessionInput(turn_seconds=0)
