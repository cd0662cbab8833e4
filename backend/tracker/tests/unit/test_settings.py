import pytest
from pydantic import ValidationError

from tracker.logic.exceptions import InvalidMultiplierError, ScoringError
from tracker.logic.settings import GameSettings, parse_multiplier


class TestGameSettings:
    def test_defaults(self):
        settings = GameSettings()
        assert settings.default_multiplier == 1
        assert settings.winning_all_four_pays_double is False

    def test_loads_persisted_camel_case_record(self):
        settings = GameSettings.model_validate({"defaultMultiplier": 2, "winningAllFourPaysDouble": True})
        assert settings.default_multiplier == 2
        assert settings.winning_all_four_pays_double is True

    def test_dumps_camel_case_record(self):
        dumped = GameSettings(default_multiplier=4).model_dump(by_alias=True)
        assert dumped == {"defaultMultiplier": 4, "winningAllFourPaysDouble": False}

    def test_rejects_default_multiplier_below_one(self):
        with pytest.raises(ValidationError):
            GameSettings(default_multiplier=0)

    def test_frozen(self):
        settings = GameSettings()
        with pytest.raises(ValidationError):
            settings.default_multiplier = 5  # type: ignore[misc]


class TestParseMultiplier:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1, 1), (12, 12), ("3", 3), (" 7 ", 7), (2.0, 2)],
    )
    def test_accepts_whole_numbers(self, value, expected):
        assert parse_multiplier(value) == expected

    @pytest.mark.parametrize("value", [0, -3, "0", "-1", "2.5", "x2", "", 1.5, float("nan"), None, True, [2]])
    def test_rejects_invalid_input(self, value):
        with pytest.raises(InvalidMultiplierError):
            parse_multiplier(value)

    def test_error_carries_rejected_value(self):
        with pytest.raises(InvalidMultiplierError) as exc_info:
            parse_multiplier("abc")
        assert exc_info.value.value == "abc"
        assert isinstance(exc_info.value, ScoringError)
