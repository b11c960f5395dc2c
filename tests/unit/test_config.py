"""Tests for configuration module."""

import os

import pytest
from pydantic import ValidationError


def test_settings_defaults():
    """Settings have sensible defaults."""
    from dojo.core.config import Settings

    s = Settings(_env_file=None)

    assert s.llm_provider == "anthropic"
    assert s.llm_timeout == 30.0
    assert s.port == 8000


def test_settings_from_env():
    """Settings can be overridden via environment variables."""
    os.environ["LLM_PROVIDER"] = "deepseek"
    os.environ["TRAINING_TOPIC"] = "SQL"

    try:
        from dojo.core.config import Settings

        s = Settings(_env_file=None)

        assert s.llm_provider == "deepseek"
        assert s.training_topic == "SQL"
    finally:
        del os.environ["LLM_PROVIDER"]
        del os.environ["TRAINING_TOPIC"]


def test_settings_validation():
    """Settings validate constraints."""
    from dojo.core.config import Settings

    with pytest.raises(ValidationError):
        Settings(_env_file=None, llm_temperature=3.0)

    with pytest.raises(ValidationError):
        Settings(_env_file=None, port=0)


class TestGameConfig:
    """Tests for game_config.yaml loading."""

    def test_defaults(self):
        from dojo.core.config import GameConfig

        config = GameConfig()

        assert config.economy.max_lives == 3.0
        assert config.economy.fail_damage == 1.0
        assert config.economy.pass_reward == 100
        assert config.economy.hint_score_cost == 50
        assert config.economy.hint_life_cost == 0.5
        assert config.leaderboard.size == 10

    def test_missing_file_gives_defaults(self, tmp_path):
        from dojo.core.config import GameConfig, load_game_config

        assert load_game_config(tmp_path / "absent.yaml") == GameConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        from dojo.core.config import GameConfig, load_game_config

        path = tmp_path / "game_config.yaml"
        path.write_text("")

        assert load_game_config(path) == GameConfig()

    def test_partial_override(self, tmp_path):
        from dojo.core.config import load_game_config

        path = tmp_path / "game_config.yaml"
        path.write_text("economy:\n  pass_reward: 250\nleaderboard:\n  size: 3\n")

        config = load_game_config(path)

        assert config.economy.pass_reward == 250
        assert config.economy.max_lives == 3.0
        assert config.leaderboard.size == 3

    def test_invalid_values_rejected(self, tmp_path):
        from dojo.core.config import load_game_config

        path = tmp_path / "game_config.yaml"
        path.write_text("leaderboard:\n  size: 0\n")

        with pytest.raises(ValidationError):
            load_game_config(path)

    def test_shipped_config_matches_defaults(self):
        from dojo.core.config import GameConfig, game_config

        assert game_config == GameConfig()
