"""
Application settings management.

Settings are loaded from environment variables with .env file support.
Game balance lives in config/game_config.yaml.
All configuration is validated using Pydantic.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # ==========================================================================
    # Paths
    # ==========================================================================

    config_dir: Path = Field(
        default=Path("config"),
        description="Directory containing YAML configuration files",
    )
    data_dir: Path = Field(
        default=Path("data"), description="Directory for database and other data files"
    )

    # ==========================================================================
    # Database
    # ==========================================================================

    database_path: Path = Field(
        default=Path("data/dojo.db"), description="Path to SQLite database file"
    )

    # ==========================================================================
    # Teacher LLM Configuration
    # ==========================================================================

    llm_provider: str = Field(
        default="anthropic",
        description="Teacher LLM provider (anthropic, openai, deepseek)",
    )
    llm_model: Optional[str] = Field(
        default=None, description="Override the provider's default model"
    )
    llm_temperature: float = Field(
        default=0.7, ge=0.0, le=2.0, description="Sampling temperature"
    )
    llm_max_tokens: int = Field(
        default=1024, ge=1, le=8192, description="Maximum tokens per teacher reply"
    )
    llm_timeout: float = Field(
        default=30.0, gt=0, description="Transport timeout in seconds"
    )

    # API Keys (required for the provider you use)
    anthropic_api_key: Optional[str] = Field(
        default=None, description="Anthropic API key"
    )
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    deepseek_api_key: Optional[str] = Field(
        default=None, description="DeepSeek API key"
    )

    # ==========================================================================
    # Training
    # ==========================================================================

    training_topic: str = Field(
        default="Python programming",
        description="Subject the teacher drills the trainee on",
    )

    # ==========================================================================
    # Logging
    # ==========================================================================

    logs_dir: Path = Field(
        default=Path("logs"), description="Directory for per-run log files"
    )
    log_runs_to_keep: int = Field(
        default=5, ge=1, description="Number of recent run logs to retain"
    )
    log_level: str = Field(default="INFO", description="Minimum log level")

    # ==========================================================================
    # Server Configuration
    # ==========================================================================

    host: str = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")


# ============================================================================
# Game Configuration (from YAML)
# ============================================================================


class EconomyConfig(BaseModel):
    """Life and score economy."""

    max_lives: float = Field(default=3.0, gt=0, description="Starting and maximum lives")
    fail_damage: float = Field(
        default=1.0, gt=0, description="Lives lost on a [FAIL] grade"
    )
    pass_reward: int = Field(default=100, ge=0, description="Score gained on a [PASS] grade")
    hint_score_cost: int = Field(
        default=50, ge=0, description="Score charged for a hint when affordable"
    )
    hint_life_cost: float = Field(
        default=0.5, ge=0, description="Lives charged for a hint when score is too low"
    )


class LeaderboardConfig(BaseModel):
    """Leaderboard ranking configuration."""

    size: int = Field(default=10, ge=1, le=100, description="Entries kept after ranking")
    placeholder_name: str = Field(
        default="Anonymous", min_length=1, description="Name used for empty identifiers"
    )


class OracleConfig(BaseModel):
    """Teacher oracle adapter configuration."""

    context_exchanges: int = Field(
        default=6,
        ge=0,
        le=50,
        description="Recent prompt/reply pairs replayed to the teacher as context",
    )


class GameConfig(BaseModel):
    """
    Complete game configuration loaded from game_config.yaml.

    Every section falls back to its defaults when omitted.
    """

    economy: EconomyConfig = Field(default_factory=EconomyConfig)
    leaderboard: LeaderboardConfig = Field(default_factory=LeaderboardConfig)
    oracle: OracleConfig = Field(default_factory=OracleConfig)


def load_game_config(config_path: Optional[Path] = None) -> GameConfig:
    """
    Load game configuration from YAML file.

    Args:
        config_path: Path to game_config.yaml. If None, looks next to the
            project root and then in the current working directory.

    Returns:
        GameConfig with validated settings (defaults if no file is found)

    Raises:
        pydantic.ValidationError: If config validation fails
    """
    if config_path is None:
        project_config = (
            Path(__file__).resolve().parent.parent.parent / "config" / "game_config.yaml"
        )
        cwd_config = Path.cwd() / "config" / "game_config.yaml"
        if project_config.exists():
            config_path = project_config
        elif cwd_config.exists():
            config_path = cwd_config
        else:
            return GameConfig()

    config_path = Path(config_path).resolve()

    if not config_path.exists():
        return GameConfig()

    with open(str(config_path)) as f:
        config_data = yaml.safe_load(f)

    if not config_data:
        return GameConfig()

    return GameConfig(**config_data)


# Global settings instance
settings = Settings()

# Global game config instance
game_config = load_game_config()
