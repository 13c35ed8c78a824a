"""Application settings using pydantic-settings, plus the repository list loader."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from daily_activity.schemas import ActivityConfig


DEFAULT_CONFIG_FILE = "github-activity-config.json"
DEFAULT_ACTIVITY_LOG = "activity.log"


class ConfigError(Exception):
    """Raised when the repository configuration cannot be loaded."""


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DAILY_ACTIVITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Application
    # ==========================================================================
    app_name: str = "Daily GitHub Activity"
    log_level: str = "INFO"

    # ==========================================================================
    # Files
    # ==========================================================================
    config_file: Path = Field(default=Path(DEFAULT_CONFIG_FILE))
    activity_log: Path | None = Field(
        default=None,
        description="Run log; defaults to activity.log next to the config file",
    )

    # ==========================================================================
    # Git
    # ==========================================================================
    git_timeout_seconds: int | None = Field(
        default=None,
        description="Per-command timeout; None waits indefinitely",
    )

    @property
    def config_path(self) -> Path:
        return self.config_file.expanduser().resolve()

    @property
    def base_dir(self) -> Path:
        """Directory that relative local paths and clones are resolved against."""
        return self.config_path.parent

    @property
    def activity_log_path(self) -> Path:
        if self.activity_log is not None:
            return self.activity_log.expanduser()
        return self.base_dir / DEFAULT_ACTIVITY_LOG


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_config(path: Path) -> ActivityConfig:
    """Read and validate the repository list.

    Args:
        path: Location of the JSON configuration file

    Returns:
        Parsed configuration with its repository descriptors

    Raises:
        ConfigError: If the file is missing, not JSON, or lacks a
            ``repositories`` array of objects
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict) or not isinstance(raw.get("repositories"), list):
        raise ConfigError('Config must include a "repositories" array')

    try:
        return ActivityConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid repository entry in {path}: {e}") from e
