"""Engine Configuration Module."""

import os
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """State store configuration settings."""

    backend: Literal["memory", "redis"] = Field(
        default="memory", description="Where per-profile state is persisted"
    )
    key_prefix: str = Field(
        default="clickykids", description="Namespace prepended to every store key"
    )
    memory_quota_bytes: Optional[int] = Field(
        default=None,
        ge=1,
        description="Size cap for the in-memory backend; writes beyond it fail",
    )

    model_config = SettingsConfigDict(env_prefix="CLICKYKIDS_STORE_")


class RedisSettings(BaseSettings):
    """Redis configuration settings."""

    url: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL",
    )
    decode_responses: bool = Field(
        default=True, description="Decode Redis responses to strings"
    )
    socket_timeout: Optional[float] = Field(
        default=None, description="Socket timeout in seconds"
    )

    model_config = SettingsConfigDict(env_prefix="CLICKYKIDS_REDIS_")


class LimitSettings(BaseSettings):
    """Retention caps for bounded histories."""

    accuracy_history: int = Field(
        default=50, ge=1, description="Accuracy values kept per category"
    )
    session_log: int = Field(default=100, ge=1, description="Session records kept")

    model_config = SettingsConfigDict(env_prefix="CLICKYKIDS_LIMITS_")


class RecommendationSettings(BaseSettings):
    """Thresholds used by the recommendation rules."""

    clicking_ready_seconds: int = Field(
        default=300, ge=0, description="Mouse movement time before clicking games"
    )
    drag_drop_min_completions: int = Field(
        default=5, ge=0, description="Clicking completions before drag and drop"
    )
    drag_drop_min_accuracy: int = Field(
        default=60, ge=0, le=100, description="Clicking accuracy before drag and drop"
    )
    keyboard_ready_total_seconds: int = Field(
        default=600, ge=0, description="Total practice time before keyboard"
    )
    keyboard_basic_min_seconds: int = Field(
        default=60, ge=0, description="Keyboard time below which it is suggested"
    )

    model_config = SettingsConfigDict(env_prefix="CLICKYKIDS_RECOMMENDATIONS_")


class PreferenceSettings(BaseSettings):
    """
    Device-wide preferences.

    These are handed to collaborators (audio feedback, theming, parent
    gate) explicitly instead of being read from shared storage.
    """

    sound_enabled: bool = Field(default=True, description="Play sound effects")
    dark_mode: bool = Field(default=False, description="Use the dark theme")
    parent_pin: str = Field(
        default="1234", pattern=r"^\d{4}$", description="Initial parent PIN"
    )

    model_config = SettingsConfigDict(env_prefix="CLICKYKIDS_PREFERENCES_")


def _read_yaml_file(path: Path) -> dict[str, Any]:
    """Parse a YAML mapping; an empty file yields an empty dict."""
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


class EngineSettings(BaseSettings):
    """
    Progress engine configuration.

    Configuration can be loaded from:
    1. Environment variables (CLICKYKIDS_*)
    2. .env file
    3. YAML config file (via config_file or CLICKYKIDS_CONFIG_FILE)
    4. Direct instantiation with parameters

    Priority (highest to lowest):
    1. Explicitly passed parameters
    2. Environment variables
    3. Config file
    4. Defaults

    Example usage:

        # From environment variables
        settings = EngineSettings()

        # From config file
        settings = EngineSettings(config_file="clickykids.yaml")

        # Direct configuration
        settings = EngineSettings(
            store=StoreSettings(backend="redis"),
            redis=RedisSettings(url="redis://tablet:6379"),
        )
    """

    config_file: Optional[str] = Field(
        default=None,
        description="Path to YAML config file",
    )

    store: StoreSettings = Field(default_factory=StoreSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    limits: LimitSettings = Field(default_factory=LimitSettings)
    recommendations: RecommendationSettings = Field(
        default_factory=RecommendationSettings
    )
    preferences: PreferenceSettings = Field(default_factory=PreferenceSettings)
    daily_challenge_stars: int = Field(
        default=10, ge=0, description="Stars awarded for the daily challenge"
    )

    model_config = SettingsConfigDict(
        env_prefix="CLICKYKIDS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **data: Any):
        """
        Initialize settings.

        A YAML file named by ``config_file`` or ``CLICKYKIDS_CONFIG_FILE``
        supplies values underneath the explicitly passed ones.
        """
        config_file = data.get("config_file") or os.getenv("CLICKYKIDS_CONFIG_FILE")
        if config_file:
            data = {**_read_yaml_file(Path(config_file)), **data}
            data["config_file"] = str(config_file)
        super().__init__(**data)

    @classmethod
    def from_yaml(cls, file_path: str) -> "EngineSettings":
        """Create settings from YAML file."""
        return cls(config_file=file_path)

    def to_yaml(self, file_path: str) -> None:
        """Export settings to YAML file."""
        data = self.model_dump(mode="json", exclude_none=True, exclude={"config_file"})
        Path(file_path).write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")

    def summary(self) -> str:
        """Get human-readable configuration summary."""
        lines = [
            "ClickyKids Configuration:",
            f"  Store: {self.store.backend} (prefix '{self.store.key_prefix}')",
            f"  Limits: {self.limits.accuracy_history} accuracy values, "
            f"{self.limits.session_log} sessions",
            f"  Daily challenge: {self.daily_challenge_stars} stars",
            "",
            "Preferences:",
            f"  Sound: {'✓' if self.preferences.sound_enabled else '✗'}",
            f"  Dark mode: {'✓' if self.preferences.dark_mode else '✗'}",
        ]

        if self.store.backend == "redis":
            lines.extend(["", "Redis:", f"  URL: {self.redis.url}"])

        return "\n".join(lines)


def load_settings(config_file: Optional[str] = None, **overrides: Any) -> EngineSettings:
    """
    Load engine settings with optional overrides.

    Example:
        settings = load_settings(
            config_file="clickykids.yaml",
            store={"backend": "redis"},
        )
    """
    if config_file:
        overrides["config_file"] = config_file

    return EngineSettings(**overrides)
