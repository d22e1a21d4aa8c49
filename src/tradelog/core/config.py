"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings

from .errors import ConfigError

DEFAULT_STARTING_BALANCE = 100_000.0
DEFAULT_TIMEZONE = "UTC"
DEFAULT_BREAKEVEN_EPSILON_USD = 0.5
DEFAULT_BREAKEVEN_EPSILON_PERCENT = 0.01  # percent units: 0.01 == 0.01%


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class AnalyticsConfig(BaseModel):
    """Per-call engine configuration.

    Accepts both snake_case and camelCase keys (``startingBalance``) so
    that profile settings coming from the persistence layer can be passed
    through unchanged.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    starting_balance: float = Field(default=DEFAULT_STARTING_BALANCE, gt=0)
    timezone: str = DEFAULT_TIMEZONE  # IANA id, e.g. "Europe/Moscow"
    breakeven_epsilon_usd: float = Field(
        default=DEFAULT_BREAKEVEN_EPSILON_USD, ge=0
    )
    breakeven_epsilon_percent: float = Field(
        default=DEFAULT_BREAKEVEN_EPSILON_PERCENT, ge=0
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown IANA timezone: {value!r}") from exc
        return value


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "TRADELOG_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: If the file is not valid TOML or the values fail
            validation.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                try:
                    data = tomli.load(f)
                except tomli.TOMLDecodeError as exc:
                    raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    if overrides:
        data.update(overrides)

    try:
        return Settings(**data)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
