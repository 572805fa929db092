"""Configuration management for gurps_sheet.

Settings are loaded with pydantic-settings from environment variables and an
optional ``.env`` file. They control the optional cost rules that vary
between gaming tables; the core math has no other tunables.

Example:
    >>> from gurps_sheet.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.engine.round_cost_down
    False

Environment Variables:
    GURPS_SHEET_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    GURPS_SHEET_JSON_LOGS: Emit JSON log lines instead of console output
    GURPS_SHEET_ENGINE_ROUND_COST_DOWN: Round fractional point costs down
    GURPS_SHEET_ENGINE_USE_OPTIONAL_MODIFIER_RULES: Apply enhancements and
        limitations separately instead of netting them first
    GURPS_SHEET_ENGINE_USE_RULE_OF_20: Cap attributes at 20 for attribute defaults
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gurps_sheet.core.constants import MAX_COST_REDUCTION
from gurps_sheet.core.exceptions import ConfigurationError


class EngineSettings(BaseSettings):
    """Configuration for the rules engine.

    Attributes:
        round_cost_down: Round fractional point costs down instead of up.
        use_optional_modifier_rules: Apply enhancements and limitations as
            separate multiplications rather than netting them first.
        max_cost_reduction: Upper bound for summed attribute cost reductions.
        use_rule_of_20: Cap the attribute used by attribute-based skill
            defaults at 20.
    """

    model_config = SettingsConfigDict(
        env_prefix="GURPS_SHEET_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    round_cost_down: bool = Field(
        default=False,
        description="Round fractional point costs down instead of up",
    )
    use_optional_modifier_rules: bool = Field(
        default=False,
        description="Apply enhancements and limitations separately",
    )
    max_cost_reduction: int = Field(
        default=MAX_COST_REDUCTION,
        ge=1,
        le=MAX_COST_REDUCTION,
        description="Cap for summed attribute cost reductions (percent)",
    )
    use_rule_of_20: bool = Field(
        default=False,
        description="Attribute defaults use at most 20 for the attribute",
    )


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Emit JSON log lines.
        engine: Rules engine settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="GURPS_SHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="GURPS Character Sheet",
        description="Application name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )

    engine: EngineSettings = Field(default_factory=EngineSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "EngineSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
