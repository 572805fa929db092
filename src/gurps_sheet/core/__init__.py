"""Core module providing configuration, logging, constants and exceptions.

Exports:
    Exceptions:
        GurpsSheetError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Data validation errors.
        RulesEngineError: Base for rules engine errors.
        TraitTreeError: Missing or mismatched trait in a mutation.
        DefaultResolutionError: Malformed exclusion set.

    Configuration:
        Settings: Main application settings class.
        EngineSettings: Rules engine options.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        character_context: Bind a character name to log entries.
"""

from __future__ import annotations

from gurps_sheet.core.config import (
    EngineSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from gurps_sheet.core.exceptions import (
    ConfigurationError,
    DefaultResolutionError,
    GurpsSheetError,
    RulesEngineError,
    TraitTreeError,
    ValidationError,
)
from gurps_sheet.core.logging import (
    character_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "GurpsSheetError",
    "ConfigurationError",
    "ValidationError",
    "RulesEngineError",
    "TraitTreeError",
    "DefaultResolutionError",
    # Configuration
    "Settings",
    "EngineSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "character_context",
]
