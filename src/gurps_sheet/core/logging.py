"""Structured logging configuration for gurps_sheet.

Logging goes through structlog so that engine events (index rebuilds, bulk
skill recomputes, unresolved defaults) carry their context as key/value pairs
instead of formatted strings.

Example:
    >>> from gurps_sheet.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Bonus index rebuilt", keys=12, entries=31)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

from gurps_sheet.core.constants import UNDEFINED_LEVEL, UNDEFINED_LEVEL_DISPLAY


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from gurps_sheet.core.config import Settings


LEVEL_FIELDS = frozenset({"level", "relative_level", "resolved", "default_level"})
"""Event fields that may hold a skill level."""


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every entry with the application name."""
    event_dict["app"] = "gurps_sheet"
    return event_dict


def render_undefined_levels(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Replace the undefined-level sentinel with its display form.

    A raw ``-2147483648`` in a log line reads like a bug; the sheet shows
    ``-`` for the same value.
    """
    for field in LEVEL_FIELDS & event_dict.keys():
        if event_dict[field] == UNDEFINED_LEVEL:
            event_dict[field] = UNDEFINED_LEVEL_DISPLAY
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog from the application settings.

    Args:
        settings: Settings to read ``log_level`` and ``json_logs`` from.
            Defaults to the settings singleton.

    Example:
        >>> configure_logging()
    """
    if settings is None:
        from gurps_sheet.core.config import get_settings

        settings = get_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        render_undefined_levels,
    ]
    if settings.json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=settings.debug))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


@contextmanager
def character_context(character_name: str) -> Iterator[None]:
    """Attach the character's name to every entry logged inside the block.

    Example:
        >>> with character_context("Dai"):
        ...     update_skill_levels(character)
    """
    with structlog.contextvars.bound_contextvars(character=character_name):
        yield


__all__ = [
    "add_app_context",
    "character_context",
    "configure_logging",
    "get_logger",
    "render_undefined_levels",
]
