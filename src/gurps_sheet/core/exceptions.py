"""Custom exception hierarchy for the gurps_sheet rules engine.

The numeric core never raises for structurally valid input: an unresolvable
skill default yields the ``UNDEFINED_LEVEL`` sentinel instead. The exceptions
below guard the seams where callers hand the engine malformed input, such as
an unknown trait id or an exclusion set that does not contain the skill being
resolved.

Every exception carries a ``details`` mapping. Subclasses take their context
as keyword arguments and file the ones that were supplied into it.

Example:
    >>> from gurps_sheet.core.exceptions import TraitTreeError
    >>> raise TraitTreeError("No such trait", trait_id="1234")
"""

from __future__ import annotations

from typing import Any


class GurpsSheetError(Exception):
    """Base exception for all gurps_sheet errors.

    Attributes:
        message: Human-readable error description.
        details: Context about the failure, such as the offending trait id.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None, **context: Any) -> None:
        self.message = message
        self.details = dict(details or {})
        self.details.update({key: value for key, value in context.items() if value is not None})
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(GurpsSheetError):
    """Raised when the settings cannot be loaded."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, config_key=config_key)


class ValidationError(GurpsSheetError):
    """Raised when a value handed to the engine is out of range.

    Pydantic rejects malformed model input on its own; this covers the
    mutation methods on ``Character`` that take plain values.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, field_name=field_name, invalid_value=invalid_value)


# =============================================================================
# Rules Engine Exceptions
# =============================================================================


class RulesEngineError(GurpsSheetError):
    """Base exception for errors raised by the rules engine."""


class TraitTreeError(RulesEngineError):
    """Raised when a trait tree operation refers to a missing or mismatched trait."""

    def __init__(
        self,
        message: str,
        *,
        trait_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, trait_id=trait_id)


class DefaultResolutionError(RulesEngineError):
    """Raised when a skill level is requested with a malformed exclusion set.

    A skill must always be present in the exclusion set used to resolve its
    own defaults; anything else would let the skill feed its own level.

    The exclusion set is recorded sorted so the message is stable.
    """

    def __init__(
        self,
        message: str,
        *,
        skill: str | None = None,
        excludes: frozenset[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=details,
            skill=skill,
            excludes=sorted(excludes) if excludes is not None else None,
        )


__all__ = [
    "GurpsSheetError",
    "ConfigurationError",
    "ValidationError",
    "RulesEngineError",
    "TraitTreeError",
    "DefaultResolutionError",
]
