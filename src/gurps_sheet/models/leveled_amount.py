"""Bonus amounts that can scale with the level of the trait granting them."""

from __future__ import annotations

import math

from pydantic import ConfigDict, Field, ValidationInfo, field_validator

from gurps_sheet.models.tracking import TrackedModel


def round_half_up(value: float) -> float:
    """Round to the nearest integer, with halves rounding toward +infinity.

    Example:
        >>> round_half_up(2.5), round_half_up(-2.5)
        (3.0, -2.0)
    """
    return float(math.floor(value + 0.5))


class LeveledAmount(TrackedModel):
    """A numeric amount that is optionally multiplied by a level.

    ``integer_only`` forces the stored amount to a whole number on every
    mutation. Turning it back off does not recover a fraction that was
    already rounded away.

    Attributes:
        integer_only: Whether the amount is restricted to whole numbers.
        per_level: Whether the amount is multiplied by the level.
        level: The current level, supplied by the owning trait.
        amount: The per-level (or flat) amount.

    Example:
        >>> amount = LeveledAmount(amount=2, per_level=True, level=3)
        >>> amount.adjusted_amount()
        6.0
    """

    # Field order matters: ``amount`` validation reads ``integer_only``.
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    integer_only: bool = Field(
        default=False,
        description="Restrict the amount to whole numbers",
    )
    per_level: bool = Field(
        default=False,
        description="Multiply the amount by the level",
    )
    level: int = Field(
        default=0,
        description="Level of the owning trait in the current evaluation",
    )
    amount: float = Field(
        default=1.0,
        description="Flat or per-level amount",
    )

    @field_validator("amount", mode="after")
    @classmethod
    def round_integer_amount(cls, value: float, info: ValidationInfo) -> float:
        """Round the amount when the instance is integer-only."""
        if info.data.get("integer_only"):
            return round_half_up(value)
        return value

    def set_amount(self, value: float) -> None:
        """Store a new amount, rounding it if integer-only."""
        self.amount = round_half_up(value) if self.integer_only else value

    def set_integer_only(self, integer_only: bool) -> None:
        """Change the integer-only flag; enabling it rounds the current amount."""
        self.integer_only = integer_only
        if integer_only:
            self.amount = round_half_up(self.amount)

    def adjusted_amount(self, level: int | None = None) -> float:
        """Amount after applying the level.

        Args:
            level: Level to use instead of the stored one. Zero and negative
                levels are allowed and scale the amount accordingly.

        Returns:
            ``amount * level`` for per-level amounts, otherwise ``amount``.
        """
        if not self.per_level:
            return self.amount
        return self.amount * (self.level if level is None else level)

    def integer_adjusted_amount(self, level: int | None = None) -> int:
        """Adjusted amount truncated toward zero."""
        return math.trunc(self.adjusted_amount(level))

    def format(self, *, per_level_label: str = "per level") -> str:
        """Render the amount with a forced sign, e.g. ``+2 per level``."""
        amount = self.amount
        text = f"{int(amount):+d}" if amount == int(amount) else f"{amount:+g}"
        if self.per_level:
            return f"{text} {per_level_label}"
        return text


__all__ = [
    "LeveledAmount",
    "round_half_up",
]
