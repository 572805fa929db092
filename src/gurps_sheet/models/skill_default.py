"""Skill defaults: the attribute or other skill a skill can be used from untrained."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from gurps_sheet.models.enums import SkillDefaultType


class SkillDefault(BaseModel):
    """A default owned by a single skill or technique.

    Defaults are immutable; editing one means replacing it.

    Attributes:
        type: What the default is based on.
        name: Skill name for skill-based defaults.
        specialization: Optional specialization; empty matches any.
        modifier: Flat modifier added to the resolved level.

    Example:
        >>> SkillDefault(type=SkillDefaultType.DX, modifier=-5).describe()
        'DX-5'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: SkillDefaultType = Field(
        default=SkillDefaultType.SKILL,
        description="What the default is based on",
    )
    name: str | None = Field(
        default=None,
        description="Skill name for skill-based defaults",
    )
    specialization: str | None = Field(
        default=None,
        description="Skill specialization; empty matches any",
    )
    modifier: int = Field(
        default=0,
        description="Flat modifier added to the resolved level",
    )

    @property
    def is_skill_based(self) -> bool:
        """Whether resolving this default searches the character's skills."""
        return self.type.is_skill_based

    @property
    def full_name(self) -> str:
        """Target name with its specialization, e.g. ``Guns (Pistol)``."""
        if not self.is_skill_based:
            return self.type.name.capitalize() if len(self.type.name) > 2 else self.type.name
        name = self.name or ""
        if self.specialization:
            return f"{name} ({self.specialization})"
        return name

    def describe(self) -> str:
        """Default as shown on a sheet, e.g. ``Parry Broadsword+1``."""
        prefix = ""
        if self.type in (SkillDefaultType.PARRY, SkillDefaultType.BLOCK):
            prefix = f"{self.type.name.capitalize()} "
        modifier = f"{self.modifier:+d}" if self.modifier else ""
        return f"{prefix}{self.full_name}{modifier}"


__all__ = ["SkillDefault"]
