"""Features that traits contribute while enabled.

A feature is either a bonus, which adds a (possibly leveled) amount to some
stat, or a cost reduction, which lowers the point cost of a primary
attribute. Every bonus exposes a ``feature_key``: a lower-case string made of
a namespace plus the attribute, hit location or exact name it targets, or
``*`` when its name criteria is broader than an exact match. The key is only
a coarse pre-filter. Anything found under a wildcard key must have its
criteria re-tested against the candidate before it is applied.

Example:
    >>> bonus = SkillBonus(
    ...     name_criteria=StringCriteria(compare=StringCompareType.IS, qualifier="Broadsword"),
    ...     amount=LeveledAmount(amount=2),
    ... )
    >>> bonus.feature_key
    'skill.name/broadsword'
"""

from __future__ import annotations

from typing import Annotated, Literal, Self

from pydantic import ConfigDict, Field, field_validator

from gurps_sheet.core.constants import (
    ATTRIBUTE_ID_PREFIX,
    HIT_LOCATION_ID_PREFIX,
    KEY_QUALIFIER_SEPARATOR,
    MAX_COST_REDUCTION,
    SKILL_NAME_ID,
    SPELL_COLLEGE_ID,
    SPELL_NAME_ID,
    WEAPON_NAMED_ID,
    WILDCARD,
)
from gurps_sheet.models.criteria import IntegerCriteria, StringCriteria
from gurps_sheet.models.enums import (
    PRIMARY_ATTRIBUTES,
    AttributeTag,
    BonusLimitation,
    HitLocation,
    StringCompareType,
)
from gurps_sheet.models.leveled_amount import LeveledAmount
from gurps_sheet.models.tracking import TrackedModel


def _named_key(namespace: str, name_criteria: StringCriteria, *, keyable: bool = True) -> str:
    if keyable and name_criteria.is_exact:
        return f"{namespace}{KEY_QUALIFIER_SEPARATOR}{name_criteria.qualifier}".lower()
    return f"{namespace}{WILDCARD}"


def wildcard_key(key: str) -> str:
    """Wildcard key for the namespace that ``key`` belongs to.

    Example:
        >>> wildcard_key("skill.name/broadsword")
        'skill.name*'
    """
    namespace, _, _ = key.partition(KEY_QUALIFIER_SEPARATOR)
    return namespace.removesuffix(WILDCARD) + WILDCARD


class FeatureBase(TrackedModel):
    """Behavior shared by every feature variant."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    def clone(self) -> Self:
        """Deep copy; features have value semantics."""
        return self.model_copy(deep=True)


class Bonus(FeatureBase):
    """A feature that adds a leveled amount to some stat."""

    amount: LeveledAmount = Field(
        default_factory=LeveledAmount,
        description="Amount granted, optionally per level",
    )

    @property
    def feature_key(self) -> str:
        """Lookup key for this bonus."""
        raise NotImplementedError

    def adjusted_amount(self, level: int | None = None) -> float:
        """Shortcut for ``self.amount.adjusted_amount(level)``."""
        return self.amount.adjusted_amount(level)


class AttributeBonus(Bonus):
    """Bonus to an attribute or secondary characteristic."""

    kind: Literal["attribute_bonus"] = "attribute_bonus"
    attribute: AttributeTag = Field(
        default=AttributeTag.ST,
        description="Attribute receiving the bonus",
    )
    limitation: BonusLimitation = Field(
        default=BonusLimitation.NONE,
        description="Restriction on an ST bonus",
    )

    @property
    def feature_key(self) -> str:
        key = f"{ATTRIBUTE_ID_PREFIX}{self.attribute.value}"
        if self.attribute is AttributeTag.ST and self.limitation is not BonusLimitation.NONE:
            key = f"{key}.{self.limitation.value}"
        return key


class DRBonus(Bonus):
    """Damage resistance bonus for a hit location."""

    kind: Literal["dr_bonus"] = "dr_bonus"
    location: HitLocation = Field(
        default=HitLocation.TORSO,
        description="Hit location protected",
    )

    @property
    def feature_key(self) -> str:
        return f"{HIT_LOCATION_ID_PREFIX}{self.location.value}"


class SkillBonus(Bonus):
    """Bonus to skills matching a name and specialization."""

    kind: Literal["skill_bonus"] = "skill_bonus"
    name_criteria: StringCriteria = Field(
        default_factory=lambda: StringCriteria(compare=StringCompareType.IS),
        description="Skill name test",
    )
    specialization_criteria: StringCriteria = Field(
        default_factory=StringCriteria,
        description="Skill specialization test",
    )

    @property
    def feature_key(self) -> str:
        return _named_key(
            SKILL_NAME_ID,
            self.name_criteria,
            keyable=self.specialization_criteria.is_anything,
        )

    def matches(self, name: str, specialization: str | None) -> bool:
        """Re-test both criteria against a candidate skill."""
        return self.name_criteria.matches(name) and self.specialization_criteria.matches(
            specialization
        )


class SpellBonus(Bonus):
    """Bonus to spells, selected by name, by college, or to every college."""

    kind: Literal["spell_bonus"] = "spell_bonus"
    all_colleges: bool = Field(
        default=False,
        description="Apply to every spell regardless of college",
    )
    match_college: bool = Field(
        default=False,
        description="Match the criteria against colleges instead of the spell name",
    )
    name_criteria: StringCriteria = Field(
        default_factory=lambda: StringCriteria(compare=StringCompareType.IS),
        description="Spell name or college test",
    )

    @property
    def feature_key(self) -> str:
        if self.all_colleges:
            return SPELL_COLLEGE_ID
        namespace = SPELL_COLLEGE_ID if self.match_college else SPELL_NAME_ID
        return _named_key(namespace, self.name_criteria)

    def matches(self, qualifier: str) -> bool:
        """Re-test the name criteria against a spell name or college."""
        return self.all_colleges or self.name_criteria.matches(qualifier)


class WeaponBonus(Bonus):
    """Damage bonus for weapons that use a matching skill.

    A per-level amount is applied per die of weapon damage.
    """

    kind: Literal["weapon_bonus"] = "weapon_bonus"
    name_criteria: StringCriteria = Field(
        default_factory=lambda: StringCriteria(compare=StringCompareType.IS),
        description="Weapon skill name test",
    )
    specialization_criteria: StringCriteria = Field(
        default_factory=StringCriteria,
        description="Weapon skill specialization test",
    )
    level_criteria: IntegerCriteria = Field(
        default_factory=IntegerCriteria,
        description="Relative skill level test",
    )

    @property
    def feature_key(self) -> str:
        return _named_key(
            WEAPON_NAMED_ID,
            self.name_criteria,
            keyable=self.specialization_criteria.is_anything,
        )

    def matches(self, name: str, specialization: str | None, relative_level: int) -> bool:
        """Re-test every criteria against a candidate weapon skill."""
        return (
            self.name_criteria.matches(name)
            and self.specialization_criteria.matches(specialization)
            and self.level_criteria.matches(relative_level)
        )


class CostReduction(FeatureBase):
    """Percentage reduction of a primary attribute's point cost.

    The percentage is clamped to 0..80 whenever it is set, so a malformed
    stored value never reaches the cost math.
    """

    kind: Literal["cost_reduction"] = "cost_reduction"
    attribute: AttributeTag = Field(
        default=AttributeTag.ST,
        description="Primary attribute whose cost is reduced",
    )
    percentage: int = Field(
        default=40,
        description="Reduction in percent (0-80)",
    )

    @field_validator("attribute", mode="after")
    @classmethod
    def require_primary_attribute(cls, value: AttributeTag) -> AttributeTag:
        """Only ST, DX, IQ and HT can be cost-reduced."""
        if value not in PRIMARY_ATTRIBUTES:
            msg = f"Cost reductions apply to ST, DX, IQ or HT, got {value.value}"
            raise ValueError(msg)
        return value

    @field_validator("percentage", mode="after")
    @classmethod
    def clamp_percentage(cls, value: int) -> int:
        """Clamp the percentage to 0..80."""
        return max(0, min(MAX_COST_REDUCTION, value))


Feature = Annotated[
    AttributeBonus | DRBonus | SkillBonus | SpellBonus | WeaponBonus | CostReduction,
    Field(discriminator="kind"),
]
"""Any feature a trait can carry."""

AnyBonus = AttributeBonus | DRBonus | SkillBonus | SpellBonus | WeaponBonus
"""Any feature that exposes a ``feature_key``."""


__all__ = [
    "FeatureBase",
    "Bonus",
    "AttributeBonus",
    "DRBonus",
    "SkillBonus",
    "SpellBonus",
    "WeaponBonus",
    "CostReduction",
    "Feature",
    "AnyBonus",
    "wildcard_key",
]
