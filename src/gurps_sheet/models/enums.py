"""Enumeration types for gurps_sheet.

The enumerations here are plain tags backed by data tables; the behavior that
depends on them (default resolution, self-control adjustments, cost math)
lives in free functions in :mod:`gurps_sheet.engine`.
"""

from __future__ import annotations

import math
from enum import StrEnum


class AttributeTag(StrEnum):
    """Attributes and secondary characteristics a bonus can target."""

    ST = "st"
    DX = "dx"
    IQ = "iq"
    HT = "ht"
    WILL = "will"
    PER = "per"
    VISION = "vision"
    HEARING = "hearing"
    TASTE_SMELL = "taste_smell"
    TOUCH = "touch"
    FRIGHT_CHECK = "fright_check"
    DODGE = "dodge"
    PARRY = "parry"
    BLOCK = "block"
    SPEED = "speed"
    MOVE = "move"
    HP = "hp"
    FP = "fp"

    @property
    def is_primary(self) -> bool:
        """Whether this is one of the four purchasable primary attributes."""
        return self in PRIMARY_ATTRIBUTES

    @property
    def is_decimal(self) -> bool:
        """Whether bonuses to this attribute keep their fractional part."""
        return self is AttributeTag.SPEED


PRIMARY_ATTRIBUTES: frozenset[AttributeTag] = frozenset(
    {AttributeTag.ST, AttributeTag.DX, AttributeTag.IQ, AttributeTag.HT}
)
"""Attributes that can carry a cost reduction."""


class BonusLimitation(StrEnum):
    """Restrictions on an attribute bonus (only meaningful for ST)."""

    NONE = "none"
    STRIKING_ST = "striking_only"
    LIFTING_ST = "lifting_only"


class HitLocation(StrEnum):
    """Humanoid hit locations that can receive damage resistance."""

    EYES = "eyes"
    SKULL = "skull"
    FACE = "face"
    NECK = "neck"
    TORSO = "torso"
    VITALS = "vitals"
    GROIN = "groin"
    ARMS = "arms"
    HANDS = "hands"
    LEGS = "legs"
    FEET = "feet"
    FULL_BODY = "full_body"


class StringCompareType(StrEnum):
    """Ways a string criteria can compare against a candidate."""

    IS_ANYTHING = "is_anything"
    IS = "is"
    IS_NOT = "is_not"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does_not_contain"
    STARTS_WITH = "starts_with"
    DOES_NOT_START_WITH = "does_not_start_with"
    ENDS_WITH = "ends_with"
    DOES_NOT_END_WITH = "does_not_end_with"


class NumberCompareType(StrEnum):
    """Ways an integer criteria can compare against a candidate."""

    IS_ANYTHING = "is_anything"
    IS = "is"
    AT_LEAST = "at_least"
    AT_MOST = "at_most"


class SkillDifficulty(StrEnum):
    """Skill difficulty ratings."""

    EASY = "e"
    AVERAGE = "a"
    HARD = "h"
    VERY_HARD = "vh"
    WILDCARD = "w"

    @property
    def base_relative_level(self) -> int:
        """Relative level of a skill bought with a single point."""
        return _DIFFICULTY_BASE_RELATIVE_LEVEL[self]


_DIFFICULTY_BASE_RELATIVE_LEVEL: dict[SkillDifficulty, int] = {
    SkillDifficulty.EASY: 0,
    SkillDifficulty.AVERAGE: -1,
    SkillDifficulty.HARD: -2,
    SkillDifficulty.VERY_HARD: -3,
    SkillDifficulty.WILDCARD: -3,
}


class SkillDefaultType(StrEnum):
    """What a skill default is based on."""

    ST = "st"
    DX = "dx"
    IQ = "iq"
    HT = "ht"
    WILL = "will"
    PER = "per"
    SKILL = "skill"
    PARRY = "parry"
    BLOCK = "block"

    @property
    def is_skill_based(self) -> bool:
        """Whether the default searches the character's skills."""
        return self in _SKILL_BASED_DEFAULTS

    @property
    def attribute(self) -> AttributeTag | None:
        """The attribute an attribute-based default reads, else None."""
        return _DEFAULT_ATTRIBUTES.get(self)

    @classmethod
    def from_name(cls, name: str) -> SkillDefaultType:
        """Look up a default type by value or member name.

        Unknown names fall back to :attr:`SKILL`, matching how stored data
        with a skill name in the type slot has always been read.

        Args:
            name: The name to look up, case-insensitively.

        Returns:
            The matching default type.
        """
        lowered = name.strip().lower()
        for member in cls:
            if member.value == lowered or member.name.lower() == lowered:
                return member
        return cls.SKILL


_SKILL_BASED_DEFAULTS = frozenset(
    {SkillDefaultType.SKILL, SkillDefaultType.PARRY, SkillDefaultType.BLOCK}
)

_DEFAULT_ATTRIBUTES: dict[SkillDefaultType, AttributeTag] = {
    SkillDefaultType.ST: AttributeTag.ST,
    SkillDefaultType.DX: AttributeTag.DX,
    SkillDefaultType.IQ: AttributeTag.IQ,
    SkillDefaultType.HT: AttributeTag.HT,
    SkillDefaultType.WILL: AttributeTag.WILL,
    SkillDefaultType.PER: AttributeTag.PER,
}


class SelfControlRoll(StrEnum):
    """How often a disadvantage's self-control roll succeeds.

    Member order is significant: adjustments are linear in :attr:`ordinal`.
    """

    CR6 = "cr6"
    CR9 = "cr9"
    CR12 = "cr12"
    CR15 = "cr15"
    NONE_REQUIRED = "none_required"

    @property
    def ordinal(self) -> int:
        """Zero-based position of the roll in declaration order."""
        return _CR_ORDER.index(self)

    @property
    def threshold(self) -> float:
        """Roll needed to resist; infinite when no roll is required."""
        return _CR_THRESHOLDS[self]

    @property
    def multiplier(self) -> float:
        """Point cost multiplier for the rating."""
        return _CR_MULTIPLIERS[self]

    def describe(self) -> str:
        """Human-readable label, e.g. ``CR: 9 (Resist fairly often)``."""
        if self is SelfControlRoll.NONE_REQUIRED:
            return "None Required"
        return f"CR: {int(self.threshold)} ({_CR_LABELS[self]})"


_CR_ORDER: tuple[SelfControlRoll, ...] = tuple(SelfControlRoll)

_CR_THRESHOLDS: dict[SelfControlRoll, float] = {
    SelfControlRoll.CR6: 6,
    SelfControlRoll.CR9: 9,
    SelfControlRoll.CR12: 12,
    SelfControlRoll.CR15: 15,
    SelfControlRoll.NONE_REQUIRED: math.inf,
}

_CR_MULTIPLIERS: dict[SelfControlRoll, float] = {
    SelfControlRoll.CR6: 2.0,
    SelfControlRoll.CR9: 1.5,
    SelfControlRoll.CR12: 1.0,
    SelfControlRoll.CR15: 0.5,
    SelfControlRoll.NONE_REQUIRED: 1.0,
}

_CR_LABELS: dict[SelfControlRoll, str] = {
    SelfControlRoll.CR6: "Resist rarely",
    SelfControlRoll.CR9: "Resist fairly often",
    SelfControlRoll.CR12: "Resist quite often",
    SelfControlRoll.CR15: "Resist almost all the time",
}


class SelfControlRollAdjustment(StrEnum):
    """Secondary effects that accompany a self-control roll."""

    NONE = "none"
    ACTION_PENALTY = "action_penalty"
    REACTION_PENALTY = "reaction_penalty"
    FRIGHT_CHECK_PENALTY = "fright_check_penalty"
    FRIGHT_CHECK_BONUS = "fright_check_bonus"
    MINOR_COST_OF_LIVING_INCREASE = "minor_cost_of_living_increase"
    MAJOR_COST_OF_LIVING_INCREASE = "major_cost_of_living_increase"


class ModifierCostType(StrEnum):
    """How a trait modifier's cost is expressed."""

    PERCENTAGE = "percentage"
    POINTS = "points"
    MULTIPLIER = "multiplier"


class ModifierAffects(StrEnum):
    """Which part of a leveled trait's cost a modifier applies to."""

    TOTAL = "total"
    BASE_ONLY = "base_only"
    LEVELS_ONLY = "levels_only"


class AdvantageContainerType(StrEnum):
    """How a container advantage combines its children's costs."""

    GROUP = "group"
    ALTERNATIVE_ABILITIES = "alternative_abilities"


__all__ = [
    "AttributeTag",
    "PRIMARY_ATTRIBUTES",
    "BonusLimitation",
    "HitLocation",
    "StringCompareType",
    "NumberCompareType",
    "SkillDifficulty",
    "SkillDefaultType",
    "SelfControlRoll",
    "SelfControlRollAdjustment",
    "ModifierCostType",
    "ModifierAffects",
    "AdvantageContainerType",
]
