"""Pydantic models for character sheets.

Submodules:
    enums: Attribute tags, difficulty ratings, self-control rolls and friends.
    criteria: String and integer match criteria used by bonuses.
    leveled_amount: Amounts that optionally scale with a level.
    features: Bonus and cost-reduction features with their lookup keys.
    skill_default: What a skill can be used from untrained.
    traits: Advantage, modifier, skill, technique and equipment trees.
    tracking: Revision counter that marks derived caches stale.
    character: The character that owns the trait forests.
"""

from __future__ import annotations

from gurps_sheet.models.character import Character
from gurps_sheet.models.criteria import IntegerCriteria, StringCriteria, is_named
from gurps_sheet.models.enums import (
    PRIMARY_ATTRIBUTES,
    AdvantageContainerType,
    AttributeTag,
    BonusLimitation,
    HitLocation,
    ModifierAffects,
    ModifierCostType,
    NumberCompareType,
    SelfControlRoll,
    SelfControlRollAdjustment,
    SkillDefaultType,
    SkillDifficulty,
    StringCompareType,
)
from gurps_sheet.models.features import (
    AnyBonus,
    AttributeBonus,
    Bonus,
    CostReduction,
    DRBonus,
    Feature,
    SkillBonus,
    SpellBonus,
    WeaponBonus,
    wildcard_key,
)
from gurps_sheet.models.leveled_amount import LeveledAmount, round_half_up
from gurps_sheet.models.skill_default import SkillDefault
from gurps_sheet.models.tracking import TrackedModel, current_revision
from gurps_sheet.models.traits import (
    Advantage,
    Equipment,
    Modifier,
    Skill,
    SkillLike,
    Technique,
    Trait,
)


__all__ = [
    # Enums
    "PRIMARY_ATTRIBUTES",
    "AdvantageContainerType",
    "AttributeTag",
    "BonusLimitation",
    "HitLocation",
    "ModifierAffects",
    "ModifierCostType",
    "NumberCompareType",
    "SelfControlRoll",
    "SelfControlRollAdjustment",
    "SkillDefaultType",
    "SkillDifficulty",
    "StringCompareType",
    # Criteria and amounts
    "IntegerCriteria",
    "StringCriteria",
    "is_named",
    "LeveledAmount",
    "round_half_up",
    "TrackedModel",
    "current_revision",
    # Features
    "AnyBonus",
    "AttributeBonus",
    "Bonus",
    "CostReduction",
    "DRBonus",
    "Feature",
    "SkillBonus",
    "SpellBonus",
    "WeaponBonus",
    "wildcard_key",
    # Traits
    "SkillDefault",
    "Advantage",
    "Equipment",
    "Modifier",
    "Skill",
    "SkillLike",
    "Technique",
    "Trait",
    "Character",
]
