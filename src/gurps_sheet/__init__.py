"""gurps_sheet - derived-attribute and bonus-resolution engine for GURPS sheets.

Traits (advantages, skills, equipment) contribute keyed, leveled bonuses to
a character's stats. The engine aggregates those bonuses, resolves skill
defaults without letting a skill feed its own level, and prices advantages
and attributes in character points.

Example:
    >>> from gurps_sheet import Character, Skill, update_skill_levels
    >>>
    >>> hero = Character(name="Dai", dx=12)
    >>> hero.add_skill(Skill(name="Broadsword", points=2))
    >>> update_skill_levels(hero)[hero.skills[0].uid].level
    12

Modules:
    core: Configuration, logging, constants and exceptions.
    models: Pydantic models for traits, features and the character.
    engine: Bonus aggregation, default resolution, skill levels and costs.
"""

from __future__ import annotations

# Core
from gurps_sheet.core.config import Settings, get_settings
from gurps_sheet.core.exceptions import GurpsSheetError
from gurps_sheet.core.logging import configure_logging, get_logger

# Engine
from gurps_sheet.engine import (
    BonusIndex,
    SkillLevel,
    adjusted_advantage_cost,
    advantage_points,
    calculate_skill_level,
    resolve_skill_default_level,
    update_skill_levels,
)

# Models
from gurps_sheet.models import (
    Advantage,
    AttributeBonus,
    AttributeTag,
    Character,
    CostReduction,
    DRBonus,
    Equipment,
    LeveledAmount,
    Modifier,
    SelfControlRoll,
    SelfControlRollAdjustment,
    Skill,
    SkillBonus,
    SkillDefault,
    SkillDefaultType,
    SpellBonus,
    Technique,
    WeaponBonus,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "GurpsSheetError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Advantage",
    "AttributeBonus",
    "AttributeTag",
    "Character",
    "CostReduction",
    "DRBonus",
    "Equipment",
    "LeveledAmount",
    "Modifier",
    "SelfControlRoll",
    "SelfControlRollAdjustment",
    "Skill",
    "SkillBonus",
    "SkillDefault",
    "SkillDefaultType",
    "SpellBonus",
    "Technique",
    "WeaponBonus",
    # Engine
    "BonusIndex",
    "SkillLevel",
    "adjusted_advantage_cost",
    "advantage_points",
    "calculate_skill_level",
    "resolve_skill_default_level",
    "update_skill_levels",
]
