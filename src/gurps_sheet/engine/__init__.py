"""Rules engine: bonus aggregation, default resolution, skill levels and costs.

Submodules:
    bonuses: Key to bonus index, rebuilt lazily after trait changes.
    self_control: Self-control roll multipliers and adjustments.
    defaults: Skill-default resolution with cycle exclusion.
    skill_levels: Skill and technique levels.
    costs: Advantage, attribute and skill point costs.

Example:
    >>> from gurps_sheet.engine import update_skill_levels
    >>> levels = update_skill_levels(character)
"""

from __future__ import annotations

# =============================================================================
# Bonus Aggregation
# =============================================================================
from gurps_sheet.engine.bonuses import BonusCache, BonusEntry, BonusIndex

# =============================================================================
# Point Costs
# =============================================================================
from gurps_sheet.engine.costs import (
    adjusted_advantage_cost,
    advantage_points,
    advantages_points,
    attribute_points,
    skill_points,
    total_points,
)

# =============================================================================
# Default Resolution and Skill Levels
# =============================================================================
from gurps_sheet.engine.defaults import (
    DefaultedFrom,
    ResolutionPass,
    best_default,
    format_level,
    is_defined,
    resolve_skill_default_level,
)
from gurps_sheet.engine.self_control import (
    adjustment_bonuses,
    adjustment_description,
    adjustment_title,
    adjustment_value,
    cost_multiplier,
)
from gurps_sheet.engine.skill_levels import (
    SkillLevel,
    calculate_skill_level,
    update_skill_levels,
)


__all__ = [
    # Bonuses
    "BonusCache",
    "BonusEntry",
    "BonusIndex",
    # Self-control
    "adjustment_bonuses",
    "adjustment_description",
    "adjustment_title",
    "adjustment_value",
    "cost_multiplier",
    # Defaults
    "DefaultedFrom",
    "ResolutionPass",
    "best_default",
    "format_level",
    "is_defined",
    "resolve_skill_default_level",
    # Skill levels
    "SkillLevel",
    "calculate_skill_level",
    "update_skill_levels",
    # Costs
    "adjusted_advantage_cost",
    "advantage_points",
    "advantages_points",
    "attribute_points",
    "skill_points",
    "total_points",
]
