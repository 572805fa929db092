"""Rules constants and feature-key namespaces for gurps_sheet.

Feature keys are the join point between what a trait grants and what a stat
consumer looks up, so every namespace used to build or query them lives here.
"""

from __future__ import annotations

# =============================================================================
# Level Sentinels
# =============================================================================

UNDEFINED_LEVEL = -(2**31)
"""Level of a skill that has neither points nor a usable default."""

UNDEFINED_LEVEL_DISPLAY = "-"
"""How an undefined level is rendered."""

# =============================================================================
# Feature Key Namespaces
# =============================================================================

ATTRIBUTE_ID_PREFIX = "attribute."
"""Prefix for attribute bonus keys, e.g. ``attribute.st``."""

HIT_LOCATION_ID_PREFIX = "hit_location."
"""Prefix for damage resistance bonus keys, e.g. ``hit_location.torso``."""

SKILL_NAME_ID = "skill.name"
"""Namespace for skill bonuses."""

SPELL_NAME_ID = "spell.name"
"""Namespace for spell bonuses matched against the spell name."""

SPELL_COLLEGE_ID = "spell.college"
"""Namespace for spell bonuses matched against a college."""

WEAPON_NAMED_ID = "weapon_named"
"""Namespace for weapon bonuses."""

KEY_QUALIFIER_SEPARATOR = "/"
"""Separator between a namespace and an exact-match name."""

WILDCARD = "*"
"""Suffix used when the name criteria is broader than an exact match."""

# =============================================================================
# Cost Rules
# =============================================================================

MAX_COST_REDUCTION = 80
"""Maximum attribute cost reduction, in percent."""

MAX_LIMITATION = -80
"""Limitations can never reduce a cost by more than 80%."""

ALTERNATIVE_ABILITY_PERCENTAGE = 20
"""Non-maximal alternative abilities cost 1/5 of their price."""

# =============================================================================
# Defaults
# =============================================================================

DEFENSE_DEFAULT_BONUS = 3
"""Flat addition for Parry- and Block-based defaults (half skill + 3)."""

RULE_OF_20_LIMIT = 20
"""Highest attribute an attribute default may use under the rule of 20."""

TECHNIQUE_DEFAULT_NAME = "Skill"
"""Placeholder base-skill name for a freshly created technique."""

MERCHANT_SKILL_NAME = "Merchant"
"""Skill penalized by a major cost-of-living self-control adjustment."""


__all__ = [
    "UNDEFINED_LEVEL",
    "UNDEFINED_LEVEL_DISPLAY",
    "ATTRIBUTE_ID_PREFIX",
    "HIT_LOCATION_ID_PREFIX",
    "SKILL_NAME_ID",
    "SPELL_NAME_ID",
    "SPELL_COLLEGE_ID",
    "WEAPON_NAMED_ID",
    "KEY_QUALIFIER_SEPARATOR",
    "WILDCARD",
    "MAX_COST_REDUCTION",
    "MAX_LIMITATION",
    "ALTERNATIVE_ABILITY_PERCENTAGE",
    "DEFENSE_DEFAULT_BONUS",
    "RULE_OF_20_LIMIT",
    "TECHNIQUE_DEFAULT_NAME",
    "MERCHANT_SKILL_NAME",
]
