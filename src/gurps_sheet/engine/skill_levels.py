"""Skill and technique level calculation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gurps_sheet.core.constants import UNDEFINED_LEVEL
from gurps_sheet.core.exceptions import DefaultResolutionError
from gurps_sheet.core.logging import character_context, get_logger
from gurps_sheet.engine.defaults import (
    ResolutionPass,
    best_default,
    is_defined,
    resolve_skill_default_level,
)
from gurps_sheet.models.enums import SkillDifficulty
from gurps_sheet.models.traits import Technique


if TYPE_CHECKING:
    from gurps_sheet.models.character import Character
    from gurps_sheet.models.traits import Skill


logger = get_logger(__name__)


@dataclass(frozen=True)
class SkillLevel:
    """A computed skill level.

    Attributes:
        level: Effective level, or UNDEFINED_LEVEL.
        relative_level: Level relative to the controlling attribute (or, for
            techniques, to the base skill).
    """

    level: int
    relative_level: int

    @property
    def is_defined(self) -> bool:
        return is_defined(self.level)


UNDEFINED = SkillLevel(UNDEFINED_LEVEL, 0)


def _relative_level_for_points(points: int, relative_level: int) -> int:
    if points == 1:
        return relative_level
    if points < 4:
        return relative_level + 1
    return relative_level + 1 + points // 4


def calculate_skill_level(
    skill: Skill,
    character: Character,
    excludes: frozenset[str] | None = None,
    *,
    resolution: ResolutionPass | None = None,
) -> SkillLevel:
    """Compute a skill's level from its attribute, points, defaults and bonuses.

    Args:
        skill: The skill or technique to compute.
        character: The owning character.
        excludes: Skill identities that may not be consulted while resolving
            defaults. Must contain the skill's own identity when given;
            omitted, it starts as just that identity.
        resolution: Pass to share memoized levels with; a new one is
            started when omitted.

    Returns:
        The computed level.

    Raises:
        DefaultResolutionError: If ``excludes`` lacks the skill's identity.
    """
    if excludes is None:
        excludes = frozenset({skill.identity})
    elif skill.identity not in excludes:
        raise DefaultResolutionError(
            "Exclusion set must contain the skill being resolved",
            skill=skill.identity,
            excludes=excludes,
        )
    if resolution is None:
        resolution = ResolutionPass.start()
    key = (skill.uid, excludes)
    level = resolution.memo.get(key)
    if level is None:
        level = _compute_level(skill, character, excludes, resolution)
        resolution.memo[key] = level
    return level


def _compute_level(
    skill: Skill,
    character: Character,
    excludes: frozenset[str],
    resolution: ResolutionPass,
) -> SkillLevel:
    if skill.is_container:
        return UNDEFINED
    if isinstance(skill, Technique):
        return _technique_level(skill, character, excludes, resolution)

    bonuses = character.bonuses
    relative_level = skill.difficulty.base_relative_level
    level = math.trunc(character.attribute_value(skill.attribute))
    defaulted_from = best_default(skill, character, excludes, resolution=resolution)

    points = skill.points
    if skill.difficulty is SkillDifficulty.WILDCARD:
        points //= 3
    elif defaulted_from is not None and defaulted_from.points > 0:
        points += defaulted_from.points

    if points > 0:
        relative_level = _relative_level_for_points(points, relative_level)
    elif defaulted_from is not None and (defaulted_from.points < 0 or skill.difficulty is SkillDifficulty.WILDCARD):
        relative_level = defaulted_from.level - level
    else:
        logger.debug("Skill level undefined", skill=skill.identity)
        return UNDEFINED

    level += relative_level
    if defaulted_from is not None:
        level = max(level, defaulted_from.level)
    bonus = bonuses.skill_bonus_for(skill.name, skill.specialization)
    return SkillLevel(level + bonus, relative_level + bonus)


def _technique_level(
    technique: Technique,
    character: Character,
    excludes: frozenset[str],
    resolution: ResolutionPass,
) -> SkillLevel:
    default = technique.default
    resolved = resolve_skill_default_level(default, character, excludes, resolution=resolution)
    if not is_defined(resolved):
        logger.debug("Technique base skill unresolved", skill=technique.identity)
        return UNDEFINED

    base_level = resolved - default.modifier
    level = resolved
    points = technique.points
    if technique.difficulty is SkillDifficulty.HARD:
        points -= 1
    relative_level = max(points, 0)
    relative_level += character.bonuses.skill_bonus_for(technique.name, technique.specialization)
    level += relative_level

    if technique.limit is not None:
        maximum = base_level + technique.limit
        if level > maximum:
            relative_level -= level - maximum
            level = maximum
    return SkillLevel(level, relative_level)


def update_skill_levels(character: Character) -> dict[str, SkillLevel]:
    """Recompute every skill and technique in full and store the results.

    The stored levels are what fast-mode default resolution reads.

    Returns:
        Levels keyed by skill uid.
    """
    with character_context(character.name):
        resolution = ResolutionPass.start()
        levels = {
            skill.uid: calculate_skill_level(skill, character, resolution=resolution)
            for skill in character.iter_skills()
        }
        character.store_skill_levels(levels)
        logger.debug(
            "Skill levels recomputed",
            skills=len(levels),
            undefined=sum(1 for level in levels.values() if not level.is_defined),
            memoized=len(resolution.memo),
        )
    return levels


__all__ = [
    "SkillLevel",
    "calculate_skill_level",
    "update_skill_levels",
]
