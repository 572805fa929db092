"""Skill-default resolution.

A default says "this skill can be used at <attribute or other skill> plus a
modifier". Skill-based defaults can form cycles (A defaults to B, B defaults
to A), so every resolution carries an immutable exclusion set of skill
identities that may not be consulted. Each skill adds its own identity
before resolving its defaults, and each candidate is computed with its own
identity added, so any chain visits a skill at most once.

Exploring every chain of a group of skills that all default to each other
grows with the number of orderings of the group. A :class:`ResolutionPass`
keeps that in check in two ways:

* results are memoized per (skill, exclusion set) for the whole pass;
* each skill gets a ceiling, the level it would reach if exclusions beyond
  itself were ignored. A skill's level never drops when one of its defaults
  rises, and never rises when more skills are excluded, so no chain can take
  a skill above its ceiling. A candidate, or a whole skill-based default,
  whose ceiling cannot beat the best level found so far is skipped without
  being computed.

Ceilings come from repeatedly evaluating every skill against the previous
round's levels, starting from "everything undefined". Round ``k`` covers
chains of up to ``k`` skills, and the rounds stop as soon as nothing changes,
so the cost follows the depth of the longest default chain.

Unresolvable defaults are not errors: they yield :data:`UNDEFINED_LEVEL`.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gurps_sheet.core.config import get_settings
from gurps_sheet.core.constants import (
    DEFENSE_DEFAULT_BONUS,
    RULE_OF_20_LIMIT,
    UNDEFINED_LEVEL,
    UNDEFINED_LEVEL_DISPLAY,
)
from gurps_sheet.core.logging import get_logger
from gurps_sheet.models.enums import SkillDefaultType


if TYPE_CHECKING:
    from gurps_sheet.engine.skill_levels import SkillLevel
    from gurps_sheet.models.character import Character
    from gurps_sheet.models.skill_default import SkillDefault
    from gurps_sheet.models.traits import Skill


logger = get_logger(__name__)


def is_defined(level: int) -> bool:
    """Whether a level is a real value rather than the undefined sentinel."""
    return level != UNDEFINED_LEVEL


def format_level(level: int) -> str:
    """Render a level for display; undefined levels show as ``-``."""
    return str(level) if is_defined(level) else UNDEFINED_LEVEL_DISPLAY


@dataclass(frozen=True)
class DefaultedFrom:
    """The default a skill is currently bought up from.

    Attributes:
        default: The chosen default.
        level: Level the default provides, with the target skill's own bonuses removed.
        points: Points the default is worth; negative when it falls below the
            one-point baseline.
    """

    default: SkillDefault
    level: int
    points: int


@dataclass
class ResolutionPass:
    """State shared by the level computations of one recompute.

    A pass is only valid while the character is unchanged; start a new one
    after any mutation.

    Attributes:
        known_levels: When set, candidate levels are read from this table
            (keyed by skill uid) instead of being computed. A candidate
            missing from it counts as undefined.
        rule_of_20: Cap attribute levels at 20 for attribute defaults.
        memo: Levels already computed in this pass, keyed by skill uid and
            exclusion set.
    """

    known_levels: Mapping[str, SkillLevel] | None = None
    rule_of_20: bool = False
    memo: dict[tuple[str, frozenset[str]], SkillLevel] = field(default_factory=dict)
    _ceilings: ResolutionPass | None = field(default=None, init=False, repr=False)

    @classmethod
    def start(
        cls,
        *,
        known_levels: Mapping[str, SkillLevel] | None = None,
        rule_of_20: bool | None = None,
    ) -> ResolutionPass:
        """Begin a pass, reading ``rule_of_20`` from the engine settings when None."""
        if rule_of_20 is None:
            rule_of_20 = get_settings().engine.use_rule_of_20
        return cls(known_levels=known_levels, rule_of_20=rule_of_20)

    @property
    def prunes(self) -> bool:
        """Whether this pass computes candidates and can skip hopeless ones."""
        return self.known_levels is None

    def ceilings(self, character: Character) -> ResolutionPass:
        """A pass that reads every skill's ceiling as its level.

        Resolving a default through it gives the highest level that default
        can provide in any chain.
        """
        if self._ceilings is None:
            self._ceilings = ResolutionPass(
                known_levels=self._compute_ceilings(character),
                rule_of_20=self.rule_of_20,
            )
        return self._ceilings

    def ceiling(self, skill: Skill, character: Character) -> int:
        """Highest level ``skill`` can reach in any default chain."""
        return _candidate_level(skill, character, frozenset(), self.ceilings(character))

    def _compute_ceilings(self, character: Character) -> dict[str, SkillLevel]:
        from gurps_sheet.engine.skill_levels import calculate_skill_level

        skills = list(character.iter_skills())
        levels: dict[str, SkillLevel] = {}
        rounds = 0
        for rounds in range(1, len(skills) + 2):
            previous = ResolutionPass(known_levels=levels, rule_of_20=self.rule_of_20)
            current = {
                skill.uid: calculate_skill_level(skill, character, resolution=previous) for skill in skills
            }
            if current == levels:
                break
            levels = current
        logger.debug("Default ceilings computed", skills=len(skills), rounds=rounds)
        return levels


def _candidate_level(
    candidate: Skill,
    character: Character,
    excludes: frozenset[str],
    resolution: ResolutionPass,
) -> int:
    if resolution.known_levels is not None:
        known = resolution.known_levels.get(candidate.uid)
        return known.level if known is not None else UNDEFINED_LEVEL

    from gurps_sheet.engine.skill_levels import calculate_skill_level

    return calculate_skill_level(
        candidate,
        character,
        excludes | {candidate.identity},
        resolution=resolution,
    ).level


def _best_candidate_level(
    default: SkillDefault,
    character: Character,
    excludes: frozenset[str],
    resolution: ResolutionPass,
) -> int:
    ceilings = resolution.ceilings(character) if resolution.prunes else None
    best = UNDEFINED_LEVEL
    for candidate in character.skills_named(default.name, default.specialization, True, excludes):
        if ceilings is not None and _candidate_level(candidate, character, excludes, ceilings) <= best:
            continue
        best = max(best, _candidate_level(candidate, character, excludes, resolution))
    return best


def resolve_skill_default_level(
    default: SkillDefault,
    character: Character,
    excludes: frozenset[str] = frozenset(),
    *,
    fast: bool = False,
    rule_of_20: bool | None = None,
    resolution: ResolutionPass | None = None,
) -> int:
    """Resolve the level a default provides.

    Args:
        default: The default to resolve.
        character: The character whose attributes and skills are consulted.
        excludes: Skill identities that may not be used as candidates.
        fast: Read candidate levels stored by the last bulk recompute instead
            of computing them. A candidate without a stored level counts as
            undefined.
        rule_of_20: Cap the attribute at 20 for attribute defaults; None uses
            the engine setting. Ignored when ``resolution`` is given.
        resolution: Pass to share memoized levels with; a new one is started
            when omitted.

    Returns:
        The resolved level including the default's modifier, or
        :data:`UNDEFINED_LEVEL` when no candidate exists.

    Example:
        >>> resolve_skill_default_level(SkillDefault(type=SkillDefaultType.DX), Character(dx=12))
        12
    """
    if fast:
        resolution = ResolutionPass.start(known_levels=character.stored_skill_levels, rule_of_20=rule_of_20)
    elif resolution is None:
        resolution = ResolutionPass.start(rule_of_20=rule_of_20)

    if default.type.attribute is not None:
        level = math.trunc(character.attribute_value(default.type.attribute))
        if resolution.rule_of_20:
            level = min(level, RULE_OF_20_LIMIT)
    else:
        best = _best_candidate_level(default, character, excludes, resolution)
        match default.type:
            case SkillDefaultType.PARRY if is_defined(best):
                level = math.trunc(best / 2) + DEFENSE_DEFAULT_BONUS + character.parry_bonus
            case SkillDefaultType.BLOCK if is_defined(best):
                level = math.trunc(best / 2) + DEFENSE_DEFAULT_BONUS + character.block_bonus
            case _:
                level = best
    if not is_defined(level):
        return UNDEFINED_LEVEL
    return level + default.modifier


def _has_skill_defaults(skill: Skill) -> bool:
    return any(default.is_skill_based for default in skill.defaults)


def best_default(
    skill: Skill,
    character: Character,
    excludes: frozenset[str],
    *,
    resolution: ResolutionPass | None = None,
) -> DefaultedFrom | None:
    """Choose the highest-level default of a skill and price it in points.

    A skill-based default has the target skill's own bonuses removed, so
    they are not carried over twice once the defaulting skill adds its own.

    Args:
        skill: The skill whose defaults are considered.
        character: The owning character.
        excludes: Exclusion set, already containing the skill's identity.
        resolution: Pass to share memoized levels with.

    Returns:
        The best default, or None when none resolves.
    """
    if resolution is None:
        resolution = ResolutionPass.start()
    ceilings = resolution.ceilings(character) if resolution.prunes and _has_skill_defaults(skill) else None
    chosen: SkillDefault | None = None
    best = UNDEFINED_LEVEL
    for default in skill.defaults:
        # Only plain skill defaults shed the target skill's bonuses; Parry and Block keep them.
        shed = 0
        if default.type is SkillDefaultType.SKILL:
            shed = character.bonuses.skill_bonus_for(default.name or "", default.specialization)
        if ceilings is not None and default.is_skill_based:
            ceiling = resolve_skill_default_level(default, character, excludes, resolution=ceilings)
            if is_defined(ceiling) and ceiling - shed <= best:
                continue
        level = resolve_skill_default_level(default, character, excludes, resolution=resolution)
        if not is_defined(level):
            logger.debug("Default unresolved", skill=skill.identity, default=default.describe())
            continue
        level -= shed
        if level > best:
            best = level
            chosen = default
    if chosen is None:
        return None

    baseline = math.trunc(character.attribute_value(skill.attribute)) + skill.difficulty.base_relative_level
    if best == baseline:
        points = 1
    elif best == baseline + 1:
        points = 2
    elif best > baseline + 1:
        points = 4 * (best - (baseline + 1))
    else:
        points = -max(best, 0)
    return DefaultedFrom(default=chosen, level=best, points=points)


__all__ = [
    "DefaultedFrom",
    "ResolutionPass",
    "best_default",
    "format_level",
    "is_defined",
    "resolve_skill_default_level",
]
