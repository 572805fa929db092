"""The character: attributes plus the advantage, skill and equipment forests.

The character owns two caches derived from its traits: the bonus index and
the levels stored by the last bulk skill recompute. Both are dropped on the
next read after any tracked field assignment, whether made through the
mutation helpers below or directly on a trait.

Example:
    >>> hero = Character(name="Dai", dx=14)
    >>> hero.add_advantage(Advantage(name="Combat Reflexes", base_points=15))
    >>> hero.attribute_value(AttributeTag.DX)
    14
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import ConfigDict, Field, PrivateAttr

from gurps_sheet.core.exceptions import TraitTreeError, ValidationError
from gurps_sheet.core.logging import get_logger
from gurps_sheet.models.enums import AttributeTag, BonusLimitation
from gurps_sheet.models.features import Feature
from gurps_sheet.models.tracking import TrackedModel, bump_revision, current_revision
from gurps_sheet.models.traits import (
    Advantage,
    Equipment,
    Modifier,
    Skill,
    SkillLike,
    Technique,
    Trait,
)


if TYPE_CHECKING:
    from gurps_sheet.engine.bonuses import BonusCache, BonusIndex
    from gurps_sheet.engine.skill_levels import SkillLevel


logger = get_logger(__name__)


class Character(TrackedModel):
    """A character sheet reduced to what the rules engine needs.

    Attributes:
        name: Character name.
        st: Purchased Strength.
        dx: Purchased Dexterity.
        iq: Purchased Intelligence.
        ht: Purchased Health.
        will_adjustment: Will purchased above or below IQ.
        per_adjustment: Perception purchased above or below IQ.
        hp_adjustment: Hit points purchased above or below ST.
        fp_adjustment: Fatigue points purchased above or below HT.
        speed_adjustment: Basic Speed purchased in quarter steps.
        move_adjustment: Basic Move purchased above or below Speed.
        advantages: Advantage forest.
        skills: Skill and technique forest.
        equipment: Carried equipment forest.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    name: str = Field(default="", description="Character name")
    st: int = Field(default=10, ge=1, description="Purchased Strength")
    dx: int = Field(default=10, ge=1, description="Purchased Dexterity")
    iq: int = Field(default=10, ge=1, description="Purchased Intelligence")
    ht: int = Field(default=10, ge=1, description="Purchased Health")
    will_adjustment: int = Field(default=0, description="Will relative to IQ")
    per_adjustment: int = Field(default=0, description="Perception relative to IQ")
    hp_adjustment: int = Field(default=0, description="Hit points relative to ST")
    fp_adjustment: int = Field(default=0, description="Fatigue points relative to HT")
    speed_adjustment: float = Field(default=0.0, description="Basic Speed adjustment")
    move_adjustment: int = Field(default=0, description="Basic Move relative to Speed")
    advantages: list[Advantage] = Field(default_factory=list, description="Advantages")
    skills: list[SkillLike] = Field(default_factory=list, description="Skills")
    equipment: list[Equipment] = Field(default_factory=list, description="Equipment")

    _bonus_cache: BonusCache | None = PrivateAttr(default=None)
    _skill_levels: dict[str, SkillLevel] = PrivateAttr(default_factory=dict)
    _skill_levels_revision: int = PrivateAttr(default=-1)

    # =========================================================================
    # Bonus cache
    # =========================================================================

    @property
    def bonus_cache(self) -> BonusCache:
        """The lazily created bonus cache for this character."""
        if self._bonus_cache is None:
            from gurps_sheet.engine.bonuses import BonusCache

            self._bonus_cache = BonusCache()
        return self._bonus_cache

    @property
    def bonuses(self) -> BonusIndex:
        """The current bonus index, rebuilt first if any trait changed."""
        return self.bonus_cache.current(self)

    def invalidate(self) -> None:
        """Mark every derived value stale after a trait change."""
        bump_revision()
        self.bonus_cache.invalidate()
        self._skill_levels = {}

    # =========================================================================
    # Attributes
    # =========================================================================

    def attribute_base_value(self, tag: AttributeTag) -> float:
        """Attribute value from purchased levels alone, without any bonus.

        Args:
            tag: The attribute to read.

        Returns:
            The purchased value. Secondary characteristics are derived from
            purchased primaries.
        """
        match tag:
            case AttributeTag.ST | AttributeTag.DX | AttributeTag.IQ | AttributeTag.HT:
                return getattr(self, tag.value)
            case AttributeTag.WILL | AttributeTag.FRIGHT_CHECK:
                return self.iq + self.will_adjustment
            case (
                AttributeTag.PER
                | AttributeTag.VISION
                | AttributeTag.HEARING
                | AttributeTag.TASTE_SMELL
                | AttributeTag.TOUCH
            ):
                return self.iq + self.per_adjustment
            case AttributeTag.HP:
                return self.st + self.hp_adjustment
            case AttributeTag.FP:
                return self.ht + self.fp_adjustment
            case AttributeTag.SPEED:
                return (self.dx + self.ht) / 4 + self.speed_adjustment
            case AttributeTag.MOVE:
                return math.floor(self.attribute_base_value(AttributeTag.SPEED)) + self.move_adjustment
            case AttributeTag.DODGE:
                return math.floor(self.attribute_base_value(AttributeTag.SPEED)) + 3
            case AttributeTag.PARRY | AttributeTag.BLOCK:
                return 0

    def attribute_value(self, tag: AttributeTag) -> float:
        """Current attribute value including every active bonus.

        Secondary characteristics are derived from the current (bonused)
        primaries and then receive their own bonuses, so a bonus to IQ also
        raises Will and Perception.
        """
        bonus = self.bonuses.attribute_bonus_for(tag)
        match tag:
            case AttributeTag.ST | AttributeTag.DX | AttributeTag.IQ | AttributeTag.HT:
                return getattr(self, tag.value) + bonus
            case AttributeTag.WILL:
                return self.attribute_value(AttributeTag.IQ) + self.will_adjustment + bonus
            case AttributeTag.FRIGHT_CHECK:
                return self.attribute_value(AttributeTag.WILL) + bonus
            case AttributeTag.PER:
                return self.attribute_value(AttributeTag.IQ) + self.per_adjustment + bonus
            case (
                AttributeTag.VISION
                | AttributeTag.HEARING
                | AttributeTag.TASTE_SMELL
                | AttributeTag.TOUCH
            ):
                return self.attribute_value(AttributeTag.PER) + bonus
            case AttributeTag.HP:
                return self.attribute_value(AttributeTag.ST) + self.hp_adjustment + bonus
            case AttributeTag.FP:
                return self.attribute_value(AttributeTag.HT) + self.fp_adjustment + bonus
            case AttributeTag.SPEED:
                dx = self.attribute_value(AttributeTag.DX)
                ht = self.attribute_value(AttributeTag.HT)
                return (dx + ht) / 4 + self.speed_adjustment + bonus
            case AttributeTag.MOVE:
                speed = self.attribute_value(AttributeTag.SPEED)
                return math.floor(speed) + self.move_adjustment + bonus
            case AttributeTag.DODGE:
                return math.floor(self.attribute_value(AttributeTag.SPEED)) + 3 + bonus
            case AttributeTag.PARRY | AttributeTag.BLOCK:
                return bonus

    def strength_for(self, limitation: BonusLimitation) -> int:
        """ST used for lifting or striking, including limited bonuses."""
        strength = int(self.attribute_value(AttributeTag.ST))
        if limitation is BonusLimitation.NONE:
            return strength
        return strength + self.bonuses.attribute_bonus_for(AttributeTag.ST, limitation)

    @property
    def parry_bonus(self) -> int:
        """Bonus added to Parry-based defaults."""
        return self.bonuses.attribute_bonus_for(AttributeTag.PARRY)

    @property
    def block_bonus(self) -> int:
        """Bonus added to Block-based defaults."""
        return self.bonuses.attribute_bonus_for(AttributeTag.BLOCK)

    # =========================================================================
    # Traversal and lookup
    # =========================================================================

    def iter_advantages(self, *, include_disabled: bool = False) -> Iterator[Advantage]:
        """Recursive iterator over the advantages.

        Args:
            include_disabled: Also yield disabled advantages and their subtrees.
        """
        for root in self.advantages:
            yield from (root.walk() if include_disabled else root.iter_enabled())

    def iter_skills(self) -> Iterator[Skill]:
        """Recursive iterator over skills and techniques, excluding containers."""
        for root in self.skills:
            for node in root.walk():
                if not node.is_container:
                    yield node

    def iter_equipment(self, *, carried_only: bool = True) -> Iterator[Equipment]:
        """Recursive iterator over equipment.

        Args:
            carried_only: Only yield items that are equipped and present.
        """
        for root in self.equipment:
            yield from (root.iter_enabled() if carried_only else root.walk())

    def skills_named(
        self,
        name: str | None,
        specialization: str | None = None,
        require_points: bool = True,
        excludes: frozenset[str] = frozenset(),
    ) -> list[Skill]:
        """Find skills by name and optional specialization.

        Args:
            name: Skill name, compared case-insensitively.
            specialization: Specialization to require; empty or None matches any.
            require_points: Only return skills with points (techniques always count).
            excludes: Skill identities to leave out.

        Returns:
            The matching skills, in tree order.
        """
        wanted = (name or "").lower()
        wanted_specialization = (specialization or "").lower()
        matches: list[Skill] = []
        for skill in self.iter_skills():
            if skill.identity in excludes:
                continue
            if require_points and not skill.counts_as_trained:
                continue
            if skill.name.lower() != wanted:
                continue
            if wanted_specialization and skill.specialization.lower() != wanted_specialization:
                continue
            matches.append(skill)
        return matches

    def find_trait(self, uid: str) -> Trait:
        """Find any trait (including advantage modifiers) by identifier.

        Raises:
            TraitTreeError: If no trait has the identifier.
        """
        _, trait = self._locate(uid)
        return trait

    def _locate(self, uid: str) -> tuple[list[Any], Trait]:
        forests: list[list[Any]] = [self.advantages, self.skills, self.equipment]
        while forests:
            siblings = forests.pop()
            for node in siblings:
                if node.uid == uid:
                    return siblings, node
                forests.append(node.child_nodes)
                if isinstance(node, Advantage):
                    forests.append(node.modifiers)
        raise TraitTreeError("No trait with this identifier", trait_id=uid)

    # =========================================================================
    # Mutation helpers
    # =========================================================================

    def add_advantage(self, advantage: Advantage, *, parent_uid: str | None = None) -> None:
        """Add an advantage at the root or under a container advantage."""
        self._add(self.advantages, advantage, parent_uid, Advantage)

    def add_skill(self, skill: Skill, *, parent_uid: str | None = None) -> None:
        """Add a skill or technique at the root or under a skill container."""
        self._add(self.skills, skill, parent_uid, Skill)

    def add_equipment(self, item: Equipment, *, parent_uid: str | None = None) -> None:
        """Add an item at the root or inside another item."""
        self._add(self.equipment, item, parent_uid, Equipment)

    def add_modifier(self, advantage_uid: str, modifier: Modifier) -> None:
        """Attach a modifier to an advantage."""
        advantage = self._require(advantage_uid, Advantage)
        advantage.modifiers.append(modifier)
        self.invalidate()

    def _add(
        self,
        roots: list[Any],
        trait: Trait,
        parent_uid: str | None,
        parent_type: type[Trait],
    ) -> None:
        if parent_uid is None:
            roots.append(trait)
        else:
            parent = self._require(parent_uid, parent_type)
            if isinstance(parent, Technique):
                raise TraitTreeError("Techniques cannot contain other skills", trait_id=parent_uid)
            parent.children.append(trait)
        logger.debug("Trait added", trait=trait.name, kind=type(trait).__name__, parent=parent_uid)
        self.invalidate()

    def remove_trait(self, uid: str) -> Trait:
        """Remove a trait and its subtree.

        Returns:
            The removed trait.
        """
        siblings, trait = self._locate(uid)
        siblings.remove(trait)
        self.invalidate()
        return trait

    def set_enabled(self, uid: str, enabled: bool) -> None:
        """Enable or disable a trait (and therefore its subtree)."""
        self.find_trait(uid).enabled = enabled
        self.invalidate()

    def set_levels(self, uid: str, levels: int) -> None:
        """Change the levels of an advantage or modifier."""
        trait = self.find_trait(uid)
        if not isinstance(trait, Advantage | Modifier):
            raise TraitTreeError("Only advantages and modifiers have levels", trait_id=uid)
        trait.levels = levels
        self.invalidate()

    def set_features(self, uid: str, features: list[Feature]) -> None:
        """Replace a trait's feature list."""
        self.find_trait(uid).features = list(features)
        self.invalidate()

    def set_points(self, uid: str, points: int) -> None:
        """Change the points spent on a skill or technique."""
        self._require(uid, Skill).points = points
        self.invalidate()

    def set_attribute(self, tag: AttributeTag, value: int) -> None:
        """Change a purchased primary attribute."""
        if not tag.is_primary:
            raise TraitTreeError(f"{tag.value} is not a purchasable primary attribute")
        if value < 1:
            raise ValidationError(
                "Attributes must be at least 1",
                field_name=tag.value,
                invalid_value=value,
            )
        setattr(self, tag.value, value)
        self.invalidate()

    def _require(self, uid: str, expected: type[Trait]) -> Any:
        trait = self.find_trait(uid)
        if not isinstance(trait, expected):
            raise TraitTreeError(
                f"Expected a {expected.__name__}, found a {type(trait).__name__}",
                trait_id=uid,
            )
        return trait

    # =========================================================================
    # Skill level cache
    # =========================================================================

    @property
    def stored_skill_levels(self) -> Mapping[str, SkillLevel]:
        """Levels stored by the last bulk recompute, keyed by uid.

        Empty once any tracked model has changed since they were stored.
        """
        if self._skill_levels_revision != current_revision():
            return MappingProxyType({})
        return MappingProxyType(self._skill_levels)

    def cached_skill_level(self, skill: Skill) -> SkillLevel | None:
        """Level stored by the last bulk recompute, if still valid."""
        return self.stored_skill_levels.get(skill.uid)

    def store_skill_levels(self, levels: Mapping[str, SkillLevel]) -> None:
        """Replace the skill level cache in one step."""
        self._skill_levels = dict(levels)
        self._skill_levels_revision = current_revision()


__all__ = ["Character"]
