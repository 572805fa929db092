"""Trait trees: advantages, modifiers, skills, techniques and equipment.

Every trait is a node in a forest. It carries an ``enabled`` flag, an ordered
list of features it contributes, and optionally children. Enablement is
inherited downward: a disabled node switches off its whole subtree, whatever
the children's own flags say.

Traits own their features and defaults outright; ``clone()`` returns a deep
copy with a fresh identifier.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Literal, Self
from uuid import uuid4

from pydantic import ConfigDict, Field, field_validator

from gurps_sheet.core.constants import TECHNIQUE_DEFAULT_NAME
from gurps_sheet.models.enums import (
    AdvantageContainerType,
    AttributeTag,
    ModifierAffects,
    ModifierCostType,
    SelfControlRoll,
    SelfControlRollAdjustment,
    SkillDefaultType,
    SkillDifficulty,
)
from gurps_sheet.models.features import Feature
from gurps_sheet.models.skill_default import SkillDefault
from gurps_sheet.models.tracking import TrackedModel


def _new_uid() -> str:
    return str(uuid4())


class Trait(TrackedModel):
    """Base node for every trait tree.

    Attributes:
        uid: Unique identifier of the node.
        name: Display name.
        enabled: The node's own flag; see :meth:`iter_enabled`.
        notes: Free-form notes.
        features: Features contributed while the node is active.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    uid: str = Field(default_factory=_new_uid, description="Unique identifier")
    name: str = Field(default="", description="Display name")
    enabled: bool = Field(default=True, description="Whether the node itself is enabled")
    notes: str = Field(default="", description="Free-form notes")
    features: list[Feature] = Field(
        default_factory=list,
        description="Features contributed while active",
    )

    @property
    def child_nodes(self) -> list[Self]:
        """Children of this node; leaves return an empty list."""
        return getattr(self, "children", [])

    @property
    def is_container(self) -> bool:
        """Whether the node has children."""
        return bool(self.child_nodes)

    def walk(self) -> Iterator[Self]:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.child_nodes:
            yield from child.walk()

    def iter_enabled(self) -> Iterator[Self]:
        """Yield the enabled nodes of this subtree, skipping disabled branches."""
        if not self.enabled:
            return
        yield self
        for child in self.child_nodes:
            yield from child.iter_enabled()

    def clone(self) -> Self:
        """Deep copy of the subtree with fresh identifiers."""
        copy = self.model_copy(deep=True)
        for node in copy.walk():
            node.uid = _new_uid()
        return copy


# =============================================================================
# Advantages
# =============================================================================


class Modifier(Trait):
    """Enhancement or limitation attached to an advantage.

    Attributes:
        cost: Percentage, flat points or multiplier depending on ``cost_type``.
        cost_type: How ``cost`` is interpreted.
        affects: Which part of a leveled advantage's cost it modifies.
        levels: Number of levels; a leveled modifier multiplies its cost.
    """

    kind: Literal["modifier"] = "modifier"
    cost: float = Field(default=0, description="Cost value")
    cost_type: ModifierCostType = Field(
        default=ModifierCostType.PERCENTAGE,
        description="How the cost is interpreted",
    )
    affects: ModifierAffects = Field(
        default=ModifierAffects.TOTAL,
        description="Part of the cost the modifier applies to",
    )
    levels: int = Field(default=0, ge=0, description="Modifier levels")

    @property
    def cost_modifier(self) -> float:
        """Cost after applying levels."""
        if self.levels > 0 and self.cost_type is not ModifierCostType.MULTIPLIER:
            return self.cost * self.levels
        return self.cost


class Advantage(Trait):
    """Advantage, disadvantage, perk or quirk, or a container of them.

    Attributes:
        base_points: Flat point cost.
        levels: Number of levels purchased.
        half_level: Whether an extra half level is purchased.
        allow_half_levels: Whether half levels are allowed at all.
        points_per_level: Point cost of each level.
        cr: Self-control roll frequency.
        cr_adjustment: Secondary effect of the self-control roll.
        modifiers: Enhancements and limitations.
        container_type: How a container combines its children's costs.
        round_cost_down: Rounding override; None uses the engine setting.
        children: Child advantages.
    """

    kind: Literal["advantage"] = "advantage"
    base_points: int = Field(default=0, description="Flat point cost")
    levels: int = Field(default=0, ge=0, description="Levels purchased")
    half_level: bool = Field(default=False, description="Extra half level purchased")
    allow_half_levels: bool = Field(default=False, description="Half levels permitted")
    points_per_level: int = Field(default=0, description="Cost of each level")
    cr: SelfControlRoll = Field(
        default=SelfControlRoll.NONE_REQUIRED,
        description="Self-control roll",
    )
    cr_adjustment: SelfControlRollAdjustment = Field(
        default=SelfControlRollAdjustment.NONE,
        description="Secondary effect of the self-control roll",
    )
    modifiers: list[Modifier] = Field(default_factory=list, description="Modifiers")
    container_type: AdvantageContainerType = Field(
        default=AdvantageContainerType.GROUP,
        description="How children's costs combine",
    )
    round_cost_down: bool | None = Field(
        default=None,
        description="Rounding override; None uses the engine setting",
    )
    children: list[Advantage] = Field(default_factory=list, description="Child advantages")

    @property
    def is_leveled(self) -> bool:
        """Whether the advantage is bought in levels."""
        return self.points_per_level != 0 or self.levels > 0

    @property
    def effective_half_level(self) -> bool:
        """Half level that actually counts toward cost."""
        return self.allow_half_levels and self.half_level

    def enabled_modifiers(self) -> list[Modifier]:
        """The advantage's own modifiers that are switched on."""
        return [modifier for modifier in self.modifiers if modifier.enabled]


# =============================================================================
# Skills
# =============================================================================


class Skill(Trait):
    """A skill, or a container grouping skills.

    Attributes:
        specialization: Optional specialization.
        attribute: Attribute the skill is based on.
        difficulty: Skill difficulty.
        points: Points spent.
        defaults: Defaults the skill can be used from.
        children: Child skills for containers.
    """

    kind: Literal["skill"] = "skill"
    specialization: str = Field(default="", description="Specialization")
    attribute: AttributeTag = Field(default=AttributeTag.DX, description="Base attribute")
    difficulty: SkillDifficulty = Field(
        default=SkillDifficulty.AVERAGE,
        description="Difficulty rating",
    )
    points: int = Field(default=0, ge=0, description="Points spent")
    defaults: list[SkillDefault] = Field(default_factory=list, description="Defaults")
    children: list[SkillLike] = Field(default_factory=list, description="Child skills")

    @property
    def identity(self) -> str:
        """Name used to exclude the skill during default resolution."""
        if self.specialization:
            return f"{self.name} ({self.specialization})"
        return self.name

    @property
    def counts_as_trained(self) -> bool:
        """Whether the skill has points invested."""
        return self.points > 0

    def set_defaults(self, defaults: list[SkillDefault]) -> None:
        """Replace the defaults wholesale."""
        self.defaults = list(defaults)


class Technique(Skill):
    """A technique: a specific use of a base skill bought up from its default.

    Attributes:
        default: The base-skill default; techniques have exactly one.
        limit: Optional cap relative to the base skill level.
    """

    kind: Literal["technique"] = "technique"  # type: ignore[assignment]
    difficulty: SkillDifficulty = Field(
        default=SkillDifficulty.AVERAGE,
        description="Technique difficulty (Average or Hard)",
    )
    default: SkillDefault = Field(
        default_factory=lambda: SkillDefault(
            type=SkillDefaultType.SKILL,
            name=TECHNIQUE_DEFAULT_NAME,
        ),
        description="Base-skill default",
    )
    limit: int | None = Field(
        default=None,
        description="Maximum level relative to the base skill",
    )

    @field_validator("difficulty", mode="after")
    @classmethod
    def require_average_or_hard(cls, value: SkillDifficulty) -> SkillDifficulty:
        """Techniques are either Average or Hard."""
        if value not in (SkillDifficulty.AVERAGE, SkillDifficulty.HARD):
            msg = f"Techniques must be Average or Hard, got {value.value}"
            raise ValueError(msg)
        return value

    @property
    def counts_as_trained(self) -> bool:
        """Techniques are always considered when searching for a base skill."""
        return True


SkillLike = Annotated[Skill | Technique, Field(discriminator="kind")]
"""A node of the skill forest."""


# =============================================================================
# Equipment
# =============================================================================


class Equipment(Trait):
    """Carried gear. Its features apply only while equipped and present.

    Attributes:
        equipped: Whether the item is equipped.
        quantity: Number of items.
        children: Contained items.
    """

    kind: Literal["equipment"] = "equipment"
    equipped: bool = Field(default=True, description="Whether the item is equipped")
    quantity: int = Field(default=1, ge=0, description="Number of items")
    children: list[Equipment] = Field(default_factory=list, description="Contents")

    @property
    def is_active(self) -> bool:
        """Whether the item currently contributes its features."""
        return self.enabled and self.equipped and self.quantity > 0

    def iter_enabled(self) -> Iterator[Equipment]:
        """Yield active items, skipping the contents of inactive containers."""
        if not self.is_active:
            return
        yield self
        for child in self.children:
            yield from child.iter_enabled()


Advantage.model_rebuild()
Skill.model_rebuild()
Technique.model_rebuild()
Equipment.model_rebuild()


__all__ = [
    "Trait",
    "Modifier",
    "Advantage",
    "Skill",
    "Technique",
    "SkillLike",
    "Equipment",
]
