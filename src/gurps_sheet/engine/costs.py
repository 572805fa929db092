"""Point costs for advantages, attributes and skills.

Advantage cost is computed in three steps:

1. Percentage modifiers adjust the base and leveled cost. Limitations are
   capped at -80%.
2. The self-control multiplier and any multiplier modifiers scale the result,
   which is rounded up (or down when the advantage or the engine settings
   ask for it).
3. Flat point modifiers are added to the rounded cost.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from gurps_sheet.core.config import get_settings
from gurps_sheet.core.constants import ALTERNATIVE_ABILITY_PERCENTAGE, MAX_LIMITATION
from gurps_sheet.engine.self_control import cost_multiplier
from gurps_sheet.models.enums import (
    AdvantageContainerType,
    AttributeTag,
    ModifierAffects,
    ModifierCostType,
    SelfControlRoll,
)


if TYPE_CHECKING:
    from gurps_sheet.models.character import Character
    from gurps_sheet.models.traits import Advantage, Modifier


# Points per level above (or below) the starting value.
ATTRIBUTE_COSTS: dict[AttributeTag, int] = {
    AttributeTag.ST: 10,
    AttributeTag.DX: 20,
    AttributeTag.IQ: 20,
    AttributeTag.HT: 10,
    AttributeTag.WILL: 5,
    AttributeTag.PER: 5,
    AttributeTag.HP: 2,
    AttributeTag.FP: 3,
    AttributeTag.SPEED: 20,
    AttributeTag.MOVE: 5,
}

_ATTRIBUTE_START = 10


def _round(value: float, round_down: bool) -> int:
    return math.floor(value) if round_down else math.ceil(value)


def _modify(points: float, percentage: int) -> float:
    return points + points * percentage / 100


def adjusted_advantage_cost(
    base: int,
    levels: int,
    points_per_level: int,
    cr: SelfControlRoll,
    modifiers: Iterable[Modifier] = (),
    *,
    half_level: bool = False,
    round_cost_down: bool | None = None,
    optional_rules: bool | None = None,
) -> int:
    """Final point cost of a single advantage.

    Args:
        base: Flat base cost.
        levels: Levels purchased.
        points_per_level: Cost of each level.
        cr: Self-control roll; its multiplier scales the cost.
        modifiers: Modifiers to apply; disabled ones are skipped.
        half_level: Whether an extra half level is purchased.
        round_cost_down: Round down instead of up; None uses the engine setting.
        optional_rules: Apply enhancements and limitations one after the other
            instead of netting them; None uses the engine setting.

    Returns:
        The cost in character points.

    Example:
        >>> adjusted_advantage_cost(10, 0, 0, SelfControlRoll.CR9, [five_points])
        20
    """
    engine = get_settings().engine
    if round_cost_down is None:
        round_cost_down = engine.round_cost_down
    if optional_rules is None:
        optional_rules = engine.use_optional_modifier_rules

    base_enhancement = level_enhancement = 0
    base_limitation = level_limitation = 0
    flat_points = 0
    multiplier = cost_multiplier(cr)

    for modifier in modifiers:
        if not modifier.enabled:
            continue
        value = modifier.cost_modifier
        match modifier.cost_type:
            case ModifierCostType.PERCENTAGE:
                applies_to_base = modifier.affects is not ModifierAffects.LEVELS_ONLY
                applies_to_levels = modifier.affects is not ModifierAffects.BASE_ONLY
                if value < 0:
                    base_limitation += value if applies_to_base else 0
                    level_limitation += value if applies_to_levels else 0
                else:
                    base_enhancement += value if applies_to_base else 0
                    level_enhancement += value if applies_to_levels else 0
            case ModifierCostType.POINTS:
                if modifier.affects is ModifierAffects.LEVELS_ONLY:
                    points_per_level += int(value)
                else:
                    flat_points += int(value)
            case ModifierCostType.MULTIPLIER:
                multiplier *= value

    base_points: float = base
    leveled_points = points_per_level * (levels + (0.5 if half_level else 0))
    if optional_rules:
        if base_enhancement == level_enhancement and base_limitation == level_limitation:
            total = _modify(base_points + leveled_points, base_enhancement)
            total = _modify(total, max(base_limitation, MAX_LIMITATION))
        else:
            base_points = _modify(_modify(base_points, base_enhancement), max(base_limitation, MAX_LIMITATION))
            leveled_points = _modify(
                _modify(leveled_points, level_enhancement),
                max(level_limitation, MAX_LIMITATION),
            )
            total = base_points + leveled_points
    else:
        base_modifier = max(base_enhancement + base_limitation, MAX_LIMITATION)
        level_modifier = max(level_enhancement + level_limitation, MAX_LIMITATION)
        if base_modifier == level_modifier:
            total = _modify(base_points + leveled_points, base_modifier)
        else:
            total = _modify(base_points, base_modifier) + _modify(leveled_points, level_modifier)

    return _round(total * multiplier, round_cost_down) + flat_points


def advantage_points(advantage: Advantage, inherited_modifiers: Sequence[Modifier] = ()) -> int:
    """Point cost of an advantage or a whole container.

    Containers pass their enabled modifiers down to their children. An
    alternative-abilities container charges full price for its most expensive
    child and one fifth (rounded) for each of the others.

    Args:
        advantage: The advantage or container.
        inherited_modifiers: Modifiers of enclosing containers.

    Returns:
        The cost in character points; 0 when disabled.
    """
    if not advantage.enabled:
        return 0
    round_down = advantage.round_cost_down
    if round_down is None:
        round_down = get_settings().engine.round_cost_down
    modifiers = [*advantage.enabled_modifiers(), *inherited_modifiers]

    if not advantage.is_container:
        return adjusted_advantage_cost(
            advantage.base_points,
            advantage.levels,
            advantage.points_per_level,
            advantage.cr,
            modifiers,
            half_level=advantage.effective_half_level,
            round_cost_down=round_down,
        )

    costs = [advantage_points(child, modifiers) for child in advantage.children]
    if advantage.container_type is not AdvantageContainerType.ALTERNATIVE_ABILITIES or not costs:
        return sum(costs)
    most_expensive = max(costs)
    others = list(costs)
    others.remove(most_expensive)
    return most_expensive + sum(
        _round(cost * ALTERNATIVE_ABILITY_PERCENTAGE / 100, round_down) for cost in others
    )


def attribute_level_points(delta: int, points_per_level: int, reduction: int) -> int:
    """Cost of raising or lowering an attribute by ``delta`` levels.

    A cost reduction only applies to increases; the reduced cost rounds up.
    """
    amount = delta * points_per_level
    if reduction > 0 and delta > 0:
        return math.ceil(amount * (100 - reduction) / 100)
    return amount


def attribute_points(character: Character) -> dict[AttributeTag, int]:
    """Points spent on each purchased attribute and secondary characteristic.

    Primary attributes apply the character's cost reductions. Secondary
    characteristics are priced on their purchased adjustments.
    """
    bonuses = character.bonuses
    points = {
        tag: attribute_level_points(
            getattr(character, tag.value) - _ATTRIBUTE_START,
            ATTRIBUTE_COSTS[tag],
            bonuses.cost_reduction_for(tag),
        )
        for tag in (AttributeTag.ST, AttributeTag.DX, AttributeTag.IQ, AttributeTag.HT)
    }
    points[AttributeTag.WILL] = character.will_adjustment * ATTRIBUTE_COSTS[AttributeTag.WILL]
    points[AttributeTag.PER] = character.per_adjustment * ATTRIBUTE_COSTS[AttributeTag.PER]
    points[AttributeTag.HP] = character.hp_adjustment * ATTRIBUTE_COSTS[AttributeTag.HP]
    points[AttributeTag.FP] = character.fp_adjustment * ATTRIBUTE_COSTS[AttributeTag.FP]
    points[AttributeTag.SPEED] = math.trunc(character.speed_adjustment * ATTRIBUTE_COSTS[AttributeTag.SPEED])
    points[AttributeTag.MOVE] = character.move_adjustment * ATTRIBUTE_COSTS[AttributeTag.MOVE]
    return points


def advantages_points(character: Character) -> int:
    """Total cost of every root advantage."""
    return sum(advantage_points(advantage) for advantage in character.advantages)


def skill_points(character: Character) -> int:
    """Points spent on skills and techniques."""
    return sum(skill.points for skill in character.iter_skills())


def total_points(character: Character) -> int:
    """Everything the character has spent."""
    return sum(attribute_points(character).values()) + advantages_points(character) + skill_points(character)


__all__ = [
    "ATTRIBUTE_COSTS",
    "adjusted_advantage_cost",
    "advantage_points",
    "advantages_points",
    "attribute_level_points",
    "attribute_points",
    "skill_points",
    "total_points",
]
