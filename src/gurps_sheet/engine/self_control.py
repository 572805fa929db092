"""Self-control roll multipliers and their secondary adjustments.

A disadvantage that allows a self-control roll costs more the less often the
roll succeeds. It may also carry a secondary effect whose size is a
closed-form function of the roll's position in the CR6..CR15 list. One
adjustment, the major cost of living increase, also grants a penalty to the
Merchant skill. That penalty is returned as an ordinary :class:`SkillBonus`
so the bonus index picks it up like any other feature.
"""

from __future__ import annotations

from gurps_sheet.core.constants import MERCHANT_SKILL_NAME
from gurps_sheet.models.criteria import StringCriteria, is_named
from gurps_sheet.models.enums import SelfControlRoll, SelfControlRollAdjustment
from gurps_sheet.models.features import SkillBonus
from gurps_sheet.models.leveled_amount import LeveledAmount


_MAJOR_COST_OF_LIVING: dict[SelfControlRoll, int] = {
    SelfControlRoll.CR6: 80,
    SelfControlRoll.CR9: 40,
    SelfControlRoll.CR12: 20,
    SelfControlRoll.CR15: 10,
}

_TITLES: dict[SelfControlRollAdjustment, str] = {
    SelfControlRollAdjustment.NONE: "None",
    SelfControlRollAdjustment.ACTION_PENALTY: "Includes an Action Penalty for Failure",
    SelfControlRollAdjustment.REACTION_PENALTY: "Includes a Reaction Penalty for Failure",
    SelfControlRollAdjustment.FRIGHT_CHECK_PENALTY: "Includes Fright Check Penalty",
    SelfControlRollAdjustment.FRIGHT_CHECK_BONUS: "Includes Fright Check Bonus",
    SelfControlRollAdjustment.MINOR_COST_OF_LIVING_INCREASE: (
        "Includes a Minor Cost of Living Increase"
    ),
    SelfControlRollAdjustment.MAJOR_COST_OF_LIVING_INCREASE: (
        "Includes a Major Cost of Living Increase and Merchant Skill Penalty"
    ),
}

_DESCRIPTIONS: dict[SelfControlRollAdjustment, str] = {
    SelfControlRollAdjustment.ACTION_PENALTY: "{} Action Penalty",
    SelfControlRollAdjustment.REACTION_PENALTY: "{} Reaction Penalty",
    SelfControlRollAdjustment.FRIGHT_CHECK_PENALTY: "{} Fright Check Penalty",
    SelfControlRollAdjustment.FRIGHT_CHECK_BONUS: "{} Fright Check Bonus",
    SelfControlRollAdjustment.MINOR_COST_OF_LIVING_INCREASE: "{}% Cost of Living Increase",
    SelfControlRollAdjustment.MAJOR_COST_OF_LIVING_INCREASE: "{}% Cost of Living Increase",
}


def cost_multiplier(cr: SelfControlRoll) -> float:
    """Point cost multiplier for a self-control roll (2, 1.5, 1, 0.5 or 1)."""
    return cr.multiplier


def adjustment_value(adjustment: SelfControlRollAdjustment, cr: SelfControlRoll) -> int:
    """Size of a self-control adjustment at a given roll.

    Args:
        adjustment: The adjustment type.
        cr: The self-control roll it accompanies.

    Returns:
        The adjustment, always 0 for :attr:`SelfControlRoll.NONE_REQUIRED`.

    Example:
        >>> adjustment_value(SelfControlRollAdjustment.ACTION_PENALTY, SelfControlRoll.CR9)
        -3
    """
    if cr is SelfControlRoll.NONE_REQUIRED:
        return 0
    offset = cr.ordinal - 4
    match adjustment:
        case SelfControlRollAdjustment.NONE:
            return 0
        case (
            SelfControlRollAdjustment.ACTION_PENALTY
            | SelfControlRollAdjustment.REACTION_PENALTY
            | SelfControlRollAdjustment.FRIGHT_CHECK_PENALTY
        ):
            return offset
        case SelfControlRollAdjustment.FRIGHT_CHECK_BONUS:
            return -offset
        case SelfControlRollAdjustment.MINOR_COST_OF_LIVING_INCREASE:
            return -5 * offset
        case SelfControlRollAdjustment.MAJOR_COST_OF_LIVING_INCREASE:
            return _MAJOR_COST_OF_LIVING[cr]


def adjustment_title(adjustment: SelfControlRollAdjustment) -> str:
    """Menu title for an adjustment."""
    return _TITLES[adjustment]


def adjustment_description(adjustment: SelfControlRollAdjustment, cr: SelfControlRoll) -> str:
    """Short description, e.g. ``-3 Action Penalty``; empty when nothing applies."""
    if cr is SelfControlRoll.NONE_REQUIRED or adjustment is SelfControlRollAdjustment.NONE:
        return ""
    return _DESCRIPTIONS[adjustment].format(f"{adjustment_value(adjustment, cr):+d}")


def adjustment_bonuses(
    adjustment: SelfControlRollAdjustment,
    cr: SelfControlRoll,
) -> list[SkillBonus]:
    """Synthetic bonuses an adjustment injects into the bonus index.

    Only the major cost of living increase produces one: a penalty of
    ``ordinal - 4`` to the skill named exactly "Merchant", any specialization.
    """
    if (
        adjustment is not SelfControlRollAdjustment.MAJOR_COST_OF_LIVING_INCREASE
        or cr is SelfControlRoll.NONE_REQUIRED
    ):
        return []
    return [
        SkillBonus(
            name_criteria=is_named(MERCHANT_SKILL_NAME),
            specialization_criteria=StringCriteria(),
            amount=LeveledAmount(integer_only=True, per_level=False, amount=cr.ordinal - 4),
        )
    ]


__all__ = [
    "cost_multiplier",
    "adjustment_value",
    "adjustment_title",
    "adjustment_description",
    "adjustment_bonuses",
]
