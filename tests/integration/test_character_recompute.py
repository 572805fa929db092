"""Integration tests for a full character recompute.

Builds a complete sheet, recomputes every derived number, mutates it, and
checks that a serialized copy recomputes to the same values.
"""

from __future__ import annotations

import pytest

from gurps_sheet import (
    Advantage,
    AttributeBonus,
    AttributeTag,
    Character,
    DRBonus,
    Equipment,
    LeveledAmount,
    SelfControlRoll,
    SelfControlRollAdjustment,
    Skill,
    SkillDefault,
    SkillDefaultType,
    Technique,
    resolve_skill_default_level,
    update_skill_levels,
)
from gurps_sheet.engine import total_points
from gurps_sheet.models import HitLocation, SkillDifficulty


@pytest.fixture
def knight() -> Character:
    """Create a knight with advantages, skills, a technique and armor."""
    character = Character(name="Sir Aldo", st=13, dx=12, iq=10, ht=12)
    character.add_advantage(
        Advantage(
            name="Combat Reflexes",
            base_points=15,
            features=[
                AttributeBonus(attribute=AttributeTag.DODGE),
                AttributeBonus(attribute=AttributeTag.PARRY),
                AttributeBonus(attribute=AttributeTag.BLOCK),
            ],
        )
    )
    character.add_advantage(
        Advantage(
            name="Compulsive Spending",
            base_points=-5,
            cr=SelfControlRoll.CR9,
            cr_adjustment=SelfControlRollAdjustment.MAJOR_COST_OF_LIVING_INCREASE,
        )
    )
    character.add_skill(Skill(name="Broadsword", points=8))
    character.add_skill(Skill(name="Shield", difficulty=SkillDifficulty.EASY, points=4))
    character.add_skill(Skill(name="Merchant", attribute=AttributeTag.IQ, points=2))
    character.add_skill(
        Skill(
            name="Shortsword",
            defaults=[SkillDefault(type=SkillDefaultType.SKILL, name="Broadsword", modifier=-2)],
        )
    )
    character.add_skill(
        Technique(
            name="Disarming",
            points=2,
            default=SkillDefault(type=SkillDefaultType.SKILL, name="Broadsword", modifier=-2),
        )
    )
    character.add_equipment(
        Equipment(
            name="Plate Armor",
            features=[DRBonus(location=HitLocation.TORSO, amount=LeveledAmount(amount=6))],
        )
    )
    character.add_equipment(
        Equipment(
            name="Spare Helmet",
            equipped=False,
            features=[DRBonus(location=HitLocation.SKULL, amount=LeveledAmount(amount=4))],
        )
    )
    return character


def _levels_by_name(character: Character) -> dict[str, int]:
    levels = update_skill_levels(character)
    return {skill.name: levels[skill.uid].level for skill in character.iter_skills()}


class TestCharacterRecompute:
    """Test a complete recompute of a character sheet."""

    def test_skill_levels(self, knight: Character) -> None:
        """Every skill, default and technique resolves."""
        assert _levels_by_name(knight) == {
            "Broadsword": 14,
            "Shield": 14,
            "Merchant": 7,
            "Shortsword": 12,
            "Disarming": 14,
        }

    def test_defenses(self, knight: Character) -> None:
        """Dodge, Parry and Block include Combat Reflexes."""
        update_skill_levels(knight)
        parry = SkillDefault(type=SkillDefaultType.PARRY, name="Broadsword")
        block = SkillDefault(type=SkillDefaultType.BLOCK, name="Shield")

        assert knight.attribute_value(AttributeTag.DODGE) == 10
        assert resolve_skill_default_level(parry, knight, fast=True) == 11
        assert resolve_skill_default_level(block, knight, fast=True) == 11

    def test_damage_resistance(self, knight: Character) -> None:
        """Only equipped armor protects."""
        assert knight.bonuses.dr_bonus_for(HitLocation.TORSO) == 6
        assert knight.bonuses.dr_bonus_for(HitLocation.SKULL) == 0

    def test_point_total(self, knight: Character) -> None:
        """Attributes, advantages and skills add up."""
        # Attributes 90, advantages 15 - 7, skills 16.
        assert total_points(knight) == 114

    def test_disabling_an_advantage(self, knight: Character) -> None:
        """Turning off Combat Reflexes lowers every defense."""
        reflexes = knight.advantages[0]
        knight.set_enabled(reflexes.uid, False)
        parry = SkillDefault(type=SkillDefaultType.PARRY, name="Broadsword")

        assert knight.attribute_value(AttributeTag.DODGE) == 9
        assert resolve_skill_default_level(parry, knight) == 10
        assert total_points(knight) == 99

    def test_raising_a_skill_flows_to_defaults(self, knight: Character) -> None:
        """More points in Broadsword raise every skill that defaults to it."""
        broadsword = knight.skills_named("Broadsword")[0]
        knight.set_points(broadsword.uid, 12)

        levels = _levels_by_name(knight)
        assert levels["Broadsword"] == 15
        assert levels["Shortsword"] == 13
        assert levels["Disarming"] == 15

    def test_serialized_copy_recomputes_identically(self, knight: Character) -> None:
        """A character rebuilt from its dump yields the same numbers."""
        original = _levels_by_name(knight)
        restored = Character.model_validate(knight.model_dump(mode="json"))

        assert _levels_by_name(restored) == original
        assert isinstance(restored.skills[-1], Technique)
        assert total_points(restored) == total_points(knight)
