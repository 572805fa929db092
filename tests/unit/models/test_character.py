"""Tests for the Character model and its mutation helpers."""

from __future__ import annotations

import pytest

from gurps_sheet.core.exceptions import TraitTreeError, ValidationError
from gurps_sheet.models import (
    Advantage,
    AttributeBonus,
    AttributeTag,
    BonusLimitation,
    Character,
    Equipment,
    LeveledAmount,
    Modifier,
    Skill,
    Technique,
)


def _bonus(attribute: AttributeTag, amount: float, **kwargs: object) -> AttributeBonus:
    return AttributeBonus(attribute=attribute, amount=LeveledAmount(amount=amount), **kwargs)


class TestAttributes:
    """Tests for attribute values."""

    def test_base_values(self, empty_character: Character) -> None:
        """Unmodified attributes and derived characteristics."""
        assert empty_character.attribute_value(AttributeTag.DX) == 10
        assert empty_character.attribute_value(AttributeTag.WILL) == 10
        assert empty_character.attribute_value(AttributeTag.SPEED) == 5.0
        assert empty_character.attribute_value(AttributeTag.MOVE) == 5
        assert empty_character.attribute_value(AttributeTag.DODGE) == 8

    def test_leveled_bonus(self, empty_character: Character, strong_advantage: Advantage) -> None:
        """A per-level ST bonus uses the advantage's levels."""
        empty_character.add_advantage(strong_advantage)
        assert empty_character.attribute_value(AttributeTag.ST) == 12
        assert empty_character.attribute_base_value(AttributeTag.ST) == 10

    def test_secondary_follows_primary_bonus(
        self,
        empty_character: Character,
        strong_advantage: Advantage,
    ) -> None:
        """Hit points are derived from the bonused ST."""
        empty_character.add_advantage(strong_advantage)
        assert empty_character.attribute_value(AttributeTag.HP) == 12

    def test_speed_keeps_fractions(self, empty_character: Character) -> None:
        """Speed bonuses are not truncated."""
        empty_character.add_advantage(
            Advantage(name="Fast", features=[_bonus(AttributeTag.SPEED, 0.25)])
        )
        assert empty_character.attribute_value(AttributeTag.SPEED) == 5.25

    def test_limited_strength(self, empty_character: Character) -> None:
        """Lifting-only ST bonuses apply only to lifting strength."""
        empty_character.add_advantage(
            Advantage(
                name="Lifting ST",
                features=[_bonus(AttributeTag.ST, 3, limitation=BonusLimitation.LIFTING_ST)],
            )
        )
        assert empty_character.strength_for(BonusLimitation.NONE) == 10
        assert empty_character.strength_for(BonusLimitation.LIFTING_ST) == 13
        assert empty_character.strength_for(BonusLimitation.STRIKING_ST) == 10

    def test_set_attribute_invalidates(
        self,
        empty_character: Character,
    ) -> None:
        """Changing a primary attribute is visible immediately."""
        empty_character.attribute_value(AttributeTag.IQ)
        empty_character.set_attribute(AttributeTag.IQ, 13)
        assert empty_character.attribute_value(AttributeTag.PER) == 13

    def test_set_attribute_rejects_secondary(self, empty_character: Character) -> None:
        """Only primaries are set directly."""
        with pytest.raises(TraitTreeError):
            empty_character.set_attribute(AttributeTag.WILL, 12)

    def test_set_attribute_rejects_zero(self, empty_character: Character) -> None:
        """Attributes must be positive."""
        with pytest.raises(ValidationError) as exc_info:
            empty_character.set_attribute(AttributeTag.ST, 0)
        assert exc_info.value.details["field_name"] == "st"


class TestEnablement:
    """Tests for enablement and the bonus cache."""

    def test_disabling_removes_bonus(
        self,
        empty_character: Character,
        strong_advantage: Advantage,
    ) -> None:
        """set_enabled invalidates the cached bonuses."""
        empty_character.add_advantage(strong_advantage)
        assert empty_character.attribute_value(AttributeTag.ST) == 12
        empty_character.set_enabled(strong_advantage.uid, False)
        assert empty_character.attribute_value(AttributeTag.ST) == 10

    def test_disabled_container_removes_child_bonus(self, empty_character: Character) -> None:
        """A disabled container hides its enabled children's features."""
        child = Advantage(name="Child", features=[_bonus(AttributeTag.DX, 1)])
        container = Advantage(name="Container", enabled=False, children=[child])
        empty_character.add_advantage(container)
        assert empty_character.attribute_value(AttributeTag.DX) == 10

    def test_set_levels_updates_bonus(
        self,
        empty_character: Character,
        strong_advantage: Advantage,
    ) -> None:
        """Changing levels changes per-level bonuses."""
        empty_character.add_advantage(strong_advantage)
        empty_character.set_levels(strong_advantage.uid, 5)
        assert empty_character.attribute_value(AttributeTag.ST) == 15

    def test_modifier_features_apply(self, empty_character: Character) -> None:
        """Enabled modifiers contribute their features at their own level."""
        advantage = Advantage(name="Enhanced")
        empty_character.add_advantage(advantage)
        modifier = Modifier(
            name="Extra HT",
            levels=2,
            features=[
                AttributeBonus(
                    attribute=AttributeTag.HT,
                    amount=LeveledAmount(amount=1, per_level=True),
                )
            ],
        )
        empty_character.add_modifier(advantage.uid, modifier)
        assert empty_character.attribute_value(AttributeTag.HT) == 12
        empty_character.set_enabled(modifier.uid, False)
        assert empty_character.attribute_value(AttributeTag.HT) == 10

    def test_unequipped_equipment_has_no_bonus(self, empty_character: Character) -> None:
        """Equipment contributes only while equipped."""
        item = Equipment(name="Gauntlets", features=[_bonus(AttributeTag.ST, 1)])
        empty_character.add_equipment(item)
        assert empty_character.attribute_value(AttributeTag.ST) == 11
        empty_character.find_trait(item.uid).equipped = False
        assert empty_character.attribute_value(AttributeTag.ST) == 10

    def test_remove_trait(self, empty_character: Character, strong_advantage: Advantage) -> None:
        """Removing a trait drops its bonuses."""
        empty_character.add_advantage(strong_advantage)
        removed = empty_character.remove_trait(strong_advantage.uid)
        assert removed is strong_advantage
        assert empty_character.attribute_value(AttributeTag.ST) == 10

    def test_direct_assignment_refreshes_bonuses(
        self,
        empty_character: Character,
        strong_advantage: Advantage,
    ) -> None:
        """Assigning trait and feature fields directly is seen by the next read."""
        empty_character.add_advantage(strong_advantage)
        assert empty_character.attribute_value(AttributeTag.ST) == 12
        strong_advantage.levels = 3
        assert empty_character.attribute_value(AttributeTag.ST) == 13
        strong_advantage.features[0].amount.amount = 2
        assert empty_character.attribute_value(AttributeTag.ST) == 16
        strong_advantage.enabled = False
        assert empty_character.attribute_value(AttributeTag.ST) == 10

    def test_in_place_list_edit_needs_invalidate(self, empty_character: Character) -> None:
        """Appending to a feature list is picked up after invalidate."""
        advantage = Advantage(name="Fit")
        empty_character.add_advantage(advantage)
        assert empty_character.attribute_value(AttributeTag.HT) == 10
        advantage.features.append(_bonus(AttributeTag.HT, 1))
        empty_character.invalidate()
        assert empty_character.attribute_value(AttributeTag.HT) == 11


class TestLookup:
    """Tests for trait lookup and tree errors."""

    def test_unknown_uid(self, empty_character: Character) -> None:
        """Unknown identifiers raise TraitTreeError."""
        with pytest.raises(TraitTreeError) as exc_info:
            empty_character.find_trait("missing")
        assert exc_info.value.details["trait_id"] == "missing"

    def test_set_levels_on_skill(self, empty_character: Character) -> None:
        """Skills have no levels."""
        skill = Skill(name="Stealth")
        empty_character.add_skill(skill)
        with pytest.raises(TraitTreeError):
            empty_character.set_levels(skill.uid, 2)

    def test_add_under_parent(self, empty_character: Character) -> None:
        """Children can be added beneath a container."""
        group = Skill(name="Combat")
        empty_character.add_skill(group)
        empty_character.add_skill(Skill(name="Brawling", points=1), parent_uid=group.uid)
        assert [skill.name for skill in empty_character.iter_skills()] == ["Brawling"]

    def test_techniques_cannot_contain_skills(self, empty_character: Character) -> None:
        """Techniques are always leaves."""
        technique = Technique(name="Disarming")
        empty_character.add_skill(technique)
        with pytest.raises(TraitTreeError):
            empty_character.add_skill(Skill(name="Brawling"), parent_uid=technique.uid)

    def test_skills_named(self, swordsman: Character) -> None:
        """Lookup honors points and exclusions."""
        assert [s.name for s in swordsman.skills_named("broadsword")] == ["Broadsword"]
        assert swordsman.skills_named("Shortsword") == []
        assert len(swordsman.skills_named("Shortsword", require_points=False)) == 1
        assert swordsman.skills_named("Broadsword", excludes=frozenset({"Broadsword"})) == []
