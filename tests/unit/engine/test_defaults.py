"""Tests for skill-default resolution."""

from __future__ import annotations

import pytest

from gurps_sheet.core.config import clear_settings_cache
from gurps_sheet.core.constants import UNDEFINED_LEVEL
from gurps_sheet.engine.defaults import (
    ResolutionPass,
    best_default,
    format_level,
    is_defined,
    resolve_skill_default_level,
)
from gurps_sheet.engine.skill_levels import SkillLevel, calculate_skill_level, update_skill_levels
from gurps_sheet.models import (
    Advantage,
    AttributeBonus,
    AttributeTag,
    Character,
    LeveledAmount,
    Skill,
    SkillDefault,
    SkillDefaultType,
    SkillDifficulty,
)


class TestAttributeDefaults:
    """Tests for attribute-based defaults."""

    def test_dx_default(self) -> None:
        """A DX default on a DX 12 character resolves to 12."""
        character = Character(dx=12)
        assert resolve_skill_default_level(SkillDefault(type=SkillDefaultType.DX), character) == 12

    def test_modifier_applied(self) -> None:
        """The default's modifier is added."""
        character = Character(iq=11)
        default = SkillDefault(type=SkillDefaultType.IQ, modifier=-4)
        assert resolve_skill_default_level(default, character) == 7

    def test_uses_current_value(self, empty_character: Character) -> None:
        """Attribute bonuses count toward attribute defaults."""
        empty_character.add_advantage(
            Advantage(name="Keen", features=[AttributeBonus(attribute=AttributeTag.PER, amount=LeveledAmount(amount=2))])
        )
        default = SkillDefault(type=SkillDefaultType.PER, modifier=-5)
        assert resolve_skill_default_level(default, empty_character) == 7


class TestSkillDefaults:
    """Tests for skill-based defaults."""

    def test_best_candidate(self, swordsman: Character) -> None:
        """A skill default uses the named skill's level."""
        default = SkillDefault(type=SkillDefaultType.SKILL, name="Broadsword", modifier=-2)
        assert resolve_skill_default_level(default, swordsman) == 11

    def test_untrained_candidates_are_ignored(self, swordsman: Character) -> None:
        """Skills without points are not candidates."""
        default = SkillDefault(type=SkillDefaultType.SKILL, name="Shortsword")
        assert resolve_skill_default_level(default, swordsman) == UNDEFINED_LEVEL

    def test_missing_skill_is_undefined(self, swordsman: Character) -> None:
        """No candidate means the sentinel, not an error."""
        default = SkillDefault(type=SkillDefaultType.SKILL, name="Rapier", modifier=-3)
        assert resolve_skill_default_level(default, swordsman) == UNDEFINED_LEVEL

    def test_self_reference_is_undefined(self, empty_character: Character) -> None:
        """A skill that defaults to itself cannot use that default."""
        skill = Skill(
            name="Acrobatics",
            points=2,
            defaults=[SkillDefault(type=SkillDefaultType.SKILL, name="Acrobatics")],
        )
        empty_character.add_skill(skill)
        level = resolve_skill_default_level(
            skill.defaults[0],
            empty_character,
            frozenset({skill.identity}),
        )
        assert level == UNDEFINED_LEVEL

    def test_mutual_defaults_terminate(self, empty_character: Character) -> None:
        """A defaults to B and B to A without unbounded recursion."""
        empty_character.add_skill(
            Skill(
                name="Alpha",
                points=1,
                defaults=[SkillDefault(type=SkillDefaultType.SKILL, name="Beta", modifier=-1)],
            )
        )
        empty_character.add_skill(
            Skill(
                name="Beta",
                points=1,
                defaults=[SkillDefault(type=SkillDefaultType.SKILL, name="Alpha", modifier=-1)],
            )
        )
        default = SkillDefault(type=SkillDefaultType.SKILL, name="Alpha")
        assert resolve_skill_default_level(default, empty_character) == 9

    def test_specialization_filter(self, empty_character: Character) -> None:
        """A specialized default only sees that specialization."""
        empty_character.add_skill(Skill(name="Guns", specialization="Pistol", points=4))
        empty_character.add_skill(Skill(name="Guns", specialization="Rifle", points=1))
        pistol = SkillDefault(type=SkillDefaultType.SKILL, name="Guns", specialization="Pistol")
        rifle = SkillDefault(type=SkillDefaultType.SKILL, name="Guns", specialization="Rifle")
        any_guns = SkillDefault(type=SkillDefaultType.SKILL, name="Guns")
        assert resolve_skill_default_level(pistol, empty_character) == 11
        assert resolve_skill_default_level(rifle, empty_character) == 9
        assert resolve_skill_default_level(any_guns, empty_character) == 11

    def test_fast_mode_reads_cached_levels(self, swordsman: Character) -> None:
        """Fast mode uses the levels stored by the last bulk recompute."""
        update_skill_levels(swordsman)
        default = SkillDefault(type=SkillDefaultType.SKILL, name="Broadsword")
        assert resolve_skill_default_level(default, swordsman, fast=True) == 13

    def test_fast_mode_without_stored_levels(self, swordsman: Character) -> None:
        """Without stored levels, fast mode treats every candidate as undefined."""
        default = SkillDefault(type=SkillDefaultType.SKILL, name="Broadsword")
        assert resolve_skill_default_level(default, swordsman, fast=True) == UNDEFINED_LEVEL

    def test_fast_mode_does_not_recompute(self, swordsman: Character) -> None:
        """Fast mode returns the stored level even when a full pass disagrees."""
        broadsword = swordsman.skills_named("Broadsword")[0]
        swordsman.store_skill_levels({broadsword.uid: SkillLevel(18, 6)})
        default = SkillDefault(type=SkillDefaultType.SKILL, name="Broadsword", modifier=-2)
        assert resolve_skill_default_level(default, swordsman, fast=True) == 16
        assert resolve_skill_default_level(default, swordsman) == 11

    def test_fast_mode_ignores_levels_stored_before_a_change(self, swordsman: Character) -> None:
        """Stored levels are dropped once a skill is edited directly."""
        update_skill_levels(swordsman)
        swordsman.skills_named("Broadsword")[0].points = 8
        default = SkillDefault(type=SkillDefaultType.SKILL, name="Broadsword")
        assert resolve_skill_default_level(default, swordsman, fast=True) == UNDEFINED_LEVEL
        assert resolve_skill_default_level(default, swordsman) == 14


class TestRuleOf20:
    """Tests for capping attributes at 20 in attribute defaults."""

    def test_off_by_default(self) -> None:
        """Without the rule the full attribute is used."""
        character = Character(dx=25)
        default = SkillDefault(type=SkillDefaultType.DX, modifier=-5)
        assert resolve_skill_default_level(default, character) == 20

    def test_caps_attribute_before_modifier(self) -> None:
        """With the rule the attribute counts as 20 and the modifier still applies."""
        character = Character(dx=25)
        default = SkillDefault(type=SkillDefaultType.DX, modifier=-5)
        assert resolve_skill_default_level(default, character, rule_of_20=True) == 15

    def test_low_attributes_unaffected(self) -> None:
        """Attributes at or under 20 are not changed by the rule."""
        character = Character(iq=14)
        default = SkillDefault(type=SkillDefaultType.IQ, modifier=-4)
        assert resolve_skill_default_level(default, character, rule_of_20=True) == 10

    def test_enabled_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The engine setting turns the rule on for every resolution."""
        monkeypatch.setenv("GURPS_SHEET_ENGINE_USE_RULE_OF_20", "true")
        clear_settings_cache()
        character = Character(dx=25)
        character.add_skill(
            Skill(
                name="Acrobatics",
                attribute=AttributeTag.DX,
                difficulty=SkillDifficulty.HARD,
                defaults=[SkillDefault(type=SkillDefaultType.DX, modifier=-6)],
            )
        )
        default = SkillDefault(type=SkillDefaultType.DX, modifier=-5)
        assert resolve_skill_default_level(default, character) == 15
        levels = update_skill_levels(character)
        assert next(iter(levels.values())).level == 14

    def test_skill_defaults_are_not_capped(self, empty_character: Character) -> None:
        """The rule only touches attribute defaults, not skills above 20."""
        empty_character.dx = 22
        empty_character.add_skill(
            Skill(name="Knife", attribute=AttributeTag.DX, difficulty=SkillDifficulty.EASY, points=1)
        )
        default = SkillDefault(type=SkillDefaultType.SKILL, name="Knife", modifier=-4)
        assert resolve_skill_default_level(default, empty_character, rule_of_20=True) == 18


class TestResolutionPass:
    """Tests for the state shared across one recompute."""

    def test_ceiling_bounds_every_chain(self, swordsman: Character) -> None:
        """A ceiling is never below the level the skill actually reaches."""
        resolution = ResolutionPass.start()
        for skill in swordsman.iter_skills():
            level = calculate_skill_level(skill, swordsman, resolution=resolution)
            assert resolution.ceiling(skill, swordsman) >= level.level

    def test_memo_is_reused(self, swordsman: Character) -> None:
        """A second lookup with the same exclusions comes from the memo."""
        resolution = ResolutionPass.start()
        broadsword = swordsman.skills_named("Broadsword")[0]
        first = calculate_skill_level(broadsword, swordsman, resolution=resolution)
        resolution.memo[(broadsword.uid, frozenset({broadsword.identity}))] = SkillLevel(30, 18)
        assert calculate_skill_level(broadsword, swordsman, resolution=resolution).level == 30
        assert first.level == 13

    def test_start_reads_rule_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An explicit value wins over the setting."""
        monkeypatch.setenv("GURPS_SHEET_ENGINE_USE_RULE_OF_20", "true")
        clear_settings_cache()
        assert ResolutionPass.start().rule_of_20 is True
        assert ResolutionPass.start(rule_of_20=False).rule_of_20 is False


class TestDefenseDefaults:
    """Tests for Parry and Block defaults."""

    def test_parry(self, swordsman: Character) -> None:
        """Parry is half the skill, truncated, plus 3."""
        default = SkillDefault(type=SkillDefaultType.PARRY, name="Broadsword")
        assert resolve_skill_default_level(default, swordsman) == 9

    def test_parry_bonus(self, swordsman: Character) -> None:
        """Parry bonuses are added before the modifier."""
        swordsman.add_advantage(
            Advantage(name="Combat Reflexes", features=[AttributeBonus(attribute=AttributeTag.PARRY)])
        )
        default = SkillDefault(type=SkillDefaultType.PARRY, name="Broadsword", modifier=1)
        assert resolve_skill_default_level(default, swordsman) == 11

    def test_block_without_skill(self, swordsman: Character) -> None:
        """No shield skill means no Block."""
        default = SkillDefault(type=SkillDefaultType.BLOCK, name="Shield")
        assert resolve_skill_default_level(default, swordsman) == UNDEFINED_LEVEL


class TestBestDefault:
    """Tests for best_default."""

    def test_picks_highest(self, swordsman: Character) -> None:
        """The highest resolving default wins and is priced in points."""
        shortsword = swordsman.skills_named("Shortsword", require_points=False)[0]
        chosen = best_default(shortsword, swordsman, frozenset({shortsword.identity}))
        assert chosen is not None
        assert chosen.default.name == "Broadsword"
        assert chosen.level == 11
        assert chosen.points == 1

    def test_no_defaults(self, empty_character: Character) -> None:
        """A skill without defaults has no best default."""
        skill = Skill(name="Thaumatology")
        assert best_default(skill, empty_character, frozenset({skill.identity})) is None

    def test_below_baseline_is_negative(self, swordsman: Character) -> None:
        """A default below the one-point level costs negative points."""
        knife = swordsman.skills_named("Knife")[0]
        chosen = best_default(knife, swordsman, frozenset({knife.identity}))
        assert chosen is not None
        assert chosen.level == 8
        assert chosen.points == -8

    def test_parry_default_keeps_target_bonus(self, swordsman: Character, weapon_master: Advantage) -> None:
        """Bonuses to the parried skill stay in a Parry default; a skill default sheds them."""
        swordsman.add_advantage(weapon_master)
        drill = Skill(
            name="Parry Drill",
            defaults=[SkillDefault(type=SkillDefaultType.PARRY, name="Broadsword")],
        )
        feint = Skill(
            name="Feint Drill",
            defaults=[SkillDefault(type=SkillDefaultType.SKILL, name="Broadsword")],
        )
        swordsman.add_skill(drill)
        swordsman.add_skill(feint)
        parry = best_default(drill, swordsman, frozenset({drill.identity}))
        skill = best_default(feint, swordsman, frozenset({feint.identity}))
        assert parry is not None and parry.level == 10
        assert skill is not None and skill.level == 13


class TestLevelHelpers:
    """Tests for level formatting helpers."""

    def test_is_defined(self) -> None:
        """Only the sentinel is undefined."""
        assert is_defined(0)
        assert not is_defined(UNDEFINED_LEVEL)

    def test_format_level(self) -> None:
        """Undefined levels render as a dash."""
        assert format_level(12) == "12"
        assert format_level(UNDEFINED_LEVEL) == "-"
