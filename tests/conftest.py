"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the gurps_sheet test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gurps_sheet.models import (
    Advantage,
    AttributeBonus,
    AttributeTag,
    Character,
    LeveledAmount,
    Skill,
    SkillBonus,
    SkillDefault,
    SkillDefaultType,
    SkillDifficulty,
    is_named,
)


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from gurps_sheet.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "GURPS_SHEET_DEBUG": "true",
        "GURPS_SHEET_LOG_LEVEL": "DEBUG",
        "GURPS_SHEET_ENGINE_ROUND_COST_DOWN": "true",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def empty_character() -> Character:
    """Create a character with all attributes at 10.

    Returns:
        Character instance.
    """
    return Character(name="Average Joe")


@pytest.fixture
def swordsman() -> Character:
    """Create a DX 12 fighter with a small skill list.

    Broadsword has points; Shortsword defaults from Broadsword-2 and has
    none; Knife defaults from DX-4.

    Returns:
        Character instance.
    """
    hero = Character(name="Dai", st=11, dx=12, iq=10, ht=11)
    hero.add_skill(
        Skill(
            name="Broadsword",
            attribute=AttributeTag.DX,
            difficulty=SkillDifficulty.AVERAGE,
            points=4,
            defaults=[
                SkillDefault(type=SkillDefaultType.DX, modifier=-5),
                SkillDefault(type=SkillDefaultType.SKILL, name="Shortsword", modifier=-2),
            ],
        )
    )
    hero.add_skill(
        Skill(
            name="Shortsword",
            attribute=AttributeTag.DX,
            difficulty=SkillDifficulty.AVERAGE,
            points=0,
            defaults=[
                SkillDefault(type=SkillDefaultType.DX, modifier=-5),
                SkillDefault(type=SkillDefaultType.SKILL, name="Broadsword", modifier=-2),
            ],
        )
    )
    hero.add_skill(
        Skill(
            name="Knife",
            attribute=AttributeTag.DX,
            difficulty=SkillDifficulty.EASY,
            points=1,
            defaults=[SkillDefault(type=SkillDefaultType.DX, modifier=-4)],
        )
    )
    return hero


@pytest.fixture
def strong_advantage() -> Advantage:
    """Create a leveled advantage granting +1 ST per level.

    Returns:
        Advantage instance at level 2.
    """
    return Advantage(
        name="Super Strength",
        points_per_level=3,
        levels=2,
        features=[
            AttributeBonus(
                attribute=AttributeTag.ST,
                amount=LeveledAmount(amount=1, per_level=True),
            )
        ],
    )


@pytest.fixture
def weapon_master() -> Advantage:
    """Create an advantage with an exact-name skill bonus to Broadsword.

    Returns:
        Advantage instance.
    """
    return Advantage(
        name="Weapon Master",
        base_points=20,
        features=[
            SkillBonus(
                name_criteria=is_named("Broadsword"),
                amount=LeveledAmount(amount=2),
            )
        ],
    )
