"""Tests for model change tracking."""

from __future__ import annotations

from gurps_sheet.models import Advantage, Character, LeveledAmount, Skill, current_revision
from gurps_sheet.models.tracking import bump_revision


class TestRevision:
    """Tests for the revision counter."""

    def test_bump_advances(self) -> None:
        """Each bump returns a new, higher revision."""
        before = current_revision()
        after = bump_revision()
        assert after > before
        assert current_revision() == after

    def test_field_assignment_bumps(self) -> None:
        """Assigning a field on any tracked model advances the revision."""
        for model, field, value in (
            (Skill(name="Stealth"), "points", 2),
            (Advantage(name="Fit"), "enabled", False),
            (LeveledAmount(amount=1), "amount", 3),
            (Character(), "dx", 12),
        ):
            before = current_revision()
            setattr(model, field, value)
            assert current_revision() > before

    def test_reads_do_not_bump(self, swordsman: Character) -> None:
        """Reading values and building the bonus index leave the revision alone."""
        before = current_revision()
        swordsman.attribute_value(swordsman.skills_named("Broadsword")[0].attribute)
        assert swordsman.bonuses is swordsman.bonuses
        assert current_revision() == before

    def test_construction_does_not_bump(self) -> None:
        """Creating a model is not a change to an existing one."""
        before = current_revision()
        Character(name="New", skills=[Skill(name="Stealth", points=1)])
        assert current_revision() == before
