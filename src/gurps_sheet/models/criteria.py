"""Match criteria used by bonuses to select the skills, spells and weapons they affect."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from gurps_sheet.models.enums import NumberCompareType, StringCompareType
from gurps_sheet.models.tracking import TrackedModel


class StringCriteria(TrackedModel):
    """A case-insensitive string test.

    Example:
        >>> StringCriteria(compare=StringCompareType.CONTAINS, qualifier="knife").matches("Knife")
        True
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    compare: StringCompareType = Field(
        default=StringCompareType.IS_ANYTHING,
        description="Comparison to perform",
    )
    qualifier: str = Field(
        default="",
        description="Value to compare against",
    )

    @property
    def is_exact(self) -> bool:
        """Whether this is an exact-name test that can be keyed directly."""
        return self.compare is StringCompareType.IS

    @property
    def is_anything(self) -> bool:
        """Whether this criteria accepts every candidate."""
        return self.compare is StringCompareType.IS_ANYTHING

    def matches(self, value: str | None) -> bool:
        """Test a candidate string.

        Args:
            value: The candidate; None is treated as an empty string.

        Returns:
            True if the candidate satisfies the criteria.
        """
        candidate = (value or "").lower()
        qualifier = self.qualifier.lower()
        match self.compare:
            case StringCompareType.IS_ANYTHING:
                return True
            case StringCompareType.IS:
                return candidate == qualifier
            case StringCompareType.IS_NOT:
                return candidate != qualifier
            case StringCompareType.CONTAINS:
                return qualifier in candidate
            case StringCompareType.DOES_NOT_CONTAIN:
                return qualifier not in candidate
            case StringCompareType.STARTS_WITH:
                return candidate.startswith(qualifier)
            case StringCompareType.DOES_NOT_START_WITH:
                return not candidate.startswith(qualifier)
            case StringCompareType.ENDS_WITH:
                return candidate.endswith(qualifier)
            case StringCompareType.DOES_NOT_END_WITH:
                return not candidate.endswith(qualifier)

    def describe(self) -> str:
        """Render the criteria for tooltips, e.g. ``contains "knife"``."""
        if self.is_anything:
            return "is anything"
        return f'{self.compare.value.replace("_", " ")} "{self.qualifier}"'


class IntegerCriteria(TrackedModel):
    """An integer comparison, used by weapon bonuses against relative skill level."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    compare: NumberCompareType = Field(
        default=NumberCompareType.IS_ANYTHING,
        description="Comparison to perform",
    )
    qualifier: int = Field(
        default=0,
        description="Value to compare against",
    )

    def matches(self, value: int) -> bool:
        """Test a candidate integer."""
        match self.compare:
            case NumberCompareType.IS_ANYTHING:
                return True
            case NumberCompareType.IS:
                return value == self.qualifier
            case NumberCompareType.AT_LEAST:
                return value >= self.qualifier
            case NumberCompareType.AT_MOST:
                return value <= self.qualifier


def is_named(name: str) -> StringCriteria:
    """Build an exact-match criteria for ``name``."""
    return StringCriteria(compare=StringCompareType.IS, qualifier=name)


__all__ = [
    "StringCriteria",
    "IntegerCriteria",
    "is_named",
]
