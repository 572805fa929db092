"""Bonus aggregation: the key to bonus-entry index and its cache.

The index is built by walking every active trait of a character once and
filing each bonus under its ``feature_key``. It is never patched: any change
to a trait's enablement, levels or features invalidates the whole index and
the next read rebuilds it. Keys depend on mutable name and specialization
fields, so incremental updates would have to track far more than they save.

Wildcard-keyed entries are only candidates. Every typed lookup below re-tests
the original match criteria against the stat being computed before counting
a wildcard entry.

Example:
    >>> index = character.bonuses
    >>> index.skill_bonus_for("Broadsword", "")
    2
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from gurps_sheet.core.config import get_settings
from gurps_sheet.core.constants import (
    HIT_LOCATION_ID_PREFIX,
    KEY_QUALIFIER_SEPARATOR,
    SKILL_NAME_ID,
    SPELL_COLLEGE_ID,
    SPELL_NAME_ID,
    WEAPON_NAMED_ID,
)
from gurps_sheet.core.logging import get_logger
from gurps_sheet.engine.self_control import adjustment_bonuses
from gurps_sheet.models.enums import AttributeTag, BonusLimitation, HitLocation
from gurps_sheet.models.features import (
    AnyBonus,
    AttributeBonus,
    CostReduction,
    Feature,
    SkillBonus,
    SpellBonus,
    WeaponBonus,
    wildcard_key,
)
from gurps_sheet.models.tracking import current_revision


if TYPE_CHECKING:
    from gurps_sheet.core.config import Settings
    from gurps_sheet.models.character import Character
    from gurps_sheet.models.traits import Trait


logger = get_logger(__name__)


@dataclass(frozen=True)
class BonusEntry:
    """A bonus filed in the index, with the level its owner had at build time.

    Attributes:
        bonus: The bonus feature.
        level: Level of the owning trait (or modifier) when the index was built.
        owner: Name of the trait that granted the bonus.
        owner_uid: Identifier of that trait.
    """

    bonus: AnyBonus
    level: int
    owner: str
    owner_uid: str

    def adjusted_amount(self, level: int | None = None) -> float:
        """Amount at the stored level, or at ``level`` when given."""
        return self.bonus.amount.adjusted_amount(self.level if level is None else level)

    def integer_adjusted_amount(self, level: int | None = None) -> int:
        """Adjusted amount truncated toward zero."""
        return math.trunc(self.adjusted_amount(level))


EntryPredicate = Callable[[BonusEntry], bool]


class BonusIndex:
    """Immutable mapping from feature key to the active bonuses filed under it.

    Cost reductions are not keyed. They are summed per primary attribute into a
    separate table because they lower point costs instead of raising levels.
    """

    def __init__(
        self,
        entries: Mapping[str, Iterable[BonusEntry]],
        cost_reductions: Mapping[AttributeTag, int],
        *,
        max_cost_reduction: int,
    ) -> None:
        """Freeze the collected entries.

        Args:
            entries: Bonus entries grouped by feature key.
            cost_reductions: Summed (uncapped) reductions per attribute.
            max_cost_reduction: Cap applied when a reduction is read.
        """
        self._entries: Mapping[str, tuple[BonusEntry, ...]] = MappingProxyType(
            {key.lower(): tuple(values) for key, values in entries.items()}
        )
        self._cost_reductions: Mapping[AttributeTag, int] = MappingProxyType(dict(cost_reductions))
        self._max_cost_reduction = max_cost_reduction

    @classmethod
    def build(cls, character: Character, settings: Settings | None = None) -> BonusIndex:
        """Collect every active bonus of a character.

        Args:
            character: The character to index.
            settings: Settings to use; defaults to :func:`get_settings`.

        Returns:
            A fully built index.
        """
        settings = settings or get_settings()
        entries: dict[str, list[BonusEntry]] = defaultdict(list)
        reductions: dict[AttributeTag, int] = defaultdict(int)

        def add(features: Iterable[Feature], level: int, owner: Trait) -> None:
            for feature in features:
                if isinstance(feature, CostReduction):
                    reductions[feature.attribute] += feature.percentage
                else:
                    entries[feature.feature_key].append(
                        BonusEntry(feature, level, owner.name, owner.uid)
                    )

        for advantage in character.iter_advantages():
            levels = max(advantage.levels, 0) if advantage.is_leveled else 0
            add(advantage.features, levels, advantage)
            add(adjustment_bonuses(advantage.cr_adjustment, advantage.cr), levels, advantage)
            for modifier in advantage.enabled_modifiers():
                add(modifier.features, modifier.levels, advantage)
        for root in character.skills:
            for skill in root.iter_enabled():
                add(skill.features, 0, skill)
        for item in character.iter_equipment():
            add(item.features, 0, item)

        index = cls(
            entries,
            reductions,
            max_cost_reduction=settings.engine.max_cost_reduction,
        )
        logger.debug(
            "Bonus index rebuilt",
            character=character.name,
            keys=len(index._entries),
            entries=sum(len(values) for values in index._entries.values()),
        )
        return index

    # =========================================================================
    # Raw access
    # =========================================================================

    @property
    def keys(self) -> frozenset[str]:
        """Every key with at least one entry."""
        return frozenset(self._entries)

    def entries_for(self, key: str) -> tuple[BonusEntry, ...]:
        """Entries filed under exactly ``key``."""
        return self._entries.get(key.lower(), ())

    def sum_bonuses_for(
        self,
        key: str,
        level: int | None = None,
        predicate: EntryPredicate | None = None,
    ) -> float:
        """Sum the bonuses that apply to ``key``.

        Entries filed under ``key`` itself always count. Entries filed under
        the namespace's wildcard key count only if ``predicate`` accepts
        them; without a predicate they are all accepted.

        Args:
            key: Exact lookup key, e.g. ``skill.name/broadsword``.
            level: Level to use for every entry instead of its stored level.
            predicate: Re-validation of wildcard entries.

        Returns:
            The summed adjusted amounts.
        """
        key = key.lower()
        total = sum(entry.adjusted_amount(level) for entry in self.entries_for(key))
        wildcard = wildcard_key(key)
        if wildcard != key:
            total += sum(
                entry.adjusted_amount(level)
                for entry in self.entries_for(wildcard)
                if predicate is None or predicate(entry)
            )
        return total

    def bonus_for(self, key: str) -> int:
        """Integer total of the non-weapon bonuses filed under exactly ``key``."""
        return sum(
            entry.integer_adjusted_amount()
            for entry in self.entries_for(key)
            if not isinstance(entry.bonus, WeaponBonus)
        )

    def _compared_bonus_for(self, key: str, predicate: EntryPredicate) -> int:
        return sum(
            entry.integer_adjusted_amount()
            for entry in self.entries_for(key)
            if predicate(entry)
        )

    # =========================================================================
    # Typed lookups
    # =========================================================================

    def attribute_bonus_for(
        self,
        tag: AttributeTag,
        limitation: BonusLimitation = BonusLimitation.NONE,
    ) -> int | float:
        """Total bonus to an attribute.

        Speed keeps fractions; every other attribute sums whole numbers.
        """
        key = AttributeBonus(attribute=tag, limitation=limitation).feature_key
        if tag.is_decimal:
            return sum(
                entry.adjusted_amount()
                for entry in self.entries_for(key)
                if not isinstance(entry.bonus, WeaponBonus)
            )
        return self.bonus_for(key)

    def dr_bonus_for(self, location: HitLocation) -> int:
        """Total damage resistance bonus for a hit location."""
        return self.bonus_for(f"{HIT_LOCATION_ID_PREFIX}{location.value}")

    def skill_bonus_for(self, name: str, specialization: str | None = None) -> int:
        """Total bonus to a skill from exact and validated wildcard skill bonuses."""
        exact = f"{SKILL_NAME_ID}{KEY_QUALIFIER_SEPARATOR}{name}"
        return self.bonus_for(exact) + self._compared_bonus_for(
            wildcard_key(exact),
            lambda entry: isinstance(entry.bonus, SkillBonus)
            and entry.bonus.matches(name, specialization),
        )

    def spell_bonus_for(self, name: str, colleges: Iterable[str] = ()) -> int:
        """Total bonus to a spell: by name plus the best of its colleges."""
        total = self._spell_bonuses_for(SPELL_NAME_ID, name)
        college_totals = [self._spell_bonuses_for(SPELL_COLLEGE_ID, college) for college in colleges]
        if college_totals:
            return total + max(college_totals)
        return total + self.bonus_for(SPELL_COLLEGE_ID)

    def _spell_bonuses_for(self, namespace: str, qualifier: str) -> int:
        exact = f"{namespace}{KEY_QUALIFIER_SEPARATOR}{qualifier}"
        total = self.bonus_for(exact) + self._compared_bonus_for(
            wildcard_key(exact),
            lambda entry: isinstance(entry.bonus, SpellBonus) and entry.bonus.matches(qualifier),
        )
        if namespace == SPELL_COLLEGE_ID:
            total += self.bonus_for(SPELL_COLLEGE_ID)
        return total

    def weapon_bonuses_for(
        self,
        name: str,
        specialization: str | None,
        relative_level: int,
    ) -> list[BonusEntry]:
        """Weapon bonuses that apply to a weapon used with the named skill.

        Both the exact and the wildcard entries are re-tested, because the
        relative-level criteria is never part of the key.
        """
        exact = f"{WEAPON_NAMED_ID}{KEY_QUALIFIER_SEPARATOR}{name}"
        candidates = (*self.entries_for(exact), *self.entries_for(wildcard_key(exact)))
        return [
            entry
            for entry in candidates
            if isinstance(entry.bonus, WeaponBonus)
            and entry.bonus.matches(name, specialization, relative_level)
        ]

    def weapon_damage_bonus_for(
        self,
        name: str,
        specialization: str | None,
        relative_level: int,
        dice: int,
    ) -> int:
        """Total damage bonus for a weapon; per-level amounts count per die."""
        return sum(
            entry.integer_adjusted_amount(dice if entry.bonus.amount.per_level else None)
            for entry in self.weapon_bonuses_for(name, specialization, relative_level)
        )

    def cost_reduction_for(self, attribute: AttributeTag) -> int:
        """Summed cost reduction for a primary attribute, capped at the maximum."""
        total = self._cost_reductions.get(attribute, 0)
        return max(0, min(self._max_cost_reduction, total))


class BonusCache:
    """Holds the current :class:`BonusIndex` and rebuilds it lazily.

    The index is replaced in a single assignment after it is fully built, so
    a reader sees either the old index or the new one, never a half-built map.
    It is stale after an explicit :meth:`invalidate` or once any tracked model
    has changed since it was built.
    """

    def __init__(self) -> None:
        """Start dirty with no index."""
        self._index: BonusIndex | None = None
        self._revision = -1
        self._dirty = True

    @property
    def is_dirty(self) -> bool:
        """Whether the next read will rebuild the index."""
        return self._dirty or self._index is None or self._revision != current_revision()

    def invalidate(self) -> None:
        """Mark the index stale."""
        self._dirty = True

    def current(self, character: Character) -> BonusIndex:
        """The up-to-date index for ``character``."""
        index = self._index
        if index is None or self.is_dirty:
            revision = current_revision()
            index = BonusIndex.build(character)
            self._index = index
            self._revision = revision
            self._dirty = False
        return index


__all__ = [
    "BonusEntry",
    "BonusIndex",
    "BonusCache",
]
