"""Change tracking for the sheet models.

Every field assignment on a tracked model advances a process-wide revision
number. Caches derived from a character (the bonus index, the stored skill
levels) record the revision they were built at and are rebuilt once it has
moved on, so assigning ``advantage.enabled = False`` directly is seen by the
next read.

In-place edits of a list field (``advantage.features.append(...)``) are not
assignments; use the ``Character`` mutation helpers, or reassign the list.
"""

from __future__ import annotations

from itertools import count
from typing import Any

from pydantic import BaseModel


_revisions = count(1)
_revision = 0


def current_revision() -> int:
    """The revision number of the most recent tracked change."""
    return _revision


def bump_revision() -> int:
    """Record a change and return the new revision number."""
    global _revision
    _revision = next(_revisions)
    return _revision


class TrackedModel(BaseModel):
    """Pydantic model whose field assignments bump the revision."""

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name in type(self).model_fields:
            bump_revision()


__all__ = [
    "TrackedModel",
    "bump_revision",
    "current_revision",
]
