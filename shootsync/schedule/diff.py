"""Script diff as a tagged union of changes.

A DiffResult is produced by an external differ that compares scene lists by
stable identity, then by position. Each change carries exactly one kind:

- SceneAdded: a new draft with no Scene record yet
- SceneRemoved: an existing Scene absent from the latest script
- SceneModified: an existing Scene, its incoming draft and the changed fields
- SceneMoved: an existing Scene whose script position changed
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import ClassVar, Literal

from shootsync.db.models import Scene
from shootsync.script.types import SceneDraft

ChangeKind = Literal["added", "removed", "modified", "moved"]


@dataclass(frozen=True)
class ChangeSet:
    """Which script-derived fields of a scene changed."""

    number_changed: bool = False
    heading_changed: bool = False
    location_type_changed: bool = False
    script_location_changed: bool = False
    time_of_day_changed: bool = False
    page_eighths_changed: bool = False

    @property
    def has_changes(self) -> bool:
        return any(
            (
                self.number_changed,
                self.heading_changed,
                self.location_type_changed,
                self.script_location_changed,
                self.time_of_day_changed,
                self.page_eighths_changed,
            )
        )

    @property
    def heading_parts_changed(self) -> bool:
        return self.heading_changed or self.location_type_changed or self.script_location_changed


@dataclass(frozen=True)
class SceneAdded:
    kind: ClassVar[ChangeKind] = "added"

    draft: SceneDraft


@dataclass(frozen=True)
class SceneRemoved:
    kind: ClassVar[ChangeKind] = "removed"

    scene: Scene


@dataclass(frozen=True)
class SceneModified:
    kind: ClassVar[ChangeKind] = "modified"

    existing: Scene
    incoming: SceneDraft
    changes: ChangeSet


@dataclass(frozen=True)
class SceneMoved:
    kind: ClassVar[ChangeKind] = "moved"

    scene: Scene
    old_index: int
    new_index: int


Change = SceneAdded | SceneRemoved | SceneModified | SceneMoved


@dataclass
class DiffResult:
    """All changes between the stored scene list and a freshly parsed script."""

    changes: list[Change] = field(default_factory=list)

    @classmethod
    def from_lists(
        cls,
        *,
        added: Iterable[SceneDraft] = (),
        removed: Iterable[Scene] = (),
        modified: Iterable[SceneModified] = (),
        moved: Iterable[SceneMoved] = (),
    ) -> DiffResult:
        """Build a diff from the four per-category collections."""
        changes: list[Change] = []
        changes.extend(SceneAdded(draft=d) for d in added)
        changes.extend(SceneRemoved(scene=s) for s in removed)
        changes.extend(modified)
        changes.extend(moved)
        return cls(changes=changes)

    @property
    def added(self) -> list[SceneAdded]:
        return [c for c in self.changes if isinstance(c, SceneAdded)]

    @property
    def removed(self) -> list[SceneRemoved]:
        return [c for c in self.changes if isinstance(c, SceneRemoved)]

    @property
    def modified(self) -> list[SceneModified]:
        return [c for c in self.changes if isinstance(c, SceneModified)]

    @property
    def moved(self) -> list[SceneMoved]:
        return [c for c in self.changes if isinstance(c, SceneMoved)]

    @property
    def total_changes(self) -> int:
        return len(self.changes)

    @property
    def is_empty(self) -> bool:
        return not self.changes

    @property
    def summary(self) -> str:
        """Short description, e.g. "2 added, 1 modified"."""
        counts: Sequence[tuple[str, int]] = (
            ("added", len(self.added)),
            ("modified", len(self.modified)),
            ("removed", len(self.removed)),
            ("moved", len(self.moved)),
        )
        parts = [f"{count} {label}" for label, count in counts if count]
        return ", ".join(parts) if parts else "No changes"
