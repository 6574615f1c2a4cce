"""Scheduler impact preview.

Read-only summary of what applying a diff would do to the schedule, shown to
the user before they confirm a re-import. Never mutates anything.
"""

from __future__ import annotations

from pydantic import BaseModel, computed_field

from shootsync.schedule.diff import DiffResult


class ImpactSummary(BaseModel):
    """Counts of scheduled scenes a diff would affect.

    Attributes:
        removed_scheduled_scenes: Removed scenes that are currently on a shoot day
        days_affected_by_page_changes: Scheduled scenes whose page length changed.
            Counts scenes, not distinct days: two changed scenes on one day count twice.
        moved_scheduled_scenes: Scheduled scenes whose script position changed
    """

    removed_scheduled_scenes: int = 0
    days_affected_by_page_changes: int = 0
    moved_scheduled_scenes: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_impact(self) -> bool:
        return self.removed_scheduled_scenes > 0 or self.days_affected_by_page_changes > 0 or self.moved_scheduled_scenes > 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def summary(self) -> str:
        parts: list[str] = []
        if self.removed_scheduled_scenes > 0:
            parts.append(f"{self.removed_scheduled_scenes} scheduled scene(s) will be unscheduled")
        if self.days_affected_by_page_changes > 0:
            parts.append(f"{self.days_affected_by_page_changes} day(s) will have updated page counts")
        if self.moved_scheduled_scenes > 0:
            parts.append(f"{self.moved_scheduled_scenes} scheduled scene(s) moved in script order")
        return ", ".join(parts) if parts else "No scheduler impact"


def summarize_impact(diff: DiffResult) -> ImpactSummary:
    """Preview the scheduler impact of a diff.

    Args:
        diff: Pending diff, not yet applied

    Returns:
        ImpactSummary for confirmation UI
    """
    return ImpactSummary(
        removed_scheduled_scenes=sum(1 for c in diff.removed if c.scene.shoot_day is not None),
        days_affected_by_page_changes=sum(
            1 for c in diff.modified if c.existing.shoot_day is not None and c.changes.page_eighths_changed
        ),
        moved_scheduled_scenes=sum(1 for c in diff.moved if c.scene.shoot_day is not None),
    )
