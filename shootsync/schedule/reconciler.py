"""Script-to-schedule reconciliation.

Applies a DiffResult to the scene/day graph of one project and recomputes
every shoot day's aggregates, in one transaction.

Fixed processing order (later steps rely on earlier postconditions):
1. Removed  - scheduled scenes are unscheduled, never deleted
2. Added    - drafts become unscheduled scenes
3. Modified - script-derived fields are synced, the assignment is not touched
4. Moved    - script order is updated, the assignment is not touched
5. Recompute every shoot day of the project
6. Commit; diagnostics are logged and published only after a successful commit

Shoot day assignment keys off stable scene identity only. Scene numbers and
script order never move a scene between days.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence

from loguru import logger
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from shootsync.core.errors import PersistenceError
from shootsync.db.models import Scene
from shootsync.schedule.aggregates import apply_day_aggregate, format_page_eighths
from shootsync.schedule.diagnostics import Diagnostic, DiagnosticKind, ScheduleEventBus, log_diagnostics
from shootsync.schedule.diff import Change, DiffResult, SceneAdded, SceneModified, SceneMoved, SceneRemoved
from shootsync.schedule.graph import ScheduleGraph
from shootsync.schedule.locks import project_lock
from shootsync.script.heading import parse_scene_heading
from shootsync.script.importer import scene_from_draft
from shootsync.script.page_length import PageLengthEstimator
from shootsync.script.types import TypedParagraph


class UnscheduledScene(BaseModel):
    scene_id: str
    former_day_id: str


class DayTotals(BaseModel):
    """Aggregates written to one shoot day."""

    day_id: str
    day_number: int
    total_page_eighths: int
    scene_count: int
    display: str


class ReconcileReport(BaseModel):
    """Outcome of a committed reconciliation."""

    project_id: str
    unscheduled: list[UnscheduledScene] = Field(default_factory=list)
    added_scene_ids: list[str] = Field(default_factory=list)
    modified_scene_ids: list[str] = Field(default_factory=list)
    moved_scene_ids: list[str] = Field(default_factory=list)
    day_totals: list[DayTotals] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)


class PageLengthChange(BaseModel):
    scene_id: str
    old_eighths: int
    new_eighths: int


class RecalculationReport(BaseModel):
    """Outcome of a committed bulk page length recalculation."""

    project_id: str
    updated: list[PageLengthChange] = Field(default_factory=list)
    day_totals: list[DayTotals] = Field(default_factory=list)


def recompute_day_aggregates(graph: ScheduleGraph, operation: str = "recompute") -> list[DayTotals]:
    """Recompute total_page_eighths and scene_count of every shoot day.

    Covers all days of the project, not only days touched by a diff. Pending
    changes are flushed first so membership is read from the current state.
    Idempotent. Does not commit.

    Args:
        graph: Scene/day graph of one project
        operation: Name reported in PersistenceError when the flush fails

    Raises:
        PersistenceError: If flushing pending changes fails
    """
    try:
        graph.session.flush()
    except SQLAlchemyError as e:
        graph.rollback()
        raise PersistenceError(operation, e) from e

    members: dict[str, list[Scene]] = defaultdict(list)
    for scene in graph.scenes():
        if scene.shoot_day_id is not None:
            members[scene.shoot_day_id].append(scene)

    totals: list[DayTotals] = []
    for day in graph.shoot_days():
        aggregate = apply_day_aggregate(day, members.get(day.id, []))
        totals.append(
            DayTotals(
                day_id=day.id,
                day_number=day.day_number,
                total_page_eighths=aggregate.total_page_eighths,
                scene_count=aggregate.scene_count,
                display=format_page_eighths(aggregate.total_page_eighths),
            )
        )
        logger.debug(
            f"[SCHEDULE] {day.display_title}: {aggregate.scene_count} scenes, "
            f"{format_page_eighths(aggregate.total_page_eighths)} pages"
        )
    return totals


class ScheduleReconciler:
    """Applies script diffs to a project's shooting schedule.

    Usage:
        reconciler = ScheduleReconciler(bus=bus)
        with get_session() as session:
            report = reconciler.reconcile(diff, ScheduleGraph(session, project_id))
    """

    def __init__(self, bus: ScheduleEventBus | None = None, estimator: PageLengthEstimator | None = None) -> None:
        self.bus = bus or ScheduleEventBus()
        self.estimator = estimator or PageLengthEstimator()

    def reconcile(self, diff: DiffResult, graph: ScheduleGraph) -> ReconcileReport:
        """Apply a diff to the schedule graph and commit.

        Either the whole diff is applied and all day aggregates are recomputed
        and committed, or nothing changes.

        Args:
            diff: Changes between the stored scenes and the latest script
            graph: Scene/day graph and transaction boundary of one project

        Returns:
            ReconcileReport of the committed changes

        Raises:
            PersistenceError: If the commit fails; the transaction is rolled back
                and no diagnostics are published
        """
        with project_lock(graph.project_id):
            logger.info(f"[RECONCILE] Starting reconciliation for project_id={graph.project_id}: {diff.summary}")

            report = ReconcileReport(project_id=graph.project_id)
            diagnostics: list[Diagnostic] = []

            for change in diff.removed:
                self._apply(change, graph, report, diagnostics)
            for change in diff.added:
                self._apply(change, graph, report, diagnostics)
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.SCENES_ADDED,
                    payload={"count": len(report.added_scene_ids)},
                    message=f"{len(report.added_scene_ids)} new scene(s) added to script (unscheduled)",
                )
            )
            for change in diff.modified:
                self._apply(change, graph, report, diagnostics)
            for change in diff.moved:
                self._apply(change, graph, report, diagnostics)

            report.day_totals = recompute_day_aggregates(graph, "reconcile")
            graph.commit("reconcile")
            report.diagnostics = diagnostics

        # Published outside the lock: listeners may re-enter the engine for this project
        self._emit(diagnostics)
        logger.info(
            f"[RECONCILE] Completed reconciliation for project_id={graph.project_id}: "
            f"{len(report.unscheduled)} unscheduled, {len(report.added_scene_ids)} added, "
            f"{len(report.modified_scene_ids)} modified, {len(report.moved_scene_ids)} moved, "
            f"{len(report.day_totals)} days recomputed"
        )
        return report

    def recompute_days(self, graph: ScheduleGraph) -> list[DayTotals]:
        """Standalone recompute of every shoot day, committed.

        Raises:
            PersistenceError: If the commit fails
        """
        with project_lock(graph.project_id):
            totals = recompute_day_aggregates(graph)
            graph.commit("recompute")
            logger.info(f"[SCHEDULE] Recomputed {len(totals)} shoot day(s) for project_id={graph.project_id}")
            return totals

    def recalculate_page_lengths(
        self,
        graph: ScheduleGraph,
        paragraphs_by_scene_id: Mapping[str, Sequence[TypedParagraph]],
    ) -> RecalculationReport:
        """Explicit bulk "recalculate all" of scene page lengths.

        Only scenes whose stored length differs from a fresh estimate are
        updated; day aggregates are recomputed in the same transaction.

        Raises:
            PersistenceError: If the commit fails
        """
        with project_lock(graph.project_id):
            updates = self.estimator.recalculate_all(graph.scenes(), paragraphs_by_scene_id)
            day_totals = recompute_day_aggregates(graph, "recalculate_page_lengths")
            graph.commit("recalculate_page_lengths")

        diagnostics = [
            Diagnostic(
                kind=DiagnosticKind.PAGE_LENGTH_RECALCULATED,
                scene_id=u.scene_id,
                payload={"old_eighths": u.old_eighths, "new_eighths": u.new_eighths},
                message=(
                    f"Scene {u.scene_id} page length {format_page_eighths(u.old_eighths)} -> "
                    f"{format_page_eighths(u.new_eighths)}"
                ),
            )
            for u in updates
        ]
        self._emit(diagnostics)
        return RecalculationReport(
            project_id=graph.project_id,
            updated=[
                PageLengthChange(scene_id=u.scene_id, old_eighths=u.old_eighths, new_eighths=u.new_eighths)
                for u in updates
            ],
            day_totals=day_totals,
        )

    def _apply(
        self,
        change: Change,
        graph: ScheduleGraph,
        report: ReconcileReport,
        diagnostics: list[Diagnostic],
    ) -> None:
        if isinstance(change, SceneRemoved):
            self._apply_removed(change, report, diagnostics)
        elif isinstance(change, SceneModified):
            self._apply_modified(change, report, diagnostics)
        elif isinstance(change, SceneMoved):
            self._apply_moved(change, report, diagnostics)
        elif isinstance(change, SceneAdded):
            self._apply_added(change, graph, report)
        else:
            raise TypeError(f"Unknown change type: {type(change).__name__}")

    def _apply_removed(self, change: SceneRemoved, report: ReconcileReport, diagnostics: list[Diagnostic]) -> None:
        scene = change.scene
        day = scene.shoot_day
        if day is None:
            return

        scene.shoot_day = None
        scene.shoot_day_order = None
        report.unscheduled.append(UnscheduledScene(scene_id=scene.id, former_day_id=day.id))
        diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.SCENE_UNSCHEDULED,
                severity="warning",
                scene_id=scene.id,
                payload={"former_day_id": day.id},
                message=f"Scene {scene.number or '?'} removed from script but was scheduled on {day.display_title}; unscheduled",
            )
        )

    def _apply_added(self, change: SceneAdded, graph: ScheduleGraph, report: ReconcileReport) -> None:
        draft = change.draft
        if draft.scene_id and (draft.scene_id in report.added_scene_ids or graph.has_scene_id(draft.scene_id)):
            logger.warning(f"[RECONCILE] Scene {draft.scene_id} already exists, not creating it again")
            return
        # New scenes go to the unscheduled pool
        scene = scene_from_draft(draft, graph.project_id, self.estimator)
        graph.add_scene(scene)
        report.added_scene_ids.append(scene.id)

    def _apply_modified(self, change: SceneModified, report: ReconcileReport, diagnostics: list[Diagnostic]) -> None:
        scene = change.existing
        incoming = change.incoming
        changes = change.changes
        scheduled = scene.shoot_day is not None
        old_number = scene.number

        if changes.page_eighths_changed and incoming.page_eighths is not None:
            old_eighths = scene.page_eighths
            scene.page_eighths = max(0, incoming.page_eighths)
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.PAGE_LENGTH_CHANGED,
                    scene_id=scene.id,
                    payload={"old_eighths": old_eighths, "new_eighths": scene.page_eighths, "scheduled": scheduled},
                    message=f"Scene {old_number or '?'} page count changed",
                )
            )

        if changes.number_changed:
            scene.number = incoming.number
            if scheduled:
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.NUMBER_CHANGED_WHILE_SCHEDULED,
                        severity="warning",
                        scene_id=scene.id,
                        payload={"old_number": old_number, "new_number": incoming.number, "shoot_day_id": scene.shoot_day_id},
                        message=f"Scene number changed from {old_number or '?'} to {incoming.number} while scheduled",
                    )
                )

        if changes.heading_parts_changed or changes.time_of_day_changed:
            heading = parse_scene_heading(incoming.heading)
            if changes.heading_changed:
                scene.heading = incoming.heading.strip()
            if changes.location_type_changed:
                scene.location_type = heading.location_type
            if changes.script_location_changed:
                scene.script_location = heading.location
            if changes.time_of_day_changed:
                scene.time_of_day = heading.time_of_day

        if changes.heading_parts_changed:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.HEADING_CHANGED,
                    scene_id=scene.id,
                    payload={
                        "heading_changed": changes.heading_changed,
                        "location_type_changed": changes.location_type_changed,
                        "script_location_changed": changes.script_location_changed,
                    },
                    message=f"Scene {old_number or '?'} heading changed - may affect scheduling",
                )
            )

        report.modified_scene_ids.append(scene.id)

    def _apply_moved(self, change: SceneMoved, report: ReconcileReport, diagnostics: list[Diagnostic]) -> None:
        scene = change.scene
        scene.script_order_index = change.new_index
        report.moved_scene_ids.append(scene.id)
        diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.SCENE_MOVED,
                scene_id=scene.id,
                payload={"old_index": change.old_index, "new_index": change.new_index},
                message=f"Scene {scene.number or '?'} moved from position {change.old_index + 1} to {change.new_index + 1}",
            )
        )

    def _emit(self, diagnostics: Sequence[Diagnostic]) -> None:
        log_diagnostics(diagnostics)
        self.bus.publish(diagnostics)
