"""Shooting schedule reconciliation.

Public entry points:
- ScheduleReconciler: apply a DiffResult to a project's schedule
- summarize_impact: preview what a diff would do, without applying it
- compute_day_aggregate / format_page_eighths: shoot day totals
"""

from shootsync.schedule.aggregates import DayAggregate, apply_day_aggregate, compute_day_aggregate, format_page_eighths
from shootsync.schedule.diagnostics import Diagnostic, DiagnosticKind, ScheduleEventBus
from shootsync.schedule.diff import ChangeSet, DiffResult, SceneAdded, SceneModified, SceneMoved, SceneRemoved
from shootsync.schedule.graph import ScheduleGraph
from shootsync.schedule.impact import ImpactSummary, summarize_impact
from shootsync.schedule.reconciler import (
    DayTotals,
    ReconcileReport,
    RecalculationReport,
    ScheduleReconciler,
    recompute_day_aggregates,
)

__all__ = [
    "ChangeSet",
    "DayAggregate",
    "DayTotals",
    "Diagnostic",
    "DiagnosticKind",
    "DiffResult",
    "ImpactSummary",
    "RecalculationReport",
    "ReconcileReport",
    "SceneAdded",
    "SceneModified",
    "SceneMoved",
    "SceneRemoved",
    "ScheduleEventBus",
    "ScheduleGraph",
    "ScheduleReconciler",
    "apply_day_aggregate",
    "compute_day_aggregate",
    "format_page_eighths",
    "recompute_day_aggregates",
    "summarize_impact",
]
