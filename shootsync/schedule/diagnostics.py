"""Reconciliation diagnostics and the notification bus.

Diagnostics are collected while a reconciliation runs and only leave the
engine after a successful commit: they are logged, then published to bus
subscribers (e.g. a shot list module re-syncing by scene id).
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from enum import StrEnum
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, Field


class DiagnosticKind(StrEnum):
    """Machine-readable diagnostic kinds."""

    SCENE_UNSCHEDULED = "scene_unscheduled"
    SCENES_ADDED = "scenes_added"
    PAGE_LENGTH_CHANGED = "page_length_changed"
    NUMBER_CHANGED_WHILE_SCHEDULED = "number_changed_while_scheduled"
    HEADING_CHANGED = "heading_changed"
    SCENE_MOVED = "scene_moved"
    PAGE_LENGTH_RECALCULATED = "page_length_recalculated"


class Diagnostic(BaseModel):
    """A single reconciliation event, keyed by scene identity where one applies.

    Attributes:
        kind: Diagnostic kind
        severity: info or warning
        scene_id: Affected scene, if any
        payload: Kind-specific data (e.g. former_day_id, old_index/new_index)
        message: Human-readable description
    """

    kind: DiagnosticKind
    severity: Literal["info", "warning"] = "info"
    scene_id: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    message: str = ""


DiagnosticListener = Callable[[Sequence[Diagnostic]], None]


class ScheduleEventBus:
    """In-process publish/subscribe for committed reconciliation diagnostics.

    Delivery is best-effort: a failing listener is logged and skipped, and
    never affects the reconciliation that produced the diagnostics.
    """

    def __init__(self) -> None:
        self._listeners: list[DiagnosticListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: DiagnosticListener) -> Callable[[], None]:
        """Register a listener.

        Returns:
            Callable that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, diagnostics: Sequence[Diagnostic]) -> None:
        if not diagnostics:
            return
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(diagnostics)
            except Exception as e:
                logger.warning(f"[SCHEDULE] Diagnostic listener {listener!r} failed: {e}")


def log_diagnostics(diagnostics: Sequence[Diagnostic]) -> None:
    """Write diagnostics to the log at their severity."""
    for diagnostic in diagnostics:
        if diagnostic.severity == "warning":
            logger.warning(f"[RECONCILE] {diagnostic.kind.value}: {diagnostic.message}")
        else:
            logger.info(f"[RECONCILE] {diagnostic.kind.value}: {diagnostic.message}")
