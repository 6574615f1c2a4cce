"""Per-project serialization of schedule writes.

Reconciliations (and the standalone recompute / bulk page length operations)
for the same project never run concurrently. Callers block until the lock is
free; there is no timeout and no cancellation.

A project's lock exists only while some caller holds or waits for it, so the
registry does not grow with every project ever touched.
"""

import threading
from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger

# project_id -> (lock, number of callers holding or waiting)
_project_locks: dict[str, tuple[threading.Lock, int]] = {}
_registry_lock = threading.Lock()


def _acquire_entry(project_id: str) -> threading.Lock:
    with _registry_lock:
        lock, users = _project_locks.get(project_id, (None, 0))
        if lock is None:
            lock = threading.Lock()
        _project_locks[project_id] = (lock, users + 1)
        return lock


def _release_entry(project_id: str) -> None:
    with _registry_lock:
        lock, users = _project_locks[project_id]
        if users <= 1:
            del _project_locks[project_id]
        else:
            _project_locks[project_id] = (lock, users - 1)


@contextmanager
def project_lock(project_id: str) -> Generator[None, None, None]:
    """Hold the exclusive schedule-write lock for a project."""
    lock = _acquire_entry(project_id)
    try:
        if lock.locked():
            logger.debug(f"[SCHEDULE] Waiting for schedule lock on project_id={project_id}")
        with lock:
            yield
    finally:
        _release_entry(project_id)


def is_project_locked(project_id: str) -> bool:
    with _registry_lock:
        entry = _project_locks.get(project_id)
    return entry is not None and entry[0].locked()


def tracked_project_count() -> int:
    """Number of projects with a live lock entry."""
    with _registry_lock:
        return len(_project_locks)
