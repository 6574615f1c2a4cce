"""Tests for the diagnostics bus and per-project locks."""

import threading

from shootsync.schedule.diagnostics import Diagnostic, DiagnosticKind, ScheduleEventBus
from shootsync.schedule.locks import _project_locks, is_project_locked, project_lock, tracked_project_count


def _diagnostic() -> Diagnostic:
    return Diagnostic(kind=DiagnosticKind.SCENE_MOVED, scene_id="s1", payload={"old_index": 0, "new_index": 1})


class TestScheduleEventBus:
    """Test publish/subscribe behavior."""

    def test_subscribe_and_unsubscribe(self):
        bus = ScheduleEventBus()
        received = []
        unsubscribe = bus.subscribe(received.append)

        bus.publish([_diagnostic()])
        unsubscribe()
        bus.publish([_diagnostic()])

        assert len(received) == 1
        assert received[0][0].scene_id == "s1"

    def test_empty_batches_not_published(self):
        bus = ScheduleEventBus()
        received = []
        bus.subscribe(received.append)

        bus.publish([])

        assert received == []

    def test_listener_errors_are_isolated(self):
        bus = ScheduleEventBus()
        received = []

        def broken(diagnostics):
            raise ValueError("boom")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        bus.publish([_diagnostic()])

        assert len(received) == 1

    def test_default_severity_is_info(self):
        assert _diagnostic().severity == "info"


class TestProjectLock:
    """Test serialization of schedule writes per project."""

    def test_lock_held_inside_block(self):
        with project_lock("lock-test"):
            assert is_project_locked("lock-test")
        assert not is_project_locked("lock-test")

    def test_projects_lock_independently(self):
        with project_lock("lock-a"):
            assert not is_project_locked("lock-b")

    def test_second_writer_waits(self):
        order: list[str] = []
        entered = threading.Event()
        release = threading.Event()

        def first():
            with project_lock("lock-wait"):
                entered.set()
                release.wait(timeout=5)
                order.append("first")

        def second():
            with project_lock("lock-wait"):
                order.append("second")

        t1 = threading.Thread(target=first)
        t1.start()
        entered.wait(timeout=5)
        t2 = threading.Thread(target=second)
        t2.start()
        release.set()
        t1.join(timeout=5)
        t2.join(timeout=5)

        assert order == ["first", "second"]

    def test_registry_released_after_use(self):
        """Lock entries are dropped once no caller holds or waits for them."""
        baseline = tracked_project_count()

        for i in range(50):
            with project_lock(f"transient-{i}"):
                assert tracked_project_count() == baseline + 1

        assert tracked_project_count() == baseline
        assert not is_project_locked("transient-0")

    def test_entry_kept_while_waiting(self):
        holder_ready = threading.Event()
        release = threading.Event()

        def holder():
            with project_lock("lock-kept"):
                holder_ready.set()
                release.wait(timeout=5)

        def waiter():
            with project_lock("lock-kept"):
                pass

        t1 = threading.Thread(target=holder)
        t1.start()
        holder_ready.wait(timeout=5)
        t2 = threading.Thread(target=waiter)
        t2.start()
        release.set()
        t1.join(timeout=5)
        t2.join(timeout=5)

        assert not is_project_locked("lock-kept")
        assert "lock-kept" not in _project_locks
