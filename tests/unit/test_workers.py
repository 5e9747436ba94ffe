"""
Unit tests for per-connection worker threads.
"""

import threading
import time

from fileserver.core.workers import WorkerGroup


class TestWorkerGroup:
    """Tests for WorkerGroup."""

    def test_spawn_runs_task(self):
        """Test that a spawned task runs with its arguments."""
        group = WorkerGroup()
        results = []

        assert group.spawn(results.append, 42)
        assert group.join(timeout=5.0)

        assert results == [42]
        assert group.stats == {"active": 0, "completed": 1, "failed": 0}

    def test_tasks_run_concurrently(self):
        """Test that a blocked task does not hold up the next one."""
        group = WorkerGroup()
        release = threading.Event()
        second_ran = threading.Event()

        group.spawn(release.wait, 5.0)
        group.spawn(second_ran.set)

        assert second_ran.wait(timeout=5.0)
        assert group.active >= 1

        release.set()
        assert group.join(timeout=5.0)
        assert group.active == 0

    def test_failure_is_contained(self):
        """Test that an exception in a task is logged and counted."""
        group = WorkerGroup()

        def boom():
            raise RuntimeError("boom")

        group.spawn(boom)
        group.spawn(lambda: None)
        group.join(timeout=5.0)

        assert group.tasks_failed == 1
        assert group.tasks_completed == 1

    def test_spawn_after_join_refused(self):
        """Test that a joined group accepts no more work."""
        group = WorkerGroup()
        group.join()

        assert group.spawn(lambda: None) is False

    def test_join_timeout(self):
        """Test that join reports workers still running."""
        group = WorkerGroup()
        release = threading.Event()
        group.spawn(release.wait, 5.0)

        try:
            assert group.join(timeout=0.1) is False
        finally:
            release.set()

    def test_join_while_spawning(self):
        """Test that join() from another thread only sees started workers."""
        group = WorkerGroup()
        spawned = []

        def spawner():
            for _ in range(500):
                if not group.spawn(time.sleep, 0.001):
                    return
                spawned.append(1)

        thread = threading.Thread(target=spawner)
        thread.start()
        time.sleep(0.01)

        assert group.join(timeout=10.0)
        thread.join(timeout=10.0)

        assert group.active == 0
        assert group.tasks_completed == len(spawned)
