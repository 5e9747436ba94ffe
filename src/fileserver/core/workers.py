"""
=============================================================================
PER-CONNECTION WORKERS
=============================================================================

Every accepted connection runs on its own thread, so a slow client or a
slow disk only ever holds up its own connection.

=============================================================================
WHY A THREAD PER CONNECTION (AND NOT A FIXED POOL)?
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                 Fixed pool of 4 workers                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Worker-0  ──► client A (connected, never sends a line) ...         │
    │   Worker-1  ──► client B (same)                          ...         │
    │   Worker-2  ──► client C (same)                          ...         │
    │   Worker-3  ──► client D (same)                          ...         │
    │                                                                      │
    │   client E  ──► waits in the queue forever                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Reads have no deadline by default, so four idle clients would starve a
four-thread pool. With one thread per connection, E gets its own thread
and is served immediately.

The accept loop only ever calls spawn(), which starts a thread and
returns. Parsing, file I/O and socket writes all happen on the worker.

=============================================================================
SUPERVISION
=============================================================================

A worker thread's target is wrapped so that ANY exception escaping the
connection handler is caught and logged with its traceback at the worker
boundary:

    accept loop ──spawn()──► Worker-17 ──► handler(conn)
                                  │             │
                                  │         raises X
                                  │             │
                                  ◄─────────────┘
                              logger.exception(...)
                              failed += 1
                              (thread exits, accept loop never notices)

Threads are not daemons-and-forget either: the group keeps a registry of
live workers so shutdown can join them.

=============================================================================
"""

import logging
import threading
import time
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)


class Worker(threading.Thread):
    """
    Thread that runs one task and reports back to its group.

    daemon=True so a worker blocked on a silent client doesn't keep the
    interpreter alive after shutdown's join timeout expires.
    """

    def __init__(
        self,
        group: "WorkerGroup",
        worker_id: int,
        func: Callable[..., Any],
        args: tuple = (),
    ):
        super().__init__(name=f"Worker-{worker_id}", daemon=True)
        self.worker_group = group
        self.worker_id = worker_id
        self.func = func
        self.args = args

    def run(self):
        start_time = time.time()
        try:
            self.func(*self.args)
        except Exception as e:
            elapsed = time.time() - start_time
            logger.exception(f"Worker {self.worker_id} task failed after {elapsed:.3f}s: {e}")
            self.worker_group._finished(self, failed=True)
        else:
            elapsed = time.time() - start_time
            logger.debug(f"Worker {self.worker_id} completed task in {elapsed:.3f}s")
            self.worker_group._finished(self, failed=False)


class WorkerGroup:
    """
    Spawns and tracks one Worker per task.

    Usage:
        workers = WorkerGroup()
        workers.spawn(handle_connection, conn)
        ...
        workers.join(timeout=5.0)
    """

    def __init__(self):
        self._workers: set[Worker] = set()
        self._lock = threading.Lock()  # Protects _workers and counters
        self._next_worker_id = 0
        self._closed = False

        self.tasks_completed = 0
        self.tasks_failed = 0

    def spawn(self, func: Callable[..., Any], *args: Any) -> bool:
        """
        Run func(*args) on a new worker thread.

        Returns:
            True if a worker was started, False if the group is closed or
            the OS refused to create another thread.
        """
        # Registered only once started, so join() never sees an unstarted
        # thread. The worker's own _finished() waits for the lock.
        with self._lock:
            if self._closed:
                return False
            worker = Worker(self, self._next_worker_id, func, args)
            self._next_worker_id += 1

            try:
                worker.start()
            except RuntimeError as e:
                # "can't start new thread": out of thread slots
                logger.error(f"Could not start worker {worker.worker_id}: {e}")
                return False

            self._workers.add(worker)

        return True

    def _finished(self, worker: Worker, failed: bool):
        with self._lock:
            self._workers.discard(worker)
            if failed:
                self.tasks_failed += 1
            else:
                self.tasks_completed += 1

    @property
    def active(self) -> int:
        """Number of workers still running."""
        with self._lock:
            return len(self._workers)

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Stop accepting new tasks and wait for running workers to finish.

        Args:
            timeout: Total seconds to wait across all workers. None waits
                     forever.

        Returns:
            True if every worker finished, False if some were still
            running when the timeout expired.
        """
        with self._lock:
            self._closed = True
            workers = list(self._workers)

        deadline = None if timeout is None else time.time() + timeout
        for worker in workers:
            remaining = None if deadline is None else max(0.0, deadline - time.time())
            worker.join(remaining)

        still_running = self.active
        if still_running:
            logger.warning(f"{still_running} worker(s) still running after shutdown timeout")
        return still_running == 0

    @property
    def stats(self) -> dict:
        """Worker and task counts, for logs."""
        with self._lock:
            return {
                "active": len(self._workers),
                "completed": self.tasks_completed,
                "failed": self.tasks_failed,
            }
