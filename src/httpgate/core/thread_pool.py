"""
=============================================================================
THREAD POOL
=============================================================================

Fixed set of worker threads fed from a bounded queue. The server hands
every accepted connection to the pool; the accept loop never waits for a
request to be processed.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   accept loop ──► submit(serve, conn) ──► ┌──────────────┐          │
    │                                           │  Task Queue  │          │
    │                                           │ (bounded)    │          │
    │                                           └──────┬───────┘          │
    │                            ┌─────────────────────┼──────────┐       │
    │                            ▼                     ▼          ▼       │
    │                        Worker-0              Worker-1   Worker-N    │
    │                                                                      │
    │   Queue full → submit() returns False, the caller sheds the load.   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A task that raises is logged and counted; the worker keeps running.

Workers are stopped with a "poison pill": one None per worker is put on
the queue, and a worker that takes None exits.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import logging
import queue
import threading
import time


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    IDLE = "idle"
    BUSY = "busy"
    STOPPED = "stopped"


@dataclass
class Task:
    """
    A deferred function call.

    Attributes:
        func: The function to execute.
        args: Positional arguments.
        kwargs: Keyword arguments.
        submitted_at: Time the task was queued.
    """

    func: Callable[..., Any]
    args: tuple = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.time)


class Worker(threading.Thread):
    """Worker thread that runs tasks from the shared queue until it takes a poison pill."""

    def __init__(self, task_queue: "queue.Queue[Optional[Task]]", worker_id: int):
        super().__init__(name=f"httpgate-worker-{worker_id}", daemon=True)
        self.task_queue = task_queue
        self.worker_id = worker_id
        self.state = WorkerState.IDLE
        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while True:
            task = self.task_queue.get()
            try:
                if task is None:
                    break
                self._execute_task(task)
            finally:
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        self.state = WorkerState.BUSY
        start_time = time.time()

        try:
            task.func(*task.args, **task.kwargs)
            self.tasks_completed += 1
            logger.debug(
                f"Worker {self.worker_id} completed task in {time.time() - start_time:.3f}s"
            )
        except Exception as e:
            self.tasks_failed += 1
            logger.exception(
                f"Worker {self.worker_id} task failed after {time.time() - start_time:.3f}s: {e}"
            )
        finally:
            self.state = WorkerState.IDLE


class ThreadPool:
    """
    Fixed-size thread pool.

    Usage:
        pool = ThreadPool(workers=4, queue_size=64)
        pool.start()

        if not pool.submit(handle_connection, args=(conn,)):
            ...  # overloaded

        pool.shutdown()
    """

    def __init__(self, workers: int = 4, queue_size: int = 64):
        """
        Args:
            workers: Number of worker threads.
            queue_size: Maximum number of tasks waiting for a worker.
        """
        if workers < 1:
            raise ValueError("workers must be >= 1")

        self.workers = workers
        self.max_queue_size = queue_size

        self._task_queue: "queue.Queue[Optional[Task]]" = queue.Queue(maxsize=queue_size)
        self._workers: List[Worker] = []
        self._lock = threading.Lock()
        self._started = False
        self._shutdown = False

    def start(self):
        """Start the worker threads. Calling start() twice is a no-op."""
        with self._lock:
            if self._started:
                return

            logger.info(f"Starting thread pool with {self.workers} workers")
            for worker_id in range(self.workers):
                worker = Worker(self._task_queue, worker_id)
                self._workers.append(worker)
                worker.start()

            self._started = True
            self._shutdown = False

    def submit(self, func: Callable[..., Any], args: tuple = (), kwargs: Optional[dict] = None) -> bool:
        """
        Queue a task without blocking.

        Returns:
            True if the task was queued, False if the queue is full.

        Raises:
            RuntimeError: The pool is not running.
        """
        if not self._started:
            raise RuntimeError("Thread pool not started")
        if self._shutdown:
            raise RuntimeError("Thread pool is shutting down")

        try:
            self._task_queue.put(Task(func=func, args=args, kwargs=kwargs or {}), block=False)
        except queue.Full:
            logger.warning(f"Task queue full ({self.max_queue_size} waiting), rejecting task")
            return False
        return True

    def shutdown(self, timeout: float = 5.0):
        """
        Stop the pool once every queued task has run.

        Args:
            timeout: Seconds to wait for each worker to exit.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutdown = True

        # Blocking put: the pills queue up behind any remaining tasks.
        for _ in self._workers:
            self._task_queue.put(None)

        for worker in self._workers:
            worker.join(timeout=timeout)
            if worker.is_alive():
                logger.warning(f"Worker {worker.worker_id} did not exit within {timeout}s")

        self._workers.clear()
        self._started = False
        logger.info("Thread pool shutdown complete")

    # =========================================================================
    # MONITORING
    # =========================================================================

    @property
    def running(self) -> bool:
        return self._started and not self._shutdown

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state is WorkerState.BUSY)

    @property
    def queued(self) -> int:
        return self._task_queue.qsize()

    @property
    def stats(self) -> dict:
        """Worker and task counts."""
        return {
            "workers": {
                "total": len(self._workers),
                "busy": self.busy_workers,
                "idle": sum(1 for w in self._workers if w.state is WorkerState.IDLE),
            },
            "tasks": {
                "queued": self.queued,
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
            },
        }
