"""Slice scheduler: a bounded worker pool over independent slice tasks.

Each task reads its own input slice and writes its own disjoint output
slice, so workers share nothing but the task queue. ``run()`` blocks until
every task has finished. A failing task is logged and recorded; its
siblings keep running.
"""

import logging
import queue
import threading
from typing import Callable, Hashable, Iterable, List, Tuple

from kymotools.contracts.failure import StageFailure

__all__ = ["SliceScheduler", "SliceWorker"]

logger = logging.getLogger(__name__)

Task = Tuple[Hashable, Callable[[], None]]


class SliceWorker(threading.Thread):
    """Worker thread that drains the scheduler's task queue.

    Exits when it pops the ``None`` sentinel or when the stop event is set.
    """

    def __init__(self, task_queue: queue.Queue, scheduler: "SliceScheduler",
                 name: str = "SliceWorker"):
        super().__init__(daemon=True, name=name)
        self.task_queue = task_queue
        self.scheduler = scheduler
        self._stop_event = threading.Event()

    def stop(self):
        """Signal worker to stop after its current task."""
        self._stop_event.set()

    def stopped(self):
        return self._stop_event.is_set()

    def run(self):
        while not self.stopped():
            try:
                item = self.task_queue.get(timeout=1)
            except queue.Empty:
                continue

            try:
                if item is None:
                    break
                key, task = item
                self.scheduler._execute(key, task)
            finally:
                # Always mark task as done to prevent join() from blocking
                self.task_queue.task_done()


class SliceScheduler:
    """Run slice tasks sequentially or on a fixed pool of worker threads.

    Parameters
    ----------
    threads : int
        Pool size. Values below 2 run every task on the calling thread.
    name : str
        Prefix for worker thread names and log messages.

    Examples
    --------
    >>> scheduler = SliceScheduler(threads=4)
    >>> failed = scheduler.run([((t, c), make_task(t, c)) for t, c in slices])
    """

    def __init__(self, threads: int = 1, name: str = "filter"):
        self.threads = max(1, int(threads))
        self.name = name
        self.failures: List[StageFailure] = []
        self._lock = threading.Lock()

    def _execute(self, key, task):
        try:
            task()
        except Exception as e:
            logger.exception("%s task %s failed", self.name, key)
            with self._lock:
                self.failures.append(StageFailure(f"{self.name} task {key} failed: {e}", key=key))

    def run(self, tasks: Iterable[Task]) -> List[StageFailure]:
        """Execute every task and wait for all of them.

        Returns
        -------
        list of StageFailure
            One entry per failed task (empty when all succeeded).
        """
        self.failures = []
        tasks = list(tasks)

        if self.threads <= 1 or len(tasks) <= 1:
            for key, task in tasks:
                self._execute(key, task)
            return list(self.failures)

        task_queue = queue.Queue()
        n_workers = min(self.threads, len(tasks))
        workers = [
            SliceWorker(task_queue, self, name=f"{self.name}-worker-{i}")
            for i in range(n_workers)
        ]
        for worker in workers:
            worker.start()

        for item in tasks:
            task_queue.put(item)
        task_queue.join()

        for _ in workers:
            task_queue.put(None)
        for worker in workers:
            worker.join()

        logger.debug("%s: %d tasks on %d workers, %d failed",
                     self.name, len(tasks), n_workers, len(self.failures))
        return list(self.failures)
