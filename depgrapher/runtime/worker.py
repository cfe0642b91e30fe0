"""Fixed-size worker pool fed through a bounded queue.

The producer submits tasks from a single control path; a fixed number of
worker threads pull from the queue and run the handler. ``join`` is the
barrier: it signals every worker to finish, waits until the queue has
been drained, then re-raises the first handler failure on the calling
thread.

Usage:
    with LineWorkerPool(handler, max_workers=4) as pool:
        for task in tasks:
            pool.submit(task)
    # every task has been handled here
"""

import logging
import os
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger("depgrapher.runtime.worker")

T = TypeVar("T")

_STOP = object()


def default_worker_count() -> int:
    """Available parallelism, at least one."""
    return os.cpu_count() or 1


class LineWorkerPool(Generic[T]):
    """Thread pool consuming tasks from a bounded queue.

    Attributes:
        max_workers: Number of worker threads.
        queue_size: Maximum number of queued, not yet started tasks.
            ``submit`` blocks while the queue is full.
    """

    def __init__(
        self,
        handler: Callable[[T], None],
        max_workers: Optional[int] = None,
        queue_size: Optional[int] = None,
        name: str = "LineWorkerPool",
    ) -> None:
        self.max_workers = max_workers or default_worker_count()
        self.queue_size = queue_size or self.max_workers
        self.name = name
        self._handler = handler
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=self.queue_size)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._futures: List[Future] = []

        self._error: Optional[BaseException] = None
        self._failed = threading.Event()
        self._state_lock = threading.Lock()
        self._handled = 0
        self._submitted = 0

        logger.debug(
            "%s initialized with max_workers=%d, queue_size=%d",
            self.name,
            self.max_workers,
            self.queue_size,
        )

    @property
    def handled_count(self) -> int:
        with self._state_lock:
            return self._handled

    @property
    def submitted_count(self) -> int:
        return self._submitted

    def start(self) -> None:
        """Start the worker threads. Idempotent."""
        if self._executor is not None:
            return
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix=self.name
        )
        self._futures = [
            self._executor.submit(self._drain) for _ in range(self.max_workers)
        ]
        logger.debug("%s started", self.name)

    def submit(self, task: T) -> None:
        """Queue a task, blocking while the queue is full.

        Raises:
            Exception: The first handler failure, as soon as it is known.
        """
        if self._failed.is_set():
            self._raise_failure()
        if self._executor is None:
            self.start()
        self._queue.put(task)
        self._submitted += 1

    def join(self) -> None:
        """Stop accepting work, drain the queue and wait for all workers.

        Raises:
            Exception: The first handler failure, if any.
        """
        self._shutdown()
        if self._failed.is_set():
            self._raise_failure()

    def _shutdown(self) -> None:
        if self._executor is None:
            return
        for _ in self._futures:
            self._queue.put(_STOP)
        wait(self._futures)
        self._executor.shutdown(wait=True)
        self._executor = None
        self._futures = []
        logger.debug(
            "%s drained: %d submitted, %d handled",
            self.name,
            self._submitted,
            self._handled,
        )

    def _raise_failure(self) -> None:
        with self._state_lock:
            error = self._error
        if error is None:
            raise RuntimeError(f"{self.name} failed without a recorded error")
        raise error

    def _drain(self) -> None:
        while True:
            task = self._queue.get()
            try:
                if task is _STOP:
                    return
                if self._failed.is_set():
                    # keep consuming so the producer never blocks on a dead pool
                    continue
                try:
                    self._handler(task)
                except Exception as exc:  # re-raised on the producer thread
                    with self._state_lock:
                        if self._error is None:
                            self._error = exc
                    self._failed.set()
                    logger.error("%s task failed: %s", self.name, exc, exc_info=True)
                else:
                    with self._state_lock:
                        self._handled += 1
            finally:
                self._queue.task_done()

    def __enter__(self) -> "LineWorkerPool[T]":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            # the body's exception wins; still wait for the workers
            self._shutdown()
            return
        self.join()
