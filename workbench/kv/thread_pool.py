"""A fixed set of worker threads consuming a FIFO job queue."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable

_log = logging.getLogger(__name__)


class ThreadPool:
    """Runs queued callables on ``num_threads`` daemon worker threads."""

    def __init__(self, num_threads: int) -> None:
        if num_threads <= 0:
            raise ValueError("num_threads must be positive")
        self._jobs: queue.Queue[tuple[Callable[..., Any], tuple[Any, ...]]] = queue.Queue()
        self.threads = [
            threading.Thread(target=self._worker, name=f"pool-worker-{i}", daemon=True)
            for i in range(num_threads)
        ]
        for thread in self.threads:
            thread.start()

    def _worker(self) -> None:
        while True:
            func, args = self._jobs.get()
            try:
                func(*args)
            except Exception:
                _log.exception("job %r failed", func)

    def queue(self, f: Callable[..., Any], *args: Any) -> None:
        """Schedule ``f(*args)`` to run on a worker thread."""
        self._jobs.put((f, args))