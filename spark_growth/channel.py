"""Message boundary between a growth run and its host.

One configuration message goes in, one snapshot message per tick comes out
on an unbounded queue. There is no completion message: hosts count received
snapshots against the configured number of intervals, or iterate
``messages()`` until it ends.
"""

from __future__ import annotations

import queue
import threading
from typing import Any, Dict, Iterator, List, Optional

import numpy as np

from .config import message_to_config
from .errors import SparkError
from .model.engine import GrowthEngine, DEFAULT_MAX_ATTEMPTS


class SparkWorker:
    """Runs one GrowthEngine in its own thread and posts its snapshots.

    The configuration is parsed and validated in the constructor, so an
    InvalidConfigError surfaces to the caller before any thread starts.
    Posting never blocks. ``cancel()`` is an explicit stop signal: the run
    stops before its next tick and ``messages()`` stops yielding, even if
    snapshots emitted just before the cancel are still queued.
    """

    def __init__(
        self,
        message: Dict[str, Any],
        rng: Optional[np.random.Generator] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        on_saturation: str = "stop",
    ) -> None:
        self.config = message_to_config(message)
        self.engine = GrowthEngine(
            self.config, rng=rng, max_attempts=max_attempts,
            on_saturation=on_saturation,
        )
        self.outbox: queue.Queue = queue.Queue()
        self.error: Optional[SparkError] = None
        self.posted = 0
        self.received = 0

        self._stop = threading.Event()
        self._done = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def expected(self) -> int:
        return self.config.number_of_intervals

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    @property
    def finished(self) -> bool:
        return self._done.is_set()

    def start(self) -> "SparkWorker":
        if self._thread is not None:
            raise RuntimeError("Worker already started")
        self._thread = threading.Thread(
            target=self._run, name="spark-worker", daemon=True,
        )
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            for window in self.engine.run(should_stop=self._stop.is_set):
                self._post(window.to_records())
        except SparkError as exc:
            self.error = exc
        finally:
            self._done.set()

    def _post(self, records: List[Dict[str, Any]]) -> None:
        self.outbox.put_nowait(records)
        self.posted += 1

    def cancel(self) -> None:
        """Signal the run to stop. Queued snapshots are left undelivered."""
        self._stop.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker thread. Returns True once it has exited."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def pending(self) -> int:
        """Snapshots posted but not yet delivered."""
        return self.outbox.qsize()

    def messages(self, poll_interval: float = 0.05) -> Iterator[List[Dict[str, Any]]]:
        """Yield snapshot messages in tick order until the run ends.

        Re-raises a worker failure once every snapshot posted before it has
        been delivered.
        """
        if self._thread is None:
            raise RuntimeError("Worker not started")
        while not self._stop.is_set():
            try:
                message = self.outbox.get(timeout=poll_interval)
            except queue.Empty:
                if self._done.is_set() and self.outbox.empty():
                    break
                continue
            if self._stop.is_set():
                break
            self.received += 1
            yield message

        if self.error is not None and not self._stop.is_set():
            raise self.error
