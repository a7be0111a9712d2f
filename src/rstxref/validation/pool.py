"""Fixed-size, self-pacing thread pool for reachability probes."""

from __future__ import annotations

import logging
import math
import queue
import threading
import time
from typing import Callable, Generic, Sequence, TypeVar, cast

from rstxref.validation.planner import ProbeTask


LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

_CLOSED = object()


class MessageFunnel(Generic[T]):
    """Many producers, one consumer thread."""

    def __init__(self, consumer: Callable[[T], None], *, name: str) -> None:
        self._queue: queue.SimpleQueue[object] = queue.SimpleQueue()
        self._consumer = consumer
        self._thread = threading.Thread(target=self._drain, name=name, daemon=True)
        self._thread.start()

    def put(self, message: T) -> None:
        self._queue.put(message)

    def close(self) -> None:
        """Stop accepting messages and wait until everything queued was consumed."""

        self._queue.put(_CLOSED)
        self._thread.join()

    def _drain(self) -> None:
        while True:
            message = self._queue.get()
            if message is _CLOSED:
                return
            try:
                self._consumer(message)  # type: ignore[arg-type]
            except Exception:  # pragma: no cover
                LOGGER.exception("Consumer of %s failed", self._thread.name)


class UrlClaims:
    """Thread-safe load-or-store registry; each URL can be claimed once."""

    def __init__(self) -> None:
        self._claimed: set[str] = set()
        self._lock = threading.Lock()

    def claim(self, url: str) -> bool:
        with self._lock:
            if url in self._claimed:
                return False
            self._claimed.add(url)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._claimed)


class ThrottledWorkerPool:
    """Run probe tasks on N threads with an overall rate of about *throttle* probes per second.

    Each worker keeps at least ``ceil(1e9 / (throttle / workers))`` nanoseconds
    between its own dispatches.  The whole task list is queued before the
    workers start and every task runs; there is no early exit.
    """

    def __init__(
        self,
        probe: Callable[[str], tuple[str, bool]],
        *,
        workers: int,
        throttle: int,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        if throttle < 1:
            raise ValueError("throttle must be >= 1")

        self._probe = probe
        self._workers = workers
        self._throttle = throttle
        self._sleep = sleep
        self._clock = clock

    @property
    def min_interval_ns(self) -> int:
        return math.ceil(1e9 / (self._throttle / self._workers))

    def run(
        self,
        tasks: Sequence[ProbeTask],
        on_progress: Callable[[int, int], None] | None = None,
    ) -> list[str]:
        """Run every task and return the diagnostics of failed probes."""

        diagnostics: list[str] = []
        total = len(tasks)
        completed = 0

        def _advance(_: ProbeTask) -> None:
            nonlocal completed
            completed += 1
            if on_progress is not None:
                on_progress(completed, total)

        jobs: queue.SimpleQueue[object] = queue.SimpleQueue()
        for task in tasks:
            jobs.put(task)
        for _ in range(self._workers):
            jobs.put(_CLOSED)

        diagnostic_funnel: MessageFunnel[str] = MessageFunnel(diagnostics.append, name="diagnostics")
        progress_funnel: MessageFunnel[ProbeTask] = MessageFunnel(_advance, name="progress")
        claims = UrlClaims()

        threads = [
            threading.Thread(
                target=self._work,
                args=(jobs, claims, diagnostic_funnel, progress_funnel),
                name=f"probe-worker-{index}",
            )
            for index in range(self._workers)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        progress_funnel.close()
        diagnostic_funnel.close()
        LOGGER.info("Probed %d unique URL(s), %d failure(s)", len(claims), len(diagnostics))
        return diagnostics

    def _work(
        self,
        jobs: "queue.SimpleQueue[object]",
        claims: UrlClaims,
        diagnostics: MessageFunnel[str],
        progress: MessageFunnel[ProbeTask],
    ) -> None:
        interval_ns = self.min_interval_ns
        last_dispatch = self._clock()
        while True:
            job = jobs.get()
            if job is _CLOSED:
                return
            task = cast(ProbeTask, job)

            remaining_ns = interval_ns - (self._clock() - last_dispatch)
            if remaining_ns > 0:
                self._sleep(remaining_ns / 1e9)
            last_dispatch = self._clock()

            try:
                self._execute(task, claims, diagnostics)
            finally:
                progress.put(task)

    def _execute(self, task: ProbeTask, claims: UrlClaims, diagnostics: MessageFunnel[str]) -> None:
        if not claims.claim(task.url):
            return
        try:
            status, ok = self._probe(task.url)
        except Exception as exc:
            LOGGER.debug("Probe for %s raised", task.url, exc_info=True)
            status, ok = f"{type(exc).__name__}: {exc}", False
        if not ok:
            diagnostics.put(task.failure_message(status))
