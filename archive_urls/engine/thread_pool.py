"""Shared worker threads and the process-wide request budget."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from threading import BoundedSemaphore, Lock
from typing import Iterator


class ConcurrencyBudget:
    """Counting semaphore bounding in-flight archive requests."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("concurrency budget must be a positive integer")
        self.capacity = capacity
        self._semaphore = BoundedSemaphore(capacity)
        self._lock = Lock()
        self._in_flight = 0
        self.peak = 0

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Hold one unit of the budget for the duration of the block."""

        self._semaphore.acquire()
        with self._lock:
            self._in_flight += 1
            self.peak = max(self.peak, self._in_flight)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight -= 1
            self._semaphore.release()

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight


class ThreadPoolManager:
    """Own the executor and budget shared by every target of a run."""

    def __init__(self, default_workers: int = 8, budget: ConcurrencyBudget | None = None) -> None:
        self.default_workers = default_workers
        self.budget = budget or ConcurrencyBudget(default_workers)
        self._executor: ThreadPoolExecutor | None = None
        self._lock = Lock()

    def get(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.default_workers, thread_name_prefix="archive-urls"
                )
            return self._executor

    def shutdown(self) -> None:
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None


__all__ = ["ConcurrencyBudget", "ThreadPoolManager"]
