"""
Metrics scopes for counters and timers.

A metrics object records counts and times under string keys. Child scopes are
created per unit of profiled work; closing a child rolls everything it recorded
up into its parent. How values are finally aggregated or exported is left to
implementations of ``EtlMetrics``.

Example:
    >>> root = InMemoryMetrics()
    >>> with profiling_scope(root, "Example.step") as scope:
    ...     scope.add_count("Example.rows", 3)
    >>> root.counts["Example.rows"]
    3.0
    >>> len(root.times["Example.step"])
    1
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from recordflow.exceptions import InvalidLifecycleUseError


class EtlMetrics(ABC):
    """Interface for recording counters and timers."""

    @abstractmethod
    def create_child_metrics(self) -> EtlMetrics:
        """Create a scope whose data rolls up into this one when closed."""

    @abstractmethod
    def add_count(self, key: str, value: float) -> None:
        ...

    @abstractmethod
    def add_time(self, key: str, milliseconds: float) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the scope, rolling its counts and times into the parent."""


class InMemoryMetrics(EtlMetrics):
    """
    Metrics kept in dictionaries: counts are summed, times are kept as samples.

    Safe to record into from worker threads.
    """

    def __init__(self, parent: Optional[InMemoryMetrics] = None) -> None:
        self.parent = parent
        self.counts: Dict[str, float] = defaultdict(float)
        self.times: Dict[str, List[float]] = defaultdict(list)
        self._closed = False
        self._lock = threading.Lock()

    def create_child_metrics(self) -> InMemoryMetrics:
        return InMemoryMetrics(parent=self)

    def add_count(self, key: str, value: float) -> None:
        with self._lock:
            self.counts[key] += value

    def add_time(self, key: str, milliseconds: float) -> None:
        with self._lock:
            self.times[key].append(milliseconds)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                raise InvalidLifecycleUseError("Metrics scope has already been closed")
            self._closed = True
            counts = dict(self.counts)
            times = {key: list(samples) for key, samples in self.times.items()}

        if self.parent is None:
            return
        for key, value in counts.items():
            self.parent.add_count(key, value)
        for key, samples in times.items():
            for sample in samples:
                self.parent.add_time(key, sample)

    @property
    def closed(self) -> bool:
        return self._closed


@contextmanager
def profiling_scope(metrics: Optional[EtlMetrics], key: str) -> Iterator[Optional[EtlMetrics]]:
    """
    Time the enclosed block under ``key`` in a child scope of ``metrics``.

    The child scope is yielded so the block can record into it, and is always
    closed on exit. With no parent metrics, ``None`` is yielded and nothing is
    recorded.
    """
    if metrics is None:
        yield None
        return

    child = metrics.create_child_metrics()
    started_at = time.perf_counter()
    try:
        yield child
    finally:
        child.add_time(key, (time.perf_counter() - started_at) * 1000)
        child.close()
