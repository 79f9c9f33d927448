"""
Executors run units of pipeline work.

A failure inside a unit of work is logged and counted, never raised to the
submitter and never allowed to stop other work. Submitting to an executor that
has been shut down is rejected synchronously.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from logging import Logger
from typing import Callable, Optional

from recordflow.exceptions import RejectedWorkError
from recordflow.logger import get_logger
from recordflow.settings import ExecutorSettings, GlobalSettings

from .metrics import EtlMetrics, profiling_scope

Work = Callable[[], object]


class Executor(ABC):
    def __init__(self, logger: Optional[Logger] = None) -> None:
        self.logger = logger or get_logger()
        self._shutdown = False
        self._state_lock = threading.Lock()

    @property
    def metric_prefix(self) -> str:
        return self.__class__.__name__

    def submit(self, work: Work, metrics: Optional[EtlMetrics]) -> None:
        """
        Submit a unit of work.

        Args:
            work: Callable taking no arguments
            metrics: Parent metrics scope the work is profiled under

        Raises:
            RejectedWorkError: If the executor has been shut down
        """
        with self._state_lock:
            if self._shutdown:
                raise RejectedWorkError(f"{self.metric_prefix} has been shut down; work rejected")
        try:
            self._dispatch(lambda: self._run_contained(work, metrics))
        except RuntimeError as e:
            # the pool refuses work once it has started shutting down
            raise RejectedWorkError(f"{self.metric_prefix} has been shut down; work rejected") from e

    def _run_contained(self, work: Work, metrics: Optional[EtlMetrics]) -> None:
        with profiling_scope(metrics, f"{self.metric_prefix}.submit") as scope:
            try:
                work()
            except Exception:
                self.logger.exception(f"{self.metric_prefix}: unit of work failed")
                if scope is not None:
                    scope.add_count(f"{self.metric_prefix}.failure", 1)

    @abstractmethod
    def _dispatch(self, task: Callable[[], None]) -> None:
        pass

    def shutdown(self) -> None:
        """Stop accepting work and wait for submitted work to finish."""
        with self._state_lock:
            self._shutdown = True

    def is_shutdown(self) -> bool:
        return self._shutdown


class ImmediateExecutor(Executor):
    """Runs each unit of work on the submitting thread before returning."""

    def _dispatch(self, task: Callable[[], None]) -> None:
        task()


class ThreadPoolEtlExecutor(Executor):
    """Runs units of work on a ``concurrent.futures`` thread pool."""

    def __init__(self, max_workers: int = 4, logger: Optional[Logger] = None) -> None:
        super().__init__(logger)
        self.max_workers = max_workers
        self.pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="recordflow")

    def _dispatch(self, task: Callable[[], None]) -> None:
        self.pool.submit(task)

    def shutdown(self) -> None:
        super().shutdown()
        self.pool.shutdown(wait=True)


def create_executor(settings: Optional[ExecutorSettings] = None) -> Executor:
    """Build the executor ``settings`` describe, or the one configured in ``GlobalSettings``."""
    settings = settings or GlobalSettings().executor_settings
    if settings.kind == "thread_pool":
        return ThreadPoolEtlExecutor(max_workers=settings.max_workers)
    return ImmediateExecutor()
