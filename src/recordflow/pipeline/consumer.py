"""
Consumers receive record envelopes at the end of (or part way along) a pipeline.
"""

from __future__ import annotations

import threading
from abc import abstractmethod
from logging import Logger
from typing import Any, Generic, List, Optional, Type, TypeVar

from recordflow.envelope import RecordEnvelope
from recordflow.exceptions import InvalidLifecycleUseError
from recordflow.logger import get_logger

from .executor import Executor
from .metrics import EtlMetrics, profiling_scope
from .stage import PipelineStage, PipelineStageError
from .transformer import Transformer

T = TypeVar("T")


class Consumer(PipelineStage):
    @abstractmethod
    def consume(self, envelope: RecordEnvelope) -> None:
        """
        Consume a single record.

        Args:
            envelope: The record to consume
        """
        pass


class SmartConsumer(Consumer):
    """
    Reference-counting wrapper for a consumer shared by several upstream stages.

    The wrapped consumer is opened on the first ``open`` and closed on the
    ``close`` that balances it. All counter changes go through one lock.
    """

    def __init__(self, name: str, wrapped: Consumer, logger: Optional[Logger] = None) -> None:
        super().__init__(name)
        self.wrapped = wrapped
        self.logger = logger or get_logger()
        self._open_count = 0
        self._lock = threading.Lock()

    @property
    def open_count(self) -> int:
        return self._open_count

    def open(self, metrics: Optional[EtlMetrics]) -> None:
        with self._lock:
            if self._open_count == 0:
                self.logger.info(f"SmartConsumer '{self.name}': opening {self.wrapped}")
                self.wrapped.open(metrics)
            self._open_count += 1

    def consume(self, envelope: RecordEnvelope) -> None:
        with self._lock:
            opened = self._open_count > 0
        if not opened:
            raise InvalidLifecycleUseError(f"Consumer '{self.name}' used before it was opened")
        self.wrapped.consume(envelope)

    def close(self) -> None:
        with self._lock:
            if self._open_count == 0:
                raise InvalidLifecycleUseError(f"Consumer '{self.name}' closed more times than it was opened")
            self._open_count -= 1
            if self._open_count == 0:
                self.logger.info(f"SmartConsumer '{self.name}': closing {self.wrapped}")
                self.wrapped.close()


class ExecutorConsumer(Consumer):
    """
    Hands each record to an executor, which consumes it downstream.

    Closing shuts the executor down, waiting for submitted work, before the
    downstream consumer is closed.
    """

    def __init__(self, name: str, executor: Executor, downstream: Consumer) -> None:
        super().__init__(name)
        self.executor = executor
        self.downstream = downstream
        self._metrics: Optional[EtlMetrics] = None

    def open(self, metrics: Optional[EtlMetrics]) -> None:
        self._metrics = metrics
        self.downstream.open(metrics)

    def consume(self, envelope: RecordEnvelope) -> None:
        self.executor.submit(lambda: self.downstream.consume(envelope), self._metrics)

    def close(self) -> None:
        try:
            self.executor.shutdown()
        finally:
            self.downstream.close()


class TransformerStage(Consumer, Generic[T]):
    """
    Runs a transformer over one view of each record and forwards the results.

    Every output is written over its own copy of the input envelope, so fields
    the transformer never saw travel on with each output.
    """

    def __init__(self, name: str, input_shape: Type[T], transformer: Transformer[T, Any], downstream: Consumer) -> None:
        super().__init__(name)
        self.input_shape = input_shape
        self.transformer = transformer
        self.downstream = downstream
        self._metrics: Optional[EtlMetrics] = None

    def open(self, metrics: Optional[EtlMetrics]) -> None:
        self._metrics = metrics
        self.transformer.open(metrics)
        self.downstream.open(metrics)

    def consume(self, envelope: RecordEnvelope) -> None:
        with profiling_scope(self._metrics, f"{self.name}.transform") as scope:
            view = envelope.get(self.input_shape)
            try:
                outputs = self.transformer.transform(view)
            except PipelineStageError:
                raise
            except Exception as e:
                raise PipelineStageError(self, f"transformer {self.transformer} failed", e) from e
            if scope is not None:
                scope.add_count(f"{self.name}.outputs", len(outputs))
        for output in outputs:
            self.downstream.consume(envelope.derive(output))

    def close(self) -> None:
        try:
            self.transformer.close()
        finally:
            self.downstream.close()


class CollectingConsumer(Consumer, Generic[T]):
    """Materializes each record as ``shape`` and keeps it in memory."""

    def __init__(self, shape: Type[T], name: Optional[str] = None) -> None:
        super().__init__(name)
        self.shape = shape
        self._records: List[T] = []
        self._lock = threading.Lock()

    def consume(self, envelope: RecordEnvelope) -> None:
        record = envelope.get(self.shape)
        with self._lock:
            self._records.append(record)

    @property
    def records(self) -> List[T]:
        with self._lock:
            return list(self._records)


class LoggingConsumer(Consumer, Generic[T]):
    """Logs each record, materialized as ``shape``, as a structured log entry."""

    def __init__(self, shape: Type[T], name: Optional[str] = None, logger: Optional[Logger] = None) -> None:
        super().__init__(name)
        self.shape = shape
        self.logger = logger or get_logger()

    def consume(self, envelope: RecordEnvelope) -> None:
        record = envelope.get(self.shape)
        dump = getattr(record, "model_dump", None)
        payload = dump(mode="json") if dump is not None else {}
        self.logger.info(f"{self.name}: record", extra={"record": payload})
