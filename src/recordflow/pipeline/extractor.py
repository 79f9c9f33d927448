"""
Extractors produce the records that enter a pipeline.

An extractor yields a finite, non-restartable sequence through ``next()``:
``None`` marks the end of the data, and a failure of the backing source is
reported as ``BackingFailureError``.
"""

from __future__ import annotations

import csv
import re
from abc import abstractmethod
from typing import IO, Any, Callable, Iterable, Iterator, Optional

import stringcase

from recordflow.envelope import FieldPath, RecordEnvelope, ScalarKind, StoredValue
from recordflow.exceptions import BackingFailureError, InvalidLifecycleUseError

from .metrics import EtlMetrics
from .stage import PipelineStage

InputStreamMapper = Callable[[IO[str]], Iterator[Any]]


class Extractor(PipelineStage):
    @abstractmethod
    def next(self) -> Optional[Any]:
        """
        Extract the next record.

        Returns:
            A record envelope or a value to wrap into one, or None at the end
            of the data

        Raises:
            BackingFailureError: If the underlying source fails
        """
        pass


class IterableExtractor(Extractor):
    """Extracts from an iterable produced by a supplier when opened."""

    def __init__(self, supplier: Callable[[], Iterable[Any]], name: Optional[str] = None) -> None:
        super().__init__(name)
        self.supplier = supplier
        self._iterator: Optional[Iterator[Any]] = None

    @classmethod
    def of(cls, supplier: Callable[[], Iterable[Any]], name: Optional[str] = None) -> IterableExtractor:
        return cls(supplier, name)

    def open(self, metrics: Optional[EtlMetrics]) -> None:
        self._iterator = iter(self.supplier())

    def next(self) -> Optional[Any]:
        if self._iterator is None:
            raise InvalidLifecycleUseError(f"Extractor '{self.name}': next() called before open()")
        try:
            return next(self._iterator, None)
        except Exception as e:
            raise BackingFailureError(f"Extractor '{self.name}': source failed: {e}") from e

    def close(self) -> None:
        self._iterator = None


class InputStreamExtractor(IterableExtractor):
    """
    Extracts records from a text stream.

    The stream is opened by ``stream_supplier`` on ``open`` and turned into
    records by ``mapper``; it is closed again on ``close``.
    """

    def __init__(
        self,
        stream_supplier: Callable[[], IO[str]],
        mapper: InputStreamMapper,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(self._open_stream, name)
        self.stream_supplier = stream_supplier
        self.mapper = mapper
        self._stream: Optional[IO[str]] = None

    def _open_stream(self) -> Iterator[Any]:
        self._stream = self.stream_supplier()
        return self.mapper(self._stream)

    def close(self) -> None:
        super().close()
        if self._stream is not None:
            self._stream.close()
            self._stream = None


class CsvMapper:
    """
    Maps CSV rows to record envelopes.

    Every column is stored as text under its header converted to snake_case,
    so a later view can read an ``orderId`` column as ``order_id: int``. Empty cells
    are left out.
    """

    def __init__(self, delimiter: str = ",") -> None:
        self.delimiter = delimiter

    @staticmethod
    def field_name(header: str) -> str:
        return re.sub(r"_+", "_", stringcase.snakecase(header.strip()))

    def __call__(self, stream: IO[str]) -> Iterator[RecordEnvelope]:
        reader = csv.DictReader(stream, delimiter=self.delimiter)
        for row in reader:
            envelope = RecordEnvelope()
            for header, cell in row.items():
                if header is None or cell is None or cell == "":
                    continue
                envelope.store.set_path(FieldPath((self.field_name(header),)), StoredValue(ScalarKind.TEXT, cell))
            yield envelope
