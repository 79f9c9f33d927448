"""
EtlPipeline wires an extractor, transformer stages and a consumer together.

Records are extracted on the calling thread and handed to an executor, which
runs the transformer stages and the final consumer for each record.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import Logger
from typing import Any, List, Optional, Tuple, Type

from recordflow.envelope import RecordEnvelope
from recordflow.logger import get_logger

from .consumer import Consumer, ExecutorConsumer, SmartConsumer, TransformerStage
from .executor import Executor, create_executor
from .extractor import Extractor
from .metrics import EtlMetrics, profiling_scope
from .transformer import Transformer


@dataclass
class PipelineResult:
    name: str
    extracted: int = 0


class EtlPipeline:
    """
    A single extract → transform → consume run.

    Transformers are applied in the order they were added, each reading the
    record through its own input shape.
    """

    def __init__(
        self,
        name: str,
        extractor: Extractor,
        consumer: Consumer,
        executor: Optional[Executor] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            name: Name used in logs and metric keys
            extractor: Source of records
            consumer: Final destination of records
            executor: Executor that runs consumption (built from settings if not provided)
            logger: Optional logger instance (creates default if not provided)
        """
        self.name = name
        self.extractor = extractor
        self.consumer = consumer
        self.executor = executor or create_executor()
        self.logger = logger or get_logger()
        self._transformers: List[Tuple[str, Type[Any], Transformer[Any, Any]]] = []

    def add_transformer(
        self, input_shape: Type[Any], transformer: Transformer[Any, Any], name: Optional[str] = None
    ) -> EtlPipeline:
        """
        Append a transformer stage.

        Args:
            input_shape: Shape each record is read as before being transformed
            transformer: Transformer to apply
            name: Stage name (defaults to the transformer's name)

        Returns:
            This pipeline, for chaining
        """
        self._transformers.append((name or transformer.name, input_shape, transformer))
        return self

    def get_stage_names(self) -> List[str]:
        return [name for name, _, _ in self._transformers]

    def _build_chain(self) -> Consumer:
        downstream: Consumer = SmartConsumer(f"{self.name}.load", self.consumer, self.logger)
        for name, input_shape, transformer in reversed(self._transformers):
            downstream = TransformerStage(name, input_shape, transformer, downstream)
        return ExecutorConsumer(f"{self.name}.dispatch", self.executor, downstream)

    def run(self, metrics: Optional[EtlMetrics] = None) -> PipelineResult:
        """
        Extract every record and push it through the pipeline.

        The extractor and the stage chain are always closed, in that order,
        even when extraction fails.

        Returns:
            Summary of the run

        Raises:
            BackingFailureError: If the extractor's source fails
        """
        result = PipelineResult(self.name)
        chain = self._build_chain()

        self.logger.info(
            f"EtlPipeline '{self.name}': Starting with {len(self._transformers)} transformer stages "
            f"{self.get_stage_names()}"
        )

        with profiling_scope(metrics, f"{self.name}.run") as scope:
            chain.open(scope)
            try:
                try:
                    self.extractor.open(scope)
                    while True:
                        extracted = self.extractor.next()
                        if extracted is None:
                            break
                        envelope = (
                            extracted
                            if isinstance(extracted, RecordEnvelope)
                            else RecordEnvelope.with_initial(extracted)
                        )
                        result.extracted += 1
                        chain.consume(envelope)
                finally:
                    self.extractor.close()
            except Exception as e:
                self.logger.error(f"EtlPipeline '{self.name}': Extraction stopped after {result.extracted} records: {e}")
                raise
            finally:
                chain.close()
            if scope is not None:
                scope.add_count(f"{self.name}.extracted", result.extracted)

        self.logger.info(f"EtlPipeline '{self.name}': Completed - {result.extracted} records extracted")
        return result
