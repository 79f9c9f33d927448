"""
Pipeline Stages

Stage lifecycle, collaborators (extractors, transformers, consumers,
executors, metrics scopes, lookups) and the pipeline runner.
"""

from .consumer import (
    CollectingConsumer,
    Consumer,
    ExecutorConsumer,
    LoggingConsumer,
    SmartConsumer,
    TransformerStage,
)
from .executor import Executor, ImmediateExecutor, ThreadPoolEtlExecutor, create_executor
from .extractor import CsvMapper, Extractor, InputStreamExtractor, IterableExtractor
from .lookup import Lookup, MappingLookup
from .metrics import EtlMetrics, InMemoryMetrics, profiling_scope
from .runner import EtlPipeline, PipelineResult
from .stage import PipelineStage, PipelineStageError
from .transformer import ContainsFilter, FilterTransformer, MapTransformer, Transformer

__all__ = [
    # Stage base
    "PipelineStage",
    "PipelineStageError",
    # Collaborators
    "Extractor",
    "IterableExtractor",
    "InputStreamExtractor",
    "CsvMapper",
    "Transformer",
    "MapTransformer",
    "FilterTransformer",
    "ContainsFilter",
    "Consumer",
    "SmartConsumer",
    "ExecutorConsumer",
    "TransformerStage",
    "CollectingConsumer",
    "LoggingConsumer",
    "Executor",
    "ImmediateExecutor",
    "ThreadPoolEtlExecutor",
    "create_executor",
    "EtlMetrics",
    "InMemoryMetrics",
    "profiling_scope",
    "Lookup",
    "MappingLookup",
    # Runner
    "EtlPipeline",
    "PipelineResult",
]
