"""
Abstract base class for pipeline stages.
"""
from __future__ import annotations

from abc import ABC
from typing import Optional

from recordflow.exceptions import BaseError

from .metrics import EtlMetrics


class PipelineStage(ABC):
    """
    Base class for extractors, transformers and consumers.

    Every stage has a name used in logs and metric keys and an open/close
    lifecycle. The default lifecycle hooks do nothing.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        """
        Initialize the pipeline stage.

        Args:
            name: Name for this stage instance (defaults to the class name)
        """
        self.name = name or self.__class__.__name__

    def open(self, metrics: Optional[EtlMetrics]) -> None:
        """
        Prepare the stage to process records.

        Args:
            metrics: Parent metrics scope to record into, may be None
        """
        pass

    def close(self) -> None:
        """Release anything acquired in open()."""
        pass

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class PipelineStageError(BaseError):
    """
    Exception raised when a pipeline stage encounters an error.
    """

    def __init__(self, stage: PipelineStage, message: str, cause: Optional[Exception] = None) -> None:
        """
        Initialize the pipeline stage error.

        Args:
            stage: The stage that encountered the error
            message: Error message
            cause: Optional underlying exception that caused this error
        """
        self.stage = stage
        self.cause = cause
        super().__init__(f"Stage '{stage.name}' error: {message}")
