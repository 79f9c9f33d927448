"""
Unit tests for PipelineStage class.
"""

from typing import Any, Optional

from recordflow.pipeline import InMemoryMetrics, PipelineStage, PipelineStageError


class SampleStage(PipelineStage):
    """Stage implementation that records its lifecycle calls."""

    def __init__(self, name: Optional[str] = None) -> None:
        super().__init__(name)
        self.opened_with: Any = None
        self.close_called = False

    def open(self, metrics: Any) -> None:
        self.opened_with = metrics

    def close(self) -> None:
        self.close_called = True


class TestPipelineStage:
    """Test cases for PipelineStage class."""

    def test_init_basic(self) -> None:
        stage = SampleStage("sample_stage")

        assert stage.name == "sample_stage"

    def test_name_defaults_to_class_name(self) -> None:
        assert SampleStage().name == "SampleStage"

    def test_lifecycle_hooks(self) -> None:
        stage = SampleStage("sample_stage")
        metrics = InMemoryMetrics()

        stage.open(metrics)
        stage.close()

        assert stage.opened_with is metrics
        assert stage.close_called

    def test_string_representations(self) -> None:
        stage = SampleStage("sample_stage")

        assert str(stage) == "SampleStage(name='sample_stage')"
        assert repr(stage) == "SampleStage(name='sample_stage')"


class TestPipelineStageError:
    """Test cases for PipelineStageError class."""

    def test_error_basic(self) -> None:
        stage = SampleStage("sample_stage")
        error = PipelineStageError(stage, "Test error message")

        assert error.stage is stage
        assert error.cause is None
        assert str(error) == "Stage 'sample_stage' error: Test error message"

    def test_error_with_cause(self) -> None:
        stage = SampleStage("sample_stage")
        cause = ValueError("Original error")
        error = PipelineStageError(stage, "Wrapped error", cause)

        assert error.cause is cause
        assert "Wrapped error" in str(error)
