import pytest

from kymotools.schemas import PipelineConfig


@pytest.fixture
def make_pipeline_config():
    """Factory for PipelineConfig from plain keyword values."""
    def _make(**kwargs):
        return PipelineConfig.model_validate(kwargs)
    return _make
