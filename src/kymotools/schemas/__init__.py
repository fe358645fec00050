"""Pydantic configuration schemas for kymotools.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
PipelineConfig, FilterConfig : class
    Immutable frame-pipeline value objects
"""

from kymotools.schemas.resolve import resolve_config
from kymotools.schemas.internal import InternalConfig
from kymotools.schemas.param import ParamConfig
from kymotools.schemas.user import UserConfig
from kymotools.schemas.cli import CLIConfig
from kymotools.schemas.specs import (
    AverageFrames,
    FilterConfig,
    FilterSpec,
    GaussianFilter,
    MedianFilter,
    NoFilter,
    NoReduction,
    PipelineConfig,
    ReductionSpec,
    SkipFrames,
    SumFrames,
    TopHatFilter,
)

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
    'PipelineConfig',
    'FilterConfig',
    'FilterSpec',
    'NoFilter',
    'MedianFilter',
    'GaussianFilter',
    'TopHatFilter',
    'ReductionSpec',
    'NoReduction',
    'SkipFrames',
    'AverageFrames',
    'SumFrames',
]
