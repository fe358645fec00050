"""Immutable value objects describing a frame-processing run.

FilterSpec and ReductionSpec are tagged unions discriminated by ``method``,
so a plain dict such as ``{"method": "median", "radius": 2}`` validates to
the right variant.
"""

from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import Field, field_validator, model_validator

from kymotools.schemas.base import FrozenModel


# =============================================================================
# Filters
# =============================================================================

class NoFilter(FrozenModel):
    method: Literal["none"] = "none"


class MedianFilter(FrozenModel):
    """Median over a square neighborhood of half-width ``radius``."""
    method: Literal["median"] = "median"
    radius: int = Field(1, ge=0)


class GaussianFilter(FrozenModel):
    """Separable gaussian blur with standard deviation ``sigma`` (pixels)."""
    method: Literal["gaussian"] = "gaussian"
    sigma: float = Field(1.0, gt=0)


class TopHatFilter(FrozenModel):
    """White top-hat with a square structuring element of half-width ``radius``."""
    method: Literal["tophat"] = "tophat"
    radius: int = Field(1, ge=0)


FilterSpec = Annotated[
    Union[NoFilter, MedianFilter, GaussianFilter, TopHatFilter],
    Field(discriminator="method"),
]


class FilterConfig(FrozenModel):
    """Global filter plus optional per-channel overrides.

    When ``channels`` is non-empty it supersedes ``spec``: only the listed
    channels (0-based) are filtered, each with its own spec.
    """
    spec: FilterSpec = Field(default_factory=NoFilter)
    channels: Dict[int, FilterSpec] = Field(default_factory=dict)

    @field_validator("channels")
    @classmethod
    def check_channel_indices(cls, v):
        for channel in v:
            if channel < 0:
                raise ValueError(f"Channel index must be >= 0, got {channel}")
        return v

    @property
    def per_channel(self) -> bool:
        return bool(self.channels)

    @property
    def is_noop(self) -> bool:
        return not self.channels and self.spec.method == "none"


# =============================================================================
# Reductions
# =============================================================================

class NoReduction(FrozenModel):
    method: Literal["none"] = "none"


class SkipFrames(FrozenModel):
    """Keep every ``factor``-th frame."""
    method: Literal["skip"] = "skip"
    factor: int = Field(1, ge=1)


class AverageFrames(FrozenModel):
    """Mean of consecutive groups of ``group`` frames."""
    method: Literal["average"] = "average"
    group: int = Field(1, ge=1)


class SumFrames(FrozenModel):
    """Sum of consecutive groups of ``group`` frames."""
    method: Literal["sum"] = "sum"
    group: int = Field(1, ge=1)


ReductionSpec = Annotated[
    Union[NoReduction, SkipFrames, AverageFrames, SumFrames],
    Field(discriminator="method"),
]


# =============================================================================
# Pipeline
# =============================================================================

class PipelineConfig(FrozenModel):
    """Everything FramePipeline needs, fixed before the run starts.

    ``min_t``/``max_t`` bound the frames considered by reduction and montage
    tiling (inclusive, 0-based). A ``max_t`` past the last frame means "to the
    end".
    """
    reduction: ReductionSpec = Field(default_factory=NoReduction)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    resolution_factor: float = Field(1.0, gt=0)
    vertical_reflection: bool = False
    horizontal_reflection: bool = False
    threads: int = Field(1, ge=1)
    min_t: Optional[int] = Field(None, ge=0)
    max_t: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_time_bounds(self):
        if self.min_t is not None and self.max_t is not None and self.min_t > self.max_t:
            raise ValueError(f"min_t ({self.min_t}) > max_t ({self.max_t})")
        return self
