"""ParamConfig: Expert defaults for kymograph and montage builds.

This module defines the complete default configuration. ALL tunable
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives
InternalConfig.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator

from kymotools.schemas.base import KymoBaseModel
from kymotools.schemas.specs import (
    FilterConfig,
    NoReduction,
    ReductionSpec,
)


# =============================================================================
# Nested Configuration Models
# =============================================================================

class PipelineParams(KymoBaseModel):
    """Frame pipeline: reduction, filter, resolution, reflection, threads."""
    reduction: ReductionSpec = Field(default_factory=NoReduction)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    resolution_factor: float = Field(1.0, gt=0, description="Interpolation scale, <=1 is a no-op")
    vertical_reflection: bool = False
    horizontal_reflection: bool = False
    threads: int = Field(1, ge=1, description="Filter worker threads, 1 runs sequentially")
    min_t: Optional[int] = Field(None, ge=0)
    max_t: Optional[int] = Field(None, ge=0)

    @field_validator("resolution_factor", mode="before")
    @classmethod
    def coerce_factor_to_float(cls, v):
        """Allow int or float for the resolution factor."""
        return float(v)


class KymographParams(KymoBaseModel):
    """Kymograph band sampling."""
    width: int = Field(1, ge=1, description="Band width in pixels perpendicular to the path")
    path: list[tuple[float, float]] = Field(
        default_factory=list,
        description="Polyline vertices (x, y) used when no molecule is selected",
    )


class MontageParams(KymoBaseModel):
    """Montage grid layout."""
    spacing: int = Field(0, ge=0, description="Gap between tiles in pixels")
    columns: int = Field(-1, description="Fixed column count, <=0 derives it from layout")
    horizontal_layout: bool = True


class RegionParams(KymoBaseModel):
    """Region extraction around a molecule's line or shapes."""
    molecule: Optional[str] = None
    border_width: int = Field(10, ge=0)
    border_height: int = Field(10, ge=0)


class OutputConfig(KymoBaseModel):
    """Output file configuration."""
    format: Literal["netcdf"] = "netcdf"
    engine: Literal["netcdf4", "h5netcdf", "scipy"] = "netcdf4"
    base_dir: str = "./output"


class LoggingConfig(KymoBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: bool = True


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(KymoBaseModel):
    """Complete expert configuration with all defaults.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    mode: Literal["kymograph", "montage"] = "kymograph"
    input_path: Optional[str] = None
    output_path: Optional[str] = None
    pipeline: PipelineParams = Field(default_factory=PipelineParams)
    kymograph: KymographParams = Field(default_factory=KymographParams)
    montage: MontageParams = Field(default_factory=MontageParams)
    region: RegionParams = Field(default_factory=RegionParams)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
