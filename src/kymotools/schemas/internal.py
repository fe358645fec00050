"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and frozen.
"""

from typing import Literal, Optional

from pydantic import ConfigDict, Field

from kymotools.schemas.base import KymoBaseModel
from kymotools.schemas.specs import PipelineConfig


class InternalKymographConfig(KymoBaseModel):
    """Runtime kymograph configuration."""
    width: int = Field(ge=1)
    path: list[tuple[float, float]]


class InternalMontageConfig(KymoBaseModel):
    """Runtime montage configuration."""
    spacing: int = Field(ge=0)
    columns: int
    horizontal_layout: bool


class InternalRegionConfig(KymoBaseModel):
    """Runtime region extraction configuration."""
    molecule: Optional[str]
    border_width: int = Field(ge=0)
    border_height: int = Field(ge=0)


class InternalOutputConfig(KymoBaseModel):
    """Runtime output configuration."""
    format: Literal["netcdf"]
    engine: Literal["netcdf4", "h5netcdf", "scipy"]
    base_dir: str


class InternalLoggingConfig(KymoBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    log_file: bool


class InternalConfig(KymoBaseModel):
    """Authoritative runtime configuration.

    Runtime modules receive InternalConfig and access fields directly:

        def from_config(cls, config: InternalConfig):
            width = config.kymograph.width  # NOT .get()

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation in runtime code
    """

    mode: Literal["kymograph", "montage"]
    input_path: Optional[str]
    output_path: Optional[str]
    pipeline: PipelineConfig
    kymograph: InternalKymographConfig
    montage: InternalMontageConfig
    region: InternalRegionConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
