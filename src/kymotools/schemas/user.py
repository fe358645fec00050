"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with flat
uppercase aliases for the common knobs (e.g. WIDTH -> kymograph.width,
FILTER_METHOD + FILTER_SIZE -> pipeline.filter.spec).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults.
"""

from typing import Any, Literal, Optional

from pydantic import Field, field_validator

from kymotools.schemas.base import KymoBaseModel


def _normalize_name(v):
    if isinstance(v, str):
        return v.lower().strip()
    return v


_REDUCTION_ALIASES = {
    "skip": "skip",
    "skip_frames": "skip",
    "average": "average",
    "avg": "average",
    "mean": "average",
    "sum": "sum",
    "none": "none",
    "all": "none",
}

_FILTER_ALIASES = {
    "median": "median",
    "gaussian": "gaussian",
    "gauss": "gaussian",
    "tophat": "tophat",
    "top_hat": "tophat",
    "none": "none",
}


def filter_spec_dict(method: str, size=None) -> dict:
    """Build a FilterSpec dict from a method name and a single size knob.

    ``size`` is the radius for median/tophat and sigma for gaussian.
    """
    if method not in _FILTER_ALIASES:
        raise ValueError(f"Unknown filter method: {method}")
    method = _FILTER_ALIASES[method]
    spec = {"method": method}
    if size is not None and method in ("median", "tophat"):
        spec["radius"] = int(size)
    elif size is not None and method == "gaussian":
        spec["sigma"] = float(size)
    return spec


def reduction_spec_dict(method: str, factor=None) -> dict:
    """Build a ReductionSpec dict from a method name and its factor/group size."""
    if method not in _REDUCTION_ALIASES:
        raise ValueError(f"Unknown reduction method: {method}")
    method = _REDUCTION_ALIASES[method]
    spec = {"method": method}
    if factor is not None and method == "skip":
        spec["factor"] = int(factor)
    elif factor is not None and method in ("average", "sum"):
        spec["group"] = int(factor)
    return spec


class UserPipelineConfig(KymoBaseModel):
    """User-facing pipeline config (nested form)."""
    reduction: Optional[dict[str, Any]] = None
    filter: Optional[dict[str, Any]] = None
    resolution_factor: Optional[float] = None
    vertical_reflection: Optional[bool] = None
    horizontal_reflection: Optional[bool] = None
    threads: Optional[int] = None
    min_t: Optional[int] = None
    max_t: Optional[int] = None


class UserMontageConfig(KymoBaseModel):
    """User-facing montage config."""
    spacing: Optional[int] = None
    columns: Optional[int] = None
    horizontal_layout: Optional[bool] = None


class UserConfig(KymoBaseModel):
    """User-facing configuration schema.

    Usage
    -----
        user_cfg = UserConfig(
            WIDTH=5,
            FILTER_METHOD="median",
            FILTER_SIZE=2,
            REDUCTION_METHOD="average",
            REDUCTION_FACTOR=3,
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Top-level operational settings
    mode: Optional[Literal["kymograph", "montage"]] = Field(None, alias="MODE")
    input_path: Optional[str] = Field(None, alias="INPUT_PATH")
    output_path: Optional[str] = Field(None, alias="OUTPUT_PATH")
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")
    molecule: Optional[str] = Field(None, alias="MOLECULE")

    # Kymograph settings (flat aliases)
    width: Optional[int] = Field(None, alias="WIDTH")
    path: Optional[list[tuple[float, float]]] = Field(None, alias="PATH")

    # Pipeline settings (flat aliases)
    min_t: Optional[int] = Field(None, alias="MIN_T")
    max_t: Optional[int] = Field(None, alias="MAX_T")
    reduction_method: Optional[str] = Field(None, alias="REDUCTION_METHOD")
    reduction_factor: Optional[int] = Field(None, alias="REDUCTION_FACTOR")
    filter_method: Optional[str] = Field(None, alias="FILTER_METHOD")
    filter_size: Optional[float] = Field(None, alias="FILTER_SIZE")
    channel_filters: Optional[dict[int, dict[str, Any]]] = Field(None, alias="CHANNEL_FILTERS")
    resolution_factor: Optional[float] = Field(None, alias="RESOLUTION_FACTOR")
    vertical_reflection: Optional[bool] = Field(None, alias="VERTICAL_REFLECTION")
    horizontal_reflection: Optional[bool] = Field(None, alias="HORIZONTAL_REFLECTION")
    threads: Optional[int] = Field(None, alias="THREADS")

    # Montage settings (flat aliases)
    spacing: Optional[int] = Field(None, alias="SPACING")
    columns: Optional[int] = Field(None, alias="COLUMNS")
    layout: Optional[Literal["horizontal", "vertical"]] = Field(None, alias="LAYOUT")

    # Region settings (flat aliases)
    border_width: Optional[int] = Field(None, alias="BORDER_WIDTH")
    border_height: Optional[int] = Field(None, alias="BORDER_HEIGHT")

    # Nested overrides (advanced users)
    pipeline: Optional[UserPipelineConfig] = None
    montage: Optional[UserMontageConfig] = None

    model_config = KymoBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("resolution_factor", "filter_size", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float for numeric fields."""
        if v is not None:
            return float(v)
        return v

    @field_validator("mode", "layout", mode="before")
    @classmethod
    def normalize_choices(cls, v):
        """Normalize choice names to lowercase."""
        return _normalize_name(v)

    @field_validator("reduction_method", mode="before")
    @classmethod
    def normalize_reduction(cls, v):
        """Accept common spellings (avg, mean, skip_frames, all)."""
        v = _normalize_name(v)
        if v is not None and v not in _REDUCTION_ALIASES:
            raise ValueError(f"Unknown reduction method: {v}")
        return v

    @field_validator("filter_method", mode="before")
    @classmethod
    def normalize_filter(cls, v):
        """Accept common spellings (gauss, top_hat)."""
        v = _normalize_name(v)
        if v is not None and v not in _FILTER_ALIASES:
            raise ValueError(f"Unknown filter method: {v}")
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.mode is not None:
            overrides["mode"] = self.mode
        if self.input_path is not None:
            overrides["input_path"] = str(self.input_path)
        if self.output_path is not None:
            overrides["output_path"] = str(self.output_path)
        if self.base_dir is not None:
            overrides["output"] = {"base_dir": str(self.base_dir)}

        # Kymograph section
        kymograph = {}
        if self.width is not None:
            kymograph["width"] = self.width
        if self.path is not None:
            kymograph["path"] = [tuple(p) for p in self.path]
        if kymograph:
            overrides["kymograph"] = kymograph

        # Pipeline section
        pipeline = {}
        for key in ("min_t", "max_t", "resolution_factor", "vertical_reflection",
                    "horizontal_reflection", "threads"):
            value = getattr(self, key)
            if value is not None:
                pipeline[key] = value
        if self.reduction_method is not None:
            pipeline["reduction"] = reduction_spec_dict(
                self.reduction_method, self.reduction_factor
            )

        filter_cfg = {}
        if self.filter_method is not None:
            filter_cfg["spec"] = filter_spec_dict(self.filter_method, self.filter_size)
        if self.channel_filters is not None:
            filter_cfg["channels"] = {
                int(channel): filter_spec_dict(
                    _normalize_name(spec.get("method", "none")),
                    spec.get("size", spec.get("radius", spec.get("sigma"))),
                )
                for channel, spec in self.channel_filters.items()
            }
        if filter_cfg:
            pipeline["filter"] = filter_cfg

        # Merge with explicit pipeline config
        if self.pipeline is not None:
            pipeline.update(self.pipeline.model_dump(exclude_none=True))

        if pipeline:
            overrides["pipeline"] = pipeline

        # Montage section
        montage = {}
        if self.spacing is not None:
            montage["spacing"] = self.spacing
        if self.columns is not None:
            montage["columns"] = self.columns
        if self.layout is not None:
            montage["horizontal_layout"] = self.layout == "horizontal"
        if self.montage is not None:
            montage.update(self.montage.model_dump(exclude_none=True))
        if montage:
            overrides["montage"] = montage

        # Region section
        region = {}
        if self.molecule is not None:
            region["molecule"] = self.molecule
        if self.border_width is not None:
            region["border_width"] = self.border_width
        if self.border_height is not None:
            region["border_height"] = self.border_height
        if region:
            overrides["region"] = region

        return overrides
