"""Fluent pipeline setters shared by the kymograph and montage builders.

Builders collect settings through chained calls and freeze them into a
PipelineConfig when ``build()`` runs. Out-of-range values are coerced the
way users expect (a skip factor of 0 means 1, a non-positive resolution
factor means no scaling).
"""

import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from kymotools.contracts.failure import (
    ConfigurationError,
    FailurePolicy,
    KymoError,
    TypeMismatchError,
)
from kymotools.schemas.specs import (
    AverageFrames,
    FilterConfig,
    GaussianFilter,
    MedianFilter,
    NoFilter,
    NoReduction,
    PipelineConfig,
    SkipFrames,
    SumFrames,
    TopHatFilter,
)

__all__ = ["PipelineSettings"]

logger = logging.getLogger(__name__)


class PipelineSettings:
    """Mutable builder state behind a frozen PipelineConfig."""

    def _init_settings(self, config: Optional[PipelineConfig] = None,
                       policy: FailurePolicy = FailurePolicy.REPORT):
        config = config if config is not None else PipelineConfig()
        self._reduction = config.reduction
        self._filter_spec = config.filter.spec
        self._channel_filters: Dict[int, object] = dict(config.filter.channels)
        self._resolution_factor = config.resolution_factor
        self._vertical = config.vertical_reflection
        self._horizontal = config.horizontal_reflection
        self._threads = config.threads
        self._min_t = config.min_t
        self._max_t = config.max_t
        self.policy = FailurePolicy(policy)
        self.last_error: Optional[KymoError] = None
        self.errors: List[KymoError] = []

    # ------------------------------------------------------------------
    # Time bounds and reduction
    # ------------------------------------------------------------------

    def set_min_t(self, min_t: Optional[int]):
        """First frame to use; None or a negative value means the first frame."""
        self._min_t = min_t if min_t is not None and min_t >= 0 else None
        return self

    def set_max_t(self, max_t: Optional[int]):
        """Last frame to use; None or a negative value means the last frame."""
        self._max_t = max_t if max_t is not None and max_t >= 0 else None
        return self

    def skip_frames(self, factor: int):
        self._reduction = SkipFrames(factor=max(1, int(factor)))
        return self

    def average_frames(self, group: int):
        self._reduction = AverageFrames(group=max(1, int(group)))
        return self

    def sum_frames(self, group: int):
        self._reduction = SumFrames(group=max(1, int(group)))
        return self

    def use_all_frames(self):
        self._reduction = NoReduction()
        return self

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _set_filter(self, spec, channel: Optional[int]):
        if channel is None:
            self._filter_spec = spec
            return self
        if channel < 0:
            raise ConfigurationError(f"Channel index must be >= 0, got {channel}")
        self._channel_filters[int(channel)] = spec
        return self

    def median_filter(self, radius: int, channel: Optional[int] = None):
        """Median filter, globally or for one 0-based channel."""
        return self._set_filter(MedianFilter(radius=radius), channel)

    def gaussian_filter(self, sigma: float, channel: Optional[int] = None):
        """Gaussian filter, globally or for one 0-based channel."""
        return self._set_filter(GaussianFilter(sigma=sigma), channel)

    def tophat_filter(self, radius: int, channel: Optional[int] = None):
        """Top-hat filter, globally or for one 0-based channel."""
        return self._set_filter(TopHatFilter(radius=radius), channel)

    def no_filter(self):
        self._filter_spec = NoFilter()
        return self

    def clear_channel_filters(self):
        self._channel_filters.clear()
        return self

    # ------------------------------------------------------------------
    # Resolution, reflection, threads
    # ------------------------------------------------------------------

    def interpolation(self, factor: float):
        self._resolution_factor = float(factor) if factor > 0 else 1.0
        return self

    def set_vertical_reflection(self, enabled: bool = True):
        self._vertical = bool(enabled)
        return self

    def set_horizontal_reflection(self, enabled: bool = True):
        self._horizontal = bool(enabled)
        return self

    def threads(self, n: int):
        self._threads = max(1, int(n))
        return self

    def pipeline_config(self) -> PipelineConfig:
        """Freeze the current settings.

        Raises
        ------
        ConfigurationError
            If the settings do not validate (e.g. min_t > max_t).
        """
        try:
            return self._freeze()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid pipeline settings: {e}") from e

    def _freeze(self) -> PipelineConfig:
        return PipelineConfig(
            reduction=self._reduction,
            filter=FilterConfig(spec=self._filter_spec, channels=dict(self._channel_filters)),
            resolution_factor=self._resolution_factor,
            vertical_reflection=self._vertical,
            horizontal_reflection=self._horizontal,
            threads=self._threads,
            min_t=self._min_t,
            max_t=self._max_t,
        )

    # ------------------------------------------------------------------
    # Error reporting
    # ------------------------------------------------------------------

    @staticmethod
    def _require_numeric(volume) -> None:
        if not volume.is_numeric:
            raise TypeMismatchError(
                f"Source '{volume.name}' has non-numeric samples ({volume.dtype})"
            )

    def _check_channel_filters(self, n_channels: int) -> None:
        for channel in self._channel_filters:
            if channel >= n_channels:
                raise ConfigurationError(
                    f"Channel filter for channel {channel} but source has {n_channels} channel(s)"
                )

    def _report(self, error: KymoError) -> None:
        """Report once at the top level: log, remember, optionally re-raise."""
        self.last_error = error
        logger.error("%s failed: %s: %s", type(self).__name__, type(error).__name__, error)
        if self.policy == FailurePolicy.RAISE:
            raise error
