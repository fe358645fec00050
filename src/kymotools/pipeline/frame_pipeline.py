"""FramePipeline: reduction, filtering, resolution and reflection.

Stages always run in the order Reduction -> Filter -> Resolution ->
Reflection. Each stage allocates a fresh volume and leaves its input
untouched. The Filter stage is the only parallel one: it fans out one task
per 2D slice (every combination of the non-plane axes, typically
(time, channel)) through a SliceScheduler.
"""

import logging
from functools import partial
from typing import Iterable, List, Optional, TYPE_CHECKING

import numpy as np

from kymotools.contracts.failure import ConfigurationError, KymoError, TypeMismatchError
from kymotools.pipeline.filters import apply_filter
from kymotools.pipeline.reduction import reduce_frames
from kymotools.pipeline.reflection import reflect
from kymotools.pipeline.resolution import rescale
from kymotools.pipeline.scheduler import SliceScheduler
from kymotools.schemas.specs import PipelineConfig
from kymotools.volume.axes import Axis
from kymotools.volume.labeled import LabeledVolume

if TYPE_CHECKING:
    from kymotools.schemas import InternalConfig

__all__ = ["FramePipeline", "STAGES"]

logger = logging.getLogger(__name__)

STAGES = ("reduction", "filter", "resolution", "reflection")


class FramePipeline:
    """Apply a PipelineConfig to labeled volumes.

    Every public stage takes and returns a LabeledVolume. A volume whose
    sample type is not numeric is returned unchanged and the
    TypeMismatchError is appended to ``errors``; per-slice filter failures
    are appended as StageFailure. Configuration errors (empty time range,
    missing time axis) are raised.

    Parameters
    ----------
    config : PipelineConfig, optional
        Frozen stage settings. Defaults to a no-op pipeline.

    Examples
    --------
    >>> pipeline = FramePipeline(PipelineConfig(filter={"spec": {"method": "median", "radius": 1}}))
    >>> smoothed = pipeline.run(volume)
    >>> pipeline.errors
    []
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config if config is not None else PipelineConfig()
        self.errors: List[KymoError] = []

    @classmethod
    def from_config(cls, config: "InternalConfig") -> "FramePipeline":
        return cls(config.pipeline)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _accepts(self, volume: LabeledVolume, stage: str) -> bool:
        try:
            volume.sample_kind
        except TypeMismatchError as e:
            logger.error("%s skipped for '%s': %s", stage, volume.name, e)
            self.errors.append(e)
            return False
        return True

    def reduce(self, volume: LabeledVolume) -> LabeledVolume:
        """Skip, average or sum frames within [min_t..max_t]."""
        spec = self.config.reduction
        if spec.method == "none" or not self._accepts(volume, "reduction"):
            return volume
        if not volume.has_axis(Axis.TIME):
            raise ConfigurationError(
                f"Cannot reduce frames of '{volume.name}': no 'time' axis"
            )
        return reduce_frames(volume, spec, self.config.min_t, self.config.max_t)

    def filter(self, volume: LabeledVolume) -> LabeledVolume:
        """Filter every 2D slice with the global spec or its channel's override."""
        filter_cfg = self.config.filter
        if filter_cfg.is_noop or not self._accepts(volume, "filter"):
            return volume

        row_axis, col_axis = volume.plane_axes()
        others = [a for a in volume.dims if a not in (row_axis, col_axis)]
        order = others + [row_axis, col_axis]
        source = volume.ordered(order)

        has_channel = Axis.CHANNEL in others
        n_channels = volume.size(Axis.CHANNEL) if has_channel else 1

        if filter_cfg.per_channel:
            specs = {}
            for channel, spec in filter_cfg.channels.items():
                if channel >= n_channels:
                    logger.warning(
                        "Channel %d filter ignored: '%s' has %d channel(s)",
                        channel, volume.name, n_channels,
                    )
                    continue
                specs[channel] = spec
            # unlisted channels pass through
            output = source.copy()
        else:
            specs = {channel: filter_cfg.spec for channel in range(n_channels)}
            output = np.zeros_like(source)

        names = [a.value for a in others]
        tasks = []
        for index in np.ndindex(*source.shape[:-2]):
            channel = index[others.index(Axis.CHANNEL)] if has_channel else 0
            spec = specs.get(channel)
            if spec is None:
                continue
            output[index] = 0
            key = dict(zip(names, index))
            tasks.append((key, partial(_filter_slice, source, output, index, spec)))

        scheduler = SliceScheduler(self.config.threads, name="filter")
        failures = scheduler.run(tasks)
        if failures:
            logger.error("%d of %d filter slices failed for '%s'",
                         len(failures), len(tasks), volume.name)
        self.errors.extend(failures)
        # stages keep their input's axis order
        return volume.with_values(output, axes=order).transposed(volume.dims)

    def rescale(self, volume: LabeledVolume) -> LabeledVolume:
        """Bilinear resampling of the plane axes by ``resolution_factor``."""
        if self.config.resolution_factor <= 1.0 or not self._accepts(volume, "resolution"):
            return volume
        return rescale(volume, self.config.resolution_factor)

    def reflect(self, volume: LabeledVolume) -> LabeledVolume:
        """Flip rows (vertical) and/or columns (horizontal)."""
        vertical = self.config.vertical_reflection
        horizontal = self.config.horizontal_reflection
        if not (vertical or horizontal) or not self._accepts(volume, "reflection"):
            return volume
        return reflect(volume, vertical=vertical, horizontal=horizontal)

    # ------------------------------------------------------------------
    # Whole run
    # ------------------------------------------------------------------

    def run(self, volume: LabeledVolume, stages: Iterable[str] = STAGES) -> LabeledVolume:
        """Apply the requested stages in canonical order.

        Parameters
        ----------
        volume : LabeledVolume
            Input volume, left untouched.
        stages : iterable of str
            Subset of STAGES. Order given here is ignored.
        """
        stages = set(stages)
        unknown = stages - set(STAGES)
        if unknown:
            raise ValueError(f"Unknown pipeline stages: {sorted(unknown)}")

        steps = {
            "reduction": self.reduce,
            "filter": self.filter,
            "resolution": self.rescale,
            "reflection": self.reflect,
        }
        result = volume
        for stage in STAGES:
            if stage in stages:
                result = steps[stage](result)
                logger.debug("After %s: %s", stage, result)
        return result


def _filter_slice(source: np.ndarray, output: np.ndarray, index, spec) -> None:
    output[index] = apply_filter(source[index], spec)
