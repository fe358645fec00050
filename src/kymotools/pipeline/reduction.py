"""Frame reduction: skip, average or sum consecutive time frames.

The frame plan (which source frames feed each output frame) is shared with
the montage tiler, which consumes it lazily instead of materializing a
reduced volume.
"""

import logging
from typing import Iterator, List, Optional, Tuple

import numpy as np

from kymotools.contracts.failure import ConfigurationError
from kymotools.volume.axes import Axis, cast_like
from kymotools.volume.labeled import LabeledVolume

__all__ = ["resolve_time_range", "plan_frames", "reduce_frames"]

logger = logging.getLogger(__name__)


def resolve_time_range(n_frames: int, min_t: Optional[int] = None,
                       max_t: Optional[int] = None) -> Tuple[int, int]:
    """Inclusive (start, end) frame range.

    ``start`` is ``min_t`` or 0. ``end`` is ``max_t`` when it is set and
    inside the volume, otherwise the last frame.

    Raises
    ------
    ConfigurationError
        If the range holds no frames.
    """
    start = min_t if min_t is not None else 0
    end = max_t if (max_t is not None and max_t < n_frames) else n_frames - 1
    if n_frames <= 0 or start > end:
        raise ConfigurationError(
            f"Time range [{start}..{end}] selects no frames from {n_frames}"
        )
    return start, end


def plan_frames(spec, start: int, end: int) -> Iterator[List[int]]:
    """Yield the source frame indices behind each output frame.

    Skip and None yield one frame per output; Average and Sum yield
    consecutive groups, the last one possibly shorter.

    Examples
    --------
    >>> list(plan_frames(SkipFrames(factor=2), 0, 4))
    [[0], [2], [4]]
    >>> list(plan_frames(AverageFrames(group=2), 0, 4))
    [[0, 1], [2, 3], [4]]
    """
    if spec.method == "skip":
        for t in range(start, end + 1, spec.factor):
            yield [t]
    elif spec.method in ("average", "sum"):
        for t in range(start, end + 1, spec.group):
            yield list(range(t, min(t + spec.group, end + 1)))
    else:
        for t in range(start, end + 1):
            yield [t]


def reduce_frames(volume: LabeledVolume, spec, min_t: Optional[int] = None,
                  max_t: Optional[int] = None) -> LabeledVolume:
    """Apply ``spec`` along the Time axis of ``volume``.

    ``None`` reduction returns the input unchanged. Average and Sum are
    computed in float64 per (plane, channel) cell and written back in the
    input's sample type.
    """
    if spec.method == "none":
        return volume

    t_axis = volume.axis_index(Axis.TIME)
    start, end = resolve_time_range(volume.size(Axis.TIME), min_t, max_t)
    groups = list(plan_frames(spec, start, end))
    source = volume.values

    if spec.method == "skip":
        values = np.take(source, [g[0] for g in groups], axis=t_axis)
    else:
        frames = []
        for group in groups:
            block = np.take(source, group, axis=t_axis).astype(np.float64)
            if spec.method == "average":
                frames.append(block.mean(axis=t_axis))
            else:
                frames.append(block.sum(axis=t_axis))
        values = cast_like(np.stack(frames, axis=t_axis), volume.dtype)

    logger.debug("Reduced %s: %s over [%d..%d] -> %d frames",
                 volume.name, spec.method, start, end, len(groups))
    return volume.with_values(values)
