"""Source-volume providers.

A provider turns (metadata UID, interval, time range) into a LabeledVolume
cut out of the registered source stacks. Stacks are loaded lazily into a
SourceCache owned by the provider; nothing is held at module level.
"""

import logging
import threading
from pathlib import Path as FilePath
from typing import Callable, Dict, Hashable, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

import numpy as np

from kymotools.contracts.failure import ConfigurationError, TypeMismatchError
from kymotools.pipeline.resolution import sample_bilinear
from kymotools.regions.shapes import Interval
from kymotools.volume.axes import Axis, AxisCalibration, cast_like
from kymotools.volume.io import load_volume
from kymotools.volume.labeled import LabeledVolume

__all__ = ["SourceVolumeProvider", "SourceCache", "ChannelSource", "ArraySourceProvider"]

logger = logging.getLogger(__name__)


class SourceVolumeProvider(Protocol):
    """Produces region volumes for the builders.

    Implementations return None (after logging why) when the sources cannot
    be combined, e.g. channels with different sample types.
    """

    def fetch(self, metadata_uid: str, interval: Interval,
              min_t: Optional[int] = None,
              max_t: Optional[int] = None) -> Optional[LabeledVolume]:
        ...


class SourceCache:
    """Loaded source stacks keyed by (metadata UID, channel name).

    Populated on first use, emptied by the owner with ``clear()``.
    """

    def __init__(self):
        self._entries: Dict[Hashable, np.ndarray] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_load(self, key: Hashable, loader: Callable[[], np.ndarray]) -> np.ndarray:
        with self._lock:
            if key in self._entries:
                self.hits += 1
                return self._entries[key]
        stack = loader()
        with self._lock:
            self.misses += 1
            self._entries.setdefault(key, stack)
            return self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.debug("Source cache cleared")

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class ChannelSource:
    """One channel's (time, y, x) stack plus its drift correction.

    Parameters
    ----------
    name : str
        Channel name, unique within a metadata UID.
    stack : array-like, optional
        In-memory (time, y, x) stack.
    path : str or Path, optional
        NetCDF file written by ``save_volume`` holding a (time, y, x) volume.
        Used when ``stack`` is not given; read on first fetch.
    drift : array-like of shape (time, 2), optional
        Per-frame (dx, dy) offsets. A drift-corrected pixel (x, y) reads
        the raw frame at (x + dx, y + dy).
    single_time_point : int, optional
        Serve this frame for every requested time point.
    """

    def __init__(self, name: str, stack=None, path: Union[str, FilePath, None] = None,
                 drift=None, single_time_point: Optional[int] = None):
        if stack is None and path is None:
            raise ConfigurationError(f"Channel '{name}' needs a stack or a path")
        self.name = name
        self._stack = None if stack is None else np.asarray(stack)
        self.path = path
        self.drift = None if drift is None else np.asarray(drift, dtype=np.float64)
        if self.drift is not None and (self.drift.ndim != 2 or self.drift.shape[1] != 2):
            raise ConfigurationError(
                f"Channel '{name}' drift must be (time, 2), got shape {self.drift.shape}"
            )
        self.single_time_point = single_time_point
        if self._stack is not None and self._stack.ndim == 3:
            self.check_drift(self._stack.shape[0])

    def load(self) -> np.ndarray:
        if self._stack is not None:
            stack = self._stack
        else:
            stack = load_volume(self.path).ordered((Axis.TIME, Axis.Y, Axis.X))
        if stack.ndim != 3:
            raise ConfigurationError(
                f"Channel '{self.name}' must be (time, y, x), got shape {stack.shape}"
            )
        return stack

    def check_drift(self, n_frames: int) -> None:
        """Raise ConfigurationError unless there is one drift row per frame."""
        if self.drift is not None and len(self.drift) < n_frames:
            raise ConfigurationError(
                f"Channel '{self.name}' has drift for {len(self.drift)} frame(s) "
                f"but its stack has {n_frames}"
            )

    def offset(self, t: int) -> Tuple[float, float]:
        if self.drift is None:
            return 0.0, 0.0
        dx, dy = self.drift[t]
        return float(dx), float(dy)


class ArraySourceProvider:
    """SourceVolumeProvider over registered channel stacks.

    Examples
    --------
    >>> provider = ArraySourceProvider()
    >>> provider.register("movie", [ChannelSource("488", stack=frames)])
    >>> region = provider.fetch("movie", Interval(min_x=0, min_y=0, max_x=19, max_y=19))
    """

    def __init__(self, cache: Optional[SourceCache] = None, correct_drift: bool = True):
        self.cache = cache if cache is not None else SourceCache()
        self.correct_drift = correct_drift
        self.last_error: Optional[Exception] = None
        self._sources: Dict[str, List[ChannelSource]] = {}
        self._calibration: Dict[str, Mapping[Axis, AxisCalibration]] = {}

    def register(self, metadata_uid: str, channels: Sequence[ChannelSource],
                 calibration: Optional[Mapping[Axis, AxisCalibration]] = None) -> None:
        if not channels:
            raise ConfigurationError(f"No channels given for '{metadata_uid}'")
        self._sources[metadata_uid] = list(channels)
        self._calibration[metadata_uid] = dict(calibration or {})

    def fetch(self, metadata_uid: str, interval: Interval,
              min_t: Optional[int] = None,
              max_t: Optional[int] = None) -> Optional[LabeledVolume]:
        """Cut ``interval`` out of every channel for frames [min_t..max_t].

        ``max_t`` unset means the last frame; ``min_t`` after ``max_t``
        falls back to 0. One channel yields (time, y, x), several add a
        channel axis.

        Raises
        ------
        ConfigurationError
            If ``metadata_uid`` was never registered or a channel's drift
            does not cover its frames.
        """
        self.last_error = None
        if metadata_uid not in self._sources:
            raise ConfigurationError(f"No sources registered for '{metadata_uid}'")
        channels = self._sources[metadata_uid]

        stacks = [self.cache.get_or_load((metadata_uid, ch.name), ch.load) for ch in channels]
        dtypes = sorted({str(s.dtype) for s in stacks})
        if len(dtypes) > 1:
            self.last_error = TypeMismatchError(
                f"Sources for '{metadata_uid}' have mixed sample types {dtypes}"
            )
            logger.error("Cannot combine sources: %s", self.last_error)
            return None

        n_frames = stacks[0].shape[0]
        if self.correct_drift:
            for channel, stack in zip(channels, stacks):
                channel.check_drift(stack.shape[0])
        if max_t is None or max_t >= n_frames:
            max_t = n_frames - 1
        if min_t is None or min_t > max_t:
            min_t = 0
        frames = range(min_t, max_t + 1)

        xs = np.arange(interval.min_x, interval.max_x + 1, dtype=np.float64)
        ys = np.arange(interval.min_y, interval.max_y + 1, dtype=np.float64)
        dtype = stacks[0].dtype
        out = np.zeros((len(frames), len(ys), len(xs), len(channels)), dtype=dtype)

        for c, (channel, stack) in enumerate(zip(channels, stacks)):
            for k, t in enumerate(frames):
                frame = channel.single_time_point if channel.single_time_point is not None else t
                dx, dy = channel.offset(t) if self.correct_drift else (0.0, 0.0)
                values = sample_bilinear(stack[frame], ys[:, None] + dy, xs[None, :] + dx)
                out[k, :, :, c] = cast_like(values, dtype)

        axes = [Axis.TIME, Axis.Y, Axis.X, Axis.CHANNEL]
        if len(channels) == 1:
            out = out[..., 0]
            axes = axes[:-1]

        volume = LabeledVolume.from_array(
            out, axes, name=metadata_uid,
            calibration=self._calibration[metadata_uid],
        )
        logger.info("Fetched %s for interval %s", volume, interval)
        return volume
