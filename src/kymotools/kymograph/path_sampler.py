"""Path geometry and band sampling.

A Path is a polyline of Segments. For a band of width ``w`` the sampler
produces, for every segment and every perpendicular offset, the integer
pixel coordinates of the offset line and where along the concatenated
path each sample lands.

Conventions
-----------
- A segment's pixel length is its Euclidean length rounded half up.
- The direction vector points from the segment's end back to its start,
  ``((x1 - x2) / len, (y1 - y2) / len)``, and the band normal is
  ``(dy, -dx)``. Offsets are ``i - w // 2`` for ``i`` in ``0..w-1``.
- Offset line endpoints are truncated to integers before rasterizing.
- Consecutive segments share their joint vertex: each appended segment
  starts ``length - 1`` positions after the previous one.
"""

import logging
import math
from typing import Iterator, List, Sequence, Tuple

import numpy as np
from pydantic import Field

from kymotools.contracts.failure import ConfigurationError
from kymotools.schemas.base import FrozenModel

__all__ = ["PathPoint", "Segment", "Path", "BandSample", "PathSampler", "round_half_up"]

logger = logging.getLogger(__name__)


def round_half_up(value):
    """Round to the nearest integer, halves towards +infinity."""
    return np.floor(np.asarray(value, dtype=np.float64) + 0.5).astype(np.int64)


class PathPoint(FrozenModel):
    """Pixel-space coordinate."""
    x: float
    y: float


class Segment(FrozenModel):
    """Straight piece of a path from ``start`` to ``end``."""
    start: PathPoint
    end: PathPoint

    @property
    def length(self) -> float:
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)

    @property
    def pixel_length(self) -> int:
        return int(math.floor(self.length + 0.5))

    @property
    def direction(self) -> Tuple[float, float]:
        """Unit vector from end to start; (0, 0) for a zero-length segment."""
        length = self.length
        if length == 0:
            return 0.0, 0.0
        return (self.start.x - self.end.x) / length, (self.start.y - self.end.y) / length

    @property
    def normal(self) -> Tuple[float, float]:
        dx, dy = self.direction
        return dy, -dx


class Path(FrozenModel):
    """Ordered polyline. Continuity between segments is not validated."""
    segments: Tuple[Segment, ...] = Field(default_factory=tuple)

    @classmethod
    def straight(cls, x1: float, y1: float, x2: float, y2: float) -> "Path":
        return cls(segments=(Segment(start=PathPoint(x=x1, y=y1),
                                     end=PathPoint(x=x2, y=y2)),))

    @classmethod
    def from_points(cls, points: Sequence[Tuple[float, float]]) -> "Path":
        """Polyline through ``points``; one segment per consecutive pair.

        Pairs that round to zero pixels (a repeated vertex) add no segment.
        """
        vertices = [PathPoint(x=float(x), y=float(y)) for x, y in points]
        segments = []
        for a, b in zip(vertices[:-1], vertices[1:]):
            segment = Segment(start=a, end=b)
            if segment.pixel_length == 0:
                logger.debug("Skipping zero-length segment at (%s, %s)", a.x, a.y)
                continue
            segments.append(segment)
        return cls(segments=tuple(segments))

    def translated(self, dx: float, dy: float) -> "Path":
        """Same path shifted by (dx, dy), e.g. into a cropped region's frame."""
        def move(p):
            return PathPoint(x=p.x + dx, y=p.y + dy)
        return Path(segments=tuple(
            Segment(start=move(s.start), end=move(s.end)) for s in self.segments
        ))

    @property
    def total_pixel_length(self) -> int:
        return sum(s.pixel_length for s in self.segments)

    def __len__(self) -> int:
        return len(self.segments)


class BandSample:
    """Sample coordinates of one (segment, band offset) row.

    Attributes
    ----------
    segment_index, band_index : int
        Which segment and which BandOffset slot (0..w-1).
    positions : np.ndarray
        Destination indices along the concatenated path.
    xs, ys : np.ndarray
        Rounded source pixel coordinates, same length as ``positions``.
    """

    __slots__ = ("segment_index", "band_index", "positions", "xs", "ys")

    def __init__(self, segment_index: int, band_index: int,
                 positions: np.ndarray, xs: np.ndarray, ys: np.ndarray):
        self.segment_index = segment_index
        self.band_index = band_index
        self.positions = positions
        self.xs = xs
        self.ys = ys

    def inside(self, x_size: int, y_size: int) -> np.ndarray:
        """Mask of samples strictly inside the source: ``0 < x < x_size``, ``0 < y < y_size``.

        Column and row 0 are excluded as well as anything past the extent.
        """
        return (self.xs > 0) & (self.xs < x_size) & (self.ys > 0) & (self.ys < y_size)

    def __len__(self) -> int:
        return len(self.positions)


class PathSampler:
    """Band sampling grid for a Path.

    Parameters
    ----------
    path : Path
        Non-empty polyline.
    band_width : int
        Number of perpendicular offsets. Values <= 0 are treated as 1.

    Raises
    ------
    ConfigurationError
        If the path has no segments, a segment is shorter than one pixel,
        or its sampled length is not positive.
    """

    def __init__(self, path: Path, band_width: int = 1):
        if len(path.segments) == 0:
            raise ConfigurationError("Path has no segments")
        for index, segment in enumerate(path.segments):
            if segment.pixel_length == 0:
                raise ConfigurationError(
                    f"Segment {index} of the path is shorter than one pixel"
                )
        self.path = path
        self.band_width = band_width if band_width > 0 else 1
        if self.position_size <= 0:
            raise ConfigurationError(
                f"Path samples no positions (total pixel length {path.total_pixel_length})"
            )

    @property
    def band_offsets(self) -> List[int]:
        half = self.band_width // 2
        return [i - half for i in range(self.band_width)]

    @property
    def position_size(self) -> int:
        """Length of the Position axis.

        One segment: ``L - 1``. Several segments: ``L_total - n + 1``.
        """
        n = len(self.path.segments)
        total = self.path.total_pixel_length
        if n == 1:
            return total - n
        return total - n + 1

    @property
    def segment_offsets(self) -> List[int]:
        """Position index at which each segment's samples start."""
        offsets = []
        offset = 0
        for segment in self.path.segments:
            offsets.append(offset)
            offset += segment.pixel_length - 1
        return offsets

    def samples(self) -> Iterator[BandSample]:
        """Yield one BandSample per (segment, band offset)."""
        n_segments = len(self.path.segments)
        # samples beyond this index within a segment are cut
        limit = self.path.total_pixel_length - n_segments

        for s_index, (segment, offset) in enumerate(zip(self.path.segments,
                                                        self.segment_offsets)):
            length = segment.pixel_length
            count = max(0, min(length, limit))
            if count == 0:
                continue
            dx, dy = segment.direction
            steps = np.arange(count, dtype=np.float64)
            for b_index, n in enumerate(self.band_offsets):
                x1 = math.trunc(segment.start.x + n * dy)
                y1 = math.trunc(segment.start.y - n * dx)
                # walk from the offset start towards the offset end, one pixel per step
                xs = round_half_up(x1 - steps * dx)
                ys = round_half_up(y1 - steps * dy)
                yield BandSample(s_index, b_index, offset + steps.astype(np.intp), xs, ys)

    def __repr__(self) -> str:
        return (f"PathSampler(segments={len(self.path.segments)}, "
                f"width={self.band_width}, positions={self.position_size})")
