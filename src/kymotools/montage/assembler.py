"""MontageAssembler: tile frames, or reduced frame groups, onto a canvas.

Reduction and reflection are fused into the tiling pass: each tile's source
frames are read (through the reflected coordinate), accumulated and written
straight into the canvas. No reduced volume is materialized.
"""

import logging
from typing import Iterator, List, Optional, Tuple

import numpy as np

from kymotools.contracts import assert_montage
from kymotools.contracts.failure import ConfigurationError
from kymotools.montage.layout import MontageLayout
from kymotools.pipeline.reduction import plan_frames, resolve_time_range
from kymotools.schemas.specs import NoReduction
from kymotools.volume.axes import Axis, cast_like
from kymotools.volume.labeled import LabeledVolume

__all__ = ["MontageAssembler", "iter_tiles"]

logger = logging.getLogger(__name__)


def iter_tiles(reduction, start: int, end: int) -> Iterator[Tuple[int, List[int]]]:
    """Yield (tile index, source frames) pairs for the frame range."""
    for index, frames in enumerate(plan_frames(reduction, start, end)):
        yield index, frames


class MontageAssembler:
    """Lay out selected frames of a volume in a grid.

    Parameters
    ----------
    spacing : int
        Gap between tiles in pixels.
    columns : int
        Fixed column count; <= 0 derives it from ``horizontal_layout``.
    horizontal_layout : bool
        One row of tiles (True) or one column (False) when ``columns`` <= 0.
    reduction : ReductionSpec
        Skip/average/sum applied while tiling.
    vertical_reflection, horizontal_reflection : bool
        Flip every tile as it is read.
    min_t, max_t : int, optional
        Inclusive frame range.
    """

    def __init__(self, spacing: int = 0, columns: int = -1, horizontal_layout: bool = True,
                 reduction=None, vertical_reflection: bool = False,
                 horizontal_reflection: bool = False,
                 min_t: Optional[int] = None, max_t: Optional[int] = None):
        self.spacing = spacing
        self.columns = columns
        self.horizontal_layout = horizontal_layout
        self.reduction = reduction if reduction is not None else NoReduction()
        self.vertical_reflection = vertical_reflection
        self.horizontal_reflection = horizontal_reflection
        self.min_t = min_t
        self.max_t = max_t
        self.layout: Optional[MontageLayout] = None

    def _read(self, frames: np.ndarray) -> np.ndarray:
        # frames: (n, y, x, c); reflection maps the read coordinate only
        rows = slice(None, None, -1) if self.vertical_reflection else slice(None)
        cols = slice(None, None, -1) if self.horizontal_reflection else slice(None)
        return frames[:, rows, cols, :]

    def assemble(self, source: LabeledVolume) -> LabeledVolume:
        """Build the montage canvas.

        Raises
        ------
        ConfigurationError
            If the source lacks x/y/time or the time range selects no frames.
        """
        missing = [a.value for a in (Axis.X, Axis.Y, Axis.TIME) if not source.has_axis(a)]
        if missing:
            raise ConfigurationError(f"Montage source '{source.name}' lacks axes {missing}")

        start, end = resolve_time_range(source.size(Axis.TIME), self.min_t, self.max_t)
        tiles = list(iter_tiles(self.reduction, start, end))
        if not tiles:
            raise ConfigurationError("Montage time range yields zero frames")

        data = source.ordered((Axis.TIME, Axis.Y, Axis.X, Axis.CHANNEL))
        _, frame_height, frame_width, n_channels = data.shape
        layout = MontageLayout.for_tiles(
            len(tiles), frame_width, frame_height,
            spacing=self.spacing, columns=self.columns,
            horizontal=self.horizontal_layout,
        )
        self.layout = layout

        width, height = layout.canvas_size
        canvas = np.zeros((height, width, n_channels), dtype=source.dtype)
        method = self.reduction.method

        for index, frames in tiles:
            x0, y0 = layout.tile_origin(index)
            block = self._read(data[frames])
            if method in ("average", "sum"):
                accumulated = block.astype(np.float64).sum(axis=0)
                if method == "average":
                    accumulated /= len(frames)
                tile = cast_like(accumulated, source.dtype)
            else:
                tile = block[0]
            canvas[y0:y0 + frame_height, x0:x0 + frame_width, :] = tile

        axes = [Axis.Y, Axis.X, Axis.CHANNEL]
        if not source.has_axis(Axis.CHANNEL):
            canvas = canvas[..., 0]
            axes = axes[:-1]

        result = LabeledVolume.from_array(
            canvas, axes,
            name=f"{source.name} montage" if source.name else "montage",
            calibration={Axis.X: source.calibration(Axis.X),
                         Axis.Y: source.calibration(Axis.Y)},
        )
        assert_montage(result, layout, source)
        logger.info("Montage: %d tile(s) in %d x %d grid, canvas %d x %d",
                    layout.n_tiles, layout.rows, layout.columns, width, height)
        return result
