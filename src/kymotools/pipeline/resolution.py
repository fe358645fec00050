"""Resolution scaling by bilinear interpolation.

The input is treated as zero beyond its bounds, so the last output rows and
columns blend towards 0 just as sampling through a zero-extended view does.
"""

import math
from typing import Tuple

import numpy as np

from kymotools.volume.axes import cast_like
from kymotools.volume.labeled import LabeledVolume

__all__ = ["scaled_size", "sample_bilinear", "rescale_plane", "rescale"]


def scaled_size(size: int, factor: float) -> int:
    """``round(size * factor)``, halves rounded up."""
    return int(math.floor(size * factor + 0.5))


def sample_bilinear(plane: np.ndarray, rows: np.ndarray, cols: np.ndarray) -> np.ndarray:
    """Bilinear samples of ``plane`` at fractional (row, col) coordinates.

    Neighbors outside the plane contribute zero. ``rows`` and ``cols``
    broadcast against each other; the result is float64.
    """
    rows = np.asarray(rows, dtype=np.float64)
    cols = np.asarray(cols, dtype=np.float64)
    n_rows, n_cols = plane.shape
    # one ring of zeros on every side covers the out-of-bounds neighbors
    padded = np.zeros((n_rows + 2, n_cols + 2), dtype=np.float64)
    padded[1:-1, 1:-1] = plane

    r0 = np.floor(rows)
    c0 = np.floor(cols)
    wr = rows - r0
    wc = cols - c0
    # shift into padded coordinates and clip anything further out onto the zero ring
    r1 = np.clip(r0 + 2, 0, n_rows + 1).astype(np.intp)
    c1 = np.clip(c0 + 2, 0, n_cols + 1).astype(np.intp)
    r0 = np.clip(r0 + 1, 0, n_rows + 1).astype(np.intp)
    c0 = np.clip(c0 + 1, 0, n_cols + 1).astype(np.intp)

    top = (1.0 - wc) * padded[r0, c0] + wc * padded[r0, c1]
    bottom = (1.0 - wc) * padded[r1, c0] + wc * padded[r1, c1]
    return (1.0 - wr) * top + wr * bottom


def rescale_plane(plane: np.ndarray, factor: float) -> np.ndarray:
    """Resample one plane to ``round(size * factor)`` along both axes."""
    n_rows, n_cols = plane.shape
    out_rows = np.arange(scaled_size(n_rows, factor)) / factor
    out_cols = np.arange(scaled_size(n_cols, factor)) / factor
    values = sample_bilinear(plane, out_rows[:, None], out_cols[None, :])
    return cast_like(values, plane.dtype)


def _plane_shape(volume: LabeledVolume, factor: float) -> Tuple[int, int]:
    row_axis, col_axis = volume.plane_axes()
    return (scaled_size(volume.size(row_axis), factor),
            scaled_size(volume.size(col_axis), factor))


def rescale(volume: LabeledVolume, factor: float) -> LabeledVolume:
    """Scale the plane axes of ``volume`` by ``factor``; other axes unchanged.

    A factor <= 1 returns the input unchanged.
    """
    if factor <= 1.0:
        return volume

    row_axis, col_axis = volume.plane_axes()
    others = [a for a in volume.dims if a not in (row_axis, col_axis)]
    order = others + [row_axis, col_axis]
    source = volume.ordered(order)

    new_rows, new_cols = _plane_shape(volume, factor)
    lead_shape = source.shape[:-2]
    out = np.zeros(lead_shape + (new_rows, new_cols), dtype=volume.dtype)
    for index in np.ndindex(*lead_shape):
        out[index] = rescale_plane(source[index], factor)

    calibration = {
        row_axis: volume.calibration(row_axis).scaled(factor),
        col_axis: volume.calibration(col_axis).scaled(factor),
    }
    return volume.with_values(out, axes=order, calibration=calibration).transposed(volume.dims)
