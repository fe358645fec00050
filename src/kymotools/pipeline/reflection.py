"""Vertical and horizontal reflection of the plane axes."""

import numpy as np

from kymotools.volume.labeled import LabeledVolume

__all__ = ["reflect"]


def reflect(volume: LabeledVolume, vertical: bool = False,
            horizontal: bool = False) -> LabeledVolume:
    """Flip the row axis (vertical) and/or the column axis (horizontal).

    For an image volume rows are Y and columns X. Applying the same
    reflection twice returns the original data.
    """
    if not (vertical or horizontal):
        return volume

    row_axis, col_axis = volume.plane_axes()
    flip = []
    if vertical:
        flip.append(volume.axis_index(row_axis))
    if horizontal:
        flip.append(volume.axis_index(col_axis))
    return volume.with_values(np.flip(volume.values, axis=tuple(flip)).copy())
