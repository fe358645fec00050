"""Montage grid layout."""

import math
from typing import Tuple

from pydantic import Field

from kymotools.contracts.failure import ConfigurationError
from kymotools.schemas.base import FrozenModel

__all__ = ["MontageLayout"]


class MontageLayout(FrozenModel):
    """Rows, columns and pixel geometry of a montage grid.

    Examples
    --------
    >>> layout = MontageLayout.for_tiles(7, frame_width=10, frame_height=8, columns=3)
    >>> layout.rows, layout.columns
    (3, 3)
    >>> layout.cell(4), layout.tile_origin(4)
    ((1, 1), (10, 8))
    """
    n_tiles: int = Field(ge=1)
    columns: int = Field(ge=1)
    rows: int = Field(ge=1)
    frame_width: int = Field(ge=1)
    frame_height: int = Field(ge=1)
    spacing: int = Field(0, ge=0)

    @classmethod
    def for_tiles(cls, n_tiles: int, frame_width: int, frame_height: int,
                  spacing: int = 0, columns: int = -1,
                  horizontal: bool = True) -> "MontageLayout":
        """Columns are ``min(columns, n)`` when columns > 0, else ``n`` for a
        horizontal strip or 1 for a vertical one."""
        if n_tiles < 1:
            raise ConfigurationError("Montage needs at least one tile")
        if columns > 0:
            cols = min(columns, n_tiles)
        else:
            cols = n_tiles if horizontal else 1
        rows = math.ceil(n_tiles / cols)
        return cls(n_tiles=n_tiles, columns=cols, rows=rows,
                   frame_width=frame_width, frame_height=frame_height,
                   spacing=spacing)

    @property
    def canvas_size(self) -> Tuple[int, int]:
        """(width, height) in pixels."""
        width = self.columns * self.frame_width + (self.columns - 1) * self.spacing
        height = self.rows * self.frame_height + (self.rows - 1) * self.spacing
        return width, height

    def cell(self, index: int) -> Tuple[int, int]:
        """(row, column) of tile ``index``."""
        return index // self.columns, index % self.columns

    def tile_origin(self, index: int) -> Tuple[int, int]:
        """(x, y) of the tile's top-left pixel on the canvas."""
        row, col = self.cell(index)
        return (col * (self.frame_width + self.spacing),
                row * (self.frame_height + self.spacing))
