"""Montage grid layout tests."""

import pytest

from kymotools.contracts import ConfigurationError
from kymotools.montage import MontageLayout

pytestmark = pytest.mark.unit


class TestMontageLayout:

    def test_fixed_columns(self):
        """Seven tiles in three columns need three rows."""
        layout = MontageLayout.for_tiles(7, frame_width=10, frame_height=8, spacing=2, columns=3)

        assert (layout.rows, layout.columns) == (3, 3)
        assert layout.cell(4) == (1, 1)
        assert layout.tile_origin(4) == (10 + 2, 8 + 2)
        assert layout.canvas_size == (3 * 10 + 2 * 2, 3 * 8 + 2 * 2)

    def test_columns_capped_by_tiles(self):
        layout = MontageLayout.for_tiles(2, frame_width=5, frame_height=5, columns=6)
        assert layout.columns == 2
        assert layout.rows == 1

    def test_horizontal_strip(self):
        layout = MontageLayout.for_tiles(4, frame_width=5, frame_height=3)
        assert (layout.rows, layout.columns) == (1, 4)
        assert layout.tile_origin(3) == (15, 0)

    def test_vertical_strip(self):
        layout = MontageLayout.for_tiles(4, frame_width=5, frame_height=3, spacing=1,
                                         horizontal=False)
        assert (layout.rows, layout.columns) == (4, 1)
        assert layout.tile_origin(2) == (0, 8)
        assert layout.canvas_size == (5, 4 * 3 + 3)

    def test_zero_tiles_rejected(self):
        with pytest.raises(ConfigurationError, match="at least one tile"):
            MontageLayout.for_tiles(0, frame_width=5, frame_height=5, columns=2)
