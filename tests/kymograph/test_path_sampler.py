"""Tests for path geometry and band sampling coordinates."""

import numpy as np
import pytest

from kymotools.contracts import ConfigurationError
from kymotools.kymograph import Path, PathSampler
from kymotools.kymograph.path_sampler import round_half_up

pytestmark = pytest.mark.unit


class TestRoundHalfUp:

    def test_halves_go_up(self):
        np.testing.assert_array_equal(round_half_up([2.5, -2.5, 0.49, 1.5]), [3, -2, 0, 2])


class TestSegment:

    def test_pixel_length_rounds(self):
        """Euclidean length rounded half up: 3-4-5 triangle gives 5."""
        path = Path.straight(0, 0, 3, 4)
        assert path.segments[0].pixel_length == 5

    def test_direction_points_back_to_start(self):
        segment = Path.straight(5, 10, 15, 10).segments[0]
        assert segment.direction == (-1.0, 0.0)
        assert segment.normal == (0.0, 1.0)

    def test_zero_length_direction(self):
        assert Path.straight(3, 3, 3, 3).segments[0].direction == (0.0, 0.0)

    def test_translated(self):
        path = Path.from_points([(1, 2), (4, 6)]).translated(-1, -2)
        seg = path.segments[0]
        assert (seg.start.x, seg.start.y, seg.end.x, seg.end.y) == (0, 0, 3, 4)


class TestPositionSize:

    def test_single_segment_drops_last_pixel(self):
        """One segment of pixel length L samples L - 1 positions."""
        sampler = PathSampler(Path.straight(5, 10, 15, 10), band_width=3)
        assert sampler.position_size == 9

    def test_polyline_shares_joints(self):
        """n segments sample L_total - n + 1 positions."""
        sampler = PathSampler(Path.from_points([(2, 2), (12, 2), (12, 12)]))
        assert sampler.position_size == 19
        assert sampler.segment_offsets == [0, 9]

    def test_band_offsets_centered(self):
        assert PathSampler(Path.straight(0, 0, 10, 0), band_width=3).band_offsets == [-1, 0, 1]
        assert PathSampler(Path.straight(0, 0, 10, 0), band_width=4).band_offsets == [-2, -1, 0, 1]

    def test_non_positive_width_means_one(self):
        assert PathSampler(Path.straight(0, 0, 10, 0), band_width=0).band_width == 1

    def test_empty_path_rejected(self):
        with pytest.raises(ConfigurationError, match="no segments"):
            PathSampler(Path())

    def test_degenerate_path_rejected(self):
        """A path of pixel length 1 samples no positions."""
        with pytest.raises(ConfigurationError, match="no positions"):
            PathSampler(Path.straight(3, 3, 4, 3))

    def test_zero_length_segment_rejected(self):
        """A segment shorter than one pixel would move later segments backwards."""
        with pytest.raises(ConfigurationError, match="shorter than one pixel"):
            PathSampler(Path.straight(3, 3, 3, 3))

    def test_repeated_vertex_adds_no_segment(self):
        """A doubled vertex is collapsed, so positions start at 0 and never go negative."""
        path = Path.from_points([(2, 5), (2, 5), (12, 5)])
        sampler = PathSampler(path)

        assert len(path) == 1
        assert sampler.segment_offsets == [0]
        band = next(sampler.samples())
        assert band.positions.min() == 0
        np.testing.assert_array_equal(band.xs, np.arange(2, 11))

    def test_repeated_inner_vertex_keeps_joint_offsets(self):
        path = Path.from_points([(2, 2), (12, 2), (12, 2), (12, 12)])
        sampler = PathSampler(path)

        assert len(path) == 2
        assert sampler.segment_offsets == [0, 9]
        assert all(band.positions.min() >= 0 for band in sampler.samples())


class TestSamples:

    def test_horizontal_band_coordinates(self):
        """Each band row walks from the start along the path, offset along the normal."""
        sampler = PathSampler(Path.straight(5, 10, 15, 10), band_width=3)
        bands = list(sampler.samples())

        assert len(bands) == 3
        for band, y in zip(bands, (9, 10, 11)):
            np.testing.assert_array_equal(band.positions, np.arange(9))
            np.testing.assert_array_equal(band.xs, np.arange(5, 14))
            np.testing.assert_array_equal(band.ys, np.full(9, y))

    def test_second_segment_starts_at_joint(self):
        sampler = PathSampler(Path.from_points([(2, 2), (12, 2), (12, 12)]))
        first, second = list(sampler.samples())

        assert first.positions[0] == 0
        assert second.positions[0] == 9
        assert second.positions[-1] == 18
        # vertical segment walks down in y at fixed x
        np.testing.assert_array_equal(second.xs, np.full(len(second), 12))
        np.testing.assert_array_equal(second.ys, np.arange(2, 12))

    def test_inside_excludes_first_row_and_column(self):
        """Bounds are exclusive at 0 as well as at the extent."""
        sampler = PathSampler(Path.straight(0, 5, 10, 5))
        band = next(sampler.samples())
        inside = band.inside(x_size=8, y_size=20)

        # xs are 0..8: 0 and 8 fall outside an 8-pixel-wide source
        assert not inside[0]
        assert inside[1:8].all()
        assert not inside[8]
