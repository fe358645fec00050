"""ArraySourceProvider tests: cropping, drift, caching and sample-type checks."""

import numpy as np
import pytest

from kymotools.contracts import ConfigurationError, TypeMismatchError
from kymotools.regions import ArraySourceProvider, ChannelSource, Interval, SourceCache
from kymotools.volume import Axis, AxisCalibration, LabeledVolume, save_volume

pytestmark = pytest.mark.unit


def _x_ramp(time_len=3, shape=(10, 12)):
    """Stack whose value is the x coordinate, identical in every frame."""
    row = np.arange(shape[1], dtype=np.float32)
    return np.broadcast_to(row, (time_len,) + shape).copy()


@pytest.fixture
def box():
    return Interval(min_x=2, min_y=1, max_x=5, max_y=3)


class TestFetch:

    def test_single_channel_crop(self, box):
        provider = ArraySourceProvider()
        provider.register("movie", [ChannelSource("c0", stack=_x_ramp())],
                          calibration={Axis.X: AxisCalibration(scale=0.2, unit="um")})
        volume = provider.fetch("movie", box)

        assert volume.dims == (Axis.TIME, Axis.Y, Axis.X)
        assert volume.shape == (3, 3, 4)
        assert volume.name == "movie"
        np.testing.assert_array_equal(volume.values[0, 0], [2, 3, 4, 5])
        assert volume.calibration(Axis.X).unit == "um"

    def test_multi_channel_adds_axis(self, box):
        provider = ArraySourceProvider()
        stack = _x_ramp()
        provider.register("movie", [ChannelSource("a", stack=stack),
                                    ChannelSource("b", stack=stack * 2)])
        volume = provider.fetch("movie", box)

        assert volume.dims == (Axis.TIME, Axis.Y, Axis.X, Axis.CHANNEL)
        np.testing.assert_array_equal(volume.values[1, 2, :, 1], [4, 6, 8, 10])

    def test_outside_source_is_zero(self):
        provider = ArraySourceProvider()
        provider.register("movie", [ChannelSource("c0", stack=_x_ramp())])
        volume = provider.fetch("movie", Interval(min_x=-2, min_y=0, max_x=1, max_y=0))
        np.testing.assert_array_equal(volume.values[0, 0], [0, 0, 0, 1])

    def test_time_range(self, box):
        provider = ArraySourceProvider()
        provider.register("movie", [ChannelSource("c0", stack=_x_ramp(time_len=5))])

        assert provider.fetch("movie", box, min_t=1).size(Axis.TIME) == 4
        assert provider.fetch("movie", box, min_t=1, max_t=99).size(Axis.TIME) == 4
        # min_t after max_t falls back to the first frame
        assert provider.fetch("movie", box, min_t=3, max_t=1).size(Axis.TIME) == 2

    def test_drift_correction(self, box):
        """A corrected pixel (x, y) reads the raw frame at (x + dx, y + dy)."""
        drift = np.array([[0.0, 0.0], [1.0, 0.0], [0.5, 0.0]])
        channel = ChannelSource("c0", stack=_x_ramp(), drift=drift)

        provider = ArraySourceProvider()
        provider.register("movie", [channel])
        volume = provider.fetch("movie", box)
        np.testing.assert_allclose(volume.values[0, 0], [2, 3, 4, 5])
        np.testing.assert_allclose(volume.values[1, 0], [3, 4, 5, 6])
        np.testing.assert_allclose(volume.values[2, 0], [2.5, 3.5, 4.5, 5.5])

        raw = ArraySourceProvider(correct_drift=False)
        raw.register("movie", [channel])
        np.testing.assert_allclose(raw.fetch("movie", box).values[1, 0], [2, 3, 4, 5])

    def test_single_time_point(self, box):
        stack = _x_ramp()
        stack[0] += 100
        provider = ArraySourceProvider()
        provider.register("movie", [ChannelSource("c0", stack=stack, single_time_point=0)])
        volume = provider.fetch("movie", box)
        assert (volume.values >= 100).all()

    def test_mixed_sample_types(self, box):
        provider = ArraySourceProvider()
        provider.register("movie", [
            ChannelSource("a", stack=np.zeros((2, 5, 5), dtype=np.uint8)),
            ChannelSource("b", stack=np.zeros((2, 5, 5), dtype=np.uint16)),
        ])
        assert provider.fetch("movie", box) is None
        assert isinstance(provider.last_error, TypeMismatchError)

    def test_unregistered(self, box):
        with pytest.raises(ConfigurationError, match="No sources registered"):
            ArraySourceProvider().fetch("nope", box)

    def test_register_requires_channels(self):
        with pytest.raises(ConfigurationError):
            ArraySourceProvider().register("movie", [])


class TestChannelSource:

    def test_needs_stack_or_path(self):
        with pytest.raises(ConfigurationError):
            ChannelSource("c0")

    def test_rejects_wrong_rank(self):
        with pytest.raises(ConfigurationError, match="must be"):
            ChannelSource("c0", stack=np.zeros((4, 4))).load()

    def test_short_drift_rejected(self):
        """A drift table shorter than the stack is a configuration error, not an IndexError."""
        with pytest.raises(ConfigurationError, match="drift for 2 frame"):
            ChannelSource("c0", stack=_x_ramp(time_len=3), drift=np.zeros((2, 2)))

    def test_drift_shape_checked(self):
        with pytest.raises(ConfigurationError, match=r"\(time, 2\)"):
            ChannelSource("c0", stack=_x_ramp(), drift=np.zeros(3))

    @pytest.mark.integration
    def test_short_drift_for_file_stack_raises_on_fetch(self, temp_dir, box):
        source = LabeledVolume.from_array(_x_ramp(), (Axis.TIME, Axis.Y, Axis.X), name="c0")
        path = save_volume(source, temp_dir / "c0.nc")

        provider = ArraySourceProvider()
        provider.register("movie", [ChannelSource("c0", path=path, drift=np.zeros((1, 2)))])
        with pytest.raises(ConfigurationError, match="drift"):
            provider.fetch("movie", box)

    @pytest.mark.integration
    def test_loads_from_netcdf(self, temp_dir, box):
        """A stack written by save_volume is read on first fetch."""
        source = LabeledVolume.from_array(_x_ramp(), (Axis.TIME, Axis.Y, Axis.X), name="c0")
        path = save_volume(source, temp_dir / "c0.nc")

        provider = ArraySourceProvider()
        provider.register("movie", [ChannelSource("c0", path=path)])
        volume = provider.fetch("movie", box)
        np.testing.assert_array_equal(volume.values[2, 1], [2, 3, 4, 5])


class TestSourceCache:

    def test_loads_once(self, box):
        cache = SourceCache()
        provider = ArraySourceProvider(cache=cache)
        provider.register("movie", [ChannelSource("a", stack=_x_ramp()),
                                    ChannelSource("b", stack=_x_ramp())])
        provider.fetch("movie", box)
        provider.fetch("movie", box)

        assert cache.misses == 2
        assert cache.hits == 2
        assert ("movie", "a") in cache

    def test_clear(self):
        cache = SourceCache()
        cache.get_or_load("k", lambda: np.zeros(3))
        cache.clear()
        assert len(cache) == 0
