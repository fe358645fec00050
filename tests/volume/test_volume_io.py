"""NetCDF persistence tests."""

import numpy as np
import pytest

from kymotools.volume import Axis, load_volume, save_volume

pytestmark = pytest.mark.integration


class TestVolumeIO:

    def test_save_and_load(self, ramp_volume, temp_dir):
        """Values, axis order, name and calibration survive a NetCDF write."""
        path = save_volume(ramp_volume, temp_dir / "sub" / "ramp.nc")
        assert path.exists()

        loaded = load_volume(path)
        assert loaded.name == "ramp"
        assert loaded.dims == ramp_volume.dims
        assert loaded.calibration(Axis.X).unit == "um"
        assert loaded.calibration(Axis.X).scale == pytest.approx(0.1)
        np.testing.assert_array_equal(loaded.values, ramp_volume.values)

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_volume(temp_dir / "nope.nc")
