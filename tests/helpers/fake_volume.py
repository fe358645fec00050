import numpy as np

from kymotools.volume import Axis, AxisCalibration, LabeledVolume


def make_fake_volume(
    time_len=4,
    shape=(20, 20),
    channels=1,
    dtype=np.uint8,
    fill=0,
    with_channel_axis=True,
    name="fake",
):
    """
    Create a (time, y, x[, channel]) volume filled with ``fill``.
    """
    if with_channel_axis:
        sizes = {Axis.TIME: time_len, Axis.Y: shape[0], Axis.X: shape[1], Axis.CHANNEL: channels}
    else:
        sizes = {Axis.TIME: time_len, Axis.Y: shape[0], Axis.X: shape[1]}
    return LabeledVolume.create(sizes, dtype, name=name, fill=fill)


def make_ramp_volume(time_len=4, shape=(6, 8), channels=2, dtype=np.float32):
    """
    Volume where value = 1000*t + 100*c + 10*y + x, so every sample is traceable.
    """
    t, y, x, c = np.meshgrid(
        np.arange(time_len), np.arange(shape[0]), np.arange(shape[1]), np.arange(channels),
        indexing="ij",
    )
    values = (1000 * t + 100 * c + 10 * y + x).astype(dtype)
    return LabeledVolume.from_array(
        values, (Axis.TIME, Axis.Y, Axis.X, Axis.CHANNEL), name="ramp",
        calibration={Axis.X: AxisCalibration(scale=0.1, unit="um"),
                     Axis.Y: AxisCalibration(scale=0.1, unit="um"),
                     Axis.TIME: AxisCalibration(scale=2.0, unit="s")},
    )


def make_diagonal_volume(time_len=4, size=20, value=255, dtype=np.uint8):
    """
    All-zero (time, y, x, channel) volume with a y == x diagonal of ``value``.
    """
    values = np.zeros((time_len, size, size, 1), dtype=dtype)
    idx = np.arange(size)
    values[:, idx, idx, 0] = value
    return LabeledVolume.from_array(values, (Axis.TIME, Axis.Y, Axis.X, Axis.CHANNEL),
                                    name="diagonal")


def make_random_volume(time_len=3, shape=(12, 10), channels=2, seed=0, dtype=np.float64):
    """
    Random (time, y, x, channel) volume with values in [0, 100).
    """
    rng = np.random.default_rng(seed)
    values = (rng.random((time_len, shape[0], shape[1], channels)) * 100).astype(dtype)
    return LabeledVolume.from_array(values, (Axis.TIME, Axis.Y, Axis.X, Axis.CHANNEL),
                                    name="random")
