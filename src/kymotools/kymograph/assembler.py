"""KymographAssembler: band-sample a source volume along a path.

The assembled kymograph has axes (time, position, band_offset, channel).
Its maximum over band_offset is the projected kymograph with axes
(position, time, channel), which is what callers display and export.
"""

import logging
from typing import Tuple

import numpy as np

from kymotools.contracts import assert_kymograph, assert_projected_kymograph, assert_volume_axes
from kymotools.kymograph.path_sampler import Path, PathSampler
from kymotools.volume.axes import Axis
from kymotools.volume.labeled import LabeledVolume

__all__ = ["KymographAssembler"]

logger = logging.getLogger(__name__)

SOURCE_ORDER = (Axis.TIME, Axis.Y, Axis.X, Axis.CHANNEL)
KYMOGRAPH_ORDER = (Axis.TIME, Axis.POSITION, Axis.BAND_OFFSET, Axis.CHANNEL)
PROJECTED_ORDER = (Axis.POSITION, Axis.TIME, Axis.CHANNEL)


class KymographAssembler:
    """Build kymographs for one path and band width.

    Parameters
    ----------
    path : Path
        Sampling polyline in the source volume's pixel coordinates.
    band_width : int
        Perpendicular band width; <= 0 is treated as 1.

    Raises
    ------
    ConfigurationError
        If the path is empty.

    Examples
    --------
    >>> assembler = KymographAssembler(Path.straight(5, 10, 15, 10), band_width=3)
    >>> projected = assembler.build(volume)
    >>> projected.size(Axis.POSITION)
    9
    """

    def __init__(self, path: Path, band_width: int = 1):
        self.sampler = PathSampler(path, band_width)

    @property
    def band_width(self) -> int:
        return self.sampler.band_width

    def assemble(self, source: LabeledVolume) -> LabeledVolume:
        """Copy band samples of every frame and channel into a 4-axis kymograph.

        Source axes must include x, y and time; a missing channel axis is
        treated as one channel. Samples outside the source stay at 0.
        """
        assert_volume_axes(source, (Axis.X, Axis.Y, Axis.TIME), stage="Kymograph source")

        data = source.ordered(SOURCE_ORDER)
        n_time, y_size, x_size, n_channels = data.shape
        sampler = self.sampler

        kymo = np.zeros(
            (n_time, sampler.position_size, sampler.band_width, n_channels),
            dtype=source.dtype,
        )
        skipped = 0
        for band in sampler.samples():
            inside = band.inside(x_size, y_size)
            skipped += int(np.count_nonzero(~inside))
            if not inside.any():
                continue
            positions = band.positions[inside]
            kymo[:, positions, band.band_index, :] = data[:, band.ys[inside], band.xs[inside], :]

        if skipped:
            logger.debug("%d band samples fell outside '%s' and were left at 0",
                         skipped, source.name)

        calibration = {
            Axis.TIME: source.calibration(Axis.TIME),
            Axis.POSITION: source.calibration(Axis.X),
        }
        result = LabeledVolume.from_array(
            kymo, KYMOGRAPH_ORDER,
            name=f"{source.name} kymograph" if source.name else "kymograph",
            calibration=calibration,
        )
        assert_kymograph(result, sampler.band_width, sampler.position_size)
        logger.info("Assembled kymograph: %s", result)
        return result

    @staticmethod
    def project(kymograph: LabeledVolume) -> LabeledVolume:
        """Maximum over band_offset, reordered to (position, time, channel)."""
        values = kymograph.ordered(KYMOGRAPH_ORDER).max(axis=2)
        projected = LabeledVolume.from_array(
            np.transpose(values, (1, 0, 2)), PROJECTED_ORDER,
            name=kymograph.name,
            calibration={
                Axis.POSITION: kymograph.calibration(Axis.POSITION),
                Axis.TIME: kymograph.calibration(Axis.TIME),
            },
        )
        assert_projected_kymograph(projected, kymograph)
        return projected

    def build(self, source: LabeledVolume) -> LabeledVolume:
        """assemble() followed by project()."""
        return self.project(self.assemble(source))

    def build_both(self, source: LabeledVolume) -> Tuple[LabeledVolume, LabeledVolume]:
        """(4-axis kymograph, projected kymograph)."""
        kymograph = self.assemble(source)
        return kymograph, self.project(kymograph)
