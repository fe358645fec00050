"""Kymograph stage contracts.

Called after band assembly and after projection. Axis names are imported
inside each check: kymotools.volume raises its errors from this package.
"""

from kymotools.contracts.base import require


def assert_kymograph(kymograph, band_width: int, position_size: int) -> None:
    """Enforce the band assembly contract.

    Parameters
    ----------
    kymograph : LabeledVolume
        Four-axis volume from KymographAssembler.assemble().
    band_width : int
        Effective band width (BandOffset size).
    position_size : int
        Concatenated path length reported by the PathSampler.

    Raises
    ------
    ContractViolation
        If the axes or their sizes do not match.
    """
    from kymotools.volume.axes import Axis

    expected = (Axis.TIME, Axis.POSITION, Axis.BAND_OFFSET, Axis.CHANNEL)
    require(
        set(kymograph.dims) == set(expected),
        f"Kymograph contract violated: axes {kymograph.dim_names}, "
        f"expected {[a.value for a in expected]}"
    )
    require(
        kymograph.size(Axis.BAND_OFFSET) == band_width,
        f"Kymograph contract violated: band_offset size "
        f"{kymograph.size(Axis.BAND_OFFSET)} != width {band_width}"
    )
    require(
        kymograph.size(Axis.POSITION) == position_size,
        f"Kymograph contract violated: position size "
        f"{kymograph.size(Axis.POSITION)} != {position_size}"
    )


def assert_projected_kymograph(projected, kymograph) -> None:
    """Enforce the projection contract: BandOffset removed, other sizes kept."""
    from kymotools.volume.axes import Axis

    expected = (Axis.POSITION, Axis.TIME, Axis.CHANNEL)
    require(
        set(projected.dims) == set(expected),
        f"Projection contract violated: axes {projected.dim_names}, "
        f"expected {[a.value for a in expected]}"
    )
    for axis in expected:
        require(
            projected.size(axis) == kymograph.size(axis),
            f"Projection contract violated: '{axis.value}' size changed "
            f"({kymograph.size(axis)} -> {projected.size(axis)})"
        )
