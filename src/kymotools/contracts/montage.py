"""Montage stage contract."""

from kymotools.contracts.base import require


def assert_montage(canvas, layout, source) -> None:
    """Enforce that the canvas matches the grid layout.

    Parameters
    ----------
    canvas : LabeledVolume
        Montage produced by MontageAssembler.assemble().
    layout : MontageLayout
        Layout the canvas was built from.
    source : LabeledVolume
        Source volume; its channel axis must be carried over unchanged.

    Raises
    ------
    ContractViolation
        If canvas extents or channel axis disagree with the layout.
    """
    from kymotools.volume.axes import Axis

    width, height = layout.canvas_size
    require(
        canvas.size(Axis.X) == width,
        f"Montage contract violated: canvas width {canvas.size(Axis.X)} != {width}"
    )
    require(
        canvas.size(Axis.Y) == height,
        f"Montage contract violated: canvas height {canvas.size(Axis.Y)} != {height}"
    )
    require(
        not canvas.has_axis(Axis.TIME),
        "Montage contract violated: canvas still has a 'time' axis"
    )
    require(
        canvas.has_axis(Axis.CHANNEL) == source.has_axis(Axis.CHANNEL),
        "Montage contract violated: channel axis not carried over from source"
    )
    if source.has_axis(Axis.CHANNEL):
        require(
            canvas.size(Axis.CHANNEL) == source.size(Axis.CHANNEL),
            "Montage contract violated: channel count changed"
        )
