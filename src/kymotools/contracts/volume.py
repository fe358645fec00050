"""Volume contracts.

Enforce that a LabeledVolume handed between stages carries the axes the
next stage resolves by name.
"""

from typing import Iterable

from kymotools.contracts.base import require


def assert_volume_axes(volume, required: Iterable, stage: str = "volume") -> None:
    """Enforce that ``volume`` declares every axis in ``required``.

    Parameters
    ----------
    volume : LabeledVolume
        Volume produced by the preceding stage.
    required : iterable of Axis
        Axes the consuming stage looks up by name.
    stage : str
        Stage name used in the violation message.

    Raises
    ------
    ContractViolation
        If an axis is missing or has zero length.
    """
    for axis in required:
        require(
            volume.has_axis(axis),
            f"{stage} contract violated: missing '{axis.value}' axis"
        )
        require(
            volume.size(axis) > 0,
            f"{stage} contract violated: '{axis.value}' axis is empty"
        )
