"""Labeled volumes: named-axis arrays with calibration."""

from kymotools.volume.axes import (
    Axis,
    AxisCalibration,
    AxisDescriptor,
    SampleKind,
    cast_like,
    is_numeric_dtype,
)
from kymotools.volume.labeled import LabeledVolume
from kymotools.volume.io import save_volume, load_volume

__all__ = [
    "Axis",
    "AxisCalibration",
    "AxisDescriptor",
    "SampleKind",
    "cast_like",
    "is_numeric_dtype",
    "LabeledVolume",
    "save_volume",
    "load_volume",
]
