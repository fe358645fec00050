"""Axis names, calibration and sample-kind descriptors.

Every array in kymotools is addressed by axis name. Positional indices are
resolved at the point of use through LabeledVolume.axis_index().
"""

from enum import Enum
from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from kymotools.contracts.failure import TypeMismatchError


class Axis(str, Enum):
    """Recognized axis names.

    The string value is the xarray dimension name.
    """
    X = "x"
    Y = "y"
    TIME = "time"
    CHANNEL = "channel"
    BAND_OFFSET = "band_offset"
    POSITION = "position"

    @classmethod
    def parse(cls, name) -> "Axis":
        if isinstance(name, Axis):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise ValueError(f"Unknown axis name: {name!r}") from None


class _FrozenModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class AxisCalibration(_FrozenModel):
    """Physical scale of one pixel step along an axis."""
    scale: float = Field(1.0, gt=0)
    unit: str = "pixel"

    def scaled(self, factor: float) -> "AxisCalibration":
        """Calibration after resampling by ``factor`` (pixels get smaller)."""
        return AxisCalibration(scale=self.scale / factor, unit=self.unit)


DEFAULT_CALIBRATION = AxisCalibration()


class AxisDescriptor(_FrozenModel):
    """Name, length and calibration of one declared axis."""
    axis: Axis
    size: int = Field(ge=0)
    calibration: AxisCalibration = DEFAULT_CALIBRATION


class SampleKind(_FrozenModel):
    """Numeric sample type of a volume's buffer."""
    kind: Literal["integer", "float"]
    bits: int
    signed: bool

    @classmethod
    def from_dtype(cls, dtype) -> "SampleKind":
        """Describe a numpy dtype.

        Raises
        ------
        TypeMismatchError
            For booleans, complex numbers, strings and objects.
        """
        dtype = np.dtype(dtype)
        if dtype.kind in "iu":
            return cls(kind="integer", bits=dtype.itemsize * 8, signed=dtype.kind == "i")
        if dtype.kind == "f":
            return cls(kind="float", bits=dtype.itemsize * 8, signed=True)
        raise TypeMismatchError(f"Sample type {dtype} is not a real numeric type")

    @property
    def dtype(self) -> np.dtype:
        if self.kind == "float":
            return np.dtype(f"float{self.bits}")
        prefix = "int" if self.signed else "uint"
        return np.dtype(f"{prefix}{self.bits}")


def is_numeric_dtype(dtype) -> bool:
    """True for integer and floating point dtypes (booleans excluded)."""
    return np.dtype(dtype).kind in "iuf"


def cast_like(values: np.ndarray, dtype) -> np.ndarray:
    """Write computed values back into ``dtype``.

    Integer targets are rounded and clamped to their range, floating point
    targets are cast directly.
    """
    dtype = np.dtype(dtype)
    if dtype.kind in "iu":
        info = np.iinfo(dtype)
        return np.clip(np.rint(values), info.min, info.max).astype(dtype)
    return np.asarray(values).astype(dtype, copy=False)
