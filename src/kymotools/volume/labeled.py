"""LabeledVolume: a dense numeric array with named axes and calibration.

The buffer is an ``xarray.DataArray`` whose dimension names are Axis values.
Axis order is whatever the creating stage chose; consumers always resolve
axes by name. The array handed out by ``values`` is a read-only view, so a
volume returned from a stage is immutable input to the next one.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

import numpy as np
import xarray as xr

from kymotools.volume.axes import (
    Axis,
    AxisCalibration,
    AxisDescriptor,
    DEFAULT_CALIBRATION,
    SampleKind,
    is_numeric_dtype,
)

__all__ = ["LabeledVolume"]

logger = logging.getLogger(__name__)


def _readonly(values) -> np.ndarray:
    view = np.asarray(values).view()
    view.flags.writeable = False
    return view


class LabeledVolume:
    """N-dimensional image volume addressed by axis name.

    Parameters
    ----------
    data : xr.DataArray
        Buffer with dims drawn from Axis values, no duplicates.
    name : str, optional
        Display name. Defaults to ``data.name``.
    calibration : mapping of Axis to AxisCalibration, optional
        Per-axis scale and unit. Axes not listed get 1 pixel per step.

    Examples
    --------
    >>> vol = LabeledVolume.create({Axis.TIME: 4, Axis.Y: 20, Axis.X: 20}, np.uint8)
    >>> vol.size(Axis.X)
    20
    >>> vol.axis_index(Axis.TIME)
    0
    """

    def __init__(self, data: xr.DataArray, name: Optional[str] = None,
                 calibration: Optional[Mapping] = None):
        dims = tuple(Axis.parse(d) for d in data.dims)
        if len(set(dims)) != len(dims):
            raise ValueError(f"Duplicate axes in volume: {data.dims}")

        self._dims = dims
        self._name = name if name is not None else (data.name or "")
        self._calibration: Dict[Axis, AxisCalibration] = {}
        for key, cal in (calibration or {}).items():
            axis = Axis.parse(key)
            if axis in dims:
                self._calibration[axis] = cal

        self._data = xr.DataArray(
            _readonly(data.values),
            dims=[d.value for d in dims],
            name=self._name or None,
            attrs=dict(data.attrs),
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, sizes: Mapping, dtype, name: str = "",
               calibration: Optional[Mapping] = None, fill=0) -> "LabeledVolume":
        """Allocate a volume filled with ``fill``. Axis order follows ``sizes``."""
        axes = [Axis.parse(a) for a in sizes]
        shape = tuple(int(sizes[a]) for a in sizes)
        values = np.full(shape, fill, dtype=dtype)
        return cls.from_array(values, axes, name=name, calibration=calibration)

    @classmethod
    def from_array(cls, values, axes: Sequence, name: str = "",
                   calibration: Optional[Mapping] = None) -> "LabeledVolume":
        """Wrap a numpy array whose dimensions are ``axes`` in order."""
        axes = [Axis.parse(a) for a in axes]
        values = np.asarray(values)
        if values.ndim != len(axes):
            raise ValueError(
                f"Array has {values.ndim} dims but {len(axes)} axes were given"
            )
        data = xr.DataArray(values, dims=[a.value for a in axes])
        return cls(data, name=name, calibration=calibration)

    @classmethod
    def from_dataarray(cls, data: xr.DataArray) -> "LabeledVolume":
        """Rebuild a volume from ``to_dataarray()`` output (e.g. after NetCDF load).

        Calibration is read from the ``scale``/``units`` attrs of each dimension
        coordinate when present.
        """
        calibration = {}
        for dim in data.dims:
            if dim in data.coords:
                attrs = data.coords[dim].attrs
                if "scale" in attrs:
                    calibration[Axis.parse(dim)] = AxisCalibration(
                        scale=float(attrs["scale"]),
                        unit=str(attrs.get("units", "pixel")),
                    )
        bare = xr.DataArray(data.values, dims=data.dims, name=data.name,
                            attrs=dict(data.attrs))
        return cls(bare, calibration=calibration)

    def with_values(self, values, axes: Optional[Sequence] = None,
                    calibration: Optional[Mapping] = None,
                    name: Optional[str] = None) -> "LabeledVolume":
        """New volume that keeps this one's name and calibration.

        ``axes`` defaults to this volume's axes. Calibration entries in
        ``calibration`` replace the inherited ones.
        """
        axes = self._dims if axes is None else [Axis.parse(a) for a in axes]
        merged = dict(self._calibration)
        merged.update(calibration or {})
        return LabeledVolume.from_array(
            values, axes,
            name=self._name if name is None else name,
            calibration=merged,
        )

    def transposed(self, axes: Sequence) -> "LabeledVolume":
        """Same data and calibration with the declared axes in ``axes`` order."""
        axes = [Axis.parse(a) for a in axes]
        if tuple(axes) == self._dims:
            return self
        data = self._data.transpose(*[a.value for a in axes])
        return LabeledVolume(data, name=self._name, calibration=self._calibration)

    # ------------------------------------------------------------------
    # Axis lookup
    # ------------------------------------------------------------------

    @property
    def dims(self) -> Tuple[Axis, ...]:
        return self._dims

    @property
    def dim_names(self) -> Tuple[str, ...]:
        return tuple(a.value for a in self._dims)

    @property
    def name(self) -> str:
        return self._name

    @property
    def ndim(self) -> int:
        return len(self._dims)

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._data.shape

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the buffer in this volume's axis order."""
        return self._data.values

    @property
    def data(self) -> xr.DataArray:
        return self._data

    def has_axis(self, axis) -> bool:
        return Axis.parse(axis) in self._dims

    def axis_index(self, axis) -> int:
        """Position of ``axis`` in this volume's buffer.

        Raises
        ------
        KeyError
            If the axis is not declared.
        """
        axis = Axis.parse(axis)
        try:
            return self._dims.index(axis)
        except ValueError:
            raise KeyError(f"Volume '{self._name}' has no '{axis.value}' axis") from None

    def size(self, axis) -> int:
        """Length of ``axis``; 0 when the axis is not declared."""
        axis = Axis.parse(axis)
        if axis not in self._dims:
            return 0
        return int(self._data.shape[self._dims.index(axis)])

    def sizes(self) -> Dict[Axis, int]:
        return {a: int(n) for a, n in zip(self._dims, self._data.shape)}

    def calibration(self, axis) -> AxisCalibration:
        return self._calibration.get(Axis.parse(axis), DEFAULT_CALIBRATION)

    @property
    def calibrations(self) -> Dict[Axis, AxisCalibration]:
        return dict(self._calibration)

    def axis(self, axis) -> AxisDescriptor:
        """Descriptor (name, size, calibration) for one declared axis."""
        axis = Axis.parse(axis)
        return AxisDescriptor(axis=axis, size=self.size(axis),
                              calibration=self.calibration(axis))

    @property
    def axes(self) -> Tuple[AxisDescriptor, ...]:
        return tuple(self.axis(a) for a in self._dims)

    def plane_axes(self) -> Tuple[Axis, Axis]:
        """(row, column) axes of the 2D plane stages operate on.

        Image volumes use (y, x). A projected kymograph has no X/Y and uses
        (time, position), so it is handled as a position-by-time image.
        """
        if Axis.X in self._dims and Axis.Y in self._dims:
            return Axis.Y, Axis.X
        if Axis.POSITION in self._dims and Axis.TIME in self._dims:
            return Axis.TIME, Axis.POSITION
        raise KeyError(
            f"Volume '{self._name}' has no 2D plane (axes {self.dim_names})"
        )

    # ------------------------------------------------------------------
    # Sample kind
    # ------------------------------------------------------------------

    @property
    def is_numeric(self) -> bool:
        return is_numeric_dtype(self.dtype)

    @property
    def sample_kind(self) -> SampleKind:
        """Numeric description of the buffer; raises TypeMismatchError otherwise."""
        return SampleKind.from_dtype(self.dtype)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def ordered(self, axes: Iterable) -> np.ndarray:
        """Buffer transposed into ``axes`` order.

        Axes that are requested but not declared are inserted with length 1,
        so callers can treat a missing Channel axis as a single channel.
        """
        axes = [Axis.parse(a) for a in axes]
        extra = [a for a in self._dims if a not in axes]
        if extra:
            raise KeyError(
                f"Axes {[a.value for a in extra]} of volume '{self._name}' "
                f"not in requested order {[a.value for a in axes]}"
            )
        data = self._data
        missing = [a.value for a in axes if a not in self._dims]
        if missing:
            data = data.expand_dims(missing)
        return data.transpose(*[a.value for a in axes]).values

    def to_dataarray(self) -> xr.DataArray:
        """Export as a DataArray with calibrated dimension coordinates."""
        coords = {}
        for axis in self._dims:
            cal = self.calibration(axis)
            coords[axis.value] = xr.Variable(
                axis.value,
                np.arange(self.size(axis)) * cal.scale,
                attrs={"scale": cal.scale, "units": cal.unit},
            )
        return xr.DataArray(
            np.array(self.values),
            dims=self.dim_names,
            coords=coords,
            name=self._name or "volume",
            attrs=dict(self._data.attrs),
        )

    def __repr__(self) -> str:
        sizes = ", ".join(f"{a.value}={n}" for a, n in self.sizes().items())
        return f"LabeledVolume(name={self._name!r}, {sizes}, dtype={self.dtype})"
