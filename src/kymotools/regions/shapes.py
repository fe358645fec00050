"""Molecule geometry: fixed lines, per-frame polygons and bounding intervals."""

import math
from typing import Iterable, Tuple

from pydantic import model_validator

from kymotools.schemas.base import FrozenModel

__all__ = ["LineShape", "PolygonShape", "Interval"]


class LineShape(FrozenModel):
    """Two-point line drawn on a molecule; the same for every frame."""
    x1: float
    y1: float
    x2: float
    y2: float


class PolygonShape(FrozenModel):
    """Outline (or point set) of an object at one time point."""
    xs: Tuple[float, ...]
    ys: Tuple[float, ...]

    @model_validator(mode="after")
    def check_lengths(self):
        if len(self.xs) != len(self.ys):
            raise ValueError(f"xs has {len(self.xs)} points, ys has {len(self.ys)}")
        if not self.xs:
            raise ValueError("Polygon needs at least one point")
        return self


class Interval(FrozenModel):
    """Inclusive integer pixel box ``[min_x..max_x] x [min_y..max_y]``."""
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @model_validator(mode="after")
    def check_order(self):
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError(f"Empty interval: {self}")
        return self

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @classmethod
    def bounding(cls, xs: Iterable[float], ys: Iterable[float],
                 border_width: int = 0, border_height: int = 0) -> "Interval":
        """Integer box around the points, grown by the borders on every side."""
        xs = list(xs)
        ys = list(ys)
        return cls(
            min_x=int(math.floor(min(xs))) - border_width,
            min_y=int(math.floor(min(ys))) - border_height,
            max_x=int(math.floor(max(xs))) + border_width,
            max_y=int(math.floor(max(ys))) + border_height,
        )

    @classmethod
    def around_line(cls, line: LineShape, border_width: int = 0,
                    border_height: int = 0) -> "Interval":
        return cls.bounding((line.x1, line.x2), (line.y1, line.y2),
                            border_width, border_height)

    @classmethod
    def around_shapes(cls, shapes: Iterable[PolygonShape], border_width: int = 0,
                      border_height: int = 0) -> "Interval":
        """Box covering every shape over all time points."""
        xs, ys = [], []
        for shape in shapes:
            xs.extend(shape.xs)
            ys.extend(shape.ys)
        if not xs:
            raise ValueError("No shape points to bound")
        return cls.bounding(xs, ys, border_width, border_height)
