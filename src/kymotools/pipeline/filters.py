"""Median, gaussian and top-hat filters on a single 2D plane.

All filters extend the image by mirroring without repeating the edge pixel
(scipy ``mode="mirror"``), compute in float64 and write the result back in
the input dtype.
"""

import math

import numpy as np
from scipy.ndimage import correlate1d, grey_dilation, grey_erosion
from scipy.ndimage import median_filter as _ndimage_median

from kymotools.volume.axes import cast_like

__all__ = [
    "gaussian_kernel",
    "median_filter",
    "gaussian_filter",
    "tophat_filter",
    "minimum_filter",
    "maximum_filter",
    "apply_filter",
]

EDGE_MODE = "mirror"


def _footprint(radius: int):
    return (2 * radius + 1, 2 * radius + 1)


def minimum_filter(plane: np.ndarray, radius: int) -> np.ndarray:
    """Grayscale erosion with a (2r+1) x (2r+1) square."""
    if radius <= 0:
        return plane.copy()
    return grey_erosion(plane, size=_footprint(radius), mode=EDGE_MODE)


def maximum_filter(plane: np.ndarray, radius: int) -> np.ndarray:
    """Grayscale dilation with a (2r+1) x (2r+1) square."""
    if radius <= 0:
        return plane.copy()
    return grey_dilation(plane, size=_footprint(radius), mode=EDGE_MODE)


def median_filter(plane: np.ndarray, radius: int) -> np.ndarray:
    """Median of the (2r+1) x (2r+1) neighborhood of every pixel."""
    if radius <= 0:
        return plane.copy()
    out = _ndimage_median(plane.astype(np.float64), size=_footprint(radius), mode=EDGE_MODE)
    return cast_like(out, plane.dtype)


def gaussian_kernel(sigma: float) -> np.ndarray:
    """Normalized 1D gaussian with half-size ``max(2, int(3*sigma + 0.5) + 1)``."""
    half = max(2, int(3 * sigma + 0.5) + 1)
    x = np.arange(-half + 1, half, dtype=np.float64)
    kernel = np.exp(-0.5 * x * x / (sigma * sigma))
    return kernel / kernel.sum()


def gaussian_filter(plane: np.ndarray, sigma: float) -> np.ndarray:
    """Separable gaussian blur, X (columns) first, then Y (rows)."""
    if not math.isfinite(sigma) or sigma <= 0:
        raise ValueError(f"Gaussian sigma must be positive, got {sigma}")
    kernel = gaussian_kernel(sigma)
    blurred = correlate1d(plane.astype(np.float64), kernel, axis=1, mode=EDGE_MODE)
    blurred = correlate1d(blurred, kernel, axis=0, mode=EDGE_MODE)
    return cast_like(blurred, plane.dtype)


def tophat_filter(plane: np.ndarray, radius: int) -> np.ndarray:
    """White top-hat: ``max(0, plane - opening(plane))``."""
    original = plane.astype(np.float64)
    opened = maximum_filter(minimum_filter(original, radius), radius)
    return cast_like(np.maximum(0.0, original - opened), plane.dtype)


def apply_filter(plane: np.ndarray, spec) -> np.ndarray:
    """Dispatch on a FilterSpec's ``method``."""
    if spec.method == "median":
        return median_filter(plane, spec.radius)
    if spec.method == "gaussian":
        return gaussian_filter(plane, spec.sigma)
    if spec.method == "tophat":
        return tophat_filter(plane, spec.radius)
    if spec.method == "none":
        return plane.copy()
    raise ValueError(f"Unknown filter method: {spec.method}")
