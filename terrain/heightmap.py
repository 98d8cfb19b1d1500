from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from fractal.errors import ConfigurationError, InvalidInput
from fractal.field import NoiseField


def _check_layout(size: float, segments: int, border: int) -> None:
    if not math.isfinite(float(size)) or float(size) < 1.0:
        raise ConfigurationError("chunk size must be a number >= 1")
    if isinstance(segments, bool) or int(segments) != segments or int(segments) < 1:
        raise ConfigurationError("chunk segments must be an integer >= 1")
    if border not in (0, 1):
        raise ConfigurationError("border must be 0 or 1")


def resolution(segments: int, border: int = 0) -> int:
    """Samples per axis for ``segments`` quads plus an optional border ring."""
    return int(segments) + 1 + 2 * int(border)


def sample_axis(center: float, size: float, segments: int, border: int = 0) -> np.ndarray:
    step = float(size) / int(segments)
    start = float(center) - 0.5 * float(size) - border * step
    return start + np.arange(resolution(segments, border), dtype=np.float64) * step


def build_height_field(
    field: NoiseField,
    *,
    center: tuple[float, float],
    size: float,
    segments: int,
    border: int = 0,
    dtype: np.dtype | type[np.floating] = np.float64,
) -> np.ndarray:
    """Sample ``field`` on a uniform grid covering one chunk.

    Row index is y, column index is x. With ``border=1`` the grid starts one
    step outside the chunk on every side; that ring only feeds centered
    gradients across chunk seams.
    """

    _check_layout(size, segments, border)
    cx = float(center[0])
    cy = float(center[1])
    if not (math.isfinite(cx) and math.isfinite(cy)):
        raise InvalidInput("build_height_field: invalid center parameter")

    xs = sample_axis(cx, size, int(segments), border)
    ys = sample_axis(cy, size, int(segments), border)
    xg, yg = np.meshgrid(xs, ys)
    return np.asarray(field.sample2d(xg, yg), dtype=dtype)


@dataclass(frozen=True)
class HeightFieldBuilder:
    """Chunk sampler with a fixed segment count and border."""

    segments: int
    border: int = 1
    dtype: type[np.floating] = np.float32

    def __post_init__(self) -> None:
        _check_layout(1.0, self.segments, self.border)

    @property
    def resolution(self) -> int:
        return resolution(self.segments, self.border)

    def build(self, field: NoiseField, center: tuple[float, float], size: float) -> np.ndarray:
        return build_height_field(
            field,
            center=center,
            size=size,
            segments=self.segments,
            border=self.border,
            dtype=self.dtype,
        )


def interior(height_field: np.ndarray, border: int = 1) -> np.ndarray:
    """Drop the border ring, leaving the displayed vertex samples."""
    h = np.asarray(height_field)
    if h.ndim != 2:
        raise InvalidInput("height field must be a 2D array")
    if border == 0:
        return h
    if h.shape[0] <= 2 * border or h.shape[1] <= 2 * border:
        raise InvalidInput("height field is too small for its border")
    return h[border:-border, border:-border]


def surface_normals(height_field: np.ndarray, *, step: float, border: int = 1) -> np.ndarray:
    """Unit normals (x, y, z) for the displayed vertices, shape (n, n, 3).

    With a border the gradients are centered differences everywhere, so two
    neighbouring chunks agree on their shared edge. Without one the edges fall
    back to one-sided differences.
    """

    h = np.asarray(height_field, dtype=np.float64)
    if h.ndim != 2:
        raise InvalidInput("height field must be a 2D array")
    step = float(step)
    if not math.isfinite(step) or step <= 0.0:
        raise ConfigurationError("step must be > 0")

    if border == 1:
        if h.shape[0] < 3 or h.shape[1] < 3:
            raise InvalidInput("height field is too small for its border")
        dzdx = (h[1:-1, 2:] - h[1:-1, :-2]) / (2.0 * step)
        dzdy = (h[2:, 1:-1] - h[:-2, 1:-1]) / (2.0 * step)
    elif border == 0:
        dzdy, dzdx = np.gradient(h, step)
    else:
        raise ConfigurationError("border must be 0 or 1")

    nx = -dzdx
    ny = -dzdy
    nz = np.ones_like(nx)
    nrm = np.sqrt(nx * nx + ny * ny + nz * nz)
    return np.stack([nx / nrm, ny / nrm, nz / nrm], axis=-1)
