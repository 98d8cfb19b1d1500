from __future__ import annotations

import math

import numpy as np

from .core import SIMPLEX_GRAD2, SIMPLEX_GRAD3, make_permutation
from .rng import PseudoRandomSource

_F2 = 0.5 * (math.sqrt(3.0) - 1.0)
_G2 = (3.0 - math.sqrt(3.0)) / 6.0
_F3 = 1.0 / 3.0
_G3 = 1.0 / 6.0

# (i1, j1, k1, i2, j2, k2) per tetrahedron of the skewed cube.
_SIMPLEX3_OFFSETS = np.array(
    [
        [1, 0, 0, 1, 1, 0],
        [1, 0, 0, 1, 0, 1],
        [0, 0, 1, 1, 0, 1],
        [0, 0, 1, 0, 1, 1],
        [0, 1, 0, 0, 1, 1],
        [0, 1, 0, 1, 1, 0],
    ],
    dtype=np.int64,
)


class Simplex2D:
    """2D simplex noise in roughly [-1, 1].

    The permutation is drawn from ``source``; two instances built from sources
    with the same seed produce identical fields.
    """

    def __init__(self, source: PseudoRandomSource):
        self.perm = make_permutation(source)
        g = SIMPLEX_GRAD2[self.perm % 12]
        self.grad_x = g[:, 0]
        self.grad_y = g[:, 1]

    def _corner(
        self, gi: np.ndarray, x: np.ndarray, y: np.ndarray
    ) -> np.ndarray:
        t = 0.5 - x * x - y * y
        t = np.where(t < 0.0, 0.0, t)
        t *= t
        return t * t * (self.grad_x[gi] * x + self.grad_y[gi] * y)

    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        s = (x + y) * _F2
        i = np.floor(x + s)
        j = np.floor(y + s)
        t = (i + j) * _G2
        x0 = x - (i - t)
        y0 = y - (j - t)

        # Lower or upper triangle of the skewed cell.
        upper = x0 > y0
        i1 = np.where(upper, 1, 0)
        j1 = np.where(upper, 0, 1)

        x1 = x0 - i1 + _G2
        y1 = y0 - j1 + _G2
        x2 = x0 - 1.0 + 2.0 * _G2
        y2 = y0 - 1.0 + 2.0 * _G2

        ii = i.astype(np.int64) & 255
        jj = j.astype(np.int64) & 255
        p = self.perm

        n0 = self._corner(ii + p[jj], x0, y0)
        n1 = self._corner(ii + i1 + p[jj + j1], x1, y1)
        n2 = self._corner(ii + 1 + p[jj + 1], x2, y2)
        return 70.0 * (n0 + n1 + n2)


class Simplex3D:
    """3D simplex noise in roughly [-1, 1]."""

    def __init__(self, source: PseudoRandomSource):
        self.perm = make_permutation(source)
        g = SIMPLEX_GRAD3[self.perm % 12]
        self.grad_x = g[:, 0]
        self.grad_y = g[:, 1]
        self.grad_z = g[:, 2]

    def _corner(
        self, gi: np.ndarray, x: np.ndarray, y: np.ndarray, z: np.ndarray
    ) -> np.ndarray:
        t = 0.6 - x * x - y * y - z * z
        t = np.where(t < 0.0, 0.0, t)
        t *= t
        return t * t * (
            self.grad_x[gi] * x + self.grad_y[gi] * y + self.grad_z[gi] * z
        )

    def noise(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        z = np.asarray(z, dtype=np.float64)

        s = (x + y + z) * _F3
        i = np.floor(x + s)
        j = np.floor(y + s)
        k = np.floor(z + s)
        t = (i + j + k) * _G3
        x0 = x - (i - t)
        y0 = y - (j - t)
        z0 = z - (k - t)

        # Pick the tetrahedron from the ordering of x0, y0, z0.
        xy = x0 >= y0
        yz = y0 >= z0
        xz = x0 >= z0
        case = np.select(
            [xy & yz, xy & ~yz & xz, xy & ~yz & ~xz, ~xy & ~yz, ~xy & yz & ~xz],
            [0, 1, 2, 3, 4],
            default=5,
        )
        o = _SIMPLEX3_OFFSETS[case]
        i1, j1, k1 = o[..., 0], o[..., 1], o[..., 2]
        i2, j2, k2 = o[..., 3], o[..., 4], o[..., 5]

        x1 = x0 - i1 + _G3
        y1 = y0 - j1 + _G3
        z1 = z0 - k1 + _G3
        x2 = x0 - i2 + 2.0 * _G3
        y2 = y0 - j2 + 2.0 * _G3
        z2 = z0 - k2 + 2.0 * _G3
        x3 = x0 - 1.0 + 3.0 * _G3
        y3 = y0 - 1.0 + 3.0 * _G3
        z3 = z0 - 1.0 + 3.0 * _G3

        ii = i.astype(np.int64) & 255
        jj = j.astype(np.int64) & 255
        kk = k.astype(np.int64) & 255
        p = self.perm

        n0 = self._corner(ii + p[jj + p[kk]], x0, y0, z0)
        n1 = self._corner(ii + i1 + p[jj + j1 + p[kk + k1]], x1, y1, z1)
        n2 = self._corner(ii + i2 + p[jj + j2 + p[kk + k2]], x2, y2, z2)
        n3 = self._corner(ii + 1 + p[jj + 1 + p[kk + 1]], x3, y3, z3)
        return 32.0 * (n0 + n1 + n2 + n3)
