from __future__ import annotations

import numpy as np

from .rng import PseudoRandomSource


def fade(t: np.ndarray) -> np.ndarray:
    """Quintic fade curve used by Improved Perlin Noise (2002)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def make_permutation(source: PseudoRandomSource) -> np.ndarray:
    """Shuffle 0..255 with ``source`` and return the table doubled to 512.

    Partial Fisher-Yates: position i swaps with a pick from [i, 256), the last
    slot is left in place. Consumes exactly 255 draws.
    """

    p = list(range(256))
    for i in range(255):
        r = i + int(source.next() * (256 - i))
        p[i], p[r] = p[r], p[i]
    perm = np.array(p, dtype=np.int32)
    return np.concatenate([perm, perm])


_GRAD2_DIAG8 = np.array(
    [
        [1.0, 0.0],
        [-1.0, 0.0],
        [0.0, 1.0],
        [0.0, -1.0],
        [1.0, 1.0],
        [-1.0, 1.0],
        [1.0, -1.0],
        [-1.0, -1.0],
    ],
    dtype=np.float64,
)
_GRAD2_DIAG8 /= np.linalg.norm(_GRAD2_DIAG8, axis=1, keepdims=True)


def grad2_from_hash(h: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    idx = (h % 8).astype(np.int32)
    g = _GRAD2_DIAG8[idx]
    return g[..., 0], g[..., 1]


# Edge midpoints of a cube; the simplex primitives index this directly (the
# 2D variant drops the z column), Perlin 3D uses the normalized copy.
_GRAD3 = np.array(
    [
        [1.0, 1.0, 0.0],
        [-1.0, 1.0, 0.0],
        [1.0, -1.0, 0.0],
        [-1.0, -1.0, 0.0],
        [1.0, 0.0, 1.0],
        [-1.0, 0.0, 1.0],
        [1.0, 0.0, -1.0],
        [-1.0, 0.0, -1.0],
        [0.0, 1.0, 1.0],
        [0.0, -1.0, 1.0],
        [0.0, 1.0, -1.0],
        [0.0, -1.0, -1.0],
    ],
    dtype=np.float64,
)
_GRAD3_UNIT = _GRAD3 / np.linalg.norm(_GRAD3, axis=1, keepdims=True)

SIMPLEX_GRAD2 = np.array(
    [
        [1.0, 1.0],
        [-1.0, 1.0],
        [1.0, -1.0],
        [-1.0, -1.0],
        [1.0, 0.0],
        [-1.0, 0.0],
        [1.0, 0.0],
        [-1.0, 0.0],
        [0.0, 1.0],
        [0.0, -1.0],
        [0.0, 1.0],
        [0.0, -1.0],
    ],
    dtype=np.float64,
)
SIMPLEX_GRAD3 = _GRAD3


def grad3_from_hash(h: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    idx = (h % 12).astype(np.int32)
    g = _GRAD3_UNIT[idx]
    return g[..., 0], g[..., 1], g[..., 2]
