from __future__ import annotations

import math
from typing import Mapping, NamedTuple, TypeVar

from fractal.errors import InvalidInput

V = TypeVar("V")
W = TypeVar("W")


class ChunkKey(NamedTuple):
    """Hashable chunk identity: integer position plus integer size.

    Fixed-grid keys hold grid indices, quadtree keys hold rounded world
    centers. A streamer only ever mixes keys of its own mode.
    """

    x: int
    y: int
    size: int


def round_half_up(value: float) -> int:
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInput(f"cannot quantize non-finite value: {value}")
    return int(math.floor(value + 0.5))


def quantize_key(center_x: float, center_y: float, size: float) -> ChunkKey:
    """Key for a chunk identified by its world center and width."""
    return ChunkKey(round_half_up(center_x), round_half_up(center_y), round_half_up(size))


def grid_key(cell_x: int, cell_y: int, size: int) -> ChunkKey:
    return ChunkKey(int(cell_x), int(cell_y), int(size))


def intersect(current: Mapping[ChunkKey, V], desired: Mapping[ChunkKey, W]) -> dict[ChunkKey, V]:
    """Entries of ``current`` whose key is also in ``desired``."""
    return {k: v for k, v in current.items() if k in desired}


def difference(a: Mapping[ChunkKey, V], b: Mapping[ChunkKey, object]) -> dict[ChunkKey, V]:
    """Entries of ``a`` whose key is absent from ``b``."""
    return {k: v for k, v in a.items() if k not in b}
