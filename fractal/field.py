from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import numpy as np
import structlog

from .errors import ConfigurationError, InvalidInput
from .perlin import Perlin2D, Perlin3D
from .rng import PseudoRandomSource, to_uint32_seed
from .simplex import Simplex2D, Simplex3D

logger = structlog.get_logger()


class NoiseKind(str, Enum):
    SIMPLEX = "simplex"
    PERLIN = "perlin"
    # Placeholder primitive: evaluates to 0 everywhere.
    FLAT = "flat"


class Noise2D(Protocol):
    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:  # pragma: no cover
        ...


class Noise3D(Protocol):
    def noise(
        self, x: np.ndarray, y: np.ndarray, z: np.ndarray
    ) -> np.ndarray:  # pragma: no cover
        ...


@dataclass(frozen=True)
class NoiseParams:
    """Immutable fBm parameter snapshot.

    Construction validates every field and raises ``ConfigurationError`` on
    out-of-range values. Use :meth:`with_changes` to derive a new snapshot.
    """

    kind: NoiseKind = NoiseKind.SIMPLEX
    scale: float = 64.0
    octaves: int = 6
    persistence: float = 0.5
    lacunarity: float = 2.0
    exponentiation: float = 3.9
    height_scale: float = 16.0
    seed: int = 1

    def __post_init__(self) -> None:
        try:
            kind = NoiseKind(self.kind)
        except ValueError as exc:
            raise ConfigurationError(f"unknown noise kind: {self.kind!r}") from exc
        object.__setattr__(self, "kind", kind)

        for name in ("scale", "persistence", "lacunarity", "exponentiation", "height_scale"):
            try:
                value = float(getattr(self, name))
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"{name} must be a number") from exc
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite")
            object.__setattr__(self, name, value)

        try:
            octaves = float(self.octaves)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("octaves must be an integer") from exc
        if isinstance(self.octaves, bool) or not octaves.is_integer():
            raise ConfigurationError("octaves must be an integer")
        object.__setattr__(self, "octaves", int(octaves))
        if self.octaves < 1:
            raise ConfigurationError("octaves must be >= 1")

        if self.scale <= 0.0:
            raise ConfigurationError("scale must be > 0")
        if not 0.0 < self.persistence <= 1.0:
            raise ConfigurationError("persistence must be in (0, 1]")
        if self.lacunarity <= 0.0:
            raise ConfigurationError("lacunarity must be > 0")
        if self.exponentiation <= 0.0:
            raise ConfigurationError("exponentiation must be > 0")
        if self.height_scale < 0.0:
            raise ConfigurationError("height_scale must be >= 0")

    @property
    def normalized_seed(self) -> int:
        return to_uint32_seed(self.seed)

    def with_changes(self, **changes: object) -> NoiseParams:
        return dataclasses.replace(self, **changes)


class FlatNoise:
    """Stand-in primitive returning 0 for every coordinate."""

    def noise(self, x: np.ndarray, y: np.ndarray, *rest: np.ndarray) -> np.ndarray:
        return np.zeros(np.broadcast(x, y, *rest).shape, dtype=np.float64)


@dataclass(frozen=True)
class _Primitives:
    noise2: Noise2D
    noise3: Noise3D


def build_primitives(kind: NoiseKind, seed: int) -> _Primitives:
    """Build the 2D/3D primitive pair for ``kind`` from a fresh source."""

    if kind is NoiseKind.SIMPLEX:
        source = PseudoRandomSource(seed)
        return _Primitives(noise2=Simplex2D(source), noise3=Simplex3D(source))
    if kind is NoiseKind.PERLIN:
        source = PseudoRandomSource(seed)
        return _Primitives(noise2=Perlin2D(source), noise3=Perlin3D(source))
    flat = FlatNoise()
    return _Primitives(noise2=flat, noise3=flat)


def fbm01_2(
    noise: Noise2D,
    x: np.ndarray,
    y: np.ndarray,
    *,
    octaves: int,
    lacunarity: float,
    persistence: float,
) -> np.ndarray:
    """Amplitude-normalized fBm of ``noise`` remapped from [-1, 1] to [0, 1]."""

    amp = 1.0
    freq = 1.0
    total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
    amp_sum = 0.0

    for _ in range(octaves):
        total += (noise.noise(x * freq, y * freq) * 0.5 + 0.5) * amp
        amp_sum += amp
        amp *= persistence
        freq *= lacunarity

    return total / amp_sum


def fbm01_3(
    noise: Noise3D,
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    *,
    octaves: int,
    lacunarity: float,
    persistence: float,
) -> np.ndarray:
    amp = 1.0
    freq = 1.0
    total = np.zeros(np.broadcast(x, y, z).shape, dtype=np.float64)
    amp_sum = 0.0

    for _ in range(octaves):
        total += (noise.noise(x * freq, y * freq, z * freq) * 0.5 + 0.5) * amp
        amp_sum += amp
        amp *= persistence
        freq *= lacunarity

    return total / amp_sum


def _finite_coords(name: str, *coords: object) -> list[np.ndarray]:
    out = []
    for c in coords:
        try:
            a = np.asarray(c, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise InvalidInput(f"{name}: invalid coordinate parameter") from exc
        if not np.isfinite(a).all():
            raise InvalidInput(f"{name}: invalid coordinate parameter")
        out.append(a)
    return out


def _as_output(z: np.ndarray) -> np.ndarray | float:
    if z.ndim == 0:
        return float(z)
    return z


class NoiseField:
    """Fractal height source built on one noise primitive family.

    ``configure`` swaps parameters in place. The primitives (and so the
    permutation tables) are only rebuilt when the normalized seed changes, so
    tweaking scale or octaves never reshuffles the underlying lattice.
    """

    def __init__(self, params: NoiseParams | None = None):
        params = params if params is not None else NoiseParams()
        if not isinstance(params, NoiseParams):
            raise ConfigurationError("NoiseField: expected NoiseParams")
        self._params = params
        self._primitives = self._build(params.normalized_seed)

    @property
    def params(self) -> NoiseParams:
        return self._params

    @staticmethod
    def _build(seed: int) -> dict[NoiseKind, _Primitives]:
        logger.debug("noise_primitives_rebuilt", seed=seed)
        return {kind: build_primitives(kind, seed) for kind in NoiseKind}

    def configure(self, params: NoiseParams) -> bool:
        """Install ``params``; return True when the primitives were rebuilt."""

        if not isinstance(params, NoiseParams):
            raise ConfigurationError("NoiseField.configure: expected NoiseParams")

        rebuild = self._params.normalized_seed != params.normalized_seed
        self._params = params
        if rebuild:
            self._primitives = self._build(params.normalized_seed)
        return rebuild

    def raw2d(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return self._primitives[self.params.kind].noise2.noise(x, y)

    def raw3d(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return self._primitives[self.params.kind].noise3.noise(x, y, z)

    def sample2d(self, x: np.ndarray | float, y: np.ndarray | float) -> np.ndarray | float:
        xa, ya = _finite_coords("NoiseField.sample2d", x, y)
        p = self.params
        total = fbm01_2(
            self._primitives[p.kind].noise2,
            xa / p.scale,
            ya / p.scale,
            octaves=p.octaves,
            lacunarity=p.lacunarity,
            persistence=p.persistence,
        )
        return _as_output(np.power(total, p.exponentiation) * p.height_scale)

    def sample3d(
        self, x: np.ndarray | float, y: np.ndarray | float, z: np.ndarray | float
    ) -> np.ndarray | float:
        xa, ya, za = _finite_coords("NoiseField.sample3d", x, y, z)
        p = self.params
        total = fbm01_3(
            self._primitives[p.kind].noise3,
            xa / p.scale,
            ya / p.scale,
            za / p.scale,
            octaves=p.octaves,
            lacunarity=p.lacunarity,
            persistence=p.persistence,
        )
        return _as_output(np.power(total, p.exponentiation) * p.height_scale)
