from .errors import ConfigurationError, InvalidInput, ResourceError, TerrainError
from .field import NoiseField, NoiseKind, NoiseParams, fbm01_2, fbm01_3
from .perlin import Perlin2D, Perlin3D
from .rng import PseudoRandomSource, to_uint32_seed
from .simplex import Simplex2D, Simplex3D

__all__ = [
    "ConfigurationError",
    "InvalidInput",
    "NoiseField",
    "NoiseKind",
    "NoiseParams",
    "Perlin2D",
    "Perlin3D",
    "PseudoRandomSource",
    "ResourceError",
    "Simplex2D",
    "Simplex3D",
    "TerrainError",
    "fbm01_2",
    "fbm01_3",
    "to_uint32_seed",
]
