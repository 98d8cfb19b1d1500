"""Terrain streaming configuration models."""

from __future__ import annotations

import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, model_validator

from fractal.errors import ConfigurationError
from fractal.field import NoiseKind, NoiseParams


class StreamingMode(str, Enum):
    FIXED_GRID = "fixed_grid"
    QUADTREE = "quadtree"


class NoiseConfig(BaseModel):
    """fBm parameters for the height source."""

    kind: NoiseKind = Field(default=NoiseKind.SIMPLEX, description="Noise primitive")
    scale: float = Field(default=64.0, gt=0, description="World units per noise lattice cell")
    octaves: int = Field(default=6, ge=1, description="Number of fBm octaves")
    persistence: float = Field(default=0.5, gt=0, le=1, description="Amplitude multiplier per octave")
    lacunarity: float = Field(default=2.0, gt=0, description="Frequency multiplier per octave")
    exponentiation: float = Field(default=3.9, gt=0, description="Power applied to the normalized sum")
    height_scale: float = Field(default=16.0, ge=0, description="Final height multiplier")
    seed: int = Field(default=1, description="Seed for the primitive permutation tables")

    def to_params(self) -> NoiseParams:
        return NoiseParams(
            kind=self.kind,
            scale=self.scale,
            octaves=self.octaves,
            persistence=self.persistence,
            lacunarity=self.lacunarity,
            exponentiation=self.exponentiation,
            height_scale=self.height_scale,
            seed=self.seed,
        )


class ChunkConfig(BaseModel):
    """Chunk geometry."""

    size: int = Field(default=128, ge=1, description="Chunk width in world units (quadtree: min leaf size)")
    segments: int = Field(default=64, ge=1, description="Quads per chunk edge")
    border: int = Field(default=1, ge=0, le=1, description="Extra sample ring for seam gradients")


class StreamingConfig(BaseModel):
    """Which chunks to keep alive around the viewer."""

    mode: StreamingMode = Field(default=StreamingMode.FIXED_GRID)
    radius: int = Field(default=2, ge=0, description="Fixed-grid Chebyshev radius in cells")
    quadtree_extent: float = Field(
        default=256.0, gt=0, description="Quadtree root spans [-extent, extent] on both axes"
    )


class TerrainConfig(BaseModel):
    """Complete streamer configuration."""

    noise: NoiseConfig = Field(default_factory=NoiseConfig)
    chunk: ChunkConfig = Field(default_factory=ChunkConfig)
    streaming: StreamingConfig = Field(default_factory=StreamingConfig)

    @model_validator(mode="after")
    def check_quadtree_levels(self) -> TerrainConfig:
        # Repeated halving of the root has to land exactly on the chunk size.
        if self.streaming.mode is StreamingMode.QUADTREE:
            levels = 2.0 * self.streaming.quadtree_extent / self.chunk.size
            n = int(levels)
            if levels != n or n < 1 or n & (n - 1):
                raise ValueError(
                    f"quadtree root width {2.0 * self.streaming.quadtree_extent:g} must be the "
                    f"chunk size {self.chunk.size} times a power of two"
                )
        return self


def parse_config(data: Mapping[str, Any]) -> TerrainConfig:
    """Validate a plain mapping into a TerrainConfig.

    Raises:
        ConfigurationError: If any option is missing a required value or out
            of range.
    """
    try:
        return TerrainConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigurationError(f"invalid terrain configuration: {exc}") from exc


def load_config(config_path: Path) -> TerrainConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed TerrainConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If the TOML is malformed or fails validation.
    """
    with open(config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"malformed config {config_path}: {exc}") from exc
    return parse_config(data)
