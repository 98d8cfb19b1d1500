from fractal.errors import ConfigurationError, InvalidInput, ResourceError, TerrainError
from terrain.config import (
    ChunkConfig,
    NoiseConfig,
    StreamingConfig,
    StreamingMode,
    TerrainConfig,
    load_config,
    parse_config,
)
from terrain.heightmap import (
    HeightFieldBuilder,
    build_height_field,
    interior,
    surface_normals,
)
from terrain.keys import ChunkKey, difference, grid_key, intersect, quantize_key
from terrain.quadtree import Bounds, QuadTree, QuadTreeNode
from terrain.render import RecordingRenderer, RenderTarget
from terrain.streamer import ChunkRecord, TerrainStreamer, TickReport

__all__ = [
    "Bounds",
    "ChunkConfig",
    "ChunkKey",
    "ChunkRecord",
    "ConfigurationError",
    "HeightFieldBuilder",
    "InvalidInput",
    "NoiseConfig",
    "QuadTree",
    "QuadTreeNode",
    "RecordingRenderer",
    "RenderTarget",
    "ResourceError",
    "StreamingConfig",
    "StreamingMode",
    "TerrainConfig",
    "TerrainError",
    "TerrainStreamer",
    "TickReport",
    "build_height_field",
    "difference",
    "grid_key",
    "interior",
    "intersect",
    "load_config",
    "parse_config",
    "quantize_key",
    "surface_normals",
]
