"""Viewer-driven chunk streaming."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

import numpy as np
import structlog

from fractal.errors import ConfigurationError, InvalidInput
from fractal.field import NoiseField, NoiseParams
from terrain.config import StreamingMode, TerrainConfig
from terrain.heightmap import HeightFieldBuilder
from terrain.keys import ChunkKey, difference, grid_key, intersect, quantize_key
from terrain.quadtree import QuadTree
from terrain.render import RenderTarget

logger = structlog.get_logger()

ViewerPosition = Callable[[], Sequence[float]]


@dataclass(frozen=True)
class ChunkSpec:
    """Where a desired chunk sits, before it has any content."""

    center: tuple[float, float]
    size: float


@dataclass
class ChunkRecord:
    key: ChunkKey
    center: tuple[float, float]
    size: float
    height_field: np.ndarray
    handle: Any


@dataclass
class TickReport:
    created: list[ChunkKey] = field(default_factory=list)
    kept: list[ChunkKey] = field(default_factory=list)
    disposed: list[ChunkKey] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.created or self.disposed)


class TerrainStreamer:
    """Keeps the set of live chunks in step with the viewer.

    Every :meth:`update` computes the desired chunk set for the current viewer
    position, disposes chunks that fell out of it and creates the ones that
    entered it. Chunks present in both are left untouched.
    """

    def __init__(
        self,
        config: TerrainConfig,
        renderer: RenderTarget,
        viewer: ViewerPosition,
        noise_field: NoiseField | None = None,
    ):
        if not isinstance(config, TerrainConfig):
            raise ConfigurationError("TerrainStreamer: missing terrain configuration")
        if renderer is None:
            raise ConfigurationError("TerrainStreamer: missing render target")
        if viewer is None or not callable(viewer):
            raise ConfigurationError("TerrainStreamer: missing viewer position provider")

        self._config = config
        self._renderer = renderer
        self._viewer = viewer
        self._mode = StreamingMode(config.streaming.mode)
        self._chunk_size = int(config.chunk.size)
        self._radius = int(config.streaming.radius)
        self._extent = float(config.streaming.quadtree_extent)
        self._builder = HeightFieldBuilder(
            segments=int(config.chunk.segments), border=int(config.chunk.border)
        )
        self._field = noise_field if noise_field is not None else NoiseField(config.noise.to_params())
        self._chunks: dict[ChunkKey, ChunkRecord] = {}

    @property
    def mode(self) -> StreamingMode:
        return self._mode

    @property
    def noise_field(self) -> NoiseField:
        return self._field

    @property
    def builder(self) -> HeightFieldBuilder:
        return self._builder

    @property
    def chunks(self) -> Mapping[ChunkKey, ChunkRecord]:
        return dict(self._chunks)

    def __len__(self) -> int:
        return len(self._chunks)

    def viewer_position(self) -> tuple[float, float]:
        """Viewer position on the ground plane; 3D positions project to (x, z)."""
        pos = tuple(self._viewer())
        if len(pos) == 3:
            px, py = pos[0], pos[2]
        elif len(pos) == 2:
            px, py = pos
        else:
            raise InvalidInput(f"viewer position must have 2 or 3 components, got {len(pos)}")
        px = float(px)
        py = float(py)
        if not (math.isfinite(px) and math.isfinite(py)):
            raise InvalidInput("TerrainStreamer: invalid viewer position")
        return px, py

    def cell_index(self, x: float, y: float) -> tuple[int, int]:
        """Grid cell holding (x, y); cells are centered on multiples of the chunk size."""
        cs = float(self._chunk_size)
        ix = math.floor((x + 0.5 * cs) / cs)
        iy = -math.floor((y + 0.5 * cs) / cs)
        return ix, iy

    def desired_chunks(self, position: tuple[float, float]) -> dict[ChunkKey, ChunkSpec]:
        if self._mode is StreamingMode.QUADTREE:
            return self._desired_quadtree(position)
        return self._desired_fixed_grid(position)

    def _desired_fixed_grid(self, position: tuple[float, float]) -> dict[ChunkKey, ChunkSpec]:
        xc, yc = self.cell_index(*position)
        cs = self._chunk_size
        r = self._radius
        out: dict[ChunkKey, ChunkSpec] = {}
        for x in range(xc - r, xc + r + 1):
            for y in range(yc - r, yc + r + 1):
                out[grid_key(x, y, cs)] = ChunkSpec(center=(float(x * cs), float(y * cs)), size=float(cs))
        return out

    def _desired_quadtree(self, position: tuple[float, float]) -> dict[ChunkKey, ChunkSpec]:
        e = self._extent
        tree = QuadTree((-e, -e), (e, e), self._chunk_size)
        tree.insert(position)

        out: dict[ChunkKey, ChunkSpec] = {}
        for leaf in tree.leaves():
            cx, cy = leaf.center
            width = leaf.size[0]
            # Chunk plane Y runs opposite to the viewer's ground Y.
            center = (cx, -cy)
            out[quantize_key(center[0], center[1], width)] = ChunkSpec(center=center, size=width)
        return out

    def update(self, delta_time: float = 0.0) -> TickReport:
        """Run one streaming tick.

        Collaborator failures propagate. Chunks already disposed or created in
        this tick stay accounted for, so the next tick retries only what is
        still missing.
        """
        position = self.viewer_position()
        desired = self.desired_chunks(position)

        kept = intersect(self._chunks, desired)
        to_create = difference(desired, self._chunks)
        to_dispose = difference(self._chunks, desired)
        report = TickReport(kept=list(kept))

        for key, record in to_dispose.items():
            self._renderer.dispose_chunk(record.handle)
            del self._chunks[key]
            report.disposed.append(key)
            logger.debug("chunk_disposed", key=tuple(key))

        for key, spec in to_create.items():
            try:
                self._chunks[key] = self._create(key, spec)
            except Exception:
                logger.warning("chunk_create_failed", key=tuple(key), center=spec.center, size=spec.size)
                raise
            report.created.append(key)
            logger.debug("chunk_created", key=tuple(key), center=spec.center, size=spec.size)

        if report.changed:
            logger.info(
                "tick_complete",
                dt=float(delta_time),
                position=position,
                created=len(report.created),
                kept=len(report.kept),
                disposed=len(report.disposed),
                active=len(self._chunks),
            )
        return report

    def _create(self, key: ChunkKey, spec: ChunkSpec) -> ChunkRecord:
        height_field = self._builder.build(self._field, spec.center, spec.size)
        handle = self._renderer.create_chunk(spec.center, spec.size, height_field)
        return ChunkRecord(
            key=key,
            center=spec.center,
            size=spec.size,
            height_field=height_field,
            handle=handle,
        )

    def set_height_field(self, key: ChunkKey, height_field: np.ndarray) -> None:
        """Replace one chunk's content and push it to the renderer."""
        if height_field is None:
            raise InvalidInput("TerrainStreamer.set_height_field: height field is required")
        record = self._chunks.get(key)
        if record is None:
            raise InvalidInput(f"TerrainStreamer.set_height_field: no active chunk {key!r}")
        h = np.asarray(height_field)
        expected = (self._builder.resolution, self._builder.resolution)
        if h.shape != expected:
            raise InvalidInput(f"height field shape {h.shape} does not match {expected}")
        self._renderer.update_chunk(record.handle, h)
        record.height_field = h

    def on_noise_params_changed(self, params: NoiseParams | None = None) -> None:
        """Regenerate every active chunk's heights; the key set is unchanged."""
        if params is not None:
            self._field.configure(params)
        for record in self._chunks.values():
            height_field = self._builder.build(self._field, record.center, record.size)
            self._renderer.update_chunk(record.handle, height_field)
            record.height_field = height_field
        logger.info("chunks_regenerated", count=len(self._chunks), seed=self._field.params.seed)

    def dispose(self) -> None:
        for key in list(self._chunks):
            record = self._chunks[key]
            self._renderer.dispose_chunk(record.handle)
            del self._chunks[key]
        logger.info("streamer_disposed")
