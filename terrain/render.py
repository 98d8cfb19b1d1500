from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Protocol

import numpy as np

from fractal.errors import InvalidInput, ResourceError


class RenderTarget(Protocol):
    """Rendering-side contract consumed by the streamer.

    Implementations own whatever GPU or scene objects back a chunk and report
    failures as ``ResourceError``.
    """

    def create_chunk(
        self, center: tuple[float, float], size: float, height_field: np.ndarray
    ) -> Hashable:  # pragma: no cover
        ...

    def update_chunk(self, handle: Any, height_field: np.ndarray) -> None:  # pragma: no cover
        ...

    def dispose_chunk(self, handle: Any) -> None:  # pragma: no cover
        ...


@dataclass
class RenderedChunk:
    center: tuple[float, float]
    size: float
    height_field: np.ndarray
    updates: int = 0


@dataclass
class RecordingRenderer:
    """In-memory render target that hands out integer handles.

    Keeps the latest content per live handle and counts every call, which is
    what the CLI driver and the tests inspect.
    """

    live: dict[int, RenderedChunk] = field(default_factory=dict)
    created: int = 0
    updated: int = 0
    disposed: int = 0
    _next_handle: int = 1

    def create_chunk(
        self, center: tuple[float, float], size: float, height_field: np.ndarray
    ) -> int:
        if height_field is None:
            raise InvalidInput("RecordingRenderer.create_chunk: height field is required")
        handle = self._next_handle
        self._next_handle += 1
        self.live[handle] = RenderedChunk(
            center=(float(center[0]), float(center[1])),
            size=float(size),
            height_field=height_field,
        )
        self.created += 1
        return handle

    def update_chunk(self, handle: int, height_field: np.ndarray) -> None:
        if height_field is None:
            raise InvalidInput("RecordingRenderer.update_chunk: height field is required")
        chunk = self.live.get(handle)
        if chunk is None:
            raise ResourceError(f"update of unknown chunk handle {handle!r}")
        chunk.height_field = height_field
        chunk.updates += 1
        self.updated += 1

    def dispose_chunk(self, handle: int) -> None:
        if self.live.pop(handle, None) is None:
            raise ResourceError(f"dispose of unknown chunk handle {handle!r}")
        self.disposed += 1
