from __future__ import annotations

import time

import numpy as np

from fractal.field import NoiseField, NoiseKind, NoiseParams
from terrain.config import TerrainConfig, parse_config
from terrain.heightmap import build_height_field
from terrain.render import RecordingRenderer
from terrain.streamer import TerrainStreamer


def _timeit(label: str, fn) -> float:
    t0 = time.perf_counter()
    fn()
    t1 = time.perf_counter()
    ms = (t1 - t0) * 1000.0
    print(f"{label}: {ms:.2f} ms")
    return ms


def main() -> None:
    """Quick CPU benchmark.

    Intended targets (laptop-class CPU):
    - 512x512 fBm samples, 6 octaves: < ~300ms
    - One 65x65 chunk with border: < ~20ms
    - Initial fixed-grid tick (25 chunks): < ~500ms
    """

    xg, yg = np.meshgrid(
        np.linspace(0.0, 512.0, 512, dtype=np.float64),
        np.linspace(0.0, 512.0, 512, dtype=np.float64),
    )

    for kind in (NoiseKind.SIMPLEX, NoiseKind.PERLIN):
        field = NoiseField(NoiseParams(kind=kind, octaves=6))
        _timeit(f"sample2d {kind.value} 512x512", lambda: field.sample2d(xg, yg))

    field = NoiseField(NoiseParams())
    _timeit(
        "build_height_field 64 segments + border",
        lambda: build_height_field(field, center=(0.0, 0.0), size=128.0, segments=64, border=1),
    )

    for mode in ("fixed_grid", "quadtree"):
        config = parse_config({"streaming": {"mode": mode}})
        position = [0.0, 0.0]
        streamer = TerrainStreamer(config, RecordingRenderer(), lambda: tuple(position))
        _timeit(f"initial tick {mode}", lambda: streamer.update(0.0))
        position[0] = 300.0
        _timeit(f"moving tick {mode}", lambda: streamer.update(0.0))

    config = TerrainConfig()
    streamer = TerrainStreamer(config, RecordingRenderer(), lambda: (0.0, 0.0))
    streamer.update(0.0)
    _timeit(
        "regenerate all chunks after seed change",
        lambda: streamer.on_noise_params_changed(config.noise.to_params().with_changes(seed=2)),
    )


if __name__ == "__main__":
    main()
