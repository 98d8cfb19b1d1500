"""Command-line driver that streams terrain around a simulated viewer."""

from __future__ import annotations

import argparse
import time
from pathlib import Path

import structlog

logger = structlog.get_logger()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point: walk a viewer in a straight line and stream chunks."""
    parser = argparse.ArgumentParser(
        description="Stream fractal terrain chunks around a moving viewer"
    )
    parser.add_argument(
        "--config", "-c", type=str, default=None, help="TOML config file (default: built-in defaults)"
    )
    parser.add_argument(
        "--mode",
        choices=["fixed_grid", "quadtree"],
        default=None,
        help="Override the streaming mode",
    )
    parser.add_argument("--seed", type=int, default=None, help="Override the noise seed")
    parser.add_argument("--ticks", type=int, default=60, help="Ticks to simulate (default: 60)")
    parser.add_argument(
        "--speed", type=float, default=25.0, help="Viewer speed in world units per second (default: 25)"
    )
    parser.add_argument(
        "--heading",
        type=float,
        nargs=2,
        default=(1.0, 0.0),
        metavar=("DX", "DY"),
        help="Viewer direction on the ground plane (default: 1 0)",
    )
    parser.add_argument("--dt", type=float, default=1.0 / 30.0, help="Seconds per tick (default: 1/30)")
    parser.add_argument(
        "--export", "-o", type=str, default=None, help="Write final chunks as a zip to this path"
    )
    parser.add_argument(
        "--format",
        choices=["png", "npy", "obj"],
        default="png",
        help="Per-chunk file format inside the export zip (default: png)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args(argv)

    from fractal.errors import TerrainError
    from terrain.config import TerrainConfig, load_config, parse_config
    from terrain.logs import configure_logging
    from terrain.render import RecordingRenderer
    from terrain.streamer import TerrainStreamer

    configure_logging(args.verbose)

    try:
        config = load_config(Path(args.config)) if args.config else TerrainConfig()
        overrides = config.model_dump(mode="json")
        if args.mode is not None:
            overrides["streaming"]["mode"] = args.mode
        if args.seed is not None:
            overrides["noise"]["seed"] = args.seed
        config = parse_config(overrides)
    except TerrainError as exc:
        logger.error("config_rejected", error=str(exc))
        return 2

    dx, dy = args.heading
    norm = (dx * dx + dy * dy) ** 0.5 or 1.0
    dx /= norm
    dy /= norm
    position = [0.0, 0.0]

    renderer = RecordingRenderer()
    streamer = TerrainStreamer(config, renderer, lambda: tuple(position))
    logger.info(
        "stream_starting",
        mode=streamer.mode.value,
        ticks=args.ticks,
        chunk_size=config.chunk.size,
        segments=config.chunk.segments,
    )

    start_time = time.perf_counter()
    for _ in range(max(int(args.ticks), 0)):
        streamer.update(args.dt)
        position[0] += dx * args.speed * args.dt
        position[1] += dy * args.speed * args.dt
    elapsed = time.perf_counter() - start_time

    logger.info(
        "stream_finished",
        seconds=round(elapsed, 3),
        active=len(streamer),
        created=renderer.created,
        disposed=renderer.disposed,
        final_position=tuple(round(p, 3) for p in position),
    )

    if args.export:
        from viz.export import chunks_zip

        data = chunks_zip(streamer.chunks.values(), fmt=args.format, border=config.chunk.border)
        Path(args.export).write_bytes(data)
        logger.info("chunks_exported", path=args.export, format=args.format, count=len(streamer))

    streamer.dispose()
    return 0
