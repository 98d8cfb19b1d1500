from __future__ import annotations

import io
import zipfile
from typing import Iterable

import numpy as np
from PIL import Image

from terrain.heightmap import interior
from terrain.streamer import ChunkRecord


def array_to_png_bytes(z: np.ndarray) -> bytes:
    """Convert a 2D array to an 8-bit grayscale PNG.

    Values are min/max normalized to [0, 255]. Degenerate (constant) arrays
    become all zeros.
    """

    z = np.asarray(z, dtype=np.float64)
    if z.ndim != 2:
        raise ValueError("expected a 2D array")

    zmin = float(np.min(z))
    zmax = float(np.max(z))
    if zmax == zmin:
        img = np.zeros(z.shape, dtype=np.uint8)
    else:
        zn = (z - zmin) / (zmax - zmin)
        img = np.clip(zn * 255.0, 0.0, 255.0).astype(np.uint8)

    out = io.BytesIO()
    Image.fromarray(img).save(out, format="PNG")
    return out.getvalue()


def array_to_npy_bytes(z: np.ndarray) -> bytes:
    z = np.asarray(z)
    out = io.BytesIO()
    np.save(out, z)
    return out.getvalue()


def height_field_to_obj_bytes(
    height_field: np.ndarray,
    *,
    center: tuple[float, float],
    size: float,
    border: int = 1,
) -> bytes:
    """Triangulated chunk surface in world units as Wavefront OBJ."""

    z = interior(np.asarray(height_field, dtype=np.float64), border)
    h, w = z.shape
    if h < 2 or w < 2:
        raise ValueError("height field must be at least 2x2")

    size = float(size)
    x0 = float(center[0]) - 0.5 * size
    y0 = float(center[1]) - 0.5 * size
    sx = size / (w - 1)
    sy = size / (h - 1)

    def vid(x: int, y: int) -> int:
        return y * w + x + 1

    lines: list[str] = []
    lines.append("# terrain chunk\n")
    lines.append(f"# center={center[0]:.3f},{center[1]:.3f} size={size:.3f} grid={w}x{h}\n")

    for y in range(h):
        for x in range(w):
            lines.append(f"v {x0 + x * sx:.6f} {y0 + y * sy:.6f} {z[y, x]:.6f}\n")

    for y in range(h - 1):
        for x in range(w - 1):
            v00 = vid(x, y)
            v10 = vid(x + 1, y)
            v01 = vid(x, y + 1)
            v11 = vid(x + 1, y + 1)
            lines.append(f"f {v00} {v10} {v01}\n")
            lines.append(f"f {v10} {v11} {v01}\n")

    return "".join(lines).encode("utf-8")


EXPORT_FORMATS = ("png", "npy", "obj")


def chunk_bytes(record: ChunkRecord, fmt: str = "png", *, border: int = 1) -> bytes:
    """Encode one chunk's displayed samples as ``png``, ``npy`` or ``obj``."""

    if fmt == "png":
        return array_to_png_bytes(interior(record.height_field, border))
    if fmt == "npy":
        return array_to_npy_bytes(interior(record.height_field, border))
    if fmt == "obj":
        return height_field_to_obj_bytes(
            record.height_field, center=record.center, size=record.size, border=border
        )
    raise ValueError(f"unknown export format: {fmt!r}")


def chunks_zip(records: Iterable[ChunkRecord], *, fmt: str = "png", border: int = 1) -> bytes:
    """Zip of ``{size}/{x}/{y}.{fmt}`` files, one per chunk."""

    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"unknown export format: {fmt!r}")

    out = io.BytesIO()
    with zipfile.ZipFile(out, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for record in records:
            key = record.key
            zf.writestr(f"{key.size}/{key.x}/{key.y}.{fmt}", chunk_bytes(record, fmt, border=border))
    return out.getvalue()
