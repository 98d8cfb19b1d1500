import io
import zipfile

import numpy as np
import pytest
from PIL import Image

from terrain.config import parse_config
from terrain.render import RecordingRenderer
from terrain.streamer import TerrainStreamer
from viz.export import array_to_npy_bytes, array_to_png_bytes, chunks_zip, height_field_to_obj_bytes


def test_array_to_png_bytes_roundtrip():
    z = np.arange(12, dtype=np.float64).reshape(3, 4)
    data = array_to_png_bytes(z)
    assert data[:8] == b"\x89PNG\r\n\x1a\n"

    img = Image.open(io.BytesIO(data))
    assert img.size == (4, 3)


def test_array_to_png_bytes_constant_map():
    z = np.full((5, 6), 7.0, dtype=np.float64)
    data = array_to_png_bytes(z)
    img = Image.open(io.BytesIO(data))
    arr = np.array(img)
    assert arr.min() == 0
    assert arr.max() == 0


def test_array_to_npy_bytes():
    z = np.arange(6, dtype=np.float32).reshape(2, 3)
    out = np.load(io.BytesIO(array_to_npy_bytes(z)))
    assert np.array_equal(out, z)


def test_height_field_to_obj_strips_border_and_uses_world_units():
    z = np.zeros((5, 5), dtype=np.float64)
    z[1:-1, 1:-1] = np.arange(9, dtype=np.float64).reshape(3, 3)
    obj = height_field_to_obj_bytes(z, center=(10.0, 20.0), size=4.0, border=1).decode("utf-8")

    v_lines = [ln for ln in obj.splitlines() if ln.startswith("v ")]
    f_lines = [ln for ln in obj.splitlines() if ln.startswith("f ")]
    assert len(v_lines) == 9
    assert len(f_lines) == 8
    assert v_lines[0] == "v 8.000000 18.000000 0.000000"
    assert v_lines[-1] == "v 12.000000 22.000000 8.000000"


def test_chunks_zip_names_by_key():
    config = parse_config(
        {"noise": {"octaves": 2}, "chunk": {"size": 16, "segments": 4}, "streaming": {"radius": 1}}
    )
    streamer = TerrainStreamer(config, RecordingRenderer(), lambda: (0.0, 0.0))
    streamer.update()

    data = chunks_zip(streamer.chunks.values(), border=1)
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        names = sorted(zf.namelist())
        assert len(names) == 9
        assert "16/0/0.png" in names
        assert "16/-1/1.png" in names
        img = Image.open(io.BytesIO(zf.read("16/0/0.png")))
        assert img.size == (5, 5)


def _streamed_records():
    config = parse_config(
        {"noise": {"octaves": 2}, "chunk": {"size": 16, "segments": 4}, "streaming": {"radius": 0}}
    )
    streamer = TerrainStreamer(config, RecordingRenderer(), lambda: (0.0, 0.0))
    streamer.update()
    return list(streamer.chunks.values())


def test_chunks_zip_npy_holds_interior_samples():
    records = _streamed_records()
    data = chunks_zip(records, fmt="npy", border=1)
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.namelist() == ["16/0/0.npy"]
        arr = np.load(io.BytesIO(zf.read("16/0/0.npy")))
    assert arr.shape == (5, 5)
    assert np.array_equal(arr, records[0].height_field[1:-1, 1:-1])


def test_chunks_zip_obj_mesh_in_world_units():
    records = _streamed_records()
    data = chunks_zip(records, fmt="obj", border=1)
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        obj = zf.read("16/0/0.obj").decode("utf-8")
    v_lines = [ln for ln in obj.splitlines() if ln.startswith("v ")]
    f_lines = [ln for ln in obj.splitlines() if ln.startswith("f ")]
    assert len(v_lines) == 25
    assert len(f_lines) == 32
    assert v_lines[0].startswith("v -8.000000 -8.000000 ")


def test_chunks_zip_rejects_unknown_format():
    with pytest.raises(ValueError):
        chunks_zip(_streamed_records(), fmt="tiff")
