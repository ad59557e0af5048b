from __future__ import annotations

import numpy as np
import pytest

from pixcloud_app.cloud.data_structures import LoadError, VertexRecords
from pixcloud_app.io.cloud_io import load_vertex_records, save_vertex_records


def test_saved_flags_survive_reload(tmp_path):
    path = tmp_path / "cloud.npz"
    records = VertexRecords(
        positions=np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]),
        pixels=np.array([[7, 8], [9, 10]], dtype=np.uint32),
    )
    save_vertex_records(str(path), records)

    loaded = load_vertex_records(str(path))
    assert not loaded.has_color
    assert loaded.has_pixels
    np.testing.assert_array_equal(loaded.positions, records.positions)
    np.testing.assert_array_equal(loaded.pixels, [[7, 8], [9, 10]])


def test_colors_are_read(tmp_path):
    path = tmp_path / "cloud.npz"
    np.savez(
        path,
        points_xyz=np.zeros((1, 3)),
        points_colors=np.array([[1, 2, 3]], dtype=np.uint8),
    )

    loaded = load_vertex_records(str(path))
    assert loaded.has_color
    assert not loaded.has_pixels
    np.testing.assert_array_equal(loaded.colors, [[1, 2, 3]])


def test_missing_file(tmp_path):
    with pytest.raises(LoadError):
        load_vertex_records(str(tmp_path / "missing.npz"))


def test_missing_positions(tmp_path):
    path = tmp_path / "cloud.npz"
    np.savez(path, points_uv=np.zeros((2, 2), dtype=np.uint32))

    with pytest.raises(LoadError, match="points_xyz"):
        load_vertex_records(str(path))


def test_not_an_archive(tmp_path):
    path = tmp_path / "cloud.npz"
    path.write_text("ply\nformat ascii 1.0\n")

    with pytest.raises(LoadError):
        load_vertex_records(str(path))


def test_bad_position_shape(tmp_path):
    path = tmp_path / "cloud.npz"
    np.savez(path, points_xyz=np.zeros((4, 2)))

    with pytest.raises(LoadError):
        load_vertex_records(str(path))
