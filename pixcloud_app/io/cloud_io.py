"""
Point-cloud I/O: read and write vertex records as .npz archives.

Layout (same key names the SfM scene exporter writes):
    points_xyz     (N, 3) float   required
    points_colors  (N, 3) uint8   optional
    points_uv      (N, 2) uint32  optional
"""

from __future__ import annotations

import zipfile

import numpy as np

from pixcloud_app.cloud.data_structures import LoadError, VertexRecords


def load_vertex_records(input_path: str) -> VertexRecords:
    """
    Load vertex records from a .npz file.

    Args:
        input_path: Path to the .npz file.

    Returns:
        VertexRecords with colors/pixels set only if the archive has them.

    Raises:
        LoadError: If the file is missing, unreadable, or lacks `points_xyz`.
    """
    try:
        data = np.load(input_path, allow_pickle=False)
        if not hasattr(data, "files"):
            raise LoadError(f"{input_path} is a single array, expected a .npz archive")
        with data:
            if "points_xyz" not in data.files:
                raise LoadError(f"{input_path} has no 'points_xyz' array")
            positions = np.array(data["points_xyz"], dtype=np.float64)
            colors = np.array(data["points_colors"]) if "points_colors" in data.files else None
            pixels = np.array(data["points_uv"]) if "points_uv" in data.files else None
    except FileNotFoundError as e:
        raise LoadError(f"Point cloud file not found: {input_path}") from e
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise LoadError(f"Could not read point cloud file {input_path}: {e}") from e

    if positions.ndim != 2 or positions.shape[1] != 3:
        raise LoadError(f"'points_xyz' must have shape (N, 3), got {positions.shape}")

    return VertexRecords(positions=positions, colors=colors, pixels=pixels)


def save_vertex_records(output_path: str, records: VertexRecords) -> None:
    """
    Save vertex records to a .npz file. Optional arrays are written only
    when present so the capability flags survive a round trip.
    """
    arrays = {"points_xyz": np.asarray(records.positions, dtype=np.float64)}
    if records.colors is not None:
        arrays["points_colors"] = np.asarray(records.colors, dtype=np.uint8)
    if records.pixels is not None:
        arrays["points_uv"] = np.asarray(records.pixels, dtype=np.uint32)
    np.savez(output_path, **arrays)


__all__ = ["load_vertex_records", "save_vertex_records"]
