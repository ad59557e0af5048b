"""
Point store: the loaded point cloud plus its pixel-coordinate index.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

from pixcloud_app.cloud.data_structures import (
    DEFAULT_COLOR,
    LoadError,
    LoadResult,
    Point,
    PointIndexError,
    VertexRecords,
)


@dataclass
class _CloudGeneration:
    """One complete load. Built in full before the store publishes it."""

    # positions: (N, 3) float64, colors: (N, 3) uint8, pixels: (N, 2) int64.
    positions: np.ndarray
    colors: np.ndarray
    pixels: np.ndarray
    has_color: bool
    has_pixels: bool
    # (u, v) -> point index. Empty when the dataset carries no pixel mapping.
    pixel_index: Dict[Tuple[int, int], int] = field(default_factory=dict)


def _empty_generation() -> _CloudGeneration:
    return _CloudGeneration(
        positions=np.zeros((0, 3), dtype=np.float64),
        colors=np.zeros((0, 3), dtype=np.uint8),
        pixels=np.zeros((0, 2), dtype=np.int64),
        has_color=False,
        has_pixels=False,
    )


def _build_generation(records: VertexRecords) -> _CloudGeneration:
    """
    Validate loader output and build a new generation.

    Raises:
        LoadError: If positions, colors or pixels have the wrong shape,
            contain non-finite positions, or colors/pixels are out of range.
    """
    try:
        positions = np.asarray(records.positions, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise LoadError(f"Vertex positions are not numeric: {e}") from e

    if positions.size == 0:
        positions = positions.reshape(0, 3)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise LoadError(f"Vertex positions must have shape (N, 3), got {positions.shape}")
    if not np.all(np.isfinite(positions)):
        raise LoadError("Vertex positions contain NaN or infinite values")

    n_points = positions.shape[0]

    if records.colors is not None:
        raw_colors = np.asarray(records.colors)
        if raw_colors.shape != (n_points, 3):
            raise LoadError(
                f"Vertex colors must have shape ({n_points}, 3), got {raw_colors.shape}"
            )
        if raw_colors.size > 0 and (raw_colors.min() < 0 or raw_colors.max() > 255):
            raise LoadError("Vertex colors must be 8-bit values in [0, 255]")
        colors = raw_colors.astype(np.uint8)
    else:
        colors = np.tile(np.array(DEFAULT_COLOR, dtype=np.uint8), (n_points, 1))

    pixel_index: Dict[Tuple[int, int], int] = {}
    if records.pixels is not None:
        raw_pixels = np.asarray(records.pixels)
        if raw_pixels.shape != (n_points, 2):
            raise LoadError(
                f"Vertex pixel coordinates must have shape ({n_points}, 2), got {raw_pixels.shape}"
            )
        if raw_pixels.size > 0 and raw_pixels.min() < 0:
            raise LoadError("Vertex pixel coordinates must be non-negative")
        pixels = raw_pixels.astype(np.int64)
        # Later vertices overwrite earlier ones on duplicate (u, v).
        for i, (u, v) in enumerate(pixels.tolist()):
            pixel_index[(u, v)] = i
    else:
        pixels = np.zeros((n_points, 2), dtype=np.int64)

    return _CloudGeneration(
        positions=positions,
        colors=colors,
        pixels=pixels,
        has_color=records.colors is not None,
        has_pixels=records.pixels is not None,
        pixel_index=pixel_index,
    )


class PointStore:
    """
    Owns the loaded point cloud and its (u, v) -> index lookup.

    A load replaces the whole cloud at once: the new points and index are
    built completely, then swapped in as a single generation object, so a
    query always sees one consistent cloud.
    """

    def __init__(self) -> None:
        self._cloud = _empty_generation()
        self._generation = 0

    def load(self, records: VertexRecords) -> LoadResult:
        """
        Replace the current cloud with the given vertex records.

        Args:
            records: Loader output (positions, optional colors, optional pixels).

        Returns:
            LoadResult describing the new cloud. An empty cloud is a valid result.

        Raises:
            LoadError: If the records are malformed. The previous cloud is kept.
        """
        new_cloud = _build_generation(records)

        self._cloud = new_cloud
        self._generation += 1

        result = LoadResult(
            point_count=int(new_cloud.positions.shape[0]),
            has_color=new_cloud.has_color,
            has_pixels=new_cloud.has_pixels,
            indexed_pixels=len(new_cloud.pixel_index),
        )
        print(
            f"[cloud] Loaded {result.point_count} points "
            f"(color={result.has_color}, pixels={result.has_pixels}, "
            f"{result.indexed_pixels} indexed pixel coords)"
        )
        return result

    @property
    def generation(self) -> int:
        """Incremented on every successful load."""
        return self._generation

    @property
    def has_pixels(self) -> bool:
        return self._cloud.has_pixels

    @property
    def positions(self) -> np.ndarray:
        view = self._cloud.positions.view()
        view.flags.writeable = False
        return view

    @property
    def colors(self) -> np.ndarray:
        view = self._cloud.colors.view()
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        return int(self._cloud.positions.shape[0])

    def is_empty(self) -> bool:
        return len(self) == 0

    def point_at(self, index: int) -> Point:
        cloud = self._cloud
        if index < 0 or index >= cloud.positions.shape[0]:
            raise PointIndexError(
                f"Point index {index} out of range for cloud of {cloud.positions.shape[0]} points"
            )
        x, y, z = cloud.positions[index].tolist()
        r, g, b = cloud.colors[index].tolist()
        u, v = cloud.pixels[index].tolist()
        return Point(position=(x, y, z), color=(r, g, b), pixel=(u, v))

    def exact_lookup(self, u: int, v: int) -> Optional[int]:
        return self._cloud.pixel_index.get((int(u), int(v)))

    def nearest_by_pixel(self, u: int, v: int) -> Optional[int]:
        """
        Find the point whose (u, v) is closest to the query in pixel space.

        Brute-force scan over all points using squared distance. np.argmin
        returns the first minimum, so the lowest index wins ties. A zero
        distance means (u, v) is in the pixel index; that entry is returned
        so the result agrees with `exact_lookup` on duplicate pixels.

        Returns:
            Index of the nearest point, or None if the cloud is empty.
        """
        cloud = self._cloud
        pixels = cloud.pixels
        if pixels.shape[0] == 0:
            return None

        du = pixels[:, 0].astype(np.float64) - float(u)
        dv = pixels[:, 1].astype(np.float64) - float(v)
        dist_sq = du * du + dv * dv
        best = int(np.argmin(dist_sq))
        if dist_sq[best] == 0.0:
            exact = cloud.pixel_index.get((int(u), int(v)))
            if exact is not None:
                return exact
        return best

    def pixel_distance(self, index: int, u: int, v: int) -> float:
        """Euclidean pixel-space distance between point `index` and (u, v)."""
        pu, pv = self.point_at(index).pixel
        return float(np.hypot(pu - u, pv - v))


__all__ = ["PointStore"]
