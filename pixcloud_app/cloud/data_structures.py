"""
Shared data structures for the point-cloud correspondence core.

These are simple containers passed between:
- the vertex loader
- the point store and correspondence engine
- the viewer session and visualization
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


DEFAULT_COLOR = (255, 255, 255)
DEFAULT_PIXEL = (0, 0)


class LoadError(Exception):
    """Raised when a vertex source is malformed or unreadable."""


class PointIndexError(IndexError):
    """Raised when a point index is outside the loaded cloud."""


@dataclass(frozen=True)
class Point:
    """A single loaded point. Never mutated after a load."""

    # 3D location (X, Y, Z) in world coordinates.
    position: Tuple[float, float, float]
    # RGB color, white when the dataset has no colors.
    color: Tuple[int, int, int] = DEFAULT_COLOR
    # (u, v) in the reference image's native pixels, (0, 0) when unmapped.
    pixel: Tuple[int, int] = DEFAULT_PIXEL

    @property
    def xyz(self) -> np.ndarray:
        return np.asarray(self.position, dtype=np.float64)


@dataclass
class VertexRecords:
    """
    Flat vertex list produced by the point-cloud loader.

    `colors` and `pixels` are dataset-wide: either every vertex has them or
    the array is None.
    """

    # positions: (N, 3) float array.
    positions: np.ndarray
    # colors: (N, 3) uint8 array or None.
    colors: Optional[np.ndarray] = None
    # pixels: (N, 2) unsigned int array or None.
    pixels: Optional[np.ndarray] = None

    @property
    def has_color(self) -> bool:
        return self.colors is not None

    @property
    def has_pixels(self) -> bool:
        return self.pixels is not None

    def __len__(self) -> int:
        return int(np.asarray(self.positions).shape[0])


@dataclass(frozen=True)
class LoadResult:
    """Summary of a completed load."""

    point_count: int
    has_color: bool
    has_pixels: bool
    # Number of distinct (u, v) keys in the pixel index.
    indexed_pixels: int

    @property
    def is_empty(self) -> bool:
        return self.point_count == 0


@dataclass(frozen=True)
class CorrespondenceResult:
    """A pixel coordinate resolved to a point of the loaded cloud."""

    index: int
    exact: bool
    point: Point
    # Euclidean distance in pixel space between the query and the point's (u, v).
    pixel_distance: float = 0.0


@dataclass(frozen=True)
class HighlightSegment:
    """Line from the eye at query time to the resolved point."""

    start: np.ndarray
    end: np.ndarray

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    @property
    def midpoint(self) -> np.ndarray:
        return (self.start + self.end) / 2.0


__all__ = [
    "DEFAULT_COLOR",
    "DEFAULT_PIXEL",
    "LoadError",
    "PointIndexError",
    "Point",
    "VertexRecords",
    "LoadResult",
    "CorrespondenceResult",
    "HighlightSegment",
]
