"""
World-to-window projection for placing overlay labels (gluProject semantics).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Viewport:
    """GL viewport: origin (x, y) at the bottom-left, size in pixels."""

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def of_size(cls, width: int, height: int) -> "Viewport":
        return cls(0, 0, width, height)

    @property
    def aspect(self) -> float:
        return self.width / float(self.height) if self.height > 0 else 0.0


@dataclass(frozen=True)
class ScreenPoint:
    """Window coordinate (origin bottom-left) and depth in [0, 1]."""

    x: float
    y: float
    depth: float


class ScreenProjector:
    """Maps world points through view, projection and viewport transforms."""

    def project(
        self,
        world_point: Sequence[float],
        view: np.ndarray,
        projection: np.ndarray,
        viewport: Viewport,
    ) -> Optional[ScreenPoint]:
        """
        Project a world-space point to window coordinates.

        Args:
            world_point: (3,) world coordinate.
            view: 4x4 view matrix.
            projection: 4x4 projection matrix.
            viewport: Target viewport.

        Returns:
            ScreenPoint, or None if the point is behind the eye or outside
            the near/far depth range.
        """
        p = np.append(np.asarray(world_point, dtype=np.float64).reshape(3), 1.0)
        clip = projection @ (view @ p)
        w = clip[3]
        if w <= 0.0:
            return None

        ndc = clip[:3] / w
        if ndc[2] < -1.0 or ndc[2] > 1.0:
            return None

        x = viewport.x + viewport.width * (ndc[0] + 1.0) / 2.0
        y = viewport.y + viewport.height * (ndc[1] + 1.0) / 2.0
        depth = (ndc[2] + 1.0) / 2.0
        return ScreenPoint(float(x), float(y), float(depth))

    @staticmethod
    def label_anchor(
        screen_point: ScreenPoint,
        viewport: Viewport,
        offset: float = 5.0,
    ) -> Tuple[float, float]:
        """
        Convert a projected point to a top-left-origin widget coordinate,
        shifted right and up by `offset` pixels so the text sits beside it.
        """
        return (
            screen_point.x + offset,
            viewport.height - screen_point.y - offset,
        )


__all__ = ["Viewport", "ScreenPoint", "ScreenProjector"]
