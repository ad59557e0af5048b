"""
Pixel-to-point correspondence: exact index lookup with nearest-pixel fallback.
"""

from __future__ import annotations

from typing import Optional

from pixcloud_app.cloud.data_structures import CorrespondenceResult
from pixcloud_app.cloud.point_store import PointStore


class CorrespondenceEngine:
    """
    Resolves a clicked image pixel to a point of the loaded cloud.

    Args:
        store: PointStore holding the current cloud.
        allow_unmapped_fallback: If False (default), clouds loaded without
            pixel coordinates never produce a match, since every point sits
            at (0, 0) and the nearest scan would always return index 0.
    """

    def __init__(self, store: PointStore, allow_unmapped_fallback: bool = False) -> None:
        self.store = store
        self.allow_unmapped_fallback = allow_unmapped_fallback

    def query(self, u: int, v: int) -> Optional[CorrespondenceResult]:
        """
        Resolve (u, v) to a point index.

        Tries the pixel index first and only scans for the nearest pixel
        coordinate on a miss.

        Args:
            u, v: Non-negative integer pixel coordinates in the reference image.

        Returns:
            CorrespondenceResult with `exact` set accordingly, or None if the
            cloud is empty (or has no pixel mapping and fallback is disabled).

        Raises:
            ValueError: If u or v is negative or not a whole number.
        """
        if u != int(u) or v != int(v):
            raise ValueError(f"Pixel coordinates must be integers, got ({u}, {v})")
        if u < 0 or v < 0:
            raise ValueError(f"Pixel coordinates must be non-negative, got ({u}, {v})")
        u, v = int(u), int(v)

        store = self.store
        if store.is_empty():
            print("[query] No points loaded to search.")
            return None

        index = store.exact_lookup(u, v)
        if index is not None:
            point = store.point_at(index)
            print(f"[query] Point found at ({u}, {v}): index {index}")
            return CorrespondenceResult(index=index, exact=True, point=point)

        if not store.has_pixels and not self.allow_unmapped_fallback:
            print(f"[query] Cloud has no pixel mapping; not searching for ({u}, {v}).")
            return None

        print(f"[query] No exact match for ({u}, {v}). Searching for nearest point...")
        index = store.nearest_by_pixel(u, v)
        if index is None:
            return None

        point = store.point_at(index)
        print(f"[query] Nearest point found at {point.pixel}: index {index}")
        return CorrespondenceResult(
            index=index,
            exact=False,
            point=point,
            pixel_distance=store.pixel_distance(index, u, v),
        )


__all__ = ["CorrespondenceEngine"]
