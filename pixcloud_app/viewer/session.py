"""
Viewer session: wires the point store, correspondence engine, orbit camera
and screen projector together and turns input events into their outcomes.

A GUI (or the CLI) owns one ViewerSession and forwards clicks, drags and
wheel ticks to it; everything it needs to draw comes back as plain values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from pixcloud_app.camera.orbit_camera import OrbitCamera
from pixcloud_app.camera.projection import ScreenProjector, Viewport
from pixcloud_app.cloud.correspondence import CorrespondenceEngine
from pixcloud_app.cloud.data_structures import (
    CorrespondenceResult,
    HighlightSegment,
    LoadResult,
    VertexRecords,
)
from pixcloud_app.cloud.point_store import PointStore


# Reported by highlight_distance() when no segment is active.
INACTIVE_DISTANCE = -1.0

WHEEL_NOTCH = 120.0


@dataclass(frozen=True)
class ClickOutcome:
    """Result of an image click, with the reason when nothing was found."""

    result: Optional[CorrespondenceResult]
    segment: Optional[HighlightSegment]
    # "exact", "nearest", "empty_cloud" or "no_pixel_mapping".
    reason: str

    @property
    def found(self) -> bool:
        return self.result is not None


class ViewerSession:
    """
    Owns the viewer's state objects.

    Args:
        camera: Optional pre-configured OrbitCamera (default baseline otherwise).
        allow_unmapped_fallback: Passed to the CorrespondenceEngine.
        fov_deg, near, far: Projection parameters used for overlay placement.
    """

    def __init__(
        self,
        camera: Optional[OrbitCamera] = None,
        allow_unmapped_fallback: bool = False,
        fov_deg: float = 45.0,
        near: float = 0.1,
        far: float = 10000.0,
    ) -> None:
        self.store = PointStore()
        self.engine = CorrespondenceEngine(self.store, allow_unmapped_fallback)
        self.camera = camera if camera is not None else OrbitCamera()
        self.projector = ScreenProjector()
        self.fov_deg = fov_deg
        self.near = near
        self.far = far

        self._segment: Optional[HighlightSegment] = None
        self._segment_generation = self.store.generation

    # ------------------------------------------------------------------
    # Cloud / correspondence
    # ------------------------------------------------------------------
    def load(self, records: VertexRecords) -> LoadResult:
        """Load a new cloud. A failed load (LoadError) keeps the old cloud and highlight."""
        result = self.store.load(records)
        self._segment = None
        return result

    @property
    def segment(self) -> Optional[HighlightSegment]:
        # A reload done directly on the store also invalidates the segment.
        if self._segment is not None and self._segment_generation != self.store.generation:
            self._segment = None
        return self._segment

    def click(self, u: int, v: int) -> ClickOutcome:
        """Resolve an image click and update the highlight segment."""
        result = self.engine.query(u, v)
        if result is None:
            self._segment = None
            reason = "empty_cloud" if self.store.is_empty() else "no_pixel_mapping"
            return ClickOutcome(result=None, segment=None, reason=reason)

        self._segment = HighlightSegment(start=self.camera.eye, end=result.point.xyz)
        self._segment_generation = self.store.generation
        reason = "exact" if result.exact else "nearest"
        return ClickOutcome(result=result, segment=self._segment, reason=reason)

    def highlight_distance(self) -> float:
        segment = self.segment
        return segment.length if segment is not None else INACTIVE_DISTANCE

    def label_position(
        self,
        width: int,
        height: int,
        fov_deg: Optional[float] = None,
    ) -> Optional[Tuple[float, float]]:
        """
        Widget coordinate (origin top-left) for the distance label of the
        active segment in a width x height view, or None if there is no
        active segment or its midpoint cannot be projected.

        `fov_deg` overrides the session's field of view for this frame.
        """
        segment = self.segment
        if segment is None or width <= 0 or height <= 0:
            return None

        if fov_deg is None:
            fov_deg = self.fov_deg
        viewport = Viewport.of_size(width, height)
        screen_point = self.projector.project(
            segment.midpoint,
            self.camera.view_matrix(),
            self.camera.projection_matrix(viewport.aspect, fov_deg, self.near, self.far),
            viewport,
        )
        if screen_point is None:
            return None
        return self.projector.label_anchor(screen_point, viewport)

    # ------------------------------------------------------------------
    # Camera input
    # ------------------------------------------------------------------
    def configure_baseline(
        self,
        eye: Sequence[float],
        center: Sequence[float],
        up: Sequence[float],
    ) -> None:
        """Set a new baseline view and jump to it."""
        self.camera.set_baseline(eye, center, up)
        self.camera.reset()

    def drag(self, dx: float, dy: float, button: str) -> None:
        """
        Mouse drag: "left" orbits, "right" pans eye and center,
        "middle" moves only the center.
        """
        if button == "left":
            self.camera.orbit_drag(dx, dy)
        elif button == "right":
            self.camera.pan(dx, dy)
        elif button == "middle":
            self.camera.pan_center(dx, dy)
        else:
            raise ValueError(f"Unknown mouse button: {button!r}")

    def wheel(self, angle_delta: float) -> None:
        """Mouse wheel, `angle_delta` in eighths of a degree (120 per notch)."""
        self.camera.zoom(angle_delta / WHEEL_NOTCH)

    # ------------------------------------------------------------------
    # Status text
    # ------------------------------------------------------------------
    def camera_info_text(self) -> str:
        eye, center, up = self.camera.state.as_tuples()
        return (
            f"Position: ({eye[0]:.1f}, {eye[1]:.1f}, {eye[2]:.1f})\n"
            f"Center: ({center[0]:.1f}, {center[1]:.1f}, {center[2]:.1f})\n"
            f"Up: ({up[0]:.2f}, {up[1]:.2f}, {up[2]:.2f})"
        )

    def window_title(self) -> str:
        return self.camera_info_text().replace("\n", " | ")

    def distance_text(self) -> Optional[str]:
        """Label text for the active segment, or None to hide the label."""
        distance = self.highlight_distance()
        if distance < 0:
            return None
        return f"Selected distance: {distance:.2f} m"


__all__ = ["INACTIVE_DISTANCE", "ClickOutcome", "ViewerSession"]
