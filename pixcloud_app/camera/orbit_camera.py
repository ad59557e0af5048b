"""
Orbit camera: eye / center / up state with preset views, rotations, pan and zoom.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from pixcloud_app.camera.transforms import (
    EPS,
    any_perpendicular,
    look_at,
    normalize,
    perspective,
    rotation_matrix,
)


DEFAULT_EYE = (0.0, 0.0, 0.0)
DEFAULT_CENTER = (1.0, 1.0, 1.0)
DEFAULT_UP = (0.0, -1.0, 0.0)

# Zoom never brings the eye closer to the center than this.
MIN_DISTANCE = 1.0
# Zooming out stops here so the eye stays finite.
MAX_DISTANCE = 1e6
# Offset added to the top preset so the view direction is never parallel to up.
TOP_VIEW_NUDGE = 0.01


class DegenerateCameraError(ValueError):
    """Raised for a camera configuration with eye == center or a zero up vector."""


@dataclass
class CameraState:
    """Camera basis: eye is the viewpoint, center the look-at target."""

    eye: np.ndarray
    center: np.ndarray
    up: np.ndarray

    def copy(self) -> "CameraState":
        return CameraState(self.eye.copy(), self.center.copy(), self.up.copy())

    def as_tuples(self) -> Tuple[Tuple[float, ...], Tuple[float, ...], Tuple[float, ...]]:
        return tuple(self.eye.tolist()), tuple(self.center.tolist()), tuple(self.up.tolist())


def _validated_state(
    eye: Sequence[float],
    center: Sequence[float],
    up: Sequence[float],
) -> CameraState:
    eye = np.asarray(eye, dtype=np.float64).reshape(3)
    center = np.asarray(center, dtype=np.float64).reshape(3)
    up = np.asarray(up, dtype=np.float64).reshape(3)

    if not (np.all(np.isfinite(eye)) and np.all(np.isfinite(center)) and np.all(np.isfinite(up))):
        raise DegenerateCameraError("Camera vectors must be finite")
    if np.linalg.norm(eye - center) < EPS:
        raise DegenerateCameraError(f"Camera eye and center coincide at {eye.tolist()}")
    if np.linalg.norm(up) < EPS:
        raise DegenerateCameraError("Camera up vector has zero length")

    return CameraState(eye=eye, center=center, up=normalize(up))


class OrbitCamera:
    """
    Camera orbiting a look-at center.

    Holds a live state, mutated by every operation below, and a baseline
    state that only `set_baseline` changes and `reset` restores. Rotation,
    pan and zoom never fail: they clamp or renormalize instead.
    """

    def __init__(
        self,
        eye: Sequence[float] = DEFAULT_EYE,
        center: Sequence[float] = DEFAULT_CENTER,
        up: Sequence[float] = DEFAULT_UP,
    ) -> None:
        self._baseline = _validated_state(eye, center, up)
        self._live = self._baseline.copy()

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def eye(self) -> np.ndarray:
        return self._live.eye.copy()

    @property
    def center(self) -> np.ndarray:
        return self._live.center.copy()

    @property
    def up(self) -> np.ndarray:
        return self._live.up.copy()

    @property
    def state(self) -> CameraState:
        return self._live.copy()

    @property
    def baseline(self) -> CameraState:
        return self._baseline.copy()

    def distance(self) -> float:
        return float(np.linalg.norm(self._live.eye - self._live.center))

    def _view_direction(self) -> np.ndarray:
        """Unit vector from center to eye."""
        return normalize(self._live.eye - self._live.center)

    def _right_axis(self) -> np.ndarray:
        """
        normalize(cross(view, up)), with view = eye - center.

        Falls back to an arbitrary perpendicular when up is parallel to the
        view direction, so callers never see a zero-length axis.
        """
        view = self._view_direction()
        right = np.cross(view, self._live.up)
        if np.linalg.norm(right) < EPS:
            return any_perpendicular(view)
        return normalize(right)

    def _screen_basis(self) -> Tuple[np.ndarray, np.ndarray]:
        """Screen-space (right, up) for a camera looking from eye to center."""
        forward = -self._view_direction()
        right = np.cross(forward, self._live.up)
        if np.linalg.norm(right) < EPS:
            right = any_perpendicular(forward)
        right = normalize(right)
        true_up = normalize(np.cross(right, forward))
        return right, true_up

    # ------------------------------------------------------------------
    # Baseline
    # ------------------------------------------------------------------
    def set_baseline(
        self,
        eye: Sequence[float],
        center: Sequence[float],
        up: Sequence[float],
    ) -> None:
        """
        Replace the baseline state. The live state is untouched until `reset`.

        Raises:
            DegenerateCameraError: If eye == center or up has zero length.
        """
        self._baseline = _validated_state(eye, center, up)

    def reset(self) -> None:
        self._live = self._baseline.copy()

    # ------------------------------------------------------------------
    # Preset views (distance to center is preserved)
    # ------------------------------------------------------------------
    def preset_front(self) -> None:
        distance = self.distance()
        self._live.eye = self._live.center + np.array([0.0, 0.0, -distance])
        self._live.up = np.array([0.0, -1.0, 0.0])

    def preset_right(self) -> None:
        distance = self.distance()
        self._live.eye = self._live.center + np.array([distance, 0.0, 0.0])
        self._live.up = np.array([0.0, 1.0, 0.0])

    def preset_top(self) -> None:
        distance = self.distance()
        self._live.eye = self._live.center + np.array([0.0, distance, TOP_VIEW_NUDGE])
        self._live.up = np.array([0.0, 0.0, -1.0])

    # ------------------------------------------------------------------
    # Rotations
    # ------------------------------------------------------------------
    def yaw(self, angle_deg: float) -> None:
        """Rotate the eye about the up axis through the center."""
        R = rotation_matrix(self._live.up, angle_deg)
        self._live.eye = self._live.center + R @ (self._live.eye - self._live.center)

    def pitch(self, angle_deg: float) -> None:
        """Rotate eye and up about the right axis; can pass over the poles."""
        R = rotation_matrix(self._right_axis(), angle_deg)
        self._live.eye = self._live.center + R @ (self._live.eye - self._live.center)
        self._live.up = normalize(R @ self._live.up)

    def roll(self, angle_deg: float) -> None:
        """Rotate up about the view direction; eye stays put."""
        R = rotation_matrix(self._view_direction(), angle_deg)
        self._live.up = normalize(R @ self._live.up)

    def orbit_drag(self, dx: float, dy: float, sensitivity: float = 0.2) -> None:
        """
        Mouse-drag orbit: yaw by -dx*sensitivity about up, pitch by
        -dy*sensitivity about the right axis. Only the eye moves.
        """
        R = rotation_matrix(self._live.up, -dx * sensitivity) @ rotation_matrix(
            self._right_axis(), -dy * sensitivity
        )
        self._live.eye = self._live.center + R @ (self._live.eye - self._live.center)

    # ------------------------------------------------------------------
    # Pan / zoom
    # ------------------------------------------------------------------
    def _pan_offset(self, dx: float, dy: float, speed_scale: float) -> np.ndarray:
        speed = speed_scale * self.distance()
        right, true_up = self._screen_basis()
        return -right * dx * speed + true_up * dy * speed

    def pan(self, dx: float, dy: float, speed_scale: float = 0.002) -> None:
        """Translate eye and center together along the screen right/up basis."""
        offset = self._pan_offset(dx, dy, speed_scale)
        self._live.eye = self._live.eye + offset
        self._live.center = self._live.center + offset

    def pan_center(self, dx: float, dy: float, speed_scale: float = 0.002) -> None:
        """Move only the look-at center. Ignored if it would land on the eye."""
        offset = self._pan_offset(dx, dy, speed_scale)
        new_center = self._live.center + offset
        if np.linalg.norm(self._live.eye - new_center) < EPS:
            return
        self._live.center = new_center

    def zoom(self, delta: float) -> None:
        """
        Move the eye along the view direction.

        Args:
            delta: Zoom steps (one mouse-wheel notch = 1.0). Positive moves
                toward the center. Each step covers max(1, 0.1 * distance).
                Non-finite deltas are ignored; the distance stays within
                [MIN_DISTANCE, MAX_DISTANCE] unless it already started outside.
        """
        if not math.isfinite(delta):
            return
        distance = self.distance()
        step = max(1.0, 0.1 * distance)
        new_distance = distance - delta * step
        floor = min(MIN_DISTANCE, distance)
        if new_distance < floor:
            new_distance = floor
        elif not new_distance <= MAX_DISTANCE:
            new_distance = max(MAX_DISTANCE, distance)
        self._live.eye = self._live.center + self._view_direction() * new_distance

    # ------------------------------------------------------------------
    # Matrices
    # ------------------------------------------------------------------
    def view_matrix(self) -> np.ndarray:
        return look_at(self._live.eye, self._live.center, self._live.up)

    def projection_matrix(
        self,
        aspect: float,
        fov_deg: float = 45.0,
        near: float = 0.1,
        far: float = 10000.0,
    ) -> np.ndarray:
        return perspective(fov_deg, aspect, near, far)


__all__ = [
    "DEFAULT_EYE",
    "DEFAULT_CENTER",
    "DEFAULT_UP",
    "MIN_DISTANCE",
    "MAX_DISTANCE",
    "TOP_VIEW_NUDGE",
    "DegenerateCameraError",
    "CameraState",
    "OrbitCamera",
]
