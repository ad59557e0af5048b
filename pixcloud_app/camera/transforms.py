"""
Rotation and 4x4 view/projection helpers (OpenGL conventions, column vectors).
"""

from __future__ import annotations

import math

import cv2
import numpy as np


EPS = 1e-9


def normalize(vec: np.ndarray) -> np.ndarray:
    """Return vec / ||vec||, or vec unchanged if it is (near) zero length."""
    vec = np.asarray(vec, dtype=np.float64)
    norm = np.linalg.norm(vec)
    if norm < EPS:
        return vec
    return vec / norm


def any_perpendicular(vec: np.ndarray) -> np.ndarray:
    """Unit vector perpendicular to `vec`, picked against its smallest component."""
    vec = normalize(vec)
    helper = np.zeros(3)
    helper[int(np.argmin(np.abs(vec)))] = 1.0
    return normalize(np.cross(vec, helper))


def rotation_matrix(axis: np.ndarray, angle_deg: float) -> np.ndarray:
    """
    Rotation matrix (3x3) for a right-handed rotation about `axis`.

    Args:
        axis: Rotation axis (3,), need not be normalized.
        angle_deg: Rotation angle in degrees.

    Returns:
        3x3 rotation matrix. Identity if the axis has zero length.
    """
    axis = np.asarray(axis, dtype=np.float64)
    if np.linalg.norm(axis) < EPS:
        return np.eye(3)
    rvec = normalize(axis) * math.radians(angle_deg)
    R, _ = cv2.Rodrigues(rvec.reshape(3, 1))
    return R


def look_at(eye: np.ndarray, center: np.ndarray, up: np.ndarray) -> np.ndarray:
    """
    View matrix (4x4) equivalent to gluLookAt.

    Args:
        eye: Camera position (3,).
        center: Look-at target (3,).
        up: Up vector (3,).

    Returns:
        4x4 world-to-camera matrix.
    """
    eye = np.asarray(eye, dtype=np.float64)
    forward = normalize(np.asarray(center, dtype=np.float64) - eye)
    side = np.cross(forward, np.asarray(up, dtype=np.float64))
    if np.linalg.norm(side) < EPS:
        side = any_perpendicular(forward)
    side = normalize(side)
    true_up = np.cross(side, forward)

    M = np.eye(4)
    M[0, :3] = side
    M[1, :3] = true_up
    M[2, :3] = -forward
    M[:3, 3] = -M[:3, :3] @ eye
    return M


def perspective(fov_deg: float, aspect: float, near: float, far: float) -> np.ndarray:
    """
    Projection matrix (4x4) equivalent to gluPerspective.

    Raises:
        ValueError: For non-positive aspect/near, far <= near, or fov outside (0, 180).
    """
    if aspect <= 0:
        raise ValueError(f"Aspect ratio must be positive, got {aspect}")
    if near <= 0 or far <= near:
        raise ValueError(f"Need 0 < near < far, got near={near}, far={far}")
    if not 0 < fov_deg < 180:
        raise ValueError(f"Field of view must be in (0, 180) degrees, got {fov_deg}")

    f = 1.0 / math.tan(math.radians(fov_deg) / 2.0)
    P = np.zeros((4, 4))
    P[0, 0] = f / aspect
    P[1, 1] = f
    P[2, 2] = (far + near) / (near - far)
    P[2, 3] = 2.0 * far * near / (near - far)
    P[3, 2] = -1.0
    return P


__all__ = ["EPS", "normalize", "any_perpendicular", "rotation_matrix", "look_at", "perspective"]
