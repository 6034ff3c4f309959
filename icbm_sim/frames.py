"""
ICBM Trajectory Optimizer - Vector Operations and Frame Rotations

All vectors are numpy arrays of shape (3,) in the Earth-centred frame (km).
Rotations use Rodrigues' formula; degenerate (zero-length) inputs map to
zero vectors instead of raising.
"""

import numpy as np

from . import constants as C


def normalize(v: np.ndarray) -> np.ndarray:
    """
    Normalize a vector to unit length.

    Args:
        v: Vector [3]

    Returns:
        Unit vector, or zero vector if the input is degenerate
    """
    norm = np.linalg.norm(v)
    if norm < C.ZERO_TOLERANCE:
        return np.zeros(3)
    return v / norm


def angle_between(a: np.ndarray, b: np.ndarray) -> float:
    """
    Angle between two vectors (radians, in [0, pi]).

    Returns 0.0 if either vector is degenerate.
    """
    na = np.linalg.norm(a)
    nb = np.linalg.norm(b)
    if na < C.ZERO_TOLERANCE or nb < C.ZERO_TOLERANCE:
        return 0.0
    cos_theta = np.dot(a, b) / (na * nb)
    return float(np.arccos(np.clip(cos_theta, -1.0, 1.0)))


def rotate_about_axis(v: np.ndarray, axis: np.ndarray, angle: float) -> np.ndarray:
    """
    Rotate vector v about axis by angle (right-hand rule).

    Rodrigues' rotation:
        v_rot = v cos(a) + (k x v) sin(a) + k (k . v)(1 - cos(a))

    Args:
        v: Vector to rotate [3]
        axis: Rotation axis [3] (need not be unit length)
        angle: Rotation angle (rad)

    Returns:
        Rotated vector. If the axis is degenerate v is returned unchanged.
    """
    k = normalize(axis)
    if not np.any(k):
        return np.array(v, dtype=np.float64)
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    return v * cos_a + np.cross(k, v) * sin_a + k * np.dot(k, v) * (1.0 - cos_a)


def project_onto_plane(v: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """
    Project v onto the plane perpendicular to normal.
    """
    n = normalize(normal)
    return v - np.dot(v, n) * n


def rotation_about_y(angle: float) -> np.ndarray:
    """
    Rotation matrix about the +Y (polar) axis.

    Args:
        angle: Rotation angle (rad)

    Returns:
        3x3 rotation matrix
    """
    c = np.cos(angle)
    s = np.sin(angle)
    return np.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ])
