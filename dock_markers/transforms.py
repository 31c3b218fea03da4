"""Rotation and rigid-transform utilities for placing the dock in the world frame."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

import cv2
import numpy as np

from .errors import InvalidArgument


class Axis(str, Enum):
    X = "x"
    Z = "z"


def rotation_matrix(angle: float, axis: Union[Axis, str]) -> np.ndarray:
    """
    Build a right-handed 3x3 rotation about a principal axis.

    Args:
        angle: Rotation angle in radians
        axis: Axis.X or Axis.Z (the strings "x"/"z" are accepted too)

    Returns:
        3x3 rotation matrix

    Raises:
        InvalidArgument: if the axis is not X or Z
    """
    try:
        axis = Axis(str(getattr(axis, "value", axis)).strip().lower())
    except ValueError:
        raise InvalidArgument(
            f"rotation axis must be one of X, Z (got {axis!r})"
        ) from None

    c, s = np.cos(angle), np.sin(angle)

    if axis is Axis.X:
        return np.array([
            [1.0, 0.0, 0.0],
            [0.0, c, -s],
            [0.0, s, c],
        ])

    return np.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def is_rotation_matrix(R: np.ndarray, atol: float = 1e-9) -> bool:
    """True if R is 3x3, orthonormal (R^T == R^-1) and has determinant +1."""
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3):
        return False
    return bool(
        np.allclose(R.T @ R, np.eye(3), atol=atol)
        and np.isclose(np.linalg.det(R), 1.0, atol=atol)
    )


def dock_to_world(roll: float, yaw: float) -> np.ndarray:
    """
    Compose the dock-to-world rotation.

    Roll (about X) is applied first in dock-local space, then yaw (about Z)
    aligns the rolled frame with the world azimuth:

        R = Rz(yaw) @ Rx(roll)
    """
    return rotation_matrix(yaw, Axis.Z) @ rotation_matrix(roll, Axis.X)


def matrix_to_rvec_tvec(T: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split a 4x4 pose into the OpenCV (rvec, tvec) pair used by pose consumers.

    Args:
        T: 4x4 homogeneous transform (rotation block must be orthonormal)

    Returns:
        (rvec, tvec), both (3,1); rvec is the Rodrigues axis-angle vector
    """
    R = np.ascontiguousarray(T[:3, :3], dtype=np.float64)
    tvec = T[:3, 3].reshape(3, 1)

    rvec, _ = cv2.Rodrigues(R)

    return rvec, tvec


@dataclass(frozen=True, eq=False)
class DockFrame:
    """Fixed dock pose in the world frame: world = rotation @ local + translation."""

    rotation: np.ndarray
    translation: np.ndarray

    @classmethod
    def from_angles(cls, roll: float, yaw: float, translation) -> "DockFrame":
        t = np.asarray(translation, dtype=np.float64).reshape(3)
        return cls(dock_to_world(roll, yaw), t)

    def apply(self, point) -> np.ndarray:
        p = np.asarray(point, dtype=np.float64).reshape(3)
        return self.rotation @ p + self.translation

    def as_matrix(self) -> np.ndarray:
        T = np.eye(4)
        T[:3, :3] = self.rotation
        T[:3, 3] = self.translation
        return T

    def as_rvec_tvec(self) -> Tuple[np.ndarray, np.ndarray]:
        return matrix_to_rvec_tvec(self.as_matrix())
