from __future__ import annotations

import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from .errors import InvalidArgument


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class MarkerDescriptor:
    """
    One fiducial marker as laid out on the dock target drawing.

    Attributes:
        id: Marker identifier, unique within a run
        edge_size: Marker edge length in drawing units (> 0)
        drawing_position: Top-left corner (x, y) in drawing units, or
            (x, y, y_offset) where the third value is the dock-local Y offset
    """
    id: int
    edge_size: float
    drawing_position: tuple

    def __post_init__(self) -> None:
        if not isinstance(self.id, numbers.Integral) or isinstance(self.id, bool):
            raise InvalidArgument(f"marker id must be an integer (got {self.id!r})")
        object.__setattr__(self, "id", int(self.id))

        if not _is_real(self.edge_size) or not math.isfinite(self.edge_size):
            raise InvalidArgument(
                f"marker {self.id}: edge_size must be a finite number (got {self.edge_size!r})"
            )
        if self.edge_size <= 0:
            raise InvalidArgument(
                f"marker {self.id}: edge_size must be > 0 (got {self.edge_size!r})"
            )
        object.__setattr__(self, "edge_size", float(self.edge_size))

        pos = self.drawing_position
        if isinstance(pos, (str, bytes)) or not isinstance(pos, Sequence) or len(pos) not in (2, 3):
            raise InvalidArgument(
                f"marker {self.id}: drawing_position must be 2 or 3 numbers (got {pos!r})"
            )
        if not all(_is_real(v) and math.isfinite(v) for v in pos):
            raise InvalidArgument(
                f"marker {self.id}: drawing_position must contain finite numbers (got {pos!r})"
            )
        object.__setattr__(self, "drawing_position", tuple(float(v) for v in pos))

    @classmethod
    def from_dict(cls, raw: Any) -> "MarkerDescriptor":
        if not isinstance(raw, dict):
            raise InvalidArgument(f"marker entry must be a mapping (got {raw!r})")
        if "id" not in raw:
            raise InvalidArgument(f"marker entry is missing 'id': {raw!r}")
        marker_id = raw["id"]

        edge_size = raw.get("edge_size", raw.get("size"))
        if edge_size is None:
            raise InvalidArgument(f"marker {marker_id}: edge_size is required")
        pos = raw.get("drawing_position", raw.get("pos"))
        if pos is None:
            raise InvalidArgument(f"marker {marker_id}: drawing_position is required")
        if isinstance(pos, list):
            pos = tuple(pos)
        return cls(marker_id, edge_size, pos)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "edge_size": self.edge_size,
            "drawing_position": list(self.drawing_position),
        }


@dataclass(frozen=True, eq=False)
class CornerTriple:
    """The three tracked corners of one marker, each a (3,) array in a single frame."""

    top_left: np.ndarray
    top_right: np.ndarray
    bottom_left: np.ndarray

    def as_array(self) -> np.ndarray:
        return np.vstack([self.top_left, self.top_right, self.bottom_left])

    def isclose(self, other: "CornerTriple", atol: float = 1e-9) -> bool:
        return bool(np.allclose(self.as_array(), other.as_array(), rtol=0.0, atol=atol))

    def map(self, fn) -> "CornerTriple":
        return CornerTriple(fn(self.top_left), fn(self.top_right), fn(self.bottom_left))


def marker_corners(marker: MarkerDescriptor, scale_factor: float) -> CornerTriple:
    """
    Corners of a marker in the dock-local frame, in meters.

    Drawing (x, y) maps to dock-local (X, Z); dock-local Y is the optional
    third drawing coordinate, else 0. Markers are axis-aligned: top_right is
    one edge along +X from top_left, bottom_left one edge along +Z.
    """
    x, y = marker.drawing_position[:2]
    y_offset = marker.drawing_position[2] if len(marker.drawing_position) == 3 else 0.0
    edge = marker.edge_size

    top_left = scale_factor * np.array([x, y_offset, y])
    top_right = top_left + scale_factor * np.array([edge, 0.0, 0.0])
    bottom_left = top_left + scale_factor * np.array([0.0, 0.0, edge])

    return CornerTriple(top_left, top_right, bottom_left)


@dataclass(frozen=True, eq=False)
class MarkerWorldCorners:
    id: int
    corners: CornerTriple

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "top_left": self.corners.top_left.tolist(),
            "top_right": self.corners.top_right.tolist(),
            "bottom_left": self.corners.bottom_left.tolist(),
        }
