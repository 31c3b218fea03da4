from __future__ import annotations

import json
import math
import numbers
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import InvalidArgument
from .markers import MarkerDescriptor


@dataclass(frozen=True)
class DockConfig:
    name: str = "dock"
    drawing_unit: Optional[str] = None
    markers: tuple = field(default_factory=tuple)
    dock_roll_angle: float = 0.0  # radians, about world X
    dock_yaw_angle: float = 0.0  # radians, about world Z
    dock_position: tuple = (0.0, 0.0, 0.0)  # meters, world frame

    def __post_init__(self) -> None:
        markers = tuple(
            m if isinstance(m, MarkerDescriptor) else MarkerDescriptor.from_dict(m)
            for m in self.markers
        )
        if not markers:
            raise InvalidArgument("markers: at least one marker must be configured")
        seen: set[int] = set()
        for m in markers:
            if m.id in seen:
                raise InvalidArgument(f"marker {m.id}: id must be unique (duplicate id)")
            seen.add(m.id)
        object.__setattr__(self, "markers", markers)

        if self.drawing_unit is not None and not isinstance(self.drawing_unit, str):
            raise InvalidArgument(
                f"drawing_unit must be a string such as 'mm' or 'in' (got {self.drawing_unit!r})"
            )

        for key in ("dock_roll_angle", "dock_yaw_angle"):
            value = getattr(self, key)
            if not _finite(value):
                raise InvalidArgument(f"{key} must be a finite number of radians (got {value!r})")
            object.__setattr__(self, key, float(value))

        pos = self.dock_position
        if isinstance(pos, (str, bytes)) or not hasattr(pos, "__len__") or len(pos) != 3:
            raise InvalidArgument(f"dock_position must be 3 numbers (got {pos!r})")
        if not all(_finite(v) for v in pos):
            raise InvalidArgument(f"dock_position must contain finite numbers (got {pos!r})")
        object.__setattr__(self, "dock_position", tuple(float(v) for v in pos))

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "drawing_unit": self.drawing_unit,
            "markers": [m.as_dict() for m in self.markers],
            "dock_roll_angle": self.dock_roll_angle,
            "dock_yaw_angle": self.dock_yaw_angle,
            "dock_position": list(self.dock_position),
        }

    def apply_overrides(self, **kwargs: Any) -> "DockConfig":
        changes = {
            key: value
            for key, value in kwargs.items()
            if value is not None and hasattr(self, key)
        }
        return replace(self, **changes) if changes else self


def _finite(value: Any) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def default_config() -> DockConfig:
    """Marker layout of the dock target as mounted in the reference installation."""
    return DockConfig(
        name="dock",
        drawing_unit="mm",
        markers=(
            MarkerDescriptor(43, 100.0, (0.0, 100.0)),
            MarkerDescriptor(44, 100.0, (100.0, 0.0)),
            MarkerDescriptor(96, 100.0, (0.0, 0.0)),
        ),
        dock_roll_angle=math.radians(-25.0),
        dock_yaw_angle=math.radians(-90.0),
        dock_position=(-0.7053, 0.3105, -0.8378),
    )


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fp:
        try:
            data = yaml.safe_load(fp) or {}
        except yaml.YAMLError as exc:
            raise InvalidArgument(f"{path}: invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidArgument("YAML config root must be a mapping")
    return data


def _angle(raw: dict[str, Any], rad_key: str, deg_key: str, default: float) -> Any:
    if rad_key in raw and deg_key in raw:
        raise InvalidArgument(f"give either {rad_key} or {deg_key}, not both")
    if deg_key in raw:
        value = raw[deg_key]
        if not _finite(value):
            raise InvalidArgument(f"{deg_key} must be a finite number of degrees (got {value!r})")
        return math.radians(value)
    return raw.get(rad_key, default)


def config_from_dict(raw: dict[str, Any]) -> DockConfig:
    if not isinstance(raw, dict):
        raise InvalidArgument("Config root must be a JSON/YAML object")

    markers_raw = raw.get("markers")
    if not isinstance(markers_raw, list):
        raise InvalidArgument("markers must be a list of marker entries")

    unit = raw.get("drawing_unit")
    return DockConfig(
        name=str(raw.get("name", "dock")),
        drawing_unit=None if unit is None else str(unit),
        markers=tuple(MarkerDescriptor.from_dict(m) for m in markers_raw),
        dock_roll_angle=_angle(raw, "dock_roll_angle", "dock_roll_deg", 0.0),
        dock_yaw_angle=_angle(raw, "dock_yaw_angle", "dock_yaw_deg", 0.0),
        dock_position=raw.get("dock_position", (0.0, 0.0, 0.0)),
    )


def load_config(path: str | Path) -> DockConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")

    if p.suffix.lower() in {".yaml", ".yml"}:
        raw = _load_yaml(p)
    else:
        with p.open("r", encoding="utf-8") as fp:
            try:
                raw = json.load(fp)
            except json.JSONDecodeError as exc:
                raise InvalidArgument(f"{p}: invalid JSON: {exc}") from exc

    return config_from_dict(raw)
