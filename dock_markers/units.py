"""Drawing-unit resolution (drawing units -> meters)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)

METERS_PER_UNIT = {
    "mm": 0.001,
    "in": 0.0254,
    "m": 1.0,
}

FALLBACK_SCALE = 1.0


@dataclass(frozen=True)
class KnownUnit:
    label: str
    scale: float

    @property
    def known(self) -> bool:
        return True


@dataclass(frozen=True)
class UnrecognizedUnit:
    """Unit label that is missing or not in METERS_PER_UNIT; coordinates are taken as meters."""

    label: Optional[str]
    diagnostic: str
    fallback_scale: float = FALLBACK_SCALE

    @property
    def known(self) -> bool:
        return False

    @property
    def scale(self) -> float:
        return self.fallback_scale


UnitScale = Union[KnownUnit, UnrecognizedUnit]


def resolve_unit(label: Optional[str], log: Optional[logging.Logger] = None) -> UnitScale:
    """
    Resolve a drawing-unit label to its meters-per-unit scale.

    Missing or unknown labels fall back to 1.0 and emit a warning on `log`
    (the module logger by default); they never fail the run.
    """
    key = "" if label is None else str(label).strip().lower()
    if key in METERS_PER_UNIT:
        return KnownUnit(key, METERS_PER_UNIT[key])

    if not key:
        reason = "no drawing unit configured"
    else:
        reason = f"unrecognized drawing unit {label!r}"
    diagnostic = (
        f"{reason}; using scale factor {FALLBACK_SCALE} (coordinates taken as meters). "
        f"Known units: {', '.join(sorted(METERS_PER_UNIT))}"
    )
    (log or logger).warning(diagnostic)
    return UnrecognizedUnit(label, diagnostic)


def scale_factor(label: Optional[str]) -> float:
    return resolve_unit(label).scale
