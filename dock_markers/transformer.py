from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

import numpy as np

from .config import DockConfig
from .logging_utils import setup_logger
from .markers import MarkerDescriptor, MarkerWorldCorners, marker_corners
from .output import OutputSink, TextOutput
from .transforms import DockFrame
from .units import UnitScale, resolve_unit


def transform_all(
    markers: Iterable[MarkerDescriptor],
    rotation: np.ndarray,
    translation,
    scale_factor: float,
) -> list[MarkerWorldCorners]:
    """
    Map every marker's corners from the drawing into the world frame.

    Each corner is scaled into the dock-local frame, then
    world = rotation @ local + translation. Markers are independent and the
    result keeps configuration order, one entry per marker.
    """
    frame = DockFrame(
        np.asarray(rotation, dtype=np.float64),
        np.asarray(translation, dtype=np.float64).reshape(3),
    )
    return [
        MarkerWorldCorners(m.id, marker_corners(m, scale_factor).map(frame.apply))
        for m in markers
    ]


@dataclass
class RunSummary:
    markers: list[MarkerWorldCorners]
    unit: UnitScale
    frame: DockFrame

    def dock_info(self, config: DockConfig) -> dict[str, Any]:
        rvec, _ = self.frame.as_rvec_tvec()
        return {
            "name": config.name,
            "unit": config.drawing_unit,
            "scale_factor": self.unit.scale,
            "unit_defaulted": not self.unit.known,
            "roll": config.dock_roll_angle,
            "yaw": config.dock_yaw_angle,
            "position": list(config.dock_position),
            "rvec": rvec.reshape(-1).tolist(),
        }


class DockMarkerCalculator:
    def __init__(
        self,
        config: DockConfig,
        logger: Optional[logging.Logger] = None,
        outputs: Optional[list[OutputSink]] = None,
    ):
        self.config = config
        self.logger = logger or setup_logger(config.name)
        self.outputs = outputs if outputs is not None else [TextOutput()]

    def compute(self) -> RunSummary:
        cfg = self.config
        unit = resolve_unit(cfg.drawing_unit, log=self.logger)
        frame = DockFrame.from_angles(cfg.dock_roll_angle, cfg.dock_yaw_angle, cfg.dock_position)

        self.logger.info(
            "dock=%s unit=%s scale=%g roll=%.6f yaw=%.6f markers=%d",
            cfg.name, cfg.drawing_unit, unit.scale,
            cfg.dock_roll_angle, cfg.dock_yaw_angle, len(cfg.markers),
        )

        results = transform_all(cfg.markers, frame.rotation, frame.translation, unit.scale)
        for r in results:
            self.logger.debug(
                "marker=%d top_left=%s top_right=%s bottom_left=%s",
                r.id, r.corners.top_left, r.corners.top_right, r.corners.bottom_left,
            )
        return RunSummary(results, unit, frame)

    def run(self) -> RunSummary:
        # everything is computed before any sink is opened
        summary = self.compute()
        dock = summary.dock_info(self.config)

        opened: list[OutputSink] = []
        try:
            for out in self.outputs:
                out.open(dock)
                opened.append(out)
            for record in summary.markers:
                for out in opened:
                    out.write_marker(record)
        finally:
            for out in opened:
                out.close()

        self.logger.info("summary markers=%d outputs=%d", len(summary.markers), len(self.outputs))
        return summary
