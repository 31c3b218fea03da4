import math

import pytest

from dock_markers.config import DockConfig
from dock_markers.markers import MarkerDescriptor


@pytest.fixture
def reference_config() -> DockConfig:
    return DockConfig(
        name="testdock",
        drawing_unit="mm",
        markers=(
            MarkerDescriptor(43, 100, (0, 100)),
            MarkerDescriptor(44, 100, (100, 0)),
            MarkerDescriptor(96, 100, (0, 0)),
        ),
        dock_roll_angle=math.radians(-25.0),
        dock_yaw_angle=math.radians(-90.0),
        dock_position=(-0.7053, 0.3105, -0.8378),
    )


@pytest.fixture
def reference_world() -> dict:
    """World-frame corners of reference_config, meters."""
    return {
        96: ((-0.7053, 0.3105, -0.8378), (-0.7053, 0.2105, -0.8378), (-0.6630, 0.3105, -0.7472)),
        44: ((-0.7053, 0.2105, -0.8378), (-0.7053, 0.1105, -0.8378), (-0.6630, 0.2105, -0.7472)),
        43: ((-0.6630, 0.3105, -0.7472), (-0.6630, 0.2105, -0.7472), (-0.6208, 0.3105, -0.6565)),
    }
