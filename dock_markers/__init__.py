"""World-frame corner positions for the dock fiducial markers."""

from .config import DockConfig, default_config, load_config
from .errors import InvalidArgument
from .markers import CornerTriple, MarkerDescriptor, MarkerWorldCorners, marker_corners
from .transformer import DockMarkerCalculator, RunSummary, transform_all
from .transforms import Axis, DockFrame, dock_to_world, rotation_matrix
from .units import KnownUnit, UnrecognizedUnit, resolve_unit, scale_factor

__all__ = [
    "Axis",
    "CornerTriple",
    "DockConfig",
    "DockFrame",
    "DockMarkerCalculator",
    "InvalidArgument",
    "KnownUnit",
    "MarkerDescriptor",
    "MarkerWorldCorners",
    "RunSummary",
    "UnrecognizedUnit",
    "default_config",
    "dock_to_world",
    "load_config",
    "marker_corners",
    "resolve_unit",
    "rotation_matrix",
    "scale_factor",
    "transform_all",
]
