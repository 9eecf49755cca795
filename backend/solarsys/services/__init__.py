"""Services package."""

from .attribute_reader import AttributeReader
from .body_service import BodyDraft, BodyService
from .catalog_loader import CatalogLoader, load_solar_system_objects
from .frame_service import FrameService, nesting_depth
from .timeline_service import TimelineService, TimelineUpdate
from .trajectory_service import TrajectoryService

__all__ = [
    "AttributeReader",
    "BodyDraft",
    "BodyService",
    "CatalogLoader",
    "load_solar_system_objects",
    "FrameService",
    "nesting_depth",
    "TimelineService",
    "TimelineUpdate",
    "TrajectoryService",
]
