"""Services for volume management and periodized programming."""

from .base import BaseService
from .landmarks import VolumeLandmarkStore, landmark_id
from .hierarchy import PeriodizationHierarchy
from .objectives import ObjectiveService
from .planner import SessionPlanner, volume_multiplier
from .templates import ExpansionLayout, TemplateService, build_layout
from .template_catalog import BUILTIN_TEMPLATES

__all__ = [
    # Base classes
    "BaseService",
    # Volume
    "VolumeLandmarkStore",
    "landmark_id",
    "SessionPlanner",
    "volume_multiplier",
    # Periodization
    "PeriodizationHierarchy",
    "ObjectiveService",
    "TemplateService",
    "ExpansionLayout",
    "build_layout",
    "BUILTIN_TEMPLATES",
]
