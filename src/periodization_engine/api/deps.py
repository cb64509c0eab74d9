"""Dependency injection for API routes."""

from functools import lru_cache

from ..config import get_settings
from ..db.repositories.sqlite_store import SQLiteRecordStore
from ..services.hierarchy import PeriodizationHierarchy
from ..services.landmarks import VolumeLandmarkStore
from ..services.objectives import ObjectiveService
from ..services.planner import SessionPlanner
from ..services.templates import TemplateService


@lru_cache
def get_store() -> SQLiteRecordStore:
    """Get the record store instance."""
    settings = get_settings()
    return SQLiteRecordStore(str(settings.database_path))


@lru_cache
def get_landmark_store() -> VolumeLandmarkStore:
    """Get the volume landmark service."""
    return VolumeLandmarkStore(store=get_store())


@lru_cache
def get_hierarchy() -> PeriodizationHierarchy:
    """Get the periodization hierarchy service."""
    return PeriodizationHierarchy(store=get_store())


@lru_cache
def get_objective_service() -> ObjectiveService:
    """Get the objective association service."""
    return ObjectiveService(store=get_store())


@lru_cache
def get_template_service() -> TemplateService:
    """Get the template service instance."""
    return TemplateService(store=get_store(), hierarchy=get_hierarchy())


@lru_cache
def get_session_planner() -> SessionPlanner:
    """Get the session planner with the configured intensity targets."""
    settings = get_settings()
    return SessionPlanner(
        landmarks=get_landmark_store(),
        fatigued_intensity_pct=settings.fatigued_intensity_pct,
        ready_intensity_pct=settings.ready_intensity_pct,
    )
