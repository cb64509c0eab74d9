"""API test fixtures: the app wired to a temporary record store."""

import pytest
from fastapi.testclient import TestClient

from periodization_engine.api import deps
from periodization_engine.main import app
from periodization_engine.services.hierarchy import PeriodizationHierarchy
from periodization_engine.services.landmarks import VolumeLandmarkStore
from periodization_engine.services.objectives import ObjectiveService
from periodization_engine.services.planner import SessionPlanner
from periodization_engine.services.templates import TemplateService


@pytest.fixture
def client(store):
    """Create a test client whose services all share a temporary store."""
    landmarks = VolumeLandmarkStore(store)
    hierarchy = PeriodizationHierarchy(store)
    templates = TemplateService(store, hierarchy=hierarchy)
    templates.seed_builtin_templates()

    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_landmark_store] = lambda: landmarks
    app.dependency_overrides[deps.get_hierarchy] = lambda: hierarchy
    app.dependency_overrides[deps.get_objective_service] = lambda: ObjectiveService(store)
    app.dependency_overrides[deps.get_template_service] = lambda: templates
    app.dependency_overrides[deps.get_session_planner] = lambda: SessionPlanner(landmarks)

    yield TestClient(app)

    app.dependency_overrides.clear()
