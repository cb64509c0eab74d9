"""Shared fixtures: a fresh SQLite record store per test and the services on top of it."""

from datetime import date

import pytest

from periodization_engine.db.repositories.sqlite_store import SQLiteRecordStore
from periodization_engine.services.hierarchy import PeriodizationHierarchy
from periodization_engine.services.landmarks import VolumeLandmarkStore
from periodization_engine.services.objectives import ObjectiveService
from periodization_engine.services.planner import SessionPlanner
from periodization_engine.services.templates import TemplateService


@pytest.fixture
def store(tmp_path):
    """Create a record store backed by a temporary database file."""
    return SQLiteRecordStore(str(tmp_path / "periodization.db"))


@pytest.fixture
def landmarks(store):
    return VolumeLandmarkStore(store)


@pytest.fixture
def hierarchy(store):
    return PeriodizationHierarchy(store)


@pytest.fixture
def objectives(store):
    return ObjectiveService(store)


@pytest.fixture
def templates(store, hierarchy):
    service = TemplateService(store, hierarchy=hierarchy)
    service.seed_builtin_templates()
    return service


@pytest.fixture
def planner(landmarks):
    return SessionPlanner(landmarks)


@pytest.fixture
def program(hierarchy):
    """An empty intermediate program."""
    return hierarchy.create_program(
        user_id="athlete-1",
        name="Spring Block",
        periodization_type="block",
        start_date=date(2024, 3, 4),
        goal="hypertrophy",
        training_level="intermediate",
        frequency=4,
    )


@pytest.fixture
def session_chain(hierarchy, program):
    """A program with one mesocycle, one microcycle and one session."""
    mesocycle = hierarchy.add_mesocycle(program.id, position=1, phase="accumulation", length_in_weeks=4)
    microcycle = hierarchy.add_microcycle(mesocycle.id, week_number=1)
    session = hierarchy.add_session(microcycle.id, day_of_week=0, target_intensity=75.0)
    return {
        "program": program,
        "mesocycle": mesocycle,
        "microcycle": microcycle,
        "session": session,
    }
