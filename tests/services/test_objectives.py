"""Tests for the ObjectiveService."""

import pytest

from periodization_engine.exceptions import (
    EntityNotFoundError,
    UnknownEntityTypeError,
    ValidationError,
)
from periodization_engine.models.objectives import EntityType, ObjectivePriority


@pytest.fixture
def squat_goal(objectives):
    return objectives.create_objective("athlete-1", "Squat 180kg", "squat_1rm_kg", 180)


@pytest.fixture
def bench_goal(objectives):
    return objectives.create_objective("athlete-1", "Bench 120kg", "bench_1rm_kg", 120)


class TestCreateObjective:
    def test_create_and_get(self, objectives, squat_goal):
        loaded = objectives.get_objective(squat_goal.id)
        assert loaded.metric == "squat_1rm_kg"
        assert loaded.target_value == 180

    def test_empty_description(self, objectives):
        with pytest.raises(ValidationError):
            objectives.create_objective("athlete-1", "  ", "squat_1rm_kg", 180)

    def test_missing_objective(self, objectives):
        with pytest.raises(EntityNotFoundError):
            objectives.get_objective("obj_missing")


class TestAssociate:
    """Tests for associate / dissociate."""

    def test_associate_each_level(self, objectives, squat_goal, session_chain):
        for entity_type in EntityType:
            entity = session_chain[entity_type.value]
            association = objectives.associate(squat_goal.id, entity_type, entity.id)
            assert association.entity_type == entity_type
        assert len(objectives.list_associations("program", session_chain["program"].id)) == 1

    def test_idempotent(self, objectives, squat_goal, session_chain):
        program_id = session_chain["program"].id
        first = objectives.associate(squat_goal.id, "program", program_id, priority="high")
        second = objectives.associate(squat_goal.id, "program", program_id, priority="low")

        assert second.id == first.id
        assert second.priority == ObjectivePriority.HIGH
        assert len(objectives.list_associations("program", program_id)) == 1

    def test_unknown_entity_type(self, objectives, squat_goal, session_chain):
        with pytest.raises(UnknownEntityTypeError) as exc_info:
            objectives.associate(squat_goal.id, "exercise", session_chain["session"].id)
        assert isinstance(exc_info.value, ValidationError)

    def test_unresolvable_entity(self, objectives, squat_goal):
        with pytest.raises(EntityNotFoundError):
            objectives.associate(squat_goal.id, "session", "sess_missing")

    def test_entity_id_must_match_type(self, objectives, squat_goal, session_chain):
        """A program id does not resolve as a session."""
        with pytest.raises(EntityNotFoundError):
            objectives.associate(squat_goal.id, "session", session_chain["program"].id)

    def test_missing_objective(self, objectives, session_chain):
        with pytest.raises(EntityNotFoundError):
            objectives.associate("obj_missing", "program", session_chain["program"].id)

    def test_priority_and_progress(self, objectives, squat_goal, session_chain):
        association = objectives.associate(
            squat_goal.id,
            "mesocycle",
            session_chain["mesocycle"].id,
            priority="high",
            expected_progress=25.0,
        )
        assert association.priority == ObjectivePriority.HIGH
        assert association.expected_progress == 25.0

    def test_dissociate(self, objectives, squat_goal, session_chain):
        program_id = session_chain["program"].id
        objectives.associate(squat_goal.id, "program", program_id)
        assert objectives.dissociate(squat_goal.id, "program", program_id) is True
        assert objectives.dissociate(squat_goal.id, "program", program_id) is False
        assert objectives.list_associations("program", program_id) == []


class TestResolveEffectiveObjectives:
    """Tests for inheritance from ancestors."""

    def test_inherits_from_program(self, objectives, squat_goal, session_chain):
        """Associated with the program only, the objective reaches every session."""
        objectives.associate(squat_goal.id, "program", session_chain["program"].id)
        effective = objectives.resolve_effective_objectives(session_chain["session"].id)
        assert [o.id for o in effective] == [squat_goal.id]

    def test_union_deduplicated_nearest_first(
        self, objectives, squat_goal, bench_goal, session_chain
    ):
        objectives.associate(squat_goal.id, "program", session_chain["program"].id)
        objectives.associate(bench_goal.id, "microcycle", session_chain["microcycle"].id)
        objectives.associate(squat_goal.id, "session", session_chain["session"].id)

        effective = objectives.resolve_effective_objectives(session_chain["session"].id)
        assert [o.id for o in effective] == [squat_goal.id, bench_goal.id]

    def test_sibling_sessions_not_included(self, objectives, hierarchy, squat_goal, session_chain):
        sibling = hierarchy.add_session(session_chain["microcycle"].id, day_of_week=3, target_intensity=70.0)
        objectives.associate(squat_goal.id, "session", sibling.id)
        assert objectives.resolve_effective_objectives(session_chain["session"].id) == []

    def test_missing_session(self, objectives):
        with pytest.raises(EntityNotFoundError):
            objectives.resolve_effective_objectives("sess_missing")

    def test_associations_removed_with_program(
        self, objectives, hierarchy, squat_goal, session_chain
    ):
        objectives.associate(squat_goal.id, "session", session_chain["session"].id)
        hierarchy.delete_program(session_chain["program"].id)

        assert objectives.list_associations("session", session_chain["session"].id) == []
        assert objectives.get_objective(squat_goal.id).id == squat_goal.id
