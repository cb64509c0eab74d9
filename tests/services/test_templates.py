"""Tests for template expansion and the TemplateService."""

from datetime import date, timedelta

import pytest

from periodization_engine.exceptions import (
    IncompatibleStructureError,
    StateError,
    TemplateNotFoundError,
)
from periodization_engine.models.landmarks import TrainingLevel
from periodization_engine.models.periodization import PeriodizationTemplate
from periodization_engine.services.template_catalog import BUILTIN_TEMPLATES
from periodization_engine.services.templates import DAY_SPREAD, build_layout


START = date(2024, 1, 1)


def _template(template_id="custom", **structure):
    return PeriodizationTemplate(
        id=template_id,
        name="Custom",
        periodization_type="block",
        training_level="intermediate",
        goal="hypertrophy",
        structure=structure,
    )


@pytest.fixture
def custom_templates(templates):
    """Template service with a few extra test templates in the catalog."""
    templates.seed_builtin_templates([
        _template("four-day-two-phase", frequency=4, phases=["accumulation", "intensification"], duration_weeks=6),
        _template("no-frequency", phases=["accumulation"]),
        _template("no-phases", frequency=3),
        _template("eight-days", frequency=8, phases=["accumulation"]),
        _template("bad-days", frequency=3, phases=["accumulation"], training_days=[0, 1]),
        _template(
            "deload-every-third",
            frequency=2,
            phases=["hypertrophy"],
            duration_weeks=6,
            mesocycle_weeks=3,
            deload_frequency=3,
            deload_strategy="combined",
            volume_range=[10, 20],
            intensity_range=[60, 80],
        ),
    ])
    return templates


class TestBuildLayout:
    """Tests for structure validation and defaults."""

    def test_defaults(self):
        layout = build_layout("t", {"frequency": 3, "phases": ["hypertrophy", "strength"]})
        assert layout.duration_weeks == 8
        assert layout.mesocycle_weeks == 8
        assert layout.mesocycle_count == 1
        assert layout.training_days == [0, 2, 4]

    def test_phases_spread_in_blocks(self):
        layout = build_layout("t", {"frequency": 1, "phases": ["a", "b", "c"], "duration_weeks": 6})
        assert [layout.week(i).phase for i in range(6)] == ["a", "a", "b", "b", "c", "c"]

    def test_remainder_mesocycle(self):
        layout = build_layout(
            "t", {"frequency": 2, "phases": ["a"], "duration_weeks": 10, "mesocycle_weeks": 4}
        )
        assert layout.mesocycle_count == 3
        assert [len(layout.mesocycle_weeks_at(p)) for p in (1, 2, 3)] == [4, 4, 2]

    @pytest.mark.parametrize("frequency", sorted(DAY_SPREAD))
    def test_day_spread_has_unique_days(self, frequency):
        days = DAY_SPREAD[frequency]
        assert len(days) == frequency
        assert len(set(days)) == frequency

    @pytest.mark.parametrize(
        "structure,field",
        [
            ({"phases": ["a"]}, "frequency"),
            ({"frequency": 3}, "phases"),
            ({"frequency": 0, "phases": ["a"]}, "frequency"),
            ({"frequency": 3, "phases": []}, "phases"),
            ({"frequency": 3, "phases": ["a"], "training_days": [0, 0, 1]}, "training_days"),
            ({"frequency": 2, "phases": ["a"], "training_days": [0, 7]}, "training_days"),
            ({"frequency": 2, "phases": ["a"], "deload_strategy": "nap"}, "deload_strategy"),
            ({"frequency": 2, "phases": ["a"], "intensity_range": [90, 60]}, "intensity_range"),
        ],
    )
    def test_incompatible(self, structure, field):
        with pytest.raises(IncompatibleStructureError) as exc_info:
            build_layout("t", structure)
        assert exc_info.value.details["field"] == field

    def test_deload_targets(self):
        layout = build_layout(
            "t",
            {
                "frequency": 2,
                "phases": ["hypertrophy"],
                "deload_strategy": "volume",
                "volume_range": [10, 20],
                "intensity_range": [60, 80],
            },
        )
        volume, intensity, multiplier = layout.targets("hypertrophy", is_deload=False)
        assert (volume, intensity, multiplier) == (20.0, 68.0, 1.2)
        volume, intensity, multiplier = layout.targets("hypertrophy", is_deload=True)
        assert (volume, intensity, multiplier) == (5.0, 68.0, 0.5)


class TestCatalog:
    def test_seed_is_idempotent(self, templates):
        assert templates.seed_builtin_templates() == 0
        assert len(templates.list_templates()) == len(BUILTIN_TEMPLATES)

    def test_filters(self, templates):
        advanced = templates.list_templates(training_level="advanced")
        assert advanced
        assert all(t.training_level == TrainingLevel.ADVANCED for t in advanced)
        strength = templates.list_templates(goal="strength")
        assert all(t.goal == "strength" for t in strength)

    def test_get_missing(self, templates):
        with pytest.raises(TemplateNotFoundError):
            templates.get_template("nope")

    @pytest.mark.parametrize("template", BUILTIN_TEMPLATES, ids=lambda t: t.id)
    def test_builtin_templates_expand(self, template):
        layout = build_layout(template.id, template.structure)
        assert layout.mesocycle_count >= 1


class TestInstantiate:
    """Tests for instantiate."""

    def test_four_days_two_phases_six_weeks(self, custom_templates):
        tree = custom_templates.instantiate("four-day-two-phase", "athlete-1", "Block", START)

        assert len(tree.mesocycles) == 1
        microcycles = tree.mesocycles[0].microcycles
        assert len(microcycles) == 6
        for node in microcycles:
            days = [s.day_of_week for s in node.sessions]
            assert len(days) == 4
            assert len(set(days)) == 4

        phases = [node.microcycle.phase for node in microcycles]
        assert phases == ["accumulation"] * 3 + ["intensification"] * 3
        assert tree.mesocycles[0].mesocycle.phase == "accumulation"

    def test_persisted_tree_matches(self, custom_templates, hierarchy):
        tree = custom_templates.instantiate("four-day-two-phase", "athlete-1", "Block", START)
        loaded = hierarchy.get_program_tree(tree.program.id)
        assert loaded.to_dict() == tree.to_dict()
        assert loaded.program.template_id == "four-day-two-phase"
        assert loaded.program.structure["duration_weeks"] == 6

    def test_week_start_dates(self, custom_templates):
        tree = custom_templates.instantiate("four-day-two-phase", "athlete-1", "Block", START)
        starts = [node.microcycle.start_date for node in tree.mesocycles[0].microcycles]
        assert starts == [START + timedelta(weeks=i) for i in range(6)]

    def test_deload_weeks(self, custom_templates):
        tree = custom_templates.instantiate("deload-every-third", "athlete-1", "Block", START)

        assert [m.mesocycle.position for m in tree.mesocycles] == [1, 2]
        flags = [
            node.microcycle.is_deload
            for meso in tree.mesocycles
            for node in meso.microcycles
        ]
        assert flags == [False, False, True, False, False, True]

        deload_week = tree.mesocycles[0].microcycles[2]
        assert all(s.target_volume_multiplier == 0.6 for s in deload_week.sessions)
        normal_week = tree.mesocycles[0].microcycles[0]
        assert all(s.target_volume_multiplier == 1.2 for s in normal_week.sessions)

    def test_deload_phase(self, templates):
        tree = templates.instantiate("beginner-linear-full-body", "athlete-1", "Start", START)
        last = tree.mesocycles[-1]
        assert last.mesocycle.phase == "deload"
        assert all(node.microcycle.is_deload for node in last.microcycles)

    def test_sessions_cycle_blueprints(self, templates):
        tree = templates.instantiate("beginner-linear-full-body", "athlete-1", "Start", START)
        names = [s.name for s in tree.mesocycles[0].microcycles[0].sessions]
        assert names == ["Full Body A", "Full Body B", "Full Body C"]
        assert tree.mesocycles[0].microcycles[0].sessions[0].exercises

    def test_explicit_training_days(self, templates):
        tree = templates.instantiate("advanced-block-peaking", "athlete-1", "Peak", START)
        for meso in tree.mesocycles:
            for node in meso.microcycles:
                assert [s.day_of_week for s in node.sessions] == [0, 1, 3, 5]

    def test_unknown_template(self, templates, hierarchy):
        with pytest.raises(TemplateNotFoundError):
            templates.instantiate("nope", "athlete-1", "Block", START)
        assert hierarchy.list_programs("athlete-1") == []

    @pytest.mark.parametrize("template_id", ["no-frequency", "no-phases", "eight-days", "bad-days"])
    def test_incompatible_structure_writes_nothing(self, custom_templates, hierarchy, template_id):
        with pytest.raises(IncompatibleStructureError) as exc_info:
            custom_templates.instantiate(template_id, "athlete-1", "Block", START)
        assert isinstance(exc_info.value, StateError)
        assert hierarchy.list_programs("athlete-1") == []

    def test_failure_midway_rolls_back(self, custom_templates, hierarchy, monkeypatch):
        """A failure after some records were written leaves no partial program."""
        calls = {"count": 0}
        original = hierarchy.add_session

        def flaky_add_session(*args, **kwargs):
            calls["count"] += 1
            if calls["count"] == 5:
                raise RuntimeError("disk full")
            return original(*args, **kwargs)

        monkeypatch.setattr(hierarchy, "add_session", flaky_add_session)

        with pytest.raises(RuntimeError):
            custom_templates.instantiate("four-day-two-phase", "athlete-1", "Block", START)

        assert hierarchy.list_programs("athlete-1") == []
