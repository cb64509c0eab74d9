"""
Template catalog and program instantiation.

A template's ``structure`` declares training frequency and a phase list
(plus optional layout keys); instantiation expands it deterministically
into a full Program -> Mesocycle -> Microcycle -> Session tree, written
in a single transaction.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple
import copy
import logging
import math

from .base import BaseService
from .hierarchy import PeriodizationHierarchy
from .template_catalog import BUILTIN_TEMPLATES
from ..db.repositories.base import RecordStore
from ..exceptions import IncompatibleStructureError, TemplateNotFoundError
from ..models.landmarks import TrainingLevel
from ..models.periodization import (
    MesocycleNode,
    MicrocycleNode,
    PeriodizationTemplate,
    ProgramTree,
    TrainingPhase,
)


TEMPLATE = "template"

DEFAULT_WEEKS_PER_PHASE = 4
DEFAULT_VOLUME_RANGE = (10.0, 20.0)
DEFAULT_INTENSITY_RANGE = (65.0, 85.0)
DEFAULT_DELOAD_STRATEGY = "volume"

# Fixed Monday-first spread of training days per weekly frequency
DAY_SPREAD: Dict[int, List[int]] = {
    1: [0],
    2: [0, 3],
    3: [0, 2, 4],
    4: [0, 1, 3, 4],
    5: [0, 1, 2, 3, 4],
    6: [0, 1, 2, 3, 4, 5],
    7: [0, 1, 2, 3, 4, 5, 6],
}

# phase -> (volume fraction, intensity fraction) within the template ranges
PHASE_PROFILES: Dict[str, Tuple[float, float]] = {
    TrainingPhase.ANATOMICAL_ADAPTATION.value: (0.3, 0.0),
    TrainingPhase.ACCUMULATION.value: (1.0, 0.3),
    TrainingPhase.INTENSIFICATION.value: (0.7, 0.6),
    TrainingPhase.REALIZATION.value: (0.4, 1.0),
    TrainingPhase.HYPERTROPHY.value: (1.0, 0.4),
    TrainingPhase.STRENGTH.value: (0.6, 0.7),
    TrainingPhase.POWER.value: (0.3, 1.0),
    TrainingPhase.ENDURANCE.value: (1.0, 0.0),
    TrainingPhase.METABOLIC.value: (1.0, 0.3),
    TrainingPhase.DELOAD.value: (0.0, 0.0),
}
DEFAULT_PHASE_PROFILE = (0.5, 0.5)

# strategy -> (session volume multiplier, scale applied to phase intensity)
DELOAD_STRATEGIES: Dict[str, Tuple[float, float]] = {
    "volume": (0.5, 1.0),
    "intensity": (1.0, 0.8),
    "combined": (0.6, 0.85),
}


@dataclass
class WeekLayout:
    """One expanded week of a template."""
    week_index: int  # 0-based across the whole program
    phase: str
    is_deload: bool


@dataclass
class ExpansionLayout:
    """Validated, fully defaulted expansion parameters of a template."""
    frequency: int
    phases: List[str]
    duration_weeks: int
    mesocycle_weeks: int
    training_days: List[int]
    deload_frequency: Optional[int]
    deload_strategy: str
    volume_range: Tuple[float, float]
    intensity_range: Tuple[float, float]
    sessions: List[Dict[str, Any]]

    @property
    def mesocycle_count(self) -> int:
        return math.ceil(self.duration_weeks / self.mesocycle_weeks)

    def week(self, week_index: int) -> WeekLayout:
        phase = self.phases[week_index * len(self.phases) // self.duration_weeks]
        is_deload = phase == TrainingPhase.DELOAD.value or (
            self.deload_frequency is not None and (week_index + 1) % self.deload_frequency == 0
        )
        return WeekLayout(week_index=week_index, phase=phase, is_deload=is_deload)

    def mesocycle_weeks_at(self, position: int) -> List[WeekLayout]:
        """Weeks of the mesocycle at a 1-based position; the last holds the remainder."""
        start = (position - 1) * self.mesocycle_weeks
        end = min(start + self.mesocycle_weeks, self.duration_weeks)
        return [self.week(i) for i in range(start, end)]

    def targets(self, phase: str, is_deload: bool) -> Tuple[float, float, float]:
        """(volume target, intensity target, session volume multiplier) for a week."""
        volume_fraction, intensity_fraction = PHASE_PROFILES.get(phase, DEFAULT_PHASE_PROFILE)
        vlo, vhi = self.volume_range
        ilo, ihi = self.intensity_range

        volume = vlo + (vhi - vlo) * volume_fraction
        intensity = ilo + (ihi - ilo) * intensity_fraction
        multiplier = 0.8 + 0.4 * volume_fraction

        if is_deload:
            volume_scale, intensity_scale = DELOAD_STRATEGIES[self.deload_strategy]
            multiplier = volume_scale
            volume = vlo * volume_scale
            intensity = intensity * intensity_scale

        return round(volume, 1), round(intensity, 1), round(multiplier, 2)


def _positive_int(value: Any, template_id: str, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise IncompatibleStructureError(
            template_id, f"'{field}' must be a positive integer, got {value!r}", field=field
        )
    return value


def _number_range(
    value: Any,
    template_id: str,
    field: str,
    default: Tuple[float, float],
) -> Tuple[float, float]:
    if value is None:
        return default
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 2
        or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)
        or value[0] > value[1]
    ):
        raise IncompatibleStructureError(
            template_id, f"'{field}' must be a [low, high] pair, got {value!r}", field=field
        )
    return float(value[0]), float(value[1])


def build_layout(template_id: str, structure: Any) -> ExpansionLayout:
    """
    Validate a template structure and fill in layout defaults.

    Args:
        template_id: Template being expanded (for error details)
        structure: The template's structure mapping

    Returns:
        ExpansionLayout ready for instantiation

    Raises:
        IncompatibleStructureError: If required fields are missing or malformed
    """
    if not isinstance(structure, dict):
        raise IncompatibleStructureError(template_id, "structure must be a mapping")

    if "frequency" not in structure:
        raise IncompatibleStructureError(
            template_id, "missing required field 'frequency'", field="frequency"
        )
    frequency = _positive_int(structure["frequency"], template_id, "frequency")
    if frequency > 7:
        raise IncompatibleStructureError(
            template_id, f"frequency {frequency} exceeds 7 days per week", field="frequency"
        )

    if "phases" not in structure:
        raise IncompatibleStructureError(
            template_id, "missing required field 'phases'", field="phases"
        )
    phases = structure["phases"]
    if (
        not isinstance(phases, (list, tuple))
        or not phases
        or not all(isinstance(p, str) and p.strip() for p in phases)
    ):
        raise IncompatibleStructureError(
            template_id, "'phases' must be a non-empty list of phase names", field="phases"
        )
    phases = [p.strip().lower() for p in phases]

    weeks_per_phase = _positive_int(
        structure.get("weeks_per_phase", DEFAULT_WEEKS_PER_PHASE), template_id, "weeks_per_phase"
    )
    duration_weeks = _positive_int(
        structure.get("duration_weeks", len(phases) * weeks_per_phase), template_id, "duration_weeks"
    )
    mesocycle_weeks = _positive_int(
        structure.get("mesocycle_weeks", duration_weeks), template_id, "mesocycle_weeks"
    )
    mesocycle_weeks = min(mesocycle_weeks, duration_weeks)

    training_days = structure.get("training_days")
    if training_days is None:
        training_days = DAY_SPREAD[frequency]
    elif (
        not isinstance(training_days, (list, tuple))
        or len(training_days) != frequency
        or len(set(training_days)) != len(training_days)
        or not all(
            isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6 for d in training_days
        )
    ):
        raise IncompatibleStructureError(
            template_id,
            f"'training_days' must list {frequency} distinct days in 0-6, got {training_days!r}",
            field="training_days",
        )

    deload_frequency = structure.get("deload_frequency")
    if deload_frequency is not None:
        deload_frequency = _positive_int(deload_frequency, template_id, "deload_frequency")

    deload_strategy = structure.get("deload_strategy", DEFAULT_DELOAD_STRATEGY)
    if deload_strategy not in DELOAD_STRATEGIES:
        raise IncompatibleStructureError(
            template_id,
            f"unknown deload strategy {deload_strategy!r}; "
            f"expected one of {sorted(DELOAD_STRATEGIES)}",
            field="deload_strategy",
        )

    sessions = structure.get("sessions") or []
    if not isinstance(sessions, (list, tuple)) or not all(isinstance(s, dict) for s in sessions):
        raise IncompatibleStructureError(
            template_id, "'sessions' must be a list of session mappings", field="sessions"
        )

    return ExpansionLayout(
        frequency=frequency,
        phases=phases,
        duration_weeks=duration_weeks,
        mesocycle_weeks=mesocycle_weeks,
        training_days=sorted(training_days),
        deload_frequency=deload_frequency,
        deload_strategy=deload_strategy,
        volume_range=_number_range(
            structure.get("volume_range"), template_id, "volume_range", DEFAULT_VOLUME_RANGE
        ),
        intensity_range=_number_range(
            structure.get("intensity_range"), template_id, "intensity_range", DEFAULT_INTENSITY_RANGE
        ),
        sessions=list(sessions),
    )


class TemplateService(BaseService):
    """Read-only template catalog plus program instantiation."""

    def __init__(
        self,
        store: RecordStore,
        hierarchy: Optional[PeriodizationHierarchy] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store=store, logger=logger)
        self._hierarchy = hierarchy or PeriodizationHierarchy(store)

    def seed_builtin_templates(
        self,
        templates: Optional[Sequence[PeriodizationTemplate]] = None,
    ) -> int:
        """
        Store catalog templates that are not already present.

        Returns:
            Number of templates added
        """
        added = 0
        with self._store.transaction():
            for template in templates if templates is not None else BUILTIN_TEMPLATES:
                if self._store.load(TEMPLATE, template.id) is None:
                    self._store.save(TEMPLATE, template.to_record())
                    added += 1
        if added:
            self.logger.info(f"Seeded {added} periodization templates")
        return added

    def get_template(self, template_id: str) -> PeriodizationTemplate:
        record = self._store.load(TEMPLATE, template_id)
        if record is None:
            raise TemplateNotFoundError(template_id)
        return PeriodizationTemplate.from_record(record)

    def list_templates(
        self,
        training_level: Any = None,
        goal: Optional[str] = None,
    ) -> List[PeriodizationTemplate]:
        filters: Dict[str, Any] = {}
        if training_level is not None:
            filters["training_level"] = TrainingLevel.parse(training_level).value
        if goal:
            filters["goal"] = goal
        records = self._store.query(TEMPLATE, order_by="id", **filters)
        return [PeriodizationTemplate.from_record(r) for r in records]

    def instantiate(
        self,
        template_id: str,
        user_id: str,
        program_name: str,
        start_date: date,
    ) -> ProgramTree:
        """
        Create a full program tree from a template.

        Every record is written in one transaction; on any failure nothing
        is persisted.

        Args:
            template_id: Catalog template to expand
            user_id: Owner of the new program
            program_name: Name for the new program
            start_date: Date of the first training week

        Returns:
            The expanded ProgramTree

        Raises:
            TemplateNotFoundError: If the template does not exist
            IncompatibleStructureError: If the structure cannot be expanded
        """
        template = self.get_template(template_id)
        layout = build_layout(template.id, template.structure)
        hierarchy = self._hierarchy

        with self._store.transaction():
            program = hierarchy.create_program(
                user_id=user_id,
                name=program_name,
                periodization_type=template.periodization_type,
                start_date=start_date,
                goal=template.goal,
                training_level=template.training_level,
                frequency=layout.frequency,
                structure=copy.deepcopy(template.structure),
                template_id=template.id,
            )
            tree = ProgramTree(program=program)
            session_index = 0

            for position in range(1, layout.mesocycle_count + 1):
                weeks = layout.mesocycle_weeks_at(position)
                first = weeks[0]
                volume_target, intensity_target, _ = layout.targets(first.phase, first.is_deload)
                mesocycle = hierarchy.add_mesocycle(
                    program_id=program.id,
                    position=position,
                    phase=first.phase,
                    length_in_weeks=len(weeks),
                    volume_target=volume_target,
                    intensity_target=intensity_target,
                    name=f"Block {position}: {first.phase.replace('_', ' ').title()}",
                )
                meso_node = MesocycleNode(mesocycle=mesocycle)

                for week_number, week in enumerate(weeks, start=1):
                    microcycle = hierarchy.add_microcycle(
                        mesocycle_id=mesocycle.id,
                        week_number=week_number,
                        is_deload=week.is_deload,
                        phase=week.phase,
                        start_date=start_date + timedelta(weeks=week.week_index),
                    )
                    _, intensity, multiplier = layout.targets(week.phase, week.is_deload)
                    micro_node = MicrocycleNode(microcycle=microcycle)

                    for day in layout.training_days:
                        blueprint = (
                            layout.sessions[session_index % len(layout.sessions)]
                            if layout.sessions else {}
                        )
                        session_index += 1
                        micro_node.sessions.append(
                            hierarchy.add_session(
                                microcycle_id=microcycle.id,
                                day_of_week=day,
                                target_intensity=intensity,
                                target_volume_multiplier=multiplier,
                                exercises=copy.deepcopy(blueprint.get("exercises", [])),
                                name=blueprint.get("name"),
                            )
                        )
                    meso_node.microcycles.append(micro_node)
                tree.mesocycles.append(meso_node)

        self.logger.info(
            f"Instantiated template {template.id} as program {program.id} for user {user_id}: "
            f"{len(tree.mesocycles)} mesocycles, {tree.microcycle_count} microcycles, "
            f"{tree.session_count} sessions"
        )
        return tree
