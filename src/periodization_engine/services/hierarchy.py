"""
Periodization hierarchy service.

Maintains the Program -> Mesocycle -> Microcycle -> Session tree with
unique ordering keys at every level and atomic cascade deletion.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .base import BaseService
from ..exceptions import (
    ConflictError,
    DuplicateDayError,
    DuplicatePositionError,
    DuplicateWeekError,
    EntityNotFoundError,
    InvalidFrequencyError,
    ValidationError,
)
from ..models.landmarks import TrainingLevel
from ..models.periodization import (
    Mesocycle,
    MesocycleNode,
    Microcycle,
    MicrocycleNode,
    PeriodizationProgram,
    PeriodizedSession,
    ProgramTree,
    new_id,
)


PROGRAM = "program"
MESOCYCLE = "mesocycle"
MICROCYCLE = "microcycle"
SESSION = "session"


def _require_int(value: Any, field: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer, got {value!r}", field=field)
    if value < minimum:
        raise ValidationError(f"{field} must be >= {minimum}, got {value}", field=field)
    return value


class PeriodizationHierarchy(BaseService):
    """
    Service for building and reading periodized programs.

    Uniqueness of mesocycle position, microcycle week number and session
    day is checked and written inside one store transaction; the store's
    own constraints catch anything that slips past the check.
    """

    # ------------------------------------------------------------------
    # Programs
    # ------------------------------------------------------------------

    def create_program(
        self,
        user_id: str,
        name: str,
        periodization_type: str,
        start_date: date,
        goal: str,
        training_level: Any,
        frequency: int,
        structure: Optional[Dict[str, Any]] = None,
        template_id: Optional[str] = None,
    ) -> PeriodizationProgram:
        """
        Create an empty program.

        Raises:
            InvalidFrequencyError: If frequency is not a positive integer
        """
        if isinstance(frequency, bool) or not isinstance(frequency, int) or frequency <= 0:
            raise InvalidFrequencyError(frequency)
        if not name or not str(name).strip():
            raise ValidationError("Program name must not be empty", field="name")

        program = PeriodizationProgram(
            id=new_id("prog"),
            user_id=user_id,
            name=name,
            periodization_type=periodization_type,
            start_date=start_date,
            goal=goal,
            training_level=TrainingLevel.parse(training_level),
            frequency=frequency,
            structure=structure or {},
            template_id=template_id,
            created_at=datetime.now(),
        )
        self._store.save(PROGRAM, program.to_record())
        self.logger.info(f"Created program {program.id} '{name}' for user {user_id}")
        return program

    def get_program(self, program_id: str) -> PeriodizationProgram:
        return PeriodizationProgram.from_record(self._require(PROGRAM, program_id))

    def list_programs(self, user_id: str) -> List[PeriodizationProgram]:
        records = self._store.query(PROGRAM, order_by="created_at", user_id=user_id)
        return [PeriodizationProgram.from_record(r) for r in records]

    def delete_program(self, program_id: str) -> None:
        """
        Delete a program and all of its descendants atomically.

        Objective associations pointing at any deleted node are removed
        too. Objectives themselves are kept.

        Raises:
            EntityNotFoundError: If the program does not exist
        """
        if not self._store.delete_cascade(program_id):
            raise EntityNotFoundError(PROGRAM, program_id)

    # ------------------------------------------------------------------
    # Mesocycles
    # ------------------------------------------------------------------

    def add_mesocycle(
        self,
        program_id: str,
        position: int,
        phase: str,
        length_in_weeks: int,
        volume_target: Optional[float] = None,
        intensity_target: Optional[float] = None,
        name: Optional[str] = None,
    ) -> Mesocycle:
        """
        Add a mesocycle at a position within a program.

        Raises:
            EntityNotFoundError: If the program does not exist
            DuplicatePositionError: If the position is already taken
        """
        _require_int(position, "position", 0)
        _require_int(length_in_weeks, "length_in_weeks", 1)

        mesocycle = Mesocycle(
            id=new_id("meso"),
            program_id=program_id,
            position=position,
            phase=phase,
            length_in_weeks=length_in_weeks,
            volume_target=volume_target,
            intensity_target=intensity_target,
            name=name,
        )

        with self._store.transaction():
            self._require(PROGRAM, program_id)
            if self._store.query(MESOCYCLE, program_id=program_id, position=position):
                self.logger.warning(
                    f"Rejected mesocycle at taken position {position} in program {program_id}"
                )
                raise DuplicatePositionError(program_id, position)
            try:
                self._store.save(MESOCYCLE, mesocycle.to_record())
            except ConflictError as e:
                raise DuplicatePositionError(program_id, position) from e

        return mesocycle

    def get_mesocycle(self, mesocycle_id: str) -> Mesocycle:
        return Mesocycle.from_record(self._require(MESOCYCLE, mesocycle_id))

    def list_mesocycles(self, program_id: str) -> List[Mesocycle]:
        records = self._store.query(MESOCYCLE, order_by="position", program_id=program_id)
        return [Mesocycle.from_record(r) for r in records]

    def set_phase(self, mesocycle_id: str, phase: str) -> Mesocycle:
        """Relabel a mesocycle's phase. Phase order is not validated."""
        with self._store.transaction():
            mesocycle = self.get_mesocycle(mesocycle_id)
            mesocycle.phase = phase
            self._store.save(MESOCYCLE, mesocycle.to_record())
        return mesocycle

    # ------------------------------------------------------------------
    # Microcycles
    # ------------------------------------------------------------------

    def add_microcycle(
        self,
        mesocycle_id: str,
        week_number: int,
        is_deload: bool = False,
        phase: Optional[str] = None,
        start_date: Optional[date] = None,
    ) -> Microcycle:
        """
        Add a week to a mesocycle.

        Raises:
            EntityNotFoundError: If the mesocycle does not exist
            DuplicateWeekError: If the week number is already taken
        """
        _require_int(week_number, "week_number", 1)

        microcycle = Microcycle(
            id=new_id("micro"),
            mesocycle_id=mesocycle_id,
            week_number=week_number,
            is_deload=bool(is_deload),
            phase=phase,
            start_date=start_date,
        )

        with self._store.transaction():
            self._require(MESOCYCLE, mesocycle_id)
            if self._store.query(MICROCYCLE, mesocycle_id=mesocycle_id, week_number=week_number):
                self.logger.warning(
                    f"Rejected duplicate week {week_number} in mesocycle {mesocycle_id}"
                )
                raise DuplicateWeekError(mesocycle_id, week_number)
            try:
                self._store.save(MICROCYCLE, microcycle.to_record())
            except ConflictError as e:
                raise DuplicateWeekError(mesocycle_id, week_number) from e

        return microcycle

    def get_microcycle(self, microcycle_id: str) -> Microcycle:
        return Microcycle.from_record(self._require(MICROCYCLE, microcycle_id))

    def list_microcycles(self, mesocycle_id: str) -> List[Microcycle]:
        records = self._store.query(MICROCYCLE, order_by="week_number", mesocycle_id=mesocycle_id)
        return [Microcycle.from_record(r) for r in records]

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def add_session(
        self,
        microcycle_id: str,
        day_of_week: int,
        target_intensity: float,
        target_volume_multiplier: float = 1.0,
        exercises: Optional[List[Dict[str, Any]]] = None,
        name: Optional[str] = None,
    ) -> PeriodizedSession:
        """
        Add a session on a day of a microcycle.

        Args:
            microcycle_id: Parent microcycle
            day_of_week: 0 (Monday) to 6 (Sunday)
            target_intensity: Percent of 1RM
            target_volume_multiplier: Scale applied to planned volume
            exercises: Exercise descriptors
            name: Optional label

        Raises:
            ValidationError: If day_of_week is outside 0-6
            EntityNotFoundError: If the microcycle does not exist
            DuplicateDayError: If the day is already taken
        """
        if isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6:
            raise ValidationError(
                f"day_of_week must be an integer in 0-6, got {day_of_week!r}",
                field="day_of_week",
            )
        if target_volume_multiplier < 0:
            raise ValidationError(
                "target_volume_multiplier must be >= 0", field="target_volume_multiplier"
            )

        session = PeriodizedSession(
            id=new_id("sess"),
            microcycle_id=microcycle_id,
            day_of_week=day_of_week,
            target_intensity=target_intensity,
            target_volume_multiplier=target_volume_multiplier,
            exercises=list(exercises or []),
            name=name,
        )

        with self._store.transaction():
            self._require(MICROCYCLE, microcycle_id)
            if self._store.query(SESSION, microcycle_id=microcycle_id, day_of_week=day_of_week):
                self.logger.warning(
                    f"Rejected second session on day {day_of_week} in microcycle {microcycle_id}"
                )
                raise DuplicateDayError(microcycle_id, day_of_week)
            try:
                self._store.save(SESSION, session.to_record())
            except ConflictError as e:
                raise DuplicateDayError(microcycle_id, day_of_week) from e

        return session

    def get_session(self, session_id: str) -> PeriodizedSession:
        return PeriodizedSession.from_record(self._require(SESSION, session_id))

    def list_sessions(self, microcycle_id: str) -> List[PeriodizedSession]:
        records = self._store.query(SESSION, order_by="day_of_week", microcycle_id=microcycle_id)
        return [PeriodizedSession.from_record(r) for r in records]

    # ------------------------------------------------------------------
    # Tree view
    # ------------------------------------------------------------------

    def get_program_tree(self, program_id: str) -> ProgramTree:
        """
        Load a program with every descendant, ordered at each level.

        Raises:
            EntityNotFoundError: If the program does not exist
        """
        with self._store.transaction(write=False):
            program = self.get_program(program_id)
            tree = ProgramTree(program=program)
            for mesocycle in self.list_mesocycles(program_id):
                meso_node = MesocycleNode(mesocycle=mesocycle)
                for microcycle in self.list_microcycles(mesocycle.id):
                    meso_node.microcycles.append(
                        MicrocycleNode(
                            microcycle=microcycle,
                            sessions=self.list_sessions(microcycle.id),
                        )
                    )
                tree.mesocycles.append(meso_node)
        return tree
