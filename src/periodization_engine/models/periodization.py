"""Periodization hierarchy models: Program -> Mesocycle -> Microcycle -> Session."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

from .landmarks import TrainingLevel


class PeriodizationType(str, Enum):
    """Periodization models a program can follow."""
    LINEAR = "linear"
    REVERSE_LINEAR = "reverse_linear"
    UNDULATING = "undulating"
    BLOCK = "block"
    CONJUGATE = "conjugate"
    CONCURRENT = "concurrent"


class TrainingPhase(str, Enum):
    """Known phase labels. Phases on stored records are free-form strings."""
    ANATOMICAL_ADAPTATION = "anatomical_adaptation"
    ACCUMULATION = "accumulation"
    INTENSIFICATION = "intensification"
    REALIZATION = "realization"
    HYPERTROPHY = "hypertrophy"
    STRENGTH = "strength"
    POWER = "power"
    ENDURANCE = "endurance"
    METABOLIC = "metabolic"
    DELOAD = "deload"


def new_id(prefix: str) -> str:
    """Generate a short prefixed identifier."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _parse_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value or datetime.now()


@dataclass
class PeriodizationProgram:
    """Top-level container of a periodized plan."""
    id: str
    user_id: str
    name: str
    periodization_type: str
    start_date: date
    goal: str
    training_level: TrainingLevel
    frequency: int
    structure: Dict[str, Any] = field(default_factory=dict)
    template_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if isinstance(self.training_level, str):
            self.training_level = TrainingLevel.parse(self.training_level)
        if isinstance(self.periodization_type, PeriodizationType):
            self.periodization_type = self.periodization_type.value
        self.start_date = _parse_date(self.start_date)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "periodization_type": self.periodization_type,
            "start_date": self.start_date.isoformat(),
            "goal": self.goal,
            "training_level": self.training_level.value,
            "frequency": self.frequency,
            "structure": self.structure,
            "template_id": self.template_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "PeriodizationProgram":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            name=record["name"],
            periodization_type=record["periodization_type"],
            start_date=_parse_date(record["start_date"]),
            goal=record["goal"],
            training_level=TrainingLevel(record["training_level"]),
            frequency=record["frequency"],
            structure=record.get("structure") or {},
            template_id=record.get("template_id"),
            created_at=_parse_datetime(record.get("created_at")),
        )


@dataclass
class Mesocycle:
    """A multi-week block with one training emphasis."""
    id: str
    program_id: str
    position: int
    phase: str
    length_in_weeks: int
    volume_target: Optional[float] = None
    intensity_target: Optional[float] = None
    name: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.phase, TrainingPhase):
            self.phase = self.phase.value

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "program_id": self.program_id,
            "position": self.position,
            "phase": self.phase,
            "length_in_weeks": self.length_in_weeks,
            "volume_target": self.volume_target,
            "intensity_target": self.intensity_target,
            "name": self.name,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Mesocycle":
        return cls(
            id=record["id"],
            program_id=record["program_id"],
            position=record["position"],
            phase=record["phase"],
            length_in_weeks=record["length_in_weeks"],
            volume_target=record.get("volume_target"),
            intensity_target=record.get("intensity_target"),
            name=record.get("name"),
        )


@dataclass
class Microcycle:
    """One week within a mesocycle."""
    id: str
    mesocycle_id: str
    week_number: int
    is_deload: bool = False
    phase: Optional[str] = None
    start_date: Optional[date] = None

    def __post_init__(self):
        if isinstance(self.phase, TrainingPhase):
            self.phase = self.phase.value
        self.start_date = _parse_date(self.start_date)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "mesocycle_id": self.mesocycle_id,
            "week_number": self.week_number,
            "is_deload": bool(self.is_deload),
            "phase": self.phase,
            "start_date": self.start_date.isoformat() if self.start_date else None,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Microcycle":
        return cls(
            id=record["id"],
            mesocycle_id=record["mesocycle_id"],
            week_number=record["week_number"],
            is_deload=bool(record.get("is_deload")),
            phase=record.get("phase"),
            start_date=_parse_date(record.get("start_date")),
        )


@dataclass
class PeriodizedSession:
    """A single training day; the leaf of the hierarchy."""
    id: str
    microcycle_id: str
    day_of_week: int  # 0 = Monday
    target_intensity: float
    target_volume_multiplier: float = 1.0
    exercises: List[Dict[str, Any]] = field(default_factory=list)
    name: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "microcycle_id": self.microcycle_id,
            "day_of_week": self.day_of_week,
            "target_intensity": self.target_intensity,
            "target_volume_multiplier": self.target_volume_multiplier,
            "exercises": self.exercises,
            "name": self.name,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "PeriodizedSession":
        return cls(
            id=record["id"],
            microcycle_id=record["microcycle_id"],
            day_of_week=record["day_of_week"],
            target_intensity=record["target_intensity"],
            target_volume_multiplier=record.get("target_volume_multiplier", 1.0),
            exercises=record.get("exercises") or [],
            name=record.get("name"),
        )


@dataclass
class PeriodizationTemplate:
    """Read-only catalog entry used to instantiate programs."""
    id: str
    name: str
    periodization_type: str
    training_level: TrainingLevel
    goal: str
    structure: Dict[str, Any]
    description: str = ""

    def __post_init__(self):
        if isinstance(self.training_level, str):
            self.training_level = TrainingLevel.parse(self.training_level)
        if isinstance(self.periodization_type, PeriodizationType):
            self.periodization_type = self.periodization_type.value

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "periodization_type": self.periodization_type,
            "training_level": self.training_level.value,
            "goal": self.goal,
            "structure": self.structure,
            "description": self.description,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "PeriodizationTemplate":
        return cls(
            id=record["id"],
            name=record["name"],
            periodization_type=record["periodization_type"],
            training_level=TrainingLevel(record["training_level"]),
            goal=record["goal"],
            structure=record.get("structure") or {},
            description=record.get("description") or "",
        )


# ============================================================================
# Expanded tree views
# ============================================================================

@dataclass
class MicrocycleNode:
    microcycle: Microcycle
    sessions: List[PeriodizedSession] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = self.microcycle.to_record()
        data["sessions"] = [s.to_record() for s in self.sessions]
        return data


@dataclass
class MesocycleNode:
    mesocycle: Mesocycle
    microcycles: List[MicrocycleNode] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = self.mesocycle.to_record()
        data["microcycles"] = [m.to_dict() for m in self.microcycles]
        return data


@dataclass
class ProgramTree:
    """A program with all of its descendants, ordered."""
    program: PeriodizationProgram
    mesocycles: List[MesocycleNode] = field(default_factory=list)

    @property
    def microcycle_count(self) -> int:
        return sum(len(m.microcycles) for m in self.mesocycles)

    @property
    def session_count(self) -> int:
        return sum(len(mc.sessions) for m in self.mesocycles for mc in m.microcycles)

    def to_dict(self) -> dict:
        data = self.program.to_record()
        data["mesocycles"] = [m.to_dict() for m in self.mesocycles]
        return data
