"""Volume landmark data models (MEV / MAV / MRV per muscle group)."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ..exceptions import InvalidMuscleGroupError, ValidationError


class MuscleGroup(str, Enum):
    """The fixed set of muscle groups tracked for volume landmarks."""
    CHEST = "chest"
    BACK = "back"
    LEGS = "legs"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    CORE = "core"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    FOREARMS = "forearms"
    TRAPS = "traps"
    LATS = "lats"
    ABS = "abs"
    LOWER_BACK = "lower_back"
    UPPER_BACK = "upper_back"

    @classmethod
    def parse(cls, value: Any) -> "MuscleGroup":
        """Coerce a string into a MuscleGroup, raising InvalidMuscleGroupError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidMuscleGroupError(str(value)) from None


class TrainingLevel(str, Enum):
    """Experience tiers used to seed default landmarks."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def parse(cls, value: Any) -> "TrainingLevel":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(
                f"Unknown training level '{value}'",
                field="training_level",
            ) from None


class VolumeStatus(str, Enum):
    """Classification of current weekly volume against the landmarks."""
    BELOW_MEV = "below_mev"
    OPTIMAL = "optimal"
    APPROACHING_MRV = "approaching_mrv"
    EXCEEDING_MRV = "exceeding_mrv"

    @property
    def severity(self) -> int:
        """Ordering from least to most severe (0-3)."""
        return _STATUS_SEVERITY[self]


_STATUS_SEVERITY = {
    VolumeStatus.BELOW_MEV: 0,
    VolumeStatus.OPTIMAL: 1,
    VolumeStatus.APPROACHING_MRV: 2,
    VolumeStatus.EXCEEDING_MRV: 3,
}


class AdjustmentType(str, Enum):
    """Kind of volume change a recommendation asks for."""
    INCREASE = "increase"
    MAINTAIN = "maintain"
    DECREASE = "decrease"
    DELOAD = "deload"


class VolumeTrend(str, Enum):
    """Direction of recently logged volumes."""
    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"
    INCONSISTENT = "inconsistent"


class AdaptationResponse(str, Enum):
    """How a trainee responded to the prescribed volume."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class VolumeGoal(str, Enum):
    """Goals with distinct volume ranges inside the landmarks."""
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    ENDURANCE = "endurance"


@dataclass
class VolumeLandmark:
    """
    Per-user, per-muscle-group volume landmarks in weekly sets.

    Invariant: 0 <= mev <= mav <= mrv. current_volume is the latest
    logged weekly volume and is the only field mutated by logging.
    """
    user_id: str
    muscle_group: MuscleGroup
    mev: float
    mav: float
    mrv: float
    current_volume: float = 0.0
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if isinstance(self.muscle_group, str):
            self.muscle_group = MuscleGroup.parse(self.muscle_group)

    @property
    def is_valid(self) -> bool:
        return 0 <= self.mev <= self.mav <= self.mrv

    def to_record(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "muscle_group": self.muscle_group.value,
            "mev": self.mev,
            "mav": self.mav,
            "mrv": self.mrv,
            "current_volume": self.current_volume,
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "VolumeLandmark":
        updated_at = record.get("updated_at")
        if isinstance(updated_at, str):
            updated_at = datetime.fromisoformat(updated_at)
        return cls(
            user_id=record["user_id"],
            muscle_group=MuscleGroup(record["muscle_group"]),
            mev=record["mev"],
            mav=record["mav"],
            mrv=record["mrv"],
            current_volume=record.get("current_volume") or 0.0,
            updated_at=updated_at or datetime.now(),
        )


@dataclass
class MuscleGroupVolumeSummary:
    """Derived, read-only view of one landmark with its classification."""
    muscle_group: MuscleGroup
    current_volume: float
    target_volume: float
    mev: float
    mav: float
    mrv: float
    status: VolumeStatus
    recommendation: str = ""

    def to_dict(self) -> dict:
        return {
            "muscle_group": self.muscle_group.value,
            "current_volume": self.current_volume,
            "target_volume": self.target_volume,
            "mev": self.mev,
            "mav": self.mav,
            "mrv": self.mrv,
            "status": self.status.value,
            "recommendation": self.recommendation,
        }


@dataclass
class VolumeLogEntry:
    """One logged weekly volume for a muscle group."""
    id: str
    user_id: str
    muscle_group: MuscleGroup
    volume: float
    logged_at: datetime = field(default_factory=datetime.now)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "muscle_group": self.muscle_group.value,
            "volume": self.volume,
            "logged_at": self.logged_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "VolumeLogEntry":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            muscle_group=MuscleGroup(record["muscle_group"]),
            volume=record["volume"],
            logged_at=datetime.fromisoformat(record["logged_at"]),
        )


@dataclass
class VolumeRecommendation:
    """Volume adjustment for one muscle group, combining status and trend."""
    muscle_group: MuscleGroup
    current_volume: float
    recommended_volume: float
    adjustment_type: AdjustmentType
    reasoning: str
    confidence: float = 0.8
    timeline_weeks: int = 2
    status: Optional[VolumeStatus] = None
    trend: Optional[VolumeTrend] = None

    def to_dict(self) -> dict:
        return {
            "muscle_group": self.muscle_group.value,
            "current_volume": self.current_volume,
            "recommended_volume": self.recommended_volume,
            "adjustment_type": self.adjustment_type.value,
            "reasoning": self.reasoning,
            "confidence": self.confidence,
            "timeline_weeks": self.timeline_weeks,
            "status": self.status.value if self.status else None,
            "trend": self.trend.value if self.trend else None,
        }
