"""Readiness input and session plan output for the fatigue-adjusted planner."""

from dataclasses import dataclass, field
from typing import List, Optional

from .landmarks import MuscleGroup, VolumeStatus


# Recovery score weights: 50% sleep, 30% resting heart rate, 20% stress
SLEEP_WEIGHT = 0.5
HEART_RATE_WEIGHT = 0.3
STRESS_WEIGHT = 0.2

DEFAULT_SLEEP_SCORE = 50.0
DEFAULT_RESTING_HR = 65.0
DEFAULT_STRESS_LEVEL = 50.0
DEFAULT_READINESS_THRESHOLD = 70.0


@dataclass
class Readiness:
    """
    Fatigue/readiness signal for the day.

    ready_to_train is authoritative for planning; recovery_score is
    informational when it was derived from recovery metrics.
    """
    ready_to_train: bool
    recovery_score: Optional[float] = None
    recommendations: List[str] = field(default_factory=list)

    @property
    def fatigued(self) -> bool:
        return not self.ready_to_train

    @classmethod
    def from_recovery_metrics(
        cls,
        sleep_score: Optional[float] = None,
        resting_hr: Optional[float] = None,
        stress_level: Optional[float] = None,
        threshold: float = DEFAULT_READINESS_THRESHOLD,
    ) -> "Readiness":
        """
        Derive readiness from wearable recovery metrics.

        Args:
            sleep_score: Sleep quality 0-100
            resting_hr: Morning resting heart rate in bpm (40-100 maps to 100-0)
            stress_level: Stress 0-100
            threshold: Minimum recovery score considered ready to train

        Returns:
            Readiness with the computed recovery score
        """
        sleep = DEFAULT_SLEEP_SCORE if sleep_score is None else sleep_score
        hr = DEFAULT_RESTING_HR if resting_hr is None else resting_hr
        stress = DEFAULT_STRESS_LEVEL if stress_level is None else stress_level

        hr_score = 100 - min(100.0, max(0.0, (hr - 40) * 1.67))
        score = sleep * SLEEP_WEIGHT + hr_score * HEART_RATE_WEIGHT + (100 - stress) * STRESS_WEIGHT
        score = round(score, 1)

        recommendations = []
        if sleep < 60:
            recommendations.append("Prioritize sleep: aim for 7-9 hours tonight")
        if hr > 70:
            recommendations.append("Elevated resting heart rate: keep today's work submaximal")
        if stress > 70:
            recommendations.append("High stress: favor technique work over heavy loading")

        return cls(
            ready_to_train=score >= threshold,
            recovery_score=score,
            recommendations=recommendations,
        )

    def to_dict(self) -> dict:
        return {
            "ready_to_train": self.ready_to_train,
            "recovery_score": self.recovery_score,
            "recommendations": self.recommendations,
        }


@dataclass
class MuscleGroupPlan:
    """Per-group contribution to a session plan."""
    muscle_group: MuscleGroup
    status: VolumeStatus
    volume_multiplier: float
    current_volume: float
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "muscle_group": self.muscle_group.value,
            "status": self.status.value,
            "volume_multiplier": self.volume_multiplier,
            "current_volume": self.current_volume,
            "recommendation": self.recommendation,
        }


@dataclass
class SessionPlan:
    """Advisory intensity and volume targets for the next session."""
    target_intensity_pct: float
    volume_multiplier: float
    fatigued: bool
    muscle_groups: List[MuscleGroupPlan] = field(default_factory=list)
    limiting_muscle_group: Optional[MuscleGroup] = None

    def to_dict(self) -> dict:
        return {
            "target_intensity_pct": self.target_intensity_pct,
            "volume_multiplier": self.volume_multiplier,
            "fatigued": self.fatigued,
            "muscle_groups": [g.to_dict() for g in self.muscle_groups],
            "limiting_muscle_group": (
                self.limiting_muscle_group.value if self.limiting_muscle_group else None
            ),
        }
