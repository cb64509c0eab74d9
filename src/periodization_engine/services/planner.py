"""
Fatigue-adjusted session planner.

Combines the day's readiness with each targeted muscle group's volume
status to produce advisory intensity and volume targets for the next
session. Reads landmarks only; never writes.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from .base import BaseService
from .landmarks import VolumeLandmarkStore
from ..exceptions import NoLandmarksFoundError, ValidationError
from ..metrics.volume import classify
from ..models.landmarks import MuscleGroup, VolumeStatus
from ..models.planning import MuscleGroupPlan, Readiness, SessionPlan


FATIGUED_INTENSITY_PCT = 70.0
READY_INTENSITY_PCT = 85.0

# (ready, fatigued) volume multipliers per status
VOLUME_MULTIPLIERS: Dict[VolumeStatus, Tuple[float, float]] = {
    VolumeStatus.EXCEEDING_MRV: (0.7, 0.7),
    VolumeStatus.APPROACHING_MRV: (1.0, 0.85),
    VolumeStatus.OPTIMAL: (1.0, 1.0),
    VolumeStatus.BELOW_MEV: (1.15, 1.0),
}


def volume_multiplier(status: VolumeStatus, fatigued: bool) -> float:
    """Volume multiplier for one muscle group."""
    ready, tired = VOLUME_MULTIPLIERS[status]
    return tired if fatigued else ready


class SessionPlanner(BaseService):
    """Plans the next session from readiness and volume status."""

    def __init__(
        self,
        landmarks: VolumeLandmarkStore,
        fatigued_intensity_pct: float = FATIGUED_INTENSITY_PCT,
        ready_intensity_pct: float = READY_INTENSITY_PCT,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store=landmarks.store, logger=logger)
        self._landmarks = landmarks
        self.fatigued_intensity_pct = fatigued_intensity_pct
        self.ready_intensity_pct = ready_intensity_pct

    def plan_next_session(
        self,
        user_id: str,
        muscle_groups: Iterable[Any],
        readiness: Readiness,
    ) -> SessionPlan:
        """
        Compute intensity and volume targets for the next session.

        The session volume multiplier is the most conservative (minimum)
        multiplier across the targeted groups.

        Args:
            user_id: The user identifier
            muscle_groups: Groups the session will train
            readiness: Today's readiness signal

        Returns:
            SessionPlan with a per-group breakdown

        Raises:
            ValidationError: If no muscle groups are given
            InvalidMuscleGroupError: If a group name is not enumerated
            NoLandmarksFoundError: If any targeted group has no landmark
        """
        groups: List[MuscleGroup] = []
        for raw in muscle_groups:
            group = MuscleGroup.parse(raw)
            if group not in groups:
                groups.append(group)
        if not groups:
            raise ValidationError("At least one muscle group is required", field="muscle_groups")

        landmarks = self._landmarks.get_landmarks(user_id)
        missing = [g.value for g in groups if g not in landmarks]
        if missing:
            raise NoLandmarksFoundError(user_id, missing)

        fatigued = readiness.fatigued
        breakdown = []
        for group in groups:
            landmark = landmarks[group]
            status, recommendation = classify(
                landmark.current_volume, landmark.mev, landmark.mav, landmark.mrv
            )
            breakdown.append(
                MuscleGroupPlan(
                    muscle_group=group,
                    status=status,
                    volume_multiplier=volume_multiplier(status, fatigued),
                    current_volume=landmark.current_volume,
                    recommendation=recommendation,
                )
            )

        limiting = min(breakdown, key=lambda plan: plan.volume_multiplier)
        plan = SessionPlan(
            target_intensity_pct=self.fatigued_intensity_pct if fatigued else self.ready_intensity_pct,
            volume_multiplier=limiting.volume_multiplier,
            fatigued=fatigued,
            muscle_groups=breakdown,
            limiting_muscle_group=limiting.muscle_group,
        )

        self.logger.debug(
            f"Planned session for {user_id}: {plan.target_intensity_pct}% x{plan.volume_multiplier} "
            f"(fatigued={fatigued}, limited by {limiting.muscle_group.value})"
        )
        return plan
