"""
Volume landmark service.

Handles:
- Seeding per-user landmarks from an experience-tier defaults table
- Logging current weekly volume per muscle group
- Explicit landmark edits
- Derived volume summaries and recommendations
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging
import math

from .base import BaseService
from ..db.repositories.base import RecordStore
from ..exceptions import (
    AlreadySeededError,
    InvalidLandmarksError,
    LandmarkNotFoundError,
    NegativeVolumeError,
    ValidationError,
)
from ..metrics.defaults import LandmarkDefaults, builtin_landmark_defaults
from ..metrics.volume import (
    analyze_volume_trend,
    classify,
    optimal_volume_for_goal,
    recommend_volume,
    target_volume,
)
from ..models.landmarks import (
    MuscleGroup,
    MuscleGroupVolumeSummary,
    TrainingLevel,
    VolumeGoal,
    VolumeLandmark,
    VolumeLogEntry,
    VolumeRecommendation,
)
from ..models.periodization import new_id


LANDMARK = "volume_landmark"
VOLUME_LOG = "volume_log"

_GROUP_ORDER = {group: index for index, group in enumerate(MuscleGroup)}


def landmark_id(user_id: str, muscle_group: MuscleGroup) -> str:
    """Stable record id for a (user, muscle group) landmark."""
    return f"{user_id}:{muscle_group.value}"


def _validate_volume(volume: Any) -> float:
    if isinstance(volume, bool) or not isinstance(volume, (int, float)):
        raise ValidationError(f"Volume must be a number, got {volume!r}", field="volume")
    try:
        value = float(volume)
    except OverflowError:
        raise ValidationError(f"Volume {volume} is too large", field="volume") from None
    if math.isnan(value) or math.isinf(value):
        raise ValidationError("Volume must be a finite number", field="volume")
    if value < 0:
        raise NegativeVolumeError(value)
    return value


class VolumeLandmarkStore(BaseService):
    """
    Per-user, per-muscle-group MEV/MAV/MRV landmarks and current volume.

    Landmarks are never deleted; the latest stored value is authoritative.
    Logging volume only changes current_volume, never the landmarks.
    """

    def __init__(
        self,
        store: RecordStore,
        defaults: Optional[LandmarkDefaults] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store=store, logger=logger)
        self._defaults = defaults or builtin_landmark_defaults()

    @property
    def defaults(self) -> LandmarkDefaults:
        return self._defaults

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_landmarks(self, user_id: str) -> Dict[MuscleGroup, VolumeLandmark]:
        """
        Get every landmark for a user.

        Args:
            user_id: The user identifier

        Returns:
            Mapping of muscle group to landmark (empty if never seeded)
        """
        records = self._store.query(LANDMARK, user_id=user_id)
        landmarks = [VolumeLandmark.from_record(r) for r in records]
        landmarks.sort(key=lambda lm: _GROUP_ORDER[lm.muscle_group])
        return {lm.muscle_group: lm for lm in landmarks}

    def get_landmark(self, user_id: str, muscle_group: Any) -> Optional[VolumeLandmark]:
        """Get one landmark, or None if the user has no record for the group."""
        group = MuscleGroup.parse(muscle_group)
        record = self._store.load(LANDMARK, landmark_id(user_id, group))
        return VolumeLandmark.from_record(record) if record else None

    def volume_history(
        self,
        user_id: str,
        muscle_group: Any,
        limit: Optional[int] = None,
    ) -> List[VolumeLogEntry]:
        """
        Get logged volumes for a group, oldest first.

        Args:
            user_id: The user identifier
            muscle_group: Muscle group to read
            limit: Keep only the most recent N entries
        """
        group = MuscleGroup.parse(muscle_group)
        records = self._store.query(
            VOLUME_LOG, order_by="logged_at", user_id=user_id, muscle_group=group.value
        )
        entries = [VolumeLogEntry.from_record(r) for r in records]
        if limit is not None:
            entries = entries[-limit:] if limit > 0 else []
        return entries

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def seed_defaults(
        self,
        user_id: str,
        training_level: Any,
        defaults: Optional[LandmarkDefaults] = None,
    ) -> Dict[MuscleGroup, VolumeLandmark]:
        """
        Create landmarks for a new user from experience-tier defaults.

        Args:
            user_id: The user identifier
            training_level: beginner, intermediate or advanced
            defaults: Defaults table; the service's table if omitted

        Returns:
            The seeded landmarks

        Raises:
            AlreadySeededError: If the user already has any landmark
        """
        level = TrainingLevel.parse(training_level)
        table = (defaults or self._defaults).for_level(level)
        now = datetime.now()

        with self._store.transaction():
            if self._store.query(LANDMARK, user_id=user_id):
                self.logger.warning(f"Refusing to re-seed landmarks for user {user_id}")
                raise AlreadySeededError(user_id)

            seeded: Dict[MuscleGroup, VolumeLandmark] = {}
            for group in MuscleGroup:
                if group not in table:
                    continue
                mev, mav, mrv = table[group]
                landmark = VolumeLandmark(
                    user_id=user_id,
                    muscle_group=group,
                    mev=mev,
                    mav=mav,
                    mrv=mrv,
                    current_volume=0.0,
                    updated_at=now,
                )
                self._save_landmark(landmark)
                seeded[group] = landmark

        self.logger.info(
            f"Seeded {len(seeded)} {level.value} landmarks for user {user_id}"
        )
        return seeded

    def upsert_current_volume(
        self,
        user_id: str,
        muscle_group: Any,
        volume: Any,
    ) -> VolumeLandmark:
        """
        Record the user's current weekly volume for a muscle group.

        Concurrent writes to the same landmark are serialized by the store;
        the last write wins.

        Args:
            user_id: The user identifier
            muscle_group: One of the enumerated muscle groups
            volume: Weekly working sets, >= 0

        Returns:
            The updated landmark

        Raises:
            InvalidMuscleGroupError: If the group is not enumerated
            NegativeVolumeError: If volume < 0
            LandmarkNotFoundError: If the user has no landmark for the group
        """
        group = MuscleGroup.parse(muscle_group)
        value = _validate_volume(volume)
        now = datetime.now()

        with self._store.transaction():
            record = self._store.load(LANDMARK, landmark_id(user_id, group))
            if record is None:
                raise LandmarkNotFoundError(user_id, group.value)

            landmark = VolumeLandmark.from_record(record)
            landmark.current_volume = value
            landmark.updated_at = now
            self._save_landmark(landmark)

            entry = VolumeLogEntry(
                id=new_id("vlog"),
                user_id=user_id,
                muscle_group=group,
                volume=value,
                logged_at=now,
            )
            self._store.save(VOLUME_LOG, entry.to_record())

        self.logger.info(f"Logged {value:g} sets of {group.value} for user {user_id}")
        return landmark

    def update_landmarks(
        self,
        user_id: str,
        muscle_group: Any,
        mev: float,
        mav: float,
        mrv: float,
    ) -> VolumeLandmark:
        """
        Explicitly edit a landmark's MEV/MAV/MRV, keeping current volume.

        Raises:
            InvalidLandmarksError: If 0 <= mev <= mav <= mrv does not hold
            LandmarkNotFoundError: If the user has no landmark for the group
        """
        group = MuscleGroup.parse(muscle_group)
        if not 0 <= mev <= mav <= mrv:
            raise InvalidLandmarksError(mev, mav, mrv, details={"muscle_group": group.value})

        with self._store.transaction():
            record = self._store.load(LANDMARK, landmark_id(user_id, group))
            if record is None:
                raise LandmarkNotFoundError(user_id, group.value)
            landmark = VolumeLandmark.from_record(record)
            landmark.mev, landmark.mav, landmark.mrv = mev, mav, mrv
            landmark.updated_at = datetime.now()
            self._save_landmark(landmark)

        self.logger.info(f"Updated {group.value} landmarks for user {user_id} to {mev}/{mav}/{mrv}")
        return landmark

    def _save_landmark(self, landmark: VolumeLandmark) -> None:
        record = landmark.to_record()
        record["id"] = landmark_id(landmark.user_id, landmark.muscle_group)
        self._store.save(LANDMARK, record)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def volume_summary(self, user_id: str) -> List[MuscleGroupVolumeSummary]:
        """
        Classify every landmark of a user. Computed on demand, never stored.
        """
        summaries = []
        for landmark in self.get_landmarks(user_id).values():
            status, recommendation = classify(
                landmark.current_volume, landmark.mev, landmark.mav, landmark.mrv
            )
            summaries.append(
                MuscleGroupVolumeSummary(
                    muscle_group=landmark.muscle_group,
                    current_volume=landmark.current_volume,
                    target_volume=target_volume(landmark.mev, landmark.mav),
                    mev=landmark.mev,
                    mav=landmark.mav,
                    mrv=landmark.mrv,
                    status=status,
                    recommendation=recommendation,
                )
            )
        return summaries

    def generate_recommendations(
        self,
        user_id: str,
        history_size: int = 4,
    ) -> List[VolumeRecommendation]:
        """
        Recommend volume adjustments from status and recent logging trend.

        Args:
            user_id: The user identifier
            history_size: Number of most recent logs used for the trend
        """
        recommendations = []
        for group, landmark in self.get_landmarks(user_id).items():
            history = self.volume_history(user_id, group, limit=history_size)
            trend = analyze_volume_trend([entry.volume for entry in history])
            recommendations.append(recommend_volume(landmark, trend))
        return recommendations

    def volume_range_for_goal(self, user_id: str, muscle_group: Any, goal: Any) -> Dict[str, int]:
        """Goal-specific (min, optimal, max) weekly sets for one group."""
        group = MuscleGroup.parse(muscle_group)
        try:
            volume_goal = VolumeGoal(str(goal).lower())
        except ValueError:
            raise ValidationError(f"Unknown volume goal '{goal}'", field="goal") from None

        landmark = self.get_landmark(user_id, group)
        if landmark is None:
            raise LandmarkNotFoundError(user_id, group.value)
        low, optimal, high = optimal_volume_for_goal(landmark, volume_goal)
        return {"min": low, "optimal": optimal, "max": high}
