"""Tests for the VolumeLandmarkStore service."""

import threading

import pytest

from periodization_engine.exceptions import (
    AlreadySeededError,
    ConflictError,
    InvalidLandmarksError,
    InvalidMuscleGroupError,
    LandmarkNotFoundError,
    NegativeVolumeError,
    ValidationError,
)
from periodization_engine.metrics.defaults import LandmarkDefaults
from periodization_engine.models.landmarks import (
    AdjustmentType,
    MuscleGroup,
    VolumeStatus,
    VolumeTrend,
)


@pytest.fixture
def seeded(landmarks):
    """Landmarks store with athlete-1 seeded at intermediate level."""
    landmarks.seed_defaults("athlete-1", "intermediate")
    return landmarks


class TestSeedDefaults:
    """Tests for seed_defaults."""

    def test_seeds_every_group(self, landmarks):
        seeded = landmarks.seed_defaults("athlete-1", "beginner")
        assert set(seeded) == set(MuscleGroup)
        assert all(lm.current_volume == 0 for lm in seeded.values())
        assert set(landmarks.get_landmarks("athlete-1")) == set(MuscleGroup)

    def test_level_values(self, landmarks):
        seeded = landmarks.seed_defaults("athlete-1", "advanced")
        chest = seeded[MuscleGroup.CHEST]
        assert (chest.mev, chest.mav, chest.mrv) == (10, 22, 26)

    def test_second_seed_conflicts_and_keeps_data(self, seeded):
        """Re-seeding fails and leaves the existing landmarks untouched."""
        seeded.upsert_current_volume("athlete-1", "chest", 15)
        with pytest.raises(AlreadySeededError) as exc_info:
            seeded.seed_defaults("athlete-1", "beginner")

        assert isinstance(exc_info.value, ConflictError)
        chest = seeded.get_landmarks("athlete-1")[MuscleGroup.CHEST]
        assert (chest.mev, chest.mav, chest.mrv) == (8, 18, 22)
        assert chest.current_volume == 15

    def test_custom_defaults_table(self, landmarks):
        table = LandmarkDefaults.from_dict({"beginner": {"chest": (2, 4, 6), "back": (3, 5, 7)}})
        seeded = landmarks.seed_defaults("athlete-2", "beginner", defaults=table)
        assert set(seeded) == {MuscleGroup.CHEST, MuscleGroup.BACK}

    def test_unknown_level(self, landmarks):
        with pytest.raises(ValidationError):
            landmarks.seed_defaults("athlete-1", "elite")

    def test_users_are_isolated(self, seeded):
        assert seeded.get_landmarks("someone-else") == {}
        seeded.seed_defaults("someone-else", "beginner")
        assert len(seeded.get_landmarks("someone-else")) == len(MuscleGroup)


class TestUpsertCurrentVolume:
    """Tests for upsert_current_volume."""

    def test_updates_only_current_volume(self, seeded):
        before = seeded.get_landmarks("athlete-1")[MuscleGroup.QUADS]
        after = seeded.upsert_current_volume("athlete-1", "quads", 17)

        assert after.current_volume == 17
        assert (after.mev, after.mav, after.mrv) == (before.mev, before.mav, before.mrv)
        assert seeded.get_landmark("athlete-1", MuscleGroup.QUADS).current_volume == 17

    def test_last_write_wins(self, seeded):
        seeded.upsert_current_volume("athlete-1", "chest", 12)
        seeded.upsert_current_volume("athlete-1", "chest", 19)
        assert seeded.get_landmark("athlete-1", "chest").current_volume == 19

    def test_zero_allowed(self, seeded):
        assert seeded.upsert_current_volume("athlete-1", "abs", 0).current_volume == 0

    def test_negative_volume(self, seeded):
        with pytest.raises(NegativeVolumeError):
            seeded.upsert_current_volume("athlete-1", "chest", -1)

    def test_invalid_group(self, seeded):
        with pytest.raises(InvalidMuscleGroupError):
            seeded.upsert_current_volume("athlete-1", "necks", 5)

    def test_non_numeric_volume(self, seeded):
        with pytest.raises(ValidationError):
            seeded.upsert_current_volume("athlete-1", "chest", "ten")

    def test_volume_too_large_for_float(self, seeded):
        with pytest.raises(ValidationError) as exc_info:
            seeded.upsert_current_volume("athlete-1", "chest", 10 ** 400)
        assert exc_info.value.details["field"] == "volume"
        assert seeded.get_landmark("athlete-1", "chest").current_volume == 0

    def test_unseeded_user(self, landmarks):
        with pytest.raises(LandmarkNotFoundError):
            landmarks.upsert_current_volume("nobody", "chest", 10)

    def test_appends_history(self, seeded):
        for volume in (10, 12, 14):
            seeded.upsert_current_volume("athlete-1", "back", volume)
        history = seeded.volume_history("athlete-1", "back")
        assert [entry.volume for entry in history] == [10, 12, 14]
        assert [e.volume for e in seeded.volume_history("athlete-1", "back", limit=2)] == [12, 14]

    def test_concurrent_writers_leave_one_value(self, seeded):
        """Concurrent upserts serialize; the stored value is one of the writes."""
        errors = []

        def write(volume):
            try:
                seeded.upsert_current_volume("athlete-1", "chest", volume)
            except Exception as e:  # collected and asserted below
                errors.append(e)

        threads = [threading.Thread(target=write, args=(v,)) for v in (11, 13, 15, 17)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert seeded.get_landmark("athlete-1", "chest").current_volume in {11, 13, 15, 17}
        assert len(seeded.volume_history("athlete-1", "chest")) == 4


class TestUpdateLandmarks:
    def test_updates_values(self, seeded):
        seeded.upsert_current_volume("athlete-1", "chest", 14)
        landmark = seeded.update_landmarks("athlete-1", "chest", 9, 15, 20)
        assert (landmark.mev, landmark.mav, landmark.mrv) == (9, 15, 20)
        assert landmark.current_volume == 14

    def test_rejects_unordered(self, seeded):
        with pytest.raises(InvalidLandmarksError):
            seeded.update_landmarks("athlete-1", "chest", 16, 10, 22)

    def test_missing_landmark(self, landmarks):
        with pytest.raises(LandmarkNotFoundError):
            landmarks.update_landmarks("nobody", "chest", 1, 2, 3)


class TestVolumeSummary:
    """Tests for volume_summary."""

    def test_example_classification(self, seeded):
        """Landmarks (10, 16, 22): 18 sets approaches MRV, 22 still does."""
        seeded.update_landmarks("athlete-1", "chest", 10, 16, 22)
        seeded.upsert_current_volume("athlete-1", "chest", 18)
        summary = {s.muscle_group: s for s in seeded.volume_summary("athlete-1")}
        assert summary[MuscleGroup.CHEST].status == VolumeStatus.APPROACHING_MRV
        assert summary[MuscleGroup.CHEST].target_volume == 13

        seeded.upsert_current_volume("athlete-1", "chest", 22)
        summary = {s.muscle_group: s for s in seeded.volume_summary("athlete-1")}
        assert summary[MuscleGroup.CHEST].status == VolumeStatus.APPROACHING_MRV

    def test_fresh_user_is_below_mev(self, seeded):
        summary = seeded.volume_summary("athlete-1")
        assert len(summary) == len(MuscleGroup)
        # traps have a non-zero intermediate MEV, so zero volume is below it
        assert all(s.status == VolumeStatus.BELOW_MEV for s in summary)

    def test_summary_is_not_persisted(self, seeded, store):
        seeded.volume_summary("athlete-1")
        record = store.load("volume_landmark", "athlete-1:chest")
        assert "status" not in record

    def test_empty_for_unknown_user(self, landmarks):
        assert landmarks.volume_summary("nobody") == []


class TestRecommendations:
    def test_uses_recent_trend(self, seeded):
        seeded.update_landmarks("athlete-1", "chest", 10, 16, 22)
        for volume in (16, 18, 20):
            seeded.upsert_current_volume("athlete-1", "chest", volume)

        recs = {r.muscle_group: r for r in seeded.generate_recommendations("athlete-1")}
        chest = recs[MuscleGroup.CHEST]
        assert chest.trend == VolumeTrend.INCREASING
        assert chest.status == VolumeStatus.APPROACHING_MRV
        assert chest.adjustment_type == AdjustmentType.DECREASE
        assert chest.recommended_volume == 18

    def test_one_per_landmark(self, seeded):
        assert len(seeded.generate_recommendations("athlete-1")) == len(MuscleGroup)


class TestGoalRange:
    def test_hypertrophy(self, seeded):
        seeded.update_landmarks("athlete-1", "chest", 10, 16, 22)
        assert seeded.volume_range_for_goal("athlete-1", "chest", "hypertrophy") == {
            "min": 12, "optimal": 16, "max": 20,
        }

    def test_unknown_goal(self, seeded):
        with pytest.raises(ValidationError):
            seeded.volume_range_for_goal("athlete-1", "chest", "speed")
