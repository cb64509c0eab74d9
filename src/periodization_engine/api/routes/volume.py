"""
Volume landmark API routes.

Provides endpoints for:
- Seeding experience-tier default landmarks
- Logging current weekly volume per muscle group
- Volume status summaries and adjustment recommendations
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ..deps import get_landmark_store
from ...models.landmarks import TrainingLevel
from ...services.landmarks import VolumeLandmarkStore


router = APIRouter()


# ============================================================================
# Pydantic models for API
# ============================================================================

class SeedLandmarksRequest(BaseModel):
    """Request to seed default landmarks for a new user."""
    training_level: TrainingLevel = Field(..., description="beginner, intermediate or advanced")


class LogVolumeRequest(BaseModel):
    """Weekly working sets performed for one muscle group."""
    muscle_group: str = Field(..., description="One of the enumerated muscle groups")
    volume: float = Field(..., description="Weekly working sets (>= 0)")


class UpdateLandmarksRequest(BaseModel):
    """Explicit MEV/MAV/MRV edit for one muscle group."""
    mev: float = Field(..., ge=0)
    mav: float = Field(..., ge=0)
    mrv: float = Field(..., ge=0)


def _landmark_output(landmark) -> Dict[str, Any]:
    return {
        "muscle_group": landmark.muscle_group.value,
        "mev": landmark.mev,
        "mav": landmark.mav,
        "mrv": landmark.mrv,
        "current_volume": landmark.current_volume,
        "updated_at": landmark.updated_at.isoformat(),
    }


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/{user_id}/seed", status_code=201)
async def seed_landmarks(
    user_id: str,
    request: SeedLandmarksRequest,
    landmarks: VolumeLandmarkStore = Depends(get_landmark_store),
) -> Dict[str, Any]:
    """Seed default landmarks for a user. Fails with 409 if already seeded."""
    seeded = landmarks.seed_defaults(user_id, request.training_level)
    return {
        "user_id": user_id,
        "training_level": request.training_level.value,
        "landmarks": [_landmark_output(lm) for lm in seeded.values()],
    }


@router.get("/{user_id}/landmarks")
async def get_landmarks(
    user_id: str,
    landmarks: VolumeLandmarkStore = Depends(get_landmark_store),
) -> List[Dict[str, Any]]:
    """Get every landmark for a user."""
    return [_landmark_output(lm) for lm in landmarks.get_landmarks(user_id).values()]


@router.put("/{user_id}/landmarks/{muscle_group}")
async def update_landmarks(
    user_id: str,
    muscle_group: str,
    request: UpdateLandmarksRequest,
    landmarks: VolumeLandmarkStore = Depends(get_landmark_store),
) -> Dict[str, Any]:
    """Edit the MEV/MAV/MRV of one muscle group."""
    landmark = landmarks.update_landmarks(
        user_id, muscle_group, request.mev, request.mav, request.mrv
    )
    return _landmark_output(landmark)


@router.post("/{user_id}/log")
async def log_volume(
    user_id: str,
    request: LogVolumeRequest,
    landmarks: VolumeLandmarkStore = Depends(get_landmark_store),
) -> Dict[str, Any]:
    """Record current weekly volume for a muscle group."""
    landmark = landmarks.upsert_current_volume(user_id, request.muscle_group, request.volume)
    return _landmark_output(landmark)


@router.get("/{user_id}/summary")
async def get_volume_summary(
    user_id: str,
    landmarks: VolumeLandmarkStore = Depends(get_landmark_store),
) -> Dict[str, Any]:
    """Classify current volume for every muscle group of a user."""
    summaries = landmarks.volume_summary(user_id)
    return {
        "user_id": user_id,
        "muscle_groups": [s.to_dict() for s in summaries],
    }


@router.get("/{user_id}/recommendations")
async def get_recommendations(
    user_id: str,
    history_size: int = Query(4, ge=1, le=52, description="Recent logs used for the trend"),
    landmarks: VolumeLandmarkStore = Depends(get_landmark_store),
) -> Dict[str, Any]:
    """Recommend volume adjustments from status and recent trend."""
    recommendations = landmarks.generate_recommendations(user_id, history_size=history_size)
    return {
        "user_id": user_id,
        "recommendations": [r.to_dict() for r in recommendations],
    }


@router.get("/{user_id}/goal-range/{muscle_group}")
async def get_goal_range(
    user_id: str,
    muscle_group: str,
    goal: str = Query(..., description="strength, hypertrophy or endurance"),
    landmarks: VolumeLandmarkStore = Depends(get_landmark_store),
) -> Dict[str, Any]:
    """Goal-specific weekly set range for one muscle group."""
    volume_range = landmarks.volume_range_for_goal(user_id, muscle_group, goal)
    return {"muscle_group": muscle_group, "goal": goal, **volume_range}
