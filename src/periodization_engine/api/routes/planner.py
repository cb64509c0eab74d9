"""Session planning API routes."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, model_validator

from ..deps import get_session_planner
from ...config import get_settings
from ...models.planning import Readiness
from ...services.planner import SessionPlanner


router = APIRouter()


class ReadinessInput(BaseModel):
    """
    Today's readiness.

    Either ``ready_to_train`` directly, or recovery metrics from which it
    is derived.
    """
    ready_to_train: Optional[bool] = None
    sleep_score: Optional[float] = Field(None, ge=0, le=100)
    resting_hr: Optional[float] = Field(None, ge=20, le=220)
    stress_level: Optional[float] = Field(None, ge=0, le=100)

    @model_validator(mode="after")
    def check_signal(self) -> "ReadinessInput":
        if self.ready_to_train is None and all(
            v is None for v in (self.sleep_score, self.resting_hr, self.stress_level)
        ):
            raise ValueError("Provide ready_to_train or at least one recovery metric")
        return self

    def to_readiness(self, threshold: float) -> Readiness:
        if self.ready_to_train is not None:
            return Readiness(ready_to_train=self.ready_to_train)
        return Readiness.from_recovery_metrics(
            sleep_score=self.sleep_score,
            resting_hr=self.resting_hr,
            stress_level=self.stress_level,
            threshold=threshold,
        )


class PlanSessionRequest(BaseModel):
    """Request to plan the next session."""
    muscle_groups: List[str] = Field(..., description="Muscle groups the session will train")
    readiness: ReadinessInput


@router.post("/{user_id}/next-session")
async def plan_next_session(
    user_id: str,
    request: PlanSessionRequest,
    planner: SessionPlanner = Depends(get_session_planner),
) -> Dict[str, Any]:
    """Advisory intensity and volume targets for the next session."""
    readiness = request.readiness.to_readiness(get_settings().readiness_threshold)
    plan = planner.plan_next_session(user_id, request.muscle_groups, readiness)
    return {
        "user_id": user_id,
        "readiness": readiness.to_dict(),
        "plan": plan.to_dict(),
    }
