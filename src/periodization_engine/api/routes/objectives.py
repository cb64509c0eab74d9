"""Training objective API routes."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_objective_service
from ...models.objectives import ObjectivePriority
from ...services.objectives import ObjectiveService


router = APIRouter()


class CreateObjectiveRequest(BaseModel):
    user_id: str
    description: str = Field(..., min_length=1)
    metric: str = Field(..., min_length=1, description="e.g. squat_1rm_kg")
    target_value: float


class AssociationRequest(BaseModel):
    """Link an objective to a program, mesocycle, microcycle or session."""
    objective_id: str
    entity_type: str = Field(..., description="program, mesocycle, microcycle or session")
    entity_id: str
    priority: ObjectivePriority = ObjectivePriority.MEDIUM
    expected_progress: Optional[float] = Field(None, ge=0, le=100)


@router.post("", status_code=201)
async def create_objective(
    request: CreateObjectiveRequest,
    objectives: ObjectiveService = Depends(get_objective_service),
) -> Dict[str, Any]:
    objective = objectives.create_objective(
        user_id=request.user_id,
        description=request.description,
        metric=request.metric,
        target_value=request.target_value,
    )
    return objective.to_record()


@router.get("/users/{user_id}")
async def list_objectives(
    user_id: str,
    objectives: ObjectiveService = Depends(get_objective_service),
) -> List[Dict[str, Any]]:
    return [o.to_record() for o in objectives.list_objectives(user_id)]


@router.post("/associations")
async def associate(
    request: AssociationRequest,
    objectives: ObjectiveService = Depends(get_objective_service),
) -> Dict[str, Any]:
    """Attach an objective to a hierarchy node. Repeating the call is a no-op."""
    association = objectives.associate(
        objective_id=request.objective_id,
        entity_type=request.entity_type,
        entity_id=request.entity_id,
        priority=request.priority,
        expected_progress=request.expected_progress,
    )
    return association.to_record()


@router.delete("/associations")
async def dissociate(
    request: AssociationRequest,
    objectives: ObjectiveService = Depends(get_objective_service),
) -> Dict[str, Any]:
    removed = objectives.dissociate(request.objective_id, request.entity_type, request.entity_id)
    return {"removed": removed}


@router.get("/sessions/{session_id}")
async def get_effective_objectives(
    session_id: str,
    objectives: ObjectiveService = Depends(get_objective_service),
) -> Dict[str, Any]:
    """Objectives in force for a session, inherited from its ancestors."""
    effective = objectives.resolve_effective_objectives(session_id)
    return {
        "session_id": session_id,
        "objectives": [o.to_record() for o in effective],
    }
