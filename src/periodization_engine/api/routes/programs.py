"""
Periodized program API routes.

Provides endpoints for:
- Instantiating a program from a catalog template
- Building programs node by node
- Reading the expanded program tree
- Cascade deletion
"""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from ..deps import get_hierarchy, get_template_service
from ...models.landmarks import TrainingLevel
from ...services.hierarchy import PeriodizationHierarchy
from ...services.templates import TemplateService


router = APIRouter()


# ============================================================================
# Pydantic models for API
# ============================================================================

class InstantiateTemplateRequest(BaseModel):
    """Request to create a program from a template."""
    template_id: str
    user_id: str
    program_name: str = Field(..., min_length=1)
    start_date: date


class CreateProgramRequest(BaseModel):
    """Request to create an empty program."""
    user_id: str
    name: str = Field(..., min_length=1)
    periodization_type: str = "linear"
    start_date: date
    goal: str
    training_level: TrainingLevel
    frequency: int = Field(..., description="Training days per week")
    structure: Dict[str, Any] = Field(default_factory=dict)


class AddMesocycleRequest(BaseModel):
    position: int
    phase: str
    length_in_weeks: int
    volume_target: Optional[float] = None
    intensity_target: Optional[float] = None
    name: Optional[str] = None


class AddMicrocycleRequest(BaseModel):
    week_number: int
    is_deload: bool = False
    phase: Optional[str] = None
    start_date: Optional[date] = None


class AddSessionRequest(BaseModel):
    day_of_week: int = Field(..., description="0 = Monday ... 6 = Sunday")
    target_intensity: float = Field(..., gt=0, le=100, description="Percent of 1RM")
    target_volume_multiplier: float = Field(1.0, ge=0)
    exercises: List[Dict[str, Any]] = Field(default_factory=list)
    name: Optional[str] = None


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/from-template", status_code=201)
async def instantiate_template(
    request: InstantiateTemplateRequest,
    templates: TemplateService = Depends(get_template_service),
) -> Dict[str, Any]:
    """Expand a template into a full program tree."""
    tree = templates.instantiate(
        template_id=request.template_id,
        user_id=request.user_id,
        program_name=request.program_name,
        start_date=request.start_date,
    )
    return tree.to_dict()


@router.post("", status_code=201)
async def create_program(
    request: CreateProgramRequest,
    hierarchy: PeriodizationHierarchy = Depends(get_hierarchy),
) -> Dict[str, Any]:
    """Create an empty program."""
    program = hierarchy.create_program(
        user_id=request.user_id,
        name=request.name,
        periodization_type=request.periodization_type,
        start_date=request.start_date,
        goal=request.goal,
        training_level=request.training_level,
        frequency=request.frequency,
        structure=request.structure,
    )
    return program.to_record()


@router.get("/users/{user_id}")
async def list_programs(
    user_id: str,
    hierarchy: PeriodizationHierarchy = Depends(get_hierarchy),
) -> List[Dict[str, Any]]:
    """List a user's programs."""
    return [p.to_record() for p in hierarchy.list_programs(user_id)]


@router.get("/{program_id}")
async def get_program(
    program_id: str,
    hierarchy: PeriodizationHierarchy = Depends(get_hierarchy),
) -> Dict[str, Any]:
    """Get a program with every mesocycle, microcycle and session."""
    return hierarchy.get_program_tree(program_id).to_dict()


@router.delete("/{program_id}", status_code=204)
async def delete_program(
    program_id: str,
    hierarchy: PeriodizationHierarchy = Depends(get_hierarchy),
) -> Response:
    """Delete a program and all of its descendants."""
    hierarchy.delete_program(program_id)
    return Response(status_code=204)


@router.post("/{program_id}/mesocycles", status_code=201)
async def add_mesocycle(
    program_id: str,
    request: AddMesocycleRequest,
    hierarchy: PeriodizationHierarchy = Depends(get_hierarchy),
) -> Dict[str, Any]:
    mesocycle = hierarchy.add_mesocycle(program_id=program_id, **request.model_dump())
    return mesocycle.to_record()


@router.post("/mesocycles/{mesocycle_id}/microcycles", status_code=201)
async def add_microcycle(
    mesocycle_id: str,
    request: AddMicrocycleRequest,
    hierarchy: PeriodizationHierarchy = Depends(get_hierarchy),
) -> Dict[str, Any]:
    microcycle = hierarchy.add_microcycle(mesocycle_id=mesocycle_id, **request.model_dump())
    return microcycle.to_record()


@router.post("/microcycles/{microcycle_id}/sessions", status_code=201)
async def add_session(
    microcycle_id: str,
    request: AddSessionRequest,
    hierarchy: PeriodizationHierarchy = Depends(get_hierarchy),
) -> Dict[str, Any]:
    session = hierarchy.add_session(microcycle_id=microcycle_id, **request.model_dump())
    return session.to_record()
