"""Template catalog API routes."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_template_service
from ...models.landmarks import TrainingLevel
from ...services.templates import TemplateService


router = APIRouter()


@router.get("")
async def list_templates(
    training_level: Optional[TrainingLevel] = Query(None),
    goal: Optional[str] = Query(None),
    templates: TemplateService = Depends(get_template_service),
) -> List[Dict[str, Any]]:
    """List catalog templates, optionally filtered by level and goal."""
    return [t.to_record() for t in templates.list_templates(training_level, goal)]


@router.get("/{template_id}")
async def get_template(
    template_id: str,
    templates: TemplateService = Depends(get_template_service),
) -> Dict[str, Any]:
    return templates.get_template(template_id).to_record()
