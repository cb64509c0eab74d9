"""Training objectives and their associations to hierarchy nodes."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ..exceptions import UnknownEntityTypeError, ValidationError


class EntityType(str, Enum):
    """Hierarchy node kinds an objective can be attached to."""
    PROGRAM = "program"
    MESOCYCLE = "mesocycle"
    MICROCYCLE = "microcycle"
    SESSION = "session"

    @classmethod
    def parse(cls, value: Any) -> "EntityType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownEntityTypeError(
                str(value), allowed=[e.value for e in cls]
            ) from None


class ObjectivePriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: Any) -> "ObjectivePriority":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown priority '{value}'", field="priority") from None


@dataclass
class TrainingObjective:
    """A user-defined, measurable training goal."""
    id: str
    user_id: str
    description: str
    metric: str
    target_value: float
    created_at: datetime = field(default_factory=datetime.now)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "description": self.description,
            "metric": self.metric,
            "target_value": self.target_value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "TrainingObjective":
        created_at = record.get("created_at")
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            description=record["description"],
            metric=record["metric"],
            target_value=record["target_value"],
            created_at=datetime.fromisoformat(created_at) if created_at else datetime.now(),
        )


@dataclass
class ObjectiveAssociation:
    """Join record linking an objective to any node of the hierarchy."""
    id: str
    objective_id: str
    entity_type: EntityType
    entity_id: str
    priority: ObjectivePriority = ObjectivePriority.MEDIUM
    expected_progress: Optional[float] = None

    def __post_init__(self):
        self.entity_type = EntityType.parse(self.entity_type)
        self.priority = ObjectivePriority.parse(self.priority)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "objective_id": self.objective_id,
            "entity_type": self.entity_type.value,
            "entity_id": self.entity_id,
            "priority": self.priority.value,
            "expected_progress": self.expected_progress,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ObjectiveAssociation":
        return cls(
            id=record["id"],
            objective_id=record["objective_id"],
            entity_type=record["entity_type"],
            entity_id=record["entity_id"],
            priority=record.get("priority") or ObjectivePriority.MEDIUM,
            expected_progress=record.get("expected_progress"),
        )
