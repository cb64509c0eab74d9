"""
Objective association service.

Objectives are attached to any node of the periodization hierarchy through
join records; a session's effective objectives are the union of everything
attached to it and to its ancestors.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from .base import BaseService
from ..exceptions import ConflictError, EntityNotFoundError, ValidationError
from ..models.objectives import (
    EntityType,
    ObjectiveAssociation,
    ObjectivePriority,
    TrainingObjective,
)
from ..models.periodization import new_id


OBJECTIVE = "objective"
ASSOCIATION = "objective_association"

# entity type -> (record store type, parent id column, parent entity type)
_HIERARCHY: Dict[EntityType, Tuple[str, Optional[str], Optional[EntityType]]] = {
    EntityType.SESSION: ("session", "microcycle_id", EntityType.MICROCYCLE),
    EntityType.MICROCYCLE: ("microcycle", "mesocycle_id", EntityType.MESOCYCLE),
    EntityType.MESOCYCLE: ("mesocycle", "program_id", EntityType.PROGRAM),
    EntityType.PROGRAM: ("program", None, None),
}


class ObjectiveService(BaseService):
    """Service for training objectives and their hierarchy associations."""

    def create_objective(
        self,
        user_id: str,
        description: str,
        metric: str,
        target_value: float,
    ) -> TrainingObjective:
        if not description or not str(description).strip():
            raise ValidationError("Objective description must not be empty", field="description")
        if not metric or not str(metric).strip():
            raise ValidationError("Objective metric must not be empty", field="metric")

        objective = TrainingObjective(
            id=new_id("obj"),
            user_id=user_id,
            description=description,
            metric=metric,
            target_value=target_value,
            created_at=datetime.now(),
        )
        self._store.save(OBJECTIVE, objective.to_record())
        self.logger.info(f"Created objective {objective.id} for user {user_id}: {description}")
        return objective

    def get_objective(self, objective_id: str) -> TrainingObjective:
        record = self._store.load(OBJECTIVE, objective_id)
        if record is None:
            raise EntityNotFoundError("TrainingObjective", objective_id)
        return TrainingObjective.from_record(record)

    def list_objectives(self, user_id: str) -> List[TrainingObjective]:
        records = self._store.query(OBJECTIVE, order_by="created_at", user_id=user_id)
        return [TrainingObjective.from_record(r) for r in records]

    def resolve_entity(self, entity_type: Any, entity_id: str) -> Dict[str, Any]:
        """
        Load the hierarchy node an association would point at.

        Raises:
            UnknownEntityTypeError: If entity_type is not a hierarchy level
            EntityNotFoundError: If no node of that type has the id
        """
        kind = EntityType.parse(entity_type)
        store_type, _, _ = _HIERARCHY[kind]
        return self._require(store_type, entity_id)

    def associate(
        self,
        objective_id: str,
        entity_type: Any,
        entity_id: str,
        priority: Any = ObjectivePriority.MEDIUM,
        expected_progress: Optional[float] = None,
    ) -> ObjectiveAssociation:
        """
        Attach an objective to a hierarchy node.

        Associating the same (objective, entity) twice returns the existing
        association unchanged.

        Raises:
            UnknownEntityTypeError: If entity_type is not a hierarchy level
            EntityNotFoundError: If the objective or the entity does not exist
        """
        kind = EntityType.parse(entity_type)
        level = ObjectivePriority.parse(priority)

        with self._store.transaction():
            self.get_objective(objective_id)
            self.resolve_entity(kind, entity_id)

            existing = self._find_association(objective_id, kind, entity_id)
            if existing is not None:
                return existing

            association = ObjectiveAssociation(
                id=new_id("assoc"),
                objective_id=objective_id,
                entity_type=kind,
                entity_id=entity_id,
                priority=level,
                expected_progress=expected_progress,
            )
            try:
                self._store.save(ASSOCIATION, association.to_record())
            except ConflictError:
                self.logger.warning(
                    f"Association {objective_id} -> {kind.value} {entity_id} already stored"
                )
                found = self._find_association(objective_id, kind, entity_id)
                if found is None:
                    raise
                return found

        self.logger.info(f"Associated objective {objective_id} with {kind.value} {entity_id}")
        return association

    def dissociate(self, objective_id: str, entity_type: Any, entity_id: str) -> bool:
        """Remove an association. Returns False if there was none."""
        kind = EntityType.parse(entity_type)
        existing = self._find_association(objective_id, kind, entity_id)
        if existing is None:
            return False
        removed = self._store.delete(ASSOCIATION, existing.id)
        if removed:
            self.logger.info(f"Dissociated objective {objective_id} from {kind.value} {entity_id}")
        return removed

    def list_associations(self, entity_type: Any, entity_id: str) -> List[ObjectiveAssociation]:
        """Associations attached directly to one node."""
        kind = EntityType.parse(entity_type)
        records = self._store.query(ASSOCIATION, entity_type=kind.value, entity_id=entity_id)
        return [ObjectiveAssociation.from_record(r) for r in records]

    def resolve_effective_objectives(self, session_id: str) -> List[TrainingObjective]:
        """
        Objectives in force for a session.

        Collects associations on the session, then its microcycle, mesocycle
        and program. Each objective appears once, in order of first
        appearance from the session outward.

        Raises:
            EntityNotFoundError: If the session does not exist
        """
        ordered_ids: List[str] = []
        seen = set()

        with self._store.transaction(write=False):
            kind: Optional[EntityType] = EntityType.SESSION
            node_id: Optional[str] = session_id
            while kind is not None and node_id is not None:
                record = self.resolve_entity(kind, node_id)
                for association in self.list_associations(kind, node_id):
                    if association.objective_id not in seen:
                        seen.add(association.objective_id)
                        ordered_ids.append(association.objective_id)
                _, parent_column, parent_kind = _HIERARCHY[kind]
                node_id = record.get(parent_column) if parent_column else None
                kind = parent_kind

            records = self._store.query(OBJECTIVE, id=ordered_ids)

        by_id = {r["id"]: TrainingObjective.from_record(r) for r in records}
        return [by_id[oid] for oid in ordered_ids if oid in by_id]

    def _find_association(
        self,
        objective_id: str,
        kind: EntityType,
        entity_id: str,
    ) -> Optional[ObjectiveAssociation]:
        records = self._store.query(
            ASSOCIATION, objective_id=objective_id, entity_type=kind.value, entity_id=entity_id
        )
        return ObjectiveAssociation.from_record(records[0]) if records else None
