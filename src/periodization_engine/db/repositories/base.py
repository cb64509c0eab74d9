"""Base record store interface.

The domain services consume storage only through this narrow interface of
plain dict records, so the periodization logic stays independent of the
backend.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Dict, List, Optional


class RecordStore(ABC):
    """
    Abstract record store keyed by entity type and id.

    Entity types: volume_landmark, volume_log, program, mesocycle,
    microcycle, session, objective, objective_association, template.
    """

    @abstractmethod
    def load(self, entity_type: str, entity_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve a record by its ID.

        Args:
            entity_type: The kind of record
            entity_id: The unique identifier of the record

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    def save(self, entity_type: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert or update a record by its ``id``.

        Uniqueness constraints other than the id (e.g. a mesocycle position
        within a program) are enforced and raise ConflictError.

        Args:
            entity_type: The kind of record
            record: The record to save

        Returns:
            The saved record
        """
        pass

    @abstractmethod
    def query(
        self,
        entity_type: str,
        /,
        order_by: Optional[str] = None,
        **filters: Any,
    ) -> List[Dict[str, Any]]:
        """
        Retrieve records matching equality filters.

        A list or tuple filter value matches any of its elements. The entity
        type is positional-only, so a column named ``entity_type`` can be
        filtered on too.

        Args:
            entity_type: The kind of record
            order_by: Optional column to sort by (ascending)
            **filters: Column equality filters

        Returns:
            List of matching records
        """
        pass

    @abstractmethod
    def delete(self, entity_type: str, entity_id: str) -> bool:
        """
        Delete a record by its ID.

        Returns:
            True if the record was deleted, False if not found
        """
        pass

    @abstractmethod
    def delete_cascade(self, program_id: str) -> bool:
        """
        Delete a program and every descendant atomically.

        Returns:
            True if the program existed and was deleted, False if not found
        """
        pass

    @abstractmethod
    def transaction(self, write: bool = True) -> AbstractContextManager:
        """
        Group several operations into one all-or-nothing unit.

        Nested calls join the outer transaction. Pass ``write=False`` for a
        read-only snapshot.
        """
        pass
