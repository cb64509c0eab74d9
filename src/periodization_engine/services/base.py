"""
Base service class.

Defines the shared plumbing for all services.
"""

from abc import ABC
from typing import Any, Dict, Optional
import logging

from ..db.repositories.base import RecordStore
from ..exceptions import EntityNotFoundError


class BaseService(ABC):
    """
    Abstract base class for all services.

    Provides common functionality:
    - Logging setup
    - Record store access
    - Not-found handling for record lookups
    """

    def __init__(
        self,
        store: RecordStore,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    @property
    def store(self) -> RecordStore:
        """Get the record store."""
        return self._store

    def _require(self, entity_type: str, entity_id: str) -> Dict[str, Any]:
        """
        Load a record or raise EntityNotFoundError.

        Args:
            entity_type: Record store entity type
            entity_id: Record identifier

        Returns:
            The stored record
        """
        record = self._store.load(entity_type, entity_id)
        if record is None:
            raise EntityNotFoundError(entity_type, entity_id)
        return record
