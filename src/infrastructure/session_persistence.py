"""Persistence adapter that stores pydantic documents in a key-value store."""

import logging
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..domain.interfaces.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class SessionPersistence:
    """
    Saves and loads whole documents under fixed keys.

    Storage and serialization failures are logged and swallowed: ``save``
    reports success as a boolean and ``load`` returns None, so the in-memory
    state stays authoritative when the backend misbehaves. Failed writes are
    not retried.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def save(self, key: str, value: BaseModel) -> bool:
        """Serialize ``value`` to JSON and write it under ``key``.

        Returns:
            bool: True if the document was written.
        """
        try:
            document = value.model_dump_json()
            self.store.put(key, document)
        except Exception as e:
            logger.error(f"Error saving '{key}' to storage: {e}", exc_info=True)
            return False
        logger.debug(f"Saved '{key}' ({len(document)} bytes)")
        return True

    def load(self, key: str, model: Type[ModelT]) -> Optional[ModelT]:
        """Read the document under ``key`` and parse it as ``model``.

        Returns:
            The parsed document, or None if the key is absent or the stored
            document cannot be read or parsed.
        """
        try:
            document = self.store.get(key)
        except Exception as e:
            logger.error(f"Error reading '{key}' from storage: {e}", exc_info=True)
            return None

        if document is None:
            return None

        try:
            return model.model_validate_json(document)
        except ValidationError as e:
            logger.error(f"Discarding unreadable '{key}' document: {e}")
            return None
