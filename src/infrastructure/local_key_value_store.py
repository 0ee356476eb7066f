"""Local in-memory implementation of KeyValueStore."""

from typing import Dict, Optional

from ..domain.interfaces.key_value_store import KeyValueStore


class LocalKeyValueStore(KeyValueStore):
    """Local in-memory implementation of the KeyValueStore protocol.

    Stores blobs in a dictionary for testing and development purposes.
    Nothing survives the process.
    """

    def __init__(self):
        """Initialize the store with an empty dictionary."""
        self._items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def put(self, key: str, value: str) -> None:
        self._items[key] = value

    def clear(self) -> None:
        """Clear all stored blobs."""
        self._items.clear()

    def get_all_items(self) -> Dict[str, str]:
        """Get a copy of all stored blobs.

        Returns:
            Dict[str, str]: Dictionary of all stored blobs keyed by name.
        """
        return self._items.copy()
