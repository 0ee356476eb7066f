"""Key-value store interface."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for durable storage of named text blobs.

    Implementations store already-serialized documents; encoding and
    decoding happen in the persistence adapter.
    """

    def get(self, key: str) -> Optional[str]:
        """Read the blob stored under ``key``.

        Args:
            key: The storage key.

        Returns:
            Optional[str]: The stored text, or None if the key is absent.
        """
        ...

    def put(self, key: str, value: str) -> None:
        """Write ``value`` under ``key``, replacing any previous blob.

        Args:
            key: The storage key.
            value: Serialized document to store.
        """
        ...
