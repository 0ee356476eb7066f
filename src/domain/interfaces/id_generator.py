"""Identifier generator interface."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class IdGenerator(Protocol):
    """Protocol for producing opaque record identifiers."""

    def generate_id(self) -> str:
        """Return a new identifier, unique within the local session store."""
        ...
