"""UUID-based implementation of IdGenerator."""

import uuid

from ..domain.interfaces.id_generator import IdGenerator


class UuidIdGenerator(IdGenerator):
    """Generates identifiers from random UUID4 values, as 32 hex characters."""

    def generate_id(self) -> str:
        return uuid.uuid4().hex
