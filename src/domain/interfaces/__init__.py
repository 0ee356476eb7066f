"""Domain interfaces for the therapy session tracker."""

from .elapsed_clock import ElapsedClock
from .id_generator import IdGenerator
from .key_value_store import KeyValueStore

__all__ = ["ElapsedClock", "IdGenerator", "KeyValueStore"]
