"""Infrastructure layer components."""

from .asyncio_tick_clock import AsyncioTickClock
from .dynamodb_key_value_store import DynamoDBKeyValueStore
from .file_key_value_store import FileKeyValueStore
from .local_key_value_store import LocalKeyValueStore
from .session_persistence import SessionPersistence
from .uuid_id_generator import UuidIdGenerator

__all__ = [
    "AsyncioTickClock",
    "DynamoDBKeyValueStore",
    "FileKeyValueStore",
    "LocalKeyValueStore",
    "SessionPersistence",
    "UuidIdGenerator",
]
