"""Application wiring: builds the session controller from settings."""

import logging
from typing import Optional

from .config import Settings
from .controller import SessionController
from ..domain.interfaces.key_value_store import KeyValueStore
from ..infrastructure.asyncio_tick_clock import AsyncioTickClock
from ..infrastructure.dynamodb_key_value_store import DynamoDBKeyValueStore
from ..infrastructure.file_key_value_store import FileKeyValueStore
from ..infrastructure.local_key_value_store import LocalKeyValueStore
from ..infrastructure.session_persistence import SessionPersistence
from ..infrastructure.uuid_id_generator import UuidIdGenerator

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected by ``settings.storage_backend``."""
    if settings.storage_backend == "dynamodb":
        return DynamoDBKeyValueStore(
            table_name=settings.sessions_table_name,
            region_name=settings.aws_region,
        )
    if settings.storage_backend == "local":
        return LocalKeyValueStore()
    return FileKeyValueStore(base_path=settings.storage_dir)


def build_session_controller(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
) -> SessionController:
    """
    Build the session controller and its collaborators.

    Call once at startup, from inside a running event loop, and pass the
    controller to whatever needs it. Call ``close()`` on shutdown.

    Args:
        settings: Application settings; read from the environment if omitted
        store: Storage backend overriding the one named in settings

    Returns:
        SessionController: The controller, with any in-progress session resumed.
    """
    settings = settings or Settings()
    store = store or build_store(settings)

    controller = SessionController(
        persistence=SessionPersistence(store),
        clock=AsyncioTickClock(tick_interval=settings.tick_interval),
        id_generator=UuidIdGenerator(),
        storage_key=settings.session_storage_key,
        default_duration=settings.default_session_duration,
    )
    logger.info(
        f"{settings.app_name} {settings.app_version} ready "
        f"(storage backend: {type(store).__name__})"
    )
    return controller
