"""Local file system implementation of KeyValueStore."""

import os
import tempfile
from pathlib import Path
from typing import Optional

from ..domain.interfaces.key_value_store import KeyValueStore


class FileKeyValueStore(KeyValueStore):
    """File system implementation of the KeyValueStore protocol.

    Each key is stored as ``<key>.json`` inside ``base_path``. Writes go
    through a temporary file and an atomic rename so a crash never leaves a
    half-written document behind.
    """

    def __init__(self, base_path: str = ".therapy_sessions"):
        """Initialize the store.

        Args:
            base_path: Directory holding the stored documents. Created on
                first write if it does not exist.
        """
        self._base_path = Path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base_path

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._base_path / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def put(self, key: str, value: str) -> None:
        path = self._path_for(key)
        self._base_path.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self._base_path, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
