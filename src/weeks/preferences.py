"""Key/value preferences persisted as a JSON file."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .errors import StorageError

logger = logging.getLogger(__name__)

BIRTHDAY_KEY = "userBirthday"


class PreferenceStore:
    """Small durable key/value store.

    Values are loaded once when the store is created. Changes stay in memory
    until ``save()`` is called.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store and load any existing file.

        Args:
            path: Path to the JSON file.
        """
        self.path = path
        self._data: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        """Read the file, falling back to an empty store."""
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Starting empty.", self.path, e)
            return {}
        except OSError as e:
            logger.warning("Cannot read %s: %s. Starting empty.", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Unexpected content in %s. Starting empty.", self.path)
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value, or default when the key is missing."""
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a value (not persisted until save)."""
        self._data[key] = value

    def remove(self, key: str) -> None:
        """Remove a key if present."""
        self._data.pop(key, None)

    def save(self) -> None:
        """Write all values to disk.

        Raises:
            StorageError: If the file cannot be written.
        """
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to save preferences to %s: %s", self.path, e)
            raise StorageError(f"Cannot write {self.path}: {e}") from e
