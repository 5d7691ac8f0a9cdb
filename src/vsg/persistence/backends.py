"""Key/value storage backends for persisted state."""

import copy
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..errors import StorageError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageBackend(ABC):
    """Durable key/value storage of plain (YAML/JSON compatible) values."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under ``key``, or None."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Forget ``key``; missing keys are ignored."""
        ...


class MemoryBackend(StorageBackend):
    """In-process storage, mostly for tests."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class YamlFileBackend(StorageBackend):
    """One YAML document per key inside a directory.

    Writes go to a temporary file that then replaces the target, so a crash
    never leaves a half-written document behind. Files are private to the
    owner because they may hold an API key.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.yaml"

    def get(self, key: str) -> Optional[Any]:
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    yaml.safe_dump(value, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
                os.chmod(tmp_name, 0o600)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Could not write {path}: {e}") from e
        logger.debug(f"Saved {key} to {path}")

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
