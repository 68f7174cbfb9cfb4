"""
Local storage infrastructure for portfolio.

The page's ``localStorage``: string keys to string values, kept in a JSON
file with atomic writes (write to temp, then rename). Read and write
failures raise StorageError; callers decide how to degrade.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional
import logging

from ..errors import StorageError

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    String key/value persistence backed by a JSON file.

    Example:
        storage = LocalStorage(Path("~/.portfolio/storage.json"))
        storage.set_item("portfolio-theme", "dark")
        storage.get_item("portfolio-theme")  # "dark"
    """

    def __init__(self, path):
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Could not read {self.path}: not a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp"
            )
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write('\n')
            os.replace(temp_path, self.path)
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        """Value for key, or None when absent."""
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = str(value)
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def clear(self) -> None:
        self._write({})

    def __len__(self) -> int:
        return len(self._read())

    def __contains__(self, key: str) -> bool:
        return key in self._read()


class MemoryStorage:
    """In-memory storage with the LocalStorage interface (one page lifetime)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data
