"""
Key-Value Store

String-valued key-value storage for the persisted application state. Values
are opaque text (the résumé blob is stored as serialized JSON), so a value read
back is byte-identical to the value written.

JsonFileStore keeps every key in one JSON file and replaces the whole file on
each write (temp file + move), so readers never observe a partial update.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol

from dotenv import load_dotenv

from resumex.contexts.storage.exceptions import StorageError

load_dotenv()
DATA_PATH = Path(os.getenv("RESUMEX_DATA_PATH", "outs/data/storage.json"))


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove_many(self, keys: Iterable[str]) -> None:
        ...


class MemoryStore:
    """In-process store, used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Store values must be strings, got {type(value).__name__}")
        self._data[key] = value

    def remove_many(self, keys: Iterable[str]) -> None:
        for key in list(keys):
            self._data.pop(key, None)


class JsonFileStore:
    """
    File-backed store: one JSON object mapping keys to string values.

    Every mutation rewrites the full file atomically. A missing file reads as
    an empty store.

    Example:
        store = JsonFileStore(Path("outs/data/storage.json"))
        store.set("hasOnboarded", "true")
        store.get("hasOnboarded")  # "true"
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else DATA_PATH

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError("Failed to read store file", self.path, e) from e
        if not isinstance(data, dict):
            raise StorageError("Store file does not contain a JSON object", self.path)
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file first (atomic write pattern)
        temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=str(self.path.parent), text=True)
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)

            # Only overwrite original if write succeeded
            shutil.move(temp_path, self.path)
        except Exception as e:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise StorageError("Failed to write store file", self.path, e) from e

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Store values must be strings, got {type(value).__name__}")
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove_many(self, keys: Iterable[str]) -> None:
        """Remove several keys in one file replace (all or none)."""
        doomed = set(keys)
        data = self._read_all()
        remaining = {key: value for key, value in data.items() if key not in doomed}
        if len(remaining) != len(data):
            self._write_all(remaining)
