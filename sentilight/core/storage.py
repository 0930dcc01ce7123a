"""
Settings storage for SentiLight.

Small key-value store persisted as one JSON file per namespace, so
settings survive restarts. Values are stored as strings; callers encode
their own payloads (the device registry stores a JSON-encoded list).
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional


def _get_default_storage_dir():
    """Get the default storage directory path."""
    # Default to ~/.sentilight/storage/
    home = Path.home()
    storage_dir = home / ".sentilight" / "storage"
    storage_dir.mkdir(parents=True, exist_ok=True)
    return storage_dir


_storage_dir: Optional[Path] = None


def set_settings_storage_dir(storage_dir: str):
    """Set the directory used by stores created without an explicit path."""
    global _storage_dir
    _storage_dir = Path(storage_dir)


class SettingsStore:
    """JSON-file backed string settings for one namespace."""

    # One lock per file so stores opened twice on the same path still serialize.
    _locks: Dict[str, threading.Lock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, namespace: str, storage_dir: str = None):
        """
        Initialize settings store.

        Args:
            namespace: Settings namespace, used as the file name
            storage_dir: Directory for storage. Defaults to ~/.sentilight/storage/
        """
        if storage_dir:
            storage_path = Path(storage_dir)
        elif _storage_dir is not None:
            storage_path = _storage_dir
        else:
            storage_path = _get_default_storage_dir()
        storage_path.mkdir(parents=True, exist_ok=True)

        self.namespace = namespace
        self.filepath = str(storage_path / f"{namespace}.json")

        with SettingsStore._locks_guard:
            self._lock = SettingsStore._locks.setdefault(self.filepath, threading.Lock())

    def _read_all(self) -> Dict[str, str]:
        """Read the whole namespace; unreadable files read as empty."""
        if not os.path.exists(self.filepath):
            return {}
        try:
            with open(self.filepath, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            print(f"[storage] Error reading {self.filepath}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, str]):
        """Write the namespace atomically (temp file + rename)."""
        directory = os.path.dirname(self.filepath)
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.namespace}-", dir=directory)
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.filepath)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a stored value, or default when the key is absent."""
        with self._lock:
            return self._read_all().get(key, default)

    def contains(self, key: str) -> bool:
        """Check whether a key has ever been written."""
        with self._lock:
            return key in self._read_all()

    def put(self, key: str, value: str) -> None:
        """Store a value unconditionally."""
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def compare_and_set(self, key: str, expected: Optional[str], value: str) -> bool:
        """
        Store value only if the current value still equals expected.

        Args:
            key: Settings key
            expected: Value the caller read earlier (None = key absent)
            value: New value to store

        Returns:
            True if stored, False if another writer got there first
        """
        with self._lock:
            data = self._read_all()
            if data.get(key) != expected:
                return False
            data[key] = value
            self._write_all(data)
            return True
