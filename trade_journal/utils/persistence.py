"""
Key-value blob storage.

The journal stores its trade log and settings as two opaque JSON
strings under fixed keys.  Any object with `get(key)` and
`set(key, value)` methods can act as the storage backend; this module
provides an in-memory implementation and one backed by a JSON state
file on disk.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Protocol


class BlobStore(Protocol):
    """Storage collaborator used by the trading store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


def load_state(path: str) -> Optional[Dict[str, Any]]:
    """Load a JSON state file.

    Parameters
    ----------
    path : str
        Path to the JSON file.

    Returns
    -------
    dict or None
        The state dictionary if the file exists, otherwise `None`.
    """
    file_path = Path(path)
    if not file_path.exists():
        return None
    with file_path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def save_state(path: str, state: Dict[str, Any]) -> None:
    """Write a JSON state file to disk, creating parent directories."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8") as fh:
        json.dump(state, fh, ensure_ascii=False, indent=2, sort_keys=True)


class MemoryBlobStore:
    """Dictionary-backed blob store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileBlobStore:
    """Blob store keeping every key in a single JSON state file.

    The file is re-read on every `get` and rewritten on every `set`, so
    several processes using the same file see each other's last write.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def _read(self) -> Dict[str, Any]:
        state = load_state(self.path)
        if state is None:
            return {}
        if not isinstance(state, dict):
            raise ValueError(f"State file {self.path} does not contain a JSON object")
        return state

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        state = self._read()
        state[key] = value
        save_state(self.path, state)
