"""In-process key/value store partitioned by owner."""

import copy
import threading
from typing import Any, Dict, List, Optional


def _validate_key(key: Any) -> None:
    if not isinstance(key, str) or not key:
        raise TypeError(f"key must be a non-empty string, got {key!r}")


def _is_lookup_key(key: Any) -> bool:
    # An empty string can never be stored, so reading it is a plain miss
    if key == "":
        return False
    _validate_key(key)
    return True


class MemoryDB:
    """
    Two-level map of owner -> id -> value.

    All operations take one lock, so concurrent requests touching the same
    key see last-writer-wins.
    """

    def __init__(self) -> None:
        self._db: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def put(self, owner_id: str, item_id: str, value: Any) -> None:
        _validate_key(owner_id)
        _validate_key(item_id)
        with self._lock:
            self._db.setdefault(owner_id, {})[item_id] = value

    def get(self, owner_id: str, item_id: str) -> Optional[Any]:
        if not (_is_lookup_key(owner_id) and _is_lookup_key(item_id)):
            return None
        with self._lock:
            value = self._db.get(owner_id, {}).get(item_id)
        return copy.copy(value)

    def query(self, owner_id: str) -> List[Any]:
        if not _is_lookup_key(owner_id):
            return []
        with self._lock:
            return [copy.copy(value) for value in self._db.get(owner_id, {}).values()]

    def delete(self, owner_id: str, item_id: str) -> None:
        if not (_is_lookup_key(owner_id) and _is_lookup_key(item_id)):
            return
        with self._lock:
            partition = self._db.get(owner_id)
            if partition is None:
                return
            partition.pop(item_id, None)
            if not partition:
                del self._db[owner_id]
