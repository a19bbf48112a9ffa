"""In-process storage backend."""

import copy
import logging
import threading
from typing import Any

from quality_tracker.storage.permanent_storage.base import PermanentStorage

logger = logging.getLogger(__name__)


class MemoryStorage(PermanentStorage):
    """Dictionary-backed storage.

    Values are deep-copied on save and load so callers never share mutable
    state with the store.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def save(self, key: str, data: Any, category: str) -> None:
        with self._lock:
            self._data.setdefault(category, {})[key] = copy.deepcopy(data)
        logger.debug(f"Saved {key} in category={category}")

    def load(self, key: str, category: str) -> Any | None:
        with self._lock:
            value = self._data.get(category, {}).get(key)
        return copy.deepcopy(value)

    def delete(self, key: str, category: str) -> bool:
        with self._lock:
            bucket = self._data.get(category, {})
            if key in bucket:
                del bucket[key]
                logger.debug(f"Deleted {key} from category={category}")
                return True
        return False

    def exists(self, key: str, category: str) -> bool:
        with self._lock:
            return key in self._data.get(category, {})

    def list_keys(self, category: str) -> list[str]:
        with self._lock:
            return sorted(self._data.get(category, {}))
