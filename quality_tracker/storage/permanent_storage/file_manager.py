"""File-based storage layer for sources and scan history.

Directory structure:
    data/
    ├── settings/sources.json      # Configured report sources
    ├── settings/last_meta.json    # Most recent successful fetch
    └── history/{source_id}.json   # Last 10 scans per source
"""

import json
import logging
import os
import re
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from quality_tracker.consts import DEFAULT_DATA_DIR
from quality_tracker.storage.permanent_storage.base import PermanentStorage

logger = logging.getLogger(__name__)

_SAFE_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


class FileManager(PermanentStorage):
    """JSON-file storage, one file per key.

    Each file wraps the value with metadata (key, category, saved_at). Writes
    go to a temporary file that is then renamed over the target, so readers
    see either the old or the new value, never a partial one.
    """

    def __init__(self, data_dir: Path | str = DEFAULT_DATA_DIR):
        """Initialize FileManager with data directory.

        Args:
            data_dir: Root directory for all data files.
        """
        self.data_dir = Path(data_dir)

    def _ensure_dirs(self, *dirs: Path) -> None:
        """Create directories if they don't exist."""
        for d in dirs:
            d.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str, category: str) -> Path:
        """Get the file path for a key, rejecting names that could escape data_dir."""
        for name in (key, category):
            if not _SAFE_NAME.match(name):
                raise ValueError(f"Invalid storage name: {name!r}")
        return self.data_dir / category / f"{key}.json"

    def save(self, key: str, data: Any, category: str) -> None:
        """Save data, atomically replacing any previous value.

        Args:
            key: Unique identifier for the data within the category.
            data: Data to store (must be JSON-serializable).
            category: Category/namespace for organizing data.
        """
        path = self._path(key, category)
        self._ensure_dirs(path.parent)

        content = {
            "key": key,
            "category": category,
            "saved_at": datetime.now(UTC).isoformat(),
            "data": data,
        }

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(content, f, indent=2, default=str)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Saved {key} in category={category}")

    def load(self, key: str, category: str) -> Any | None:
        """Load data.

        Args:
            key: Unique identifier for the data.
            category: Category/namespace to look in.

        Returns:
            Stored data if found and readable, None otherwise.
        """
        path = self._path(key, category)
        if not path.exists():
            return None

        try:
            content = json.loads(path.read_text(encoding="utf-8"))
            return content.get("data") if isinstance(content, dict) else None
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to load {key} from {category}: {e}")
            return None

    def delete(self, key: str, category: str) -> bool:
        """Delete data.

        Returns:
            True if data was deleted, False if not found.
        """
        path = self._path(key, category)
        if path.exists():
            path.unlink()
            logger.debug(f"Deleted {key} from category={category}")
            return True
        return False

    def exists(self, key: str, category: str) -> bool:
        return self._path(key, category).exists()

    def list_keys(self, category: str) -> list[str]:
        """List all keys in a category.

        Returns:
            Sorted list of keys in the category.
        """
        category_dir = self.data_dir / category
        if not category_dir.exists():
            return []

        return sorted(path.stem for path in category_dir.glob("*.json"))


def main() -> None:
    """Example usage of FileManager."""
    logging.basicConfig(level=logging.DEBUG)

    with tempfile.TemporaryDirectory() as tmpdir:
        storage = FileManager(data_dir=tmpdir)

        print("=== FileManager Example ===\n")

        print("1. Saving a value...")
        storage.save("sources", [{"id": "abc123", "name": "My Theme"}], "settings")
        print(f"   Keys in 'settings': {storage.list_keys('settings')}")

        print("\n2. Loading it back...")
        print(f"   {storage.load('sources', 'settings')}")

        print("\n3. Deleting...")
        print(f"   Deleted: {storage.delete('sources', 'settings')}")
        print(f"   Exists after delete: {storage.exists('sources', 'settings')}")


if __name__ == "__main__":
    main()
