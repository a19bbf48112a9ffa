"""Abstract base class for permanent storage backends.

The history store and source registry never reach for a process-wide option
table; they receive one of these backends in their constructor and address
data by category and key.
"""

from abc import ABC, abstractmethod
from typing import Any


class PermanentStorage(ABC):
    """Abstract key-value storage organized by categories.

    Values must be JSON-compatible (dicts, lists, strings, numbers, booleans,
    None). Implementations replace a key's value as a whole on save.
    """

    @abstractmethod
    def save(self, key: str, data: Any, category: str) -> None:
        """Save data, replacing any previous value under the key.

        Args:
            key: Unique identifier for the data within the category.
            data: JSON-compatible data to store.
            category: Category/namespace for organizing data.
        """
        ...

    @abstractmethod
    def load(self, key: str, category: str) -> Any | None:
        """Load data.

        Args:
            key: Unique identifier for the data.
            category: Category/namespace to look in.

        Returns:
            Stored data if found, None otherwise.
        """
        ...

    @abstractmethod
    def delete(self, key: str, category: str) -> bool:
        """Delete data.

        Args:
            key: Unique identifier for the data.
            category: Category/namespace to look in.

        Returns:
            True if data was deleted, False if not found.
        """
        ...

    @abstractmethod
    def exists(self, key: str, category: str) -> bool:
        """Check if data exists under the key."""
        ...

    @abstractmethod
    def list_keys(self, category: str) -> list[str]:
        """List all keys in a category, sorted."""
        ...
