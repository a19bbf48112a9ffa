"""Storage backends for persisting sources and history.

This module provides:
- PermanentStorage: Abstract base class for key-value storage
- FileManager: JSON-file storage implementation
- MemoryStorage: In-process storage implementation
"""

from quality_tracker.storage.permanent_storage.base import PermanentStorage
from quality_tracker.storage.permanent_storage.file_manager import FileManager
from quality_tracker.storage.permanent_storage.memory_storage import MemoryStorage

__all__ = [
    "FileManager",
    "MemoryStorage",
    "PermanentStorage",
]
