"""Single-page task board with persistent storage."""

from .models import AddResult, Task
from .storage import FileStore, MemoryStore, PersistentStore
from .store import TaskStore

__all__ = [
    "AddResult",
    "FileStore",
    "MemoryStore",
    "PersistentStore",
    "Task",
    "TaskStore",
]
