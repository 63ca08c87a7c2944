"""Key-value byte storage backends and the task list codec."""

from __future__ import annotations

import json
import os
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import Final

from loguru import logger

from .errors import StorageKeyError
from .models import Task

DEFAULT_KEY: Final[str] = "tasks"
DEFAULT_STORAGE_DIR: Final[str] = ".task-board"
FILE_EXTENSION: Final[str] = ".json"
PART_EXTENSION: Final[str] = ".part"
KEY_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_.-]+$")


class PersistentStore(ABC):
    """Byte storage that outlives a session."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the value stored under ``key``, or None when absent."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Replace the value stored under ``key``."""
        raise NotImplementedError


class MemoryStore(PersistentStore):
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)


class FileStore(PersistentStore):
    """
    Store each key as ``<root>/<key>.json``.

    Writes go to a ``.part`` file next to the target and are renamed into
    place, so readers never see a half-written value.
    """

    def __init__(self, root: str | os.PathLike | None = None) -> None:
        if root is None:
            self.root = Path.cwd() / DEFAULT_STORAGE_DIR
        else:
            self.root = Path(root).expanduser().resolve()

    def path_for(self, key: str) -> Path:
        """Return the file backing ``key``."""
        if not KEY_PATTERN.match(key) or key in {".", ".."}:
            raise StorageKeyError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}{FILE_EXTENSION}"

    def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning(f"Cannot read {path}, treating it as empty: {exc}")
            return None

    def set(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        self.root.mkdir(parents=True, exist_ok=True)
        partial_path = path.parent / f"{path.name}{PART_EXTENSION}"
        partial_path.write_bytes(value)
        partial_path.replace(path)
        logger.debug(f"Wrote {len(value)} bytes to {path}")


def encode_tasks(tasks: Iterable[Task]) -> bytes:
    """Serialize tasks to the UTF-8 JSON array kept in storage."""
    payload = [task.to_dict() for task in tasks]
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_tasks(data: bytes) -> list[Task]:
    """
    Parse stored bytes into tasks.

    Raises:
        ValueError: If the bytes are not a JSON array of task records
    """
    # JSONDecodeError and UnicodeDecodeError are both ValueError subclasses
    try:
        raw = json.loads(data.decode("utf-8"))
    except RecursionError as exc:
        raise ValueError("Task data is nested too deeply") from exc
    if not isinstance(raw, list):
        raise ValueError(f"Expected a JSON array, got {type(raw).__name__}")
    tasks: list[Task] = []
    for record in raw:
        if not isinstance(record, dict):
            raise ValueError(f"Expected a task object, got {record!r}")
        tasks.append(Task.from_dict(record))
    return tasks


def parse_tasks_or_default(data: bytes | None) -> list[Task]:
    """Decode stored tasks, falling back to an empty list when unusable."""
    if not data:
        return []
    try:
        return decode_tasks(data)
    except ValueError as exc:
        logger.warning(f"Ignoring unreadable task data: {exc}")
        return []
