"""Task records and their JSON shape."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class Task:
    """A single entry on the board."""

    id: int
    title: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert task to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        """
        Build a task from a decoded JSON record.

        Raises:
            ValueError: If ``id`` is not an integer or ``title`` is not a string
        """
        task_id = raw.get("id")
        # bool is an int subclass but never a valid id
        if not isinstance(task_id, int) or isinstance(task_id, bool):
            raise ValueError(f"Task id must be an integer, got {task_id!r}")
        title = raw.get("title")
        if not isinstance(title, str):
            raise ValueError(f"Task title must be a string, got {title!r}")
        description = raw.get("description", "")
        if not isinstance(description, str):
            raise ValueError(
                f"Task description must be a string, got {description!r}"
            )
        return cls(id=task_id, title=title, description=description)


@dataclass(slots=True, frozen=True)
class AddResult:
    """Outcome of a successful add: the new task and the updated list."""

    task: Task
    tasks: tuple[Task, ...]
