"""Session state for the task board."""

from __future__ import annotations

from loguru import logger

from .models import AddResult, Task
from .storage import DEFAULT_KEY, PersistentStore, encode_tasks, parse_tasks_or_default


class TaskStore:
    """
    Owns the task list and id counter for one session.

    Every mutation writes the full list to the persistent store before the
    new state is committed, and returns the new snapshot for the caller to
    render.
    """

    def __init__(self, storage: PersistentStore, key: str = DEFAULT_KEY) -> None:
        """
        Initialize the task store.

        Args:
            storage: Backend the task list is mirrored to
            key: Storage key holding the serialized list
        """
        self.storage = storage
        self.key = key
        self._tasks: tuple[Task, ...] = ()
        self._next_id = 1
        self._loaded = False

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Current snapshot of the task list."""
        self._ensure_loaded()
        return self._tasks

    @property
    def next_id(self) -> int:
        """Id the next added task will receive."""
        self._ensure_loaded()
        return self._next_id

    def load(self) -> tuple[Task, ...]:
        """
        Read the persisted list and reset the counter.

        Missing or malformed data yields an empty list. Storage is not written.

        Returns:
            The loaded snapshot
        """
        tasks = parse_tasks_or_default(self.storage.get(self.key))
        self._tasks = tuple(tasks)
        self._next_id = max((task.id for task in tasks), default=0) + 1
        self._loaded = True
        logger.info(f"Loaded {len(self._tasks)} tasks, next id {self._next_id}")
        return self._tasks

    def add(self, title: str) -> AddResult:
        """
        Append a task with the next id.

        Args:
            title: Task title, stored verbatim

        Returns:
            The created task and the updated snapshot
        """
        self._ensure_loaded()
        logger.debug(f"Before add: {self._serialize(self._tasks)}")
        if not title.strip():
            logger.warning(f"Adding task {self._next_id} with an empty title")

        task = Task(id=self._next_id, title=title)
        updated = (*self._tasks, task)
        self._commit(updated)
        self._next_id += 1

        logger.debug(f"After add: {self._serialize(updated)}")
        return AddResult(task=task, tasks=updated)

    def delete(self, task_id: int) -> tuple[Task, ...]:
        """
        Remove the task with ``task_id``; unknown ids leave the list as is.

        Returns:
            The updated snapshot
        """
        self._ensure_loaded()
        # Persisted lists may carry duplicate ids; every match is removed.
        updated = tuple(task for task in self._tasks if task.id != task_id)
        if len(updated) == len(self._tasks):
            logger.debug(f"Delete of unknown task id {task_id} ignored")
        else:
            logger.info(f"Deleted task {task_id}")
        self._commit(updated)
        return updated

    def get(self, task_id: int) -> Task | None:
        """Get a specific task by id."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def _commit(self, tasks: tuple[Task, ...]) -> None:
        # Write first: a failing backend leaves memory matching storage.
        self.storage.set(self.key, encode_tasks(tasks))
        self._tasks = tasks

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    @staticmethod
    def _serialize(tasks: tuple[Task, ...]) -> list[dict]:
        return [task.to_dict() for task in tasks]
