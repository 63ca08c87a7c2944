"""Tests for the task store."""

import json

import pytest

from task_board import FileStore, MemoryStore, Task, TaskStore
from task_board.storage import decode_tasks


def stored(storage: MemoryStore, key: str = "tasks") -> list[Task]:
    return decode_tasks(storage.get(key))


def test_empty_store_bootstrap():
    """Loading from an empty backend yields no tasks and next id 1."""
    store = TaskStore(MemoryStore())
    assert store.load() == ()
    assert store.next_id == 1


def test_load_does_not_write(storage):
    """Loading leaves the backend untouched."""
    TaskStore(storage).load()
    assert storage.get("tasks") is None


def test_add_assigns_sequential_ids(store):
    """Each add gets the counter value and appends to the end."""
    first = store.add("Buy milk")
    second = store.add("Walk dog")

    assert first.task == Task(id=1, title="Buy milk", description="")
    assert second.task == Task(id=2, title="Walk dog", description="")
    assert second.tasks == (first.task, second.task)
    assert store.next_id == 3


def test_ids_unique_and_monotonic_across_deletes(store):
    """Deleting never lets an id be handed out twice."""
    ids = []
    for i in range(5):
        ids.append(store.add(f"task {i}").task.id)
        if i % 2 == 0:
            store.delete(ids[-1])
    ids.append(store.add("last").task.id)

    assert len(set(ids)) == len(ids)
    assert ids == sorted(ids)
    assert ids[-1] == 6


def test_duplicate_titles_allowed(store):
    """Titles need not be unique, only ids."""
    store.add("same")
    store.add("same")
    assert [task.id for task in store.tasks] == [1, 2]


def test_empty_title_is_accepted(store, log_messages):
    """Blank titles are stored verbatim and flagged in the log."""
    result = store.add("   ")
    assert result.task.title == "   "
    assert any("empty title" in message for message in log_messages)


def test_delete_keeps_relative_order(store):
    """Delete removes one task and keeps the rest in order."""
    for title in ("a", "b", "c", "d"):
        store.add(title)

    tasks = store.delete(2)

    assert [task.title for task in tasks] == ["a", "c", "d"]
    assert store.tasks == tasks


def test_unknown_id_delete_is_noop(store):
    """Deleting an id that is not present leaves the list unchanged."""
    store.add("one")
    store.add("two")
    before = store.tasks

    assert store.delete(99) == before


def test_persisted_state_matches_memory(store, storage):
    """After every mutation the backend holds exactly the in-memory list."""
    store.add("a")
    assert stored(storage) == list(store.tasks)
    store.add("b")
    assert stored(storage) == list(store.tasks)
    store.delete(1)
    assert stored(storage) == list(store.tasks)
    store.delete(42)
    assert stored(storage) == list(store.tasks)


def test_reload_stability(storage):
    """A new session sees the same tasks and continues the counter."""
    store = TaskStore(storage)
    store.load()
    store.add("A")
    store.add("B")

    reloaded = TaskStore(storage)
    reloaded.load()

    assert reloaded.tasks == (Task(1, "A", ""), Task(2, "B", ""))
    assert reloaded.next_id == 3
    assert reloaded.add("C").task.id == 3


def test_end_to_end_scenario(store, storage):
    """Add two tasks, delete the first, check memory and storage."""
    store.add("Buy milk")
    store.add("Walk dog")
    tasks = store.delete(1)

    expected = [{"id": 2, "title": "Walk dog", "description": ""}]
    assert [task.to_dict() for task in tasks] == expected
    assert json.loads(storage.get("tasks")) == expected


def test_corrupt_storage_falls_back_to_empty(log_messages):
    """Malformed persisted bytes are treated as no tasks yet."""
    storage = MemoryStore({"tasks": b"{not json"})
    store = TaskStore(storage)

    assert store.load() == ()
    assert store.next_id == 1
    assert any("Ignoring unreadable task data" in m for m in log_messages)


def test_counter_follows_max_loaded_id():
    """The counter starts past the highest persisted id, not the count."""
    payload = json.dumps(
        [{"id": 7, "title": "x", "description": ""}, {"id": 3, "title": "y"}]
    ).encode()
    store = TaskStore(MemoryStore({"tasks": payload}))
    store.load()

    assert [task.id for task in store.tasks] == [7, 3]
    assert store.add("z").task.id == 8


def test_custom_key(storage):
    """The store reads and writes only its own key."""
    store = TaskStore(storage, key="work")
    store.add("report")

    assert storage.get("tasks") is None
    assert stored(storage, "work") == [Task(1, "report", "")]


def test_mutation_before_load_loads_first():
    """Mutating a fresh store picks up persisted tasks first."""
    storage = MemoryStore()
    seeded = TaskStore(storage)
    seeded.add("existing")

    store = TaskStore(storage)
    result = store.add("new")

    assert [task.id for task in result.tasks] == [1, 2]


def test_get_task(store):
    """Lookup by id returns the task or None."""
    task = store.add("find me").task
    assert store.get(task.id) == task
    assert store.get(123) is None


def test_snapshots_are_immutable(store):
    """Callers cannot modify the store through a snapshot."""
    result = store.add("frozen")
    with pytest.raises(AttributeError):
        result.task.title = "changed"
    assert isinstance(store.tasks, tuple)


class FailingStorage(MemoryStore):
    def set(self, key: str, value: bytes) -> None:
        raise OSError("disk full")


def test_write_failure_keeps_memory_unchanged():
    """A failed write propagates and leaves state as it was."""
    store = TaskStore(FailingStorage())
    store.load()

    with pytest.raises(OSError):
        store.add("lost")

    assert store.tasks == ()
    assert store.next_id == 1


def test_deeply_nested_storage_falls_back_to_empty():
    """Pathologically nested bytes load as an empty list instead of raising."""
    store = TaskStore(MemoryStore({"tasks": b"[" * 100000}))
    assert store.load() == ()
    assert store.next_id == 1


def test_unreadable_file_loads_empty(tmp_path):
    """A storage path that cannot be read starts the session empty."""
    (tmp_path / "tasks.json").mkdir()
    store = TaskStore(FileStore(tmp_path))
    assert store.load() == ()
    assert store.next_id == 1


def test_delete_removes_every_duplicate_id():
    """Duplicate ids from storage are kept on load and all removed together."""
    payload = json.dumps(
        [
            {"id": 1, "title": "a", "description": ""},
            {"id": 2, "title": "b", "description": ""},
            {"id": 1, "title": "c", "description": ""},
        ]
    ).encode()
    storage = MemoryStore({"tasks": payload})
    store = TaskStore(storage)

    assert len(store.load()) == 3
    assert store.next_id == 3
    assert store.delete(1) == (Task(2, "b", ""),)
    assert stored(storage) == [Task(2, "b", "")]
