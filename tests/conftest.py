from __future__ import annotations

import pytest
from loguru import logger

from task_board import MemoryStore, TaskStore


@pytest.fixture
def storage() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def store(storage: MemoryStore) -> TaskStore:
    task_store = TaskStore(storage)
    task_store.load()
    return task_store


@pytest.fixture
def log_messages():
    """Collect loguru records emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)
