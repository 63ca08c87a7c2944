"""Simple demo of the task board served from a scratch directory."""

import tempfile
import time

from loguru import logger

from task_board import FileStore, TaskStore
from task_board.server import start_server
from task_board.utils.logging import setup_logger


def main():
    """Seed a few tasks and serve them until interrupted."""
    setup_logger(level="DEBUG", use_rich=True)

    storage_dir = tempfile.mkdtemp(prefix="task-board-")
    store = TaskStore(FileStore(storage_dir))
    store.load()

    for title in ("Buy milk", "Walk dog", "Water plants"):
        store.add(title)
    store.delete(1)

    logger.info(f"Tasks persisted under {storage_dir}")
    server = start_server(store, host="127.0.0.1", port=8765)
    logger.success(f"Task board is now available at http://{server.host}:{server.port}")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()
