"""FastAPI server for the task board with WebSocket support."""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import Any

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse, HTMLResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from pydantic import BaseModel

from .models import Task
from .store import TaskStore

STATIC_DIR = Path(__file__).parent / "static"
PING_INTERVAL = 30.0


class NewTask(BaseModel):
    """Request body for adding a task."""

    title: str


def snapshot(tasks: tuple[Task, ...], next_id: int) -> dict[str, Any]:
    """Render a task list as the JSON payload sent to clients."""
    return {"tasks": [task.to_dict() for task in tasks], "next_id": next_id}


class TaskBoardServer:
    """FastAPI front end for a task store."""

    def __init__(self, store: TaskStore, host: str = "127.0.0.1", port: int = 8765):
        """
        Initialize the task board server.

        Args:
            store: Task store backing every request
            host: Host to bind to
            port: Port to bind to
        """
        self.host = host
        self.port = port
        self.store = store
        self.app = FastAPI(title="Task Board", version="0.1.0")
        self.active_connections: list[WebSocket] = []
        self._setup_routes()
        self._server_thread: threading.Thread | None = None

    def _setup_routes(self) -> None:
        """Setup FastAPI routes."""
        if STATIC_DIR.exists():
            self.app.mount(
                "/static", StaticFiles(directory=str(STATIC_DIR)), name="static"
            )

        @self.app.get("/", response_model=None)
        async def root() -> FileResponse | HTMLResponse:
            """Serve the main HTML page."""
            index_file = STATIC_DIR / "index.html"
            if index_file.exists():
                return FileResponse(index_file)
            return HTMLResponse(content="<h1>Task Board</h1><p>No UI available</p>")

        @self.app.get("/api/tasks")
        async def list_tasks() -> dict[str, Any]:
            """Get all tasks."""
            return snapshot(self.store.tasks, self.store.next_id)

        @self.app.post("/api/tasks", status_code=201)
        async def add_task(body: NewTask) -> dict[str, Any]:
            """Add a task and return it with the updated list."""
            result = self.store.add(body.title)
            payload = snapshot(result.tasks, self.store.next_id)
            await self._broadcast(payload)
            return {"task": result.task.to_dict(), **payload}

        @self.app.delete("/api/tasks/{task_id}")
        async def delete_task(task_id: int) -> dict[str, Any]:
            """Delete a task; unknown ids leave the list unchanged."""
            tasks = self.store.delete(task_id)
            payload = snapshot(tasks, self.store.next_id)
            await self._broadcast(payload)
            return payload

        @self.app.websocket("/ws")
        async def websocket_endpoint(websocket: WebSocket) -> None:
            """WebSocket endpoint for real-time updates."""
            await websocket.accept()
            self.active_connections.append(websocket)

            try:
                await websocket.send_json(
                    snapshot(self.store.tasks, self.store.next_id)
                )
                while True:
                    try:
                        await asyncio.wait_for(
                            websocket.receive_text(), timeout=PING_INTERVAL
                        )
                    except TimeoutError:
                        await websocket.send_json({"type": "ping"})
            except WebSocketDisconnect:
                logger.debug("WebSocket client disconnected")
            finally:
                if websocket in self.active_connections:
                    self.active_connections.remove(websocket)

    async def _broadcast(self, payload: dict[str, Any]) -> None:
        """Send a snapshot to all connected clients."""
        disconnected = []

        for connection in list(self.active_connections):
            try:
                await connection.send_json(payload)
            except (WebSocketDisconnect, RuntimeError) as exc:
                logger.debug(f"Dropping WebSocket client: {exc}")
                disconnected.append(connection)

        for connection in disconnected:
            if connection in self.active_connections:
                self.active_connections.remove(connection)

    def run(self) -> None:
        """Serve in the current thread until interrupted."""
        import uvicorn

        logger.info(f"Task board available at http://{self.host}:{self.port}")
        uvicorn.run(self.app, host=self.host, port=self.port, log_level="warning")

    def start_background(self) -> None:
        """Start the server in a background thread."""
        if self._server_thread and self._server_thread.is_alive():
            return

        self._server_thread = threading.Thread(target=self.run, daemon=True)
        self._server_thread.start()


def create_app(store: TaskStore) -> FastAPI:
    """Build the FastAPI application for ``store``."""
    return TaskBoardServer(store).app


def start_server(
    store: TaskStore, host: str = "127.0.0.1", port: int = 8765
) -> TaskBoardServer:
    """
    Start the task board server in a background thread.

    Args:
        store: Task store backing the server
        host: Host to bind to
        port: Port to bind to

    Returns:
        The server instance
    """
    server = TaskBoardServer(store, host=host, port=port)
    server.start_background()
    return server
