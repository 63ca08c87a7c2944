"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError
from .storage import DEFAULT_KEY, DEFAULT_STORAGE_DIR

ENV_PREFIX = "TASK_BOARD_"

FALSY = {"0", "false", "no", "off", ""}


def _truthy_env(value: str | None, default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in FALSY


@dataclass
class BoardConfig:
    """Settings shared by the CLI and the web server."""

    storage_dir: Path = field(default_factory=lambda: Path(DEFAULT_STORAGE_DIR))
    storage_key: str = DEFAULT_KEY
    host: str = "127.0.0.1"
    port: int = 8765
    log_level: str = "INFO"
    log_file: Path | None = None
    use_rich: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BoardConfig:
        """
        Build a config from ``TASK_BOARD_*`` variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Raises:
            ConfigError: If ``TASK_BOARD_PORT`` is not a valid port number
        """
        env = os.environ if environ is None else environ
        values = {
            name[len(ENV_PREFIX) :]: value
            for name, value in env.items()
            if name.startswith(ENV_PREFIX)
        }
        config = cls()

        if values.get("STORAGE_DIR"):
            config.storage_dir = Path(values["STORAGE_DIR"])
        if values.get("STORAGE_KEY"):
            config.storage_key = values["STORAGE_KEY"]
        if values.get("HOST"):
            config.host = values["HOST"]
        if "PORT" in values:
            config.port = parse_port(values["PORT"])
        if values.get("LOG_LEVEL"):
            config.log_level = values["LOG_LEVEL"].upper()
        if values.get("LOG_FILE"):
            config.log_file = Path(values["LOG_FILE"])
        config.use_rich = _truthy_env(values.get("RICH"), config.use_rich)
        return config


def parse_port(value: str) -> int:
    """Parse a TCP port, raising ``ConfigError`` when out of range."""
    try:
        port = int(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid port: {value!r}") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"Port out of range: {port}")
    return port
