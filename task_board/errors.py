"""Exceptions raised by the task board."""


class TaskBoardError(Exception):
    """Base class for task board errors."""


class StorageKeyError(TaskBoardError, ValueError):
    """Raised when a storage key cannot be mapped to a file name."""


class ConfigError(TaskBoardError, ValueError):
    """Raised when configuration values cannot be parsed."""
