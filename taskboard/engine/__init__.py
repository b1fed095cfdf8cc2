"""Taskboard Engine — Config, error hierarchy, logging, request tokens."""

from taskboard.engine.config import TaskboardConfig, get_config, load_config  # noqa: F401
from taskboard.engine.errors import TaskboardError, TaskboardIntegrationError  # noqa: F401
from taskboard.engine.tokens import RequestTokens  # noqa: F401

__all__ = [
    "TaskboardConfig",
    "get_config",
    "load_config",
    "TaskboardError",
    "TaskboardIntegrationError",
    "RequestTokens",
]
