"""Taskboard Client — HTTP access to the task and form-settings backend."""

from .backend import BackendClient

__all__ = ["BackendClient"]
