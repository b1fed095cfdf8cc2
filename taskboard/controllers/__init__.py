"""Taskboard Controllers — framework-free UI state and ordering logic."""

from .app_shell import AppShell
from .field_store import FieldConfigStore
from .task_form import TaskFormController
from .task_table import TaskTableController

__all__ = ["AppShell", "FieldConfigStore", "TaskFormController", "TaskTableController"]
