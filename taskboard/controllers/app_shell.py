"""
App Shell — page switch, task collection, and the edit/delete flow.

Holds the fetched tasks and loading flag handed to the table, plus the
"currently editing" task and dialog visibility handed to the form.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from taskboard.client.backend import BackendClient
from taskboard.engine.config import get_config
from taskboard.engine.errors import TaskboardIntegrationError, TaskboardStaleResponseError
from taskboard.engine.logging import log, log_task_event
from taskboard.engine.tokens import RequestTokens
from taskboard.records.task import Task, task_id, task_org

logger = logging.getLogger("taskboard.controllers.app_shell")

REFRESH_ACTION = "tasks_refresh"

TASK_MANAGER_ROUTE = "/"
FORM_SETTINGS_ROUTE = "/form-settings"
ROUTES: Dict[str, str] = {
    TASK_MANAGER_ROUTE: "Task Manager",
    FORM_SETTINGS_ROUTE: "Form Settings",
}

Confirm = Callable[[str], bool]


def delete_task_prompt(task: Task) -> str:
    title = task.get("title")
    return f'Delete task "{"" if title is None else title}"?'


class AppShell:
    """
    Args:
        client: Backend client for GetTasks / DeleteTask.
        organization_id: Used when deleting a task that lacks one; defaults
            to the configured backend organization.
        tokens: Shared request tokens; a superseded refresh is discarded.
    """

    def __init__(
        self,
        client: Optional[BackendClient],
        organization_id: Optional[str] = None,
        tokens: Optional[RequestTokens] = None,
    ):
        self._client = client
        self._organization_id = organization_id
        self._tokens = tokens or RequestTokens()
        self.tasks: List[Task] = []
        self.loading: bool = True
        self.editing_task: Optional[Task] = None
        self.dialog_open: bool = False
        self._mounted = False

    # -----------------------------------------------------------------------
    # Tasks
    # -----------------------------------------------------------------------

    async def mount(self) -> None:
        """Initial fetch; later calls are no-ops."""
        if self._mounted:
            return
        self._mounted = True
        await self.refresh()

    async def refresh(self) -> bool:
        """
        Fetch the task collection. Failures are logged and the previous
        collection is kept; a response superseded by a newer refresh is
        dropped.
        """
        token = self._tokens.issue(REFRESH_ACTION)
        self.loading = True
        try:
            tasks = await self._client.get_tasks()
            self._tokens.ensure_current(REFRESH_ACTION, token)
        except TaskboardStaleResponseError:
            return False
        except TaskboardIntegrationError as e:
            logger.error(f"Failed to fetch tasks: {e.message}")
            log(log_task_event("tasks_refresh_failed", level="ERROR", error=e.message))
            self.loading = False
            return False

        self.tasks = tasks
        self.loading = False
        log(log_task_event("tasks_refreshed", count=len(tasks)))
        return True

    async def delete_task(self, task: Task, confirm: Confirm) -> bool:
        """DELETE *task* after confirmation, then refresh."""
        if not confirm(delete_task_prompt(task)):
            return False

        tid = task_id(task)
        try:
            await self._client.delete_task(tid, task_org(task) or self.organization_id)
        except TaskboardIntegrationError as e:
            logger.error(f"Failed to delete task: {e.message}")
            log(log_task_event("task_delete_failed", task_id=tid, level="ERROR", error=e.message))
            return False

        log(log_task_event("task_deleted", task_id=tid))
        await self.refresh()
        return True

    # -----------------------------------------------------------------------
    # Dialog / edit flow
    # -----------------------------------------------------------------------

    def open_add(self) -> None:
        self.editing_task = None
        self.dialog_open = True

    def begin_edit(self, task: Task) -> None:
        self.editing_task = task
        self.dialog_open = True

    def cancel_edit(self) -> None:
        self.editing_task = None
        self.dialog_open = False

    async def on_task_submitted(self) -> None:
        """Completion callback for the task form."""
        await self.refresh()
        self.editing_task = None
        self.dialog_open = False

    @property
    def organization_id(self) -> str:
        return self._organization_id or get_config().backend.organization_id

    @property
    def dialog_title(self) -> str:
        return "Edit Task" if self.editing_task is not None else "Add Task"
