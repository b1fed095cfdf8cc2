"""
Task Form Controller — one input per configured field, create or edit.

Seeding: every configured field starts as "" for a new task, or as the
edited task's value (or "") when editing. Date fields hold ISO calendar
dates (YYYY-MM-DD). Fields whose type is not text/email/date get no
control and no value.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel

from taskboard.client.backend import BackendClient
from taskboard.engine.errors import (
    TaskboardIntegrationError,
    TaskboardStaleResponseError,
    TaskboardValidationError,
)
from taskboard.engine.logging import log, log_task_event
from taskboard.engine.tokens import RequestTokens
from taskboard.records.field import FieldDescriptor, FieldType
from taskboard.records.task import Task, tag_task_values, task_id, task_org

logger = logging.getLogger("taskboard.controllers.task_form")

SUBMIT_ACTION = "task_submit"
FORM_LOADING_MESSAGE = "Loading form settings..."

OnComplete = Callable[[], Union[None, Awaitable[None]]]


class FormControl(BaseModel):
    """A rendered input: 'text' (text/email fields) or 'date'."""

    name: str
    label: str
    kind: str
    value: str = ""


class TaskFormController:
    """
    Args:
        client: Backend client for InsertTask / UpdateTask.
        organization_id: Used for new tasks and edited tasks lacking one.
        tokens: Shared request tokens; a superseded submit is discarded.
    """

    def __init__(
        self,
        client: Optional[BackendClient],
        organization_id: str,
        tokens: Optional[RequestTokens] = None,
    ):
        self._client = client
        self._organization_id = organization_id
        self._tokens = tokens or RequestTokens()
        self.fields: List[FieldDescriptor] = []
        self.task: Optional[Task] = None
        self.values: Dict[str, str] = {}

    # -----------------------------------------------------------------------
    # State
    # -----------------------------------------------------------------------

    def open(self, fields: Sequence[FieldDescriptor], task: Optional[Task] = None) -> None:
        """Seed one value per renderable field from *task* (edit) or "" (create)."""
        self.fields = list(fields)
        self.task = task
        source = task or {}
        self.values = {}
        for field in self.fields:
            if not field.is_known_type:
                continue
            try:
                tagged = tag_task_values({field.name: source.get(field.name)}, [field])
                self.values[field.name] = tagged[field.name].value
            except TaskboardValidationError:
                logger.warning(f"Task value for '{field.name}' rejected; seeding empty")
                self.values[field.name] = ""

    @property
    def is_editing(self) -> bool:
        return self.task is not None

    @property
    def title(self) -> str:
        return "Edit Task" if self.is_editing else "Add Task"

    @property
    def submit_label(self) -> str:
        return "Update Task" if self.is_editing else "Add Task"

    @property
    def show_cancel(self) -> bool:
        return self.is_editing

    def set_value(self, name: str, value: Any) -> bool:
        """
        Update one field's value. Date fields accept date/datetime/ISO input
        and store YYYY-MM-DD; an unparseable date is rejected (no change).
        """
        field = next((f for f in self.fields if f.name == name), None)
        if field is None or not field.is_known_type:
            return False
        try:
            tagged = tag_task_values({name: value}, [field])
        except TaskboardValidationError as e:
            logger.info(f"Rejected value for '{name}': {e.message}")
            return False
        self.values[name] = tagged[name].value
        return True

    def controls(self) -> List[FormControl]:
        """Controls in field order; unknown types are dropped."""
        controls: List[FormControl] = []
        for field in self.fields:
            if field.type in (FieldType.TEXT.value, FieldType.EMAIL.value):
                kind = "text"
            elif field.type == FieldType.DATE.value:
                kind = "date"
            else:
                continue
            controls.append(FormControl(
                name=field.name,
                label=field.label,
                kind=kind,
                value=self.values.get(field.name, ""),
            ))
        return controls

    def build_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.values)
        org = task_org(self.task) if self.task else None
        payload["organizationId"] = org or self._organization_id
        return payload

    # -----------------------------------------------------------------------
    # Submit
    # -----------------------------------------------------------------------

    async def submit(self, on_complete: Optional[OnComplete] = None) -> bool:
        """
        Create (no task) or update (editing) via the backend.

        On success runs *on_complete* and resets to an empty create form.
        On failure logs and keeps the entered values.
        """
        token = self._tokens.issue(SUBMIT_ACTION)
        payload = self.build_payload()
        editing = self.task

        try:
            if editing is not None:
                tid = task_id(editing)
                await self._client.update_task(
                    tid, task_org(editing) or self._organization_id, payload
                )
            else:
                tid = None
                await self._client.insert_task(payload)
            self._tokens.ensure_current(SUBMIT_ACTION, token)
        except TaskboardStaleResponseError:
            return False
        except TaskboardIntegrationError as e:
            logger.error(f"Failed to submit task: {e.message}")
            log(log_task_event("task_submit_failed", task_id=tid, level="ERROR", error=e.message))
            return False

        log(log_task_event("task_updated" if editing is not None else "task_created", task_id=tid))

        if on_complete is not None:
            result = on_complete()
            if inspect.isawaitable(result):
                await result

        self.open(self.fields, None)
        return True
