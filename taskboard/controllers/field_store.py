"""
Field Configuration Store / Editor.

Holds the ordered FieldDescriptor list that drives both the task form and
the task table's columns. Edits (add/remove/reorder) are local until
save() POSTs the whole list; the backend keeps whichever save lands last.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from taskboard.client.backend import BackendClient
from taskboard.engine.errors import TaskboardIntegrationError
from taskboard.engine.logging import log, log_field_event
from taskboard.controllers.ordering import move_to_position_of
from taskboard.records.field import (
    FieldDescriptor,
    FieldType,
    derive_field_name,
    field_key,
    new_field_id,
)

logger = logging.getLogger("taskboard.controllers.field_store")

DELETE_FIELD_PROMPT = "Delete this field?"
SAVE_SUCCESS_MESSAGE = "Settings saved!"
SAVE_FAILURE_MESSAGE = "Failed to save."

Confirm = Callable[[str], bool]


class FieldConfigStore:
    """
    Ordered field configuration plus the editor's pending "new field" inputs.

    Args:
        client: Backend client used by load() and save().
        fields: Optional initial descriptors (e.g. restored UI state).
    """

    def __init__(
        self,
        client: Optional[BackendClient],
        fields: Optional[List[FieldDescriptor]] = None,
    ):
        self._client = client
        self.fields: List[FieldDescriptor] = list(fields or [])
        self.loading: bool = fields is None
        self.pending_label: str = ""
        self.pending_type: str = FieldType.TEXT.value

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get(self, key: str) -> Optional[FieldDescriptor]:
        for field in self.fields:
            if field_key(field) == key:
                return field
        return None

    # -----------------------------------------------------------------------
    # Backend
    # -----------------------------------------------------------------------

    async def load(self) -> bool:
        """
        Fetch the descriptor list. On failure the previous (possibly empty)
        list is kept and the error is logged.
        """
        try:
            self.fields = await self._client.get_form_settings()
            log(log_field_event("fields_loaded", count=len(self.fields)))
            return True
        except TaskboardIntegrationError as e:
            logger.error(f"Failed to load form settings: {e.message}")
            log(log_field_event("fields_load_failed", level="ERROR", error=e.message))
            return False
        finally:
            self.loading = False

    async def save(self) -> bool:
        """POST the full ordered list. Returns False (and logs) on failure."""
        try:
            await self._client.save_form_settings(self.fields)
        except TaskboardIntegrationError as e:
            logger.error(f"Failed to save form settings: {e.message}")
            log(log_field_event("fields_save_failed", level="ERROR", error=e.message))
            return False
        log(log_field_event("fields_saved", count=len(self.fields)))
        return True

    @staticmethod
    def save_message(ok: bool) -> str:
        return SAVE_SUCCESS_MESSAGE if ok else SAVE_FAILURE_MESSAGE

    # -----------------------------------------------------------------------
    # Local edits
    # -----------------------------------------------------------------------

    def add(self, label: str, field_type: str = FieldType.TEXT.value) -> Optional[FieldDescriptor]:
        """
        Append a field. Blank labels, unknown types and labels whose derived
        name is already configured are rejected (returns None, no change).
        """
        if not label.strip():
            return None
        if not FieldType.is_known(field_type):
            logger.warning(f"Rejected field '{label}': unknown type '{field_type}'")
            return None

        name = derive_field_name(label)
        if name in self.names:
            logger.warning(f"Rejected field '{label}': name '{name}' already configured")
            return None

        field = FieldDescriptor(
            id=new_field_id(f.id for f in self.fields),
            name=name,
            label=label,
            type=field_type,
        )
        self.fields = [*self.fields, field]
        self.pending_label = ""
        self.pending_type = FieldType.TEXT.value
        log(log_field_event("field_added", field_id=field.id, field_name=name))
        return field

    def add_pending(self) -> Optional[FieldDescriptor]:
        """add() using the editor's pending label/type inputs."""
        return self.add(self.pending_label, self.pending_type)

    def reorder(self, from_key: str, to_key: str) -> bool:
        """Move the field *from_key* to *to_key*'s position."""
        moved = move_to_position_of(self.fields, from_key, to_key, key=field_key)
        if moved is None:
            return False
        self.fields = moved
        log(log_field_event("field_reordered", field_id=from_key, target=to_key))
        return True

    def remove(self, key: str, confirm: Confirm) -> bool:
        """
        Remove a field after *confirm* approves DELETE_FIELD_PROMPT.
        Local only; persisted by the next save().
        """
        if self.get(key) is None:
            return False
        if not confirm(DELETE_FIELD_PROMPT):
            return False
        self.fields = [f for f in self.fields if field_key(f) != key]
        log(log_field_event("field_removed", field_id=key))
        return True
