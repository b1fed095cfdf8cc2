"""
Taskboard UI — Reflex state for the task manager and the field editor.

Reflex state vars must be JSON-serializable, so the vars below hold plain
dicts/lists and every event handler rebuilds the relevant controller from
them, runs one operation, and writes the result back.

Each rebuilt controller gets fresh RequestTokens, so stale-response
discarding never triggers here: Reflex already processes one client's
events in order. The tokens guard controllers driven directly or
concurrently outside Reflex.

Provides:
- TaskManagerState: tasks, table view state, add/edit dialog, delete confirm
- FormSettingsState: field list editing and save
- set_backend / get_backend: process-wide BackendClient
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import reflex as rx

from taskboard.client.backend import BackendClient
from taskboard.controllers.app_shell import AppShell, delete_task_prompt
from taskboard.controllers.field_store import DELETE_FIELD_PROMPT, FieldConfigStore
from taskboard.controllers.task_form import TaskFormController
from taskboard.controllers.task_table import (
    DELETE_ACTION,
    EDIT_ACTION,
    EMPTY_MESSAGE,
    LOADING_MESSAGE,
    SortSpec,
    TableView,
    TaskTableController,
    derive_table_view,
)
from taskboard.engine.config import get_config
from taskboard.records.field import FIELD_TYPE_OPTIONS, FieldDescriptor, FieldType, field_key

logger = logging.getLogger("taskboard.ui.state")


def _parse_fields(raw: List[Dict[str, Any]]) -> List[FieldDescriptor]:
    return [FieldDescriptor.model_validate(f) for f in raw]


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value)


class TaskManagerState(rx.State):
    """
    State for the task manager page ("/").

    Manages:
    - Task collection + loading flag (App Shell)
    - Field configuration driving columns and the form
    - Column order, sort, search, page (Task Table)
    - Add/edit dialog values (Task Form) and delete confirmation
    """

    # App shell
    tasks: list[dict] = []
    loading: bool = True
    dialog_open: bool = False
    editing_task: dict = {}

    # Field configuration
    field_configs: list[dict] = []
    fields_loading: bool = True

    # Table view state
    column_order: list[str] = []
    sort_column: str = ""
    sort_descending: bool = False
    search_term: str = ""
    current_page: int = 1
    move_from: str = ""
    move_to: str = ""

    # Task form
    form_values: dict[str, str] = {}

    # Delete confirmation
    pending_delete: dict = {}
    delete_dialog_open: bool = False

    # -----------------------------------------------------------------------
    # Controller round-trips
    # -----------------------------------------------------------------------

    def _table(self, on_edit=None, on_delete=None) -> TaskTableController:
        table = TaskTableController(on_edit, on_delete, page_size=get_config().ui.page_size)
        table.fields = _parse_fields(self.field_configs)
        table.column_order = list(self.column_order)
        table.sort = SortSpec(column=self.sort_column or None, descending=self.sort_descending)
        table.search_term = self.search_term
        table.current_page = self.current_page
        return table

    def _store_table(self, table: TaskTableController) -> None:
        self.column_order = table.column_order
        self.sort_column = table.sort.column or ""
        self.sort_descending = table.sort.descending
        self.search_term = table.search_term
        self.current_page = table.current_page

    def _shell(self) -> AppShell:
        shell = AppShell(get_backend(), get_config().backend.organization_id)
        shell.tasks = list(self.tasks)
        shell.loading = self.loading
        shell.editing_task = dict(self.editing_task) if self.editing_task else None
        shell.dialog_open = self.dialog_open
        return shell

    def _store_shell(self, shell: AppShell) -> None:
        self.tasks = shell.tasks
        self.loading = shell.loading
        self.editing_task = shell.editing_task or {}
        self.dialog_open = shell.dialog_open

    def _form(self) -> TaskFormController:
        form = TaskFormController(get_backend(), get_config().backend.organization_id)
        form.open(_parse_fields(self.field_configs), self.editing_task or None)
        form.values.update({k: v for k, v in self.form_values.items() if k in form.values})
        return form

    def _view(self) -> TableView:
        return derive_table_view(
            self.tasks,
            _parse_fields(self.field_configs),
            self.column_order,
            sort=SortSpec(column=self.sort_column or None, descending=self.sort_descending),
            search_term=self.search_term,
            current_page=self.current_page,
            page_size=get_config().ui.page_size,
        )

    # -----------------------------------------------------------------------
    # Computed vars
    # -----------------------------------------------------------------------

    @rx.var
    def data_columns(self) -> list[dict]:
        return [c.model_dump() for c in self._view().data_columns]

    @rx.var
    def action_columns(self) -> list[dict]:
        return [c.model_dump() for c in self._view().columns if c.is_action]

    @rx.var
    def page_cells(self) -> list[list[str]]:
        """Display text per visible row, aligned with data_columns."""
        view = self._view()
        names = [c.field_name for c in view.data_columns]
        return [[_cell_text(row.get(name)) for name in names] for row in view.rows]

    @rx.var
    def page_label(self) -> str:
        return self._view().page_label

    @rx.var
    def has_previous(self) -> bool:
        return self._view().has_previous

    @rx.var
    def has_next(self) -> bool:
        return self._view().has_next

    @rx.var
    def status_message(self) -> str:
        if self.loading:
            return LOADING_MESSAGE
        if not self.tasks:
            return EMPTY_MESSAGE
        return ""

    @rx.var
    def form_controls(self) -> list[dict]:
        return [c.model_dump() for c in self._form().controls()]

    @rx.var
    def dialog_title(self) -> str:
        return self._form().title

    @rx.var
    def submit_label(self) -> str:
        return self._form().submit_label

    @rx.var
    def show_cancel(self) -> bool:
        return self._form().show_cancel

    @rx.var
    def delete_prompt(self) -> str:
        return delete_task_prompt(self.pending_delete) if self.pending_delete else ""

    # -----------------------------------------------------------------------
    # Loading
    # -----------------------------------------------------------------------

    async def on_load(self):
        """Fetch field configuration (resets column order) and tasks."""
        store = FieldConfigStore(get_backend())
        await store.load()
        self.field_configs = [f.to_payload() for f in store.fields]
        self.fields_loading = False
        logger.debug(f"Loaded {len(store.fields)} field(s) for the task table")

        table = self._table()
        table.set_fields(store.fields)
        self._store_table(table)
        yield

        shell = self._shell()
        await shell.mount()
        self._store_shell(shell)

    async def refresh(self):
        shell = self._shell()
        await shell.refresh()
        self._store_shell(shell)

    # -----------------------------------------------------------------------
    # Table events
    # -----------------------------------------------------------------------

    def set_search(self, value: str) -> None:
        table = self._table()
        table.search(value)
        self._store_table(table)

    def sort_by(self, column: str) -> None:
        table = self._table()
        table.sort_by(column)
        self._store_table(table)

    def previous_page(self) -> None:
        table = self._table()
        table.view(self.tasks)
        table.previous_page()
        self._store_table(table)

    def next_page(self) -> None:
        table = self._table()
        table.view(self.tasks)
        table.next_page()
        self._store_table(table)

    def set_move_from(self, value: str) -> None:
        self.move_from = value

    def set_move_to(self, value: str) -> None:
        self.move_to = value

    def reorder_columns(self) -> None:
        table = self._table()
        table.reorder_columns(self.move_from, self.move_to)
        self._store_table(table)

    # -----------------------------------------------------------------------
    # Add / edit dialog
    # -----------------------------------------------------------------------

    def open_add(self) -> None:
        shell = self._shell()
        shell.open_add()
        self._store_shell(shell)
        self.form_values = {}

    def begin_edit(self, index: int) -> None:
        """Edit the task at *index* on the visible page."""
        shell = self._shell()
        table = self._table(on_edit=shell.begin_edit)
        rows = table.view(self.tasks).rows
        if not 0 <= index < len(rows):
            return
        table.invoke_action(EDIT_ACTION, rows[index])
        self._store_shell(shell)
        self.form_values = {}
        self.form_values = self._form().values

    def cancel_edit(self) -> None:
        shell = self._shell()
        shell.cancel_edit()
        self._store_shell(shell)
        self.form_values = {}

    def set_dialog_open(self, is_open: bool) -> None:
        if not is_open:
            self.cancel_edit()

    def set_form_value(self, name: str, value: str) -> None:
        form = self._form()
        if form.set_value(name, value):
            self.form_values = form.values

    async def submit_form(self):
        form = self._form()
        shell = self._shell()
        if await form.submit(on_complete=shell.on_task_submitted):
            self._store_shell(shell)
            self.form_values = {}

    # -----------------------------------------------------------------------
    # Delete
    # -----------------------------------------------------------------------

    def request_delete(self, index: int):
        table = self._table(on_delete=self._stage_delete)
        rows = table.view(self.tasks).rows
        if not 0 <= index < len(rows):
            return
        table.invoke_action(DELETE_ACTION, rows[index])
        if not get_config().ui.confirm_destructive:
            return TaskManagerState.confirm_delete

    def _stage_delete(self, task: dict) -> None:
        self.pending_delete = task
        self.delete_dialog_open = True

    def cancel_delete(self) -> None:
        self.pending_delete = {}
        self.delete_dialog_open = False

    async def confirm_delete(self):
        task = dict(self.pending_delete)
        self.pending_delete = {}
        self.delete_dialog_open = False
        if not task:
            return
        shell = self._shell()
        await shell.delete_task(task, confirm=lambda _prompt: True)
        self._store_shell(shell)


class FormSettingsState(rx.State):
    """State for the field configuration editor ("/form-settings")."""

    field_configs: list[dict] = []
    loading: bool = True

    new_label: str = ""
    new_type: str = FieldType.TEXT.value

    pending_remove: str = ""
    remove_dialog_open: bool = False

    @rx.var
    def type_options(self) -> list[str]:
        return [opt["key"] for opt in FIELD_TYPE_OPTIONS]

    @rx.var
    def field_rows(self) -> list[dict]:
        """Descriptors plus the editor key and neighbour keys for up/down moves."""
        fields = _parse_fields(self.field_configs)
        keys = [field_key(f) for f in fields]
        rows = []
        for i, f in enumerate(fields):
            rows.append({
                "key": keys[i],
                "label": f.label,
                "type": f.type,
                "prev_key": keys[i - 1] if i > 0 else "",
                "next_key": keys[i + 1] if i < len(keys) - 1 else "",
            })
        return rows

    @rx.var
    def remove_prompt(self) -> str:
        return DELETE_FIELD_PROMPT

    def _store(self) -> FieldConfigStore:
        store = FieldConfigStore(get_backend(), _parse_fields(self.field_configs))
        store.pending_label = self.new_label
        store.pending_type = self.new_type
        return store

    def _save_store(self, store: FieldConfigStore) -> None:
        self.field_configs = [f.to_payload() for f in store.fields]
        self.new_label = store.pending_label
        self.new_type = store.pending_type

    async def load_fields(self):
        store = FieldConfigStore(get_backend())
        await store.load()
        self._save_store(store)
        self.loading = store.loading

    def set_new_label(self, value: str) -> None:
        self.new_label = value

    def set_new_type(self, value: str) -> None:
        self.new_type = value

    def add_field(self) -> None:
        store = self._store()
        if store.add_pending() is not None:
            self._save_store(store)

    def move_field(self, from_key: str, to_key: str) -> None:
        store = self._store()
        if store.reorder(from_key, to_key):
            self._save_store(store)

    def request_remove(self, key: str) -> None:
        self.pending_remove = key
        self.remove_dialog_open = True
        if not get_config().ui.confirm_destructive:
            self.confirm_remove()

    def cancel_remove(self) -> None:
        self.pending_remove = ""
        self.remove_dialog_open = False

    def confirm_remove(self) -> None:
        store = self._store()
        store.remove(self.pending_remove, confirm=lambda _prompt: True)
        self._save_store(store)
        self.cancel_remove()

    async def save(self):
        store = self._store()
        ok = await store.save()
        return rx.window_alert(store.save_message(ok))


# ---------------------------------------------------------------------------
# Backend singleton accessor
# ---------------------------------------------------------------------------

_backend_instance: Optional[BackendClient] = None


def set_backend(client: Optional[BackendClient]) -> None:
    """Set the process-wide backend client used by the UI states."""
    global _backend_instance
    _backend_instance = client


def get_backend() -> BackendClient:
    """Get the backend client, creating it from the loaded config if needed."""
    global _backend_instance
    if _backend_instance is None:
        config = get_config()
        _backend_instance = BackendClient(config.backend, log_payload=config.logging.log_payload)
    return _backend_instance
