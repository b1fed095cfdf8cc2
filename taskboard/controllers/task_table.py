"""
Task Table Controller — derives the rendered table from plain inputs.

derive_table_view() is a pure function of
    (tasks, fields, column_order, sort, search_term, current_page, page_size)
and returns the visible page plus pagination metadata. TaskTableController
holds those inputs as transient view state and forwards row actions
(Edit/Delete) to caller-supplied callbacks.

Column order is display-only and independent of the stored field order;
it is reset from the field list whenever the fields are (re)loaded and is
never persisted.
"""

from __future__ import annotations

import logging
import math
import unicodedata
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from taskboard.controllers.ordering import move_to_position_of
from taskboard.records.field import FieldDescriptor
from taskboard.records.task import Task

logger = logging.getLogger("taskboard.controllers.task_table")

DEFAULT_PAGE_SIZE = 5
DATA_COLUMN_MIN_WIDTH = 120
ACTION_COLUMN_MIN_WIDTH = 70

EDIT_ACTION = "edit"
DELETE_ACTION = "delete"
ACTION_LABELS = {EDIT_ACTION: "Edit", DELETE_ACTION: "Delete"}

LOADING_MESSAGE = "Loading..."
EMPTY_MESSAGE = "No tasks found."


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

class SortSpec(BaseModel):
    column: Optional[str] = None
    descending: bool = False

    def toggled(self, column: str) -> "SortSpec":
        """Same column flips direction; a different column starts ascending."""
        if column == self.column:
            return SortSpec(column=column, descending=not self.descending)
        return SortSpec(column=column, descending=False)


class Column(BaseModel):
    key: str
    name: str
    field_name: str
    min_width: int = DATA_COLUMN_MIN_WIDTH
    is_action: bool = False
    is_sorted: bool = False
    is_sorted_descending: bool = False


class TableView(BaseModel):
    columns: List[Column] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    current_page: int = 1
    total_pages: int = 1
    total_rows: int = 0

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def page_label(self) -> str:
        return f"Page {self.current_page} of {self.total_pages}"

    @property
    def data_columns(self) -> List[Column]:
        return [c for c in self.columns if not c.is_action]


# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------

def derive_columns(
    fields: Sequence[FieldDescriptor],
    column_order: Sequence[str],
    sort: Optional[SortSpec] = None,
) -> List[Column]:
    """
    One column per name in *column_order* that matches a configured field
    (unmatched names are skipped), then the Edit and Delete action columns.
    """
    sort = sort or SortSpec()
    by_name = {f.name: f for f in fields}
    columns: List[Column] = []
    for name in column_order:
        field = by_name.get(name)
        if field is None:
            continue
        columns.append(Column(
            key=field.name,
            name=field.label,
            field_name=field.name,
            is_sorted=sort.column == field.name,
            is_sorted_descending=sort.descending,
        ))
    for action in (EDIT_ACTION, DELETE_ACTION):
        columns.append(Column(
            key=action,
            name=ACTION_LABELS[action],
            field_name=action,
            min_width=ACTION_COLUMN_MIN_WIDTH,
            is_action=True,
        ))
    return columns


def reorder_columns(column_order: Sequence[str], from_name: str, to_name: str) -> List[str]:
    """Move *from_name* to *to_name*'s position; unchanged copy if not possible."""
    moved = move_to_position_of(column_order, from_name, to_name)
    return list(column_order) if moved is None else moved


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def _display_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_display_text(v) for v in value)
    return str(value)


def search_text(task: Mapping[str, Any]) -> str:
    """All of the task's own values joined with spaces."""
    return " ".join(_display_text(v) for v in task.values())


def filter_tasks(tasks: Sequence[Task], term: str) -> List[Task]:
    """Case-insensitive substring match against search_text()."""
    needle = term.lower()
    return [t for t in tasks if needle in search_text(t).lower()]


# ---------------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------------

def _collation_key(text: str):
    # Accent- and case-insensitive first, exact text as tie-breaker
    folded = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return (folded.casefold(), text)


def compare_values(a: Any, b: Any) -> int:
    """
    Strings compare by collation key; anything else by natural < / >.
    Missing values (None) rank after every present value. Values of
    types that cannot be ordered against each other fall back to their
    type name, so the order stays total.
    """
    if a is None or b is None:
        return (a is None) - (b is None)
    if isinstance(a, str) and isinstance(b, str):
        ka, kb = _collation_key(a), _collation_key(b)
        return (ka > kb) - (ka < kb)
    try:
        if a < b:
            return -1
        if a > b:
            return 1
    except TypeError:
        ta, tb = type(a).__name__, type(b).__name__
        return (ta > tb) - (ta < tb)
    return 0


def sort_tasks(tasks: Sequence[Task], sort: SortSpec) -> List[Task]:
    """Stable sort on one column; tasks missing the column always come last."""
    if sort.column is None:
        return list(tasks)
    column = sort.column
    present = [t for t in tasks if t.get(column) is not None]
    missing = [t for t in tasks if t.get(column) is None]
    ordered = sorted(
        present,
        key=cmp_to_key(lambda a, b: compare_values(a[column], b[column])),
        reverse=sort.descending,
    )
    return ordered + missing


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def total_pages(row_count: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    return max(1, math.ceil(row_count / page_size))


def clamp_page(page: int, pages: int) -> int:
    return min(max(page, 1), max(1, pages))


def paginate(rows: Sequence[Task], page: int, page_size: int = DEFAULT_PAGE_SIZE) -> List[Task]:
    start = (page - 1) * page_size
    return list(rows[start:start + page_size])


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------

def derive_table_view(
    tasks: Sequence[Task],
    fields: Sequence[FieldDescriptor],
    column_order: Sequence[str],
    sort: Optional[SortSpec] = None,
    search_term: str = "",
    current_page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> TableView:
    """Filter, then sort, then cut out the (clamped) current page."""
    sort = sort or SortSpec()
    ordered = sort_tasks(filter_tasks(tasks, search_term), sort)
    pages = total_pages(len(ordered), page_size)
    page = clamp_page(current_page, pages)
    return TableView(
        columns=derive_columns(fields, column_order, sort),
        rows=paginate(ordered, page, page_size),
        current_page=page,
        total_pages=pages,
        total_rows=len(ordered),
    )


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

RowAction = Callable[[Task], Any]


class TaskTableController:
    """
    Transient table view state: column order, sort, search term, page.

    Args:
        on_edit: Called with the full task row when Edit is clicked.
        on_delete: Called with the full task row when Delete is clicked.
        page_size: Rows per page.
    """

    def __init__(
        self,
        on_edit: Optional[RowAction] = None,
        on_delete: Optional[RowAction] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self._actions: Dict[str, Optional[RowAction]] = {
            EDIT_ACTION: on_edit,
            DELETE_ACTION: on_delete,
        }
        self.page_size = page_size
        self.fields: List[FieldDescriptor] = []
        self.column_order: List[str] = []
        self.sort = SortSpec()
        self.search_term = ""
        self.current_page = 1
        self._last_total_pages = 1

    def set_fields(self, fields: Sequence[FieldDescriptor]) -> None:
        """Install freshly fetched fields; column order resets to their order."""
        self.fields = list(fields)
        self.column_order = [f.name for f in fields]

    def search(self, term: str) -> None:
        # Page is not reset; view() clamps it into range
        self.search_term = term

    def sort_by(self, column: str) -> None:
        self.sort = self.sort.toggled(column)

    def reorder_columns(self, from_name: str, to_name: str) -> bool:
        new_order = reorder_columns(self.column_order, from_name, to_name)
        changed = new_order != self.column_order
        self.column_order = new_order
        return changed

    def previous_page(self) -> None:
        self.current_page = max(self.current_page - 1, 1)

    def next_page(self) -> None:
        self.current_page = min(self.current_page + 1, self._last_total_pages)

    def view(self, tasks: Sequence[Task]) -> TableView:
        result = derive_table_view(
            tasks,
            self.fields,
            self.column_order,
            sort=self.sort,
            search_term=self.search_term,
            current_page=self.current_page,
            page_size=self.page_size,
        )
        self._last_total_pages = result.total_pages
        self.current_page = result.current_page
        return result

    def invoke_action(self, action: str, task: Task) -> Any:
        """Run the Edit/Delete callback for *task*."""
        if action not in self._actions:
            raise ValueError(f"Unknown row action: {action}")
        callback = self._actions[action]
        if callback is None:
            logger.debug(f"No callback wired for '{action}'")
            return None
        return callback(task)
