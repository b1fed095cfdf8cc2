"""
Taskboard — Task Manager Page

Route: /
"""

import reflex as rx

from taskboard.controllers.task_form import FORM_LOADING_MESSAGE
from taskboard.ui.components.layout import page_layout
from taskboard.ui.state import TaskManagerState


def task_manager_page() -> rx.Component:
    """Task table with search, sort, paging, column reorder, and add/edit/delete."""
    return page_layout(
        rx.vstack(
            rx.hstack(
                rx.heading("Task Manager", size="6"),
                rx.spacer(),
                rx.button("Add Task", size="2", on_click=TaskManagerState.open_add),
                width="100%",
                align="center",
            ),
            rx.divider(),
            rx.hstack(
                rx.input(
                    placeholder="Search",
                    value=TaskManagerState.search_term,
                    on_change=TaskManagerState.set_search,
                    width="260px",
                ),
                rx.spacer(),
                _column_mover(),
                width="100%",
                align="center",
            ),
            rx.cond(
                TaskManagerState.status_message != "",
                rx.text(TaskManagerState.status_message, color="gray"),
                _task_table(),
            ),
            _task_dialog(),
            _delete_dialog(),
            spacing="5",
            width="100%",
        ),
    )


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

def _task_table() -> rx.Component:
    return rx.vstack(
        rx.table.root(
            rx.table.header(
                rx.table.row(
                    rx.foreach(TaskManagerState.data_columns, _header_cell),
                    rx.foreach(
                        TaskManagerState.action_columns,
                        lambda col: rx.table.column_header_cell(
                            col["name"], min_width=f"{col['min_width']}px",
                        ),
                    ),
                ),
            ),
            rx.table.body(
                rx.foreach(TaskManagerState.page_cells, _task_row),
            ),
            width="100%",
        ),
        rx.hstack(
            rx.button(
                "Previous",
                size="1",
                variant="outline",
                disabled=~TaskManagerState.has_previous,
                on_click=TaskManagerState.previous_page,
            ),
            rx.text(TaskManagerState.page_label, size="2"),
            rx.button(
                "Next",
                size="1",
                variant="outline",
                disabled=~TaskManagerState.has_next,
                on_click=TaskManagerState.next_page,
            ),
            spacing="3",
            align="center",
        ),
        spacing="3",
        width="100%",
    )


def _header_cell(col: dict) -> rx.Component:
    """Clickable header; shows the sort direction on the sorted column."""
    return rx.table.column_header_cell(
        rx.hstack(
            rx.text(col["name"]),
            rx.cond(
                col["is_sorted"],
                rx.cond(
                    col["is_sorted_descending"],
                    rx.icon("arrow-down", size=14),
                    rx.icon("arrow-up", size=14),
                ),
                rx.fragment(),
            ),
            spacing="1",
            align="center",
        ),
        min_width=f"{col['min_width']}px",
        cursor="pointer",
        on_click=TaskManagerState.sort_by(col["field_name"]),
    )


def _task_row(cells: list, index: int) -> rx.Component:
    return rx.table.row(
        rx.foreach(cells, lambda value: rx.table.cell(value)),
        rx.table.cell(
            rx.button(
                "Edit",
                size="1",
                variant="outline",
                on_click=TaskManagerState.begin_edit(index),
            ),
        ),
        rx.table.cell(
            rx.button(
                "Delete",
                size="1",
                variant="outline",
                color_scheme="red",
                on_click=TaskManagerState.request_delete(index),
            ),
        ),
    )


def _column_mover() -> rx.Component:
    """Move one column to another column's position."""
    return rx.hstack(
        rx.text("Move column", size="2"),
        rx.select(
            TaskManagerState.column_order,
            placeholder="Column",
            value=TaskManagerState.move_from,
            on_change=TaskManagerState.set_move_from,
            size="1",
        ),
        rx.text("to", size="2"),
        rx.select(
            TaskManagerState.column_order,
            placeholder="Position of",
            value=TaskManagerState.move_to,
            on_change=TaskManagerState.set_move_to,
            size="1",
        ),
        rx.button("Move", size="1", on_click=TaskManagerState.reorder_columns),
        spacing="2",
        align="center",
    )


# ---------------------------------------------------------------------------
# Dialogs
# ---------------------------------------------------------------------------

def _task_dialog() -> rx.Component:
    return rx.dialog.root(
        rx.dialog.content(
            rx.dialog.title(TaskManagerState.dialog_title),
            rx.cond(
                TaskManagerState.fields_loading,
                rx.text(FORM_LOADING_MESSAGE, color="gray"),
                rx.vstack(
                    rx.foreach(TaskManagerState.form_controls, _form_control),
                    rx.hstack(
                        rx.cond(
                            TaskManagerState.show_cancel,
                            rx.button(
                                "Cancel",
                                variant="outline",
                                on_click=TaskManagerState.cancel_edit,
                            ),
                            rx.fragment(),
                        ),
                        rx.button(
                            TaskManagerState.submit_label,
                            on_click=TaskManagerState.submit_form,
                        ),
                        spacing="3",
                        justify="end",
                        width="100%",
                    ),
                    spacing="3",
                    width="100%",
                ),
            ),
        ),
        open=TaskManagerState.dialog_open,
        on_open_change=TaskManagerState.set_dialog_open,
    )


def _form_control(control: dict) -> rx.Component:
    """Text input for text/email fields, date picker for date fields."""
    return rx.vstack(
        rx.text(control["label"], size="2", weight="bold"),
        rx.cond(
            control["kind"] == "date",
            rx.input(
                type="date",
                value=control["value"],
                on_change=lambda value: TaskManagerState.set_form_value(control["name"], value),
                size="2",
                width="100%",
            ),
            rx.input(
                type="text",
                value=control["value"],
                on_change=lambda value: TaskManagerState.set_form_value(control["name"], value),
                size="2",
                width="100%",
            ),
        ),
        spacing="1",
        width="100%",
    )


def _delete_dialog() -> rx.Component:
    return rx.alert_dialog.root(
        rx.alert_dialog.content(
            rx.alert_dialog.title("Delete Task"),
            rx.alert_dialog.description(TaskManagerState.delete_prompt),
            rx.hstack(
                rx.alert_dialog.cancel(
                    rx.button("Cancel", variant="outline", on_click=TaskManagerState.cancel_delete),
                ),
                rx.alert_dialog.action(
                    rx.button("Delete", color_scheme="red", on_click=TaskManagerState.confirm_delete),
                ),
                spacing="3",
                justify="end",
                width="100%",
            ),
        ),
        open=TaskManagerState.delete_dialog_open,
    )
