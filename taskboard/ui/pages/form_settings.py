"""
Taskboard — Form Settings Page

Route: /form-settings
"""

import reflex as rx

from taskboard.ui.components.layout import page_layout
from taskboard.ui.state import FormSettingsState


def form_settings_page() -> rx.Component:
    """Field configuration editor: add, reorder, remove, save."""
    return page_layout(
        rx.vstack(
            rx.hstack(
                rx.heading("Form Settings", size="6"),
                rx.spacer(),
                rx.button("Save", size="2", on_click=FormSettingsState.save),
                width="100%",
                align="center",
            ),
            rx.divider(),
            rx.hstack(
                rx.input(
                    placeholder="Field label",
                    value=FormSettingsState.new_label,
                    on_change=FormSettingsState.set_new_label,
                    width="260px",
                ),
                rx.select(
                    FormSettingsState.type_options,
                    value=FormSettingsState.new_type,
                    on_change=FormSettingsState.set_new_type,
                ),
                rx.button("Add Field", on_click=FormSettingsState.add_field),
                spacing="3",
                align="center",
            ),
            rx.cond(
                FormSettingsState.loading,
                rx.text("Loading...", color="gray"),
                rx.table.root(
                    rx.table.header(
                        rx.table.row(
                            rx.table.column_header_cell("Label"),
                            rx.table.column_header_cell("Type"),
                            rx.table.column_header_cell("Actions"),
                        ),
                    ),
                    rx.table.body(
                        rx.foreach(FormSettingsState.field_rows, _field_row),
                    ),
                    width="100%",
                ),
            ),
            _remove_dialog(),
            spacing="5",
            width="100%",
        ),
    )


def _field_row(row: dict) -> rx.Component:
    return rx.table.row(
        rx.table.cell(rx.text(row["label"], weight="bold")),
        rx.table.cell(rx.badge(row["type"], color_scheme=_type_color(row["type"]))),
        rx.table.cell(
            rx.hstack(
                rx.icon_button(
                    rx.icon("arrow-up", size=14),
                    size="1",
                    variant="outline",
                    disabled=row["prev_key"] == "",
                    on_click=FormSettingsState.move_field(row["key"], row["prev_key"]),
                ),
                rx.icon_button(
                    rx.icon("arrow-down", size=14),
                    size="1",
                    variant="outline",
                    disabled=row["next_key"] == "",
                    on_click=FormSettingsState.move_field(row["key"], row["next_key"]),
                ),
                rx.button(
                    "Remove",
                    size="1",
                    variant="outline",
                    color_scheme="red",
                    on_click=FormSettingsState.request_remove(row["key"]),
                ),
                spacing="2",
            ),
        ),
    )


def _remove_dialog() -> rx.Component:
    return rx.alert_dialog.root(
        rx.alert_dialog.content(
            rx.alert_dialog.title("Remove Field"),
            rx.alert_dialog.description(FormSettingsState.remove_prompt),
            rx.hstack(
                rx.alert_dialog.cancel(
                    rx.button("Cancel", variant="outline", on_click=FormSettingsState.cancel_remove),
                ),
                rx.alert_dialog.action(
                    rx.button("Remove", color_scheme="red", on_click=FormSettingsState.confirm_remove),
                ),
                spacing="3",
                justify="end",
                width="100%",
            ),
        ),
        open=FormSettingsState.remove_dialog_open,
    )


def _type_color(field_type) -> rx.Var:
    """Badge color per field type."""
    return rx.match(
        field_type,
        ("text", "blue"),
        ("email", "green"),
        ("date", "orange"),
        "gray",
    )
