"""
Taskboard — Layout component (top navigation + page body).
"""

import reflex as rx

from taskboard.controllers.app_shell import ROUTES


def page_layout(content: rx.Component) -> rx.Component:
    """Wrap content in the navigation bar shared by both pages."""
    return rx.vstack(
        _navbar(),
        rx.divider(),
        rx.box(
            content,
            width="100%",
            padding="6",
        ),
        spacing="0",
        width="100%",
        min_height="100vh",
    )


def _navbar() -> rx.Component:
    return rx.hstack(
        rx.heading("Taskboard", size="4"),
        rx.spacer(),
        *[_nav_item(label, href) for href, label in ROUTES.items()],
        spacing="4",
        padding="3",
        width="100%",
        align="center",
        background="var(--gray-2)",
    )


def _nav_item(label: str, href: str) -> rx.Component:
    return rx.link(
        rx.text(label, size="2", weight="medium"),
        href=href,
        underline="none",
        padding_x="3",
        padding_y="2",
        border_radius="6px",
        _hover={"background": "var(--gray-4)"},
    )
