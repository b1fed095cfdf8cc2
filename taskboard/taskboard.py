"""
Taskboard — Main Reflex application entry point.

Boot sequence:
    1. _init_platform() — config, file logging, backend client
    2. Create rx.App() and register the two page routes
"""

import logging

import reflex as rx

from taskboard.controllers.app_shell import FORM_SETTINGS_ROUTE, TASK_MANAGER_ROUTE
from taskboard.ui.pages.form_settings import form_settings_page
from taskboard.ui.pages.task_manager import task_manager_page
from taskboard.ui.state import FormSettingsState, TaskManagerState

logger = logging.getLogger("taskboard.startup")

# Guard: only initialize once, even if the module is re-imported
_platform_initialized = False


def _init_platform() -> None:
    """Load config, start file logging, and install the backend client."""
    global _platform_initialized
    if _platform_initialized:
        return
    _platform_initialized = True

    from taskboard.client.backend import BackendClient
    from taskboard.engine.config import load_config
    from taskboard.engine.errors import TaskboardConfigError
    from taskboard.engine.logging import init_logging, log, log_system_event
    from taskboard.ui.state import set_backend

    try:
        config = load_config()
    except TaskboardConfigError as e:
        logger.error(f"Invalid taskboard.yaml, using defaults: {e.message}")
        from taskboard.engine.config import TaskboardConfig, set_config

        config = TaskboardConfig()
        set_config(config)

    init_logging(log_dir=config.logging.directory, level=config.logging.level)
    set_backend(BackendClient(config.backend, log_payload=config.logging.log_payload))

    log(log_system_event(
        "startup",
        details={
            "environment": config.environment,
            "backend": config.backend.base_url,
            "page_size": config.ui.page_size,
        },
    ))
    logger.info(f"Taskboard initialized (backend: {config.backend.base_url})")


# ---------------------------------------------------------------------------
# Boot sequence
# ---------------------------------------------------------------------------

_init_platform()

app = rx.App()

app.add_page(
    task_manager_page,
    route=TASK_MANAGER_ROUTE,
    title="Taskboard — Task Manager",
    on_load=TaskManagerState.on_load,
)
app.add_page(
    form_settings_page,
    route=FORM_SETTINGS_ROUTE,
    title="Taskboard — Form Settings",
    on_load=FormSettingsState.load_fields,
)
