"""
Taskboard — configurable task manager UI over a REST backend.
Version: 1.0

Layers:
    engine       — config, errors, structured logging, request tokens
    records      — FieldDescriptor / Task shapes and boundary validation
    client       — httpx client for the task + form-settings endpoints
    controllers  — framework-free state/ordering logic (store, form, table, shell)
    ui           — Reflex state classes and pages
"""

__version__ = "1.0.0"
__all__ = ["engine", "records", "client", "controllers", "ui"]
