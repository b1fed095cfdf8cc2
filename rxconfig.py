"""
Taskboard — Reflex configuration.

Routes:
  /               → Task manager (table + add/edit dialog)
  /form-settings  → Field configuration editor
"""

import reflex as rx

config = rx.Config(
    app_name="taskboard",
    # Frontend port for dev server
    frontend_port=3000,
    # API / backend port
    backend_port=8000,
    # Telemetry
    telemetry_enabled=False,
    # Disable unused default plugins
    disable_plugins=["reflex.plugins.sitemap.SitemapPlugin"],
)
