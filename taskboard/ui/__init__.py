"""Taskboard UI — Reflex states, layout, and pages."""
