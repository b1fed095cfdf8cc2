"""
Integration test fixtures — a full project directory with file logging.

Backend HTTP goes through the shared fake backend (httpx.MockTransport),
so no live service is needed.

Run: pytest tests/integration/ -v -m integration
"""

from __future__ import annotations

import pytest


@pytest.fixture
def integration_project(tmp_path):
    """Project tree with taskboard.yaml pointing logs into the tree."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "taskboard.yaml").write_text(
        "taskboard:\n"
        "  name: IntegrationBoard\n"
        "  environment: dev\n"
        "  backend:\n"
        "    base_url: http://backend.test:7071\n"
        "    organization_id: integration-org\n"
        "  logging:\n"
        "    level: DEBUG\n"
        "    directory: " + str(root / ".taskboard" / "logs") + "\n"
        "    log_payload: true\n",
        encoding="utf-8",
    )
    return root
