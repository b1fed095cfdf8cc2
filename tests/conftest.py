"""
Taskboard Test Suite — Shared fixtures and configuration.

Run:  pytest tests/ -v
"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, List, Optional

import httpx
import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: exercises several layers together")


# ---------------------------------------------------------------------------
# Global singletons — reset between tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolate_globals():
    """Reset config, file logger and backend singletons between tests."""
    import taskboard.engine.config as cfg_mod
    import taskboard.engine.logging as log_mod

    def reset():
        cfg_mod._config = None
        log_mod._global_logger = None
        # UI state pulls in reflex; only reset it when a test imported it
        state_mod = sys.modules.get("taskboard.ui.state")
        if state_mod is not None:
            state_mod._backend_instance = None

    reset()
    yield
    reset()


@pytest.fixture
def project_root(tmp_path):
    """A project directory holding a taskboard.yaml."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "taskboard.yaml").write_text(
        "name: TestBoard\n"
        "environment: dev\n"
        "backend:\n"
        "  base_url: http://backend.test:7071/\n"
        "  organization_id: test-org\n"
        "ui:\n"
        "  page_size: 5\n",
        encoding="utf-8",
    )
    return root


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_field_dicts() -> List[Dict[str, Any]]:
    return [
        {"id": "1700000000001", "name": "title", "label": "Title", "type": "text"},
        {"id": "1700000000002", "name": "owner", "label": "Owner", "type": "email"},
        {"id": "1700000000003", "name": "duedate", "label": "Due Date", "type": "date"},
    ]


@pytest.fixture
def sample_fields(sample_field_dicts):
    from taskboard.records.field import parse_fields

    return parse_fields(sample_field_dicts)


@pytest.fixture
def sample_tasks() -> List[Dict[str, Any]]:
    return [
        {"_id": "t1", "organizationId": "org-1", "title": "Buy milk",
         "owner": "ann@example.com", "duedate": "2024-05-03"},
        {"_id": "t2", "organizationId": "org-1", "title": "Clean house",
         "owner": "bob@example.com", "duedate": "2024-05-01"},
        {"_id": "t3", "organizationId": "org-1", "title": "Éclair recipe",
         "owner": "cat@example.com", "duedate": "2024-05-02"},
    ]


# ---------------------------------------------------------------------------
# Fake backend (httpx.MockTransport)
# ---------------------------------------------------------------------------

class FakeBackend:
    """
    In-memory stand-in for the task backend.

    Records every request; `fail` maps endpoint name → HTTP status to return
    instead of handling the call, `unreachable` makes every call raise a
    transport error.
    """

    def __init__(self, tasks=None, fields=None):
        self.tasks: List[Dict[str, Any]] = [dict(t) for t in (tasks or [])]
        self.fields: Any = list(fields or [])
        self.requests: List[httpx.Request] = []
        self.fail: Dict[str, int] = {}
        self.unreachable = False
        self._next_id = 100

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        endpoint = request.url.path.rsplit("/", 1)[-1]
        if endpoint in self.fail:
            return httpx.Response(self.fail[endpoint], text="backend error")

        params = dict(request.url.params)
        body = json.loads(request.content) if request.content else None

        if endpoint == "GetTasks":
            return httpx.Response(200, json=self.tasks)
        if endpoint == "InsertTask":
            self._next_id += 1
            self.tasks.append({"_id": f"t{self._next_id}", **body})
            return httpx.Response(201)
        if endpoint == "UpdateTask":
            for task in self.tasks:
                if task["_id"] == params.get("id"):
                    task.update(body)
            return httpx.Response(200)
        if endpoint == "DeleteTask":
            self.tasks = [t for t in self.tasks if t["_id"] != params.get("id")]
            return httpx.Response(204)
        if endpoint == "GetFormSettings":
            return httpx.Response(200, json=self.fields)
        if endpoint == "SaveFormSettings":
            self.fields = body
            return httpx.Response(200)
        return httpx.Response(404)

    def last(self, endpoint: Optional[str] = None) -> httpx.Request:
        matching = [
            r for r in self.requests
            if endpoint is None or r.url.path.endswith("/" + endpoint)
        ]
        return matching[-1]

    def count(self, endpoint: str) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith("/" + endpoint))


@pytest.fixture
def fake_backend(sample_tasks, sample_field_dicts):
    return FakeBackend(tasks=sample_tasks, fields=sample_field_dicts)


@pytest.fixture
def backend_config():
    from taskboard.engine.config import BackendConfig

    return BackendConfig(base_url="http://backend.test:7071", organization_id="test-org")


@pytest.fixture
def client(fake_backend, backend_config):
    """BackendClient wired to the fake backend."""
    from taskboard.client.backend import BackendClient

    return BackendClient(backend_config, transport=httpx.MockTransport(fake_backend.handler))
