"""Unit tests for taskboard.controllers.task_form — TaskFormController."""

import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from taskboard.controllers.task_form import SUBMIT_ACTION, TaskFormController
from taskboard.engine.errors import TaskboardIntegrationError
from taskboard.engine.tokens import RequestTokens
from taskboard.records.field import FieldDescriptor


@pytest.fixture
def form(client):
    return TaskFormController(client, organization_id="test-org")


class TestOpen:
    def test_create_mode_seeds_empty(self, form, sample_fields):
        form.open(sample_fields)
        assert form.values == {"title": "", "owner": "", "duedate": ""}
        assert form.is_editing is False
        assert form.title == "Add Task"
        assert form.submit_label == "Add Task"
        assert form.show_cancel is False

    def test_edit_mode_seeds_task_values(self, form, sample_fields, sample_tasks):
        form.open(sample_fields, sample_tasks[0])
        assert form.values == {
            "title": "Buy milk",
            "owner": "ann@example.com",
            "duedate": "2024-05-03",
        }
        assert form.title == "Edit Task"
        assert form.submit_label == "Update Task"
        assert form.show_cancel is True

    def test_edit_mode_missing_key_is_empty(self, form, sample_fields):
        form.open(sample_fields, {"_id": "t9", "title": "Old task"})
        assert form.values["owner"] == ""
        assert form.values["duedate"] == ""

    def test_iso_timestamp_cut_to_date(self, form, sample_fields):
        form.open(sample_fields, {"_id": "t9", "duedate": "2024-05-01T00:00:00.000Z"})
        assert form.values["duedate"] == "2024-05-01"

    def test_bad_date_seeds_empty(self, form, sample_fields):
        form.open(sample_fields, {"_id": "t9", "duedate": "someday"})
        assert form.values["duedate"] == ""

    def test_unknown_type_gets_no_value(self, form):
        fields = [
            FieldDescriptor(name="title", label="Title"),
            FieldDescriptor(name="count", label="Count", type="number"),
        ]
        form.open(fields, {"_id": "t1", "count": 3})
        assert "count" not in form.values


class TestControls:
    def test_control_kinds(self, form, sample_fields):
        form.open(sample_fields)
        kinds = [(c.name, c.kind) for c in form.controls()]
        assert kinds == [("title", "text"), ("owner", "text"), ("duedate", "date")]

    def test_controls_carry_labels_and_values(self, form, sample_fields, sample_tasks):
        form.open(sample_fields, sample_tasks[1])
        control = form.controls()[0]
        assert control.label == "Title"
        assert control.value == "Clean house"

    def test_unknown_type_not_rendered(self, form):
        form.open([FieldDescriptor(name="count", label="Count", type="number")])
        assert form.controls() == []


class TestSetValue:
    def test_text(self, form, sample_fields):
        form.open(sample_fields)
        assert form.set_value("title", "Walk dog") is True
        assert form.values["title"] == "Walk dog"

    def test_date_object_normalized(self, form, sample_fields):
        form.open(sample_fields)
        assert form.set_value("duedate", date(2024, 6, 30)) is True
        assert form.values["duedate"] == "2024-06-30"

    def test_bad_date_rejected(self, form, sample_fields):
        form.open(sample_fields)
        form.set_value("duedate", "2024-01-02")
        assert form.set_value("duedate", "not a date") is False
        assert form.values["duedate"] == "2024-01-02"

    def test_unconfigured_name_rejected(self, form, sample_fields):
        form.open(sample_fields)
        assert form.set_value("legacy", "x") is False
        assert "legacy" not in form.values


class TestPayload:
    def test_new_task_uses_configured_org(self, form, sample_fields):
        form.open(sample_fields)
        form.set_value("title", "New")
        payload = form.build_payload()
        assert payload["organizationId"] == "test-org"
        assert payload["title"] == "New"

    def test_edited_task_keeps_its_org(self, form, sample_fields, sample_tasks):
        form.open(sample_fields, sample_tasks[0])
        assert form.build_payload()["organizationId"] == "org-1"


class TestSubmit:
    @pytest.mark.asyncio
    async def test_create(self, form, sample_fields, fake_backend):
        form.open(sample_fields)
        form.set_value("title", "Walk dog")
        form.set_value("duedate", "2024-07-01")
        on_complete = AsyncMock()

        assert await form.submit(on_complete) is True

        body = json.loads(fake_backend.last("InsertTask").content)
        assert body == {
            "title": "Walk dog",
            "owner": "",
            "duedate": "2024-07-01",
            "organizationId": "test-org",
        }
        on_complete.assert_awaited_once()
        # Back to an empty create form
        assert form.is_editing is False
        assert form.values["title"] == ""

    @pytest.mark.asyncio
    async def test_update(self, form, sample_fields, sample_tasks, fake_backend):
        form.open(sample_fields, sample_tasks[1])
        form.set_value("title", "Clean garage")
        on_complete = MagicMock(return_value=None)

        assert await form.submit(on_complete) is True

        request = fake_backend.last("UpdateTask")
        assert request.url.params["id"] == "t2"
        assert request.url.params["organizationId"] == "org-1"
        assert json.loads(request.content)["title"] == "Clean garage"
        on_complete.assert_called_once_with()
        assert fake_backend.count("InsertTask") == 0

    @pytest.mark.asyncio
    async def test_failure_keeps_values(self, form, sample_fields, fake_backend):
        fake_backend.fail["InsertTask"] = 500
        form.open(sample_fields)
        form.set_value("title", "Walk dog")
        on_complete = AsyncMock()

        assert await form.submit(on_complete) is False
        assert form.values["title"] == "Walk dog"
        on_complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stale_submit_discarded(self, sample_fields):
        tokens = RequestTokens()
        client = MagicMock()

        async def insert(payload):
            # A newer submit is issued while this one is in flight
            tokens.issue(SUBMIT_ACTION)

        client.insert_task = AsyncMock(side_effect=insert)
        form = TaskFormController(client, "test-org", tokens=tokens)
        form.open(sample_fields)
        form.set_value("title", "Walk dog")
        on_complete = AsyncMock()

        assert await form.submit(on_complete) is False
        on_complete.assert_not_awaited()
        assert form.values["title"] == "Walk dog"

    @pytest.mark.asyncio
    async def test_transport_error(self, sample_fields):
        client = MagicMock()
        client.insert_task = AsyncMock(side_effect=TaskboardIntegrationError("refused"))
        form = TaskFormController(client, "test-org")
        form.open(sample_fields)
        assert await form.submit() is False
