"""Unit tests for taskboard.controllers.task_table — table derivation and view state."""

from unittest.mock import MagicMock

import pytest

from taskboard.controllers.task_table import (
    ACTION_COLUMN_MIN_WIDTH,
    DATA_COLUMN_MIN_WIDTH,
    DELETE_ACTION,
    EDIT_ACTION,
    SortSpec,
    TaskTableController,
    compare_values,
    derive_columns,
    derive_table_view,
    filter_tasks,
    paginate,
    reorder_columns,
    search_text,
    sort_tasks,
    total_pages,
)
from taskboard.records.field import FieldDescriptor


def _tasks(n: int):
    return [{"_id": f"t{i}", "title": f"Task {i:02d}"} for i in range(n)]


class TestColumns:
    def test_one_column_per_field_plus_actions(self, sample_fields):
        cols = derive_columns(sample_fields, [f.name for f in sample_fields])
        assert [c.key for c in cols] == ["title", "owner", "duedate", EDIT_ACTION, DELETE_ACTION]
        assert [c.name for c in cols] == ["Title", "Owner", "Due Date", "Edit", "Delete"]

    def test_min_widths(self, sample_fields):
        cols = derive_columns(sample_fields, ["title"])
        assert cols[0].min_width == DATA_COLUMN_MIN_WIDTH == 120
        assert cols[-1].min_width == ACTION_COLUMN_MIN_WIDTH == 70
        assert cols[-1].is_action

    def test_column_order_respected(self, sample_fields):
        cols = derive_columns(sample_fields, ["duedate", "title", "owner"])
        assert [c.field_name for c in cols if not c.is_action] == ["duedate", "title", "owner"]

    def test_unknown_names_skipped(self, sample_fields):
        cols = derive_columns(sample_fields, ["title", "gone"])
        assert [c.field_name for c in cols if not c.is_action] == ["title"]

    def test_sorted_flag(self, sample_fields):
        cols = derive_columns(sample_fields, ["title", "owner"], SortSpec(column="owner", descending=True))
        assert cols[0].is_sorted is False
        assert cols[1].is_sorted is True
        assert cols[1].is_sorted_descending is True

    def test_reorder_columns_example(self):
        assert reorder_columns(["a", "b", "c"], "c", "a") == ["c", "a", "b"]

    def test_reorder_columns_noop_copy(self):
        order = ["a", "b"]
        result = reorder_columns(order, "a", "missing")
        assert result == order
        assert result is not order


class TestSearch:
    def test_milk_example(self):
        tasks = [{"title": "Buy milk"}, {"title": "Clean house"}]
        assert filter_tasks(tasks, "milk") == [{"title": "Buy milk"}]

    def test_case_insensitive(self):
        assert len(filter_tasks([{"title": "Buy MILK"}], "Milk")) == 1

    def test_matches_any_value(self, sample_tasks):
        assert [t["_id"] for t in filter_tasks(sample_tasks, "bob@")] == ["t2"]

    def test_match_can_span_values(self):
        assert filter_tasks([{"a": "foo", "b": "bar"}], "foo bar")

    def test_empty_term_matches_all(self, sample_tasks):
        assert filter_tasks(sample_tasks, "") == sample_tasks

    def test_search_text_handles_non_strings(self):
        assert search_text({"a": None, "b": 3, "c": True, "d": ["x", "y"]}) == " 3 true x,y"

    def test_no_match_gives_one_empty_page(self, sample_tasks, sample_fields):
        view = derive_table_view(sample_tasks, sample_fields, ["title"], search_term="zzz")
        assert view.rows == []
        assert view.total_pages == 1
        assert view.current_page == 1


class TestSort:
    def test_ascending_and_descending(self, sample_tasks):
        asc = sort_tasks(sample_tasks, SortSpec(column="duedate"))
        desc = sort_tasks(sample_tasks, SortSpec(column="duedate", descending=True))
        assert [t["_id"] for t in asc] == ["t2", "t3", "t1"]
        assert [t["_id"] for t in desc] == ["t1", "t3", "t2"]

    def test_locale_aware_strings(self, sample_tasks):
        # Accented initial sorts as its base letter
        ordered = sort_tasks(sample_tasks, SortSpec(column="title"))
        assert [t["title"] for t in ordered] == ["Buy milk", "Clean house", "Éclair recipe"]

    def test_case_insensitive_strings(self):
        tasks = [{"t": "banana"}, {"t": "Apple"}, {"t": "cherry"}]
        assert [x["t"] for x in sort_tasks(tasks, SortSpec(column="t"))] == ["Apple", "banana", "cherry"]

    def test_sort_is_stable_and_idempotent(self):
        tasks = [{"k": "b", "i": 0}, {"k": "a", "i": 1}, {"k": "b", "i": 2}, {"k": "a", "i": 3}]
        spec = SortSpec(column="k")
        once = sort_tasks(tasks, spec)
        twice = sort_tasks(once, spec)
        assert once == twice
        assert [t["i"] for t in once] == [1, 3, 0, 2]

    def test_no_column_keeps_order(self, sample_tasks):
        assert sort_tasks(sample_tasks, SortSpec()) == sample_tasks

    def test_missing_values_sort_last(self):
        tasks = [{"t": "b"}, {}, {"t": "a"}, {"t": None}, {"t": "c"}]
        asc = sort_tasks(tasks, SortSpec(column="t"))
        desc = sort_tasks(tasks, SortSpec(column="t", descending=True))
        assert [x.get("t") for x in asc] == ["a", "b", "c", None, None]
        assert [x.get("t") for x in desc] == ["c", "b", "a", None, None]
        # Missing rows keep their relative order
        assert asc[3] is tasks[1]
        assert asc[4] is tasks[3]

    def test_missing_values_on_newly_added_field(self, sample_tasks):
        tasks = [dict(t) for t in sample_tasks]
        tasks[0]["priority"] = "low"
        tasks[2]["priority"] = "high"
        ordered = sort_tasks(tasks, SortSpec(column="priority"))
        assert [t["_id"] for t in ordered] == ["t3", "t1", "t2"]

    def test_mixed_types_order_is_total(self):
        tasks = [{"k": "b"}, {"k": 2}, {"k": "a"}, {"k": 1}]
        ordered = sort_tasks(tasks, SortSpec(column="k"))
        assert [x["k"] for x in ordered] == [1, 2, "a", "b"]

    def test_compare_values(self):
        assert compare_values(1, 2) == -1
        assert compare_values("b", "a") == 1
        assert compare_values("x", "x") == 0
        assert compare_values(1, "a") == -1
        assert compare_values("a", 1) == 1
        assert compare_values(None, "a") == 1
        assert compare_values("a", None) == -1
        assert compare_values(None, None) == 0

    def test_toggle(self):
        spec = SortSpec().toggled("title")
        assert spec == SortSpec(column="title", descending=False)
        spec = spec.toggled("title")
        assert spec.descending is True
        assert spec.toggled("owner") == SortSpec(column="owner", descending=False)

    def test_double_toggle_restores_ascending(self, sample_tasks):
        table = TaskTableController()
        table.sort_by("title")
        first = sort_tasks(sample_tasks, table.sort)
        table.sort_by("title")
        table.sort_by("title")
        assert sort_tasks(sample_tasks, table.sort) == first


class TestPagination:
    @pytest.mark.parametrize("n,expected", [(0, 1), (1, 1), (5, 1), (6, 2), (10, 2), (11, 3)])
    def test_total_pages(self, n, expected):
        assert total_pages(n, 5) == expected

    @pytest.mark.parametrize("n", [0, 1, 4, 5, 6, 12, 23])
    def test_pages_cover_rows_exactly_once(self, n):
        rows = _tasks(n)
        pages = total_pages(len(rows), 5)
        concatenated = [r for p in range(1, pages + 1) for r in paginate(rows, p, 5)]
        assert concatenated == rows

    def test_page_clamped(self, sample_fields):
        view = derive_table_view(_tasks(12), sample_fields, ["title"], current_page=9)
        assert view.current_page == 3
        assert len(view.rows) == 2
        view = derive_table_view(_tasks(12), sample_fields, ["title"], current_page=0)
        assert view.current_page == 1

    def test_view_metadata(self, sample_fields):
        view = derive_table_view(_tasks(7), sample_fields, ["title"], current_page=1)
        assert view.total_rows == 7
        assert view.page_label == "Page 1 of 2"
        assert view.has_previous is False
        assert view.has_next is True

    def test_filter_then_sort_then_page(self, sample_fields):
        tasks = _tasks(12)
        view = derive_table_view(
            tasks, sample_fields, ["title"],
            sort=SortSpec(column="title", descending=True),
            search_term="Task 0",
            current_page=2,
        )
        # "Task 0" matches Task 00..09; descending → 09..00; page 2 holds 04..00
        assert [r["title"] for r in view.rows] == ["Task 04", "Task 03", "Task 02", "Task 01", "Task 00"]


class TestTaskTableController:
    def test_set_fields_resets_column_order(self, sample_fields):
        table = TaskTableController()
        table.set_fields(sample_fields)
        table.reorder_columns("duedate", "title")
        assert table.column_order == ["duedate", "title", "owner"]
        table.set_fields(sample_fields)
        assert table.column_order == ["title", "owner", "duedate"]

    def test_reorder_reports_change(self, sample_fields):
        table = TaskTableController()
        table.set_fields(sample_fields)
        assert table.reorder_columns("title", "title") is False
        assert table.reorder_columns("owner", "title") is True

    def test_next_and_previous_stop_at_bounds(self, sample_fields):
        table = TaskTableController()
        table.set_fields(sample_fields)
        table.view(_tasks(11))
        table.previous_page()
        assert table.current_page == 1
        table.next_page()
        table.next_page()
        table.next_page()
        assert table.current_page == 3

    def test_search_does_not_reset_page_but_view_clamps(self, sample_fields):
        table = TaskTableController()
        table.set_fields(sample_fields)
        table.view(_tasks(12))
        table.next_page()
        table.next_page()
        table.search("Task 1")
        assert table.current_page == 3
        view = table.view(_tasks(12))
        assert view.current_page == 1
        assert table.current_page == 1

    def test_page_size(self, sample_fields):
        table = TaskTableController(page_size=10)
        table.set_fields(sample_fields)
        assert len(table.view(_tasks(12)).rows) == 10

    def test_invoke_action_passes_full_row(self, sample_tasks):
        on_edit, on_delete = MagicMock(), MagicMock()
        table = TaskTableController(on_edit=on_edit, on_delete=on_delete)
        table.invoke_action(EDIT_ACTION, sample_tasks[0])
        table.invoke_action(DELETE_ACTION, sample_tasks[1])
        on_edit.assert_called_once_with(sample_tasks[0])
        on_delete.assert_called_once_with(sample_tasks[1])

    def test_invoke_action_without_callback(self, sample_tasks):
        assert TaskTableController().invoke_action(EDIT_ACTION, sample_tasks[0]) is None

    def test_unknown_action(self, sample_tasks):
        with pytest.raises(ValueError, match="Unknown row action"):
            TaskTableController().invoke_action("archive", sample_tasks[0])

    def test_rows_are_full_tasks(self, sample_tasks):
        fields = [FieldDescriptor(name="title", label="Title")]
        table = TaskTableController()
        table.set_fields(fields)
        row = table.view(sample_tasks).rows[0]
        assert row["_id"] == "t1"
        assert row["organizationId"] == "org-1"
