"""Tests for scope-chain resolution of list queries."""

from __future__ import annotations

import sys
import unittest
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from AdminQuery.core.pagination import paginate
from AdminQuery.core.query import ListQuery, QueryConfigurationError
from AdminQuery.core.spec import QuerySpecBuilder


@dataclass(frozen=True)
class RecordingHandle:
    """Handle that records every scope applied to it."""

    applied: tuple[tuple[str, tuple[Any, ...]], ...] = ()
    known: frozenset[str] | None = None

    def apply_scope(self, name: str, *args: Any) -> "RecordingHandle":
        if self.known is not None and name not in self.known:
            raise AttributeError(f"no scope {name}")
        return RecordingHandle(self.applied + ((name, args),), self.known)


class MethodHandle:
    """ORM-style handle exposing scopes as methods."""

    def __init__(self, applied: tuple[str, ...] = ()) -> None:
        self.applied = applied

    def completed(self) -> "MethodHandle":
        return MethodHandle(self.applied + ("completed",))


def _tasks_spec(**sorting_options: Any):
    return (
        QuerySpecBuilder()
        .add_search_field("title_matches")
        .add_search_field("due_date_from", "to_date")
        .add_filter_group("status", ["completed", "pending"])
        .set_sorting(["by_due_date", "by_title"], **sorting_options)
        .build()
    )


class TasksQuery(ListQuery):
    spec = _tasks_spec()


class TestListQueryResolution(unittest.TestCase):
    def test_filter_and_sort_from_params(self) -> None:
        query = TasksQuery(
            {"query": {"status": "completed"}, "sorting": "by_due_date", "sort_order": "desc"},
            base=RecordingHandle(),
        )

        self.assertEqual(
            query.results.applied,
            (("completed", ()), ("by_due_date", ("desc",))),
        )
        self.assertEqual(query.filter_group("status").active, "completed")
        self.assertTrue(query.sorting.descending)

    def test_search_value_is_coerced(self) -> None:
        query = TasksQuery({"query": {"due_date_from": "2020-01-15"}}, base=RecordingHandle())

        self.assertEqual(query.results.applied, (("due_date_from", (date(2020, 1, 15),)),))
        self.assertEqual(query.search_value("due_date_from"), date(2020, 1, 15))

    def test_bad_input_is_ignored(self) -> None:
        query = TasksQuery(
            {"query": {"due_date_from": "not-a-date", "status": "archived"}, "sorting": "by_priority"},
            base=RecordingHandle(),
        )

        self.assertEqual(query.results.applied, ())
        self.assertFalse(query.search_field("due_date_from").present)
        self.assertEqual(query.search_field("due_date_from").raw, "not-a-date")
        self.assertIsNone(query.filter_group("status").active)
        self.assertIsNone(query.sorting.active)

    def test_blank_search_values_are_inactive(self) -> None:
        query = TasksQuery({"query": {"title_matches": "   ", "status": ""}}, base=RecordingHandle())

        self.assertEqual(query.results.applied, ())
        self.assertEqual(query.operations, ())

    def test_no_params_returns_base_unchanged(self) -> None:
        base = RecordingHandle()
        query = TasksQuery(None, base=base)

        self.assertIs(query.results, base)

    def test_application_order_ignores_param_order(self) -> None:
        params = {
            "sorting": "by_title",
            "query": {"status": "pending", "due_date_from": "2021-03-01", "title_matches": "report"},
        }
        query = TasksQuery(params, base=RecordingHandle())

        self.assertEqual(
            [name for name, _ in query.results.applied],
            ["title_matches", "due_date_from", "pending", "by_title"],
        )
        self.assertEqual(query.results.applied[-1], ("by_title", ("asc",)))

    def test_default_sorting_applies_without_params(self) -> None:
        spec = _tasks_spec(default_scope="by_due_date", default_direction="desc")
        query = ListQuery({}, base=RecordingHandle(), spec=spec)

        self.assertEqual(query.sorting.active, "by_due_date")
        self.assertEqual(query.results.applied, (("by_due_date", ("desc",)),))

    def test_invalid_sort_order_falls_back_to_default(self) -> None:
        query = TasksQuery({"sorting": "by_title", "sort_order": "sideways"}, base=RecordingHandle())

        self.assertTrue(query.sorting.ascending)
        self.assertEqual(query.results.applied, (("by_title", ("asc",)),))

    def test_nested_values_are_ignored(self) -> None:
        query = TasksQuery(
            {"query": {"status": ["completed"], "title_matches": {"x": "y"}}, "sorting": ["by_title"]},
            base=RecordingHandle(),
        )

        self.assertEqual(query.results.applied, ())

    def test_starting_and_ending_scopes(self) -> None:
        seen: list[ListQuery] = []

        def ending(handle: RecordingHandle, query: ListQuery) -> RecordingHandle:
            seen.append(query)
            return handle.apply_scope("paginate", query.params.get("page", "1"))

        spec = (
            QuerySpecBuilder()
            .set_starting_scope(lambda: RecordingHandle((("all", ()),)))
            .add_filter_group("status", ["completed", "pending"])
            .set_ending_scope(ending)
            .build()
        )
        query = ListQuery({"query": {"status": "pending"}, "page": "3"}, spec=spec)

        self.assertEqual(
            query.results.applied,
            (("all", ()), ("pending", ()), ("paginate", ("3",))),
        )
        self.assertIs(seen[0], query)

    def test_oversized_page_resolves_to_first_page(self) -> None:
        spec = QuerySpecBuilder().set_ending_scope(paginate(25)).build()

        query = ListQuery({"page": "99999999999999999999"}, base=RecordingHandle(), spec=spec)

        self.assertEqual(query.results.applied, (("paginate", (1, 25)),))

    def test_base_override_wins_over_starting_scope(self) -> None:
        spec = QuerySpecBuilder().set_starting_scope(lambda: RecordingHandle((("all", ()),))).build()
        base = RecordingHandle((("archived", ()),))

        query = ListQuery({}, base=base, spec=spec)

        self.assertIs(query.results, base)

    def test_missing_base_raises_configuration_error(self) -> None:
        with self.assertRaises(QueryConfigurationError):
            TasksQuery({"query": {"status": "completed"}})

    def test_missing_spec_raises_configuration_error(self) -> None:
        with self.assertRaises(QueryConfigurationError):
            ListQuery({}, base=RecordingHandle())

    def test_unsupported_coercion_kind_raises_configuration_error(self) -> None:
        spec = QuerySpecBuilder().add_search_field("colour", "colour").build()

        with self.assertRaisesRegex(QueryConfigurationError, "colour"):
            ListQuery({}, base=RecordingHandle(), spec=spec)

    def test_handle_errors_propagate(self) -> None:
        base = RecordingHandle(known=frozenset({"pending"}))

        with self.assertRaises(AttributeError):
            TasksQuery({"query": {"status": "completed"}}, base=base)

    def test_method_handles_dispatch_by_attribute(self) -> None:
        query = TasksQuery({"query": {"status": "completed"}}, base=MethodHandle())

        self.assertEqual(query.results.applied, ("completed",))

    def test_resolution_is_repeatable(self) -> None:
        params = {"query": {"due_date_from": "2020-02-30", "title_matches": "x"}, "sorting": "by_title"}

        first = TasksQuery(params, base=RecordingHandle())
        second = TasksQuery(params, base=RecordingHandle())

        self.assertEqual(first.results, second.results)
        self.assertEqual(first.search_fields, second.search_fields)

    def test_params_are_copied(self) -> None:
        params = {"query": {"status": "completed"}}
        query = TasksQuery(params, base=RecordingHandle())

        params["query"]["status"] = "pending"
        query.params["query"]["status"] = "pending"

        self.assertEqual(query.params, {"query": {"status": "completed"}})

    def test_for_spec_creates_named_subclass(self) -> None:
        query_cls = ListQuery.for_spec(_tasks_spec(), name="ReportsQuery")

        self.assertTrue(issubclass(query_cls, ListQuery))
        self.assertEqual(query_cls.__name__, "ReportsQuery")
        self.assertIsNotNone(query_cls({}, base=RecordingHandle()).sorting)

    def test_unknown_names_raise_key_error(self) -> None:
        query = TasksQuery({}, base=RecordingHandle())

        with self.assertRaises(KeyError):
            query.filter_group("priority")
        with self.assertRaises(KeyError):
            query.search_field("priority")


if __name__ == "__main__":
    unittest.main()
