"""Tests for SQLite relations driven by list queries."""

from __future__ import annotations

import sqlite3
import sys
import tempfile
import unittest
from datetime import date
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from AdminQuery.core.pagination import page_number, paginate
from AdminQuery.core.query import ListQuery
from AdminQuery.core.spec import QuerySpecBuilder
from AdminQuery.storage.db import DatabaseManager
from AdminQuery.storage.relation import TableModel, UnknownScopeError, order_scope, sql_value, where_scope

_ROWS = [
    ("Write report", "pending", "2020-01-10", 2),
    ("Review budget", "completed", "2020-01-05", 1),
    ("Plan offsite", "pending", "2020-02-01", 3),
    ("File taxes", "completed", "2020-03-15", 2),
    ("Book venue", "pending", "2020-01-20", 1),
]


def _create_db(path: Path) -> None:
    conn = sqlite3.connect(path)
    try:
        conn.execute("CREATE TABLE tasks (title TEXT, status TEXT, due_date TEXT, priority INTEGER)")
        conn.executemany("INSERT INTO tasks VALUES (?, ?, ?, ?)", _ROWS)
        conn.commit()
    finally:
        conn.close()


_MODEL = TableModel(
    table="tasks",
    scopes={
        "title_matches": where_scope("title LIKE '%' || ? || '%'"),
        "due_date_from": where_scope("due_date >= ?"),
        "completed": where_scope("status = 'completed'"),
        "pending": where_scope("status = 'pending'"),
        "urgent": where_scope("priority = 1"),
        "by_due_date": order_scope("due_date"),
        "by_title": order_scope("title"),
    },
)

_SPEC = (
    QuerySpecBuilder()
    .add_search_field("title_matches")
    .add_search_field("due_date_from", "to_date")
    .add_filter_group("status", ["completed", "pending"])
    .add_filter_group("priority", ["urgent"])
    .set_sorting(["by_due_date", "by_title"])
    .set_ending_scope(paginate(2))
    .build()
)


class TestSqliteRelation(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        db_path = Path(self._tmp.name) / "admin.db"
        _create_db(db_path)
        self.manager = DatabaseManager(db_path)
        self.base = _MODEL.relation(self.manager.get_connection())

    def tearDown(self) -> None:
        self.manager.close()
        self._tmp.cleanup()

    def _titles(self, params: dict) -> list[str]:
        query = ListQuery(params, base=self.base, spec=_SPEC)
        return [row["title"] for row in query.results.all()]

    def test_filter_sort_and_paginate(self) -> None:
        params = {"query": {"status": "pending"}, "sorting": "by_due_date"}

        self.assertEqual(self._titles(params), ["Write report", "Book venue"])
        self.assertEqual(self._titles({**params, "page": "2"}), ["Plan offsite"])
        self.assertEqual(self._titles({**params, "page": "9"}), [])

    def test_descending_sort(self) -> None:
        params = {"sorting": "by_title", "sort_order": "desc"}

        self.assertEqual(self._titles(params), ["Write report", "Review budget"])

    def test_coerced_date_search(self) -> None:
        params = {"query": {"due_date_from": "2020-02-01"}, "sorting": "by_due_date"}

        self.assertEqual(self._titles(params), ["Plan offsite", "File taxes"])

    def test_search_and_filter_combine(self) -> None:
        params = {"query": {"title_matches": "e", "status": "completed"}, "sorting": "by_title"}

        self.assertEqual(self._titles(params), ["File taxes", "Review budget"])

    def test_independent_filters_commute(self) -> None:
        conn = self.manager.get_connection()
        relation = _MODEL.relation(conn)

        first = relation.apply_scope("pending").apply_scope("urgent").order("title").all()
        second = relation.apply_scope("urgent").apply_scope("pending").order("title").all()

        self.assertEqual(first, second)
        self.assertEqual([row["title"] for row in first], ["Book venue"])

    def test_count_ignores_pagination(self) -> None:
        query = ListQuery({"query": {"status": "pending"}, "page": "2"}, base=self.base, spec=_SPEC)

        self.assertEqual(len(query.results.all()), 1)
        self.assertEqual(query.results.count(), 3)

    def test_unknown_scope_propagates(self) -> None:
        spec = QuerySpecBuilder().add_filter_group("state", ["archived"]).build()

        with self.assertRaises(UnknownScopeError):
            ListQuery({"query": {"state": "archived"}}, base=self.base, spec=spec)

    def test_oversized_page_falls_back_to_first_page(self) -> None:
        params = {"query": {"status": "pending"}, "sorting": "by_due_date", "page": "99999999999999999999"}

        self.assertEqual(self._titles(params), ["Write report", "Book venue"])

    def test_out_of_range_integer_is_rejected(self) -> None:
        relation = self.base.apply_scope("urgent")

        with self.assertRaisesRegex(ValueError, "out of SQLite range"):
            relation.where("priority = ?", 2**63)
        self.assertEqual(sql_value(2**63 - 1), 2**63 - 1)

    def test_relation_is_immutable(self) -> None:
        scoped = self.base.apply_scope("completed")

        self.assertEqual(self.base.count(), 5)
        self.assertEqual(scoped.count(), 2)

    def test_where_scope_binds_typed_values(self) -> None:
        rows = self.base.apply_scope("due_date_from", date(2020, 3, 1)).all()

        self.assertEqual([row["title"] for row in rows], ["File taxes"])

    def test_database_is_read_only(self) -> None:
        with self.assertRaises(sqlite3.OperationalError):
            self.manager.get_connection().execute("DELETE FROM tasks")


class TestStorageHelpers(unittest.TestCase):
    def test_invalid_identifiers_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TableModel(table="tasks; DROP TABLE tasks")
        with self.assertRaises(ValueError):
            order_scope("due date")

    def test_missing_database_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                DatabaseManager(Path(tmp) / "missing.db")

    def test_closed_manager(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            db_path = Path(tmp) / "admin.db"
            _create_db(db_path)
            with DatabaseManager(db_path) as manager:
                manager.get_connection()
            with self.assertRaises(RuntimeError):
                manager.get_connection()

    def test_page_number(self) -> None:
        self.assertEqual(page_number(None), 1)
        self.assertEqual(page_number("3"), 3)
        self.assertEqual(page_number("0"), 1)
        self.assertEqual(page_number("two"), 1)
        self.assertEqual(page_number("99999999999999999999", 25), 1)
        self.assertEqual(page_number(str(2**63 // 25), 25), 2**63 // 25)
        self.assertEqual(page_number(str(2**63 // 25 + 2), 25), 1)
        with self.assertRaises(ValueError):
            paginate(0)


if __name__ == "__main__":
    unittest.main()
