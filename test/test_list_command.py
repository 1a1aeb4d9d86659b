"""Tests for the list and queries CLI commands."""

from __future__ import annotations

import json
import sqlite3
import sys
import tempfile
import unittest
from pathlib import Path

import click
from click.testing import CliRunner

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from AdminQuery.cli.ui import build_params, cli

_CONFIG_TEMPLATE = """
log:
  level: INFO
  to_file: false
  dir: log

database:
  path: {db_path}

output:
  base_dir: {output_dir}
  formats: [json]
  link_path: /admin/

queries:
  tasks:
    table: tasks
    per_page: 2
    columns:
      - {{name: title, label: Title}}
      - due_date
    search:
      - name: due_date_from
        coerce: to_date
        where: "due_date >= ?"
    filters:
      - name: status
        scopes:
          completed: "status = 'completed'"
          pending: "status = 'pending'"
    sorting:
      scopes:
        by_due_date: due_date
        by_title: title
      default_scope: by_due_date
    labels:
      by_due_date: Due
"""


class TestListCommand(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.db_path = root / "admin.db"
        self.output_dir = root / "output"
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute("CREATE TABLE tasks (title TEXT, status TEXT, due_date TEXT)")
            conn.executemany(
                "INSERT INTO tasks VALUES (?, ?, ?)",
                [
                    ("Write report", "pending", "2020-01-10"),
                    ("Review budget", "completed", "2020-01-05"),
                    ("Plan offsite", "pending", "2020-02-01"),
                    ("Book venue", "pending", "2020-01-20"),
                ],
            )
            conn.commit()
        finally:
            conn.close()
        self.config_path = root / "config.yml"
        self.config_path.write_text(
            _CONFIG_TEMPLATE.format(db_path=self.db_path.as_posix(), output_dir=self.output_dir.as_posix()),
            encoding="utf-8",
        )
        self.runner = CliRunner()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _invoke(self, *args: str):
        return self.runner.invoke(cli, ["--config", str(self.config_path), *args])

    def _json_payload(self) -> list[dict]:
        files = list((self.output_dir / "json").glob("list_*.json"))
        self.assertEqual(len(files), 1)
        return json.loads(files[0].read_text(encoding="utf-8"))

    def test_list_writes_filtered_page(self) -> None:
        result = self._invoke(
            "list",
            "tasks",
            "--qs",
            "query[status]=pending&page=2",
            "-p",
            "sort_order=desc",
        )

        self.assertEqual(result.exit_code, 0, result.output)
        payload = self._json_payload()[0]
        self.assertEqual(payload["name"], "tasks")
        self.assertEqual(payload["total"], 3)
        self.assertEqual([row["title"] for row in payload["rows"]], ["Write report"])
        self.assertEqual(payload["state"]["scopes"], ["pending", "by_due_date"])
        sort_links = payload["state"]["sorting"]
        self.assertEqual(sort_links[0]["label"], "Due")
        self.assertEqual(sort_links[0]["direction"], "desc")
        self.assertEqual(
            sort_links[0]["href"],
            "/admin/tasks?query%5Bstatus%5D=pending&sort_order=asc&sorting=by_due_date",
        )
        self.assertEqual(payload["columns"], [{"name": "title", "label": "Title"}, {"name": "due_date", "label": "Due date"}])

    def test_list_ignores_bad_params(self) -> None:
        result = self._invoke("list", "tasks", "-p", "query[due_date_from]=someday", "-p", "sorting=by_colour")

        self.assertEqual(result.exit_code, 0, result.output)
        payload = self._json_payload()[0]
        self.assertEqual([row["title"] for row in payload["rows"]], ["Review budget", "Write report"])
        self.assertEqual(payload["state"]["search"], {})

    def test_unknown_query_aborts(self) -> None:
        result = self._invoke("list", "reports")

        self.assertNotEqual(result.exit_code, 0)
        self.assertFalse((self.output_dir / "json").exists())

    def test_bad_param_pair_is_rejected(self) -> None:
        result = self._invoke("list", "tasks", "-p", "sorting")

        self.assertEqual(result.exit_code, 2)

    def test_queries_lists_declarations(self) -> None:
        result = self._invoke("queries")

        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.output.splitlines()
        self.assertEqual(lines[0], "tasks (table tasks)")
        self.assertIn("  search  due_date_from [date]", lines)
        self.assertIn("  filter  status: completed, pending", lines)
        self.assertIn("  sorting by_due_date, by_title (default by_due_date asc)", lines)
        self.assertIn("  columns Title, Due date", lines)


class TestBuildParams(unittest.TestCase):
    def test_pairs_follow_query_string(self) -> None:
        params = build_params("?query[status]=pending&page=3", ("page=1", "query[title_matches]=a b"))

        self.assertEqual(
            params,
            {"query": {"status": "pending", "title_matches": "a b"}, "page": "1"},
        )

    def test_missing_separator(self) -> None:
        with self.assertRaises(click.BadParameter):
            build_params("", ("sorting",))


if __name__ == "__main__":
    unittest.main()
