from __future__ import annotations

import unittest

import orjson

from focusbadger.exchange import build_export, parse_import
from focusbadger.ops import apply_operations
from focusbadger.prompts.template import ASSISTANT_TEMPLATE, render_template


class TestBuildExportContract(unittest.TestCase):
    def test_serializes_projects_ahead_of_tasks(self) -> None:
        bundle = build_export([{"title": "Task"}], ["Alpha"])
        parsed = orjson.loads(bundle.full_snapshot_json)
        self.assertEqual(parsed[0], {"type": "project", "name": "Alpha"})
        self.assertEqual(parsed[1], {"title": "Task"})
        self.assertIn("# FocusBadger Assistant Briefing", bundle.briefing_text)
        self.assertIn('"Task"', bundle.open_tasks_json)

    def test_omits_completed_tasks_from_open_view(self) -> None:
        bundle = build_export([{"title": "Open", "done": False}, {"title": "Closed", "done": True}], [])
        self.assertEqual(len(orjson.loads(bundle.full_snapshot_json)), 2)
        open_records = orjson.loads(bundle.open_tasks_json)
        self.assertEqual(open_records, [{"title": "Open", "done": False}])
        self.assertNotIn("Closed", bundle.briefing_text)

    def test_briefing_has_no_unresolved_placeholders(self) -> None:
        bundle = build_export([{"title": "Open"}], ["P"])
        self.assertNotIn("{{", bundle.briefing_text)
        self.assertIn(bundle.open_tasks_json, bundle.briefing_text)


class TestTemplateContract(unittest.TestCase):
    def test_unresolved_placeholders_are_left_verbatim(self) -> None:
        self.assertEqual(render_template("a {{x}} b {{ y }}", {"x": 1}), "a 1 b {{ y }}")

    def test_template_declares_expected_keys(self) -> None:
        for key in ("context", "goals", "expectedOutput", "data"):
            self.assertIn("{{" + key + "}}", ASSISTANT_TEMPLATE)


class TestParseImportContract(unittest.TestCase):
    def test_parses_json_arrays(self) -> None:
        text = orjson.dumps(
            [{"type": "project", "name": "Alpha"}, {"title": "Task", "project": "Alpha"}],
            option=orjson.OPT_INDENT_2,
        ).decode()
        result = parse_import(text)
        self.assertTrue(result.ok)
        self.assertEqual(result.origin, "records")
        self.assertEqual(result.projects, ["Alpha"])
        self.assertEqual(len(result.tasks), 1)

    def test_parses_jsonl_text(self) -> None:
        result = parse_import('{"type":"project","name":"Alpha"}\n{"title":"Task"}\n')
        self.assertTrue(result.ok)
        self.assertEqual(result.projects, ["Alpha"])
        self.assertEqual(result.tasks, [{"title": "Task"}])

    def test_single_object_is_one_record(self) -> None:
        result = parse_import('{"title": "Solo"}')
        self.assertTrue(result.ok)
        self.assertEqual(result.tasks, [{"title": "Solo"}])

    def test_rejects_tasks_missing_titles(self) -> None:
        result = parse_import('[{"title": "   "}]')
        self.assertFalse(result.ok)
        self.assertEqual(result.error, "Each task needs a non-empty title.")

    def test_empty_input(self) -> None:
        for raw in ("", "   \n", None):
            result = parse_import(raw)
            self.assertFalse(result.ok)
            self.assertEqual(result.error, "Paste JSON before saving.")

    def test_malformed_json_reports_jsonl_error(self) -> None:
        result = parse_import("{ invalid")
        self.assertFalse(result.ok)
        self.assertTrue(result.error.startswith("Line 1: "))

    def test_requires_objects(self) -> None:
        result = parse_import("[1, 2, 3]")
        self.assertFalse(result.ok)
        self.assertEqual(result.error, "Every record must be a JSON object.")

    def test_bracketed_jsonl_falls_back_to_line_parsing(self) -> None:
        result = parse_import('{"type":"project","name":"A"}\n{"title":"T","project":"A"}')
        self.assertTrue(result.ok)
        self.assertEqual(result.projects, ["A"])
        self.assertEqual(result.tasks, [{"title": "T", "project": "A"}])

    def test_applies_operation_payloads_against_current_state(self) -> None:
        base_tasks = [
            {
                "id": "abc",
                "title": "Existing",
                "project": "Personal",
                "importance": 3,
                "urgency": 2,
                "effort": 4,
                "done": False,
                "created": "2024-01-01T00:00:00.000Z",
                "updated": "2024-01-01T00:00:00.000Z",
            }
        ]
        payload = {
            "operations": [
                {"add_project": {"data": {"name": "Marketing"}}},
                {"update_task_fields": {"data": {"id": "abc", "set": {"notes": "Follow up", "importance": 4}}}},
                {"mark_complete": {"data": {"id": "abc", "completed_at": "2024-02-01T00:00:00.000Z"}}},
                {
                    "add_task": {
                        "data": {
                            "title": "Warm beef for tacos",
                            "project": "Personal",
                            "importance": 4,
                            "urgency": 4,
                            "effort": 3,
                        }
                    }
                },
            ]
        }

        result = parse_import(
            orjson.dumps(payload).decode(),
            base_tasks=base_tasks,
            base_projects=["Personal"],
            now="2024-02-01T12:00:00Z",
        )

        self.assertTrue(result.ok, result.error)
        self.assertEqual(result.origin, "operations")
        self.assertEqual(result.projects, ["Marketing", "Personal"])
        self.assertEqual(len(result.tasks), 2)
        updated, new = result.tasks
        self.assertEqual(updated["notes"], "Follow up")
        self.assertEqual(updated["importance"], 4)
        self.assertTrue(updated["done"])
        self.assertEqual(updated["updated"], "2024-02-01T00:00:00.000Z")
        self.assertEqual(new["title"], "Warm beef for tacos")
        self.assertEqual(new["project"], "Personal")
        self.assertEqual(new["created"], "2024-02-01T12:00:00.000Z")
        self.assertEqual(new["updated"], "2024-02-01T12:00:00.000Z")
        self.assertEqual(base_tasks[0]["updated"], "2024-01-01T00:00:00.000Z")

    def test_wrapped_operation_batch_matches_applier(self) -> None:
        batch = {"operations": [{"add_task": {"data": {"id": "x", "title": "  "}}}]}
        result = parse_import("[" + orjson.dumps(batch).decode() + "]")
        direct = apply_operations(batch)
        self.assertFalse(result.ok)
        self.assertEqual(result.origin, "operations")
        self.assertEqual(result.error, "Operation 1 (add_task): title is required.")
        self.assertEqual(result.error, direct.error)


if __name__ == "__main__":
    unittest.main(verbosity=2)
