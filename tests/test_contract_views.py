from __future__ import annotations

import unittest

from focusbadger.errors import ValidationError
from focusbadger.views import (
    ALL_PROJECTS,
    MATRIX_SORT_LOW_EFFORT,
    SORT_DUE_DATE,
    SORT_SCORE,
    SORT_TITLE,
    UNASSIGNED_LABEL,
    TaskItem,
    build_matrix,
    build_project_filter_options,
    move_to_quadrant,
    project_filter_key,
    should_include_task,
    sort_matrix_entries,
    sort_project_items,
)

NOW = "2024-01-01T08:00:00Z"


def _wrap(tasks: list) -> list:
    return [TaskItem(i, t) for i, t in enumerate(tasks)]


def _titles(items: list) -> list:
    return [i.task.get("title") for i in items]


class TestProjectFiltersContract(unittest.TestCase):
    def test_normalizes_project_names(self) -> None:
        self.assertEqual(project_filter_key({"project": "Work"}), "Work")
        self.assertEqual(project_filter_key({"project": "  Focus  "}), "Focus")
        self.assertEqual(project_filter_key({"project": ""}), UNASSIGNED_LABEL)
        self.assertEqual(project_filter_key({}), UNASSIGNED_LABEL)

    def test_filter_matching(self) -> None:
        self.assertTrue(should_include_task({"project": "Work"}, []))
        self.assertTrue(should_include_task({"project": "Work"}, None))
        self.assertTrue(should_include_task({"project": "Work"}, [ALL_PROJECTS]))
        self.assertTrue(should_include_task({"project": "Work"}, ["Work"]))
        self.assertFalse(should_include_task({"project": "Home"}, ["Work"]))
        self.assertTrue(should_include_task({}, [UNASSIGNED_LABEL]))
        self.assertTrue(should_include_task({"project": ""}, [UNASSIGNED_LABEL]))

    def test_filter_options(self) -> None:
        options = build_project_filter_options(["Alpha", "Beta", "Alpha"])
        self.assertEqual(options, [ALL_PROJECTS, "Alpha", "Beta", UNASSIGNED_LABEL])
        self.assertEqual(build_project_filter_options([UNASSIGNED_LABEL]), [ALL_PROJECTS, UNASSIGNED_LABEL])


class TestListSortingContract(unittest.TestCase):
    SAMPLE = [
        {"title": "Write docs", "importance": 3, "urgency": 2, "effort": 1},
        {"title": "Review PR", "importance": 4, "urgency": 4, "effort": 1},
        {"title": "Plan sprint", "importance": 4, "urgency": 1, "effort": 3},
        {"title": "Archive", "done": True, "importance": 5, "urgency": 5, "effort": 1},
    ]

    def test_open_tasks_before_done_and_score_descending(self) -> None:
        ordered = sort_project_items(_wrap(self.SAMPLE), SORT_SCORE)
        self.assertEqual(_titles(ordered), ["Review PR", "Write docs", "Plan sprint", "Archive"])

    def test_due_date_ascending_with_missing_last(self) -> None:
        items = _wrap([{"title": "B", "due": "2025-01-01"}, {"title": "A", "due": "2024-12-01"}, {"title": "C"}])
        self.assertEqual(_titles(sort_project_items(items, SORT_DUE_DATE)), ["A", "B", "C"])

    def test_title_mode_is_case_insensitive(self) -> None:
        items = _wrap([{"title": "Beta"}, {"title": "alpha"}])
        self.assertEqual(_titles(sort_project_items(items, SORT_TITLE)), ["alpha", "Beta"])

    def test_ties_keep_original_order(self) -> None:
        items = _wrap([{"title": "Same"}, {"title": "same"}])
        self.assertEqual([i.index for i in sort_project_items(items)], [0, 1])


class TestMatrixContract(unittest.TestCase):
    def test_sorts_by_score_by_default(self) -> None:
        items = [
            TaskItem(0, {"title": "Charlie", "importance": 1, "urgency": 3, "effort": 1}),
            TaskItem(1, {"title": "Alpha", "importance": 2, "urgency": 1, "effort": 1}),
            TaskItem(2, {"title": "Bravo", "importance": 3, "urgency": 0, "effort": 3}),
        ]
        self.assertEqual(_titles(sort_matrix_entries(items)), ["Alpha", "Charlie", "Bravo"])

    def test_low_effort_mode_puts_unknown_effort_last(self) -> None:
        items = _wrap(
            [
                {"title": "Heavy", "effort": 7, "importance": 4, "urgency": 4},
                {"title": "Light", "effort": 2, "importance": 1, "urgency": 1},
                {"title": "Focus", "effort": 4, "importance": 4, "urgency": 2},
                {"title": "Unknown", "importance": 5, "urgency": 5},
            ]
        )
        ordered = sort_matrix_entries(items, MATRIX_SORT_LOW_EFFORT)
        self.assertEqual(_titles(ordered), ["Light", "Focus", "Heavy", "Unknown"])

    def test_groups_open_tasks_into_quadrants(self) -> None:
        tasks = [
            {"title": "Fire", "importance": 5, "urgency": 5},
            {"title": "Plan", "importance": 4, "urgency": 1},
            {"title": "Ping", "importance": 1, "urgency": 4},
            {"title": "Maybe"},
            {"title": "Due today", "importance": 4, "due": "2024-01-01"},
            {"title": "Finished", "importance": 5, "urgency": 5, "done": True},
            {"title": "Elsewhere", "importance": 5, "urgency": 5, "project": "Side"},
        ]
        matrix = build_matrix(tasks, [ALL_PROJECTS], now=NOW, tz="UTC")
        self.assertEqual(set(_titles(matrix["today"])), {"Fire", "Due today", "Elsewhere"})
        self.assertEqual(_titles(matrix["schedule"]), ["Plan"])
        self.assertEqual(_titles(matrix["delegate"]), ["Ping"])
        self.assertEqual(_titles(matrix["consider"]), ["Maybe"])

        filtered = build_matrix(tasks, [UNASSIGNED_LABEL], now=NOW, tz="UTC")
        self.assertNotIn("Elsewhere", _titles(filtered["today"]))
        self.assertEqual(filtered["today"][0].index, 0)


class TestMoveToQuadrantContract(unittest.TestCase):
    def test_applies_preset_and_stamps_updated(self) -> None:
        task = {"id": "1", "title": "T", "importance": 1, "urgency": 1, "updated": "old"}
        moved = move_to_quadrant(task, "schedule", "2024-02-01T12:00:00Z")
        self.assertEqual((moved["importance"], moved["urgency"]), (4, 2))
        self.assertEqual(moved["updated"], "2024-02-01T12:00:00.000Z")
        self.assertEqual(task["importance"], 1)

    def test_noop_move_keeps_updated(self) -> None:
        task = {"id": "1", "title": "T", "importance": 4, "urgency": 4, "updated": "old"}
        self.assertEqual(move_to_quadrant(task, "today", "2024-02-01T12:00:00Z"), task)

    def test_unknown_quadrant(self) -> None:
        with self.assertRaises(ValidationError):
            move_to_quadrant({"title": "T"}, "someday")


if __name__ == "__main__":
    unittest.main(verbosity=2)
