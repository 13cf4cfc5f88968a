"""Read-side helpers: project filters, list sorting and the priority matrix.

Nothing here mutates caller data; `move_to_quadrant` returns a new task.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .errors import ValidationError
from .model import Task
from .ops.fields import FIELD_RULES, apply_field_change, check_field
from .ops.apply import clone_task
from .priority import is_important, is_number, is_urgent, score
from .projects import fold_name
from .util.clock import NowSource, parse_timestamp, timestamp_factory

ALL_PROJECTS = "__all__"
UNASSIGNED_LABEL = "Unassigned"

SORT_SCORE = "score"
SORT_DUE_DATE = "due-date"
SORT_TITLE = "title"
SORT_MODES = (SORT_SCORE, SORT_DUE_DATE, SORT_TITLE)

MATRIX_SORT_SCORE = "score"
MATRIX_SORT_LOW_EFFORT = "low-effort"
MATRIX_SORT_MODES = (MATRIX_SORT_SCORE, MATRIX_SORT_LOW_EFFORT)

QUADRANT_TODAY = "today"
QUADRANT_SCHEDULE = "schedule"
QUADRANT_DELEGATE = "delegate"
QUADRANT_CONSIDER = "consider"
QUADRANTS = (QUADRANT_TODAY, QUADRANT_SCHEDULE, QUADRANT_DELEGATE, QUADRANT_CONSIDER)

# (importance, urgency) written when a task is dropped into a quadrant.
QUADRANT_PRESETS: Dict[str, Dict[str, int]] = {
    QUADRANT_TODAY: {"importance": 4, "urgency": 4},
    QUADRANT_SCHEDULE: {"importance": 4, "urgency": 2},
    QUADRANT_DELEGATE: {"importance": 1, "urgency": 4},
    QUADRANT_CONSIDER: {"importance": 1, "urgency": 1},
}


@dataclass(frozen=True)
class TaskItem:
    """A task paired with its position in the workspace task list."""

    index: int
    task: Task


def items_from(tasks: Iterable[Task]) -> List[TaskItem]:
    return [TaskItem(i, t) for i, t in enumerate(tasks)]


# --- project filters ----------------------------------------------------------


def project_filter_key(task: Optional[Mapping[str, Any]]) -> str:
    name = task.get("project") if task else None
    if not isinstance(name, str):
        return UNASSIGNED_LABEL
    return name.strip() or UNASSIGNED_LABEL


def should_include_task(task: Optional[Mapping[str, Any]], filters: Optional[Sequence[str]] = None) -> bool:
    if not filters or ALL_PROJECTS in filters:
        return True
    return project_filter_key(task) in filters


def build_project_filter_options(projects: Iterable[str] = ()) -> List[str]:
    options = [ALL_PROJECTS]
    seen = set()
    for name in projects:
        if name and name not in seen:
            options.append(name)
            seen.add(name)
    if UNASSIGNED_LABEL not in seen:
        options.append(UNASSIGNED_LABEL)
    return options


# --- list sorting -------------------------------------------------------------


def _due_key(task: Mapping[str, Any]) -> float:
    due = task.get("due")
    if not due or not isinstance(due, str):
        return math.inf
    try:
        return parse_timestamp(due).timestamp()
    except ValueError:
        return math.inf


def _title_key(task: Mapping[str, Any]) -> str:
    title = task.get("title")
    return fold_name(title) if isinstance(title, str) else ""


def sort_project_items(items: Iterable[TaskItem], mode: Optional[str] = SORT_SCORE) -> List[TaskItem]:
    """Open tasks first, then by `mode`, then score desc, title, original index."""
    mode = mode or SORT_SCORE

    def key(item: TaskItem):
        task = item.task or {}
        if mode == SORT_DUE_DATE:
            primary: Any = _due_key(task)
        elif mode == SORT_TITLE:
            primary = _title_key(task)
        else:
            primary = -score(task)
        return (bool(task.get("done")), primary, -score(task), _title_key(task), item.index)

    return sorted(items, key=key)


# --- priority matrix ----------------------------------------------------------


def sort_matrix_entries(items: Iterable[TaskItem], mode: Optional[str] = MATRIX_SORT_SCORE) -> List[TaskItem]:
    if mode == MATRIX_SORT_LOW_EFFORT:

        def key(item: TaskItem):
            effort = item.task.get("effort")
            effort_key = effort if is_number(effort) else math.inf
            return (effort_key, -score(item.task), _title_key(item.task))

    else:

        def key(item: TaskItem):
            return (-score(item.task), _title_key(item.task))

    return sorted(items, key=key)


def quadrant_for(task: Mapping[str, Any], now: NowSource = None, *, tz: Optional[str] = None) -> str:
    urgent = is_urgent(task, now, tz=tz)
    important = is_important(task)
    if urgent and important:
        return QUADRANT_TODAY
    if important:
        return QUADRANT_SCHEDULE
    if urgent:
        return QUADRANT_DELEGATE
    return QUADRANT_CONSIDER


def build_matrix(
    tasks: Iterable[Task],
    filters: Optional[Sequence[str]] = None,
    sort_mode: Optional[str] = MATRIX_SORT_SCORE,
    now: NowSource = None,
    *,
    tz: Optional[str] = None,
) -> Dict[str, List[TaskItem]]:
    """Group open tasks into the four urgency/importance quadrants."""
    groups: Dict[str, List[TaskItem]] = {q: [] for q in QUADRANTS}
    for item in items_from(tasks):
        if item.task.get("done") or not should_include_task(item.task, filters):
            continue
        groups[quadrant_for(item.task, now, tz=tz)].append(item)
    return {q: sort_matrix_entries(entries, sort_mode) for q, entries in groups.items()}


def move_to_quadrant(task: Task, quadrant: str, now: NowSource = None) -> Task:
    preset = QUADRANT_PRESETS.get(quadrant)
    if preset is None:
        raise ValidationError(f"Unknown quadrant: {quadrant}")

    moved = clone_task(task)
    changed = False
    for name, value in preset.items():
        changed = apply_field_change(moved, name, check_field(FIELD_RULES[name], value)) or changed
    if changed:
        moved["updated"] = timestamp_factory(now)()
    return moved


__all__ = [
    "ALL_PROJECTS",
    "MATRIX_SORT_LOW_EFFORT",
    "MATRIX_SORT_MODES",
    "MATRIX_SORT_SCORE",
    "QUADRANTS",
    "QUADRANT_PRESETS",
    "SORT_DUE_DATE",
    "SORT_MODES",
    "SORT_SCORE",
    "SORT_TITLE",
    "TaskItem",
    "UNASSIGNED_LABEL",
    "build_matrix",
    "build_project_filter_options",
    "items_from",
    "move_to_quadrant",
    "project_filter_key",
    "quadrant_for",
    "should_include_task",
    "sort_matrix_entries",
    "sort_project_items",
]
