"""Project registry and record hydration.

Project names are unique case-insensitively and always kept sorted with a
case- and accent-insensitive comparison. Registry functions never mutate
their inputs; they return new lists.

The `require_*` / `*_strict` variants raise FocusBadgerError subclasses and
are what the operation applier builds on; the plain variants wrap them into
ProjectChange results for form-level callers.
"""

from __future__ import annotations

import unicodedata
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import ConflictError, FocusBadgerError, ValidationError
from .jsonl import to_jsonl
from .model import PROJECT_RECORD_TYPE, ProjectChange, Record, Task, Workspace, project_record
from .util.clock import timestamp_factory


def fold_name(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def same_name(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def sort_projects(projects: Iterable[str]) -> List[str]:
    return sorted(projects, key=fold_name)


def _trimmed(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


def collect_projects(tasks: Iterable[Mapping[str, Any]] = (), project_records: Iterable[Mapping[str, Any]] = ()) -> List[str]:
    """Declared names plus every non-empty task project, deduplicated case-sensitively."""
    names: dict[str, None] = {}
    for record in project_records:
        name = _trimmed(record.get("name")) if isinstance(record, Mapping) else ""
        if name:
            names[name] = None
    for task in tasks:
        name = _trimmed(task.get("project")) if isinstance(task, Mapping) else ""
        if name:
            names[name] = None
    return sort_projects(names)


def hydrate_records(records: Iterable[Any] = ()) -> Workspace:
    """Split wire records into tasks and the derived project list."""
    tasks: List[Task] = []
    declared: List[Record] = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        if record.get("type") == PROJECT_RECORD_TYPE and record.get("name"):
            declared.append(project_record(record["name"]))
            continue
        tasks.append({k: v for k, v in record.items() if k != "type"})
    return Workspace(tasks=tasks, projects=collect_projects(tasks, declared))


def snapshot_records(tasks: Iterable[Task] = (), projects: Iterable[str] = ()) -> List[Record]:
    return [project_record(name) for name in projects] + list(tasks)


def build_snapshot(tasks: Iterable[Task] = (), projects: Iterable[str] = ()) -> str:
    """JSONL text: project declarations first, then tasks in array order."""
    return to_jsonl(snapshot_records(tasks, projects))


# --- registry (raising core) --------------------------------------------------


def require_new_project_name(projects: Sequence[str], name: Optional[str]) -> str:
    trimmed = _trimmed(name)
    if not trimmed:
        raise ValidationError("Project name is required")
    if any(same_name(p, trimmed) for p in projects):
        raise ConflictError("Project already exists")
    return trimmed


def add_project_strict(projects: Sequence[str], name: Optional[str]) -> Tuple[List[str], str]:
    trimmed = require_new_project_name(projects, name)
    return sort_projects([*projects, trimmed]), trimmed


def rename_project_strict(
    projects: Sequence[str],
    tasks: Sequence[Task],
    old_name: str,
    new_name: Optional[str],
    timestamp: Optional[str] = None,
) -> Tuple[List[str], List[Task], str]:
    trimmed = _trimmed(new_name)
    if not trimmed:
        raise ValidationError("Project name is required")
    if same_name(trimmed, old_name):
        return list(projects), list(tasks), old_name
    if any(same_name(p, trimmed) for p in projects):
        raise ConflictError("Project already exists")

    iso = timestamp or timestamp_factory()()
    updated_projects = sort_projects(trimmed if p == old_name else p for p in projects)
    updated_tasks = [
        {**t, "project": trimmed, "updated": iso} if t.get("project") == old_name else t
        for t in tasks
    ]
    return updated_projects, updated_tasks, trimmed


def delete_project_strict(
    projects: Sequence[str],
    tasks: Sequence[Task],
    name: str,
    timestamp: Optional[str] = None,
) -> Tuple[List[str], List[Task]]:
    iso = timestamp or timestamp_factory()()
    updated_projects = sort_projects(p for p in projects if p != name)
    updated_tasks: List[Task] = []
    for t in tasks:
        if t.get("project") == name:
            cleared = {k: v for k, v in t.items() if k != "project"}
            cleared["updated"] = iso
            updated_tasks.append(cleared)
        else:
            updated_tasks.append(t)
    return updated_projects, updated_tasks


# --- registry (result wrappers) -----------------------------------------------


def add_project(projects: Sequence[str] = (), name: Optional[str] = None) -> ProjectChange:
    try:
        updated, trimmed = add_project_strict(projects, name)
    except FocusBadgerError as e:
        return ProjectChange(ok=False, message=str(e))
    return ProjectChange(ok=True, projects=updated, name=trimmed)


def rename_project(
    projects: Sequence[str] = (),
    tasks: Sequence[Task] = (),
    old_name: str = "",
    new_name: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> ProjectChange:
    try:
        updated_projects, updated_tasks, name = rename_project_strict(projects, tasks, old_name, new_name, timestamp)
    except FocusBadgerError as e:
        return ProjectChange(ok=False, message=str(e))
    return ProjectChange(ok=True, projects=updated_projects, tasks=updated_tasks, name=name)


def delete_project(
    projects: Sequence[str] = (),
    tasks: Sequence[Task] = (),
    name: str = "",
    timestamp: Optional[str] = None,
) -> ProjectChange:
    updated_projects, updated_tasks = delete_project_strict(projects, tasks, name, timestamp)
    return ProjectChange(ok=True, projects=updated_projects, tasks=updated_tasks, name=name)


__all__ = [
    "add_project",
    "add_project_strict",
    "build_snapshot",
    "collect_projects",
    "delete_project",
    "delete_project_strict",
    "fold_name",
    "hydrate_records",
    "rename_project",
    "rename_project_strict",
    "require_new_project_name",
    "same_name",
    "snapshot_records",
    "sort_projects",
]
