# focusbadger/model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Tasks travel as plain dicts so absent optional fields stay absent on the wire.
Task = Dict[str, Any]
Record = Dict[str, Any]

PROJECT_RECORD_TYPE = "project"

TASK_FIELDS = (
    "id",
    "title",
    "done",
    "project",
    "due",
    "importance",
    "urgency",
    "effort",
    "tags",
    "notes",
    "created",
    "updated",
)

ORIGIN_OPERATIONS = "operations"
ORIGIN_RECORDS = "records"


@dataclass(frozen=True)
class Workspace:
    tasks: List[Task] = field(default_factory=list)
    projects: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectChange:
    """Outcome of a project registry mutation."""

    ok: bool
    projects: List[str] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    name: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class TaskCreation:
    ok: bool
    task: Optional[Task] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class TitleRename:
    ok: bool
    title: Optional[str] = None
    changed: bool = False
    message: Optional[str] = None


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of an operation batch. On failure tasks/projects are empty."""

    ok: bool
    tasks: List[Task] = field(default_factory=list)
    projects: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass(frozen=True)
class ImportResult:
    ok: bool
    tasks: List[Task] = field(default_factory=list)
    projects: List[str] = field(default_factory=list)
    error: Optional[str] = None
    origin: Optional[str] = None


def project_record(name: str) -> Record:
    return {"type": PROJECT_RECORD_TYPE, "name": name}


__all__ = [
    "ApplyResult",
    "ImportResult",
    "ORIGIN_OPERATIONS",
    "ORIGIN_RECORDS",
    "PROJECT_RECORD_TYPE",
    "ProjectChange",
    "Record",
    "TASK_FIELDS",
    "Task",
    "TaskCreation",
    "TitleRename",
    "Workspace",
    "project_record",
]
