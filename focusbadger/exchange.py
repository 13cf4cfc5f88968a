"""Export/import façade for the assistant workflow.

Export builds a shareable snapshot plus a briefing prompt. Import accepts
whatever the assistant pasted back: a JSON array of records, a single JSON
object, JSON Lines, or an operation batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

import orjson

from .errors import ParseError
from .jsonl import dumps_pretty, loads, parse_jsonl
from .model import ORIGIN_OPERATIONS, ORIGIN_RECORDS, ImportResult, Task
from .ops.apply import apply_operations
from .ops.contract import has_operations
from .projects import hydrate_records, snapshot_records
from .prompts.template import build_briefing
from .util.clock import IdProvider, NowSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportBundle:
    full_snapshot_json: str
    open_tasks_json: str
    briefing_text: str


def build_export(tasks: Iterable[Task] = (), projects: Iterable[str] = ()) -> ExportBundle:
    task_list = list(tasks)
    project_list = list(projects)
    open_tasks = [t for t in task_list if not t.get("done")]

    full = dumps_pretty(snapshot_records(task_list, project_list))
    open_only = dumps_pretty(snapshot_records(open_tasks, project_list))
    return ExportBundle(
        full_snapshot_json=full,
        open_tasks_json=open_only,
        briefing_text=build_briefing(open_only),
    )


def _parse_json_records(text: str) -> List[Any]:
    parsed = loads(text)
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        return [parsed]
    raise ValueError("JSON must be an array of records.")


def _read_records(text: str) -> List[Any]:
    if text.startswith(("[", "{")):
        try:
            return _parse_json_records(text)
        except (orjson.JSONDecodeError, ValueError) as json_error:
            # Not a single JSON document; retry as JSON Lines.
            logger.debug("strict JSON parse failed (%s); retrying as JSON Lines", json_error)
    return parse_jsonl(text)


def parse_import(
    raw_text: Optional[str],
    *,
    base_tasks: Iterable[Task] = (),
    base_projects: Iterable[str] = (),
    now: NowSource = None,
    ids: Optional[IdProvider] = None,
) -> ImportResult:
    text = (raw_text or "").strip()
    if not text:
        return ImportResult(ok=False, error="Paste JSON before saving.")

    try:
        records = _read_records(text)
    except ParseError as e:
        return ImportResult(ok=False, error=str(e))

    if not all(isinstance(r, dict) for r in records):
        return ImportResult(ok=False, error="Every record must be a JSON object.")

    if len(records) == 1 and has_operations(records[0]):
        result = apply_operations(records[0], base_tasks, base_projects, now, ids=ids)
        return ImportResult(
            ok=result.ok,
            tasks=result.tasks,
            projects=result.projects,
            error=result.error,
            origin=ORIGIN_OPERATIONS,
        )

    workspace = hydrate_records(records)
    for task in workspace.tasks:
        title = task.get("title")
        if not isinstance(title, str) or not title.strip():
            return ImportResult(ok=False, error="Each task needs a non-empty title.")

    return ImportResult(ok=True, tasks=workspace.tasks, projects=workspace.projects, origin=ORIGIN_RECORDS)


__all__ = ["ExportBundle", "build_export", "parse_import"]
