# focusbadger/task_factory.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from .model import Task, TaskCreation, TitleRename
from .priority import is_number
from .util.clock import DEFAULT_IDS, IdProvider, NowSource, timestamp_factory

NUMERIC_FIELDS = ("importance", "urgency", "effort")


def create_task(
    draft: Optional[Mapping[str, Any]],
    now: NowSource = None,
    *,
    ids: Optional[IdProvider] = None,
) -> TaskCreation:
    """Build a complete task from a partial draft.

    Identity and timestamps are generated unless the draft supplies them.
    Optional fields are only copied when meaningful (truthy text, finite
    numbers, non-empty tag lists); absent ones are left out of the dict.
    """
    draft = draft or {}
    raw_title = draft.get("title")
    title = raw_title.strip() if isinstance(raw_title, str) else ""
    if not title:
        return TaskCreation(ok=False, error="Title is required")

    created = draft.get("created")
    if created is None:
        created = timestamp_factory(now)()
    updated = draft.get("updated")
    if updated is None:
        updated = created
    task_id = draft.get("id")
    if task_id is None:
        task_id = (ids or DEFAULT_IDS).new_id()

    task: Task = {
        "id": task_id,
        "title": title,
        "done": bool(draft.get("done")),
        "created": created,
        "updated": updated,
    }

    if draft.get("project"):
        task["project"] = draft["project"]
    if draft.get("due"):
        task["due"] = draft["due"]

    for key in NUMERIC_FIELDS:
        value = draft.get(key)
        if is_number(value):
            task[key] = value

    tags = draft.get("tags")
    if isinstance(tags, (list, tuple)):
        kept = [t for t in tags if t]
        if kept:
            task["tags"] = kept

    if draft.get("notes"):
        task["notes"] = draft["notes"]

    return TaskCreation(ok=True, task=task)


def prepare_title_rename(task: Optional[Mapping[str, Any]], next_title: Optional[str]) -> TitleRename:
    trimmed = next_title.strip() if isinstance(next_title, str) else ""
    if not trimmed:
        return TitleRename(ok=False, message="Task title is required")
    if task is None:
        return TitleRename(ok=False, message="Task not found")
    return TitleRename(ok=True, title=trimmed, changed=(task.get("title") or "") != trimmed)


__all__ = ["NUMERIC_FIELDS", "create_task", "prepare_title_rename"]
