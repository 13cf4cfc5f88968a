"""Apply an operation batch to a task/project snapshot, all or nothing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from focusbadger.errors import FocusBadgerError, NotFoundError, OperationError, ValidationError
from focusbadger.model import ApplyResult, Task, project_record
from focusbadger.projects import add_project_strict, collect_projects, rename_project_strict
from focusbadger.task_factory import create_task
from focusbadger.util.clock import IdProvider, NowSource, parse_timestamp, timestamp_factory, to_iso

from .contract import parse_operations
from .fields import (
    ADD_TASK_FIELDS,
    FIELD_RULES,
    PROJECT_NAME_RULE,
    REMOVE,
    UNSET,
    UPDATE_TASK_FIELDS,
    apply_field_change,
    check_field,
)
from .interface import AddProject, AddTask, MarkComplete, OperationKind, Payload, RenameProject, UpdateTaskFields

logger = logging.getLogger(__name__)


def clone_task(task: Task) -> Task:
    copy = dict(task)
    if isinstance(task.get("tags"), list):
        copy["tags"] = list(task["tags"])
    return copy


@dataclass
class _WorkingCopy:
    tasks: List[Task]
    projects: List[str]
    ids: Optional[IdProvider] = None

    def find_task(self, task_id: str) -> int:
        for i, t in enumerate(self.tasks):
            if t.get("id") == task_id:
                return i
        raise NotFoundError(f"Task with id {task_id} was not found.")


def _require_task_id(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("id is required and must be a string.")
    return value


def _add_project(state: _WorkingCopy, op: AddProject, stamp: str) -> None:
    name = check_field(PROJECT_NAME_RULE, op.name)
    state.projects, _ = add_project_strict(state.projects, None if name is UNSET else name)


def _rename_project(state: _WorkingCopy, op: RenameProject, stamp: str) -> None:
    source = check_field(PROJECT_NAME_RULE, op.source)
    if source is UNSET:
        raise ValidationError("from project name is required.")
    target = check_field(PROJECT_NAME_RULE, op.target)
    state.projects, state.tasks, _ = rename_project_strict(
        state.projects,
        state.tasks,
        source,
        None if target is UNSET else target,
        stamp,
    )


def _add_task(state: _WorkingCopy, op: AddTask, stamp: str) -> None:
    title = op.title.strip() if isinstance(op.title, str) else ""
    if not title:
        raise ValidationError("title is required.")

    draft: Dict[str, Any] = {"title": title, "done": False}
    for name in ADD_TASK_FIELDS:
        rule = FIELD_RULES[name]
        raw = op.fields.get(name, UNSET)
        if rule.default is not None and (raw is UNSET or raw is None):
            raw = rule.default
        value = check_field(rule, raw)
        if value is UNSET or value is REMOVE:
            continue
        draft[name] = value

    created = create_task(draft, stamp, ids=state.ids)
    if not created.ok or created.task is None:
        raise ValidationError(created.error or "Unable to create task.")
    state.tasks.append(created.task)


def _update_task_fields(state: _WorkingCopy, op: UpdateTaskFields, stamp: str) -> None:
    task_id = _require_task_id(op.task_id)
    if not isinstance(op.changes, dict):
        raise ValidationError("set must be an object.")
    idx = state.find_task(task_id)

    original = state.tasks[idx]
    updated = clone_task(original)
    changed = False
    for name in UPDATE_TASK_FIELDS:
        if name not in op.changes:
            continue
        value = check_field(FIELD_RULES[name], op.changes[name])
        changed = apply_field_change(updated, name, value) or changed

    ignored = sorted(k for k in op.changes if k not in FIELD_RULES)
    if ignored:
        logger.debug("update_task_fields %s: ignoring unsupported keys %s", op.task_id, ignored)

    if changed:
        updated["updated"] = stamp
        state.tasks[idx] = updated


def _completion_stamp(value: Any, fallback: str) -> str:
    if value is UNSET or value is None:
        return fallback
    if not isinstance(value, str):
        raise ValidationError("completed_at must be an ISO timestamp string.")
    try:
        return to_iso(parse_timestamp(value))
    except ValueError:
        raise ValidationError("completed_at must be a valid ISO timestamp.") from None


def _mark_complete(state: _WorkingCopy, op: MarkComplete, stamp: str) -> None:
    idx = state.find_task(_require_task_id(op.task_id))
    completed = _completion_stamp(op.completed_at, stamp)
    task = clone_task(state.tasks[idx])
    task["done"] = True
    task["updated"] = completed
    state.tasks[idx] = task


_HANDLERS: Dict[OperationKind, Callable[[_WorkingCopy, Any, str], None]] = {
    OperationKind.ADD_PROJECT: _add_project,
    OperationKind.RENAME_PROJECT: _rename_project,
    OperationKind.ADD_TASK: _add_task,
    OperationKind.UPDATE_TASK_FIELDS: _update_task_fields,
    OperationKind.MARK_COMPLETE: _mark_complete,
}


def apply_operations(
    payload: Any,
    base_tasks: Iterable[Task] = (),
    base_projects: Iterable[str] = (),
    now: NowSource = None,
    *,
    ids: Optional[IdProvider] = None,
) -> ApplyResult:
    """Apply a batch against a private working copy.

    Operations run strictly in order. The first failure aborts the batch and
    is reported as `Operation <n> (<type>): <message>`; caller-owned tasks and
    projects are never touched.
    """
    try:
        operations = parse_operations(payload)
    except FocusBadgerError as e:
        logger.debug("rejected operation batch: %s", e)
        return ApplyResult(ok=False, error=str(e))

    stamp = timestamp_factory(now)
    state = _WorkingCopy(
        tasks=[clone_task(t) for t in base_tasks],
        projects=list(base_projects),
        ids=ids,
    )

    for op in operations:
        handler = _HANDLERS[op.kind]
        payload_obj: Payload = op.payload
        try:
            handler(state, payload_obj, stamp())
        except OperationError as e:
            logger.debug("operation batch aborted: %s", e)
            return ApplyResult(ok=False, error=str(e))
        except FocusBadgerError as e:
            err = OperationError(op.position, op.kind.value, e)
            logger.debug("operation batch aborted: %s", err)
            return ApplyResult(ok=False, error=str(err))

    projects = collect_projects(state.tasks, [project_record(p) for p in state.projects])
    logger.debug("applied %d operations (%d tasks, %d projects)", len(operations), len(state.tasks), len(projects))
    return ApplyResult(ok=True, tasks=state.tasks, projects=projects)


__all__ = ["apply_operations", "clone_task"]
