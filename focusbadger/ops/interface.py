"""Typed operations (internal, forward-compatible).

A batch on the wire is `{"operations": [{"<type>": {"data": {...}}}, ...]}`.
Each envelope is turned into an Operation carrying an OperationKind and a
per-kind payload. Payloads keep raw wire values (UNSET when a key was
absent); field-level validation happens when the operation executes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Union

from .fields import UNSET


class OperationKind(str, Enum):
    ADD_PROJECT = "add_project"
    RENAME_PROJECT = "rename_project"
    ADD_TASK = "add_task"
    UPDATE_TASK_FIELDS = "update_task_fields"
    MARK_COMPLETE = "mark_complete"


@dataclass(frozen=True)
class AddProject:
    name: Any = UNSET

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "AddProject":
        return cls(name=data.get("name", UNSET))


@dataclass(frozen=True)
class RenameProject:
    source: Any = UNSET
    target: Any = UNSET

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "RenameProject":
        return cls(source=data.get("from", UNSET), target=data.get("to", UNSET))


@dataclass(frozen=True)
class AddTask:
    title: Any = UNSET
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "AddTask":
        return cls(
            title=data.get("title", UNSET),
            fields={k: v for k, v in data.items() if k != "title"},
        )


@dataclass(frozen=True)
class UpdateTaskFields:
    task_id: Any = UNSET
    changes: Any = UNSET

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "UpdateTaskFields":
        return cls(task_id=data.get("id", UNSET), changes=data.get("set", UNSET))


@dataclass(frozen=True)
class MarkComplete:
    task_id: Any = UNSET
    completed_at: Any = UNSET

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "MarkComplete":
        return cls(task_id=data.get("id", UNSET), completed_at=data.get("completed_at", UNSET))


Payload = Union[AddProject, RenameProject, AddTask, UpdateTaskFields, MarkComplete]

PAYLOAD_BUILDERS: Dict[OperationKind, Callable[[Mapping[str, Any]], Payload]] = {
    OperationKind.ADD_PROJECT: AddProject.from_data,
    OperationKind.RENAME_PROJECT: RenameProject.from_data,
    OperationKind.ADD_TASK: AddTask.from_data,
    OperationKind.UPDATE_TASK_FIELDS: UpdateTaskFields.from_data,
    OperationKind.MARK_COMPLETE: MarkComplete.from_data,
}


@dataclass(frozen=True)
class Operation:
    """One decoded envelope. `index` is 0-based; messages use `position`."""

    index: int
    kind: OperationKind
    payload: Payload

    @property
    def position(self) -> int:
        return self.index + 1


__all__ = [
    "AddProject",
    "AddTask",
    "MarkComplete",
    "Operation",
    "OperationKind",
    "PAYLOAD_BUILDERS",
    "Payload",
    "RenameProject",
    "UpdateTaskFields",
]
