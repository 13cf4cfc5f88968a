"""Operation batch boundary (internal, not part of public API)."""

from __future__ import annotations

from .apply import apply_operations, clone_task
from .contract import parse_operations, validate_operation_batch
from .fields import FIELD_RULES, REMOVE, UNSET, FieldRule, apply_field_change, check_field
from .interface import (
    AddProject,
    AddTask,
    MarkComplete,
    Operation,
    OperationKind,
    RenameProject,
    UpdateTaskFields,
)
from .io import load_operation_batch, unwrap_batch

__all__ = [
    "AddProject",
    "AddTask",
    "FIELD_RULES",
    "FieldRule",
    "MarkComplete",
    "Operation",
    "OperationKind",
    "REMOVE",
    "RenameProject",
    "UNSET",
    "UpdateTaskFields",
    "apply_field_change",
    "apply_operations",
    "check_field",
    "clone_task",
    "load_operation_batch",
    "parse_operations",
    "unwrap_batch",
    "validate_operation_batch",
]
