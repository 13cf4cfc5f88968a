"""focusbadger.api

Stable *library* entrypoint for FocusBadger.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from focusbadger.errors import (
    ConflictError,
    FocusBadgerError,
    NotFoundError,
    OperationError,
    ParseError,
    ValidationError,
)
from focusbadger.exchange import ExportBundle, build_export, parse_import
from focusbadger.jsonl import parse_jsonl, to_jsonl
from focusbadger.model import (
    ApplyResult,
    ImportResult,
    ProjectChange,
    TaskCreation,
    TitleRename,
    Workspace,
)
from focusbadger.ops import apply_operations, load_operation_batch, validate_operation_batch
from focusbadger.priority import (
    BUCKETS,
    DEFAULT_EFFORT,
    MAX_EFFORT,
    MIN_EFFORT,
    TaskPriority,
    bucket,
    clamp_effort,
    derive_task_priority,
    describe_effort,
    is_important,
    is_urgent,
    score,
    should_commit_effort_change,
)
from focusbadger.projects import (
    add_project,
    build_snapshot,
    collect_projects,
    delete_project,
    hydrate_records,
    rename_project,
    sort_projects,
)
from focusbadger.store import load_workspace, save_workspace
from focusbadger.task_factory import create_task, prepare_title_rename
from focusbadger.util.clock import IdProvider, timestamp_factory
from focusbadger.views import (
    ALL_PROJECTS,
    MATRIX_SORT_LOW_EFFORT,
    MATRIX_SORT_SCORE,
    QUADRANT_PRESETS,
    SORT_DUE_DATE,
    SORT_SCORE,
    SORT_TITLE,
    TaskItem,
    UNASSIGNED_LABEL,
    build_matrix,
    build_project_filter_options,
    move_to_quadrant,
    project_filter_key,
    should_include_task,
    sort_matrix_entries,
    sort_project_items,
)

# --- Public API exports (locked by contract tests) ------------------------
# Keep changes intentional and reviewable.
_PUBLIC_EXPORTS = (
    # codec
    "parse_jsonl",
    "to_jsonl",
    # priority
    "BUCKETS",
    "DEFAULT_EFFORT",
    "MAX_EFFORT",
    "MIN_EFFORT",
    "TaskPriority",
    "bucket",
    "clamp_effort",
    "derive_task_priority",
    "describe_effort",
    "is_important",
    "is_urgent",
    "score",
    "should_commit_effort_change",
    # projects / hydration
    "add_project",
    "build_snapshot",
    "collect_projects",
    "delete_project",
    "hydrate_records",
    "rename_project",
    "sort_projects",
    # tasks
    "create_task",
    "prepare_title_rename",
    # operations
    "apply_operations",
    "load_operation_batch",
    "validate_operation_batch",
    # exchange
    "ExportBundle",
    "build_export",
    "parse_import",
    # views
    "ALL_PROJECTS",
    "MATRIX_SORT_LOW_EFFORT",
    "MATRIX_SORT_SCORE",
    "QUADRANT_PRESETS",
    "SORT_DUE_DATE",
    "SORT_SCORE",
    "SORT_TITLE",
    "TaskItem",
    "UNASSIGNED_LABEL",
    "build_matrix",
    "build_project_filter_options",
    "move_to_quadrant",
    "project_filter_key",
    "should_include_task",
    "sort_matrix_entries",
    "sort_project_items",
    # storage
    "load_workspace",
    "save_workspace",
    # results / errors / providers
    "ApplyResult",
    "ImportResult",
    "ProjectChange",
    "TaskCreation",
    "TitleRename",
    "Workspace",
    "ConflictError",
    "FocusBadgerError",
    "NotFoundError",
    "OperationError",
    "ParseError",
    "ValidationError",
    "IdProvider",
    "timestamp_factory",
)

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports --------------------------------------------------
