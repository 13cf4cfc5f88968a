"""Declarative task-field rules shared by add_task and update_task_fields.

`check_field` turns a raw wire value into one of:
  - UNSET   key was absent: leave unspecified
  - REMOVE  explicit null on a removable field: drop the key
  - a normalized value (trimmed text, half-up rounded int, ...)

`apply_field_change` is the single place that decides whether a task
actually changed, which is what drives the `updated` stamp.
"""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from typing import Any, Dict, MutableMapping, Optional

from focusbadger.errors import ValidationError
from focusbadger.priority import is_number, round_half_up


class _Marker:
    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


UNSET: Any = _Marker("UNSET")
REMOVE: Any = _Marker("REMOVE")

_DUE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class FieldRule:
    name: str
    kind: str  # "int" | "date" | "text" | "name" | "title"
    low: Optional[int] = None
    high: Optional[int] = None
    removable: bool = True
    null_message: Optional[str] = None
    default: Any = None


FIELD_RULES: Dict[str, FieldRule] = {
    "title": FieldRule("title", "title", removable=False, null_message="title must be a non-empty string."),
    "project": FieldRule("project", "name"),
    "importance": FieldRule("importance", "int", 1, 5, default=1),
    "urgency": FieldRule("urgency", "int", 1, 5, default=1),
    "effort": FieldRule("effort", "int", 1, 10, default=3),
    "due": FieldRule("due", "date"),
    "notes": FieldRule("notes", "text"),
}

# add_project / rename_project names: null is never allowed there.
PROJECT_NAME_RULE = FieldRule("project", "name", removable=False, null_message="project cannot be null.")

ADD_TASK_FIELDS = ("project", "importance", "urgency", "effort", "due", "notes")
UPDATE_TASK_FIELDS = ("title", "project", "importance", "urgency", "effort", "due", "notes")


def _check_int(rule: FieldRule, value: Any) -> int:
    if not is_number(value):
        raise ValidationError(f"{rule.name} must be a number between {rule.low} and {rule.high}.")
    rounded = round_half_up(value)
    if rounded < rule.low or rounded > rule.high:  # type: ignore[operator]
        raise ValidationError(f"{rule.name} must be between {rule.low} and {rule.high}.")
    return rounded


def _check_date(rule: FieldRule, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{rule.name} must be a YYYY-MM-DD string.")
    trimmed = value.strip()
    if not _DUE_RE.match(trimmed):
        raise ValidationError(f"{rule.name} must be formatted as YYYY-MM-DD.")
    try:
        dt.date.fromisoformat(trimmed)
    except ValueError:
        raise ValidationError(f"{rule.name} must be formatted as YYYY-MM-DD.") from None
    return trimmed


def _check_text(rule: FieldRule, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{rule.name} must be a string.")
    return value


def _check_name(rule: FieldRule, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{rule.name} must be a string.")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{rule.name} must not be empty.")
    return trimmed


def _check_title(rule: FieldRule, value: Any) -> str:
    trimmed = value.strip() if isinstance(value, str) else ""
    if not trimmed:
        raise ValidationError(f"{rule.name} must be a non-empty string.")
    return trimmed


_CHECKERS = {
    "int": _check_int,
    "date": _check_date,
    "text": _check_text,
    "name": _check_name,
    "title": _check_title,
}


def check_field(rule: FieldRule, value: Any) -> Any:
    if value is UNSET:
        return UNSET
    if value is None:
        if rule.removable:
            return REMOVE
        raise ValidationError(rule.null_message or f"{rule.name} cannot be null.")
    return _CHECKERS[rule.kind](rule, value)


def apply_field_change(task: MutableMapping[str, Any], name: str, checked: Any) -> bool:
    """Apply a checked value to `task` in place; return True when it changed."""
    if checked is UNSET:
        return False
    if checked is REMOVE:
        if name in task:
            del task[name]
            return True
        return False
    if name in task and task[name] == checked:
        return False
    task[name] = checked
    return True


__all__ = [
    "ADD_TASK_FIELDS",
    "FIELD_RULES",
    "FieldRule",
    "PROJECT_NAME_RULE",
    "REMOVE",
    "UNSET",
    "UPDATE_TASK_FIELDS",
    "apply_field_change",
    "check_field",
]
