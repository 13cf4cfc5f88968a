"""Operation batch I/O helpers (internal)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import orjson

from focusbadger.errors import ValidationError

from .contract import MISSING_OPERATIONS, has_operations


def unwrap_batch(obj: Any) -> Dict[str, Any]:
    """Accept `{operations: [...]}` or a one-element array wrapping it."""
    if isinstance(obj, list) and len(obj) == 1:
        obj = obj[0]
    if not has_operations(obj):
        raise ValidationError(MISSING_OPERATIONS)
    return obj


def load_operation_batch(path: Path) -> Dict[str, Any]:
    """Load an operation batch from JSON.

    Expected format:
      {"operations": [{"add_task": {"data": {"title": "..."}}}, ...]}
    """
    try:
        obj = orjson.loads(Path(path).read_bytes())
    except orjson.JSONDecodeError as e:
        raise ValidationError(f"operation batch is not valid JSON: {e}") from e
    return unwrap_batch(obj)
