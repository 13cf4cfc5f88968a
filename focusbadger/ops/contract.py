"""Operation batch contract.

Envelope shape is checked for the whole batch before anything executes:
every entry must be an object with exactly one key naming a known
operation, mapping to `{"data": {...}}`.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from focusbadger.errors import OperationError, ValidationError

from .interface import PAYLOAD_BUILDERS, Operation, OperationKind

MISSING_OPERATIONS = "Operations payload must include an operations array."


def _is_object(v: Any) -> bool:
    return isinstance(v, Mapping)


def has_operations(obj: Any) -> bool:
    return _is_object(obj) and isinstance(obj.get("operations"), list)


def parse_operation(raw: Any, index: int) -> Operation:
    position = index + 1
    if not _is_object(raw):
        raise OperationError(position, "", "Each operation must be an object with a single key.")
    if len(raw) != 1:
        raise OperationError(position, "", "Each operation must contain exactly one operation key.")
    (tag, config), = raw.items()
    tag = str(tag)
    if not _is_object(config):
        raise OperationError(position, tag, "Operation configuration must be an object.")
    data = config.get("data")
    if not _is_object(data):
        raise OperationError(position, tag, "Operation must include a data object.")
    try:
        kind = OperationKind(tag)
    except ValueError:
        raise OperationError(position, tag, "is not a supported operation.") from None
    return Operation(index=index, kind=kind, payload=PAYLOAD_BUILDERS[kind](data))


def parse_operations(payload: Any) -> List[Operation]:
    """Decode a batch; raises on the first malformed envelope."""
    if not has_operations(payload):
        raise ValidationError(MISSING_OPERATIONS)
    return [parse_operation(raw, i) for i, raw in enumerate(payload["operations"])]


def validate_operation_batch(payload: Any) -> List[str]:
    """Collect every envelope-level problem (empty list when well-formed)."""
    if not has_operations(payload):
        return [MISSING_OPERATIONS]
    errs: List[str] = []
    for i, raw in enumerate(payload["operations"]):
        try:
            parse_operation(raw, i)
        except OperationError as e:
            errs.append(str(e))
    return errs


__all__ = [
    "MISSING_OPERATIONS",
    "has_operations",
    "parse_operation",
    "parse_operations",
    "validate_operation_batch",
]
