"""JSON Lines codec.

Blank lines and lines starting with `#` are skipped on read. Parsing is
fail-fast: the first malformed line raises ParseError carrying its 1-based
line number. Serialization emits one compact JSON object per line with no
trailing newline. Integers outside the signed/unsigned 64-bit range cannot be
encoded and raise ValidationError.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Optional

import orjson

from .errors import ParseError, ValidationError

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def parse_jsonl(text: Optional[str]) -> List[Any]:
    out: List[Any] = []
    if not text:
        return out
    for line_no, raw in enumerate(_LINE_SPLIT_RE.split(text), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            out.append(orjson.loads(line))
        except orjson.JSONDecodeError as e:
            raise ParseError(line_no, str(e)) from e
    return out


def _dumps(obj: Any, option: int = 0) -> bytes:
    try:
        return orjson.dumps(obj, option=option)
    except orjson.JSONEncodeError as e:
        raise ValidationError(f"Record is not JSON serializable: {e}") from e


def dumps_line(record: Any) -> str:
    return _dumps(record).decode("utf-8")


def to_jsonl(records: Optional[Iterable[Any]]) -> str:
    return "\n".join(dumps_line(r) for r in (records or ()))


def loads(text: str) -> Any:
    """Strict single-document JSON parse (raises orjson.JSONDecodeError)."""
    return orjson.loads(text)


def dumps_pretty(obj: Any) -> str:
    return _dumps(obj, orjson.OPT_INDENT_2).decode("utf-8")


__all__ = ["dumps_line", "dumps_pretty", "loads", "parse_jsonl", "to_jsonl"]
