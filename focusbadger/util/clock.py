"""Clock and identifier providers.

Timestamps are ISO-8601 UTC strings with millisecond precision and a `Z`
suffix, e.g. `2024-02-01T12:00:00.000Z`. A "now source" may be None (real
clock), a datetime, an ISO string, epoch milliseconds, or a zero-argument
callable returning any of those.
"""

from __future__ import annotations

import datetime as dt
import math
import re
import uuid
from typing import Any, Callable, Optional, Protocol, Union

NowSource = Union[None, dt.datetime, str, int, float, Callable[[], Any]]

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class IdProvider(Protocol):
    def new_id(self) -> str:
        """Return a fresh unique task identifier."""


class Uuid4Ids:
    def new_id(self) -> str:
        return str(uuid.uuid4())


DEFAULT_IDS = Uuid4Ids()


def utc_now() -> dt.datetime:
    return dt.datetime.now(tz=dt.timezone.utc)


def to_iso(moment: dt.datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    utc = moment.astimezone(dt.timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> dt.datetime:
    """Parse an ISO timestamp into an aware datetime.

    Date-only strings are midnight UTC; naive date-times are system-local.
    Raises ValueError when the text is not a timestamp.
    """
    s = str(value).strip()
    if not s:
        raise ValueError("empty timestamp")
    if _DATE_ONLY_RE.match(s):
        d = dt.date.fromisoformat(s)
        return dt.datetime(d.year, d.month, d.day, tzinfo=dt.timezone.utc)
    if s[-1] in "Zz":
        s = s[:-1] + "+00:00"
    moment = dt.datetime.fromisoformat(s)
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment


def coerce_moment(value: Any) -> Optional[dt.datetime]:
    """Best-effort conversion of a now-source value; None when unusable."""
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, str):
        try:
            return parse_timestamp(value)
        except ValueError:
            return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        try:
            return dt.datetime.fromtimestamp(value / 1000.0, tz=dt.timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    return None


def resolve_now(now: NowSource = None) -> dt.datetime:
    if callable(now):
        now = now()
    return coerce_moment(now) or utc_now()


def timestamp_factory(now: NowSource = None) -> Callable[[], str]:
    """Return a callable producing ISO timestamps from `now`.

    Fixed sources are converted once; callables are consulted on every call.
    Anything unparseable falls back to the real clock.
    """
    if callable(now):
        source = now

        def _from_callable() -> str:
            return to_iso(coerce_moment(source()) or utc_now())

        return _from_callable

    moment = coerce_moment(now)
    if moment is not None:
        iso = to_iso(moment)
        return lambda: iso
    return lambda: to_iso(utc_now())
