# focusbadger/priority.py
"""Priority scoring, due-date buckets and urgency/importance derivations.

All functions here are total: malformed field values fall back to the same
defaults as missing ones instead of raising.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .util.clock import NowSource, parse_timestamp, resolve_now
from .util.tz import TZ_ENV_VAR, default_tz_name, local_date, resolve_tz

logger = logging.getLogger(__name__)

BUCKET_TODAY = "Today"
BUCKET_WEEK = "This week"
BUCKET_LATER = "Later"
BUCKET_NO_DATE = "No date"
BUCKET_DONE = "Done"

BUCKETS = (BUCKET_TODAY, BUCKET_WEEK, BUCKET_LATER, BUCKET_NO_DATE, BUCKET_DONE)

URGENT_THRESHOLD = 3
IMPORTANT_THRESHOLD = 3

MIN_EFFORT = 1
MAX_EFFORT = 10
DEFAULT_EFFORT = 5


def is_number(v: Any) -> bool:
    # Ints are exact; only floats can be NaN or infinite.
    if isinstance(v, bool):
        return False
    return isinstance(v, int) or (isinstance(v, float) and math.isfinite(v))


def _num(v: Any, default: float) -> float:
    return v if is_number(v) else default


def round_half_up(v: float) -> int:
    if isinstance(v, int):
        return v
    return int(math.floor(v + 0.5))


def score(task: Mapping[str, Any]) -> float:
    """2*importance + urgency - effort; missing importance/urgency are 0, effort 1."""
    imp = _num(task.get("importance"), 0)
    urg = _num(task.get("urgency"), 0)
    eff = _num(task.get("effort"), 1)
    return 2 * imp + urg - eff


def _due_day(due: Any, tz: dt.tzinfo) -> Optional[dt.date]:
    if not isinstance(due, str):
        return None
    try:
        moment = parse_timestamp(due)
    except ValueError:
        return None
    if len(due.strip()) == 10:
        return moment.date()
    return local_date(moment, tz)


def _day_tz(tz: Optional[str]) -> dt.tzinfo:
    """Resolve the day-boundary zone.

    An explicit `tz` that cannot be resolved raises ValueError. A bad
    FOCUSBADGER_TZ falls back to local time with a warning.
    """
    if tz is not None:
        return resolve_tz(tz)
    name = default_tz_name()
    try:
        return resolve_tz(name)
    except ValueError as e:
        logger.warning("ignoring %s=%r (%s); using local time", TZ_ENV_VAR, name, e)
        return resolve_tz("local")


def bucket(task: Mapping[str, Any], now: NowSource = None, *, tz: Optional[str] = None) -> str:
    """Due-date display category.

    Calendar days are computed in `tz` (default: FOCUSBADGER_TZ or local).
    An invalid explicit `tz` raises ValueError.
    Overdue tasks fall into "This week"; unreadable due values into "Later".
    """
    if task.get("done"):
        return BUCKET_DONE
    due = task.get("due")
    if not due:
        return BUCKET_NO_DATE
    tzinfo = _day_tz(tz)
    today = local_date(resolve_now(now), tzinfo)
    day = _due_day(due, tzinfo)
    if day is None:
        return BUCKET_LATER
    if day == today:
        return BUCKET_TODAY
    if day < today + dt.timedelta(days=7):
        return BUCKET_WEEK
    return BUCKET_LATER


def is_urgent(task: Mapping[str, Any], now: NowSource = None, *, tz: Optional[str] = None) -> bool:
    # An explicit urgency always wins over the due-date inference.
    raw = task.get("urgency")
    if raw is None:
        return bucket(task, now, tz=tz) == BUCKET_TODAY
    return is_number(raw) and raw >= URGENT_THRESHOLD


def is_important(task: Mapping[str, Any]) -> bool:
    return _num(task.get("importance"), 0) >= IMPORTANT_THRESHOLD


@dataclass(frozen=True)
class TaskPriority:
    is_urgent: bool
    is_important: bool
    urgency_label: str
    importance_label: str


def derive_task_priority(task: Mapping[str, Any], now: NowSource = None, *, tz: Optional[str] = None) -> TaskPriority:
    urgent = is_urgent(task, now, tz=tz)
    important = is_important(task)
    return TaskPriority(
        is_urgent=urgent,
        is_important=important,
        urgency_label="Urgent" if urgent else "Can wait",
        importance_label="Important" if important else "Low priority",
    )


# --- effort -------------------------------------------------------------------


def clamp_effort(value: Any, default: int = DEFAULT_EFFORT) -> int:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return default
    if isinstance(value, float) and math.isnan(value):
        return default
    if value < MIN_EFFORT:
        return MIN_EFFORT
    if value > MAX_EFFORT:
        return MAX_EFFORT
    return round_half_up(value)


def describe_effort(value: Any) -> str:
    if not is_number(value):
        return "Slide to set"
    if value <= 3:
        return "Light lift"
    if value <= 7:
        return "In the zone"
    return "Deep focus"


def should_commit_effort_change(previous: Any, proposed: Any) -> bool:
    current = clamp_effort(previous)
    return clamp_effort(proposed, current) != current


__all__ = [
    "BUCKETS",
    "BUCKET_DONE",
    "BUCKET_LATER",
    "BUCKET_NO_DATE",
    "BUCKET_TODAY",
    "BUCKET_WEEK",
    "DEFAULT_EFFORT",
    "MAX_EFFORT",
    "MIN_EFFORT",
    "TaskPriority",
    "bucket",
    "clamp_effort",
    "derive_task_priority",
    "describe_effort",
    "is_important",
    "is_number",
    "is_urgent",
    "round_half_up",
    "score",
    "should_commit_effort_change",
]
