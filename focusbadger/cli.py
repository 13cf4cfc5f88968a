#!/usr/bin/env python3
"""focusbadger command line: inspect and edit a JSONL task workspace."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import FocusBadgerError
from .exchange import build_export, parse_import
from .model import Task, Workspace
from .ops import apply_operations, load_operation_batch, validate_operation_batch
from .priority import BUCKETS, bucket, derive_task_priority, score
from .projects import add_project, delete_project, rename_project
from .store import load_workspace, save_workspace
from .util.clock import timestamp_factory
from .util.console import configure_logging, eprint
from .util.tz import TZ_ENV_VAR, normalize_tz_name, resolve_tz
from .views import (
    MATRIX_SORT_MODES,
    MATRIX_SORT_SCORE,
    QUADRANTS,
    SORT_MODES,
    SORT_SCORE,
    build_matrix,
    items_from,
    move_to_quadrant,
    should_include_task,
    sort_project_items,
)

logger = logging.getLogger(__name__)

FILE_ENV_VAR = "FOCUSBADGER_FILE"
DEFAULT_FILE = "tasks.jsonl"


def _die(msg: str, rc: int = 2) -> int:
    eprint(f"[focusbadger] ERROR: {msg}")
    return rc


def _fmt_score(task: Task) -> str:
    s = score(task)
    return str(int(s)) if float(s).is_integer() else f"{s:.1f}"


def _task_line(task: Task, *, show_project: bool = True) -> str:
    mark = "x" if task.get("done") else " "
    parts = [f"[{mark}] {task.get('title', '')}", f"score {_fmt_score(task)}"]
    if task.get("due"):
        parts.append(f"due {task['due']}")
    if show_project and task.get("project"):
        parts.append(f"@{task['project']}")
    parts.append(f"id {task.get('id', '?')}")
    return "  ".join(parts)


def _save(args: argparse.Namespace, tasks: List[Task], projects: List[str]) -> None:
    path = save_workspace(args.file, tasks, projects)
    print(f"[focusbadger] wrote: {path}")


def _apply_single(args: argparse.Namespace, ws: Workspace, kind: str, data: Dict[str, Any]) -> int:
    result = apply_operations({"operations": [{kind: {"data": data}}]}, ws.tasks, ws.projects)
    if not result.ok:
        return _die(result.error or "operation failed", rc=3)
    _save(args, result.tasks, result.projects)
    return 0


# --- commands -----------------------------------------------------------------


def cmd_list(args: argparse.Namespace, ws: Workspace) -> int:
    items = [i for i in items_from(ws.tasks) if should_include_task(i.task, args.project)]
    if not args.all:
        items = [i for i in items if not i.task.get("done")]
    grouped: Dict[str, list] = {b: [] for b in BUCKETS}
    for item in sort_project_items(items, args.sort):
        grouped[bucket(item.task, tz=args.tz)].append(item)

    for name in BUCKETS:
        if not grouped[name]:
            continue
        print(f"{name}:")
        for item in grouped[name]:
            print(f"  {_task_line(item.task)}")
    if not items:
        print("(no tasks)")
    return 0


def cmd_matrix(args: argparse.Namespace, ws: Workspace) -> int:
    matrix = build_matrix(ws.tasks, args.project, args.sort, tz=args.tz)
    for quadrant in QUADRANTS:
        entries = matrix[quadrant]
        print(f"{quadrant} ({len(entries)}):")
        for item in entries:
            p = derive_task_priority(item.task, tz=args.tz)
            print(f"  {_task_line(item.task)}  [{p.urgency_label} / {p.importance_label}]")
    return 0


def cmd_add(args: argparse.Namespace, ws: Workspace) -> int:
    data: Dict[str, Any] = {"title": args.title}
    for key in ("project", "due", "importance", "urgency", "effort", "notes"):
        value = getattr(args, key)
        if value is not None:
            data[key] = value
    return _apply_single(args, ws, "add_task", data)


def cmd_done(args: argparse.Namespace, ws: Workspace) -> int:
    data: Dict[str, Any] = {"id": args.id}
    if args.at:
        data["completed_at"] = args.at
    return _apply_single(args, ws, "mark_complete", data)


def cmd_move(args: argparse.Namespace, ws: Workspace) -> int:
    for i, task in enumerate(ws.tasks):
        if task.get("id") == args.id:
            tasks = list(ws.tasks)
            tasks[i] = move_to_quadrant(task, args.quadrant)
            _save(args, tasks, ws.projects)
            return 0
    return _die(f"Task with id {args.id} was not found.", rc=3)


def cmd_project(args: argparse.Namespace, ws: Workspace) -> int:
    stamp = timestamp_factory()()
    if args.project_cmd == "add":
        change = add_project(ws.projects, args.name)
        tasks = ws.tasks
    elif args.project_cmd == "rename":
        change = rename_project(ws.projects, ws.tasks, args.old, args.new, stamp)
        tasks = change.tasks
    else:
        change = delete_project(ws.projects, ws.tasks, args.name, stamp)
        tasks = change.tasks
    if not change.ok:
        return _die(change.message or "project change failed", rc=3)
    _save(args, tasks, change.projects)
    return 0


def cmd_apply(args: argparse.Namespace, ws: Workspace) -> int:
    batch = load_operation_batch(Path(args.batch))
    errs = validate_operation_batch(batch)
    if errs:
        eprint("[focusbadger] FAIL")
        for e in errs:
            eprint(f"  - {e}")
        return 3
    if args.check:
        print(f"[focusbadger] OK ({len(batch['operations'])} operations)")
        return 0

    result = apply_operations(batch, ws.tasks, ws.projects)
    if not result.ok:
        return _die(result.error or "operation batch failed", rc=3)
    if args.dry_run:
        print(f"[focusbadger] dry-run OK: {len(result.tasks)} tasks, {len(result.projects)} projects")
        return 0
    _save(args, result.tasks, result.projects)
    return 0


def cmd_export(args: argparse.Namespace, ws: Workspace) -> int:
    bundle = build_export(ws.tasks, ws.projects)
    if args.briefing:
        text = bundle.briefing_text
    elif args.open_only:
        text = bundle.open_tasks_json
    else:
        text = bundle.full_snapshot_json

    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text + "\n", encoding="utf-8", newline="\n")
        print(f"[focusbadger] wrote: {out}")
    else:
        print(text)
    return 0


def cmd_import(args: argparse.Namespace, ws: Workspace) -> int:
    raw = sys.stdin.read() if args.source == "-" else Path(args.source).read_text(encoding="utf-8")
    result = parse_import(raw, base_tasks=ws.tasks, base_projects=ws.projects)
    if not result.ok:
        return _die(result.error or "import failed", rc=3)
    logger.info("import routed through %s", result.origin)
    if args.dry_run:
        print(f"[focusbadger] dry-run OK ({result.origin}): {len(result.tasks)} tasks, {len(result.projects)} projects")
        return 0
    _save(args, result.tasks, result.projects)
    return 0


# --- parser -------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="focusbadger",
        description="Plan tasks stored in a JSON Lines workspace file.",
    )
    ap.add_argument(
        "--file",
        default=os.getenv(FILE_ENV_VAR, DEFAULT_FILE),
        help=f"Workspace JSONL path (default: env {FILE_ENV_VAR} or '{DEFAULT_FILE}')",
    )
    ap.add_argument(
        "--tz",
        default=os.getenv(TZ_ENV_VAR, "local"),
        help=f"Timezone for due-date day boundaries (default: env {TZ_ENV_VAR} or 'local')",
    )
    ap.add_argument("--debug", action="store_true", help="Enable debug logging on stderr")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("list", help="List tasks grouped by due-date bucket")
    p.add_argument("--sort", choices=SORT_MODES, default=SORT_SCORE)
    p.add_argument("--project", action="append", default=None, help="Only show this project (repeatable)")
    p.add_argument("--all", action="store_true", help="Include completed tasks")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("matrix", help="Show the urgency/importance matrix")
    p.add_argument("--sort", choices=MATRIX_SORT_MODES, default=MATRIX_SORT_SCORE)
    p.add_argument("--project", action="append", default=None, help="Only show this project (repeatable)")
    p.set_defaults(func=cmd_matrix)

    p = sub.add_parser("add", help="Add a task")
    p.add_argument("title")
    p.add_argument("--project", default=None)
    p.add_argument("--due", default=None, help="YYYY-MM-DD")
    p.add_argument("--importance", type=float, default=None, help="1-5 (default 1)")
    p.add_argument("--urgency", type=float, default=None, help="1-5 (default 1)")
    p.add_argument("--effort", type=float, default=None, help="1-10 (default 3)")
    p.add_argument("--notes", default=None)
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("done", help="Mark a task complete")
    p.add_argument("id")
    p.add_argument("--at", default=None, help="Completion timestamp (ISO-8601)")
    p.set_defaults(func=cmd_done)

    p = sub.add_parser("move", help="Move a task into a matrix quadrant")
    p.add_argument("id")
    p.add_argument("quadrant", choices=QUADRANTS)
    p.set_defaults(func=cmd_move)

    p = sub.add_parser("project", help="Manage projects")
    psub = p.add_subparsers(dest="project_cmd", required=True)
    pa = psub.add_parser("add")
    pa.add_argument("name")
    pr = psub.add_parser("rename")
    pr.add_argument("old")
    pr.add_argument("new")
    pd = psub.add_parser("delete")
    pd.add_argument("name")
    p.set_defaults(func=cmd_project)

    p = sub.add_parser("apply", help="Apply an operation batch JSON file")
    p.add_argument("batch")
    p.add_argument("--check", action="store_true", help="Only validate the batch envelopes")
    p.add_argument("--dry-run", action="store_true", help="Apply in memory without writing")
    p.set_defaults(func=cmd_apply)

    p = sub.add_parser("export", help="Export a snapshot or assistant briefing")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--open-only", action="store_true", help="Exclude completed tasks")
    mode.add_argument("--briefing", action="store_true", help="Render the assistant briefing prompt")
    p.add_argument("--out", default=None, help="Write to this path instead of stdout")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("import", help="Import assistant output (records, JSONL or an operation batch)")
    p.add_argument("source", help="Input file, or '-' for stdin")
    p.add_argument("--dry-run", action="store_true", help="Parse and apply in memory without writing")
    p.set_defaults(func=cmd_import)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)

    try:
        args.tz = normalize_tz_name(args.tz)
        resolve_tz(args.tz)
    except ValueError as e:
        return _die(f"Invalid --tz value: {e}")

    try:
        ws = load_workspace(args.file)
    except FocusBadgerError as e:
        return _die(f"Failed to load workspace {args.file}: {e}")
    except OSError as e:
        return _die(f"Failed to read workspace {args.file}: {e}")

    try:
        return int(args.func(args, ws))
    except FocusBadgerError as e:
        return _die(str(e), rc=3)
    except OSError as e:
        return _die(str(e))


if __name__ == "__main__":
    raise SystemExit(main())
