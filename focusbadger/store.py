"""Flat-file workspace storage (one JSONL file per workspace)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Union

from .jsonl import parse_jsonl
from .model import Task, Workspace
from .projects import build_snapshot, hydrate_records

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_workspace(path: PathLike) -> Workspace:
    """Read and hydrate a workspace file; a missing file is an empty workspace.

    Malformed lines raise ParseError (fail-fast, with the line number).
    """
    p = Path(path)
    if not p.exists():
        logger.debug("workspace %s does not exist; starting empty", p)
        return Workspace()
    workspace = hydrate_records(parse_jsonl(p.read_text(encoding="utf-8")))
    logger.debug("loaded %s (%d tasks, %d projects)", p, len(workspace.tasks), len(workspace.projects))
    return workspace


def save_workspace(path: PathLike, tasks: Iterable[Task] = (), projects: Iterable[str] = ()) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    text = build_snapshot(tasks, projects)
    p.write_text(text + "\n" if text else "", encoding="utf-8", newline="\n")
    logger.debug("saved %s", p)
    return p


__all__ = ["load_workspace", "save_workspace"]
