# focusbadger/util/console.py
from __future__ import annotations

import logging
import os
import sys
from typing import Any

OBS_ENV_VAR = "FOCUSBADGER_OBS_LOG"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def obs_enabled() -> bool:
    v = (os.getenv(OBS_ENV_VAR, "") or "").strip().lower()
    return v in {"1", "true", "yes", "on"}


def configure_logging(debug: bool = False) -> None:
    level = logging.DEBUG if (debug or obs_enabled()) else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT, stream=sys.stderr)
