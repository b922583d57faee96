# kickoff_hub/utils_debug.py
from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Read on every call so tests and long-running kiosks can flip it live.
DEBUG_ENV = "KICKOFF_DEBUG"
DEBUG_LOG_ENV = "KICKOFF_DEBUG_LOG"


def _enabled() -> bool:
    return os.getenv(DEBUG_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def format_line(tag: str, **kv: Any) -> str:
    ts = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    fields = " ".join(f"{k}={v!r}" for k, v in kv.items())
    return f"{ts} [{tag}] {fields}".rstrip()


def dbg(tag: str, **kv: Any) -> None:
    """
    One debug line per event, e.g. `[load.fail] tab='Games' via='name' error=...`.

    Goes to $KICKOFF_DEBUG_LOG when set, otherwise stderr; stdout belongs to
    the CLI's tables and reports.
    """
    if not _enabled():
        return

    line = format_line(tag, **kv)
    log_path = os.getenv(DEBUG_LOG_ENV, "").strip()
    if log_path:
        try:
            Path(log_path).parent.mkdir(parents=True, exist_ok=True)
            with open(log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
            return
        except OSError:
            pass
    print(line, file=sys.stderr)
