"""Opt-in JSONL record of API calls, refresh cycles and login/logout results.

Enabled with ``TECHFORGE_TELEMETRY_ENABLED``; records go to the per-user log
directory unless a file is given. Events are flat dicts; nothing from a
request or response body is ever written.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from platformdirs import user_log_dir

Event = dict[str, Any]


def _ok_status(status_code: int | None) -> bool:
    return status_code is not None and 200 <= status_code <= 299


def api_call_event(
    *,
    method: str,
    path: str,
    status_code: int | None,
    duration_ms: int,
    trace_id: str | None,
    error_code: str | None = None,
) -> Event:
    ok = _ok_status(status_code)
    return {
        "kind": "api_call",
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": duration_ms,
        "trace_id": trace_id,
        "ok": ok,
        # A missing status means the request never got an answer.
        "error_code": None if ok else (error_code or "TRANSPORT_ERROR"),
    }


def sync_cycle_event(*, panel: str, duration_ms: int, rows: int | None, error_code: str | None = None) -> Event:
    return {
        "kind": "sync_cycle",
        "panel": panel,
        "duration_ms": duration_ms,
        "rows": rows,
        "ok": error_code is None,
        "error_code": error_code,
    }


def auth_event(*, action: str, ok: bool, error_code: str | None = None) -> Event:
    return {"kind": "auth", "action": action, "ok": ok, "error_code": error_code}


def default_log_file(app_name: str) -> Path:
    return Path(user_log_dir("techforge", "TechForge")) / f"{app_name}.jsonl"


def telemetry_enabled() -> bool:
    return os.getenv("TECHFORGE_TELEMETRY_ENABLED", "0").strip().lower() in {"1", "true", "yes", "on"}


class TelemetryLogger:
    """Appends one JSON line per event. Shared by the HTTP client and every refresh worker."""

    def __init__(self, app_name: str, *, enabled: bool | None = None, log_file: str | Path | None = None) -> None:
        self.app_name = app_name
        self.enabled = telemetry_enabled() if enabled is None else enabled
        self.log_file = Path(log_file) if log_file else default_log_file(app_name)
        self._lock = threading.Lock()

    def emit(self, event: Event) -> bool:
        if not self.enabled:
            return False
        record = {"ts": datetime.now(timezone.utc).isoformat(), "app": self.app_name, **event}
        line = json.dumps(record, sort_keys=True)
        with self._lock:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with self.log_file.open("a", encoding="utf-8") as fp:
                fp.write(line + "\n")
        return True
