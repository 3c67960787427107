from __future__ import annotations

import json

from techforge_client import telemetry as telemetry_module
from techforge_client.telemetry import TelemetryLogger, api_call_event, auth_event, sync_cycle_event


def test_api_call_event_success_and_failure() -> None:
    ok = api_call_event(method="GET", path="/finance/payroll", status_code=200, duration_ms=5, trace_id="t")
    refused = api_call_event(method="GET", path="/users", status_code=None, duration_ms=5, trace_id="t")
    rejected = api_call_event(method="PUT", path="/users/profile", status_code=403, duration_ms=5, trace_id="t", error_code="HTTP_403")

    assert ok["ok"] is True
    assert ok["error_code"] is None
    assert refused["ok"] is False
    assert refused["error_code"] == "TRANSPORT_ERROR"
    assert rejected["error_code"] == "HTTP_403"


def test_sync_and_auth_events() -> None:
    cycle = sync_cycle_event(panel="transactions", duration_ms=3, rows=None, error_code="HTTP_500")
    login = auth_event(action="login", ok=False, error_code="HTTP_401")

    assert cycle == {
        "kind": "sync_cycle",
        "panel": "transactions",
        "duration_ms": 3,
        "rows": None,
        "ok": False,
        "error_code": "HTTP_500",
    }
    assert login["kind"] == "auth"
    assert login["ok"] is False


def test_disabled_logger_writes_nothing(tmp_path) -> None:
    telemetry = TelemetryLogger("desktop", enabled=False, log_file=tmp_path / "t.jsonl")

    assert telemetry.emit(sync_cycle_event(panel="p", duration_ms=1, rows=1)) is False
    assert not (tmp_path / "t.jsonl").exists()


def test_enabled_logger_appends_stamped_lines(tmp_path) -> None:
    telemetry = TelemetryLogger("desktop", enabled=True, log_file=tmp_path / "nested" / "t.jsonl")

    telemetry.emit(sync_cycle_event(panel="p", duration_ms=1, rows=1))
    telemetry.emit(sync_cycle_event(panel="p", duration_ms=2, rows=2))

    lines = [json.loads(line) for line in (tmp_path / "nested" / "t.jsonl").read_text().splitlines()]
    assert [line["rows"] for line in lines] == [1, 2]
    assert all(line["app"] == "desktop" and line["ts"] for line in lines)


def test_enabled_flag_and_default_file(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(telemetry_module, "user_log_dir", lambda *args: str(tmp_path))
    monkeypatch.setenv("TECHFORGE_TELEMETRY_ENABLED", "true")

    telemetry = TelemetryLogger("desktop")

    assert telemetry.enabled is True
    assert telemetry.log_file == tmp_path / "desktop.jsonl"

    monkeypatch.setenv("TECHFORGE_TELEMETRY_ENABLED", "0")

    assert TelemetryLogger("desktop").enabled is False
