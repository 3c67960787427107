from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from typing import Any, Sequence, TextIO

from .api_context import ApiContext
from .config import ConfigError, load_config
from .exceptions import ApiError
from .logger import get_logger
from .sync.panel import PanelSync
from .sync.sinks import RowBuffer
from .telemetry import TelemetryLogger


def _print_rows(stream: TextIO, panel: str, rows: Sequence[Any]) -> None:
    for row in rows:
        stream.write(json.dumps({"panel": panel, **row.to_dict()}) + "\n")
    stream.flush()


def _login(context: ApiContext, args: argparse.Namespace, stream: TextIO) -> bool:
    if not args.email:
        return True
    outcome = context.auth_client().login(args.email, args.password or "")
    if not outcome.ok:
        stream.write(json.dumps({"error": outcome.error.code, "message": outcome.message}) + "\n")
        return False
    session = context.session_store.current()
    stream.write(json.dumps({"user_id": session.user_id, "role": session.role}) + "\n")
    return True


def _build_panel(context: ApiContext, command: str, buffer: RowBuffer) -> PanelSync:
    if command == "payroll":
        return context.payroll_panel(buffer)
    return context.transactions_panel(buffer)


def cmd_watch(args: argparse.Namespace, stream: TextIO) -> int:
    context = ApiContext(load_config(args.env_file), telemetry=TelemetryLogger("techforge-sync"))
    try:
        if not _login(context, args, stream):
            return 1
        buffer: RowBuffer = RowBuffer()
        buffer.subscribe(lambda rows: _print_rows(stream, args.command, rows))
        panel = _build_panel(context, args.command, buffer)
        if args.once:
            try:
                rows = panel.feed()
            except ApiError as exc:
                stream.write(json.dumps({"error": exc.code, "message": exc.message, "trace_id": exc.trace_id}) + "\n")
                return 1
            finally:
                panel.stop()
            buffer.replace_rows(rows)
            return 0
        stopped = threading.Event()
        panel.start()
        try:
            stopped.wait(args.duration)
        except KeyboardInterrupt:
            pass
        finally:
            panel.stop(wait=True)
        return 0
    finally:
        context.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TechForge panel sync CLI")
    parser.add_argument("--env-file", default=None)
    parser.add_argument("--email", default=None)
    parser.add_argument("--password", default=None)
    parser.add_argument("--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name in ("transactions", "payroll"):
        sub = subparsers.add_parser(name)
        sub.add_argument("--once", action="store_true", help="run a single cycle and exit")
        sub.add_argument("--duration", type=float, default=None, help="stop after N seconds")
        sub.set_defaults(func=cmd_watch)
    return parser


def main(argv: Sequence[str] | None = None, stream: TextIO | None = None) -> int:
    args = build_parser().parse_args(argv)
    get_logger("techforge_client", logging.DEBUG if args.verbose else logging.WARNING)
    out = stream or sys.stdout
    try:
        return args.func(args, out)
    except ConfigError as exc:
        out.write(json.dumps({"error": "CONFIG_ERROR", "message": str(exc)}) + "\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
