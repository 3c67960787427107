from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Sequence, TypeVar

from ..telemetry import TelemetryLogger
from .scheduler import Dispatcher, RefreshScheduler, direct_dispatch
from .sinks import RenderSink

logger = logging.getLogger(__name__)

R = TypeVar("R")


class ViewStateStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    SUCCESS = "success"
    STALE = "stale"
    FAILED = "failed"


@dataclass(frozen=True)
class ViewState:
    status: ViewStateStatus
    message: str | None = None
    trace_id: str | None = None
    data_available: bool = False

    def render(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "trace_id": self.trace_id,
            "data_available": self.data_available,
        }


def resolve_state(
    *,
    error: str | None,
    has_data: bool,
    row_count: int,
    trace_id: str | None = None,
) -> ViewState:
    if error and has_data:
        return ViewState(ViewStateStatus.STALE, error, trace_id=trace_id, data_available=True)
    if error:
        return ViewState(ViewStateStatus.FAILED, error, trace_id=trace_id)
    if not has_data:
        return ViewState(ViewStateStatus.LOADING, "Loading data...", trace_id=trace_id)
    if not row_count:
        return ViewState(ViewStateStatus.EMPTY, "No data found", trace_id=trace_id, data_available=True)
    return ViewState(ViewStateStatus.SUCCESS, "Ready", trace_id=trace_id, data_available=True)


class PanelSync(Generic[R]):
    """Keeps one panel's sink fed from a feed callable.

    Failed cycles leave the sink untouched, so the last good rows stay on
    screen; the failure only shows up in :meth:`state`.
    """

    def __init__(
        self,
        feed: Callable[[], Sequence[R]],
        sink: RenderSink[R],
        *,
        interval_seconds: float = 10.0,
        dispatch: Dispatcher = direct_dispatch,
        name: str | None = None,
        telemetry: TelemetryLogger | None = None,
    ) -> None:
        self.feed = feed
        self.sink = sink
        self.name = name or getattr(feed, "name", "panel")
        self.last_error: str | None = None
        self.last_trace_id: str | None = None
        self.has_data = False
        self.row_count = 0
        self.scheduler: RefreshScheduler[Sequence[R]] = RefreshScheduler(
            feed,
            self._apply,
            interval_seconds=interval_seconds,
            dispatch=dispatch,
            on_error=self._record_error,
            name=self.name,
            telemetry=telemetry,
        )

    def start(self) -> None:
        self.scheduler.start()

    def stop(self, wait: bool = False) -> None:
        self.scheduler.stop(wait=wait)

    def refresh_now(self) -> bool:
        return self.scheduler.tick()

    def state(self) -> ViewState:
        return resolve_state(
            error=self.last_error,
            has_data=self.has_data,
            row_count=self.row_count,
            trace_id=self.last_trace_id,
        )

    def _apply(self, rows: Sequence[R]) -> None:
        self.sink.replace_rows(list(rows))
        self.has_data = True
        self.row_count = len(rows)
        self.last_error = None
        self.last_trace_id = None

    def _record_error(self, exc: Exception) -> None:
        self.last_error = getattr(exc, "message", None) or str(exc)
        self.last_trace_id = getattr(exc, "trace_id", None)
        logger.info(
            "panel_kept_previous_rows",
            extra={"panel": self.name, "rows": self.row_count},
        )
