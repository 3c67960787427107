from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from ..exceptions import ApiError
from ..telemetry import TelemetryLogger, sync_cycle_event

logger = logging.getLogger(__name__)

T = TypeVar("T")
Dispatcher = Callable[[Callable[[], None]], None]


def direct_dispatch(fn: Callable[[], None]) -> None:
    """Run the callback on the calling (worker) thread. For headless use."""
    fn()


def tk_dispatch(root: Any) -> Dispatcher:
    """Hand callbacks to a Tk main loop via ``root.after(0, ...)``."""

    def dispatch(fn: Callable[[], None]) -> None:
        root.after(0, fn)

    return dispatch


@dataclass
class SchedulerStats:
    started: int = 0
    applied: int = 0
    skipped: int = 0
    failed: int = 0
    discarded: int = 0


class RefreshScheduler(Generic[T]):
    """Drive a fetch-join-render cycle at a fixed interval.

    ``cycle`` runs on a dedicated worker thread and returns the data to
    render; ``apply`` receives that data through ``dispatch`` (normally onto
    the UI thread). A cycle counts as in flight from the moment it is
    submitted until ``apply`` (or ``on_error``) has returned, and ticks that
    fire meanwhile are dropped. After :meth:`stop` no tick fires and any
    late result is thrown away.
    """

    def __init__(
        self,
        cycle: Callable[[], T],
        apply: Callable[[T], None],
        *,
        interval_seconds: float = 10.0,
        dispatch: Dispatcher = direct_dispatch,
        on_error: Optional[Callable[[Exception], None]] = None,
        name: str = "refresh",
        telemetry: TelemetryLogger | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        self.cycle = cycle
        self.apply = apply
        self.interval_seconds = interval_seconds
        self.dispatch = dispatch
        self.on_error = on_error
        self.name = name
        self.telemetry = telemetry
        self.stats = SchedulerStats()
        self._lock = threading.Lock()
        self._in_flight = False
        self._cancelled = threading.Event()
        self._ticker: threading.Thread | None = None
        self._worker: threading.Thread | None = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"{name}-worker")

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> None:
        """Run one cycle now, then one per interval until :meth:`stop`."""
        if self._cancelled.is_set():
            raise RuntimeError(f"scheduler {self.name!r} was stopped and cannot be restarted")
        if self._ticker is not None:
            return
        self._ticker = threading.Thread(target=self._run_ticker, name=f"{self.name}-ticker", daemon=True)
        self._ticker.start()

    def stop(self, wait: bool = False) -> None:
        self._cancelled.set()
        here = threading.current_thread()
        # Called from inside apply under direct_dispatch: neither thread can join itself.
        self._executor.shutdown(wait=wait and here is not self._worker, cancel_futures=True)
        ticker = self._ticker
        if wait and ticker is not None and ticker is not here:
            ticker.join()
        logger.info("refresh_stopped", extra={"scheduler": self.name})

    def tick(self) -> bool:
        """Submit a cycle unless one is already in flight. Returns whether it was submitted."""
        with self._lock:
            if self._cancelled.is_set():
                return False
            if self._in_flight:
                self.stats.skipped += 1
                logger.debug("refresh_tick_skipped", extra={"scheduler": self.name})
                return False
            self._in_flight = True
            self.stats.started += 1
        try:
            self._executor.submit(self._run_cycle)
        except RuntimeError:
            # Executor shut down between the cancellation check and submit.
            self._release()
            return False
        return True

    def _run_ticker(self) -> None:
        while not self._cancelled.is_set():
            self.tick()
            if self._cancelled.wait(self.interval_seconds):
                break

    def _run_cycle(self) -> None:
        self._worker = threading.current_thread()
        started = time.monotonic()
        try:
            result = self.cycle()
        except ApiError as exc:
            logger.warning(
                "refresh_cycle_failed",
                extra={"scheduler": self.name, "code": exc.code, "status_code": exc.status_code},
            )
            self._handoff(lambda error=exc: self._report_failure(error, started))
            return
        except Exception as exc:
            logger.exception("refresh_cycle_crashed", extra={"scheduler": self.name})
            self._handoff(lambda error=exc: self._report_failure(error, started))
            return
        if self._cancelled.is_set():
            self._discard()
            return
        self._handoff(lambda: self._deliver(result, started))

    def _handoff(self, callback: Callable[[], None]) -> None:
        try:
            self.dispatch(callback)
        except Exception:
            logger.exception("refresh_dispatch_failed", extra={"scheduler": self.name})
            self._release()

    def _deliver(self, result: T, started: float) -> None:
        try:
            if self._cancelled.is_set():
                self._discard(release=False)
                return
            try:
                self.apply(result)
            except Exception:
                logger.exception("refresh_apply_failed", extra={"scheduler": self.name})
                self._count("failed")
                self._emit(started, None, "APPLY_FAILED")
                return
            self._count("applied")
            self._emit(started, len(result) if hasattr(result, "__len__") else None, None)
        finally:
            self._release()

    def _report_failure(self, exc: Exception, started: float) -> None:
        try:
            if self._cancelled.is_set():
                self._discard(release=False)
                return
            self._count("failed")
            self._emit(started, None, getattr(exc, "code", type(exc).__name__))
            if self.on_error is not None:
                self.on_error(exc)
        finally:
            self._release()

    def _discard(self, release: bool = True) -> None:
        self._count("discarded")
        logger.debug("refresh_result_discarded", extra={"scheduler": self.name})
        if release:
            self._release()

    def _count(self, field_name: str) -> None:
        with self._lock:
            setattr(self.stats, field_name, getattr(self.stats, field_name) + 1)

    def _release(self) -> None:
        with self._lock:
            self._in_flight = False

    def _emit(self, started: float, rows: int | None, error_code: str | None) -> None:
        if self.telemetry is None:
            return
        self.telemetry.emit(
            sync_cycle_event(
                panel=self.name,
                duration_ms=int((time.monotonic() - started) * 1000),
                rows=rows,
                error_code=error_code,
            )
        )
