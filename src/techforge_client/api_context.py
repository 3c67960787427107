from __future__ import annotations

from dataclasses import dataclass, field

from .clients.auth import AuthClient
from .clients.finance import FinanceClient
from .clients.users import UsersClient
from .config import ClientConfig
from .http_client import HttpClient
from .session import SessionStore
from .sync.panel import PanelSync
from .sync.payroll import PayrollFeed, PayrollRow
from .sync.reconcile import CanonicalRow, TransactionFeed
from .sync.scheduler import Dispatcher, direct_dispatch
from .sync.sinks import RenderSink
from .telemetry import TelemetryLogger


@dataclass
class ApiContext:
    """Owns the process's session store and shared HTTP transport.

    Views receive clients and panel syncs from here instead of reaching for
    global state.
    """

    config: ClientConfig
    session_store: SessionStore = field(default_factory=SessionStore)
    telemetry: TelemetryLogger | None = None
    http: HttpClient | None = None

    def __post_init__(self) -> None:
        if self.http is None:
            self.http = HttpClient(
                config=self.config,
                session_store=self.session_store,
                telemetry=self.telemetry,
            )

    def _http(self) -> HttpClient:
        if self.http is None:
            raise RuntimeError("HTTP client not initialized")
        return self.http

    def auth_client(self) -> AuthClient:
        return AuthClient(http=self._http())

    def users_client(self) -> UsersClient:
        return UsersClient(http=self._http())

    def finance_client(self) -> FinanceClient:
        return FinanceClient(http=self._http())

    def transactions_panel(
        self,
        sink: RenderSink[CanonicalRow],
        dispatch: Dispatcher = direct_dispatch,
    ) -> PanelSync[CanonicalRow]:
        feed = TransactionFeed(self.users_client(), self.finance_client())
        return PanelSync(
            feed,
            sink,
            interval_seconds=self.config.refresh_interval_seconds,
            dispatch=dispatch,
            telemetry=self.telemetry,
        )

    def payroll_panel(
        self,
        sink: RenderSink[PayrollRow],
        dispatch: Dispatcher = direct_dispatch,
    ) -> PanelSync[PayrollRow]:
        return PanelSync(
            PayrollFeed(self.finance_client()),
            sink,
            interval_seconds=self.config.refresh_interval_seconds,
            dispatch=dispatch,
            telemetry=self.telemetry,
        )

    def close(self) -> None:
        self._http().close()
