from .api_context import ApiContext
from .clients import AuthClient, FinanceClient, UsersClient
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthError,
    ForbiddenError,
    HttpError,
    NotFoundError,
    ParseError,
    PartialDataError,
    ServerError,
    TransportError,
    ValidationError,
)
from .http_client import REQUESTER_HEADER, TRACE_HEADER, HttpClient
from .outcomes import Failure, Outcome, Success
from .session import Session, SessionStore
from .sync import (
    CanonicalRow,
    PanelSync,
    PayrollFeed,
    PayrollRow,
    RefreshScheduler,
    RenderSink,
    RowBuffer,
    TransactionFeed,
    ViewState,
    direct_dispatch,
    tk_dispatch,
)
from .telemetry import TelemetryLogger

__version__ = "0.3.0"

__all__ = [
    "ApiContext",
    "ApiError",
    "AuthClient",
    "AuthError",
    "CanonicalRow",
    "ClientConfig",
    "ConfigError",
    "Failure",
    "FinanceClient",
    "ForbiddenError",
    "HttpClient",
    "HttpError",
    "NotFoundError",
    "Outcome",
    "PanelSync",
    "ParseError",
    "PartialDataError",
    "PayrollFeed",
    "PayrollRow",
    "REQUESTER_HEADER",
    "RefreshScheduler",
    "RenderSink",
    "RowBuffer",
    "ServerError",
    "Session",
    "SessionStore",
    "Success",
    "TRACE_HEADER",
    "TelemetryLogger",
    "TransactionFeed",
    "TransportError",
    "UsersClient",
    "ValidationError",
    "ViewState",
    "direct_dispatch",
    "load_config",
    "tk_dispatch",
]
