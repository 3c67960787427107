from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None = None
    trace_id: str | None = None
    status_code: int | None = None
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        status = self.status_code if self.status_code is not None else "-"
        return f"[{status}] {self.code}: {self.message}{trace}"


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class HttpError(ApiError):
    """The server answered with a status outside 200-299."""


class AuthError(HttpError):
    """Authentication failed or session is invalid."""


class ForbiddenError(HttpError):
    pass


class NotFoundError(HttpError):
    pass


class ValidationError(HttpError):
    pass


class ConflictError(HttpError):
    """409 or conflict-style errors."""


class RateLimitError(HttpError):
    """429 throttling error."""


class ServerError(HttpError):
    """5xx server-side failures."""


class ParseError(ApiError):
    """A response body (or one record inside it) could not be interpreted."""


class PartialDataError(ApiError):
    """A non-essential sub-fetch failed; the cycle continues with degraded data."""
