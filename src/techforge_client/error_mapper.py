from __future__ import annotations

from typing import Mapping

from .exceptions import (
    AuthError,
    ConflictError,
    ForbiddenError,
    HttpError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)


def map_error(
    status_code: int,
    payload: Mapping[str, object] | None,
    trace_id: str | None,
    raw_body: str = "",
) -> HttpError:
    payload = payload or {}
    code = str(payload.get("code") or payload.get("error") or f"HTTP_{status_code}")
    message = str(payload.get("message") or raw_body or "Request failed")
    details = payload.get("details")
    payload_trace_id = payload.get("trace_id")
    resolved_trace_id = str(payload_trace_id) if payload_trace_id is not None else trace_id
    mapped: type[HttpError]
    if status_code == 401:
        mapped = AuthError
    elif status_code == 403:
        mapped = ForbiddenError
    elif status_code == 404:
        mapped = NotFoundError
    elif status_code in {400, 422}:
        mapped = ValidationError
    elif status_code == 409:
        mapped = ConflictError
    elif status_code == 429:
        mapped = RateLimitError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = HttpError
    return mapped(
        code=code,
        message=message,
        details=details,
        trace_id=resolved_trace_id,
        status_code=status_code,
        raw_payload=raw_body,
    )
