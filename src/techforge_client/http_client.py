from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError
from .logger import log_api_call
from .outcomes import Failure, Outcome, Success
from .session import SessionStore
from .telemetry import TelemetryLogger, api_call_event

logger = logging.getLogger(__name__)

REQUESTER_HEADER = "X-Requester-ID"
TRACE_HEADER = "X-Trace-ID"
ALLOWED_METHODS = {"GET", "POST", "PUT", "DELETE"}


@dataclass
class LastOperation:
    method: str
    path: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    """Blocking HTTP transport. Call it from worker threads, never the UI thread.

    Every call returns an :data:`Outcome`; nothing here raises for HTTP or
    network trouble.
    """

    config: ClientConfig
    session_store: SessionStore
    session: requests.Session | None = None
    telemetry: TelemetryLogger | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    def _build_url(self, path: str) -> str:
        # The host always comes from config, even when `path` looks absolute.
        return f"{self.config.api_base_url.rstrip('/')}/{path.lstrip('/')}"

    def build_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        requester_id = self.session_store.current().user_id
        if requester_id is not None:
            headers[REQUESTER_HEADER] = requester_id
        if extra:
            headers.update(extra)
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Outcome:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        normalized_method = method.upper()
        if normalized_method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = self._build_url(path)
        request_headers = self.build_headers(headers)
        trace_id = str(uuid.uuid4())
        request_headers[TRACE_HEADER] = trace_id
        requester_id = request_headers.get(REQUESTER_HEADER)

        started = time.monotonic()
        try:
            response = self.session.request(
                method=normalized_method,
                url=url,
                headers=request_headers,
                json=json_body,
                params=params,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.RequestException as exc:
            duration_ms = int((time.monotonic() - started) * 1000)
            error = TransportError(
                code="TRANSPORT_ERROR",
                message=str(exc),
                details={"type": type(exc).__name__},
                trace_id=trace_id,
                status_code=None,
            )
            self._record(normalized_method, path, duration_ms, "transport_error", trace_id)
            log_api_call(
                logger,
                method=normalized_method,
                url=url,
                status_code=None,
                requester_id=requester_id,
                body=f"{type(exc).__name__}: {exc}",
                body_limit=self.config.log_body_limit,
                duration_ms=duration_ms,
                trace_id=trace_id,
                outcome="transport_error",
            )
            self._emit(normalized_method, path, None, duration_ms, trace_id, error.code)
            return Failure(status_code=None, raw_body="", message=error.message, error=error)

        duration_ms = int((time.monotonic() - started) * 1000)
        trace_id = response.headers.get(TRACE_HEADER) or trace_id
        body = response.text or ""
        status_code = response.status_code

        if 200 <= status_code <= 299:
            outcome: Outcome = Success(body=body, status_code=status_code, trace_id=trace_id)
            result = "success"
            error_code = None
        else:
            payload = _safe_payload(body)
            error = map_error(
                status_code,
                payload if isinstance(payload, dict) else None,
                trace_id,
                raw_body=body,
            )
            trace_id = error.trace_id or trace_id
            outcome = Failure(
                status_code=status_code,
                raw_body=body,
                message=f"API Error: {status_code} - {error.message}",
                error=error,
            )
            result = "http_error"
            error_code = error.code

        self._record(normalized_method, path, duration_ms, result, trace_id)
        log_api_call(
            logger,
            method=normalized_method,
            url=url,
            status_code=status_code,
            requester_id=requester_id,
            body=body,
            body_limit=self.config.log_body_limit,
            duration_ms=duration_ms,
            trace_id=trace_id,
            outcome=result,
        )
        self._emit(normalized_method, path, status_code, duration_ms, trace_id, error_code)
        return outcome

    def get(self, path: str, **kwargs: Any) -> Outcome:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, json_body: Any = None, **kwargs: Any) -> Outcome:
        return self.request("POST", path, json_body=json_body, **kwargs)

    def put(self, path: str, json_body: Any = None, **kwargs: Any) -> Outcome:
        return self.request("PUT", path, json_body=json_body, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Outcome:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        if self.session is not None:
            self.session.close()

    def _record(self, method: str, path: str, duration_ms: int, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            method=method,
            path=path,
            duration_ms=duration_ms,
            result=result,
            trace_id=trace_id,
        )

    def _emit(
        self,
        method: str,
        path: str,
        status_code: int | None,
        duration_ms: int,
        trace_id: str | None,
        error_code: str | None,
    ) -> None:
        if self.telemetry is None:
            return
        self.telemetry.emit(
            api_call_event(
                method=method,
                path=path,
                status_code=status_code,
                duration_ms=duration_ms,
                trace_id=trace_id,
                error_code=error_code,
            )
        )


def _safe_payload(body: str) -> Any:
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        return None
