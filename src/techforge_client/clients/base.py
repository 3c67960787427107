from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..exceptions import ParseError
from ..http_client import HttpClient
from ..outcomes import Outcome


@dataclass
class BaseClient:
    http: HttpClient

    def _request(self, method: str, path: str, **kwargs: Any) -> Outcome:
        return self.http.request(method, path, **kwargs)

    def _json_list(self, path: str, *, allow_single: bool = False) -> list[Any]:
        """GET ``path`` and return its JSON array, raising on any failure.

        With ``allow_single`` a lone JSON object is treated as a one-element list.
        """
        outcome = self._request("GET", path)
        if not outcome.ok:
            outcome.unwrap()
        payload = outcome.json()
        if isinstance(payload, list):
            return payload
        if allow_single and isinstance(payload, dict):
            return [payload]
        raise ParseError(
            code="UNEXPECTED_PAYLOAD",
            message=f"Expected a JSON array from {path}, got {type(payload).__name__}",
            trace_id=outcome.trace_id,
            status_code=outcome.status_code,
            raw_payload=outcome.body,
        )
