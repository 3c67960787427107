from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, NoReturn, Union

from .exceptions import ApiError, ParseError, TransportError


@dataclass(frozen=True)
class Success:
    body: str
    status_code: int
    trace_id: str | None = None

    @property
    def ok(self) -> bool:
        return True

    def json(self) -> Any:
        if not self.body.strip():
            return None
        try:
            return json.loads(self.body)
        except json.JSONDecodeError as exc:
            raise ParseError(
                code="MALFORMED_BODY",
                message=f"Response body is not valid JSON: {exc.msg}",
                trace_id=self.trace_id,
                status_code=self.status_code,
                raw_payload=self.body,
            ) from exc

    def unwrap(self) -> Success:
        return self


@dataclass(frozen=True)
class Failure:
    """A call that did not succeed.

    ``status_code`` is ``None`` when no HTTP response was received at all.
    """

    status_code: int | None
    raw_body: str
    message: str
    error: ApiError

    @property
    def ok(self) -> bool:
        return False

    @property
    def is_transport(self) -> bool:
        return isinstance(self.error, TransportError)

    def unwrap(self) -> NoReturn:
        raise self.error


Outcome = Union[Success, Failure]
