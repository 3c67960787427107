from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ParseError
from ..models import DEFAULT_ROLE, LoginResponse
from ..outcomes import Failure, Outcome, Success
from ..session import Session, SessionStore
from ..telemetry import auth_event
from .base import BaseClient

logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"
PROFILE_PATH = "/users/profile"


class AuthClient(BaseClient):
    def login(self, email: str, password: str) -> Outcome:
        """Post credentials and, on success, publish the identity to the session store.

        The session is left untouched by any failure, including a 2xx body
        that cannot be parsed.
        """
        payload = {"email": email, "password": password}
        outcome = self._request("POST", LOGIN_PATH, json_body=payload)
        if not isinstance(outcome, Success):
            logger.warning("login_failure", extra={"status_code": outcome.status_code})
            self._emit_auth("login", False, outcome.error.code)
            return outcome
        try:
            data = outcome.json()
            result = LoginResponse.model_validate(data if isinstance(data, dict) else {})
        except (ParseError, PydanticValidationError) as exc:
            error = exc if isinstance(exc, ParseError) else ParseError(
                code="MALFORMED_LOGIN_RESPONSE",
                message=str(exc),
                trace_id=outcome.trace_id,
                status_code=outcome.status_code,
                raw_payload=outcome.body,
            )
            logger.warning("login_response_unreadable", extra={"trace_id": outcome.trace_id})
            self._emit_auth("login", False, error.code)
            return Failure(
                status_code=outcome.status_code,
                raw_body=outcome.body,
                message=error.message,
                error=error,
            )
        if result.user_id is not None:
            self.http.session_store.login(
                Session(
                    user_id=result.user_id,
                    role=result.role or DEFAULT_ROLE,
                    user_profile=result.user,
                )
            )
            logger.info("login_success", extra={"trace_id": outcome.trace_id})
        else:
            logger.warning("login_without_user_id", extra={"trace_id": outcome.trace_id})
        self._emit_auth("login", result.user_id is not None, None)
        return outcome

    def logout(self) -> None:
        # Local reset only, no backend call.
        self.http.session_store.logout()
        self._emit_auth("logout", True, None)

    def fetch_profile(self) -> Outcome:
        outcome = self._request("GET", PROFILE_PATH)
        if isinstance(outcome, Success):
            returned = _returned_user(outcome)
            if returned is not None:
                store = self.http.session_store
                store.set_profile(_with_identity(store, returned))
        return outcome

    def update_profile(self, changes: Mapping[str, Any]) -> Outcome:
        """Save profile changes; the local profile is updated only when the server accepts them.

        The server's reply is an envelope (``{"message": ..., "user": {...}}``)
        or empty. The new local profile is the current one plus the returned
        ``user`` plus ``changes``; ``id`` and ``role`` never change here.
        """
        outcome = self._request("PUT", PROFILE_PATH, json_body=dict(changes))
        if isinstance(outcome, Success):
            store = self.http.session_store
            current = store.current()
            profile = {**(current.user_profile or {}), **(_returned_user(outcome) or {}), **dict(changes)}
            if current.user_id is not None:
                profile["id"] = current.user_id
            if current.role is not None:
                profile["role"] = current.role
            store.set_profile(profile)
        return outcome

    def _emit_auth(self, action: str, ok: bool, error_code: str | None) -> None:
        if self.http.telemetry is not None:
            self.http.telemetry.emit(auth_event(action=action, ok=ok, error_code=error_code))


def _returned_user(outcome: Success) -> dict[str, Any] | None:
    """The user object in a profile reply, unwrapped from ``{"user": ...}`` if needed."""
    try:
        data = outcome.json()
    except ParseError:
        logger.warning("profile_response_unreadable", extra={"trace_id": outcome.trace_id})
        return None
    if not isinstance(data, dict):
        return None
    if isinstance(data.get("user"), dict):
        return data["user"]
    if "message" in data and "id" not in data:
        return None
    return data or None


def _with_identity(store: SessionStore, profile: Mapping[str, Any]) -> dict[str, Any]:
    current = store.current()
    merged = dict(profile)
    if current.user_id is not None:
        merged.setdefault("id", current.user_id)
    if current.role is not None:
        merged.setdefault("role", current.role)
    return merged
