from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "http://localhost:8080/api/v1"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str = "dev"
    api_base_url: str = DEFAULT_API_BASE_URL
    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 30.0
    write_timeout_seconds: float = 30.0
    refresh_interval_seconds: float = 10.0
    max_connections: int = 10
    verify_ssl: bool = True
    log_body_limit: int = 200

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()

    @property
    def timeout(self) -> tuple[float, float]:
        # requests has no separate write timeout; the read value bounds every
        # socket wait after connect, so the larger of the two applies.
        return (
            self.connect_timeout_seconds,
            max(self.read_timeout_seconds, self.write_timeout_seconds),
        )


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("TECHFORGE_ENV") or "dev").strip()
    env_key = env_name.upper()

    api_base_url = (
        (os.getenv(f"TECHFORGE_API_BASE_URL_{env_key}") or "").strip()
        or (os.getenv("TECHFORGE_API_BASE_URL") or "").strip()
        or DEFAULT_API_BASE_URL
    )
    _validate(
        api_base_url.startswith(("http://", "https://")),
        f"Invalid TECHFORGE_API_BASE_URL: expected an http(s) URL, got {api_base_url!r}",
    )

    connect_timeout_seconds = _read_float("TECHFORGE_CONNECT_TIMEOUT_SECONDS", "10")
    _validate(
        connect_timeout_seconds > 0,
        f"Invalid TECHFORGE_CONNECT_TIMEOUT_SECONDS: expected > 0, got {connect_timeout_seconds}",
    )

    read_timeout_seconds = _read_float("TECHFORGE_READ_TIMEOUT_SECONDS", "30")
    _validate(
        read_timeout_seconds > 0,
        f"Invalid TECHFORGE_READ_TIMEOUT_SECONDS: expected > 0, got {read_timeout_seconds}",
    )

    write_timeout_seconds = _read_float("TECHFORGE_WRITE_TIMEOUT_SECONDS", "30")
    _validate(
        write_timeout_seconds > 0,
        f"Invalid TECHFORGE_WRITE_TIMEOUT_SECONDS: expected > 0, got {write_timeout_seconds}",
    )

    refresh_interval_seconds = _read_float("TECHFORGE_REFRESH_INTERVAL_SECONDS", "10")
    _validate(
        refresh_interval_seconds > 0,
        (
            "Invalid TECHFORGE_REFRESH_INTERVAL_SECONDS: "
            f"expected > 0, got {refresh_interval_seconds}"
        ),
    )

    max_connections = _read_int("TECHFORGE_MAX_CONNECTIONS", "10")
    _validate(
        max_connections >= 1,
        f"Invalid TECHFORGE_MAX_CONNECTIONS: expected >= 1, got {max_connections}",
    )

    log_body_limit = _read_int("TECHFORGE_LOG_BODY_LIMIT", "200")
    _validate(
        log_body_limit >= 0,
        f"Invalid TECHFORGE_LOG_BODY_LIMIT: expected >= 0, got {log_body_limit}",
    )

    verify_ssl = _coerce_bool(os.getenv("TECHFORGE_VERIFY_SSL"), True)

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect_timeout_seconds,
        read_timeout_seconds=read_timeout_seconds,
        write_timeout_seconds=write_timeout_seconds,
        refresh_interval_seconds=refresh_interval_seconds,
        max_connections=max_connections,
        verify_ssl=verify_ssl,
        log_body_limit=log_body_limit,
    )
