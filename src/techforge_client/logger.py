import json
import logging
from datetime import datetime, timezone


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    return logger


def excerpt(body: str, limit: int) -> str:
    if len(body) <= limit:
        return body
    return body[:limit] + "..."


def log_api_call(
    logger: logging.Logger,
    method: str,
    url: str,
    status_code: int | None,
    requester_id: str | None,
    body: str,
    body_limit: int,
    duration_ms: int,
    trace_id: str | None,
    outcome: str,
) -> None:
    level = logging.INFO if outcome == "success" else logging.WARNING
    logger.log(
        level,
        json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "event": "api_call",
                "method": method,
                "url": url,
                "status_code": status_code,
                "requester_id": requester_id,
                "duration_ms": duration_ms,
                "trace_id": trace_id,
                "outcome": outcome,
                "body": excerpt(body, body_limit),
            }
        ),
    )
