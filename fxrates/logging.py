"""Logging helpers and structured JSON formatter for the rates client."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

LOGGING_CONFIG_FLAG = "_logging_configured"

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "asctime",
}


class JSONLogFormatter(logging.Formatter):
    """Format LogRecord instances into structured JSON strings."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        extras = _extract_extras(record.__dict__)
        if extras:
            payload.update(extras)

        return json.dumps(_json_safe(payload), separators=(",", ":"))


def setup_logging(config: Mapping[str, Any], *, force: bool = False) -> logging.Handler | None:
    """Configure the root logger from a config mapping.

    Returns the installed handler, or ``None`` when logging was already
    configured by a previous call and ``force`` is not set.
    """

    root_logger = logging.getLogger()
    if getattr(root_logger, LOGGING_CONFIG_FLAG, False) and not force:
        return None

    level = _resolve_level(config.get("LOG_LEVEL", "INFO"))
    json_enabled = _to_bool(config.get("LOG_JSON_ENABLED", False))
    format_string = config.get("LOG_FORMAT") or DEFAULT_LOG_FORMAT

    handler = logging.StreamHandler()
    handler.setLevel(level)
    if json_enabled:
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(format_string))

    _replace_handlers(root_logger, [handler])
    root_logger.setLevel(level)

    # urllib3 logs every connection at DEBUG; keep it quieter than our own output.
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))

    setattr(root_logger, LOGGING_CONFIG_FLAG, True)
    return handler


def request_log_extra(
    *,
    event: str,
    path: str,
    status: int | str,
    duration_ms: float | None,
    cached: bool,
    base: str | None = None,
    error: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "event": event,
        "path": path,
        "base": base,
        "status": status,
        "duration_ms": round(duration_ms, 3) if duration_ms is not None else None,
        "source": "fixer",
        "cached": cached,
    }
    if error:
        payload["error"] = error
    return {key: value for key, value in payload.items() if value is not None}


def _extract_extras(record_dict: dict[str, Any]) -> dict[str, Any]:
    extras: dict[str, Any] = {}
    for key, value in record_dict.items():
        if key in RESERVED_ATTRS or key.startswith("_"):
            continue
        extras[key] = _json_safe(value)
    return extras


def _json_safe(value: Any) -> Any:
    if isinstance(value, str | int | float | bool) or value is None:
        return value
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, list | tuple | set):
        return [_json_safe(item) for item in value]
    return str(value)


def _resolve_level(level_name: Any) -> int:
    if isinstance(level_name, int):
        return level_name
    if not level_name:
        return logging.INFO
    candidate = str(level_name).upper()
    level = getattr(logging, candidate, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _replace_handlers(logger: logging.Logger, handlers: Iterable[logging.Handler]) -> None:
    for existing in logger.handlers[:]:
        logger.removeHandler(existing)
    for handler in handlers:
        logger.addHandler(handler)
