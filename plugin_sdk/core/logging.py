from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, MutableMapping

from plugin_sdk.core.config import get_settings
from plugin_sdk.core.errors import ConfigurationError


_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class JsonFormatter(logging.Formatter):
    """Serialize log records into single-line JSON for structured ingestion."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - override
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        structured = getattr(record, "structured_data", None)
        if isinstance(structured, Mapping):
            payload.update(structured)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = record.stack_info
        return json.dumps(payload, ensure_ascii=True, default=str)


class StructuredAdapter(logging.LoggerAdapter):
    """Logger adapter that merges keyword extra fields into structured JSON."""

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        extra_payload: Dict[str, Any] = dict(self.extra or {})
        existing_extra = kwargs.get("extra")
        if isinstance(existing_extra, dict):
            structured = existing_extra.get("structured_data")
            if isinstance(structured, Mapping):
                extra_payload.update(dict(structured))
        else:
            existing_extra = {}
        existing_extra["structured_data"] = extra_payload
        kwargs["extra"] = existing_extra
        return msg, kwargs


_STRUCTURED_ATTR = "_structured_configured"


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        return get_settings().log_level_value
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ConfigurationError(f"Unknown logging level: {level!r}", detail={"level": level})
    return resolved


def configure_logging(
    *,
    level: int | str | None = None,
    environment: str | None = None,
    json_output: bool | None = None,
    force: bool = False,
) -> None:
    """Configure root logger once (idempotent unless ``force`` is set).

    Args:
        level: Base logging level; defaults to ``Settings.log_level``.
        environment: Runtime environment ('dev', 'test', 'staging', 'prod').
                     In 'dev' and 'test', an INFO base level is lowered to DEBUG.
                     In 'prod', the level never drops below INFO.
        json_output: Emit JSON lines; defaults to ``Settings.log_json``.
        force: Replace an existing configuration.

    The SDK never calls this on import; host processes opt in.
    """
    root = logging.getLogger()
    if bool(getattr(root, _STRUCTURED_ATTR, False)) and not force:
        return

    settings = get_settings()
    environment = environment or settings.environment
    json_output = settings.log_json if json_output is None else json_output
    base_level = _resolve_level(level)

    if environment in ("dev", "test"):
        effective_level = logging.DEBUG if base_level == logging.INFO else base_level
    elif environment == "prod":
        effective_level = max(base_level, logging.INFO)
    else:
        effective_level = base_level

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(_TEXT_FORMAT))
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(effective_level)
    setattr(root, _STRUCTURED_ATTR, True)


def get_logger(name: str, **defaults: Any) -> StructuredAdapter:
    """Return a structured logger adapter injecting default structured fields."""

    logger = logging.getLogger(name)
    return StructuredAdapter(logger, defaults)


__all__ = [
    "JsonFormatter",
    "StructuredAdapter",
    "configure_logging",
    "get_logger",
]
