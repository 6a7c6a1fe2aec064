from __future__ import annotations

import json
import logging
from typing import Any, Optional

_MAX_FIELD_CHARS = 500


def _coerce_field(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        if isinstance(value, str) and len(value) > _MAX_FIELD_CHARS:
            return value[:_MAX_FIELD_CHARS] + "..."
        return value
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_coerce_field(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _coerce_field(item) for key, item in value.items()}
    return str(value)


def format_event(event: str, **fields: Any) -> str:
    payload: dict[str, Any] = {"event": event}
    for key, value in fields.items():
        payload[key] = _coerce_field(value)
    return json.dumps(payload, sort_keys=False, default=str)


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    *,
    exc: Optional[BaseException] = None,
    **fields: Any,
) -> None:
    """Emit a structured, single-line JSON log record for ``event``."""
    if not logger.isEnabledFor(level):
        return
    if exc is not None:
        fields.setdefault("error", str(exc))
        fields.setdefault("error_type", type(exc).__name__)
    logger.log(level, format_event(event, **fields), exc_info=exc)


def configure_logging(level: str = "INFO") -> None:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
