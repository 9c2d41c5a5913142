from __future__ import annotations

import logging
import re
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime, timezone
from typing import Any, Iterator, Mapping

REDACTED = "<redacted>"
REDACTED_EMAIL = "<redacted-email>"

_TRACE_ID_CTX: ContextVar[str | None] = ContextVar("bursar_trace_id", default=None)
_SENSITIVE_KEY_PARTS = (
    "password",
    "token",
    "secret",
    "pin",
    "card_number",
    "account_number",
)
_EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_SECRET_PAIR_PATTERN = re.compile(r"(?i)\b(password|token|secret|pin)\b\s*[:=]\s*([^\s,;]+)")


def create_trace_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"op-{stamp}-{uuid.uuid4().hex[:8]}"


def current_trace_id() -> str | None:
    value = _TRACE_ID_CTX.get()
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


@contextmanager
def bind_trace_id(trace_id: str | None = None) -> Iterator[str]:
    """Tag every log record emitted inside the block with one operation id."""
    normalized = (trace_id or "").strip() or create_trace_id()
    token = _TRACE_ID_CTX.set(normalized)
    try:
        yield normalized
    finally:
        _TRACE_ID_CTX.reset(token)


def _is_sensitive_key(value: object) -> bool:
    key = str(value or "").strip().lower().replace("-", "_")
    return any(part in key for part in _SENSITIVE_KEY_PARTS)


def redact_text(value: str) -> str:
    text = str(value or "")
    text = _EMAIL_PATTERN.sub(REDACTED_EMAIL, text)
    text = _SECRET_PAIR_PATTERN.sub(lambda m: f"{m.group(1)}={REDACTED}", text)
    return text


def redact_value(value: Any, *, _depth: int = 0, _max_depth: int = 8) -> Any:
    if _depth >= _max_depth:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {
            str(key): REDACTED
            if _is_sensitive_key(key)
            else redact_value(item, _depth=_depth + 1, _max_depth=_max_depth)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_value(item, _depth=_depth + 1, _max_depth=_max_depth) for item in value]
    return redact_text(str(value))


class TraceIdLogFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = current_trace_id() or "-"
        return True


__all__ = [
    "REDACTED",
    "REDACTED_EMAIL",
    "TraceIdLogFilter",
    "bind_trace_id",
    "create_trace_id",
    "current_trace_id",
    "redact_text",
    "redact_value",
]
