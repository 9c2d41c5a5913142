from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def generate_id() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


__all__ = ["generate_id", "utc_now"]
