from __future__ import annotations

from bursar_core.exceptions import ConflictError, ValidationError


def ensure_expected_version(entity: object, expected_version: int | None, *, label: str) -> None:
    if expected_version is None:
        return
    if getattr(entity, "version", 1) != expected_version:
        raise ConflictError(
            f"{label} changed since you opened it. Refresh and try again.",
            code="STALE_WRITE",
        )


def require_reason(reason: str | None, *, code: str, message: str = "A reason is required.") -> str:
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError(message, code=code)
    return cleaned


def require_positive(value: float, *, field_name: str, code: str = "AMOUNT_NOT_POSITIVE") -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must be a number.", code=code) from exc
    if number <= 0:
        raise ValidationError(f"{field_name} must be greater than zero.", code=code)
    return number


__all__ = ["ensure_expected_version", "require_reason", "require_positive"]
