"""Redaction helpers for safe logging. Guest contact data never reaches logs."""

import re
from typing import Any

# Nine or more digits, so ISO dates (8 digits) survive.
_PHONE_PATTERN = re.compile(r"\+?(?:\d[\s\-()]*){8,}\d")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_REDACTED = "[REDACTED]"

# Keys whose values are personal data regardless of their shape.
SENSITIVE_KEYS = frozenset(
    {"guest_name", "name", "email", "customer_email", "phone", "phone_number"}
)


def redact_string(value: str) -> str:
    """Redact PII patterns from a string."""
    result = _PHONE_PATTERN.sub(_REDACTED, value)
    result = _EMAIL_PATTERN.sub(_REDACTED, result)
    return result


def redact_value(value: Any) -> Any:
    """Redact a single value. Scalars keep their JSON type."""
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        # Structure only, never values
        return f"dict(keys={list(value.keys())})"
    if isinstance(value, (list, tuple, set, frozenset)):
        return f"list(len={len(value)})"
    return f"<{type(value).__name__}>"


def redact_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Redact a dict of log fields, masking sensitive keys entirely."""
    return {
        key: _REDACTED if key in SENSITIVE_KEYS and value else redact_value(value)
        for key, value in fields.items()
    }
