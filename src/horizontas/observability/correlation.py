"""Correlation ID management for request tracing."""

import re
import uuid
from contextvars import ContextVar, Token

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

CORRELATION_ID_HEADER = "X-Correlation-ID"

# Incoming IDs are echoed into logs and headers; keep them short and plain.
_VALID_ID = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def correlation_id_from_header(value: str | None) -> str:
    """Use the caller's ID when it is well-formed, otherwise mint one."""
    if value and _VALID_ID.match(value):
        return value
    return generate_correlation_id()


def get_correlation_id() -> str:
    return correlation_id_var.get()


def set_correlation_id(cid: str) -> Token[str]:
    return correlation_id_var.set(cid)


def reset_correlation_id(token: Token[str]) -> None:
    correlation_id_var.reset(token)
