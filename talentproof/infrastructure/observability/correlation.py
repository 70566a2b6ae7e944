"""Correlation IDs tying one verification request's log lines together.

A single attestation touches the fingerprint collector, the submission
service and the video record store. All of them log through structlog, and
the correlation ID processor stamps each entry with the request's ID so a
refused or conflicting submission can be traced end to end.

The ID lives in a contextvar: concurrent submissions on the same event loop
each see their own value.

Verifiers are anonymous, so an inbound X-Correlation-ID is untrusted input
that ends up in every log line. accept_correlation_id() keeps it only when it
is a short token of safe characters and mints a fresh UUID4 otherwise.
"""

import re
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

MAX_CORRELATION_ID_LENGTH = 64
_CORRELATION_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]+")

# Empty string means "not set"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return str(uuid4())


def accept_correlation_id(inbound: str | None) -> str:
    """Return the caller's correlation ID if well-formed, else a new one.

    Args:
        inbound: Raw X-Correlation-ID header value, if any.

    Returns:
        A correlation ID safe to write into structured logs.
    """
    if (
        inbound
        and len(inbound) <= MAX_CORRELATION_ID_LENGTH
        and _CORRELATION_ID_PATTERN.fullmatch(inbound)
    ):
        return inbound
    return generate_correlation_id()


def get_correlation_id() -> str:
    """Current request's correlation ID ("" outside a request)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor stamping correlation_id on in-request entries.

    Entries logged outside a request (startup, scheduler hooks) carry no
    correlation_id key rather than an empty one.
    """
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict
