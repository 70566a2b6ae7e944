"""Observability infrastructure: structured logging and correlation IDs.

Usage:
    from talentproof.infrastructure.observability import (
        configure_structlog,
        set_correlation_id,
    )

    configure_structlog(environment="production")
    set_correlation_id(request_correlation_id)
"""

from talentproof.infrastructure.observability.correlation import (
    accept_correlation_id,
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from talentproof.infrastructure.observability.logging import configure_structlog

__all__: list[str] = [
    "accept_correlation_id",
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]
