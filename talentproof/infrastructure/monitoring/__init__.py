"""Prometheus monitoring."""

from talentproof.infrastructure.monitoring.metrics import (
    METRICS_CONTENT_TYPE,
    VerificationMetrics,
    generate_metrics,
    get_verification_metrics,
    reset_verification_metrics,
)

__all__: list[str] = [
    "METRICS_CONTENT_TYPE",
    "VerificationMetrics",
    "generate_metrics",
    "get_verification_metrics",
    "reset_verification_metrics",
]
