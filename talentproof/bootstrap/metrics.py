"""Bootstrap wiring for Prometheus metrics."""

from __future__ import annotations

from talentproof.infrastructure.monitoring.metrics import (
    METRICS_CONTENT_TYPE,
    VerificationMetrics,
    generate_metrics,
    get_verification_metrics,
    reset_verification_metrics,
)


def get_metrics() -> VerificationMetrics:
    """Get the metrics instance."""
    return get_verification_metrics()


def reset_metrics() -> None:
    """Reset metrics singletons (testing cleanup)."""
    reset_verification_metrics()


__all__ = [
    "METRICS_CONTENT_TYPE",
    "VerificationMetrics",
    "generate_metrics",
    "get_metrics",
    "reset_metrics",
]
