"""Prometheus metrics for the verification engine.

Two groups of metrics share one registry:
- HTTP request metrics (duration histogram, totals, failures)
- Verification outcome metrics (accepted attestations, rejected attempts by
  error type, duplicates by reason, consensus reached, views)

Labels: service, environment on every metric.
"""

import os
import threading

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Content type for Prometheus metrics endpoint
METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_collector_lock = threading.Lock()

# Request duration buckets (10ms to 10s)
DEFAULT_HISTOGRAM_BUCKETS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


class VerificationMetrics:
    """Collects Prometheus metrics for HTTP traffic and verification outcomes.

    Attributes:
        http_request_duration_seconds: Histogram for request latency.
        http_requests_total: Counter for all HTTP requests.
        http_requests_failed_total: Counter for 4xx/5xx responses.
        verifications_accepted_total: Accepted attestations.
        verifications_rejected_total: Refused attempts by error type.
        duplicate_attestations_total: Duplicate attempts by collision reason.
        consensus_reached_total: Videos that crossed their threshold.
        videos_registered_total: Newly registered videos.
        video_views_total: Recorded views.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize the metrics.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "talentproof-api")

        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            documentation="HTTP request duration in seconds",
            labelnames=["service", "environment", "method", "endpoint"],
            buckets=DEFAULT_HISTOGRAM_BUCKETS,
            registry=self._registry,
        )
        self.http_requests_total = Counter(
            name="http_requests_total",
            documentation="Total HTTP requests",
            labelnames=["service", "environment", "method", "endpoint", "status"],
            registry=self._registry,
        )
        self.http_requests_failed_total = Counter(
            name="http_requests_failed_total",
            documentation="Total failed HTTP requests (4xx, 5xx)",
            labelnames=["service", "environment", "method", "endpoint", "status"],
            registry=self._registry,
        )

        self.verifications_accepted_total = Counter(
            name="verifications_accepted_total",
            documentation="Total accepted verification attestations",
            labelnames=["service", "environment"],
            registry=self._registry,
        )
        self.verifications_rejected_total = Counter(
            name="verifications_rejected_total",
            documentation="Total refused verification attempts",
            labelnames=["service", "environment", "error_type"],
            registry=self._registry,
        )
        self.duplicate_attestations_total = Counter(
            name="duplicate_attestations_total",
            documentation="Verification attempts refused as duplicate device or network",
            labelnames=["service", "environment", "reason"],
            registry=self._registry,
        )
        self.consensus_reached_total = Counter(
            name="verification_consensus_reached_total",
            documentation="Videos that reached their verification threshold",
            labelnames=["service", "environment"],
            registry=self._registry,
        )
        self.videos_registered_total = Counter(
            name="videos_registered_total",
            documentation="Total registered videos",
            labelnames=["service", "environment"],
            registry=self._registry,
        )
        self.video_views_total = Counter(
            name="video_views_total",
            documentation="Total recorded video views",
            labelnames=["service", "environment"],
            registry=self._registry,
        )

    def _labels(self) -> dict[str, str]:
        return {"service": self._service_name, "environment": self._environment}

    def observe_request(
        self, method: str, endpoint: str, status_code: int, duration: float
    ) -> None:
        """Record one HTTP request.

        Args:
            method: HTTP method.
            endpoint: Request path.
            status_code: Response status code.
            duration: Request duration in seconds.
        """
        self.http_request_duration_seconds.labels(
            **self._labels(), method=method, endpoint=endpoint
        ).observe(duration)
        self.http_requests_total.labels(
            **self._labels(), method=method, endpoint=endpoint, status=str(status_code)
        ).inc()
        if status_code >= 400:
            self.http_requests_failed_total.labels(
                **self._labels(),
                method=method,
                endpoint=endpoint,
                status=str(status_code),
            ).inc()

    def record_accepted(self, threshold_crossed: bool) -> None:
        self.verifications_accepted_total.labels(**self._labels()).inc()
        if threshold_crossed:
            self.consensus_reached_total.labels(**self._labels()).inc()

    def record_rejected(self, error_type: str, duplicate_reason: str | None = None) -> None:
        """Record a refused attempt.

        Args:
            error_type: Class name of the typed error.
            duplicate_reason: Collision reason for duplicate attempts.
        """
        self.verifications_rejected_total.labels(
            **self._labels(), error_type=error_type
        ).inc()
        if duplicate_reason is not None:
            self.duplicate_attestations_total.labels(
                **self._labels(), reason=duplicate_reason
            ).inc()

    def record_registration(self) -> None:
        self.videos_registered_total.labels(**self._labels()).inc()

    def record_view(self) -> None:
        self.video_views_total.labels(**self._labels()).inc()

    def get_registry(self) -> CollectorRegistry:
        return self._registry


_verification_metrics: VerificationMetrics | None = None


def get_verification_metrics() -> VerificationMetrics:
    """Get the singleton VerificationMetrics instance (thread-safe)."""
    global _verification_metrics
    if _verification_metrics is None:
        with _collector_lock:
            if _verification_metrics is None:
                _verification_metrics = VerificationMetrics()
    return _verification_metrics


def generate_metrics() -> bytes:
    """Generate Prometheus metrics in exposition format."""
    return generate_latest(get_verification_metrics().get_registry())


def reset_verification_metrics() -> None:
    """Reset the singleton (for testing only)."""
    global _verification_metrics
    with _collector_lock:
        _verification_metrics = None
