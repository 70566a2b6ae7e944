"""Unit tests for verification Prometheus metrics."""

import pytest
from prometheus_client import CollectorRegistry

from talentproof.infrastructure.monitoring.metrics import (
    VerificationMetrics,
    generate_metrics,
    get_verification_metrics,
    reset_verification_metrics,
)

LABELS = {"service": "talentproof-test", "environment": "test"}


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def metrics(
    registry: CollectorRegistry, monkeypatch: pytest.MonkeyPatch
) -> VerificationMetrics:
    monkeypatch.setenv("SERVICE_NAME", "talentproof-test")
    monkeypatch.setenv("ENVIRONMENT", "test")
    return VerificationMetrics(registry=registry)


class TestVerificationMetrics:
    def test_accepted_and_consensus(
        self, metrics: VerificationMetrics, registry: CollectorRegistry
    ) -> None:
        metrics.record_accepted(threshold_crossed=False)
        metrics.record_accepted(threshold_crossed=True)

        assert registry.get_sample_value("verifications_accepted_total", LABELS) == 2
        assert (
            registry.get_sample_value("verification_consensus_reached_total", LABELS)
            == 1
        )

    def test_rejected_with_duplicate_reason(
        self, metrics: VerificationMetrics, registry: CollectorRegistry
    ) -> None:
        metrics.record_rejected("DuplicateAttestationError", duplicate_reason="device")
        metrics.record_rejected("AntiCheatUnavailableError")

        assert (
            registry.get_sample_value(
                "verifications_rejected_total",
                {**LABELS, "error_type": "DuplicateAttestationError"},
            )
            == 1
        )
        assert (
            registry.get_sample_value(
                "duplicate_attestations_total", {**LABELS, "reason": "device"}
            )
            == 1
        )

    def test_failed_requests_counted(
        self, metrics: VerificationMetrics, registry: CollectorRegistry
    ) -> None:
        request_labels = {**LABELS, "method": "POST", "endpoint": "/v1/videos"}
        metrics.observe_request("POST", "/v1/videos", 201, 0.01)
        metrics.observe_request("POST", "/v1/videos", 409, 0.02)

        assert (
            registry.get_sample_value(
                "http_requests_total", {**request_labels, "status": "201"}
            )
            == 1
        )
        assert (
            registry.get_sample_value(
                "http_requests_failed_total", {**request_labels, "status": "409"}
            )
            == 1
        )
        assert (
            registry.get_sample_value(
                "http_requests_failed_total", {**request_labels, "status": "201"}
            )
            is None
        )
        assert (
            registry.get_sample_value(
                "http_request_duration_seconds_count", request_labels
            )
            == 2
        )


class TestSingleton:
    def test_singleton_reset(self) -> None:
        first = get_verification_metrics()
        assert get_verification_metrics() is first
        reset_verification_metrics()
        assert get_verification_metrics() is not first

    def test_generate_metrics_exposition(self) -> None:
        get_verification_metrics().record_registration()
        assert b"videos_registered_total" in generate_metrics()
