"""Verification API dependencies.

Thin FastAPI providers over the bootstrap composition root. Tests replace
them through app.dependency_overrides.
"""

from fastapi import Request

from talentproof.application.ports.fingerprint_collector import (
    ClientRequestContext,
    FingerprintCollectorProtocol,
)
from talentproof.application.services.verification_deadline_service import (
    VerificationDeadlineService,
)
from talentproof.application.services.verification_submission_service import (
    VerificationSubmissionService,
)
from talentproof.application.services.video_registration_service import (
    VideoRegistrationService,
)
from talentproof.bootstrap import verification as verification_bootstrap
from talentproof.infrastructure.monitoring.metrics import (
    VerificationMetrics,
    get_verification_metrics,
)


def get_verification_submission_service() -> VerificationSubmissionService:
    return verification_bootstrap.get_verification_submission_service()


def get_video_registration_service() -> VideoRegistrationService:
    return verification_bootstrap.get_video_registration_service()


def get_verification_deadline_service() -> VerificationDeadlineService:
    return verification_bootstrap.get_verification_deadline_service()


def get_fingerprint_collector() -> FingerprintCollectorProtocol:
    return verification_bootstrap.get_fingerprint_collector()


def get_metrics() -> VerificationMetrics:
    return get_verification_metrics()


def get_client_request_context(request: Request) -> ClientRequestContext:
    """Framework-neutral view of the request for the fingerprint collector."""
    return ClientRequestContext(
        headers=dict(request.headers),
        peer_host=request.client.host if request.client else None,
    )
