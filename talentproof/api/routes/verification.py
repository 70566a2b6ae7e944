"""Verification submission and eligibility routes.

POST /v1/videos/{video_id}/verifications
GET  /v1/videos/{video_id}/verification-eligibility

Identity signals are resolved from the request first (fingerprint header,
client address), outside the submission service's critical section. The
service then returns either the updated record or a typed error, which is
rendered as RFC 7807 problem details.

Status codes:
- 201: attestation accepted
- 400: malformed verifier fields
- 404: video not found
- 409: duplicate device/network, already verified, rejected, lost race
- 428: device fingerprint or IP address unavailable (Retry-After)

The eligibility check answers 200 with eligible=false and the refusal a
submission would get, or 404 for an unknown video.
"""

from fastapi import APIRouter, Depends, Request

from talentproof.api.dependencies.verification import (
    get_client_request_context,
    get_fingerprint_collector,
    get_metrics,
    get_verification_submission_service,
)
from talentproof.api.models.verification import (
    ProblemDetailResponse,
    SubmitVerificationRequest,
    VerificationEligibilityResponse,
    VerificationSubmissionResponse,
)
from talentproof.api.problem_details import problem_exception
from talentproof.application.ports.fingerprint_collector import (
    ClientRequestContext,
    FingerprintCollectorProtocol,
)
from talentproof.application.services.verification_submission_service import (
    VerificationSubmissionService,
)
from talentproof.domain.errors import DuplicateAttestationError, VideoNotFoundError
from talentproof.domain.models.verification_candidate import VerificationCandidate
from talentproof.infrastructure.monitoring.metrics import VerificationMetrics

router = APIRouter(prefix="/v1/videos", tags=["verification"])


@router.post(
    "/{video_id}/verifications",
    response_model=VerificationSubmissionResponse,
    status_code=201,
    responses={
        400: {"model": ProblemDetailResponse, "description": "Invalid verifier fields"},
        404: {"model": ProblemDetailResponse, "description": "Video not found"},
        409: {
            "model": ProblemDetailResponse,
            "description": (
                "Device or network already verified this video, video already "
                "verified or rejected, or a concurrent update (retry)"
            ),
        },
        428: {
            "model": ProblemDetailResponse,
            "description": "Device and network verification in progress (retry)",
        },
    },
    summary="Verify a talent video",
)
async def submit_verification(
    video_id: str,
    request_data: SubmitVerificationRequest,
    request: Request,
    client: ClientRequestContext = Depends(get_client_request_context),
    collector: FingerprintCollectorProtocol = Depends(get_fingerprint_collector),
    service: VerificationSubmissionService = Depends(
        get_verification_submission_service
    ),
    metrics: VerificationMetrics = Depends(get_metrics),
) -> VerificationSubmissionResponse:
    """Attest that a video is authentic.

    Args:
        video_id: The video to verify.
        request_data: Verifier form fields.
        request: FastAPI request for error context.
        client: Request headers and peer address.
        collector: Resolves device fingerprint and IP address.
        service: Injected submission service.
        metrics: Verification metrics.

    Returns:
        VerificationSubmissionResponse with the updated count and status.

    Raises:
        HTTPException: RFC 7807 problem details for every refused attempt.
    """
    identity = await collector.acquire(client)
    candidate = VerificationCandidate(
        verifier_name=request_data.verifier_name,
        verifier_email=request_data.verifier_email,
        verifier_relationship=request_data.verifier_relationship,
        verification_message=request_data.verification_message,
        identity=identity,
    )

    result = await service.submit_verification(video_id, candidate)

    if result.error is not None:
        error = result.error
        metrics.record_rejected(
            type(error).__name__,
            duplicate_reason=error.reason.value
            if isinstance(error, DuplicateAttestationError)
            else None,
        )
        raise problem_exception(error, request) from None

    record = result.unwrap()
    metrics.record_accepted(threshold_crossed=result.threshold_crossed)
    attestation = record.verifications[-1]
    return VerificationSubmissionResponse(
        video_id=record.id,
        verifier_id=attestation.verifier_id,
        verified_at=attestation.verified_at,
        verification_count=record.verification_count,
        verification_threshold=record.verification_threshold,
        verification_status=record.verification_status.value,
        threshold_crossed=result.threshold_crossed,
    )


@router.get(
    "/{video_id}/verification-eligibility",
    response_model=VerificationEligibilityResponse,
    responses={
        404: {"model": ProblemDetailResponse, "description": "Video not found"},
    },
    summary="Check whether this device and network can verify a video",
)
async def check_verification_eligibility(
    video_id: str,
    request: Request,
    client: ClientRequestContext = Depends(get_client_request_context),
    collector: FingerprintCollectorProtocol = Depends(get_fingerprint_collector),
    service: VerificationSubmissionService = Depends(
        get_verification_submission_service
    ),
) -> VerificationEligibilityResponse:
    """Read-only pre-check run when the verification page loads.

    Nothing is recorded; a later submission may still be refused if another
    verifier gets there first.
    """
    identity = await collector.acquire(client)
    try:
        eligibility = await service.check_eligibility(video_id, identity)
    except VideoNotFoundError as e:
        raise problem_exception(e, request) from None

    response = VerificationEligibilityResponse(
        video_id=eligibility.video_id,
        eligible=eligibility.eligible,
        verification_count=eligibility.verification_count,
        verification_threshold=eligibility.verification_threshold,
    )
    error = eligibility.error
    if error is None:
        return response

    problem = error.to_rfc7807_dict()
    response.reason = problem["type"]
    response.detail = problem["detail"]
    response.retryable = error.retryable
    if isinstance(error, DuplicateAttestationError):
        response.duplicate_reason = error.reason.value
        response.prior_attestor_names = list(error.prior_attestor_names)
    return response
