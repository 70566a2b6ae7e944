"""Video registration, read and moderation routes."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from talentproof.api.dependencies.verification import (
    get_metrics,
    get_verification_deadline_service,
    get_video_registration_service,
)
from talentproof.api.models.verification import ProblemDetailResponse
from talentproof.api.models.video import (
    DeadlineCheckResponse,
    DeadlinePassedRequest,
    RegisterVideoRequest,
    RejectVideoRequest,
    VerificationProgressResponse,
    VerificationStatsResponse,
    VideoListResponse,
    VideoResponse,
    ViewCountResponse,
)
from talentproof.api.problem_details import problem_exception
from talentproof.application.services.verification_deadline_service import (
    VerificationDeadlineService,
)
from talentproof.application.services.video_registration_service import (
    VideoRegistration,
    VideoRegistrationService,
)
from talentproof.domain.errors import InvalidStatusTransitionError, VideoNotFoundError
from talentproof.domain.models.video_record import VerificationStatus
from talentproof.infrastructure.monitoring.metrics import VerificationMetrics

router = APIRouter(prefix="/v1/videos", tags=["videos"])

_NOT_FOUND = {404: {"model": ProblemDetailResponse, "description": "Video not found"}}


@router.post(
    "",
    response_model=VideoResponse,
    status_code=201,
    summary="Register a talent video",
)
async def register_video(
    request_data: RegisterVideoRequest,
    service: VideoRegistrationService = Depends(get_video_registration_service),
    metrics: VerificationMetrics = Depends(get_metrics),
) -> VideoResponse:
    """Create an empty pending record with threshold, deadline and link."""
    try:
        record = await service.register_video(
            VideoRegistration(**request_data.model_dump())
        )
    except ValueError as e:
        raise HTTPException(
            status_code=409,
            detail={
                "type": "urn:talentproof:video:registration-conflict",
                "title": "Video Registration Failed",
                "status": 409,
                "detail": str(e),
            },
        ) from None
    metrics.record_registration()
    return VideoResponse.from_record(record)


@router.get(
    "",
    response_model=VideoListResponse,
    summary="List videos by verification status",
)
async def list_videos(
    status: VerificationStatus = Query(default=VerificationStatus.PENDING),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    service: VideoRegistrationService = Depends(get_video_registration_service),
) -> VideoListResponse:
    records, total = await service.list_by_status(status, limit=limit, offset=offset)
    return VideoListResponse(
        items=[VideoResponse.from_record(r) for r in records],
        total=total,
        limit=limit,
        offset=offset,
    )


# Registered before /{video_id} so "stats" is not taken as an id
@router.get(
    "/stats",
    response_model=VerificationStatsResponse,
    summary="Count videos per verification status",
)
async def get_verification_stats(
    service: VideoRegistrationService = Depends(get_video_registration_service),
) -> VerificationStatsResponse:
    stats = await service.get_verification_stats()
    return VerificationStatsResponse(
        pending=stats.pending,
        verified=stats.verified,
        rejected=stats.rejected,
        total=stats.total,
    )


@router.get(
    "/{video_id}",
    response_model=VideoResponse,
    responses=_NOT_FOUND,
    summary="Get a video record",
)
async def get_video(
    video_id: str,
    request: Request,
    service: VideoRegistrationService = Depends(get_video_registration_service),
) -> VideoResponse:
    try:
        record = await service.get_video(video_id)
    except VideoNotFoundError as e:
        raise problem_exception(e, request) from None
    return VideoResponse.from_record(record)


@router.get(
    "/{video_id}/verification-progress",
    response_model=VerificationProgressResponse,
    responses=_NOT_FOUND,
    summary="Get verification progress",
)
async def get_verification_progress(
    video_id: str,
    request: Request,
    service: VideoRegistrationService = Depends(get_video_registration_service),
) -> VerificationProgressResponse:
    try:
        progress = await service.get_progress(video_id)
    except VideoNotFoundError as e:
        raise problem_exception(e, request) from None
    return VerificationProgressResponse.from_progress(progress)


@router.post(
    "/{video_id}/views",
    response_model=ViewCountResponse,
    responses=_NOT_FOUND,
    summary="Record a video view",
)
async def record_view(
    video_id: str,
    request: Request,
    service: VideoRegistrationService = Depends(get_video_registration_service),
    metrics: VerificationMetrics = Depends(get_metrics),
) -> ViewCountResponse:
    try:
        view_count = await service.record_view(video_id)
    except VideoNotFoundError as e:
        raise problem_exception(e, request) from None
    metrics.record_view()
    return ViewCountResponse(video_id=video_id, view_count=view_count)


@router.post(
    "/{video_id}/rejection",
    response_model=VideoResponse,
    responses={
        **_NOT_FOUND,
        409: {"model": ProblemDetailResponse, "description": "Video is not pending"},
    },
    summary="Reject a pending video (moderation)",
)
async def reject_video(
    video_id: str,
    request_data: RejectVideoRequest,
    request: Request,
    service: VideoRegistrationService = Depends(get_video_registration_service),
) -> VideoResponse:
    try:
        record = await service.reject_video(video_id, request_data.reason)
    except (VideoNotFoundError, InvalidStatusTransitionError) as e:
        raise problem_exception(e, request) from None
    return VideoResponse.from_record(record)


@router.post(
    "/{video_id}/deadline-passed",
    response_model=DeadlineCheckResponse,
    responses=_NOT_FOUND,
    summary="Scheduler hook: a verification deadline passed",
)
async def deadline_passed(
    video_id: str,
    request: Request,
    request_data: DeadlinePassedRequest | None = None,
    service: VerificationDeadlineService = Depends(get_verification_deadline_service),
) -> DeadlineCheckResponse:
    """Forward an overdue pending video to the expiry handler.

    Never changes the video's status.
    """
    now = request_data.now if request_data else None
    try:
        result = await service.on_deadline_passed(video_id, now=now)
    except VideoNotFoundError as e:
        raise problem_exception(e, request) from None
    return DeadlineCheckResponse(
        video_id=result.video_id,
        expired=result.expired,
        status=result.status.value,
        deadline=result.deadline,
        verification_count=result.verification_count,
    )
