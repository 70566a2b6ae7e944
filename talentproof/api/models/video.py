"""Video API request/response models.

Read models never expose identity signals (device fingerprints, IP
addresses) or verifier emails. Attestations are summarized to the fields an
athlete's profile shows.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

from talentproof.domain.models.video_record import (
    VerificationAttestation,
    VerificationProgress,
    VideoRecord,
)

# ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class RegisterVideoRequest(BaseModel):
    """Request to register an uploaded talent video."""

    owner_id: str = Field(..., min_length=1, description="Athlete who uploaded the video")
    title: str = Field(..., min_length=1, max_length=200, description="Display title")
    video_id: str | None = Field(
        default=None,
        min_length=1,
        max_length=128,
        description="Optional caller-chosen id; minted as video-{ms} when omitted",
    )
    description: str | None = Field(default=None, max_length=5000)
    sport: str | None = None
    sport_name: str | None = None
    main_category: str | None = None
    main_category_name: str | None = None
    specific_skill: str | None = None
    skill_category: str | None = None
    duration_seconds: int = Field(default=0, ge=0, description="Video length in seconds")
    verification_threshold: int | None = Field(
        default=None,
        ge=1,
        description="Attestations required; defaults to the configured threshold",
    )
    verification_deadline: datetime | None = Field(
        default=None,
        description="Advisory deadline; defaults to registration time plus configured days",
    )


class AttestationSummary(BaseModel):
    """Public view of one attestation."""

    verifier_id: str = Field(..., description="Display-only verifier id")
    verifier_name: str
    relationship: str
    verified_at: DateTimeWithZ
    message: str | None = None

    @classmethod
    def from_attestation(cls, attestation: VerificationAttestation) -> "AttestationSummary":
        return cls(
            verifier_id=attestation.verifier_id,
            verifier_name=attestation.verifier_name,
            relationship=attestation.relationship.value,
            verified_at=attestation.verified_at,
            message=attestation.message,
        )


class VideoResponse(BaseModel):
    """A video record without identity signals."""

    id: str
    owner_id: str
    title: str
    description: str | None = None
    sport: str | None = None
    sport_name: str | None = None
    main_category: str | None = None
    main_category_name: str | None = None
    specific_skill: str | None = None
    skill_category: str | None = None
    upload_date: DateTimeWithZ
    duration_seconds: int
    view_count: int
    verification_status: str = Field(..., description="pending, verified or rejected")
    verification_threshold: int
    verification_count: int
    verification_deadline: DateTimeWithZ | None = None
    verification_link: str | None = None
    verifications: list[AttestationSummary] = Field(default_factory=list)
    rejection_reason: str | None = None
    rejected_at: DateTimeWithZ | None = None

    @classmethod
    def from_record(cls, record: VideoRecord) -> "VideoResponse":
        return cls(
            id=record.id,
            owner_id=record.owner_id,
            title=record.title,
            description=record.description,
            sport=record.sport,
            sport_name=record.sport_name,
            main_category=record.main_category,
            main_category_name=record.main_category_name,
            specific_skill=record.specific_skill,
            skill_category=record.skill_category,
            upload_date=record.upload_date,
            duration_seconds=record.duration_seconds,
            view_count=record.view_count,
            verification_status=record.verification_status.value,
            verification_threshold=record.verification_threshold,
            verification_count=record.verification_count,
            verification_deadline=record.verification_deadline,
            verification_link=record.verification_link,
            verifications=[
                AttestationSummary.from_attestation(v) for v in record.verifications
            ],
            rejection_reason=record.rejection_reason,
            rejected_at=record.rejected_at,
        )


class VideoListResponse(BaseModel):
    """A page of videos with one status."""

    items: list[VideoResponse]
    total: int = Field(..., ge=0)
    limit: int
    offset: int


class VerificationProgressResponse(BaseModel):
    """"current / threshold" projection used to render badges."""

    video_id: str
    current_count: int = Field(..., ge=0)
    threshold: int = Field(..., ge=1)
    remaining: int = Field(..., ge=0)
    status: str

    @classmethod
    def from_progress(cls, progress: VerificationProgress) -> "VerificationProgressResponse":
        return cls(
            video_id=progress.video_id,
            current_count=progress.current_count,
            threshold=progress.threshold,
            remaining=progress.remaining,
            status=progress.status.value,
        )


class ViewCountResponse(BaseModel):
    video_id: str
    view_count: int = Field(..., ge=0)


class RejectVideoRequest(BaseModel):
    """Moderation rejection request."""

    reason: str = Field(default="", max_length=1000, description="Moderation reason")


class DeadlinePassedRequest(BaseModel):
    """Scheduler notification; `now` defaults to server time."""

    now: datetime | None = Field(
        default=None, description="Reference time for the overdue check"
    )


class DeadlineCheckResponse(BaseModel):
    video_id: str
    expired: bool = Field(..., description="Pending, past deadline and forwarded")
    status: str
    deadline: DateTimeWithZ | None = None
    verification_count: int


class VerificationStatsResponse(BaseModel):
    """Counts of videos per verification status."""

    pending: int = Field(..., ge=0)
    verified: int = Field(..., ge=0)
    rejected: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
