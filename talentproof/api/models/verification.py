"""Verification submission API models.

Form fields are plain strings here; trimming, length limits, email shape and
relationship values are checked by the submission service so that every
malformed field is reported the same way (400, RFC 7807).
"""

from pydantic import BaseModel, Field

from talentproof.api.models.video import DateTimeWithZ


class SubmitVerificationRequest(BaseModel):
    """A verifier's attestation form.

    Device fingerprint and IP address are not part of the body; they are
    resolved from the request (X-Device-Fingerprint header, client address).
    """

    verifier_name: str = Field(..., description="Verifier's name")
    verifier_email: str = Field(..., description="Verifier's email address")
    verifier_relationship: str = Field(
        ...,
        description="coach, teammate, parent, friend, witness or other",
    )
    verification_message: str | None = Field(
        default=None, description="Optional note from the verifier"
    )


class VerificationSubmissionResponse(BaseModel):
    """Response after an accepted attestation."""

    video_id: str
    verifier_id: str = Field(..., description="Display-only verifier id")
    verified_at: DateTimeWithZ
    verification_count: int = Field(..., ge=1)
    verification_threshold: int = Field(..., ge=1)
    verification_status: str
    threshold_crossed: bool = Field(
        ..., description="True when this attestation verified the video"
    )


class ProblemDetailResponse(BaseModel):
    """RFC 7807 problem details (documentation model)."""

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    video_id: str | None = None
    retryable: bool | None = None


class VerificationEligibilityResponse(BaseModel):
    """Whether the calling device and network may verify a video.

    When not eligible, `reason` is the problem type a submission would be
    refused with (e.g. urn:talentproof:verification:duplicate-attestation).
    """

    video_id: str
    eligible: bool
    verification_count: int = Field(..., ge=0)
    verification_threshold: int = Field(..., ge=1)
    reason: str | None = None
    detail: str | None = None
    retryable: bool = False
    duplicate_reason: str | None = Field(
        default=None, description="device, ip_address or device_and_ip"
    )
    prior_attestor_names: list[str] = Field(default_factory=list)
