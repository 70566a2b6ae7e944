"""Verification submission errors.

This module provides the typed error taxonomy for verification attempts.
The submission handler returns these as results rather than raising them;
only infrastructure faults propagate as exceptions from below the handler.

Taxonomy:
- VerificationValidationError: malformed input, client-recoverable
- AntiCheatUnavailableError: identity signals missing, retry after re-acquiring
- DuplicateAttestationError: device and/or network already attested
- AlreadyVerifiedError: video already reached consensus
- VideoRejectedError: video rejected by moderation
- VideoNotFoundError: no such video
- StoreConflictError: lost a concurrent-write race, resubmit unchanged

Every error serializes to RFC 7807 problem details via to_rfc7807_dict().
"""

from __future__ import annotations

from typing import Any

from talentproof.domain.exceptions import TalentProofError
from talentproof.domain.models.duplicate_match import DuplicateMatch, DuplicateReason

PROBLEM_TYPE_PREFIX = "urn:talentproof:verification"


class VerificationError(TalentProofError):
    """Base error for verification attempts.

    Subclasses set the class attributes used for RFC 7807 serialization.

    Attributes:
        video_id: The video the attempt targeted.
        retryable: Whether resubmitting (possibly after re-acquiring
            identity signals) can succeed.
    """

    problem_type: str = "error"
    title: str = "Verification Failed"
    http_status: int = 400
    retryable: bool = False

    def __init__(self, video_id: str, message: str) -> None:
        """Initialize the error.

        Args:
            video_id: The video the attempt targeted.
            message: Human-readable error description.
        """
        self.video_id = video_id
        super().__init__(message)

    def to_rfc7807_dict(self) -> dict[str, Any]:
        """Serialize to RFC 7807 problem details.

        Returns:
            Dictionary conforming to RFC 7807 problem details.
        """
        return {
            "type": f"{PROBLEM_TYPE_PREFIX}:{self.problem_type}",
            "title": self.title,
            "status": self.http_status,
            "detail": str(self),
            "video_id": self.video_id,
            "retryable": self.retryable,
        }


class VerificationValidationError(VerificationError):
    """Raised when submitted form fields are malformed.

    HTTP Status: 400 Bad Request

    Attributes:
        field: The offending input field.
        reason: What is wrong with it.
    """

    problem_type = "invalid-input"
    title = "Invalid Verification Input"
    http_status = 400

    def __init__(self, video_id: str, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(video_id, f"Invalid {field}: {reason}")

    def to_rfc7807_dict(self) -> dict[str, Any]:
        result = super().to_rfc7807_dict()
        result["field"] = self.field
        return result


class AntiCheatUnavailableError(VerificationError):
    """Raised when device fingerprint or IP address could not be resolved.

    The client should re-acquire its identity signals and resubmit.

    HTTP Status: 428 Precondition Required

    Attributes:
        missing_signals: Names of the unavailable signals.
        retry_after: Suggested seconds before retrying.
    """

    problem_type = "anti-cheat-unavailable"
    title = "Device And Network Verification In Progress"
    http_status = 428
    retryable = True

    def __init__(
        self,
        video_id: str,
        missing_signals: tuple[str, ...],
        retry_after: int = 2,
    ) -> None:
        self.missing_signals = missing_signals
        self.retry_after = retry_after
        super().__init__(
            video_id,
            "Device and network verification is in progress; "
            f"unavailable signals: {', '.join(missing_signals)}",
        )

    def to_rfc7807_dict(self) -> dict[str, Any]:
        result = super().to_rfc7807_dict()
        result["missing_signals"] = list(self.missing_signals)
        result["retry_after"] = self.retry_after
        return result


class DuplicateAttestationError(VerificationError):
    """Raised when the device or network already attested this video.

    Either signal alone is weak (fingerprints reset, IPs are shared behind
    NAT), so both must be unique independently. Two honest verifiers behind
    one office IP will collide; the second is rejected.

    HTTP Status: 409 Conflict

    Attributes:
        reason: Which key(s) collided.
        prior_attestor_names: Who attested from the colliding device/network.
    """

    problem_type = "duplicate-attestation"
    title = "Already Verified From This Device Or Network"
    http_status = 409

    def __init__(
        self,
        video_id: str,
        reason: DuplicateReason,
        prior_attestor_names: tuple[str, ...] = (),
    ) -> None:
        self.reason = reason
        self.prior_attestor_names = prior_attestor_names
        previous = ", ".join(prior_attestor_names) or "Unknown"
        super().__init__(
            video_id,
            f"This video has already been verified from the {reason.description}. "
            "Each device and network can only verify once. "
            f"Previous verification by: {previous}",
        )

    @classmethod
    def from_match(cls, video_id: str, match: DuplicateMatch) -> DuplicateAttestationError:
        """Build the error from a positive duplicate scan."""
        return cls(
            video_id=video_id,
            reason=match.reason,
            prior_attestor_names=match.prior_attestor_names,
        )

    def to_rfc7807_dict(self) -> dict[str, Any]:
        result = super().to_rfc7807_dict()
        result["reason"] = self.reason.value
        result["prior_attestor_names"] = list(self.prior_attestor_names)
        return result


class AlreadyVerifiedError(VerificationError):
    """Raised when the video already reached consensus.

    No further attestations are accepted once a video is verified.

    HTTP Status: 409 Conflict
    """

    problem_type = "already-verified"
    title = "Video Already Verified"
    http_status = 409

    def __init__(self, video_id: str, verification_count: int, threshold: int) -> None:
        self.verification_count = verification_count
        self.threshold = threshold
        super().__init__(
            video_id,
            f"Video {video_id} is already verified "
            f"({verification_count}/{threshold} verifications)",
        )


class VideoRejectedError(VerificationError):
    """Raised when the video was rejected by moderation.

    HTTP Status: 409 Conflict
    """

    problem_type = "video-rejected"
    title = "Video Rejected"
    http_status = 409

    def __init__(self, video_id: str) -> None:
        super().__init__(
            video_id, f"Video {video_id} was rejected and accepts no verifications"
        )


class VideoNotFoundError(VerificationError):
    """Raised when no video exists with the given id.

    HTTP Status: 404 Not Found
    """

    problem_type = "video-not-found"
    title = "Video Not Found"
    http_status = 404

    def __init__(self, video_id: str) -> None:
        super().__init__(video_id, f"Video not found: {video_id}")


class StoreConflictError(VerificationError):
    """Raised when a conditional write loses a concurrent-write race.

    The record changed between read and write. The caller resubmits the
    identical candidate; end users only see a generic "try again".

    HTTP Status: 409 Conflict

    Attributes:
        expected_revision: The revision the write was conditioned on.
        actual_revision: The revision found in the store, if known.
    """

    problem_type = "store-conflict"
    title = "Please Try Again"
    http_status = 409
    retryable = True

    def __init__(
        self,
        video_id: str,
        expected_revision: int,
        actual_revision: int | None = None,
    ) -> None:
        self.expected_revision = expected_revision
        self.actual_revision = actual_revision
        super().__init__(
            video_id,
            f"Concurrent modification detected for video {video_id}. "
            f"Expected revision: {expected_revision}. Please try again.",
        )

    def to_rfc7807_dict(self) -> dict[str, Any]:
        result = super().to_rfc7807_dict()
        # Collapsed to a generic message for end users
        result["detail"] = "The video was updated while you were submitting. Please try again."
        return result
