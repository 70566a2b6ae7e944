"""Verification submission protocol and result type.

Domain failures are returned as typed results, never raised and never
reported as partial success. Only infrastructure faults (database, network)
propagate as exceptions.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import Protocol

from talentproof.domain.errors import VerificationError
from talentproof.domain.models.verification_candidate import (
    ClientIdentity,
    VerificationCandidate,
)
from talentproof.domain.models.video_record import VideoRecord


@dataclass(frozen=True)
class VerificationSubmissionResult:
    """Outcome of a verification attempt.

    Exactly one of record / error is set.

    Attributes:
        video_id: The targeted video.
        record: The updated record when the attestation was accepted.
        error: The typed failure when it was not.
        threshold_crossed: True when this attestation flipped the video
            from pending to verified.
    """

    video_id: str
    record: VideoRecord | None = None
    error: VerificationError | None = None
    threshold_crossed: bool = False

    def __post_init__(self) -> None:
        if (self.record is None) == (self.error is None):
            raise ValueError("Exactly one of record or error must be set")

    @property
    def accepted(self) -> bool:
        return self.record is not None

    @classmethod
    def success(
        cls, record: VideoRecord, threshold_crossed: bool = False
    ) -> VerificationSubmissionResult:
        return cls(video_id=record.id, record=record, threshold_crossed=threshold_crossed)

    @classmethod
    def failure(cls, error: VerificationError) -> VerificationSubmissionResult:
        return cls(video_id=error.video_id, error=error)

    def unwrap(self) -> VideoRecord:
        """Return the record or raise the carried error."""
        if self.error is not None:
            raise self.error
        assert self.record is not None
        return self.record


@dataclass(frozen=True)
class VerificationEligibility:
    """Whether a client could attest a video right now.

    Read-only: computed from the current record and the client's identity
    signals, nothing is reserved. A later submission can still lose a race.

    Attributes:
        video_id: The checked video.
        verification_count: Attestations on the record.
        verification_threshold: Attestations required for consensus.
        error: The error a submission would be refused with, if any.
    """

    video_id: str
    verification_count: int
    verification_threshold: int
    error: VerificationError | None = None

    @property
    def eligible(self) -> bool:
        return self.error is None


class VerificationSubmissionProtocol(Protocol):
    """Protocol for submitting verifications on videos.

    Implementations must:
    1. Reject submissions to verified or rejected videos
    2. Validate verifier name, email and relationship
    3. Require both device fingerprint and IP address
    4. Reject any device or network that already attested the video
    5. Append, recompute status and persist in one conditional write
    6. Answer eligibility checks with the same status and duplicate rules,
       without writing
    """

    @abstractmethod
    async def submit_verification(
        self,
        video_id: str,
        candidate: VerificationCandidate,
    ) -> VerificationSubmissionResult:
        """Submit a verification for a video.

        Args:
            video_id: The video to attest.
            candidate: Form fields plus resolved identity signals.

        Returns:
            VerificationSubmissionResult with the updated record or a
            typed VerificationError.
        """
        ...

    @abstractmethod
    async def check_eligibility(
        self,
        video_id: str,
        identity: ClientIdentity,
    ) -> VerificationEligibility:
        """Check whether a client may attest a video, without submitting.

        Args:
            video_id: The video to check.
            identity: The client's resolved identity signals.

        Returns:
            VerificationEligibility carrying the refusal a submission would
            get, or no error.

        Raises:
            VideoNotFoundError: If the video doesn't exist.
        """
        ...
