"""Verification submission service.

This module implements the VerificationSubmissionProtocol: it accepts or
rejects a verifier's attestation on a talent video, runs the duplicate
device/network scan, recomputes consensus and persists through one atomic
conditional write.

Validation order:
1. Video exists
2. Video is not already verified (or rejected by moderation)
3. Verifier name, email and relationship are well-formed
4. Device fingerprint and IP address are both available
5. Neither the device nor the network already attested this video

Eligibility checks (check_eligibility) apply steps 2, 4 and 5 to a client's
identity signals without form fields and without writing, so a verification
page can disable the form for a device or network that already attested.

Developer Golden Rules:
1. RESULTS NOT RAISES - Domain failures come back as typed results
2. NO PARTIAL STATE - Nothing is persisted unless the append succeeds
3. SHORT CRITICAL SECTION - Identity signals are resolved before this runs
4. CONDITIONAL WRITE - The append is keyed on the revision read in step 1
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from structlog import get_logger

from talentproof.application.ports.verification_submission import (
    VerificationEligibility,
    VerificationSubmissionResult,
)
from talentproof.domain.errors import (
    AlreadyVerifiedError,
    AntiCheatUnavailableError,
    DuplicateAttestationError,
    StoreConflictError,
    VerificationError,
    VerificationValidationError,
    VideoNotFoundError,
    VideoRejectedError,
)
from talentproof.domain.models.video_record import (
    VerificationAttestation,
    VerificationStatus,
)
from talentproof.domain.services import consensus
from talentproof.domain.services.anti_fraud import find_duplicate
from talentproof.domain.services.attestation_validation import (
    validate_candidate_fields,
)

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from talentproof.application.ports.video_record_repository import (
        VideoRecordRepositoryProtocol,
    )
    from talentproof.domain.models.verification_candidate import (
        ClientIdentity,
        VerificationCandidate,
    )
    from talentproof.domain.models.video_record import VideoRecord

logger = get_logger(__name__)


def _mint_verifier_id() -> str:
    """Display-only verifier id. Carries no security weight."""
    return f"anon-{int(time.time() * 1000)}"


def _email_domain(email: str) -> str:
    return email.rsplit("@", 1)[-1] if "@" in email else ""


class VerificationSubmissionService:
    """Service for submitting verifications on talent videos.

    Example:
        >>> service = VerificationSubmissionService(video_repo=video_repo)
        >>> result = await service.submit_verification(
        ...     video_id="video-1718000000000",
        ...     candidate=candidate,
        ... )
        >>> result.accepted
        True
    """

    def __init__(self, video_repo: VideoRecordRepositoryProtocol) -> None:
        """Initialize the verification submission service.

        Args:
            video_repo: Repository for video record persistence.
        """
        self._video_repo = video_repo

    async def submit_verification(
        self,
        video_id: str,
        candidate: VerificationCandidate,
    ) -> VerificationSubmissionResult:
        """Submit a verification for a video.

        Single-shot and safely retryable: validation and duplicate rejections
        persist nothing.

        Args:
            video_id: The video to attest.
            candidate: Form fields plus resolved identity signals.

        Returns:
            VerificationSubmissionResult carrying either the updated record or
            one of: VideoNotFoundError, AlreadyVerifiedError,
            VideoRejectedError, VerificationValidationError,
            AntiCheatUnavailableError, DuplicateAttestationError,
            StoreConflictError.
        """
        log = logger.bind(video_id=video_id)
        log.info("verification_submission_started")

        # Step 1: Load the full record (attestations + revision)
        record = await self._video_repo.get(video_id)
        if record is None:
            return self._failure(log, VideoNotFoundError(video_id))

        # Step 2: Consensus lockout
        lockout = self._status_lockout(record)
        if lockout is not None:
            return self._failure(log, lockout)

        # Step 3: Form fields
        try:
            fields = validate_candidate_fields(video_id, candidate)
        except VerificationValidationError as e:
            return self._failure(log, e)

        # Step 4: Identity signals must both be present, never substituted
        identity = candidate.identity
        if not identity.is_complete:
            return self._failure(
                log,
                AntiCheatUnavailableError(video_id, identity.missing_signals),
            )
        assert identity.device_fingerprint is not None
        assert identity.ip_address is not None

        # Step 5: Duplicate device / network scan
        match = find_duplicate(
            record.verifications,
            identity.device_fingerprint,
            identity.ip_address,
        )
        if match is not None:
            log.info(
                "duplicate_attestation_attempt",
                reason=match.reason.value,
                prior_attestor_count=len(match.prior_attestor_names),
                device_fingerprint_prefix=identity.device_fingerprint[:8],
                detection_method="pre_persistence_check",
            )
            return self._failure(
                log, DuplicateAttestationError.from_match(video_id, match)
            )

        # Step 6: Build attestation and recompute consensus for the new list
        now = datetime.now(timezone.utc)
        attestation = VerificationAttestation(
            verifier_id=_mint_verifier_id(),
            verifier_name=fields.verifier_name,
            verifier_email=fields.verifier_email,
            relationship=fields.relationship,
            verified_at=now,
            device_fingerprint=identity.device_fingerprint,
            ip_address=identity.ip_address,
            user_agent=identity.user_agent,
            message=fields.message,
        )
        decision = consensus.evaluate(
            attestation_count=record.verification_count + 1,
            threshold=record.verification_threshold,
            current_status=record.verification_status,
        )

        # Step 7: Conditional append keyed on the revision read in step 1
        try:
            updated = await self._video_repo.append_attestation(
                video_id=video_id,
                attestation=attestation,
                expected_revision=record.revision,
                new_status=decision.status,
            )
        except DuplicateAttestationError as e:
            log.warning(
                "duplicate_attestation_constraint_violation",
                reason=e.reason.value,
                detection_method="store_constraint",
            )
            return self._failure(log, e)
        except StoreConflictError as e:
            log.warning(
                "verification_store_conflict",
                expected_revision=e.expected_revision,
                actual_revision=e.actual_revision,
            )
            return self._failure(log, e)
        except VideoNotFoundError as e:
            return self._failure(log, e)

        if decision.threshold_crossed:
            log.info(
                "verification_consensus_reached",
                verification_count=updated.verification_count,
                threshold=updated.verification_threshold,
            )

        log.info(
            "verification_submission_completed",
            verifier_id=attestation.verifier_id,
            relationship=attestation.relationship.value,
            email_domain=_email_domain(attestation.verifier_email),
            verification_count=updated.verification_count,
            threshold=updated.verification_threshold,
            status=updated.verification_status.value,
            revision=updated.revision,
        )

        return VerificationSubmissionResult.success(
            updated, threshold_crossed=decision.threshold_crossed
        )

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
            VerificationEligibility with AlreadyVerifiedError,
            VideoRejectedError, AntiCheatUnavailableError or
            DuplicateAttestationError when a submission would be refused.

        Raises:
            VideoNotFoundError: If the video doesn't exist.
        """
        record = await self._video_repo.get(video_id)
        if record is None:
            raise VideoNotFoundError(video_id)

        error = self._status_lockout(record)
        if error is None and not identity.is_complete:
            error = AntiCheatUnavailableError(video_id, identity.missing_signals)
        if error is None:
            assert identity.device_fingerprint is not None
            assert identity.ip_address is not None
            match = find_duplicate(
                record.verifications,
                identity.device_fingerprint,
                identity.ip_address,
            )
            if match is not None:
                error = DuplicateAttestationError.from_match(video_id, match)

        logger.debug(
            "verification_eligibility_checked",
            video_id=video_id,
            eligible=error is None,
            error_type=type(error).__name__ if error is not None else None,
        )
        return VerificationEligibility(
            video_id=video_id,
            verification_count=record.verification_count,
            verification_threshold=record.verification_threshold,
            error=error,
        )

    @staticmethod
    def _status_lockout(record: VideoRecord) -> VerificationError | None:
        """Verified and rejected videos take no further attestations."""
        if record.verification_status == VerificationStatus.VERIFIED:
            return AlreadyVerifiedError(
                record.id,
                verification_count=record.verification_count,
                threshold=record.verification_threshold,
            )
        if record.verification_status == VerificationStatus.REJECTED:
            return VideoRejectedError(record.id)
        return None

    @staticmethod
    def _failure(
        log: FilteringBoundLogger, error: VerificationError
    ) -> VerificationSubmissionResult:
        log.info(
            "verification_submission_rejected",
            error_type=type(error).__name__,
            retryable=error.retryable,
        )
        return VerificationSubmissionResult.failure(error)
