"""Consensus calculation for video verification.

Maps an attestation count and threshold to a verification status. This is a
pure calculation: no I/O, no clocks, no logging.

Transition rule, evaluated after every successful append:

    status = VERIFIED if attestation_count >= threshold else PENDING

Properties:
- Idempotent: re-evaluating without new attestations never changes the result.
- Monotonic: VERIFIED never regresses to PENDING.
- REJECTED is set only by external moderation and is always preserved.

Deadlines are not evaluated here. Enforcement is delegated to an external
scheduled collaborator.
"""

from __future__ import annotations

from dataclasses import dataclass

from talentproof.domain.models.video_record import VerificationStatus, VideoRecord


@dataclass(frozen=True)
class ConsensusDecision:
    """Outcome of a consensus evaluation.

    Attributes:
        status: The resulting status.
        previous_status: The status before evaluation.
        attestation_count: Count the decision was based on.
        threshold: Threshold the decision was based on.
    """

    status: VerificationStatus
    previous_status: VerificationStatus
    attestation_count: int
    threshold: int

    @property
    def threshold_crossed(self) -> bool:
        """True when this evaluation flipped PENDING to VERIFIED."""
        return (
            self.previous_status == VerificationStatus.PENDING
            and self.status == VerificationStatus.VERIFIED
        )


def compute_status(
    attestation_count: int,
    threshold: int,
    current_status: VerificationStatus = VerificationStatus.PENDING,
) -> VerificationStatus:
    """Compute the verification status for an attestation count.

    Args:
        attestation_count: Number of accepted attestations.
        threshold: Attestations required for consensus (>= 1).
        current_status: Status before evaluation.

    Returns:
        The resulting status.

    Raises:
        ValueError: If threshold < 1 or attestation_count < 0.
    """
    if threshold < 1:
        raise ValueError(f"threshold must be at least 1, got {threshold}")
    if attestation_count < 0:
        raise ValueError(
            f"attestation_count must be non-negative, got {attestation_count}"
        )

    if current_status in (VerificationStatus.REJECTED, VerificationStatus.VERIFIED):
        return current_status
    if attestation_count >= threshold:
        return VerificationStatus.VERIFIED
    return VerificationStatus.PENDING


def evaluate(
    attestation_count: int,
    threshold: int,
    current_status: VerificationStatus = VerificationStatus.PENDING,
) -> ConsensusDecision:
    """Evaluate consensus and report whether the threshold was crossed."""
    return ConsensusDecision(
        status=compute_status(attestation_count, threshold, current_status),
        previous_status=current_status,
        attestation_count=attestation_count,
        threshold=threshold,
    )


def recompute_status(record: VideoRecord) -> VerificationStatus:
    """Recompute a record's status from its own attestations."""
    return compute_status(
        record.verification_count,
        record.verification_threshold,
        record.verification_status,
    )
