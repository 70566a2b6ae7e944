"""Domain models for TalentProof."""

from talentproof.domain.models.duplicate_match import DuplicateMatch, DuplicateReason
from talentproof.domain.models.verification_candidate import (
    ClientIdentity,
    VerificationCandidate,
)
from talentproof.domain.models.video_record import (
    DEFAULT_VERIFICATION_THRESHOLD,
    TERMINAL_STATUSES,
    VerificationAttestation,
    VerificationProgress,
    VerificationStatus,
    VerifierRelationship,
    VideoRecord,
)

__all__: list[str] = [
    "DEFAULT_VERIFICATION_THRESHOLD",
    "TERMINAL_STATUSES",
    "ClientIdentity",
    "DuplicateMatch",
    "DuplicateReason",
    "VerificationAttestation",
    "VerificationCandidate",
    "VerificationProgress",
    "VerificationStatus",
    "VerifierRelationship",
    "VideoRecord",
]
