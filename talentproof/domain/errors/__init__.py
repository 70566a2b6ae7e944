"""Domain errors for TalentProof.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from TalentProofError.
"""

from talentproof.domain.errors.status_transition import InvalidStatusTransitionError
from talentproof.domain.errors.verification import (
    AlreadyVerifiedError,
    AntiCheatUnavailableError,
    DuplicateAttestationError,
    StoreConflictError,
    VerificationError,
    VerificationValidationError,
    VideoNotFoundError,
    VideoRejectedError,
)

__all__: list[str] = [
    "AlreadyVerifiedError",
    "AntiCheatUnavailableError",
    "DuplicateAttestationError",
    "InvalidStatusTransitionError",
    "StoreConflictError",
    "VerificationError",
    "VerificationValidationError",
    "VideoNotFoundError",
    "VideoRejectedError",
]
