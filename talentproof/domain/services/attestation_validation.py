"""Validation of verifier-supplied form fields.

Normalizes a VerificationCandidate's raw form fields (trimming, enum
parsing) and raises VerificationValidationError on the first invalid field.
Identity signals are checked separately by the submission handler.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from talentproof.domain.errors import VerificationValidationError
from talentproof.domain.models.verification_candidate import VerificationCandidate
from talentproof.domain.models.video_record import VerifierRelationship

MAX_VERIFIER_NAME_LENGTH = 100
MAX_VERIFIER_EMAIL_LENGTH = 254
MAX_VERIFICATION_MESSAGE_LENGTH = 1000

# Syntactic check only: local@domain.tld, no whitespace, single "@"
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class ValidatedFields:
    """Normalized form fields ready to become an attestation."""

    verifier_name: str
    verifier_email: str
    relationship: VerifierRelationship
    message: str | None


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_PATTERN.match(value)) and len(value) <= MAX_VERIFIER_EMAIL_LENGTH


def validate_candidate_fields(
    video_id: str, candidate: VerificationCandidate
) -> ValidatedFields:
    """Validate and normalize the candidate's form fields.

    Args:
        video_id: The target video, used for error context.
        candidate: The raw submission.

    Returns:
        ValidatedFields with trimmed values and a parsed relationship.

    Raises:
        VerificationValidationError: On the first invalid field.
    """
    name = (candidate.verifier_name or "").strip()
    if not name:
        raise VerificationValidationError(video_id, "verifier_name", "must not be empty")
    if len(name) > MAX_VERIFIER_NAME_LENGTH:
        raise VerificationValidationError(
            video_id,
            "verifier_name",
            f"must be at most {MAX_VERIFIER_NAME_LENGTH} characters",
        )

    email = (candidate.verifier_email or "").strip()
    if not email:
        raise VerificationValidationError(video_id, "verifier_email", "must not be empty")
    if not is_valid_email(email):
        raise VerificationValidationError(
            video_id, "verifier_email", "is not a valid email address"
        )

    raw_relationship = (candidate.verifier_relationship or "").strip().lower()
    try:
        relationship = VerifierRelationship(raw_relationship)
    except ValueError:
        allowed = ", ".join(r.value for r in VerifierRelationship)
        raise VerificationValidationError(
            video_id, "verifier_relationship", f"must be one of: {allowed}"
        ) from None

    message = (candidate.verification_message or "").strip() or None
    if message is not None and len(message) > MAX_VERIFICATION_MESSAGE_LENGTH:
        raise VerificationValidationError(
            video_id,
            "verification_message",
            f"must be at most {MAX_VERIFICATION_MESSAGE_LENGTH} characters",
        )

    return ValidatedFields(
        verifier_name=name,
        verifier_email=email,
        relationship=relationship,
        message=message,
    )
