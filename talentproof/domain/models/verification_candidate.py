"""Verification candidate and client identity models.

A VerificationCandidate is what a verifier submits: the form fields plus the
out-of-band identity signals resolved before the submission handler runs.
Identity signals are optional here because acquisition may partially fail;
the handler refuses candidates whose signals are unavailable.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClientIdentity:
    """Identity signals resolved for a submitting client.

    None means "unavailable". Callers must never substitute an empty string
    or a placeholder: an empty identifier would collide across every future
    anonymous submission.

    Attributes:
        device_fingerprint: Opaque device hash, or None if unavailable.
        ip_address: Client IP address, or None if unavailable.
        user_agent: Browser/device description, informational only.
    """

    device_fingerprint: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    @property
    def missing_signals(self) -> tuple[str, ...]:
        """Names of anti-fraud signals that could not be resolved."""
        missing: list[str] = []
        if not self.device_fingerprint:
            missing.append("device_fingerprint")
        if not self.ip_address:
            missing.append("ip_address")
        return tuple(missing)

    @property
    def is_complete(self) -> bool:
        return not self.missing_signals


@dataclass(frozen=True)
class VerificationCandidate:
    """A verification attempt before validation.

    Fields are kept raw (untrimmed, relationship as a string) so that
    validation happens in one place, the submission handler.

    Attributes:
        verifier_name: Name as entered.
        verifier_email: Email as entered.
        verifier_relationship: Relationship value as entered.
        identity: Resolved identity signals.
        verification_message: Optional note as entered.
    """

    verifier_name: str
    verifier_email: str
    verifier_relationship: str
    identity: ClientIdentity
    verification_message: str | None = None
