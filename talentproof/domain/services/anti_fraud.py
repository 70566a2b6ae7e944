"""Anti-fraud duplicate detection for verification attempts.

A candidate is a duplicate when ANY existing attestation on the record shares
its device fingerprint OR its IP address. Both keys must be unique
independently; this is the sybil defense.

Pure functions only. The same scan runs in the submission handler (for
caller messaging) and inside the store's critical section (as the
constraint check).
"""

from __future__ import annotations

from collections.abc import Iterable

from talentproof.domain.models.duplicate_match import DuplicateMatch, DuplicateReason
from talentproof.domain.models.video_record import VerificationAttestation


def find_duplicate(
    verifications: Iterable[VerificationAttestation],
    device_fingerprint: str,
    ip_address: str,
) -> DuplicateMatch | None:
    """Scan attestations for a device or network collision.

    Args:
        verifications: Attestations already on the record.
        device_fingerprint: The candidate's fingerprint (non-empty).
        ip_address: The candidate's IP address (non-empty).

    Returns:
        DuplicateMatch describing the collision, or None if the candidate
        is unique on both keys.

    Raises:
        ValueError: If either identifier is empty. An empty key would match
            every other empty key and defeat the scan.
    """
    if not device_fingerprint or not ip_address:
        raise ValueError("device_fingerprint and ip_address must both be non-empty")

    device_matched = False
    ip_matched = False
    names: list[str] = []

    for attestation in verifications:
        same_device = attestation.device_fingerprint == device_fingerprint
        same_ip = attestation.ip_address == ip_address
        if not (same_device or same_ip):
            continue
        device_matched = device_matched or same_device
        ip_matched = ip_matched or same_ip
        if attestation.verifier_name not in names:
            names.append(attestation.verifier_name)

    if not (device_matched or ip_matched):
        return None

    if device_matched and ip_matched:
        reason = DuplicateReason.DEVICE_AND_IP
    elif device_matched:
        reason = DuplicateReason.DEVICE
    else:
        reason = DuplicateReason.IP_ADDRESS

    return DuplicateMatch(reason=reason, prior_attestor_names=tuple(names))


def has_unique_identifiers(verifications: Iterable[VerificationAttestation]) -> bool:
    """Check the record-level invariant: no shared fingerprint, no shared IP."""
    seen_devices: set[str] = set()
    seen_ips: set[str] = set()
    for attestation in verifications:
        if attestation.device_fingerprint in seen_devices:
            return False
        if attestation.ip_address in seen_ips:
            return False
        seen_devices.add(attestation.device_fingerprint)
        seen_ips.add(attestation.ip_address)
    return True
