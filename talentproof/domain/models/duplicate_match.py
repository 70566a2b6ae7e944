"""Duplicate attestation match models.

Describes why a verification candidate collides with attestations already on
a record, so callers can explain the rejection ("same device", "same
network") and name who verified before.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DuplicateReason(str, Enum):
    """Which anti-fraud key(s) collided."""

    DEVICE = "device"
    IP_ADDRESS = "ip_address"
    DEVICE_AND_IP = "device_and_ip"

    @property
    def description(self) -> str:
        """Human-readable phrase used in caller messaging."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[DuplicateReason, str] = {
    DuplicateReason.DEVICE: "same device",
    DuplicateReason.IP_ADDRESS: "same network/IP address",
    DuplicateReason.DEVICE_AND_IP: "same device and network",
}


@dataclass(frozen=True)
class DuplicateMatch:
    """Result of a positive duplicate scan.

    The reason is DEVICE_AND_IP when the candidate's fingerprint and IP both
    appear on the record, whether on one prior attestation or on two
    different ones.

    Attributes:
        reason: Which key(s) collided.
        prior_attestor_names: Names of matching prior attestors, in
            submission order, without repeats.
    """

    reason: DuplicateReason
    prior_attestor_names: tuple[str, ...]

    @property
    def device_matched(self) -> bool:
        return self.reason in (DuplicateReason.DEVICE, DuplicateReason.DEVICE_AND_IP)

    @property
    def ip_matched(self) -> bool:
        return self.reason in (
            DuplicateReason.IP_ADDRESS,
            DuplicateReason.DEVICE_AND_IP,
        )
