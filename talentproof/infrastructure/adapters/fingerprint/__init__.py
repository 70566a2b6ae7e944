"""Identity signal adapters (device fingerprint, client IP address)."""

from talentproof.infrastructure.adapters.fingerprint.request_fingerprint_collector import (
    RequestFingerprintCollector,
    normalize_signal,
    parse_ip,
)

__all__: list[str] = [
    "RequestFingerprintCollector",
    "normalize_signal",
    "parse_ip",
]
