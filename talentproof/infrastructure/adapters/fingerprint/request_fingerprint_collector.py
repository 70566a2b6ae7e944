"""Request-based fingerprint collector.

Resolves the anti-fraud identity signals for an incoming verification:

- device_fingerprint: the client-computed fingerprint from the
  X-Device-Fingerprint header, hashed with BLAKE3 (optionally salted) into a
  stable opaque key.
- ip_address: the socket peer address. Only behind a trusted reverse proxy
  (trust_forwarded_for) are the first hop of X-Forwarded-For and then
  X-Real-IP consulted ahead of the peer. No header the client controls is
  trusted by default, and nothing is looked up: an unresolvable address is
  None, which the submission handler refuses.
- user_agent: the User-Agent header, informational only.

Placeholders ("", whitespace, "unknown", client-side "fallback-..."
fingerprints) are normalized to None. They are never hashed or stored.
"""

from __future__ import annotations

import ipaddress

import blake3
from structlog import get_logger

from talentproof.application.ports.fingerprint_collector import (
    ClientRequestContext,
    FingerprintCollectorProtocol,
)
from talentproof.domain.models.verification_candidate import ClientIdentity

logger = get_logger(__name__)

DEVICE_FINGERPRINT_HEADER = "X-Device-Fingerprint"
FORWARDED_FOR_HEADER = "X-Forwarded-For"
REAL_IP_HEADER = "X-Real-IP"
USER_AGENT_HEADER = "User-Agent"

MAX_RAW_FINGERPRINT_LENGTH = 4096
MAX_USER_AGENT_LENGTH = 512

_PLACEHOLDER_VALUES = frozenset({"unknown", "undefined", "null", "none"})
_FALLBACK_PREFIX = "fallback-"


def parse_ip(value: str | None) -> str | None:
    """Normalize an IP address string, or return None if it is not one."""
    if value is None:
        return None
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return None


def normalize_signal(value: str | None) -> str | None:
    """Return the trimmed value, or None for empty and placeholder values."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    lowered = value.lower()
    if lowered in _PLACEHOLDER_VALUES or lowered.startswith(_FALLBACK_PREFIX):
        return None
    return value


class RequestFingerprintCollector(FingerprintCollectorProtocol):
    """Resolves ClientIdentity from request headers and peer address.

    Example:
        >>> collector = RequestFingerprintCollector(salt="s3cret")
        >>> identity = await collector.acquire(
        ...     ClientRequestContext(
        ...         headers={"X-Device-Fingerprint": "fp-abc"},
        ...         peer_host="203.0.113.7",
        ...     )
        ... )
        >>> identity.ip_address
        '203.0.113.7'
    """

    def __init__(
        self,
        salt: str = "",
        trust_forwarded_for: bool = False,
    ) -> None:
        """Initialize the collector.

        Args:
            salt: Salt mixed into fingerprint hashes.
            trust_forwarded_for: Honour X-Forwarded-For / X-Real-IP. Enable
                only when a reverse proxy overwrites them.
        """
        self._salt = salt
        self._trust_forwarded_for = trust_forwarded_for

    def hash_fingerprint(self, raw: str) -> str:
        """Derive the stable opaque key for a raw client fingerprint."""
        return blake3.blake3(f"{self._salt}:{raw}".encode()).hexdigest()

    def resolve_device_fingerprint(self, request: ClientRequestContext) -> str | None:
        raw = normalize_signal(request.header(DEVICE_FINGERPRINT_HEADER))
        if raw is None or len(raw) > MAX_RAW_FINGERPRINT_LENGTH:
            return None
        return self.hash_fingerprint(raw)

    def resolve_ip_from_request(self, request: ClientRequestContext) -> str | None:
        """Trusted proxy headers first (when enabled), then the peer address."""
        candidates: list[str | None] = []
        if self._trust_forwarded_for:
            forwarded = request.header(FORWARDED_FOR_HEADER)
            candidates.extend(
                [
                    forwarded.split(",")[0] if forwarded else None,
                    request.header(REAL_IP_HEADER),
                ]
            )
        candidates.append(request.peer_host)

        for candidate in candidates:
            ip = parse_ip(normalize_signal(candidate))
            if ip is not None:
                return ip
        return None

    async def acquire(self, request: ClientRequestContext) -> ClientIdentity:
        device_fingerprint = self.resolve_device_fingerprint(request)
        ip_address = self.resolve_ip_from_request(request)

        user_agent = normalize_signal(request.header(USER_AGENT_HEADER))
        if user_agent is not None:
            user_agent = user_agent[:MAX_USER_AGENT_LENGTH]

        identity = ClientIdentity(
            device_fingerprint=device_fingerprint,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        if not identity.is_complete:
            logger.info(
                "client_identity_incomplete",
                missing_signals=list(identity.missing_signals),
            )
        return identity
