"""Fingerprint collector protocols.

The collector resolves the identity signals used as anti-fraud keys. It
runs before the submission handler, never inside its critical section.

A missing signal is reported as None ("unavailable"). Implementations
must never substitute an empty string or a placeholder such as "unknown".
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from talentproof.domain.models.verification_candidate import ClientIdentity


@dataclass(frozen=True)
class ClientRequestContext:
    """Framework-neutral view of the submitting request.

    Attributes:
        headers: Request headers; keys are matched case-insensitively.
        peer_host: Socket peer address, if known.
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    peer_host: str | None = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class FingerprintCollectorProtocol(Protocol):
    """Resolves (device_fingerprint, ip_address, user_agent) for a request."""

    @abstractmethod
    async def acquire(self, request: ClientRequestContext) -> ClientIdentity:
        """Resolve identity signals for the submitting client.

        Args:
            request: The submitting request.

        Returns:
            ClientIdentity; unresolvable signals are None.
        """
        ...

