"""Verification engine configuration.

This module defines configuration for video registration, verification link
minting and identity signal acquisition, with environment variable overrides
for production tuning.

Environment Variables:
- TALENTPROOF_DEFAULT_THRESHOLD: Attestations required for new videos (default: 3)
- TALENTPROOF_DEADLINE_DAYS: Default verification deadline offset (default: 7)
- TALENTPROOF_PUBLIC_BASE_URL: Origin used in verification links
- TALENTPROOF_FINGERPRINT_SALT: Salt mixed into fingerprint hashes (default: "")
- TALENTPROOF_TRUST_FORWARDED_FOR: Honour proxy IP headers (default: false).
  Enable only behind a reverse proxy that overwrites X-Forwarded-For.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PUBLIC_BASE_URL = "https://amaplay007.web.app"


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable ("1", "true", "yes" are truthy)."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class VerificationConfig:
    """Configuration for the verification engine.

    All values can be overridden via environment variables.

    Attributes:
        default_threshold: Attestations required for newly registered videos.
                          Default: 3. Fixed per video at registration.
        deadline_days: Days from registration to the verification deadline.
                      Default: 7. The deadline is advisory; enforcement is external.
        public_base_url: Origin for verification links.
        fingerprint_salt: Salt mixed into device fingerprint hashes.
        trust_forwarded_for: Whether X-Forwarded-For / X-Real-IP are honoured
                            when resolving IP addresses. Off by default: the
                            socket peer is the only address a client cannot
                            choose.
    """

    default_threshold: int = 3
    deadline_days: int = 7
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL
    fingerprint_salt: str = ""
    trust_forwarded_for: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.default_threshold < 1:
            raise ValueError(
                f"default_threshold must be positive, got {self.default_threshold}"
            )
        if self.deadline_days < 1:
            raise ValueError(f"deadline_days must be positive, got {self.deadline_days}")
        if not self.public_base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"public_base_url must be an http(s) URL, got {self.public_base_url!r}"
            )

    @classmethod
    def from_environment(cls) -> "VerificationConfig":
        """Create config from environment variables with defaults.

        Returns:
            VerificationConfig with values from environment or defaults.
        """
        return cls(
            default_threshold=_get_int_env("TALENTPROOF_DEFAULT_THRESHOLD", 3),
            deadline_days=_get_int_env("TALENTPROOF_DEADLINE_DAYS", 7),
            public_base_url=os.environ.get(
                "TALENTPROOF_PUBLIC_BASE_URL", DEFAULT_PUBLIC_BASE_URL
            ),
            fingerprint_salt=os.environ.get("TALENTPROOF_FINGERPRINT_SALT", ""),
            trust_forwarded_for=_get_bool_env(
                "TALENTPROOF_TRUST_FORWARDED_FOR", False
            ),
        )


# Pre-defined configurations for common use cases

# Default production config
DEFAULT_VERIFICATION_CONFIG = VerificationConfig()

# Testing config with a fixed origin and salt
TEST_VERIFICATION_CONFIG = VerificationConfig(
    default_threshold=3,
    deadline_days=7,
    public_base_url="http://testserver",
    fingerprint_salt="test-salt",
    trust_forwarded_for=True,
)
