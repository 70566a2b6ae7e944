"""Configuration for TalentProof."""

from talentproof.config.verification_config import (
    DEFAULT_VERIFICATION_CONFIG,
    TEST_VERIFICATION_CONFIG,
    VerificationConfig,
)

__all__: list[str] = [
    "DEFAULT_VERIFICATION_CONFIG",
    "TEST_VERIFICATION_CONFIG",
    "VerificationConfig",
]
