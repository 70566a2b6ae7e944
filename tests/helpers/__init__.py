"""Test helpers.

Usage:
    from tests.helpers import build_record, build_candidate
"""

from tests.helpers.builders import (
    FIXED_NOW,
    build_attestation,
    build_candidate,
    build_record,
)

__all__ = ["FIXED_NOW", "build_attestation", "build_candidate", "build_record"]
