"""Unit tests for duplicate device/network detection."""

import pytest

from talentproof.domain.models.duplicate_match import DuplicateReason
from talentproof.domain.services.anti_fraud import find_duplicate, has_unique_identifiers
from tests.helpers import build_attestation


@pytest.fixture
def existing() -> tuple:
    """One prior attestation: fingerprint A from 1.2.3.4."""
    return (build_attestation("Coach Carter", "A", "1.2.3.4"),)


class TestFindDuplicate:
    """Scenario A and friends."""

    def test_same_device_different_ip(self, existing: tuple) -> None:
        match = find_duplicate(existing, "A", "9.9.9.9")
        assert match is not None
        assert match.reason == DuplicateReason.DEVICE
        assert match.device_matched and not match.ip_matched
        assert match.prior_attestor_names == ("Coach Carter",)

    def test_same_ip_different_device(self, existing: tuple) -> None:
        match = find_duplicate(existing, "B", "1.2.3.4")
        assert match is not None
        assert match.reason == DuplicateReason.IP_ADDRESS

    def test_unique_candidate_accepted(self, existing: tuple) -> None:
        assert find_duplicate(existing, "C", "5.5.5.5") is None

    def test_both_keys_on_different_attestations(self) -> None:
        verifications = (
            build_attestation("First", "A", "1.1.1.1"),
            build_attestation("Second", "B", "2.2.2.2"),
        )
        match = find_duplicate(verifications, "A", "2.2.2.2")
        assert match is not None
        assert match.reason == DuplicateReason.DEVICE_AND_IP
        assert match.prior_attestor_names == ("First", "Second")

    def test_prior_names_not_repeated(self) -> None:
        verifications = (build_attestation("Same", "A", "1.1.1.1"),)
        match = find_duplicate(verifications, "A", "1.1.1.1")
        assert match is not None
        assert match.reason == DuplicateReason.DEVICE_AND_IP
        assert match.prior_attestor_names == ("Same",)

    def test_empty_list_never_duplicate(self) -> None:
        assert find_duplicate((), "A", "1.1.1.1") is None

    @pytest.mark.parametrize(("fp", "ip"), [("", "1.1.1.1"), ("A", "")])
    def test_empty_identifier_rejected(self, fp: str, ip: str) -> None:
        """An empty key would collide with every other empty key."""
        with pytest.raises(ValueError):
            find_duplicate((), fp, ip)


class TestHasUniqueIdentifiers:
    def test_unique(self) -> None:
        verifications = (
            build_attestation("A", "fp-a", "1.1.1.1"),
            build_attestation("B", "fp-b", "2.2.2.2"),
        )
        assert has_unique_identifiers(verifications) is True

    def test_shared_ip(self) -> None:
        verifications = (
            build_attestation("A", "fp-a", "1.1.1.1"),
            build_attestation("B", "fp-b", "1.1.1.1"),
        )
        assert has_unique_identifiers(verifications) is False


class TestDuplicateReasonDescription:
    @pytest.mark.parametrize(
        ("reason", "text"),
        [
            (DuplicateReason.DEVICE, "same device"),
            (DuplicateReason.IP_ADDRESS, "same network/IP address"),
            (DuplicateReason.DEVICE_AND_IP, "same device and network"),
        ],
    )
    def test_description(self, reason: DuplicateReason, text: str) -> None:
        assert reason.description == text
