"""Unit tests for RequestFingerprintCollector."""

import blake3
import pytest

from talentproof.application.ports.fingerprint_collector import ClientRequestContext
from talentproof.infrastructure.adapters.fingerprint import (
    RequestFingerprintCollector,
    normalize_signal,
    parse_ip,
)
from talentproof.infrastructure.adapters.fingerprint.request_fingerprint_collector import (
    MAX_RAW_FINGERPRINT_LENGTH,
    MAX_USER_AGENT_LENGTH,
)


def _context(peer_host: str | None = None, **headers: str) -> ClientRequestContext:
    return ClientRequestContext(
        headers={k.replace("_", "-"): v for k, v in headers.items()},
        peer_host=peer_host,
    )


class TestNormalizeSignal:
    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "unknown", "UNKNOWN", "undefined", "null", "fallback-1718000000"],
    )
    def test_placeholders_become_none(self, value: str | None) -> None:
        assert normalize_signal(value) is None

    def test_real_value_trimmed(self) -> None:
        assert normalize_signal("  abc123 ") == "abc123"


class TestParseIp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("203.0.113.9", "203.0.113.9"),
            (" 203.0.113.9 ", "203.0.113.9"),
            ("2001:DB8:0:0:0:0:0:1", "2001:db8::1"),
            ("", None),
            ("testclient", None),
            ("999.1.1.1", None),
            (None, None),
        ],
    )
    def test_parse(self, value: str | None, expected: str | None) -> None:
        assert parse_ip(value) == expected


class TestDeviceFingerprint:
    """BLAKE3 hashing of the client fingerprint header."""

    def test_hash_is_stable_and_salted(self) -> None:
        salted = RequestFingerprintCollector(salt="s1")
        other_salt = RequestFingerprintCollector(salt="s2")

        assert salted.hash_fingerprint("fp") == salted.hash_fingerprint("fp")
        assert salted.hash_fingerprint("fp") != other_salt.hash_fingerprint("fp")
        assert salted.hash_fingerprint("fp") == blake3.blake3(b"s1:fp").hexdigest()

    def test_header_is_case_insensitive(self) -> None:
        collector = RequestFingerprintCollector()
        fingerprint = collector.resolve_device_fingerprint(
            ClientRequestContext(headers={"x-device-fingerprint": "abc"})
        )
        assert fingerprint == collector.hash_fingerprint("abc")

    @pytest.mark.parametrize(
        "raw", ["unknown", "fallback-42", "x" * (MAX_RAW_FINGERPRINT_LENGTH + 1)]
    )
    def test_unusable_fingerprint_is_unavailable(self, raw: str) -> None:
        collector = RequestFingerprintCollector()
        assert (
            collector.resolve_device_fingerprint(_context(X_Device_Fingerprint=raw))
            is None
        )


class TestIpResolution:
    def test_peer_address_by_default(self) -> None:
        collector = RequestFingerprintCollector()
        context = _context(
            peer_host="203.0.113.7",
            X_Forwarded_For="10.9.9.1",
            X_Real_IP="10.9.9.2",
            X_Client_IP="10.9.9.3",
        )
        assert collector.resolve_ip_from_request(context) == "203.0.113.7"

    def test_trusted_proxy_header_order(self) -> None:
        collector = RequestFingerprintCollector(trust_forwarded_for=True)
        context = _context(
            peer_host="10.0.0.1",
            X_Forwarded_For="203.0.113.5, 10.0.0.2",
            X_Real_IP="198.51.100.1",
        )
        assert collector.resolve_ip_from_request(context) == "203.0.113.5"

    def test_client_ip_header_never_honoured(self) -> None:
        collector = RequestFingerprintCollector(trust_forwarded_for=True)
        context = _context(peer_host="10.0.0.1", X_Client_IP="192.0.2.44")
        assert collector.resolve_ip_from_request(context) == "10.0.0.1"

    def test_invalid_header_skipped(self) -> None:
        collector = RequestFingerprintCollector(trust_forwarded_for=True)
        context = _context(
            peer_host="10.0.0.1", X_Forwarded_For="unknown", X_Real_IP="not-an-ip"
        )
        assert collector.resolve_ip_from_request(context) == "10.0.0.1"

    def test_ipv6_normalized(self) -> None:
        collector = RequestFingerprintCollector(trust_forwarded_for=True)
        context = _context(X_Real_IP="2001:DB8:0:0:0:0:0:1")
        assert collector.resolve_ip_from_request(context) == "2001:db8::1"

    def test_unparseable_peer_is_unavailable(self) -> None:
        collector = RequestFingerprintCollector()
        assert collector.resolve_ip_from_request(_context(peer_host="testclient")) is None


class TestAcquire:
    @pytest.mark.asyncio
    async def test_complete_identity(self) -> None:
        collector = RequestFingerprintCollector(salt="s")
        identity = await collector.acquire(
            _context(
                peer_host="203.0.113.7",
                X_Device_Fingerprint="fp-abc",
                User_Agent="Mozilla/5.0 " + "x" * 1000,
            )
        )

        assert identity.is_complete
        assert identity.device_fingerprint == collector.hash_fingerprint("fp-abc")
        assert identity.ip_address == "203.0.113.7"
        assert identity.user_agent is not None
        assert len(identity.user_agent) == MAX_USER_AGENT_LENGTH

    @pytest.mark.asyncio
    async def test_missing_signals_are_none_not_placeholders(self) -> None:
        collector = RequestFingerprintCollector()

        identity = await collector.acquire(
            _context(X_Device_Fingerprint="unknown", X_Client_IP="192.0.2.44")
        )

        assert identity.device_fingerprint is None
        assert identity.ip_address is None
        assert identity.missing_signals == ("device_fingerprint", "ip_address")
