"""Unit tests for PostgresVideoRecordRepository.

The SQLAlchemy session is mocked; these tests pin the statement shapes and
the classification of zero-row conditional writes. Behaviour against a real
database lives in tests/integration.
"""

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from talentproof.domain.errors import (
    DuplicateAttestationError,
    InvalidStatusTransitionError,
    StoreConflictError,
    VideoNotFoundError,
)
from talentproof.domain.models.duplicate_match import DuplicateReason
from talentproof.domain.models.video_record import VerificationStatus, VideoRecord
from talentproof.infrastructure.adapters.persistence import (
    PostgresVideoRecordRepository,
)
from tests.helpers import build_attestation, build_record


def _row(record: VideoRecord) -> dict[str, Any]:
    """Shape a record the way asyncpg returns it for untyped text() SQL."""
    data = record.to_dict()
    data.pop("schema_version")
    data.update(
        upload_date=record.upload_date,
        verification_deadline=record.verification_deadline,
        rejected_at=record.rejected_at,
        updated_at=record.updated_at,
        verifications=json.dumps(data["verifications"]),
    )
    return data


def _result(row: dict[str, Any] | None = None, scalar: Any = None) -> MagicMock:
    result = MagicMock()
    result.mappings.return_value.fetchone.return_value = row
    result.mappings.return_value.fetchall.return_value = [row] if row else []
    result.scalar.return_value = scalar
    return result


def _async_cm(value: Any) -> MagicMock:
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=value)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock()
    session.begin.return_value = _async_cm(None)
    return session


@pytest.fixture
def repo(session: MagicMock) -> PostgresVideoRecordRepository:
    factory = MagicMock(return_value=_async_cm(session))
    return PostgresVideoRecordRepository(factory)


def _sql(session: MagicMock, call: int = 0) -> str:
    return str(session.execute.await_args_list[call].args[0])


class TestGetAndCreate:
    @pytest.mark.asyncio
    async def test_get_parses_jsonb_string(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        stored = build_record(verifications=(build_attestation(),), revision=1)
        session.execute.return_value = _result(_row(stored))

        record = await repo.get("video-1")

        assert record == stored

    @pytest.mark.asyncio
    async def test_get_missing(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        session.execute.return_value = _result(None)
        assert await repo.get("missing") is None

    @pytest.mark.asyncio
    async def test_create_duplicate_id(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        session.execute.side_effect = IntegrityError("INSERT", {}, Exception("dup"))

        with pytest.raises(ValueError, match="already exists"):
            await repo.create(build_record())


class TestAppendAttestation:
    """Single conditional UPDATE and zero-row classification."""

    @pytest.mark.asyncio
    async def test_conditional_update_success(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        attestation = build_attestation()
        stored = build_record(verifications=(attestation,), revision=1)
        session.execute.return_value = _result(_row(stored))

        record = await repo.append_attestation(
            "video-1",
            attestation,
            expected_revision=0,
            new_status=VerificationStatus.PENDING,
        )

        assert record.revision == 1
        sql = _sql(session)
        assert "revision = :expected_revision" in sql
        assert "jsonb_array_elements" in sql
        params = session.execute.await_args_list[0].args[1]
        assert params["device_fingerprint"] == "fp-a"
        assert params["ip_address"] == "1.2.3.4"
        assert session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_missing_video(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        session.execute.side_effect = [_result(None), _result(None)]

        with pytest.raises(VideoNotFoundError):
            await repo.append_attestation(
                "missing",
                build_attestation(),
                expected_revision=0,
                new_status=VerificationStatus.PENDING,
            )

    @pytest.mark.asyncio
    async def test_revision_moved(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        current = build_record(
            verifications=(build_attestation("Ana", "fp-1", "9.9.9.9"),), revision=1
        )
        session.execute.side_effect = [_result(None), _result(_row(current))]

        with pytest.raises(StoreConflictError) as exc_info:
            await repo.append_attestation(
                "video-1",
                build_attestation("Ben", "fp-2", "8.8.8.8"),
                expected_revision=0,
                new_status=VerificationStatus.PENDING,
            )

        assert exc_info.value.actual_revision == 1

    @pytest.mark.asyncio
    async def test_duplicate_constraint(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        current = build_record(
            verifications=(build_attestation("Ana", "fp-1", "9.9.9.9"),), revision=1
        )
        session.execute.side_effect = [_result(None), _result(_row(current))]

        with pytest.raises(DuplicateAttestationError) as exc_info:
            await repo.append_attestation(
                "video-1",
                build_attestation("Ben", "fp-1", "8.8.8.8"),
                expected_revision=1,
                new_status=VerificationStatus.PENDING,
            )

        assert exc_info.value.reason == DuplicateReason.DEVICE
        assert exc_info.value.prior_attestor_names == ("Ana",)


class TestCountersAndModeration:
    @pytest.mark.asyncio
    async def test_increment_is_single_statement(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        session.execute.return_value = _result(scalar=8)

        assert await repo.increment_view_count("video-1") == 8
        assert "view_count = view_count + 1" in _sql(session)

    @pytest.mark.asyncio
    async def test_increment_missing(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        session.execute.return_value = _result(scalar=None)
        with pytest.raises(VideoNotFoundError):
            await repo.increment_view_count("missing")

    @pytest.mark.asyncio
    async def test_reject_non_pending(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        current = build_record(status=VerificationStatus.VERIFIED)
        session.execute.side_effect = [_result(None), _result(_row(current))]

        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            await repo.set_rejected("video-1", "spam", current.upload_date)

        assert exc_info.value.from_status == VerificationStatus.VERIFIED

    @pytest.mark.asyncio
    async def test_count_by_status_fills_missing(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        result = MagicMock()
        result.fetchall.return_value = [("pending", 4), ("verified", 2)]
        session.execute.return_value = result

        counts = await repo.count_by_status()

        assert counts == {
            VerificationStatus.PENDING: 4,
            VerificationStatus.VERIFIED: 2,
            VerificationStatus.REJECTED: 0,
        }

    @pytest.mark.asyncio
    async def test_list_by_status(
        self, repo: PostgresVideoRecordRepository, session: MagicMock
    ) -> None:
        stored = build_record()
        session.execute.side_effect = [_result(scalar=7), _result(_row(stored))]

        records, total = await repo.list_by_status(VerificationStatus.PENDING, limit=1)

        assert total == 7
        assert records == [stored]
        assert "ORDER BY upload_date DESC" in _sql(session, 1)
