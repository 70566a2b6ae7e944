"""Video record repository stub implementation.

This module provides an in-memory stub implementation of
VideoRecordRepositoryProtocol for development and testing purposes.

Conditional appends are serialized per video with an asyncio.Lock; the
revision comparison and the duplicate device/network re-check run inside
that critical section. In production, PostgreSQL's
UPDATE ... WHERE revision = :expected RETURNING provides the same guarantee.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from datetime import datetime, timezone

from talentproof.application.ports.video_record_repository import (
    VideoRecordRepositoryProtocol,
)
from talentproof.domain.errors import (
    DuplicateAttestationError,
    InvalidStatusTransitionError,
    StoreConflictError,
    VideoNotFoundError,
)
from talentproof.domain.models.video_record import (
    VerificationAttestation,
    VerificationStatus,
    VideoRecord,
)
from talentproof.domain.services.anti_fraud import find_duplicate


class VideoRecordRepositoryStub(VideoRecordRepositoryProtocol):
    """In-memory stub implementation of VideoRecordRepositoryProtocol.

    This stub stores video records in memory for development and testing.
    It is NOT suitable for production use.

    Attributes:
        _records: Dictionary mapping video id to VideoRecord.
        _locks: Per-video locks for conditional appends.
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._records: dict[str, VideoRecord] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._view_lock = asyncio.Lock()
        self.append_calls = 0

    async def get(self, video_id: str) -> VideoRecord | None:
        return self._records.get(video_id)

    async def create(self, record: VideoRecord) -> None:
        """Save a newly registered record.

        Raises:
            ValueError: If record.id already exists.
        """
        if record.id in self._records:
            raise ValueError(f"Video already exists: {record.id}")
        self._records[record.id] = record

    async def append_attestation(
        self,
        video_id: str,
        attestation: VerificationAttestation,
        expected_revision: int,
        new_status: VerificationStatus,
    ) -> VideoRecord:
        """Atomic conditional append using compare-and-swap on revision.

        Raises:
            VideoNotFoundError: The video does not exist.
            StoreConflictError: The revision changed since it was read.
            DuplicateAttestationError: The uniqueness invariant would break.
        """
        self.append_calls += 1
        async with self._locks[video_id]:
            record = self._records.get(video_id)
            if record is None:
                raise VideoNotFoundError(video_id)

            # CAS check: the record must not have changed since it was read
            if record.revision != expected_revision:
                raise StoreConflictError(
                    video_id,
                    expected_revision=expected_revision,
                    actual_revision=record.revision,
                )

            # Constraint check on the authoritative list
            match = find_duplicate(
                record.verifications,
                attestation.device_fingerprint,
                attestation.ip_address,
            )
            if match is not None:
                raise DuplicateAttestationError.from_match(video_id, match)

            updated = record.with_attestation(
                attestation,
                new_status=new_status,
                updated_at=datetime.now(timezone.utc),
            )
            self._records[video_id] = updated
            return updated

    async def increment_view_count(self, video_id: str) -> int:
        async with self._view_lock:
            record = self._records.get(video_id)
            if record is None:
                raise VideoNotFoundError(video_id)
            updated = record.with_view_count(record.view_count + 1)
            self._records[video_id] = updated
            return updated.view_count

    async def set_rejected(
        self,
        video_id: str,
        reason: str,
        rejected_at: datetime,
    ) -> VideoRecord:
        """Move a pending record to rejected.

        Shares the per-video lock with appends so a rejection and a
        concurrent attestation cannot interleave.

        Raises:
            VideoNotFoundError: The video does not exist.
            InvalidStatusTransitionError: The record is not pending.
        """
        async with self._locks[video_id]:
            record = self._records.get(video_id)
            if record is None:
                raise VideoNotFoundError(video_id)
            if record.verification_status != VerificationStatus.PENDING:
                raise InvalidStatusTransitionError(
                    video_id,
                    from_status=record.verification_status,
                    to_status=VerificationStatus.REJECTED,
                )
            updated = record.rejected(reason, rejected_at)
            self._records[video_id] = updated
            return updated

    async def list_by_status(
        self,
        status: VerificationStatus,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[VideoRecord], int]:
        matching = [r for r in self._records.values() if r.verification_status == status]
        matching.sort(key=lambda r: r.upload_date, reverse=True)
        return matching[offset : offset + limit], len(matching)

    async def count_by_status(self) -> dict[VerificationStatus, int]:
        counts = {status: 0 for status in VerificationStatus}
        for record in self._records.values():
            counts[record.verification_status] += 1
        return counts

    async def list_overdue(self, now: datetime, limit: int = 100) -> list[VideoRecord]:
        overdue = [
            r
            for r in self._records.values()
            if r.verification_status == VerificationStatus.PENDING
            and r.verification_deadline is not None
            and r.verification_deadline < now
        ]
        overdue.sort(key=lambda r: r.verification_deadline)  # type: ignore[arg-type,return-value]
        return overdue[:limit]

    # Test helpers

    def put(self, record: VideoRecord) -> None:
        """Insert or replace a record directly (for testing)."""
        self._records[record.id] = record

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._records.clear()
        self._locks.clear()
        self.append_calls = 0
