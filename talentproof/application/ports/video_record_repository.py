"""Video record repository protocol.

This is the persistence boundary of the verification engine and its only
infrastructure dependency. Follows hexagonal architecture with port/adapter
pattern; the engine is agnostic to the concrete store technology.

Contract:
- read-full-record
- atomic conditional append-and-recompute, keyed on the record revision
- independent atomic view-count increment
- external moderation may set a pending record to rejected

Concurrency Requirements:
- Appends to one video are serialized. The store compares expected_revision
  and re-checks the duplicate-device/network invariant inside the same
  critical section (row lock, conditional UPDATE or per-video lock).
- View-count increments never read-modify-write a cached value and need no
  mutual exclusion with verification writes.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Protocol

from talentproof.domain.models.video_record import (
    VerificationAttestation,
    VerificationStatus,
    VideoRecord,
)


class VideoRecordRepositoryProtocol(Protocol):
    """Repository protocol for video record persistence."""

    @abstractmethod
    async def get(self, video_id: str) -> VideoRecord | None:
        """Retrieve the full record, including all attestations.

        Args:
            video_id: The video to load.

        Returns:
            The record if found, None otherwise.
        """
        ...

    @abstractmethod
    async def create(self, record: VideoRecord) -> None:
        """Persist a newly registered record.

        Args:
            record: The record to save (normally empty and pending).

        Raises:
            ValueError: If a record with the same id already exists.
        """
        ...

    @abstractmethod
    async def append_attestation(
        self,
        video_id: str,
        attestation: VerificationAttestation,
        expected_revision: int,
        new_status: VerificationStatus,
    ) -> VideoRecord:
        """Atomically append an attestation and set the recomputed status.

        This operation MUST be atomic:
        1. Verify the stored revision equals expected_revision
        2. Verify the attestation's fingerprint and IP are unused on the record
        3. Append the attestation, set new_status, bump the revision
        4. Return the updated record

        Args:
            video_id: The video being attested.
            attestation: The validated attestation to append.
            expected_revision: Revision the caller read before validating.
            new_status: Status recomputed for the appended list.

        Returns:
            The updated record.

        Raises:
            VideoNotFoundError: The video does not exist.
            StoreConflictError: The revision changed since it was read.
            DuplicateAttestationError: The uniqueness invariant would break.
        """
        ...

    @abstractmethod
    async def increment_view_count(self, video_id: str) -> int:
        """Atomically increment the view counter.

        Args:
            video_id: The video that was viewed.

        Returns:
            The new view count.

        Raises:
            VideoNotFoundError: The video does not exist.
        """
        ...

    @abstractmethod
    async def set_rejected(
        self,
        video_id: str,
        reason: str,
        rejected_at: datetime,
    ) -> VideoRecord:
        """Move a pending record to rejected (external moderation hook).

        Args:
            video_id: The video to reject.
            reason: Moderation reason.
            rejected_at: When the rejection happened (UTC).

        Returns:
            The updated record.

        Raises:
            VideoNotFoundError: The video does not exist.
            InvalidStatusTransitionError: The record is not pending.
        """
        ...

    @abstractmethod
    async def list_by_status(
        self,
        status: VerificationStatus,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[VideoRecord], int]:
        """List records with a status, newest upload first.

        Returns:
            Tuple of (page of records, total count matching status).
        """
        ...

    @abstractmethod
    async def count_by_status(self) -> dict[VerificationStatus, int]:
        """Count records per status. Every status key is present."""
        ...

    @abstractmethod
    async def list_overdue(self, now: datetime, limit: int = 100) -> list[VideoRecord]:
        """List pending records whose verification deadline is before now.

        Ordered by deadline, oldest first.
        """
        ...
