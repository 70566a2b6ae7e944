"""PostgreSQL video record repository (SQLAlchemy async + asyncpg).

Production implementation of VideoRecordRepositoryProtocol. Attestations
live in a JSONB array on the video row so that an append and the status
recompute are one conditional UPDATE.

Expected schema:

    CREATE TABLE videos (
        id                     TEXT PRIMARY KEY,
        owner_id               TEXT NOT NULL,
        title                  TEXT NOT NULL,
        description            TEXT,
        sport                  TEXT,
        sport_name             TEXT,
        main_category          TEXT,
        main_category_name     TEXT,
        specific_skill         TEXT,
        skill_category         TEXT,
        upload_date            TIMESTAMPTZ NOT NULL,
        duration_seconds       INTEGER NOT NULL DEFAULT 0,
        view_count             INTEGER NOT NULL DEFAULT 0,
        verification_status    TEXT NOT NULL DEFAULT 'pending',
        verification_threshold INTEGER NOT NULL DEFAULT 3,
        verification_deadline  TIMESTAMPTZ,
        verification_link      TEXT,
        verifications          JSONB NOT NULL DEFAULT '[]'::jsonb,
        revision               INTEGER NOT NULL DEFAULT 0,
        rejection_reason       TEXT,
        rejected_at            TIMESTAMPTZ,
        updated_at             TIMESTAMPTZ
    );
    CREATE INDEX idx_videos_status_upload ON videos (verification_status, upload_date DESC);

Concurrency:
- append_attestation is a single UPDATE conditioned on revision AND on no
  existing element sharing the fingerprint or IP. When zero rows match, the
  row is re-read to tell not-found, conflict and duplicate apart.
- increment_view_count is UPDATE ... SET view_count = view_count + 1.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

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

logger = get_logger(__name__)

_COLUMNS = """
    id, owner_id, title, description, sport, sport_name, main_category,
    main_category_name, specific_skill, skill_category, upload_date,
    duration_seconds, view_count, verification_status, verification_threshold,
    verification_deadline, verification_link, verifications, revision,
    rejection_reason, rejected_at, updated_at
"""


def _load_verifications(value: Any) -> list[dict[str, Any]]:
    # Untyped text() columns come back from asyncpg as a JSON string
    if value is None:
        return []
    if isinstance(value, str | bytes):
        return json.loads(value)
    return list(value)


def _row_to_record(row: Mapping[str, Any]) -> VideoRecord:
    return VideoRecord(
        id=row["id"],
        owner_id=row["owner_id"],
        title=row["title"],
        description=row["description"],
        sport=row["sport"],
        sport_name=row["sport_name"],
        main_category=row["main_category"],
        main_category_name=row["main_category_name"],
        specific_skill=row["specific_skill"],
        skill_category=row["skill_category"],
        upload_date=row["upload_date"],
        duration_seconds=row["duration_seconds"],
        view_count=row["view_count"],
        verification_status=VerificationStatus(row["verification_status"]),
        verification_threshold=row["verification_threshold"],
        verification_deadline=row["verification_deadline"],
        verification_link=row["verification_link"],
        verifications=tuple(
            VerificationAttestation.from_dict(v)
            for v in _load_verifications(row["verifications"])
        ),
        revision=row["revision"],
        rejection_reason=row["rejection_reason"],
        rejected_at=row["rejected_at"],
        updated_at=row["updated_at"],
    )


class PostgresVideoRecordRepository(VideoRecordRepositoryProtocol):
    """PostgreSQL implementation of VideoRecordRepositoryProtocol.

    Attributes:
        _session_factory: SQLAlchemy async session factory for DB access.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository.

        Args:
            session_factory: SQLAlchemy async session factory.
        """
        self._session_factory = session_factory

    async def _fetch(self, session: AsyncSession, video_id: str) -> VideoRecord | None:
        result = await session.execute(
            text(f"SELECT {_COLUMNS} FROM videos WHERE id = :video_id"),
            {"video_id": video_id},
        )
        row = result.mappings().fetchone()
        return _row_to_record(row) if row else None

    async def get(self, video_id: str) -> VideoRecord | None:
        async with self._session_factory() as session:
            return await self._fetch(session, video_id)

    async def create(self, record: VideoRecord) -> None:
        """Insert a newly registered record.

        Raises:
            ValueError: If record.id already exists.
        """
        params = {
            "id": record.id,
            "owner_id": record.owner_id,
            "title": record.title,
            "description": record.description,
            "sport": record.sport,
            "sport_name": record.sport_name,
            "main_category": record.main_category,
            "main_category_name": record.main_category_name,
            "specific_skill": record.specific_skill,
            "skill_category": record.skill_category,
            "upload_date": record.upload_date,
            "duration_seconds": record.duration_seconds,
            "view_count": record.view_count,
            "verification_status": record.verification_status.value,
            "verification_threshold": record.verification_threshold,
            "verification_deadline": record.verification_deadline,
            "verification_link": record.verification_link,
            "verifications": json.dumps([v.to_dict() for v in record.verifications]),
            "revision": record.revision,
            "rejection_reason": record.rejection_reason,
            "rejected_at": record.rejected_at,
            "updated_at": record.updated_at,
        }
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    text(f"""
                        INSERT INTO videos ({_COLUMNS})
                        VALUES (
                            :id, :owner_id, :title, :description, :sport,
                            :sport_name, :main_category, :main_category_name,
                            :specific_skill, :skill_category, :upload_date,
                            :duration_seconds, :view_count, :verification_status,
                            :verification_threshold, :verification_deadline,
                            :verification_link, CAST(:verifications AS JSONB),
                            :revision, :rejection_reason, :rejected_at, :updated_at
                        )
                    """),
                    params,
                )
        except IntegrityError as e:
            raise ValueError(f"Video already exists: {record.id}") from e

    async def append_attestation(
        self,
        video_id: str,
        attestation: VerificationAttestation,
        expected_revision: int,
        new_status: VerificationStatus,
    ) -> VideoRecord:
        """Conditional append-and-recompute in one UPDATE.

        SQL Pattern:
            UPDATE videos
            SET verifications = verifications || $attestation, ...
            WHERE id = $1 AND revision = $expected
              AND NOT EXISTS (element with same fingerprint or IP)
            RETURNING ...

        Raises:
            VideoNotFoundError: The video does not exist.
            StoreConflictError: The revision changed since it was read.
            DuplicateAttestationError: The uniqueness invariant would break.
        """
        log = logger.bind(video_id=video_id, expected_revision=expected_revision)

        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text(f"""
                    UPDATE videos
                    SET verifications = verifications || CAST(:attestation AS JSONB),
                        verification_status = :new_status,
                        revision = revision + 1,
                        updated_at = :updated_at
                    WHERE id = :video_id
                      AND revision = :expected_revision
                      AND NOT EXISTS (
                          SELECT 1
                          FROM jsonb_array_elements(verifications) AS v
                          WHERE v->>'device_fingerprint' = :device_fingerprint
                             OR v->>'ip_address' = :ip_address
                      )
                    RETURNING {_COLUMNS}
                """),
                {
                    "video_id": video_id,
                    "attestation": json.dumps([attestation.to_dict()]),
                    "new_status": new_status.value,
                    "updated_at": datetime.now(timezone.utc),
                    "expected_revision": expected_revision,
                    "device_fingerprint": attestation.device_fingerprint,
                    "ip_address": attestation.ip_address,
                },
            )
            row = result.mappings().fetchone()
            if row is not None:
                return _row_to_record(row)

            current = await self._fetch(session, video_id)

        if current is None:
            raise VideoNotFoundError(video_id)
        if current.revision != expected_revision:
            log.debug("append_revision_mismatch", actual_revision=current.revision)
            raise StoreConflictError(
                video_id,
                expected_revision=expected_revision,
                actual_revision=current.revision,
            )
        match = find_duplicate(
            current.verifications,
            attestation.device_fingerprint,
            attestation.ip_address,
        )
        if match is None:
            # Row changed and changed back between statements; treat as a race
            raise StoreConflictError(video_id, expected_revision=expected_revision)
        raise DuplicateAttestationError.from_match(video_id, match)

    async def increment_view_count(self, video_id: str) -> int:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    UPDATE videos
                    SET view_count = view_count + 1
                    WHERE id = :video_id
                    RETURNING view_count
                """),
                {"video_id": video_id},
            )
            view_count = result.scalar()
        if view_count is None:
            raise VideoNotFoundError(video_id)
        return int(view_count)

    async def set_rejected(
        self,
        video_id: str,
        reason: str,
        rejected_at: datetime,
    ) -> VideoRecord:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text(f"""
                    UPDATE videos
                    SET verification_status = 'rejected',
                        rejection_reason = :reason,
                        rejected_at = :rejected_at,
                        updated_at = :rejected_at,
                        revision = revision + 1
                    WHERE id = :video_id AND verification_status = 'pending'
                    RETURNING {_COLUMNS}
                """),
                {"video_id": video_id, "reason": reason, "rejected_at": rejected_at},
            )
            row = result.mappings().fetchone()
            if row is not None:
                return _row_to_record(row)
            current = await self._fetch(session, video_id)

        if current is None:
            raise VideoNotFoundError(video_id)
        raise InvalidStatusTransitionError(
            video_id,
            from_status=current.verification_status,
            to_status=VerificationStatus.REJECTED,
        )

    async def list_by_status(
        self,
        status: VerificationStatus,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[VideoRecord], int]:
        async with self._session_factory() as session:
            count_result = await session.execute(
                text("SELECT COUNT(*) FROM videos WHERE verification_status = :status"),
                {"status": status.value},
            )
            total = count_result.scalar() or 0

            result = await session.execute(
                text(f"""
                    SELECT {_COLUMNS}
                    FROM videos
                    WHERE verification_status = :status
                    ORDER BY upload_date DESC
                    LIMIT :limit OFFSET :offset
                """),
                {"status": status.value, "limit": limit, "offset": offset},
            )
            records = [_row_to_record(row) for row in result.mappings().fetchall()]
        return records, int(total)

    async def count_by_status(self) -> dict[VerificationStatus, int]:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT verification_status, COUNT(*)
                    FROM videos
                    GROUP BY verification_status
                """)
            )
            rows = result.fetchall()

        counts = {status: 0 for status in VerificationStatus}
        for status_value, count in rows:
            counts[VerificationStatus(status_value)] = int(count)
        return counts

    async def list_overdue(self, now: datetime, limit: int = 100) -> list[VideoRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"""
                    SELECT {_COLUMNS}
                    FROM videos
                    WHERE verification_status = 'pending'
                      AND verification_deadline IS NOT NULL
                      AND verification_deadline < :now
                    ORDER BY verification_deadline ASC
                    LIMIT :limit
                """),
                {"now": now, "limit": limit},
            )
            return [_row_to_record(row) for row in result.mappings().fetchall()]
