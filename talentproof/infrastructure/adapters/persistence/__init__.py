"""Persistence adapters."""

from talentproof.infrastructure.adapters.persistence.postgres_video_record_repository import (
    PostgresVideoRecordRepository,
)

__all__: list[str] = ["PostgresVideoRecordRepository"]
