"""Deadline expiry handler stub.

Records every expired video it is told about. Used as the default handler
until a moderation queue or notification adapter is wired in.
"""

from __future__ import annotations

from structlog import get_logger

from talentproof.application.ports.deadline_expiry import (
    DeadlineExpiryHandlerProtocol,
)
from talentproof.domain.models.video_record import VideoRecord

logger = get_logger(__name__)


class DeadlineExpiryHandlerStub(DeadlineExpiryHandlerProtocol):
    """In-memory expiry handler that keeps the records it received."""

    def __init__(self) -> None:
        self.expired: list[VideoRecord] = []

    async def on_verification_deadline_expired(self, record: VideoRecord) -> None:
        self.expired.append(record)
        logger.info(
            "verification_deadline_expiry_recorded",
            video_id=record.id,
            verification_count=record.verification_count,
        )

    @property
    def expired_video_ids(self) -> list[str]:
        return [record.id for record in self.expired]

    def clear(self) -> None:
        """Forget recorded expiries (for testing)."""
        self.expired.clear()
