"""Verification deadline hook.

The engine stores a verification deadline but never enforces it on its own:
there is no timer and no polling here. An external scheduled collaborator
calls on_deadline_passed() (or walks find_overdue()) and this service
forwards still-pending, overdue videos to the injected expiry handler.

Status is never changed here. Rejection remains an external moderation
action.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from structlog import get_logger

from talentproof.domain.errors import VideoNotFoundError
from talentproof.domain.models.video_record import VerificationStatus, VideoRecord

if TYPE_CHECKING:
    from talentproof.application.ports.deadline_expiry import (
        DeadlineExpiryHandlerProtocol,
    )
    from talentproof.application.ports.video_record_repository import (
        VideoRecordRepositoryProtocol,
    )

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeadlineCheckResult:
    """Outcome of a deadline hook invocation.

    Attributes:
        video_id: The checked video.
        expired: True when the video was pending and past its deadline,
            and the expiry handler was notified.
        status: The video's status at check time.
        deadline: The stored deadline, if any.
        verification_count: Attestations at check time.
    """

    video_id: str
    expired: bool
    status: VerificationStatus
    deadline: datetime | None
    verification_count: int


class VerificationDeadlineService:
    """Receives deadline notifications from an external scheduler."""

    def __init__(
        self,
        video_repo: VideoRecordRepositoryProtocol,
        expiry_handler: DeadlineExpiryHandlerProtocol,
    ) -> None:
        """Initialize the deadline service.

        Args:
            video_repo: Repository for video record access.
            expiry_handler: Collaborator notified about overdue pending videos.
        """
        self._video_repo = video_repo
        self._expiry_handler = expiry_handler

    @staticmethod
    def is_overdue(record: VideoRecord, now: datetime) -> bool:
        """Check whether a record is pending and past its deadline."""
        return (
            record.verification_status == VerificationStatus.PENDING
            and record.verification_deadline is not None
            and record.verification_deadline < now
        )

    async def on_deadline_passed(
        self,
        video_id: str,
        now: datetime | None = None,
    ) -> DeadlineCheckResult:
        """Handle a scheduler notification for one video.

        Verified and rejected videos, videos without a deadline and videos
        whose deadline is still ahead are reported as not expired and the
        handler is not called.

        Args:
            video_id: The video whose deadline supposedly passed.
            now: Reference time (defaults to current UTC time).

        Returns:
            DeadlineCheckResult describing what was found.

        Raises:
            VideoNotFoundError: The video does not exist.
        """
        now = now or datetime.now(timezone.utc)
        log = logger.bind(video_id=video_id)

        record = await self._video_repo.get(video_id)
        if record is None:
            log.warning("deadline_check_video_not_found")
            raise VideoNotFoundError(video_id)

        expired = self.is_overdue(record, now)
        if expired:
            log.info(
                "verification_deadline_expired",
                deadline=record.verification_deadline.isoformat()
                if record.verification_deadline
                else None,
                verification_count=record.verification_count,
                threshold=record.verification_threshold,
            )
            await self._expiry_handler.on_verification_deadline_expired(record)
        else:
            log.debug(
                "verification_deadline_not_expired",
                status=record.verification_status.value,
            )

        return DeadlineCheckResult(
            video_id=video_id,
            expired=expired,
            status=record.verification_status,
            deadline=record.verification_deadline,
            verification_count=record.verification_count,
        )

    async def find_overdue(
        self,
        now: datetime | None = None,
        limit: int = 100,
    ) -> list[VideoRecord]:
        """List pending videos past their deadline, oldest deadline first."""
        now = now or datetime.now(timezone.utc)
        overdue = await self._video_repo.list_overdue(now, limit=limit)
        logger.debug("overdue_videos_listed", count=len(overdue))
        return overdue
