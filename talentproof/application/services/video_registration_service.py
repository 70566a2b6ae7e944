"""Video registration and read-side service.

Creates empty pending video records with a fixed consensus threshold, an
advisory deadline and a minted verification link. Also serves the read
projections, the atomic view counter and the single external moderation
hook (pending -> rejected).
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from structlog import get_logger

from talentproof.domain.errors import VideoNotFoundError
from talentproof.domain.models.video_record import (
    VerificationProgress,
    VerificationStatus,
    VideoRecord,
)
from talentproof.domain.services.verification_link import mint_verification_link

if TYPE_CHECKING:
    from talentproof.application.ports.video_record_repository import (
        VideoRecordRepositoryProtocol,
    )
    from talentproof.config.verification_config import VerificationConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class VideoRegistration:
    """Metadata supplied when registering a talent video.

    Attributes:
        owner_id: The athlete who uploaded the video.
        title: Display title.
        video_id: Optional caller-chosen id; minted when omitted.
        verification_threshold: Optional override of the configured default.
        verification_deadline: Optional override of the configured default.
    """

    owner_id: str
    title: str
    video_id: str | None = None
    description: str | None = None
    sport: str | None = None
    sport_name: str | None = None
    main_category: str | None = None
    main_category_name: str | None = None
    specific_skill: str | None = None
    skill_category: str | None = None
    duration_seconds: int = 0
    verification_threshold: int | None = None
    verification_deadline: datetime | None = None


@dataclass(frozen=True)
class VerificationStats:
    """Counts of videos per verification status."""

    pending: int
    verified: int
    rejected: int

    @property
    def total(self) -> int:
        return self.pending + self.verified + self.rejected


class VideoRegistrationService:
    """Service for registering videos and reading their verification state.

    Example:
        >>> service = VideoRegistrationService(video_repo, config)
        >>> record = await service.register_video(
        ...     VideoRegistration(owner_id="athlete-1", title="Free kick")
        ... )
        >>> record.verification_link
        'https://amaplay007.web.app/verify/athlete-1/video-1718000000000'
    """

    def __init__(
        self,
        video_repo: VideoRecordRepositoryProtocol,
        config: VerificationConfig,
    ) -> None:
        """Initialize the registration service.

        Args:
            video_repo: Repository for video record persistence.
            config: Defaults for threshold, deadline and link origin.
        """
        self._video_repo = video_repo
        self._config = config

    async def register_video(self, registration: VideoRegistration) -> VideoRecord:
        """Create an empty pending record for an uploaded video.

        Args:
            registration: Video metadata and optional overrides.

        Returns:
            The persisted record.

        Raises:
            ValueError: If metadata is invalid or the id already exists.
        """
        now = datetime.now(timezone.utc)
        video_id = registration.video_id or f"video-{int(time.time() * 1000)}"
        threshold = registration.verification_threshold
        if threshold is None:
            threshold = self._config.default_threshold
        deadline = registration.verification_deadline or (
            now + timedelta(days=self._config.deadline_days)
        )
        if deadline.tzinfo is None:
            deadline = deadline.replace(tzinfo=timezone.utc)

        record = VideoRecord(
            id=video_id,
            owner_id=registration.owner_id,
            title=registration.title,
            description=registration.description,
            sport=registration.sport,
            sport_name=registration.sport_name,
            main_category=registration.main_category,
            main_category_name=registration.main_category_name,
            specific_skill=registration.specific_skill,
            skill_category=registration.skill_category,
            upload_date=now,
            duration_seconds=registration.duration_seconds,
            verification_threshold=threshold,
            verification_deadline=deadline,
            verification_link=mint_verification_link(
                self._config.public_base_url, registration.owner_id, video_id
            ),
            updated_at=now,
        )
        await self._video_repo.create(record)

        logger.info(
            "video_registered",
            video_id=video_id,
            owner_id=registration.owner_id,
            verification_threshold=threshold,
            verification_deadline=deadline.isoformat(),
        )
        return record

    async def get_video(self, video_id: str) -> VideoRecord:
        """Load a record.

        Raises:
            VideoNotFoundError: The video does not exist.
        """
        record = await self._video_repo.get(video_id)
        if record is None:
            raise VideoNotFoundError(video_id)
        return record

    async def get_progress(self, video_id: str) -> VerificationProgress:
        """Project a record into "current / threshold" form.

        Raises:
            VideoNotFoundError: The video does not exist.
        """
        record = await self.get_video(video_id)
        return record.progress()

    async def record_view(self, video_id: str) -> int:
        """Atomically increment the view counter.

        Independent of verification writes; never a cached read-modify-write.

        Returns:
            The new view count.

        Raises:
            VideoNotFoundError: The video does not exist.
        """
        view_count = await self._video_repo.increment_view_count(video_id)
        logger.debug("video_view_recorded", video_id=video_id, view_count=view_count)
        return view_count

    async def reject_video(self, video_id: str, reason: str) -> VideoRecord:
        """External moderation hook: move a pending video to rejected.

        Args:
            video_id: The video to reject.
            reason: Moderation reason; blank becomes "Administrative rejection".

        Returns:
            The updated record.

        Raises:
            VideoNotFoundError: The video does not exist.
            InvalidStatusTransitionError: The video is not pending.
        """
        reason = reason.strip() or "Administrative rejection"
        record = await self._video_repo.set_rejected(
            video_id, reason=reason, rejected_at=datetime.now(timezone.utc)
        )
        logger.info(
            "video_rejected",
            video_id=video_id,
            reason=reason,
            verification_count=record.verification_count,
        )
        return record

    async def get_verification_stats(self) -> VerificationStats:
        """Count videos per verification status."""
        counts = await self._video_repo.count_by_status()
        return VerificationStats(
            pending=counts.get(VerificationStatus.PENDING, 0),
            verified=counts.get(VerificationStatus.VERIFIED, 0),
            rejected=counts.get(VerificationStatus.REJECTED, 0),
        )

    async def list_by_status(
        self,
        status: VerificationStatus,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[VideoRecord], int]:
        """List videos with a status, newest first.

        Returns:
            Tuple of (page of records, total count matching status).
        """
        return await self._video_repo.list_by_status(status, limit=limit, offset=offset)
