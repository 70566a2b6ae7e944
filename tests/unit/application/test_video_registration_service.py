"""Unit tests for VideoRegistrationService."""

from datetime import datetime, timedelta, timezone

import pytest

from talentproof.application.services.video_registration_service import (
    VideoRegistration,
    VideoRegistrationService,
)
from talentproof.config.verification_config import (
    TEST_VERIFICATION_CONFIG,
    VerificationConfig,
)
from talentproof.domain.errors import InvalidStatusTransitionError, VideoNotFoundError
from talentproof.domain.models.video_record import VerificationStatus
from talentproof.infrastructure.stubs import VideoRecordRepositoryStub
from tests.helpers import build_record


@pytest.fixture
def repo() -> VideoRecordRepositoryStub:
    return VideoRecordRepositoryStub()


@pytest.fixture
def service(repo: VideoRecordRepositoryStub) -> VideoRegistrationService:
    return VideoRegistrationService(video_repo=repo, config=TEST_VERIFICATION_CONFIG)


class TestRegisterVideo:
    """Tests for register_video."""

    @pytest.mark.asyncio
    async def test_defaults_applied(self, service: VideoRegistrationService) -> None:
        before = datetime.now(timezone.utc)
        record = await service.register_video(
            VideoRegistration(owner_id="athlete-1", title="Free kick")
        )

        assert record.id.startswith("video-")
        assert record.verification_status == VerificationStatus.PENDING
        assert record.verification_threshold == 3
        assert record.verification_count == 0
        assert record.verification_link == (
            f"http://testserver/verify/athlete-1/{record.id}"
        )
        assert record.verification_deadline is not None
        delta = record.verification_deadline - before
        assert timedelta(days=6, hours=23) < delta <= timedelta(days=7, seconds=5)

    @pytest.mark.asyncio
    async def test_overrides(self, repo: VideoRecordRepositoryStub) -> None:
        config = VerificationConfig(default_threshold=5, public_base_url="https://x.app")
        service = VideoRegistrationService(video_repo=repo, config=config)
        deadline = datetime(2027, 1, 1)

        record = await service.register_video(
            VideoRegistration(
                owner_id="athlete-2",
                title="Sprint",
                video_id="video-42",
                verification_threshold=2,
                verification_deadline=deadline,
            )
        )

        assert record.id == "video-42"
        assert record.verification_threshold == 2
        assert record.verification_deadline == deadline.replace(tzinfo=timezone.utc)
        assert await repo.get("video-42") == record

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, service: VideoRegistrationService) -> None:
        registration = VideoRegistration(owner_id="a", title="t", video_id="video-1")
        await service.register_video(registration)
        with pytest.raises(ValueError, match="already exists"):
            await service.register_video(registration)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("threshold", [0, -2])
    async def test_explicit_non_positive_threshold_rejected(
        self,
        repo: VideoRecordRepositoryStub,
        service: VideoRegistrationService,
        threshold: int,
    ) -> None:
        with pytest.raises(ValueError, match="verification_threshold"):
            await service.register_video(
                VideoRegistration(
                    owner_id="a",
                    title="t",
                    video_id="video-1",
                    verification_threshold=threshold,
                )
            )
        assert await repo.get("video-1") is None


class TestReadsAndViews:
    @pytest.mark.asyncio
    async def test_get_video_missing(self, service: VideoRegistrationService) -> None:
        with pytest.raises(VideoNotFoundError):
            await service.get_video("missing")

    @pytest.mark.asyncio
    async def test_progress(
        self, repo: VideoRecordRepositoryStub, service: VideoRegistrationService
    ) -> None:
        repo.put(build_record(threshold=4))
        progress = await service.get_progress("video-1")
        assert (progress.current_count, progress.threshold, progress.remaining) == (
            0,
            4,
            4,
        )

    @pytest.mark.asyncio
    async def test_record_view_increments(
        self, repo: VideoRecordRepositoryStub, service: VideoRegistrationService
    ) -> None:
        repo.put(build_record())
        assert await service.record_view("video-1") == 1
        assert await service.record_view("video-1") == 2

    @pytest.mark.asyncio
    async def test_stats(
        self, repo: VideoRecordRepositoryStub, service: VideoRegistrationService
    ) -> None:
        repo.put(build_record("v1"))
        repo.put(build_record("v2", status=VerificationStatus.VERIFIED))
        repo.put(build_record("v3", status=VerificationStatus.REJECTED))
        repo.put(build_record("v4"))

        stats = await service.get_verification_stats()

        assert (stats.pending, stats.verified, stats.rejected) == (2, 1, 1)
        assert stats.total == 4

    @pytest.mark.asyncio
    async def test_list_by_status_newest_first(
        self, repo: VideoRecordRepositoryStub, service: VideoRegistrationService
    ) -> None:
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        repo.put(build_record("old", upload_date=base))
        repo.put(build_record("new", upload_date=base + timedelta(days=1)))

        records, total = await service.list_by_status(VerificationStatus.PENDING)

        assert total == 2
        assert [r.id for r in records] == ["new", "old"]


class TestRejectVideo:
    @pytest.mark.asyncio
    async def test_reject_pending(
        self, repo: VideoRecordRepositoryStub, service: VideoRegistrationService
    ) -> None:
        repo.put(build_record())
        record = await service.reject_video("video-1", "  ")
        assert record.verification_status == VerificationStatus.REJECTED
        assert record.rejection_reason == "Administrative rejection"

    @pytest.mark.asyncio
    async def test_reject_verified_refused(
        self, repo: VideoRecordRepositoryStub, service: VideoRegistrationService
    ) -> None:
        repo.put(build_record(status=VerificationStatus.VERIFIED))
        with pytest.raises(InvalidStatusTransitionError):
            await service.reject_video("video-1", "late")
