"""Concurrency tests for verification submissions.

Two verifiers submit at the same moment. Both read the record at the same
revision; the conditional write lets exactly one through and the other gets
StoreConflictError. Resubmitting the identical candidate then resolves
against the fresh record.
"""

import asyncio

import pytest

from talentproof.application.ports.verification_submission import (
    VerificationSubmissionResult,
)
from talentproof.application.services.verification_submission_service import (
    VerificationSubmissionService,
)
from talentproof.domain.errors import (
    AlreadyVerifiedError,
    DuplicateAttestationError,
    StoreConflictError,
)
from talentproof.domain.models.verification_candidate import VerificationCandidate
from talentproof.domain.models.video_record import VerificationStatus, VideoRecord
from talentproof.domain.services.anti_fraud import has_unique_identifiers
from talentproof.infrastructure.stubs import VideoRecordRepositoryStub
from tests.helpers import build_candidate, build_record

pytestmark = pytest.mark.integration


class InterleavingRepositoryStub(VideoRecordRepositoryStub):
    """Yields after every read so concurrent submitters see the same revision."""

    async def get(self, video_id: str) -> VideoRecord | None:
        record = await super().get(video_id)
        await asyncio.sleep(0)
        return record


async def _submit_until_settled(
    service: VerificationSubmissionService,
    video_id: str,
    candidate: VerificationCandidate,
) -> tuple[VerificationSubmissionResult, int]:
    """Resubmit the unchanged candidate while it loses races."""
    conflicts = 0
    while True:
        result = await service.submit_verification(video_id, candidate)
        if not isinstance(result.error, StoreConflictError):
            return result, conflicts
        conflicts += 1


@pytest.fixture
def repo() -> InterleavingRepositoryStub:
    return InterleavingRepositoryStub()


@pytest.fixture
def service(repo: InterleavingRepositoryStub) -> VerificationSubmissionService:
    return VerificationSubmissionService(video_repo=repo)


class TestConcurrentSubmissions:
    @pytest.mark.asyncio
    async def test_one_winner_then_retry_succeeds(
        self, repo: InterleavingRepositoryStub, service: VerificationSubmissionService
    ) -> None:
        repo.put(build_record(threshold=3))
        first = build_candidate("Ana", fingerprint="fp-1", ip="10.0.0.1")
        second = build_candidate("Ben", fingerprint="fp-2", ip="10.0.0.2")

        results = await asyncio.gather(
            service.submit_verification("video-1", first),
            service.submit_verification("video-1", second),
        )

        accepted = [r for r in results if r.accepted]
        conflicted = [r for r in results if isinstance(r.error, StoreConflictError)]
        assert len(accepted) == 1
        assert len(conflicted) == 1
        assert conflicted[0].error is not None and conflicted[0].error.retryable

        loser = second if accepted[0].unwrap().verifications[0].verifier_name == "Ana" else first
        retry = await service.submit_verification("video-1", loser)

        assert retry.accepted
        assert retry.unwrap().verification_count == 2
        assert retry.unwrap().revision == 2

    @pytest.mark.asyncio
    async def test_same_device_race_resolves_to_duplicate(
        self, repo: InterleavingRepositoryStub, service: VerificationSubmissionService
    ) -> None:
        repo.put(build_record())
        one = build_candidate("Ana", fingerprint="shared", ip="10.0.0.1")
        two = build_candidate("Ben", fingerprint="shared", ip="10.0.0.2")

        outcomes = await asyncio.gather(
            _submit_until_settled(service, "video-1", one),
            _submit_until_settled(service, "video-1", two),
        )

        results = [result for result, _ in outcomes]
        assert sum(1 for r in results if r.accepted) == 1
        assert sum(1 for r in results if isinstance(r.error, DuplicateAttestationError)) == 1
        record = await repo.get("video-1")
        assert record is not None
        assert record.verification_count == 1

    @pytest.mark.asyncio
    async def test_burst_never_overshoots_consensus(
        self, repo: InterleavingRepositoryStub, service: VerificationSubmissionService
    ) -> None:
        repo.put(build_record(threshold=3))
        candidates = [
            build_candidate(f"Verifier {i}", fingerprint=f"fp-{i}", ip=f"10.0.1.{i}")
            for i in range(6)
        ]

        outcomes = await asyncio.gather(
            *(_submit_until_settled(service, "video-1", c) for c in candidates)
        )

        results = [result for result, _ in outcomes]
        assert sum(1 for r in results if r.accepted) == 3
        assert sum(1 for r in results if r.threshold_crossed) == 1
        assert sum(1 for r in results if isinstance(r.error, AlreadyVerifiedError)) == 3
        assert sum(conflicts for _, conflicts in outcomes) > 0

        record = await repo.get("video-1")
        assert record is not None
        assert record.verification_status == VerificationStatus.VERIFIED
        assert record.verification_count == 3
        assert record.revision == 3
        assert has_unique_identifiers(record.verifications)
