"""Unit tests for RFC 7807 problem detail mapping."""

from unittest.mock import MagicMock

import pytest

from talentproof.api.problem_details import (
    STORE_CONFLICT_RETRY_AFTER,
    problem_exception,
)
from talentproof.domain.errors import (
    AlreadyVerifiedError,
    AntiCheatUnavailableError,
    InvalidStatusTransitionError,
    StoreConflictError,
    VerificationValidationError,
    VideoNotFoundError,
)
from talentproof.domain.models.video_record import VerificationStatus

INSTANCE = "http://testserver/v1/videos/video-1/verifications"


@pytest.fixture
def request_stub() -> MagicMock:
    request = MagicMock()
    request.url = INSTANCE
    return request


class TestProblemException:
    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (VerificationValidationError("video-1", "verifier_name", "empty"), 400),
            (VideoNotFoundError("video-1"), 404),
            (AlreadyVerifiedError("video-1", 3, 3), 409),
            (
                InvalidStatusTransitionError(
                    "video-1", VerificationStatus.VERIFIED, VerificationStatus.REJECTED
                ),
                409,
            ),
        ],
    )
    def test_status_and_instance(
        self, request_stub: MagicMock, error: Exception, status: int
    ) -> None:
        exc = problem_exception(error, request_stub)  # type: ignore[arg-type]

        assert exc.status_code == status
        assert exc.detail["status"] == status
        assert exc.detail["instance"] == INSTANCE
        assert exc.headers is None

    def test_anti_cheat_retry_after(self, request_stub: MagicMock) -> None:
        exc = problem_exception(
            AntiCheatUnavailableError("video-1", ("ip_address",), retry_after=5),
            request_stub,
        )
        assert exc.status_code == 428
        assert exc.headers == {"Retry-After": "5"}

    def test_store_conflict_retry_after(self, request_stub: MagicMock) -> None:
        exc = problem_exception(
            StoreConflictError("video-1", expected_revision=0, actual_revision=1),
            request_stub,
        )
        assert exc.status_code == 409
        assert exc.headers == {"Retry-After": str(STORE_CONFLICT_RETRY_AFTER)}
        assert exc.detail["retryable"] is True
