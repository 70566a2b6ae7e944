"""Bootstrap wiring for verification dependencies.

The video record store is PostgreSQL when DATABASE_URL is set and the
in-memory stub otherwise.
"""

from __future__ import annotations

from structlog import get_logger

from talentproof.application.ports.deadline_expiry import (
    DeadlineExpiryHandlerProtocol,
)
from talentproof.application.ports.fingerprint_collector import (
    FingerprintCollectorProtocol,
)
from talentproof.application.ports.video_record_repository import (
    VideoRecordRepositoryProtocol,
)
from talentproof.application.services.verification_deadline_service import (
    VerificationDeadlineService,
)
from talentproof.application.services.verification_submission_service import (
    VerificationSubmissionService,
)
from talentproof.application.services.video_registration_service import (
    VideoRegistrationService,
)
from talentproof.bootstrap.database import get_session_factory, is_database_configured
from talentproof.config.verification_config import VerificationConfig
from talentproof.infrastructure.adapters.fingerprint import RequestFingerprintCollector
from talentproof.infrastructure.adapters.persistence import (
    PostgresVideoRecordRepository,
)
from talentproof.infrastructure.stubs import (
    DeadlineExpiryHandlerStub,
    VideoRecordRepositoryStub,
)

logger = get_logger(__name__)

_config: VerificationConfig | None = None
_video_repository: VideoRecordRepositoryProtocol | None = None
_fingerprint_collector: FingerprintCollectorProtocol | None = None
_expiry_handler: DeadlineExpiryHandlerProtocol | None = None


def get_verification_config() -> VerificationConfig:
    """Get verification config (read from the environment on first call)."""
    global _config
    if _config is None:
        _config = VerificationConfig.from_environment()
    return _config


def get_video_repository() -> VideoRecordRepositoryProtocol:
    """Get video record repository instance."""
    global _video_repository
    if _video_repository is None:
        if is_database_configured():
            _video_repository = PostgresVideoRecordRepository(get_session_factory())
            logger.info("video_repository_selected", backend="postgres")
        else:
            _video_repository = VideoRecordRepositoryStub()
            logger.info("video_repository_selected", backend="memory")
    return _video_repository


def get_fingerprint_collector() -> FingerprintCollectorProtocol:
    """Get fingerprint collector instance."""
    global _fingerprint_collector
    if _fingerprint_collector is None:
        config = get_verification_config()
        _fingerprint_collector = RequestFingerprintCollector(
            salt=config.fingerprint_salt,
            trust_forwarded_for=config.trust_forwarded_for,
        )
    return _fingerprint_collector


def get_deadline_expiry_handler() -> DeadlineExpiryHandlerProtocol:
    """Get deadline expiry handler instance."""
    global _expiry_handler
    if _expiry_handler is None:
        _expiry_handler = DeadlineExpiryHandlerStub()
    return _expiry_handler


def get_verification_submission_service() -> VerificationSubmissionService:
    return VerificationSubmissionService(video_repo=get_video_repository())


def get_video_registration_service() -> VideoRegistrationService:
    return VideoRegistrationService(
        video_repo=get_video_repository(),
        config=get_verification_config(),
    )


def get_verification_deadline_service() -> VerificationDeadlineService:
    return VerificationDeadlineService(
        video_repo=get_video_repository(),
        expiry_handler=get_deadline_expiry_handler(),
    )


def set_verification_config(config: VerificationConfig) -> None:
    """Set custom config for testing."""
    global _config
    _config = config


def set_video_repository(repo: VideoRecordRepositoryProtocol) -> None:
    """Set custom video repository for testing."""
    global _video_repository
    _video_repository = repo


def set_fingerprint_collector(collector: FingerprintCollectorProtocol) -> None:
    """Set custom fingerprint collector for testing."""
    global _fingerprint_collector
    _fingerprint_collector = collector


def set_deadline_expiry_handler(handler: DeadlineExpiryHandlerProtocol) -> None:
    """Set custom expiry handler for testing."""
    global _expiry_handler
    _expiry_handler = handler


def reset_verification_dependencies() -> None:
    """Reset all singleton instances for testing."""
    global _config
    global _video_repository
    global _fingerprint_collector
    global _expiry_handler

    _config = None
    _video_repository = None
    _fingerprint_collector = None
    _expiry_handler = None
