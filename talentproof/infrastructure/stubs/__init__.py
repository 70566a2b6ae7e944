"""In-memory stub adapters for development and testing."""

from talentproof.infrastructure.stubs.deadline_expiry_handler_stub import (
    DeadlineExpiryHandlerStub,
)
from talentproof.infrastructure.stubs.video_record_repository_stub import (
    VideoRecordRepositoryStub,
)

__all__: list[str] = [
    "DeadlineExpiryHandlerStub",
    "VideoRecordRepositoryStub",
]
