"""
Pytest configuration and shared fixtures for TalentProof tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from collections.abc import Iterator

import pytest

from talentproof.bootstrap.verification import reset_verification_dependencies
from talentproof.infrastructure.monitoring.metrics import reset_verification_metrics


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from talentproof import __version__

    return __version__


@pytest.fixture(autouse=True)
def _reset_singletons() -> Iterator[None]:
    """Give every test fresh bootstrap and metrics singletons."""
    reset_verification_dependencies()
    reset_verification_metrics()
    yield
    reset_verification_dependencies()
    reset_verification_metrics()
