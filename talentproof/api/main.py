"""FastAPI application entry point for TalentProof."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from structlog import get_logger

from talentproof import __version__
from talentproof.api.middleware import LoggingMiddleware, MetricsMiddleware
from talentproof.api.routes.health import router as health_router
from talentproof.api.routes.metrics import router as metrics_router
from talentproof.api.routes.verification import router as verification_router
from talentproof.api.routes.videos import router as videos_router
from talentproof.bootstrap.database import close_database_engine
from talentproof.bootstrap.logging import configure_structlog

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_structlog()
    logger.info("talentproof_api_started", version=__version__)
    yield
    await close_database_engine()
    logger.info("talentproof_api_stopped")


app = FastAPI(
    title="TalentProof API",
    description="Community verification for athlete talent videos",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(metrics_router)
app.include_router(videos_router)
app.include_router(verification_router)
