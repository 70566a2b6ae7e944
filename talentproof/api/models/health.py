"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Health status string (e.g., "healthy").
        version: Running package version.
        store: Video record backend ("postgres" or "memory").
    """

    status: str
    version: str
    store: str
