"""API middleware."""

from talentproof.api.middleware.logging_middleware import LoggingMiddleware
from talentproof.api.middleware.metrics_middleware import MetricsMiddleware

__all__: list[str] = ["LoggingMiddleware", "MetricsMiddleware"]
