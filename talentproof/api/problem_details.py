"""RFC 7807 problem details for domain errors.

Maps the typed domain errors onto HTTPException with the error's own
serialization, the request URL as `instance`, and Retry-After for
retryable errors.
"""

from fastapi import HTTPException, Request

from talentproof.domain.errors import (
    AntiCheatUnavailableError,
    InvalidStatusTransitionError,
    StoreConflictError,
    VerificationError,
)

# Seconds a client should wait before resubmitting after a lost race
STORE_CONFLICT_RETRY_AFTER = 1


def problem_exception(
    error: VerificationError | InvalidStatusTransitionError,
    request: Request,
) -> HTTPException:
    """Build the HTTPException for a domain error."""
    detail = error.to_rfc7807_dict()
    detail["instance"] = str(request.url)

    headers: dict[str, str] | None = None
    if isinstance(error, AntiCheatUnavailableError):
        headers = {"Retry-After": str(error.retry_after)}
    elif isinstance(error, StoreConflictError):
        headers = {"Retry-After": str(STORE_CONFLICT_RETRY_AFTER)}

    return HTTPException(status_code=detail["status"], detail=detail, headers=headers)
