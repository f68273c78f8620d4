"""
Resume routes: REST endpoint that triggers parsing of an uploaded resume.

Endpoints
---------
POST /api/resumes/{document_id}/parse  — Extract and structure one resume

The caller's identity arrives in the ``X-User-Id`` header, set by the
authentication gateway in front of this service.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, status
from pydantic import BaseModel, Field

from api.dependencies import get_processor, get_rate_limiter
from ingestion.processor import ResumeProcessor
from persistence.base import DocumentNotFoundError, PersistenceError
from security.rate_limiter import RateLimiter, RateLimitExceeded
from security.request_validation import RequestValidationError, validate_parse_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resumes", tags=["resumes"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------

class ParseRequest(BaseModel):
    """Optional body for POST /api/resumes/{document_id}/parse."""
    storage_path: Optional[str] = Field(
        default=None,
        description="Storage locator the client expects; validated, not trusted",
    )


class ParseResponse(BaseModel):
    """Response body for a parse call that reached a terminal state."""
    success: bool
    document_id: str
    status: str
    degraded: bool = False
    profile: Optional[dict] = None
    profile_id: Optional[str] = None
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/{document_id}/parse",
    response_model=ParseResponse,
    status_code=status.HTTP_200_OK,
    summary="Parse an uploaded resume into structured candidate data",
)
def parse_resume(
    document_id: str,
    body: Optional[ParseRequest] = Body(default=None),
    x_user_id: Optional[str] = Header(default=None),
    processor: ResumeProcessor = Depends(get_processor),
    limiter: Optional[RateLimiter] = Depends(get_rate_limiter),
) -> ParseResponse:
    """Extract text from the stored file, structure it with the language
    model and persist the result. A completed resume without structured
    fields is reported with ``degraded=true``.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    user_id = x_user_id.strip()

    try:
        validate_parse_request(document_id, body.storage_path if body else None)
    except RequestValidationError as exc:
        logger.warning("Rejected parse request for %s: %s", document_id, exc.errors)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Input validation failed", "details": exc.errors},
        ) from exc

    if limiter is not None:
        try:
            limiter.enforce(user_id)
        except RateLimitExceeded as exc:
            logger.warning("Rate limit exceeded for user %s", user_id)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=str(exc),
                headers={"Retry-After": str(exc.retry_after)},
            ) from exc

    try:
        outcome = processor.process(document_id, user_id)
    except DocumentNotFoundError as exc:
        if limiter is not None:
            limiter.record(user_id, "not_found")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.exception("Persistence failure while parsing %s", document_id)
        if limiter is not None:
            limiter.record(user_id, "error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update resume status",
        ) from exc

    if limiter is not None:
        limiter.record(user_id, "success" if outcome.success else "failure")

    data = outcome.to_dict()
    return ParseResponse(
        success=data["success"],
        document_id=data["document_id"],
        status=data["status"],
        degraded=data["degraded"],
        profile=data["profile"],
        profile_id=data["profile_id"],
        error=data["error"],
        warnings=data["warnings"],
    )
