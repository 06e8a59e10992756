"""Shared helpers for admin routes."""

from __future__ import annotations

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from match_admin.services.exceptions import (
    ConfigurationError,
    MatchAdminError,
    MatchNotFoundError,
    RemoteFetchError,
    RemoteUpdateError,
    ValidationError,
)
from match_admin.services.match_store import MatchStore
from match_admin.services.result_inference_service import (
    ResultInferenceService,
    result_inference_service,
)
from match_admin.utils.db_async import get_session

# Most specific classes first: MatchNotFoundError is also a RemoteFetchError
ERROR_STATUS_CODES: list[tuple[type[MatchAdminError], int]] = [
    (MatchNotFoundError, 404),
    (ValidationError, 422),
    (ConfigurationError, 503),
    (RemoteUpdateError, 502),
    (RemoteFetchError, 502),
]


def get_match_store(db: AsyncSession = Depends(get_session)) -> MatchStore:
    """Build a request-scoped MatchStore on the request's session."""
    return MatchStore(db)


def get_result_inference_service() -> ResultInferenceService:
    return result_inference_service


def to_http_exception(exc: MatchAdminError) -> HTTPException:
    """Translate a service error into an HTTPException with a specific message."""
    for error_cls, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_cls):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
