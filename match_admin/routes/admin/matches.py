"""Admin match editing routes (JSON)."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from match_admin.models.matches import (
    AutoUpdateResult,
    MatchDateGroup,
    MatchWithTeams,
    SuggestionResponse,
)
from match_admin.routes.admin.helpers import (
    get_match_store,
    get_result_inference_service,
    to_http_exception,
)
from match_admin.services.exceptions import MatchAdminError
from match_admin.services.match_autofill_service import auto_update_match, suggest_result
from match_admin.services.match_store import MatchStore, group_matches_by_date
from match_admin.services.result_inference_service import ResultInferenceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matches", tags=["admin-matches"])


@router.get("", response_model=list[MatchWithTeams])
async def list_matches(
    store: MatchStore = Depends(get_match_store),
) -> list[MatchWithTeams]:
    """List all matches ordered by date and kick-off time."""
    try:
        return await store.list_matches()
    except MatchAdminError as exc:
        raise to_http_exception(exc) from exc


@router.get("/by-date", response_model=list[MatchDateGroup])
async def list_matches_by_date(
    show_finished: bool = Query(default=False),
    store: MatchStore = Depends(get_match_store),
) -> list[MatchDateGroup]:
    """List matches grouped by date, hiding finished ones unless asked."""
    try:
        matches = await store.list_matches()
    except MatchAdminError as exc:
        raise to_http_exception(exc) from exc
    return group_matches_by_date(matches, show_finished=show_finished)


@router.get("/{match_id}", response_model=MatchWithTeams)
async def get_match(
    match_id: uuid.UUID,
    store: MatchStore = Depends(get_match_store),
) -> MatchWithTeams:
    """Return one match with its teams."""
    try:
        return await store.get_match(match_id)
    except MatchAdminError as exc:
        raise to_http_exception(exc) from exc


@router.patch("/{match_id}", response_model=MatchWithTeams)
async def update_match(
    match_id: uuid.UUID,
    payload: dict[str, Any] = Body(...),
    store: MatchStore = Depends(get_match_store),
) -> MatchWithTeams:
    """Save scores/status for a match and return the stored record.

    Blank score strings clear the score (null), they do not mean 0.
    """
    try:
        return await store.update_match(match_id, payload)
    except MatchAdminError as exc:
        logger.warning(f"Update of match {match_id} rejected: {exc}")
        raise to_http_exception(exc) from exc


@router.post("/{match_id}/suggest", response_model=SuggestionResponse)
async def suggest_match_result(
    match_id: uuid.UUID,
    store: MatchStore = Depends(get_match_store),
    inference: ResultInferenceService = Depends(get_result_inference_service),
) -> SuggestionResponse:
    """Ask Gemini for a result to pre-fill the edit form; nothing is saved."""
    try:
        suggestion = await suggest_result(store, inference, match_id)
    except MatchAdminError as exc:
        raise to_http_exception(exc) from exc
    return SuggestionResponse(suggestion=suggestion)


@router.post("/{match_id}/auto-update", response_model=AutoUpdateResult)
async def auto_update(
    match_id: uuid.UUID,
    store: MatchStore = Depends(get_match_store),
    inference: ResultInferenceService = Depends(get_result_inference_service),
) -> AutoUpdateResult:
    """Infer the result with Gemini and save it if one is found."""
    try:
        return await auto_update_match(store, inference, match_id)
    except MatchAdminError as exc:
        logger.warning(f"Auto-update of match {match_id} failed: {exc}")
        raise to_http_exception(exc) from exc
