"""Fill match results from Gemini suggestions.

Suggestions go through the same ``MatchStore.update_match`` path as a
manual edit; nothing here writes to the database directly.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from match_admin.models.matches import AutoUpdateResult, InferredResult
from match_admin.services.match_store import MatchStore
from match_admin.services.result_inference_service import (
    ResultInferenceService,
    build_match_description,
)

logger = logging.getLogger(__name__)


async def suggest_result(
    store: MatchStore,
    inference: ResultInferenceService,
    match_id: uuid.UUID,
) -> Optional[InferredResult]:
    """Return a suggested score/status for pre-filling the edit form."""
    match = await store.get_match(match_id)
    return await inference.infer(build_match_description(match))


async def auto_update_match(
    store: MatchStore,
    inference: ResultInferenceService,
    match_id: uuid.UUID,
) -> AutoUpdateResult:
    """Infer a match result and, if one comes back, save it.

    When no suggestion is available the match is returned as currently
    stored and ``applied`` is False.
    """
    match = await store.get_match(match_id)
    suggestion = await inference.infer(build_match_description(match))
    if suggestion is None:
        logger.info(f"No inferred result for match {match_id}; leaving it unchanged")
        return AutoUpdateResult(applied=False, match=match, suggestion=None)

    updated = await store.update_match(match_id, suggestion.to_patch())
    return AutoUpdateResult(applied=True, match=updated, suggestion=suggestion)
