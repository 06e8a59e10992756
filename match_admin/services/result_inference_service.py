"""Gemini-backed match result inference.

Sends a short description of a fixture to Gemini and extracts a
score/status guess from the reply. The guess is only a suggestion: it is
never written directly and has to go through ``MatchStore.update_match``
like a manual edit.

Any failure after the request is built (API error, transport error,
unparseable or invalid reply) yields ``None`` so the operator falls back
to manual entry. A missing API key is the one error that is raised.
"""

import json
import logging
from typing import Any, Optional

from google import genai
from google.genai import types
from pydantic import ValidationError as PydanticValidationError

from match_admin.config import settings
from match_admin.models.matches import InferredResult, MatchWithTeams
from match_admin.services.exceptions import ConfigurationError, InferenceUnavailable

logger = logging.getLogger(__name__)


RESULT_INFERENCE_PROMPT = """Analyze the following match description and extract the score:
"{description}"

Return only a JSON object with exactly this format:
{{
  "home_score": number or null,
  "away_score": number or null,
  "status": "upcoming" | "live" | "finished"
}}

If there is no score yet, return null for both scores.
If the match has not started, status must be "upcoming".
If the match is in progress, status must be "live".
If the match has ended, status must be "finished".
"""


def build_match_description(match: MatchWithTeams) -> str:
    """Describe a fixture the way the inference prompt expects it."""
    kickoff = match.match_time.strftime("%H:%M:%S")
    return (
        f"{match.home_team.name} vs {match.away_team.name} - "
        f"{match.match_date.isoformat()} {kickoff}"
    )


class ResultInferenceService:
    """Best-effort score/status extraction via the Gemini API."""

    def __init__(self, client: Optional[genai.Client] = None) -> None:
        self._client = client
        # Key the lazily built client was created with; None for an injected client
        self._client_key: Optional[str] = None

    @property
    def client(self) -> genai.Client:
        """Lazily initialize the Gemini client, rebuilding it if the key changed."""
        api_key = self._require_api_key()
        injected = self._client is not None and self._client_key is None
        if not injected and api_key != self._client_key:
            self._client = genai.Client(api_key=api_key)
            self._client_key = api_key
        return self._client  # type: ignore[return-value]

    @staticmethod
    def _require_api_key() -> str:
        if not settings.gemini_api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY is not configured; automatic result lookup is unavailable"
            )
        return settings.gemini_api_key

    async def infer(self, description: str) -> Optional[InferredResult]:
        """Ask Gemini for the result of the described match.

        One request, no retry, no streaming, transport-default timeout.

        Args:
            description: Free-text match description, e.g. "Home vs Away - 2025-06-15 16:00:00"

        Returns:
            The validated InferredResult, or None if no trustworthy result came back

        Raises:
            ConfigurationError: If GEMINI_API_KEY is missing (checked before any request)
        """
        # Re-checked per call so a key removed from settings fails fast
        self._require_api_key()
        prompt = RESULT_INFERENCE_PROMPT.format(description=description)
        logger.debug(f"Requesting result inference for: {description}")

        try:
            response = await self.client.aio.models.generate_content(
                model=settings.gemini_model,
                contents=types.Content(
                    role="user",
                    parts=[types.Part.from_text(text=prompt)],
                ),
                config=types.GenerateContentConfig(
                    temperature=settings.gemini_temperature,
                ),
            )
        except Exception as e:
            logger.error(f"Result inference request failed for '{description[:60]}': {e}")
            return None

        response_text = _response_text(response)
        logger.debug(f"Gemini response: {response_text}")

        try:
            result = _parse_inference_response(response_text)
        except InferenceUnavailable as e:
            logger.warning(f"Discarding inference for '{description[:60]}': {e}")
            return None

        logger.info(
            f"Inferred '{description[:40]}': "
            f"{result.home_score}-{result.away_score} ({result.status.value})"
        )
        return result


def _response_text(response: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` or an empty string."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return ""
    return getattr(parts[0], "text", None) or ""


def _strip_markdown_fences(response_text: str) -> str:
    text = response_text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _extract_json_object(text: str) -> dict[str, Any]:
    """Find the single top-level JSON object embedded in free text.

    A ``{`` that does not start a decodable object makes the whole reply
    malformed; objects nested inside it are never considered.

    Raises:
        InferenceUnavailable: If there is no object, more than one, or a broken one
    """
    decoder = json.JSONDecoder()
    found: list[dict[str, Any]] = []
    pos = text.find("{")
    while pos != -1:
        try:
            obj, end = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            raise InferenceUnavailable(f"Malformed JSON object in reply: {e}") from e
        if isinstance(obj, dict):
            found.append(obj)
        pos = text.find("{", end)

    if not found:
        raise InferenceUnavailable(f"No JSON object in reply: {text[:100]!r}")
    if len(found) > 1:
        raise InferenceUnavailable(f"Expected one JSON object, found {len(found)}")
    return found[0]


def _parse_inference_response(response_text: str) -> InferredResult:
    """Parse and validate a Gemini reply into an InferredResult.

    Raises:
        InferenceUnavailable: If the reply has no single JSON object or fails validation
    """
    data = _extract_json_object(_strip_markdown_fences(response_text))
    try:
        return InferredResult.model_validate(data)
    except PydanticValidationError as e:
        raise InferenceUnavailable(f"Invalid inference payload {data!r}: {e}") from e


# Singleton instance for convenience
result_inference_service = ResultInferenceService()
