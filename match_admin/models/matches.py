"""Value and request models for match editing.

``MatchWithTeams`` is a frozen snapshot detached from the database session:
callers can hold on to one while an update is in flight without it being
mutated underneath them.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time
from typing import Annotated, Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from match_admin.schemas.matches import Match, MatchStatus
from match_admin.schemas.teams import Team
from match_admin.services.exceptions import ValidationError

# Upper bound of the INTEGER score columns
MAX_SCORE = 2_147_483_647

NonNegativeStrictInt = Annotated[int, Field(strict=True, ge=0, le=MAX_SCORE)]


def _format_errors(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "patch"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def normalize_score(value: Any) -> Optional[int]:
    """Turn a score from a form or JSON body into ``None`` or a non-negative int.

    Blank input means "no score recorded" and maps to ``None``, never ``0``.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("score must be a whole number, not a boolean")
    if isinstance(value, int):
        score = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if not (text.isascii() and text.isdigit()):
            raise ValueError(f"score must be a non-negative whole number, got {value!r}")
        score = int(text)
    else:
        raise ValueError(f"score must be a whole number, got {type(value).__name__}")

    if score < 0:
        raise ValueError(f"score cannot be negative, got {score}")
    if score > MAX_SCORE:
        raise ValueError(f"score cannot exceed {MAX_SCORE}, got {score}")
    return score


class TeamRead(BaseModel):
    """Team columns exposed with a joined match."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: uuid.UUID
    name: str
    country: str
    logo_url: Optional[str] = None


class MatchWithTeams(BaseModel):
    """A match row joined with its home and away teams."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: uuid.UUID
    group_id: uuid.UUID
    home_team_id: uuid.UUID
    away_team_id: uuid.UUID
    match_date: date
    match_time: time
    status: MatchStatus
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    home_team: TeamRead
    away_team: TeamRead

    @classmethod
    def from_row(cls, match: Match, home_team: Team, away_team: Team) -> "MatchWithTeams":
        return cls(
            id=match.id,
            group_id=match.group_id,
            home_team_id=match.home_team_id,
            away_team_id=match.away_team_id,
            match_date=match.match_date,
            match_time=match.match_time,
            status=match.status,
            home_score=match.home_score,
            away_score=match.away_score,
            created_at=match.created_at,
            updated_at=match.updated_at,
            home_team=TeamRead.model_validate(home_team),
            away_team=TeamRead.model_validate(away_team),
        )


class MatchPatch(BaseModel):
    """Fields an operator (or an accepted inference) may change on a match."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    home_score: Optional[int] = None
    away_score: Optional[int] = None
    status: MatchStatus

    @field_validator("home_score", "away_score", mode="before")
    @classmethod
    def _normalize_score(cls, value: Any) -> Optional[int]:
        return normalize_score(value)

    @classmethod
    def parse(cls, data: "MatchPatch | Mapping[str, Any]") -> "MatchPatch":
        """Validate raw input into a patch, raising the admin ``ValidationError``."""
        if isinstance(data, cls):
            return data
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid match patch: {_format_errors(exc)}") from exc


class InferredResult(BaseModel):
    """Score/status guess extracted from a model reply.

    Scores must already be JSON integers or null; nothing is coerced.
    """

    model_config = ConfigDict(frozen=True)

    home_score: Optional[NonNegativeStrictInt]
    away_score: Optional[NonNegativeStrictInt]
    status: MatchStatus

    def to_patch(self) -> MatchPatch:
        return MatchPatch(
            home_score=self.home_score,
            away_score=self.away_score,
            status=self.status,
        )


class MatchDateGroup(BaseModel):
    """Matches sharing a calendar date, in list order."""

    match_date: date
    matches: list[MatchWithTeams]


class SuggestionResponse(BaseModel):
    suggestion: Optional[InferredResult] = None


class AutoUpdateResult(BaseModel):
    """Outcome of inferring a result and applying it through the update path."""

    applied: bool
    match: MatchWithTeams
    suggestion: Optional[InferredResult] = None
