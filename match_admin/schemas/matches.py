"""Match fixture table.

Rows are seeded outside this service; the admin only reads them and
updates score/status fields.
"""

import uuid
from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from sqlalchemy import CheckConstraint, Column
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel


class MatchStatus(str, Enum):
    """Lifecycle of a fixture. Any transition is allowed."""

    UPCOMING = "upcoming"
    LIVE = "live"
    FINISHED = "finished"


class Match(SQLModel, table=True):  # type: ignore[call-arg]
    """One scheduled or played fixture between two teams."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint(
            "home_score IS NULL OR home_score >= 0",
            name="ck_matches_home_score_non_negative",
        ),
        CheckConstraint(
            "away_score IS NULL OR away_score >= 0",
            name="ck_matches_away_score_non_negative",
        ),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    group_id: uuid.UUID = Field(index=True)
    home_team_id: uuid.UUID = Field(foreign_key="teams.id", index=True)
    away_team_id: uuid.UUID = Field(foreign_key="teams.id", index=True)
    match_date: date = Field(index=True)
    match_time: time
    # Stored as the lowercase text the hosted backend already uses
    status: MatchStatus = Field(
        default=MatchStatus.UPCOMING,
        sa_column=Column(
            SAEnum(
                MatchStatus,
                name="match_status",
                native_enum=False,
                length=16,
                values_callable=lambda enum: [member.value for member in enum],
            ),
            nullable=False,
        ),
    )
    home_score: Optional[int] = Field(default=None)
    away_score: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
