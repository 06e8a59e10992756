"""Repository for reading and updating match records.

Handles the joined reads (match + home/away team) and the partial update
of score/status fields. Routes get a ``MatchStore`` per request through
dependency injection; nothing here keeps state between requests.

Updates are last-write-wins: there is no version column and no
optimistic-concurrency check, so two operators saving the same match
simply overwrite each other in commit order.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from match_admin.models.matches import MatchDateGroup, MatchPatch, MatchWithTeams
from match_admin.schemas.matches import Match, MatchStatus
from match_admin.schemas.teams import Team
from match_admin.services.exceptions import (
    MatchNotFoundError,
    RemoteFetchError,
    RemoteUpdateError,
)

logger = logging.getLogger(__name__)

HomeTeam = aliased(Team, name="home_team")
AwayTeam = aliased(Team, name="away_team")


def _joined_matches_query():
    return (
        select(Match, HomeTeam, AwayTeam)  # type: ignore[call-overload]
        .join(HomeTeam, Match.home_team_id == HomeTeam.id)  # type: ignore[arg-type]
        .join(AwayTeam, Match.away_team_id == AwayTeam.id)  # type: ignore[arg-type]
        # Always hydrate from the row just read, never from the identity map
        .execution_options(populate_existing=True)
    )


class MatchStore:
    """Remote-backed access to matches joined with their teams."""

    def __init__(
        self,
        session: AsyncSession,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._session = session
        self._log = log or logger

    async def list_matches(self) -> list[MatchWithTeams]:
        """Return every match ordered by date, then kick-off time.

        Raises:
            RemoteFetchError: If the database read fails
        """
        query = _joined_matches_query().order_by(
            Match.match_date.asc(),  # type: ignore[attr-defined]
            Match.match_time.asc(),  # type: ignore[attr-defined]
        )
        try:
            result = await self._session.execute(query)
            rows = result.all()
        except SQLAlchemyError as exc:
            self._log.exception("Failed to list matches")
            raise RemoteFetchError("Could not load matches") from exc

        self._log.debug(f"Loaded {len(rows)} matches")
        return [MatchWithTeams.from_row(*row) for row in rows]

    async def get_match(self, match_id: uuid.UUID) -> MatchWithTeams:
        """Return one match with both teams.

        Raises:
            MatchNotFoundError: If no match has this id
            RemoteFetchError: If the database read fails
        """
        query = _joined_matches_query().where(
            Match.id == match_id  # type: ignore[arg-type]
        )
        try:
            result = await self._session.execute(query)
            row = result.one_or_none()
        except SQLAlchemyError as exc:
            self._log.exception(f"Failed to load match {match_id}")
            raise RemoteFetchError(f"Could not load match {match_id}") from exc

        if row is None:
            raise MatchNotFoundError(match_id)
        return MatchWithTeams.from_row(*row)

    async def update_match(
        self,
        match_id: uuid.UUID,
        patch: MatchPatch | Mapping[str, Any],
    ) -> MatchWithTeams:
        """Apply a score/status patch and return the re-read joined record.

        The write response is not trusted: after committing, the match is
        read again with its teams so the caller sees the stored state.

        Args:
            match_id: Primary key of the match
            patch: A ``MatchPatch`` or raw operator input (blank scores become null)

        Returns:
            The authoritative MatchWithTeams after the update

        Raises:
            ValidationError: If the patch is malformed (nothing is written)
            RemoteUpdateError: If the write fails (rolled back)
            RemoteFetchError: If the post-write read fails
        """
        parsed = MatchPatch.parse(patch)
        values = {
            "home_score": parsed.home_score,
            "away_score": parsed.away_score,
            "status": parsed.status,
            "updated_at": datetime.now(UTC).replace(tzinfo=None),
        }
        self._log.debug(f"Updating match {match_id} with {parsed.model_dump(mode='json')}")

        try:
            result = await self._session.execute(
                update(Match)
                .where(Match.id == match_id)  # type: ignore[arg-type]
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            await self._session.commit()
        except SQLAlchemyError as exc:
            self._log.exception(f"Failed to update match {match_id}")
            await self._session.rollback()
            raise RemoteUpdateError(f"Could not update match {match_id}") from exc

        if result.rowcount == 0:
            raise MatchNotFoundError(match_id)

        updated = await self.get_match(match_id)
        self._log.info(
            f"Updated match {match_id}: {updated.home_score}-{updated.away_score} "
            f"({updated.status.value})"
        )
        return updated


def group_matches_by_date(
    matches: Iterable[MatchWithTeams],
    show_finished: bool = False,
) -> list[MatchDateGroup]:
    """Group an ordered match list by calendar date.

    Input order is kept within and across groups. Finished matches are left
    out unless ``show_finished`` is set.
    """
    groups: dict[Any, list[MatchWithTeams]] = {}
    for match in matches:
        if not show_finished and match.status == MatchStatus.FINISHED:
            continue
        groups.setdefault(match.match_date, []).append(match)
    return [
        MatchDateGroup(match_date=match_date, matches=day_matches)
        for match_date, day_matches in groups.items()
    ]
