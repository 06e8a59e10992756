"""Unit tests for the admin match routes.

The MatchStore and inference service are replaced through FastAPI
dependency overrides, so no database or Gemini call is made.
"""

from __future__ import annotations

import uuid
from datetime import date, time
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from match_admin.main import app
from match_admin.models.matches import InferredResult, MatchPatch, MatchWithTeams
from match_admin.routes.admin.helpers import get_match_store, get_result_inference_service
from match_admin.schemas.matches import MatchStatus
from match_admin.services.exceptions import (
    ConfigurationError,
    MatchNotFoundError,
    RemoteFetchError,
    RemoteUpdateError,
)


class _FakeStore:
    def __init__(self, matches: list[MatchWithTeams]) -> None:
        self.matches = {m.id: m for m in matches}
        self.fail_with: Optional[Exception] = None

    async def list_matches(self) -> list[MatchWithTeams]:
        if self.fail_with:
            raise self.fail_with
        return list(self.matches.values())

    async def get_match(self, match_id: uuid.UUID) -> MatchWithTeams:
        if match_id not in self.matches:
            raise MatchNotFoundError(match_id)
        return self.matches[match_id]

    async def update_match(self, match_id: uuid.UUID, patch: Any) -> MatchWithTeams:
        parsed = MatchPatch.parse(patch)
        if self.fail_with:
            raise self.fail_with
        if match_id not in self.matches:
            raise MatchNotFoundError(match_id)
        updated = self.matches[match_id].model_copy(update=parsed.model_dump())
        self.matches[match_id] = updated
        return updated


class _FakeInference:
    def __init__(self) -> None:
        self.result: Optional[InferredResult] = None
        self.error: Optional[Exception] = None

    async def infer(self, description: str) -> Optional[InferredResult]:
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def stored(make_match) -> list[MatchWithTeams]:
    return [
        make_match(match_date=date(2025, 6, 15), match_time=time(13, 0)),
        make_match(
            match_date=date(2025, 6, 15),
            match_time=time(16, 0),
            status=MatchStatus.FINISHED,
            home_score=1,
            away_score=0,
        ),
        make_match(match_date=date(2025, 6, 16), match_time=time(19, 0)),
    ]


@pytest.fixture
def fake_store(stored: list[MatchWithTeams]) -> _FakeStore:
    return _FakeStore(stored)


@pytest.fixture
def fake_inference() -> _FakeInference:
    return _FakeInference()


@pytest_asyncio.fixture
async def client(
    fake_store: _FakeStore, fake_inference: _FakeInference
) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_match_store] = lambda: fake_store
    app.dependency_overrides[get_result_inference_service] = lambda: fake_inference
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_match_store, None)
        app.dependency_overrides.pop(get_result_inference_service, None)


@pytest.mark.asyncio
class TestListRoutes:
    async def test_list_matches(self, client: AsyncClient, stored) -> None:
        response = await client.get("/admin/matches")
        assert response.status_code == 200
        body = response.json()
        assert [m["id"] for m in body] == [str(m.id) for m in stored]
        assert body[0]["home_team"]["name"] == "Palmeiras"

    async def test_list_failure_is_reported(
        self, client: AsyncClient, fake_store: _FakeStore
    ) -> None:
        fake_store.fail_with = RemoteFetchError("Could not load matches")
        response = await client.get("/admin/matches")
        assert response.status_code == 502
        assert response.json()["detail"] == "Could not load matches"

    async def test_by_date_hides_finished(self, client: AsyncClient) -> None:
        response = await client.get("/admin/matches/by-date")
        assert response.status_code == 200
        groups = response.json()
        assert [g["match_date"] for g in groups] == ["2025-06-15", "2025-06-16"]
        assert len(groups[0]["matches"]) == 1

    async def test_by_date_show_finished(self, client: AsyncClient) -> None:
        response = await client.get("/admin/matches/by-date", params={"show_finished": "true"})
        groups = response.json()
        assert len(groups[0]["matches"]) == 2

    async def test_get_unknown_match(self, client: AsyncClient) -> None:
        response = await client.get(f"/admin/matches/{uuid.uuid4()}")
        assert response.status_code == 404


@pytest.mark.asyncio
class TestUpdateRoute:
    async def test_patch_normalizes_form_values(self, client: AsyncClient, stored) -> None:
        target = stored[0]
        response = await client.patch(
            f"/admin/matches/{target.id}",
            json={"home_score": "", "away_score": "3", "status": "live"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["home_score"] is None
        assert body["away_score"] == 3
        assert body["status"] == "live"

    async def test_patch_invalid_status(self, client: AsyncClient, stored) -> None:
        response = await client.patch(
            f"/admin/matches/{stored[0].id}",
            json={"home_score": 1, "away_score": 1, "status": "paused"},
        )
        assert response.status_code == 422
        assert "status" in response.json()["detail"]

    async def test_patch_write_failure(
        self, client: AsyncClient, fake_store: _FakeStore, stored
    ) -> None:
        target = stored[0]
        fake_store.fail_with = RemoteUpdateError(f"Could not update match {target.id}")
        response = await client.patch(
            f"/admin/matches/{target.id}",
            json={"home_score": 2, "away_score": 0, "status": "finished"},
        )
        assert response.status_code == 502
        assert fake_store.matches[target.id] == target


@pytest.mark.asyncio
class TestInferenceRoutes:
    async def test_suggest_returns_suggestion(
        self, client: AsyncClient, fake_inference: _FakeInference, stored
    ) -> None:
        fake_inference.result = InferredResult(
            home_score=2, away_score=1, status=MatchStatus.FINISHED
        )
        response = await client.post(f"/admin/matches/{stored[0].id}/suggest")
        assert response.status_code == 200
        assert response.json() == {
            "suggestion": {"home_score": 2, "away_score": 1, "status": "finished"}
        }

    async def test_suggest_without_result(self, client: AsyncClient, stored) -> None:
        response = await client.post(f"/admin/matches/{stored[0].id}/suggest")
        assert response.status_code == 200
        assert response.json() == {"suggestion": None}

    async def test_missing_api_key_is_reported(
        self, client: AsyncClient, fake_inference: _FakeInference, stored
    ) -> None:
        fake_inference.error = ConfigurationError("GEMINI_API_KEY is not configured")
        response = await client.post(f"/admin/matches/{stored[0].id}/auto-update")
        assert response.status_code == 503
        assert "GEMINI_API_KEY" in response.json()["detail"]

    async def test_auto_update_applies(
        self, client: AsyncClient, fake_inference: _FakeInference, fake_store: _FakeStore, stored
    ) -> None:
        target = stored[2]
        fake_inference.result = InferredResult(
            home_score=0, away_score=0, status=MatchStatus.LIVE
        )
        response = await client.post(f"/admin/matches/{target.id}/auto-update")
        assert response.status_code == 200
        body = response.json()
        assert body["applied"] is True
        assert body["match"]["status"] == "live"
        assert fake_store.matches[target.id].home_score == 0

    async def test_auto_update_without_result(
        self, client: AsyncClient, fake_store: _FakeStore, stored
    ) -> None:
        target = stored[0]
        response = await client.post(f"/admin/matches/{target.id}/auto-update")
        assert response.status_code == 200
        body = response.json()
        assert body["applied"] is False
        assert body["suggestion"] is None
        assert fake_store.matches[target.id] == target


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}
