"""Tests for the recommendations endpoint."""

from unittest.mock import AsyncMock

from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from slp.database import get_session
from tests.conftest import make_lesson, make_scenario


class TestRecommendations:
    async def test_requires_token(self, client: AsyncClient):
        response = await client.get("/recommendations")
        assert response.status_code == 401

    async def test_bad_token_is_403(self, client: AsyncClient):
        response = await client.get("/recommendations", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 403

    async def test_cold_start(self, authed_client: AsyncClient, db_session: AsyncSession):
        easy = await make_lesson(db_session, "Easy", 1)
        await make_lesson(db_session, "Hard", 5)
        scenario = await make_scenario(db_session, "Intro", 0)

        response = await authed_client.get("/recommendations")

        assert response.status_code == 200
        data = response.json()
        assert data["userLevel"] == 0
        assert [item["id"] for item in data["recommendedLessons"]] == [easy.id]
        assert [item["id"] for item in data["recommendedScenarios"]] == [scenario.id]
        assert len(data["recommendedScenarios"][0]["choices"]) == 2

    async def test_completed_lesson_drops_out(self, authed_client: AsyncClient, db_session: AsyncSession):
        first = await make_lesson(db_session, "First", 1)
        second = await make_lesson(db_session, "Second", 1)
        await authed_client.post(f"/lessons/{first.id}/complete")

        response = await authed_client.get("/recommendations")

        assert [item["id"] for item in response.json()["recommendedLessons"]] == [second.id]

    async def test_quiz_scores_raise_level(self, authed_client: AsyncClient, db_session: AsyncSession):
        hard = await make_lesson(db_session, "Hard", 9)
        await authed_client.post("/quiz-scores", json={"score": 50})

        response = await authed_client.get("/recommendations")

        data = response.json()
        assert data["userLevel"] == 20
        assert [item["id"] for item in data["recommendedLessons"]] == [hard.id]

    async def test_storage_failure_is_generic_500(self, app: FastAPI, authed_client: AsyncClient):
        broken = AsyncMock(spec=AsyncSession)
        broken.execute.side_effect = OperationalError("SELECT", {}, Exception("password=hunter2"))

        async def broken_session():
            yield broken

        app.dependency_overrides[get_session] = broken_session
        try:
            response = await authed_client.get("/recommendations")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"detail": "Database error"}
        assert "hunter2" not in response.text
