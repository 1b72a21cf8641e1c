from __future__ import annotations

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.domains.articles.ranking import Provider
from tests.utils.article_builders import BASE_TIME, create_article


async def _seed(session: AsyncSession) -> None:
    await create_article(session, title="Qeveria aprovon buxhetin", source="telegrafi", created_at=BASE_TIME)
    await create_article(
        session,
        title="Qeveria miraton buxhetin",
        source="insajderi",
        created_at=BASE_TIME + timedelta(minutes=15),
    )
    await create_article(
        session,
        title="Bora e madhe bllokon rrugët në veri",
        source="Gazeta Express",
        created_at=BASE_TIME + timedelta(minutes=20),
    )


@pytest.mark.asyncio
async def test_all_articles_endpoint_collapses_duplicates(
    async_client: AsyncClient,
    async_session: AsyncSession,
) -> None:
    await _seed(async_session)

    response = await async_client.get("/api/v1/all-articles")

    assert response.status_code == 200
    body = response.json()
    assert body["total_fetched"] == 3
    assert body["total_after_filtering"] == 2
    assert body["similarity_threshold"] == 0.85
    assert body["providers_included"] == ["gazeta-express", "telegrafi"]
    assert {"title", "url", "publication_source", "created_at"} <= set(body["data"][0])


@pytest.mark.asyncio
async def test_all_articles_endpoint_can_disable_filtering(
    async_client: AsyncClient,
    async_session: AsyncSession,
) -> None:
    await _seed(async_session)

    response = await async_client.get("/api/v1/all-articles", params={"similarity_threshold": "none"})

    body = response.json()
    assert body["filtering_applied"] is False
    assert "similarity_threshold" not in body
    assert body["total_after_filtering"] == 3


@pytest.mark.asyncio
async def test_provider_filter_accepts_display_names(
    async_client: AsyncClient,
    async_session: AsyncSession,
) -> None:
    await _seed(async_session)

    response = await async_client.get("/api/v1/all-articles", params={"providers": "Gazeta Express"})

    body = response.json()
    assert body["providers"] == ["gazeta-express"]
    assert [item["publication_source"] for item in body["data"]] == ["gazeta-express"]


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["abc", "0.2", "1.5"])
async def test_invalid_threshold_returns_400(async_client: AsyncClient, value: str) -> None:
    response = await async_client.get("/api/v1/all-articles", params={"similarity_threshold": value})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid similarity_threshold parameter"
    assert value in body["details"]
    assert body["valid_values"]


@pytest.mark.asyncio
async def test_daily_articles_endpoint_defaults_to_exact_mode(
    async_client: AsyncClient,
    async_session: AsyncSession,
) -> None:
    await _seed(async_session)

    response = await async_client.get("/api/v1/daily-articles")

    assert response.status_code == 200
    body = response.json()
    assert body["mode"] == "exact"
    assert body["total_after_filtering"] == 2
    assert body["target"] == 10


@pytest.mark.asyncio
async def test_daily_articles_rejects_unknown_mode(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/v1/daily-articles", params={"mode": "weekly"})

    assert response.status_code == 400
    assert response.json()["valid_values"] == "exact, today, per_provider"


@pytest.mark.asyncio
async def test_daily_articles_rejects_invalid_threshold(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/v1/daily-articles", params={"similarity_threshold": "x"})

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["0", "ten"])
async def test_daily_articles_rejects_invalid_limit(async_client: AsyncClient, value: str) -> None:
    response = await async_client.get("/api/v1/daily-articles", params={"mode": "today", "limit": value})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid limit parameter"
    assert "details" in response.json()


@pytest.mark.asyncio
async def test_article_stats_endpoint(async_client: AsyncClient, async_session: AsyncSession) -> None:
    await _seed(async_session)

    response = await async_client.get("/api/v1/articles/stats")

    assert response.status_code == 200
    body = response.json()
    assert body["total_count"] == 3
    assert body["source_counts"][Provider.GAZETA_EXPRESS.value] == 1


@pytest.mark.asyncio
async def test_get_article_by_id(async_client: AsyncClient, async_session: AsyncSession) -> None:
    article = await create_article(async_session, title="Lajm i vetëm")

    found = await async_client.get(f"/api/v1/articles/{article.id}")
    missing = await async_client.get("/api/v1/articles/not-a-uuid")

    assert found.status_code == 200
    assert found.json()["title"] == "Lajm i vetëm"
    assert missing.status_code == 404
    assert missing.json()["error"] == "Not found"


@pytest.mark.asyncio
async def test_health_endpoint(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
