from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from lajme.domains.articles.scrapers import registry as registry_module
from lajme.domains.articles.scrapers.interfaces import ScrapedArticle
from lajme.utils.datetime_utils import utc_now_naive
from tests.utils.article_builders import create_article


class FakeSiteScraper:
    def __init__(self, profile, *args, **kwargs):
        self.provider = profile.provider.value

    async def scrape(self, *, skip_urls: Optional[set[str]] = None) -> List[ScrapedArticle]:
        return [
            ScrapedArticle(
                title=f"Lajm nga {self.provider}",
                url=f"https://{self.provider}.example/lajm",
                image_url=None,
                publication_date="Sot",
                publication_source=self.provider,
            )
        ]

    async def close(self) -> None:
        return None


@pytest.fixture
def fake_scrapers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(registry_module, "SiteScraper", FakeSiteScraper)


@pytest.mark.asyncio
async def test_crawl_single_provider(async_client: AsyncClient, fake_scrapers: None) -> None:
    response = await async_client.post("/api/v1/crawl/Telegrafi")

    assert response.status_code == 200
    body = response.json()
    assert body["total_saved"] == 1
    assert body["providers"][0]["provider"] == "telegrafi"
    assert body["failed_providers"] == []


@pytest.mark.asyncio
async def test_crawl_all_providers(async_client: AsyncClient, fake_scrapers: None) -> None:
    response = await async_client.post("/api/v1/crawl")

    assert response.status_code == 200
    assert response.json()["total_saved"] == 6


@pytest.mark.asyncio
async def test_crawl_selected_providers(async_client: AsyncClient, fake_scrapers: None) -> None:
    response = await async_client.post("/api/v1/crawl", json={"providers": ["botasot", "Gazeta Blic"]})

    body = response.json()
    assert [result["provider"] for result in body["providers"]] == ["botasot", "gazeta-blic"]


@pytest.mark.asyncio
async def test_cleanup_endpoint(async_client: AsyncClient, async_session: AsyncSession) -> None:
    now = utc_now_naive()
    await create_article(async_session, created_at=now)
    await create_article(async_session, created_at=now - timedelta(days=30))

    response = await async_client.post("/api/v1/cleanup-old-articles", params={"days_old": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["deleted_count"] == 1


@pytest.mark.asyncio
async def test_cleanup_endpoint_rejects_invalid_limit(async_client: AsyncClient) -> None:
    response = await async_client.post("/api/v1/cleanup-old-articles", params={"max_articles": 0})

    assert response.status_code == 400
