"""
Declarative listing-page scrapers for the supported news sites.

Each site is described by a :class:`SiteProfile`: where its listing lives,
which elements hold article teasers (with fallbacks for layout changes), and
where the link, title, image and date sit inside a teaser. ``SiteScraper``
turns a profile into :class:`ScrapedArticle` items using httpx and
BeautifulSoup.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup, Tag
from loguru import logger

from lajme.core.config import settings

from ..ranking.providers import Provider
from .interfaces import ScrapedArticle, ScraperProvider


@dataclass(frozen=True)
class SiteProfile:
    """Selectors for one site.

    ``item_selectors`` are tried in order and the first one that matches is
    used, unless ``merge_item_selectors`` is set, in which case the matches of
    all of them are concatenated. Title, image and date selectors accept a
    ``css@attribute`` form; an empty css part targets the link itself.
    """

    provider: Provider
    listing_url: str
    base_url: str
    item_selectors: Tuple[str, ...]
    title_selectors: Tuple[str, ...]
    link_selector: Optional[str] = "a"
    image_selectors: Tuple[str, ...] = ("img@src",)
    date_selectors: Tuple[str, ...] = ()
    default_date: str = "Sot"
    merge_item_selectors: bool = False
    skip_classes: Tuple[str, ...] = ()
    skip_selectors: Tuple[str, ...] = ()
    same_domain: Optional[str] = None


SITE_PROFILES: Dict[Provider, SiteProfile] = {
    Provider.TELEGRAFI: SiteProfile(
        provider=Provider.TELEGRAFI,
        listing_url="https://telegrafi.com/",
        base_url="https://telegrafi.com",
        item_selectors=(".swiper.swiperTopNews .item-wrapper",),
        link_selector="a.post__large.hero-item__list",
        title_selectors=(".titleArticle", "img@alt"),
        date_selectors=(".category-name",),
        default_date="Recent",
        skip_classes=("mobileAgent",),
        skip_selectors=(".futureADS-article",),
    ),
    Provider.INSAJDERI: SiteProfile(
        provider=Provider.INSAJDERI,
        listing_url="https://insajderi.org/category/lajme/",
        base_url="https://insajderi.org",
        item_selectors=(
            "div.hulumtime div.hu1 div.hulumtime1",
            "div.hulumtime div.hu2 div.hulumtime2",
        ),
        merge_item_selectors=True,
        link_selector="div.titulli a",
        title_selectors=("div.titulli a",),
        image_selectors=("div.foto a img@src",),
    ),
    Provider.INDEKSONLINE: SiteProfile(
        provider=Provider.INDEKSONLINE,
        listing_url="https://indeksonline.net/",
        base_url="https://indeksonline.net",
        item_selectors=(".flexslider.mainSlide .slides li a",),
        link_selector=None,
        title_selectors=("@title", "h2"),
        same_domain="indeksonline.net",
    ),
    Provider.GAZETA_EXPRESS: SiteProfile(
        provider=Provider.GAZETA_EXPRESS,
        listing_url="https://www.gazetaexpress.com/",
        base_url="https://www.gazetaexpress.com",
        item_selectors=(".owl-item.active", ".owl-item", "a.topstories__item"),
        link_selector="a.topstories__item",
        title_selectors=("h3.box__title-background.box__title-border",),
        image_selectors=("figure img@src",),
    ),
    Provider.BOTASOT: SiteProfile(
        provider=Provider.BOTASOT,
        listing_url="https://www.botasot.info/",
        base_url="https://www.botasot.info",
        item_selectors=(".big-article.artikulli-kryesor a", ".right-view .small-article a"),
        merge_item_selectors=True,
        link_selector=None,
        title_selectors=(".title-part h1", ".title-part h2"),
        image_selectors=("img@src", "img@data-src"),
    ),
    Provider.GAZETA_BLIC: SiteProfile(
        provider=Provider.GAZETA_BLIC,
        listing_url="https://gazetablic.com/",
        base_url="https://gazetablic.com",
        item_selectors=(
            ".zgjedhjet_slider li.zgjedhet_slide.pdk_tag.blic_featured",
            ".zgjedhjet_slider li.zgjedhet_slide",
            ".zgjedhjet_slider li",
        ),
        title_selectors=(".article_box_content h1", "h1"),
        image_selectors=(".thumb-holder img@src", "img@src"),
        date_selectors=(".article_box_content .date-time.date-human", ".date-time.date-human"),
    ),
}


def _select_value(scope: Tag, selector: str) -> Optional[str]:
    css, _, attribute = selector.partition("@")
    element = scope if not css else scope.select_one(css)
    if element is None:
        return None
    if attribute:
        value = element.get(attribute)
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip() if value else None
    text = element.get_text(" ", strip=True)
    return text or None


def _first_value(scope: Tag, selectors: Tuple[str, ...]) -> Optional[str]:
    for selector in selectors:
        value = _select_value(scope, selector)
        if value:
            return value
    return None


class SiteScraper(ScraperProvider):
    """Scrape one site's listing page according to its profile."""

    def __init__(
        self,
        profile: SiteProfile,
        client: Optional[httpx.AsyncClient] = None,
        *,
        max_retries: Optional[int] = None,
        retry_backoff: Optional[float] = None,
    ) -> None:
        self.profile = profile
        self.provider = profile.provider.value
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(float(settings.SCRAPER_TIMEOUT)),
            headers={
                "User-Agent": settings.SCRAPER_USER_AGENT,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "sq,en-US;q=0.9,en;q=0.8",
            },
            follow_redirects=True,
        )
        self._max_retries = settings.SCRAPER_MAX_RETRIES if max_retries is None else max_retries
        self._retry_backoff = settings.SCRAPER_RETRY_BACKOFF if retry_backoff is None else retry_backoff

    async def fetch_listing(self) -> str:
        url = self.profile.listing_url
        attempt = 0
        while True:
            try:
                response = await self._client.get(url)
                response.raise_for_status()
                return response.text
            except httpx.HTTPError as exc:
                if attempt >= self._max_retries:
                    logger.error(f"{self.provider}: giving up on {url} after {attempt + 1} attempts: {exc}")
                    raise
                attempt += 1
                logger.warning(f"{self.provider}: fetch failed for {url}, retrying ({attempt}/{self._max_retries}): {exc}")
                await asyncio.sleep(self._retry_backoff * attempt)

    def _items(self, soup: BeautifulSoup) -> List[Tag]:
        items: List[Tag] = []
        for selector in self.profile.item_selectors:
            matched = soup.select(selector)
            if not matched:
                continue
            items.extend(matched)
            if not self.profile.merge_item_selectors:
                break
        return items

    def _skipped(self, item: Tag) -> bool:
        classes = item.get("class") or []
        if any(name in classes for name in self.profile.skip_classes):
            return True
        return any(item.select_one(selector) is not None for selector in self.profile.skip_selectors)

    def _link(self, item: Tag) -> Optional[Tag]:
        if self.profile.link_selector is None or item.name == "a":
            return item if item.name == "a" else item.find("a")
        return item.select_one(self.profile.link_selector) or item.find("a")

    def _absolute(self, url: str) -> str:
        return urljoin(self.profile.base_url + "/", url)

    def _extract(self, item: Tag) -> Optional[ScrapedArticle]:
        if self._skipped(item):
            return None
        link = self._link(item)
        if link is None:
            return None
        href = (link.get("href") or "").strip()
        title = _first_value(link, self.profile.title_selectors) or _first_value(item, self.profile.title_selectors)
        if not href or not title:
            return None

        url = self._absolute(href)
        if self.profile.same_domain and self.profile.same_domain not in (urlparse(url).netloc or ""):
            return None

        image = _first_value(link, self.profile.image_selectors) or _first_value(item, self.profile.image_selectors)
        published = _first_value(item, self.profile.date_selectors) if self.profile.date_selectors else None
        return ScrapedArticle(
            title=title,
            url=url,
            image_url=self._absolute(image) if image else None,
            publication_date=published or self.profile.default_date,
            publication_source=self.provider,
        )

    def parse(self, html: str) -> List[ScrapedArticle]:
        soup = BeautifulSoup(html, "html.parser")
        articles: List[ScrapedArticle] = []
        seen: set[str] = set()
        for item in self._items(soup):
            article = self._extract(item)
            if article is None or article.url in seen:
                continue
            seen.add(article.url)
            articles.append(article)
        logger.debug(f"{self.provider}: parsed {len(articles)} articles")
        return articles

    async def scrape(self, *, skip_urls: Optional[set[str]] = None) -> List[ScrapedArticle]:
        html = await self.fetch_listing()
        articles = self.parse(html)
        if skip_urls:
            articles = [article for article in articles if article.url not in skip_urls]
        return articles

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
