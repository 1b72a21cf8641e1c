"""
Simple registry for resolving scraper providers.
"""

from __future__ import annotations

from typing import Callable, Dict, List

from lajme.core.exceptions import NotFoundError

from ..ranking.providers import Provider, canonicalize_provider
from .interfaces import ScraperProvider
from .sites import SITE_PROFILES, SiteScraper

ProviderFactory = Callable[[], ScraperProvider]


class ScraperRegistry:
    """Resolve scraper providers by canonical provider."""

    def __init__(self) -> None:
        self._factories: Dict[str, ProviderFactory] = {}
        self._register_builtin_providers()

    def _register_builtin_providers(self) -> None:
        for provider, profile in SITE_PROFILES.items():
            self.register_provider(provider, lambda profile=profile: SiteScraper(profile))

    def register_provider(self, provider: str, factory: ProviderFactory) -> None:
        """
        Register (or replace) the factory used for ``provider``.
        """
        self._factories[self._key(provider)] = factory

    @staticmethod
    def _key(provider: str) -> str:
        canonical = canonicalize_provider(provider)
        if isinstance(canonical, Provider):
            return canonical.value
        return str(canonical or "")

    def providers(self) -> List[str]:
        return list(self._factories)

    def has_provider(self, provider: str) -> bool:
        return self._key(provider) in self._factories

    def get_provider(self, provider: str) -> ScraperProvider:
        factory = self._factories.get(self._key(provider))
        if factory is None:
            raise NotFoundError(f"No scraper registered for provider '{provider}'")
        return factory()
