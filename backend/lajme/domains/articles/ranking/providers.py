"""
Provider catalogue and ranking.

Every provider identifier entering the system is canonicalised here, once, so
that display names ("Gazeta Express"), slugs ("gazeta-express") and legacy
spellings collapse to a single :class:`Provider` value before ranking.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Union


class Provider(str, enum.Enum):
    """Known news providers, in ranking order."""

    TELEGRAFI = "telegrafi"
    INSAJDERI = "insajderi"
    INDEKSONLINE = "indeksonline"
    GAZETA_EXPRESS = "gazeta-express"
    BOTASOT = "botasot"
    GAZETA_BLIC = "gazeta-blic"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def ordered(cls) -> List["Provider"]:
        return sorted(cls, key=lambda p: DEFAULT_PRIORITIES[p], reverse=True)


_DISPLAY_NAMES: Dict[Provider, str] = {
    Provider.TELEGRAFI: "Telegrafi",
    Provider.INSAJDERI: "Insajderi",
    Provider.INDEKSONLINE: "IndeksOnline",
    Provider.GAZETA_EXPRESS: "Gazeta Express",
    Provider.BOTASOT: "BotaSot",
    Provider.GAZETA_BLIC: "Gazeta Blic",
}

DEFAULT_PRIORITIES: Dict[Provider, int] = {
    Provider.TELEGRAFI: 6,
    Provider.INSAJDERI: 5,
    Provider.INDEKSONLINE: 4,
    Provider.GAZETA_EXPRESS: 3,
    Provider.BOTASOT: 2,
    Provider.GAZETA_BLIC: 1,
}

# Spellings seen in stored rows and client requests, already lowercased.
_ALIASES: Dict[str, Provider] = {
    "telegrafi": Provider.TELEGRAFI,
    "telegrafi.com": Provider.TELEGRAFI,
    "insajderi": Provider.INSAJDERI,
    "insajderi.org": Provider.INSAJDERI,
    "indeksonline": Provider.INDEKSONLINE,
    "indeks-online": Provider.INDEKSONLINE,
    "indeksonline.net": Provider.INDEKSONLINE,
    "gazeta-express": Provider.GAZETA_EXPRESS,
    "gazetaexpress": Provider.GAZETA_EXPRESS,
    "gazetaexpress.com": Provider.GAZETA_EXPRESS,
    "express": Provider.GAZETA_EXPRESS,
    "botasot": Provider.BOTASOT,
    "bota-sot": Provider.BOTASOT,
    "botasot.info": Provider.BOTASOT,
    "gazeta-blic": Provider.GAZETA_BLIC,
    "gazetablic": Provider.GAZETA_BLIC,
    "gazetablic.com": Provider.GAZETA_BLIC,
    "blic": Provider.GAZETA_BLIC,
}

ProviderKey = Union[Provider, str]


def _alias_key(value: str) -> str:
    key = value.strip().lower()
    for separator in (" ", "_"):
        key = key.replace(separator, "-")
    while "--" in key:
        key = key.replace("--", "-")
    return key


def canonicalize_provider(value: Optional[str]) -> Optional[ProviderKey]:
    """Map any known spelling to its :class:`Provider`.

    Unknown identifiers are returned stripped but otherwise verbatim so that
    they can still be stored, filtered and ranked with the default priority.
    """
    if value is None:
        return None
    if isinstance(value, Provider):
        return value
    stripped = value.strip()
    if not stripped:
        return None
    return _ALIASES.get(_alias_key(stripped), stripped)


def provider_slug(value: Optional[str]) -> Optional[str]:
    """Canonical string form, suitable for storage and JSON output."""
    canonical = canonicalize_provider(value)
    if isinstance(canonical, Provider):
        return canonical.value
    return canonical


def stored_spellings(provider: ProviderKey) -> List[str]:
    """Lowercased spellings under which ``provider`` may appear in storage."""
    canonical = canonicalize_provider(provider)
    if not isinstance(canonical, Provider):
        return [str(canonical).lower()] if canonical else []
    spellings = {canonical.value, canonical.display_name.lower()}
    spellings.update(alias for alias, target in _ALIASES.items() if target is canonical)
    return sorted(spellings)


@dataclass(frozen=True)
class ProviderRanking:
    """Priority lookup used by the deduplication and selection stages.

    Higher values win. ``default_priority`` applies to identifiers that do not
    canonicalise to a known :class:`Provider`.
    """

    priorities: Mapping[Provider, int] = field(default_factory=lambda: dict(DEFAULT_PRIORITIES))
    default_priority: int = 0

    def priority(self, provider: Optional[str]) -> int:
        canonical = canonicalize_provider(provider)
        if isinstance(canonical, Provider):
            return self.priorities.get(canonical, self.default_priority)
        return self.default_priority

    def order(self, providers: Iterable[str]) -> List[str]:
        """Sort provider identifiers by priority desc, then name for stability."""
        return sorted(set(providers), key=lambda p: (-self.priority(p), provider_slug(p) or ""))

    def top_provider(self, providers: Iterable[str]) -> Optional[str]:
        ordered = self.order(providers)
        return ordered[0] if ordered else None


DEFAULT_RANKING = ProviderRanking()
