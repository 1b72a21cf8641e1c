"""
Bounded memo for normalised titles.
"""

from __future__ import annotations

from collections import OrderedDict

from .similarity import normalize_title


class TitleNormalizer:
    """LRU cache of ``normalize_title`` keyed by the literal title string.

    Instances are owned by the caller: create one per selection pass, or keep
    one for a longer-lived worker. Entries never depend on anything but the key.
    """

    def __init__(self, max_size: int = 2048) -> None:
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._entries: "OrderedDict[str, str]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __call__(self, title: str) -> str:
        cached = self._entries.get(title)
        if cached is not None:
            self._entries.move_to_end(title)
            self.hits += 1
            return cached
        self.misses += 1
        normalized = normalize_title(title)
        self._entries[title] = normalized
        if len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
        return normalized

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
