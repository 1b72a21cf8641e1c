"""
Selection and distribution policies built on top of ``dedupe``.
"""

from __future__ import annotations

import time
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

from loguru import logger

from .cache import TitleNormalizer
from .dedup import dedupe, is_well_formed
from .providers import DEFAULT_RANKING, ProviderRanking, provider_slug
from .similarity import DEFAULT_THRESHOLD, normalized_similar, validate_threshold
from .types import AllForWindow, ExactCount, PerProvider, Rankable, SelectionMode

T = TypeVar("T", bound=Rankable)

SLOW_PASS_SECONDS = 0.25


def _source(item: Rankable) -> str:
    return provider_slug(item.publication_source) or ""


def sort_by_recency(items: Sequence[T]) -> List[T]:
    """Newest first; equal timestamps ordered by URL."""
    ordered = sorted(items, key=lambda item: item.url or "")
    ordered.sort(key=lambda item: item.created_at, reverse=True)
    return ordered


def sort_by_priority(items: Sequence[T], ranking: ProviderRanking = DEFAULT_RANKING) -> List[T]:
    """Stable sort by provider priority desc, then ``created_at`` desc."""
    ordered = sorted(items, key=lambda item: item.created_at, reverse=True)
    ordered.sort(key=lambda item: ranking.priority(item.publication_source), reverse=True)
    return ordered


def diversify(items: Sequence[T], max_consecutive: int = 2) -> List[T]:
    """Reorder so no provider runs longer than ``max_consecutive`` while others remain.

    When the tail of the output already holds ``max_consecutive`` items from
    one provider, the earliest remaining item from a different provider is
    pulled forward. The result is a permutation of the input.
    """
    if max_consecutive < 1:
        raise ValueError("max_consecutive must be positive")

    remaining = list(items)
    result: List[T] = []
    while remaining:
        pick = 0
        if len(result) >= max_consecutive:
            tail = {_source(item) for item in result[-max_consecutive:]}
            if len(tail) == 1:
                blocked = next(iter(tail))
                pick = next(
                    (i for i, item in enumerate(remaining) if _source(item) != blocked),
                    0,
                )
        result.append(remaining.pop(pick))
    return result


def take_per_provider(items: Sequence[T], count: int) -> List[T]:
    taken: Dict[str, int] = defaultdict(int)
    result: List[T] = []
    for item in items:
        source = _source(item)
        if taken[source] >= count:
            continue
        taken[source] += 1
        result.append(item)
    return result


class _ExactCountPicker:
    """Three-phase quota fill for :class:`ExactCount`."""

    def __init__(
        self,
        items: Sequence[Rankable],
        mode: ExactCount,
        threshold: Optional[float],
        ranking: ProviderRanking,
        normalize: Callable[[str], str],
    ) -> None:
        self.mode = mode
        self.threshold = threshold
        self.ranking = ranking

        pool = [item for item in items if is_well_formed(item)]
        self.entries: List[Tuple[Rankable, str]] = [
            (item, normalize(item.title)) for item in sort_by_recency(pool)
        ]
        self.groups: Dict[str, List[int]] = defaultdict(list)
        for index, (item, _title) in enumerate(self.entries):
            self.groups[_source(item)].append(index)
        self.order = ranking.order(self.groups.keys())

        self.used: set[int] = set()
        self.selected: List[Rankable] = []
        self.selected_titles: List[str] = []
        self.counts: Dict[str, int] = defaultdict(int)

    @property
    def full(self) -> bool:
        return len(self.selected) >= self.mode.count

    def _collides(self, title: str, threshold: Optional[float]) -> bool:
        if threshold is None:
            return False
        return any(normalized_similar(title, chosen, threshold) for chosen in self.selected_titles)

    def _take(self, index: int) -> None:
        item, title = self.entries[index]
        self.used.add(index)
        self.selected.append(item)
        self.selected_titles.append(title)
        self.counts[_source(item)] += 1

    def _first_free(self, provider: str) -> Optional[int]:
        for index in self.groups[provider]:
            if index in self.used:
                continue
            if self._collides(self.entries[index][1], self.threshold):
                continue
            return index
        return None

    def _cap(self, provider: str) -> int:
        if self.order and provider == self.order[0]:
            return self.mode.top_provider_cap
        return self.mode.provider_cap

    def one_per_provider(self) -> None:
        for provider in self.order:
            if self.full:
                return
            index = self._first_free(provider)
            if index is not None:
                self._take(index)

    def fill_to_caps(self) -> None:
        added = True
        while added and not self.full:
            added = False
            for provider in self.order:
                if self.full:
                    return
                if self.counts[provider] >= self._cap(provider):
                    continue
                index = self._first_free(provider)
                if index is not None:
                    self._take(index)
                    added = True

    def fill_by_recency(self) -> None:
        for index, (_item, title) in enumerate(self.entries):
            if self.full:
                return
            if index in self.used:
                continue
            threshold = self.threshold
            remaining = self.mode.count - len(self.selected)
            if threshold is not None and remaining <= self.mode.relaxed_slots:
                threshold = max(threshold, self.mode.relaxed_threshold)
            if not self._collides(title, threshold):
                self._take(index)

    def fill_unfiltered(self) -> None:
        for index in range(len(self.entries)):
            if self.full:
                return
            if index not in self.used:
                self._take(index)

    def pick(self) -> List[Rankable]:
        if self.mode.count <= 0 or not self.entries:
            return []
        self.one_per_provider()
        self.fill_to_caps()
        self.fill_by_recency()
        if self.mode.fill_unfiltered:
            self.fill_unfiltered()
        return self.selected


def select_exact(
    items: Sequence[T],
    mode: ExactCount,
    threshold: Optional[float] = DEFAULT_THRESHOLD,
    *,
    ranking: Optional[ProviderRanking] = None,
    normalizer: Optional[Callable[[str], str]] = None,
) -> List[T]:
    """Pick ``mode.count`` items balanced across providers.

    Phase 1 gives every provider one slot in priority order. Phase 2 tops up
    round-robin until each provider reaches its cap (the highest ranked
    provider has a larger one). Phase 3 takes the newest unused items from any
    provider, loosening the threshold for the last ``mode.relaxed_slots``.
    Candidates that collide with an already selected title are skipped
    throughout. ``threshold=None`` skips all collision checks.

    The fill is greedy and priority first, so the result is best effort. A
    pool whose distinct stories could fill ``mode.count`` may still come up
    short when an early pick collides with several later candidates.
    """
    ranking = ranking or DEFAULT_RANKING
    normalize = normalizer if normalizer is not None else TitleNormalizer()
    picker = _ExactCountPicker(items, mode, threshold, ranking, normalize)
    return picker.pick()  # type: ignore[return-value]


def select(
    items: Sequence[T],
    mode: SelectionMode,
    threshold: Optional[float] = DEFAULT_THRESHOLD,
    *,
    ranking: Optional[ProviderRanking] = None,
    normalizer: Optional[Callable[[str], str]] = None,
) -> List[T]:
    """Run one selection pass over ``items``.

    ``threshold=None`` disables duplicate filtering entirely; any other value
    must lie in [0, 1].
    """
    if threshold is not None:
        threshold = validate_threshold(threshold)
    ranking = ranking or DEFAULT_RANKING
    normalize = normalizer if normalizer is not None else TitleNormalizer()
    started = time.perf_counter()

    if isinstance(mode, ExactCount):
        picked = select_exact(items, mode, threshold, ranking=ranking, normalizer=normalize)
        result = diversify(sort_by_priority(picked, ranking))
    else:
        if threshold is None:
            pool = [item for item in items if is_well_formed(item)]
        else:
            pool = dedupe(items, threshold, ranking=ranking, normalizer=normalize)
        ranked = sort_by_priority(pool, ranking)

        if isinstance(mode, PerProvider):
            result = take_per_provider(ranked, mode.count)
        elif isinstance(mode, AllForWindow):
            result = diversify(ranked)
            if mode.limit is not None:
                result = result[: mode.limit]
        else:
            raise TypeError(f"Unsupported selection mode: {mode!r}")

    elapsed = time.perf_counter() - started
    logger.debug(
        f"Selection {type(mode).__name__}: {len(items)} in, {len(result)} out "
        f"in {elapsed * 1000:.1f} ms (threshold={threshold})"
    )
    if elapsed > SLOW_PASS_SECONDS:
        logger.warning(f"Slow selection pass: {elapsed:.2f}s for {len(items)} candidates")
    return result
