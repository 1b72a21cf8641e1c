"""
Near-duplicate collapsing.

A single accumulating pass over the input keeps one representative per story.
When a new item collides with stories already accepted, the survivor is chosen
by provider priority first and ingestion recency second. Input-relative order
is preserved; ranking is a separate stage.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, TypeVar

from .cache import TitleNormalizer
from .providers import DEFAULT_RANKING, ProviderRanking
from .similarity import DEFAULT_THRESHOLD, normalized_similar, validate_threshold
from .types import Rankable

T = TypeVar("T", bound=Rankable)


def is_well_formed(item: Rankable) -> bool:
    return bool(
        getattr(item, "title", None)
        and getattr(item, "publication_source", None)
        and getattr(item, "created_at", None) is not None
    )


def select_better(current: T, existing: T, ranking: ProviderRanking = DEFAULT_RANKING) -> T:
    """Pick the survivor between two items describing the same story.

    Strictly higher provider priority wins. Only on equal priority does the
    later ``created_at`` win; a full tie keeps ``existing``.
    """
    current_priority = ranking.priority(current.publication_source)
    existing_priority = ranking.priority(existing.publication_source)
    if current_priority != existing_priority:
        return current if current_priority > existing_priority else existing
    if current.created_at > existing.created_at:
        return current
    return existing


def find_collisions(
    title: str,
    accepted_titles: Sequence[str],
    threshold: float,
) -> List[int]:
    return [
        index
        for index, accepted in enumerate(accepted_titles)
        if normalized_similar(title, accepted, threshold)
    ]


def dedupe(
    items: Sequence[T],
    threshold: float = DEFAULT_THRESHOLD,
    *,
    ranking: Optional[ProviderRanking] = None,
    normalizer: Optional[Callable[[str], str]] = None,
) -> List[T]:
    """Collapse near-duplicate titles to a single representative each.

    Malformed items (no title, provider or ``created_at``) are dropped. A new
    item is compared with every accepted title; if it outranks all of the
    stories it collides with, it takes the first colliding position and the
    other colliding entries are removed, otherwise it is discarded. The output
    therefore never holds two titles at or above ``threshold``.
    """
    threshold = validate_threshold(threshold)
    ranking = ranking or DEFAULT_RANKING
    normalize = normalizer if normalizer is not None else TitleNormalizer()

    kept: List[T] = []
    kept_titles: List[str] = []

    for item in items:
        if not is_well_formed(item):
            continue
        title = normalize(item.title)
        if not title:
            continue

        collisions = find_collisions(title, kept_titles, threshold)
        if not collisions:
            kept.append(item)
            kept_titles.append(title)
            continue

        survivor = item
        for index in collisions:
            survivor = select_better(survivor, kept[index], ranking)
        if survivor is not item:
            continue

        first = collisions[0]
        kept[first] = item
        kept_titles[first] = title
        for index in reversed(collisions[1:]):
            del kept[index]
            del kept_titles[index]

    return kept
