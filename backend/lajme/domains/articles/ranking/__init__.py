"""
Duplicate detection and provider-priority selection for article lists.
"""

from .cache import TitleNormalizer
from .dedup import dedupe, is_well_formed, select_better
from .providers import (
    DEFAULT_RANKING,
    Provider,
    ProviderRanking,
    canonicalize_provider,
    provider_slug,
    stored_spellings,
)
from .selection import diversify, select, select_exact, sort_by_priority, take_per_provider
from .similarity import DEFAULT_THRESHOLD, normalize_title, similar, title_similarity, validate_threshold
from .types import AllForWindow, CandidateArticle, ExactCount, PerProvider, SelectionMode

__all__ = [
    "AllForWindow",
    "CandidateArticle",
    "DEFAULT_RANKING",
    "DEFAULT_THRESHOLD",
    "ExactCount",
    "PerProvider",
    "Provider",
    "ProviderRanking",
    "SelectionMode",
    "TitleNormalizer",
    "canonicalize_provider",
    "dedupe",
    "diversify",
    "is_well_formed",
    "normalize_title",
    "provider_slug",
    "select",
    "select_better",
    "select_exact",
    "similar",
    "sort_by_priority",
    "stored_spellings",
    "take_per_provider",
    "title_similarity",
    "validate_threshold",
]
