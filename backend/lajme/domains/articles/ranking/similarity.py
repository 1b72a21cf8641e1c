"""
Lexical title similarity.

Titles are compared after lowercasing and trimming only. The metric is
Jaro-Winkler, which rewards shared prefixes; pairs whose lengths differ by more
than half of their mean length are rejected before the metric is computed.
"""

from __future__ import annotations

from typing import Optional

from rapidfuzz.distance import JaroWinkler

from lajme.core.exceptions import InvalidThresholdError

DEFAULT_THRESHOLD = 0.85
LENGTH_RATIO_CUTOFF = 0.5


def normalize_title(title: Optional[str]) -> str:
    if not title:
        return ""
    return title.strip().lower()


def is_obviously_different(a: str, b: str) -> bool:
    """Length pre-filter over already normalised titles."""
    average = (len(a) + len(b)) / 2
    return abs(len(a) - len(b)) > LENGTH_RATIO_CUTOFF * average


def title_similarity(a: str, b: str) -> float:
    """Jaro-Winkler similarity in [0, 1] of two normalised titles."""
    return JaroWinkler.similarity(a, b)


def normalized_similar(a: str, b: str, threshold: float) -> bool:
    if is_obviously_different(a, b):
        return False
    return title_similarity(a, b) >= threshold


def similar(a: str, b: str, threshold: float = DEFAULT_THRESHOLD) -> bool:
    """Return True when the two raw titles describe the same story."""
    validate_threshold(threshold)
    return normalized_similar(normalize_title(a), normalize_title(b), threshold)


def validate_threshold(threshold: float) -> float:
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise InvalidThresholdError(
            f"Similarity threshold must be a number, got {threshold!r}",
            valid_values="0.0 to 1.0",
        )
    if not 0.0 <= threshold <= 1.0:
        raise InvalidThresholdError(
            f"Similarity threshold {threshold} is outside [0, 1]",
            valid_values="0.0 to 1.0",
        )
    return float(threshold)
