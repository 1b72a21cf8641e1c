from __future__ import annotations

import pytest

from lajme.domains.articles.ranking import TitleNormalizer


def test_repeated_titles_hit_the_cache() -> None:
    normalizer = TitleNormalizer(max_size=4)

    assert normalizer(" Lajm ") == "lajm"
    assert normalizer(" Lajm ") == "lajm"

    assert normalizer.misses == 1
    assert normalizer.hits == 1


def test_cache_evicts_least_recently_used_entry() -> None:
    normalizer = TitleNormalizer(max_size=2)
    normalizer("A")
    normalizer("B")
    normalizer("A")
    normalizer("C")

    assert len(normalizer) == 2
    normalizer("A")
    assert normalizer.hits == 2
    normalizer("B")
    assert normalizer.misses == 4


def test_clear_resets_entries_and_counters() -> None:
    normalizer = TitleNormalizer()
    normalizer("A")
    normalizer.clear()

    assert len(normalizer) == 0
    assert normalizer.hits == normalizer.misses == 0


def test_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        TitleNormalizer(max_size=0)
