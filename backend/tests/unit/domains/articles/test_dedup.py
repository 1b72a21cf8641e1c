from __future__ import annotations

from dataclasses import replace
from itertools import combinations

import pytest

from lajme.core.exceptions import InvalidThresholdError
from lajme.domains.articles.ranking import TitleNormalizer, dedupe, select_better, similar
from tests.utils.article_builders import candidate


STORIES = [
    candidate("Qeveria aprovon buxhetin", "telegrafi", 0),
    candidate("Qeveria miraton buxhetin", "insajderi", 15),
    candidate("Bora e madhe bllokon rrugët në veri", "botasot", 20),
    candidate("Bora e madhe bllokon rrugët në veri!", "gazeta-blic", 25),
    candidate("Kosova fiton ndeshjen kundër Sllovenisë", "gazeta-express", 30),
    candidate("Çmimet e karburanteve rriten sërish", "indeksonline", 35),
    candidate("Presidentja takon ambasadorin amerikan", "insajderi", 40),
]


def test_higher_priority_provider_survives_even_when_older() -> None:
    telegrafi = candidate("Qeveria aprovon buxhetin", "telegrafi", 0)
    insajderi = candidate("Qeveria miraton buxhetin", "insajderi", 15)

    result = dedupe([telegrafi, insajderi], 0.85)

    assert result == [telegrafi]


def test_higher_priority_replaces_earlier_lower_priority_in_place() -> None:
    blic = candidate("Bora e madhe bllokon rrugët në veri", "gazeta-blic", 0)
    other = candidate("Kosova fiton ndeshjen kundër Sllovenisë", "botasot", 5)
    telegrafi = candidate("Bora e madhe bllokon rrugët në veri", "telegrafi", 10)

    assert dedupe([blic, other, telegrafi]) == [telegrafi, other]


def test_equal_priority_prefers_newer_item() -> None:
    older = candidate("Kosova fiton ndeshjen kundër Sllovenisë", "telegrafi", 0)
    newer = candidate("Kosova fiton ndeshjen kundër Sllovenisë", "telegrafi", 30)

    assert dedupe([older, newer]) == [newer]
    assert dedupe([newer, older]) == [newer]


def test_full_tie_keeps_existing_item() -> None:
    first = candidate("Kosova fiton ndeshjen", "insajderi", 0)
    second = replace(first, url="https://insajderi.example/other")

    assert select_better(second, first) is first
    assert dedupe([first, second]) == [first]


def test_malformed_items_are_dropped() -> None:
    good = candidate("Çmimet e karburanteve rriten sërish", "telegrafi", 0)
    items = [
        replace(good, title=None, url="https://x.example/1"),
        replace(good, title="   ", url="https://x.example/2"),
        replace(good, publication_source=None, url="https://x.example/3"),
        replace(good, created_at=None, url="https://x.example/4"),
        good,
    ]

    assert dedupe(items) == [good]


def test_output_is_subset_in_input_order() -> None:
    result = dedupe(STORIES)

    positions = [STORIES.index(item) for item in result]
    assert positions == sorted(positions)


def test_output_holds_no_similar_pair() -> None:
    result = dedupe(STORIES, 0.85)

    for a, b in combinations(result, 2):
        assert not similar(a.title, b.title, 0.85)


def test_dedupe_is_idempotent() -> None:
    once = dedupe(STORIES)

    assert dedupe(once) == once


def test_higher_threshold_never_keeps_fewer_items() -> None:
    sizes = [len(dedupe(STORIES, threshold)) for threshold in (0.85, 0.9, 0.95, 1.0)]

    assert sizes == sorted(sizes)


def test_caller_owned_normalizer_is_used() -> None:
    normalizer = TitleNormalizer(max_size=16)

    dedupe(STORIES, normalizer=normalizer)

    assert normalizer.misses == len(STORIES)


def test_small_caller_cache_keeps_its_bound() -> None:
    normalizer = TitleNormalizer(max_size=2)

    dedupe(STORIES, normalizer=normalizer)

    assert normalizer.misses == len(STORIES)
    assert len(normalizer) == 2


def test_caller_cache_warms_across_passes() -> None:
    normalizer = TitleNormalizer(max_size=16)

    first = dedupe(STORIES, normalizer=normalizer)
    second = dedupe(STORIES, normalizer=normalizer)

    assert first == second
    assert normalizer.misses == len(STORIES)
    assert normalizer.hits == len(STORIES)


def test_invalid_threshold_raises() -> None:
    with pytest.raises(InvalidThresholdError):
        dedupe(STORIES, 1.5)


def test_empty_input_returns_empty_list() -> None:
    assert dedupe([]) == []
