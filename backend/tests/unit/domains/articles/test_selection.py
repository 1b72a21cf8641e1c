from __future__ import annotations

from collections import Counter
from typing import List, Sequence

import pytest

from lajme.core.exceptions import InvalidThresholdError
from lajme.domains.articles.ranking import (
    AllForWindow,
    ExactCount,
    PerProvider,
    Provider,
    TitleNormalizer,
    diversify,
    select,
    sort_by_priority,
)
from tests.utils.article_builders import candidate

HEADLINES = {
    Provider.TELEGRAFI: "Qeveria aprovon buxhetin për vitin e ardhshëm",
    Provider.INSAJDERI: "Bora e madhe bllokon rrugët në veri",
    Provider.INDEKSONLINE: "Kosova fiton ndeshjen kundër Sllovenisë",
    Provider.GAZETA_EXPRESS: "Çmimet e karburanteve rriten sërish",
    Provider.BOTASOT: "Presidentja takon ambasadorin amerikan",
    Provider.GAZETA_BLIC: "Universiteti hap konkursin për bursa",
}


def _pool(per_provider: int) -> list:
    items = []
    minute = 0
    for provider in Provider:
        for n in range(per_provider):
            items.append(candidate(f"{provider.value} story {n}", provider.value, minute))
            minute += 1
    return items


def _sources(items: Sequence) -> List[str]:
    return [item.publication_source for item in items]


def _assert_diverse(items: Sequence, max_consecutive: int = 2) -> None:
    sources = _sources(items)
    for end in range(max_consecutive, len(sources)):
        window = sources[end - max_consecutive:end + 1]
        if len(set(window)) == 1:
            assert all(source == window[0] for source in sources[end:])


def test_exact_count_returns_every_provider_when_pool_is_small() -> None:
    items = [candidate(title, provider.value, i) for i, (provider, title) in enumerate(HEADLINES.items())]

    result = select(items, ExactCount(10), 0.85)

    assert len(result) == 6
    assert set(_sources(result)) == {p.value for p in Provider}


@pytest.mark.parametrize("pool_size", [6, 7, 8, 9])
def test_exact_count_is_best_effort_between_six_and_nine_items(pool_size: int) -> None:
    items = _pool(2)[:pool_size]

    result = select(items, ExactCount(10), None)

    assert len(result) == pool_size


def test_exact_count_balances_providers_within_caps() -> None:
    result = select(_pool(5), ExactCount(10), None)

    counts = Counter(_sources(result))
    assert len(result) == 10
    assert set(counts) == {p.value for p in Provider}
    assert counts[Provider.TELEGRAFI.value] <= 3
    assert all(count <= 2 for source, count in counts.items() if source != Provider.TELEGRAFI.value)


def test_exact_count_fills_remaining_slots_by_recency() -> None:
    items = [candidate(f"telegrafi story {n}", "telegrafi", n) for n in range(8)]
    items.append(candidate("insajderi story", "insajderi", 0))

    result = select(items, ExactCount(6), None)

    assert len(result) == 6
    telegrafi = [item for item in result if item.publication_source == "telegrafi"]
    assert [item.created_at.minute for item in telegrafi] == [7, 6, 5, 4, 3]


def test_exact_count_skips_duplicates_of_selected_titles() -> None:
    items = [
        candidate("Qeveria aprovon buxhetin", "telegrafi", 0),
        candidate("Qeveria aprovon buxhetin", "insajderi", 5),
        candidate("Bora e madhe bllokon rrugët në veri", "botasot", 10),
    ]

    result = select(items, ExactCount(10, relaxed_slots=0), 0.85)

    assert len(result) == 2
    assert "insajderi" not in _sources(result)


def test_last_slots_use_the_relaxed_threshold() -> None:
    items = [
        candidate("Qeveria aprovon buxhetin", "telegrafi", 0),
        candidate("Qeveria miraton buxhetin", "insajderi", 15),
    ]

    strict = select(items, ExactCount(2, relaxed_slots=0), 0.85)
    relaxed = select(items, ExactCount(2, relaxed_slots=2, relaxed_threshold=0.95), 0.85)

    assert len(strict) == 1
    assert len(relaxed) == 2


def test_unfiltered_fallback_tops_up_with_duplicates() -> None:
    items = [
        candidate("Qeveria aprovon buxhetin", "telegrafi", 0),
        candidate("Qeveria aprovon buxhetin", "insajderi", 5),
    ]

    assert len(select(items, ExactCount(2), 0.85)) == 1
    assert len(select(items, ExactCount(2, fill_unfiltered=True), 0.85)) == 2


def test_exact_count_output_is_diverse() -> None:
    _assert_diverse(select(_pool(5), ExactCount(10), None))


def test_all_for_window_never_runs_one_provider_while_others_remain() -> None:
    items = [candidate(f"telegrafi story {n}", "telegrafi", n) for n in range(6)]
    items += [candidate(f"insajderi story {n}", "insajderi", n) for n in range(2)]

    result = select(items, AllForWindow(), None)

    assert sorted(item.url for item in result) == sorted(item.url for item in items)
    _assert_diverse(result)
    assert _sources(result) == [
        "telegrafi", "telegrafi", "insajderi",
        "telegrafi", "telegrafi", "insajderi",
        "telegrafi", "telegrafi",
    ]


def test_all_for_window_collapses_duplicates_and_applies_limit() -> None:
    items = [
        candidate("Qeveria aprovon buxhetin", "insajderi", 0),
        candidate("Qeveria aprovon buxhetin", "telegrafi", 5),
        candidate("Bora e madhe bllokon rrugët në veri", "botasot", 10),
        candidate("Kosova fiton ndeshjen kundër Sllovenisë", "gazeta-blic", 20),
    ]

    result = select(items, AllForWindow(), 0.85)
    limited = select(items, AllForWindow(limit=2), 0.85)

    assert _sources(result) == ["telegrafi", "botasot", "gazeta-blic"]
    assert limited == result[:2]


def test_per_provider_caps_each_provider() -> None:
    result = select(_pool(4), PerProvider(2), None)

    counts = Counter(_sources(result))
    assert len(result) == 12
    assert set(counts.values()) == {2}
    assert result[0].publication_source == "telegrafi"


def test_disabled_threshold_keeps_duplicates() -> None:
    items = [
        candidate("Qeveria aprovon buxhetin", "telegrafi", 0),
        candidate("Qeveria aprovon buxhetin", "insajderi", 5),
    ]

    assert len(select(items, AllForWindow(), None)) == 2
    assert len(select(items, AllForWindow(), 0.85)) == 1


def test_sort_by_priority_then_recency() -> None:
    older = candidate("a", "telegrafi", 0)
    newer = candidate("b", "telegrafi", 10)
    low = candidate("c", "gazeta-blic", 20)

    assert sort_by_priority([low, older, newer]) == [newer, older, low]


def test_diversify_is_a_permutation() -> None:
    items = _pool(3)

    result = diversify(items)

    assert sorted(item.url for item in result) == sorted(item.url for item in items)


def test_select_rejects_invalid_threshold() -> None:
    with pytest.raises(InvalidThresholdError):
        select(_pool(1), AllForWindow(), -0.5)


def test_select_rejects_unknown_mode() -> None:
    with pytest.raises(TypeError):
        select(_pool(1), object(), 0.85)  # type: ignore[arg-type]


@pytest.mark.parametrize("mode", [AllForWindow(), ExactCount(4), PerProvider(1)])
def test_empty_caller_cache_is_filled_within_its_bound(mode) -> None:
    normalizer = TitleNormalizer(max_size=3)
    items = _pool(1)

    select(items, mode, 0.85, normalizer=normalizer)

    assert normalizer.misses == len(items)
    assert len(normalizer) == 3


def test_exact_count_never_pads_with_repeated_stories() -> None:
    stories = ["Qeveria aprovon buxhetin", "Bora bllokon rrugët", "Kosova fiton ndeshjen"]
    items = [
        candidate(title if n % 2 else title.upper(), provider.value, n * 10 + i)
        for i, title in enumerate(stories)
        for n, provider in enumerate(Provider)
    ]

    result = select(items, ExactCount(10), 0.85)

    assert len(result) == len(stories)
    assert {item.title.lower() for item in result} == {title.lower() for title in stories}
