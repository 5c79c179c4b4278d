from __future__ import annotations

import asyncio

import pytest

from mentor_finder.contracts.mentor_search import MentorFilter, Profile
from mentor_finder.providers.common import completed, failed, now_ms, skipped
from mentor_finder.services import aggregator
from mentor_finder.services.aggregator import ProviderAdapter, aggregate, dedupe_profiles


def _profile(idx: int, *, source: str = "Test", name: str | None = None, url: str | None = None) -> Profile:
    return Profile(
        id=f"p-{idx}",
        name=name or f"Person {idx}",
        linkedin_url=url or f"https://linkedin.com/in/p-{idx}",
        source=source,
    )


def _adapter(name: str, profiles: list[Profile]) -> ProviderAdapter:
    async def _search(mentor_filter: MentorFilter):  # noqa: ARG001
        return completed(name, "search", now_ms(), profiles)

    return ProviderAdapter(name=name, search=_search)


def _failing_adapter(name: str) -> ProviderAdapter:
    async def _search(mentor_filter: MentorFilter):  # noqa: ARG001
        return failed(name, "search", now_ms(), http_status=500)

    return ProviderAdapter(name=name, search=_search)


def _labels() -> dict:
    return {"max_results": 20, "live_label": "Multiple APIs", "demo_label": "Enhanced Demo Data"}


def test_dedupe_profiles_uses_case_insensitive_name_and_url():
    first = _profile(1, name="Jane Doe", url="https://linkedin.com/in/jane")
    same = _profile(2, name="JANE DOE", url="https://linkedin.com/in/jane")
    other_url = _profile(3, name="Jane Doe", url="https://linkedin.com/in/jane-2")

    assert dedupe_profiles([first, same, other_url]) == [first, other_url]


@pytest.mark.asyncio
async def test_merges_in_adapter_order_and_labels_multiple_sources():
    adapters = [
        _adapter("a", [_profile(1, source="A"), _profile(2, source="A")]),
        _adapter("b", [_profile(3, source="B")]),
    ]

    result = await aggregate(MentorFilter(role="Engineer"), adapters, **_labels())

    assert [profile.id for profile in result.profiles] == ["p-1", "p-2", "p-3"]
    assert result.provider == "Multiple APIs"
    assert result.total_count == 3
    assert result.used_demo_data is False
    assert [attempt["provider"] for attempt in result.attempts] == ["a", "b"]


@pytest.mark.asyncio
async def test_single_surviving_source_becomes_provider_label():
    adapters = [_adapter("a", [_profile(1, source="Apollo")]), _failing_adapter("b")]

    result = await aggregate(MentorFilter(role="Engineer"), adapters, **_labels())

    assert result.provider == "Apollo"


@pytest.mark.asyncio
async def test_overlapping_providers_yield_one_copy():
    shared = _profile(1, source="A")
    adapters = [
        _adapter("a", [shared]),
        _adapter("b", [shared.model_copy(update={"source": "B", "id": "other-id"})]),
    ]

    result = await aggregate(MentorFilter(role="Engineer"), adapters, **_labels())

    assert len(result.profiles) == 1
    assert result.profiles[0].source == "A"


@pytest.mark.asyncio
async def test_results_are_capped():
    adapters = [_adapter("a", [_profile(idx) for idx in range(15)]), _adapter("b", [_profile(idx) for idx in range(15, 30)])]

    result = await aggregate(MentorFilter(role="Engineer"), adapters, **_labels())

    assert len(result.profiles) == 20
    assert result.total_count == 20
    assert result.profiles[-1].id == "p-19"


@pytest.mark.asyncio
async def test_all_failures_fall_back_to_filtered_demo_data():
    adapters = [_failing_adapter("a"), _failing_adapter("b")]

    result = await aggregate(MentorFilter(role="Product Manager"), adapters, **_labels())

    assert result.used_demo_data is True
    assert result.provider == "Enhanced Demo Data"
    assert [profile.id for profile in result.profiles] == ["sarah-chen-pm"]


@pytest.mark.asyncio
async def test_unmatched_filter_falls_back_to_whole_catalog():
    adapters = [_adapter("a", [])]

    result = await aggregate(MentorFilter(industry="Underwater Basket Weaving"), adapters, **_labels())

    assert result.used_demo_data is True
    assert len(result.profiles) == 9


@pytest.mark.asyncio
async def test_skipped_adapters_fall_back_to_demo_data():
    async def _search(mentor_filter: MentorFilter):  # noqa: ARG001
        return skipped("a", "search")

    result = await aggregate(MentorFilter(industry="Finance"), [ProviderAdapter("a", _search)], **_labels())

    assert result.provider == "Enhanced Demo Data"
    assert [profile.id for profile in result.profiles] == ["david-patel-finance"]


@pytest.mark.asyncio
async def test_slow_adapter_times_out_without_blocking_others():
    async def _slow(mentor_filter: MentorFilter):  # noqa: ARG001
        await asyncio.sleep(5)
        raise AssertionError("should have been cancelled")

    adapters = [ProviderAdapter("slow", _slow), _adapter("fast", [_profile(1, source="Fast")])]

    result = await aggregate(MentorFilter(role="Engineer"), adapters, timeout=0.05, **_labels())

    assert [profile.id for profile in result.profiles] == ["p-1"]
    assert result.attempts[0]["status"] == "failed"
    assert result.attempts[0]["error"] == "timeout"


@pytest.mark.asyncio
async def test_raising_adapter_is_isolated():
    async def _boom(mentor_filter: MentorFilter):  # noqa: ARG001
        raise RuntimeError("boom")

    adapters = [ProviderAdapter("boom", _boom), _adapter("ok", [_profile(1, source="Ok")])]

    result = await aggregate(MentorFilter(role="Engineer"), adapters, **_labels())

    assert result.provider == "Ok"
    assert result.attempts[0]["error"] == "exception:RuntimeError"


def test_demo_fallback_never_empty():
    assert aggregator.demo_fallback(MentorFilter(country="Atlantis"))


@pytest.mark.asyncio
async def test_same_filter_and_adapters_give_same_output():
    adapters = [
        _adapter("a", [_profile(1, source="A"), _profile(2, source="A")]),
        _adapter("b", [_profile(2, source="B"), _profile(3, source="B")]),
        _failing_adapter("c"),
    ]
    mentor_filter = MentorFilter(role="Engineer", country="US")

    first = await aggregate(mentor_filter, adapters, **_labels())
    second = await aggregate(mentor_filter, adapters, **_labels())

    assert first.profiles == second.profiles
    assert first.provider == second.provider
    assert first.total_count == second.total_count


@pytest.mark.asyncio
async def test_demo_fallback_is_repeatable():
    first = await aggregate(MentorFilter(industry="Technology"), [_failing_adapter("a")], **_labels())
    second = await aggregate(MentorFilter(industry="Technology"), [_failing_adapter("a")], **_labels())

    assert [profile.id for profile in first.profiles] == [profile.id for profile in second.profiles]
