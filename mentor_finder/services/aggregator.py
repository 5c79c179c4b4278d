from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from mentor_finder.contracts.mentor_search import MentorFilter, Profile
from mentor_finder.providers.common import ProviderAdapterResult, failed, now_ms
from mentor_finder.services.demo_catalog import demo_profiles

logger = logging.getLogger(__name__)

AdapterSearch = Callable[[MentorFilter], Awaitable[ProviderAdapterResult]]


@dataclass(frozen=True)
class ProviderAdapter:
    name: str
    search: AdapterSearch


@dataclass
class AggregateResult:
    profiles: list[Profile]
    provider: str
    total_count: int
    used_demo_data: bool = False
    attempts: list[dict[str, Any]] = field(default_factory=list)


def dedupe_profiles(profiles: list[Profile]) -> list[Profile]:
    seen: set[tuple[str, str]] = set()
    deduped: list[Profile] = []
    for profile in profiles:
        key = profile.dedupe_key()
        if key in seen:
            continue
        seen.add(key)
        deduped.append(profile)
    return deduped


def demo_fallback(mentor_filter: MentorFilter) -> list[Profile]:
    """Demo profiles matching the filter, or the whole catalog when none match."""
    return demo_profiles(mentor_filter) or demo_profiles()


async def _run_adapter(
    adapter: ProviderAdapter,
    mentor_filter: MentorFilter,
    timeout: float | None,
) -> ProviderAdapterResult:
    start_ms = now_ms()
    try:
        return await asyncio.wait_for(adapter.search(mentor_filter), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Provider adapter timed out", extra={"provider": adapter.name, "timeout_seconds": timeout})
        return failed(adapter.name, "search", start_ms, error="timeout")
    except Exception as exc:  # noqa: BLE001
        logger.exception("Provider adapter raised", extra={"provider": adapter.name})
        return failed(adapter.name, "search", start_ms, error=f"exception:{exc.__class__.__name__}")


async def aggregate(
    mentor_filter: MentorFilter,
    adapters: list[ProviderAdapter],
    *,
    max_results: int,
    live_label: str,
    demo_label: str,
    timeout: float | None = None,
) -> AggregateResult:
    """Fan the filter out to every adapter and merge what comes back.

    All adapters are awaited; results are merged in adapter order, deduplicated
    on (lower-cased name, profile URL), and replaced by demo data when nothing
    survives. The returned list never exceeds `max_results`.
    """
    results = await asyncio.gather(*(_run_adapter(adapter, mentor_filter, timeout) for adapter in adapters))

    attempts: list[dict[str, Any]] = []
    merged: list[Profile] = []
    for result in results:
        attempts.append(result["attempt"])
        if result["mapped"]:
            merged.extend(result["mapped"])

    profiles = dedupe_profiles(merged)
    if profiles:
        sources = {profile.source for profile in profiles}
        provider = sources.pop() if len(sources) == 1 else live_label
        used_demo_data = False
    else:
        profiles = demo_fallback(mentor_filter)
        provider = demo_label
        used_demo_data = True

    profiles = profiles[:max_results]
    logger.info(
        "Aggregated mentor search",
        extra={
            "provider": provider,
            "result_count": len(profiles),
            "merged_count": len(merged),
            "attempt_statuses": {attempt.get("provider"): attempt.get("status") for attempt in attempts},
        },
    )
    return AggregateResult(
        profiles=profiles,
        provider=provider,
        total_count=len(profiles),
        used_demo_data=used_demo_data,
        attempts=attempts,
    )
