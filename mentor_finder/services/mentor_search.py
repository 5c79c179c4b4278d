from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from typing import Any, Literal

from mentor_finder.config import Settings, get_settings
from mentor_finder.contracts.mentor_search import MentorFilter
from mentor_finder.providers import apollo, rapidapi_bulk, rapidapi_fresh, scrapingbee, serpapi
from mentor_finder.providers.common import ProviderAdapterResult
from mentor_finder.services.aggregator import ProviderAdapter, aggregate, demo_fallback

ERROR_PROVIDER_LABEL = "Demo Data (API Error)"
ERROR_MESSAGE = "APIs temporarily unavailable"

FREE_TIER_QUOTAS = {
    "serpapi": "100/month",
    "scrapingbee": "1000/month",
    "rapidapi": "50/month",
    "apollo": "5/month",
}

_QUOTA_KEYS = (
    ("serpapi_key", "SerpApi", "serpapi", ("serpapi",)),
    ("scrapingbee_key", "ScrapingBee", "scrapingbee", ("scrapingbee",)),
    ("rapidapi_key", "RapidAPI", "rapidapi", ("rapidapi_bulk", "rapidapi_fresh")),
    ("apollo_api_key", "Apollo", "apollo", ("apollo",)),
)


@dataclass(frozen=True)
class SearchEndpoint:
    """One public search route: which adapters it fans out to and how it answers."""

    operation_id: str
    adapter_names: tuple[str, ...]
    max_results: int
    live_label: str
    demo_label: str
    results_key: str
    quota_style: Literal["table", "configured"]
    serpapi_scrapes_profiles: bool = False


SEARCH_MENTORS = SearchEndpoint(
    operation_id="mentor.search",
    adapter_names=("serpapi", "scrapingbee", "rapidapi_bulk", "apollo"),
    max_results=20,
    live_label="Multiple APIs",
    demo_label="Enhanced Demo Data",
    results_key="mentors",
    quota_style="table",
)

FETCH_LINKEDIN_PROFILES = SearchEndpoint(
    operation_id="linkedin_profiles.fetch",
    adapter_names=("serpapi", "scrapingbee", "rapidapi_bulk", "rapidapi_fresh"),
    max_results=25,
    live_label="Direct LinkedIn APIs",
    demo_label="Enhanced Demo LinkedIn Profiles",
    results_key="profiles",
    quota_style="configured",
    serpapi_scrapes_profiles=True,
)


def build_adapters(endpoint: SearchEndpoint, settings: Settings) -> list[ProviderAdapter]:
    http_timeout = settings.provider_http_timeout_seconds
    available = {
        "serpapi": partial(
            _serpapi_search,
            api_key=settings.serpapi_key,
            num=settings.serpapi_result_count,
            scrape_profiles=endpoint.serpapi_scrapes_profiles,
            scraping_api_key=settings.scrapingbee_key,
            timeout=http_timeout,
        ),
        "scrapingbee": partial(_scrapingbee_search, api_key=settings.scrapingbee_key, timeout=http_timeout),
        "rapidapi_bulk": partial(
            _rapidapi_bulk_search,
            api_key=settings.rapidapi_key,
            count=endpoint.max_results,
            timeout=http_timeout,
        ),
        "rapidapi_fresh": partial(_rapidapi_fresh_search, api_key=settings.rapidapi_key, timeout=http_timeout),
        "apollo": partial(
            _apollo_search,
            api_key=settings.apollo_api_key,
            per_page=endpoint.max_results,
            timeout=http_timeout,
        ),
    }
    return [ProviderAdapter(name=name, search=available[name]) for name in endpoint.adapter_names]


async def _serpapi_search(mentor_filter: MentorFilter, **kwargs: Any) -> ProviderAdapterResult:
    return await serpapi.search_people(mentor_filter=mentor_filter, **kwargs)


async def _scrapingbee_search(mentor_filter: MentorFilter, **kwargs: Any) -> ProviderAdapterResult:
    return await scrapingbee.search_people(mentor_filter=mentor_filter, **kwargs)


async def _rapidapi_bulk_search(mentor_filter: MentorFilter, **kwargs: Any) -> ProviderAdapterResult:
    return await rapidapi_bulk.search_people(mentor_filter=mentor_filter, **kwargs)


async def _rapidapi_fresh_search(mentor_filter: MentorFilter, **kwargs: Any) -> ProviderAdapterResult:
    return await rapidapi_fresh.search_people(mentor_filter=mentor_filter, **kwargs)


async def _apollo_search(mentor_filter: MentorFilter, **kwargs: Any) -> ProviderAdapterResult:
    return await apollo.search_people(mentor_filter=mentor_filter, **kwargs)


def quota_summary(endpoint: SearchEndpoint, settings: Settings) -> dict[str, Any]:
    if endpoint.quota_style == "table":
        return {"quota": dict(FREE_TIER_QUOTAS)}
    configured = [
        f"{label}: {FREE_TIER_QUOTAS[quota_key]}"
        for setting_name, label, quota_key, adapter_names in _QUOTA_KEYS
        if getattr(settings, setting_name) and set(adapter_names) & set(endpoint.adapter_names)
    ]
    return {"quotaInfo": configured}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


async def execute_search(
    *,
    endpoint: SearchEndpoint,
    mentor_filter: MentorFilter,
) -> dict[str, Any]:
    settings = get_settings()
    result = await aggregate(
        mentor_filter,
        build_adapters(endpoint, settings),
        max_results=endpoint.max_results,
        live_label=endpoint.live_label,
        demo_label=endpoint.demo_label,
        timeout=settings.provider_timeout_seconds,
    )
    return {
        endpoint.results_key: [profile.to_wire() for profile in result.profiles],
        "provider": result.provider,
        "total": result.total_count,
        **quota_summary(endpoint, settings),
        "timestamp": _timestamp(),
    }


def error_fallback_payload(*, endpoint: SearchEndpoint, mentor_filter: MentorFilter) -> dict[str, Any]:
    profiles = demo_fallback(mentor_filter)[: endpoint.max_results]
    return {
        endpoint.results_key: [profile.to_wire() for profile in profiles],
        "provider": ERROR_PROVIDER_LABEL,
        "total": len(profiles),
        "error": ERROR_MESSAGE,
        "timestamp": _timestamp(),
    }
