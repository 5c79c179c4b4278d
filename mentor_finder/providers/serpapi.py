from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from mentor_finder.contracts.mentor_search import MentorFilter, Profile
from mentor_finder.providers import scrapingbee
from mentor_finder.providers.common import (
    ProviderAdapterResult,
    as_list,
    as_str,
    completed,
    failed,
    now_ms,
    parse_json_or_raw,
    skipped,
)
from mentor_finder.providers.linkedin_html import (
    MAX_EXTRACTED_PROFILES,
    extract_linkedin_id,
    name_from_title,
    skills_from_text,
)

logger = logging.getLogger(__name__)

_PROVIDER = "serpapi"
_ENDPOINT = "https://serpapi.com/search.json"


def build_query(mentor_filter: MentorFilter) -> str:
    query = "site:linkedin.com/in"
    for value in (
        mentor_filter.role,
        mentor_filter.industry,
        mentor_filter.company,
        mentor_filter.country,
        mentor_filter.college,
    ):
        if value:
            query += f' "{value}"'
    return query


def _map_organic_result(result: dict[str, Any], mentor_filter: MentorFilter) -> Profile | None:
    link = as_str(result.get("link"))
    name = name_from_title(result.get("title"))
    if not link or not name:
        return None
    snippet = as_str(result.get("snippet")) or ""
    return Profile(
        id=extract_linkedin_id(link),
        name=name,
        headline=snippet,
        location=mentor_filter.country or "",
        industry=mentor_filter.industry or "",
        skills=skills_from_text(snippet),
        linkedin_url=link,
        source="SerpApi",
    )


async def _scrape_organic_results(
    results: list[dict[str, Any]],
    *,
    scraping_api_key: str | None,
    timeout: float,
) -> list[Profile]:
    candidates = [
        result
        for result in results
        if "linkedin.com/in/" in (as_str(result.get("link")) or "")
    ][:MAX_EXTRACTED_PROFILES]
    scraped = await asyncio.gather(
        *(
            scrapingbee.scrape_profile(
                api_key=scraping_api_key,
                profile_url=result["link"],
                fallback_name=name_from_title(result.get("title")),
                timeout=timeout,
            )
            for result in candidates
        ),
        return_exceptions=True,
    )
    profiles: list[Profile] = []
    for item in scraped:
        if isinstance(item, Profile) and item.name:
            profiles.append(item.model_copy(update={"source": "SerpApi + Scraping"}))
        elif isinstance(item, BaseException):
            logger.warning("Profile scrape raised", extra={"provider": _PROVIDER, "error": repr(item)})
    return profiles


async def search_people(
    *,
    api_key: str | None,
    mentor_filter: MentorFilter,
    num: int = 20,
    scrape_profiles: bool = False,
    scraping_api_key: str | None = None,
    timeout: float = 30.0,
) -> ProviderAdapterResult:
    """Find LinkedIn profile URLs through Google results.

    With `scrape_profiles` each `/in/` hit is fetched through the scraping
    proxy and parsed as a full profile page; otherwise the search snippets
    are mapped directly.
    """
    if not api_key:
        return skipped(_PROVIDER, "google_search")

    params = {
        "q": build_query(mentor_filter),
        "api_key": api_key,
        "engine": "google",
        "num": num,
        "start": 0,
    }
    start_ms = now_ms()
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(_ENDPOINT, params=params)
            body = parse_json_or_raw(response.text, response.json)
    except httpx.TimeoutException:
        logger.warning("SerpApi request timed out", extra={"provider": _PROVIDER})
        return failed(_PROVIDER, "google_search", start_ms, error="timeout")
    except httpx.HTTPError as exc:
        logger.warning("SerpApi request failed", extra={"provider": _PROVIDER, "error": exc.__class__.__name__})
        return failed(_PROVIDER, "google_search", start_ms, error=f"http_error:{exc.__class__.__name__}")

    if response.status_code >= 400 or body.get("error"):
        logger.warning(
            "SerpApi returned an error",
            extra={"provider": _PROVIDER, "http_status": response.status_code, "error": body.get("error")},
        )
        return failed(_PROVIDER, "google_search", start_ms, http_status=response.status_code, raw_response=body)

    if "raw" in body:
        logger.warning("Response body was not JSON", extra={"provider": _PROVIDER, "http_status": response.status_code})
        return failed(_PROVIDER, "google_search", start_ms, http_status=response.status_code, error="invalid_json")

    results = [item for item in as_list(body.get("organic_results")) if isinstance(item, dict)]
    if not results:
        return completed(_PROVIDER, "google_search", start_ms, [], http_status=response.status_code)

    if scrape_profiles:
        mapped = await _scrape_organic_results(results, scraping_api_key=scraping_api_key, timeout=timeout)
        return completed(_PROVIDER, "google_search_scrape", start_ms, mapped, http_status=response.status_code)

    mapped = [profile for profile in (_map_organic_result(item, mentor_filter) for item in results) if profile]
    return completed(_PROVIDER, "google_search", start_ms, mapped, http_status=response.status_code)
