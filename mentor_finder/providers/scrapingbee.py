from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from mentor_finder.contracts.mentor_search import MentorFilter, Profile
from mentor_finder.providers.common import (
    ProviderAdapterResult,
    completed,
    failed,
    now_ms,
    skipped,
)
from mentor_finder.providers.linkedin_html import parse_profile_page, parse_search_results

logger = logging.getLogger(__name__)

_PROVIDER = "scrapingbee"
_ENDPOINT = "https://app.scrapingbee.com/api/v1/"
_SEARCH_URL = "https://www.linkedin.com/search/results/people/"
_PROXY_PARAMS = {
    "render_js": "true",
    "premium_proxy": "true",
    "country_code": "us",
}


def build_linkedin_search_url(mentor_filter: MentorFilter) -> str:
    keywords = " ".join(value for value in (mentor_filter.role, mentor_filter.industry) if value)
    url = f"{_SEARCH_URL}?keywords={quote(keywords)}"
    if mentor_filter.country:
        url += f'&geoUrn=["{quote(mentor_filter.country)}"]'
    return url


async def fetch_html(
    *,
    api_key: str,
    target_url: str,
    timeout: float,
) -> tuple[int, str]:
    params = {"api_key": api_key, "url": target_url, **_PROXY_PARAMS}
    async with httpx.AsyncClient(timeout=timeout) as client:
        response = await client.get(_ENDPOINT, params=params)
    return response.status_code, response.text


async def search_people(
    *,
    api_key: str | None,
    mentor_filter: MentorFilter,
    timeout: float = 30.0,
) -> ProviderAdapterResult:
    if not api_key:
        return skipped(_PROVIDER, "search_page")

    target_url = build_linkedin_search_url(mentor_filter)
    start_ms = now_ms()
    try:
        status_code, html = await fetch_html(api_key=api_key, target_url=target_url, timeout=timeout)
    except httpx.TimeoutException:
        logger.warning("ScrapingBee search page timed out", extra={"provider": _PROVIDER, "url": target_url})
        return failed(_PROVIDER, "search_page", start_ms, error="timeout")
    except httpx.HTTPError as exc:
        logger.warning(
            "ScrapingBee search page failed",
            extra={"provider": _PROVIDER, "error": exc.__class__.__name__},
        )
        return failed(_PROVIDER, "search_page", start_ms, error=f"http_error:{exc.__class__.__name__}")

    if status_code >= 400:
        logger.warning("ScrapingBee returned an error status", extra={"provider": _PROVIDER, "http_status": status_code})
        return failed(_PROVIDER, "search_page", start_ms, http_status=status_code)

    return completed(_PROVIDER, "search_page", start_ms, parse_search_results(html), http_status=status_code)


async def scrape_profile(
    *,
    api_key: str | None,
    profile_url: str,
    fallback_name: str = "",
    timeout: float = 30.0,
) -> Profile | None:
    """Fetch a single profile page through the proxy; `None` on any failure."""
    if not api_key:
        return None
    try:
        status_code, html = await fetch_html(api_key=api_key, target_url=profile_url, timeout=timeout)
    except httpx.HTTPError as exc:
        logger.warning(
            "ScrapingBee profile fetch failed",
            extra={"provider": _PROVIDER, "profile_url": profile_url, "error": exc.__class__.__name__},
        )
        return None
    if status_code >= 400:
        logger.warning(
            "ScrapingBee profile fetch returned an error status",
            extra={"provider": _PROVIDER, "profile_url": profile_url, "http_status": status_code},
        )
        return None
    return parse_profile_page(html, profile_url, fallback_name)
