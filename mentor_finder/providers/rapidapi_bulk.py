from __future__ import annotations

import logging

import httpx

from mentor_finder.contracts.mentor_search import MentorFilter
from mentor_finder.providers.common import (
    ProviderAdapterResult,
    as_dict,
    as_list,
    completed,
    failed,
    now_ms,
    parse_json_or_raw,
    profiles_from_people,
    skipped,
)

logger = logging.getLogger(__name__)

_PROVIDER = "rapidapi_bulk"
_HOST = "linkedin-bulk-data-scraper.p.rapidapi.com"
_ENDPOINT = f"https://{_HOST}/people_search"
_DEFAULT_LOCATION = "United States"


def build_search_terms(mentor_filter: MentorFilter) -> str:
    return " ".join(value for value in (mentor_filter.role, mentor_filter.industry, mentor_filter.company) if value)


async def search_people(
    *,
    api_key: str | None,
    mentor_filter: MentorFilter,
    count: int = 20,
    timeout: float = 30.0,
) -> ProviderAdapterResult:
    if not api_key:
        return skipped(_PROVIDER, "people_search")

    headers = {
        "x-rapidapi-host": _HOST,
        "x-rapidapi-key": api_key,
        "Content-Type": "application/json",
    }
    payload = {
        "search_terms": build_search_terms(mentor_filter),
        "location": mentor_filter.country or _DEFAULT_LOCATION,
        "count": count,
    }
    start_ms = now_ms()
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(_ENDPOINT, headers=headers, json=payload)
            body = parse_json_or_raw(response.text, response.json)
    except httpx.TimeoutException:
        logger.warning("RapidAPI bulk search timed out", extra={"provider": _PROVIDER})
        return failed(_PROVIDER, "people_search", start_ms, error="timeout")
    except httpx.HTTPError as exc:
        logger.warning("RapidAPI bulk search failed", extra={"provider": _PROVIDER, "error": exc.__class__.__name__})
        return failed(_PROVIDER, "people_search", start_ms, error=f"http_error:{exc.__class__.__name__}")

    if response.status_code >= 400:
        logger.warning("RapidAPI bulk search returned an error status", extra={"provider": _PROVIDER, "http_status": response.status_code})
        return failed(_PROVIDER, "people_search", start_ms, http_status=response.status_code, raw_response=body)

    if "raw" in body:
        logger.warning("Response body was not JSON", extra={"provider": _PROVIDER, "http_status": response.status_code})
        return failed(_PROVIDER, "people_search", start_ms, http_status=response.status_code, error="invalid_json")

    # Older deployments of this API answer with data.elements instead of profiles.
    people = as_list(body.get("profiles")) or as_list(as_dict(body.get("data")).get("elements"))
    mapped = profiles_from_people(people, source="RapidAPI Bulk")
    return completed(_PROVIDER, "people_search", start_ms, mapped, http_status=response.status_code)
