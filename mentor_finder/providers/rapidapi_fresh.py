from __future__ import annotations

import logging

import httpx

from mentor_finder.contracts.mentor_search import MentorFilter
from mentor_finder.providers.common import (
    ProviderAdapterResult,
    completed,
    failed,
    now_ms,
    parse_json_or_raw,
    profiles_from_people,
    skipped,
)

logger = logging.getLogger(__name__)

_PROVIDER = "rapidapi_fresh"
_HOST = "fresh-linkedin-profile-data.p.rapidapi.com"
_ENDPOINT = f"https://{_HOST}/get-linkedin-profile"


async def search_people(
    *,
    api_key: str | None,
    mentor_filter: MentorFilter,
    limit: int = 15,
    timeout: float = 30.0,
) -> ProviderAdapterResult:
    if not api_key:
        return skipped(_PROVIDER, "profile_search")

    headers = {
        "x-rapidapi-host": _HOST,
        "x-rapidapi-key": api_key,
    }
    params: dict[str, str | int] = {}
    if mentor_filter.role:
        params["title"] = mentor_filter.role
    if mentor_filter.industry:
        params["industry"] = mentor_filter.industry
    if mentor_filter.country:
        params["location"] = mentor_filter.country
    params["limit"] = limit

    start_ms = now_ms()
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(_ENDPOINT, headers=headers, params=params)
            body = parse_json_or_raw(response.text, response.json)
    except httpx.TimeoutException:
        logger.warning("RapidAPI fresh profile search timed out", extra={"provider": _PROVIDER})
        return failed(_PROVIDER, "profile_search", start_ms, error="timeout")
    except httpx.HTTPError as exc:
        logger.warning(
            "RapidAPI fresh profile search failed",
            extra={"provider": _PROVIDER, "error": exc.__class__.__name__},
        )
        return failed(_PROVIDER, "profile_search", start_ms, error=f"http_error:{exc.__class__.__name__}")

    if response.status_code >= 400:
        logger.warning(
            "RapidAPI fresh profile search returned an error status",
            extra={"provider": _PROVIDER, "http_status": response.status_code},
        )
        return failed(_PROVIDER, "profile_search", start_ms, http_status=response.status_code, raw_response=body)

    if "raw" in body:
        logger.warning("Response body was not JSON", extra={"provider": _PROVIDER, "http_status": response.status_code})
        return failed(_PROVIDER, "profile_search", start_ms, http_status=response.status_code, error="invalid_json")

    mapped = profiles_from_people(body.get("results"), source="RapidAPI Fresh")
    return completed(_PROVIDER, "profile_search", start_ms, mapped, http_status=response.status_code)
