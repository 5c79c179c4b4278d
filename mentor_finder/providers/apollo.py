from __future__ import annotations

import logging
from typing import Any

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

_PROVIDER = "apollo"
_ENDPOINT = "https://api.apollo.io/v1/mixed_people/search"


def build_payload(mentor_filter: MentorFilter, *, per_page: int) -> dict[str, Any]:
    payload: dict[str, Any] = {"page": 1, "per_page": per_page}
    if mentor_filter.role:
        payload["person_titles"] = [mentor_filter.role]
    if mentor_filter.country:
        payload["person_locations"] = [mentor_filter.country]
    if mentor_filter.company:
        payload["q_organization_name"] = mentor_filter.company
    keywords = " ".join(value for value in (mentor_filter.industry, mentor_filter.college) if value)
    if keywords:
        payload["q_keywords"] = keywords
    return payload


async def search_people(
    *,
    api_key: str | None,
    mentor_filter: MentorFilter,
    per_page: int = 25,
    timeout: float = 30.0,
) -> ProviderAdapterResult:
    if not api_key:
        return skipped(_PROVIDER, "people_search")

    headers = {
        "X-Api-Key": api_key,
        "Content-Type": "application/json",
        "Cache-Control": "no-cache",
    }
    start_ms = now_ms()
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(_ENDPOINT, headers=headers, json=build_payload(mentor_filter, per_page=per_page))
            body = parse_json_or_raw(response.text, response.json)
    except httpx.TimeoutException:
        logger.warning("Apollo people search timed out", extra={"provider": _PROVIDER})
        return failed(_PROVIDER, "people_search", start_ms, error="timeout")
    except httpx.HTTPError as exc:
        logger.warning("Apollo people search failed", extra={"provider": _PROVIDER, "error": exc.__class__.__name__})
        return failed(_PROVIDER, "people_search", start_ms, error=f"http_error:{exc.__class__.__name__}")

    if response.status_code >= 400:
        logger.warning("Apollo returned an error status", extra={"provider": _PROVIDER, "http_status": response.status_code})
        return failed(_PROVIDER, "people_search", start_ms, http_status=response.status_code, raw_response=body)

    if "raw" in body:
        logger.warning("Response body was not JSON", extra={"provider": _PROVIDER, "http_status": response.status_code})
        return failed(_PROVIDER, "people_search", start_ms, http_status=response.status_code, error="invalid_json")

    mapped = profiles_from_people(body.get("people"), source="Apollo")
    return completed(_PROVIDER, "people_search", start_ms, mapped, http_status=response.status_code)
