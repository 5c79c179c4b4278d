from __future__ import annotations

import time
from typing import Any, TypedDict

from mentor_finder.contracts.mentor_search import Profile
from mentor_finder.providers.linkedin_html import extract_linkedin_id


class ProviderAdapterResult(TypedDict):
    attempt: dict[str, Any]
    mapped: list[Profile] | None


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_json_or_raw(text: str, parser: Any) -> dict[str, Any]:
    try:
        parsed = parser()
        if isinstance(parsed, dict):
            return parsed
        return {"value": parsed}
    except Exception:  # noqa: BLE001
        return {"raw": text}


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def as_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def first_str(*values: Any) -> str:
    for value in values:
        cleaned = as_str(value)
        if cleaned:
            return cleaned
    return ""


def skipped(provider: str, action: str, reason: str = "missing_provider_api_key") -> ProviderAdapterResult:
    return {
        "attempt": {"provider": provider, "action": action, "status": "skipped", "skip_reason": reason},
        "mapped": None,
    }


def failed(provider: str, action: str, start_ms: int, **details: Any) -> ProviderAdapterResult:
    return {
        "attempt": {
            "provider": provider,
            "action": action,
            "status": "failed",
            "duration_ms": now_ms() - start_ms,
            **details,
        },
        "mapped": None,
    }


def completed(provider: str, action: str, start_ms: int, mapped: list[Profile], **details: Any) -> ProviderAdapterResult:
    return {
        "attempt": {
            "provider": provider,
            "action": action,
            "status": "found" if mapped else "not_found",
            "result_count": len(mapped),
            "duration_ms": now_ms() - start_ms,
            **details,
        },
        "mapped": mapped,
    }


def linkedin_url_for(identifier: str | None) -> str:
    return f"https://linkedin.com/in/{identifier}" if identifier else "#"


def _string_list(value: Any) -> list[str]:
    return [item.strip() for item in as_list(value) if isinstance(item, str) and item.strip()]


def profile_from_person(raw: dict[str, Any], *, source: str) -> Profile | None:
    """Map a person record from any of the bulk search APIs onto a Profile.

    Each field walks a fixed precedence list of the key names seen across
    providers. Records that yield no name are dropped.
    """
    positions = [item for item in as_list(raw.get("current_positions")) if isinstance(item, dict)]
    organization = as_dict(raw.get("organization"))
    public_identifier = as_str(raw.get("public_identifier"))

    name = first_str(raw.get("full_name"), raw.get("name"))
    if not name:
        name = " ".join(
            part for part in (as_str(raw.get("first_name")), as_str(raw.get("last_name"))) if part
        )
    if not name:
        return None

    location = first_str(raw.get("location"), raw.get("geo_location"))
    if not location:
        location = ", ".join(
            part for part in (as_str(raw.get("city")), as_str(raw.get("state")), as_str(raw.get("country"))) if part
        )

    linkedin_url = first_str(raw.get("linkedin_url"), raw.get("profile_url")) or linkedin_url_for(public_identifier)

    identifier = first_str(
        raw.get("linkedin_id"),
        public_identifier,
        raw.get("urn_id"),
        str(raw["id"]) if raw.get("id") is not None else None,
    )
    if not identifier:
        identifier = extract_linkedin_id(linkedin_url)

    return Profile(
        id=identifier,
        name=name,
        headline=first_str(
            raw.get("headline"),
            raw.get("title"),
            raw.get("current_position_title"),
            raw.get("job_title"),
        ),
        company=first_str(
            raw.get("current_company"),
            raw.get("company_name"),
            positions[0].get("company_name") if positions else None,
            organization.get("name"),
        ),
        location=location,
        industry=first_str(raw.get("industry"), raw.get("industry_name"), organization.get("industry")),
        skills=_string_list(raw.get("skills")) or _string_list(raw.get("skill_names")),
        summary=first_str(raw.get("summary"), raw.get("description")),
        linkedin_url=linkedin_url,
        source=source,
    )


def profiles_from_people(items: Any, *, source: str) -> list[Profile]:
    mapped: list[Profile] = []
    for item in as_list(items):
        if not isinstance(item, dict):
            continue
        profile = profile_from_person(item, source=source)
        if profile is not None:
            mapped.append(profile)
    return mapped
