"""Best-effort field extraction from LinkedIn HTML returned by the scraping proxy.

The patterns match one snapshot of LinkedIn's markup. Anything that does not
match yields an empty value; nothing here raises on bad input.
"""

from __future__ import annotations

import logging
import re
import time
from html import unescape

from mentor_finder.contracts.mentor_search import Profile

logger = logging.getLogger(__name__)

MAX_EXTRACTED_PROFILES = 10
SUMMARY_MAX_CHARS = 200

SNIPPET_SKILLS = (
    "JavaScript",
    "Python",
    "React",
    "Node.js",
    "Product Management",
    "Marketing",
    "Sales",
    "Leadership",
    "Strategy",
)

PAGE_SKILLS = SNIPPET_SKILLS + (
    "Analytics",
    "Machine Learning",
    "Data Science",
    "Cloud Computing",
    "AWS",
    "Project Management",
    "Business Development",
    "Consulting",
)

_LINKEDIN_ID_RE = re.compile(r"linkedin\.com/in/([^/?#]+)")
_RESULT_BLOCK_RE = re.compile(r'<(?:div|li)[^>]*class="[^"]*entity-result__item[^"]*"[^>]*>', re.IGNORECASE)
_PROFILE_LINK_RE = re.compile(r'href="([^"]*/in/[^"]*)"')
_ARIA_NAME_RE = re.compile(r'<span[^>]*aria-hidden="true"[^>]*>([^<]+)<')
_PRIMARY_SUBTITLE_RE = re.compile(r'<div[^>]*class="[^"]*entity-result__primary-subtitle[^"]*"[^>]*>([^<]+)')
_SECONDARY_SUBTITLE_RE = re.compile(r'<div[^>]*class="[^"]*entity-result__secondary-subtitle[^"]*"[^>]*>([^<]+)')

_PROFILE_NAME_RE = re.compile(r'<h1[^>]*class="[^"]*text-heading-xlarge[^"]*"[^>]*>([^<]+)<', re.IGNORECASE)
_TITLE_NAME_RE = re.compile(r"<title>([^<|]+?)\s*\|\s*LinkedIn", re.IGNORECASE)
_HEADLINE_RE = re.compile(r'<div[^>]*class="[^"]*text-body-medium[^"]*"[^>]*>([^<]+)<', re.IGNORECASE)
_LOCATION_RE = re.compile(r'<span[^>]*class="[^"]*text-body-small[^"]*"[^>]*>([^<]*,\s*[^<]+)<', re.IGNORECASE)
_COMPANY_IN_HEADLINE_RE = re.compile(r"\bat\s+([^,|\n]+)", re.IGNORECASE)
_SKILLS_SECTION_RE = re.compile(r'<section[^>]*id="skills"[^>]*>.*?</section>', re.IGNORECASE | re.DOTALL)
_SKILL_NAME_RE = re.compile(r'<span[^>]*class="[^"]*skill-name[^"]*"[^>]*>([^<]+)<', re.IGNORECASE)
_ABOUT_RE = re.compile(
    r'<section[^>]*aria-labelledby="about"[^>]*>.*?<div[^>]*class="[^"]*display-flex[^"]*"[^>]*>([^<]+)<',
    re.IGNORECASE | re.DOTALL,
)


def _text(value: str | None) -> str:
    if not value:
        return ""
    return " ".join(unescape(value).split())


def extract_linkedin_id(url: str | None) -> str:
    match = _LINKEDIN_ID_RE.search(url or "")
    if match:
        return match.group(1)
    return f"profile_{int(time.time() * 1000)}"


def name_from_title(title: str | None) -> str:
    """`Jane Doe - Staff Engineer - Acme | LinkedIn` -> `Jane Doe`."""
    cleaned = _text(title)
    for separator in (" | ", " - ", " – "):
        cleaned = cleaned.split(separator)[0]
    return cleaned.strip()


def skills_from_text(text: str | None, *, keywords: tuple[str, ...] = SNIPPET_SKILLS, limit: int = 5) -> list[str]:
    lowered = (text or "").lower()
    if not lowered:
        return []
    return [skill for skill in keywords if skill.lower() in lowered][:limit]


def _parse_result_blocks(html: str) -> list[Profile]:
    starts = [match.start() for match in _RESULT_BLOCK_RE.finditer(html)]
    profiles: list[Profile] = []
    for index, start in enumerate(starts[:MAX_EXTRACTED_PROFILES]):
        end = starts[index + 1] if index + 1 < len(starts) else len(html)
        block = html[start:end]

        link = _PROFILE_LINK_RE.search(block)
        url = unescape(link.group(1)).split("?")[0] if link else "#"
        name = _ARIA_NAME_RE.search(block)
        headline = _PRIMARY_SUBTITLE_RE.search(block)
        location = _SECONDARY_SUBTITLE_RE.search(block)

        profiles.append(
            Profile(
                id=extract_linkedin_id(url) if url != "#" else f"scraped_{index}",
                name=_text(name.group(1)) if name else f"Profile {index + 1}",
                headline=_text(headline.group(1)) if headline else "",
                location=_text(location.group(1)) if location else "",
                linkedin_url=url,
                source="LinkedIn Search",
            )
        )
    return profiles


def _parse_paired_fields(html: str) -> list[Profile]:
    names = [_text(value) for value in _ARIA_NAME_RE.findall(html)]
    titles = [_text(value) for value in _PRIMARY_SUBTITLE_RE.findall(html)]
    count = min(len(names), len(titles), MAX_EXTRACTED_PROFILES)
    return [
        Profile(
            id=f"scraped_{index}",
            name=names[index],
            headline=titles[index],
            linkedin_url="#",
            source="LinkedIn Search",
        )
        for index in range(count)
        if names[index]
    ]


def parse_search_results(html: str | None) -> list[Profile]:
    """Extract up to ten profiles from a LinkedIn people-search results page."""
    if not html:
        return []
    try:
        profiles = _parse_result_blocks(html)
        if not profiles:
            profiles = _parse_paired_fields(html)
        return profiles[:MAX_EXTRACTED_PROFILES]
    except Exception:  # noqa: BLE001
        logger.exception("LinkedIn search results parsing failed", extra={"html_length": len(html)})
        return []


def _profile_skills(html: str) -> list[str]:
    section = _SKILLS_SECTION_RE.search(html)
    if section:
        return [_text(value) for value in _SKILL_NAME_RE.findall(section.group(0))][:8]
    return skills_from_text(html, keywords=PAGE_SKILLS, limit=6)


def parse_profile_page(html: str | None, profile_url: str, fallback_name: str = "") -> Profile:
    """Extract a single Profile from a LinkedIn profile page.

    Falls back to a partial record (id, fallback name, URL) when parsing
    blows up part way through.
    """
    html = html or ""
    try:
        heading_match = _PROFILE_NAME_RE.search(html)
        title_match = _TITLE_NAME_RE.search(html)
        headline_match = _HEADLINE_RE.search(html)
        location_match = _LOCATION_RE.search(html)
        about_match = _ABOUT_RE.search(html)

        headline = _text(headline_match.group(1)) if headline_match else ""
        company_match = _COMPANY_IN_HEADLINE_RE.search(headline)
        summary = _text(about_match.group(1)) if about_match else ""
        if heading_match:
            name = _text(heading_match.group(1))
        else:
            name = name_from_title(title_match.group(1)) if title_match else ""

        return Profile(
            id=extract_linkedin_id(profile_url),
            name=name or fallback_name,
            headline=headline,
            company=company_match.group(1).strip() if company_match else "",
            location=_text(location_match.group(1)) if location_match else "",
            skills=_profile_skills(html),
            summary=f"{summary[:SUMMARY_MAX_CHARS]}..." if summary else "",
            linkedin_url=profile_url,
            source="Direct Scraping",
        )
    except Exception:  # noqa: BLE001
        logger.exception("LinkedIn profile parsing failed", extra={"profile_url": profile_url})
        return Profile(
            id=extract_linkedin_id(profile_url),
            name=fallback_name,
            linkedin_url=profile_url,
            source="Partial Scraping",
        )
