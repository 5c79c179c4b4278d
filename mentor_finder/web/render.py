"""Jinja2 rendering for the mentor search pages.

Every render call produces the complete markup for its container, so
re-rendering the same view gives the same HTML.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from jinja2 import Environment, FileSystemLoader, select_autoescape

from mentor_finder.contracts.mentor_search import MentorFilter, Profile

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
CARD_SKILL_LIMIT = 5


def initials(name: str | None) -> str:
    parts = [part for part in (name or "").split() if part]
    if not parts:
        return "??"
    return "".join(part[0] for part in parts).upper()


def contact_message(profile: Profile) -> str:
    first_name = profile.name.split()[0] if profile.name.split() else "there"
    where = f" at {profile.company}" if profile.company else ""
    return (
        f"Hi {first_name}, I came across your profile and your work{where} stood out to me. "
        "I'm looking for a mentor in this field and would really value a short conversation "
        "about your career path. Thank you for considering it!"
    )


def has_profile_link(profile: Profile) -> bool:
    """Only absolute http(s) URLs are rendered as links; anything else shows the demo badge."""
    try:
        parsed = urlparse(profile.linkedin_url or "")
    except ValueError:
        return False
    return parsed.scheme.lower() in ("http", "https") and bool(parsed.netloc)


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["initials"] = initials
    env.globals["contact_message"] = contact_message
    env.globals["has_profile_link"] = has_profile_link
    env.globals["card_skill_limit"] = CARD_SKILL_LIMIT
    return env


_env = _build_environment()


def _render(template_name: str, **variables: Any) -> str:
    template = _env.get_template(template_name)
    rendered = template.render(**variables)
    logger.debug("Template rendered", extra={"template_name": template_name, "rendered_length": len(rendered)})
    return rendered


def render_results(view: Any) -> str:
    """Markup for the results container: message banner plus one card per profile."""
    return _render("_results.html", view=view)


def render_contact_modal(profile: Profile) -> str:
    return _render("_contact_modal.html", profile=profile)


def render_page(
    *,
    form: MentorFilter | None = None,
    view: Any = None,
    history: list[dict[str, Any]] | None = None,
    active: str = "search",
) -> str:
    return _render(
        "index.html",
        form=form or MentorFilter(),
        view=view,
        history=history or [],
        active=active,
    )


def render_bookmarks(bookmarks: list[Profile]) -> str:
    return _render("bookmarks.html", bookmarks=bookmarks, active="bookmarks")
