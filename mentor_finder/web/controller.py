from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from mentor_finder.contracts.mentor_search import MentorFilter, Profile
from mentor_finder.services.demo_catalog import demo_profiles
from mentor_finder.web.store import LocalStore

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/fetchLinkedInProfiles"
EMPTY_FILTER_MESSAGE = "Please fill at least one search field to find LinkedIn profiles"
NO_RESULTS_MESSAGE = "No LinkedIn profiles found. Try different search criteria."
ERROR_PROVIDER_LABEL = "Demo Profiles (API Error)"
ERROR_FALLBACK_MESSAGE = "Showing demo profiles - API temporarily unavailable"


@dataclass
class SearchState:
    profiles: list[Profile] = field(default_factory=list)
    provider: str | None = None
    is_searching: bool = False


@dataclass(frozen=True)
class SearchView:
    profiles: list[Profile]
    provider: str
    message: str
    is_error: bool = False


def _error_view(message: str) -> SearchView:
    return SearchView(profiles=[], provider="", message=message, is_error=True)


class SearchController:
    """Drives one search session: validate, call the API, keep the last results."""

    def __init__(
        self,
        state: SearchState,
        client: httpx.AsyncClient,
        store: LocalStore | None = None,
        *,
        search_path: str = SEARCH_PATH,
    ) -> None:
        self.state = state
        self.client = client
        self.store = store
        self.search_path = search_path

    async def search(self, mentor_filter: MentorFilter) -> SearchView | None:
        """Run a search. Returns `None` when another search is still in flight."""
        if self.state.is_searching:
            logger.info("Search already in flight, ignoring request")
            return None
        if mentor_filter.is_empty():
            return _error_view(EMPTY_FILTER_MESSAGE)

        self.state.is_searching = True
        try:
            await self._record_search(mentor_filter)
            try:
                profiles, provider = await self._fetch(mentor_filter)
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Search request failed, showing demo profiles", extra={"error": repr(exc)})
                profiles = demo_profiles()
                self.state.profiles = profiles
                self.state.provider = ERROR_PROVIDER_LABEL
                return SearchView(profiles=profiles, provider=ERROR_PROVIDER_LABEL, message=ERROR_FALLBACK_MESSAGE)

            if not profiles:
                return _error_view(NO_RESULTS_MESSAGE)
            self.state.profiles = profiles
            self.state.provider = provider
            return SearchView(
                profiles=profiles,
                provider=provider,
                message=f"Found {len(profiles)} LinkedIn profiles via {provider}",
            )
        finally:
            self.state.is_searching = False

    async def _record_search(self, mentor_filter: MentorFilter) -> None:
        if self.store is None:
            return
        try:
            await run_in_threadpool(self.store.record_search, mentor_filter)
        except OSError as exc:
            logger.warning(
                "Could not record search history",
                extra={"path": str(self.store.path), "error": repr(exc)},
            )

    async def _fetch(self, mentor_filter: MentorFilter) -> tuple[list[Profile], str]:
        response = await self.client.post(self.search_path, json=mentor_filter.model_dump(exclude_none=True))
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict):
            raise ValueError("search response is not a JSON object")
        items = body.get("profiles") or body.get("mentors") or []
        try:
            profiles = [Profile.model_validate(item) for item in items]
        except ValidationError as exc:
            raise ValueError(f"search response contained a malformed profile: {exc}") from exc
        return profiles, str(body.get("provider") or "")

