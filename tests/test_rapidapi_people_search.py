from __future__ import annotations

import pytest

from mentor_finder.contracts.mentor_search import MentorFilter
from mentor_finder.providers import rapidapi_bulk, rapidapi_fresh


class _FakeResponse:
    def __init__(self, *, status_code: int, payload: dict | None = None, text: str = "{}"):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("not json")
        return self._payload


@pytest.mark.asyncio
async def test_bulk_search_posts_terms_and_default_location(monkeypatch: pytest.MonkeyPatch):
    captured: dict = {}

    async def _mock_post(self, url: str, headers: dict, json: dict, **kwargs):  # noqa: ANN001
        captured["url"] = url
        captured["headers"] = headers
        captured["json"] = json
        return _FakeResponse(
            status_code=200,
            payload={
                "profiles": [
                    {
                        "full_name": "Priya Raman",
                        "headline": "Engineering Manager",
                        "current_company": "Stripe",
                        "location": "Dublin, Ireland",
                        "linkedin_url": "https://linkedin.com/in/priya-raman",
                        "skills": ["Go", "Leadership"],
                    },
                    {"headline": "No name here"},
                ]
            },
        )

    monkeypatch.setattr(rapidapi_bulk.httpx.AsyncClient, "post", _mock_post)
    result = await rapidapi_bulk.search_people(
        api_key="rapid-key",
        mentor_filter=MentorFilter(role="Engineering Manager", industry="Fintech", company="Stripe"),
    )

    assert captured["url"] == "https://linkedin-bulk-data-scraper.p.rapidapi.com/people_search"
    assert captured["headers"]["x-rapidapi-host"] == "linkedin-bulk-data-scraper.p.rapidapi.com"
    assert captured["headers"]["x-rapidapi-key"] == "rapid-key"
    assert captured["json"] == {
        "search_terms": "Engineering Manager Fintech Stripe",
        "location": "United States",
        "count": 20,
    }
    assert result["attempt"]["status"] == "found"
    assert result["attempt"]["result_count"] == 1
    profile = result["mapped"][0]
    assert profile.id == "priya-raman"
    assert profile.name == "Priya Raman"
    assert profile.company == "Stripe"
    assert profile.skills == ["Go", "Leadership"]
    assert profile.source == "RapidAPI Bulk"


@pytest.mark.asyncio
async def test_bulk_search_reads_data_elements(monkeypatch: pytest.MonkeyPatch):
    async def _mock_post(self, url: str, **kwargs):  # noqa: ANN001
        return _FakeResponse(
            status_code=200,
            payload={"data": {"elements": [{"first_name": "Tom", "last_name": "Ng", "public_identifier": "tomng"}]}},
        )

    monkeypatch.setattr(rapidapi_bulk.httpx.AsyncClient, "post", _mock_post)
    result = await rapidapi_bulk.search_people(api_key="rapid-key", mentor_filter=MentorFilter(country="Canada"))

    profile = result["mapped"][0]
    assert profile.name == "Tom Ng"
    assert profile.id == "tomng"
    assert profile.linkedin_url == "https://linkedin.com/in/tomng"


@pytest.mark.asyncio
async def test_bulk_search_invalid_json_returns_failed(monkeypatch: pytest.MonkeyPatch):
    async def _mock_post(self, url: str, **kwargs):  # noqa: ANN001
        return _FakeResponse(status_code=200, payload=None, text="<html>rate limited</html>")

    monkeypatch.setattr(rapidapi_bulk.httpx.AsyncClient, "post", _mock_post)
    result = await rapidapi_bulk.search_people(api_key="rapid-key", mentor_filter=MentorFilter(role="PM"))

    assert result["attempt"]["status"] == "failed"
    assert result["attempt"]["error"] == "invalid_json"
    assert result["mapped"] is None


@pytest.mark.asyncio
async def test_bulk_search_missing_key_skips():
    result = await rapidapi_bulk.search_people(api_key=None, mentor_filter=MentorFilter(role="PM"))

    assert result["attempt"]["status"] == "skipped"
    assert result["mapped"] is None


@pytest.mark.asyncio
async def test_fresh_search_sends_only_supplied_params(monkeypatch: pytest.MonkeyPatch):
    captured: dict = {}

    async def _mock_get(self, url: str, headers: dict, params: dict, **kwargs):  # noqa: ANN001
        captured["url"] = url
        captured["headers"] = headers
        captured["params"] = params
        return _FakeResponse(
            status_code=200,
            payload={
                "results": [
                    {
                        "name": "Marco Bianchi",
                        "title": "Head of Design",
                        "company_name": "Figma",
                        "city": "Milan",
                        "country": "Italy",
                        "profile_url": "https://linkedin.com/in/marco-b",
                    }
                ]
            },
        )

    monkeypatch.setattr(rapidapi_fresh.httpx.AsyncClient, "get", _mock_get)
    result = await rapidapi_fresh.search_people(
        api_key="rapid-key",
        mentor_filter=MentorFilter(role="Head of Design", country="Italy"),
    )

    assert captured["url"] == "https://fresh-linkedin-profile-data.p.rapidapi.com/get-linkedin-profile"
    assert captured["headers"]["x-rapidapi-host"] == "fresh-linkedin-profile-data.p.rapidapi.com"
    assert captured["params"] == {"title": "Head of Design", "location": "Italy", "limit": 15}
    profile = result["mapped"][0]
    assert profile.name == "Marco Bianchi"
    assert profile.headline == "Head of Design"
    assert profile.company == "Figma"
    assert profile.location == "Milan, Italy"
    assert profile.id == "marco-b"
    assert profile.source == "RapidAPI Fresh"


@pytest.mark.asyncio
async def test_fresh_search_error_status_returns_failed(monkeypatch: pytest.MonkeyPatch):
    async def _mock_get(self, url: str, **kwargs):  # noqa: ANN001
        return _FakeResponse(status_code=429, payload={"message": "Too many requests"})

    monkeypatch.setattr(rapidapi_fresh.httpx.AsyncClient, "get", _mock_get)
    result = await rapidapi_fresh.search_people(api_key="rapid-key", mentor_filter=MentorFilter(role="PM"))

    assert result["attempt"]["status"] == "failed"
    assert result["attempt"]["http_status"] == 429
    assert result["mapped"] is None
