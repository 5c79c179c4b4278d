from __future__ import annotations

import httpx
import pytest

from mentor_finder.contracts.mentor_search import MentorFilter
from mentor_finder.providers import scrapingbee


class _FakeResponse:
    def __init__(self, *, status_code: int, text: str):
        self.status_code = status_code
        self.text = text


_SEARCH_HTML = (
    '<div class="entity-result__item">'
    '<a href="https://www.linkedin.com/in/ada-l?trk=search">'
    '<span aria-hidden="true">Ada Lovelace</span></a>'
    '<div class="entity-result__primary-subtitle">Analyst at Engine Co</div>'
    '<div class="entity-result__secondary-subtitle">London, England</div>'
    "</div>"
)


def test_build_linkedin_search_url_encodes_keywords_and_country():
    url = scrapingbee.build_linkedin_search_url(MentorFilter(role="Data Scientist", industry="Finance", country="Canada"))

    assert url == (
        "https://www.linkedin.com/search/results/people/"
        '?keywords=Data%20Scientist%20Finance&geoUrn=["Canada"]'
    )


def test_build_linkedin_search_url_without_country():
    url = scrapingbee.build_linkedin_search_url(MentorFilter(company="Acme"))

    assert url == "https://www.linkedin.com/search/results/people/?keywords="


@pytest.mark.asyncio
async def test_scrapingbee_missing_api_key_skips(monkeypatch: pytest.MonkeyPatch):
    async def _mock_get(self, url: str, **kwargs):  # noqa: ANN001
        raise AssertionError("No request should be made without an API key")

    monkeypatch.setattr(scrapingbee.httpx.AsyncClient, "get", _mock_get)
    result = await scrapingbee.search_people(api_key=None, mentor_filter=MentorFilter(role="Analyst"))

    assert result["attempt"]["status"] == "skipped"
    assert result["mapped"] is None


@pytest.mark.asyncio
async def test_scrapingbee_search_page_parses_results(monkeypatch: pytest.MonkeyPatch):
    captured: dict = {}

    async def _mock_get(self, url: str, params: dict, **kwargs):  # noqa: ANN001
        captured["url"] = url
        captured["params"] = params
        return _FakeResponse(status_code=200, text=_SEARCH_HTML)

    monkeypatch.setattr(scrapingbee.httpx.AsyncClient, "get", _mock_get)
    result = await scrapingbee.search_people(api_key="bee-key", mentor_filter=MentorFilter(role="Analyst"))

    assert captured["url"] == "https://app.scrapingbee.com/api/v1/"
    assert captured["params"]["api_key"] == "bee-key"
    assert captured["params"]["render_js"] == "true"
    assert captured["params"]["premium_proxy"] == "true"
    assert captured["params"]["country_code"] == "us"
    assert captured["params"]["url"].startswith("https://www.linkedin.com/search/results/people/?keywords=Analyst")

    assert result["attempt"]["status"] == "found"
    assert result["attempt"]["result_count"] == 1
    profile = result["mapped"][0]
    assert profile.id == "ada-l"
    assert profile.name == "Ada Lovelace"
    assert profile.linkedin_url == "https://www.linkedin.com/in/ada-l"
    assert profile.location == "London, England"


@pytest.mark.asyncio
async def test_scrapingbee_error_status_returns_failed(monkeypatch: pytest.MonkeyPatch):
    async def _mock_get(self, url: str, **kwargs):  # noqa: ANN001
        return _FakeResponse(status_code=500, text="upstream error")

    monkeypatch.setattr(scrapingbee.httpx.AsyncClient, "get", _mock_get)
    result = await scrapingbee.search_people(api_key="bee-key", mentor_filter=MentorFilter(role="Analyst"))

    assert result["attempt"]["status"] == "failed"
    assert result["attempt"]["http_status"] == 500
    assert result["mapped"] is None


@pytest.mark.asyncio
async def test_scrapingbee_timeout_returns_failed(monkeypatch: pytest.MonkeyPatch):
    async def _mock_get(self, url: str, **kwargs):  # noqa: ANN001
        raise httpx.ReadTimeout("slow")

    monkeypatch.setattr(scrapingbee.httpx.AsyncClient, "get", _mock_get)
    result = await scrapingbee.search_people(api_key="bee-key", mentor_filter=MentorFilter(role="Analyst"))

    assert result["attempt"]["status"] == "failed"
    assert result["attempt"]["error"] == "timeout"


@pytest.mark.asyncio
async def test_scrape_profile_parses_page(monkeypatch: pytest.MonkeyPatch):
    html = '<h1 class="text-heading-xlarge">Grace Hopper</h1><div class="text-body-medium">Admiral at Navy</div>'

    async def _mock_get(self, url: str, params: dict, **kwargs):  # noqa: ANN001
        assert params["url"] == "https://www.linkedin.com/in/grace"
        return _FakeResponse(status_code=200, text=html)

    monkeypatch.setattr(scrapingbee.httpx.AsyncClient, "get", _mock_get)
    profile = await scrapingbee.scrape_profile(
        api_key="bee-key",
        profile_url="https://www.linkedin.com/in/grace",
        fallback_name="G. Hopper",
    )

    assert profile is not None
    assert profile.name == "Grace Hopper"
    assert profile.company == "Navy"
    assert profile.source == "Direct Scraping"


@pytest.mark.asyncio
async def test_scrape_profile_returns_none_on_failure(monkeypatch: pytest.MonkeyPatch):
    async def _mock_get(self, url: str, **kwargs):  # noqa: ANN001
        raise httpx.ConnectError("refused")

    monkeypatch.setattr(scrapingbee.httpx.AsyncClient, "get", _mock_get)

    assert await scrapingbee.scrape_profile(api_key="bee-key", profile_url="https://www.linkedin.com/in/x") is None
    assert await scrapingbee.scrape_profile(api_key=None, profile_url="https://www.linkedin.com/in/x") is None
