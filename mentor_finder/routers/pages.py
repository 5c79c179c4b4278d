import json
import logging

import httpx
from fastapi import APIRouter, Form, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from mentor_finder.config import get_settings
from mentor_finder.contracts.mentor_search import MentorFilter, Profile
from mentor_finder.web.controller import SearchController, SearchState
from mentor_finder.web.render import render_bookmarks, render_page
from mentor_finder.web.store import get_local_store

logger = logging.getLogger(__name__)

router = APIRouter()


def _api_client(request: Request) -> httpx.AsyncClient:
    settings = get_settings()
    timeout = settings.provider_timeout_seconds + 10.0
    if settings.api_url:
        return httpx.AsyncClient(base_url=settings.api_url, timeout=timeout)
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=request.app),
        base_url="http://mentor-finder",
        timeout=timeout,
    )


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    history = await run_in_threadpool(get_local_store().search_history)
    return HTMLResponse(render_page(history=history))


@router.post("/search", response_class=HTMLResponse)
async def search(
    request: Request,
    industry: str = Form(""),
    role: str = Form(""),
    country: str = Form(""),
    company: str = Form(""),
    college: str = Form(""),
) -> HTMLResponse:
    mentor_filter = MentorFilter(industry=industry, role=role, country=country, company=company, college=college)
    store = get_local_store()
    async with _api_client(request) as client:
        # State lives for one request, so the in-flight guard only applies to callers that reuse a controller.
        controller = SearchController(SearchState(), client, store)
        view = await controller.search(mentor_filter)
    history = await run_in_threadpool(store.search_history)
    return HTMLResponse(render_page(form=mentor_filter, view=view, history=history))


@router.get("/bookmarks", response_class=HTMLResponse)
async def list_bookmarks() -> HTMLResponse:
    bookmarks = await run_in_threadpool(get_local_store().bookmarks)
    return HTMLResponse(render_bookmarks(bookmarks))


@router.post("/bookmarks")
async def save_bookmark(profile: str = Form(...)):
    try:
        saved = Profile.model_validate(json.loads(profile))
    except (json.JSONDecodeError, ValidationError):
        logger.warning("Ignoring malformed bookmark submission")
        return RedirectResponse("/bookmarks", status_code=status.HTTP_303_SEE_OTHER)
    store = get_local_store()
    try:
        await run_in_threadpool(store.add_bookmark, saved)
    except OSError as exc:
        logger.warning("Could not save bookmark", extra={"profile_id": saved.id, "path": str(store.path), "error": repr(exc)})
    return RedirectResponse("/bookmarks", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/bookmarks/{profile_id}/delete")
async def delete_bookmark(profile_id: str):
    store = get_local_store()
    try:
        await run_in_threadpool(store.remove_bookmark, profile_id)
    except OSError as exc:
        logger.warning("Could not remove bookmark", extra={"profile_id": profile_id, "path": str(store.path), "error": repr(exc)})
    return RedirectResponse("/bookmarks", status_code=status.HTTP_303_SEE_OTHER)
