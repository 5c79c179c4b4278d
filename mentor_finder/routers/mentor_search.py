import json
import logging
from typing import Any

from fastapi import APIRouter, Request, Response, status
from pydantic import ValidationError

from mentor_finder.contracts.mentor_search import MentorFilter
from mentor_finder.routers._responses import error_response, json_response, preflight_response
from mentor_finder.services.mentor_search import (
    FETCH_LINKEDIN_PROFILES,
    SEARCH_MENTORS,
    SearchEndpoint,
    error_fallback_payload,
    execute_search,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


async def _read_filter(request: Request) -> MentorFilter:
    raw = await request.body()
    if not raw.strip():
        return MentorFilter()
    try:
        body: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Request body is not valid JSON, searching with an empty filter")
        return MentorFilter()
    if not isinstance(body, dict):
        logger.warning("Request body is not a JSON object, searching with an empty filter")
        return MentorFilter()
    try:
        return MentorFilter.model_validate(body)
    except ValidationError:
        logger.warning("Request body did not match the filter shape, searching with an empty filter")
        return MentorFilter()


async def handle_search(request: Request, endpoint: SearchEndpoint) -> Response:
    if request.method == "OPTIONS":
        return preflight_response()
    if request.method != "POST":
        return error_response("Method not allowed", status.HTTP_405_METHOD_NOT_ALLOWED)

    mentor_filter = await _read_filter(request)
    try:
        payload = await execute_search(endpoint=endpoint, mentor_filter=mentor_filter)
    except Exception:  # noqa: BLE001
        logger.exception(
            "Mentor search failed, answering with demo data",
            extra={"operation_id": endpoint.operation_id},
        )
        payload = error_fallback_payload(endpoint=endpoint, mentor_filter=mentor_filter)
    return json_response(payload)


@router.api_route("/searchMentors", methods=_ALL_METHODS)
async def search_mentors(request: Request) -> Response:
    return await handle_search(request, SEARCH_MENTORS)


@router.api_route("/fetchLinkedInProfiles", methods=_ALL_METHODS)
async def fetch_linkedin_profiles(request: Request) -> Response:
    return await handle_search(request, FETCH_LINKEDIN_PROFILES)
