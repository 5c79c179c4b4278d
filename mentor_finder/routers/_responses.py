# mentor_finder/routers/_responses.py — shared API response helpers

from typing import Any

from fastapi import Response
from fastapi.responses import JSONResponse

from mentor_finder.config import get_settings


def cors_headers(*, preflight: bool = False) -> dict[str, str]:
    headers = {"Access-Control-Allow-Origin": get_settings().cors_allow_origin}
    if preflight:
        headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
        headers["Access-Control-Allow-Headers"] = "Content-Type"
    return headers


def preflight_response() -> Response:
    return Response(status_code=200, headers=cors_headers(preflight=True))


def json_response(content: dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=cors_headers())


def error_response(message: str, status_code: int) -> JSONResponse:
    return json_response({"error": message}, status_code=status_code)
