# mentor_finder/main.py — FastAPI app entry point

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from mentor_finder.config import get_settings
from mentor_finder.routers import health, mentor_search, pages


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging(get_settings().log_level)

app = FastAPI(
    title="mentor-finder",
    description="Mentor profile search across people-search providers",
    version="0.1.0",
)


@app.exception_handler(HTTPException)
async def http_exception_handler(_: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(
    mentor_search.router,
    prefix="/api",
    tags=["mentor-search"],
)
app.include_router(pages.router, tags=["pages"])
