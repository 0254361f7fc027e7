"""HTTP service that maps short identifiers to shared dashboard tokens."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from .codec import HASH_PREFIX
from .core.errors import ShortLinkNotFoundError, ValidationError, error_response
from .core.logging import configure_logging, get_logger
from .core.settings import get_settings
from .database import bootstrap_database, database_path
from .schemas import HealthResponse, ShortLinkCreateRequest, ShortLinkResponse
from .shortlinks import DATA_REQUIRED_MESSAGE, create_short_link, get_short_link

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    bootstrap_database()
    logger.info("Short link service starting up", db=str(database_path()))
    yield
    logger.info("Short link service shutting down")


app = FastAPI(
    title="usageview short links",
    description="Stores '#data=' share tokens under short identifiers",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": [str(part) for part in error.get("loc", ())], "type": error.get("type")}
        for error in exc.errors()
    ]
    content = error_response(ValidationError(DATA_REQUIRED_MESSAGE, details={"errors": errors}))
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(ValidationError)
async def handle_validation(_: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=error_response(exc))


@app.exception_handler(ShortLinkNotFoundError)
async def handle_not_found(_: Request, exc: ShortLinkNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=error_response(exc))


@app.get("/health", response_model=HealthResponse, tags=["health"])
def healthcheck() -> HealthResponse:
    return HealthResponse()


@app.post(
    "/api/s",
    response_model=ShortLinkResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["short-links"],
)
def create_link(request: ShortLinkCreateRequest) -> ShortLinkResponse:
    record = create_short_link(request.data)
    return ShortLinkResponse(id=record.id)


@app.get("/s/{short_id}", tags=["short-links"])
def resolve_link(short_id: str) -> RedirectResponse:
    record = get_short_link(short_id)
    logger.info("Short link resolved", short_id=short_id)
    return RedirectResponse(url=f"/{HASH_PREFIX}{record.data}", status_code=status.HTTP_302_FOUND)


def main() -> None:
    """Run the service with the configured host and port."""

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "usageview.server:app",
        host=settings.server_host,
        port=settings.server_port,
        factory=False,
    )


__all__ = ["app", "main"]
