# src/solo_stage/main.py
"""Main entry point for the Solo Stage application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import RequestResponseEndpoint

from solo_stage.api import (
    auth_router,
    images_router,
    likes_router,
    posts_router,
    tags_router,
    uploads_router,
)
from solo_stage.api.dependencies import get_client_token
from solo_stage.core.settings import settings
from solo_stage.db.session import create_tables
from solo_stage.services.rate_limit import get_rate_limiter

logger = logging.getLogger(__name__)

BLOCKED_BOTS: tuple[str, ...] = (
    "GPTBot",
    "CCBot",
    "anthropic-ai",
    "Claude-Web",
    "ChatGPT-User",
    "cohere-ai",
    "Google-Extended",
    "FacebookBot",
    "Bytespider",
)

ROBOTS_TXT = """User-agent: GPTBot
Disallow: /

User-agent: CCBot
Disallow: /

User-agent: anthropic-ai
Disallow: /

User-agent: Claude-Web
Disallow: /

User-agent: ChatGPT-User
Disallow: /

User-agent: cohere-ai
Disallow: /

User-agent: Google-Extended
Disallow: /

User-agent: Bytespider
Disallow: /

User-agent: Googlebot
Crawl-delay: 10
Allow: /

User-agent: Bingbot
Crawl-delay: 10
Allow: /

User-agent: *
Crawl-delay: 10
Allow: /"""


def is_blocked_bot(user_agent: str | None) -> bool:
    """Return True if the User-Agent contains a blocked crawler signature."""
    if not user_agent:
        return False
    lowered = user_agent.lower()
    return any(bot.lower() in lowered for bot in BLOCKED_BOTS)


# Initialize FastAPI app
app = FastAPI(
    title="Solo Stage API",
    description="Single-author micro-posting service",
    version=settings.app_version,
)

# Add CORS middleware; Access-Control-Allow-Origin is only echoed for listed origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@app.middleware("http")
async def edge_filter(request: Request, call_next: RequestResponseEndpoint) -> Response:
    """Crawler block-list and per-client rate limit, applied to every request."""
    if request.url.path == "/robots.txt":
        return await call_next(request)

    if is_blocked_bot(request.headers.get("user-agent")):
        return JSONResponse({"detail": "Access denied"}, status_code=status.HTTP_403_FORBIDDEN)

    decision = get_rate_limiter().check(get_client_token(request))
    if not decision.allowed:
        return JSONResponse(
            {"detail": "Too many requests"},
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            headers={"Retry-After": str(decision.retry_after)},
        )

    return await call_next(request)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        {"detail": "Database error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# Include API routers
app.include_router(posts_router, prefix="/api")
app.include_router(tags_router, prefix="/api")
app.include_router(likes_router, prefix="/api")
app.include_router(uploads_router, prefix="/api")
app.include_router(auth_router)
app.include_router(images_router)


@app.on_event("startup")
async def on_startup() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    if not settings.allowed_email:
        logger.warning("ALLOWED_EMAIL is not set; all admin sessions will be refused")
    create_tables()


@app.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt() -> str:
    """Crawler policy denying known AI crawlers."""
    return ROBOTS_TXT


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("solo_stage.main:app", host="0.0.0.0", port=8787, reload=settings.debug)
