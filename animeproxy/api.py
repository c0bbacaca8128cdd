"""FastAPI application exposing the anime proxy endpoints."""

import logging
import re
from collections.abc import Iterator
from contextlib import asynccontextmanager, contextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .errors import AnimeProxyError, BadRequestError, UpstreamError
from .service import AnimeService
from .upstream import UpstreamClient

logger = logging.getLogger(__name__)


@contextmanager
def upstream_failures(context: str) -> Iterator[None]:
    """Attach the endpoint's context message to upstream failures."""
    try:
        yield
    except UpstreamError as e:
        logger.error(f"{context}: {e.message}")
        raise UpstreamError(context, detail=e.message) from e


def _parse_episode_number(ep: str | None) -> int | None:
    if ep is None or not re.fullmatch(r"[0-9]+", ep.strip()):
        return None
    return int(ep) or None


def create_app(service: AnimeService | None = None) -> FastAPI:
    """Build the application.

    Args:
        service: Preconfigured service; when omitted one is built from settings
            around an HTTP client that is closed on shutdown

    Returns:
        Configured FastAPI app
    """
    http_client = None
    if service is None:
        http_client = httpx.Client(
            timeout=settings.upstream_timeout_seconds,
            headers={"User-Agent": settings.user_agent},
            follow_redirects=True,
        )
        service = AnimeService(UpstreamClient(http_client, settings.upstream_base_url))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Upstream API: {service.upstream.base_url}")
        yield
        if http_client is not None:
            http_client.close()
            logger.info("Upstream HTTP client closed")

    app = FastAPI(title="animeproxy", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
    )

    @app.exception_handler(AnimeProxyError)
    async def handle_proxy_error(request: Request, exc: AnimeProxyError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/")
    def health() -> dict:
        return {"status": "ok", "message": "Anime API is running"}

    @app.get("/api/search")
    def search(query: str | None = None) -> dict:
        logger.info(f"Search request received: '{query}'")
        if not query:
            raise BadRequestError("Search query is required")

        with upstream_failures("Error fetching episodes"):
            result = service.search(query)

        if result is None:
            return {"success": False, "message": "No episodes found"}
        return {"success": True, "data": result}

    @app.get("/api/sources/{anime_id}")
    def sources(anime_id: str, ep: str | None = None) -> dict:
        logger.info(f"Sources request for ID: '{anime_id}' (ep={ep})")
        with upstream_failures("Error fetching sources"):
            data = service.get_sources(anime_id, _parse_episode_number(ep))
        return {"success": True, "data": data}

    @app.get("/api/{anime_id}")
    def anime(anime_id: str) -> dict:
        logger.info(f"Episode request for ID: '{anime_id}'")
        with upstream_failures("Error fetching episodes"):
            data = service.get_anime(anime_id)
        return {"success": True, "data": data}

    return app
