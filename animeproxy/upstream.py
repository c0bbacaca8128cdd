"""Client for the upstream anime catalog API."""

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError
from whenever import Instant

from .config import settings
from .errors import UpstreamError
from .models import (
    Episode,
    EpisodeList,
    SearchCandidate,
    SearchResults,
    UpstreamEnvelope,
)

logger = logging.getLogger(__name__)


class UpstreamClient:
    """Thin wrapper over the catalog's search, episodes and sources endpoints."""

    def __init__(
        self,
        client: httpx.Client,
        base_url: str = settings.upstream_base_url,
        now_func: Callable[[], Instant] = Instant.now,
    ):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.now_func = now_func

    def _get(self, path: str, params: dict | None = None) -> UpstreamEnvelope:
        """GET an endpoint and decode the ``{success, data}`` envelope.

        Raises:
            UpstreamError: On transport failure, non-2xx status or a payload
                that is not the expected envelope
        """
        url = f"{self.base_url}{path}"
        started = self.now_func()

        try:
            response = self.client.get(url, params=params)
            response.raise_for_status()
            envelope = UpstreamEnvelope.model_validate(response.json())
        except httpx.HTTPError as e:
            logger.error(f"Upstream request to {url} failed: {e}")
            raise UpstreamError(str(e)) from e
        except (ValueError, ValidationError) as e:
            logger.error(f"Malformed upstream payload from {url}: {e}")
            raise UpstreamError(f"Malformed upstream payload: {e}") from e

        elapsed = self.now_func() - started
        logger.debug(f"GET {url} {params or ''} took {elapsed.total('seconds'):.2f}s")
        return envelope

    def search(self, query: str) -> list[SearchCandidate]:
        """Search the catalog; an unsuccessful search is an empty result."""
        envelope = self._get("/api/search", params={"query": query})
        if not envelope.success or envelope.data is None:
            return []

        try:
            results = SearchResults.model_validate(envelope.data).results
        except ValidationError as e:
            raise UpstreamError(f"Malformed search results: {e}") from e

        logger.info(f"Upstream search '{query}' returned {len(results)} results")
        return results

    def get_episodes(self, anime_id: str) -> list[Episode]:
        envelope = self._get(f"/api/episodes/{quote(str(anime_id), safe='')}")
        if not envelope.success:
            raise UpstreamError(f"Upstream could not list episodes for '{anime_id}'")

        try:
            episodes = EpisodeList.model_validate(envelope.data).episodes
        except ValidationError as e:
            raise UpstreamError(f"Malformed episode list: {e}") from e

        logger.info(f"Retrieved {len(episodes)} episodes for '{anime_id}'")
        return episodes

    def get_sources(self, anime_title: str, episode_id: str) -> Any:
        """Streaming sources for an episode, passed through untouched."""
        path = (
            f"/api/sources/{quote(anime_title, safe='')}/{quote(episode_id, safe='?=')}"
        )
        envelope = self._get(path)
        if not envelope.success:
            raise UpstreamError(
                f"Upstream could not provide sources for episode '{episode_id}'"
            )
        return envelope.data
