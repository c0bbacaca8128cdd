"""Request handling logic shared by the HTTP routes."""

import logging
import re

from .errors import BadRequestError, NotFoundError
from .matching.normalizer import (
    extract_episode_info,
    is_slug,
    normalize_query,
    slug_to_title,
)
from .matching.resolver import FallbackSearch
from .models import Episode, SearchCandidate
from .upstream import UpstreamClient

logger = logging.getLogger(__name__)


def _dump_episodes(episodes: list[Episode]) -> list[dict]:
    return [
        episode.model_dump(by_alias=True, exclude_unset=True) for episode in episodes
    ]


class AnimeService:
    """Coordinates title resolution and upstream lookups for each endpoint."""

    def __init__(
        self, upstream: UpstreamClient, resolver: FallbackSearch | None = None
    ):
        self.upstream = upstream
        self.resolver = resolver or FallbackSearch(upstream)

    def search(self, query: str) -> dict | None:
        """Resolve a free-text query or slug and list its episodes.

        Returns:
            ``{id, title, episodes}``, or None if nothing matched
        """
        title = normalize_query(query)
        logger.info(f"Processed query: '{title}'")

        candidate = self.resolver.resolve(title, title)
        if candidate is None:
            logger.info(f"No episodes found for: '{title}'")
            return None

        return self._with_episodes(candidate)

    def get_anime(self, anime_id: str) -> dict:
        """Episodes for a bare catalog id, or for the anime a slug resolves to.

        Raises:
            NotFoundError: If a slug does not resolve to any catalog entry
        """
        if is_slug(anime_id):
            title = slug_to_title(anime_id)
            logger.info(f"Extracted title: '{title}'")
            return self._with_episodes(self._resolve_or_404(title))

        logger.info(f"Fetching episodes directly for ID: {anime_id}")
        episodes = self.upstream.get_episodes(anime_id)
        return {
            "id": int(anime_id) if re.fullmatch(r"[0-9]+", anime_id) else anime_id,
            "episodes": _dump_episodes(episodes),
        }

    def get_sources(self, anime_id: str, episode_number: int | None) -> dict:
        """Streaming sources for one episode.

        The episode number comes from ``?ep=`` or, failing that, from an
        ``<slug>-episode-<n>`` id.

        Raises:
            BadRequestError: If no episode number is available
            NotFoundError: If the anime or the episode cannot be found
        """
        if episode_number is None:
            info = extract_episode_info(anime_id)
            if info is None:
                raise BadRequestError("Episode number required. Use: ?ep={number}")
            anime_id, episode_number = info.anime_id, info.episode_number

        candidate = self._resolve_or_404(slug_to_title(anime_id))
        episodes = self.upstream.get_episodes(candidate.id)

        episode = next((ep for ep in episodes if ep.number == episode_number), None)
        if episode is None:
            logger.info(f"Episode {episode_number} not found for '{candidate.title}'")
            raise NotFoundError("Episode not found")

        sources = self.upstream.get_sources(candidate.title, episode.id)
        return {
            "id": candidate.id,
            "title": candidate.title,
            "episode": {
                "number": episode.number,
                "title": episode.title,
                "japaneseTitle": episode.japanese_title,
            },
            "sources": sources,
        }

    def _resolve_or_404(self, title: str) -> SearchCandidate:
        candidate = self.resolver.resolve(title, title)
        if candidate is None:
            logger.info(f"Anime not found for: '{title}'")
            raise NotFoundError("Anime not found")
        return candidate

    def _with_episodes(self, candidate: SearchCandidate) -> dict:
        logger.info(f"Found anime: '{candidate.title}' (ID: {candidate.id})")
        episodes = self.upstream.get_episodes(candidate.id)
        return {
            "id": candidate.id,
            "title": candidate.title,
            "episodes": _dump_episodes(episodes),
        }
