import httpx
import pytest
from whenever import Instant

from animeproxy.matching.resolver import FallbackSearch
from animeproxy.service import AnimeService
from animeproxy.upstream import UpstreamClient

BASE_URL = "https://upstream.test"


class FakeCatalog:
    """In-memory stand-in for the upstream catalog API."""

    def __init__(self):
        self.search_results: dict[str, list[dict]] = {}
        self.episodes: dict[str, list[dict]] = {}
        self.sources: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.searches: list[str] = []

    def add_search(self, query: str, *titles: tuple[str, str]) -> None:
        self.search_results[query.lower()] = [
            {"id": anime_id, "title": title} for anime_id, title in titles
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/api/search":
            query = request.url.params["query"]
            self.searches.append(query)
            results = self.search_results.get(query.lower(), [])
            return httpx.Response(
                200, json={"success": True, "data": {"results": results}}
            )

        if path.startswith("/api/episodes/"):
            anime_id = path.removeprefix("/api/episodes/")
            if anime_id not in self.episodes:
                return httpx.Response(200, json={"success": False})
            return httpx.Response(
                200,
                json={"success": True, "data": {"episodes": self.episodes[anime_id]}},
            )

        if path.startswith("/api/sources/"):
            episode_id = path.rsplit("/", 1)[-1]
            if episode_id not in self.sources:
                return httpx.Response(200, json={"success": False})
            return httpx.Response(
                200, json={"success": True, "data": self.sources[episode_id]}
            )

        return httpx.Response(404, json={"success": False})


@pytest.fixture
def fixed_time():
    """Provide a fixed time for testing."""
    return Instant.from_utc(2025, 1, 1, 12, 0, 0)


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def http_client(catalog):
    """HTTP client whose requests are answered by the fake catalog."""
    client = httpx.Client(transport=httpx.MockTransport(catalog.handler))
    yield client
    client.close()


@pytest.fixture
def upstream(http_client, fixed_time):
    return UpstreamClient(http_client, BASE_URL, now_func=lambda: fixed_time)


@pytest.fixture
def resolver(upstream):
    return FallbackSearch(upstream)


@pytest.fixture
def service(upstream):
    return AnimeService(upstream)

