import logging

import httpx
import pytest
from whenever import Instant

from animeproxy.errors import UpstreamError
from animeproxy.upstream import UpstreamClient


def make_client(handler, fixed_time):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return UpstreamClient(client, "https://upstream.test/", now_func=lambda: fixed_time)


def test_search(upstream, catalog):
    catalog.add_search("naruto", ("naruto-677", "Naruto"), ("20", "Naruto Shippuden"))

    results = upstream.search("Naruto")

    assert [(r.id, r.title) for r in results] == [
        ("naruto-677", "Naruto"),
        ("20", "Naruto Shippuden"),
    ]
    assert catalog.requests[0].url.params["query"] == "Naruto"


def test_search_coerces_numeric_ids(fixed_time):
    def handler(request):
        return httpx.Response(
            200,
            json={"success": True, "data": {"results": [{"id": 21, "title": "X"}]}},
        )

    results = make_client(handler, fixed_time).search("x")
    assert results[0].id == "21"


def test_unsuccessful_search_is_empty(fixed_time):
    def handler(request):
        return httpx.Response(200, json={"success": False, "message": "nope"})

    assert make_client(handler, fixed_time).search("x") == []


def test_get_episodes(upstream, catalog):
    catalog.episodes["one-piece-100"] = [
        {"id": "ep-1", "number": 1, "title": "Romance Dawn", "japaneseTitle": "Ore wa"},
        {"id": "ep-2", "number": 2, "title": "The Great Swordsman", "isFiller": False},
    ]

    episodes = upstream.get_episodes("one-piece-100")

    assert [ep.number for ep in episodes] == [1, 2]
    assert episodes[0].japanese_title == "Ore wa"
    assert episodes[1].model_dump(by_alias=True)["isFiller"] is False


def test_get_episodes_unknown_anime(upstream):
    with pytest.raises(UpstreamError):
        upstream.get_episodes("missing")


def test_get_sources_quotes_title(upstream, catalog):
    catalog.sources["ep-1"] = {"sources": [{"url": "https://cdn.test/1.m3u8"}]}

    data = upstream.get_sources("One Piece", "ep-1")

    assert data == {"sources": [{"url": "https://cdn.test/1.m3u8"}]}
    assert b"/api/sources/One%20Piece/ep-1" in catalog.requests[-1].url.raw_path


def test_http_error_status(fixed_time):
    def handler(request):
        return httpx.Response(500, text="boom")

    with pytest.raises(UpstreamError) as exc_info:
        make_client(handler, fixed_time).search("x")

    assert "500" in exc_info.value.message


def test_connection_error(fixed_time):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError) as exc_info:
        make_client(handler, fixed_time).get_episodes("1")

    assert "connection refused" in exc_info.value.message


def test_malformed_json(fixed_time):
    def handler(request):
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(UpstreamError):
        make_client(handler, fixed_time).search("x")


def test_malformed_results(fixed_time):
    def handler(request):
        return httpx.Response(
            200, json={"success": True, "data": {"results": [{"name": "no id"}]}}
        )

    with pytest.raises(UpstreamError):
        make_client(handler, fixed_time).search("x")


def test_base_url_trailing_slash(fixed_time):
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json={"success": True, "data": {"results": []}})

    make_client(handler, fixed_time).search("x")
    assert seen == ["https://upstream.test/api/search?query=x"]


def test_request_timing_logged(catalog, caplog):
    """Elapsed time is measured with the real clock and logged at debug."""
    catalog.add_search("naruto", ("naruto-677", "Naruto"))
    client = httpx.Client(transport=httpx.MockTransport(catalog.handler))
    upstream = UpstreamClient(client, "https://upstream.test", now_func=Instant.now)

    with caplog.at_level(logging.DEBUG, logger="animeproxy.upstream"):
        results = upstream.search("naruto")

    assert [r.id for r in results] == ["naruto-677"]
    timing = [r.message for r in caplog.records if "took" in r.message]
    assert len(timing) == 1
    assert timing[0].startswith("GET https://upstream.test/api/search")
    assert timing[0].endswith("s")


def test_elapsed_time_between_instants(catalog, caplog, fixed_time):
    catalog.episodes["naruto-677"] = [{"id": "ep-1", "number": 1}]
    ticks = iter([fixed_time, fixed_time.add(milliseconds=1500)])
    client = httpx.Client(transport=httpx.MockTransport(catalog.handler))
    upstream = UpstreamClient(
        client, "https://upstream.test", now_func=lambda: next(ticks)
    )

    with caplog.at_level(logging.DEBUG, logger="animeproxy.upstream"):
        upstream.get_episodes("naruto-677")

    assert "took 1.50s" in caplog.text
