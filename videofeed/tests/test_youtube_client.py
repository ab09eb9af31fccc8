import pytest
import requests

from videofeed.adapters.outbound.youtube_client import YouTubeFeedClient, to_remote_entry
from videofeed.domain.entities.remote_entry import SafeSearch
from videofeed.domain.errors import RemoteUnavailable
from videofeed.services.feed_fetcher import RemoteFeedFetcher

CHANNEL_ID = "UC_x5XG1OV2P6uZZ5FSM9Ttw"


class _FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload


class _FakeHttp:
    """Stands in for requests.Session; answers by resource name."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def get(self, url, params=None, timeout=None):
        resource = url.rsplit("/", 1)[-1]
        self.requests.append((resource, dict(params or {}), timeout))
        answer = self.routes[resource]
        if isinstance(answer, Exception):
            raise answer
        return answer


def _video(vid, embeddable=True, player=True, tags=None):
    item = {
        "id": vid,
        "snippet": {"title": f"Title {vid}", "description": f"About {vid}", "tags": tags or []},
        "status": {"embeddable": embeddable},
    }
    if player:
        item["player"] = {"embedHtml": "<iframe/>", "embedWidth": 640, "embedHeight": 360}
    return item


def test_should_map_video_resource_to_entry():
    # WHEN
    entry = to_remote_entry(_video("abc123", tags=["city", "design"]))

    # THEN
    assert entry.token == "tag:youtube.com,2008:video:abc123"
    assert entry.title == "Title abc123"
    assert entry.video_id == "abc123"
    assert entry.keywords == "city, design"
    assert entry.description == "About abc123"
    assert entry.media.url == "https://www.youtube.com/embed/abc123"
    assert entry.media.width == "640"
    assert entry.media.height == "360"
    assert entry.restricted is False


@pytest.mark.parametrize("video", [_video("x", embeddable=False), _video("x", player=False)])
def test_should_mark_non_playable_videos_as_restricted(video):
    assert to_remote_entry(video).restricted is True


def test_should_query_channel_videos_in_search_order():
    # GIVEN
    http = _FakeHttp({
        "channels": _FakeResponse({"items": [{"id": CHANNEL_ID}]}),
        "search": _FakeResponse({"items": [{"id": {"videoId": "v2"}}, {"id": {"videoId": "v1"}}]}),
        "videos": _FakeResponse({"items": [_video("v1"), _video("v2")]}),
    })
    client = YouTubeFeedClient(api_key="dev-key", timeout=3, session=http)

    # WHEN
    entries = client.query("GoogleDevelopers", SafeSearch.strict, 25)

    # THEN
    assert [e.video_id for e in entries] == ["v2", "v1"]
    channels, search, videos = http.requests
    assert channels[1]["forUsername"] == "GoogleDevelopers"
    assert search[1]["channelId"] == CHANNEL_ID
    assert search[1]["safeSearch"] == "strict"
    assert search[1]["maxResults"] == 25
    assert videos[1]["id"] == "v2,v1"
    assert all(r[1]["key"] == "dev-key" and r[2] == 3 for r in http.requests)


def test_should_use_channel_id_as_is_and_handles_via_for_handle():
    http = _FakeHttp({
        "channels": _FakeResponse({"items": [{"id": CHANNEL_ID}]}),
        "search": _FakeResponse({"items": []}),
    })
    client = YouTubeFeedClient(api_key="k", session=http)

    assert client.query(CHANNEL_ID, SafeSearch.none, 5) == []
    assert [r[0] for r in http.requests] == ["search"]

    client.query("@GoogleDevelopers", SafeSearch.none, 5)
    assert http.requests[1][1]["forHandle"] == "@GoogleDevelopers"


def test_should_return_empty_for_unknown_owner():
    http = _FakeHttp({"channels": _FakeResponse({"items": []})})
    client = YouTubeFeedClient(api_key="k", session=http)

    assert client.query("nobody-here", SafeSearch.strict, 25) == []


@pytest.mark.parametrize(
    "answer",
    [requests.ConnectionError("connection refused"), _FakeResponse({"error": {}}, status_code=403)],
)
def test_should_raise_remote_unavailable_on_transport_failure(answer):
    client = YouTubeFeedClient(api_key="k", session=_FakeHttp({"channels": answer}))

    with pytest.raises(RemoteUnavailable):
        client.query("GoogleDevelopers", SafeSearch.strict, 25)


@pytest.mark.parametrize(
    "search_body",
    [
        {"items": [{"id": "notadict"}]},
        {"items": "nope"},
        ["not", "an", "object"],
    ],
)
def test_should_raise_remote_unavailable_on_malformed_body(search_body):
    http = _FakeHttp({"search": _FakeResponse(search_body)})
    client = YouTubeFeedClient(api_key="k", session=http)

    with pytest.raises(RemoteUnavailable):
        client.query(CHANNEL_ID, SafeSearch.strict, 25)


def test_should_raise_remote_unavailable_on_malformed_video_resource():
    http = _FakeHttp({
        "search": _FakeResponse({"items": [{"id": {"videoId": "v1"}}]}),
        "videos": _FakeResponse({"items": [{"id": "v1", "snippet": "not-a-snippet"}]}),
    })
    client = YouTubeFeedClient(api_key="k", session=http)

    with pytest.raises(RemoteUnavailable):
        client.query(CHANNEL_ID, SafeSearch.strict, 25)


def test_should_give_no_entries_when_feed_body_is_malformed(caplog):
    # GIVEN a 200 answer whose items are not resources
    http = _FakeHttp({"search": _FakeResponse({"items": [{"id": "notadict"}]})})
    fetcher = RemoteFeedFetcher(YouTubeFeedClient(api_key="k", session=http), max_results=25)

    # WHEN
    entries = fetcher.fetch_for_owner(CHANNEL_ID)

    # THEN
    assert entries == []
    assert CHANNEL_ID in caplog.text
