import logging
import re
import requests
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from app.core.config import settings
from videofeed.domain.entities.remote_entry import MediaContent, RemoteEntry, SafeSearch
from videofeed.domain.errors import RemoteUnavailable
from videofeed.ports.outbound.feed_client_port import FeedClientPort

logger = logging.getLogger(__name__)

API_ROOT = "https://www.googleapis.com/youtube/v3"
TOKEN_PREFIX = "tag:youtube.com,2008:video:"
EMBED_MIME_TYPE = "text/html"
PLAYER_MAX_WIDTH = 640

_CHANNEL_ID_RE = re.compile(r"^UC[A-Za-z0-9_-]{22}$")


def _embed_size(player: Dict[str, Any]) -> tuple[Optional[str], Optional[str]]:
    width = player.get("embedWidth")
    height = player.get("embedHeight")
    return (str(width) if width is not None else None, str(height) if height is not None else None)


def to_remote_entry(item: Dict[str, Any]) -> RemoteEntry:
    """Map one `videos.list` resource onto a RemoteEntry."""
    vid = item.get("id") or ""
    snippet = item.get("snippet") or {}
    status = item.get("status") or {}
    player = item.get("player")

    media = None
    # Non-embeddable videos have nothing playable to project.
    if player and status.get("embeddable", True):
        width, height = _embed_size(player)
        media = MediaContent(
            url=f"https://www.youtube.com/embed/{vid}",
            mime_type=EMBED_MIME_TYPE,
            width=width,
            height=height,
        )

    tags = snippet.get("tags") or []
    return RemoteEntry(
        token=f"{TOKEN_PREFIX}{vid}",
        title=snippet.get("title") or "",
        video_id=vid or None,
        keywords=", ".join(tags) if tags else None,
        description=snippet.get("description"),
        media=media,
    )


class YouTubeFeedClient(FeedClientPort):
    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key or settings.youtube_developer_key
        self.timeout = settings.youtube_timeout_seconds if timeout is None else timeout
        self.http = session or requests.Session()

    def query(self, author: str, safe_search: SafeSearch, max_results: int) -> List[RemoteEntry]:
        try:
            return self._query(author, safe_search, max_results)
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise RemoteUnavailable(f"YouTube returned an unexpected response for {author!r}: {e}") from e

    def _query(self, author: str, safe_search: SafeSearch, max_results: int) -> List[RemoteEntry]:
        channel_id = self._resolve_channel(author)
        if not channel_id:
            logger.info("No YouTube channel found for owner %r", author)
            return []

        search = self._get(
            "search",
            part="id",
            channelId=channel_id,
            type="video",
            order="date",
            safeSearch=SafeSearch(safe_search).value,
            maxResults=max_results,
        )
        ids = [i["id"]["videoId"] for i in search.get("items", []) if (i.get("id") or {}).get("videoId")]
        if not ids:
            return []

        videos = self._get(
            "videos",
            part="snippet,status,player",
            id=",".join(ids),
            maxWidth=PLAYER_MAX_WIDTH,
        )
        by_id = {v.get("id"): v for v in videos.get("items", [])}
        # keep search order; videos.list does not promise it
        return [to_remote_entry(by_id[vid]) for vid in ids if vid in by_id]

    def _resolve_channel(self, author: str) -> Optional[str]:
        if _CHANNEL_ID_RE.match(author):
            return author
        if author.startswith("@"):
            data = self._get("channels", part="id", forHandle=author)
        else:
            data = self._get("channels", part="id", forUsername=author)
        items = data.get("items") or []
        return items[0].get("id") if items else None

    def _get(self, resource: str, **params) -> Dict[str, Any]:
        params["key"] = self.api_key
        try:
            r = self.http.get(f"{API_ROOT}/{resource}", params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteUnavailable(f"YouTube {resource} request failed: {e}") from e
        if r.status_code != 200:
            raise RemoteUnavailable(f"YouTube {resource} returned HTTP {r.status_code}")
        try:
            data = r.json()
        except ValueError as e:
            raise RemoteUnavailable(f"YouTube {resource} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise RemoteUnavailable(f"YouTube {resource} returned {type(data).__name__}, expected an object")
        return data
