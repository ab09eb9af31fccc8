import logging
from typing import List, Optional

from app.core.config import settings
from videofeed.domain.entities.remote_entry import RemoteEntry, SafeSearch
from videofeed.domain.errors import RemoteUnavailable
from videofeed.ports.outbound.feed_client_port import FeedClientPort

logger = logging.getLogger(__name__)


class RemoteFeedFetcher:
    """
    Fetches an owner's videos and drops restricted entries.

    Failures never propagate: an unreachable feed reads as an empty one so the
    host tree shows "no children" instead of failing the request.
    """

    def __init__(
        self,
        client: FeedClientPort,
        max_results: Optional[int] = None,
        safety: Optional[SafeSearch] = None,
    ):
        self.client = client
        self.max_results = settings.youtube_max_results if max_results is None else max_results
        self.safety = SafeSearch(settings.youtube_safe_search if safety is None else safety)

    def fetch_for_owner(
        self,
        owner: Optional[str],
        max_results: Optional[int] = None,
        safety: Optional[SafeSearch] = None,
    ) -> List[RemoteEntry]:
        owner = (owner or "").strip()
        if not owner:
            return []

        try:
            entries = self.client.query(
                owner,
                self.safety if safety is None else safety,
                self.max_results if max_results is None else max_results,
            )
        except RemoteUnavailable as e:
            logger.error("Feed query for owner %r failed: %s", owner, e)
            return []

        return [e for e in entries if not e.restricted]
