from typing import Protocol, List
from videofeed.domain.entities.remote_entry import RemoteEntry, SafeSearch

class FeedClientPort(Protocol):
    """Author-scoped, read-only video feed query. Raises RemoteUnavailable on transport failure."""

    def query(self, author: str, safe_search: SafeSearch, max_results: int) -> List[RemoteEntry]: ...
