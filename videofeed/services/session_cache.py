from dataclasses import dataclass
from typing import Dict, List, Optional
from uuid import UUID

from videofeed.domain.entities.remote_entry import RemoteEntry


@dataclass(frozen=True)
class CachedEntry:
    host_id: UUID
    parent_id: UUID
    name: str
    entry: RemoteEntry


class SessionEntryCache:
    """
    Unbounded host ID -> resolved entry map, kept for the lifetime of the owner.

    Purely an accelerator: a miss means "fetch again", never an error. Each
    provider gets its own (see shared.wiring) so its publish queue only holds
    the items it minted.
    """

    def __init__(self) -> None:
        self._items: Dict[UUID, CachedEntry] = {}

    def get(self, host_id: UUID) -> Optional[CachedEntry]:
        return self._items.get(host_id)

    def put(self, item: CachedEntry) -> None:
        self._items[item.host_id] = item

    def ids(self) -> List[UUID]:
        return list(self._items)

    def discard_parent(self, parent_id: UUID) -> int:
        stale = [k for k, v in self._items.items() if v.parent_id == parent_id]
        for k in stale:
            del self._items[k]
        return len(stale)

    def __contains__(self, host_id: UUID) -> bool:
        return host_id in self._items

    def __len__(self) -> int:
        return len(self._items)
