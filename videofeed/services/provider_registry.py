from typing import List, Optional
from uuid import UUID

from videofeed.services.tree_provider import VirtualTreeProvider

class ProviderRegistry:
    """
    Provider instances sharing one host database.

    Namespaces must be disjoint: two providers in one namespace would claim
    each other's id table rows. Session caches must not be shared either, or
    one provider's publish queue would list another's items.
    """

    def __init__(self, providers: List[VirtualTreeProvider]):
        seen = set()
        caches = set()
        for p in providers:
            if p.namespace in seen:
                raise ValueError(f"duplicate provider namespace {p.namespace!r}")
            if id(p.session_cache) in caches:
                raise ValueError(f"provider {p.namespace!r} shares a session cache with another provider")
            seen.add(p.namespace)
            caches.add(id(p.session_cache))
        self._providers = providers

    def __iter__(self):
        return iter(self._providers)

    async def for_item(self, item_id: UUID) -> Optional[VirtualTreeProvider]:
        for p in self._providers:
            if await p.owns(item_id):
                return p
        return None

    async def folder_provider(self, item_id: UUID) -> Optional[VirtualTreeProvider]:
        for p in self._providers:
            if await p.is_folder(item_id):
                return p
        return None

    def publish_queue(self) -> List[UUID]:
        out: List[UUID] = []
        for p in self._providers:
            out.extend(i for i in p.get_publish_queue() if i not in out)
        return out
