import logging
import re
from typing import Dict, List, Optional
from uuid import UUID

from fastapi.concurrency import run_in_threadpool

from shared.entities.tree import ItemDefinitionOut, VersionUriOut
from hosttree.ports.outbound.host_cache_port import HostCachePort
from hosttree.ports.outbound.host_tree_port import HostTreePort
from videofeed.domain.entities.remote_entry import RemoteEntry
from videofeed.domain.repositories.id_table_repository import IDTableRepository
from videofeed.services.feed_fetcher import RemoteFeedFetcher
from videofeed.services.field_projector import project
from videofeed.services.session_cache import CachedEntry, SessionEntryCache

logger = logging.getLogger(__name__)

FIRST_VERSION = 1
DEFAULT_ITEM_NAME = "Unnamed item"
_INVALID_NAME_CHARS = re.compile(r"[\\/:?\"<>|\[\]*%$]")


def propose_item_name(title: str) -> str:
    """Turn a feed title into a valid host item name."""
    name = _INVALID_NAME_CHARS.sub("", title or "")
    name = re.sub(r"\s+", " ", name).strip(" .")
    return name[:100] or DEFAULT_ITEM_NAME


class VirtualTreeProvider:
    """
    Read-only provider that grafts an owner's video feed under Folder items.

    Folders are real host items based on the root template; their children
    (Leaves) are synthesized from the feed on every request. Leaves exist in
    storage only as id table rows in this provider's namespace.

    Every method returns None for IDs it does not own so the caller falls back
    to the host's normal tree.
    """

    def __init__(
        self,
        namespace: str,
        root_template_id: UUID,
        resource_template_id: UUID,
        owner_field: str,
        id_table: IDTableRepository,
        fetcher: RemoteFeedFetcher,
        host: HostTreePort,
        host_cache: HostCachePort,
        session_cache: SessionEntryCache,
    ):
        if not namespace:
            raise ValueError("provider namespace must not be empty")
        self.namespace = namespace
        self.root_template_id = root_template_id
        self.resource_template_id = resource_template_id
        self.owner_field = owner_field
        self.id_table = id_table
        self.fetcher = fetcher
        self.host = host
        self.host_cache = host_cache
        self.session_cache = session_cache

    # ---------- Identity ----------

    async def owns(self, host_id: UUID) -> bool:
        return len(await self.id_table.keys(self.namespace, host_id)) > 0

    async def is_folder(self, host_id: UUID) -> bool:
        item = await self.host.get_item(host_id)
        return item is not None and item.template_id == self.root_template_id

    async def get_item_definition(self, host_id: UUID) -> Optional[ItemDefinitionOut]:
        if not await self.owns(host_id):
            return None

        cached = await self._resolve(host_id)
        if cached is None:
            return None

        item_def = ItemDefinitionOut(
            id=host_id,
            name=cached.name,
            template_id=self.resource_template_id,
            version=None,
            cacheable=False,
        )
        # anything the host cached before this round trip is speculative
        await self._evict(self.host_cache.evict_descriptor, host_id)
        return item_def

    async def resolve_entry(self, host_id: UUID) -> Optional[RemoteEntry]:
        if not await self.owns(host_id):
            return None
        cached = await self._resolve(host_id)
        return cached.entry if cached else None

    # ---------- Children ----------

    async def get_child_ids(self, host_id: UUID) -> Optional[List[UUID]]:
        folder = await self.host.get_item(host_id)
        if folder is None or folder.template_id != self.root_template_id:
            return None

        entries = await self._fetch(folder[self.owner_field])
        ids: List[UUID] = []
        for entry in entries:
            child_id = await self.id_table.create(self.namespace, entry.token, host_id, entry.title)
            if child_id not in ids:
                ids.append(child_id)

        # child membership is only known after the fetch; never host-cacheable
        await self._evict(self.host_cache.evict_child_info, host_id)
        return ids

    async def get_parent_id(self, host_id: UUID) -> Optional[UUID]:
        row = await self.id_table.lookup(self.namespace, host_id)
        return row.parent_id if row else None

    # ---------- Fields & versions ----------

    async def get_item_fields(self, host_id: UUID) -> Optional[Dict[UUID, str]]:
        if not await self.owns(host_id):
            return None

        cached = await self._resolve(host_id)
        if cached is None:
            return {}

        fields = await self.host.data_fields(self.resource_template_id)
        return {f.id: project(f.name, cached.entry) for f in fields}

    async def get_item_versions(self, host_id: UUID) -> Optional[List[VersionUriOut]]:
        if not (await self.owns(host_id) or await self.is_folder(host_id)):
            return None
        # the feed has no language/version dimension; editors need one version per language
        return [VersionUriOut(language=lang, version=FIRST_VERSION) for lang in await self.host.languages()]

    def get_languages(self) -> None:
        # contributes no languages of its own
        return None

    # ---------- Publishing ----------

    def get_publish_queue(self) -> List[UUID]:
        # no notion of dirty items: everything resolved so far is always eligible
        return self.session_cache.ids()

    # ---------- Writes (read-only provider) ----------

    def create_item(self, item_id: UUID, name: str, template_id: UUID, parent_id: UUID) -> bool:
        return False

    def save_item(self, item_id: UUID, changes: dict) -> bool:
        return False

    def delete_item(self, item_id: UUID) -> bool:
        return False

    async def release_folder(self, folder_id: UUID) -> int:
        """Forget the mappings of a deleted Folder so a new Folder can rediscover the same videos."""
        released = await self.id_table.delete_by_parent(self.namespace, folder_id)
        self.session_cache.discard_parent(folder_id)
        if released:
            logger.info("Released %d mappings of deleted folder %s in %s", released, folder_id, self.namespace)
        return released

    # ---------- Internal helpers ----------

    async def _resolve(self, host_id: UUID) -> Optional[CachedEntry]:
        cached = self.session_cache.get(host_id)
        if cached is not None:
            return cached

        row = await self.id_table.lookup(self.namespace, host_id)
        if row is None:
            return None

        folder = await self.host.get_item(row.parent_id)
        if folder is None:
            logger.warning("Parent %s of %s no longer exists in the host tree", row.parent_id, host_id)
            return None

        for entry in await self._fetch(folder[self.owner_field]):
            if entry.token == row.key:
                cached = CachedEntry(
                    host_id=host_id,
                    parent_id=row.parent_id,
                    name=propose_item_name(entry.title),
                    entry=entry,
                )
                self.session_cache.put(cached)
                return cached

        logger.info("Entry %s for %s is no longer in the feed", row.key, host_id)
        return None

    async def _fetch(self, owner: str) -> List[RemoteEntry]:
        # the feed client blocks on HTTP; keep it off the event loop
        return await run_in_threadpool(self.fetcher.fetch_for_owner, owner)

    async def _evict(self, evict, item_id: UUID) -> None:
        try:
            await evict(item_id)
        except Exception:
            logger.exception("Can't clear host cache for %s", item_id)
