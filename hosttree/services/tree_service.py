import logging
from typing import Dict, List, Optional
from uuid import UUID

from app.core.config import settings
from shared.entities.tree import ItemDefinitionOut, PreviewOut, VersionUriOut
from hosttree.ports.outbound.host_cache_port import HostCachePort, descriptor_key, child_info_key
from hosttree.ports.outbound.host_tree_port import HostTreePort
from videofeed.services.field_projector import project
from videofeed.services.provider_registry import ProviderRegistry

logger = logging.getLogger(__name__)


class TreeService:
    """
    Host-facing tree: providers first, then the host's own items.

    Host items are read-through cached (descriptors and child lists).
    Provider answers never are; providers evict stale keys themselves.
    """

    def __init__(self, registry: ProviderRegistry, host: HostTreePort, cache_port: HostCachePort):
        self.registry = registry
        self.host = host
        self.cache = cache_port

    # ---------- Queries ----------

    async def item_definition(self, item_id: UUID) -> Optional[ItemDefinitionOut]:
        provider = await self.registry.for_item(item_id)
        if provider:
            return await provider.get_item_definition(item_id)

        key = descriptor_key(item_id)
        cached = await self.cache.get(key)
        if cached:
            return ItemDefinitionOut.model_validate(cached)

        item = await self.host.get_item(item_id)
        if not item:
            return None
        dto = ItemDefinitionOut(id=item.id, name=item.name, template_id=item.template_id)
        await self.cache.set(key, dto.model_dump(mode="json"), ttl=settings.cache_ttl_seconds)
        return dto

    async def child_ids(self, item_id: UUID) -> List[UUID]:
        for provider in self.registry:
            ids = await provider.get_child_ids(item_id)
            if ids is not None:
                return ids

        key = child_info_key(item_id)
        cached = await self.cache.get(key)
        if cached is not None:
            return [UUID(str(i)) for i in cached]

        ids = await self.host.get_children(item_id)
        await self.cache.set(key, [str(i) for i in ids], ttl=settings.cache_ttl_seconds)
        return ids

    async def item_fields(self, item_id: UUID) -> Optional[Dict[UUID, str]]:
        provider = await self.registry.for_item(item_id)
        if provider:
            return await provider.get_item_fields(item_id)

        item = await self.host.get_item(item_id)
        if not item:
            return None
        return {f.id: item[f.name] for f in await self.host.data_fields(item.template_id)}

    async def item_versions(self, item_id: UUID) -> Optional[List[VersionUriOut]]:
        for provider in self.registry:
            versions = await provider.get_item_versions(item_id)
            if versions is not None:
                return versions

        if not await self.host.get_item(item_id):
            return None
        # host items are stored unversioned
        return [VersionUriOut(language=lang) for lang in await self.host.languages()]

    async def parent_id(self, item_id: UUID) -> Optional[UUID]:
        provider = await self.registry.for_item(item_id)
        if provider:
            return await provider.get_parent_id(item_id)
        item = await self.host.get_item(item_id)
        return item.parent_id if item else None

    def publish_queue(self) -> List[UUID]:
        return self.registry.publish_queue()

    async def preview(self, item_id: UUID) -> Optional[PreviewOut]:
        provider = await self.registry.for_item(item_id)
        if not provider:
            return None
        entry = await provider.resolve_entry(item_id)
        if entry is None:
            return None
        return PreviewOut(url=project("Url", entry), mime_type=project("Mime Type", entry))

    # ---------- Writes ----------

    async def create_item(self, item_id: UUID, name: str, template_id: UUID, parent_id: UUID) -> bool:
        provider = await self.registry.for_item(parent_id) or await self.registry.folder_provider(parent_id)
        if provider:
            return provider.create_item(item_id, name, template_id, parent_id)
        return False

    async def save_item(self, item_id: UUID, changes: dict) -> bool:
        provider = await self.registry.for_item(item_id)
        if provider:
            return provider.save_item(item_id, changes)
        return False

    async def delete_item(self, item_id: UUID) -> bool:
        provider = await self.registry.for_item(item_id)
        if provider:
            return provider.delete_item(item_id)
        return False

    async def folder_deleted(self, folder_id: UUID) -> int:
        """The host removed `folder_id`; drop every provider mapping scoped to it."""
        released = 0
        for provider in self.registry:
            released += await provider.release_folder(folder_id)
        await self.cache.evict_child_info(folder_id)
        await self.cache.evict_descriptor(folder_id)
        return released
