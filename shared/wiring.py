from typing import Dict

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.db import get_session
from app.core.config import settings

# Host tree port + adapters
from hosttree.adapters.outbound.host_cache_redis import RedisHostCacheAdapter
from hosttree.adapters.outbound.host_tree_sql import SqlHostTreeAdapter
from hosttree.domain.repositories.host_item_repository import HostItemRepository, TemplateFieldRepository
from hosttree.ports.outbound.host_cache_port import HostCachePort
from hosttree.ports.outbound.host_tree_port import HostTreePort
from hosttree.services.tree_service import TreeService

# Video feed provider
from videofeed.adapters.outbound.youtube_client import YouTubeFeedClient
from videofeed.domain.repositories.id_table_repository import IDTableRepository
from videofeed.services.feed_fetcher import RemoteFeedFetcher
from videofeed.services.provider_registry import ProviderRegistry
from videofeed.services.session_cache import SessionEntryCache
from videofeed.services.tree_provider import VirtualTreeProvider

# Resolved entries outlive requests; each provider namespace keeps its own.
session_caches: Dict[str, SessionEntryCache] = {}


def get_host_cache() -> HostCachePort:
    return RedisHostCacheAdapter()

def get_feed_fetcher() -> RemoteFeedFetcher:
    return RemoteFeedFetcher(YouTubeFeedClient())

def get_session_cache() -> SessionEntryCache:
    return session_caches.setdefault(settings.id_namespace, SessionEntryCache())

def get_host_tree(db: AsyncSession = Depends(get_session)) -> HostTreePort:
    return SqlHostTreeAdapter(HostItemRepository(db), TemplateFieldRepository(db))

def get_provider_registry(
    db: AsyncSession = Depends(get_session),
    host: HostTreePort = Depends(get_host_tree),
    cache: HostCachePort = Depends(get_host_cache),
    fetcher: RemoteFeedFetcher = Depends(get_feed_fetcher),
    entries: SessionEntryCache = Depends(get_session_cache),
) -> ProviderRegistry:
    """
    One provider per configured namespace. Without template IDs nothing is
    registered and the tree is served from host items only.
    """
    if settings.root_template_id is None or settings.resource_template_id is None:
        return ProviderRegistry([])
    provider = VirtualTreeProvider(
        namespace=settings.id_namespace,
        root_template_id=settings.root_template_id,
        resource_template_id=settings.resource_template_id,
        owner_field=settings.video_owner_field,
        id_table=IDTableRepository(db),
        fetcher=fetcher,
        host=host,
        host_cache=cache,
        session_cache=entries,
    )
    return ProviderRegistry([provider])

def get_tree_service(
    registry: ProviderRegistry = Depends(get_provider_registry),
    host: HostTreePort = Depends(get_host_tree),
    cache: HostCachePort = Depends(get_host_cache),
) -> TreeService:
    return TreeService(registry=registry, host=host, cache_port=cache)
