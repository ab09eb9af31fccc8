# conftest.py
from typing import Any, AsyncGenerator, Dict, List, Optional
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.main import app
from app.core.config import settings
from app.core.database.db import get_session
from app.core.database.base import Base
from hosttree.ports.outbound.host_cache_port import HostCachePort, descriptor_key, child_info_key
from shared.entities.tree import HostItemOut, TemplateFieldOut
from videofeed.domain.entities.remote_entry import RemoteEntry, SafeSearch
from videofeed.domain.errors import RemoteUnavailable
from videofeed.domain.repositories.id_table_repository import IDTableRepository
from videofeed.services.feed_fetcher import RemoteFeedFetcher
from videofeed.services.session_cache import SessionEntryCache
from videofeed.services.tree_provider import VirtualTreeProvider

ROOT_TEMPLATE_ID = UUID("6f1c8d0e-2b5a-4c3e-9d7f-0a1b2c3d4e5f")
RESOURCE_TEMPLATE_ID = UUID("0b9a8c7d-6e5f-4a3b-8c2d-1e0f9a8b7c6d")
NAMESPACE = "YouTubeDataProvider"


# ---- Fakes ------------------------------------------------------------------

class _FakeCache(HostCachePort):
    def __init__(self) -> None:
        self.store: Dict[str, Any] = {}
        self.evicted_descriptors: List[UUID] = []
        self.evicted_child_info: List[UUID] = []
        self.fail_evictions = False

    async def get(self, key: str) -> Optional[Any]:
        return self.store.get(key)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self.store[key] = value

    async def evict_descriptor(self, item_id: UUID) -> None:
        if self.fail_evictions:
            raise RuntimeError("item cache unavailable")
        self.evicted_descriptors.append(item_id)
        self.store.pop(descriptor_key(item_id), None)

    async def evict_child_info(self, item_id: UUID) -> None:
        if self.fail_evictions:
            raise RuntimeError("data cache unavailable")
        self.evicted_child_info.append(item_id)
        self.store.pop(child_info_key(item_id), None)


class FakeFeedClient:
    """Feed keyed by author; records every query it receives."""

    def __init__(self) -> None:
        self.feeds: Dict[str, List[RemoteEntry]] = {}
        self.calls: List[tuple] = []
        self.fail = False

    def query(self, author: str, safe_search: SafeSearch, max_results: int) -> List[RemoteEntry]:
        self.calls.append((author, safe_search, max_results))
        if self.fail:
            raise RemoteUnavailable("connection reset by peer")
        return list(self.feeds.get(author, []))[:max_results]


class FakeHostTree:
    def __init__(self) -> None:
        self.items: Dict[UUID, HostItemOut] = {}
        self.templates: Dict[UUID, List[TemplateFieldOut]] = {}
        self.langs: List[str] = ["en"]

    def add_item(self, name: str, template_id: UUID, parent_id: Optional[UUID] = None, **fields) -> HostItemOut:
        item = HostItemOut(id=uuid4(), name=name, template_id=template_id, parent_id=parent_id, fields=fields)
        self.items[item.id] = item
        return item

    async def get_item(self, item_id: UUID) -> Optional[HostItemOut]:
        return self.items.get(item_id)

    async def get_children(self, item_id: UUID) -> List[UUID]:
        return [i.id for i in self.items.values() if i.parent_id == item_id]

    async def data_fields(self, template_id: UUID) -> List[TemplateFieldOut]:
        return list(self.templates.get(template_id, []))

    async def languages(self) -> List[str]:
        return list(self.langs)


# ---- Async engine + session --------------------------------------------------

@pytest_asyncio.fixture(scope="function")
async def async_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest_asyncio.fixture(scope="function")
async def SessionMaker(async_engine):
    return async_sessionmaker(bind=async_engine, expire_on_commit=False, class_=AsyncSession)

@pytest_asyncio.fixture(scope="function")
async def override_get_session(SessionMaker):
    async def _dep():
        async with SessionMaker() as s:
            yield s
    app.dependency_overrides[get_session] = _dep
    yield
    app.dependency_overrides.pop(get_session, None)

@pytest_asyncio.fixture
async def db_session(SessionMaker):
    async with SessionMaker() as s:
        yield s


# ---- Collaborators -----------------------------------------------------------

@pytest.fixture
def fake_cache() -> _FakeCache:
    return _FakeCache()

@pytest.fixture
def feed_client() -> FakeFeedClient:
    return FakeFeedClient()

@pytest.fixture
def fetcher(feed_client) -> RemoteFeedFetcher:
    return RemoteFeedFetcher(feed_client, max_results=25, safety=SafeSearch.strict)

@pytest.fixture
def session_cache() -> SessionEntryCache:
    return SessionEntryCache()

@pytest.fixture
def host() -> FakeHostTree:
    h = FakeHostTree()
    h.templates[RESOURCE_TEMPLATE_ID] = [
        TemplateFieldOut(id=uuid4(), name=n)
        for n in ("Url", "Id", "Width", "Height", "Title", "Keywords", "Description", "Extension", "Mime Type", "Size")
    ]
    return h

@pytest.fixture
def provider(db_session, fetcher, host, fake_cache, session_cache) -> VirtualTreeProvider:
    return VirtualTreeProvider(
        namespace=NAMESPACE,
        root_template_id=ROOT_TEMPLATE_ID,
        resource_template_id=RESOURCE_TEMPLATE_ID,
        owner_field="Owner",
        id_table=IDTableRepository(db_session),
        fetcher=fetcher,
        host=host,
        host_cache=fake_cache,
        session_cache=session_cache,
    )


# ---- HTTP client -------------------------------------------------------------

@pytest_asyncio.fixture(scope="function")
async def override_get_services(override_get_session, monkeypatch, fake_cache, fetcher, session_cache):
    """
    Route handlers use the real SQL host tree and id table on the test engine,
    with the fake cache, the fake feed client and a fresh session cache.
    """
    from shared import wiring

    monkeypatch.setattr(settings, "root_template_id", ROOT_TEMPLATE_ID)
    monkeypatch.setattr(settings, "resource_template_id", RESOURCE_TEMPLATE_ID)
    monkeypatch.setattr(settings, "id_namespace", NAMESPACE)
    monkeypatch.setattr(settings, "video_owner_field", "Owner")

    app.dependency_overrides[wiring.get_host_cache] = lambda: fake_cache
    app.dependency_overrides[wiring.get_feed_fetcher] = lambda: fetcher
    app.dependency_overrides[wiring.get_session_cache] = lambda: session_cache
    try:
        yield
    finally:
        app.dependency_overrides.pop(wiring.get_host_cache, None)
        app.dependency_overrides.pop(wiring.get_feed_fetcher, None)
        app.dependency_overrides.pop(wiring.get_session_cache, None)

@pytest_asyncio.fixture(scope="function")
async def client(override_get_services) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as c:
        yield c
