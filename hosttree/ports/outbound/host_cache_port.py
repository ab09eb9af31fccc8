from typing import Any, Optional, Protocol
from uuid import UUID


def descriptor_key(item_id: UUID) -> str: return f"tree:item:{item_id}"
def child_info_key(item_id: UUID) -> str: return f"tree:children:{item_id}"


class HostCachePort(Protocol):
    async def get(self, key: str) -> Optional[Any]: ...

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None: ...

    # host item cache
    async def evict_descriptor(self, item_id: UUID) -> None: ...

    # host data cache
    async def evict_child_info(self, item_id: UUID) -> None: ...
