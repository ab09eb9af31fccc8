from typing import Protocol, Optional, List
from uuid import UUID

from shared.entities.tree import HostItemOut, TemplateFieldOut

class HostTreePort(Protocol):
    """The host's own item tree, as seen by a provider."""

    async def get_item(self, item_id: UUID) -> Optional[HostItemOut]: ...

    async def get_children(self, item_id: UUID) -> List[UUID]: ...

    # non-standard fields only, in template order
    async def data_fields(self, template_id: UUID) -> List[TemplateFieldOut]: ...

    async def languages(self) -> List[str]: ...
