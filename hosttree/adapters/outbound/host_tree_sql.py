from typing import List, Optional
from uuid import UUID

from hosttree.domain.repositories.host_item_repository import HostItemRepository, TemplateFieldRepository
from hosttree.ports.outbound.host_tree_port import HostTreePort
from shared.entities.tree import HostItemOut, TemplateFieldOut


class SqlHostTreeAdapter(HostTreePort):
    def __init__(self, items: HostItemRepository, templates: TemplateFieldRepository) -> None:
        self._items = items
        self._templates = templates

    async def get_item(self, item_id: UUID) -> Optional[HostItemOut]:
        item = await self._items.get(item_id)
        return HostItemOut.model_validate(item) if item else None

    async def get_children(self, item_id: UUID) -> List[UUID]:
        return [c.id for c in await self._items.get_by_parent_id(item_id)]

    async def data_fields(self, template_id: UUID) -> List[TemplateFieldOut]:
        return [TemplateFieldOut.model_validate(f) for f in await self._templates.data_fields(template_id)]

    async def languages(self) -> List[str]:
        return await self._templates.list_languages()
