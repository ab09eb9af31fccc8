from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select

from hosttree.domain.models.host_item import HostItem, HostLanguage, TemplateField
from shared.abstracts.abstract_repository import AbstractRepository


class HostItemRepository(AbstractRepository):
    async def get(self, item_id: UUID) -> Optional[HostItem]:
        res = await self.db.execute(select(HostItem).where(HostItem.id == item_id))
        return res.scalars().first()

    async def get_by_parent_id(self, id: UUID) -> Sequence[HostItem]:
        res = await self.db.execute(
            select(HostItem).where(HostItem.parent_id == id).order_by(HostItem.name.asc())
        )
        return res.scalars().all()


class TemplateFieldRepository(AbstractRepository):
    async def get(self, field_id: UUID) -> Optional[TemplateField]:
        res = await self.db.execute(select(TemplateField).where(TemplateField.id == field_id))
        return res.scalars().first()

    async def get_by_parent_id(self, id: UUID) -> Sequence[TemplateField]:
        res = await self.db.execute(
            select(TemplateField)
            .where(TemplateField.template_id == id)
            .order_by(TemplateField.sort_order.asc(), TemplateField.name.asc())
        )
        return res.scalars().all()

    async def data_fields(self, template_id: UUID) -> List[TemplateField]:
        return [f for f in await self.get_by_parent_id(template_id) if not f.is_standard]

    async def list_languages(self) -> List[str]:
        res = await self.db.execute(select(HostLanguage.name).order_by(HostLanguage.name.asc()))
        return list(res.scalars().all())
