from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession


class AbstractRepository(ABC):
    """
    Minimal read-side repository contract shared by the host tree and the
    id table.

    Concrete implementations add their own query helpers on top.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @abstractmethod
    async def get(self, entity_id): ...

    @abstractmethod
    async def get_by_parent_id(self, id): ...
