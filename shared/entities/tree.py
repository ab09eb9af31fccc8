from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class HostItemOut(BaseModel):
    id: UUID
    name: str
    template_id: UUID
    parent_id: Optional[UUID] = None
    fields: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        from_attributes = True

    def __getitem__(self, field_name: str) -> str:
        """Host-style attribute read: missing or null fields read as ""."""
        val = self.fields.get(field_name)
        return "" if val is None else str(val)


class TemplateFieldOut(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class ItemDefinitionOut(BaseModel):
    id: UUID
    name: str
    template_id: UUID
    version: Optional[int] = None       # null version marker
    cacheable: bool = True


class FieldListOut(BaseModel):
    fields: Dict[UUID, str]


class VersionUriOut(BaseModel):
    language: str
    version: int = 1


class ParentOut(BaseModel):
    parent_id: Optional[UUID] = None


class WriteResultOut(BaseModel):
    ok: bool


class ReleaseResultOut(BaseModel):
    released: int


class PreviewOut(BaseModel):
    url: str
    mime_type: str
