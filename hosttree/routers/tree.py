from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Path
from pydantic import BaseModel

from shared.entities.tree import (
    FieldListOut,
    ItemDefinitionOut,
    ParentOut,
    ReleaseResultOut,
    VersionUriOut,
    WriteResultOut,
)
from shared.wiring import get_tree_service
from hosttree.services.tree_service import TreeService

router = APIRouter(prefix="/v1/tree", tags=["tree"])


class ItemCreate(BaseModel):
    id: UUID
    name: str
    template_id: UUID
    parent_id: UUID


@router.get(
    "/items/{item_id}",
    summary="Get an item definition",
    description="Synthesized video items are never cacheable (`cacheable: false`).",
    response_model=ItemDefinitionOut,
    responses={404: {"description": "Item not found."}},
)
async def get_item(
    item_id: UUID = Path(..., description="Host item ID"),
    svc: TreeService = Depends(get_tree_service),
):
    item_def = await svc.item_definition(item_id)
    if not item_def:
        raise HTTPException(status_code=404, detail="not found")
    return item_def


@router.get(
    "/items/{item_id}/children",
    summary="List child IDs",
    description="For a video folder the children are fetched from the owner's feed on every call.",
    response_model=List[UUID],
)
async def get_children(
    item_id: UUID = Path(..., description="Host item ID"),
    svc: TreeService = Depends(get_tree_service),
):
    return await svc.child_ids(item_id)


@router.get(
    "/items/{item_id}/fields",
    summary="Get field values (field ID -> value)",
    response_model=FieldListOut,
    responses={404: {"description": "Item not found."}},
)
async def get_fields(
    item_id: UUID = Path(..., description="Host item ID"),
    svc: TreeService = Depends(get_tree_service),
):
    fields = await svc.item_fields(item_id)
    if fields is None:
        raise HTTPException(status_code=404, detail="not found")
    return FieldListOut(fields=fields)


@router.get(
    "/items/{item_id}/versions",
    summary="List versions (one per language)",
    response_model=List[VersionUriOut],
    responses={404: {"description": "Item not found."}},
)
async def get_versions(
    item_id: UUID = Path(..., description="Host item ID"),
    svc: TreeService = Depends(get_tree_service),
):
    versions = await svc.item_versions(item_id)
    if versions is None:
        raise HTTPException(status_code=404, detail="not found")
    return versions


@router.get("/items/{item_id}/parent", summary="Get the parent ID", response_model=ParentOut)
async def get_parent(
    item_id: UUID = Path(..., description="Host item ID"),
    svc: TreeService = Depends(get_tree_service),
):
    return ParentOut(parent_id=await svc.parent_id(item_id))


@router.get(
    "/publish-queue",
    summary="Items eligible for publishing",
    description="Every video item resolved by this process, on every call.",
    response_model=List[UUID],
)
async def get_publish_queue(svc: TreeService = Depends(get_tree_service)):
    return svc.publish_queue()


# ---------- Writes: the video tree is read-only ----------

@router.post("/items", summary="Create an item (always refused)", response_model=WriteResultOut)
async def create_item(payload: ItemCreate, svc: TreeService = Depends(get_tree_service)):
    ok = await svc.create_item(payload.id, payload.name, payload.template_id, payload.parent_id)
    return WriteResultOut(ok=ok)


@router.put("/items/{item_id}", summary="Save an item (always refused)", response_model=WriteResultOut)
async def save_item(
    item_id: UUID = Path(..., description="Host item ID"),
    changes: Dict[str, Any] = Body(default={}),
    svc: TreeService = Depends(get_tree_service),
):
    return WriteResultOut(ok=await svc.save_item(item_id, changes))


@router.delete("/items/{item_id}", summary="Delete an item (always refused)", response_model=WriteResultOut)
async def delete_item(
    item_id: UUID = Path(..., description="Host item ID"),
    svc: TreeService = Depends(get_tree_service),
):
    return WriteResultOut(ok=await svc.delete_item(item_id))


@router.post(
    "/items/{item_id}/deleted",
    summary="Notify that a host folder was deleted",
    description="Clears the id mappings of every video discovered under the folder.",
    response_model=ReleaseResultOut,
)
async def folder_deleted(
    item_id: UUID = Path(..., description="Deleted folder ID"),
    svc: TreeService = Depends(get_tree_service),
):
    return ReleaseResultOut(released=await svc.folder_deleted(item_id))
