from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Path

from shared.entities.tree import PreviewOut
from shared.wiring import get_tree_service
from hosttree.services.tree_service import TreeService

router = APIRouter(prefix="/v1/preview", tags=["preview"])

@router.get(
    "/{item_id}",
    summary="Player URL and mime type of a video item",
    response_model=PreviewOut,
    responses={404: {"description": "Not a resolvable video item."}},
)
async def get_preview(
    item_id: UUID = Path(..., description="Video item ID"),
    svc: TreeService = Depends(get_tree_service),
):
    preview = await svc.preview(item_id)
    if not preview:
        raise HTTPException(status_code=404, detail="not found")
    return preview
