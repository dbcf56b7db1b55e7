"""Owner-scoped presentation listing, update and deletion."""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.auth import get_current_user_id
from api.dependencies import get_store
from models.requests import UpdatePresentationRequest
from services.presentation_store import PersistenceError, PresentationStore
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/presentations", tags=["presentations"])


@router.get("")
async def list_presentations(
    user_id: str = Depends(get_current_user_id),
    store: PresentationStore = Depends(get_store),
):
    try:
        presentations = await store.list(user_id)
    except PersistenceError as e:
        logger.error(f"Failed to fetch presentations: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch presentations")
    return {"presentations": presentations}


@router.patch("")
async def update_presentation(
    request: UpdatePresentationRequest,
    user_id: str = Depends(get_current_user_id),
    store: PresentationStore = Depends(get_store),
):
    if request.title is None and request.slides_json is None:
        raise HTTPException(status_code=400, detail="Nothing to update")
    try:
        presentation = await store.update(request.id, user_id, request.title, request.slides_json)
    except PersistenceError as e:
        logger.error(f"Failed to update presentation {request.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update presentation")
    if presentation is None:
        raise HTTPException(status_code=404, detail="Presentation not found")
    return {"presentation": presentation}


@router.delete("")
async def delete_presentation(
    id: str = Query(..., min_length=1),
    user_id: str = Depends(get_current_user_id),
    store: PresentationStore = Depends(get_store),
):
    try:
        deleted = await store.delete(id, user_id)
    except PersistenceError as e:
        logger.error(f"Failed to delete presentation {id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete presentation")
    if not deleted:
        raise HTTPException(status_code=404, detail="Presentation not found")
    return {"success": True}
