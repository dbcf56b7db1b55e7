"""
Design asset endpoints: stock photo search for the editor and on-demand
blob shapes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from agents.generation.exceptions import MissingConfigError, ProviderError
from api.dependencies import get_image_search
from models.requests import GenerateBlobRequest
from services.design.blob_generator import generate_random_blob
from services.pexels_service import PexelsService, to_stock_image
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["design-assets"])

# Blobs added from the editor default to the brand purple
EDITOR_BLOB_COLOR = "#667eea"


async def _fetch(service: PexelsService, path: str, params: dict):
    try:
        return await service.fetch_photos(path, params)
    except MissingConfigError:
        raise HTTPException(status_code=500, detail="PEXELS_API_KEY not configured")
    except ProviderError as e:
        logger.error(f"[PEXELS] {path} failed: {e.message}")
        if e.status_code:
            raise HTTPException(status_code=e.status_code, detail=f"Pexels API error: {e.status_code}")
        raise HTTPException(status_code=500, detail="Failed to search images")


@router.get("/pexels-search")
async def pexels_search(
    q: Optional[str] = Query(None),
    per_page: int = Query(12, ge=1, le=80),
    service: PexelsService = Depends(get_image_search),
):
    """Raw Pexels photo objects for the editor's image picker (landscape only)."""
    if not q:
        raise HTTPException(status_code=400, detail="Query parameter required")

    photos = await _fetch(service, "search", {"query": q, "per_page": per_page, "orientation": "landscape"})
    logger.info(f'[PEXELS] Search for "{q}": {len(photos)} results')
    return photos


@router.get("/pexels-curated")
async def pexels_curated(
    per_page: int = Query(12, ge=1, le=80),
    service: PexelsService = Depends(get_image_search),
):
    photos = await _fetch(service, "curated", {"per_page": per_page})
    return [to_stock_image(photo).model_dump(mode="json") for photo in photos]


@router.post("/generate-blob")
async def generate_blob(request: Optional[GenerateBlobRequest] = None):
    request = request or GenerateBlobRequest()
    blob = generate_random_blob(
        complexity=request.complexity,
        contrast=request.contrast,
        color=request.color or EDITOR_BLOB_COLOR,
        size=request.size,
    )
    return {"svg": blob.svg}
