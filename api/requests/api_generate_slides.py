"""Batch slide generation: one request, one JSON response, no progress stream."""

from fastapi import APIRouter, Depends, HTTPException

from agents.generation.deck_orchestrator import SlidePipeline, run_with_retry
from agents.generation.exceptions import GenerationError
from agents.generation.format_converter import to_editor_deck
from api.auth import get_current_user_id
from api.dependencies import get_slide_pipeline
from models.pipeline import UserInput
from models.requests import GenerateSlidesRequest
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])


@router.post("/generate-slides")
async def generate_slides(
    request: GenerateSlidesRequest,
    user_id: str = Depends(get_current_user_id),
    pipeline: SlidePipeline = Depends(get_slide_pipeline),
):
    user_input = UserInput(
        prompt=request.prompt,
        num_slides=request.numSlides,
        tone=request.tone,
        style=request.style,
        use_word_for_word=request.useWordForWord,
    )
    try:
        slides = await run_with_retry(lambda: pipeline.run(user_input))
    except GenerationError as e:
        logger.error(f"[PIPELINE] Batch generation failed for user {user_id}: {e}")
        raise HTTPException(status_code=422, detail="Failed to generate slides. Please try again.")

    response = {"slides": [slide.to_json() for slide in slides]}
    if request.includeEditorFormat:
        response["editorSlides"] = [
            slide.model_dump(mode="json") for slide in to_editor_deck(slides)
        ]
    return response
